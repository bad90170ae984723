"""Ad Spend page callbacks: record and delete spend entries."""
from dash import Input, Output, State, callback_context, no_update, ALL
import dash_bootstrap_components as dbc

from craftledger_dashboard import data_state as ds
from craftledger_dashboard.components.cards import toast
from craftledger_dashboard.pages.ads import build_body


class FormError(ValueError):
    pass


def record_spend_form(store, platform, amount, purpose, date):
    val = ds.parse_amount(amount)
    if val is None or val <= 0:
        raise FormError("Enter an amount greater than 0.")
    try:
        return store.add_ad_spend(platform, val, purpose, date or None)
    except ValueError as e:
        raise FormError(str(e)) from e


def register_callbacks(app):
    @app.callback(
        Output("ad-form-error", "children"),
        Output("ads-body", "children"),
        Output("ads-toast", "children"),
        Output("ad-amount", "value"),
        Input("ad-save-btn", "n_clicks"),
        State("ad-platform", "value"),
        State("ad-amount", "value"),
        State("ad-purpose", "value"),
        State("ad-date", "value"),
        prevent_initial_call=True,
    )
    def save_spend(n_clicks, platform, amount, purpose, date):
        if not n_clicks:
            return (no_update,) * 4
        store = ds.get_store()
        try:
            ad = record_spend_form(store, platform, amount, purpose, date)
        except FormError as e:
            return dbc.Alert(str(e), color="danger", className="mt-2"), no_update, no_update, no_update
        return (None, build_body(store),
                toast(f"{ds.money(ad.amount)} on {ad.platform} ({ad.purpose.value})", "Spend Recorded"),
                None)

    @app.callback(
        Output("ads-body", "children", allow_duplicate=True),
        Output("ads-toast", "children", allow_duplicate=True),
        Input({"type": "ad-delete", "id": ALL}, "submit_n_clicks"),
        prevent_initial_call=True,
    )
    def delete_spend(_clicks):
        trig = callback_context.triggered_id
        if trig is None or not callback_context.triggered[0]["value"]:
            return no_update, no_update
        store = ds.get_store()
        try:
            ad = store.delete_ad_spend(trig["id"])
        except ds.RecordNotFound:
            return build_body(store), toast(f"Entry {trig['id']} no longer exists.", "Not Found", icon="danger")
        return build_body(store), toast(f"Deleted {ad.platform} spend", "Spend Deleted", icon="warning")
