"""Dashboard callbacks: view toggle and the bulk data actions."""
import logging

from dash import Input, Output, State, callback_context, no_update

from craftledger_dashboard import data_state as ds
from craftledger_dashboard.components.cards import toast
from craftledger_dashboard.pages.dashboard import build_body

logger = logging.getLogger(__name__)

# provider id -> (store method, toast message)
BULK_ACTIONS = {
    "dash-start-fresh": ("start_fresh", "Orders, ads and materials cleared. Products kept."),
    "dash-reset-demo": ("reset_to_demo", "Demo shop loaded."),
    "dash-clear-all": ("clear_all", "All records deleted."),
}


def run_bulk_action(store, provider_id):
    method, message = BULK_ACTIONS[provider_id]
    getattr(store, method)()
    logger.info("Dashboard bulk action: %s", method)
    return message


def register_callbacks(app):
    # ── Performance / Cashflow toggle ─────────────────────────────────────
    @app.callback(
        Output("dash-body", "children"),
        Input("dash-view-mode", "value"),
        prevent_initial_call=True,
    )
    def switch_view(mode):
        return build_body(ds.get_store(), mode or "performance")

    # ── Start fresh / demo / clear ────────────────────────────────────────
    @app.callback(
        Output("dash-body", "children", allow_duplicate=True),
        Output("dash-toast", "children"),
        Input("dash-start-fresh", "submit_n_clicks"),
        Input("dash-reset-demo", "submit_n_clicks"),
        Input("dash-clear-all", "submit_n_clicks"),
        State("dash-view-mode", "value"),
        prevent_initial_call=True,
    )
    def bulk_action(_fresh, _demo, _clear, mode):
        trig = callback_context.triggered_id
        if trig not in BULK_ACTIONS or not callback_context.triggered[0]["value"]:
            return no_update, no_update
        store = ds.get_store()
        message = run_bulk_action(store, trig)
        return build_body(store, mode or "performance"), toast(message, "Data Updated", icon="warning")
