"""Materials page callbacks: purchase form, edit modal, delete, usage log."""
import logging
from dataclasses import replace

from dash import Input, Output, State, callback_context, no_update, ALL
import dash_bootstrap_components as dbc

from craftledger_dashboard import data_state as ds
from craftledger_dashboard.components.cards import toast
from craftledger_dashboard.pages.materials import (
    build_material_table, build_kpis, usage_options, unit_cost_preview,
)

logger = logging.getLogger(__name__)


class FormError(ValueError):
    pass


def _required_amount(raw, label):
    val = ds.parse_amount(raw)
    if val is None:
        raise FormError(f"{label} is required.")
    if val < 0:
        raise FormError(f"{label} cannot be negative.")
    return val


def add_material_form(store, name, cost, yield_units):
    name = (name or "").strip()
    if not name:
        raise FormError("Material name is required.")
    return store.add_material(name, _required_amount(cost, "Total cost"),
                              _required_amount(yield_units, "Yield"))


def edit_material_form(store, material_id, name, cost, yield_units, remaining):
    mat = store.get_material(material_id)
    if mat is None:
        raise ds.RecordNotFound(material_id)
    name = (name or "").strip()
    if not name:
        raise FormError("Material name is required.")
    return store.update_material(replace(
        mat,
        name=name,
        cost=_required_amount(cost, "Total cost"),
        yield_units=_required_amount(yield_units, "Yield"),
        remaining_units=_required_amount(remaining, "Remaining"),
    ))


def _refresh(store):
    return build_material_table(store), build_kpis(store), usage_options(store)


def _not_found(material_id):
    return toast(f"Material {material_id} no longer exists.", "Not Found", icon="danger")


def register_callbacks(app):
    @app.callback(
        Output("material-form-collapse", "is_open"),
        Input("material-add-btn", "n_clicks"),
        State("material-form-collapse", "is_open"),
        prevent_initial_call=True,
    )
    def toggle_form(n_clicks, is_open):
        if not n_clicks:
            return no_update
        return not is_open

    @app.callback(
        Output("material-cost-preview", "children"),
        Input("material-cost", "value"),
        Input("material-yield", "value"),
    )
    def preview(cost, yield_units):
        return unit_cost_preview(cost, yield_units)

    # ── New purchase ──────────────────────────────────────────────────────
    @app.callback(
        Output("material-form-error", "children"),
        Output("materials-table", "children"),
        Output("materials-kpis", "children"),
        Output("material-use-item", "options"),
        Output("materials-toast", "children"),
        Output("material-name", "value"),
        Output("material-cost", "value"),
        Output("material-yield", "value"),
        Input("material-save-btn", "n_clicks"),
        State("material-name", "value"),
        State("material-cost", "value"),
        State("material-yield", "value"),
        prevent_initial_call=True,
    )
    def save_material(n_clicks, name, cost, yield_units):
        if not n_clicks:
            return (no_update,) * 8
        store = ds.get_store()
        try:
            mat = add_material_form(store, name, cost, yield_units)
        except FormError as e:
            return (dbc.Alert(str(e), color="danger", className="mt-2 mb-0"),) + (no_update,) * 7
        return (None, *_refresh(store), toast(f"Recorded {mat.name}", "Material Added"), "", None, None)

    # ── Edit modal ────────────────────────────────────────────────────────
    @app.callback(
        Output("material-modal", "is_open"),
        Output("material-editing-id", "data"),
        Output("material-edit-name", "value"),
        Output("material-edit-cost", "value"),
        Output("material-edit-yield", "value"),
        Output("material-edit-remaining", "value"),
        Output("material-edit-error", "children"),
        Input({"type": "material-edit-btn", "id": ALL}, "n_clicks"),
        prevent_initial_call=True,
    )
    def open_edit(_clicks):
        trig = callback_context.triggered_id
        if trig is None or not callback_context.triggered[0]["value"]:
            return (no_update,) * 7
        mat = ds.get_store().get_material(trig["id"])
        if mat is None:
            return (no_update,) * 7
        return True, mat.id, mat.name, mat.cost, mat.yield_units, mat.remaining_units, None

    @app.callback(
        Output("material-modal", "is_open", allow_duplicate=True),
        Input("material-edit-cancel-btn", "n_clicks"),
        prevent_initial_call=True,
    )
    def close_edit(n_clicks):
        if not n_clicks:
            return no_update
        return False

    @app.callback(
        Output("material-modal", "is_open", allow_duplicate=True),
        Output("material-edit-error", "children", allow_duplicate=True),
        Output("materials-table", "children", allow_duplicate=True),
        Output("materials-kpis", "children", allow_duplicate=True),
        Output("material-use-item", "options", allow_duplicate=True),
        Output("materials-toast", "children", allow_duplicate=True),
        Input("material-edit-save-btn", "n_clicks"),
        State("material-editing-id", "data"),
        State("material-edit-name", "value"),
        State("material-edit-cost", "value"),
        State("material-edit-yield", "value"),
        State("material-edit-remaining", "value"),
        prevent_initial_call=True,
    )
    def save_edit(n_clicks, material_id, name, cost, yield_units, remaining):
        if not n_clicks or not material_id:
            return (no_update,) * 6
        store = ds.get_store()
        try:
            mat = edit_material_form(store, material_id, name, cost, yield_units, remaining)
        except FormError as e:
            error = dbc.Alert(str(e), color="danger", className="mt-2 mb-0")
            return (no_update, error) + (no_update,) * 4
        except ds.RecordNotFound:
            return (False, None, *_refresh(store), _not_found(material_id))
        return (False, None, *_refresh(store), toast(f"{mat.name} updated", "Material Saved"))

    # ── Delete ────────────────────────────────────────────────────────────
    @app.callback(
        Output("materials-table", "children", allow_duplicate=True),
        Output("materials-kpis", "children", allow_duplicate=True),
        Output("material-use-item", "options", allow_duplicate=True),
        Output("materials-toast", "children", allow_duplicate=True),
        Input({"type": "material-delete", "id": ALL}, "submit_n_clicks"),
        prevent_initial_call=True,
    )
    def delete_material(_clicks):
        trig = callback_context.triggered_id
        if trig is None or not callback_context.triggered[0]["value"]:
            return (no_update,) * 4
        store = ds.get_store()
        try:
            mat = store.delete_material(trig["id"])
        except ds.RecordNotFound:
            return (*_refresh(store), _not_found(trig["id"]))
        return (*_refresh(store), toast(f"Deleted {mat.name}", "Material Deleted", icon="warning"))

    # ── Usage log ─────────────────────────────────────────────────────────
    @app.callback(
        Output("materials-table", "children", allow_duplicate=True),
        Output("materials-kpis", "children", allow_duplicate=True),
        Output("material-use-item", "options", allow_duplicate=True),
        Output("materials-toast", "children", allow_duplicate=True),
        Input("material-use-btn", "n_clicks"),
        State("material-use-item", "value"),
        State("material-use-qty", "value"),
        prevent_initial_call=True,
    )
    def log_usage(n_clicks, material_id, qty):
        if not n_clicks or not material_id:
            return (no_update,) * 4
        qty = ds.parse_amount(qty) or 1
        store = ds.get_store()
        try:
            mat = store.record_material_usage(material_id, qty)
        except ds.RecordNotFound:
            return (*_refresh(store), _not_found(material_id))
        return (*_refresh(store),
                toast(f"Used {qty} of {mat.name}, {mat.remaining_units} left", "Usage Recorded", icon="info"))
