"""Products page callbacks: add/edit modal and delete."""
import logging
from dataclasses import replace

from dash import Input, Output, State, callback_context, no_update, ALL
import dash_bootstrap_components as dbc

from craftledger_dashboard import data_state as ds
from craftledger_dashboard.components.cards import toast
from craftledger_dashboard.pages.products import build_product_grid, material_options

logger = logging.getLogger(__name__)


class FormError(ValueError):
    pass


def _money_field(raw, label, default=0):
    val = ds.parse_amount(raw)
    if val is None:
        return default
    if val < 0:
        raise FormError(f"{label} cannot be negative.")
    return val


def save_product_form(store, editing_id, name, price, material_ids, labor, packaging, shipping,
                      fail_buffer):
    """Create or update a product from raw form values. Raises FormError / RecordNotFound."""
    name = (name or "").strip()
    if not name:
        raise FormError("Product name is required.")
    if ds.parse_amount(price) is None:
        raise FormError("Selling price is required.")
    fields = dict(
        name=name,
        price=_money_field(price, "Price"),
        material_ids=list(dict.fromkeys(material_ids or [])),
        labor_cost=_money_field(labor, "Labor"),
        packaging_cost=_money_field(packaging, "Packaging"),
        shipping_cost=_money_field(shipping, "Shipping"),
        fail_buffer=_money_field(fail_buffer, "Return buffer", default=None),
    )
    if editing_id:
        existing = store.get_product(editing_id)
        if existing is None:
            raise ds.RecordNotFound(editing_id)
        return store.update_product(replace(existing, **fields))
    return store.add_product(**fields)


def register_callbacks(app):
    # ── Open modal (new / edit) ───────────────────────────────────────────
    @app.callback(
        Output("product-modal", "is_open"),
        Output("product-modal-title", "children"),
        Output("product-editing-id", "data"),
        Output("product-name", "value"),
        Output("product-price", "value"),
        Output("product-materials", "options"),
        Output("product-materials", "value"),
        Output("product-labor", "value"),
        Output("product-packaging", "value"),
        Output("product-shipping", "value"),
        Output("product-fail-buffer", "value"),
        Output("product-form-error", "children"),
        Input("product-add-btn", "n_clicks"),
        Input({"type": "product-edit-btn", "id": ALL}, "n_clicks"),
        prevent_initial_call=True,
    )
    def open_modal(_add, _edits):
        trig = callback_context.triggered_id
        if trig is None or not callback_context.triggered[0]["value"]:
            return (no_update,) * 12
        store = ds.get_store()
        options = material_options(store)
        if trig == "product-add-btn":
            return (True, "New Product", None, "", None, options, [], None, None, None, None, None)

        p = store.get_product(trig["id"])
        if p is None:
            return (no_update,) * 12
        return (True, "Edit Product", p.id, p.name, p.price, options, list(p.material_ids),
                p.labor_cost, p.packaging_cost, p.shipping_cost, p.fail_buffer, None)

    @app.callback(
        Output("product-modal", "is_open", allow_duplicate=True),
        Input("product-cancel-btn", "n_clicks"),
        prevent_initial_call=True,
    )
    def close_modal(n_clicks):
        if not n_clicks:
            return no_update
        return False

    # ── Save ──────────────────────────────────────────────────────────────
    @app.callback(
        Output("product-modal", "is_open", allow_duplicate=True),
        Output("product-form-error", "children", allow_duplicate=True),
        Output("products-grid", "children"),
        Output("products-toast", "children"),
        Input("product-save-btn", "n_clicks"),
        State("product-editing-id", "data"),
        State("product-name", "value"),
        State("product-price", "value"),
        State("product-materials", "value"),
        State("product-labor", "value"),
        State("product-packaging", "value"),
        State("product-shipping", "value"),
        State("product-fail-buffer", "value"),
        prevent_initial_call=True,
    )
    def save_product(n_clicks, editing_id, name, price, material_ids, labor, packaging, shipping,
                     fail_buffer):
        if not n_clicks:
            return (no_update,) * 4
        store = ds.get_store()
        try:
            product = save_product_form(store, editing_id, name, price, material_ids, labor,
                                        packaging, shipping, fail_buffer)
        except FormError as e:
            error = dbc.Alert(str(e), color="danger", className="mt-2 mb-0")
            return no_update, error, no_update, no_update
        except ds.RecordNotFound:
            return (False, None, build_product_grid(store),
                    toast(f"Product {editing_id} no longer exists.", "Not Found", icon="danger"))
        verb = "updated" if editing_id else "added"
        return False, None, build_product_grid(store), toast(f"{product.name} {verb}", "Product Saved")

    # ── Delete ────────────────────────────────────────────────────────────
    @app.callback(
        Output("products-grid", "children", allow_duplicate=True),
        Output("products-toast", "children", allow_duplicate=True),
        Input({"type": "product-delete", "id": ALL}, "submit_n_clicks"),
        prevent_initial_call=True,
    )
    def delete_product(_clicks):
        trig = callback_context.triggered_id
        if trig is None or not callback_context.triggered[0]["value"]:
            return no_update, no_update
        store = ds.get_store()
        try:
            product = store.delete_product(trig["id"])
        except ds.RecordNotFound:
            return (build_product_grid(store),
                    toast(f"Product {trig['id']} no longer exists.", "Not Found", icon="danger"))
        logger.info("Deleted product %s (%s)", product.id, product.name)
        return build_product_grid(store), toast(f"Deleted {product.name}", "Product Deleted", icon="warning")
