"""Orders page callbacks: add/edit modal, workflow status buttons, delete, status filter."""
import logging
from dataclasses import replace

from dash import Input, Output, State, callback_context, no_update, ALL
import dash_bootstrap_components as dbc

from craftledger_dashboard import data_state as ds
from craftledger_dashboard.models import OrderStatus, USE_DEFAULT, override_from_raw
from craftledger_dashboard.components.cards import toast
from craftledger_dashboard.pages.orders import build_order_list, build_kpis

logger = logging.getLogger(__name__)


class FormError(ValueError):
    pass


def _parse_override(raw, label):
    val = ds.parse_amount(raw)
    if val is None:
        return USE_DEFAULT
    if val < 0:
        raise FormError(f"{label} cannot be negative.")
    return override_from_raw(val)


def _parse_quantity(raw):
    qty = ds.parse_amount(raw)
    if qty is None:
        return None
    if not isinstance(qty, int) or qty < 1:
        raise FormError("Quantity must be a whole number of at least 1.")
    return qty


def save_order_form(store, editing_id, customer, city, product_id, quantity, price, shipping,
                    status, date):
    """Create or update an order from raw form values. Raises FormError / RecordNotFound."""
    customer = (customer or "").strip()
    if not customer:
        raise FormError("Customer name is required.")
    if not product_id:
        raise FormError("Pick a product.")
    fields = dict(
        customer_name=customer,
        product_id=product_id,
        status=OrderStatus(status or OrderStatus.PENDING.value),
        date=date or ds._today(),
        city=(city or "").strip() or None,
        quantity=_parse_quantity(quantity),
        final_price=_parse_override(price, "Order total"),
        manual_shipping_cost=_parse_override(shipping, "Shipping"),
    )
    if editing_id:
        existing = store.get_order(editing_id)
        if existing is None:
            raise ds.RecordNotFound(editing_id)
        return store.update_order(replace(existing, **fields))
    return store.add_order(**fields)


def _refresh(store, status_filter):
    return build_order_list(store, status_filter), build_kpis(store)


def _not_found(record_id):
    return toast(f"Order {record_id} no longer exists.", "Not Found", icon="danger")


def register_callbacks(app):
    # ── Open modal (new / edit) ───────────────────────────────────────────
    @app.callback(
        Output("order-modal", "is_open"),
        Output("order-modal-title", "children"),
        Output("order-editing-id", "data"),
        Output("order-customer", "value"),
        Output("order-city", "value"),
        Output("order-product", "value"),
        Output("order-quantity", "value"),
        Output("order-price", "value"),
        Output("order-shipping", "value"),
        Output("order-status", "value"),
        Output("order-date", "value"),
        Output("order-form-error", "children"),
        Input("order-add-btn", "n_clicks"),
        Input({"type": "order-edit-btn", "id": ALL}, "n_clicks"),
        prevent_initial_call=True,
    )
    def open_modal(_add, _edits):
        trig = callback_context.triggered_id
        if trig is None or not callback_context.triggered[0]["value"]:
            return (no_update,) * 12
        store = ds.get_store()
        if trig == "order-add-btn":
            first = store.products[0].id if store.products else None
            return (True, "New Order", None, "", "", first, None, None, None,
                    OrderStatus.PENDING.value, ds._today(), None)

        order = store.get_order(trig["id"])
        if order is None:
            return (no_update,) * 12
        price = order.final_price.value if order.final_price.is_set else None
        shipping = order.manual_shipping_cost.value if order.manual_shipping_cost.is_set else None
        return (True, "Edit Order", order.id, order.customer_name, order.city or "", order.product_id,
                order.quantity, price, shipping, order.status.value, order.date, None)

    # ── Product defaults shown as placeholders ────────────────────────────
    @app.callback(
        Output("order-price", "placeholder"),
        Output("order-shipping", "placeholder"),
        Input("order-product", "value"),
        Input("order-quantity", "value"),
    )
    def show_defaults(product_id, quantity):
        product = ds.get_store().get_product(product_id) if product_id else None
        if product is None:
            return "", ""
        units = ds.parse_amount(quantity) or 1
        return f"{product.price * units} (default)", f"{product.shipping_cost} (default)"

    # ── Cancel ────────────────────────────────────────────────────────────
    @app.callback(
        Output("order-modal", "is_open", allow_duplicate=True),
        Input("order-cancel-btn", "n_clicks"),
        prevent_initial_call=True,
    )
    def close_modal(n_clicks):
        if not n_clicks:
            return no_update
        return False

    # ── Save ──────────────────────────────────────────────────────────────
    @app.callback(
        Output("order-modal", "is_open", allow_duplicate=True),
        Output("order-form-error", "children", allow_duplicate=True),
        Output("orders-list", "children", allow_duplicate=True),
        Output("orders-kpis", "children", allow_duplicate=True),
        Output("orders-toast", "children", allow_duplicate=True),
        Input("order-save-btn", "n_clicks"),
        State("order-editing-id", "data"),
        State("order-customer", "value"),
        State("order-city", "value"),
        State("order-product", "value"),
        State("order-quantity", "value"),
        State("order-price", "value"),
        State("order-shipping", "value"),
        State("order-status", "value"),
        State("order-date", "value"),
        State("orders-status-filter", "value"),
        prevent_initial_call=True,
    )
    def save_order(n_clicks, editing_id, customer, city, product_id, quantity, price, shipping,
                   status, date, status_filter):
        if not n_clicks:
            return (no_update,) * 5
        store = ds.get_store()
        try:
            order = save_order_form(store, editing_id, customer, city, product_id, quantity,
                                    price, shipping, status, date)
        except FormError as e:
            error = dbc.Alert(str(e), color="danger", className="mt-2 mb-0")
            return no_update, error, no_update, no_update, no_update
        except ds.RecordNotFound:
            return (False, None, *_refresh(store, status_filter), _not_found(editing_id))
        verb = "updated" if editing_id else "added"
        return (False, None, *_refresh(store, status_filter),
                toast(f"Order for {order.customer_name} {verb}", "Order Saved"))

    # ── Workflow step buttons ─────────────────────────────────────────────
    @app.callback(
        Output("orders-list", "children", allow_duplicate=True),
        Output("orders-kpis", "children", allow_duplicate=True),
        Output("orders-toast", "children", allow_duplicate=True),
        Input({"type": "order-status-btn", "id": ALL, "status": ALL}, "n_clicks"),
        State("orders-status-filter", "value"),
        prevent_initial_call=True,
    )
    def advance_status(_clicks, status_filter):
        trig = callback_context.triggered_id
        if trig is None or not callback_context.triggered[0]["value"]:
            return no_update, no_update, no_update
        store = ds.get_store()
        try:
            order = store.update_order_status(trig["id"], trig["status"])
        except ds.RecordNotFound:
            return (*_refresh(store, status_filter), _not_found(trig["id"]))
        return (*_refresh(store, status_filter),
                toast(f"{order.customer_name}: {order.status.value}", "Status Updated", icon="info"))

    # ── Delete ────────────────────────────────────────────────────────────
    @app.callback(
        Output("orders-list", "children", allow_duplicate=True),
        Output("orders-kpis", "children", allow_duplicate=True),
        Output("orders-toast", "children", allow_duplicate=True),
        Input({"type": "order-delete", "id": ALL}, "submit_n_clicks"),
        State("orders-status-filter", "value"),
        prevent_initial_call=True,
    )
    def delete_order(_clicks, status_filter):
        trig = callback_context.triggered_id
        if trig is None or not callback_context.triggered[0]["value"]:
            return no_update, no_update, no_update
        store = ds.get_store()
        try:
            order = store.delete_order(trig["id"])
        except ds.RecordNotFound:
            return (*_refresh(store, status_filter), _not_found(trig["id"]))
        return (*_refresh(store, status_filter),
                toast(f"Deleted order from {order.customer_name}", "Order Deleted", icon="warning"))

    # ── Status filter ─────────────────────────────────────────────────────
    @app.callback(
        Output("orders-list", "children"),
        Input("orders-status-filter", "value"),
        prevent_initial_call=True,
    )
    def filter_orders(status_filter):
        return build_order_list(ds.get_store(), status_filter)
