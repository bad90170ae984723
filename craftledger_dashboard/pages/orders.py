"""Orders (COD) page: order list with workflow buttons, add/edit modal with price and shipping overrides."""
from dash import html, dcc
import dash_bootstrap_components as dbc

from craftledger_dashboard.theme import *
from craftledger_dashboard.components.kpi import kpi_card
from craftledger_dashboard.components.cards import section, status_badge, empty_note, form_field, confirm_button
from craftledger_dashboard.components.tables import simple_table
from craftledger_dashboard.metrics import order_table
from craftledger_dashboard.models import OrderStatus
from craftledger_dashboard.outcomes import next_statuses
from craftledger_dashboard import data_state as ds

STATUS_OPTIONS = [{"label": s.value, "value": s.value} for s in OrderStatus]

# Button label + bootstrap color for each workflow step
STEP_BUTTONS = {
    OrderStatus.CONFIRMED: ("Confirm", "primary"),
    OrderStatus.SHIPPED: ("Mark Shipped", "info"),
    OrderStatus.DELIVERED: ("Delivered", "success"),
    OrderStatus.RETURNED_FREE: ("Returned (Free)", "warning"),
    OrderStatus.RETURNED_PAID: ("Returned (Paid)", "danger"),
    OrderStatus.LOST_DAMAGED: ("Lost", "secondary"),
}


def product_options(store):
    return [{"label": p.name, "value": p.id} for p in store.products]


def _amount_cell(amount, overridden):
    children = [html.Span(ds.money(amount), style={"fontFamily": "monospace"})]
    if overridden:
        children.append(html.Span(" *", title="Set on this order", style={"color": ORANGE}))
    return html.Td(children, style={"textAlign": "right", "fontSize": "12px"})


def _workflow_buttons(order_id, status):
    buttons = []
    for nxt in next_statuses(status):
        label, color = STEP_BUTTONS[nxt]
        buttons.append(dbc.Button(
            label, id={"type": "order-status-btn", "id": order_id, "status": nxt.value},
            color=color, size="sm", className="me-1 mb-1",
        ))
    return buttons


def build_order_list(store, status_filter=None):
    """Order table, newest first; optionally only one status."""
    df = order_table(store.orders, store.products)
    if status_filter:
        df = df[df["status"] == status_filter]
    if len(df) == 0:
        return empty_note("No orders yet. Add one to start tracking!")

    rows = []
    for _, row in df.iterrows():
        oid = row["id"]
        rows.append(html.Tr([
            html.Td(row["date"], style={"color": GRAY, "fontSize": "12px", "whiteSpace": "nowrap"}),
            html.Td([
                html.Div(row["customer"], style={"color": WHITE, "fontWeight": "600", "fontSize": "13px"}),
                html.Div(row["city"], style={"color": DARKGRAY, "fontSize": "11px"}) if row["city"] else None,
            ]),
            html.Td(row["product"], style={"fontSize": "12px",
                                           "color": RED if row["product"] == "(deleted product)" else GRAY}),
            html.Td(str(row["quantity"]), style={"textAlign": "center", "fontFamily": "monospace"}),
            _amount_cell(row["price"], row["price_overridden"]),
            _amount_cell(row["shipping"], row["shipping_overridden"]),
            html.Td(status_badge(row["status"])),
            html.Td(_workflow_buttons(oid, row["status"])),
            html.Td([
                dbc.Button("Edit", id={"type": "order-edit-btn", "id": oid},
                           color="light", outline=True, size="sm", className="me-1"),
                confirm_button({"type": "order-delete", "id": oid}, "Delete",
                               f"Delete the order from {row['customer']}?"),
            ], style={"whiteSpace": "nowrap"}),
        ]))

    return simple_table(
        ["Date", "Customer", "Product",
         html.Th("Qty", style={"textAlign": "center"}),
         html.Th("Price", style={"textAlign": "right"}),
         html.Th("Shipping", style={"textAlign": "right"}),
         "Status", "Next step", ""],
        rows,
    )


def build_kpis(store):
    m = store.metrics()
    return dbc.Row([
        dbc.Col(kpi_card("ORDERS", str(m.order_count), BLUE), md=3),
        dbc.Col(kpi_card("IN FLIGHT", str(m.in_flight_count), PURPLE, "pending, confirmed, shipped"), md=3),
        dbc.Col(kpi_card("DELIVERED", str(m.status_counts[OrderStatus.DELIVERED.value]), GREEN,
                         f"{m.delivered_units} units"), md=3),
        dbc.Col(kpi_card("DELIVERY RATE", f"{m.delivery_rate}%", CYAN,
                         f"break-even {m.break_even_delivery_rate:.1f}%"), md=3),
    ], className="g-2 mb-3")


def _order_modal(store):
    money_hint = "Leave blank to use the product default"
    return dbc.Modal([
        dbc.ModalHeader(dbc.ModalTitle("New Order", id="order-modal-title")),
        dbc.ModalBody([
            form_field("Customer Name", dbc.Input(id="order-customer", placeholder="e.g. Ahmed Benali")),
            form_field("City", dbc.Input(id="order-city", placeholder="e.g. Casablanca")),
            form_field("Product", dcc.Dropdown(id="order-product", options=product_options(store),
                                               placeholder="Select a product..."),
                       hint="" if store.products else "No products found. Add a product first."),
            dbc.Row([
                dbc.Col(form_field("Quantity", dbc.Input(id="order-quantity", type="number",
                                                         min=1, step=1, placeholder="1")), md=4),
                dbc.Col(form_field("Order Total (MAD)", dbc.Input(id="order-price", type="number",
                                                                  min=0), hint=money_hint), md=4),
                dbc.Col(form_field("Shipping (MAD)", dbc.Input(id="order-shipping", type="number",
                                                               min=0), hint=money_hint), md=4),
            ], className="g-2"),
            dbc.Row([
                dbc.Col(form_field("Status", dcc.Dropdown(id="order-status", options=STATUS_OPTIONS,
                                                          value=OrderStatus.PENDING.value,
                                                          clearable=False)), md=6),
                dbc.Col(form_field("Date", dbc.Input(id="order-date", type="date")), md=6),
            ], className="g-2"),
            html.Div(id="order-form-error"),
        ]),
        dbc.ModalFooter([
            dbc.Button("Cancel", id="order-cancel-btn", color="secondary", outline=True),
            dbc.Button("Save", id="order-save-btn", color="primary"),
        ]),
    ], id="order-modal", is_open=False, centered=True)


def layout():
    """Build the Orders page."""
    store = ds.get_store()
    return html.Div([
        html.Div(build_kpis(store), id="orders-kpis"),

        section("Orders & COD Tracking", [
            html.Div([
                dcc.Dropdown(id="orders-status-filter", options=STATUS_OPTIONS,
                             placeholder="All statuses", style={"width": "220px"}),
            ], className="mb-2"),
            html.Div(build_order_list(store), id="orders-list"),
        ], BLUE, actions=dbc.Button("+ New Order", id="order-add-btn", color="primary", size="sm")),

        _order_modal(store),
        dcc.Store(id="order-editing-id"),
        html.Div(id="orders-toast"),
    ])
