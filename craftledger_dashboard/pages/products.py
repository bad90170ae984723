"""Products page: unit economics cards and the product editor (materials checklist, cost fields)."""
from dash import html, dcc
import dash_bootstrap_components as dbc

from craftledger_dashboard.theme import *
from craftledger_dashboard.components.cards import section, empty_note, form_field, confirm_button
from craftledger_dashboard.components.kpi import signed_color
from craftledger_dashboard.costing import material_unit_cost
from craftledger_dashboard.metrics import product_unit_economics, break_even_delivery_rate
from craftledger_dashboard import data_state as ds


def material_options(store):
    return [{"label": f"{m.name} ({ds.money(material_unit_cost(m), 2)}/unit)", "value": m.id}
            for m in store.materials]


def _cost_line(label, amount, color=GRAY):
    return html.Div([
        html.Span(label),
        html.Span(ds.money(amount, 2), style={"fontFamily": "monospace", "color": color}),
    ], style={"display": "flex", "justifyContent": "space-between", "fontSize": "12px",
              "color": GRAY, "padding": "2px 0"})


def _product_card(econ, product, materials):
    profit_color = signed_color(econ["gross_profit"])
    linked = [m.name for m in materials if m.id in product.material_ids]
    return dbc.Card(dbc.CardBody([
        html.Div([
            html.Div([
                html.H5(econ["name"], style={"color": WHITE, "margin": "0"}),
                html.Div(ds.money(econ["price"]), style={"color": CYAN, "fontWeight": "bold"}),
            ]),
            html.Div([
                dbc.Button("Edit", id={"type": "product-edit-btn", "id": product.id},
                           color="light", outline=True, size="sm", className="me-1"),
                confirm_button({"type": "product-delete", "id": product.id}, "Delete",
                               f"Delete {product.name}? Its orders will show as deleted product."),
            ], className="ms-auto", style={"whiteSpace": "nowrap"}),
        ], style={"display": "flex", "alignItems": "flex-start", "marginBottom": "10px"}),

        _cost_line("Materials", econ["material_cost"]),
        _cost_line("Labor", product.labor_cost),
        _cost_line("Packaging", product.packaging_cost),
        _cost_line("Avg shipping", product.shipping_cost),
        _cost_line("Return buffer", product.fail_buffer or 0) if product.fail_buffer else None,
        html.Hr(style={"margin": "6px 0", "borderColor": "#ffffff20"}),
        _cost_line("Total unit cost", econ["total_cost"], RED),
        html.Div([
            html.Span("Gross profit"),
            html.Span(f"{ds.money(econ['gross_profit'])} ({econ['margin_pct']:.0f}%)",
                      style={"fontFamily": "monospace", "color": profit_color, "fontWeight": "bold"}),
        ], style={"display": "flex", "justifyContent": "space-between", "fontSize": "13px",
                  "color": WHITE, "paddingTop": "4px"}),
        html.Div(f"Break-even delivery rate: {break_even_delivery_rate(product, materials):.1f}%",
                 style={"color": DARKGRAY, "fontSize": "11px", "marginTop": "6px"}),
        html.Div(", ".join(linked) if linked else "No materials linked",
                 style={"color": DARKGRAY, "fontSize": "11px"}),
    ]), style={"borderTop": f"3px solid {CYAN}"}, className="h-100")


def build_product_grid(store):
    products = store.products
    if not products:
        return empty_note("No products yet. Add one to see its unit economics.")
    materials = store.materials
    by_id = {p.id: p for p in products}
    cols = [
        dbc.Col(_product_card(econ, by_id[econ["id"]], materials), md=4, className="mb-3")
        for econ in product_unit_economics(products, materials)
    ]
    return dbc.Row(cols, className="g-3")


def _product_modal(store):
    return dbc.Modal([
        dbc.ModalHeader(dbc.ModalTitle("New Product", id="product-modal-title")),
        dbc.ModalBody([
            dbc.Row([
                dbc.Col(form_field("Product Name", dbc.Input(id="product-name",
                                                             placeholder="e.g. Classic Bifold Wallet")), md=8),
                dbc.Col(form_field("Selling Price (MAD)", dbc.Input(id="product-price", type="number",
                                                                    min=0)), md=4),
            ], className="g-2"),
            form_field("Materials (Bill of Materials)",
                       dbc.Checklist(id="product-materials", options=material_options(store), value=[]),
                       hint="" if store.materials else "No materials yet. Record a purchase on the Materials page."),
            dbc.Row([
                dbc.Col(form_field("Labor", dbc.Input(id="product-labor", type="number", min=0)), md=3),
                dbc.Col(form_field("Packaging", dbc.Input(id="product-packaging", type="number", min=0)), md=3),
                dbc.Col(form_field("Avg Shipping", dbc.Input(id="product-shipping", type="number", min=0)), md=3),
                dbc.Col(form_field("Return Buffer", dbc.Input(id="product-fail-buffer", type="number", min=0),
                                   hint="Avg loss per unit from returns"), md=3),
            ], className="g-2"),
            html.Div(id="product-form-error"),
        ]),
        dbc.ModalFooter([
            dbc.Button("Cancel", id="product-cancel-btn", color="secondary", outline=True),
            dbc.Button("Save", id="product-save-btn", color="primary"),
        ]),
    ], id="product-modal", is_open=False, centered=True, size="lg")


def layout():
    """Build the Products page."""
    store = ds.get_store()
    return html.Div([
        section("Product Management", [
            html.Div(build_product_grid(store), id="products-grid"),
        ], CYAN, actions=dbc.Button("+ Add Product", id="product-add-btn", color="primary", size="sm")),

        _product_modal(store),
        dcc.Store(id="product-editing-id"),
        html.Div(id="products-toast"),
    ])
