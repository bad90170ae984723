"""Materials page: bulk purchases, per-unit cost, stock gauges, usage logging."""
from dash import html, dcc
import dash_bootstrap_components as dbc

from craftledger_dashboard.theme import *
from craftledger_dashboard.components.kpi import kpi_card
from craftledger_dashboard.components.cards import section, empty_note, form_field, confirm_button
from craftledger_dashboard.components.tables import stock_level_bar, simple_table
from craftledger_dashboard.costing import material_unit_cost
from craftledger_dashboard import data_state as ds


def unit_cost_preview(cost, yield_units):
    """Live 'cost per unit' hint under the purchase form."""
    cost, yield_units = ds.parse_amount(cost), ds.parse_amount(yield_units)
    per_unit = cost / yield_units if cost and yield_units and yield_units > 0 else 0
    return html.Div([
        "Cost per unit will be: ",
        html.Strong(ds.money(per_unit, 2)),
    ], style={"color": CYAN, "fontSize": "13px", "padding": "8px 0"})


def build_material_table(store):
    materials = store.materials
    if not materials:
        return empty_note("No materials recorded yet.")

    rows = []
    for m in materials:
        stock_color = GREEN if m.remaining_units > 2 else ORANGE if m.remaining_units > 0 else RED
        rows.append(html.Tr([
            html.Td([
                html.Div(m.name, style={"color": WHITE, "fontSize": "13px", "fontWeight": "600"}),
                html.Div(m.date, style={"color": DARKGRAY, "fontSize": "11px"}),
            ]),
            html.Td(ds.money(-m.cost), style={"color": RED, "fontFamily": "monospace", "textAlign": "right"}),
            html.Td(f"{m.yield_units} units", style={"textAlign": "center", "color": GRAY}),
            html.Td(ds.money(material_unit_cost(m), 2),
                    style={"color": GREEN, "fontFamily": "monospace", "textAlign": "right"}),
            html.Td([
                html.Span(f"{m.remaining_units} left", style={"color": stock_color, "fontWeight": "bold",
                                                              "fontFamily": "monospace", "marginRight": "8px"}),
                stock_level_bar(m.remaining_units, m.yield_units),
            ], style={"whiteSpace": "nowrap"}),
            html.Td(ds.money(material_unit_cost(m) * m.remaining_units),
                    style={"color": CYAN, "fontFamily": "monospace", "textAlign": "right"}),
            html.Td([
                dbc.Button("Edit", id={"type": "material-edit-btn", "id": m.id},
                           color="light", outline=True, size="sm", className="me-1"),
                confirm_button({"type": "material-delete", "id": m.id}, "Delete",
                               f"Delete {m.name}? Products using it will lose that cost."),
            ], style={"whiteSpace": "nowrap"}),
        ], className="stock-row"))

    return simple_table(
        ["Material",
         html.Th("Bulk Cost", style={"textAlign": "right"}),
         html.Th("Est. Yield", style={"textAlign": "center"}),
         html.Th("Cost / Unit", style={"textAlign": "right"}),
         "Remaining",
         html.Th("Stock Value", style={"textAlign": "right"}),
         ""],
        rows,
    )


def build_kpis(store):
    m = store.metrics()
    low = sum(1 for mat in store.materials if mat.remaining_units <= 2)
    return dbc.Row([
        dbc.Col(kpi_card("MATERIALS", str(len(store.materials)), BLUE), md=3),
        dbc.Col(kpi_card("TOTAL SPENT", ds.money(m.total_material_spend), ORANGE), md=3),
        dbc.Col(kpi_card("STOCK VALUE", ds.money(m.inventory_value), CYAN, "remaining x cost/unit"), md=3),
        dbc.Col(kpi_card("LOW STOCK", str(low), RED, "2 or fewer units left"), md=3),
    ], className="g-2 mb-3")


def usage_options(store):
    return [{"label": f"{m.name} ({m.remaining_units} left)", "value": m.id} for m in store.materials]


def _material_modal():
    return dbc.Modal([
        dbc.ModalHeader(dbc.ModalTitle("Edit Material")),
        dbc.ModalBody([
            form_field("Material Name", dbc.Input(id="material-edit-name")),
            dbc.Row([
                dbc.Col(form_field("Total Cost (MAD)", dbc.Input(id="material-edit-cost", type="number",
                                                                 min=0)), md=4),
                dbc.Col(form_field("Yield (units)", dbc.Input(id="material-edit-yield", type="number",
                                                              min=0)), md=4),
                dbc.Col(form_field("Remaining", dbc.Input(id="material-edit-remaining", type="number",
                                                          min=0)), md=4),
            ], className="g-2"),
            html.Div(id="material-edit-error"),
        ]),
        dbc.ModalFooter([
            dbc.Button("Cancel", id="material-edit-cancel-btn", color="secondary", outline=True),
            dbc.Button("Save", id="material-edit-save-btn", color="primary"),
        ]),
    ], id="material-modal", is_open=False, centered=True)


def layout():
    """Build the Materials page."""
    store = ds.get_store()
    return html.Div([
        html.Div(build_kpis(store), id="materials-kpis"),

        dbc.Collapse(
            section("Record New Material Purchase", [
                form_field("Material Name", dbc.Input(id="material-name", placeholder="e.g. Full Hide Leather")),
                dbc.Row([
                    dbc.Col(form_field("Total Cost (MAD)", dbc.Input(id="material-cost", type="number",
                                                                     min=0, placeholder="300")), md=6),
                    dbc.Col(form_field("Yield (est. units)", dbc.Input(id="material-yield", type="number",
                                                                       min=0, placeholder="15")), md=6),
                ], className="g-2"),
                html.Div(unit_cost_preview(None, None), id="material-cost-preview"),
                html.Div(id="material-form-error"),
                html.Div([
                    dbc.Button("Save Material", id="material-save-btn", color="primary", size="sm"),
                ], style={"textAlign": "right"}),
            ], ORANGE),
            id="material-form-collapse",
            is_open=False,
        ),

        section("Materials & Stock", [
            html.Div(build_material_table(store), id="materials-table"),
        ], GREEN, actions=dbc.Button("+ Add Bulk Purchase", id="material-add-btn",
                                     color="primary", size="sm")),

        section("Log Usage", [
            dbc.Row([
                dbc.Col([
                    dcc.Dropdown(id="material-use-item", options=usage_options(store),
                                 placeholder="Select material..."),
                ], md=6),
                dbc.Col([
                    dbc.Input(id="material-use-qty", type="number", value=1, min=1, placeholder="Units"),
                ], md=3),
                dbc.Col([
                    dbc.Button("Mark Used", id="material-use-btn", color="warning", size="sm"),
                ], md=3),
            ], className="g-2"),
        ], ORANGE),

        _material_modal(),
        dcc.Store(id="material-editing-id"),
        html.Div(id="materials-toast"),
    ])
