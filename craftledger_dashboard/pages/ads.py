"""Ad Spend page: daily spend form, recent spend list, per-platform breakdown."""
from dash import html, dcc
import dash_bootstrap_components as dbc
import plotly.graph_objects as go

from craftledger_dashboard.theme import *
from craftledger_dashboard.components.kpi import kpi_card
from craftledger_dashboard.components.cards import section, empty_note, make_chart, graph_card, form_field, confirm_button
from craftledger_dashboard.metrics import ad_spend_breakdown
from craftledger_dashboard.models import AdPurpose, PLATFORMS
from craftledger_dashboard import data_state as ds

PURPOSE_HINTS = {
    AdPurpose.SCALING: "Counts against unit profit",
    AdPurpose.TESTING: "Investment / opex",
    AdPurpose.AWARENESS: "Brand / opex",
}


def build_breakdown_chart(store):
    df = ad_spend_breakdown(store.ads)
    fig = go.Figure()
    if len(df) > 0:
        for purpose in AdPurpose:
            fig.add_trace(go.Bar(
                name=purpose.value,
                x=df["platform"],
                y=df[purpose.value],
                marker_color=PURPOSE_COLORS.get(purpose.value, GRAY),
            ))
    make_chart(fig, 300)
    fig.update_layout(title="Spend by Platform", barmode="stack")
    return fig


def build_ad_list(store):
    ads = store.ads
    if not ads:
        return empty_note("No ad spend recorded yet.")
    items = []
    for ad in reversed(ads):
        color = PURPOSE_COLORS.get(ad.purpose.value, GRAY)
        items.append(html.Div([
            html.Div([
                html.Div(ad.platform, style={"color": PLATFORM_COLORS.get(ad.platform, WHITE),
                                             "fontWeight": "600", "fontSize": "13px"}),
                html.Div([
                    html.Span(f"{ad.date} · ", style={"color": DARKGRAY}),
                    html.Span(ad.purpose.value, style={"color": color}),
                ], style={"fontSize": "11px"}),
            ]),
            html.Div([
                html.Span(ds.money(-ad.amount), style={"color": RED, "fontWeight": "bold",
                                                       "fontFamily": "monospace", "marginRight": "10px"}),
                confirm_button({"type": "ad-delete", "id": ad.id}, "x",
                               f"Delete the {ad.platform} spend of {ds.money(ad.amount)}?"),
            ], className="ms-auto", style={"display": "flex", "alignItems": "center"}),
        ], style={"display": "flex", "alignItems": "center", "padding": "8px 0",
                  "borderBottom": "1px solid #ffffff10"}))
    return html.Div(items, style={"maxHeight": "340px", "overflowY": "auto"})


def build_kpis(store):
    m = store.metrics()
    return dbc.Row([
        dbc.Col(kpi_card("TOTAL AD SPEND", ds.money(m.total_ad_spend), PURPLE), md=4),
        dbc.Col(kpi_card("SCALING", ds.money(m.scaling_ad_spend), CYAN, "in campaign profit"), md=4),
        dbc.Col(kpi_card("TESTING + AWARENESS", ds.money(m.non_scaling_ad_spend), ORANGE,
                         "opex, cash balance only"), md=4),
    ], className="g-2 mb-3")


def build_body(store):
    return html.Div([
        build_kpis(store),
        dbc.Row([
            dbc.Col(section("Recent Spend", [build_ad_list(store)], PURPLE), md=6),
            dbc.Col(graph_card(build_breakdown_chart(store)), md=6),
        ], className="g-3"),
    ])


def layout():
    """Build the Ad Spend page."""
    store = ds.get_store()
    return html.Div([
        section("Record Daily Spend", [
            dbc.Row([
                dbc.Col(form_field("Platform", dcc.Dropdown(
                    id="ad-platform", options=[{"label": p, "value": p} for p in PLATFORMS],
                    value=PLATFORMS[0], clearable=False)), md=3),
                dbc.Col(form_field("Amount (MAD)", dbc.Input(id="ad-amount", type="number",
                                                             min=0, placeholder="100")), md=3),
                dbc.Col(form_field("Date", dbc.Input(id="ad-date", type="date")), md=3),
                dbc.Col(form_field("Purpose", dbc.RadioItems(
                    id="ad-purpose",
                    options=[{"label": f"{p.value} ({PURPOSE_HINTS[p]})", "value": p.value}
                             for p in AdPurpose],
                    value=AdPurpose.SCALING.value,
                )), md=3),
            ], className="g-2"),
            html.Div(id="ad-form-error"),
            dbc.Button("Record Spend", id="ad-save-btn", color="primary", size="sm"),
        ], PURPLE),

        html.Div(build_body(store), id="ads-body"),
        html.Div(id="ads-toast"),
    ])
