"""Dashboard page: KPI strip (performance / cashflow), coaching insight, profit waterfall, status mix."""
from dash import html, dcc
import dash_bootstrap_components as dbc
import plotly.graph_objects as go

from craftledger_dashboard.theme import *
from craftledger_dashboard.components.kpi import kpi_pill, kpi_strip, signed_color
from craftledger_dashboard.components.cards import section, row_item, make_chart, graph_card, confirm_button
from craftledger_dashboard import data_state as ds

VIEW_MODES = [
    {"label": "Performance", "value": "performance"},
    {"label": "Cashflow", "value": "cashflow"},
]


def _performance_kpis(m):
    ppu_color = signed_color(m.profit_per_unit)
    rate_color = GREEN if m.delivery_rate > m.break_even_delivery_rate + 5 else RED
    return [
        kpi_pill("$", "CAMPAIGN PROFIT", ds.money(m.campaign_profit),
                 signed_color(m.campaign_profit),
                 subtitle=f"{m.delivered_units} units delivered",
                 detail="Revenue - COGS of delivered - return/loss costs - scaling ads"),
        kpi_pill("U", "PROFIT / UNIT", ds.money(m.profit_per_unit), ppu_color,
                 detail="Campaign profit / delivered units"),
        kpi_pill("%", "DELIVERY RATE", f"{m.delivery_rate}%", rate_color,
                 subtitle=f"break-even {m.break_even_delivery_rate:.1f}%",
                 detail="Delivered / (delivered + returned + lost). In-flight orders don't count."),
        kpi_pill("R", "REVENUE", ds.money(m.revenue), CYAN,
                 subtitle=f"{m.order_count} orders, {m.in_flight_count} in flight"),
    ]


def _cashflow_kpis(m):
    return [
        kpi_pill("B", "CASH BALANCE", ds.money(m.cash_balance),
                 signed_color(m.cash_balance),
                 detail="Revenue - material purchases - all ads - shipping paid"),
        kpi_pill("M", "MATERIAL SPEND", ds.money(m.total_material_spend), ORANGE),
        kpi_pill("A", "AD SPEND", ds.money(m.total_ad_spend), PURPLE,
                 subtitle=f"{ds.money(m.scaling_ad_spend)} scaling"),
        kpi_pill("S", "SHIPPING PAID", ds.money(m.total_shipping_paid), BLUE,
                 detail="Courier fees on every parcel that left the workshop"),
        kpi_pill("I", "INVENTORY VALUE", ds.money(m.inventory_value), TEAL,
                 detail="Remaining units x per-unit material cost"),
    ]


def _insight_alert(insight):
    return dbc.Alert([
        html.Strong(insight.title, style={"marginRight": "8px"}),
        html.Span(insight.message),
    ], color=SEVERITY_ALERT.get(insight.severity, "secondary"), className="mb-3",
        id="dash-insight")


def _waterfall(m):
    fig = go.Figure(go.Waterfall(
        orientation="v",
        measure=["absolute", "relative", "relative", "relative", "total"],
        x=["Revenue", "COGS", "Returns & Losses", "Scaling Ads", "Campaign Profit"],
        y=[m.revenue, -m.cogs_delivered, -m.total_losses, -m.scaling_ad_spend, 0],
        increasing={"marker": {"color": GREEN}},
        decreasing={"marker": {"color": RED}},
        totals={"marker": {"color": CYAN}},
        connector={"line": {"color": DARKGRAY}},
    ))
    make_chart(fig, 320, legend_h=False)
    fig.update_layout(title="Where the Money Went", showlegend=False)
    return fig


def _status_chart(m):
    statuses = list(m.status_counts.keys())
    fig = go.Figure(go.Bar(
        x=statuses,
        y=[m.status_counts[s] for s in statuses],
        marker_color=[STATUS_COLORS.get(s, GRAY) for s in statuses],
    ))
    make_chart(fig, 320, legend_h=False)
    fig.update_layout(title="Orders by Status", showlegend=False, yaxis=dict(dtick=1))
    return fig


def _loss_breakdown(m):
    return html.Div([
        row_item("Revenue (delivered)", m.revenue, bold=True, color=GREEN),
        row_item("COGS of delivered", -m.cogs_delivered, indent=1),
        row_item("Returned (Free): packaging", -m.losses_returned_free, indent=1),
        row_item("Returned (Paid): packaging + shipping", -m.losses_returned_paid, indent=1),
        row_item("Lost/Damaged: full cost", -m.losses_lost_damaged, indent=1),
        row_item("Scaling ads", -m.scaling_ad_spend, indent=1),
        row_item("Campaign profit", m.campaign_profit, bold=True),
        html.Div(f"Testing/awareness ads ({ds.money(m.non_scaling_ad_spend)}) are opex and "
                 f"only hit the cash balance.",
                 style={"color": DARKGRAY, "fontSize": "11px", "marginTop": "8px"}),
    ])


def build_body(store, mode="performance"):
    """Everything on the page that depends on the records."""
    m = store.metrics()
    kpis = _cashflow_kpis(m) if mode == "cashflow" else _performance_kpis(m)
    return html.Div([
        _insight_alert(store.insight()),
        kpi_strip(kpis),
        dbc.Row([
            dbc.Col(graph_card(_waterfall(m)), md=7),
            dbc.Col(graph_card(_status_chart(m)), md=5),
        ], className="g-3"),
        section("Campaign P&L", [_loss_breakdown(m)], GREEN),
    ])


def layout():
    """Build the Dashboard page."""
    store = ds.get_store()
    return html.Div([
        html.Div([
            html.H4("Business Pulse", style={"color": WHITE, "margin": "0"}),
            dbc.RadioItems(
                id="dash-view-mode",
                options=VIEW_MODES,
                value="performance",
                inline=True,
                className="ms-auto",
                inputClassName="btn-check",
                labelClassName="btn btn-outline-info btn-sm",
                labelCheckedClassName="active",
            ),
        ], style={"display": "flex", "alignItems": "center", "marginBottom": "14px"}),

        html.Div(build_body(store), id="dash-body"),

        section("Data", [
            html.Div([
                confirm_button("dash-start-fresh", "Start Fresh",
                               "Delete all orders, ads and materials? Products are kept.",
                               color="warning"),
                confirm_button("dash-reset-demo", "Load Demo Data",
                               "Replace everything with the demo shop?", color="info"),
                confirm_button("dash-clear-all", "Clear All",
                               "Delete every record? This cannot be undone."),
            ], style={"display": "flex", "gap": "10px"}),
        ], RED),

        html.Div(id="dash-toast"),
    ])
