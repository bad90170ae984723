"""Reusable card/section/form builders."""
from dash import html, dcc
import dash_bootstrap_components as dbc
from craftledger_dashboard.theme import *
from craftledger_dashboard.data_state import money


def section(title, children, color=ORANGE, actions=None):
    """Titled section card with colored top border; `actions` sit right of the title."""
    header = [html.Span(title)]
    if actions:
        header.append(html.Div(actions, className="ms-auto"))
    return dbc.Card([
        dbc.CardHeader(header, style={"color": color, "fontWeight": "bold", "fontSize": "16px",
                                      "borderBottom": f"2px solid {color}",
                                      "backgroundColor": "transparent", "padding": "12px 16px",
                                      "display": "flex", "alignItems": "center"}),
        dbc.CardBody(children, style={"padding": "16px"}),
    ], className="mb-3")


def row_item(label, amount, indent=0, bold=False, color=WHITE, neg_color=RED):
    """Single P&L / ledger row."""
    display_color = neg_color if amount < 0 else color
    style = {
        "display": "flex", "justifyContent": "space-between",
        "padding": "4px 0", "borderBottom": "1px solid #ffffff10",
        "marginLeft": f"{indent * 24}px",
    }
    if bold:
        style["fontWeight"] = "bold"
        style["borderBottom"] = "2px solid #ffffff30"
        style["padding"] = "8px 0"
    return html.Div([
        html.Span(label, style={"color": color if not bold else display_color, "fontSize": "13px"}),
        html.Span(money(amount, 2), style={"color": display_color, "fontFamily": "monospace", "fontSize": "13px"}),
    ], style=style)


def make_chart(fig, height=360, legend_h=True):
    """Apply consistent styling to a Plotly figure."""
    layout = {**CHART_LAYOUT, "height": height}
    if legend_h:
        layout["legend"] = dict(orientation="h", y=1.12, x=0.5, xanchor="center")
    fig.update_layout(**layout)
    return fig


def graph_card(fig):
    return dbc.Card(dbc.CardBody(dcc.Graph(figure=fig, config={"displayModeBar": False})),
                    className="mb-3")


def status_badge(status):
    color = STATUS_COLORS.get(status, GRAY)
    return dbc.Badge(status, color="", style={
        "backgroundColor": f"{color}22", "color": color,
        "border": f"1px solid {color}55", "fontSize": "11px",
    })


def empty_note(text):
    return html.P(text, style={"color": GRAY, "textAlign": "center", "padding": "30px"})


def toast(message, header, icon="success"):
    return dbc.Toast(
        message,
        header=header,
        icon=icon,
        duration=3000,
        style=TOAST_STYLE,
    )


def form_field(label, component, hint=""):
    """Label + input (+ small hint) stacked, for modal forms."""
    children = [dbc.Label(label, style={"fontSize": "12px", "color": GRAY, "marginBottom": "2px"}),
                component]
    if hint:
        children.append(dbc.FormText(hint))
    return html.Div(children, className="mb-2")


def confirm_button(provider_id, label, message, color="danger", size="sm", outline=True):
    """Button wrapped in a browser confirm dialog; listen to the provider's submit_n_clicks."""
    return dcc.ConfirmDialogProvider(
        dbc.Button(label, color=color, size=size, outline=outline),
        id=provider_id,
        message=message,
    )
