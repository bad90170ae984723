"""Reusable table builders."""
from dash import html
import dash_bootstrap_components as dbc
from craftledger_dashboard.theme import *


def stock_level_bar(remaining, total):
    """Visual stock gauge bar: 8px height, gradient fill."""
    if total <= 0:
        return html.Div(style={"width": "80px", "display": "inline-block"})
    pct = max(0, min(100, (remaining / total) * 100))
    color = GREEN if pct > 50 else (ORANGE if pct > 20 else RED)
    return html.Div([
        html.Div(style={"width": f"{max(pct, 4)}%", "height": "8px",
                         "background": f"linear-gradient(90deg, {color}88, {color})",
                         "borderRadius": "4px",
                         "transition": "width 0.3s ease"}),
    ], style={"width": "80px", "height": "8px", "backgroundColor": "#0d0d1a",
              "borderRadius": "4px", "display": "inline-block", "verticalAlign": "middle",
              "overflow": "hidden"})


def simple_table(headers, rows, **kwargs):
    """dbc.Table from header labels and pre-built html.Tr rows."""
    return dbc.Table([
        html.Thead(html.Tr([html.Th(h) if isinstance(h, str) else h for h in headers])),
        html.Tbody(rows),
    ], striped=True, hover=True, size="sm", className="mb-0", **kwargs)
