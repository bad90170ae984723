"""KPI pills, cards and the strip that lays them out."""
from dash import html
import dash_bootstrap_components as dbc
from craftledger_dashboard.theme import *


def signed_color(amount, threshold=0):
    """Green at or above the threshold, red below it."""
    return GREEN if amount >= threshold else RED


def _initial_badge(letter, color):
    return html.Div(letter, className="kpi-badge", style={
        "background": f"linear-gradient(135deg, {color}, {color}88)",
        "boxShadow": f"0 3px 10px {color}44",
    })


def _formula_note(formula):
    return dbc.Accordion([
        dbc.AccordionItem(html.P(formula, className="kpi-formula"), title="how it's computed"),
    ], start_collapsed=True, flush=True, className="kpi-detail-accordion")


def kpi_pill(icon, label, value, color, subtitle="", detail=""):
    """Dashboard KPI: letter badge, label, big value, optional subtitle and formula note."""
    text = [
        html.Div(label, className="kpi-pill-label"),
        html.Div(value, className="kpi-pill-value", style={"textShadow": f"0 0 12px {color}33"}),
    ]
    if subtitle:
        text.append(html.Div(subtitle, className="kpi-subtitle"))
    if detail:
        text.append(_formula_note(detail))
    return dbc.Card(
        dbc.CardBody([_initial_badge(icon, color), html.Div(text, className="kpi-pill-text")],
                     className="kpi-pill-body"),
        style={"borderLeft": f"4px solid {color}"},
        className="kpi-pill",
    )


def kpi_strip(pills):
    """Wrap a list of pills in one flex row."""
    return html.Div(pills, className="kpi-strip mb-3")


def kpi_card(label, value, color, subtitle=""):
    """Page-header KPI card (Orders, Materials, Ad Spend)."""
    body = [
        html.Div(label, className="kpi-label"),
        html.Div(value, className="kpi-value", style={"color": color}),
    ]
    if subtitle:
        body.append(html.Div(subtitle, className="kpi-subtitle"))
    return dbc.Card(
        dbc.CardBody(body, style={"padding": "14px", "textAlign": "center"}),
        style={"borderTop": f"3px solid {color}"},
        className="kpi-card-top",
    )
