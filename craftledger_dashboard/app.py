"""
CraftLedger: bookkeeping dashboard for a handmade-goods COD shop
Run:  python -m craftledger_dashboard.app
Open: http://127.0.0.1:8070
"""

import logging
import os
import sys

# Ensure project root is on the path for store_loader
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import dash
from dash import html, dcc
import dash_bootstrap_components as dbc
import flask

from craftledger_dashboard.logging_config import setup_logging
from craftledger_dashboard.theme import BG, SIDEBAR_WIDTH, CONTENT_MARGIN

setup_logging()
logger = logging.getLogger(__name__)

# ── Create the Dash app ──────────────────────────────────────────────────────
app = dash.Dash(
    __name__,
    suppress_callback_exceptions=True,
    external_stylesheets=[
        dbc.themes.DARKLY,
        "https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap",
    ],
    assets_folder=os.path.join(os.path.dirname(__file__), "assets"),
    title="CraftLedger",
)
server = app.server  # For deployment (Gunicorn)

# ── Sidebar navigation ──────────────────────────────────────────────────────
NAV_ITEMS = [
    {"label": "Dashboard",   "icon": "\U0001f4ca", "value": "/"},
    "---",
    {"label": "Orders (COD)", "icon": "\U0001f69a", "value": "/orders"},
    {"label": "Products",    "icon": "\U0001f45b", "value": "/products"},
    {"label": "Materials",   "icon": "\U0001f4e6", "value": "/materials"},
    "---",
    {"label": "Ad Spend",    "icon": "\U0001f4e3", "value": "/ads"},
]


def _build_sidebar():
    nav_links = []
    for item in NAV_ITEMS:
        if item == "---":
            nav_links.append(html.Hr(className="sidebar-divider"))
        else:
            nav_links.append(
                dbc.NavLink(
                    [html.Span(item["icon"], className="nav-icon"), item["label"]],
                    href=item["value"],
                    active="exact",
                )
            )

    return html.Div([
        # Brand
        html.Div([
            html.H4("CRAFTLEDGER"),
            html.Small("Handmade shop bookkeeping"),
        ], className="sidebar-brand"),

        # Nav
        dbc.Nav(nav_links, vertical=True, pills=True),
    ], className="sidebar", style={"width": SIDEBAR_WIDTH})


# ── App layout ───────────────────────────────────────────────────────────────
def serve_layout():
    from craftledger_dashboard import data_state as ds
    store = ds.get_store()
    m = store.metrics()
    subtitle = (
        f"{m.order_count} orders  |  {m.in_flight_count} in flight  |  "
        f"Delivery rate: {m.delivery_rate}%  |  "
        f"Profit/unit: {ds.money(m.profit_per_unit)}  |  "
        f"Cash: {ds.money(m.cash_balance)}  |  Storage: {store.backend.name}"
    )
    return html.Div([
        dcc.Location(id="url", refresh=False),

        # Sidebar
        _build_sidebar(),

        # Main content area
        html.Div([
            # Header
            html.Div([
                html.H3("CRAFTLEDGER"),
                html.Div(subtitle, className="header-subtitle", id="app-header-content"),
            ], className="app-header"),

            # Page content (rendered by routing callback)
            html.Div(id="page-content"),
        ], className="main-content", style={"marginLeft": CONTENT_MARGIN, "backgroundColor": BG}),
    ])


app.layout = serve_layout


# ── API routes ───────────────────────────────────────────────────────────────
@server.route("/api/reload")
def api_reload():
    """Re-read the ledger from its storage backend (e.g. after a restore)."""
    from craftledger_dashboard import data_state as ds
    try:
        store = ds.get_store()
        store.reload()
        return flask.jsonify({
            "status": "ok",
            "backend": store.backend.name,
            "materials": len(store.materials),
            "products": len(store.products),
            "orders": len(store.orders),
            "ads": len(store.ads),
        })
    except Exception as e:
        logger.exception("Reload failed")
        return flask.jsonify({"status": "error", "message": str(e)}), 500


@server.route("/api/diagnostics")
def api_diagnostics():
    """Return the current metrics snapshot as JSON for remote debugging."""
    from craftledger_dashboard import data_state as ds
    store = ds.get_store()
    insight = store.insight()
    return flask.jsonify({
        "backend": store.backend.name,
        "metrics": store.metrics().to_dict(),
        "insight": {"key": insight.key, "severity": insight.severity, "title": insight.title},
    })


# ── Register callbacks ───────────────────────────────────────────────────────
# Import callback modules AFTER app is created so they can reference `app`
from craftledger_dashboard.callbacks.navigation_cb import register_callbacks as _reg_nav
_reg_nav(app)

# Import remaining callback modules
from craftledger_dashboard.callbacks import dashboard_cb, orders_cb, products_cb, materials_cb, ads_cb
dashboard_cb.register_callbacks(app)
orders_cb.register_callbacks(app)
products_cb.register_callbacks(app)
materials_cb.register_callbacks(app)
ads_cb.register_callbacks(app)

# ── Run ──────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8070))
    print(f"\n  CraftLedger Dashboard")
    print(f"  http://127.0.0.1:{port}\n")
    app.run(debug=False, host="0.0.0.0", port=port)
