"""Page routing callback: renders the correct page based on URL."""
from dash import html, Input, Output

from craftledger_dashboard.theme import RED


def render_page(pathname):
    if pathname is None:
        pathname = "/"
    if pathname == "/":
        from craftledger_dashboard.pages.dashboard import layout
        return layout()
    elif pathname == "/orders":
        from craftledger_dashboard.pages.orders import layout
        return layout()
    elif pathname == "/products":
        from craftledger_dashboard.pages.products import layout
        return layout()
    elif pathname == "/materials":
        from craftledger_dashboard.pages.materials import layout
        return layout()
    elif pathname == "/ads":
        from craftledger_dashboard.pages.ads import layout
        return layout()
    else:
        return html.Div([
            html.H3("404: Page Not Found", style={"color": RED}),
            html.P(f"No page at '{pathname}'"),
        ], style={"padding": "40px"})


def register_callbacks(app):
    @app.callback(
        Output("page-content", "children"),
        Input("url", "pathname"),
    )
    def route_page(pathname):
        return render_page(pathname)
