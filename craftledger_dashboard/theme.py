"""
Theme constants: colors, chart layout, status/severity mappings.
Import from here instead of hardcoding colors anywhere.
"""

# ── Color Palette ────────────────────────────────────────────────────────────
BG = "#0a0a14"
CARD = "#141828"
CARD2 = "#1a1a2e"
GREEN = "#2ecc71"
RED = "#e74c3c"
BLUE = "#3498db"
ORANGE = "#f39c12"
PURPLE = "#9b59b6"
TEAL = "#1abc9c"
PINK = "#e91e8f"
WHITE = "#ffffff"
GRAY = "#aaaaaa"
DARKGRAY = "#666666"
CYAN = "#00d4ff"

# ── Order status colors ──────────────────────────────────────────────────────
STATUS_COLORS = {
    "Pending": GRAY,
    "Confirmed": BLUE,
    "Shipped": PURPLE,
    "Delivered": GREEN,
    "Returned (Free)": ORANGE,
    "Returned (Paid)": RED,
    "Lost/Damaged": PINK,
}

# ── Ad purpose / platform colors ─────────────────────────────────────────────
PURPOSE_COLORS = {
    "Scaling": CYAN,
    "Testing": ORANGE,
    "Awareness": PURPLE,
}

PLATFORM_COLORS = {
    "Facebook": BLUE,
    "Instagram": PINK,
    "TikTok": TEAL,
}

# ── Insight severity → Bootstrap alert color ─────────────────────────────────
SEVERITY_ALERT = {
    "neutral": "secondary",
    "danger": "danger",
    "warning": "warning",
    "info": "info",
    "success": "success",
}

# ── Plotly Chart Layout ──────────────────────────────────────────────────────
CHART_LAYOUT = dict(
    template="plotly_dark",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font={"color": WHITE},
    margin=dict(t=50, b=30, l=60, r=20),
)

# ── Sidebar Dimensions ───────────────────────────────────────────────────────
SIDEBAR_WIDTH = "250px"
CONTENT_MARGIN = "266px"  # sidebar + gap

TOAST_STYLE = {"position": "fixed", "top": 20, "right": 20, "zIndex": 9999}
