from __future__ import annotations

# ============================================================================
# Participant palette
#
# Participants take colors in registration order, cycling when there are
# more participants than entries.
# ============================================================================

PALETTE: tuple[str, ...] = (
    "#ef4444",
    "#f97316",
    "#eab308",
    "#22c55e",
    "#14b8a6",
    "#06b6d4",
    "#3b82f6",
    "#8b5cf6",
    "#ec4899",
    "#f43f5e",
    "#84cc16",
    "#0891b2",
)


def palette_color(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


# ============================================================================
# Fixed colors
# ============================================================================

NEUTRAL = {
    "background": "white",
    "title": "#1e293b",
    "lifeline": "#d1d5db",
    "line": "#374151",
    "text": "#1e293b",
    "box_stroke": "#000000",
    "box_text": "white",
    "on_color": "#000000",
}

# Alpha suffix applied to a palette color for colored lifelines
LIFELINE_ALPHA = "60"


def lifeline_color(color: str, colored: bool) -> str:
    return color + LIFELINE_ALPHA if colored else NEUTRAL["lifeline"]


def line_color(color: str, colored: bool) -> str:
    return color if colored else NEUTRAL["line"]


def font_stack(font: str) -> str:
    return f"'{font}', sans-serif"


def fmt(value: float) -> str:
    """Format a coordinate: integers without a decimal point, others to 2 places."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def svg_open_tag(width: float, height: float) -> str:
    """Build the SVG opening tag sized to the natural canvas."""
    w = fmt(width)
    h = fmt(height)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" '
        f'viewBox="0 0 {w} {h}">'
    )
