from __future__ import annotations

from typing import Protocol

# ============================================================================
# Text measurement -- label widths are estimated, not typeset.
# ============================================================================


class TextMeasurer(Protocol):
    def measure(self, text: str, font_size: float) -> float:
        """Width in px of `text` rendered at `font_size`."""
        ...


class CharCountMeasurer:
    """Average character width estimate (proportional font, semibold)."""

    def __init__(self, width_ratio: float = 0.62) -> None:
        self.width_ratio = width_ratio

    def measure(self, text: str, font_size: float) -> float:
        return len(text) * font_size * self.width_ratio


DEFAULT_MEASURER = CharCountMeasurer()

# Fixed font sizes (px); labels use the configurable layout text size
FONT_SIZES = {
    "title": 15,
    "step_marker": 11,
    "step_plain": 13,
}

FONT_WEIGHTS = {
    "title": 700,
    "participant": 700,
    "pill_label": 600,
    "step": 700,
}

# ============================================================================
# Spacing & sizing constants
# ============================================================================

STROKE_WIDTHS = {
    "box": 2,
    "connector": 1.5,
}

MESSAGE_DASH = "12 5"

ARROW_HEAD = {
    "length": 8,
    "half_height": 5,
}

# Self-message loop size, independent of the layout metrics
SELF_LOOP = {
    "width": 50,
    "height": 36,
}

LABEL_PILL = {
    # Added to the text size to get the pill height
    "pad_y": 8,
    "pad_x": 12,
    "min_width": 40,
    # Gap between the pill bottom and the message line
    "gap": 10,
    # Gap between a self-loop and its label
    "self_gap": 5,
}

STEP_MARKER = {
    "radius": 10,
    # x of the marker pinned to the left edge of the canvas
    "pinned_x": 22,
}
