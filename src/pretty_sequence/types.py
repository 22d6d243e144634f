from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields, replace
from typing import Any

log = logging.getLogger(__name__)

# ============================================================================
# Style options -- user-facing toggles for color and typography
# ============================================================================


@dataclass(frozen=True, slots=True)
class DashPattern:
    """Stroke settings for one named lifeline style."""
    dasharray: str
    linecap: str | None = None
    width: float = 1.5


LIFELINE_DASHES: dict[str, DashPattern] = {
    "circle": DashPattern(dasharray="0 8", linecap="round", width=3),
    "dot": DashPattern(dasharray="2 5"),
    "small": DashPattern(dasharray="7 5"),
    "long": DashPattern(dasharray="14 6"),
}

DEFAULT_LIFELINE_DASH = "circle"


def lifeline_dash_pattern(name: str) -> DashPattern:
    """Resolve a lifeline style name, falling back to the default style."""
    return LIFELINE_DASHES.get(name, LIFELINE_DASHES[DEFAULT_LIFELINE_DASH])


def _from_mapping(cls, data: dict[str, Any]):
    """Merge a saved settings mapping over the dataclass defaults."""
    known = {f.name for f in fields(cls)}
    values = {}
    for key, value in data.items():
        if key not in known:
            log.warning("Ignoring unknown %s setting %r", cls.__name__, key)
            continue
        values[key] = value
    return cls(**values)


@dataclass(frozen=True, slots=True)
class StyleOptions:
    # Color lifelines and message strokes with the sender's palette color
    colored_lines: bool = True
    # Draw step numbers inside filled circles of the sender's color
    colored_numbers: bool = True
    # Draw message labels on colored pills
    colored_text: bool = True
    font: str = "Inter"
    lifeline_dash: str = DEFAULT_LIFELINE_DASH

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StyleOptions:
        return _from_mapping(cls, data)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ============================================================================
# Layout metrics -- sizes that drive the geometry
# ============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return math.floor(value + 0.5)


# Box height is derived from box width with this aspect ratio
BOX_ASPECT = 0.31
MIN_BOX_HEIGHT = 28

# Inclusive ranges accepted for each metric (matching the settings sliders)
METRIC_RANGES: dict[str, tuple[int, int]] = {
    "step_height": (30, 80),
    "box_width": (80, 180),
    "spacing": (120, 350),
    "text_size": (10, 20),
    "margin": (35, 120),
}


@dataclass(frozen=True, slots=True)
class LayoutMetrics:
    # Vertical space per message row
    step_height: int = 42
    # Participant box width
    box_width: int = 141
    # Distance between neighbouring column centers
    spacing: int = 250
    # Base font size for labels
    text_size: int = 13
    # Outer horizontal margin
    margin: int = 50

    @property
    def box_height(self) -> int:
        return max(MIN_BOX_HEIGHT, round_half_up(self.box_width * BOX_ASPECT))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LayoutMetrics:
        return _from_mapping(cls, data)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def updated(self, **changes: Any) -> LayoutMetrics:
        """Return a copy with the given metrics replaced; None values are skipped."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


DEFAULT_STYLE = StyleOptions()
DEFAULT_LAYOUT = LayoutMetrics()
# Roomier metrics used for high-resolution export
EXPORT_LAYOUT = LayoutMetrics(step_height=58, box_width=160, spacing=210, text_size=14, margin=60)
