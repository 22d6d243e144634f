"""pretty-sequence: render numbered sequence diagrams to colorful SVG."""

from __future__ import annotations

from .types import (
    StyleOptions,
    LayoutMetrics,
    DEFAULT_STYLE,
    DEFAULT_LAYOUT,
    EXPORT_LAYOUT,
    LIFELINE_DASHES,
)
from .styles import TextMeasurer, CharCountMeasurer
from .theme import PALETTE

from .sequence.types import SequenceDiagram, Participant, Message, PositionedSequenceDiagram
from .sequence.parser import parse_sequence_diagram, classify_line
from .sequence.layout import layout_sequence_diagram
from .sequence.renderer import render_sequence_svg
from .sequence.serialize import diagram_to_dict, diagram_to_json, diagram_to_dsl

__all__ = [
    "render",
    "render_sequence",
    "parse_sequence_diagram",
    "classify_line",
    "layout_sequence_diagram",
    "render_sequence_svg",
    "diagram_to_dict",
    "diagram_to_json",
    "diagram_to_dsl",
    "StyleOptions",
    "LayoutMetrics",
    "DEFAULT_STYLE",
    "DEFAULT_LAYOUT",
    "EXPORT_LAYOUT",
    "LIFELINE_DASHES",
    "PALETTE",
    "TextMeasurer",
    "CharCountMeasurer",
    "SequenceDiagram",
    "Participant",
    "Message",
    "PositionedSequenceDiagram",
]


def render(
    diagram: SequenceDiagram,
    style: StyleOptions | None = None,
    metrics: LayoutMetrics | None = None,
    measurer: TextMeasurer | None = None,
) -> tuple[PositionedSequenceDiagram, str]:
    """Lay out and render a parsed diagram.

    Returns the positioned geometry and the SVG markup. The markup is an empty
    string when the diagram has no participants.
    """
    style = style or DEFAULT_STYLE
    metrics = metrics or DEFAULT_LAYOUT
    positioned = layout_sequence_diagram(diagram, style, metrics, measurer)
    return positioned, render_sequence_svg(positioned, style)


def render_sequence(
    text: str,
    style: StyleOptions | None = None,
    metrics: LayoutMetrics | None = None,
) -> str:
    """Render sequence diagram DSL text to an SVG string."""
    _, svg = render(parse_sequence_diagram(text), style, metrics)
    return svg
