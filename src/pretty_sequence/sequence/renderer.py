from __future__ import annotations

import re

from .types import (
    PositionedSequenceDiagram,
    PositionedTitle,
    PositionedParticipant,
    Lifeline,
    PositionedMessage,
    LabelPlacement,
    StepMarker,
    Point,
)
from ..types import StyleOptions, DEFAULT_STYLE, lifeline_dash_pattern
from ..theme import (
    NEUTRAL,
    fmt,
    font_stack,
    svg_open_tag,
    lifeline_color,
    line_color,
)
from ..styles import FONT_SIZES, FONT_WEIGHTS, STROKE_WIDTHS, MESSAGE_DASH

# ============================================================================
# Sequence diagram SVG renderer
#
# Renders a positioned sequence diagram to an SVG string. Colors are literal
# values so the output can be rasterized without CSS support.
#
# Render order (back to front):
#   1. Background and title
#   2. Lifelines
#   3. Header boxes
#   4. Messages (stroke, head, label, step markers)
#   5. Footer boxes
# ============================================================================

_XML_INVALID_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def render_sequence_svg(
    diagram: PositionedSequenceDiagram,
    style: StyleOptions | None = None,
) -> str:
    """Render a positioned sequence diagram as an SVG string.

    Returns an empty string for a diagram without participants: there is
    nothing to show, and no canvas is produced.
    """
    style = style or DEFAULT_STYLE
    if diagram.is_empty:
        return ""

    font = _escape_xml(font_stack(style.font))
    size = fmt(diagram.text_size)
    parts: list[str] = []

    parts.append(svg_open_tag(diagram.width, diagram.height))
    parts.append(
        f'<rect width="{fmt(diagram.width)}" height="{fmt(diagram.height)}" '
        f'fill="{NEUTRAL["background"]}"/>'
    )
    if diagram.title is not None:
        parts.append(_render_title(diagram.title, font))

    # 2. Lifelines
    for lifeline in diagram.lifelines:
        parts.append(_render_lifeline(lifeline, style))

    # 3. Header boxes
    for box in diagram.header:
        parts.append(_render_box(box, font, size))

    # 4. Messages, each followed by its step markers
    markers: dict[int, list[StepMarker]] = {}
    for marker in diagram.markers:
        markers.setdefault(marker.step, []).append(marker)
    for message in diagram.messages:
        parts.append(_render_message(message, font, size, style))
        for marker in markers.get(message.step, []):
            parts.append(_render_marker(marker, font, style))

    # 5. Footer boxes
    for box in diagram.footer:
        parts.append(_render_box(box, font, size))

    parts.append("</svg>")
    return "\n".join(parts)


# ============================================================================
# Component renderers
# ============================================================================


def _render_title(title: PositionedTitle, font: str) -> str:
    return (
        f'<text x="{fmt(title.x)}" y="{fmt(title.y)}" text-anchor="middle" '
        f'dominant-baseline="middle" font-family="{font}" '
        f'font-size="{FONT_SIZES["title"]}" font-weight="{FONT_WEIGHTS["title"]}" '
        f'fill="{NEUTRAL["title"]}">{_escape_xml(title.text)}</text>'
    )


def _render_lifeline(lifeline: Lifeline, style: StyleOptions) -> str:
    dash = lifeline_dash_pattern(style.lifeline_dash)
    cap = f' stroke-linecap="{dash.linecap}"' if dash.linecap else ""
    return (
        f'<line x1="{fmt(lifeline.x)}" y1="{fmt(lifeline.top_y)}" '
        f'x2="{fmt(lifeline.x)}" y2="{fmt(lifeline.bottom_y)}" '
        f'stroke="{lifeline_color(lifeline.color, style.colored_lines)}" '
        f'stroke-width="{fmt(dash.width)}" stroke-dasharray="{dash.dasharray}"{cap}/>'
    )


def _render_box(box: PositionedParticipant, font: str, size: str) -> str:
    """Participant box: palette fill, black outline, white bold label."""
    return (
        f'<rect x="{fmt(box.x - box.width / 2)}" y="{fmt(box.y)}" '
        f'width="{fmt(box.width)}" height="{fmt(box.height)}" rx="{fmt(box.radius)}" '
        f'fill="{box.color}" stroke="{NEUTRAL["box_stroke"]}" '
        f'stroke-width="{STROKE_WIDTHS["box"]}"/>\n'
        f'<text x="{fmt(box.x)}" y="{fmt(box.y + box.height / 2 + 1)}" '
        f'text-anchor="middle" dominant-baseline="middle" font-family="{font}" '
        f'font-size="{size}" font-weight="{FONT_WEIGHTS["participant"]}" '
        f'fill="{NEUTRAL["box_text"]}">{_escape_xml(box.label)}</text>'
    )


def _render_message(msg: PositionedMessage, font: str, size: str, style: StyleOptions) -> str:
    parts: list[str] = []
    stroke = line_color(msg.color, style.colored_lines)
    dash = f' stroke-dasharray="{MESSAGE_DASH}"' if msg.arrow == "dashed" else ""

    if msg.is_self:
        start, corner, back, end = msg.points
        parts.append(
            f'<path d="M{fmt(start.x)} {fmt(start.y)} H{fmt(corner.x)} '
            f'V{fmt(back.y)} H{fmt(end.x)}" fill="none" stroke="{stroke}" '
            f'stroke-width="{STROKE_WIDTHS["connector"]}"{dash}/>'
        )
    else:
        start, end = msg.points
        parts.append(
            f'<line x1="{fmt(start.x)}" y1="{fmt(start.y)}" '
            f'x2="{fmt(end.x)}" y2="{fmt(end.y)}" stroke="{stroke}" '
            f'stroke-width="{STROKE_WIDTHS["connector"]}"{dash}/>'
        )

    head_points = _points(msg.head.points)
    if msg.head.filled:
        parts.append(f'<polygon points="{head_points}" fill="{stroke}"/>')
    else:
        parts.append(
            f'<polyline points="{head_points}" fill="none" stroke="{stroke}" '
            f'stroke-width="{STROKE_WIDTHS["connector"]}"/>'
        )

    parts.append(_render_label(msg.label, msg.color, font, size))
    return "\n".join(parts)


def _render_label(label: LabelPlacement, color: str, font: str, size: str) -> str:
    text = _escape_xml(label.text)
    if label.pill is not None:
        pill = label.pill
        return (
            f'<rect x="{fmt(pill.x)}" y="{fmt(pill.y)}" width="{fmt(pill.width)}" '
            f'height="{fmt(pill.height)}" rx="{fmt(pill.radius)}" fill="{color}"/>\n'
            f'<text x="{fmt(label.x)}" y="{fmt(label.y)}" text-anchor="middle" '
            f'dominant-baseline="middle" font-family="{font}" font-size="{size}" '
            f'font-weight="{FONT_WEIGHTS["pill_label"]}" '
            f'fill="{NEUTRAL["on_color"]}">{text}</text>'
        )

    fill = NEUTRAL["text"]
    if label.anchor == "middle":
        return (
            f'<text x="{fmt(label.x)}" y="{fmt(label.y)}" text-anchor="middle" '
            f'font-family="{font}" font-size="{size}" fill="{fill}">{text}</text>'
        )
    return (
        f'<text x="{fmt(label.x)}" y="{fmt(label.y)}" dominant-baseline="middle" '
        f'font-family="{font}" font-size="{size}" fill="{fill}">{text}</text>'
    )


def _render_marker(marker: StepMarker, font: str, style: StyleOptions) -> str:
    """Step numeral: in a filled circle when numbers are colored, bare otherwise."""
    x = fmt(marker.x)
    y = fmt(marker.y)
    if style.colored_numbers:
        return (
            f'<circle cx="{x}" cy="{y}" r="{fmt(marker.radius)}" fill="{marker.color}"/>\n'
            f'<text x="{x}" y="{fmt(marker.y + 1)}" text-anchor="middle" '
            f'dominant-baseline="middle" font-family="{font}" '
            f'font-size="{FONT_SIZES["step_marker"]}" font-weight="{FONT_WEIGHTS["step"]}" '
            f'fill="{NEUTRAL["on_color"]}">{marker.numeral}</text>'
        )
    return (
        f'<text x="{x}" y="{fmt(marker.y + 1)}" text-anchor="middle" '
        f'dominant-baseline="middle" font-family="{font}" '
        f'font-size="{FONT_SIZES["step_plain"]}" font-weight="{FONT_WEIGHTS["step"]}" '
        f'fill="{NEUTRAL["on_color"]}">{marker.numeral}</text>'
    )


# ============================================================================
# Utilities
# ============================================================================


def _points(points: tuple[Point, ...]) -> str:
    return " ".join(f"{fmt(p.x)},{fmt(p.y)}" for p in points)


def _escape_xml(text: str) -> str:
    """Escape special XML characters in text content.

    Control characters other than tab, newline and carriage return are not
    allowed in XML 1.0 and are dropped.
    """
    return (
        _XML_INVALID_RE.sub("", text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )
