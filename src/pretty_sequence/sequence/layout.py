from __future__ import annotations

import logging

from .types import (
    SequenceDiagram,
    Message,
    Participant,
    PositionedSequenceDiagram,
    PositionedTitle,
    PositionedParticipant,
    Lifeline,
    PositionedMessage,
    ArrowHead,
    Pill,
    LabelPlacement,
    StepMarker,
    Point,
)
from ..types import StyleOptions, LayoutMetrics, DEFAULT_STYLE, DEFAULT_LAYOUT
from ..styles import (
    TextMeasurer,
    DEFAULT_MEASURER,
    ARROW_HEAD,
    SELF_LOOP,
    LABEL_PILL,
    STEP_MARKER,
)

# ============================================================================
# Sequence diagram layout engine
#
# Fixed-grid timeline layout: one column per participant, one row per message.
#
# Vertical bands, top to bottom:
#   title | top pad | header boxes | v pad | rows... | v pad | footer boxes | bottom pad
#
# Rows never grow with their label; long labels may overflow the row.
# ============================================================================

log = logging.getLogger(__name__)

SEQ = {
    # Height of the title band
    "title_height": 38,
    # Space between the title band and the header boxes
    "top_pad": 66,
    # Space below the footer boxes
    "bottom_pad": 66,
    # Space between the boxes and the first/last message row
    "row_pad": 44,
    # Participant box corner radius
    "box_radius": 6,
    # Label baseline offset above a cross-participant line (plain text)
    "plain_label_lift": 8,
}


class _Grid:
    """Coordinate system shared by every element of one layout pass."""

    def __init__(self, diagram: SequenceDiagram, metrics: LayoutMetrics) -> None:
        self.metrics = metrics
        self.box_width = metrics.box_width
        self.box_height = metrics.box_height
        self.columns = {p.id: i for i, p in enumerate(diagram.participants)}

        n = len(diagram.participants)
        m = len(diagram.messages)
        self.width = 2 * metrics.margin + (n - 1) * metrics.spacing + self.box_width
        self.header_y = SEQ["title_height"] + SEQ["top_pad"]
        self.height = (
            self.header_y
            + self.box_height
            + SEQ["row_pad"]
            + m * metrics.step_height
            + SEQ["row_pad"]
            + self.box_height
            + SEQ["bottom_pad"]
        )
        self.footer_y = self.height - SEQ["bottom_pad"] - self.box_height

    def column_x(self, index: int) -> float:
        return self.metrics.margin + self.box_width / 2 + index * self.metrics.spacing

    def participant_x(self, id_: str) -> float:
        return self.column_x(self.columns.get(id_, 0))

    def row_y(self, step: int) -> float:
        """Row y for a sequence index. Display steps never move a row."""
        return (
            self.header_y
            + self.box_height
            + SEQ["row_pad"]
            + (step - 1) * self.metrics.step_height
        )


def layout_sequence_diagram(
    diagram: SequenceDiagram,
    style: StyleOptions | None = None,
    metrics: LayoutMetrics | None = None,
    measurer: TextMeasurer | None = None,
) -> PositionedSequenceDiagram:
    """Lay out a parsed sequence diagram.

    Returns a fully positioned diagram in natural (unscaled) units. A diagram
    without participants yields an empty result with zero size.
    """
    style = style or DEFAULT_STYLE
    metrics = metrics or DEFAULT_LAYOUT
    measurer = measurer or DEFAULT_MEASURER

    if len(diagram.participants) == 0:
        return PositionedSequenceDiagram(width=0, height=0)

    grid = _Grid(diagram, metrics)
    colors = {p.id: p.color for p in diagram.participants}

    title = PositionedTitle(
        text=diagram.display_title,
        x=grid.width / 2,
        y=SEQ["title_height"] / 2 + 6,
    )

    header = tuple(_box(grid, i, p, grid.header_y) for i, p in enumerate(diagram.participants))
    footer = tuple(_box(grid, i, p, grid.footer_y) for i, p in enumerate(diagram.participants))

    lifelines = tuple(
        Lifeline(
            participant_id=p.id,
            color=p.color,
            x=grid.column_x(i),
            top_y=grid.header_y + grid.box_height,
            bottom_y=grid.footer_y,
        )
        for i, p in enumerate(diagram.participants)
    )

    messages: list[PositionedMessage] = []
    markers: list[StepMarker] = []
    for msg in diagram.messages:
        color = colors.get(msg.from_, diagram.participants[0].color)
        if msg.is_self:
            positioned = _self_message(grid, msg, color, style, measurer)
        else:
            positioned = _cross_message(grid, msg, color, style, measurer)
        messages.append(positioned)
        markers.extend(_step_markers(grid, msg, color))

    log.debug(
        "Laid out %d participants, %d messages on a %sx%s canvas",
        len(diagram.participants),
        len(diagram.messages),
        grid.width,
        grid.height,
    )

    return PositionedSequenceDiagram(
        width=grid.width,
        height=grid.height,
        text_size=metrics.text_size,
        title=title,
        header=header,
        footer=footer,
        lifelines=lifelines,
        messages=tuple(messages),
        markers=tuple(markers),
    )


# ============================================================================
# Element layout
# ============================================================================


def _box(grid: _Grid, index: int, p: Participant, y: float) -> PositionedParticipant:
    return PositionedParticipant(
        id=p.id,
        label=p.label,
        color=p.color,
        x=grid.column_x(index),
        y=y,
        width=grid.box_width,
        height=grid.box_height,
        radius=SEQ["box_radius"],
    )


def _pill(text: str, metrics: LayoutMetrics, measurer: TextMeasurer) -> tuple[float, float]:
    """Pill (width, height) sized from the estimated text width."""
    height = metrics.text_size + LABEL_PILL["pad_y"]
    width = max(
        LABEL_PILL["min_width"],
        measurer.measure(text, metrics.text_size) + LABEL_PILL["pad_x"],
    )
    return width, height


def _self_message(
    grid: _Grid,
    msg: Message,
    color: str,
    style: StyleOptions,
    measurer: TextMeasurer,
) -> PositionedMessage:
    """Right-angle loop out of and back into the same lifeline."""
    x = grid.participant_x(msg.from_)
    y = grid.row_y(msg.step)
    loop_w = SELF_LOOP["width"]
    loop_h = SELF_LOOP["height"]
    head_len = ARROW_HEAD["length"]
    head_half = ARROW_HEAD["half_height"]

    points = (
        Point(x, y),
        Point(x + loop_w, y),
        Point(x + loop_w, y + loop_h),
        Point(x, y + loop_h),
    )
    # Head at the return point, pointing back at the lifeline
    head = ArrowHead(
        filled=True,
        points=(
            Point(x, y + loop_h),
            Point(x + head_len, y + loop_h - head_half),
            Point(x + head_len, y + loop_h + head_half),
        ),
    )

    label_x = x + loop_w + LABEL_PILL["self_gap"]
    mid_y = y + loop_h / 2
    if style.colored_text:
        pill_w, pill_h = _pill(msg.text, grid.metrics, measurer)
        pill = Pill(x=label_x, y=mid_y - pill_h / 2, width=pill_w, height=pill_h)
        label = LabelPlacement(
            text=msg.text,
            x=pill.x + pill_w / 2,
            y=pill.y + pill_h / 2 + 1,
            anchor="middle",
            pill=pill,
        )
    else:
        label = LabelPlacement(text=msg.text, x=label_x, y=mid_y + 1, anchor="start")

    return PositionedMessage(
        from_=msg.from_,
        to=msg.to,
        text=msg.text,
        arrow=msg.arrow,
        step=msg.step,
        color=color,
        y=y,
        points=points,
        head=head,
        label=label,
        is_self=True,
        direction=0,
    )


def _cross_message(
    grid: _Grid,
    msg: Message,
    color: str,
    style: StyleOptions,
    measurer: TextMeasurer,
) -> PositionedMessage:
    """Horizontal arrow between two lifelines, head on the destination side."""
    fx = grid.participant_x(msg.from_)
    tx = grid.participant_x(msg.to)
    y = grid.row_y(msg.step)
    direction = 1 if tx > fx else -1
    head_len = ARROW_HEAD["length"]
    head_half = ARROW_HEAD["half_height"]

    # The line stops where the head starts
    back_x = tx - direction * head_len
    points = (Point(fx, y), Point(back_x, y))
    if msg.arrow == "solid":
        head = ArrowHead(
            filled=True,
            points=(Point(tx, y), Point(back_x, y - head_half), Point(back_x, y + head_half)),
        )
    else:
        head = ArrowHead(
            filled=False,
            points=(Point(back_x, y - head_half), Point(tx, y), Point(back_x, y + head_half)),
        )

    mid_x = (fx + tx) / 2
    if style.colored_text:
        pill_w, pill_h = _pill(msg.text, grid.metrics, measurer)
        pill = Pill(
            x=mid_x - pill_w / 2,
            y=y - pill_h - LABEL_PILL["gap"],
            width=pill_w,
            height=pill_h,
        )
        label = LabelPlacement(
            text=msg.text,
            x=mid_x,
            y=pill.y + pill_h / 2 + 1,
            anchor="middle",
            pill=pill,
        )
    else:
        label = LabelPlacement(
            text=msg.text, x=mid_x, y=y - SEQ["plain_label_lift"], anchor="middle"
        )

    return PositionedMessage(
        from_=msg.from_,
        to=msg.to,
        text=msg.text,
        arrow=msg.arrow,
        step=msg.step,
        color=color,
        y=y,
        points=points,
        head=head,
        label=label,
        is_self=False,
        direction=direction,
    )


def _step_markers(grid: _Grid, msg: Message, color: str) -> tuple[StepMarker, StepMarker]:
    """One marker on the sender's lifeline, one pinned to the left edge."""
    y = grid.row_y(msg.step)
    numeral = str(msg.shown_step)
    radius = STEP_MARKER["radius"]
    return (
        StepMarker(
            step=msg.step,
            numeral=numeral,
            color=color,
            x=grid.participant_x(msg.from_),
            y=y,
            radius=radius,
            pinned=False,
        ),
        StepMarker(
            step=msg.step,
            numeral=numeral,
            color=color,
            x=STEP_MARKER["pinned_x"],
            y=y,
            radius=radius,
            pinned=True,
        ),
    )
