from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# ============================================================================
# Sequence diagram types
#
# Models the parsed and positioned representations of a sequence diagram.
# Both are immutable: a new parse or a new configuration yields new objects.
# ============================================================================

ArrowStyle = Literal["solid", "dashed"]
TextAnchor = Literal["start", "middle"]

DEFAULT_TITLE = "Sequence Diagram"

# ============================================================================
# Parsed sequence diagram -- logical structure from the DSL text
# ============================================================================


@dataclass(frozen=True, slots=True)
class Participant:
    id: str
    label: str
    # Palette color assigned on first reference
    color: str


@dataclass(frozen=True, slots=True)
class Message:
    from_: str
    to: str
    text: str
    arrow: ArrowStyle
    # 1-based position in source order; drives ordering and row placement
    step: int
    # Optional user-supplied numeral shown instead of `step`
    display_step: int | None = None

    @property
    def shown_step(self) -> int:
        return self.display_step if self.display_step is not None else self.step

    @property
    def is_self(self) -> bool:
        return self.from_ == self.to


@dataclass(frozen=True, slots=True)
class SequenceDiagram:
    """Parsed sequence diagram -- logical structure from the DSL text."""
    # Declaration order is column order
    participants: tuple[Participant, ...] = ()
    # Source order is vertical order
    messages: tuple[Message, ...] = ()
    title: str | None = None

    @property
    def display_title(self) -> str:
        return self.title if self.title is not None else DEFAULT_TITLE

    def participant(self, id_: str) -> Participant | None:
        for p in self.participants:
            if p.id == id_:
                return p
        return None


# ============================================================================
# Positioned sequence diagram -- ready for SVG rendering
# ============================================================================


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class PositionedTitle:
    text: str
    # Center of the title band
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class PositionedParticipant:
    id: str
    label: str
    color: str
    # Center x of the box
    x: float
    # Top y of the box
    y: float
    width: float
    height: float
    radius: float


@dataclass(frozen=True, slots=True)
class Lifeline:
    """Vertical line between the top and bottom participant boxes."""
    participant_id: str
    color: str
    x: float
    top_y: float
    bottom_y: float


@dataclass(frozen=True, slots=True)
class ArrowHead:
    # Filled triangle for solid arrows, open chevron for dashed ones
    filled: bool
    points: tuple[Point, ...]


@dataclass(frozen=True, slots=True)
class Pill:
    x: float
    y: float
    width: float
    height: float

    @property
    def radius(self) -> float:
        return self.height / 2


@dataclass(frozen=True, slots=True)
class LabelPlacement:
    text: str
    x: float
    y: float
    anchor: TextAnchor
    # Background pill; None for plain inline text
    pill: Pill | None = None


@dataclass(frozen=True, slots=True)
class PositionedMessage:
    from_: str
    to: str
    text: str
    arrow: ArrowStyle
    step: int
    # Sender's palette color
    color: str
    # Row y, a function of `step` only
    y: float
    # Stroke vertices: two points for a straight arrow, four for a self-loop
    points: tuple[Point, ...]
    head: ArrowHead
    label: LabelPlacement
    is_self: bool
    # +1 when the destination is right of the source, -1 when left, 0 for self
    direction: int


@dataclass(frozen=True, slots=True)
class StepMarker:
    step: int
    numeral: str
    color: str
    x: float
    y: float
    radius: float
    # True for the copy pinned to the left edge of the canvas
    pinned: bool


@dataclass(frozen=True, slots=True)
class PositionedSequenceDiagram:
    width: float
    height: float
    # Font size for participant and message labels
    text_size: float = 13
    title: PositionedTitle | None = None
    # Boxes above the first message row
    header: tuple[PositionedParticipant, ...] = ()
    # Boxes below the last message row
    footer: tuple[PositionedParticipant, ...] = ()
    lifelines: tuple[Lifeline, ...] = ()
    messages: tuple[PositionedMessage, ...] = ()
    markers: tuple[StepMarker, ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.header) == 0
