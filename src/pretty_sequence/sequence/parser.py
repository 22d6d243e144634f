from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Union

from .types import SequenceDiagram, Participant, Message, ArrowStyle
from ..theme import palette_color

# ============================================================================
# Sequence diagram parser
#
# Two stages:
#   1. classify_line() turns one trimmed line into a tagged LineKind.
#   2. DiagramBuilder folds the classified lines into a SequenceDiagram.
#
# Supported syntax:
#   sequenceDiagram / autonumber / %% comment / --- / ```   (ignored)
#   title: Checkout flow
#   participant A
#   participant CC as Claude Code [CLI]      -> label "Claude Code (CLI)"
#   A->>B: Solid arrow
#   A-->>B: Dashed arrow
#   A->B: / A-->B:                            (same styles, single head)
#   A->>B: 3. Explicit step number
#   A->>B: First line<br>second line          -> "First line second line"
#
# Parsing is permissive: lines that match no rule are dropped, never raised.
# ============================================================================

log = logging.getLogger(__name__)

_SKIP_RE = re.compile(r"^(%%|sequenceDiagram|autonumber|---|```)")
_TITLE_RE = re.compile(r"^title:\s*(.+)$", re.IGNORECASE)
_PARTICIPANT_RE = re.compile(r"^participant\s+(\S+)(?:\s+as\s+(.+))?$", re.IGNORECASE)
_MESSAGE_RE = re.compile(r"^(\w+)\s*(-->>|->>|-->|->)\s*(\w+):\s*(.*)$")

_BRACKET_RE = re.compile(r"\[(.+?)\]")
_LINE_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_STEP_PREFIX_RE = re.compile(r"^(\d+)\.\s+(.*)$", re.DOTALL)


# ============================================================================
# Line kinds
# ============================================================================


@dataclass(frozen=True, slots=True)
class Skip:
    pass


@dataclass(frozen=True, slots=True)
class Title:
    text: str


@dataclass(frozen=True, slots=True)
class ParticipantDecl:
    id: str
    # Raw text after "as", if any
    alias: str | None = None


@dataclass(frozen=True, slots=True)
class MessageLine:
    from_: str
    to: str
    arrow_token: str
    raw_text: str

    @property
    def arrow(self) -> ArrowStyle:
        # Only the dash prefix matters; ">>" vs ">" is cosmetic
        return "dashed" if self.arrow_token.startswith("--") else "solid"


@dataclass(frozen=True, slots=True)
class Unrecognized:
    line: str


LineKind = Union[Skip, Title, ParticipantDecl, MessageLine, Unrecognized]


# ============================================================================
# Classifier rules -- tried in order, first match wins
# ============================================================================


def _match_skip(line: str) -> LineKind | None:
    if not line or _SKIP_RE.match(line):
        return Skip()
    return None


def _match_title(line: str) -> LineKind | None:
    m = _TITLE_RE.match(line)
    if m:
        return Title(text=m.group(1).strip())
    return None


def _match_participant(line: str) -> LineKind | None:
    m = _PARTICIPANT_RE.match(line)
    if m:
        return ParticipantDecl(id=m.group(1), alias=m.group(2))
    return None


def _match_message(line: str) -> LineKind | None:
    m = _MESSAGE_RE.match(line)
    if m:
        return MessageLine(
            from_=m.group(1),
            arrow_token=m.group(2),
            to=m.group(3),
            raw_text=m.group(4),
        )
    return None


RULES: tuple[Callable[[str], LineKind | None], ...] = (
    _match_skip,
    _match_title,
    _match_participant,
    _match_message,
)


def classify_line(line: str) -> LineKind:
    """Classify one source line. The line is trimmed first."""
    line = line.strip()
    for rule in RULES:
        kind = rule(line)
        if kind is not None:
            return kind
    return Unrecognized(line=line)


# ============================================================================
# Text helpers
# ============================================================================


def display_label(text: str) -> str:
    """Render bracketed annotations as parenthesized text: "CLI [x]" -> "CLI (x)"."""
    return _BRACKET_RE.sub(r"(\1)", text)


def split_display_step(raw_text: str) -> tuple[str, int | None]:
    """Collapse <br> markup and split off a leading "N. " step prefix."""
    cleaned = _LINE_BREAK_RE.sub(" ", raw_text).strip()
    m = _STEP_PREFIX_RE.match(cleaned)
    if m:
        return m.group(2).strip(), int(m.group(1))
    return cleaned, None


# ============================================================================
# Builder
# ============================================================================


class DiagramBuilder:
    """Accumulates classified lines into a SequenceDiagram.

    Participants register on first reference and keep their column and color
    for the lifetime of the diagram. A later ``participant X as Label`` only
    replaces the label.
    """

    def __init__(self) -> None:
        self._participants: list[Participant] = []
        self._index: dict[str, int] = {}
        self._messages: list[Message] = []
        self._title: str | None = None

    def feed(self, kind: LineKind) -> DiagramBuilder:
        if isinstance(kind, Title):
            self._title = kind.text
        elif isinstance(kind, ParticipantDecl):
            self._declare(kind.id, kind.alias)
        elif isinstance(kind, MessageLine):
            self._add_message(kind)
        elif isinstance(kind, Unrecognized):
            log.debug("Ignoring unrecognized line: %r", kind.line)
        return self

    def build(self) -> SequenceDiagram:
        return SequenceDiagram(
            participants=tuple(self._participants),
            messages=tuple(self._messages),
            title=self._title,
        )

    def _ensure(self, id_: str, alias: str | None = None) -> None:
        """Register a participant if it has not been seen yet."""
        if id_ in self._index:
            return
        self._index[id_] = len(self._participants)
        self._participants.append(
            Participant(
                id=id_,
                label=display_label(alias if alias is not None else id_),
                color=palette_color(len(self._participants)),
            )
        )

    def _declare(self, id_: str, alias: str | None) -> None:
        if id_ not in self._index:
            self._ensure(id_, alias)
            return
        if alias is None:
            return
        # Re-declaration with an alias: last label wins, column and color stay
        i = self._index[id_]
        self._participants[i] = replace(self._participants[i], label=display_label(alias))

    def _add_message(self, line: MessageLine) -> None:
        self._ensure(line.from_)
        self._ensure(line.to)
        text, display_step = split_display_step(line.raw_text)
        self._messages.append(
            Message(
                from_=line.from_,
                to=line.to,
                text=text,
                arrow=line.arrow,
                step=len(self._messages) + 1,
                display_step=display_step,
            )
        )


def build_diagram(kinds: Iterable[LineKind]) -> SequenceDiagram:
    builder = DiagramBuilder()
    for kind in kinds:
        builder.feed(kind)
    return builder.build()


def parse_sequence_diagram(text: str) -> SequenceDiagram:
    """Parse DSL text into a SequenceDiagram. Never raises on malformed lines."""
    return build_diagram(classify_line(line) for line in text.split("\n"))
