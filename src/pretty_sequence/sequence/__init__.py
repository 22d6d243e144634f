from __future__ import annotations

from .types import (
    SequenceDiagram,
    Participant,
    Message,
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
from .parser import (
    classify_line,
    parse_sequence_diagram,
    build_diagram,
    DiagramBuilder,
    Skip,
    Title,
    ParticipantDecl,
    MessageLine,
    Unrecognized,
)
from .layout import layout_sequence_diagram
from .renderer import render_sequence_svg
from .serialize import diagram_to_dict, diagram_to_json, diagram_to_dsl

__all__ = [
    "SequenceDiagram",
    "Participant",
    "Message",
    "PositionedSequenceDiagram",
    "PositionedTitle",
    "PositionedParticipant",
    "Lifeline",
    "PositionedMessage",
    "ArrowHead",
    "Pill",
    "LabelPlacement",
    "StepMarker",
    "Point",
    "classify_line",
    "parse_sequence_diagram",
    "build_diagram",
    "DiagramBuilder",
    "Skip",
    "Title",
    "ParticipantDecl",
    "MessageLine",
    "Unrecognized",
    "layout_sequence_diagram",
    "render_sequence_svg",
    "diagram_to_dict",
    "diagram_to_json",
    "diagram_to_dsl",
]
