from __future__ import annotations

import json
from typing import Any

from .types import SequenceDiagram

# ============================================================================
# Diagram export
#
# JSON keys follow the exported diagram file format ("from", "displayStep"),
# optional fields are omitted when unset.
# ============================================================================

_ARROW_TOKENS = {
    "solid": "->>",
    "dashed": "-->>",
}


def diagram_to_dict(diagram: SequenceDiagram) -> dict[str, Any]:
    data: dict[str, Any] = {
        "participants": [
            {"id": p.id, "label": p.label, "color": p.color}
            for p in diagram.participants
        ],
        "messages": [],
    }
    for m in diagram.messages:
        entry: dict[str, Any] = {
            "from": m.from_,
            "to": m.to,
            "text": m.text,
            "arrow": m.arrow,
            "step": m.step,
        }
        if m.display_step is not None:
            entry["displayStep"] = m.display_step
        data["messages"].append(entry)
    if diagram.title is not None:
        data["title"] = diagram.title
    return data


def diagram_to_json(diagram: SequenceDiagram, indent: int | None = 2) -> str:
    return json.dumps(diagram_to_dict(diagram), indent=indent, ensure_ascii=False)


def diagram_to_dsl(diagram: SequenceDiagram) -> str:
    """Write a diagram back as DSL text.

    Every participant is declared up front so columns keep their order, and
    explicit step numbers are written back as "N. " prefixes.
    """
    lines = ["sequenceDiagram"]
    if diagram.title is not None:
        lines.append(f"    title: {diagram.title}")
    if diagram.participants:
        lines.append("")
    for p in diagram.participants:
        if p.label == p.id:
            lines.append(f"    participant {p.id}")
        else:
            lines.append(f"    participant {p.id} as {p.label}")
    if diagram.messages:
        lines.append("")
    for m in diagram.messages:
        prefix = f"{m.display_step}. " if m.display_step is not None else ""
        lines.append(f"    {m.from_}{_ARROW_TOKENS[m.arrow]}{m.to}: {prefix}{m.text}")
    return "\n".join(lines) + "\n"
