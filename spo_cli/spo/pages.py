"""Modern page canvas model."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

DEFAULT_SECTION_FACTOR = 12
EMPTY_CONTROL_TYPE = 0


@dataclass(slots=True)
class CanvasColumn:
    """One column of a page section."""

    order: int
    factor: int = DEFAULT_SECTION_FACTOR
    controls: list[dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True)
class CanvasSection:
    """A horizontal section of a page; ``order`` starts at 1."""

    order: int
    columns: list[CanvasColumn] = field(default_factory=list)


@dataclass(slots=True)
class ClientSidePage:
    name: str
    sections: list[CanvasSection] = field(default_factory=list)

    def section(self, order: int) -> CanvasSection | None:
        for section in self.sections:
            if section.order == order:
                return section
        return None


def parse_canvas(name: str, canvas_content: str | None) -> ClientSidePage:
    """Build a page from the ``CanvasContent1`` JSON of a modern page.

    Controls are grouped by ``position.zoneIndex`` into sections and by
    ``position.sectionIndex`` into columns. Placeholder entries of an empty
    column create the column without counting as a control. Entries without a
    position (page settings) are ignored.
    """
    if not canvas_content:
        return ClientSidePage(name=name)
    try:
        controls = json.loads(canvas_content)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Page {name} has invalid canvas content: {exc}") from exc
    if not isinstance(controls, list):
        raise ValueError(f"Page {name} has invalid canvas content")

    zones: dict[float, dict[int, CanvasColumn]] = {}
    for control in controls:
        if not isinstance(control, dict):
            continue
        position = control.get("position")
        if not isinstance(position, dict) or "zoneIndex" not in position:
            continue
        try:
            zone_index = float(position["zoneIndex"])
            column_index = int(position.get("sectionIndex", 1))
            factor = int(position.get("sectionFactor", DEFAULT_SECTION_FACTOR))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Page {name} has invalid canvas content: {exc}") from exc
        columns = zones.setdefault(zone_index, {})
        column = columns.get(column_index)
        if column is None:
            column = CanvasColumn(order=column_index, factor=factor)
            columns[column_index] = column
        if control.get("controlType") != EMPTY_CONTROL_TYPE:
            column.controls.append(control)

    sections = [
        CanvasSection(order=order, columns=[columns[key] for key in sorted(columns)])
        for order, (_, columns) in enumerate(sorted(zones.items()), start=1)
    ]
    return ClientSidePage(name=name, sections=sections)


def column_information(column: CanvasColumn, *, json_output: bool) -> dict[str, Any]:
    """Describe ``column`` for output; JSON output also lists the ids of its controls."""
    info: dict[str, Any] = {
        "factor": column.factor,
        "order": column.order,
        "controls": len(column.controls),
    }
    if json_output:
        info["controlIds"] = [
            control.get("id") for control in column.controls if control.get("id") is not None
        ]
    return info
