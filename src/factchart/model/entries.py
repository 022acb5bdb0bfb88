"""
Chart Entries (Data Model)
==========================
Immutable records describing what is drawn in a chart slot.

Classes:
    Element: One shape request (type name + raw options + optional transform).
    Space: Ordered list of elements (freedom space or constraint space).
    ChartEntry: The pair of spaces attached to one chart slot.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from factchart.model.chart_layout import slot_id
from factchart.model.geometry_primitives import is_finite_number, is_vector_like

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]


def _optional_vec3(data: Mapping[str, Any], key: str) -> Optional[Vec3]:
    value = data.get(key)
    if value is None:
        return None
    if not is_vector_like(value):
        logger.warning(f"Ignoring element {key} {value!r}: expected [x, y, z].")
        return None
    x, y, z = value
    return float(x), float(y), float(z)


@dataclass(frozen=True)
class Element:
    type: str
    options: Dict[str, Any] = field(default_factory=dict)
    position: Optional[Vec3] = None
    rotation: Optional[Vec3] = None  # Euler XYZ, radians

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Element:
        if not isinstance(data, Mapping):
            raise ValueError(f"Element must be an object, got {type(data).__name__}")
        type_name = data.get("type")
        if not isinstance(type_name, str) or not type_name:
            raise ValueError("Element is missing its 'type'")

        options = data.get("options") or {}
        if not isinstance(options, Mapping):
            logger.warning(f"Element '{type_name}' has non-object options; using defaults.")
            options = {}

        return cls(
            type=type_name,
            options=dict(options),
            position=_optional_vec3(data, "position"),
            rotation=_optional_vec3(data, "rotation"),
        )


@dataclass(frozen=True)
class Space:
    elements: Tuple[Element, ...] = ()

    def __iter__(self):
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Space:
        """Parse a space; malformed elements are skipped, not fatal."""
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            logger.warning(f"Ignoring space of type {type(data).__name__}: expected an object.")
            return cls()
        raw_elements = data.get("elements") or []
        if not isinstance(raw_elements, list):
            logger.warning("Ignoring space 'elements': expected a list.")
            return cls()
        elements = []
        for index, raw in enumerate(raw_elements):
            try:
                elements.append(Element.from_dict(raw))
            except ValueError as e:
                logger.warning(f"Skipping element #{index}: {e}")
        return cls(elements=tuple(elements))


@dataclass(frozen=True)
class ChartEntry:
    id: str
    dof: int
    row: int
    freedom_space: Space = field(default_factory=Space)
    constraint_space: Space = field(default_factory=Space)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChartEntry:
        """
        Build an entry from its JSON object.

        Raises:
            ValueError: If id/dof/row are missing or the id does not match
                "<dof>-DOF-<row>".
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Entry must be an object, got {type(data).__name__}")

        dof = data.get("dof")
        row = data.get("row")
        for name, value in (("dof", dof), ("row", row)):
            if not is_finite_number(value) or int(value) != value:
                raise ValueError(f"Entry field '{name}' must be an integer, got {value!r}")
        dof, row = int(dof), int(row)

        expected_id = slot_id(dof, row)
        entry_id = data.get("id", expected_id)
        if entry_id != expected_id:
            raise ValueError(f"Entry id '{entry_id}' does not match '{expected_id}'")

        return cls(
            id=entry_id,
            dof=dof,
            row=row,
            freedom_space=Space.from_dict(data.get("freedomSpace")),
            constraint_space=Space.from_dict(data.get("constraintSpace")),
        )
