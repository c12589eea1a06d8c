from __future__ import annotations

from typing import Dict, Optional
from xml.etree.ElementTree import Element

from scoretime.musicxml.errors import InvalidDivisions, MissingDivisions
from scoretime.musicxml.tree import child_text, children


def parse_divisions(value: str) -> int:
    """Parse a divisions value, which must be a positive integer."""
    try:
        divisions = int(value)
    except ValueError as exc:
        raise InvalidDivisions(detail=f"divisions_not_an_integer: {value!r}", element="divisions") from exc
    if divisions <= 0:
        raise InvalidDivisions(detail=f"divisions_not_positive: {divisions}", element="divisions")
    return divisions


def read_attributes_divisions(attributes_elem: Element) -> Optional[int]:
    value = child_text(attributes_elem, "divisions")
    if value is None:
        return None
    return parse_divisions(value)


class DivisionsTable:
    """Current divisions per part identifier for one conversion run.

    An update only affects durations read afterwards; ticks that were
    already computed are never rescaled.
    """

    def __init__(self) -> None:
        self._by_part: Dict[str, int] = {}

    def initial_divisions(self, part_id: str, part_elem: Element) -> int:
        """Resolve divisions from the first measure's ``attributes/divisions``."""
        measures = children(part_elem, "measure")
        if measures:
            for attributes_elem in children(measures[0], "attributes"):
                divisions = read_attributes_divisions(attributes_elem)
                if divisions is not None:
                    self._by_part[part_id] = divisions
                    return divisions
        measure_number = measures[0].attrib.get("number") if measures else None
        raise MissingDivisions(part_id=part_id, measure_number=measure_number, element="attributes")

    def maybe_update(self, part_id: str, divisions: Optional[int]) -> bool:
        """Overwrite the part's entry when an attributes change carries divisions."""
        if divisions is None:
            return False
        changed = self._by_part.get(part_id) != divisions
        self._by_part[part_id] = divisions
        return changed

    def get(self, part_id: str) -> int:
        return self._by_part[part_id]

    def __contains__(self, part_id: object) -> bool:
        return part_id in self._by_part

    def as_dict(self) -> Dict[str, int]:
        return dict(self._by_part)
