from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union
from xml.etree.ElementTree import Element

from scoretime.musicxml.errors import ConversionError
from scoretime.logging_utils import get_logger
from scoretime.musicxml.cursor import Cursor
from scoretime.musicxml.divisions import DivisionsTable, read_attributes_divisions
from scoretime.musicxml.events import Event, NoteEvent
from scoretime.musicxml.extractor import extract_note, is_chord_member
from scoretime.musicxml.readers import read_duration
from scoretime.musicxml.tree import attribute, iter_children, local_tag

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttributesChange:
    divisions: Optional[int]


@dataclass(frozen=True)
class Backup:
    duration: int


@dataclass(frozen=True)
class Forward:
    duration: int


@dataclass(frozen=True)
class NoteItem:
    element: Element


MeasureItem = Union[AttributesChange, Backup, Forward, NoteItem]


def measure_number(measure_elem: Element, ordinal: int) -> str:
    return attribute(measure_elem, "number") or str(ordinal)


def iter_measure_items(measure_elem: Element) -> Iterator[MeasureItem]:
    """Yield a measure's recognized children in document order.

    Items are read lazily so that an ``attributes`` change is applied
    before any later sibling is interpreted.
    """
    for node in iter_children(measure_elem):
        tag = local_tag(node.tag)
        if tag == "note":
            yield NoteItem(element=node)
        elif tag == "backup":
            yield Backup(duration=read_duration(node))
        elif tag == "forward":
            yield Forward(duration=read_duration(node))
        elif tag == "attributes":
            yield AttributesChange(divisions=read_attributes_divisions(node))


@dataclass
class PartState:
    """Mutable traversal state for one part, owned by the traversal driver."""

    part_id: str
    divisions: DivisionsTable
    cursor: Cursor = field(default_factory=Cursor)
    events: List[NoteEvent] = field(default_factory=list)
    merge_chords: bool = True
    measures_read: int = 0


def _merge_into_previous(state: PartState, event: NoteEvent) -> bool:
    """Fold a chord member into the preceding event when they describe one chord."""
    if not state.events or event.is_rest:
        return False
    previous = state.events[-1]
    if not isinstance(previous.content, Event):
        return False
    if (
        previous.start_tick != event.start_tick
        or previous.voice != event.voice
        or previous.staff != event.staff
        or previous.duration != event.duration
    ):
        return False
    state.events[-1] = previous.with_pitches(tuple(previous.pitches) + tuple(event.pitches))
    return True


def dispatch_item(state: PartState, item: MeasureItem, number: str) -> None:
    if isinstance(item, AttributesChange):
        if state.divisions.maybe_update(state.part_id, item.divisions):
            logger.debug(
                "divisions change part=%s measure=%s divisions=%s",
                state.part_id,
                number,
                item.divisions,
            )
    elif isinstance(item, Backup):
        state.cursor.rewind(item.duration)
    elif isinstance(item, Forward):
        state.cursor.advance(item.duration)
    elif isinstance(item, NoteItem):
        event = extract_note(
            item.element,
            state.cursor,
            part_id=state.part_id,
            divisions=state.divisions.get(state.part_id),
            measure_number=number,
        )
        if state.merge_chords and is_chord_member(item.element) and _merge_into_previous(state, event):
            return
        state.events.append(event)


def dispatch_measure(state: PartState, measure_elem: Element) -> None:
    """Route each measure item to the divisions table, the cursor or the extractor."""
    state.measures_read += 1
    number = measure_number(measure_elem, state.measures_read)
    try:
        for item in iter_measure_items(measure_elem):
            dispatch_item(state, item, number)
    except ConversionError as exc:
        exc.locate(part_id=state.part_id, measure_number=number)
        raise
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "measure done part=%s measure=%s cursor=%s events=%s",
            state.part_id,
            number,
            state.cursor.position(),
            len(state.events),
        )
