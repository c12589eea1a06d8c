from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union
from xml.etree.ElementTree import Element, ElementTree

from scoretime.musicxml.errors import (
    ConversionError,
    DuplicatePartIdentifier,
    MissingPartIdentifier,
)
from scoretime.config import ERROR_POLICIES
from scoretime.logging_utils import get_logger, summarize_payload
from scoretime.musicxml.cursor import StreamKey
from scoretime.musicxml.detect import detect_format, require_partwise
from scoretime.musicxml.dispatcher import PartState, dispatch_measure
from scoretime.musicxml.divisions import DivisionsTable
from scoretime.musicxml.events import EventSink, NoteEvent
from scoretime.musicxml.tree import attribute, children, load_document

logger = get_logger(__name__)


@dataclass(frozen=True)
class PartResult:
    """Outcome of one part: its events, or the error that stopped it."""

    part_id: str
    events: Tuple[NoteEvent, ...] = ()
    error: Optional[ConversionError] = None
    divisions: Optional[int] = None
    final_tick: int = 0
    stream_positions: Dict[StreamKey, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ConversionResult:
    format: str
    parts: Tuple[PartResult, ...]

    @property
    def ok(self) -> bool:
        return all(part.ok for part in self.parts)

    @property
    def events(self) -> List[NoteEvent]:
        """Events of every successful part, in part then document order."""
        return [event for part in self.parts for event in part.events]

    def part(self, part_id: str) -> PartResult:
        for part in self.parts:
            if part.part_id == part_id:
                return part
        raise KeyError(part_id)


def _part_ids(parts: Sequence[Element]) -> List[str]:
    """Resolve every part identifier up front so a bad one aborts before any output."""
    seen = set()
    part_ids = []
    for index, part_elem in enumerate(parts, start=1):
        part_id = attribute(part_elem, "id")
        if part_id is None:
            raise MissingPartIdentifier(detail=f"part_{index}_has_no_id", element="part")
        if part_id in seen:
            raise DuplicatePartIdentifier(part_id=part_id, element="part")
        seen.add(part_id)
        part_ids.append(part_id)
    return part_ids


def traverse_part(
    part_elem: Element,
    part_id: str,
    divisions: DivisionsTable,
    *,
    merge_chords: bool = True,
) -> PartState:
    """Walk one part's measures in order; raises on the first malformed item."""
    state = PartState(part_id=part_id, divisions=divisions, merge_chords=merge_chords)
    divisions.initial_divisions(part_id, part_elem)
    state.cursor.reset()
    for measure_elem in children(part_elem, "measure"):
        dispatch_measure(state, measure_elem)
    return state


def convert_document(
    document: Union[Element, ElementTree],
    sink: Optional[EventSink] = None,
    *,
    error_policy: str = "isolate",
    merge_chords: bool = True,
) -> ConversionResult:
    """Convert a parsed partwise MusicXML document into timed note events.

    Args:
        document: Parsed root (or tree) of the MusicXML document.
        sink: Called once per event. A part's events are handed over only
            after the whole part converted cleanly.
        error_policy: ``"isolate"`` records a failed part and moves on to the
            next one; ``"abort"`` raises the first part error.
        merge_chords: Fold ``<chord/>`` members into the preceding event.

    Returns:
        ConversionResult with one PartResult per part in document order.

    Raises:
        UnrecognizedFormat, UnsupportedFormat: root is not a partwise score.
        MissingPartIdentifier, DuplicatePartIdentifier: always abort the run.
        ConversionError: any part error when ``error_policy == "abort"``.
    """
    if error_policy not in ERROR_POLICIES:
        raise ValueError(f"error_policy must be one of {', '.join(ERROR_POLICIES)}; got '{error_policy}'.")
    detected = detect_format(document)
    score_root = require_partwise(detected)
    part_elems = children(score_root, "part")
    part_ids = _part_ids(part_elems)
    logger.info("convert start format=%s parts=%s", detected.format, len(part_ids))

    table = DivisionsTable()
    results: List[PartResult] = []
    for part_elem, part_id in zip(part_elems, part_ids):
        try:
            state = traverse_part(part_elem, part_id, table, merge_chords=merge_chords)
        except ConversionError as exc:
            exc.locate(part_id=part_id)
            if error_policy == "abort":
                raise
            logger.warning("part failed part=%s error=%s", part_id, exc.to_payload())
            results.append(
                PartResult(
                    part_id=part_id,
                    error=exc,
                    divisions=table.get(part_id) if part_id in table else None,
                )
            )
            continue
        if sink is not None:
            for event in state.events:
                sink(event)
        results.append(
            PartResult(
                part_id=part_id,
                events=tuple(state.events),
                divisions=table.get(part_id),
                final_tick=state.cursor.position(),
                stream_positions=state.cursor.stream_positions(),
            )
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "part done part=%s events=%s",
                part_id,
                summarize_payload([event.to_payload() for event in state.events]),
            )

    result = ConversionResult(format=detected.format, parts=tuple(results))
    logger.info(
        "convert done parts=%s failed=%s events=%s",
        len(results),
        sum(1 for part in results if not part.ok),
        len(result.events),
    )
    return result


def convert_musicxml(
    path: Union[str, Path],
    sink: Optional[EventSink] = None,
    *,
    error_policy: str = "isolate",
    merge_chords: bool = True,
) -> ConversionResult:
    """Load a .xml/.musicxml/.mxl file and convert it."""
    root = load_document(path)
    return convert_document(root, sink, error_policy=error_policy, merge_chords=merge_chords)
