from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from scoretime.musicxml.pitch import SpelledPitch


@dataclass(frozen=True)
class Rest:
    pass


@dataclass(frozen=True)
class Event:
    """Sounding content; more than one pitch makes a chord."""

    pitches: Tuple[SpelledPitch, ...] = field(default_factory=tuple)


NoteContent = Union[Rest, Event]


@dataclass(frozen=True)
class NoteEvent:
    part_id: str
    voice: int
    staff: int
    start_tick: int
    duration: int
    content: NoteContent
    divisions: int
    measure_number: Optional[str] = None

    @property
    def is_rest(self) -> bool:
        return isinstance(self.content, Rest)

    @property
    def pitches(self) -> Sequence[SpelledPitch]:
        if isinstance(self.content, Event):
            return self.content.pitches
        return ()

    @property
    def end_tick(self) -> int:
        return self.start_tick + self.duration

    def with_pitches(self, pitches: Sequence[SpelledPitch]) -> "NoteEvent":
        return replace(self, content=Event(pitches=tuple(pitches)))

    def to_payload(self) -> Dict[str, Any]:
        if isinstance(self.content, Rest):
            content: Dict[str, Any] = {"type": "rest"}
        else:
            content = {
                "type": "event",
                "pitches": [pitch.to_payload() for pitch in self.content.pitches],
            }
        return {
            "part_id": self.part_id,
            "voice": self.voice,
            "staff": self.staff,
            "start_tick": self.start_tick,
            "duration": self.duration,
            "divisions": self.divisions,
            "measure_number": self.measure_number,
            "content": content,
        }


EventSink = Callable[[NoteEvent], None]


class ListSink:
    """Sink that collects events in arrival order."""

    def __init__(self) -> None:
        self.events: List[NoteEvent] = []

    def __call__(self, event: NoteEvent) -> None:
        self.events.append(event)
