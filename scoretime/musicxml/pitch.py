from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List
from xml.etree.ElementTree import Element

from music21 import pitch as m21pitch

from scoretime.musicxml.errors import InvalidPitch
from scoretime.musicxml.tree import child_text, children


@dataclass(frozen=True)
class SpelledPitch:
    """A pitch as written: letter step, semitone alteration and octave."""

    step: str
    alter: int
    octave: int

    @property
    def name(self) -> str:
        """Pitch name with octave in music21 spelling, e.g. ``C#4`` or ``B-3``."""
        if self.alter >= 0:
            accidental = "#" * self.alter
        else:
            accidental = "-" * -self.alter
        return f"{self.step}{accidental}{self.octave}"

    def to_music21(self) -> m21pitch.Pitch:
        return m21pitch.Pitch(self.name)

    @property
    def midi(self) -> int:
        return int(self.to_music21().midi)

    @property
    def frequency(self) -> float:
        return float(self.to_music21().frequency)

    def to_payload(self) -> Dict[str, Any]:
        return {"step": self.step, "alter": self.alter, "octave": self.octave}


def _parse_int(value: str, field: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidPitch(detail=f"{field}_not_an_integer: {value!r}", element="pitch") from exc


def parse_pitch(pitch_elem: Element) -> SpelledPitch:
    """Read step, alter and octave from a ``pitch`` element.

    ``step`` is passed through verbatim; ``alter`` defaults to 0 when absent.
    """
    step = child_text(pitch_elem, "step")
    if step is None:
        raise InvalidPitch(detail="step_missing", element="pitch")
    octave_text = child_text(pitch_elem, "octave")
    if octave_text is None:
        raise InvalidPitch(detail="octave_missing", element="pitch")
    octave = _parse_int(octave_text, "octave")
    alter_text = child_text(pitch_elem, "alter")
    alter = _parse_int(alter_text, "alter") if alter_text is not None else 0
    return SpelledPitch(step=step, alter=alter, octave=octave)


def parse_pitches(note_elem: Element) -> List[SpelledPitch]:
    """Parse every ``pitch`` child of a note in document order."""
    return [parse_pitch(pitch_elem) for pitch_elem in children(note_elem, "pitch")]
