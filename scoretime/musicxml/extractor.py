from __future__ import annotations

from typing import Optional
from xml.etree.ElementTree import Element

from scoretime.musicxml.cursor import Cursor
from scoretime.musicxml.events import Event, NoteContent, NoteEvent, Rest
from scoretime.musicxml.pitch import parse_pitches
from scoretime.musicxml.readers import read_duration, read_staff, read_voice
from scoretime.musicxml.tree import has_child


def is_chord_member(note_elem: Element) -> bool:
    return has_child(note_elem, "chord")


def read_content(note_elem: Element) -> NoteContent:
    if has_child(note_elem, "rest"):
        return Rest()
    return Event(pitches=tuple(parse_pitches(note_elem)))


def extract_note(
    note_elem: Element,
    cursor: Cursor,
    *,
    part_id: str,
    divisions: int,
    measure_number: Optional[str] = None,
) -> NoteEvent:
    """Turn one ``note`` element into an event anchored at the cursor.

    Every field is read before the cursor moves, so a malformed note leaves
    the cursor where it was.
    """
    content = read_content(note_elem)
    duration = read_duration(note_elem)
    voice = read_voice(note_elem)
    staff = read_staff(note_elem)
    start_tick = cursor.place(duration, voice, staff, chord=is_chord_member(note_elem))
    return NoteEvent(
        part_id=part_id,
        voice=voice,
        staff=staff,
        start_tick=start_tick,
        duration=duration,
        content=content,
        divisions=divisions,
        measure_number=measure_number,
    )
