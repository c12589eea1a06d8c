"""Readers for the integer fields of note, forward and backup elements."""

from __future__ import annotations

from typing import Optional
from xml.etree.ElementTree import Element

from scoretime.musicxml.errors import MissingDuration, MissingVoice, InvalidStaff
from scoretime.musicxml.tree import child_text, has_child, local_tag

DEFAULT_STAFF = 1


def _to_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def read_duration(elem: Element) -> int:
    """Return the element's duration in the current divisions unit.

    A grace note carries no ``duration``; it reads as 0 so it never moves
    the cursor.
    """
    tag = local_tag(elem.tag)
    value = child_text(elem, "duration")
    if value is None:
        if tag == "note" and has_child(elem, "grace"):
            return 0
        raise MissingDuration(element=tag)
    duration = _to_int(value)
    if duration is None or duration < 0:
        raise MissingDuration(detail=f"duration_invalid: {value!r}", element=tag)
    return duration


def read_voice(note_elem: Element) -> int:
    value = child_text(note_elem, "voice")
    if value is None:
        raise MissingVoice(element="note")
    voice = _to_int(value)
    if voice is None:
        raise MissingVoice(detail=f"voice_not_an_integer: {value!r}", element="note")
    return voice


def read_staff(note_elem: Element) -> int:
    value = child_text(note_elem, "staff")
    if value is None:
        return DEFAULT_STAFF
    staff = _to_int(value)
    if staff is None or staff < 1:
        raise InvalidStaff(detail=f"staff_invalid: {value!r}", element="note")
    return staff
