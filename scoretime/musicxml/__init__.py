from .events import Event, ListSink, NoteEvent, Rest
from .pitch import SpelledPitch
from .traversal import ConversionResult, PartResult, convert_document, convert_musicxml

__all__ = [
    "ConversionResult",
    "Event",
    "ListSink",
    "NoteEvent",
    "PartResult",
    "Rest",
    "SpelledPitch",
    "convert_document",
    "convert_musicxml",
]
