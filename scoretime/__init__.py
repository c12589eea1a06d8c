"""MusicXML partwise scores to timed note and rest events."""

__version__ = "0.1.0"
