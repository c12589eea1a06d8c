from __future__ import annotations

from typing import Dict, Optional, Tuple

from scoretime.musicxml.errors import CursorUnderflow

StreamKey = Tuple[int, int]


class Cursor:
    """Time position for one part, in ticks of the part's divisions.

    MusicXML keeps a single insertion point per part: notes advance it and
    ``backup``/``forward`` move it so that several voices and staves can
    share a measure. Alongside that point the cursor remembers where each
    (voice, staff) stream last ended.
    """

    def __init__(self) -> None:
        self._position = 0
        self._last_start: Optional[int] = None
        self._streams: Dict[StreamKey, int] = {}

    def position(self) -> int:
        return self._position

    def advance(self, duration: int) -> int:
        self._position += duration
        return self._position

    def rewind(self, duration: int) -> int:
        if duration > self._position:
            raise CursorUnderflow(
                element="backup",
                position=self._position,
                rewind_by=duration,
            )
        self._position -= duration
        return self._position

    def reset(self) -> None:
        self._position = 0
        self._last_start = None
        self._streams.clear()

    def place(self, duration: int, voice: int, staff: int, *, chord: bool = False) -> int:
        """Place a note and return its start tick.

        A chord member starts with the preceding note and only moves the
        cursor when it sounds past the current position.
        """
        if chord and self._last_start is not None:
            start = self._last_start
            overhang = start + duration - self._position
            if overhang > 0:
                self.advance(overhang)
        else:
            start = self._position
            self.advance(duration)
        self._last_start = start
        key = (voice, staff)
        self._streams[key] = max(self._streams.get(key, 0), start + duration)
        return start

    def stream_position(self, voice: int, staff: int) -> int:
        """Return the tick where the (voice, staff) stream last ended, 0 if unseen."""
        return self._streams.get((voice, staff), 0)

    def stream_positions(self) -> Dict[StreamKey, int]:
        return dict(self._streams)
