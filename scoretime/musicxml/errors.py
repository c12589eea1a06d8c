"""Shared error types for MusicXML conversion flows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional


@dataclass(eq=False)
class ConversionError(ValueError):
    """Base class for malformed-input and format errors raised during conversion."""

    kind: ClassVar[str] = "ConversionError"

    detail: str = "conversion_failed"
    part_id: Optional[str] = None
    measure_number: Optional[str] = None
    element: Optional[str] = None

    def locate(
        self,
        *,
        part_id: Optional[str] = None,
        measure_number: Optional[str] = None,
    ) -> "ConversionError":
        """Fill in location fields that the raising site could not know."""
        if self.part_id is None:
            self.part_id = part_id
        if self.measure_number is None:
            self.measure_number = measure_number
        return self

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error_type": self.kind,
            "detail": self.detail,
        }
        if self.part_id is not None:
            payload["part_id"] = self.part_id
        if self.measure_number is not None:
            payload["measure_number"] = self.measure_number
        if self.element is not None:
            payload["element"] = self.element
        return payload

    def __str__(self) -> str:
        where = []
        if self.part_id is not None:
            where.append(f"part={self.part_id}")
        if self.measure_number is not None:
            where.append(f"measure={self.measure_number}")
        if self.element is not None:
            where.append(f"element={self.element}")
        if not where:
            return f"{self.kind}: {self.detail}"
        return f"{self.kind}: {self.detail} ({' '.join(where)})"


@dataclass(eq=False)
class MalformedDocument(ConversionError):
    """Raised when the document text is not well-formed XML."""

    kind: ClassVar[str] = "MalformedDocument"
    detail: str = "document_not_well_formed"


@dataclass(eq=False)
class UnrecognizedFormat(ConversionError):
    """Raised when the root is neither score-partwise nor score-timewise."""

    kind: ClassVar[str] = "UnrecognizedFormat"
    detail: str = "root_is_not_a_score"


@dataclass(eq=False)
class UnsupportedFormat(ConversionError):
    """Raised for score-timewise documents, which are detected but not traversed."""

    kind: ClassVar[str] = "UnsupportedFormat"
    detail: str = "timewise_not_supported"


@dataclass(eq=False)
class MissingPartIdentifier(ConversionError):
    kind: ClassVar[str] = "MissingPartIdentifier"
    detail: str = "part_has_no_id"


@dataclass(eq=False)
class DuplicatePartIdentifier(ConversionError):
    kind: ClassVar[str] = "DuplicatePartIdentifier"
    detail: str = "part_id_not_unique"


@dataclass(eq=False)
class MissingDivisions(ConversionError):
    kind: ClassVar[str] = "MissingDivisions"
    detail: str = "first_measure_has_no_divisions"


@dataclass(eq=False)
class InvalidDivisions(ConversionError):
    kind: ClassVar[str] = "InvalidDivisions"
    detail: str = "divisions_not_a_positive_integer"


@dataclass(eq=False)
class MissingDuration(ConversionError):
    """Raised when a duration is absent or not a non-negative integer."""

    kind: ClassVar[str] = "MissingDuration"
    detail: str = "duration_missing"


@dataclass(eq=False)
class MissingVoice(ConversionError):
    kind: ClassVar[str] = "MissingVoice"
    detail: str = "voice_missing"


@dataclass(eq=False)
class InvalidStaff(ConversionError):
    kind: ClassVar[str] = "InvalidStaff"
    detail: str = "staff_not_a_positive_integer"


@dataclass(eq=False)
class InvalidPitch(ConversionError):
    kind: ClassVar[str] = "InvalidPitch"
    detail: str = "pitch_incomplete"


@dataclass(eq=False)
class CursorUnderflow(ConversionError):
    """Raised when a backup would move the cursor before tick 0."""

    kind: ClassVar[str] = "CursorUnderflow"
    detail: str = "backup_before_start"
    position: int = 0
    rewind_by: int = 0

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["position"] = int(self.position)
        payload["rewind_by"] = int(self.rewind_by)
        return payload


class ResourceNotFound(FileNotFoundError):
    """Raised when the backing MusicXML document cannot be located."""

    kind = "ResourceNotFound"

    def __init__(self, path: str) -> None:
        super().__init__(f"MusicXML file not found: {path}")
        self.path = path

    def to_payload(self) -> Dict[str, Any]:
        return {
            "error_type": self.kind,
            "detail": "file_not_found",
            "path": self.path,
        }
