"""
Score conversion APIs.
"""

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from scoretime.config import Settings
from scoretime.logging_utils import get_logger, set_log_context, summarize_payload
from scoretime.musicxml.traversal import ConversionResult, PartResult, convert_musicxml

logger = get_logger(__name__)


def parse_score(
    file_path: Union[str, Path],
    *,
    error_policy: Optional[str] = None,
    merge_chords: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Convert a MusicXML file into a JSON-serializable event dict.

    Args:
        file_path: Path to MusicXML file (.xml, .musicxml or .mxl)
        error_policy: "isolate" or "abort"; defaults to the configured policy
        merge_chords: Fold <chord/> members into one event; defaults to config
        settings: Explicit settings, otherwise read from the environment

    Returns:
        Score as a JSON-serializable dict with structure:
        {
            "format": "partwise",
            "source_musicxml_path": str,
            "parts": [{"part_id": ..., "ok": ..., "events": [...], "error": ...}],
            "score_summary": {...}
        }
    """
    if settings is None:
        settings = Settings.from_env()
    if error_policy is None:
        error_policy = settings.error_policy
    if merge_chords is None:
        merge_chords = settings.merge_chords
    path = Path(file_path)
    set_log_context(run_id=uuid.uuid4().hex[:12], source=path.name)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "parse_score input=%s",
            summarize_payload(
                {
                    "file_path": str(file_path),
                    "error_policy": error_policy,
                    "merge_chords": merge_chords,
                }
            ),
        )
    result = convert_musicxml(path, error_policy=error_policy, merge_chords=merge_chords)
    score_dict = result_to_dict(result)
    score_dict["source_musicxml_path"] = str(path.resolve())
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("parse_score output=%s", summarize_payload(score_dict))
    return score_dict


def result_to_dict(result: ConversionResult) -> Dict[str, Any]:
    """Serialize a conversion result into plain dicts and lists."""
    return {
        "format": result.format,
        "ok": result.ok,
        "parts": [_part_to_dict(part) for part in result.parts],
        "score_summary": summarize_result(result),
    }


def _part_to_dict(part: PartResult) -> Dict[str, Any]:
    return {
        "part_id": part.part_id,
        "ok": part.ok,
        "divisions": part.divisions,
        "final_tick": part.final_tick,
        "events": [event.to_payload() for event in part.events],
        "error": part.error.to_payload() if part.error is not None else None,
    }


def summarize_result(result: ConversionResult) -> Dict[str, Any]:
    """Per-part counts, voices, staves and end ticks."""
    parts: List[Dict[str, Any]] = []
    for part in result.parts:
        streams = sorted(part.stream_positions.items())
        parts.append(
            {
                "part_id": part.part_id,
                "ok": part.ok,
                "event_count": len(part.events),
                "rest_count": sum(1 for event in part.events if event.is_rest),
                "voices": sorted({event.voice for event in part.events}),
                "staves": sorted({event.staff for event in part.events}),
                "final_tick": part.final_tick,
                "divisions": part.divisions,
                "stream_end_ticks": [
                    {"voice": voice, "staff": staff, "end_tick": end_tick}
                    for (voice, staff), end_tick in streams
                ],
                "error_type": part.error.kind if part.error is not None else None,
            }
        )
    return {
        "part_count": len(result.parts),
        "failed_parts": [part.part_id for part in result.parts if not part.ok],
        "event_count": len(result.events),
        "parts": parts,
    }
