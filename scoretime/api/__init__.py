"""
Score conversion API module

This module exposes the public APIs for turning MusicXML into timed events.
"""

from scoretime.api.score import parse_score, result_to_dict, summarize_result

__all__ = [
    "parse_score",
    "result_to_dict",
    "summarize_result",
]
