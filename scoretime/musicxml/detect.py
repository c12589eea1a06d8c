from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from xml.etree.ElementTree import Element, ElementTree

from scoretime.musicxml.errors import UnrecognizedFormat, UnsupportedFormat
from scoretime.musicxml.tree import child, local_tag

PARTWISE = "partwise"
TIMEWISE = "timewise"

_ROOT_TAGS = {
    "score-partwise": PARTWISE,
    "score-timewise": TIMEWISE,
}


@dataclass(frozen=True)
class DetectedScore:
    format: str
    root: Element


def detect_format(document: Union[Element, ElementTree]) -> DetectedScore:
    """Select the score sub-tree and tag it as partwise or timewise.

    Accepts the score root itself or a wrapper node holding one.
    """
    node = document.getroot() if isinstance(document, ElementTree) else document
    if node is None:
        raise UnrecognizedFormat(detail="empty_document")
    tag = local_tag(node.tag) if isinstance(node.tag, str) else ""
    if tag in _ROOT_TAGS:
        return DetectedScore(format=_ROOT_TAGS[tag], root=node)
    for name, score_format in _ROOT_TAGS.items():
        found = child(node, name)
        if found is not None:
            return DetectedScore(format=score_format, root=found)
    raise UnrecognizedFormat(detail=f"unexpected_root: {tag or '?'}", element=tag or None)


def require_partwise(detected: DetectedScore) -> Element:
    if detected.format == TIMEWISE:
        raise UnsupportedFormat(element="score-timewise")
    return detected.root
