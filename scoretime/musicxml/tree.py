"""
Read-only query helpers over an ElementTree MusicXML document.

Every lookup compares local tag names, so documents that declare an XML
namespace behave the same as plain ones.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Iterator, List, Optional, Union
from xml.etree import ElementTree
from xml.etree.ElementTree import Element

from scoretime.musicxml.errors import MalformedDocument, ResourceNotFound


def local_tag(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def iter_children(elem: Element) -> Iterator[Element]:
    """Yield element children in document order, skipping comments and PIs."""
    for node in elem:
        if isinstance(node.tag, str):
            yield node


def children(elem: Element, name: str) -> List[Element]:
    return [node for node in iter_children(elem) if local_tag(node.tag) == name]


def child(elem: Element, name: str) -> Optional[Element]:
    for node in iter_children(elem):
        if local_tag(node.tag) == name:
            return node
    return None


def has_child(elem: Element, name: str) -> bool:
    return child(elem, name) is not None


def attribute(elem: Element, name: str) -> Optional[str]:
    value = elem.attrib.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def text(elem: Optional[Element]) -> Optional[str]:
    """Return stripped text content, or None when the element is absent or empty."""
    if elem is None or elem.text is None:
        return None
    value = elem.text.strip()
    return value or None


def child_text(elem: Element, name: str) -> Optional[str]:
    return text(child(elem, name))


def read_musicxml_content(path: Path) -> bytes:
    """Read MusicXML content from .xml/.musicxml or compressed .mxl files."""
    if not path.exists():
        raise ResourceNotFound(str(path))
    if path.suffix.lower() != ".mxl":
        return path.read_bytes()
    try:
        with zipfile.ZipFile(path) as archive:
            xml_name = _find_mxl_xml(archive)
            return archive.read(xml_name)
    except zipfile.BadZipFile as exc:
        raise MalformedDocument(detail=f"not_a_zip_archive: {exc}", element=str(path)) from exc


def _find_mxl_xml(archive: zipfile.ZipFile) -> str:
    """Find the referenced XML file inside an MXL archive."""
    try:
        container_bytes = archive.read("META-INF/container.xml")
    except KeyError:
        return _first_mxl_xml(archive)
    try:
        root = ElementTree.fromstring(container_bytes)
    except ElementTree.ParseError:
        return _first_mxl_xml(archive)
    for elem in root.iter():
        if local_tag(elem.tag) == "rootfile":
            full_path = elem.attrib.get("full-path")
            if full_path and full_path in archive.namelist():
                return full_path
    return _first_mxl_xml(archive)


def _first_mxl_xml(archive: zipfile.ZipFile) -> str:
    """Return the first XML entry found in an MXL archive."""
    candidates = [
        name
        for name in archive.namelist()
        if name.lower().endswith((".xml", ".musicxml")) and not name.startswith("META-INF/")
    ]
    if not candidates:
        raise MalformedDocument(detail="no_musicxml_in_archive")
    return candidates[0]


def parse_document(content: Union[str, bytes]) -> Element:
    """Parse MusicXML text into its root element."""
    try:
        return ElementTree.fromstring(content)
    except ElementTree.ParseError as exc:
        raise MalformedDocument(detail=f"xml_parse_error: {exc}") from exc


def load_document(path: Union[str, Path]) -> Element:
    """Load a MusicXML file from disk and return its root element."""
    return parse_document(read_musicxml_content(Path(path)))
