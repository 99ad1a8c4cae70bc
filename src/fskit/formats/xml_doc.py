"""XML documents built from and edited with plain mappings."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fskit.errors import FsError, MalformedDocumentError
from fskit.formats.base import BaseDocument
from fskit.types import OpResult

ITEM_TAG = "item"
VALUE_TAG = "value"


class XmlDocument(BaseDocument):
    """Tree-oriented XML reading, creation and in-place edits.

    Mappings become named child elements, sequences become repeated
    <item> elements and scalars become element text.
    """

    name = "xml"
    extension = "xml"
    append_extension = False

    def read(self, path: Path) -> OpResult[ET.Element]:
        """Parse a file and return its root element."""
        path = Path(path)
        try:
            return OpResult.ok(path, self._parse(self._load_text(path), path))
        except FsError as e:
            return self._fail(path, e)

    def read_as_string(self, path: Path) -> OpResult[str]:
        path = Path(path)
        try:
            return OpResult.ok(path, self._load_text(path))
        except FsError as e:
            return self._fail(path, e)

    def root_name(self, path: Path) -> OpResult[str]:
        """Return the tag of the root element."""
        result = self.read(path)
        if not result:
            return result
        return OpResult.ok(result.path, result.value.tag)

    def create(self, path: Path, data: Any, root: str | None = None) -> OpResult[int]:
        """Build a document from data and write it.

        Args:
            path: Target file.
            data: Mapping, sequence or scalar. A scalar is wrapped in <value>.
            root: Root tag; defaults to the configured one.
        """
        element = ET.Element(root or self.settings.xml_root)
        if isinstance(data, (Mapping, list, tuple)):
            self._build(element, data)
        else:
            self._build(ET.SubElement(element, VALUE_TAG), data)
        return self._write_text(self.target_path(path), self._serialize(element))

    def edit(self, path: Path, updates: Mapping[str, Any]) -> OpResult[int]:
        """Apply updates to existing elements and rewrite the file.

        Nested mappings descend into the element of the same name. Keys
        without a matching element are ignored; nothing new is created.
        """
        result = self.read(path)
        if not result:
            return result
        self._apply_updates(result.value, updates)
        return self._write_text(result.path, self._serialize(result.value))

    def _build(self, element: ET.Element, data: Any) -> None:
        if isinstance(data, Mapping):
            for key, value in data.items():
                tag = ITEM_TAG if str(key).isdigit() else str(key)
                self._build(ET.SubElement(element, tag), value)
        elif isinstance(data, (list, tuple)):
            for value in data:
                self._build(ET.SubElement(element, ITEM_TAG), value)
        elif data is not None:
            element.text = _text(data)

    def _apply_updates(self, element: ET.Element, updates: Mapping[str, Any]) -> None:
        for key, value in updates.items():
            child = element.find(key)
            if child is None:
                continue
            if isinstance(value, Mapping):
                self._apply_updates(child, value)
            else:
                child.text = _text(value)

    def _serialize(self, element: ET.Element) -> str:
        tree = ET.ElementTree(element)
        ET.indent(tree)
        body = ET.tostring(element, encoding="unicode")
        return f'<?xml version="1.0" encoding="{self.settings.encoding}"?>\n{body}\n'

    @staticmethod
    def _parse(text: str, path: Path) -> ET.Element:
        try:
            return ET.fromstring(text)
        except ET.ParseError as e:
            raise MalformedDocumentError(f"Invalid XML in {path}: {e}", path) from e


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
