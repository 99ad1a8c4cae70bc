"""Structured document formats."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from fskit import paths
from fskit.config import FsSettings
from fskit.protocols import FileSystem
from fskit.types import OpResult

from .base import BaseDocument
from .csv_doc import CsvDocument
from .json_doc import JsonDocument
from .xml_doc import XmlDocument


@runtime_checkable
class DocumentFormat(Protocol):
    """Protocol defining the interface for document formats.

    Every format reads and writes whole files, so new formats can be
    added without modifying existing code.
    """

    name: str
    extension: str

    def read(self, path: Path) -> OpResult[Any]:
        """Read and decode a whole document.

        Args:
            path: Document to read.

        Returns:
            OpResult with the decoded content.
        """
        raise NotImplementedError

    def create(self, path: Path, data: Any) -> OpResult[int]:
        """Encode data and write it as a document.

        Args:
            path: Target file.
            data: Content to encode.

        Returns:
            OpResult with the number of bytes written.
        """
        raise NotImplementedError

    def matches(self, path: Path) -> bool:
        """Check if a path carries this format's extension."""
        raise NotImplementedError


__all__ = [
    "BaseDocument",
    "CsvDocument",
    "DocumentFormat",
    "JsonDocument",
    "XmlDocument",
    "get_format",
    "format_for_path",
]


FORMATS: dict[str, type[BaseDocument]] = {
    "json": JsonDocument,
    "csv": CsvDocument,
    "xml": XmlDocument,
}


def get_format(
    name: str,
    filesystem: FileSystem | None = None,
    settings: FsSettings | None = None,
) -> DocumentFormat:
    """Get a document format handler by name.

    Args:
        name: Format name (json, csv, xml).
        filesystem: Optional filesystem shared with the handler.
        settings: Optional settings shared with the handler.

    Returns:
        Format instance.

    Raises:
        ValueError: If the format is not supported.
    """
    key = name.lower().lstrip(".")
    if key not in FORMATS:
        raise ValueError(f"Unknown format: {name}. Supported: {list(FORMATS.keys())}")
    return FORMATS[key](filesystem=filesystem, settings=settings)


def format_for_path(
    path: Path,
    filesystem: FileSystem | None = None,
    settings: FsSettings | None = None,
) -> DocumentFormat | None:
    """Pick the format handler matching a path's extension, if any."""
    ext = paths.extension(path).lower()
    for name, format_class in FORMATS.items():
        if ext == format_class.extension:
            return get_format(name, filesystem=filesystem, settings=settings)
    return None
