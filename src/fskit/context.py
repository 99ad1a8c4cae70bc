"""Application context for dependency injection.

This module separates object creation from object use. Callers that need
several fskit services get them wired to one filesystem and one set of
settings.

Dependencies are typed using Protocols (abstract interfaces) rather than
concrete implementations, so test doubles can be injected without
inheritance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from fskit.config import FsSettings
from fskit.data_url import DataUrlCodec
from fskit.formats import CsvDocument, JsonDocument, XmlDocument
from fskit.protocols import FileSystem, TreeOperations


def _default_filesystem() -> FileSystem:
    """Create the default filesystem implementation."""
    from fskit.filesystem import RealFileSystem
    return RealFileSystem()


@dataclass
class FsContext:
    """Container for fskit services.

    Provides a single injection point for every service sharing one
    filesystem and one set of settings.
    """

    settings: FsSettings
    tree: TreeOperations
    json: JsonDocument
    csv: CsvDocument
    xml: XmlDocument
    data_url: DataUrlCodec
    filesystem: FileSystem = field(default_factory=_default_filesystem)


def create_context(
    settings: FsSettings | None = None,
    settings_file: Path | None = None,
) -> FsContext:
    """Factory for fskit services.

    Creates all services with proper wiring. Use this in production code.
    For tests, construct FsContext directly with test doubles.

    Args:
        settings: Explicit settings (takes precedence over settings_file).
        settings_file: JSON or YAML file to load settings from.

    Returns:
        Configured FsContext with all services.
    """
    from fskit.filesystem import RealFileSystem
    from fskit.tree import TreeOperator

    if settings is None:
        settings = (
            FsSettings.from_file(settings_file)
            if settings_file
            else FsSettings.create_default()
        )

    filesystem = RealFileSystem(settings)
    return FsContext(
        settings=settings,
        tree=TreeOperator.create(filesystem),
        json=JsonDocument(filesystem=filesystem, settings=settings),
        csv=CsvDocument(filesystem=filesystem, settings=settings),
        xml=XmlDocument(filesystem=filesystem, settings=settings),
        data_url=DataUrlCodec(filesystem=filesystem),
        filesystem=filesystem,
    )
