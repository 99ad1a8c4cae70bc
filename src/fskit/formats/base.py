"""Base document implementation with shared behavior.

All formats share the same whole-file pattern: read the complete file,
decode it, and on write encode everything and overwrite the file. They vary
only in the codec.

Pattern: Template Method - base class owns filesystem access, extension
handling and result conversion; subclasses provide the codec.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from fskit import paths
from fskit.config import FsSettings
from fskit.errors import FsError, MalformedDocumentError
from fskit.filesystem import RealFileSystem
from fskit.protocols import FileSystem
from fskit.types import ErrorKind, OpResult

logger = logging.getLogger(__name__)


class BaseDocument(ABC):
    """Base class for structured document formats.

    Subclasses set `name` and `extension` and implement `read` and `create`.
    """

    name: str
    extension: str
    # Append `extension` to paths passed to create() that lack it.
    append_extension: bool = True

    def __init__(
        self,
        filesystem: FileSystem | None = None,
        settings: FsSettings | None = None,
    ) -> None:
        """Initialize the document handler.

        Args:
            filesystem: Leaf filesystem (RealFileSystem if not provided).
            settings: Encoding and formatting defaults.
        """
        self.settings = settings or FsSettings.create_default()
        self.fs = filesystem or RealFileSystem(self.settings)

    @abstractmethod
    def read(self, path: Path) -> OpResult[Any]:
        """Read and decode a whole document."""
        ...

    @abstractmethod
    def create(self, path: Path, data: Any) -> OpResult[int]:
        """Encode data and write it as a new document."""
        ...

    def matches(self, path: Path) -> bool:
        """Check if a path carries this format's extension."""
        return paths.extension(path).lower() == self.extension

    def target_path(self, path: Path) -> Path:
        """Return the path create() writes to."""
        if self.append_extension:
            return paths.ensure_suffix(path, self.extension)
        return Path(path)

    def _load_text(self, path: Path) -> str:
        """Read a document as text.

        Raises:
            FsError: If the file cannot be read.
            MalformedDocumentError: If the bytes are not valid text.
        """
        try:
            return self.fs.read_text(path)
        except UnicodeDecodeError as e:
            raise MalformedDocumentError(
                f"{path} is not valid {self.settings.encoding} text", Path(path)
            ) from e

    def _write_text(self, path: Path, content: str) -> OpResult[int]:
        try:
            written = self.fs.write_text(path, content)
        except FsError as e:
            return self._fail(path, e)
        return OpResult.ok(Path(path), written)

    def _fail(self, path: Path, error: FsError) -> OpResult:
        logger.debug("%s operation on %s failed: %s", self.name, path, error)
        return OpResult.from_error(Path(path), error)

    def _not_found(self, path: Path) -> OpResult:
        return OpResult.fail(Path(path), ErrorKind.NOT_FOUND, f"No such document: {path}")
