"""Shared data types for fskit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from fskit.errors import FsError

__all__ = ["Entry", "EntryKind", "ErrorKind", "Failure", "OpResult"]

T = TypeVar("T")


class EntryKind(str, Enum):
    """Kind of a filesystem node, resolved without following symlinks."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


class ErrorKind(str, Enum):
    """Failure categories reported by operations."""

    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    NOT_A_FILE = "not_a_file"
    NOT_AN_ARRAY_DOCUMENT = "not_an_array_document"
    PERMISSION_DENIED = "permission_denied"
    MALFORMED_DOCUMENT = "malformed_document"
    PARTIAL_FAILURE = "partial_failure"
    DISK_FULL = "disk_full"
    CROSS_DEVICE_OR_PERMISSION = "cross_device_or_permission"
    ALREADY_EXISTS = "already_exists"
    IO_ERROR = "io_error"


@dataclass(frozen=True)
class Entry:
    """One named node of a directory listing.

    Attributes:
        path: Path of the node as it was listed.
        kind: Kind observed by the lstat that built this entry.
        readable: True if the current process may read the node.
        writable: True if the current process may write the node.
    """

    path: Path
    kind: EntryKind
    readable: bool = True
    writable: bool = True

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK


@dataclass(frozen=True)
class Failure:
    """A single sub-step that failed inside a multi-item operation."""

    path: Path
    error: ErrorKind
    message: str = ""


@dataclass
class OpResult(Generic[T]):
    """Result of a tree or document operation.

    Attributes:
        success: True if the operation completed without any failure.
        path: Path the operation was applied to.
        value: Operation payload (count, listing, decoded data...).
        error: Failure category (None on success).
        message: Human readable error message (None on success).
        failures: Sub-steps that failed in a best-effort operation.
    """

    success: bool
    path: Path
    value: T | None = None
    error: ErrorKind | None = None
    message: str | None = None
    failures: list[Failure] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.success and self.error is not None:
            raise ValueError("success=True but error is set")
        if not self.success and self.error is None:
            raise ValueError("success=False requires an error kind")
        if self.error is ErrorKind.PARTIAL_FAILURE and not self.failures:
            raise ValueError("partial failure requires at least one failure")

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, path: Path, value: T | None = None) -> OpResult[T]:
        """Build a successful result."""
        return cls(success=True, path=path, value=value)

    @classmethod
    def fail(
        cls,
        path: Path,
        error: ErrorKind,
        message: str | None = None,
        value: T | None = None,
    ) -> OpResult[T]:
        """Build a failed result."""
        return cls(
            success=False,
            path=path,
            value=value,
            error=error,
            message=message or error.value.replace("_", " "),
        )

    @classmethod
    def from_error(cls, path: Path, exc: FsError) -> OpResult[T]:
        """Convert a leaf-layer exception into a failed result."""
        return cls.fail(path, exc.kind, str(exc))

    @classmethod
    def collect(cls, path: Path, value: T, failures: list[Failure]) -> OpResult[T]:
        """Build the result of a best-effort operation.

        The result is successful only when no sub-step failed; otherwise it
        carries PARTIAL_FAILURE along with the failures and the value reached.
        """
        if not failures:
            return cls.ok(path, value)
        return cls(
            success=False,
            path=path,
            value=value,
            error=ErrorKind.PARTIAL_FAILURE,
            message=f"{len(failures)} item(s) failed under {path}",
            failures=list(failures),
        )
