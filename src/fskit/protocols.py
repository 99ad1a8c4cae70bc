"""Protocol definitions for core abstractions.

This module defines abstract interfaces (Protocols) for the leaf filesystem,
the tree operator and the array document store. Designing to interfaces
enables:
- Loose coupling between layers
- Easy substitution of test doubles
- Clear contracts for implementations

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from pathlib import Path
from typing import IO, Any, Protocol, runtime_checkable

from fskit.paths import ExtensionFilter
from fskit.types import Entry, OpResult


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for leaf filesystem operations.

    Predicates never raise. Every other operation raises an FsError
    subclass when the underlying OS call fails.
    """

    def exists(self, path: Path) -> bool:
        """Check if a path exists.

        Args:
            path: Path to check.

        Returns:
            True if path exists, False otherwise.
        """
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory (following symlinks)."""
        ...

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file (following symlinks)."""
        ...

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link."""
        ...

    def entry(self, path: Path) -> Entry:
        """Build an Entry from a fresh lstat.

        Raises:
            NotFoundError: If nothing exists at path.
        """
        ...

    def list_children(self, path: Path) -> list[Entry]:
        """List immediate children of a directory.

        Args:
            path: Directory to list.

        Returns:
            Entries sorted by name, without "." and "..".

        Raises:
            NotFoundError: If the directory does not exist.
            NotDirectoryError: If path is not a directory.
        """
        ...

    def read_bytes(self, path: Path) -> bytes:
        """Read the whole content of a file.

        Raises:
            NotFoundError: If file does not exist.
            AccessDeniedError: If file is not readable.
        """
        ...

    def read_text(self, path: Path) -> str:
        """Read the whole content of a file as text."""
        ...

    def read_head(self, path: Path, size: int) -> bytes:
        """Read at most `size` bytes from the start of a file."""
        ...

    def write_bytes(
        self, path: Path, data: bytes, append: bool = False, lock: bool = False
    ) -> int:
        """Write data to a file.

        Args:
            path: Target file.
            data: Bytes to write.
            append: Append instead of overwrite.
            lock: Hold an exclusive lock for the write.

        Returns:
            Number of bytes written.

        Raises:
            AccessDeniedError: If file is not writable.
            DiskFullError: If the device is full.
        """
        ...

    def write_text(
        self, path: Path, content: str, append: bool = False, lock: bool = False
    ) -> int:
        """Write text content to a file."""
        ...

    def replace(self, path: Path, data: bytes | str, mode: int | None = None) -> int:
        """Replace file content through a temp file and rename."""
        ...

    def locked(self, path: Path) -> AbstractContextManager[IO[bytes]]:
        """Open an existing file read-write under an exclusive lock."""
        ...

    def delete(self, path: Path) -> bool:
        """Remove a file or symlink; a missing path counts as deleted."""
        ...

    def rename(self, old: Path, new: Path) -> bool:
        """Rename a path.

        Raises:
            CrossDeviceOrPermissionError: If the rename call fails.
        """
        ...

    def copy_file(self, src: Path, dst: Path) -> bool:
        """Copy a single file."""
        ...

    def mkdir(
        self,
        path: Path,
        mode: int | None = None,
        parents: bool = False,
        exist_ok: bool = False,
    ) -> None:
        """Create a directory.

        Args:
            path: Path to create.
            mode: Permission bits (configured default when None).
            parents: Create parent directories if needed.
            exist_ok: Don't raise if directory exists.
        """
        ...

    def rmdir(self, path: Path) -> None:
        """Remove an empty directory."""
        ...

    def symlink(self, target: Path, link: Path) -> bool:
        """Create a symbolic link."""
        ...

    def readlink(self, path: Path) -> Path:
        """Return the target of a symbolic link."""
        ...


@runtime_checkable
class TreeOperations(Protocol):
    """Protocol for whole-subtree operations.

    Every operation returns an OpResult and never raises for a missing
    or mistyped path.
    """

    def delete_tree(self, path: Path, preserve_root: bool = False) -> OpResult[int]:
        """Delete a directory and everything below it.

        Args:
            path: Directory to delete.
            preserve_root: Keep the (emptied) directory itself.

        Returns:
            OpResult whose value is the number of entries removed.
        """
        ...

    def delete_subdirectories(self, path: Path) -> OpResult[int]:
        """Delete every real subdirectory, leaving files in place."""
        ...

    def delete_files(
        self, path: Path, extensions: ExtensionFilter = None
    ) -> OpResult[int]:
        """Delete the non-directory children of a directory."""
        ...

    def list_entries(
        self, path: Path, full_path: bool = False, extensions: ExtensionFilter = None
    ) -> OpResult[list[str]]:
        """List immediate children, optionally allow-listed by extension."""
        ...

    def list_directories(
        self, path: Path, full_path: bool = False
    ) -> OpResult[list[str]]:
        """List immediate real subdirectories."""
        ...

    def copy_tree(self, source: Path, destination: Path) -> OpResult[int]:
        """Copy a directory tree."""
        ...

    def empty_directory(
        self, path: Path, extensions: ExtensionFilter = None
    ) -> OpResult[int]:
        """Delete files then subdirectories of a directory."""
        ...


@runtime_checkable
class ArrayDocumentStore(Protocol):
    """Protocol for read-modify-write mutation of array documents.

    No lock is held across the read-modify-write window unless the caller
    asks for one: concurrent writers can lose updates.
    """

    def is_array_root(self, path: Path) -> bool:
        """Check whether a document's root value is an array."""
        ...

    def mutate(
        self,
        path: Path,
        transform: Callable[[list[Any]], list[Any]],
        *,
        lock: bool = False,
        durable: bool = False,
    ) -> OpResult[int]:
        """Apply transform to the decoded array and write the result back.

        Args:
            path: Document to mutate.
            transform: Receives the current list, returns the new list.
            lock: Hold an exclusive lock across the whole window.
            durable: Write through a temp file and rename.

        Returns:
            OpResult whose value is the number of bytes written.
        """
        ...

    def push(self, path: Path, value: Any) -> OpResult[int]:
        """Append a value to the array."""
        ...

    def pop(self, path: Path) -> OpResult[int]:
        """Remove the last element of the array."""
        ...

    def shift(self, path: Path) -> OpResult[int]:
        """Remove the first element of the array."""
        ...

    def combine(
        self, paths: Sequence[Path], result_path: Path | None = None
    ) -> OpResult[int]:
        """Write the arrays of several documents into one document."""
        ...

