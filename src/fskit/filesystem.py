"""Leaf filesystem layer.

RealFileSystem wraps the os, shutil and pathlib calls every other fskit
layer is built from. Predicates never raise; every other method raises an
FsError subclass on failure. Satisfies the FileSystem protocol
structurally.
"""

from __future__ import annotations

import hashlib
import logging
import mimetypes
import os
import shutil
import stat
import sys
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from glob import glob as _glob
from pathlib import Path
from typing import IO

from fskit import paths
from fskit.config import FsSettings
from fskit.errors import (
    CrossDeviceOrPermissionError,
    NotDirectoryError,
    NotFileError,
    NotFoundError,
    error_from_os,
    translate_os_error,
)
from fskit.types import Entry, EntryKind

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

if sys.platform == "win32":
    import msvcrt

    def _lock(handle: IO[bytes]) -> None:
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_LOCK, 1)

    def _unlock(handle: IO[bytes]) -> None:
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)

else:
    import fcntl

    def _lock(handle: IO[bytes]) -> None:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)

    def _unlock(handle: IO[bytes]) -> None:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


@contextmanager
def exclusive_lock(handle: IO[bytes]) -> Iterator[IO[bytes]]:
    """Hold an exclusive advisory lock on an open file for the block."""
    _lock(handle)
    try:
        yield handle
    finally:
        handle.flush()
        _unlock(handle)


class RealFileSystem:
    """Production filesystem implementation.

    Wraps standard library os, shutil and pathlib operations.
    Satisfies the FileSystem protocol structurally.
    """

    def __init__(self, settings: FsSettings | None = None) -> None:
        """Initialize the filesystem.

        Args:
            settings: Encoding, temp-file and hashing defaults.
        """
        self.settings = settings or FsSettings.create_default()

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def exists(self, path: Path) -> bool:
        """Check if a path exists (a dangling symlink counts)."""
        return os.path.lexists(path)

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory, following symlinks."""
        return os.path.isdir(path)

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file, following symlinks."""
        return os.path.isfile(path)

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link."""
        return os.path.islink(path)

    def is_readable(self, path: Path) -> bool:
        return os.access(path, os.R_OK)

    def is_writable(self, path: Path) -> bool:
        return os.access(path, os.W_OK)

    def is_executable(self, path: Path) -> bool:
        return os.access(path, os.X_OK)

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def entry(self, path: Path) -> Entry:
        """Build an Entry from a fresh lstat of path.

        Raises:
            NotFoundError: If nothing exists at path.
        """
        with translate_os_error(path):
            mode = os.lstat(path).st_mode
        if stat.S_ISLNK(mode):
            kind = EntryKind.SYMLINK
        elif stat.S_ISDIR(mode):
            kind = EntryKind.DIRECTORY
        else:
            kind = EntryKind.FILE
        return Entry(
            path=Path(path),
            kind=kind,
            readable=self.is_readable(path),
            writable=self.is_writable(path),
        )

    def list_children(self, path: Path) -> list[Entry]:
        """List the immediate children of a directory, sorted by name.

        Raises:
            NotFoundError: If the directory does not exist.
            NotDirectoryError: If path is not a directory.
        """
        if self.exists(path) and not self.is_dir(path):
            raise NotDirectoryError(f"Not a directory: {path}", Path(path))
        with translate_os_error(path):
            names = sorted(os.listdir(path))
        children = []
        for name in names:
            child = Path(path) / name
            try:
                children.append(self.entry(child))
            except NotFoundError:
                # Removed between listdir and lstat.
                logger.debug("Entry vanished during listing: %s", child)
        return children

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_bytes(self, path: Path) -> bytes:
        """Read the whole content of a file."""
        with translate_os_error(path):
            return Path(path).read_bytes()

    def read_text(self, path: Path) -> str:
        """Read the whole content of a file as text."""
        with translate_os_error(path):
            return Path(path).read_text(encoding=self.settings.encoding)

    def read_head(self, path: Path, size: int) -> bytes:
        """Read at most `size` bytes from the start of a file."""
        with translate_os_error(path), open(path, "rb") as handle:
            return handle.read(size)

    def lines(self, path: Path) -> list[str]:
        """Read a file as a list of lines without line endings."""
        return self.read_text(path).splitlines()

    def search(self, needle: str, path: Path) -> int | None:
        """Return the offset of the first occurrence of needle, or None."""
        index = self.read_text(path).find(needle)
        return index if index >= 0 else None

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def write_bytes(
        self, path: Path, data: bytes, append: bool = False, lock: bool = False
    ) -> int:
        """Write data directly to a file.

        Args:
            path: Target file.
            data: Bytes to write.
            append: Append instead of truncating.
            lock: Hold an exclusive advisory lock while writing.

        Returns:
            Number of bytes written.
        """
        with translate_os_error(path):
            if not lock:
                with open(path, "ab" if append else "wb") as handle:
                    return handle.write(data)
            # Truncate only once the lock is held.
            with open(path, "ab" if append else "a+b") as handle, exclusive_lock(handle):
                if not append:
                    handle.seek(0)
                    handle.truncate()
                return handle.write(data)

    def write_text(
        self, path: Path, content: str, append: bool = False, lock: bool = False
    ) -> int:
        """Write text content to a file."""
        return self.write_bytes(
            path, content.encode(self.settings.encoding), append=append, lock=lock
        )

    def append(self, path: Path, content: str) -> int:
        """Append text to a file, creating it if needed."""
        return self.write_text(path, content, append=True)

    def clear(self, path: Path) -> int:
        """Truncate a file to zero length."""
        return self.write_bytes(path, b"")

    def replace(self, path: Path, data: bytes | str, mode: int | None = None) -> int:
        """Durably replace the content of a file.

        The data goes to a temporary file in the same directory which is
        flushed, synced and renamed over the target, so readers see either
        the old or the new content.

        Args:
            path: Target file.
            data: New content; text is encoded with the configured encoding.
            mode: Permission bits for the new content. Defaults to the
                current bits of the target, or the umask default for a new file.

        Returns:
            Number of bytes written.
        """
        if isinstance(data, str):
            data = data.encode(self.settings.encoding)
        target = Path(path)
        with translate_os_error(target):
            fd, temp_name = tempfile.mkstemp(
                prefix=self.settings.temp_prefix, dir=str(target.parent)
            )
            try:
                with os.fdopen(fd, "wb") as handle:
                    written = handle.write(data)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.chmod(temp_name, self._replacement_mode(target, mode))
                os.replace(temp_name, target)
            finally:
                if os.path.exists(temp_name):
                    os.unlink(temp_name)
        return written

    @staticmethod
    def _replacement_mode(target: Path, mode: int | None) -> int:
        """Permission bits for content swapped in over target."""
        if mode is not None:
            return mode
        try:
            return stat.S_IMODE(os.stat(target).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    @contextmanager
    def locked(self, path: Path) -> Iterator[IO[bytes]]:
        """Open an existing file read-write under an exclusive lock.

        The lock is held until the block exits, however it exits.
        """
        with translate_os_error(path), open(path, "r+b") as handle, exclusive_lock(handle):
            yield handle

    def replace_in_file(self, search: str, replacement: str, path: Path) -> int:
        """Replace every occurrence of search inside a file."""
        content = self.read_text(path)
        return self.write_text(path, content.replace(search, replacement))

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def delete(self, path: Path) -> bool:
        """Remove a file or symlink.

        A missing path counts as deleted.

        Raises:
            NotFileError: If path is a real directory.
        """
        if not self.exists(path):
            return True
        if self.is_dir(path) and not self.is_symlink(path):
            raise NotFileError(f"Refusing to unlink a directory: {path}", Path(path))
        try:
            os.unlink(path)
        except FileNotFoundError:
            return True
        except OSError as e:
            raise error_from_os(e, Path(path)) from e
        return True

    def rename(self, old: Path, new: Path) -> bool:
        """Rename a path with a single rename call.

        Raises:
            NotFoundError: If old does not exist.
            CrossDeviceOrPermissionError: If the rename itself fails.
        """
        if not self.exists(old):
            raise NotFoundError(f"Cannot rename missing path: {old}", Path(old))
        try:
            os.rename(old, new)
        except OSError as e:
            raise CrossDeviceOrPermissionError(
                f"Rename {old} -> {new} failed: {e.strerror or e}", Path(old)
            ) from e
        return True

    def copy_file(self, src: Path, dst: Path) -> bool:
        """Copy a single file's content and permission bits."""
        with translate_os_error(src):
            shutil.copy(src, dst)
        return True

    def mkdir(
        self,
        path: Path,
        mode: int | None = None,
        parents: bool = False,
        exist_ok: bool = False,
    ) -> None:
        """Create a directory."""
        with translate_os_error(path):
            Path(path).mkdir(
                mode=self.settings.directory_mode if mode is None else mode,
                parents=parents,
                exist_ok=exist_ok,
            )

    def rmdir(self, path: Path) -> None:
        """Remove an empty directory."""
        with translate_os_error(path):
            os.rmdir(path)

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def symlink(self, target: Path, link: Path) -> bool:
        """Create a symbolic link at `link` pointing to target.

        A relative target is resolved against the directory holding the link.
        """
        resolved = Path(target) if os.path.isabs(target) else Path(link).parent / target
        with translate_os_error(link):
            os.symlink(target, link, target_is_directory=self.is_dir(resolved))
        return True

    def readlink(self, path: Path) -> Path:
        """Return the target of a symbolic link."""
        with translate_os_error(path):
            return Path(os.readlink(path))

    def hardlink(self, target: Path, link: Path) -> bool:
        """Create a hard link at `link` pointing to target."""
        with translate_os_error(link):
            os.link(target, link)
        return True

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def size(self, path: Path) -> int:
        with translate_os_error(path):
            return os.path.getsize(path)

    def last_modified(self, path: Path) -> datetime:
        with translate_os_error(path):
            return datetime.fromtimestamp(os.path.getmtime(path), tz=timezone.utc)

    def hash(self, path: Path, algorithm: str | None = None) -> str:
        """Hex digest of a file's content."""
        digest = hashlib.new(algorithm or self.settings.hash_algorithm)
        with translate_os_error(path), open(path, "rb") as handle:
            for chunk in iter(lambda: handle.read(65536), b""):
                digest.update(chunk)
        return digest.hexdigest()

    def mime_type(self, path: Path) -> str:
        """Guess the MIME type of a file from its name."""
        mime, _ = mimetypes.guess_type(os.fspath(path))
        return mime or DEFAULT_MIME_TYPE

    def extension(self, path: Path) -> str:
        return paths.extension(path)

    def glob(self, pattern: str) -> list[Path]:
        """Find paths matching a shell-style pattern, sorted."""
        return [Path(p) for p in sorted(_glob(pattern))]

    def disk_free(self, path: Path) -> int:
        """Free bytes on the filesystem holding path."""
        with translate_os_error(path):
            return shutil.disk_usage(path).free

    def disk_total(self, path: Path) -> int:
        """Total bytes on the filesystem holding path."""
        with translate_os_error(path):
            return shutil.disk_usage(path).total
