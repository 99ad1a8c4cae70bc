"""Exceptions raised by the leaf filesystem layer.

Each exception carries the ErrorKind it maps to so that higher layers can
turn it into an OpResult without inspecting the exception type.
"""

from __future__ import annotations

import errno
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from fskit.types import ErrorKind


class FsError(Exception):
    """Base error for filesystem operations."""

    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(FsError):
    """Target path does not exist."""

    kind = ErrorKind.NOT_FOUND


class NotDirectoryError(FsError):
    """Path exists but is not a directory."""

    kind = ErrorKind.NOT_A_DIRECTORY


class NotFileError(FsError):
    """Path exists but is not a regular file or link."""

    kind = ErrorKind.NOT_A_FILE


class NotArrayDocumentError(FsError):
    """JSON document root is not an array."""

    kind = ErrorKind.NOT_AN_ARRAY_DOCUMENT


class AccessDeniedError(FsError):
    """OS-level access control failure."""

    kind = ErrorKind.PERMISSION_DENIED


class MalformedDocumentError(FsError):
    """Document content could not be decoded."""

    kind = ErrorKind.MALFORMED_DOCUMENT


class DiskFullError(FsError):
    """No space left on the device."""

    kind = ErrorKind.DISK_FULL


class CrossDeviceOrPermissionError(FsError):
    """Rename failed; there is no copy-and-delete fallback."""

    kind = ErrorKind.CROSS_DEVICE_OR_PERMISSION


class AlreadyExistsError(FsError):
    """Target path already exists."""

    kind = ErrorKind.ALREADY_EXISTS


_ERRNO_MAP: dict[int, type[FsError]] = {
    errno.ENOENT: NotFoundError,
    errno.ENOTDIR: NotDirectoryError,
    errno.EISDIR: NotFileError,
    errno.EACCES: AccessDeniedError,
    errno.EPERM: AccessDeniedError,
    errno.EROFS: AccessDeniedError,
    errno.ENOSPC: DiskFullError,
    errno.EEXIST: AlreadyExistsError,
    errno.ENOTEMPTY: FsError,
}


def error_from_os(exc: OSError, path: Path | None = None) -> FsError:
    """Map an OSError onto the matching FsError subclass.

    Args:
        exc: The original OS error.
        path: Path the failing call was applied to.

    Returns:
        FsError instance (not raised).
    """
    error_class = _ERRNO_MAP.get(exc.errno or 0, FsError)
    target = path if path is not None else exc.filename
    message = f"{exc.strerror or exc}: {target}" if target is not None else str(exc)
    return error_class(message, Path(target) if target is not None else None)


@contextmanager
def translate_os_error(path: Path) -> Iterator[None]:
    """Re-raise OSError raised inside the block as FsError."""
    try:
        yield
    except OSError as e:
        raise error_from_os(e, path) from e
