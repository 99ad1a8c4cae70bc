"""Pure path-string helpers.

None of these functions touch the filesystem.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path

ExtensionFilter = str | Iterable[str] | bool | None

_SEPARATORS = re.compile(r"[\\/]+")


def separator() -> str:
    """Return the directory separator of the current platform."""
    return os.sep


def format_path(path: str) -> str:
    """Collapse runs of forward and back slashes into the platform separator."""
    return _SEPARATORS.sub(lambda _: os.sep, path)


def basename(path: str | Path) -> str:
    """Return the last path component."""
    return os.path.basename(os.fspath(path).rstrip("/\\")) or os.fspath(path)


def extension(path: str | Path) -> str:
    """Return the text after the last dot of the basename.

    Unlike Path.suffix, a leading-dot name such as ".bashrc" has the
    extension "bashrc".
    """
    name = basename(path)
    _, dot, tail = name.rpartition(".")
    if not dot:
        return ""
    return tail


def stem(path: str | Path) -> str:
    """Return the basename without its extension."""
    name = basename(path)
    head, dot, _ = name.rpartition(".")
    return head if dot else name


def remove_extension(path: str | Path) -> str:
    """Strip the extension from the last path component."""
    text = os.fspath(path)
    ext = extension(text)
    if not ext:
        return text
    return text[: -(len(ext) + 1)]


def set_extension(path: str | Path, ext: str) -> str:
    """Append an extension to a path."""
    return f"{os.fspath(path)}.{ext.lstrip('.')}"


def ensure_suffix(path: str | Path, ext: str) -> Path:
    """Append ext unless the path already carries it."""
    ext = ext.lstrip(".")
    if extension(path).lower() == ext.lower():
        return Path(path)
    return Path(set_extension(path, ext))


def parent(path: str | Path, levels: int = 1) -> Path:
    """Return the ancestor `levels` steps above path."""
    if levels < 1:
        raise ValueError("levels must be at least 1")
    result = Path(path)
    for _ in range(levels):
        result = result.parent
    return result


def is_hidden_name(name: str) -> bool:
    """Check if a basename contains a dot, the convention for private entries."""
    return "." in name


def normalize_extensions(extensions: ExtensionFilter) -> frozenset[str] | None:
    """Normalize an extension allow-list.

    Args:
        extensions: A single extension, an iterable of extensions, or a
            falsy value for "no filter". Leading dots are ignored.

    Returns:
        Set of extensions without dots, or None when no filter applies.
    """
    if not extensions or extensions is True:
        return None
    if isinstance(extensions, str):
        items = [extensions]
    else:
        items = list(extensions)
    normalized = frozenset(item.lstrip(".") for item in items if item)
    return normalized or None


def matches_extensions(name: str | Path, allowed: frozenset[str] | None) -> bool:
    """Check a name against a normalized allow-list (None allows everything)."""
    if allowed is None:
        return True
    return extension(name) in allowed
