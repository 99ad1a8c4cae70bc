"""JSON documents, including the document-as-array store.

Array mutations are read-modify-write: every call re-reads the file,
applies a transform to the decoded list, re-encodes it and overwrites the
file. Without `lock=True` no lock is held across that window, so two
writers mutating the same file concurrently can lose an update.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from fskit.errors import FsError, MalformedDocumentError, NotArrayDocumentError
from fskit.formats.base import BaseDocument
from fskit.types import ErrorKind, OpResult

logger = logging.getLogger(__name__)

_COMPACT_SEPARATORS = (",", ":")


class JsonDocument(BaseDocument):
    """JSON encode/decode helpers and array mutation primitives."""

    name = "json"
    extension = "json"

    def encode(self, value: Any, pretty: bool = False) -> str:
        """Encode a value as JSON text.

        Args:
            value: Any JSON-serializable value.
            pretty: Indent with the configured width.

        Returns:
            Compact JSON, or indented JSON when pretty is set.
        """
        if pretty:
            return json.dumps(value, indent=self.settings.json_indent)
        return json.dumps(value, separators=_COMPACT_SEPARATORS)

    def decode(self, path: Path) -> OpResult[Any]:
        """Decode a JSON file.

        Returns:
            OpResult with the root value; fails with NOT_FOUND,
            PERMISSION_DENIED or MALFORMED_DOCUMENT.
        """
        path = Path(path)
        try:
            return OpResult.ok(path, self._parse(self._load_text(path), path))
        except FsError as e:
            return self._fail(path, e)

    def read(self, path: Path) -> OpResult[Any]:
        return self.decode(path)

    def create(self, path: Path, data: Any, pretty: bool = False) -> OpResult[int]:
        """Write a JSON file, appending ".json" to the name when missing.

        Strings are written verbatim as already-encoded JSON.
        """
        content = data if isinstance(data, str) else self.encode(data, pretty=pretty)
        return self._write_text(self.target_path(path), content)

    def create_pretty(self, path: Path, data: Any) -> OpResult[int]:
        return self.create(path, data, pretty=True)

    # ------------------------------------------------------------------
    # Root inspection
    # ------------------------------------------------------------------

    def is_array_root(self, path: Path) -> bool:
        """Check whether the document's first structural character is "[".

        Only the first `head_bytes` bytes are inspected; this is a cheap
        peek, not a parse. Never raises.
        """
        return self._root_char(Path(path)) == "["

    def is_object_root(self, path: Path) -> bool:
        """Check whether the document's first structural character is "{"."""
        return self._root_char(Path(path)) == "{"

    def keys(self, path: Path) -> OpResult[list[Any]]:
        """Keys of an object root, or indices of an array root."""
        result = self.decode(path)
        if not result:
            return result
        root = result.value
        if isinstance(root, dict):
            return OpResult.ok(result.path, list(root))
        if isinstance(root, list):
            return OpResult.ok(result.path, list(range(len(root))))
        return self._scalar_root(result.path)

    def values(self, path: Path) -> OpResult[list[Any]]:
        """Values of an object root, or the elements of an array root."""
        result = self.decode(path)
        if not result:
            return result
        root = result.value
        if isinstance(root, dict):
            return OpResult.ok(result.path, list(root.values()))
        if isinstance(root, list):
            return OpResult.ok(result.path, root)
        return self._scalar_root(result.path)

    def is_empty(self, path: Path) -> OpResult[bool]:
        """Check whether an array or object root has no elements."""
        result = self.decode(path)
        if not result:
            return result
        if not isinstance(result.value, (dict, list)):
            return self._scalar_root(result.path)
        return OpResult.ok(result.path, len(result.value) == 0)

    # ------------------------------------------------------------------
    # Array mutation
    # ------------------------------------------------------------------

    def mutate(
        self,
        path: Path,
        transform: Callable[[list[Any]], list[Any]],
        *,
        lock: bool = False,
        durable: bool = False,
    ) -> OpResult[int]:
        """Apply transform to the decoded array and overwrite the file.

        Args:
            path: Document whose root must be an array.
            transform: Receives the current list, returns the new list.
            lock: Hold an exclusive lock from the read through the write.
            durable: Write through a temp file and rename instead of in place.

        Returns:
            OpResult with the number of bytes written. A document whose root
            is not an array fails with NOT_AN_ARRAY_DOCUMENT and is left
            untouched.

        Raises:
            ValueError: If both lock and durable are requested; the rename
                would swap the locked file out from under other waiters.
        """
        if lock and durable:
            raise ValueError("lock and durable cannot be combined")

        path = Path(path)
        if not self.is_array_root(path):
            if not self.fs.exists(path):
                return self._not_found(path)
            return OpResult.fail(
                path, ErrorKind.NOT_AN_ARRAY_DOCUMENT, f"Root value of {path} is not an array"
            )

        try:
            if lock:
                written = self._mutate_locked(path, transform)
            else:
                current = self._parse_array(self._load_text(path), path)
                payload = self.encode(transform(current))
                if durable:
                    written = self.fs.replace(path, payload)
                else:
                    written = self.fs.write_text(path, payload)
        except FsError as e:
            return self._fail(path, e)

        logger.debug("Rewrote array document %s (%d bytes)", path, written)
        return OpResult.ok(path, written)

    def push(self, path: Path, value: Any, **options: bool) -> OpResult[int]:
        """Append value to the array stored in path."""
        return self.mutate(path, lambda items: [*items, value], **options)

    def pop(self, path: Path, **options: bool) -> OpResult[int]:
        """Remove the last element of the array stored in path."""
        return self.mutate(path, lambda items: items[:-1], **options)

    def shift(self, path: Path, **options: bool) -> OpResult[int]:
        """Remove the first element of the array stored in path."""
        return self.mutate(path, lambda items: items[1:], **options)

    def combine(
        self,
        paths: Sequence[Path],
        result_path: Path | None = None,
        pretty: bool = False,
    ) -> OpResult[int]:
        """Write the arrays of several documents as one array of arrays.

        Every input is decoded before anything is written; the first input
        that fails stops the operation.

        Args:
            paths: Documents whose roots must be arrays.
            result_path: Output path; defaults to the current Unix time.
            pretty: Indent the output.

        Returns:
            OpResult for the written document with the number of bytes written.
        """
        combined = []
        for source in paths:
            source = Path(source)
            try:
                combined.append(self._parse_array(self._load_text(source), source))
            except FsError as e:
                return self._fail(source, e)

        if result_path is None:
            result_path = Path(str(int(time.time())))
        return self.create(result_path, combined, pretty=pretty)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _mutate_locked(self, path: Path, transform: Callable[[list[Any]], list[Any]]) -> int:
        with self.fs.locked(path) as handle:
            raw = handle.read()
            try:
                text = raw.decode(self.settings.encoding)
            except UnicodeDecodeError as e:
                raise MalformedDocumentError(f"{path} is not valid text", path) from e
            payload = self.encode(transform(self._parse_array(text, path)))
            data = payload.encode(self.settings.encoding)
            handle.seek(0)
            handle.truncate()
            return handle.write(data)

    def _root_char(self, path: Path) -> str:
        try:
            head = self.fs.read_head(path, self.settings.head_bytes)
        except FsError:
            return ""
        text = head.decode(self.settings.encoding, errors="ignore").lstrip("\ufeff \t\r\n")
        return text[:1]

    @staticmethod
    def _parse(text: str, path: Path) -> Any:
        try:
            return json.loads(text.lstrip("\ufeff"))
        except json.JSONDecodeError as e:
            raise MalformedDocumentError(f"Invalid JSON in {path}: {e}", path) from e

    def _parse_array(self, text: str, path: Path) -> list[Any]:
        root = self._parse(text, path)
        if not isinstance(root, list):
            raise NotArrayDocumentError(f"Root value of {path} is not an array", path)
        return root

    @staticmethod
    def _scalar_root(path: Path) -> OpResult:
        return OpResult.fail(
            path, ErrorKind.NOT_AN_ARRAY_DOCUMENT, f"Root value of {path} is a scalar"
        )
