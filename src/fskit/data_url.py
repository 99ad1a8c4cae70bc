"""Conversion between files and base64 data URLs."""

from __future__ import annotations

import base64
import binascii
import mimetypes
from pathlib import Path

from fskit.errors import FsError
from fskit.filesystem import DEFAULT_MIME_TYPE, RealFileSystem
from fskit.protocols import FileSystem
from fskit.types import ErrorKind, OpResult


class DataUrlCodec:
    """Encode files as data URLs and decode data URLs back into files."""

    def __init__(self, filesystem: FileSystem | None = None) -> None:
        self.fs = filesystem or RealFileSystem()

    def file_to_data_url(self, path: Path) -> OpResult[str]:
        """Build a "data:<mime>;base64,<payload>" URL from a file."""
        path = Path(path)
        if not self.fs.is_file(path):
            return OpResult.fail(path, ErrorKind.NOT_A_FILE, f"Not a file: {path}")
        try:
            content = self.fs.read_bytes(path)
        except FsError as e:
            return OpResult.from_error(path, e)
        mime, _ = mimetypes.guess_type(path.name)
        payload = base64.b64encode(content).decode("ascii")
        return OpResult.ok(path, f"data:{mime or DEFAULT_MIME_TYPE};base64,{payload}")

    def data_url_to_file(self, data_url: str, path: Path) -> OpResult[int]:
        """Decode the payload of a data URL into a file."""
        path = Path(path)
        _, comma, payload = data_url.partition(",")
        if not comma:
            return OpResult.fail(path, ErrorKind.MALFORMED_DOCUMENT, "Data URL has no payload")
        try:
            content = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            return OpResult.fail(path, ErrorKind.MALFORMED_DOCUMENT, f"Invalid base64 payload: {e}")
        try:
            return OpResult.ok(path, self.fs.write_bytes(path, content))
        except FsError as e:
            return OpResult.from_error(path, e)
