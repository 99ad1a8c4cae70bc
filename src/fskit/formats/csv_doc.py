"""CSV documents."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from pathlib import Path

from fskit.errors import FsError
from fskit.formats.base import BaseDocument
from fskit.types import ErrorKind, OpResult

Row = list[str]


class CsvDocument(BaseDocument):
    """Row-oriented CSV reading and writing."""

    name = "csv"
    extension = "csv"

    def read(self, path: Path, delimiter: str | None = None) -> OpResult[list[Row]]:
        """Parse a CSV file into a list of rows."""
        path = Path(path)
        try:
            text = self._load_text(path)
        except FsError as e:
            return self._fail(path, e)
        return OpResult.ok(path, self._parse(text, delimiter))

    def create(
        self, path: Path, data: Iterable[Sequence[object]], delimiter: str | None = None
    ) -> OpResult[int]:
        """Write rows to a new CSV file, appending ".csv" when missing."""
        return self._write_text(self.target_path(path), self._render(data, delimiter))

    def edit(
        self, path: Path, data: Iterable[Sequence[object]], delimiter: str | None = None
    ) -> OpResult[int]:
        """Replace the rows of an existing CSV file."""
        path = Path(path)
        if not self.fs.exists(path):
            return self._not_found(path)
        if not self.matches(path):
            return OpResult.fail(path, ErrorKind.NOT_A_FILE, f"Not a CSV document: {path}")
        return self._write_text(path, self._render(data, delimiter))

    def first_line(self, path: Path, delimiter: str | None = None) -> OpResult[Row]:
        """Return the first row (usually the header)."""
        result = self.read(path, delimiter)
        if not result:
            return result
        rows = result.value or []
        return OpResult.ok(result.path, rows[0] if rows else [])

    def row_count(self, path: Path, delimiter: str | None = None) -> OpResult[int]:
        """Count the rows after the header."""
        result = self.read(path, delimiter)
        if not result:
            return result
        return OpResult.ok(result.path, max(len(result.value or []) - 1, 0))

    def column_count(self, path: Path, delimiter: str | None = None) -> OpResult[int]:
        """Return the column count shared by every row after the header.

        Fails with MALFORMED_DOCUMENT when data rows disagree. A file with
        no data rows has zero columns.
        """
        result = self.read(path, delimiter)
        if not result:
            return result
        counts = {len(row) for row in (result.value or [])[1:]}
        if len(counts) > 1:
            return OpResult.fail(
                result.path,
                ErrorKind.MALFORMED_DOCUMENT,
                f"Inconsistent column counts in {path}: {sorted(counts)}",
            )
        return OpResult.ok(result.path, counts.pop() if counts else 0)

    def _parse(self, text: str, delimiter: str | None) -> list[Row]:
        reader = csv.reader(io.StringIO(text), delimiter=delimiter or self.settings.csv_delimiter)
        return [row for row in reader if row]

    def _render(self, rows: Iterable[Sequence[object]], delimiter: str | None) -> str:
        buffer = io.StringIO()
        writer = csv.writer(
            buffer, delimiter=delimiter or self.settings.csv_delimiter, lineterminator="\n"
        )
        writer.writerows(rows)
        return buffer.getvalue()
