"""Tests for CSV documents."""

from __future__ import annotations

from pathlib import Path

import pytest

from fskit.formats import CsvDocument
from fskit.types import ErrorKind


@pytest.fixture
def people_csv(tmp_path: Path) -> Path:
    path = tmp_path / "people.csv"
    path.write_text("name,age\nada,36\ngrace,45\n")
    return path


class TestCsvRead:
    """Tests for reading CSV files."""

    def test_read(self, csv_doc: CsvDocument, people_csv: Path) -> None:
        """Test rows are parsed with the default delimiter."""
        result = csv_doc.read(people_csv)

        assert result.success is True
        assert result.value == [["name", "age"], ["ada", "36"], ["grace", "45"]]

    def test_read_quoted_fields(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test quoted delimiters and newlines stay inside one field."""
        path = tmp_path / "quoted.csv"
        path.write_text('title,body\n"a, b","line1\nline2"\n')

        assert csv_doc.read(path).value == [["title", "body"], ["a, b", "line1\nline2"]]

    def test_read_custom_delimiter(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test a per-call delimiter."""
        path = tmp_path / "semi.csv"
        path.write_text("a;b\n1;2\n")

        assert csv_doc.read(path, delimiter=";").value == [["a", "b"], ["1", "2"]]

    def test_read_skips_blank_lines(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test blank lines produce no rows."""
        path = tmp_path / "blank.csv"
        path.write_text("a,b\n\n1,2\n\n")

        assert csv_doc.read(path).value == [["a", "b"], ["1", "2"]]

    def test_read_missing(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test a missing file is NOT_FOUND."""
        assert csv_doc.read(tmp_path / "missing.csv").error is ErrorKind.NOT_FOUND

    def test_first_line(self, csv_doc: CsvDocument, people_csv: Path) -> None:
        """Test the header row is returned."""
        assert csv_doc.first_line(people_csv).value == ["name", "age"]

    def test_first_line_empty_file(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test an empty file has an empty first row."""
        path = tmp_path / "empty.csv"
        path.write_text("")

        assert csv_doc.first_line(path).value == []

    def test_row_count_excludes_header(self, csv_doc: CsvDocument, people_csv: Path) -> None:
        """Test the header is not counted."""
        assert csv_doc.row_count(people_csv).value == 2

    def test_column_count(self, csv_doc: CsvDocument, people_csv: Path) -> None:
        """Test the shared column count of data rows."""
        assert csv_doc.column_count(people_csv).value == 2

    def test_column_count_header_only(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test a header-only file has no data columns."""
        path = tmp_path / "header.csv"
        path.write_text("a,b,c\n")

        assert csv_doc.column_count(path).value == 0

    def test_column_count_inconsistent(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test ragged data rows are malformed."""
        path = tmp_path / "ragged.csv"
        path.write_text("a,b\n1,2\n3\n")

        result = csv_doc.column_count(path)

        assert result.success is False
        assert result.error is ErrorKind.MALFORMED_DOCUMENT


class TestCsvWrite:
    """Tests for creating and editing CSV files."""

    def test_create_appends_extension(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test create adds .csv and writes one line per row."""
        result = csv_doc.create(tmp_path / "out", [["a", "b"], [1, 2]])

        assert result.path == tmp_path / "out.csv"
        assert (tmp_path / "out.csv").read_text() == "a,b\n1,2\n"

    def test_create_quotes_when_needed(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test fields holding the delimiter are quoted."""
        csv_doc.create(tmp_path / "q.csv", [["x, y", "z"]])

        assert (tmp_path / "q.csv").read_text() == '"x, y",z\n'

    def test_edit_replaces_rows(self, csv_doc: CsvDocument, people_csv: Path) -> None:
        """Test edit overwrites an existing file."""
        result = csv_doc.edit(people_csv, [["only", "row"]])

        assert result.success is True
        assert people_csv.read_text() == "only,row\n"

    def test_edit_missing(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test edit never creates a file."""
        path = tmp_path / "missing.csv"

        assert csv_doc.edit(path, [["a"]]).error is ErrorKind.NOT_FOUND
        assert not path.exists()

    def test_edit_wrong_extension(self, csv_doc: CsvDocument, tmp_path: Path) -> None:
        """Test edit refuses a non-CSV file."""
        path = tmp_path / "notes.txt"
        path.write_text("keep")

        assert csv_doc.edit(path, [["a"]]).error is ErrorKind.NOT_A_FILE
        assert path.read_text() == "keep"
