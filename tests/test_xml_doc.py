"""Tests for XML documents."""

from __future__ import annotations

from pathlib import Path

from fskit.config import FsSettings
from fskit.formats import XmlDocument
from fskit.types import ErrorKind


class TestXmlCreate:
    """Tests for building documents from data."""

    def test_create_mapping(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test mapping keys become child elements."""
        path = tmp_path / "config.xml"

        result = xml_doc.create(path, {"name": "fskit", "debug": True})

        assert result.success is True
        assert path.read_text() == (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            "<root>\n"
            "  <name>fskit</name>\n"
            "  <debug>true</debug>\n"
            "</root>\n"
        )

    def test_create_sequence_uses_item(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test list elements become <item> children."""
        path = tmp_path / "list.xml"
        xml_doc.create(path, {"tags": ["a", "b"]}, root="doc")

        root = xml_doc.read(path).value
        assert root.tag == "doc"
        assert [item.text for item in root.find("tags")] == ["a", "b"]

    def test_create_numeric_keys_use_item(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test digit keys are not used as tag names."""
        path = tmp_path / "numeric.xml"
        xml_doc.create(path, {"0": "zero", "1": "one"})

        root = xml_doc.read(path).value
        assert [child.tag for child in root] == ["item", "item"]

    def test_create_scalar_is_wrapped(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test a scalar root value is wrapped in <value>."""
        path = tmp_path / "scalar.xml"
        xml_doc.create(path, 42)

        assert xml_doc.read(path).value.find("value").text == "42"

    def test_create_does_not_append_extension(
        self, xml_doc: XmlDocument, tmp_path: Path
    ) -> None:
        """Test the given path is used as is."""
        result = xml_doc.create(tmp_path / "feed", {"a": 1})

        assert result.path == tmp_path / "feed"
        assert (tmp_path / "feed").exists()

    def test_create_configured_root(self, fs, tmp_path: Path) -> None:
        """Test the default root tag comes from settings."""
        doc = XmlDocument(filesystem=fs, settings=FsSettings(xml_root="settings"))
        path = tmp_path / "s.xml"
        doc.create(path, {})

        assert doc.root_name(path).value == "settings"


class TestXmlRead:
    """Tests for reading documents."""

    def test_read_as_string(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test raw text access."""
        path = tmp_path / "raw.xml"
        path.write_text("<a><b>1</b></a>")

        assert xml_doc.read_as_string(path).value == "<a><b>1</b></a>"

    def test_read_malformed(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test invalid XML is reported, not raised."""
        path = tmp_path / "bad.xml"
        path.write_text("<a><b></a>")

        result = xml_doc.read(path)

        assert result.success is False
        assert result.error is ErrorKind.MALFORMED_DOCUMENT

    def test_root_name_missing(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test a missing document is NOT_FOUND."""
        assert xml_doc.root_name(tmp_path / "missing.xml").error is ErrorKind.NOT_FOUND


class TestXmlEdit:
    """Tests for in-place edits."""

    def test_edit_updates_existing_elements(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test nested mappings descend and update text."""
        path = tmp_path / "app.xml"
        path.write_text("<app><db><host>old</host><port>1</port></db></app>")

        result = xml_doc.edit(path, {"db": {"host": "new", "port": 5432}})

        assert result.success is True
        root = xml_doc.read(path).value
        assert root.find("db/host").text == "new"
        assert root.find("db/port").text == "5432"

    def test_edit_ignores_unknown_keys(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test keys without a matching element add nothing."""
        path = tmp_path / "app.xml"
        path.write_text("<app><name>x</name></app>")

        xml_doc.edit(path, {"missing": "value"})

        root = xml_doc.read(path).value
        assert [child.tag for child in root] == ["name"]

    def test_edit_malformed_leaves_file(self, xml_doc: XmlDocument, tmp_path: Path) -> None:
        """Test a malformed document is not rewritten."""
        path = tmp_path / "bad.xml"
        path.write_text("<broken")

        assert xml_doc.edit(path, {"a": 1}).error is ErrorKind.MALFORMED_DOCUMENT
        assert path.read_text() == "<broken"
