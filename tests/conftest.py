"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fskit.config import FsSettings
from fskit.filesystem import RealFileSystem
from fskit.formats import CsvDocument, JsonDocument, XmlDocument
from fskit.tree import TreeOperator


@pytest.fixture
def settings() -> FsSettings:
    """Default settings."""
    return FsSettings.create_default()


@pytest.fixture
def fs(settings: FsSettings) -> RealFileSystem:
    """Real filesystem bound to default settings."""
    return RealFileSystem(settings)


@pytest.fixture
def tree(fs: RealFileSystem) -> TreeOperator:
    """Tree operator over the real filesystem."""
    return TreeOperator.create(fs)


@pytest.fixture
def json_doc(fs: RealFileSystem, settings: FsSettings) -> JsonDocument:
    return JsonDocument(filesystem=fs, settings=settings)


@pytest.fixture
def csv_doc(fs: RealFileSystem, settings: FsSettings) -> CsvDocument:
    return CsvDocument(filesystem=fs, settings=settings)


@pytest.fixture
def xml_doc(fs: RealFileSystem, settings: FsSettings) -> XmlDocument:
    return XmlDocument(filesystem=fs, settings=settings)


# ============================================================================
# Directory Tree Fixtures
# ============================================================================


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small nested tree of regular files.

    Layout:
        root/
            a.txt
            b.csv
            c.txt
            docs/
                guide.md
                nested/
                    deep.txt
            empty/
    """
    root = tmp_path / "root"
    (root / "docs" / "nested").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_text("alpha")
    (root / "b.csv").write_text("x,y\n1,2\n")
    (root / "c.txt").write_text("gamma")
    (root / "docs" / "guide.md").write_text("# Guide")
    (root / "docs" / "nested" / "deep.txt").write_text("deep")
    return root


@pytest.fixture
def outside_dir(tmp_path: Path) -> Path:
    """Directory outside the sample tree, used as a symlink target."""
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "keep.txt").write_text("must survive")
    return outside


@pytest.fixture
def json_array_file(tmp_path: Path) -> Path:
    """JSON document whose root is [1,2,3]."""
    path = tmp_path / "numbers.json"
    path.write_text("[1,2,3]")
    return path


@pytest.fixture
def json_object_file(tmp_path: Path) -> Path:
    """JSON document whose root is an object."""
    path = tmp_path / "object.json"
    path.write_text('{"a":1}')
    return path


# ============================================================================
# Mock FileSystem Fixture
# ============================================================================


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileSystem for testing.

    The mock tracks all filesystem operations without touching real files.
    """
    mock_fs = MagicMock()
    mock_fs.exists.return_value = False
    mock_fs.is_dir.return_value = False
    mock_fs.is_symlink.return_value = False
    mock_fs.list_children.return_value = []
    return mock_fs
