"""Tests for data URL conversion."""

from __future__ import annotations

from pathlib import Path

from fskit.data_url import DataUrlCodec
from fskit.types import ErrorKind


class TestDataUrlCodec:
    """Tests for DataUrlCodec."""

    def test_file_to_data_url(self, fs, tmp_path: Path) -> None:
        """Test a text file is encoded with its guessed MIME type."""
        path = tmp_path / "hello.txt"
        path.write_bytes(b"hi")

        result = DataUrlCodec(fs).file_to_data_url(path)

        assert result.value == "data:text/plain;base64,aGk="

    def test_unknown_type_falls_back(self, fs, tmp_path: Path) -> None:
        """Test an unknown extension uses application/octet-stream."""
        path = tmp_path / "blob.unknownext"
        path.write_bytes(b"\x00\x01")

        result = DataUrlCodec(fs).file_to_data_url(path)

        assert result.value.startswith("data:application/octet-stream;base64,")

    def test_directory_is_rejected(self, fs, tmp_path: Path) -> None:
        """Test a directory cannot be encoded."""
        assert DataUrlCodec(fs).file_to_data_url(tmp_path).error is ErrorKind.NOT_A_FILE

    def test_data_url_to_file(self, fs, tmp_path: Path) -> None:
        """Test the payload is decoded into the target file."""
        target = tmp_path / "out.bin"

        result = DataUrlCodec(fs).data_url_to_file("data:text/plain;base64,aGk=", target)

        assert result.value == 2
        assert target.read_bytes() == b"hi"

    def test_round_trip(self, fs, tmp_path: Path) -> None:
        """Test encoding then decoding reproduces the bytes."""
        source = tmp_path / "image.png"
        source.write_bytes(bytes(range(256)))
        codec = DataUrlCodec(fs)

        codec.data_url_to_file(codec.file_to_data_url(source).value, tmp_path / "copy.png")

        assert (tmp_path / "copy.png").read_bytes() == source.read_bytes()

    def test_missing_comma(self, fs, tmp_path: Path) -> None:
        """Test a URL without a payload is malformed."""
        result = DataUrlCodec(fs).data_url_to_file("data:text/plain", tmp_path / "x")

        assert result.error is ErrorKind.MALFORMED_DOCUMENT
        assert not (tmp_path / "x").exists()

    def test_invalid_base64(self, fs, tmp_path: Path) -> None:
        """Test an invalid payload is malformed."""
        result = DataUrlCodec(fs).data_url_to_file("data:;base64,@@@", tmp_path / "x")

        assert result.error is ErrorKind.MALFORMED_DOCUMENT
