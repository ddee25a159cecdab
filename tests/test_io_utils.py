"""Tests for io_utils module (gzip and BOM handling)."""

import gzip
from pathlib import Path

import pytest

from varometer.io_utils import (
    has_gz_extension,
    has_gzip_magic,
    is_gzipped,
    iter_lines,
    smart_open,
    strip_bom,
)


class TestIsGzipped:
    """Test gzip detection (magic bytes OR .gz extension)."""

    def test_magic_bytes_without_gz_extension(self, tmp_path: Path) -> None:
        """A .vcf file that is really gzip is detected by its magic bytes."""
        path = tmp_path / "x.vcf"
        with gzip.open(path, "wt") as f:
            f.write("content\n")

        assert path.read_bytes()[:2] == b"\x1f\x8b"
        assert has_gzip_magic(path) is True
        assert is_gzipped(path) is True

    def test_gz_extension_without_magic(self, tmp_path: Path) -> None:
        """Extension alone is enough to treat the file as gzip."""
        path = tmp_path / "x.vcf.gz"
        path.write_text("not gzipped content")

        assert has_gzip_magic(path) is False
        assert is_gzipped(path) is True

    def test_gz_extension_is_case_insensitive(self, tmp_path: Path) -> None:
        assert has_gz_extension(tmp_path / "SAMPLE.VCF.GZ") is True

    def test_plain_file(self, tmp_path: Path) -> None:
        path = tmp_path / "x.vcf"
        path.write_text("plain content\n")

        assert is_gzipped(path) is False

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.vcf"
        path.write_text("")

        assert is_gzipped(path) is False


class TestSmartOpen:
    """Test transparent opening."""

    def test_open_plain_text(self, tmp_path: Path) -> None:
        path = tmp_path / "test.txt"
        path.write_text("line1\nline2\n")

        with smart_open(path) as f:
            lines = f.readlines()

        assert lines == ["line1\n", "line2\n"]

    def test_open_gzipped(self, tmp_path: Path) -> None:
        path = tmp_path / "test.gz"
        with gzip.open(path, "wt") as f:
            f.write("line1\nline2\n")

        with smart_open(path) as f:
            lines = f.readlines()

        assert len(lines) == 2
        assert lines[0].strip() == "line1"

    def test_fake_gz_fails_on_read(self, tmp_path: Path) -> None:
        """A .gz name without gzip content is decoded as gzip and fails."""
        path = tmp_path / "fake.vcf.gz"
        path.write_text("#CHROM\tPOS\n")

        with pytest.raises(gzip.BadGzipFile):
            with smart_open(path) as f:
                f.read()

    def test_handle_closed_after_exit(self, tmp_path: Path) -> None:
        path = tmp_path / "test.txt"
        path.write_text("line1\n")

        with smart_open(path) as f:
            pass

        assert f.closed


class TestIterLines:
    """Test line iteration."""

    def test_strips_bom_and_newlines(self, tmp_path: Path) -> None:
        path = tmp_path / "bom.vcf"
        path.write_bytes("\ufeff##fileformat=VCFv4.2\r\nrow\n".encode("utf-8"))

        lines = list(iter_lines(path))

        assert lines == ["##fileformat=VCFv4.2", "row"]

    def test_iter_gzipped(self, tmp_path: Path) -> None:
        path = tmp_path / "test.gz"
        with gzip.open(path, "wt") as f:
            f.write("header\nline1\n")

        assert list(iter_lines(path)) == ["header", "line1"]

    def test_strip_bom_is_idempotent(self) -> None:
        assert strip_bom("\ufeff#CHROM") == "#CHROM"
        assert strip_bom("#CHROM") == "#CHROM"
