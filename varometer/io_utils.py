"""I/O utilities for transparent gzip handling.

VCF files arrive both plain and gzip-compressed, and the extension is not a
reliable signal (``.vcf`` files that are really gzip are common). A file is
treated as compressed when its first two bytes are the gzip magic number OR
its name ends in ``.gz``.

Example:
    with smart_open(Path("sample.vcf.gz")) as f:
        for line in f:
            process(line)
"""

import gzip
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

# Gzip magic bytes (first two bytes of gzip file)
GZIP_MAGIC = b"\x1f\x8b"

BYTE_ORDER_MARK = "\ufeff"


def has_gzip_magic(filepath: Path) -> bool:
    """Check whether a file starts with the gzip magic bytes.

    Args:
        filepath: Path to file to check

    Returns:
        True if the first two bytes are 1F 8B; False for shorter or
        unreadable files
    """
    try:
        with open(filepath, "rb") as f:
            return f.read(2) == GZIP_MAGIC
    except OSError:
        return False


def has_gz_extension(filepath: Path) -> bool:
    """Check for a ``.gz`` suffix, case-insensitively."""
    return str(filepath).lower().endswith(".gz")


def is_gzipped(filepath: Path) -> bool:
    """Decide whether to decode a file as gzip.

    Either signal is enough: the magic bytes match, or the name ends in
    ``.gz``. A ``.gz`` file without the magic is still decoded as gzip and
    will fail on read.

    Args:
        filepath: Path to file to check

    Returns:
        True if the file should be opened with gzip

    Example:
        >>> is_gzipped(Path("sample.vcf.gz"))
        True
    """
    return has_gzip_magic(filepath) or has_gz_extension(filepath)


@contextmanager
def smart_open(filepath: Path) -> Iterator[IO[str]]:
    """Open a file as UTF-8 text with automatic gzip detection.

    The handle is closed on every exit path, including generator shutdown
    when a consumer stops iterating early.

    Args:
        filepath: Path to file (may be gzipped)

    Yields:
        Text file handle
    """
    if is_gzipped(filepath):
        f = gzip.open(filepath, "rt", encoding="utf-8")
    else:
        f = open(filepath, "r", encoding="utf-8")

    try:
        yield f
    finally:
        f.close()


def strip_bom(line: str) -> str:
    """Remove a leading byte-order mark, if present."""
    if line.startswith(BYTE_ORDER_MARK):
        return line[len(BYTE_ORDER_MARK):]
    return line


def iter_lines(filepath: Path) -> Iterator[str]:
    """Iterate over lines with gzip auto-detection.

    Lines are stripped of a leading byte-order mark and of trailing
    newline characters (``\\n`` and ``\\r``).

    Args:
        filepath: Path to file (may be gzipped)

    Yields:
        Lines from file
    """
    with smart_open(filepath) as f:
        for line in f:
            yield strip_bom(line).rstrip("\r\n")
