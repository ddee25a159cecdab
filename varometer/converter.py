"""VCF to VarOmeter textDataset conversion.

VarOmeter takes GWAS-style input as a CSV string:

    SNP ID,P-value,Chr ID,Chr Position,Allele1,Allele2

A VCF carries no p-values, so one caller-supplied value is assigned to every
variant. Only the five leading VCF columns are read:

    #CHROM  POS     ID      REF     ALT     [QUAL FILTER INFO ...]
    chr1    10177   .       A       AC,G

Tolerates gzip content regardless of extension, a UTF-8 byte-order mark, blank
lines and extra comment lines. Data lines with fewer than five fields are
dropped without error.
"""

import gzip
import logging
import re
import zlib
from collections.abc import Iterator
from pathlib import Path

from varometer.exceptions import FormatError, NotFoundError
from varometer.io_utils import iter_lines
from varometer.models import VariantRecord

logger = logging.getLogger(__name__)

TEXT_DATASET_HEADER = "SNP ID,P-value,Chr ID,Chr Position,Allele1,Allele2"
DEFAULT_MAX_VARIANTS = 5000

_HEADER_RE = re.compile(r"^#CHROM\b")
_CHR_PREFIX_RE = re.compile(r"^chr", re.IGNORECASE)
_MISSING_ID = "."
_MIN_FIELDS = 5


def normalize_chromosome(chrom: str) -> str:
    """Strip a leading ``chr`` prefix, case-insensitively.

    Example:
        >>> normalize_chromosome("chr7")
        '7'
        >>> normalize_chromosome("CHRX")
        'X'
    """
    return _CHR_PREFIX_RE.sub("", chrom, count=1)


def synthesize_id(chrom: str, pos: str, ref: str, alt: str) -> str:
    """Build a stable identifier for a variant with no ID."""
    return f"{chrom}-{pos}-SNV-{ref}-{alt}"


def parse_variant_line(line: str, p_value: float) -> VariantRecord | None:
    """Convert one VCF data line to a VariantRecord.

    Args:
        line: Tab-separated data line (no trailing newline)
        p_value: Significance value to assign

    Returns:
        VariantRecord, or None if the line has fewer than five fields
    """
    fields = line.split("\t")
    if len(fields) < _MIN_FIELDS:
        return None

    chrom, pos, snp_id, ref, alt = fields[:_MIN_FIELDS]

    # ALT may list several alleles; VarOmeter takes one
    alt1 = alt.split(",", 1)[0]

    if not snp_id or snp_id == _MISSING_ID:
        snp_id = synthesize_id(chrom, pos, ref, alt1)

    return VariantRecord(
        snp_id=snp_id,
        p_value=p_value,
        chr_id=normalize_chromosome(chrom),
        position=pos,
        allele1=ref,
        allele2=alt1,
    )


def _skip_to_header(lines: Iterator[str]) -> str:
    # Blank lines, ## meta lines and stray comments before the header are skipped
    for line in lines:
        if _HEADER_RE.match(line):
            return line
    raise FormatError(
        "VCF header not found (#CHROM ...). File may not be a valid readable VCF."
    )


def iter_variant_records(
    vcf_path: str | Path,
    p_value: float = 1.0,
    max_variants: int | None = None,
) -> Iterator[VariantRecord]:
    """Stream VariantRecords from a VCF file.

    Args:
        vcf_path: Path to .vcf or .vcf.gz (gzip detected by magic bytes too)
        p_value: Significance value assigned to every variant
        max_variants: Stop after this many records (None for no limit)

    Yields:
        VariantRecord for each well-formed data line, in file order

    Raises:
        NotFoundError: If the file doesn't exist
        FormatError: If no #CHROM header line is found, or the content
            is not valid gzip or UTF-8
    """
    vcf_path = Path(vcf_path)
    if not vcf_path.exists():
        raise NotFoundError(f"File not found: {vcf_path}")

    if max_variants is not None and max_variants < 0:
        raise ValueError(f"max_variants must be >= 0, got {max_variants}")

    lines = iter_lines(vcf_path)
    try:
        _skip_to_header(lines)

        emitted = 0
        skipped = 0
        if max_variants is None or max_variants > 0:
            for line in lines:
                if not line.strip() or line.startswith("#"):
                    continue

                record = parse_variant_line(line, p_value)
                if record is None:
                    skipped += 1
                    continue

                emitted += 1
                yield record
                if max_variants is not None and emitted >= max_variants:
                    break

        logger.debug(
            "Read %d variants from %s (%d short lines skipped)",
            emitted, vcf_path, skipped,
        )
    except (gzip.BadGzipFile, zlib.error, EOFError, UnicodeDecodeError) as e:
        raise FormatError(f"Could not decode {vcf_path}: {e}") from e
    finally:
        lines.close()


def vcf_to_text_dataset(
    vcf_path: str | Path,
    p_value: float = 1.0,
    max_variants: int | None = DEFAULT_MAX_VARIANTS,
) -> str:
    """Convert a VCF file into a VarOmeter textDataset CSV string.

    Args:
        vcf_path: Path to .vcf or .vcf.gz
        p_value: Default p-value to assign to every variant
        max_variants: Limit on variants, for quick tests (None for all)

    Returns:
        Header plus one row per variant, joined with newlines

    Raises:
        NotFoundError: If the file doesn't exist
        FormatError: If no #CHROM header line is found, or the content
            is not valid gzip or UTF-8

    Example:
        >>> text = vcf_to_text_dataset(Path("sample.vcf"), max_variants=200)
        >>> text.splitlines()[0]
        'SNP ID,P-value,Chr ID,Chr Position,Allele1,Allele2'
    """
    rows = [TEXT_DATASET_HEADER]
    rows.extend(
        record.to_row()
        for record in iter_variant_records(vcf_path, p_value, max_variants)
    )
    return "\n".join(rows)
