"""Conversion of a single raw data line into a Variant or a LineError."""

import re

from ..models import (
    RSID_PREFIXES,
    VALID_CHROMOSOMES,
    LineError,
    LineErrorReason,
    LineParseOutcome,
    Variant,
)

MIN_COLUMNS = 4

# Accepted on input; "M" is stored as "MT"
INPUT_CHROMOSOMES = VALID_CHROMOSOMES | {"M"}
CHROMOSOME_ALIASES = {"M": "MT"}

GENOTYPE_PATTERN = re.compile(
    r"^([ATCG-]{1,2}|--|\?\?|[ATCG][ATCG]|[ATCG]-|-[ATCG])$", re.IGNORECASE
)
STANDARD_RSID_PATTERN = re.compile(r"^rs\d+$")
DIGITS_PATTERN = re.compile(r"^\d+$", re.ASCII)
STANDARD_GENOTYPE_PATTERN = re.compile(r"^[ATCG]{2}$")

BASE_CONFIDENCE = 0.8
STANDARD_RSID_BONUS = 0.1
STANDARD_CHROMOSOME_BONUS = 0.05
STANDARD_GENOTYPE_BONUS = 0.05


def calculate_confidence(rsid: str, chromosome: str, genotype: str) -> float:
    """Score how well-formed a record is.

    Base 0.8, +0.1 for ``rs<digits>`` ids, +0.05 for numeric or X/Y/MT
    chromosomes, +0.05 for a two-base genotype, capped at 1.0. The inputs
    are the raw column values, before normalization.
    """
    confidence = BASE_CONFIDENCE

    if STANDARD_RSID_PATTERN.match(rsid):
        confidence += STANDARD_RSID_BONUS

    if DIGITS_PATTERN.match(chromosome) or chromosome in ("X", "Y", "MT"):
        confidence += STANDARD_CHROMOSOME_BONUS

    if STANDARD_GENOTYPE_PATTERN.match(genotype):
        confidence += STANDARD_GENOTYPE_BONUS

    return round(min(confidence, 1.0), 10)


def _error(line_number: int, reason: LineErrorReason, value: str, message: str) -> LineError:
    return LineError(line_number=line_number, reason=reason, value=value, message=message)


def parse_line(
    line: str,
    delimiter: str,
    file_name: str,
    line_number: int,
    upload_date: str = "",
) -> LineParseOutcome:
    """Parse one data line.

    Args:
        line: Trimmed data line (comments and headers already removed)
        delimiter: Column delimiter detected for the file
        file_name: Source file name recorded on the variant
        line_number: 1-based line number used in error messages
        upload_date: ISO timestamp shared by all variants of one upload

    Returns:
        A Variant on success, otherwise a LineError naming the failed check
    """
    parts = [part.strip() for part in line.split(delimiter)]

    if len(parts) < MIN_COLUMNS:
        return _error(
            line_number,
            LineErrorReason.INSUFFICIENT_COLUMNS,
            line,
            f"Insufficient columns (expected {MIN_COLUMNS}, got {len(parts)})",
        )

    rsid, chromosome, position, genotype = parts[:MIN_COLUMNS]

    if not rsid or not rsid.startswith(RSID_PREFIXES):
        return _error(
            line_number, LineErrorReason.INVALID_RSID, rsid, f"Invalid rsID format: {rsid}"
        )

    chrom_upper = chromosome.upper()
    if chrom_upper not in INPUT_CHROMOSOMES:
        return _error(
            line_number,
            LineErrorReason.INVALID_CHROMOSOME,
            chromosome,
            f"Invalid chromosome: {chromosome}",
        )

    pos = int(position) if DIGITS_PATTERN.match(position) else 0
    if pos < 1:
        return _error(
            line_number,
            LineErrorReason.INVALID_POSITION,
            position,
            f"Invalid position: {position}",
        )

    if not GENOTYPE_PATTERN.match(genotype):
        return _error(
            line_number,
            LineErrorReason.INVALID_GENOTYPE,
            genotype,
            f"Invalid genotype format: {genotype}",
        )

    return Variant(
        rsid=rsid.lower(),
        chromosome=CHROMOSOME_ALIASES.get(chrom_upper, chrom_upper),
        position=pos,
        genotype=genotype.upper(),
        source_file=file_name,
        upload_date=upload_date,
        confidence=calculate_confidence(rsid, chromosome, genotype),
        raw_line=line,
    )
