"""Vendor and delimiter detection for raw consumer DNA exports.

Supported layouts:
- 23andMe: ``#`` comment preamble, tab-delimited ``rsid chromosome position genotype``
- AncestryDNA: optional ``rsid,...`` header row, comma-delimited columns

Detection order (first match wins):
| Rule | Condition                                  | Source      | Delimiter |
|------|--------------------------------------------|-------------|-----------|
| 1    | any ``#`` line and any tab-delimited line  | 23andMe     | tab       |
| 2    | any comma-delimited line or rsid/snp header| AncestryDNA | comma     |
| 3    | any tab-delimited line                     | 23andMe     | tab       |
| 4    | any comma-delimited line                   | AncestryDNA | comma     |
| 5    | none of the above                          | Unknown     | tab       |
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import DNASource

COMMENT_PREFIX = "#"
HEADER_PATTERN = re.compile(r"^(rsid|snp)", re.IGNORECASE)

TAB = "\t"
COMMA = ","


@dataclass(frozen=True)
class FileFormat:
    """Detected vendor, structural format and column delimiter."""

    source: DNASource
    structural_format: str
    delimiter: str


def is_comment_line(line: str) -> bool:
    return line.startswith(COMMENT_PREFIX)


def is_header_line(line: str) -> bool:
    return HEADER_PATTERN.match(line) is not None


def detect_structural_format(file_name: str) -> str:
    """Return ``csv`` for .csv files, ``txt`` for everything else."""
    return "csv" if file_name.lower().endswith(".csv") else "txt"


def detect_file_format(lines: Sequence[str], file_name: str) -> FileFormat:
    """Classify a file's vendor source and delimiter.

    Args:
        lines: Trimmed, non-empty lines of the file
        file_name: Original file name, used for the structural format only

    Returns:
        FileFormat for the first matching detection rule
    """
    structural_format = detect_structural_format(file_name)

    has_comments = any(is_comment_line(line) for line in lines)
    has_tabs = any(TAB in line for line in lines)

    if has_comments and has_tabs:
        return FileFormat(DNASource.TWENTY_THREE_AND_ME, structural_format, TAB)

    has_commas = any(COMMA in line for line in lines)
    has_rsid_header = any(is_header_line(line) for line in lines)

    if has_commas or has_rsid_header:
        return FileFormat(DNASource.ANCESTRY_DNA, structural_format, COMMA)

    if has_tabs:
        return FileFormat(DNASource.TWENTY_THREE_AND_ME, structural_format, TAB)
    if has_commas:
        return FileFormat(DNASource.ANCESTRY_DNA, structural_format, COMMA)

    return FileFormat(DNASource.UNKNOWN, structural_format, TAB)
