"""Export parsed variants as CSV.

Columns: rsid, chromosome, position, genotype, confidence, source_file.
Confidence is written with three decimals, or left empty when unscored.
"""

import csv
import io
import logging
from collections.abc import Iterable
from pathlib import Path

from ..models import Variant

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("rsid", "chromosome", "position", "genotype", "confidence", "source_file")


def _format_confidence(confidence: float | None) -> str:
    if confidence is None:
        return ""
    return f"{confidence:.3f}"


def _write_rows(handle, variants: Iterable[Variant]) -> int:
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    count = 0
    for v in variants:
        writer.writerow(
            [
                v.rsid,
                v.chromosome,
                v.position,
                v.genotype,
                _format_confidence(v.confidence),
                v.source_file,
            ]
        )
        count += 1
    return count


def export_variants_csv(variants: Iterable[Variant]) -> str:
    """Render variants as CSV text with a header row."""
    buffer = io.StringIO()
    _write_rows(buffer, variants)
    return buffer.getvalue()


def write_variants_csv(output_path: Path, variants: Iterable[Variant]) -> int:
    """Write variants to a CSV file.

    Returns:
        Number of variant rows written
    """
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        count = _write_rows(f, variants)

    logger.info("Exported %d variants to %s", count, output_path)
    return count
