"""Distribution and quality metrics over a parsed variant set.

Computes, in a single pass:
- Variants per chromosome
- Variants per genotype string
- Mean confidence over variants that carry a confidence score

Chromosome display order is 1-22 numerically, then X, Y, and MT (or M) last.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..models import Variant

_SEX_CHROMOSOME_ORDER = {"X": 23, "Y": 24, "MT": 25, "M": 25}
_UNRECOGNIZED_ORDER = 26
_AUTOSOME_PATTERN = re.compile(r"^\d+$", re.ASCII)
AUTOSOME_COUNT = 22


@dataclass
class QualityMetrics:
    """Confidence summary of a variant set."""

    average_confidence: float = 0.0
    valid_variants: int = 0
    invalid_variants: int = 0


@dataclass
class VariantStatistics:
    """Aggregate statistics of a variant set."""

    total_variants: int = 0
    chromosome_distribution: dict[str, int] = field(default_factory=dict)
    genotype_distribution: dict[str, int] = field(default_factory=dict)
    quality_metrics: QualityMetrics = field(default_factory=QualityMetrics)

    def sorted_chromosome_distribution(self) -> list[tuple[str, int]]:
        return sort_chromosome_counts(self.chromosome_distribution)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_variants": self.total_variants,
            "chromosome_distribution": dict(self.sorted_chromosome_distribution()),
            "genotype_distribution": dict(
                sorted(self.genotype_distribution.items(), key=lambda kv: (-kv[1], kv[0]))
            ),
            "quality_metrics": {
                "average_confidence": round(self.quality_metrics.average_confidence, 4),
                "valid_variants": self.quality_metrics.valid_variants,
                "invalid_variants": self.quality_metrics.invalid_variants,
            },
        }


def chromosome_sort_key(chromosome: str) -> tuple[int, str]:
    """Sort key placing 1-22 numerically, then X, Y, MT/M, then anything else."""
    chrom = chromosome.upper()
    if _AUTOSOME_PATTERN.match(chrom) and 1 <= int(chrom) <= AUTOSOME_COUNT:
        return int(chrom), ""
    if chrom in _SEX_CHROMOSOME_ORDER:
        return _SEX_CHROMOSOME_ORDER[chrom], ""
    return _UNRECOGNIZED_ORDER, chrom


def sort_chromosome_counts(counts: Mapping[str, int]) -> list[tuple[str, int]]:
    return sorted(counts.items(), key=lambda kv: chromosome_sort_key(kv[0]))


def analyze_variants(variants: Iterable[Variant]) -> VariantStatistics:
    """Compute chromosome/genotype distributions and confidence metrics.

    Args:
        variants: Parsed variants

    Returns:
        VariantStatistics; ``valid_variants`` counts variants with a
        defined confidence and ``invalid_variants`` the remainder
    """
    stats = VariantStatistics()
    total_confidence = 0.0
    scored = 0

    for variant in variants:
        stats.total_variants += 1
        stats.chromosome_distribution[variant.chromosome] = (
            stats.chromosome_distribution.get(variant.chromosome, 0) + 1
        )
        stats.genotype_distribution[variant.genotype] = (
            stats.genotype_distribution.get(variant.genotype, 0) + 1
        )
        if variant.confidence is not None:
            total_confidence += variant.confidence
            scored += 1

    stats.quality_metrics = QualityMetrics(
        average_confidence=total_confidence / scored if scored > 0 else 0.0,
        valid_variants=scored,
        invalid_variants=stats.total_variants - scored,
    )
    return stats
