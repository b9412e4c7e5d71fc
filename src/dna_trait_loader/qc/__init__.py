"""Statistics and quality metrics for parsed variant sets."""

from .variant_stats import (
    QualityMetrics,
    VariantStatistics,
    analyze_variants,
    chromosome_sort_key,
    sort_chromosome_counts,
)

__all__ = [
    "QualityMetrics",
    "VariantStatistics",
    "analyze_variants",
    "chromosome_sort_key",
    "sort_chromosome_counts",
]
