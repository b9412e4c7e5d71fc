"""Utility functions for dna-trait-loader."""

from .variant_filters import (
    filter_variants_by_chromosome,
    normalize_chromosome,
    search_variants_by_rsid,
)

__all__ = [
    "filter_variants_by_chromosome",
    "normalize_chromosome",
    "search_variants_by_rsid",
]
