"""Query helpers over an in-memory variant list."""

from collections.abc import Iterable

from ..models import Variant


def normalize_chromosome(chrom: str) -> str:
    """Upper-case a chromosome label and fold ``M`` into ``MT``.

    Args:
        chrom: Chromosome label, optionally ``chr``-prefixed

    Returns:
        Normalized chromosome string
    """
    chrom = chrom.strip()
    if chrom.lower().startswith("chr"):
        chrom = chrom[3:]
    chrom = chrom.upper()
    return "MT" if chrom == "M" else chrom


def filter_variants_by_chromosome(variants: Iterable[Variant], chromosome: str) -> list[Variant]:
    """Variants on ``chromosome``, compared case-insensitively."""
    target = normalize_chromosome(chromosome)
    return [v for v in variants if normalize_chromosome(v.chromosome) == target]


def search_variants_by_rsid(variants: Iterable[Variant], term: str) -> list[Variant]:
    """Variants whose rsid contains ``term``, ignoring case."""
    needle = term.strip().lower()
    return [v for v in variants if needle in v.rsid.lower()]
