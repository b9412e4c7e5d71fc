"""Genetic trait matching and recommendation aggregation."""

from .knowledge_base import (
    KnowledgeBase,
    KnowledgeBaseError,
    default_knowledge_base,
    load_knowledge_base,
)
from .matcher import (
    TraitMatchResult,
    is_known_snp,
    known_snps,
    match_traits,
    summarize_risk,
)
from .recommendations import aggregate_recommendations

__all__ = [
    "KnowledgeBase",
    "KnowledgeBaseError",
    "TraitMatchResult",
    "aggregate_recommendations",
    "default_knowledge_base",
    "is_known_snp",
    "known_snps",
    "load_knowledge_base",
    "match_traits",
    "summarize_risk",
]
