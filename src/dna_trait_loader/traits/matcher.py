"""Match parsed variants against the SNP trait knowledge base."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..models import GeneticTrait, RiskLevel, TraitTemplate, Variant
from .knowledge_base import KnowledgeBase, default_knowledge_base

logger = logging.getLogger(__name__)

# Below this many matches, illustrative examples may be offered
MIN_MATCHES_BEFORE_EXAMPLES = 5

# (gene, rsid, genotype) shown when a user has few matches
ILLUSTRATIVE_EXAMPLES: tuple[tuple[str, str, str], ...] = (
    ("APOE", "rs429358", "CT"),
    ("CYP2C19", "rs4244285", "AA"),
    ("SLCO1B1", "rs4149056", "CC"),
)

TOP_FINDINGS_LIMIT = 3


@dataclass
class TraitMatchResult:
    """Traits derived from a user's variants, plus optional examples.

    ``illustrative_examples`` never contains anything derived from the
    user's data and is kept apart from ``matched``.
    """

    matched: list[GeneticTrait] = field(default_factory=list)
    illustrative_examples: list[GeneticTrait] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "matched": [t.to_dict() for t in self.matched],
            "illustrative_examples": [t.to_dict() for t in self.illustrative_examples],
        }


def trait_sort_key(trait: GeneticTrait) -> tuple[int, str]:
    return trait.risk_level.rank, trait.category


def _lookup_genotype(
    genotypes: Mapping[str, TraitTemplate], genotype: str, normalize_alleles: bool
) -> TraitTemplate | None:
    template = genotypes.get(genotype)
    if template is None and normalize_alleles and len(genotype) == 2:
        template = genotypes.get(genotype[::-1])
    return template


def match_traits(
    variants: Iterable[Variant],
    knowledge_base: KnowledgeBase | None = None,
    include_examples: bool = False,
    normalize_alleles: bool = False,
) -> TraitMatchResult:
    """Derive genetic traits from a user's variants.

    Args:
        variants: Parsed variants; for a repeated rsid the last one wins
        knowledge_base: Trait knowledge base (packaged one if omitted)
        include_examples: Offer canonical examples when fewer than five
            traits matched
        normalize_alleles: Also try the reversed allele pair, so ``GA``
            matches an ``AG`` entry

    Returns:
        TraitMatchResult with matches sorted by risk level then category
    """
    kb = knowledge_base if knowledge_base is not None else default_knowledge_base()

    by_rsid: dict[str, Variant] = {}
    for variant in variants:
        by_rsid[variant.rsid.lower()] = variant

    matched = []
    for rsid, genotypes in kb.items():
        variant = by_rsid.get(rsid)
        if variant is None:
            continue
        genotype = variant.genotype.upper()
        template = _lookup_genotype(genotypes, genotype, normalize_alleles)
        if template is None:
            logger.debug("No knowledge-base entry for %s genotype %s", rsid, genotype)
            continue
        matched.append(
            GeneticTrait.from_template(rsid, genotype, template, variant.confidence)
        )

    matched.sort(key=trait_sort_key)
    logger.info(
        "Matched %d traits from %d variants against %d known SNPs",
        len(matched),
        len(by_rsid),
        len(kb),
    )

    result = TraitMatchResult(matched=matched)
    if include_examples and len(matched) < MIN_MATCHES_BEFORE_EXAMPLES:
        result.illustrative_examples = _illustrative_examples(matched, kb)
    return result


def _illustrative_examples(
    matched: list[GeneticTrait], kb: KnowledgeBase
) -> list[GeneticTrait]:
    present_genes = {t.gene for t in matched}
    examples = []
    for gene, rsid, genotype in ILLUSTRATIVE_EXAMPLES:
        if gene in present_genes:
            continue
        template = kb.get(rsid, {}).get(genotype)
        if template is None:
            continue
        examples.append(
            GeneticTrait.from_template(rsid, genotype, template, illustrative=True)
        )
    return examples


def summarize_risk(traits: Iterable[GeneticTrait]) -> dict[str, Any]:
    """Count traits per risk level and category and list top findings.

    ``top_concerns`` holds up to three trait names, high before moderate and
    otherwise in input order; ``positive_factors`` the first three protective
    ones.
    """
    traits = list(traits)
    by_risk = {level.value: 0 for level in RiskLevel}
    by_category: dict[str, int] = {}
    for trait in traits:
        by_risk[trait.risk_level.value] += 1
        by_category[trait.category] = by_category.get(trait.category, 0) + 1

    high = [t.name for t in traits if t.risk_level is RiskLevel.HIGH]
    moderate = [t.name for t in traits if t.risk_level is RiskLevel.MODERATE]
    concerns = [*high, *moderate]
    positives = [t.name for t in traits if t.risk_level is RiskLevel.PROTECTIVE]

    return {
        "total_traits": len(traits),
        "by_risk": by_risk,
        "by_category": by_category,
        "top_concerns": concerns[:TOP_FINDINGS_LIMIT],
        "positive_factors": positives[:TOP_FINDINGS_LIMIT],
    }


def known_snps(knowledge_base: KnowledgeBase | None = None) -> list[str]:
    """rsids the knowledge base can interpret, in file order."""
    kb = knowledge_base if knowledge_base is not None else default_knowledge_base()
    return list(kb)


def is_known_snp(rsid: str, knowledge_base: KnowledgeBase | None = None) -> bool:
    kb = knowledge_base if knowledge_base is not None else default_knowledge_base()
    return rsid.lower() in kb
