"""SNP trait knowledge base.

The knowledge base maps rsid -> genotype -> TraitTemplate. It ships as
``traits/data/snp_traits.json`` and is loaded once into read-only mappings
shared by every parse.

File layout::

    {
      "version": 2,
      "snps": {
        "rs429358": {
          "gene": "APOE",
          "genotypes": {
            "CC": {"name": ..., "description": ..., "risk_level": "high",
                   "category": "disease_risk", "recommendations": [...], ...}
          }
        }
      }
    }
"""

import json
import logging
from collections.abc import Mapping
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ..models import HealthRecommendation, Priority, RiskLevel, TraitTemplate

logger = logging.getLogger(__name__)

KNOWLEDGE_BASE_RESOURCE = "snp_traits.json"

KnowledgeBase = Mapping[str, Mapping[str, TraitTemplate]]


class KnowledgeBaseError(Exception):
    """Raised when a knowledge-base file is missing or malformed."""

    pass


def _parse_recommendation(data: dict[str, Any], where: str) -> HealthRecommendation:
    try:
        return HealthRecommendation(
            service=data["service"],
            description=data.get("description", ""),
            priority=Priority(data["priority"]),
            estimated_cost=float(data.get("estimated_cost", 0)),
            frequency=data.get("frequency", ""),
            keywords=tuple(data.get("keywords", ())),
        )
    except KeyError as e:
        raise KnowledgeBaseError(f"{where}: recommendation missing field {e}") from e
    except ValueError as e:
        raise KnowledgeBaseError(f"{where}: {e}") from e


def _parse_template(gene: str, data: dict[str, Any], where: str) -> TraitTemplate:
    try:
        risk_level = RiskLevel(data.get("risk_level", "unknown"))
    except ValueError as e:
        raise KnowledgeBaseError(f"{where}: {e}") from e

    for required in ("name", "description", "category"):
        if required not in data:
            raise KnowledgeBaseError(f"{where}: missing field '{required}'")

    return TraitTemplate(
        gene=gene,
        name=data["name"],
        description=data["description"],
        risk_level=risk_level,
        category=data["category"],
        personalized_effect=data.get("personalized_effect", ""),
        scientific_details=data.get("scientific_details", ""),
        citations=tuple(data.get("citations", ())),
        recommendations=tuple(
            _parse_recommendation(r, where) for r in data.get("recommendations", ())
        ),
        lifestyle_factors=tuple(data.get("lifestyle_factors", ())),
    )


def parse_knowledge_base(raw: dict[str, Any]) -> KnowledgeBase:
    """Build read-only trait mappings from decoded knowledge-base JSON.

    rsids are lower-cased and genotype keys upper-cased so that lookups
    line up with parsed variants.

    Raises:
        KnowledgeBaseError: If the structure or any entry is invalid
    """
    snps = raw.get("snps") if isinstance(raw, dict) else None
    if not isinstance(snps, dict):
        raise KnowledgeBaseError("Knowledge base must contain an 'snps' object")

    entries: dict[str, Mapping[str, TraitTemplate]] = {}
    for rsid, snp in snps.items():
        if not isinstance(snp, dict) or "gene" not in snp:
            raise KnowledgeBaseError(f"{rsid}: entry must have a 'gene'")
        genotypes = snp.get("genotypes", {})
        templates = {
            genotype.upper(): _parse_template(snp["gene"], data, f"{rsid} {genotype}")
            for genotype, data in genotypes.items()
        }
        entries[rsid.lower()] = MappingProxyType(templates)

    return MappingProxyType(entries)


def load_knowledge_base(path: Path | str | None = None) -> KnowledgeBase:
    """Load a knowledge base from ``path`` or from the packaged data file.

    Raises:
        KnowledgeBaseError: If the file cannot be read or parsed
    """
    if path is None:
        resource = files("dna_trait_loader.traits.data").joinpath(KNOWLEDGE_BASE_RESOURCE)
        source = KNOWLEDGE_BASE_RESOURCE
        try:
            text = resource.read_text(encoding="utf-8")
        except OSError as e:
            raise KnowledgeBaseError(f"Packaged knowledge base unavailable: {e}") from e
    else:
        path = Path(path)
        source = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise KnowledgeBaseError(f"Cannot read knowledge base {path}: {e}") from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise KnowledgeBaseError(f"Invalid JSON in knowledge base {source}: {e}") from e

    knowledge_base = parse_knowledge_base(raw)
    logger.debug(
        "Loaded knowledge base %s: %d SNPs, %d genotype entries",
        source,
        len(knowledge_base),
        sum(len(g) for g in knowledge_base.values()),
    )
    return knowledge_base


@lru_cache(maxsize=1)
def default_knowledge_base() -> KnowledgeBase:
    """The packaged knowledge base, loaded once per process."""
    return load_knowledge_base()
