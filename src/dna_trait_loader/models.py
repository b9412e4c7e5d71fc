"""Data models for consumer DNA variants, parse results and genetic traits."""

import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

VALID_CHROMOSOMES = frozenset(
    [str(i) for i in range(1, 23)] + ["X", "Y", "MT"]
)

# Genotype alphabet of a stored variant: one or two bases, no-call or unknown
VARIANT_GENOTYPE_PATTERN = re.compile(r"^([ACGT]{1,2}|--|\?\?)$")

RSID_PREFIXES = ("rs", "i")


class DNASource(Enum):
    """Vendor that produced a raw DNA export."""

    TWENTY_THREE_AND_ME = "23andMe"
    ANCESTRY_DNA = "AncestryDNA"
    UNKNOWN = "Unknown"


class InvalidStatusTransition(ValueError):
    """Raised when a FileInfo status change skips the processing lifecycle."""

    pass


class ProcessingStatus(Enum):
    """Lifecycle of an uploaded file: pending -> processing -> completed|failed."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    def can_transition_to(self, target: "ProcessingStatus") -> bool:
        return target in _STATUS_TRANSITIONS[self]


_STATUS_TRANSITIONS: dict[ProcessingStatus, frozenset[ProcessingStatus]] = {
    ProcessingStatus.PENDING: frozenset({ProcessingStatus.PROCESSING, ProcessingStatus.FAILED}),
    ProcessingStatus.PROCESSING: frozenset({ProcessingStatus.COMPLETED, ProcessingStatus.FAILED}),
    ProcessingStatus.COMPLETED: frozenset(),
    ProcessingStatus.FAILED: frozenset(),
}


@dataclass(frozen=True)
class Variant:
    """A single genotyped SNP call from a consumer DNA export."""

    rsid: str
    chromosome: str
    position: int
    genotype: str
    source_file: str
    upload_date: str
    confidence: float | None = None
    raw_line: str | None = None

    def is_valid(self) -> bool:
        """Check the stored record against the variant invariants."""
        return (
            len(self.rsid) > 0
            and self.rsid == self.rsid.lower()
            and self.rsid.startswith(RSID_PREFIXES)
            and self.chromosome in VALID_CHROMOSOMES
            and self.position >= 1
            and VARIANT_GENOTYPE_PATTERN.match(self.genotype) is not None
            and (self.confidence is None or 0.0 <= self.confidence <= 1.0)
        )

    @property
    def is_no_call(self) -> bool:
        return self.genotype in ("--", "??")


class LineErrorReason(Enum):
    """Closed set of reasons a data line is rejected."""

    INSUFFICIENT_COLUMNS = "insufficient_columns"
    INVALID_RSID = "invalid_rsid"
    INVALID_CHROMOSOME = "invalid_chromosome"
    INVALID_POSITION = "invalid_position"
    INVALID_GENOTYPE = "invalid_genotype"


@dataclass(frozen=True)
class LineError:
    """A rejected data line with the specific reason it failed."""

    line_number: int
    reason: LineErrorReason
    value: str
    message: str

    def __str__(self) -> str:
        return f"Line {self.line_number}: {self.message}"


LineParseOutcome = Variant | LineError


@dataclass
class FileInfo:
    """Upload identity and processing state of one DNA file."""

    id: str
    file_name: str
    file_size: int
    source: DNASource = DNASource.UNKNOWN
    upload_date: str = ""
    processing_status: ProcessingStatus = ProcessingStatus.PENDING
    total_variants: int = 0
    valid_variants: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def transition_to(self, status: ProcessingStatus) -> None:
        if not self.processing_status.can_transition_to(status):
            raise InvalidStatusTransition(
                f"Cannot move {self.file_name} from "
                f"{self.processing_status.value} to {status.value}"
            )
        self.processing_status = status

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["source"] = self.source.value
        data["processing_status"] = self.processing_status.value
        return data


@dataclass
class FileMetadata:
    """Structural facts about a parsed file."""

    format: str = "txt"
    has_header: bool = False
    delimiter: str = "\t"
    total_lines: int = 0
    skipped_lines: int = 0
    chromosome_count: dict[str, int] = field(default_factory=dict)
    genotype_distribution: dict[str, int] = field(default_factory=dict)


@dataclass
class ParseResult:
    """Outcome of parsing one DNA file."""

    success: bool
    file_info: FileInfo
    variants: list[Variant]
    errors: list[str]
    warnings: list[str]
    processing_time: float
    metadata: FileMetadata

    def to_dict(self, include_variants: bool = False) -> dict[str, Any]:
        result = {
            "success": self.success,
            "file_info": self.file_info.to_dict(),
            "variant_count": len(self.variants),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "processing_time_seconds": round(self.processing_time, 3),
            "metadata": asdict(self.metadata),
        }
        if include_variants:
            result["variants"] = [asdict(v) for v in self.variants]
        return result


class RiskLevel(Enum):
    """Categorical severity of a matched trait, in report order."""

    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
    PROTECTIVE = "protective"
    UNKNOWN = "unknown"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)


_RISK_ORDER = list(RiskLevel)


class Priority(Enum):
    """Priority of a health recommendation, in report order."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)


_PRIORITY_ORDER = list(Priority)


@dataclass(frozen=True)
class HealthRecommendation:
    """A screening or service suggested for a genetic finding."""

    service: str
    description: str
    priority: Priority
    estimated_cost: float
    frequency: str
    # Tags used by downstream benefit matching
    keywords: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "description": self.description,
            "priority": self.priority.value,
            "estimated_cost": self.estimated_cost,
            "frequency": self.frequency,
            "keywords": list(self.keywords),
        }


@dataclass(frozen=True)
class TraitTemplate:
    """Knowledge-base entry for one (rsid, genotype) pair."""

    gene: str
    name: str
    description: str
    risk_level: RiskLevel
    category: str
    personalized_effect: str = ""
    scientific_details: str = ""
    citations: tuple[str, ...] = ()
    recommendations: tuple[HealthRecommendation, ...] = ()
    lifestyle_factors: tuple[str, ...] = ()


@dataclass(frozen=True)
class GeneticTrait:
    """A knowledge-base template bound to a user's rsid and genotype."""

    rsid: str
    genotype: str
    gene: str
    name: str
    description: str
    risk_level: RiskLevel
    category: str
    personalized_effect: str = ""
    scientific_details: str = ""
    citations: tuple[str, ...] = ()
    recommendations: tuple[HealthRecommendation, ...] = ()
    lifestyle_factors: tuple[str, ...] = ()
    confidence: float | None = None

    # Canonical example, not derived from the user's variants
    illustrative: bool = False

    @classmethod
    def from_template(
        cls,
        rsid: str,
        genotype: str,
        template: TraitTemplate,
        confidence: float | None = None,
        illustrative: bool = False,
    ) -> "GeneticTrait":
        return cls(
            rsid=rsid,
            genotype=genotype,
            gene=template.gene,
            name=template.name,
            description=template.description,
            risk_level=template.risk_level,
            category=template.category,
            personalized_effect=template.personalized_effect,
            scientific_details=template.scientific_details,
            citations=template.citations,
            recommendations=template.recommendations,
            lifestyle_factors=template.lifestyle_factors,
            confidence=confidence,
            illustrative=illustrative,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rsid": self.rsid,
            "genotype": self.genotype,
            "gene": self.gene,
            "name": self.name,
            "description": self.description,
            "risk_level": self.risk_level.value,
            "category": self.category,
            "personalized_effect": self.personalized_effect,
            "scientific_details": self.scientific_details,
            "citations": list(self.citations),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "lifestyle_factors": list(self.lifestyle_factors),
            "confidence": self.confidence,
            "illustrative": self.illustrative,
        }
