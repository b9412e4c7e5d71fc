"""Benchmarking utilities for dna-trait-loader."""

import asyncio
import os
import random
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from .loader import DNAFileParser, LoadConfig

CHROMOSOMES = [str(i) for i in range(1, 23)] + ["X", "Y", "MT"]
BASES = ["A", "C", "G", "T"]
VENDORS = ("23andme", "ancestry")

TWENTY_THREE_AND_ME_PREAMBLE = """# This data file generated by 23andMe at: Mon Jan 01 00:00:00 2024
#
# Below is a text version of your data.  Fields are TAB-separated
# Each line corresponds to a single SNP.  For each SNP, we provide its identifier
# (an rsid or an internal id), its location on the reference human genome, and the
# genotype call oriented with respect to the plus strand on the human reference sequence.
#
# rsid\tchromosome\tposition\tgenotype
"""

ANCESTRY_HEADER = "rsid,chromosome,position,genotype\n"


@dataclass
class BenchmarkResult:
    """Results from a benchmark run."""

    file_path: str
    variant_count: int
    parsing_time: float
    parsing_rate: float
    error_count: int = 0
    warning_count: int = 0
    source: str = "Unknown"
    synthetic: bool = False

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "variant_count": self.variant_count,
            "source": self.source,
            "parsing": {
                "time_seconds": round(self.parsing_time, 3),
                "rate_per_second": round(self.parsing_rate, 0),
            },
            "errors": self.error_count,
            "warnings": self.warning_count,
            "synthetic": self.synthetic,
        }


def _random_genotype() -> str:
    roll = random.random()
    if roll < 0.02:
        return "--"
    return random.choice(BASES) + random.choice(BASES)


def generate_synthetic_file(
    n_variants: int, output_path: Path | None = None, vendor: str = "23andme"
) -> Path:
    """Generate a synthetic raw DNA export with the specified number of variants.

    Variants are spread evenly across chromosomes at sorted random positions.

    Args:
        n_variants: Number of variants to generate.
        output_path: Optional output path. If None, creates a temp file.
        vendor: ``23andme`` (tab-delimited, comment preamble) or
            ``ancestry`` (comma-delimited, header row).

    Returns:
        Path to the generated file.
    """
    if vendor not in VENDORS:
        raise ValueError(f"vendor must be one of {VENDORS}, got '{vendor}'")

    suffix = ".txt" if vendor == "23andme" else ".csv"
    if output_path is None:
        fd, path_str = tempfile.mkstemp(suffix=suffix)
        os.close(fd)
        output_path = Path(path_str)
    else:
        output_path = Path(output_path)

    delimiter = "\t" if vendor == "23andme" else ","
    variants_per_chrom = n_variants // len(CHROMOSOMES)
    remainder = n_variants % len(CHROMOSOMES)
    rsid = 1000

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(TWENTY_THREE_AND_ME_PREAMBLE if vendor == "23andme" else ANCESTRY_HEADER)

        for i, chrom in enumerate(CHROMOSOMES):
            count = variants_per_chrom + (1 if i < remainder else 0)
            positions = sorted(random.sample(range(10000, 100_000_000), count))

            for pos in positions:
                rsid += random.randint(1, 50)
                fields = [f"rs{rsid}", chrom, str(pos), _random_genotype()]
                f.write(delimiter.join(fields) + "\n")

    return output_path


def run_parsing_benchmark(
    file_path: Path, config: LoadConfig | None = None
) -> tuple[int, float, int, int, str]:
    """Run a parsing-only benchmark.

    Returns:
        Tuple of (variant_count, elapsed_time, error_count, warning_count, source).
    """
    parser = DNAFileParser(config or LoadConfig(max_errors=1_000_000))

    start = time.perf_counter()
    result = asyncio.run(parser.parse_file(file_path))
    elapsed = time.perf_counter() - start

    return (
        len(result.variants),
        elapsed,
        len(result.errors),
        len(result.warnings),
        result.file_info.source.value,
    )


def run_benchmark(
    file_path: Path | None = None,
    synthetic_count: int | None = None,
    vendor: str = "23andme",
    config: LoadConfig | None = None,
) -> BenchmarkResult:
    """Run a complete benchmark.

    Args:
        file_path: Path to a raw DNA export.
        synthetic_count: If provided, generate a synthetic file with this many variants.
        vendor: Layout of the synthetic file.
        config: Parser configuration.

    Returns:
        BenchmarkResult with timing information.
    """
    synthetic = False
    cleanup = False

    if synthetic_count is not None:
        file_path = generate_synthetic_file(synthetic_count, vendor=vendor)
        synthetic = True
        cleanup = True
    elif file_path is None:
        raise ValueError("Either file_path or synthetic_count is required")

    try:
        variant_count, parsing_time, errors, warnings, source = run_parsing_benchmark(
            file_path, config
        )
        parsing_rate = variant_count / parsing_time if parsing_time > 0 else 0

        return BenchmarkResult(
            file_path=str(file_path),
            variant_count=variant_count,
            parsing_time=parsing_time,
            parsing_rate=parsing_rate,
            error_count=errors,
            warning_count=warnings,
            source=source,
            synthetic=synthetic,
        )
    finally:
        if cleanup and file_path and file_path.exists():
            file_path.unlink()
