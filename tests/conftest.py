"""Pytest configuration and fixtures for dna-trait-loader tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fixtures.dna_generator import (  # noqa: E402
    BASIC_SNPS,
    DNAFileGenerator,
    SyntheticSNP,
    make_23andme_file,
    make_ancestry_file,
)


@pytest.fixture
def dna_generator():
    """Provide DNAFileGenerator class for tests."""
    return DNAFileGenerator


@pytest.fixture
def variant_factory():
    """Factory for creating Variant instances."""
    from dna_trait_loader.models import Variant

    def _factory(**kwargs):
        defaults = {
            "rsid": "rs123",
            "chromosome": "1",
            "position": 100,
            "genotype": "AG",
            "source_file": "test.txt",
            "upload_date": "2024-01-01T00:00:00+00:00",
            "confidence": 1.0,
        }
        defaults.update(kwargs)
        return Variant(**defaults)

    return _factory


@pytest.fixture
def snp_factory():
    """Factory for creating SyntheticSNP rows."""

    def _factory(**kwargs):
        defaults = {"rsid": "rs123", "chromosome": "1", "position": 100, "genotype": "AG"}
        defaults.update(kwargs)
        return SyntheticSNP(**defaults)

    return _factory


@pytest.fixture
def basic_snps() -> list[SyntheticSNP]:
    return list(BASIC_SNPS)


@pytest.fixture
def twenty_three_and_me_file():
    """Generate a 23andMe-style export file."""
    path = make_23andme_file()
    yield path
    if path.exists():
        path.unlink()


@pytest.fixture
def ancestry_file():
    """Generate an AncestryDNA-style export file."""
    path = make_ancestry_file()
    yield path
    if path.exists():
        path.unlink()
