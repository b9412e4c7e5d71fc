"""Tests for core data models."""

import pytest


class TestVariant:
    """Test Variant invariants."""

    def test_valid_variant(self, variant_factory):
        assert variant_factory().is_valid()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"rsid": ""},
            {"rsid": "RS123"},
            {"rsid": "x123"},
            {"chromosome": "M"},
            {"chromosome": "23"},
            {"position": 0},
            {"genotype": "A-"},
            {"genotype": "AAA"},
            {"confidence": 1.5},
            {"confidence": -0.1},
        ],
    )
    def test_invalid_variant(self, variant_factory, overrides):
        assert not variant_factory(**overrides).is_valid()

    @pytest.mark.parametrize("genotype", ["--", "??"])
    def test_no_call(self, variant_factory, genotype):
        variant = variant_factory(genotype=genotype)

        assert variant.is_no_call
        assert variant.is_valid()

    def test_unscored_variant_is_valid(self, variant_factory):
        assert variant_factory(confidence=None).is_valid()


class TestFileInfo:
    """Test processing status lifecycle."""

    def test_lifecycle(self):
        from dna_trait_loader.models import FileInfo, ProcessingStatus

        info = FileInfo(id="1", file_name="f.txt", file_size=10)
        info.transition_to(ProcessingStatus.PROCESSING)
        info.transition_to(ProcessingStatus.COMPLETED)

        assert info.processing_status == ProcessingStatus.COMPLETED

    def test_cannot_skip_processing(self):
        from dna_trait_loader.models import FileInfo, InvalidStatusTransition, ProcessingStatus

        info = FileInfo(id="1", file_name="f.txt", file_size=10)

        with pytest.raises(InvalidStatusTransition):
            info.transition_to(ProcessingStatus.COMPLETED)

    def test_terminal_status(self):
        from dna_trait_loader.models import FileInfo, InvalidStatusTransition, ProcessingStatus

        info = FileInfo(id="1", file_name="f.txt", file_size=10)
        info.transition_to(ProcessingStatus.FAILED)

        with pytest.raises(InvalidStatusTransition):
            info.transition_to(ProcessingStatus.PROCESSING)

    def test_to_dict(self):
        from dna_trait_loader.models import DNASource, FileInfo

        data = FileInfo(
            id="1", file_name="f.txt", file_size=10, source=DNASource.ANCESTRY_DNA
        ).to_dict()

        assert data["source"] == "AncestryDNA"
        assert data["processing_status"] == "pending"


class TestRiskLevel:
    """Test risk ordering."""

    def test_rank_order(self):
        from dna_trait_loader.models import RiskLevel

        ranked = sorted(RiskLevel, key=lambda r: r.rank)

        assert [r.value for r in ranked] == ["high", "moderate", "low", "protective", "unknown"]
