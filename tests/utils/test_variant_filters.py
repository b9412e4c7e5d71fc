"""Tests for variant query helpers."""

import pytest


class TestNormalizeChromosome:
    """Test chromosome label normalization."""

    @pytest.mark.parametrize(
        "label,expected",
        [("1", "1"), ("x", "X"), ("chrX", "X"), ("M", "MT"), ("mt", "MT"), ("chrM", "MT")],
    )
    def test_normalize(self, label, expected):
        from dna_trait_loader.utils.variant_filters import normalize_chromosome

        assert normalize_chromosome(label) == expected


class TestFilterByChromosome:
    """Test filter_variants_by_chromosome."""

    def test_filters(self, variant_factory):
        from dna_trait_loader.utils.variant_filters import filter_variants_by_chromosome

        variants = [variant_factory(rsid=f"rs{i}", chromosome=c) for i, c in enumerate("1X1")]

        assert [v.rsid for v in filter_variants_by_chromosome(variants, "1")] == ["rs0", "rs2"]

    def test_case_insensitive(self, variant_factory):
        from dna_trait_loader.utils.variant_filters import filter_variants_by_chromosome

        variants = [variant_factory(chromosome="X")]

        assert len(filter_variants_by_chromosome(variants, "x")) == 1

    def test_m_matches_mt(self, variant_factory):
        from dna_trait_loader.utils.variant_filters import filter_variants_by_chromosome

        variants = [variant_factory(chromosome="MT")]

        assert len(filter_variants_by_chromosome(variants, "M")) == 1

    def test_no_match(self, variant_factory):
        from dna_trait_loader.utils.variant_filters import filter_variants_by_chromosome

        assert filter_variants_by_chromosome([variant_factory()], "22") == []


class TestSearchByRsid:
    """Test search_variants_by_rsid."""

    def test_substring_match(self, variant_factory):
        from dna_trait_loader.utils.variant_filters import search_variants_by_rsid

        variants = [
            variant_factory(rsid="rs429358"),
            variant_factory(rsid="rs7412"),
            variant_factory(rsid="i4293580"),
        ]

        assert [v.rsid for v in search_variants_by_rsid(variants, "42935")] == [
            "rs429358",
            "i4293580",
        ]

    def test_case_insensitive(self, variant_factory):
        from dna_trait_loader.utils.variant_filters import search_variants_by_rsid

        variants = [variant_factory(rsid="rs429358")]

        assert len(search_variants_by_rsid(variants, "RS4293")) == 1

    def test_empty_term_matches_all(self, variant_factory):
        from dna_trait_loader.utils.variant_filters import search_variants_by_rsid

        variants = [variant_factory(rsid="rs1"), variant_factory(rsid="rs2")]

        assert len(search_variants_by_rsid(variants, "")) == 2
