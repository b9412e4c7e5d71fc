"""Tests for vendor and delimiter detection of raw DNA exports."""

import pytest


class TestDetectFileFormat:
    """Test detect_file_format rule precedence."""

    def test_comments_and_tabs_is_23andme(self):
        from dna_trait_loader.models import DNASource
        from dna_trait_loader.parsers.format_detection import detect_file_format

        lines = ["# 23andMe raw data", "rs4477212\t1\t82154\tAA"]
        fmt = detect_file_format(lines, "genome.txt")

        assert fmt.source == DNASource.TWENTY_THREE_AND_ME
        assert fmt.delimiter == "\t"
        assert fmt.structural_format == "txt"

    def test_comma_lines_are_ancestry(self):
        from dna_trait_loader.models import DNASource
        from dna_trait_loader.parsers.format_detection import detect_file_format

        lines = ["rs4477212,1,82154,AA", "rs3094315,1,752566,AG"]
        fmt = detect_file_format(lines, "ancestry.csv")

        assert fmt.source == DNASource.ANCESTRY_DNA
        assert fmt.delimiter == ","
        assert fmt.structural_format == "csv"

    def test_rsid_header_without_commas_is_ancestry(self):
        from dna_trait_loader.models import DNASource
        from dna_trait_loader.parsers.format_detection import detect_file_format

        lines = ["rsid\tchromosome\tposition\tgenotype", "rs4477212\t1\t82154\tAA"]
        fmt = detect_file_format(lines, "export.txt")

        assert fmt.source == DNASource.ANCESTRY_DNA
        assert fmt.delimiter == ","

    def test_snp_header_is_ancestry(self):
        from dna_trait_loader.models import DNASource
        from dna_trait_loader.parsers.format_detection import detect_file_format

        fmt = detect_file_format(["SNP\tCHR\tPOS\tGT"], "export.txt")

        assert fmt.source == DNASource.ANCESTRY_DNA

    def test_comments_and_tabs_win_over_commas(self):
        from dna_trait_loader.models import DNASource
        from dna_trait_loader.parsers.format_detection import detect_file_format

        lines = ["# note, with a comma", "rs4477212\t1\t82154\tAA"]
        fmt = detect_file_format(lines, "genome.txt")

        assert fmt.source == DNASource.TWENTY_THREE_AND_ME
        assert fmt.delimiter == "\t"

    def test_tabs_without_comments_is_23andme(self):
        from dna_trait_loader.models import DNASource
        from dna_trait_loader.parsers.format_detection import detect_file_format

        fmt = detect_file_format(["rs4477212\t1\t82154\tAA"], "genome.txt")

        assert fmt.source == DNASource.TWENTY_THREE_AND_ME
        assert fmt.delimiter == "\t"

    def test_no_signal_is_unknown_with_tab(self):
        from dna_trait_loader.models import DNASource
        from dna_trait_loader.parsers.format_detection import detect_file_format

        fmt = detect_file_format(["rs4477212 1 82154 AA"], "genome.dat")

        assert fmt.source == DNASource.UNKNOWN
        assert fmt.delimiter == "\t"
        assert fmt.structural_format == "txt"

    def test_empty_input_is_unknown(self):
        from dna_trait_loader.models import DNASource
        from dna_trait_loader.parsers.format_detection import detect_file_format

        fmt = detect_file_format([], "empty.txt")

        assert fmt.source == DNASource.UNKNOWN

    def test_only_comments_is_unknown(self):
        from dna_trait_loader.models import DNASource
        from dna_trait_loader.parsers.format_detection import detect_file_format

        fmt = detect_file_format(["# comment only"], "genome.txt")

        assert fmt.source == DNASource.UNKNOWN


class TestLineClassification:
    """Test comment and header line predicates."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("# comment", True),
            ("#rsid\tchromosome", True),
            ("rs123\t1\t100\tAA", False),
        ],
    )
    def test_is_comment_line(self, line, expected):
        from dna_trait_loader.parsers.format_detection import is_comment_line

        assert is_comment_line(line) is expected

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("rsid,chromosome,position,allele1,allele2", True),
            ("RSID\tCHROMOSOME", True),
            ("snp,chr,pos,gt", True),
            ("rs123,1,100,AA", False),
            ("i3000001,MT,16519,C", False),
        ],
    )
    def test_is_header_line(self, line, expected):
        from dna_trait_loader.parsers.format_detection import is_header_line

        assert is_header_line(line) is expected

    @pytest.mark.parametrize(
        "file_name,expected",
        [("data.csv", "csv"), ("DATA.CSV", "csv"), ("data.txt", "txt"), ("data", "txt")],
    )
    def test_detect_structural_format(self, file_name, expected):
        from dna_trait_loader.parsers.format_detection import detect_structural_format

        assert detect_structural_format(file_name) == expected
