"""dna-trait-loader: consumer DNA export parsing and genetic trait analysis."""

__version__ = "0.4.0"
