"""Export formats for parsed variants."""

from .csv_export import CSV_COLUMNS, export_variants_csv, write_variants_csv

__all__ = ["CSV_COLUMNS", "export_variants_csv", "write_variants_csv"]
