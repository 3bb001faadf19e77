"""Output generation modules for timeline generation.

This package provides the CSV exporter for MACB timelines.
"""

from mactime_forensic.output.csv_export import (
    CSV_HEADER,
    DEFAULT_DATE_FORMAT,
    CSVExporter,
    export_to_csv,
)

__all__ = [
    "CSV_HEADER",
    "DEFAULT_DATE_FORMAT",
    "CSVExporter",
    "export_to_csv",
]
