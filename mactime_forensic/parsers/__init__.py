"""Bodyfile parsers for timeline generation.

Includes:
- Delimiter-aware bodyfile line tokenization
- Timestamp and size field parsing
- Soft-error statistics for malformed records
"""

from mactime_forensic.parsers.bodyfile import (
    BODYFILE_FIELDS,
    FIELD_COUNT,
    FIELD_DELIMITER,
    BodyfileParser,
    ParseStatistics,
    parse_bodyfile,
    parse_size,
    parse_timestamp,
    split_bodyfile_line,
)

__all__ = [
    "BODYFILE_FIELDS",
    "FIELD_COUNT",
    "FIELD_DELIMITER",
    "BodyfileParser",
    "ParseStatistics",
    "parse_bodyfile",
    "parse_size",
    "parse_timestamp",
    "split_bodyfile_line",
]
