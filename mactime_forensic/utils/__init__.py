"""
Utility modules for bodyfile timeline generation.

This package contains shared utilities, currently the custom exception
hierarchy used across the tool.
"""

from mactime_forensic.utils.exceptions import (
    ConfigurationError,
    InvalidFilterSyntaxError,
    MactimeForensicError,
    MalformedRecordError,
    TimelineIOError,
    UnparsableTimestampError,
)

__all__ = [
    "MactimeForensicError",
    "MalformedRecordError",
    "UnparsableTimestampError",
    "InvalidFilterSyntaxError",
    "TimelineIOError",
    "ConfigurationError",
]
