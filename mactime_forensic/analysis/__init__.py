"""
Timeline construction stages.

Each stage is a pure step over the output of the previous one:
record expansion, event coalescing, date filtering and sorting.
"""

from mactime_forensic.analysis.coalescer import EventCoalescer, coalesce_events
from mactime_forensic.analysis.date_filter import DateFilter, filter_rows
from mactime_forensic.analysis.expander import expand_record, expand_records
from mactime_forensic.analysis.sorter import sort_rows

__all__ = [
    "DateFilter",
    "EventCoalescer",
    "coalesce_events",
    "expand_record",
    "expand_records",
    "filter_rows",
    "sort_rows",
]
