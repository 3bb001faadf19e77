"""Expand bodyfile records into per-timestamp timeline events."""

from typing import Iterable, Iterator, List

from mactime_forensic.models import MACB_ORDER, MetadataRecord, TimelineEvent


def expand_record(record: MetadataRecord) -> List[TimelineEvent]:
    """Produce one event per present timestamp kind, in M, A, C, B order.

    A record with no timestamps yields an empty list.
    """
    events = []
    for flag in MACB_ORDER:
        timestamp = record.timestamp_for(flag)
        if timestamp is not None:
            events.append(TimelineEvent(timestamp=timestamp, flag=flag, record=record))
    return events


def expand_records(records: Iterable[MetadataRecord]) -> Iterator[TimelineEvent]:
    """Expand records in input order."""
    for record in records:
        yield from expand_record(record)
