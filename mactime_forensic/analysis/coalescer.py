"""Coalesce timeline events into MACB rows.

Events for the same file identity (name, inode, size, mode, UID, GID) that
land on exactly the same second are merged into a single row whose flag
set is the union of the contributing timestamp kinds. There is no
tolerance window: one second apart means two rows.

Rows are emitted in the order their key was first seen.
"""

import logging
from typing import Dict, Iterable, List, Set

from mactime_forensic.models import MACBFlag, MetadataRecord, TimelineEvent, TimelineRow

logger = logging.getLogger(__name__)


class EventCoalescer:
    """One-pass hash aggregation of events keyed by file identity and instant."""

    def __init__(self):
        self._flags: Dict[tuple, Set[MACBFlag]] = {}
        self._sources: Dict[tuple, MetadataRecord] = {}
        self.event_count = 0

    def add(self, event: TimelineEvent) -> None:
        key = event.key
        if key not in self._flags:
            self._flags[key] = set()
            self._sources[key] = event.record
        self._flags[key].add(event.flag)
        self.event_count += 1

    def add_all(self, events: Iterable[TimelineEvent]) -> None:
        for event in events:
            self.add(event)

    def __len__(self) -> int:
        return len(self._flags)

    def rows(self) -> List[TimelineRow]:
        """Drain the accumulated groups into rows, in first-seen order."""
        rows = []
        for key, flags in self._flags.items():
            record = self._sources[key]
            rows.append(TimelineRow(
                timestamp=key[0],
                flags=frozenset(flags),
                size=record.size,
                mode_as_string=record.mode_as_string,
                uid=record.uid,
                gid=record.gid,
                inode=record.inode,
                name=record.name,
            ))

        logger.debug(f"Coalesced {self.event_count} events into {len(rows)} rows")
        return rows


def coalesce_events(events: Iterable[TimelineEvent]) -> List[TimelineRow]:
    """
    Convenience function to coalesce events into rows.

    Args:
        events: Timeline events in encounter order

    Returns:
        List of TimelineRow objects in first-seen order
    """
    coalescer = EventCoalescer()
    coalescer.add_all(events)
    return coalescer.rows()
