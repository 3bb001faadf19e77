"""
Data models for bodyfile timeline generation.

This module defines the records flowing through the timeline pipeline:
parsed bodyfile records, the per-timestamp events expanded from them, and
the coalesced rows written to CSV. All of them are immutable and live only
for the duration of a single run.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple


# Bodyfile timestamps are seconds since the Unix epoch, UTC
UNIX_EPOCH = datetime(1970, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

# Placeholder for a MACB position whose timestamp kind did not contribute
MACB_PLACEHOLDER = "."


def epoch_to_datetime(timestamp: int) -> datetime:
    """Convert epoch seconds to a UTC datetime.

    Negative values are valid and land before 1970.

    Args:
        timestamp: Seconds since 1970-01-01T00:00:00Z

    Returns:
        datetime object in UTC timezone

    Raises:
        OverflowError: If the value falls outside the datetime range
    """
    return UNIX_EPOCH + timedelta(seconds=timestamp)


class MACBFlag(str, Enum):
    """Timestamp kinds tracked per file, valued by their MACB letter."""
    MODIFIED = "m"
    ACCESSED = "a"
    CHANGED = "c"  # metadata change
    BIRTH = "b"  # creation


# Fixed rendering order of the MACB string
MACB_ORDER: Tuple[MACBFlag, ...] = (
    MACBFlag.MODIFIED,
    MACBFlag.ACCESSED,
    MACBFlag.CHANGED,
    MACBFlag.BIRTH,
)


def format_macb(flags: Iterable[MACBFlag]) -> str:
    """Render a flag set as a 4-character MACB string such as 'ma.b'."""
    present = set(flags)
    return "".join(
        flag.value if flag in present else MACB_PLACEHOLDER
        for flag in MACB_ORDER
    )


@dataclass(frozen=True)
class MetadataRecord:
    """One parsed bodyfile line.

    Mode, UID and GID are passed through as text; the name is opaque and
    may contain the field delimiter.
    """

    content_hash: str
    name: str
    inode: str
    mode_as_string: str
    uid: str
    gid: str
    size: int = 0
    atime: Optional[int] = None
    mtime: Optional[int] = None
    ctime: Optional[int] = None
    crtime: Optional[int] = None

    def timestamp_for(self, flag: MACBFlag) -> Optional[int]:
        """Return the timestamp backing a MACB flag, or None if absent."""
        if flag is MACBFlag.MODIFIED:
            return self.mtime
        if flag is MACBFlag.ACCESSED:
            return self.atime
        if flag is MACBFlag.CHANGED:
            return self.ctime
        return self.crtime

    @property
    def has_timestamps(self) -> bool:
        return any(
            value is not None
            for value in (self.mtime, self.atime, self.ctime, self.crtime)
        )


@dataclass(frozen=True)
class TimelineEvent:
    """A single timestamp occurrence of a record, before coalescing."""

    timestamp: int
    flag: MACBFlag
    record: MetadataRecord

    @property
    def key(self) -> tuple:
        """Coalescing key: same file identity at the same instant."""
        record = self.record
        return (
            self.timestamp,
            record.name,
            record.inode,
            record.size,
            record.mode_as_string,
            record.uid,
            record.gid,
        )


@dataclass(frozen=True)
class TimelineRow:
    """One output line: a distinct (file, instant) with its MACB flags."""

    timestamp: int
    flags: FrozenSet[MACBFlag]
    size: int
    mode_as_string: str
    uid: str
    gid: str
    inode: str
    name: str

    @property
    def macb(self) -> str:
        return format_macb(self.flags)

    @property
    def datetime_utc(self) -> datetime:
        return epoch_to_datetime(self.timestamp)

    @property
    def date_utc(self) -> date:
        """UTC calendar date of the row, used for day-granularity filtering."""
        return self.datetime_utc.date()
