"""Bodyfile record parser.

This module turns Sleuth Kit bodyfile lines into MetadataRecord objects.
Bodyfile format (one record per line, pipe-delimited):

    MD5|name|inode|mode_as_string|UID|GID|size|atime|mtime|ctime|crtime
    0|c:/$MFT|0-128-6|r/rrwxrwxrwx|0|0|1835008|1595291898|1595291898|1595291898|1595291898

Timestamps are seconds since the Unix epoch (UTC) or empty.

Tokenization:
    The filename is free text and may itself contain the '|' delimiter.
    The first delimiter and the last nine delimiters on a line are
    structural; everything in between belongs to the filename, which is
    never re-split.

Error policy:
    Per-record problems never abort a run. A line with too few fields is
    skipped and recorded as a MalformedRecordError; an unusable timestamp
    makes that timestamp kind absent for the record.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Union

from mactime_forensic.models import MetadataRecord, epoch_to_datetime
from mactime_forensic.utils.exceptions import (
    MalformedRecordError,
    TimelineIOError,
    UnparsableTimestampError,
)

logger = logging.getLogger(__name__)


FIELD_DELIMITER = "|"

BODYFILE_FIELDS = (
    "md5",
    "name",
    "inode",
    "mode_as_string",
    "uid",
    "gid",
    "size",
    "atime",
    "mtime",
    "ctime",
    "crtime",
)

FIELD_COUNT = len(BODYFILE_FIELDS)

# Fields after the filename: inode .. crtime
TRAILING_FIELD_COUNT = FIELD_COUNT - 2

COMMENT_PREFIX = "#"

# Optional sign followed by ASCII digits
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Malformed lines beyond this many are counted but not kept
MAX_RECORDED_ERRORS = 100


def split_bodyfile_line(line: str, line_number: Optional[int] = None) -> List[str]:
    """Split a bodyfile line into exactly 11 fields.

    Args:
        line: One bodyfile line without its line terminator
        line_number: Optional line number used in error reporting

    Returns:
        List of 11 field strings; the filename keeps any embedded delimiters

    Raises:
        MalformedRecordError: If the line has fewer than 11 fields
    """
    parts = line.split(FIELD_DELIMITER)
    if len(parts) < FIELD_COUNT:
        raise MalformedRecordError(
            field_count=len(parts),
            expected=FIELD_COUNT,
            line_number=line_number,
            line=line,
        )

    head = parts[0]
    trailing = parts[-TRAILING_FIELD_COUNT:]
    name = FIELD_DELIMITER.join(parts[1:-TRAILING_FIELD_COUNT])
    return [head, name, *trailing]


def parse_timestamp(
    value: str,
    field_name: str = "timestamp",
    line_number: Optional[int] = None,
) -> Optional[int]:
    """Parse an epoch-seconds timestamp field.

    Args:
        value: Raw field text
        field_name: Name of the field, for error reporting
        line_number: Optional line number, for error reporting

    Returns:
        Integer timestamp, or None if the field is empty

    Raises:
        UnparsableTimestampError: If the field is not an integer or cannot
            be represented as a UTC datetime
    """
    text = value.strip()
    if not text:
        return None

    if not INTEGER_PATTERN.fullmatch(text):
        raise UnparsableTimestampError(field_name, value, line_number)

    try:
        timestamp = int(text)
        # Reject values outside the datetime range up front so rendering
        # never fails downstream
        epoch_to_datetime(timestamp)
    except (ValueError, OverflowError) as e:
        raise UnparsableTimestampError(field_name, value, line_number) from e

    return timestamp


def parse_size(value: str) -> int:
    """Parse the size field; empty, non-numeric or negative values become 0."""
    text = value.strip()
    if not INTEGER_PATTERN.fullmatch(text):
        return 0
    size = int(text)
    return size if size >= 0 else 0


@dataclass
class ParseStatistics:
    """Counters and soft errors collected while parsing a bodyfile.

    ``errors`` keeps only the first MAX_RECORDED_ERRORS malformed lines;
    ``malformed_records`` counts all of them.
    """

    lines_read: int = 0
    records_parsed: int = 0
    lines_skipped: int = 0
    malformed_records: int = 0
    unparsable_timestamps: int = 0
    errors: List[MalformedRecordError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return self.malformed_records > 0 or self.unparsable_timestamps > 0


class BodyfileParser:
    """Parser for Sleuth Kit bodyfiles.

    A parser instance accumulates statistics across the lines it is given;
    use a fresh instance per run.

    Example:
        parser = BodyfileParser()
        records = parser.parse_file(Path("evidence.body"))
        print(parser.statistics.malformed_records)
    """

    def __init__(self, encoding: str = "utf-8"):
        """
        Initialize the parser.

        Args:
            encoding: Text encoding used when reading bodyfiles from disk
        """
        self.encoding = encoding
        self.statistics = ParseStatistics()

    def parse_line(self, line: str, line_number: Optional[int] = None) -> MetadataRecord:
        """Parse one bodyfile line into a MetadataRecord.

        Unusable timestamps are treated as absent and counted in
        ``self.statistics``.

        Args:
            line: Bodyfile line, with or without its line terminator
            line_number: Optional line number for error reporting

        Returns:
            Parsed MetadataRecord

        Raises:
            MalformedRecordError: If the line has fewer than 11 fields
        """
        line = line.rstrip("\r\n")
        (
            md5,
            name,
            inode,
            mode_as_string,
            uid,
            gid,
            size,
            atime,
            mtime,
            ctime,
            crtime,
        ) = split_bodyfile_line(line, line_number)

        timestamps = {}
        for field_name, raw in (
            ("atime", atime),
            ("mtime", mtime),
            ("ctime", ctime),
            ("crtime", crtime),
        ):
            try:
                timestamps[field_name] = parse_timestamp(raw, field_name, line_number)
            except UnparsableTimestampError as e:
                self.statistics.unparsable_timestamps += 1
                logger.debug(f"{e}; treating {field_name} as absent")
                timestamps[field_name] = None

        return MetadataRecord(
            content_hash=md5,
            name=name,
            inode=inode,
            mode_as_string=mode_as_string,
            uid=uid,
            gid=gid,
            size=parse_size(size),
            **timestamps,
        )

    def iter_records(self, lines: Iterable[str]) -> Iterator[MetadataRecord]:
        """Parse an iterable of lines, skipping blank, comment and malformed lines.

        Args:
            lines: Bodyfile lines (e.g., an open text file)

        Yields:
            MetadataRecord for every well-formed line, in input order
        """
        for line_number, line in enumerate(lines, start=1):
            self.statistics.lines_read += 1

            stripped = line.strip()
            if not stripped or stripped.startswith(COMMENT_PREFIX):
                self.statistics.lines_skipped += 1
                continue

            try:
                record = self.parse_line(line, line_number)
            except MalformedRecordError as e:
                self.statistics.malformed_records += 1
                if len(self.statistics.errors) < MAX_RECORDED_ERRORS:
                    self.statistics.errors.append(e)
                logger.warning(f"Skipping record: {e.message}")
                continue

            self.statistics.records_parsed += 1
            yield record

    def parse_lines(self, lines: Iterable[str]) -> List[MetadataRecord]:
        """Parse all lines and return the well-formed records."""
        return list(self.iter_records(lines))

    def parse_stream(self, stream: TextIO) -> List[MetadataRecord]:
        """Parse a bodyfile from an open text stream such as stdin.

        Raises:
            TimelineIOError: If reading from the stream fails
        """
        source = getattr(stream, "name", "<stream>")
        try:
            return self.parse_lines(stream)
        except (OSError, UnicodeDecodeError) as e:
            raise TimelineIOError(str(source), operation="read", cause=e) from e

    def parse_file(self, file_path: Union[str, Path]) -> List[MetadataRecord]:
        """Parse a bodyfile from disk.

        Undecodable bytes are replaced rather than aborting the run. Lines
        end at a line feed only, so a lone carriage return inside a
        filename is kept.

        Args:
            file_path: Path to the bodyfile

        Returns:
            List of parsed records

        Raises:
            TimelineIOError: If the file cannot be opened or read
        """
        file_path = Path(file_path)
        try:
            with open(file_path, "r", encoding=self.encoding, errors="replace", newline="\n") as f:
                records = self.parse_lines(f)
        except (OSError, LookupError) as e:
            raise TimelineIOError(str(file_path), operation="read", cause=e) from e

        logger.info(
            f"Read {self.statistics.records_parsed} file records from {file_path.name} "
            f"({self.statistics.malformed_records} malformed)"
        )
        return records


def parse_bodyfile(file_path: Union[str, Path], encoding: str = "utf-8") -> List[MetadataRecord]:
    """
    Convenience function to parse a bodyfile.

    Args:
        file_path: Path to the bodyfile
        encoding: Text encoding of the file

    Returns:
        List of parsed MetadataRecord objects
    """
    return BodyfileParser(encoding=encoding).parse_file(file_path)
