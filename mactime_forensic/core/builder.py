"""Timeline builder for bodyfiles.

This module provides the primary timeline workflow, chaining the pipeline
stages over one bodyfile:

    parse -> expand -> coalesce -> filter -> (sort) -> CSV

Each stage returns a new sequence; nothing upstream is mutated, so every
stage can also be used on its own.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, TextIO, Union

from mactime_forensic.analysis import (
    EventCoalescer,
    expand_records,
    filter_rows,
    sort_rows,
)
from mactime_forensic.core.config import TimelineConfig
from mactime_forensic.models import MetadataRecord, TimelineRow
from mactime_forensic.output.csv_export import CSVExporter
from mactime_forensic.parsers.bodyfile import BodyfileParser, ParseStatistics

logger = logging.getLogger(__name__)


ProgressCallback = Callable[[str, str, str], None]


@dataclass
class TimelineResult:
    """Rows and statistics produced by one timeline run."""

    rows: List[TimelineRow]
    statistics: ParseStatistics
    event_count: int = 0
    filtered_out: int = 0

    @property
    def record_count(self) -> int:
        """Number of file records read from the bodyfile."""
        return self.statistics.records_parsed

    @property
    def row_count(self) -> int:
        """Number of datetime rows in the timeline."""
        return len(self.rows)


class TimelineBuilder:
    """Builds MACB timelines from bodyfile input.

    Combines the parser and the timeline stages, driven by a TimelineConfig.
    """

    def __init__(
        self,
        config: Optional[TimelineConfig] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize the builder.

        Args:
            config: Run options (defaults to TimelineConfig())
            progress_callback: Optional callback for progress updates.
                Signature: callback(step: str, status: str, message: str)
                step: Pipeline stage name
                status: "start", "complete", "skip"
                message: Human-readable description
        """
        self.config = config or TimelineConfig()
        self._progress_callback = progress_callback

    def _report_progress(self, step: str, status: str, message: str) -> None:
        if self._progress_callback:
            self._progress_callback(step, status, message)

    def build_from_records(
        self,
        records: Iterable[MetadataRecord],
        statistics: Optional[ParseStatistics] = None,
    ) -> TimelineResult:
        """Run the timeline stages over already-parsed records.

        Args:
            records: Parsed records in bodyfile order
            statistics: Parse statistics to attach to the result

        Returns:
            TimelineResult with the final rows
        """
        coalescer = EventCoalescer()
        coalescer.add_all(expand_records(records))
        rows = coalescer.rows()
        self._report_progress(
            "coalesce", "complete",
            f"{coalescer.event_count} events -> {len(rows)} rows",
        )

        before = len(rows)
        if self.config.date_filter is not None:
            rows = filter_rows(rows, self.config.date_filter)
            self._report_progress(
                "filter", "complete",
                f"{before - len(rows)} rows outside {self.config.date_filter}",
            )
        else:
            self._report_progress("filter", "skip", "No date filter")

        if self.config.sort:
            rows = sort_rows(rows)
            self._report_progress("sort", "complete", "Sorted by timestamp")
        else:
            self._report_progress("sort", "skip", "Keeping bodyfile order")

        result = TimelineResult(
            rows=rows,
            statistics=statistics or ParseStatistics(),
            event_count=coalescer.event_count,
            filtered_out=before - len(rows),
        )
        logger.info(
            f"Timeline built: {result.record_count} file records, "
            f"{result.row_count} datetime rows"
        )
        return result

    def build(self, lines: Iterable[str]) -> TimelineResult:
        """Build a timeline from bodyfile lines.

        Args:
            lines: Bodyfile text lines

        Returns:
            TimelineResult
        """
        parser = BodyfileParser(encoding=self.config.encoding)
        self._report_progress("parse", "start", "Parsing bodyfile records")
        records = parser.parse_lines(lines)
        self._report_progress("parse", "complete", self._describe_parse(parser.statistics))
        return self.build_from_records(records, parser.statistics)

    def build_from_file(self, file_path: Union[str, Path]) -> TimelineResult:
        """Build a timeline from a bodyfile on disk.

        Raises:
            TimelineIOError: If the bodyfile cannot be read
        """
        parser = BodyfileParser(encoding=self.config.encoding)
        self._report_progress("parse", "start", f"Parsing {Path(file_path).name}")
        records = parser.parse_file(file_path)
        self._report_progress("parse", "complete", self._describe_parse(parser.statistics))
        return self.build_from_records(records, parser.statistics)

    def build_from_stream(self, stream: TextIO) -> TimelineResult:
        """Build a timeline from an open text stream such as stdin.

        Raises:
            TimelineIOError: If reading the stream fails
        """
        parser = BodyfileParser(encoding=self.config.encoding)
        self._report_progress("parse", "start", "Parsing bodyfile from stream")
        records = parser.parse_stream(stream)
        self._report_progress("parse", "complete", self._describe_parse(parser.statistics))
        return self.build_from_records(records, parser.statistics)

    def exporter(self) -> CSVExporter:
        return CSVExporter(date_format=self.config.date_format)

    @staticmethod
    def _describe_parse(statistics: ParseStatistics) -> str:
        message = f"{statistics.records_parsed} records"
        if statistics.malformed_records:
            message += f", {statistics.malformed_records} malformed skipped"
        if statistics.unparsable_timestamps:
            message += f", {statistics.unparsable_timestamps} unparsable timestamps"
        return message


def generate_timeline(
    bodyfile: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[TimelineConfig] = None,
) -> str:
    """Convenience function to turn a bodyfile into CSV.

    Args:
        bodyfile: Path to the bodyfile
        output_path: Optional path to save the CSV file
        config: Run options (defaults to TimelineConfig())

    Returns:
        CSV text of the timeline
    """
    builder = TimelineBuilder(config)
    result = builder.build_from_file(bodyfile)
    exporter = builder.exporter()

    if output_path:
        exporter.to_file(result.rows, output_path)

    return exporter.to_csv(result.rows)
