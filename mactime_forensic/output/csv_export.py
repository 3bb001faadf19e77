"""CSV export for MACB timelines.

This module serializes timeline rows with a fixed column schema:

    Date,Size,Type,Mode,UID,GID,Meta,File Name

Date is the UTC rendering of the timestamp, Type is the MACB flag string
and Meta is the inode. Quoting follows standard CSV rules (fields holding
the delimiter, a quote or a newline are wrapped in double quotes, inner
quotes are doubled). Rows holding a carriage return or line feed in any
field are written fully quoted.
"""

import csv
import io
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, TextIO, Union

from mactime_forensic.models import TimelineRow
from mactime_forensic.utils.exceptions import TimelineIOError


CSV_HEADER = ("Date", "Size", "Type", "Mode", "UID", "GID", "Meta", "File Name")

DEFAULT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

LINE_TERMINATOR = "\n"

LINE_BREAK_CHARS = ("\r", "\n")


class CSVExporter:
    """Exporter for timeline rows to CSV format.

    Provides methods to render rows as CSV strings, stream them to an open
    text stream, or save them directly to files.
    """

    def __init__(self, date_format: str = DEFAULT_DATE_FORMAT):
        """Initialize the CSV exporter.

        Args:
            date_format: strftime format for the Date column (UTC)
        """
        self.date_format = date_format

    def format_date(self, row: TimelineRow) -> str:
        """Render the Date column; the default format keeps four-digit years."""
        if self.date_format == DEFAULT_DATE_FORMAT:
            return row.datetime_utc.replace(tzinfo=None).isoformat(timespec="seconds")
        return row.datetime_utc.strftime(self.date_format)

    def format_row(self, row: TimelineRow) -> List[str]:
        """Convert a TimelineRow to its CSV field values.

        Args:
            row: Timeline row to convert

        Returns:
            List of field strings in CSV_HEADER order
        """
        return [
            self.format_date(row),
            str(row.size),
            row.macb,
            row.mode_as_string,
            row.uid,
            row.gid,
            row.inode,
            row.name,
        ]

    def _writer(self, stream: TextIO) -> Callable[[List[str]], object]:
        minimal = csv.writer(stream, lineterminator=LINE_TERMINATOR)
        quoted = csv.writer(stream, lineterminator=LINE_TERMINATOR, quoting=csv.QUOTE_ALL)

        def writerow(fields: List[str]):
            if any(char in value for value in fields for char in LINE_BREAK_CHARS):
                return quoted.writerow(fields)
            return minimal.writerow(fields)

        return writerow

    def write(self, rows: Iterable[TimelineRow], stream: TextIO) -> int:
        """Write the header and all rows to an open text stream.

        Args:
            rows: Timeline rows in output order
            stream: Destination text stream (file, stdout, StringIO)

        Returns:
            Number of rows written, excluding the header

        Raises:
            TimelineIOError: If writing to the stream fails
        """
        writerow = self._writer(stream)
        count = 0
        try:
            writerow(CSV_HEADER)
            for row in rows:
                writerow(self.format_row(row))
                count += 1
        except OSError as e:
            name = getattr(stream, "name", "<stream>")
            raise TimelineIOError(str(name), operation="write", cause=e) from e
        return count

    def iter_lines(self, rows: Iterable[TimelineRow]) -> Iterator[str]:
        """Yield the header and each row as a complete CSV line."""
        buffer = io.StringIO()
        writerow = self._writer(buffer)

        writerow(CSV_HEADER)
        yield buffer.getvalue()

        for row in rows:
            buffer.seek(0)
            buffer.truncate()
            writerow(self.format_row(row))
            yield buffer.getvalue()

    def to_csv(self, rows: Iterable[TimelineRow]) -> str:
        """Convert timeline rows to a CSV string.

        Args:
            rows: Timeline rows in output order

        Returns:
            CSV text ending with the last row's line terminator
        """
        buffer = io.StringIO()
        self.write(rows, buffer)
        return buffer.getvalue()

    def to_file(
        self,
        rows: Iterable[TimelineRow],
        file_path: Union[str, Path],
        encoding: str = "utf-8",
    ) -> int:
        """Save timeline rows to a CSV file.

        Args:
            rows: Timeline rows in output order
            file_path: Path to the output file
            encoding: File encoding (default: utf-8)

        Returns:
            Number of rows written

        Raises:
            TimelineIOError: If the file cannot be created or written
        """
        file_path = Path(file_path)

        try:
            # Create parent directories if they don't exist
            file_path.parent.mkdir(parents=True, exist_ok=True)

            with open(file_path, "w", encoding=encoding, newline="") as f:
                return self.write(rows, f)
        except OSError as e:
            raise TimelineIOError(str(file_path), operation="write", cause=e) from e


def export_to_csv(
    rows: Iterable[TimelineRow],
    output_path: Optional[Union[str, Path]] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """Convenience function to export timeline rows to CSV.

    Args:
        rows: Timeline rows to export
        output_path: Optional path to save the CSV file
        date_format: strftime format for the Date column

    Returns:
        CSV string representation of the rows
    """
    rows = list(rows)
    exporter = CSVExporter(date_format=date_format)
    csv_str = exporter.to_csv(rows)

    if output_path:
        exporter.to_file(rows, output_path)

    return csv_str
