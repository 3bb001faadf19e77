"""Day-granularity date range filtering for timeline rows.

Filter syntax (dates are UTC calendar days, bounds inclusive):

    2021-01-01..2021-01-31   closed range
    2021-01-01..             start only
    ..2021-01-31             end only
    2021-01-01               start only

Time-of-day components are not supported.
"""

import re
from datetime import date, datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mactime_forensic.models import TimelineRow
from mactime_forensic.utils.exceptions import InvalidFilterSyntaxError


DATE_FORMAT = "%Y-%m-%d"
RANGE_SEPARATOR = ".."

_DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_day(text: str, filter_value: str) -> date:
    if not _DAY_PATTERN.match(text):
        raise InvalidFilterSyntaxError(
            filter_value,
            f"Dates must be in the YYYY-MM-DD format, got {text!r}",
        )
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidFilterSyntaxError(filter_value, f"Invalid date {text!r}: {e}") from e


class DateFilter(BaseModel):
    """Inclusive date range; a missing bound is open."""

    model_config = ConfigDict(frozen=True)

    start: Optional[date] = Field(None, description="First UTC day to keep (inclusive)")
    end: Optional[date] = Field(None, description="Last UTC day to keep (inclusive)")

    @model_validator(mode="after")
    def validate_bounds(self) -> "DateFilter":
        """Reject ranges whose start falls after their end."""
        if self.start and self.end and self.start > self.end:
            raise ValueError(f"Start date {self.start} is after end date {self.end}")
        return self

    @classmethod
    def parse(cls, value: str) -> "DateFilter":
        """
        Parse a filter string.

        Args:
            value: Filter such as '2021-01-01..2021-01-31'

        Returns:
            DateFilter instance

        Raises:
            InvalidFilterSyntaxError: If the string does not follow the syntax
        """
        text = value.strip()

        if RANGE_SEPARATOR in text:
            parts = text.split(RANGE_SEPARATOR)
            if len(parts) != 2:
                raise InvalidFilterSyntaxError(value)
            start_text, end_text = (part.strip() for part in parts)
        else:
            start_text, end_text = text, ""

        if not start_text and not end_text:
            raise InvalidFilterSyntaxError(value, "At least one date is required")

        start = _parse_day(start_text, value) if start_text else None
        end = _parse_day(end_text, value) if end_text else None

        if start and end and start > end:
            raise InvalidFilterSyntaxError(
                value, f"Start date {start} is after end date {end}"
            )

        return cls(start=start, end=end)

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    def accepts(self, row: TimelineRow) -> bool:
        return self.contains(row.date_utc)

    def __str__(self) -> str:
        start = self.start.isoformat() if self.start else ""
        end = self.end.isoformat() if self.end else ""
        return f"{start}{RANGE_SEPARATOR}{end}"


def filter_rows(
    rows: Iterable[TimelineRow],
    date_filter: Optional[DateFilter] = None,
) -> List[TimelineRow]:
    """Keep the rows whose UTC date falls within the filter; no filter keeps all."""
    if date_filter is None:
        return list(rows)
    return [row for row in rows if date_filter.accepts(row)]
