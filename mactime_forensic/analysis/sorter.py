"""Chronological ordering of timeline rows."""

from operator import attrgetter
from typing import Iterable, List

from mactime_forensic.models import TimelineRow


def sort_rows(rows: Iterable[TimelineRow]) -> List[TimelineRow]:
    """Return a new list ordered by timestamp ascending.

    The sort is stable with no secondary key: rows sharing a timestamp keep
    their relative input order.
    """
    return sorted(rows, key=attrgetter("timestamp"))
