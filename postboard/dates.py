"""
Day boundaries for date-range search.

Every boundary is midnight UTC of the requested calendar day, whatever the
server or client time zone. Callers near a day edge in other zones may see
posts admitted or excluded accordingly.

Two types keep the day-inclusive upper bound from being widened twice:
:class:`DayStart` is a parsed day, :class:`ExclusiveBound` is the upper
bound handed to a query. Only :meth:`DayStart.next_day` makes the latter.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

MAX_INSTANT = datetime.max.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class DayStart:
    """Midnight UTC of a calendar day, or a caller-supplied fallback instant."""

    instant: datetime

    def next_day(self) -> "ExclusiveBound":
        """Start of the following day, usable as an exclusive upper bound."""
        try:
            return ExclusiveBound(self.instant + timedelta(days=1))
        except OverflowError:
            return ExclusiveBound(MAX_INSTANT)


@dataclass(frozen=True)
class ExclusiveBound:
    instant: datetime


# No lower bound / far future, both within Firestore's timestamp range.
NO_LOWER_BOUND = datetime(1, 1, 1, tzinfo=timezone.utc)
FAR_FUTURE = datetime(9999, 12, 31, tzinfo=timezone.utc)


def normalize_day_start(text: Optional[str], fallback: datetime) -> DayStart:
    """
    Parse ``YYYY-MM-DD`` into midnight UTC of that day.

    Malformed, empty or impossible dates return ``fallback`` unchanged; an
    unusable date filter simply means "no bound".
    """
    if not text or not _DATE_RE.match(text.strip()):
        return DayStart(fallback)
    try:
        parsed = datetime.strptime(text.strip(), DATE_FORMAT)
    except ValueError:
        logger.debug("Ignoring impossible date %r", text)
        return DayStart(fallback)
    return DayStart(parsed.replace(tzinfo=timezone.utc))
