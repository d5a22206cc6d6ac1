#!/usr/bin/env python
import logging
from datetime import date
from datetime import datetime
from datetime import timezone
from typing import ClassVar
from typing import Optional
from typing import Union

from .base import BaseElement
from .base import NamedBaseElement
from libcaldav.lib.namespace import ns

utc_tz = timezone.utc

Timestamp = Union[datetime, date, int, float]


def _to_utc_date_string(ts: Timestamp) -> str:
    """coerce timestamps to a UTC "date with UTC time" string,
    YYYYMMDDTHHMMSSZ.  Accepts datetimes (naive ones are assumed to
    be localtime), dates and POSIX timestamps (seconds since epoch).
    """
    if isinstance(ts, (int, float)) and not isinstance(ts, bool):
        ts = datetime.fromtimestamp(ts, utc_tz)
    elif isinstance(ts, datetime):
        try:
            ## ts.astimezone() will assume a naive timestamp is
            ## localtime (and so do we)
            ts = ts.astimezone(utc_tz)
        except (OverflowError, ValueError, OSError):
            ## the platform could not figure out the local offset for
            ## this timestamp.
            import tzlocal

            ts = ts.replace(tzinfo=tzlocal.get_localzone())

            mindate = datetime.min.replace(tzinfo=utc_tz)
            maxdate = datetime.max.replace(tzinfo=utc_tz)
            if mindate + ts.tzinfo.utcoffset(ts) > ts:
                logging.error(
                    "Cannot coerce datetime %s to UTC. Changed to min-date.", ts
                )
                ts = mindate
            elif ts > maxdate - ts.tzinfo.utcoffset(ts):
                logging.error(
                    "Cannot coerce datetime %s to UTC. Changed to max-date.", ts
                )
                ts = maxdate
            else:
                ts = ts.astimezone(utc_tz)

    return ts.strftime("%Y%m%dT%H%M%SZ")


# Operations
class CalendarQuery(BaseElement):
    tag: ClassVar[str] = ns("C", "calendar-query")


class FreeBusyQuery(BaseElement):
    tag: ClassVar[str] = ns("C", "free-busy-query")


# Filters
class Filter(BaseElement):
    tag: ClassVar[str] = ns("C", "filter")


class CompFilter(NamedBaseElement):
    tag: ClassVar[str] = ns("C", "comp-filter")


# Conditions
class TimeRange(BaseElement):
    tag: ClassVar[str] = ns("C", "time-range")

    def __init__(
        self, start: Optional[Timestamp] = None, end: Optional[Timestamp] = None
    ) -> None:
        ## start and end should be an icalendar "date with UTC time",
        ## ref https://tools.ietf.org/html/rfc4791#section-9.9
        super().__init__()

        if start is not None:
            self.attributes["start"] = _to_utc_date_string(start)
        if end is not None:
            self.attributes["end"] = _to_utc_date_string(end)


# Components / Data
class CalendarData(BaseElement):
    tag: ClassVar[str] = ns("C", "calendar-data")
