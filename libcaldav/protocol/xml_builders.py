"""
Pure functions for building CalDAV XML request bodies.

All functions in this module are pure - they take data in and return XML out,
with no side effects or I/O.
"""
from typing import Optional

from lxml import etree

from libcaldav.elements import cdav
from libcaldav.elements import dav
from libcaldav.elements.base import BaseElement
from libcaldav.elements.cdav import Timestamp
from libcaldav.protocol.types import Component


def _serialize(root: BaseElement) -> bytes:
    return etree.tostring(root.xmlelement(), encoding="utf-8", xml_declaration=True)


def _calendar_query(
    component: Component, time_range: Optional[cdav.TimeRange] = None
) -> cdav.CalendarQuery:
    comp_filter = cdav.CompFilter(component.value)
    if time_range is not None:
        comp_filter += time_range
    return (
        cdav.CalendarQuery()
        + [dav.Prop() + [dav.GetEtag(), cdav.CalendarData()]]
        + (cdav.Filter() + (cdav.CompFilter("VCALENDAR") + comp_filter))
    )


def build_getall_body(component: Component = Component.EVENT) -> bytes:
    """
    Build the calendar-query REPORT body fetching every object of one
    component type from a collection.

    Args:
        component: Component.EVENT (VEVENT) or Component.TODO (VTODO)

    Returns:
        UTF-8 encoded XML bytes
    """
    return _serialize(_calendar_query(component))


def build_range_body(
    component: Component, start: Timestamp, end: Timestamp
) -> bytes:
    """
    Build the calendar-query REPORT body fetching the objects of one
    component type that overlap a time range.

    The document is the one from build_getall_body with a time-range
    filter added.  start and end are rendered as UTC date-times,
    YYYYMMDDTHHMMSSZ.  An inverted range (start after end) is sent as
    given; it's up to the server to make sense of it.

    Args:
        component: Component.EVENT (VEVENT) or Component.TODO (VTODO)
        start: datetime, date or POSIX timestamp
        end: datetime, date or POSIX timestamp

    Returns:
        UTF-8 encoded XML bytes
    """
    return _serialize(_calendar_query(component, cdav.TimeRange(start, end)))


def build_freebusy_body(start: Timestamp, end: Timestamp) -> bytes:
    """
    Build a free-busy-query REPORT body (RFC4791 section 7.10).

    Returns:
        UTF-8 encoded XML bytes
    """
    return _serialize(cdav.FreeBusyQuery() + cdav.TimeRange(start, end))


def build_displayname_body() -> bytes:
    """
    Build a PROPFIND body asking for the DAV:displayname property.

    Returns:
        UTF-8 encoded XML bytes
    """
    return _serialize(dav.Propfind() + (dav.Prop() + dav.DisplayName()))


def build_lockinfo_body(owner: Optional[str] = None) -> bytes:
    """
    Build a LOCK body requesting an exclusive write lock (RFC4918
    section 9.10).

    Args:
        owner: optional free text identifying the lock holder

    Returns:
        UTF-8 encoded XML bytes
    """
    lockinfo = (
        dav.LockInfo()
        + (dav.LockScope() + dav.Exclusive())
        + (dav.LockType() + dav.Write())
    )
    if owner:
        lockinfo += dav.Owner(owner)
    return _serialize(lockinfo)
