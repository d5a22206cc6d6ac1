"""
The public interface of libcaldav.  The library conforms to RFC4791.

Every function takes the resource URL,
``[http://][username[:password]@]host[:port]/url-path``, and an optional
:class:`RuntimeInfo` holding the debug/transport options and receiving
the diagnostic of the call.  Functions fetching data return a tuple
``(Outcome, ResultBuffer)``; the buffer is None unless the outcome is
``Outcome.OK``.  On any other outcome, ``info.error`` holds the code and
message to show to the user.

Example::

    import libcaldav

    info = libcaldav.get_runtime_info()
    outcome, result = libcaldav.getall_object("https://user:pw@example.com/cal/", info)
    if outcome == libcaldav.Outcome.OK:
        print(result.msg)
    else:
        print(info.error.message)
"""
import warnings
from typing import List
from typing import Optional
from typing import Tuple

from libcaldav.config import get_runtime_info
from libcaldav.operations import make_caldav_call
from libcaldav.protocol.types import Action
from libcaldav.protocol.types import DebugOptions
from libcaldav.protocol.types import Diagnostic
from libcaldav.protocol.types import OperationSettings
from libcaldav.protocol.types import Outcome
from libcaldav.protocol.types import ResultBuffer
from libcaldav.protocol.types import RuntimeInfo
from libcaldav.protocol.types import TimeRange
from libcaldav.protocol.types import Timestamp

FetchResult = Tuple[Outcome, Optional[ResultBuffer]]


def _call(action: Action, url: str, info: Optional[RuntimeInfo], **kwargs):
    if info is None:
        info = RuntimeInfo()
    settings = OperationSettings.from_runtime_info(action, url, info, **kwargs)
    return make_caldav_call(settings, info)


def _fetch(action: Action, url: str, info: Optional[RuntimeInfo], **kwargs) -> FetchResult:
    outcome, text = _call(action, url, info, **kwargs)
    if outcome != Outcome.OK:
        return outcome, None
    return outcome, ResultBuffer(msg=text)


def _mutate(action: Action, obj: str, url: str, info: Optional[RuntimeInfo]) -> Outcome:
    outcome, _ = _call(action, url, info, file=obj)
    return outcome


def add_object(obj: str, url: str, info: Optional[RuntimeInfo] = None) -> Outcome:
    """
    Add a new event.  obj is an iCalendar object (RFC5545).  If url is
    a collection, the event is stored as ``<UID>.ics`` inside it.
    """
    return _mutate(Action.ADD, obj, url, info)


def delete_object(obj: str, url: str, info: Optional[RuntimeInfo] = None) -> Outcome:
    """Delete an event."""
    return _mutate(Action.DELETE, obj, url, info)


def modify_object(obj: str, url: str, info: Optional[RuntimeInfo] = None) -> Outcome:
    """Replace an event with obj."""
    return _mutate(Action.MODIFY, obj, url, info)


def get_object(
    start: Timestamp, end: Timestamp, url: str, info: Optional[RuntimeInfo] = None
) -> FetchResult:
    """
    Get the events overlapping a time range.  start and end are
    datetimes or POSIX timestamps, both included in the search.
    """
    return _fetch(Action.GET, url, info, time_range=TimeRange(start, end))


def getall_object(url: str, info: Optional[RuntimeInfo] = None) -> FetchResult:
    """Get all events of the collection."""
    return _fetch(Action.GETALL, url, info)


def tasks_add_object(obj: str, url: str, info: Optional[RuntimeInfo] = None) -> Outcome:
    """Add a new task."""
    return _mutate(Action.ADDTASKS, obj, url, info)


def tasks_delete_object(obj: str, url: str, info: Optional[RuntimeInfo] = None) -> Outcome:
    """Delete a task."""
    return _mutate(Action.DELETETASKS, obj, url, info)


def tasks_modify_object(obj: str, url: str, info: Optional[RuntimeInfo] = None) -> Outcome:
    """Replace a task with obj."""
    return _mutate(Action.MODIFYTASKS, obj, url, info)


def tasks_get_object(
    start: Timestamp, end: Timestamp, url: str, info: Optional[RuntimeInfo] = None
) -> FetchResult:
    """Get the tasks overlapping a time range."""
    return _fetch(Action.GETTASKS, url, info, time_range=TimeRange(start, end))


def tasks_getall_object(url: str, info: Optional[RuntimeInfo] = None) -> FetchResult:
    """Get all tasks of the collection."""
    return _fetch(Action.GETALLTASKS, url, info)


def get_freebusy(
    start: Timestamp, end: Timestamp, url: str, info: Optional[RuntimeInfo] = None
) -> FetchResult:
    """
    Get free/busy information for a time range.  The result is the
    VFREEBUSY calendar object returned by the server.
    """
    return _fetch(Action.FREEBUSY, url, info, time_range=TimeRange(start, end))


def get_displayname(url: str, info: Optional[RuntimeInfo] = None) -> FetchResult:
    """Get the display name stored for the collection."""
    return _fetch(Action.GETCALNAME, url, info)


def enabled_resource(url: str, info: Optional[RuntimeInfo] = None) -> bool:
    """Test whether a resource is CalDAV enabled."""
    outcome, enabled = _call(Action.ISCALDAV, url, info)
    return outcome == Outcome.OK and bool(enabled)


def get_server_options(url: str, info: Optional[RuntimeInfo] = None) -> Optional[List[str]]:
    """
    Get the list of methods the server allows on the resource, or None
    in case of any error.
    """
    outcome, allowed = _call(Action.OPTIONS, url, info)
    if outcome != Outcome.OK:
        return None
    return allowed


def get_response() -> ResultBuffer:
    """An empty result buffer"""
    return ResultBuffer()


def get_error(lib_error: Optional[Diagnostic] = None) -> Diagnostic:
    """
    Deprecated.  Always returns a freshly initialized, empty
    Diagnostic, whatever happened before.  Read ``info.error`` of the
    RuntimeInfo passed to the call instead.
    """
    warnings.warn(
        "get_error always returns an empty Diagnostic, use RuntimeInfo.error",
        DeprecationWarning,
        stacklevel=2,
    )
    return Diagnostic()


def set_options(options: DebugOptions) -> None:
    """
    Deprecated.  Does nothing; pass the options in the RuntimeInfo of
    each call instead.
    """
    warnings.warn(
        "set_options does nothing, pass options through RuntimeInfo",
        DeprecationWarning,
        stacklevel=2,
    )


__all__ = [
    "add_object",
    "delete_object",
    "enabled_resource",
    "get_displayname",
    "get_error",
    "get_freebusy",
    "get_object",
    "get_response",
    "get_runtime_info",
    "get_server_options",
    "getall_object",
    "modify_object",
    "set_options",
    "tasks_add_object",
    "tasks_delete_object",
    "tasks_get_object",
    "tasks_getall_object",
    "tasks_modify_object",
]
