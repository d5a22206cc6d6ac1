"""
Core types of the CalDAV protocol engine.

These dataclasses and enums describe what the caller asks for
(``Action``, ``OperationSettings``), what the engine reports back
(``Outcome``, ``Diagnostic``, ``ResultBuffer``) and the per-call context
threaded through every operation (``RuntimeInfo``, ``DebugOptions``).
None of them perform any I/O.
"""
import sys
from dataclasses import dataclass
from dataclasses import field
from datetime import date
from datetime import datetime
from enum import Enum
from types import TracebackType
from typing import Optional
from typing import Union

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self

Timestamp = Union[datetime, date, int, float]


class Action(Enum):
    """CalDAV actions supported by the engine."""

    UNKNOWN = "unknown"
    ADD = "add"
    DELETE = "delete"
    FREEBUSY = "freebusy"
    MODIFY = "modify"
    GET = "get"
    GETALL = "getall"
    GETCALNAME = "getcalname"
    ISCALDAV = "iscaldav"
    OPTIONS = "options"
    ADDTASKS = "addtasks"
    DELETETASKS = "deletetasks"
    MODIFYTASKS = "modifytasks"
    GETTASKS = "gettasks"
    GETALLTASKS = "getalltasks"

    @property
    def is_mutation(self) -> bool:
        return self in _MUTATIONS

    @property
    def component(self) -> "Component":
        if self in _TASK_ACTIONS:
            return Component.TODO
        return Component.EVENT


class Component(Enum):
    """iCalendar component markers used to filter query results."""

    EVENT = "VEVENT"
    TODO = "VTODO"


_MUTATIONS = frozenset(
    (
        Action.ADD,
        Action.DELETE,
        Action.MODIFY,
        Action.ADDTASKS,
        Action.DELETETASKS,
        Action.MODIFYTASKS,
    )
)

_TASK_ACTIONS = frozenset(
    (
        Action.ADDTASKS,
        Action.DELETETASKS,
        Action.MODIFYTASKS,
        Action.GETTASKS,
        Action.GETALLTASKS,
    )
)


class Outcome(Enum):
    """
    Protocol outcome of an operation.

    OK (HTTP 200/207): the request was satisfied.
    FORBIDDEN (HTTP 403): access not allowed, don't repeat the request.
    CONFLICT (HTTP 409): conflict between the current state of the
    collection and the request; also the fall-back state when the
    request never reached the server.
    LOCKED (HTTP 423): locking failed.
    NOT_IMPLEMENTED: anything else.
    """

    OK = 0
    FORBIDDEN = 1
    CONFLICT = 2
    LOCKED = 3
    NOT_IMPLEMENTED = 4


@dataclass
class Diagnostic:
    """
    Error code and human readable message.

    A negative code is an internal/transport error (the server was never
    reached), a positive code is the HTTP status the server answered.
    """

    code: int = 0
    message: Optional[str] = None

    def clear(self) -> None:
        self.code = 0
        self.message = None


@dataclass
class TimeRange:
    start: Timestamp
    end: Timestamp


@dataclass
class DebugOptions:
    trace_ascii: bool = False
    debug: bool = False
    verify_ssl_certificate: bool = True
    use_locking: bool = False
    custom_cacert: Optional[str] = None
    timeout: Optional[float] = None


@dataclass
class RuntimeInfo:
    """
    Per-call runtime context: the diagnostic slot of the last call and
    the debug/transport options.  One instance must not be shared by
    calls running at the same time.
    """

    error: Optional[Diagnostic] = None
    options: DebugOptions = field(default_factory=DebugOptions)

    def clear(self) -> None:
        self.error = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[type] = None,
        exc_value: Optional[BaseException] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        self.clear()


@dataclass
class ResultBuffer:
    """Text handed back to the caller: calendar objects, display name, ..."""

    msg: Optional[str] = None

    def clear(self) -> None:
        self.msg = None

    def __str__(self) -> str:
        return self.msg or ""

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[type] = None,
        exc_value: Optional[BaseException] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        self.clear()


@dataclass
class OperationSettings:
    """
    Everything one call needs to know.  Built fresh for every call
    from the arguments and the RuntimeInfo options.
    """

    action: Action = Action.UNKNOWN
    url: Optional[str] = None
    file: Optional[str] = None
    time_range: Optional[TimeRange] = None
    debug: bool = False
    trace_ascii: bool = False
    use_locking: bool = False
    verify_ssl_certificate: bool = True
    custom_cacert: Optional[str] = None
    timeout: Optional[float] = None

    @classmethod
    def from_runtime_info(
        cls, action: Action, url: str, info: RuntimeInfo, **kwargs
    ) -> "OperationSettings":
        options = info.options
        return cls(
            action=action,
            url=str(url),
            debug=options.debug,
            trace_ascii=options.trace_ascii,
            use_locking=options.use_locking,
            verify_ssl_certificate=options.verify_ssl_certificate,
            custom_cacert=options.custom_cacert,
            timeout=options.timeout,
            **kwargs,
        )
