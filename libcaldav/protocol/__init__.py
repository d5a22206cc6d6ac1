"""
The I/O-free parts of the CalDAV protocol engine.

This package holds the types, the XML request builders, the status
classifier and the response parsers.  None of it touches the network;
the DAVClient in libcaldav.davclient does the exchanges and the
functions in libcaldav.operations glue things together.

Example::

    from libcaldav.protocol import build_getall_body, Component

    body = build_getall_body(Component.TODO)
"""
from .classify import classify
from .classify import classify_response
from .classify import diagnose
from .types import Action
from .types import Component
from .types import DebugOptions
from .types import Diagnostic
from .types import OperationSettings
from .types import Outcome
from .types import ResultBuffer
from .types import RuntimeInfo
from .types import TimeRange
from .xml_builders import build_displayname_body
from .xml_builders import build_freebusy_body
from .xml_builders import build_getall_body
from .xml_builders import build_lockinfo_body
from .xml_builders import build_range_body
from .xml_parsers import extract_report
from .xml_parsers import parse_allow
from .xml_parsers import parse_dav_header
from .xml_parsers import parse_displayname
from .xml_parsers import parse_lock_token

__all__ = [
    "Action",
    "Component",
    "DebugOptions",
    "Diagnostic",
    "OperationSettings",
    "Outcome",
    "ResultBuffer",
    "RuntimeInfo",
    "TimeRange",
    "build_displayname_body",
    "build_freebusy_body",
    "build_getall_body",
    "build_lockinfo_body",
    "build_range_body",
    "classify",
    "classify_response",
    "diagnose",
    "extract_report",
    "parse_allow",
    "parse_dav_header",
    "parse_displayname",
    "parse_lock_token",
]
