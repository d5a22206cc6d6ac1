#!/usr/bin/env python
import logging

__version__ = "0.9.0"

from .api import *
from .davclient import DAVClient
from .protocol.types import Action
from .protocol.types import Component
from .protocol.types import DebugOptions
from .protocol.types import Diagnostic
from .protocol.types import Outcome
from .protocol.types import ResultBuffer
from .protocol.types import RuntimeInfo

# Silence notification of no default logging handler
log = logging.getLogger("libcaldav")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

__all__ = [
    "__version__",
    "Action",
    "Component",
    "DAVClient",
    "DebugOptions",
    "Diagnostic",
    "Outcome",
    "ResultBuffer",
    "RuntimeInfo",
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
