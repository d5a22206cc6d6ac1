"""
Mapping from HTTP status codes to protocol outcomes.

The table below is the compatibility contract with CalDAV servers:

======  ===============
status  outcome
======  ===============
200     OK
207     OK
403     FORBIDDEN
409     CONFLICT
423     LOCKED
other   NOT_IMPLEMENTED
======  ===============

Some methods legitimately answer with other success codes (a PUT
creating an object gives 201, a DELETE typically gives 204, a LOCK on
a new resource gives 201), so the method attempted may widen the set
of statuses counted as OK.
"""
from typing import Mapping
from typing import Optional

from libcaldav.lib import error
from libcaldav.protocol.types import Diagnostic
from libcaldav.protocol.types import Outcome
from libcaldav.protocol.types import RuntimeInfo

SUCCESS_STATUSES = frozenset((200, 207))

EXTRA_SUCCESS_BY_METHOD = {
    "PUT": frozenset((201, 204)),
    "DELETE": frozenset((204,)),
    "UNLOCK": frozenset((204,)),
    ## a LOCK on an unmapped URL creates a locked empty resource
    "LOCK": frozenset((201,)),
}

OUTCOME_BY_STATUS = {
    403: Outcome.FORBIDDEN,
    409: Outcome.CONFLICT,
    423: Outcome.LOCKED,
}


def classify(status: int, method: Optional[str] = None) -> Outcome:
    """
    Turn a HTTP status code into an Outcome.  Total: every status maps
    to exactly one outcome.
    """
    if status in SUCCESS_STATUSES:
        return Outcome.OK
    if method and status in EXTRA_SUCCESS_BY_METHOD.get(method.upper(), ()):
        return Outcome.OK
    return OUTCOME_BY_STATUS.get(status, Outcome.NOT_IMPLEMENTED)


def diagnose(
    status: int,
    reason: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Diagnostic:
    """
    Build the diagnostic for a failed exchange.  The message is the
    status line followed by the response headers, which is what the
    server tells us about the failure.
    """
    lines = []
    if reason:
        lines.append("HTTP/1.1 %i %s" % (status, reason))
    for key in headers or {}:
        lines.append("%s: %s" % (key, headers[key]))
    if not lines:
        return Diagnostic(code=status, message="Server returned HTTP status %i" % status)
    return Diagnostic(code=status, message="\r\n".join(lines) + "\r\n")


def classify_response(response, method: str, info: RuntimeInfo) -> Outcome:
    """
    Classify a DAVResponse and record the diagnostic in info.  The
    diagnostic slot is emptied when the outcome is OK.
    """
    outcome = classify(response.status, method)
    if outcome == Outcome.OK:
        info.error = None
    else:
        info.error = diagnose(response.status, response.reason, response.headers)
        error.log.debug(
            "%s gave %s: %s %s", method, outcome.name, response.status, response.reason
        )
    return outcome
