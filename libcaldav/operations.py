"""
The operation engine: one function per CalDAV action, and
``make_caldav_call`` dispatching an ``OperationSettings`` to the right
one.

Every call opens its own DAVClient, does its exchange(s), classifies
the outcome and, for the fetching actions, extracts the result text.
Transport and protocol failures end up in ``info.error``; nothing is
raised to the caller.
"""
import logging
from typing import Any
from typing import Callable
from typing import Dict
from typing import Optional
from typing import Tuple
from urllib.parse import quote

import icalendar

from libcaldav.davclient import DAVClient
from libcaldav.lib import error
from libcaldav.lib.url import URL
from libcaldav.locking import run_locked
from libcaldav.protocol.classify import classify_response
from libcaldav.protocol.types import Action
from libcaldav.protocol.types import Diagnostic
from libcaldav.protocol.types import OperationSettings
from libcaldav.protocol.types import Outcome
from libcaldav.protocol.types import RuntimeInfo
from libcaldav.protocol.xml_builders import build_displayname_body
from libcaldav.protocol.xml_builders import build_freebusy_body
from libcaldav.protocol.xml_builders import build_getall_body
from libcaldav.protocol.xml_builders import build_range_body
from libcaldav.protocol.xml_parsers import extract_report
from libcaldav.protocol.xml_parsers import parse_allow
from libcaldav.protocol.xml_parsers import parse_dav_header
from libcaldav.protocol.xml_parsers import parse_displayname

log = logging.getLogger(__name__)

CallResult = Tuple[Outcome, Any]


def find_uid(data: str) -> Optional[str]:
    """The UID of the first component in an iCalendar object that has one"""
    try:
        calendar = icalendar.Calendar.from_ical(data)
    except ValueError:
        error.weirdness("could not parse calendar object", data)
        return None
    for component in calendar.walk():
        if "UID" in component:
            return str(component["UID"])
    return None


def object_url(url: str, data: Optional[str]) -> URL:
    """
    Where a calendar object lives.  Given a collection (the URL ends
    with a slash), the object goes into ``<collection>/<UID>.ics``.
    Given anything else, the URL is taken to be the object itself.
    """
    url_obj = URL.objectify(url)
    if not data or not url_obj.is_collection():
        return url_obj
    uid = find_uid(data)
    if not uid:
        return url_obj
    return url_obj.join(quote(uid, safe="@") + ".ics")


def _client(settings: OperationSettings) -> DAVClient:
    ssl_verify_cert = settings.verify_ssl_certificate
    if ssl_verify_cert and settings.custom_cacert:
        ssl_verify_cert = settings.custom_cacert
    return DAVClient(
        settings.url,
        timeout=settings.timeout,
        ssl_verify_cert=ssl_verify_cert,
        debug=settings.debug,
        trace_ascii=settings.trace_ascii,
    )


def _report(
    client: DAVClient, settings: OperationSettings, info: RuntimeInfo, body: bytes
) -> CallResult:
    response = client.report(settings.url, body)
    outcome = classify_response(response, "REPORT", info)
    if outcome != Outcome.OK:
        return outcome, None
    return outcome, extract_report(
        response.content,
        "calendar-data",
        settings.action.component.value,
        huge_tree=client.huge_tree,
    )


def caldav_getall(client, settings, info) -> CallResult:
    return _report(client, settings, info, build_getall_body(settings.action.component))


def caldav_getrange(client, settings, info) -> CallResult:
    time_range = settings.time_range
    body = build_range_body(
        settings.action.component, time_range.start, time_range.end
    )
    return _report(client, settings, info, body)


def caldav_freebusy(client, settings, info) -> CallResult:
    time_range = settings.time_range
    response = client.report(
        settings.url, build_freebusy_body(time_range.start, time_range.end)
    )
    outcome = classify_response(response, "REPORT", info)
    if outcome != Outcome.OK:
        return outcome, None
    return outcome, response.raw


def caldav_getname(client, settings, info) -> CallResult:
    response = client.propfind(settings.url, build_displayname_body())
    outcome = classify_response(response, "PROPFIND", info)
    if outcome != Outcome.OK:
        return outcome, None
    return outcome, parse_displayname(response.content, client.url) or ""


def caldav_options(client, settings, info) -> CallResult:
    response = client.options(settings.url)
    outcome = classify_response(response, "OPTIONS", info)
    if outcome != Outcome.OK:
        return outcome, None
    return outcome, parse_allow(response.headers)


def caldav_iscaldav(client, settings, info) -> CallResult:
    response = client.options(settings.url)
    outcome = classify_response(response, "OPTIONS", info)
    if outcome != Outcome.OK:
        return outcome, False
    return outcome, "calendar-access" in parse_dav_header(response.headers)


def _target(settings: OperationSettings, info: RuntimeInfo) -> Optional[str]:
    """
    The URL a mutation goes to, or None when it cannot be known.  A
    collection is never the target of a mutation: without a UID in the
    object, nothing is sent.
    """
    target = object_url(settings.url, settings.file)
    if settings.action.is_mutation and target.is_collection():
        info.error = Diagnostic(
            code=-1,
            message="No UID in the calendar object, refusing to %s %s"
            % (settings.action.value, settings.url),
        )
        return None
    return str(target)


def caldav_add(client, settings, info) -> CallResult:
    target = _target(settings, info)
    if target is None:
        return Outcome.NOT_IMPLEMENTED, None

    def mutation(headers: Dict[str, str]) -> Outcome:
        ## refuse to overwrite an existing object.  Under a lock the
        ## LOCK itself may have created an empty resource at target.
        if "If" not in headers:
            headers = dict(headers, **{"If-None-Match": "*"})
        response = client.put(target, settings.file, headers)
        return classify_response(response, "PUT", info)

    return run_locked(client, target, settings, info, mutation), None


def caldav_modify(client, settings, info) -> CallResult:
    target = _target(settings, info)
    if target is None:
        return Outcome.NOT_IMPLEMENTED, None

    def mutation(headers: Dict[str, str]) -> Outcome:
        response = client.put(target, settings.file, headers)
        return classify_response(response, "PUT", info)

    return run_locked(client, target, settings, info, mutation), None


def caldav_delete(client, settings, info) -> CallResult:
    target = _target(settings, info)
    if target is None:
        return Outcome.NOT_IMPLEMENTED, None

    def mutation(headers: Dict[str, str]) -> Outcome:
        response = client.delete(target, headers)
        return classify_response(response, "DELETE", info)

    return run_locked(client, target, settings, info, mutation), None


ACTIONS: Dict[Action, Callable[..., CallResult]] = {
    Action.ADD: caldav_add,
    Action.ADDTASKS: caldav_add,
    Action.DELETE: caldav_delete,
    Action.DELETETASKS: caldav_delete,
    Action.MODIFY: caldav_modify,
    Action.MODIFYTASKS: caldav_modify,
    Action.GET: caldav_getrange,
    Action.GETTASKS: caldav_getrange,
    Action.GETALL: caldav_getall,
    Action.GETALLTASKS: caldav_getall,
    Action.FREEBUSY: caldav_freebusy,
    Action.GETCALNAME: caldav_getname,
    Action.ISCALDAV: caldav_iscaldav,
    Action.OPTIONS: caldav_options,
}


def make_caldav_call(settings: OperationSettings, info: RuntimeInfo) -> CallResult:
    """
    Run one action against the server.

    Returns:
        (Outcome, result) where result is the text, list or flag the
        action produces, or None when the outcome is not OK.  A
        transport failure gives Outcome.CONFLICT with a negative
        diagnostic code in info.error.
    """
    info.clear()
    handler = ACTIONS.get(settings.action)
    if handler is None:
        info.error = Diagnostic(code=-1, message="Unknown action %s" % settings.action.name)
        return Outcome.NOT_IMPLEMENTED, None

    log.debug("%s %s", settings.action.name, settings.url)
    try:
        with _client(settings) as client:
            return handler(client, settings, info)
    except error.TransportError as e:
        info.error = Diagnostic(code=e.code, message=e.reason)
        return Outcome.CONFLICT, None
