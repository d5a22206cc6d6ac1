"""
Tests for the I/O-free parts: request builders, status classifier and
response parsers.  No HTTP requests are made.
"""
from datetime import datetime
from datetime import timezone

import pytest
from lxml import etree

from libcaldav.protocol import Component
from libcaldav.protocol import Diagnostic
from libcaldav.protocol import Outcome
from libcaldav.protocol import RuntimeInfo
from libcaldav.protocol import build_displayname_body
from libcaldav.protocol import build_freebusy_body
from libcaldav.protocol import build_getall_body
from libcaldav.protocol import build_lockinfo_body
from libcaldav.protocol import build_range_body
from libcaldav.protocol import classify
from libcaldav.protocol import classify_response
from libcaldav.protocol import diagnose
from libcaldav.protocol import extract_report
from libcaldav.protocol import parse_allow
from libcaldav.protocol import parse_dav_header
from libcaldav.protocol import parse_displayname
from libcaldav.protocol import parse_lock_token

C = "{urn:ietf:params:xml:ns:caldav}"
D = "{DAV:}"

ev1 = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Example Corp.//CalDAV Client//EN
BEGIN:VEVENT
UID:20010712T182145Z-123401@example.com
DTSTAMP:20060712T182145Z
DTSTART:20060714T170000Z
DTEND:20060715T040000Z
SUMMARY:Bastille Day Party
END:VEVENT
END:VCALENDAR
"""

ev2 = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Example Corp.//CalDAV Client//EN
BEGIN:VEVENT
UID:20010712T182145Z-123402@example.com
DTSTAMP:20060712T182145Z
DTSTART:20060716T170000Z
DTEND:20060716T180000Z
SUMMARY:Hangover
END:VEVENT
END:VCALENDAR
"""

todo = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Example Corp.//CalDAV Client//EN
BEGIN:VTODO
UID:20070313T123432Z-456553@example.com
DTSTAMP:20070313T123432Z
DUE;VALUE=DATE:20070501
SUMMARY:Submit Quebec Income Tax Return for 2006
STATUS:NEEDS-ACTION
END:VTODO
END:VCALENDAR
"""


def multistatus(*responses):
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<D:multistatus xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:caldav">'
        + "".join(responses)
        + "</D:multistatus>"
    ).encode("utf-8")


def calendar_data_response(href, data, status="HTTP/1.1 200 OK"):
    return (
        "<D:response><D:href>%s</D:href><D:propstat><D:prop>"
        '<D:getetag>"1"</D:getetag><C:calendar-data>%s</C:calendar-data>'
        "</D:prop><D:status>%s</D:status></D:propstat></D:response>"
    ) % (href, data, status)


class TestRequestBuilder:
    def test_getall_is_deterministic(self):
        assert build_getall_body(Component.EVENT) == build_getall_body(Component.EVENT)
        assert build_getall_body(Component.TODO) == build_getall_body(Component.TODO)

    def test_getall_task_differs_only_in_component(self):
        event = build_getall_body(Component.EVENT)
        task = build_getall_body(Component.TODO)
        assert event != task
        assert event.replace(b"VEVENT", b"VTODO") == task

    def test_getall_structure(self):
        body = build_getall_body(Component.EVENT)
        assert body.startswith(b"<?xml version='1.0' encoding='utf-8'?>")
        root = etree.fromstring(body)
        assert root.tag == C + "calendar-query"
        assert root.nsmap["D"] == "DAV:"
        assert root.nsmap["C"] == "urn:ietf:params:xml:ns:caldav"
        prop = root.find(D + "prop")
        assert [x.tag for x in prop] == [D + "getetag", C + "calendar-data"]
        outer = root.find(C + "filter").find(C + "comp-filter")
        assert outer.get("name") == "VCALENDAR"
        inner = outer.find(C + "comp-filter")
        assert inner.get("name") == "VEVENT"
        assert len(inner) == 0

    def test_range_round_trip(self):
        t0 = datetime(2026, 10, 1, 8, 30, tzinfo=timezone.utc)
        t1 = datetime(2026, 10, 8, 17, 45, 12, tzinfo=timezone.utc)
        root = etree.fromstring(build_range_body(Component.EVENT, t0, t1))
        time_range = root.find(".//%stime-range" % C)
        assert time_range.get("start") == t0.strftime("%Y%m%dT%H%M%SZ")
        assert time_range.get("end") == t1.strftime("%Y%m%dT%H%M%SZ")
        assert time_range.getparent().get("name") == "VEVENT"

    def test_range_is_getall_plus_time_range(self):
        body = build_range_body(Component.TODO, 0, 3600)
        root = etree.fromstring(body)
        root.find(".//%stime-range" % C).getparent().remove(
            root.find(".//%stime-range" % C)
        )
        assert etree.tostring(root) == etree.tostring(
            etree.fromstring(build_getall_body(Component.TODO))
        )

    def test_range_with_posix_timestamps(self):
        root = etree.fromstring(build_range_body(Component.TODO, 0, 86400))
        time_range = root.find(".//%stime-range" % C)
        assert time_range.get("start") == "19700101T000000Z"
        assert time_range.get("end") == "19700102T000000Z"

    def test_inverted_range_is_passed_through(self):
        t0 = datetime(2026, 12, 1, tzinfo=timezone.utc)
        t1 = datetime(2026, 1, 1, tzinfo=timezone.utc)
        root = etree.fromstring(build_range_body(Component.EVENT, t0, t1))
        time_range = root.find(".//%stime-range" % C)
        assert time_range.get("start") == "20261201T000000Z"
        assert time_range.get("end") == "20260101T000000Z"

    def test_freebusy(self):
        root = etree.fromstring(build_freebusy_body(0, 3600))
        assert root.tag == C + "free-busy-query"
        assert root[0].tag == C + "time-range"
        assert root[0].get("end") == "19700101T010000Z"

    def test_displayname(self):
        root = etree.fromstring(build_displayname_body())
        assert root.tag == D + "propfind"
        assert root[0][0].tag == D + "displayname"

    def test_lockinfo(self):
        root = etree.fromstring(build_lockinfo_body())
        assert root.tag == D + "lockinfo"
        assert root.find("%slockscope/%sexclusive" % (D, D)) is not None
        assert root.find("%slocktype/%swrite" % (D, D)) is not None
        assert root.find(D + "owner") is None
        root = etree.fromstring(build_lockinfo_body("libcaldav"))
        assert root.find(D + "owner").text == "libcaldav"


class TestClassifier:
    @pytest.mark.parametrize(
        "status,outcome",
        [
            (200, Outcome.OK),
            (207, Outcome.OK),
            (403, Outcome.FORBIDDEN),
            (409, Outcome.CONFLICT),
            (423, Outcome.LOCKED),
            (201, Outcome.NOT_IMPLEMENTED),
            (204, Outcome.NOT_IMPLEMENTED),
            (400, Outcome.NOT_IMPLEMENTED),
            (401, Outcome.NOT_IMPLEMENTED),
            (404, Outcome.NOT_IMPLEMENTED),
            (412, Outcome.NOT_IMPLEMENTED),
            (500, Outcome.NOT_IMPLEMENTED),
            (501, Outcome.NOT_IMPLEMENTED),
        ],
    )
    def test_status_table(self, status, outcome):
        assert classify(status) == outcome

    def test_total(self):
        for status in range(100, 600):
            assert classify(status) in Outcome

    def test_method_success_codes(self):
        assert classify(201, "PUT") == Outcome.OK
        assert classify(204, "put") == Outcome.OK
        assert classify(204, "DELETE") == Outcome.OK
        assert classify(204, "UNLOCK") == Outcome.OK
        assert classify(201, "LOCK") == Outcome.OK
        assert classify(201, "UNLOCK") == Outcome.NOT_IMPLEMENTED
        assert classify(201, "REPORT") == Outcome.NOT_IMPLEMENTED
        assert classify(409, "PUT") == Outcome.CONFLICT

    def test_diagnose(self):
        diag = diagnose(409, "Conflict", {"Content-Length": "0"})
        assert diag.code == 409
        assert diag.message.startswith("HTTP/1.1 409 Conflict\r\n")
        assert "Content-Length: 0" in diag.message

    def test_diagnose_fallback(self):
        assert diagnose(500) == Diagnostic(500, "Server returned HTTP status 500")

    def test_classify_response(self):
        class FakeResponse:
            status = 423
            reason = "Locked"
            headers = {}

        info = RuntimeInfo()
        assert classify_response(FakeResponse(), "PUT", info) == Outcome.LOCKED
        assert info.error.code == 423
        FakeResponse.status = 201
        assert classify_response(FakeResponse(), "PUT", info) == Outcome.OK
        assert info.error is None

    def test_diagnostic_code_matches_status(self):
        class FakeResponse:
            reason = ""
            headers = {}

        for status in (403, 409, 423, 404, 500):
            FakeResponse.status = status
            info = RuntimeInfo()
            outcome = classify_response(FakeResponse(), "REPORT", info)
            assert outcome != Outcome.OK
            assert info.error.code == status


class TestReportExtractor:
    def test_selectivity(self):
        body = multistatus(
            calendar_data_response("/cal/ev1.ics", ev1),
            calendar_data_response("/cal/todo.ics", todo),
        )
        assert extract_report(body, "calendar-data", "VEVENT") == ev1
        assert extract_report(body, "calendar-data", "VTODO") == todo

    def test_document_order(self):
        body = multistatus(
            calendar_data_response("/cal/ev2.ics", ev2),
            calendar_data_response("/cal/todo.ics", todo),
            calendar_data_response("/cal/ev1.ics", ev1),
        )
        assert extract_report(body, "calendar-data", "VEVENT") == ev2 + ev1

    def test_no_match(self):
        body = multistatus(calendar_data_response("/cal/todo.ics", todo))
        assert extract_report(body, "calendar-data", "VEVENT") == ""
        assert extract_report(multistatus(), "calendar-data", "VEVENT") == ""

    def test_malformed_entries_are_skipped(self):
        body = multistatus(
            ## no calendar-data at all
            "<D:response><D:href>/cal/a.ics</D:href><D:propstat><D:prop>"
            "<D:getetag>1</D:getetag></D:prop>"
            "<D:status>HTTP/1.1 200 OK</D:status></D:propstat></D:response>",
            ## empty calendar-data
            calendar_data_response("/cal/b.ics", ""),
            ## calendar-data reported missing
            calendar_data_response("/cal/c.ics", ev2, "HTTP/1.1 404 Not Found"),
            ## no propstat
            "<D:response><D:href>/cal/d.ics</D:href></D:response>",
            calendar_data_response("/cal/ev1.ics", ev1),
        )
        assert extract_report(body, "calendar-data", "VEVENT") == ev1

    def test_status_without_reason_phrase(self):
        body = multistatus(
            calendar_data_response("/cal/ev1.ics", ev1, "HTTP/1.1 200"),
            calendar_data_response("/cal/ev2.ics", ev2, "HTTP/1.1 207"),
        )
        assert extract_report(body, "calendar-data", "VEVENT") == ev1 + ev2

    def test_unreadable_status_is_skipped(self):
        body = multistatus(
            calendar_data_response("/cal/ev2.ics", ev2, "garbage"),
            calendar_data_response("/cal/todo.ics", todo, "HTTP/1.1 2000 OK"),
            calendar_data_response("/cal/ev1.ics", ev1, "HTTP/1.1 200 OK"),
        )
        assert extract_report(body, "calendar-data", "VEVENT") == ev1
        assert extract_report(body, "calendar-data", "VTODO") == ""
    def test_unparsable_body(self):
        assert extract_report(b"this is not XML", "calendar-data", "VEVENT") == ""
        assert extract_report(b"", "calendar-data", "VEVENT") == ""
        assert extract_report(None, "calendar-data", "VEVENT") == ""

    def test_other_prefixes(self):
        body = (
            '<multistatus xmlns="DAV:" xmlns:cal="urn:ietf:params:xml:ns:caldav">'
            "<response><href>/cal/ev1.ics</href><propstat><prop>"
            "<cal:calendar-data>%s</cal:calendar-data></prop>"
            "<status>HTTP/1.1 200 OK</status></propstat></response></multistatus>"
        ) % ev1
        assert extract_report(body, "calendar-data", "VEVENT") == ev1

    def test_single_response_without_multistatus(self):
        body = (
            '<D:response xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:caldav">'
            "<D:href>/cal/ev1.ics</D:href><D:propstat><D:prop>"
            "<C:calendar-data>%s</C:calendar-data></D:prop></D:propstat>"
            "</D:response>"
        ) % ev1
        assert extract_report(body, "calendar-data", "VEVENT") == ev1


class TestParsers:
    def test_displayname(self):
        body = multistatus(
            "<D:response><D:href>/dav/work/</D:href><D:propstat><D:prop>"
            "<D:displayname>Work</D:displayname></D:prop>"
            "<D:status>HTTP/1.1 200 OK</D:status></D:propstat></D:response>",
        )
        assert parse_displayname(body) == "Work"

    def test_displayname_prefers_requested_resource(self):
        body = multistatus(
            "<D:response><D:href>/dav/work/ev1.ics</D:href><D:propstat><D:prop>"
            "<D:displayname>Some event</D:displayname></D:prop>"
            "<D:status>HTTP/1.1 200 OK</D:status></D:propstat></D:response>",
            "<D:response><D:href>/dav/work/</D:href><D:propstat><D:prop>"
            "<D:displayname>Work</D:displayname></D:prop>"
            "<D:status>HTTP/1.1 200 OK</D:status></D:propstat></D:response>",
        )
        assert parse_displayname(body, "https://calendar.example/dav/work") == "Work"
        assert parse_displayname(body) == "Some event"

    def test_displayname_missing(self):
        body = multistatus(
            "<D:response><D:href>/dav/work/</D:href><D:propstat><D:prop>"
            "<D:displayname/></D:prop>"
            "<D:status>HTTP/1.1 404 Not Found</D:status></D:propstat></D:response>",
        )
        assert parse_displayname(body) is None
        assert parse_displayname(b"") is None

    def test_lock_token_from_header(self):
        headers = {"Lock-Token": "<opaquelocktoken:e71d4fae-5dec-22d6-fea5-00a0c91e6be4>"}
        assert (
            parse_lock_token(headers)
            == "opaquelocktoken:e71d4fae-5dec-22d6-fea5-00a0c91e6be4"
        )

    def test_lock_token_from_body(self):
        body = (
            b'<?xml version="1.0" encoding="utf-8"?>'
            b'<D:prop xmlns:D="DAV:"><D:lockdiscovery><D:activelock>'
            b"<D:locktype><D:write/></D:locktype>"
            b"<D:lockscope><D:exclusive/></D:lockscope>"
            b"<D:locktoken><D:href>urn:uuid:e71d4fae-5dec</D:href></D:locktoken>"
            b"</D:activelock></D:lockdiscovery></D:prop>"
        )
        assert parse_lock_token({}, body) == "urn:uuid:e71d4fae-5dec"
        assert parse_lock_token({}, b"") is None

    def test_allow(self):
        headers = {"Allow": "OPTIONS, GET, HEAD, PUT, delete, REPORT,LOCK"}
        assert parse_allow(headers) == [
            "OPTIONS",
            "GET",
            "HEAD",
            "PUT",
            "DELETE",
            "REPORT",
            "LOCK",
        ]
        assert parse_allow({}) == []

    def test_dav_header(self):
        headers = {"DAV": "1, 2, 3, access-control, calendar-access"}
        assert "calendar-access" in parse_dav_header(headers)
