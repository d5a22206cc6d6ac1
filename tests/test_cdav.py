import datetime

import pytz
import tzlocal
from lxml import etree

from libcaldav.elements import cdav
from libcaldav.elements import dav
from libcaldav.elements.cdav import _to_utc_date_string
from libcaldav.elements.cdav import CalendarQuery

SOMEWHERE_REMOTE = pytz.timezone("Brazil/DeNoronha")  # UTC-2 and no DST


def test_element():
    cq = CalendarQuery()
    assert str(cq).startswith("<?xml")
    assert not "xml" in repr(cq)
    assert "CalendarQuery" in repr(cq)
    assert "calendar-query" in str(cq)


def test_element_composition():
    query = CalendarQuery() + [dav.Prop() + cdav.CalendarData()]
    root = query.xmlelement()
    assert root.tag == "{urn:ietf:params:xml:ns:caldav}calendar-query"
    assert root[0].tag == "{DAV:}prop"
    assert root[0][0].tag == "{urn:ietf:params:xml:ns:caldav}calendar-data"
    assert root.nsmap == {"D": "DAV:", "C": "urn:ietf:params:xml:ns:caldav"}


def test_comp_filter_needs_a_name():
    try:
        cdav.CompFilter().xmlelement()
    except ValueError:
        pass
    else:
        assert False, "a nameless comp-filter should not serialize"


def test_time_range():
    tr = cdav.TimeRange(
        datetime.datetime(2026, 10, 1, tzinfo=datetime.timezone.utc),
        datetime.datetime(2026, 10, 31, 23, 59, 59, tzinfo=datetime.timezone.utc),
    )
    elem = tr.xmlelement()
    assert elem.get("start") == "20261001T000000Z"
    assert elem.get("end") == "20261031T235959Z"


def test_owner_value():
    elem = dav.Owner("someone").xmlelement()
    assert etree.QName(elem).localname == "owner"
    assert elem.text == "someone"


def test_to_utc_date_string_date():
    input = datetime.date(2019, 5, 14)
    res = _to_utc_date_string(input)
    assert res == "20190514T000000Z"


def test_to_utc_date_string_timestamp():
    assert _to_utc_date_string(0) == "19700101T000000Z"
    assert _to_utc_date_string(1557868223) == "20190514T211023Z"
    assert _to_utc_date_string(1557868223.9) == "20190514T211023Z"


def test_to_utc_date_string_utc():
    input = datetime.datetime(2019, 5, 14, 21, 10, 23, 23, tzinfo=datetime.timezone.utc)
    res = _to_utc_date_string(input.astimezone())
    assert res == "20190514T211023Z"


def test_to_utc_date_string_dt_with_pytz_tzinfo():
    input = datetime.datetime(2019, 5, 14, 21, 10, 23, 23)
    res = _to_utc_date_string(SOMEWHERE_REMOTE.localize(input))
    assert res == "20190514T231023Z"


def test_to_utc_date_string_naive_dt():
    input = datetime.datetime(2019, 5, 14, 21, 10, 23, 23)
    res = _to_utc_date_string(input)
    exp_dt = datetime.datetime(
        2019, 5, 14, 21, 10, 23, 23, tzinfo=tzlocal.get_localzone()
    ).astimezone(datetime.timezone.utc)
    exp = exp_dt.strftime("%Y%m%dT%H%M%SZ")
    assert res == exp
