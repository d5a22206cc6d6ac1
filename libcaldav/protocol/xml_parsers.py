"""
Pure functions for parsing CalDAV responses.

All functions in this module are pure - they take response bytes and
headers in and return structured data out, with no side effects or I/O.
None of them raise on malformed server data; a broken entry is logged
and skipped.
"""
import logging
from typing import Iterator
from typing import List
from typing import Mapping
from typing import Optional
from typing import Union
from urllib.parse import unquote

from lxml import etree
from lxml.etree import _Element

from libcaldav.elements import dav
from libcaldav.lib import error
from libcaldav.lib.url import URL

log = logging.getLogger(__name__)


def _parse_xml(body: Union[bytes, str, None], huge_tree: bool = False) -> Optional[_Element]:
    if not body:
        return None
    if isinstance(body, str):
        body = body.encode("utf-8")
    try:
        return etree.fromstring(
            body, parser=etree.XMLParser(remove_blank_text=True, huge_tree=huge_tree)
        )
    except etree.XMLSyntaxError:
        error.weirdness("Expected some valid XML from the server", body[:500])
        return None


def _strip_to_multistatus(tree: _Element) -> Union[_Element, List[_Element]]:
    """
    The general format of inbound data is something like this:

    <xml><multistatus>
        <response>(...)</response>
        <response>(...)</response>
        (...)
    </multistatus></xml>

    but sometimes the multistatus and/or xml element is missing.  Return
    the element right above the responses, or the lone response wrapped
    in a list.
    """
    if tree.tag == "xml" and len(tree) and tree[0].tag == dav.MultiStatus.tag:
        return tree[0]
    if tree.tag == dav.MultiStatus.tag:
        return tree
    return [tree]


def _localname(elem: _Element) -> Optional[str]:
    if not isinstance(elem.tag, str):
        ## comments and processing instructions
        return None
    return etree.QName(elem).localname


def _iter_responses(tree: _Element) -> Iterator[_Element]:
    for elem in _strip_to_multistatus(tree):
        if elem.tag == dav.Response.tag:
            yield elem


def _status_ok(status: Optional[str]) -> bool:
    """
    A missing status is taken as success.  The reason phrase after the
    code may be empty, ``HTTP/1.1 200`` is fine.
    """
    if not status:
        return True
    words = status.split()
    return len(words) >= 2 and words[1] in ("200", "207")


def _find_prop(response: _Element, propname: str) -> Optional[_Element]:
    """Find a property by local name in the successful propstats of a response"""
    for propstat in response.iterfind(dav.PropStat.tag):
        if not _status_ok(propstat.findtext(dav.Status.tag)):
            continue
        for prop in propstat.iterfind(dav.Prop.tag):
            for theprop in prop:
                if _localname(theprop) == propname:
                    return theprop
    return None


def extract_report(
    body: Union[bytes, str, None],
    propname: str = "calendar-data",
    marker: str = "VEVENT",
    huge_tree: bool = False,
) -> str:
    """
    Collect the calendar objects of a multistatus REPORT response.

    For every response entry whose ``propname`` property contains
    ``marker`` (VEVENT or VTODO), the text of the property is appended
    to the result, in document order.  Entries missing the property or
    with an empty one are skipped.

    An empty string is returned when nothing matched; this is also what
    a document where every entry is broken gives.

    Args:
        body: Raw multistatus XML
        propname: local name of the property holding the data
        marker: component marker to look for
        huge_tree: Allow parsing very large XML documents

    Returns:
        The concatenated property texts
    """
    tree = _parse_xml(body, huge_tree=huge_tree)
    if tree is None:
        return ""

    found = []
    for response in _iter_responses(tree):
        prop = _find_prop(response, propname)
        if prop is None or not prop.text:
            log.debug("skipping response entry without %s", propname)
            continue
        if marker in prop.text:
            found.append(prop.text)
    return "".join(found)


def _same_path(href: str, url: Union[str, URL]) -> bool:
    path = unquote(URL.objectify(href).path).rstrip("/")
    other = unquote(URL.objectify(url).path).rstrip("/")
    return path == other


def parse_displayname(
    body: Union[bytes, str, None], url: Union[str, URL, None] = None
) -> Optional[str]:
    """
    Find the DAV:displayname in a PROPFIND response.

    With Depth 1 the server also reports the members of the collection;
    the entry whose href matches ``url`` is preferred, else the first
    display name found is used.
    """
    tree = _parse_xml(body)
    if tree is None:
        return None

    first = None
    for response in _iter_responses(tree):
        prop = _find_prop(response, "displayname")
        if prop is None or prop.text is None:
            continue
        href = response.findtext(dav.Href.tag)
        if url is not None and href and _same_path(href, url):
            return prop.text
        if first is None:
            first = prop.text
    return first


def parse_lock_token(
    headers: Mapping[str, str], body: Union[bytes, str, None] = None
) -> Optional[str]:
    """
    Find the lock token handed out by a successful LOCK.  RFC4918 puts
    it in the Lock-Token header (as a Coded-URL, ``<token>``) and in the
    lockdiscovery property of the response body.
    """
    token = headers.get("Lock-Token")
    if token:
        return token.strip().strip("<>")
    tree = _parse_xml(body)
    if tree is None:
        return None
    href = tree.find(".//%s/%s" % (dav.LockToken.tag, dav.Href.tag))
    if href is not None and href.text:
        return href.text.strip()
    return None


def _header_list(headers: Mapping[str, str], name: str) -> List[str]:
    value = headers.get(name) or ""
    return [x.strip() for x in value.split(",") if x.strip()]


def parse_allow(headers: Mapping[str, str]) -> List[str]:
    """The methods listed in the Allow header of an OPTIONS response"""
    return [x.upper() for x in _header_list(headers, "Allow")]


def parse_dav_header(headers: Mapping[str, str]) -> List[str]:
    """The compliance classes listed in the DAV header of an OPTIONS response"""
    return _header_list(headers, "DAV")
