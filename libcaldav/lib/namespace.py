#!/usr/bin/env python
from typing import Dict

## Prefixes used in every request document we send
nsmap: Dict[str, str] = {
    "D": "DAV:",
    "C": "urn:ietf:params:xml:ns:caldav",
}


def ns(prefix: str, tag: str = "") -> str:
    """Clark notation for a tag, ``ns("D", "href") == "{DAV:}href"``"""
    return "{%s}%s" % (nsmap[prefix], tag)
