#!/usr/bin/env python
from typing import Any
from typing import Optional
from typing import Union
from urllib.parse import ParseResult
from urllib.parse import SplitResult
from urllib.parse import urljoin
from urllib.parse import urlparse

from libcaldav.lib.python_utilities import to_unicode

DEFAULT_PORTS = {"https": 443, "http": 80}


class URL:
    """
    A resource URL, ``[http://][username[:password]@]host[:port]/url-path``
    (RFC1738).  Used internally; every function taking a resource
    accepts a URL object, a string or a urlparse result.

    The parts of urlparse (scheme, path, username, port, ...) are
    available as attributes.  The credentials, if any, are picked up by
    the DAVClient and stripped with unauth() before anything goes on the
    wire.
    """

    def __init__(self, url: Union[str, ParseResult, SplitResult]) -> None:
        if isinstance(url, (ParseResult, SplitResult)):
            url = url.geturl()
        self.url_raw: str = to_unicode(url) or ""
        self.url_parsed: ParseResult = urlparse(self.url_raw)

    @classmethod
    def objectify(cls, url: Union["URL", str, ParseResult, SplitResult, None]) -> Optional["URL"]:
        """A URL object for whatever is given, None stays None"""
        if url is None or isinstance(url, URL):
            return url
        return cls(url)

    def __getattr__(self, attr: str) -> Any:
        ## only reached for names not set in __init__
        parts = self.__dict__.get("url_parsed")
        if parts is None or attr.startswith("_"):
            raise AttributeError(attr)
        return getattr(parts, attr)

    def __bool__(self) -> bool:
        return bool(self.url_raw)

    def __str__(self) -> str:
        return self.url_raw

    def __repr__(self) -> str:
        return "URL(%s)" % self.url_raw

    def is_auth(self) -> bool:
        return self.username is not None

    def is_collection(self) -> bool:
        return self.path.endswith("/")

    def unauth(self) -> "URL":
        """The same URL without credentials, and with an explicit port"""
        if not self.is_auth():
            return self
        netloc = "%s:%s" % (self.hostname, self.port or DEFAULT_PORTS[self.scheme])
        return URL(self.url_parsed._replace(netloc=netloc, path=self.path.replace("//", "/")))

    def join(self, path: Any) -> "URL":
        """
        Take this URL as the base.  A relative path is appended to our
        path, an absolute one replaces it; either way the connection
        details are ours.  A full URL pointing to another server is an
        error.
        """
        if not path or not str(path):
            return self
        other = URL.objectify(path)
        for part in ("scheme", "hostname", "port"):
            mine, theirs = getattr(self, part), getattr(other, part)
            if mine and theirs and mine != theirs:
                raise ValueError("%s can't be joined with %s" % (self, other))

        if not other.path:
            new_path = self.path
        elif other.path.startswith("/"):
            new_path = other.path
        elif self.path.endswith("/"):
            new_path = self.path + other.path
        else:
            new_path = self.path + "/" + other.path
        return URL(
            ParseResult(
                self.scheme or other.scheme,
                self.netloc or other.netloc,
                new_path,
                other.params,
                other.query,
                other.fragment,
            )
        )

    def follow(self, location: str) -> "URL":
        """
        Resolve a Location header relative to this URL, the way a
        browser would.  Used when following redirects.
        """
        return URL(urljoin(str(self), location))
