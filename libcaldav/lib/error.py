#!/usr/bin/env python
import logging
import os
from typing import Optional

from libcaldav import __version__

## Environmental variables prepended with "PYTHON_LIBCALDAV" are used for debug purposes,
## environmental variables prepended with "CALDAV_" are for runtime options
## one of DEBUG_PDB, DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_LIBCALDAV_DEBUGMODE")
if not debugmode:
    if "dev" in __version__ or __version__ == "(unknown)":
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("libcaldav")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def weirdness(*reasons):
    from libcaldav.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")
    if debugmode == "DEBUG_PDB":
        log.error(f"Dropping into debugger due to {reason}")
        import pdb

        pdb.set_trace()


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"
    code: int = 0

    def __init__(
        self,
        url: Optional[str] = None,
        reason: Optional[str] = None,
        code: Optional[int] = None,
    ) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class TransportError(DAVError):
    """
    The request never got a response from the server: connection
    refused, DNS lookup failure, TLS handshake failure, timeout or too
    many redirects.  The code is always negative.
    """

    code: int = -1


class LockError(DAVError):
    """
    The server refused to hand out a lock.  The code property holds the
    HTTP status of the LOCK response, or -1 if the LOCK request did not
    reach the server.
    """

    pass
