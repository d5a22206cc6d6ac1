"""
WebDAV locking around mutating calls.

When locking is enabled, a mutation is bracketed by LOCK and UNLOCK
against the resource being changed, so that two clients cannot silently
overwrite each other's changes.  The lock is a server side lock; it
serializes remote clients, not threads within this process.

The lock is always released before the call returns, whatever happened
to the mutation in between.
"""
import logging
from contextlib import contextmanager
from typing import Callable
from typing import Dict
from typing import Iterator
from typing import Optional

from libcaldav.davclient import DAVClient
from libcaldav.lib import error
from libcaldav.protocol.classify import classify
from libcaldav.protocol.classify import diagnose
from libcaldav.protocol.types import Diagnostic
from libcaldav.protocol.types import OperationSettings
from libcaldav.protocol.types import Outcome
from libcaldav.protocol.types import RuntimeInfo
from libcaldav.protocol.xml_builders import build_lockinfo_body
from libcaldav.protocol.xml_parsers import parse_lock_token

log = logging.getLogger(__name__)

LOCK_TIMEOUT = 300


def acquire_lock(
    client: DAVClient, url: str, timeout: int = LOCK_TIMEOUT, owner: Optional[str] = None
) -> str:
    """
    Take an exclusive write lock on url and return the lock token.

    Raises:
        LockError: the server did not hand out a lock
    """
    try:
        response = client.lock(url, build_lockinfo_body(owner), timeout=timeout)
    except error.TransportError as e:
        raise error.LockError(url=e.url, reason=e.reason, code=e.code) from e

    if classify(response.status, "LOCK") != Outcome.OK:
        raise error.LockError(
            url=url,
            reason=diagnose(response.status, response.reason, response.headers).message,
            code=response.status,
        )
    token = parse_lock_token(response.headers, response.content)
    if not token:
        error.weirdness("LOCK succeeded but no lock token was given", response.raw)
        raise error.LockError(
            url=url, reason="no lock token in LOCK response", code=response.status
        )
    log.debug("locked %s with token %s", url, token)
    return token


def release_lock(client: DAVClient, url: str, token: str) -> None:
    """
    Release a lock.  Failures are logged and otherwise ignored; the
    server will expire the lock when its timeout runs out.
    """
    try:
        response = client.unlock(url, token)
    except error.TransportError as e:
        log.warning("UNLOCK of %s failed: %s", url, e.reason)
        return
    if classify(response.status, "UNLOCK") != Outcome.OK:
        log.warning(
            "UNLOCK of %s failed with %s %s", url, response.status, response.reason
        )
    else:
        log.debug("unlocked %s", url)


@contextmanager
def lock_resource(
    client: DAVClient, url: str, timeout: int = LOCK_TIMEOUT, owner: Optional[str] = None
) -> Iterator[str]:
    """
    Hold a lock on url for the duration of the with-block::

        with lock_resource(client, url) as token:
            client.put(url, data, {"If": "(<%s>)" % token})

    The lock is released however the block is left.
    """
    token = acquire_lock(client, url, timeout=timeout, owner=owner)
    try:
        yield token
    finally:
        release_lock(client, url, token)


def if_header(token: str) -> Dict[str, str]:
    """The If header submitting a lock token with a request (RFC4918 10.4)"""
    return {"If": "(<%s>)" % token}


def run_locked(
    client: DAVClient,
    url: str,
    settings: OperationSettings,
    info: RuntimeInfo,
    mutation: Callable[[Dict[str, str]], Outcome],
) -> Outcome:
    """
    Run mutation, under a lock if settings.use_locking is set.

    mutation is called with the extra headers to send with the request
    and returns the Outcome of the exchange.  Without locking this is a
    plain call.  With locking, a failed LOCK gives Outcome.LOCKED and
    the mutation is never attempted.
    """
    if not settings.use_locking:
        return mutation({})

    try:
        with lock_resource(client, url) as token:
            return mutation(if_header(token))
    except error.LockError as e:
        info.error = Diagnostic(code=e.code, message=e.reason)
        log.debug("could not lock %s: %s", url, e.reason)
        return Outcome.LOCKED
