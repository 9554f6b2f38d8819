"""
Fetch-necessity rules for tracked resources.

A fetch is needed when either check says so:

- **state**: the resource is ``locationOnly`` or ``stale``, or it is
  ``hydrated`` and the caller asked for ``force_load``. A State with no
  status fails open (fetch).
- **headers**: the last response carried an ``Expires`` date that has
  passed, or one that cannot be parsed (``Expires: 0``). No other
  cache-control directive is interpreted; request-side caching is left to
  the transport.
"""

from __future__ import annotations

from datetime import datetime

from linkstate.core.logging import get_logger
from linkstate.core.timestamps import parse_http_date, utc_now
from linkstate.representation.options import ResourceOptions
from linkstate.representation.state import State
from linkstate.representation.status import FETCH_REQUIRED_STATUSES, Status

logger = get_logger(__name__)


def needs_fetch_from_state(state: State, options: ResourceOptions | None = None) -> bool:
    force_load = options.force_load if options else False

    if state.status is None:
        logger.warning("fetch.status_missing", uri=state.uri)
        return True

    fetch = state.status in FETCH_REQUIRED_STATUSES or (
        force_load and state.status is Status.HYDRATED
    )
    logger.debug(
        "fetch.required" if fetch else "fetch.not_required",
        uri=state.uri,
        status=state.status.value,
        force_load=force_load,
    )
    return fetch


def needs_fetch_from_headers(state: State, now: datetime | None = None) -> bool:
    expires = state.headers.get("expires")
    if not expires:
        return False
    expires_at = parse_http_date(expires)
    if expires_at is None:
        logger.debug("fetch.expires_unparseable", uri=state.uri, expires=expires)
        return True
    expired = (now or utc_now()) > expires_at
    if expired:
        logger.debug("fetch.expired", uri=state.uri, expires=expires)
    return expired


def needs_fetch(state: State, options: ResourceOptions | None = None) -> bool:
    return needs_fetch_from_state(state, options) or needs_fetch_from_headers(state)
