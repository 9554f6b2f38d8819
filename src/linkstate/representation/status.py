"""Resource status - the per-resource lifecycle state machine.

Valid transition graph::

    (new)            → LOCATION_ONLY | VIRTUAL | UNKNOWN | HYDRATED
    LOCATION_ONLY    → HYDRATED | DELETE_IN_PROGRESS | <failure>
    UNKNOWN          → HYDRATED | DELETE_IN_PROGRESS | <failure>
    STALE            → HYDRATED | DELETE_IN_PROGRESS | <failure>
    HYDRATED         → HYDRATED | STALE | DELETE_IN_PROGRESS | <failure>
    DELETE_IN_PROGRESS → DELETED | <failure>
    FORBIDDEN        → HYDRATED (explicit update) | <failure>
    VIRTUAL          → (client-side only)
    DELETED          → (terminal)

    <failure> = FORBIDDEN | DELETED | UNKNOWN

The engine drives the machine; the table documents it. A move outside the
table is logged, not blocked.
"""

from __future__ import annotations

from enum import Enum

from linkstate.core.errors import InvalidStatusError


class Status(str, Enum):
    """Lifecycle of a tracked resource."""

    VIRTUAL = "virtual"  # No server address; client-side only
    LOCATION_ONLY = "locationOnly"  # URI known, not yet fetched
    UNKNOWN = "unknown"  # Present but of unknown freshness (or last fetch failed)
    HYDRATED = "hydrated"  # Reflects the last successful fetch
    STALE = "stale"  # Evicted from its owning collection
    FORBIDDEN = "forbidden"  # Server answered 403
    DELETED = "deleted"  # Server answered 404, or delete succeeded
    DELETE_IN_PROGRESS = "deleteInProgress"  # Delete in flight

    @classmethod
    def parse(cls, value: str | Status) -> Status:
        """Convert a wire/config value into a Status."""
        if isinstance(value, Status):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidStatusError(value) from e


# Never fetched or deleted again automatically
GUARDED_STATUSES: frozenset[Status] = frozenset({
    Status.VIRTUAL,
    Status.DELETED,
    Status.DELETE_IN_PROGRESS,
    Status.FORBIDDEN,
})

# Statuses that always require a fetch on load
FETCH_REQUIRED_STATUSES: frozenset[Status] = frozenset({
    Status.LOCATION_ONLY,
    Status.STALE,
})

INITIAL_STATUSES: frozenset[Status] = frozenset({
    Status.LOCATION_ONLY,
    Status.VIRTUAL,
    Status.UNKNOWN,
    Status.HYDRATED,
})

_FAILURE: frozenset[Status] = frozenset({
    Status.FORBIDDEN,
    Status.DELETED,
    Status.UNKNOWN,
})

STATUS_VALID_TRANSITIONS: dict[Status, frozenset[Status]] = {
    Status.LOCATION_ONLY: _FAILURE | {Status.HYDRATED, Status.DELETE_IN_PROGRESS},
    Status.UNKNOWN: _FAILURE | {Status.HYDRATED, Status.DELETE_IN_PROGRESS},
    Status.STALE: _FAILURE | {Status.HYDRATED, Status.DELETE_IN_PROGRESS},
    Status.HYDRATED: _FAILURE | {
        Status.HYDRATED,
        Status.STALE,
        Status.DELETE_IN_PROGRESS,
    },
    Status.DELETE_IN_PROGRESS: _FAILURE,
    Status.FORBIDDEN: _FAILURE | {Status.HYDRATED},
    Status.VIRTUAL: frozenset(),
    Status.DELETED: frozenset(),
}


def is_valid_transition(current: Status | None, target: Status) -> bool:
    """Whether *current → target* is part of the lifecycle graph."""
    if current is None:
        return target in INITIAL_STATUSES
    return target in STATUS_VALID_TRANSITIONS.get(current, frozenset())
