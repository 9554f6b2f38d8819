"""
Per-resource state and the store that owns it.

A :class:`State` record holds the lifecycle status of one tracked resource
together with the across-the-wire metadata needed to decide whether it must
be fetched again: the last response headers and when it was retrieved. It
also names the attributes of the resource that hold tracked child resources.

The :class:`StateStore` is the explicit association between a resource
object and its State. Resources are referenced weakly and by identity, so
a State record lives exactly as long as the resource object it describes;
dropping a resource from a collection never destroys its state.

Example:
    >>> store = StateStore()
    >>> resource = LinkedResource(links=[Link(rel="self", href="https://api.example.com/a")])
    >>> store.track(resource, Status.LOCATION_ONLY).status
    <Status.LOCATION_ONLY: 'locationOnly'>
    >>> store.get(resource).transition(Status.HYDRATED)
    >>> store.get(resource).previous_status
    <Status.LOCATION_ONLY: 'locationOnly'>
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from weakref import WeakKeyDictionary

from linkstate.core.errors import UntrackedResourceError
from linkstate.core.logging import get_logger
from linkstate.core.timestamps import utc_now
from linkstate.representation.links import canonical_uri
from linkstate.representation.model import LinkedResource
from linkstate.representation.status import GUARDED_STATUSES, Status, is_valid_transition

logger = get_logger(__name__)


@dataclass(eq=False)
class State:
    """Lifecycle status and wire metadata of one tracked resource."""

    status: Status | None
    previous_status: Status | None = None
    headers: dict[str, str] = field(default_factory=dict)
    retrieved: datetime | None = None

    # Attribute names holding tracked child singletons / collections
    singleton: set[str] = field(default_factory=set)
    collection: set[str] = field(default_factory=set)

    # For log lines only
    uri: str | None = None

    @property
    def is_guarded(self) -> bool:
        return self.status in GUARDED_STATUSES

    def transition(self, status: Status) -> None:
        """Move to *status*, remembering the status it replaces."""
        if not is_valid_transition(self.status, status):
            logger.warning(
                "state.unexpected_transition",
                uri=self.uri,
                current=self.status.value if self.status else None,
                target=status.value,
            )
        self.previous_status = self.status
        self.status = status

    def restore(self) -> None:
        """Undo the last transition."""
        self.status, self.previous_status = self.previous_status, self.status

    def record_response(self, headers: Mapping[str, str] | None) -> None:
        """Keep the response headers and stamp the retrieval time."""
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.retrieved = utc_now()

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value if self.status else None,
            "previous_status": self.previous_status.value if self.previous_status else None,
            "headers": dict(self.headers),
            "retrieved": self.retrieved.isoformat() if self.retrieved else None,
            "singleton": sorted(self.singleton),
            "collection": sorted(self.collection),
        }


class StateStore:
    """Owns the State record of every tracked resource."""

    def __init__(self) -> None:
        self._states: WeakKeyDictionary[LinkedResource, State] = WeakKeyDictionary()

    def track(self, resource: LinkedResource, status: Status | None) -> State:
        """Attach a fresh State to *resource* (replacing any previous one)."""
        uri = canonical_uri(resource)
        if resource in self._states:
            logger.debug("state.retracked", uri=uri)
        state = State(status=status, uri=uri)
        self._states[resource] = state
        return state

    def get(self, resource: LinkedResource, operation: str = "state") -> State:
        """The State of *resource*; raises if it is not tracked."""
        state = self._states.get(resource)
        if state is None:
            uri = canonical_uri(resource)
            logger.error("state.not_found", uri=uri, operation=operation)
            raise UntrackedResourceError(operation, uri)
        return state

    def find(self, resource: Any) -> State | None:
        if not isinstance(resource, LinkedResource):
            return None
        return self._states.get(resource)

    def is_tracked(self, resource: Any) -> bool:
        return self.find(resource) is not None

    def forget(self, resource: LinkedResource) -> None:
        self._states.pop(resource, None)

    def __contains__(self, resource: object) -> bool:
        return self.is_tracked(resource)

    def __len__(self) -> int:
        return len(self._states)
