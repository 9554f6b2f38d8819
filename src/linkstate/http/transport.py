"""
Transport contract between the synchronization engine and the network.

The engine never speaks HTTP itself. It hands a resource and a link
relation to a :class:`Transport`, which resolves the link, performs the
request and returns an :class:`HttpResponse`. Failures are raised:

    - :class:`~linkstate.core.errors.HttpRequestError`  non-2xx with a status
    - :class:`~linkstate.core.errors.NetworkError`      no status at all

Any object with these four coroutines satisfies the protocol; tests use a
recording fake, production code the :class:`~linkstate.http.HttpxTransport`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from linkstate.representation.links import RelationType
    from linkstate.representation.model import LinkedResource
    from linkstate.representation.options import ResourceOptions


@dataclass
class HttpResponse:
    """Status, headers (lower-cased keys) and decoded body of a response."""

    status: int | None
    headers: dict[str, str] = field(default_factory=dict)
    data: Any = None

    def __post_init__(self) -> None:
        self.headers = {k.lower(): v for k, v in (self.headers or {}).items()}

    @property
    def location(self) -> str | None:
        return self.headers.get("location")


@runtime_checkable
class Transport(Protocol):
    """Four operations the engine depends on."""

    async def load(
        self, resource: LinkedResource, rel: RelationType, options: ResourceOptions
    ) -> HttpResponse:
        """GET the resource addressed by *rel* on *resource*."""
        ...

    async def create(
        self, resource: LinkedResource, document: Any, options: ResourceOptions
    ) -> HttpResponse:
        """POST *document* to the link ``options.rel`` on *resource*."""
        ...

    async def update(
        self, resource: LinkedResource, document: Any, options: ResourceOptions
    ) -> HttpResponse:
        """PUT *document* to the link ``options.rel`` on *resource*."""
        ...

    async def delete(self, resource: LinkedResource, options: ResourceOptions) -> HttpResponse:
        """DELETE the link ``options.rel`` on *resource*."""
        ...
