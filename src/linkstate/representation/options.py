"""
Options recognized by the engine, the sparse factory and the hydrator.

One immutable options object flows through an operation; components derive
variants with :meth:`ResourceOptions.evolve` instead of mutating it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from typing import Any, Literal

from linkstate.representation.links import SELF, RelationType
from linkstate.representation.model import FeedItem, LinkedResource
from linkstate.representation.status import Status

SparseType = Literal["singleton", "collection"]

# A URI / title to match, or a predicate over collection items
WhereType = str | Callable[[LinkedResource], bool]


@dataclass(frozen=True)
class ResourceOptions:
    """
    Attributes:
        rel: Link relation of the operation's target (default ``self``)
        media_type: Restrict the target link to this media type
        force_load: Refetch hydrated resources
        force_load_feed_only: With force_load, refetch a collection's feed but not its items
        include_items: Cascade hydration into collection members
        batch_size: > 0 concurrent item hydration, otherwise sequential (None: settings)
        status: Initial status for sparse creation
        uri: Self URI for sparse creation
        title: Title attribute for sparse creation
        sparse_type: Build a singleton or a collection shell
        default_items: URIs or feed items to seed a sparse collection
        where: Find an item in a collection before loading it
    """

    rel: RelationType = SELF
    media_type: str | None = None

    force_load: bool = False
    force_load_feed_only: bool = False
    include_items: bool = False
    batch_size: int | None = None

    status: Status | None = None
    uri: str | None = None
    title: str | None = None
    sparse_type: SparseType = "singleton"
    default_items: tuple[str | FeedItem, ...] = ()

    where: WhereType | None = None

    def evolve(self, **changes: Any) -> ResourceOptions:
        """Copy with *changes* applied."""
        return replace(self, **changes)

    @classmethod
    def of(cls, options: ResourceOptions | None = None, **overrides: Any) -> ResourceOptions:
        """Normalize an optional options object plus keyword overrides.

        Unknown keywords raise ``TypeError`` so typos do not pass silently.
        """
        base = options or cls()
        if not overrides:
            return base
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown resource options: {', '.join(sorted(unknown))}")
        if "status" in overrides and overrides["status"] is not None:
            overrides["status"] = Status.parse(overrides["status"])
        if "default_items" in overrides:
            overrides["default_items"] = tuple(overrides["default_items"])
        return base.evolve(**overrides)
