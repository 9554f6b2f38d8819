"""
Wire boundary: JSON-shaped data in, a closed representation variant out.

Response bodies are classified exactly once, here, into one of three
variants. The engine routes on the variant's ``kind``; no other module
inspects raw payload shape.

    ┌──────────────────────────────┬───────────────────────┐
    │ payload                      │ variant               │
    ├──────────────────────────────┼───────────────────────┤
    │ items of {id, title}         │ Feed                  │
    │ items of linked resources    │ CollectionDocument    │
    │ anything else (a mapping)    │ SingletonDocument     │
    └──────────────────────────────┴───────────────────────┘

An empty ``items`` list is a feed: an empty collection listing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import ValidationError

from linkstate.core.errors import RepresentationError
from linkstate.representation.model import Collection, Feed, Link, LinkedResource


class RepresentationKind(str, Enum):
    SINGLETON = "singleton"
    COLLECTION = "collection"
    FEED = "feed"


@dataclass(frozen=True)
class SingletonDocument:
    """Attributes and (optionally) links of a single resource.

    ``links`` is None when the payload carried no ``links`` key, so a merge
    leaves the target's links alone.
    """

    attributes: dict[str, Any] = field(default_factory=dict)
    links: list[Link] | None = None
    kind: RepresentationKind = RepresentationKind.SINGLETON


@dataclass(frozen=True)
class CollectionDocument:
    """A collection whose items arrived as full linked resources."""

    items: list[LinkedResource]
    attributes: dict[str, Any] = field(default_factory=dict)
    links: list[Link] = field(default_factory=list)
    kind: RepresentationKind = RepresentationKind.COLLECTION


@dataclass(frozen=True)
class FeedDocument:
    feed: Feed
    kind: RepresentationKind = RepresentationKind.FEED


Representation = SingletonDocument | CollectionDocument | FeedDocument


def _parse_links(raw: Any) -> list[Link]:
    if not isinstance(raw, list):
        raise RepresentationError(f"'links' must be a list, got {type(raw).__name__}")
    try:
        return [Link.model_validate(link) for link in raw]
    except ValidationError as e:
        raise RepresentationError("Invalid link in representation", cause=e) from e


def _is_feed_item(item: Any) -> bool:
    return isinstance(item, Mapping) and "id" in item and "links" not in item


def classify(data: Any) -> Representation:
    """Classify a response body or caller document into its variant."""
    if isinstance(data, (SingletonDocument, CollectionDocument, FeedDocument)):
        return data
    if isinstance(data, Feed):
        return FeedDocument(feed=data)
    if isinstance(data, Collection):
        return CollectionDocument(
            items=list(data.items), attributes=dict(data.attributes), links=list(data.links)
        )
    if isinstance(data, LinkedResource):
        return SingletonDocument(attributes=dict(data.attributes), links=list(data.links))
    if data is None:
        return SingletonDocument()
    if not isinstance(data, Mapping):
        raise RepresentationError(
            f"Expected a mapping representation, got {type(data).__name__}"
        )

    items = data.get("items")
    if isinstance(items, list):
        if all(_is_feed_item(item) for item in items):
            try:
                return FeedDocument(feed=Feed.model_validate(data))
            except ValidationError as e:
                raise RepresentationError("Invalid feed representation", cause=e) from e
        return CollectionDocument(
            items=[from_wire(item) for item in items],
            attributes={k: v for k, v in data.items() if k not in ("links", "items")},
            links=_parse_links(data.get("links", [])),
        )

    return SingletonDocument(
        attributes={k: v for k, v in data.items() if k != "links"},
        links=_parse_links(data["links"]) if "links" in data else None,
    )


def from_wire(data: Mapping[str, Any]) -> LinkedResource:
    """Build a plain (untracked) resource or collection from wire data.

    Feed items become minimal resources with a ``self`` link; they are not
    tracked until handed to the engine.
    """
    match classify(data):
        case FeedDocument(feed=feed):
            return Collection(
                links=list(feed.links),
                items=[
                    LinkedResource(links=[Link(rel="self", href=item.id)])
                    for item in feed.items
                ],
            )
        case CollectionDocument(items=items, attributes=attributes, links=links):
            return Collection(links=links, attributes=attributes, items=items)
        case SingletonDocument(attributes=attributes, links=links):
            return LinkedResource(links=links or [], attributes=attributes)
