"""
Link-relation lookup on linked resources.

Relations are matched case-insensitively when given as strings, or with
``re.search`` when given as a compiled pattern. Identity of a resource is
the first link matching ``canonical`` or ``self``.
"""

from __future__ import annotations

import re
from typing import Protocol

from linkstate.representation.model import Link

SELF = "self"
CANONICAL_OR_SELF = re.compile(r"^(canonical|self)$", re.IGNORECASE)

RelationType = str | re.Pattern[str]


class HasLinks(Protocol):
    links: list[Link]


def rel_name(rel: RelationType) -> str:
    """Printable form of a relation for logs and error messages."""
    return rel.pattern if isinstance(rel, re.Pattern) else rel


def _rel_matches(link_rel: str, rel: RelationType) -> bool:
    if isinstance(rel, re.Pattern):
        return rel.search(link_rel) is not None
    return link_rel.lower() == rel.lower()


def filter_links(
    resource: HasLinks | None, rel: RelationType, media_type: str | None = None
) -> list[Link]:
    """All links on the resource with the relation (and media type, if given)."""
    if resource is None:
        return []
    return [
        link
        for link in resource.links
        if _rel_matches(link.rel, rel) and (media_type is None or link.type == media_type)
    ]


def get_link(
    resource: HasLinks | None, rel: RelationType, media_type: str | None = None
) -> Link | None:
    links = filter_links(resource, rel, media_type)
    return links[0] if links else None


def get_uri(
    resource: HasLinks | None, rel: RelationType, media_type: str | None = None
) -> str | None:
    link = get_link(resource, rel, media_type)
    return link.href if link else None


def canonical_uri(resource: HasLinks | None) -> str | None:
    """The resource's identity URI (``canonical`` or ``self``)."""
    return get_uri(resource, CANONICAL_OR_SELF)


def self_link(uri: str, title: str | None = None) -> Link:
    return Link(rel=SELF, href=uri, title=title)
