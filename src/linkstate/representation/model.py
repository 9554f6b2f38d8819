"""
Resource model: links, linked resources, collections and feeds.

A :class:`LinkedResource` is an open-ended bag of attributes plus an ordered
list of :class:`Link` objects. A :class:`Collection` adds an ordered list of
items. Both are plain, serializable data: lifecycle state is held by the
:class:`~linkstate.representation.state.StateStore`, never on the object.

Resources compare and hash by object identity. Two objects with the same
``self`` URI are different in-memory resources; merges keep continuing
members as the same object so references held by callers stay valid.

:class:`Feed` and :class:`FeedItem` are the wire-only collection listing
(``{items: [{id, title}]}``). They are validated at the boundary and turned
into sparse items straight away.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Link(BaseModel):
    """Hypermedia link: relation, target and optional title / media type."""

    model_config = ConfigDict(extra="ignore")

    rel: str = Field(description="Link relation (e.g. 'self', 'edit-form', 'item')")
    href: str = Field(description="Target URI")
    title: str | None = None
    type: str | None = Field(default=None, description="Media type of the target")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class FeedItem(BaseModel):
    """One entry of a feed: the member's URI and its display title."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str | None = None


class Feed(BaseModel):
    """Wire listing of a collection's membership."""

    model_config = ConfigDict(extra="ignore")

    links: list[Link] = Field(default_factory=list)
    items: list[FeedItem] = Field(default_factory=list)


@dataclass(eq=False)
class LinkedResource:
    """A resource with links and named attributes.

    Attributes are also reachable with item access::

        question["name"] = "Tell me about yourself"
    """

    links: list[Link] = field(default_factory=list)
    attributes: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        return self.attributes[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self.attributes[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self.attributes

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    @property
    def is_collection(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape. Child resources serialize recursively."""
        data: dict[str, Any] = {"links": [link.to_dict() for link in self.links]}
        for name, value in self.attributes.items():
            data[name] = value.to_dict() if isinstance(value, LinkedResource) else value
        return data


@dataclass(eq=False)
class Collection(LinkedResource):
    """A linked resource that also holds member items."""

    items: list[LinkedResource] = field(default_factory=list)

    @property
    def is_collection(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["items"] = [item.to_dict() for item in self.items]
        return data
