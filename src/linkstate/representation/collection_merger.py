"""
Collection merger and collection membership helpers.

Reconciles an existing collection with a freshly fetched sparse one, keyed
solely on each item's canonical (``canonical``/``self``) URI:

    existing {A(hydrated), B}  +  fresh {A', C}  →  {A(hydrated), C}

- in existing, not in fresh → removed
- in fresh, not in existing → added (the fresh sparse placeholder)
- in both                   → untouched; the existing object and its state stay

The existing ``items`` list is edited in place. Continuing members are never
replaced, so a refresh does not discard detail already loaded for them.
"""

from __future__ import annotations

from linkstate.core.logging import get_logger
from linkstate.representation.links import canonical_uri
from linkstate.representation.model import Collection, LinkedResource
from linkstate.representation.options import WhereType

logger = get_logger(__name__)


class CollectionMerger:
    @staticmethod
    def merge(existing: Collection, fresh: Collection) -> Collection:
        fresh_uris = {canonical_uri(item) for item in fresh.items} - {None}
        existing_uris = {canonical_uri(item) for item in existing.items} - {None}

        kept = [item for item in existing.items if canonical_uri(item) in fresh_uris]
        added = []
        for item in fresh.items:
            uri = canonical_uri(item)
            if uri is not None and uri not in existing_uris:
                added.append(item)
                # duplicate ids in one feed add a single member
                existing_uris.add(uri)

        removed = len(existing.items) - len(kept)
        existing.items[:] = kept + added

        logger.debug(
            "merge.collection",
            uri=canonical_uri(existing),
            kept=len(kept),
            added=len(added),
            removed=removed,
        )
        return existing


def find_in_collection(collection: Collection, where: WhereType) -> LinkedResource | None:
    """Find the first item matching *where*.

    A string matches an item's canonical URI, or failing that its ``name``
    attribute; a callable is used as a predicate.
    """
    if callable(where):
        return next((item for item in collection.items if where(item)), None)
    for item in collection.items:
        if canonical_uri(item) == where:
            return item
    for item in collection.items:
        if item.get("name") == where:
            return item
    return None


def remove_item_from_collection(
    collection: Collection, item: LinkedResource
) -> LinkedResource | None:
    """Remove the member with *item*'s canonical URI; return it, or None if absent."""
    uri = canonical_uri(item)
    for index, member in enumerate(collection.items):
        if member is item or (uri is not None and canonical_uri(member) == uri):
            return collection.items.pop(index)
    return None
