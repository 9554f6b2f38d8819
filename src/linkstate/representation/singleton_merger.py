"""
Singleton merger: fold a fetched document into an existing resource.

The target object is mutated in place so references held elsewhere stay
valid. The server is authoritative for links: when the document carries
links they replace the target's wholesale. Attributes present in the document
overwrite the target's, except attributes registered as tracked children,
which are synchronized on their own and are not clobbered by a plain value.
"""

from __future__ import annotations

from typing import Any

from linkstate.core.logging import get_logger
from linkstate.representation.links import canonical_uri
from linkstate.representation.model import LinkedResource
from linkstate.representation.state import StateStore
from linkstate.representation.wire import RepresentationKind, SingletonDocument, classify

logger = get_logger(__name__)


class SingletonMerger:
    def __init__(self, store: StateStore):
        self.store = store

    def merge(self, target: LinkedResource, document: Any) -> LinkedResource:
        """Merge *document* (mapping, resource or SingletonDocument) into *target*."""
        representation = classify(document)
        if representation.kind is not RepresentationKind.SINGLETON:
            # A collection-shaped document merged onto a singleton: attributes only
            logger.debug(
                "merge.singleton.non_singleton_document",
                uri=canonical_uri(target),
                kind=representation.kind.value,
            )
            representation = SingletonDocument(
                attributes=getattr(representation, "attributes", {}),
                links=getattr(representation, "links", None) or None,
            )

        protected = set(self.tracked_fields(target))
        skipped = []
        for name, value in representation.attributes.items():
            if name in protected and not isinstance(value, LinkedResource):
                skipped.append(name)
                continue
            target.attributes[name] = value

        if representation.links is not None:
            target.links = list(representation.links)

        logger.debug(
            "merge.singleton",
            uri=canonical_uri(target),
            fields=len(representation.attributes) - len(skipped),
            skipped=skipped or None,
        )
        return target

    def add(self, target: LinkedResource, name: str, child: LinkedResource) -> LinkedResource:
        """Register *child* as a tracked attribute of *target* and assign it.

        Returns the target. Untracked targets are left unchanged.
        """
        state = self.store.find(target)
        if state is None:
            logger.warning("merge.add.untracked_target", uri=canonical_uri(target), name=name)
            return target

        if child.is_collection:
            state.collection.add(name)
        else:
            state.singleton.add(name)
        target.attributes[name] = child
        return target

    def is_tracked(self, target: LinkedResource, name: str) -> bool:
        """Whether *name* on *target* holds a tracked child singleton or collection."""
        state = self.store.find(target)
        return state is not None and (name in state.singleton or name in state.collection)

    def tracked_fields(self, target: LinkedResource) -> list[str]:
        state = self.store.find(target)
        if state is None:
            return []
        return [*sorted(state.collection), *sorted(state.singleton)]
