"""
``get``: the front door over :class:`~linkstate.representation.engine.SyncEngine`.

    get(engine, collection, where=...)   refresh the collection, find the item, load it
    get(engine, resource, rel="x")       load the resource behind link "x" as a tracked
                                         child attribute of *resource*
    get(engine, resource)                load the resource itself
"""

from __future__ import annotations

import re
from typing import Any

from linkstate.core.errors import MissingLinkError
from linkstate.core.logging import get_logger
from linkstate.representation.collection_merger import find_in_collection
from linkstate.representation.engine import SyncEngine
from linkstate.representation.links import SELF, canonical_uri, get_uri, rel_name
from linkstate.representation.model import Collection, LinkedResource
from linkstate.representation.options import ResourceOptions

logger = get_logger(__name__)


async def get(
    engine: SyncEngine,
    resource: LinkedResource,
    options: ResourceOptions | None = None,
    **overrides: Any,
) -> LinkedResource | None:
    options = ResourceOptions.of(options, **overrides)

    if options.where is not None:
        if isinstance(resource, Collection):
            collection = await engine.load(resource, options.evolve(where=None))
            item = find_in_collection(collection, options.where)
            if item is None:
                logger.debug("get.item_not_found", uri=canonical_uri(collection))
                return None
            return await engine.load(item, options.evolve(rel=SELF, where=None))
        logger.warning("get.where_outside_collection", uri=canonical_uri(resource))
        options = options.evolve(where=None)

    if isinstance(options.rel, str) and options.rel != SELF:
        return await load_named(engine, resource, options)

    return await engine.load(resource, options)


async def load_named(
    engine: SyncEngine, resource: LinkedResource, options: ResourceOptions
) -> LinkedResource:
    """Load the resource linked by ``options.rel`` into a named attribute of *resource*.

    The attribute name is the relation with ``-`` turned into ``_``
    (``"question-feed"`` → ``"question_feed"``). An existing tracked child is
    reused, so repeated calls refresh the same object.
    """
    rel = rel_name(options.rel)
    name = attribute_name(rel)

    uri = get_uri(resource, options.rel, options.media_type)
    if uri is None:
        raise MissingLinkError(rel, canonical_uri(resource))

    child = resource.get(name)
    if not (
        isinstance(child, LinkedResource)
        and engine.singleton_merger.is_tracked(resource, name)
        and canonical_uri(child) == uri
    ):
        child = engine.make(uri=uri, sparse_type=options.sparse_type)
        engine.singleton_merger.add(resource, name, child)
        logger.debug("get.named.created", uri=uri, name=name)

    return await engine.load(child, options.evolve(rel=SELF))


def attribute_name(rel: str) -> str:
    return re.sub(r"[^0-9a-zA-Z_]", "_", rel)
