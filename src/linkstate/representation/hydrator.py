"""
Batch hydrator: load every member of a collection.

``batch_size`` picks the execution mode. Despite the name it is a switch, not
a window: ``> 0`` dispatches every item load at once (``asyncio.gather``, no
ordering between siblings); ``<= 0`` loads items one at a time in collection
order. Each item load is itself sequential (guard → fetch → merge).

``force_load`` together with ``force_load_feed_only`` refreshes the
collection's feed without force-refreshing every member: items are loaded
with ``force_load`` turned off.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from linkstate.core.logging import LogContext, get_logger
from linkstate.core.result import Result, partition_results
from linkstate.representation.links import SELF, canonical_uri
from linkstate.representation.model import Collection, LinkedResource
from linkstate.representation.options import ResourceOptions

if TYPE_CHECKING:
    from linkstate.representation.engine import SyncEngine

logger = get_logger(__name__)


class BatchHydrator:
    def __init__(self, engine: SyncEngine):
        self.engine = engine

    def item_options(self, options: ResourceOptions) -> ResourceOptions:
        """Options used for each member load."""
        if options.force_load and options.force_load_feed_only:
            options = options.evolve(force_load=False)
        return options.evolve(rel=SELF, where=None)

    def batch_size(self, options: ResourceOptions) -> int:
        if options.batch_size is not None:
            return options.batch_size
        return self.engine.settings.batch_size

    async def hydrate(self, collection: Collection, options: ResourceOptions) -> Collection:
        """Load each item of *collection*; re-raise the first item failure."""
        item_options = self.item_options(options)
        # snapshot: a member load may not reshape the list being walked
        items = list(collection.items)
        concurrent = self.batch_size(options) > 0

        async with LogContext(collection=canonical_uri(collection)):
            logger.debug(
                "hydrate.start",
                items=len(items),
                mode="concurrent" if concurrent else "sequential",
            )
            if concurrent:
                await self._concurrent(items, item_options)
            else:
                await self._sequential(items, item_options)
            logger.debug("hydrate.complete", items=len(items))
        return collection

    async def _sequential(self, items: list[LinkedResource], options: ResourceOptions) -> None:
        for item in items:
            await self.engine.load(item, options)

    async def _concurrent(self, items: list[LinkedResource], options: ResourceOptions) -> None:
        outcomes = await asyncio.gather(
            *[self.engine.try_load(item, options) for item in items],
            return_exceptions=True,
        )
        # try_load only captures library errors; anything else arrives here raw
        unexpected = [o for o in outcomes if isinstance(o, BaseException)]
        results: list[Result[LinkedResource]] = [
            o for o in outcomes if not isinstance(o, BaseException)
        ]
        _, errors = partition_results(results)
        failed = len(unexpected) + len(errors)
        if failed:
            logger.warning("hydrate.items_failed", failed=failed, items=len(items))
        if unexpected:
            raise unexpected[0]
        if errors:
            raise errors[0]
