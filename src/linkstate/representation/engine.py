"""
Synchronization engine: load, create, update and delete tracked resources.

Every operation follows the same shape::

    resolve link (rel, default "self")
        → guard on status (virtual / deleted / deleteInProgress / forbidden)
        → decide fetch necessity
        → Transport
        → State update (headers, status, retrieved)
        → classify wire data → Collection or Singleton merge
        → optional item hydration

Resources are mutated in place; the object a caller holds is the object that
gets refreshed. Transport failures and unreadable response bodies are
absorbed into a status transition by the
:class:`~linkstate.representation.classifier.ErrorClassifier`, except a 404 on
load which raises :class:`~linkstate.core.errors.ResourceNotFoundError`
after marking the resource deleted. Callers check ``engine.status(resource)``
after operations that may have degraded.

Usage:
    async with HttpxTransport() as transport:
        engine = SyncEngine(transport)
        api = engine.make(uri="https://api.example.com/")
        await engine.load(api)
        questions = await get(engine, api, rel="questions", include_items=True)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from linkstate.core.errors import (
    MissingContextUriError,
    MissingLinkError,
    RepresentationError,
    TransportError,
    UnsupportedOperationError,
    UntrackedResourceError,
)
from linkstate.core.logging import get_logger
from linkstate.core.result import Result, try_result_async
from linkstate.core.settings import LinkStateSettings, get_settings
from linkstate.representation.classifier import ErrorClassifier
from linkstate.representation.collection_merger import (
    CollectionMerger,
    remove_item_from_collection,
)
from linkstate.representation.hydrator import BatchHydrator
from linkstate.representation.links import SELF, canonical_uri, get_uri, rel_name, self_link
from linkstate.representation.model import Collection, LinkedResource
from linkstate.representation.options import ResourceOptions
from linkstate.representation.singleton_merger import SingletonMerger
from linkstate.representation.sparse import SparseRepresentationFactory
from linkstate.representation.state import State, StateStore
from linkstate.representation.status import Status
from linkstate.representation.tracking import needs_fetch
from linkstate.representation.wire import (
    CollectionDocument,
    FeedDocument,
    Representation,
    SingletonDocument,
    classify,
)

if TYPE_CHECKING:
    from linkstate.http.transport import HttpResponse, Transport

logger = get_logger(__name__)


class SyncEngine:
    """Keeps in-memory linked resources synchronized with their server."""

    def __init__(
        self,
        transport: Transport,
        store: StateStore | None = None,
        settings: LinkStateSettings | None = None,
    ):
        self.transport = transport
        self.store = store if store is not None else StateStore()
        self.settings = settings or get_settings()

        self.factory = SparseRepresentationFactory(self.store, self.settings)
        self.singleton_merger = SingletonMerger(self.store)
        self.collection_merger = CollectionMerger()
        self.classifier = ErrorClassifier()
        self.hydrator = BatchHydrator(self)

    # ── Convenience ──────────────────────────────────────────────────

    def make(self, options: ResourceOptions | None = None, **overrides: Any) -> LinkedResource:
        """A tracked sparse resource (see :class:`SparseRepresentationFactory`)."""
        return self.factory.make(options, **overrides)

    def state(self, resource: LinkedResource) -> State:
        return self.store.get(resource)

    def status(self, resource: LinkedResource) -> Status | None:
        state = self.store.find(resource)
        return state.status if state else None

    # ── Load ─────────────────────────────────────────────────────────

    async def load(
        self,
        resource: LinkedResource,
        options: ResourceOptions | None = None,
        **overrides: Any,
    ) -> LinkedResource:
        """Bring *resource* (or the resource at ``options.rel``) up to date.

        Raises:
            UntrackedResourceError: untracked resource without a ``self`` URI
            MissingLinkError: the resource has no link for ``options.rel``
            ResourceNotFoundError: the server answered 404
        """
        options = ResourceOptions.of(options, **overrides)

        state = self.store.find(resource)
        if state is None:
            return await self._load_untracked(resource, options)

        if state.is_guarded:
            logger.info(
                "sync.load.skipped",
                uri=canonical_uri(resource),
                status=state.status.value,
            )
            return resource

        uri = get_uri(resource, options.rel, options.media_type)
        if uri is None:
            raise MissingLinkError(rel_name(options.rel), canonical_uri(resource))

        if needs_fetch(state, options):
            try:
                response = await self.transport.load(resource, options.rel, options)
                representation = classify(response.data)
            except (TransportError, RepresentationError) as e:
                self.classifier.classify(e, state, uri=uri)
                return resource

            state.record_response(response.headers)
            state.transition(Status.HYDRATED)
            logger.debug("sync.load.fetched", uri=uri, http_status=response.status)
            return await self._process(resource, uri, representation, options)

        if isinstance(resource, Collection) and options.include_items:
            await self.hydrator.hydrate(resource, options)
        return resource

    async def _load_untracked(
        self, resource: LinkedResource, options: ResourceOptions
    ) -> LinkedResource:
        uri = get_uri(resource, SELF)
        if uri is None:
            logger.error("sync.load.untracked_without_uri")
            raise UntrackedResourceError("load")
        logger.debug("sync.load.wrapped", uri=uri, status=Status.UNKNOWN.value)
        self.factory.track_existing(resource, Status.UNKNOWN)
        return await self.load(resource, options)

    async def _process(
        self,
        resource: LinkedResource,
        uri: str,
        representation: Representation,
        options: ResourceOptions,
    ) -> LinkedResource:
        match representation:
            case FeedDocument(feed=feed):
                fresh = self.factory.make_from_feed(uri, feed)
                document = SingletonDocument(links=list(feed.links) or None)
                return await self._process_collection(resource, fresh, document, options)
            case CollectionDocument(items=items, attributes=attributes, links=links):
                fresh = Collection(links=[self_link(uri)], items=list(items))
                self.factory.track_existing(fresh, Status.LOCATION_ONLY)
                document = SingletonDocument(attributes=attributes, links=links or None)
                return await self._process_collection(resource, fresh, document, options)
            case SingletonDocument() as document:
                return self.singleton_merger.merge(resource, document)

    async def _process_collection(
        self,
        resource: LinkedResource,
        fresh: Collection,
        document: SingletonDocument,
        options: ResourceOptions,
    ) -> LinkedResource:
        if not isinstance(resource, Collection):
            logger.warning(
                "sync.load.collection_on_singleton",
                uri=canonical_uri(resource),
                items=len(fresh.items),
            )
            return self.singleton_merger.merge(resource, document)

        self.collection_merger.merge(resource, fresh)
        self.singleton_merger.merge(resource, document)
        if options.include_items:
            await self.hydrator.hydrate(resource, options)
        return resource

    # ── Create ───────────────────────────────────────────────────────

    async def create(
        self,
        context: LinkedResource,
        document: Any,
        options: ResourceOptions | None = None,
        **overrides: Any,
    ) -> LinkedResource | None:
        """POST *document* on the ``options.rel`` link of *context*.

        Returns the created resource, hydrated, when the server answers 201
        with a ``Location``; otherwise ``None``.
        """
        options = ResourceOptions.of(options, **overrides)

        uri = get_uri(context, options.rel, options.media_type)
        if uri is None:
            raise MissingContextUriError(rel_name(options.rel))

        try:
            response = await self.transport.create(context, document, options)
        except TransportError as e:
            logger.error(
                "sync.create.failed",
                uri=uri,
                http_status=e.status,
                error=str(e),
            )
            return None

        return await self._created(uri, response, options)

    async def _created(
        self, uri: str, response: HttpResponse, options: ResourceOptions
    ) -> LinkedResource | None:
        if response.status is None:
            logger.warning("sync.create.status_missing", uri=uri)
        elif response.status != 201:
            logger.debug("sync.create.not_created", uri=uri, http_status=response.status)
            return None

        location = response.location
        if not location:
            logger.info("sync.create.location_missing", uri=uri)
            return None

        created = self.factory.make(uri=location)
        return await self.load(created, options.evolve(rel=SELF))

    # ── Update ───────────────────────────────────────────────────────

    async def update(
        self,
        resource: LinkedResource,
        document: Any,
        options: ResourceOptions | None = None,
        **overrides: Any,
    ) -> LinkedResource:
        """PUT *document* and merge the result into *resource* in place."""
        options = ResourceOptions.of(options, **overrides)

        state = self.store.get(resource, "update")
        if isinstance(resource, Collection):
            raise UnsupportedOperationError(
                f"update of a collection is not supported '{canonical_uri(resource)}'"
            ).with_context(uri=canonical_uri(resource), operation="update")

        if document is None:
            logger.debug("sync.update.no_document", uri=canonical_uri(resource))
            return resource

        uri = get_uri(resource, options.rel, options.media_type)
        if uri is None:
            raise MissingLinkError(rel_name(options.rel), canonical_uri(resource))

        try:
            response = await self.transport.update(resource, document, options)
            merged = classify(response.data if isinstance(response.data, Mapping) else document)
        except (TransportError, RepresentationError) as e:
            self.classifier.classify(e, state, uri=uri, raise_not_found=False)
            return resource

        state.record_response(response.headers)
        state.transition(Status.HYDRATED)
        return self.singleton_merger.merge(resource, merged)

    # ── Delete ───────────────────────────────────────────────────────

    async def delete(
        self,
        resource: LinkedResource,
        options: ResourceOptions | None = None,
        **overrides: Any,
    ) -> LinkedResource:
        """DELETE *resource*; on success it is marked ``deleted``."""
        options = ResourceOptions.of(options, **overrides)

        state = self.store.get(resource, "delete")
        if state.is_guarded:
            logger.info(
                "sync.delete.skipped",
                uri=canonical_uri(resource),
                status=state.status.value,
            )
            return resource

        uri = get_uri(resource, options.rel, options.media_type)
        if uri is None:
            raise MissingLinkError(rel_name(options.rel), canonical_uri(resource))

        state.transition(Status.DELETE_IN_PROGRESS)
        try:
            response = await self.transport.delete(resource, options)
        except (TransportError, RepresentationError) as e:
            self.classifier.classify(e, state, uri=uri, raise_not_found=False)
            return resource
        except BaseException:
            logger.warning("sync.delete.interrupted", uri=uri)
            state.restore()
            raise

        state.record_response(response.headers)
        state.transition(Status.DELETED)
        logger.debug("sync.delete.complete", uri=uri)
        return resource

    # ── Collections ──────────────────────────────────────────────────

    def remove_collection_item(
        self, collection: Collection, item: LinkedResource
    ) -> LinkedResource | None:
        """Drop *item* from *collection* and mark it ``stale``.

        Returns the removed member, or ``None`` when it was not in the
        collection or is not tracked.
        """
        removed = remove_item_from_collection(collection, item)
        if removed is None:
            return None
        state = self.store.find(removed)
        if state is None:
            logger.debug("sync.remove.untracked_item", uri=canonical_uri(removed))
            return None
        state.transition(Status.STALE)
        return removed

    # ── Result-typed variants ────────────────────────────────────────

    async def try_load(
        self, resource: LinkedResource, options: ResourceOptions | None = None, **overrides: Any
    ) -> Result[LinkedResource]:
        return await try_result_async(lambda: self.load(resource, options, **overrides))

    async def try_update(
        self,
        resource: LinkedResource,
        document: Any,
        options: ResourceOptions | None = None,
        **overrides: Any,
    ) -> Result[LinkedResource]:
        return await try_result_async(
            lambda: self.update(resource, document, options, **overrides)
        )

    async def try_delete(
        self, resource: LinkedResource, options: ResourceOptions | None = None, **overrides: Any
    ) -> Result[LinkedResource]:
        return await try_result_async(lambda: self.delete(resource, options, **overrides))
