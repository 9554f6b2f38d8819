"""
Sparse representation factory.

Builds minimally populated, tracked resources: an address (``self`` link)
and possibly a title, awaiting hydration. Every resource it returns already
has a State in the factory's store.

Status rules:
    - no URI            → ``virtual`` (whatever status was requested)
    - URI, no override  → ``locationOnly``
    - URI, override     → the override (e.g. ``unknown``)
"""

from __future__ import annotations

from linkstate.core.logging import get_logger
from linkstate.core.settings import LinkStateSettings, get_settings
from linkstate.representation.links import canonical_uri, self_link
from linkstate.representation.model import Collection, Feed, FeedItem, LinkedResource
from linkstate.representation.options import ResourceOptions
from linkstate.representation.state import StateStore
from linkstate.representation.status import Status

logger = get_logger(__name__)


class SparseRepresentationFactory:
    """Creates sparse resources and collections and registers their state."""

    def __init__(self, store: StateStore, settings: LinkStateSettings | None = None):
        self.store = store
        self.settings = settings or get_settings()

    @property
    def mapped_title(self) -> str:
        return self.settings.mapped_title

    def make(self, options: ResourceOptions | None = None, **overrides) -> LinkedResource:
        """Make a sparse singleton or collection from ``uri``/``title``/``status``."""
        options = ResourceOptions.of(options, **overrides)
        uri = options.uri

        resource: LinkedResource
        if options.sparse_type == "collection":
            resource = Collection(
                items=[self._make_default_item(item) for item in options.default_items]
            )
        else:
            if options.default_items:
                logger.warning("sparse.default_items_ignored", uri=uri)
            resource = LinkedResource()

        if uri:
            resource.links.append(self_link(uri))
        if options.title is not None:
            resource[self.mapped_title] = options.title

        self.store.track(resource, self._initial_status(uri, options.status))
        return resource

    def make_from_feed_item(
        self, feed_item: FeedItem, status: Status = Status.LOCATION_ONLY
    ) -> LinkedResource:
        """A sparse item addressed by the feed item's id, titled from the feed."""
        resource = LinkedResource(links=[self_link(feed_item.id)])
        if feed_item.title is not None:
            resource[self.mapped_title] = feed_item.title
        self.store.track(resource, self._initial_status(feed_item.id, status))
        return resource

    def make_from_feed(self, uri: str, feed: Feed) -> Collection:
        """A sparse collection shell at *uri* with one sparse item per feed entry."""
        collection = Collection(
            links=[self_link(uri)],
            items=[self.make_from_feed_item(item) for item in feed.items],
        )
        self.store.track(collection, Status.LOCATION_ONLY)
        return collection

    def track_existing(
        self, resource: LinkedResource, status: Status | None = None
    ) -> LinkedResource:
        """Attach a fresh State to an already populated, untracked resource.

        Items of a collection that are not yet tracked are attached as
        ``locationOnly`` (or ``virtual`` without an address).
        """
        uri = canonical_uri(resource)
        self.store.track(resource, self._initial_status(uri, status))
        if isinstance(resource, Collection):
            for item in resource.items:
                if not self.store.is_tracked(item):
                    self.store.track(
                        item, self._initial_status(canonical_uri(item), Status.LOCATION_ONLY)
                    )
        return resource

    def _make_default_item(self, item: str | FeedItem) -> LinkedResource:
        if isinstance(item, FeedItem):
            return self.make_from_feed_item(item)
        return self.make(uri=item)

    @staticmethod
    def _initial_status(uri: str | None, requested: Status | None) -> Status:
        if not uri:
            return Status.VIRTUAL
        return requested or Status.LOCATION_ONLY
