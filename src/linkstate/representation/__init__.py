"""
Tracked linked representations.

- model: Link, LinkedResource, Collection, Feed
- links: link relation lookup
- status / state: lifecycle status and the per-resource State side-table
- sparse: sparse resource factory
- wire: one-time classification of wire data
- singleton_merger / collection_merger: in-place merges
- tracking: fetch-necessity rules
- classifier: transport failures → status transitions
- hydrator: collection item hydration
- engine: load / create / update / delete
- get: find-then-load and named child loading
"""

from linkstate.representation.model import Collection, Feed, FeedItem, Link, LinkedResource
from linkstate.representation.links import SELF, canonical_uri, get_link, get_uri
from linkstate.representation.status import Status
from linkstate.representation.state import State, StateStore
from linkstate.representation.options import ResourceOptions
from linkstate.representation.sparse import SparseRepresentationFactory
from linkstate.representation.wire import classify, from_wire
from linkstate.representation.singleton_merger import SingletonMerger
from linkstate.representation.collection_merger import (
    CollectionMerger,
    find_in_collection,
    remove_item_from_collection,
)
from linkstate.representation.classifier import Classification, ErrorClassifier
from linkstate.representation.hydrator import BatchHydrator
from linkstate.representation.engine import SyncEngine
from linkstate.representation.get import get

__all__ = [
    "Collection",
    "Feed",
    "FeedItem",
    "Link",
    "LinkedResource",
    "SELF",
    "canonical_uri",
    "get_link",
    "get_uri",
    "Status",
    "State",
    "StateStore",
    "ResourceOptions",
    "SparseRepresentationFactory",
    "classify",
    "from_wire",
    "SingletonMerger",
    "CollectionMerger",
    "find_in_collection",
    "remove_item_from_collection",
    "Classification",
    "ErrorClassifier",
    "BatchHydrator",
    "SyncEngine",
    "get",
]
