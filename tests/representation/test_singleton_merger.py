"""Tests for linkstate.representation.singleton_merger module."""

import pytest

from linkstate.representation.links import self_link
from linkstate.representation.model import Collection, Link, LinkedResource
from linkstate.representation.singleton_merger import SingletonMerger
from linkstate.representation.status import Status
from tests.fixtures.feeds import QUESTION_URI, QUESTIONS_URI, question


@pytest.fixture
def merger(store):
    return SingletonMerger(store)


@pytest.fixture
def target(store):
    res = LinkedResource(links=[self_link(QUESTION_URI)], attributes={"name": "old", "keep": 1})
    store.track(res, Status.HYDRATED)
    return res


class TestMerge:
    def test_attributes_overwritten_in_place(self, merger, target):
        """Document attributes overwrite; the same object is returned."""
        result = merger.merge(target, {"name": "new", "type": "text"})
        assert result is target
        assert target.attributes == {"name": "new", "keep": 1, "type": "text"}

    def test_links_replaced_wholesale(self, merger, target):
        merger.merge(target, question())
        assert [link.rel for link in target.links] == ["self", "edit-form"]

    def test_links_kept_when_absent(self, merger, target):
        """A document with no links key leaves links alone."""
        before = list(target.links)
        merger.merge(target, {"name": "new"})
        assert target.links == before

    def test_tracked_child_not_clobbered(self, merger, target, store):
        """A plain value never replaces a registered tracked child."""
        child = Collection(links=[self_link(QUESTIONS_URI)])
        store.track(child, Status.LOCATION_ONLY)
        merger.add(target, "questions", child)

        merger.merge(target, {"questions": [{"id": "x"}], "name": "new"})

        assert target["questions"] is child
        assert target["name"] == "new"

    def test_collection_document_merges_attributes_only(self, merger, target):
        before = list(target.links)
        merger.merge(target, {"items": [question()], "count": 1})
        assert target["count"] == 1
        assert "items" not in target
        assert target.links == before


class TestAdd:
    def test_add_registers_by_kind(self, merger, target, store):
        single = LinkedResource(links=[Link(rel="self", href=QUESTION_URI + "/owner")])
        many = Collection()
        merger.add(target, "owner", single)
        merger.add(target, "questions", many)

        state = store.get(target)
        assert state.singleton == {"owner"}
        assert state.collection == {"questions"}
        assert target["owner"] is single
        assert merger.is_tracked(target, "owner")
        assert merger.tracked_fields(target) == ["questions", "owner"]

    def test_add_on_untracked_target_is_noop(self, merger):
        plain = LinkedResource()
        merger.add(plain, "owner", LinkedResource())
        assert "owner" not in plain
        assert merger.tracked_fields(plain) == []
        assert merger.is_tracked(plain, "owner") is False
