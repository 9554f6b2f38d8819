"""Tests for SyncEngine create, update, delete and collection item removal."""

import asyncio

import pytest

from linkstate.core.errors import (
    MissingContextUriError,
    RepresentationError,
    UnsupportedOperationError,
    UntrackedResourceError,
)
from linkstate.core.result import Ok
from linkstate.representation.links import canonical_uri, self_link
from linkstate.representation.model import LinkedResource
from linkstate.representation.status import Status
from tests.fixtures.transport import FakeTransport
from tests.fixtures.feeds import (
    CREATE_FORM_URI,
    QUESTION_URI,
    QUESTIONS_URI,
    SECOND_QUESTION_URI,
    question,
    question_feed,
)

NEW_QUESTION_URI = "https://api.example.com/question/new0000001"


async def hydrated(engine, transport, uri=QUESTION_URI):
    transport.respond("GET", uri, question(uri))
    res = engine.make(uri=uri)
    await engine.load(res)
    return res


class TestCreate:
    @pytest.mark.asyncio
    async def test_created_resource_is_loaded(self, engine, transport):
        """201 + Location → the new resource, hydrated."""
        transport.respond("POST", QUESTIONS_URI, None, status=201, headers={"Location": NEW_QUESTION_URI})
        transport.respond("GET", NEW_QUESTION_URI, question(NEW_QUESTION_URI, "Brand new"))
        questions = engine.make(uri=QUESTIONS_URI, sparse_type="collection")

        created = await engine.create(questions, {"name": "Brand new"})

        assert canonical_uri(created) == NEW_QUESTION_URI
        assert created["name"] == "Brand new"
        assert engine.status(created) is Status.HYDRATED
        assert transport.documents == [{"name": "Brand new"}]
        assert transport.calls == [("POST", QUESTIONS_URI), ("GET", NEW_QUESTION_URI)]

    @pytest.mark.asyncio
    async def test_create_on_named_relation(self, engine, transport):
        """rel picks the link of the context to POST on."""
        transport.respond("GET", QUESTIONS_URI, question_feed())
        transport.respond("POST", CREATE_FORM_URI, None, status=200)
        questions = engine.make(uri=QUESTIONS_URI, sparse_type="collection")
        await engine.load(questions)

        assert await engine.create(questions, {"name": "x"}, rel="create-form") is None
        assert transport.calls[-1] == ("POST", CREATE_FORM_URI)

    @pytest.mark.asyncio
    async def test_missing_location(self, engine, transport):
        """201 without Location is logged; the result is None."""
        transport.respond("POST", QUESTIONS_URI, None, status=201)
        questions = engine.make(uri=QUESTIONS_URI)
        assert await engine.create(questions, {"name": "x"}) is None
        assert transport.count("GET") == 0

    @pytest.mark.asyncio
    async def test_missing_status_with_location(self, engine, transport):
        """No status but a Location is treated as created."""
        transport.respond("POST", QUESTIONS_URI, None, status=None, headers={"location": NEW_QUESTION_URI})
        transport.respond("GET", NEW_QUESTION_URI, question(NEW_QUESTION_URI))
        created = await engine.create(engine.make(uri=QUESTIONS_URI), {"name": "x"})
        assert engine.status(created) is Status.HYDRATED

    @pytest.mark.asyncio
    async def test_context_without_uri(self, engine, transport):
        with pytest.raises(MissingContextUriError):
            await engine.create(engine.make(), {"name": "x"})
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_transport_error_returns_none(self, engine, transport):
        transport.fail("POST", QUESTIONS_URI, 400)
        questions = engine.make(uri=QUESTIONS_URI)
        assert await engine.create(questions, {"name": "x"}) is None
        assert engine.status(questions) is Status.LOCATION_ONLY


class TestUpdate:
    @pytest.mark.asyncio
    async def test_merges_response(self, engine, transport):
        res = await hydrated(engine, transport)
        transport.respond("PUT", QUESTION_URI, question(name="From server"), headers={"ETag": "v2"})

        result = await engine.update(res, {"name": "Sent"})

        assert result is res
        assert res["name"] == "From server"
        assert engine.state(res).headers == {"etag": "v2"}
        assert engine.status(res) is Status.HYDRATED

    @pytest.mark.asyncio
    async def test_merges_sent_document_without_body(self, engine, transport):
        res = await hydrated(engine, transport)
        transport.respond("PUT", QUESTION_URI, None, status=204)
        await engine.update(res, {"name": "Sent"})
        assert res["name"] == "Sent"
        assert res["type"] == "text"

    @pytest.mark.asyncio
    async def test_none_document_is_noop(self, engine, transport):
        res = await hydrated(engine, transport)
        assert await engine.update(res, None) is res
        assert transport.count("PUT") == 0

    @pytest.mark.asyncio
    async def test_untracked_rejected(self, engine):
        with pytest.raises(UntrackedResourceError):
            await engine.update(LinkedResource(links=[self_link(QUESTION_URI)]), {"name": "x"})

    @pytest.mark.asyncio
    async def test_collection_rejected(self, engine):
        questions = engine.make(uri=QUESTIONS_URI, sparse_type="collection")
        with pytest.raises(UnsupportedOperationError):
            await engine.update(questions, {"name": "x"})

    @pytest.mark.asyncio
    async def test_not_found_absorbed(self, engine, transport):
        """Only load raises on 404; update marks deleted and returns."""
        res = await hydrated(engine, transport)
        transport.fail("PUT", QUESTION_URI, 404)
        assert await engine.update(res, {"name": "x"}) is res
        assert engine.status(res) is Status.DELETED

    @pytest.mark.asyncio
    async def test_forbidden(self, engine, transport):
        res = await hydrated(engine, transport)
        transport.fail("PUT", QUESTION_URI, 403)
        await engine.update(res, {"name": "x"})
        assert engine.status(res) is Status.FORBIDDEN
        assert res["name"] == "Please tell me about yourself"

    @pytest.mark.asyncio
    async def test_unreadable_response_absorbed(self, engine, transport):
        res = await hydrated(engine, transport)
        transport.respond("PUT", QUESTION_URI, {"links": "not-a-list"}, headers={"ETag": "v2"})

        assert await engine.update(res, {"name": "x"}) is res

        assert engine.status(res) is Status.UNKNOWN
        assert "etag" not in engine.state(res).headers
        assert res["name"] == "Please tell me about yourself"

    @pytest.mark.asyncio
    async def test_try_update(self, engine, transport):
        res = await hydrated(engine, transport)
        transport.respond("PUT", QUESTION_URI, None, status=204)
        assert await engine.try_update(res, {"name": "x"}) == Ok(res)


class TestDelete:
    @pytest.mark.asyncio
    async def test_deleted(self, engine, transport):
        res = await hydrated(engine, transport)
        transport.respond("DELETE", QUESTION_URI, None, status=204)

        assert await engine.delete(res) is res

        state = engine.state(res)
        assert state.status is Status.DELETED
        assert state.previous_status is Status.DELETE_IN_PROGRESS
        assert state.retrieved is not None

    @pytest.mark.asyncio
    async def test_delete_in_progress_while_in_flight(self, store, settings):
        """The status reads deleteInProgress while the request is outstanding."""
        from linkstate.representation.engine import SyncEngine

        seen = []

        class Observing(FakeTransport):
            async def delete(self, resource, options):
                seen.append(store.get(resource).status)
                return await super().delete(resource, options)

        transport = Observing()
        engine = SyncEngine(transport, store=store, settings=settings)
        res = engine.make(uri=QUESTION_URI)
        transport.respond("DELETE", QUESTION_URI, None, status=204)

        await engine.delete(res)

        assert seen == [Status.DELETE_IN_PROGRESS]
        assert store.get(res).status is Status.DELETED

    @pytest.mark.asyncio
    async def test_delete_twice_sends_once(self, engine, transport):
        res = await hydrated(engine, transport)
        transport.respond("DELETE", QUESTION_URI, None, status=204)
        await engine.delete(res)
        await engine.delete(res)
        assert transport.count("DELETE") == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [Status.FORBIDDEN, Status.VIRTUAL, Status.DELETE_IN_PROGRESS])
    async def test_guarded_not_sent(self, engine, transport, status):
        res = engine.make(uri=QUESTION_URI)
        engine.state(res).status = status
        assert await engine.delete(res) is res
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_untracked_rejected(self, engine):
        with pytest.raises(UntrackedResourceError):
            await engine.delete(LinkedResource(links=[self_link(QUESTION_URI)]))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "http_status,expected",
        [(404, Status.DELETED), (403, Status.FORBIDDEN), (500, Status.UNKNOWN)],
    )
    async def test_errors_absorbed(self, engine, transport, http_status, expected):
        res = await hydrated(engine, transport)
        transport.fail("DELETE", QUESTION_URI, http_status)
        assert await engine.delete(res) is res
        assert engine.status(res) is expected

    @pytest.mark.asyncio
    async def test_unreadable_body_absorbed(self, engine, transport):
        """An unreadable DELETE body lands on unknown and the delete can be retried."""
        res = await hydrated(engine, transport)
        transport.routes[("DELETE", QUESTION_URI)] = RepresentationError("body is not valid JSON")

        assert await engine.delete(res) is res
        assert engine.status(res) is Status.UNKNOWN

        transport.respond("DELETE", QUESTION_URI, None, status=204)
        await engine.delete(res)
        assert transport.count("DELETE") == 2
        assert engine.status(res) is Status.DELETED

    @pytest.mark.asyncio
    async def test_unexpected_error_restores_status(self, engine, transport):
        res = await hydrated(engine, transport)
        transport.routes[("DELETE", QUESTION_URI)] = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await engine.delete(res)

        assert engine.status(res) is Status.HYDRATED

    @pytest.mark.asyncio
    async def test_cancelled_delete_can_be_retried(self, engine, transport):
        """Cancelling an in-flight delete leaves the resource deletable."""
        res = await hydrated(engine, transport)
        transport.respond("DELETE", QUESTION_URI, None, status=204)
        transport.delay = 10

        task = asyncio.create_task(engine.delete(res))
        await asyncio.sleep(0)
        assert transport.in_flight == 1
        assert engine.status(res) is Status.DELETE_IN_PROGRESS
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert engine.status(res) is Status.HYDRATED

        transport.delay = 0
        await engine.delete(res)
        assert transport.count("DELETE") == 2
        assert engine.status(res) is Status.DELETED

    @pytest.mark.asyncio
    async def test_try_delete(self, engine, transport):
        res = await hydrated(engine, transport)
        transport.respond("DELETE", QUESTION_URI, None, status=204)
        result = await engine.try_delete(res)
        assert result.is_ok()


class TestRemoveCollectionItem:
    @pytest.mark.asyncio
    async def test_removed_item_is_stale(self, engine, transport):
        transport.respond("GET", QUESTIONS_URI, question_feed((QUESTION_URI, "A"), (SECOND_QUESTION_URI, "B")))
        questions = engine.make(uri=QUESTIONS_URI, sparse_type="collection")
        await engine.load(questions, include_items=False)
        item = questions.items[0]
        transport.respond("GET", QUESTION_URI, question())
        await engine.load(item)

        removed = engine.remove_collection_item(questions, item)

        assert removed is item
        assert [canonical_uri(i) for i in questions.items] == [SECOND_QUESTION_URI]
        assert engine.status(item) is Status.STALE
        assert engine.state(item).previous_status is Status.HYDRATED

    @pytest.mark.asyncio
    async def test_stale_item_refetched(self, engine, transport):
        item = await hydrated(engine, transport)
        questions = engine.make(uri=QUESTIONS_URI, sparse_type="collection")
        questions.items.append(item)
        engine.remove_collection_item(questions, item)

        await engine.load(item)

        assert transport.count("GET", QUESTION_URI) == 2

    def test_not_found(self, engine):
        questions = engine.make(uri=QUESTIONS_URI, sparse_type="collection")
        assert engine.remove_collection_item(questions, engine.make(uri=QUESTION_URI)) is None
