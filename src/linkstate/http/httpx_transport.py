"""
Default transport over ``httpx.AsyncClient``.

Resolves the operation's link relation on the resource, sends JSON, and
decodes JSON responses. Non-2xx responses raise
:class:`~linkstate.core.errors.HttpRequestError`; connection failures and
timeouts raise :class:`~linkstate.core.errors.NetworkError`.

Usage:
    async with HttpxTransport() as transport:
        engine = SyncEngine(transport)
        await engine.load(engine.make(uri="https://api.example.com/"))
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from linkstate.core.errors import (
    HttpRequestError,
    MissingLinkError,
    NetworkError,
    RepresentationError,
)
from linkstate.core.logging import get_logger
from linkstate.core.settings import LinkStateSettings, get_settings
from linkstate.http.transport import HttpResponse
from linkstate.representation.links import RelationType, canonical_uri, get_uri, rel_name
from linkstate.representation.model import LinkedResource
from linkstate.representation.options import ResourceOptions

logger = get_logger(__name__)


class HttpxTransport:
    """:class:`~linkstate.http.Transport` implementation backed by httpx."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        settings: LinkStateSettings | None = None,
    ):
        self.settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.http_timeout,
                headers={"Accept": self.settings.accept},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    # ── Transport protocol ───────────────────────────────────────────

    async def load(
        self, resource: LinkedResource, rel: RelationType, options: ResourceOptions
    ) -> HttpResponse:
        return await self._send("GET", self._resolve(resource, rel, options.media_type))

    async def create(
        self, resource: LinkedResource, document: Any, options: ResourceOptions
    ) -> HttpResponse:
        url = self._resolve(resource, options.rel, options.media_type)
        return await self._send("POST", url, json=_encode(document))

    async def update(
        self, resource: LinkedResource, document: Any, options: ResourceOptions
    ) -> HttpResponse:
        url = self._resolve(resource, options.rel, options.media_type)
        return await self._send("PUT", url, json=_encode(document))

    async def delete(self, resource: LinkedResource, options: ResourceOptions) -> HttpResponse:
        return await self._send("DELETE", self._resolve(resource, options.rel, options.media_type))

    # ── Internals ────────────────────────────────────────────────────

    @staticmethod
    def _resolve(resource: LinkedResource, rel: RelationType, media_type: str | None) -> str:
        uri = get_uri(resource, rel, media_type)
        if uri is None:
            raise MissingLinkError(rel_name(rel), canonical_uri(resource))
        return uri

    async def _send(self, method: str, url: str, json: Any = None) -> HttpResponse:
        logger.debug("http.request", method=method, url=url)
        try:
            response = await self.client.request(method, url, json=json)
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {url} failed: {e}", cause=e).with_context(
                uri=url, operation=method
            ) from e

        if response.is_error:
            logger.debug("http.error", method=method, url=url, status=response.status_code)
            raise HttpRequestError(
                f"{method} {url} returned {response.status_code}",
                status=response.status_code,
                headers=dict(response.headers),
                status_text=response.reason_phrase,
            ).with_context(uri=url, operation=method)

        return HttpResponse(
            status=response.status_code,
            headers=dict(response.headers),
            data=_decode(response),
        )


def _encode(document: Any) -> Any:
    if isinstance(document, LinkedResource):
        return document.to_dict()
    if isinstance(document, Mapping):
        return dict(document)
    return document


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" not in content_type:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise RepresentationError(
            f"Response from {response.request.url} is not valid JSON", cause=e
        ) from e
