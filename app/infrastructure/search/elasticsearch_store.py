"""Elasticsearch index store.

Implements IIndexStore over the async Elasticsearch client. Query and
highlight values are rendered with to_dict(); client errors are wrapped
in IndexStoreException so nothing above this module depends on the
client library.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from elasticsearch import ApiError, AsyncElasticsearch, NotFoundError, TransportError

from app.application.dtos.search import SearchDocument, SearchHit
from app.application.services.query_builder import HighlightSpec, Query
from app.core.config import Settings
from app.domain.exceptions import IndexStoreException
from app.infrastructure.search.index_mapping import INDEX_MAPPINGS, INDEX_SETTINGS

logger = logging.getLogger(__name__)

_CLIENT_ERRORS = (ApiError, TransportError)

_ALREADY_EXISTS = "resource_already_exists_exception"


def _reason(error: Exception) -> str:
    if isinstance(error, ApiError):
        return f"{error.meta.status} {error.message}"
    if isinstance(error, TransportError):
        # str() of a transport error is a fixed label; the cause is in message and errors
        causes = [f"{type(cause).__name__}: {cause}" for cause in error.errors]
        return "; ".join([str(error.message), *causes])
    return str(error) or type(error).__name__


def _to_hit(raw: dict[str, Any]) -> SearchHit:
    source = raw.get("_source") or {}
    return SearchHit(
        id=str(source.get("id", raw["_id"])),
        source=source,
        score=raw.get("_score"),
        highlight=raw.get("highlight") or {},
    )


class ElasticsearchIndexStore:
    """Catalog documents in one Elasticsearch index, keyed by item id.

    With create_index set, the index is created with its mapping before the
    first write, search or readiness check that finds it missing, until
    that succeeds once. Writing to a missing index would otherwise let
    Elasticsearch create it with a dynamic mapping that lacks
    name.auto_complete and category.raw.
    """

    def __init__(
        self,
        client: AsyncElasticsearch,
        index_name: str,
        refresh_on_write: bool = True,
        create_index: bool = True,
    ) -> None:
        self.client = client
        self.index_name = index_name
        self.refresh_on_write = refresh_on_write
        self.create_index = create_index
        self._index_ready = False
        self._index_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> ElasticsearchIndexStore:
        """Build a store with a client configured from settings."""
        basic_auth = None
        if settings.elasticsearch_username and settings.elasticsearch_password:
            basic_auth = (
                settings.elasticsearch_username,
                settings.elasticsearch_password.get_secret_value(),
            )
        client = AsyncElasticsearch(
            settings.elasticsearch_url,
            basic_auth=basic_auth,
            request_timeout=settings.elasticsearch_request_timeout,
        )
        return cls(
            client,
            settings.elasticsearch_index,
            refresh_on_write=settings.elasticsearch_refresh_on_write,
            create_index=settings.elasticsearch_create_index,
        )

    @property
    def _refresh(self) -> str | bool:
        return "wait_for" if self.refresh_on_write else False

    async def ensure_index(self) -> bool:
        """Create the index with its mapping if missing. Return True when created."""
        try:
            if await self.client.indices.exists(index=self.index_name):
                self._index_ready = True
                return False
            await self.client.indices.create(
                index=self.index_name,
                settings=INDEX_SETTINGS,
                mappings=INDEX_MAPPINGS,
            )
        except ApiError as e:
            if e.message != _ALREADY_EXISTS:
                raise IndexStoreException("ensure_index", _reason(e)) from e
            self._index_ready = True
            return False
        except TransportError as e:
            raise IndexStoreException("ensure_index", _reason(e)) from e
        self._index_ready = True
        logger.info("Created search index %s", self.index_name)
        return True

    async def _require_index(self) -> None:
        if self._index_ready or not self.create_index:
            return
        async with self._index_lock:
            if not self._index_ready:
                await self.ensure_index()

    async def upsert(self, document_id: str, document: SearchDocument) -> None:
        await self._require_index()
        try:
            await self.client.index(
                index=self.index_name,
                id=document_id,
                document=document.to_source(),
                refresh=self._refresh,
            )
        except _CLIENT_ERRORS as e:
            raise IndexStoreException("upsert", _reason(e)) from e

    async def delete_by_id(self, document_id: str) -> None:
        """Delete the document; a missing document is treated as already deleted."""
        await self._require_index()
        try:
            await self.client.delete(
                index=self.index_name,
                id=document_id,
                refresh=self._refresh,
            )
        except NotFoundError:
            logger.debug("Index document %s already absent", document_id)
        except _CLIENT_ERRORS as e:
            raise IndexStoreException("delete", _reason(e)) from e

    async def search(
        self,
        query: Query,
        highlight: HighlightSpec | None,
        offset: int,
        limit: int,
    ) -> list[SearchHit]:
        kwargs: dict[str, Any] = {
            "index": self.index_name,
            "query": query.to_dict(),
            "from_": offset,
            "size": limit,
        }
        if highlight is not None:
            kwargs["highlight"] = highlight.to_dict()
        await self._require_index()
        try:
            response = await self.client.search(**kwargs)
        except _CLIENT_ERRORS as e:
            raise IndexStoreException("search", _reason(e)) from e
        return [_to_hit(raw) for raw in response["hits"]["hits"]]

    async def ping(self) -> bool:
        """True when the cluster answers and the index exists with its mapping."""
        try:
            if not await self.client.ping():
                return False
            if self.create_index:
                await self._require_index()
                return True
            return bool(await self.client.indices.exists(index=self.index_name))
        except _CLIENT_ERRORS as e:
            logger.warning("Elasticsearch ping failed: %s", _reason(e))
        except IndexStoreException as e:
            logger.warning("Search index %s unavailable: %s", self.index_name, e.details["reason"])
        return False

    async def close(self) -> None:
        await self.client.close()
        logger.info("Elasticsearch client closed")
