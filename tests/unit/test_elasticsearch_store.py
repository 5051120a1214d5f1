"""Tests for ElasticsearchIndexStore against a mocked AsyncElasticsearch client."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import ConnectionError as ESConnectionError
from elasticsearch import ApiError, NotFoundError

from app.application.dtos.search import SearchDocument
from app.application.services.query_builder import (
    SearchCriteria,
    build_name_highlight,
    build_search_query,
    build_suggest_query,
)
from app.domain.exceptions import IndexStoreException
from app.infrastructure.search.elasticsearch_store import ElasticsearchIndexStore
from app.infrastructure.search.index_mapping import INDEX_MAPPINGS, INDEX_SETTINGS


def _meta(status: int) -> ApiResponseMeta:
    return ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )


def _document() -> SearchDocument:
    return SearchDocument(
        id="item1",
        name="SnackA",
        description="salty",
        price=1200,
        rating=4.3,
        category="snack",
    )


@pytest.fixture
def client() -> MagicMock:
    es = MagicMock()
    es.index = AsyncMock()
    es.delete = AsyncMock()
    es.search = AsyncMock(return_value={"hits": {"hits": []}})
    es.ping = AsyncMock(return_value=True)
    es.close = AsyncMock()
    es.indices.exists = AsyncMock(return_value=False)
    es.indices.create = AsyncMock()
    return es


@pytest.fixture
def store(client: MagicMock) -> ElasticsearchIndexStore:
    return ElasticsearchIndexStore(client, "products")


async def test_upsert_indexes_document_by_id(store, client) -> None:
    await store.upsert("item1", _document())
    client.index.assert_awaited_once_with(
        index="products",
        id="item1",
        document=_document().to_source(),
        refresh="wait_for",
    )


async def test_upsert_without_refresh(client) -> None:
    store = ElasticsearchIndexStore(client, "products", refresh_on_write=False)
    await store.upsert("item1", _document())
    assert client.index.await_args.kwargs["refresh"] is False


async def test_upsert_error_is_wrapped(store, client) -> None:
    client.index.side_effect = ESConnectionError("connection refused")
    with pytest.raises(IndexStoreException) as exc_info:
        await store.upsert("item1", _document())
    assert exc_info.value.details["operation"] == "upsert"
    assert "connection refused" in exc_info.value.details["reason"]


async def test_delete_missing_document_is_ignored(store, client) -> None:
    client.delete.side_effect = NotFoundError("not_found", meta=_meta(404), body={})
    await store.delete_by_id("gone")
    client.delete.assert_awaited_once()


async def test_delete_api_error_is_wrapped(store, client) -> None:
    client.delete.side_effect = ApiError("cluster_block_exception", meta=_meta(403), body={})
    with pytest.raises(IndexStoreException) as exc_info:
        await store.delete_by_id("item1")
    assert exc_info.value.details["reason"].startswith("403")


async def test_search_renders_query_and_maps_hits(store, client) -> None:
    client.search.return_value = {
        "hits": {
            "hits": [
                {
                    "_id": "item1",
                    "_score": 2.5,
                    "_source": _document().to_source(),
                    "highlight": {"name": ["<b>SnackA</b>"]},
                },
                {"_id": "item2", "_score": 1.0, "_source": {**_document().to_source(), "id": "item2"}},
            ]
        }
    }
    query = build_search_query(
        SearchCriteria(query="snacka", category=None, min_price=0.0, max_price=1e9)
    )
    highlight = build_name_highlight("<b>", "</b>")
    hits = await store.search(query, highlight, 5, 5)

    kwargs = client.search.await_args.kwargs
    assert kwargs["index"] == "products"
    assert kwargs["query"] == query.to_dict()
    assert kwargs["highlight"] == highlight.to_dict()
    assert (kwargs["from_"], kwargs["size"]) == (5, 5)
    assert [h.id for h in hits] == ["item1", "item2"]
    assert hits[0].highlight == {"name": ["<b>SnackA</b>"]}
    assert hits[1].highlight == {}


async def test_search_without_highlight(store, client) -> None:
    await store.search(build_suggest_query("sn"), None, 0, 5)
    assert "highlight" not in client.search.await_args.kwargs


async def test_search_error_is_wrapped(store, client) -> None:
    client.search.side_effect = ESConnectionError("timeout")
    with pytest.raises(IndexStoreException):
        await store.search(build_suggest_query("sn"), None, 0, 5)


async def test_ensure_index_creates_missing_index(store, client) -> None:
    assert await store.ensure_index() is True
    client.indices.create.assert_awaited_once_with(
        index="products", settings=INDEX_SETTINGS, mappings=INDEX_MAPPINGS
    )


async def test_ensure_index_keeps_existing_index(store, client) -> None:
    client.indices.exists.return_value = True
    assert await store.ensure_index() is False
    client.indices.create.assert_not_awaited()


def test_mapping_has_autocomplete_and_raw_category() -> None:
    props = INDEX_MAPPINGS["properties"]
    assert props["name"]["fields"]["auto_complete"]["type"] == "search_as_you_type"
    assert props["category"]["fields"]["raw"]["type"] == "keyword"
    assert props["price"]["type"] == "integer"


async def test_ping_and_close(store, client) -> None:
    assert await store.ping() is True
    client.ping.side_effect = ESConnectionError("down")
    assert await store.ping() is False
    await store.close()
    client.close.assert_awaited_once()


async def test_transport_error_reason_keeps_cause(store, client) -> None:
    client.index.side_effect = ESConnectionError(
        "Connection error", errors=(OSError("[Errno 111] Connection refused"),)
    )
    with pytest.raises(IndexStoreException) as exc_info:
        await store.upsert("item1", _document())
    reason = exc_info.value.details["reason"]
    assert "Connection error" in reason
    assert "OSError: [Errno 111] Connection refused" in reason


async def test_missing_index_is_created_before_first_write(store, client) -> None:
    await store.upsert("item1", _document())
    await store.upsert("item1", _document())
    client.indices.create.assert_awaited_once_with(
        index="products", settings=INDEX_SETTINGS, mappings=INDEX_MAPPINGS
    )
    assert client.index.await_count == 2


async def test_index_creation_is_retried_after_failure(store, client) -> None:
    client.indices.create.side_effect = [ESConnectionError("down"), None]
    with pytest.raises(IndexStoreException) as exc_info:
        await store.search(build_suggest_query("sn"), None, 0, 5)
    assert exc_info.value.details["operation"] == "ensure_index"
    client.search.assert_not_awaited()

    await store.search(build_suggest_query("sn"), None, 0, 5)
    assert client.indices.create.await_count == 2
    client.search.assert_awaited_once()


async def test_existing_index_is_not_recreated(store, client) -> None:
    client.indices.exists.return_value = True
    await store.delete_by_id("item1")
    await store.delete_by_id("item2")
    client.indices.exists.assert_awaited_once()
    client.indices.create.assert_not_awaited()


async def test_index_created_concurrently_counts_as_ready(store, client) -> None:
    client.indices.create.side_effect = ApiError(
        "resource_already_exists_exception", meta=_meta(400), body={}
    )
    assert await store.ensure_index() is False
    await store.upsert("item1", _document())
    client.indices.create.assert_awaited_once()
    client.index.assert_awaited_once()


async def test_no_index_creation_when_disabled(client) -> None:
    store = ElasticsearchIndexStore(client, "products", create_index=False)
    await store.upsert("item1", _document())
    client.indices.create.assert_not_awaited()


async def test_ping_is_false_while_index_cannot_be_created(store, client) -> None:
    client.indices.create.side_effect = ApiError("security_exception", meta=_meta(403), body={})
    assert await store.ping() is False
    client.indices.create.side_effect = None
    assert await store.ping() is True


async def test_ping_is_false_when_index_missing_and_creation_disabled(client) -> None:
    store = ElasticsearchIndexStore(client, "products", create_index=False)
    assert await store.ping() is False
    client.indices.exists.return_value = True
    assert await store.ping() is True
    client.indices.create.assert_not_awaited()
