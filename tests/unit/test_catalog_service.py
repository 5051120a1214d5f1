"""Tests for CatalogService: commit-gated events, batch order, failures, outbox."""

import pytest

from app.application.events import ItemCreated, ItemDeleted
from app.domain.exceptions import (
    IndexSynchronizationException,
    ValidationException,
)
from tests.fakes import make_item


@pytest.fixture
def recorded(container) -> list:
    """Events observed on the channel (subscribed after the synchronizer)."""
    events: list = []

    async def record(event) -> None:
        events.append(event)

    container.event_channel.subscribe(record)
    return events


async def _pending(container) -> list:
    async with container.uow_factory() as uow:
        return await uow.outbox.list_pending(100)


async def test_create_returns_request_fields_with_new_id(container, recorded) -> None:
    request = make_item(name="SnackA", description="salty", price=1200, rating=4.3, category="snack")
    item = await container.catalog_service.create(request)
    assert item.id
    assert (item.name, item.description, item.price, item.rating, item.category) == (
        "SnackA",
        "salty",
        1200,
        4.3,
        "snack",
    )


async def test_ids_are_unique(container) -> None:
    items = [await container.catalog_service.create(make_item(name=f"n{i}")) for i in range(5)]
    assert len({i.id for i in items}) == 5


async def test_create_emits_item_created_after_commit(container, recorded, index_store) -> None:
    """The handler can already read the item from a fresh transaction."""
    visible: list[bool] = []

    async def check_committed(event) -> None:
        async with container.uow_factory() as uow:
            visible.append(await uow.items.get_by_id(event.item_id) is not None)

    container.event_channel.subscribe(check_committed)
    item = await container.catalog_service.create(make_item())
    assert [type(e) for e in recorded] == [ItemCreated]
    assert recorded[0].item == item
    assert visible == [True]
    assert index_store.documents[item.id]["name"] == item.name


async def test_batch_emits_one_event_per_item_in_input_order(container, recorded) -> None:
    items = await container.catalog_service.create_batch(
        [make_item(name="first"), make_item(name="second")]
    )
    assert [i.name for i in items] == ["first", "second"]
    assert len(recorded) == 2
    assert [e.item.name for e in recorded] == ["first", "second"]
    assert [e.item_id for e in recorded] == [i.id for i in items]


async def test_empty_batch_does_nothing(container, recorded) -> None:
    assert await container.catalog_service.create_batch([]) == []
    assert recorded == []


async def test_validation_failure_touches_no_store(container, recorded, index_store) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await container.catalog_service.create(make_item(name="   "))
    assert exc_info.value.details == {"field": "name"}
    assert recorded == []
    assert index_store.operations == []
    assert await container.catalog_service.list_items() == []


async def test_invalid_item_in_batch_rejects_whole_batch(container, recorded) -> None:
    with pytest.raises(ValidationException):
        await container.catalog_service.create_batch(
            [make_item(name="ok"), make_item(price=-1)]
        )
    assert recorded == []
    assert await container.catalog_service.list_items() == []


async def test_delete_emits_item_deleted(container, recorded, index_store) -> None:
    item = await container.catalog_service.create(make_item())
    await container.catalog_service.delete(item.id)
    assert isinstance(recorded[-1], ItemDeleted)
    assert recorded[-1].item_id == item.id
    assert item.id not in index_store.documents


async def test_delete_missing_id_still_emits_item_deleted(container, recorded, index_store) -> None:
    await container.catalog_service.delete("does-not-exist")
    assert [type(e) for e in recorded] == [ItemDeleted]
    assert recorded[0].item_id == "does-not-exist"
    assert index_store.operations == [("delete", "does-not-exist")]
    assert await _pending(container) == []


async def test_retried_delete_removes_document_left_by_failed_index_delete(
    container, index_store
) -> None:
    item = await container.catalog_service.create(make_item())
    index_store.fail_next("delete")
    with pytest.raises(IndexSynchronizationException):
        await container.catalog_service.delete(item.id)
    assert item.id in index_store.documents

    await container.catalog_service.delete(item.id)
    assert item.id not in index_store.documents


async def test_index_failure_propagates_after_commit(container, index_store) -> None:
    """The item is persisted even though the caller sees the sync failure."""
    index_store.fail_next("upsert")
    with pytest.raises(IndexSynchronizationException) as exc_info:
        await container.catalog_service.create(make_item(name="persisted"))
    assert exc_info.value.details["persisted"] is True

    listed = await container.catalog_service.list_items()
    assert [i.name for i in listed] == ["persisted"]
    assert listed[0].id == exc_info.value.details["item_id"]
    assert index_store.documents == {}


async def test_outbox_rows_settled_after_successful_dispatch(container) -> None:
    item = await container.catalog_service.create(make_item())
    await container.catalog_service.delete(item.id)
    assert await _pending(container) == []


async def test_failed_dispatch_leaves_outbox_row_pending(container, index_store) -> None:
    index_store.fail_next("upsert")
    with pytest.raises(IndexSynchronizationException):
        await container.catalog_service.create(make_item())
    pending = await _pending(container)
    assert len(pending) == 1
    assert pending[0].event_type == "item_created"
    assert pending[0].attempts == 1
    assert "injected failure" in pending[0].last_error


async def test_batch_failure_settles_published_prefix(container, index_store) -> None:
    """Events before the failing one are dispatched; it and the rest stay pending."""
    original_upsert = index_store.upsert
    calls = {"n": 0}

    async def fail_second(document_id, document):
        calls["n"] += 1
        if calls["n"] == 2:
            index_store.fail_next("upsert")
        await original_upsert(document_id, document)

    index_store.upsert = fail_second
    with pytest.raises(IndexSynchronizationException):
        await container.catalog_service.create_batch(
            [make_item(name="a"), make_item(name="b"), make_item(name="c")]
        )
    pending = await _pending(container)
    assert [p.payload["name"] for p in pending] == ["b", "c"]
    assert pending[0].attempts == 1
    assert pending[1].attempts == 0


async def test_list_items_paginates(container) -> None:
    await container.catalog_service.create_batch([make_item(name=f"n{i}") for i in range(12)])
    assert len(await container.catalog_service.list_items()) == 10
    assert len(await container.catalog_service.list_items(page=2)) == 2
    assert len(await container.catalog_service.list_items(page=0, size=1000)) == 12
    assert len(await container.catalog_service.list_items(page=1, size=0)) == 1
