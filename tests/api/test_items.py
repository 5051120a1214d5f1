"""HTTP tests for /api/v1/items (create, bulk, delete, list, search, suggestions)."""

import pytest
from httpx import AsyncClient

SNACK_A = {
    "name": "SnackA",
    "description": "salty",
    "price": 1200,
    "rating": 4.3,
    "category": "snack",
}


async def test_create_returns_201_with_generated_id(client: AsyncClient) -> None:
    response = await client.post("/api/v1/items", json=SNACK_A)
    assert response.status_code == 201
    data = response.json()
    assert data["id"]
    assert {k: data[k] for k in SNACK_A} == SNACK_A


async def test_create_search_delete_scenario(client: AsyncClient) -> None:
    """Created item is searchable; after delete the same search is empty."""
    created = (await client.post("/api/v1/items", json=SNACK_A)).json()

    response = await client.get("/api/v1/items/search", params={"query": "SnackA"})
    assert response.status_code == 200
    results = response.json()
    assert len(results) == 1
    assert results[0]["name"] == "SnackA"
    assert results[0]["id"] == created["id"]
    assert results[0]["highlightedName"] == "<b>SnackA</b>"

    delete = await client.delete(f"/api/v1/items/{created['id']}")
    assert delete.status_code == 204
    assert delete.content == b""

    response = await client.get("/api/v1/items/search", params={"query": "SnackA"})
    assert response.json() == []


async def test_bulk_create_emits_events_in_order(client: AsyncClient, container) -> None:
    seen: list[str] = []

    async def record(event) -> None:
        seen.append(event.item.name)

    container.event_channel.subscribe(record)
    body = [{**SNACK_A, "name": "first"}, {**SNACK_A, "name": "second"}]
    response = await client.post("/api/v1/items/bulk", json=body)
    assert response.status_code == 201
    assert [i["name"] for i in response.json()] == ["first", "second"]
    assert seen == ["first", "second"]


async def test_search_result_without_name_match_has_null_highlight(client: AsyncClient) -> None:
    await client.post("/api/v1/items", json=SNACK_A)
    response = await client.get("/api/v1/items/search", params={"query": "salty"})
    results = response.json()
    assert len(results) == 1
    assert results[0]["highlightedName"] is None


async def test_search_filters_by_category_and_price(client: AsyncClient) -> None:
    await client.post(
        "/api/v1/items/bulk",
        json=[
            {**SNACK_A, "name": "Chips", "price": 500, "category": "snack"},
            {**SNACK_A, "name": "Chips Deluxe", "price": 5000, "category": "snack"},
            {**SNACK_A, "name": "Chips Dip", "price": 700, "category": "sauce"},
        ],
    )
    response = await client.get(
        "/api/v1/items/search",
        params={"query": "chips", "category": "snack", "minPrice": 100, "maxPrice": 1000},
    )
    assert [r["name"] for r in response.json()] == ["Chips"]


async def test_search_inverted_price_range_is_empty(client: AsyncClient) -> None:
    await client.post("/api/v1/items", json=SNACK_A)
    response = await client.get(
        "/api/v1/items/search",
        params={"query": "SnackA", "minPrice": 5000, "maxPrice": 10},
    )
    assert response.status_code == 200
    assert response.json() == []


async def test_search_clamps_paging(client: AsyncClient, index_store) -> None:
    response = await client.get(
        "/api/v1/items/search", params={"query": "x", "page": -3, "size": 1000}
    )
    assert response.status_code == 200
    call = index_store.search_calls[-1]
    assert (call["offset"], call["limit"]) == (0, 100)


async def test_search_page_beyond_result_window_is_clamped(
    client: AsyncClient, index_store
) -> None:
    response = await client.get(
        "/api/v1/items/search",
        params={"query": "x", "page": 10**19, "size": 7},
    )
    assert response.status_code == 200
    call = index_store.search_calls[-1]
    assert call["offset"] + call["limit"] <= 10_000
    assert call["limit"] == 7


async def test_search_requires_query(client: AsyncClient) -> None:
    response = await client.get("/api/v1/items/search")
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_blank_search_query_is_400(client: AsyncClient) -> None:
    response = await client.get("/api/v1/items/search", params={"query": "  "})
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "query"}


async def test_search_index_unavailable_is_503(client: AsyncClient, index_store) -> None:
    index_store.available = False
    response = await client.get("/api/v1/items/search", params={"query": "SnackA"})
    assert response.status_code == 503
    assert response.json()["error"] == "INDEX_STORE_ERROR"


async def test_suggestions_at_most_five(client: AsyncClient) -> None:
    await client.post(
        "/api/v1/items/bulk",
        json=[{**SNACK_A, "name": f"Snack {i}"} for i in range(8)],
    )
    response = await client.get("/api/v1/items/suggestions", params={"query": "sna"})
    assert response.status_code == 200
    names = response.json()
    assert len(names) == 5
    assert all(n.startswith("Snack") for n in names)


async def test_list_items_paging(client: AsyncClient) -> None:
    await client.post(
        "/api/v1/items/bulk",
        json=[{**SNACK_A, "name": f"item{i}"} for i in range(12)],
    )
    first = await client.get("/api/v1/items")
    assert first.status_code == 200
    assert len(first.json()) == 10
    second = await client.get("/api/v1/items", params={"page": 2, "size": 10})
    assert len(second.json()) == 2
    names = [i["name"] for i in first.json() + second.json()]
    assert names == [f"item{i}" for i in range(12)]


async def test_list_items_huge_page_is_empty(client: AsyncClient) -> None:
    await client.post("/api/v1/items", json=SNACK_A)
    response = await client.get("/api/v1/items", params={"page": 10**19})
    assert response.status_code == 200
    assert response.json() == []


async def test_delete_unknown_id_is_204_and_clears_index(client: AsyncClient, index_store) -> None:
    response = await client.delete("/api/v1/items/missing")
    assert response.status_code == 204
    assert index_store.operations == [("delete", "missing")]


@pytest.mark.parametrize(
    "body",
    [
        {**SNACK_A, "price": -1},
        {**SNACK_A, "rating": -0.5},
        {**SNACK_A, "name": ""},
        {k: v for k, v in SNACK_A.items() if k != "category"},
        {**SNACK_A, "price": 2**31},
    ],
)
async def test_create_schema_violation_is_400(client: AsyncClient, body: dict) -> None:
    response = await client.post("/api/v1/items", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_create_price_at_32_bit_limit_is_accepted(client: AsyncClient) -> None:
    response = await client.post("/api/v1/items", json={**SNACK_A, "price": 2**31 - 1})
    assert response.status_code == 201
    assert response.json()["price"] == 2**31 - 1


@pytest.mark.parametrize("rating", [b"Infinity", b"-Infinity", b"NaN"])
async def test_create_non_finite_rating_is_400(
    client: AsyncClient, index_store, rating: bytes
) -> None:
    body = (
        b'{"name": "SnackA", "description": "salty", "price": 1200, '
        b'"category": "snack", "rating": ' + rating + b"}"
    )
    response = await client.post(
        "/api/v1/items", content=body, headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
    assert index_store.operations == []


async def test_create_blank_name_is_400(client: AsyncClient, index_store) -> None:
    response = await client.post("/api/v1/items", json={**SNACK_A, "name": "   "})
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "name"}
    assert index_store.operations == []


async def test_malformed_json_is_400(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/items",
        content=b'{"name": "SnackA",',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_JSON"


async def test_index_failure_after_commit_is_502_and_item_persisted(
    client: AsyncClient, index_store
) -> None:
    index_store.fail_next("upsert")
    response = await client.post("/api/v1/items", json=SNACK_A)
    assert response.status_code == 502
    data = response.json()
    assert data["error"] == "INDEX_SYNC_FAILED"
    assert data["details"]["persisted"] is True

    listed = (await client.get("/api/v1/items")).json()
    assert [i["id"] for i in listed] == [data["details"]["item_id"]]
