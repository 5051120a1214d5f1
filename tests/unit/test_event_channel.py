"""Tests for the in-process event channel."""

import pytest

from app.application.events import ItemDeleted
from app.infrastructure.messaging.event_channel import InProcessEventChannel


async def test_handlers_run_in_subscription_order() -> None:
    channel = InProcessEventChannel()
    seen: list[tuple[str, str]] = []

    async def first(event) -> None:
        seen.append(("first", event.item_id))

    async def second(event) -> None:
        seen.append(("second", event.item_id))

    channel.subscribe(first)
    channel.subscribe(second)
    await channel.publish(ItemDeleted(item_id="x"))
    await channel.publish(ItemDeleted(item_id="y"))
    assert seen == [("first", "x"), ("second", "x"), ("first", "y"), ("second", "y")]


async def test_duplicate_subscription_is_ignored() -> None:
    channel = InProcessEventChannel()

    async def handler(event) -> None:
        return None

    channel.subscribe(handler)
    channel.subscribe(handler)
    assert channel.handler_count == 1
    channel.unsubscribe(handler)
    assert channel.handler_count == 0


async def test_handler_error_propagates_and_stops_delivery() -> None:
    channel = InProcessEventChannel()
    reached: list[str] = []

    async def failing(event) -> None:
        raise RuntimeError("index down")

    async def after(event) -> None:
        reached.append(event.item_id)

    channel.subscribe(failing)
    channel.subscribe(after)
    with pytest.raises(RuntimeError, match="index down"):
        await channel.publish(ItemDeleted(item_id="x"))
    assert reached == []


async def test_publish_without_handlers_is_a_no_op() -> None:
    await InProcessEventChannel().publish(ItemDeleted(item_id="x"))
