"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no
business logic here, only wiring of infrastructure (telemetry, SQL
engine and schema, Elasticsearch store, service container, outbox relay).
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.domain.exceptions import IndexStoreException
from app.infrastructure.container import build_container
from app.infrastructure.persistence.database import (
    create_schema,
    dispose_engine,
    get_engine,
    get_session_factory,
)
from app.infrastructure.search.elasticsearch_store import ElasticsearchIndexStore
from app.shared.telemetry.telemetry import get_telemetry, init_telemetry, set_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: SQL engine, telemetry (if enabled), schema, index
    store, service container, outbox relay task (if an interval is set).
    Shutdown runs in reverse.
    """
    settings = get_settings()

    # ---- Startup ----
    engine = get_engine()
    if settings.telemetry_enabled:
        init_telemetry(settings, app, engine)

    if settings.database_create_schema:
        await create_schema(engine)

    index_store = ElasticsearchIndexStore.from_settings(settings)
    if settings.elasticsearch_create_index:
        try:
            await index_store.ensure_index()
        except IndexStoreException as e:
            # Retried before the first index operation; readiness reports false until then
            logger.warning("Could not ensure search index %s: %s", index_store.index_name, e.details)

    container = build_container(settings, get_session_factory(), index_store)
    app.state.container = container

    relay_task: asyncio.Task | None = None
    if settings.outbox_enabled and settings.outbox_relay_interval_seconds > 0:
        relay_task = asyncio.create_task(
            container.outbox_relay.run_forever(
                settings.outbox_relay_interval_seconds,
                settings.outbox_relay_batch_size,
            )
        )
        logger.info(
            "Outbox relay started (every %ss)", settings.outbox_relay_interval_seconds
        )

    yield

    # ---- Shutdown ----
    if relay_task is not None:
        relay_task.cancel()
        try:
            await relay_task
        except asyncio.CancelledError:
            pass
        logger.info("Outbox relay stopped")

    await index_store.close()

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    await dispose_engine()
