"""Composition root shared by the API lifespan, the scripts and the tests.

Wires the unit of work, the event channel, the index synchronizer and
the application services around one session factory and one index store.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.interfaces.repositories import UnitOfWorkFactory
from app.application.interfaces.services import IIndexStore
from app.application.services.index_synchronizer import IndexSynchronizer
from app.application.services.outbox_relay import OutboxRelay
from app.application.use_cases.catalog import CatalogService, ReindexService
from app.application.use_cases.search import SearchService
from app.core.config import Settings
from app.infrastructure.messaging.event_channel import InProcessEventChannel
from app.infrastructure.persistence.unit_of_work import unit_of_work_factory


@dataclass
class CatalogContainer:
    """Application services and the collaborators they share."""

    session_factory: async_sessionmaker[AsyncSession]
    uow_factory: UnitOfWorkFactory
    index_store: IIndexStore
    event_channel: InProcessEventChannel
    synchronizer: IndexSynchronizer
    catalog_service: CatalogService
    search_service: SearchService
    outbox_relay: OutboxRelay
    reindex_service: ReindexService


def build_container(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    index_store: IIndexStore,
) -> CatalogContainer:
    """Build services; the synchronizer is subscribed to the channel here."""
    uow_factory = unit_of_work_factory(session_factory)
    channel = InProcessEventChannel()
    synchronizer = IndexSynchronizer(
        index_store, tombstone_capacity=settings.index_sync_tombstone_capacity
    )
    channel.subscribe(synchronizer.handle)
    return CatalogContainer(
        session_factory=session_factory,
        uow_factory=uow_factory,
        index_store=index_store,
        event_channel=channel,
        synchronizer=synchronizer,
        catalog_service=CatalogService(
            uow_factory, channel, outbox_enabled=settings.outbox_enabled
        ),
        search_service=SearchService(
            index_store,
            highlight_pre_tag=settings.highlight_pre_tag,
            highlight_post_tag=settings.highlight_post_tag,
        ),
        outbox_relay=OutboxRelay(uow_factory, channel),
        reindex_service=ReindexService(uow_factory, synchronizer),
    )
