"""Rebuild the search index from the authoritative store."""

from __future__ import annotations

import logging

from app.application.interfaces.repositories import UnitOfWorkFactory
from app.application.services.index_synchronizer import IndexSynchronizer
from app.shared.telemetry.tracing import TracedOperation

logger = logging.getLogger(__name__)


class ReindexService:
    """Re-upsert a SearchDocument for every catalog item (the index is derived data)."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        synchronizer: IndexSynchronizer,
        batch_size: int = 500,
    ) -> None:
        self.uow_factory = uow_factory
        self.synchronizer = synchronizer
        self.batch_size = batch_size

    async def reindex_all(self) -> int:
        """Stream all items and upsert them. Return the number of documents written."""
        async with TracedOperation("catalog.reindex", {"batch_size": self.batch_size}) as op:
            async with self.uow_factory() as uow:
                written = await self.synchronizer.rebuild(
                    uow.items.iter_all(self.batch_size)
                )
            if op.span is not None:
                op.span.set_attribute("documents_written", written)
        logger.info("Reindexed %d catalog items", written)
        return written
