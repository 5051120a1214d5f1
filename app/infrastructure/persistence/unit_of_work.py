"""SQLAlchemy Unit of Work with post-commit callbacks.

One session and one transaction per `async with`. Repositories are bound
to the session on enter. Callbacks registered with after_commit run only
when the block exits cleanly and the commit succeeded; they run after the
session is closed, in registration order, and their exceptions propagate
to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.infrastructure.persistence.repositories.catalog_item_repo import (
    CatalogItemRepository,
)
from app.infrastructure.persistence.repositories.outbox_repo import OutboxRepository

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """Transaction boundary over an AsyncSession."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._items: CatalogItemRepository | None = None
        self._outbox: OutboxRepository | None = None
        self._callbacks: list[Callable[[], Awaitable[None]]] = []

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise RuntimeError("Unit of work is already active")
        self._session = self._session_factory()
        await self._session.begin()
        self._items = CatalogItemRepository(self._session)
        self._outbox = OutboxRepository(self._session)
        self._callbacks = []
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        session = self.session
        callbacks = self._callbacks
        try:
            if exc_type is not None:
                await session.rollback()
                callbacks = []
            else:
                try:
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        finally:
            await session.close()
            self._session = None
            self._items = None
            self._outbox = None
            self._callbacks = []
        for callback in callbacks:
            await callback()

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("No active session in unit of work")
        return self._session

    @property
    def items(self) -> CatalogItemRepository:
        if self._items is None:
            raise RuntimeError("No active session in unit of work")
        return self._items

    @property
    def outbox(self) -> OutboxRepository:
        if self._outbox is None:
            raise RuntimeError("No active session in unit of work")
        return self._outbox

    def after_commit(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Run callback after a successful commit; dropped on rollback."""
        if self._session is None:
            raise RuntimeError("after_commit requires an active unit of work")
        self._callbacks.append(callback)


def unit_of_work_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SqlAlchemyUnitOfWork]:
    """Return a zero-argument factory producing a fresh unit of work per call."""

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory)

    return factory
