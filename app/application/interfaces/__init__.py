"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    ICatalogItemRepository,
    IOutboxRepository,
    IUnitOfWork,
    UnitOfWorkFactory,
)
from app.application.interfaces.services import (
    EventHandler,
    IEventChannel,
    IIndexStore,
)

__all__ = [
    "EventHandler",
    "ICatalogItemRepository",
    "IEventChannel",
    "IIndexStore",
    "IOutboxRepository",
    "IUnitOfWork",
    "UnitOfWorkFactory",
]
