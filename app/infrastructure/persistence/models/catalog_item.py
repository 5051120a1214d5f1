"""CatalogItem ORM model. System of record for catalog entries."""

from sqlalchemy import Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class CatalogItem(CuidMixin, TimestampMixin, Base):
    """Catalog item. Table: catalog_item. Index: (created_at, id) for paging."""

    __tablename__ = "catalog_item"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    __table_args__ = (Index("ix_catalog_item_created_id", "created_at", "id"),)
