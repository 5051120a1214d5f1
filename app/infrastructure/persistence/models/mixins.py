"""Column mixins shared by the catalog tables."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.shared.utils.generators import generate_cuid


class CuidMixin:
    """String primary key generated client-side (cuid2), so ids are known before flush."""

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_cuid)


class CreatedAtMixin:
    """Insertion time set by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class TimestampMixin(CreatedAtMixin):
    """created_at plus updated_at, refreshed by the ORM on UPDATE."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
