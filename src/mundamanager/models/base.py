"""Declarative base and timestamp mixins shared by every Munda Manager table."""

from datetime import UTC, datetime
from typing import ClassVar

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Stable constraint names keep drop_all/create_all symmetric across backends.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utc_now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all models; ``datetime`` columns are timezone-aware."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
    }


class TimestampCreatedMixin:
    """``created_at`` only, for rows that are written once (logs, skills, effects)."""

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)


class TimestampMixin(TimestampCreatedMixin):
    """Adds ``updated_at``, refreshed by the database on every update."""

    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
    )
