"""Database schema for pgs-stats.

A single key-value table holds the cached snapshot for each resource
kind. One row per key: saves overwrite in place.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class CacheEntryRow(Base):
    """Cached summary snapshot for one resource kind.

    saved_at is kept as the ISO-8601 text it was written with so that a
    corrupt or foreign value is readable (and then judged not fresh)
    instead of failing the row load.
    """

    __tablename__ = "cache_entries"

    cache_key: Mapped[str] = mapped_column(String(128), primary_key=True)
    saved_at: Mapped[str | None] = mapped_column(String(64), nullable=True)
    summary_json: Mapped[str] = mapped_column(Text, nullable=False)
    records_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
