"""Repository functions for cache rows.

Encapsulates the SQLAlchemy queries and returns domain entities (not
SQLAlchemy rows) to callers.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from pgs_stats.db.schema import CacheEntryRow
from pgs_stats.models.domain import CacheEntryEntity


def _row_to_entity(row: CacheEntryRow) -> CacheEntryEntity:
    """Convert SQLAlchemy CacheEntryRow to domain entity."""
    return CacheEntryEntity(
        cache_key=row.cache_key,
        saved_at=row.saved_at,
        summary_json=row.summary_json,
        records_json=row.records_json,
        updated_at=row.updated_at,
    )


def get_cache_entry(session: Session, cache_key: str) -> CacheEntryEntity | None:
    """Get cache entry by key."""
    row = session.get(CacheEntryRow, cache_key)
    return _row_to_entity(row) if row else None


def upsert_cache_entry(
    session: Session,
    cache_key: str,
    *,
    saved_at: str | None,
    summary_json: str,
    records_json: str | None,
) -> None:
    """Insert or overwrite the entry at cache_key (no merge).

    A single INSERT ... ON CONFLICT DO UPDATE, so concurrent writers to
    the same key resolve as last write wins instead of a key collision.
    """
    stmt = sqlite_insert(CacheEntryRow).values(
        cache_key=cache_key,
        saved_at=saved_at,
        summary_json=summary_json,
        records_json=records_json,
        updated_at=datetime.now(timezone.utc),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[CacheEntryRow.cache_key],
        set_={
            "saved_at": stmt.excluded.saved_at,
            "summary_json": stmt.excluded.summary_json,
            "records_json": stmt.excluded.records_json,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    session.execute(stmt)
