"""Cache store for summary snapshots.

Wraps the cache_entries table behind save/load. Reads are soft: a
missing row, an unreachable database, or a payload that no longer
validates all come back as None. Writes raise CacheUnavailable.
"""

from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pgs_stats.db import repo
from pgs_stats.db.session import get_db_session
from pgs_stats.errors import CacheUnavailable
from pgs_stats.models.types import CacheEntry, Summary

logger = logging.getLogger(__name__)

_summary_adapter: TypeAdapter[Summary] = TypeAdapter(Summary)


class CacheStore:
    """Key-value store of CacheEntry snapshots."""

    def __init__(self, session_factory: sessionmaker[Session]):
        """Initialize store.

        Args:
            session_factory: Factory bound to a database with the schema created.
        """
        self.session_factory = session_factory

    def save(self, key: str, entry: CacheEntry) -> None:
        """Persist entry at key, overwriting any previous entry.

        Raises:
            CacheUnavailable: If the database cannot be written.
        """
        summary_json = entry.summary.model_dump_json()
        records_json = json.dumps(entry.records)

        try:
            with get_db_session(self.session_factory) as session:
                repo.upsert_cache_entry(
                    session,
                    key,
                    saved_at=entry.saved_at,
                    summary_json=summary_json,
                    records_json=records_json,
                )
        except SQLAlchemyError as e:
            raise CacheUnavailable(f"Could not save cache entry {key!r}: {e}") from e

        logger.info(f"Saved cache entry {key!r} ({len(entry.records)} records)")

    def load(self, key: str) -> CacheEntry | None:
        """Load the entry at key.

        Returns:
            The stored CacheEntry, or None if absent or unreadable.
        """
        try:
            with get_db_session(self.session_factory) as session:
                row = repo.get_cache_entry(session, key)
        except SQLAlchemyError as e:
            logger.warning(f"Cache unavailable, treating {key!r} as missing: {e}")
            return None

        if row is None:
            logger.debug(f"No cache entry for {key!r}")
            return None

        try:
            summary = _summary_adapter.validate_json(row.summary_json)
            records = json.loads(row.records_json) if row.records_json else []
            return CacheEntry(saved_at=row.saved_at, summary=summary, records=records)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache entry {key!r}: {e}")
            return None
