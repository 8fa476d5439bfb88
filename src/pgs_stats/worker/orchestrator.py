"""Summary orchestrator.

Ties the pipeline together for one resource kind:

    cache lookup -> fresh? return cached
                 -> else fetch all pages -> summarize -> save -> return live
    fetch/summarize failure -> any cached entry as fallback, else no summary

The orchestrator is the single recovery point: errors from the fetcher
and the aggregator never reach the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from pgs_stats.aggregation.summary import summarize
from pgs_stats.cache.freshness import is_fresh
from pgs_stats.cache.store import CacheStore
from pgs_stats.config import CACHE_KEYS, DEFAULT_MAX_AGE_MONTHS, DEFAULT_PAGE_SIZE
from pgs_stats.errors import CacheUnavailable
from pgs_stats.fetch.pagination import fetch_all
from pgs_stats.models.domain import ResourceKind
from pgs_stats.models.types import CacheEntry, LoadResult
from pgs_stats.providers.base import CatalogSource

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SummaryOrchestrator:
    """Loads a summary per resource kind with cache-first semantics."""

    def __init__(
        self,
        store: CacheStore,
        source: CatalogSource,
        *,
        max_age_months: int = DEFAULT_MAX_AGE_MONTHS,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize orchestrator.

        Args:
            store: Cache store for snapshots.
            source: Catalog source for live fetches.
            max_age_months: Calendar months a cached snapshot stays fresh.
            page_size: Records requested per page.
            max_pages: Optional cap on page requests per fetch.
            clock: Returns the current time (UTC); injectable for tests.
        """
        self.store = store
        self.source = source
        self.max_age_months = max_age_months
        self.page_size = page_size
        self.max_pages = max_pages
        self.clock = clock

    def load(self, kind: ResourceKind) -> LoadResult:
        """Load the summary and records for one resource kind.

        Args:
            kind: Resource kind ("score" or "trait").

        Returns:
            LoadResult; summary is None only when there was neither a
            cached entry nor a successful fetch.
        """
        key = CACHE_KEYS[kind]
        cached = self.store.load(key)

        if cached is not None and is_fresh(cached.saved_at, self.max_age_months, self.clock()):
            logger.info(f"Using cached {kind} summary saved at {cached.saved_at}")
            return LoadResult(
                summary=cached.summary,
                records=cached.records,
                source="cache",
                saved_at=cached.saved_at,
            )

        try:
            records = fetch_all(self.source, kind, self.page_size, self.max_pages)
            summary = summarize(kind, records)
        except Exception as e:
            logger.exception(f"Loading {kind} records failed")
            if cached is not None:
                logger.warning(f"Falling back to cached {kind} summary saved at {cached.saved_at}")
                return LoadResult(
                    summary=cached.summary,
                    records=cached.records,
                    source="fallback",
                    saved_at=cached.saved_at,
                    error=str(e),
                )
            return LoadResult(source="unavailable", error=str(e))

        entry = CacheEntry(
            saved_at=self.clock().isoformat(),
            summary=summary,
            records=records,
        )
        try:
            self.store.save(key, entry)
        except CacheUnavailable as e:
            logger.warning(f"Live {kind} summary not cached: {e}")

        return LoadResult(
            summary=entry.summary,
            records=entry.records,
            source="live",
            saved_at=entry.saved_at,
        )
