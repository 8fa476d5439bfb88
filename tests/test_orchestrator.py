"""Tests for the summary orchestrator.

Covers the three outcomes of a load: cache hit, live fetch, and
fallback (or unavailable) after a failed fetch.
"""

from datetime import timedelta

import pytest

from pgs_stats.aggregation.summary import summarize_scores, summarize_traits
from pgs_stats.cache.freshness import subtract_months
from pgs_stats.config import CACHE_KEYS
from pgs_stats.errors import CacheUnavailable
from pgs_stats.models.types import CacheEntry, LoadResult, ScoreSummary, TraitSummary
from pgs_stats.providers.mock import MockCatalogSource
from pgs_stats.worker.orchestrator import SummaryOrchestrator

from conftest import NOW, make_score, make_trait

SCORE_KEY = CACHE_KEYS["score"]
TRAIT_KEY = CACHE_KEYS["trait"]


def _cached_scores(saved_at, count=3) -> CacheEntry:
    records = [make_score(1000 + i, trait_reported="Cached trait") for i in range(count)]
    return CacheEntry(saved_at=saved_at.isoformat(), summary=summarize_scores(records), records=records)


def _envelope(records, next_url=None):
    return {"count": None, "next": next_url, "previous": None, "results": records}


class FailingStore:
    """Store whose writes always fail and reads always miss."""

    def __init__(self):
        self.save_attempts = 0

    def load(self, key):
        return None

    def save(self, key, entry):
        self.save_attempts += 1
        raise CacheUnavailable("disk full")


class TestCacheHit:
    """Outcome 1: fresh cache is returned without network calls."""

    def test_fresh_cache_returned(self, store, clock):
        cached = _cached_scores(NOW - timedelta(days=10))
        store.save(SCORE_KEY, cached)
        source = MockCatalogSource.from_records("score", [make_score(0)], page_size=200)

        result = SummaryOrchestrator(store, source, clock=clock).load("score")

        assert result.source == "cache"
        assert result.summary == cached.summary
        assert result.records == cached.records
        assert result.saved_at == cached.saved_at
        assert source.requests == []

    def test_boundary_is_inclusive(self, store, clock):
        """A snapshot exactly max_age_months old still counts as fresh."""
        store.save(SCORE_KEY, _cached_scores(subtract_months(NOW, 3)))
        source = MockCatalogSource()

        result = SummaryOrchestrator(store, source, clock=clock).load("score")

        assert result.source == "cache"
        assert source.requests == []


class TestFetchSuccess:
    """Outcome 2: live fetch, summarize, persist."""

    def test_end_to_end_three_pages(self, store, clock, score_records):
        """Pages of 200, 200, 47 produce a 447-score summary."""
        source = MockCatalogSource.from_records("score", score_records, page_size=200)

        result = SummaryOrchestrator(store, source, page_size=200, clock=clock).load("score")

        assert result.source == "live"
        assert isinstance(result.summary, ScoreSummary)
        assert result.summary.total_scores == 447
        assert result.summary.variants.min == 1
        assert result.summary.variants.max == 447
        assert result.summary.variants.mean == pytest.approx(224.0)
        assert result.summary.variants.median == 224
        assert result.summary.traits[0][0] == "Breast cancer"
        assert len(result.records) == 447
        assert len(source.requests) == 3

    def test_result_is_persisted(self, store, clock, score_records):
        source = MockCatalogSource.from_records("score", score_records, page_size=200)

        result = SummaryOrchestrator(store, source, clock=clock).load("score")
        saved = store.load(SCORE_KEY)

        assert saved.summary == result.summary
        assert saved.records == result.records
        assert saved.saved_at == NOW.isoformat()

    def test_stale_cache_replaced(self, store, clock, score_records):
        store.save(SCORE_KEY, _cached_scores(subtract_months(NOW, 4)))
        source = MockCatalogSource.from_records("score", score_records, page_size=200)

        result = SummaryOrchestrator(store, source, clock=clock).load("score")

        assert result.source == "live"
        assert store.load(SCORE_KEY).summary.total_scores == 447

    def test_unparseable_saved_at_triggers_fetch(self, store, clock):
        entry = _cached_scores(NOW)
        store.save(SCORE_KEY, CacheEntry(saved_at="garbage", summary=entry.summary, records=[]))
        source = MockCatalogSource.from_records("score", [make_score(0)], page_size=200)

        result = SummaryOrchestrator(store, source, clock=clock).load("score")

        assert result.source == "live"
        assert len(source.requests) == 1

    def test_empty_first_page(self, store, clock):
        """An empty catalog still yields a (zero) summary."""
        source = MockCatalogSource({"score": [_envelope([])]})

        result = SummaryOrchestrator(store, source, clock=clock).load("score")

        assert result.source == "live"
        assert result.summary.total_scores == 0
        assert result.summary.variants.model_dump() == {
            "n_with_value": 0,
            "min": None,
            "max": None,
            "mean": None,
            "median": None,
            "p95": None,
        }
        assert result.records == []

    def test_oversized_variants_number_still_live(self, store, clock):
        """An integer too large for a float is skipped, not a load failure."""
        records = [make_score(0), make_score(1, variants_number=10**400)]
        source = MockCatalogSource.from_records("score", records, page_size=200)

        result = SummaryOrchestrator(store, source, clock=clock).load("score")

        assert result.source == "live"
        assert result.error is None
        assert result.summary.total_scores == 2
        assert result.summary.variants.n_with_value == 1

    def test_traits(self, store, clock):
        traits = [make_trait(0, ["Cancer"]), make_trait(1, ["Cancer", "Body measurement"])]
        source = MockCatalogSource.from_records("trait", traits, page_size=200)

        result = SummaryOrchestrator(store, source, clock=clock).load("trait")

        assert isinstance(result.summary, TraitSummary)
        assert result.summary.categories[0] == ("Cancer", 2)
        assert store.load(TRAIT_KEY) is not None
        assert store.load(SCORE_KEY) is None

    def test_save_failure_is_not_fatal(self, clock, score_records):
        """A cache write failure still returns the live result."""
        failing = FailingStore()
        source = MockCatalogSource.from_records("score", score_records, page_size=200)

        result = SummaryOrchestrator(failing, source, clock=clock).load("score")

        assert result.source == "live"
        assert result.summary.total_scores == 447
        assert failing.save_attempts == 1


class TestFetchFailure:
    """Outcome 3: fallback to any cached entry, else no summary."""

    def test_http_error_on_page_two_falls_back(self, store, clock):
        """With a cached entry in place, a mid-pagination failure returns it unchanged."""
        cached = _cached_scores(NOW - timedelta(days=10))
        store.save(SCORE_KEY, cached)
        source = MockCatalogSource(
            {"score": [_envelope([make_score(i) for i in range(200)], next_url="p2"), 503]}
        )

        # max_age_months=0 makes the 10-day-old entry stale so the fetch runs
        orchestrator = SummaryOrchestrator(store, source, max_age_months=0, clock=clock)
        result = orchestrator.load("score")

        assert len(source.requests) == 2
        assert result.source == "fallback"
        assert result.summary == cached.summary
        assert result.records == cached.records
        assert "HTTP 503" in result.error

    def test_failed_fetch_does_not_overwrite_cache(self, store, clock):
        """No partial pagination is cached."""
        cached = _cached_scores(subtract_months(NOW, 6))
        store.save(SCORE_KEY, cached)
        source = MockCatalogSource({"score": [_envelope([make_score(0)] * 200, next_url="p2"), 500]})

        SummaryOrchestrator(store, source, clock=clock).load("score")

        assert store.load(SCORE_KEY) == cached

    def test_stale_cache_used_as_fallback(self, store, clock):
        cached = _cached_scores(subtract_months(NOW, 12))
        store.save(SCORE_KEY, cached)
        source = MockCatalogSource({"score": [{"detail": "maintenance"}]})

        result = SummaryOrchestrator(store, source, clock=clock).load("score")

        assert result.source == "fallback"
        assert result.summary == cached.summary
        assert result.saved_at == cached.saved_at

    def test_no_cache_no_fetch_is_unavailable(self, store, clock):
        """Without cache, a failure is reported as an absent summary, not raised."""
        source = MockCatalogSource({"score": [500]})

        result = SummaryOrchestrator(store, source, clock=clock).load("score")

        assert isinstance(result, LoadResult)
        assert result.source == "unavailable"
        assert result.summary is None
        assert result.records == []
        assert "HTTP 500" in result.error

    def test_aggregation_error_falls_back(self, store, clock):
        """Records that cannot be summarized count as a failed load."""
        cached = _cached_scores(subtract_months(NOW, 5))
        store.save(SCORE_KEY, cached)
        source = MockCatalogSource({"score": [_envelope(["not a record"])]})

        result = SummaryOrchestrator(store, source, clock=clock).load("score")

        assert result.source == "fallback"
        assert result.summary == cached.summary

    def test_no_retry_within_one_load(self, store, clock):
        source = MockCatalogSource({"score": [500, _envelope([make_score(0)])]})

        orchestrator = SummaryOrchestrator(store, source, clock=clock)
        first = orchestrator.load("score")
        assert first.source == "unavailable"
        assert len(source.requests) == 1

        # A second call by the caller is a fresh attempt
        second = orchestrator.load("score")
        assert second.source == "live"
