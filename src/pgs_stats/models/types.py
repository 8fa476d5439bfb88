"""Pydantic models for pgs-stats.

Summaries are what the cache persists and what the rendering layer
consumes. Changes to their shape require bumping the cache key version
in config.CACHE_KEYS.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# (category, count) pairs sorted descending by count
FrequencyTable = list[tuple[str, int]]


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class VariantStats(BaseModel):
    """Distribution of variants_number over scores with a finite value.

    n_with_value counts the scores that contributed. Every other field
    is None when no score carries a usable value.
    """

    model_config = ConfigDict(frozen=True)

    n_with_value: int = 0
    min: float | None = None
    max: float | None = None
    mean: float | None = None
    median: float | None = None
    p95: float | None = None


class ScoreSummary(BaseModel):
    """Aggregated statistics over a collection of score records."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["score"] = "score"
    total_scores: int
    unique_traits: int
    variants: VariantStats
    traits: FrequencyTable
    release_years: FrequencyTable
    genome_builds: FrequencyTable = Field(default_factory=list)
    licenses: FrequencyTable = Field(default_factory=list)
    weight_types: FrequencyTable = Field(default_factory=list)
    missing_scoring_files: int = 0

    def top_traits(self, n: int = 10) -> FrequencyTable:
        """Most frequent reported traits."""
        return self.traits[:n]


class TraitSummary(BaseModel):
    """Aggregated statistics over a collection of trait records."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["trait"] = "trait"
    total_traits: int
    total_categories: int
    categories: FrequencyTable

    def top_categories(self, n: int = 10) -> FrequencyTable:
        """Most frequent trait categories."""
        return self.categories[:n]


Summary = Annotated[Union[ScoreSummary, TraitSummary], Field(discriminator="kind")]


class CacheEntry(BaseModel):
    """Persisted snapshot of one resource kind."""

    saved_at: str | None = Field(default_factory=utc_now_iso)
    summary: Summary
    records: list[dict[str, Any]] = Field(default_factory=list)


class LoadResult(BaseModel):
    """Outcome of one orchestrator load.

    source is "cache" for a fresh cache hit, "live" for a successful
    fetch, "fallback" when the fetch failed and a cached entry was used,
    and "unavailable" when neither worked (summary is None).
    """

    summary: Optional[Summary] = None
    records: list[dict[str, Any]] = Field(default_factory=list)
    source: Literal["cache", "live", "fallback", "unavailable"]
    saved_at: str | None = None
    error: str | None = None
