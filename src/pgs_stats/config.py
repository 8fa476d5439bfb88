"""Configuration defaults for pgs-stats.

Module-level constants are the defaults; Settings.from_env() lets the
environment override them (PGS_STATS_* variables).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pgs_stats.models.domain import ResourceKind

PGS_BASE_URL = "https://www.pgscatalog.org/rest"

# Default database path
DEFAULT_DB_PATH = Path("data/pgs_stats.db")

DEFAULT_PAGE_SIZE = 200
DEFAULT_MAX_AGE_MONTHS = 3

# One cache key per resource kind; bump the version segment when the
# stored summary shape changes.
CACHE_KEYS: dict[ResourceKind, str] = {
    "score": "pgs:v2:score-summary",
    "trait": "pgs:v2:trait-summary",
}

RESOURCE_PATHS: dict[ResourceKind, str] = {
    "score": "score/all",
    "trait": "trait/all",
}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the pipeline.

    Attributes:
        base_url: Catalog REST base URL (no trailing slash).
        db_path: SQLite file backing the cache store.
        page_size: Records requested per page.
        max_age_months: Calendar months a cached snapshot stays fresh.
        request_timeout: Seconds passed to requests, None to wait forever.
    """

    base_url: str = PGS_BASE_URL
    db_path: Path = DEFAULT_DB_PATH
    page_size: int = DEFAULT_PAGE_SIZE
    max_age_months: int = DEFAULT_MAX_AGE_MONTHS
    request_timeout: float | None = None

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from PGS_STATS_* environment variables."""
        return cls(
            base_url=os.environ.get("PGS_STATS_BASE_URL", PGS_BASE_URL).rstrip("/"),
            db_path=Path(os.environ.get("PGS_STATS_DB_PATH", str(DEFAULT_DB_PATH))),
            page_size=_env_int("PGS_STATS_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            max_age_months=_env_int("PGS_STATS_MAX_AGE_MONTHS", DEFAULT_MAX_AGE_MONTHS),
            request_timeout=_env_float("PGS_STATS_REQUEST_TIMEOUT"),
        )
