"""Domain models for pgs-stats.

Pure Python dataclasses representing domain values.
These models are independent of SQLAlchemy and pydantic and are used
at the fetch and persistence boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

# ============================================================================
# Catalog Domain
# ============================================================================

ResourceKind = Literal["score", "trait"]

# One catalog entity as returned by the REST API; fields pass through untouched.
Record = dict[str, Any]


# ============================================================================
# Page Domain
# ============================================================================


@dataclass(frozen=True)
class BarePage:
    """Page served as a bare JSON array of records."""

    records: list[Record]
    tag: Literal["bare"] = "bare"


@dataclass(frozen=True)
class EnvelopePage:
    """Page served as {"results": [...], "next": ..., "count": ...}."""

    records: list[Record]
    next: str | None = None
    count: int | None = None
    tag: Literal["envelope"] = "envelope"


Page = BarePage | EnvelopePage


# ============================================================================
# Cache Domain
# ============================================================================


@dataclass
class CacheEntryEntity:
    """Domain model for a stored cache row (payloads still serialized)."""

    cache_key: str
    saved_at: str | None
    summary_json: str
    records_json: str | None = None
    updated_at: datetime | None = None
