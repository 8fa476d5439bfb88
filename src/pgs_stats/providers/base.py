"""Base catalog source interface.

A catalog source implements a narrow interface:
`fetch_page(kind, limit, offset) -> Page`.

Sources must NOT:
- Loop over pages (pagination lives in fetch.pagination)
- Touch the cache
- Compute summaries
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pgs_stats.errors import FormatError
from pgs_stats.models.domain import BarePage, EnvelopePage, Page, ResourceKind


class CatalogSource(ABC):
    """Abstract base class for catalog page sources."""

    @abstractmethod
    def fetch_page(self, kind: ResourceKind, limit: int, offset: int) -> Page:
        """Fetch one page of records.

        Args:
            kind: Resource kind ("score" or "trait").
            limit: Maximum number of records on the page.
            offset: Index of the first record on the page.

        Returns:
            BarePage or EnvelopePage with the page's records.

        Raises:
            HttpError: If the page request failed.
            FormatError: If the page body has an unexpected shape.
        """
        pass


def parse_page(payload: Any, url: str | None = None) -> Page:
    """Resolve a decoded page body into a Page.

    The catalog serves either a bare list of records or an envelope
    object carrying `results`, `next` and `count`.

    Args:
        payload: Decoded JSON body.
        url: Request URL, used in error messages.

    Returns:
        BarePage for a list body, EnvelopePage for an envelope body.

    Raises:
        FormatError: If the body is neither shape.
    """
    if isinstance(payload, list):
        return BarePage(records=payload)

    if isinstance(payload, dict):
        results = payload.get("results")
        if not isinstance(results, list):
            raise FormatError("Unexpected response format from PGS API: no results list", url)
        count = payload.get("count")
        return EnvelopePage(
            records=results,
            next=payload.get("next"),
            count=count if isinstance(count, int) else None,
        )

    raise FormatError(
        f"Unexpected response format from PGS API: {type(payload).__name__} body", url
    )
