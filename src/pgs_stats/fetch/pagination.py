"""Paginated retrieval of a whole catalog resource.

Pages are requested strictly in order: whether another page is needed
depends on the content of the previous one.
"""

from __future__ import annotations

import logging

from pgs_stats.config import DEFAULT_PAGE_SIZE
from pgs_stats.models.domain import EnvelopePage, Page, Record, ResourceKind
from pgs_stats.providers.base import CatalogSource

logger = logging.getLogger(__name__)


def is_last_page(page: Page, page_size: int) -> bool:
    """Decide whether pagination stops after this page.

    Stops on an empty page, or on a short envelope page with no `next`
    link. Bare-list pages only stop when empty.
    """
    if not page.records:
        return True
    return isinstance(page, EnvelopePage) and page.next is None and len(page.records) < page_size


def fetch_all(
    source: CatalogSource,
    kind: ResourceKind,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int | None = None,
) -> list[Record]:
    """Fetch every record of one resource kind.

    Args:
        source: Catalog source serving single pages.
        kind: Resource kind ("score" or "trait").
        page_size: Records requested per page.
        max_pages: Optional cap on the number of page requests.

    Returns:
        All records, concatenated in request order.

    Raises:
        ValueError: If page_size or max_pages is not positive.
        HttpError: If any page request fails.
        FormatError: If any page body has an unexpected shape.
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
        raise ValueError(f"page_size must be a positive integer, got {page_size!r}")
    if max_pages is not None and max_pages <= 0:
        raise ValueError(f"max_pages must be positive, got {max_pages!r}")

    logger.info(f"Fetching all {kind} records (page_size={page_size})")

    records: list[Record] = []
    offset = 0
    pages = 0

    while max_pages is None or pages < max_pages:
        page = source.fetch_page(kind, page_size, offset)
        pages += 1
        records.extend(page.records)
        logger.debug(
            f"{kind} page {pages}: offset={offset} received={len(page.records)} "
            f"total_so_far={len(records)}"
        )

        if is_last_page(page, page_size):
            break

        offset += len(page.records)

    logger.info(f"Fetched {len(records)} {kind} records in {pages} pages")
    return records
