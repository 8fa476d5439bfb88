"""Mock catalog source for demo/testing.

Serves canned page bodies without calling the REST API, so the whole
pipeline can run offline.
"""

from __future__ import annotations

from typing import Any

from pgs_stats.errors import HttpError
from pgs_stats.models.domain import Page, Record, ResourceKind
from pgs_stats.providers.base import CatalogSource, parse_page


class MockCatalogSource(CatalogSource):
    """Catalog source that replays canned page bodies in order.

    Each call to fetch_page consumes the next body for that kind. A body
    may be a list (bare page), a dict (envelope), or an int status code
    to simulate an HTTP failure on that page. Requests past the last
    canned body get an empty bare page.

    Every request is recorded in `requests` as (kind, limit, offset).
    """

    def __init__(self, pages: dict[ResourceKind, list[Any]] | None = None):
        """Initialize mock source.

        Args:
            pages: Canned page bodies per resource kind, in request order.
        """
        self.pages: dict[ResourceKind, list[Any]] = {
            kind: list(bodies) for kind, bodies in (pages or {}).items()
        }
        self.requests: list[tuple[ResourceKind, int, int]] = []
        self._cursor: dict[ResourceKind, int] = {}

    @classmethod
    def from_records(
        cls,
        kind: ResourceKind,
        records: list[Record],
        page_size: int,
        enveloped: bool = True,
    ) -> MockCatalogSource:
        """Split records into pages of page_size the way the API would.

        Args:
            kind: Resource kind the pages belong to.
            records: Full record collection.
            page_size: Records per page.
            enveloped: Serve envelopes with a `next` link instead of bare lists.

        Returns:
            MockCatalogSource serving those pages.
        """
        chunks = [records[i : i + page_size] for i in range(0, len(records), page_size)]
        if not chunks:
            chunks = [[]]

        bodies: list[Any] = []
        for index, chunk in enumerate(chunks):
            if not enveloped:
                bodies.append(chunk)
                continue
            is_last = index == len(chunks) - 1
            next_offset = (index + 1) * page_size
            bodies.append(
                {
                    "count": len(records),
                    "next": None if is_last else f"mock://{kind}?offset={next_offset}",
                    "previous": None,
                    "results": chunk,
                }
            )
        return cls({kind: bodies})

    def fetch_page(self, kind: ResourceKind, limit: int, offset: int) -> Page:
        self.requests.append((kind, limit, offset))
        url = f"mock://{kind}/all?limit={limit}&offset={offset}"

        bodies = self.pages.get(kind, [])
        index = self._cursor.get(kind, 0)
        self._cursor[kind] = index + 1

        if index >= len(bodies):
            return parse_page([], url)

        body = bodies[index]
        if isinstance(body, int):
            raise HttpError(body, url)
        return parse_page(body, url)
