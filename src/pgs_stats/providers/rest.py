"""REST catalog source backed by requests.

Issues one GET per page:
    {base}/score/all?format=json&limit={n}&offset={m}
    {base}/trait/all?format=json&limit={n}&offset={m}
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import requests

from pgs_stats.config import PGS_BASE_URL, RESOURCE_PATHS
from pgs_stats.errors import FormatError, HttpError
from pgs_stats.models.domain import Page, ResourceKind
from pgs_stats.providers.base import CatalogSource, parse_page

logger = logging.getLogger(__name__)


class RestCatalogSource(CatalogSource):
    """Catalog source talking to the PGS Catalog REST API."""

    def __init__(
        self,
        base_url: str = PGS_BASE_URL,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        """Initialize REST source.

        Args:
            base_url: REST base URL, e.g. https://www.pgscatalog.org/rest.
            session: Optional requests session (shared connection pool).
            timeout: Seconds per request; None waits indefinitely.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def page_url(self, kind: ResourceKind, limit: int, offset: int) -> str:
        """Build the URL for one page."""
        query = urlencode({"format": "json", "limit": limit, "offset": offset})
        return f"{self.base_url}/{RESOURCE_PATHS[kind]}?{query}"

    def fetch_page(self, kind: ResourceKind, limit: int, offset: int) -> Page:
        url = self.page_url(kind, limit, offset)
        logger.debug(f"GET {url}")

        response = self.session.get(url, timeout=self.timeout)
        # only 2xx counts as success; unfollowed 3xx responses fail too
        if not 200 <= response.status_code < 300:
            raise HttpError(response.status_code, url)

        try:
            payload = response.json()
        except ValueError as e:
            # requests.JSONDecodeError subclasses ValueError
            raise FormatError(f"Response body is not JSON: {e}", url) from e

        return parse_page(payload, url)
