"""Command-line entry point.

Usage:
    pgs-stats scores [--db PATH] [--top N] [-v]
    pgs-stats traits --max-age-months 1

Exit codes:
    0: A summary was loaded (live, cached, or fallback)
    1: No summary available
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from pgs_stats.cache.store import CacheStore
from pgs_stats.config import Settings
from pgs_stats.db.session import get_session_factory
from pgs_stats.models.domain import ResourceKind
from pgs_stats.providers.rest import RestCatalogSource
from pgs_stats.render.text import render_result
from pgs_stats.worker.orchestrator import SummaryOrchestrator

COMMANDS: dict[str, ResourceKind] = {"scores": "score", "traits": "trait"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgs-stats",
        description="Summarize PGS Catalog score and trait metadata.",
    )
    parser.add_argument("resource", choices=sorted(COMMANDS), help="Resource to summarize")
    parser.add_argument("--db", type=Path, help="SQLite cache file")
    parser.add_argument("--base-url", help="Catalog REST base URL")
    parser.add_argument("--page-size", type=int, help="Records per page request")
    parser.add_argument("--max-pages", type=int, help="Stop after this many pages")
    parser.add_argument("--max-age-months", type=int, help="Cache freshness window")
    parser.add_argument("--top", type=int, default=10, help="Entries shown in the chart")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Environment settings with command-line overrides applied."""
    settings = Settings.from_env()
    overrides = {
        "db_path": args.db,
        "base_url": args.base_url.rstrip("/") if args.base_url else None,
        "page_size": args.page_size,
        "max_age_months": args.max_age_months,
    }
    return replace(settings, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = settings_from_args(args)
    store = CacheStore(get_session_factory(settings.db_path))
    source = RestCatalogSource(settings.base_url, timeout=settings.request_timeout)
    orchestrator = SummaryOrchestrator(
        store,
        source,
        max_age_months=settings.max_age_months,
        page_size=settings.page_size,
        max_pages=args.max_pages,
    )

    result = orchestrator.load(COMMANDS[args.resource])
    print(render_result(result, top_n=args.top, max_age_months=settings.max_age_months))
    return 0 if result.summary is not None else 1


if __name__ == "__main__":
    sys.exit(main())
