"""Shared pytest fixtures for pgs-stats tests."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pgs_stats.cache.store import CacheStore
from pgs_stats.db.schema import Base

NOW = datetime(2026, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_score(index: int, **overrides) -> dict:
    """Build a score record shaped like the catalog's score/all results."""
    record = {
        "id": f"PGS{index:06d}",
        "name": f"score_{index}",
        "trait_reported": "Breast cancer" if index % 2 == 0 else f"Trait {index % 5}",
        "variants_number": index + 1,
        "date_release": f"{2019 + index % 5}-0{1 + index % 9}-15",
        "genome_build": "GRCh37" if index % 3 else "GRCh38",
        "license": "PGS obtained from the Catalog should be cited appropriately",
        "weight_type": "beta",
        "ftp_scoring_file": f"https://ftp.ebi.ac.uk/PGS{index:06d}.txt.gz",
    }
    record.update(overrides)
    return record


def make_trait(index: int, categories: list[str] | None) -> dict:
    """Build a trait record shaped like the catalog's trait/all results."""
    record = {
        "id": f"EFO_{index:07d}",
        "label": f"trait {index}",
        "associated_pgs_ids": [],
    }
    if categories is not None:
        record["trait_categories"] = categories
    return record


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the in-memory engine."""
    return sessionmaker(bind=engine)


@pytest.fixture
def store(session_factory) -> CacheStore:
    """Cache store over the in-memory database."""
    return CacheStore(session_factory)


@pytest.fixture
def score_records() -> list[dict]:
    """447 score records: the catalog served as pages of 200, 200, 47."""
    return [make_score(i) for i in range(447)]


@pytest.fixture
def clock():
    """Fixed clock for deterministic freshness checks."""
    return lambda: NOW
