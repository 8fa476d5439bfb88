"""Descriptive statistics over catalog records.

Computes frequency tables and the variants_number distribution.
Pure functions - no network, no cache access.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np

from pgs_stats.models.domain import Record, ResourceKind
from pgs_stats.models.types import (
    FrequencyTable,
    ScoreSummary,
    TraitSummary,
    VariantStats,
)

# Category used when a record does not report the field at all
NOT_REPORTED = "NR"

_YEAR_PATTERN = re.compile(r"^(\d{4})")


def quantile(sorted_values: Sequence[float], q: float) -> float | None:
    """Linear-interpolation quantile (R-7) of ascending values.

    Args:
        sorted_values: Values sorted ascending.
        q: Probability in [0, 1].

    Returns:
        The interpolated quantile, or None for an empty input.
    """
    if len(sorted_values) == 0:
        return None
    return float(np.quantile(np.asarray(sorted_values, dtype=float), q, method="linear"))


def to_finite_number(value: Any) -> float | None:
    """Parse a field value as a finite number.

    Ints, floats and numeric strings are accepted. Booleans, None,
    NaN/inf and anything unparseable yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # ints beyond float range
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except (ValueError, OverflowError):
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def category_of(record: Record, field: str, default: str = NOT_REPORTED) -> str:
    """Category label of a record's field.

    Only a missing (or null) field maps to `default`; falsy values such
    as "" are counted under their own label.
    """
    value = record.get(field)
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def release_year(value: Any) -> str | None:
    """Leading 4-digit year of a date_release value, if any."""
    if not isinstance(value, str):
        return None
    match = _YEAR_PATTERN.match(value)
    return match.group(1) if match else None


def frequency_table(values: Iterable[str]) -> FrequencyTable:
    """Count values and sort descending by count.

    Ties keep first-seen order (Counter.most_common sorts stably).
    """
    return Counter(values).most_common()


def variant_stats(records: Iterable[Record]) -> VariantStats:
    """Distribution of finite variants_number values."""
    values = sorted(
        number
        for number in (to_finite_number(r.get("variants_number")) for r in records)
        if number is not None
    )
    if not values:
        return VariantStats()

    array = np.asarray(values, dtype=float)
    return VariantStats(
        n_with_value=len(values),
        min=float(array[0]),
        max=float(array[-1]),
        mean=float(array.mean()),
        median=quantile(values, 0.5),
        p95=quantile(values, 0.95),
    )


def summarize_scores(scores: Sequence[Record]) -> ScoreSummary:
    """Compute the score summary.

    Args:
        scores: Score records as returned by the catalog.

    Returns:
        ScoreSummary with full (untruncated) frequency tables.
    """
    traits = frequency_table(category_of(s, "trait_reported") for s in scores)
    years = frequency_table(
        year for year in (release_year(s.get("date_release")) for s in scores) if year
    )

    return ScoreSummary(
        total_scores=len(scores),
        unique_traits=len(traits),
        variants=variant_stats(scores),
        traits=traits,
        release_years=years,
        genome_builds=frequency_table(category_of(s, "genome_build") for s in scores),
        licenses=frequency_table(category_of(s, "license") for s in scores),
        weight_types=frequency_table(category_of(s, "weight_type") for s in scores),
        missing_scoring_files=sum(1 for s in scores if not s.get("ftp_scoring_file")),
    )


def _trait_categories(trait: Record) -> list[str]:
    categories = trait.get("trait_categories")
    if isinstance(categories, (list, tuple)) and categories:
        return [c if isinstance(c, str) else str(c) for c in categories]
    return [NOT_REPORTED]


def summarize_traits(traits: Sequence[Record]) -> TraitSummary:
    """Compute the trait summary.

    A trait contributes once per category it lists, or once under
    NOT_REPORTED when it lists none.
    """
    categories = frequency_table(
        category for trait in traits for category in _trait_categories(trait)
    )
    return TraitSummary(
        total_traits=len(traits),
        total_categories=len(categories),
        categories=categories,
    )


def summarize(kind: ResourceKind, records: Sequence[Record]) -> ScoreSummary | TraitSummary:
    """Summarize records of the given kind."""
    if kind == "score":
        return summarize_scores(records)
    if kind == "trait":
        return summarize_traits(records)
    raise ValueError(f"Unknown resource kind: {kind!r}")
