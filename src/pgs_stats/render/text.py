"""Plain-text rendering of summaries.

Consumes summaries as plain data; the pipeline never imports this module.
"""

from __future__ import annotations

import math

from pgs_stats.models.types import FrequencyTable, LoadResult, ScoreSummary, TraitSummary

NOT_AVAILABLE = "NR"

SOURCE_LABELS = {
    "cache": "local cache (< {months} months)",
    "live": "PGS Catalog REST API (live)",
    "fallback": "local cache (fallback)",
    "unavailable": "unavailable",
}


def format_number(value: float | int | None, decimals: int = 0) -> str:
    """Format a number with thousands separators; None/NaN render as NR."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return NOT_AVAILABLE
    return f"{value:,.{decimals}f}"


def source_status(result: LoadResult, max_age_months: int = 3) -> str:
    """One-line description of where the data came from."""
    label = SOURCE_LABELS[result.source].format(months=max_age_months)
    line = f"Source: {label}"
    if result.saved_at and result.source in ("cache", "fallback"):
        line += f" [saved {result.saved_at}]"
    return line


def score_summary_lines(summary: ScoreSummary) -> list[str]:
    variants = summary.variants
    return [
        f"Total scores: {format_number(summary.total_scores)}",
        f"Unique traits: {format_number(summary.unique_traits)}",
        f"Variants (median): {format_number(variants.median)}",
        f"Variants (mean): {format_number(variants.mean, 2)}",
        f"Variants (p95): {format_number(variants.p95)}",
        f"Variants range: {format_number(variants.min)} - {format_number(variants.max)}",
        f"Scores with variants: {format_number(variants.n_with_value)}",
        f"Missing scoring files: {format_number(summary.missing_scoring_files)}",
    ]


def trait_summary_lines(summary: TraitSummary) -> list[str]:
    top = summary.top_categories(1)
    top_label = f"{top[0][0]} ({format_number(top[0][1])})" if top else NOT_AVAILABLE
    return [
        f"Total traits: {format_number(summary.total_traits)}",
        f"Total categories: {format_number(summary.total_categories)}",
        f"Top category: {top_label}",
    ]


def bar_chart_series(table: FrequencyTable, top_n: int = 10) -> tuple[list[str], list[int]]:
    """Labels and counts for a horizontal bar chart of the top entries.

    Returned top-down: the most frequent entry comes first.
    """
    top = table[:top_n]
    return [label for label, _ in top], [count for _, count in top]


def text_bar_chart(table: FrequencyTable, top_n: int = 10, width: int = 40) -> list[str]:
    """Render the top entries as a horizontal bar chart of '#' characters."""
    labels, counts = bar_chart_series(table, top_n)
    if not counts:
        return []

    label_width = max(len(label) for label in labels)
    peak = max(counts)
    lines = []
    for label, count in zip(labels, counts):
        bar = "#" * max(1, round(width * count / peak))
        lines.append(f"{label.ljust(label_width)} | {bar} {format_number(count)}")
    return lines


def render_result(result: LoadResult, top_n: int = 10, max_age_months: int = 3) -> str:
    """Render a load result as a block of text."""
    lines = [source_status(result, max_age_months)]
    summary = result.summary

    if summary is None:
        lines.append(f"Error loading stats: {result.error or 'missing summary data.'}")
        return "\n".join(lines)

    if isinstance(summary, ScoreSummary):
        lines.extend(score_summary_lines(summary))
        lines.append("")
        lines.append(f"Top {top_n} reported traits")
        lines.extend(text_bar_chart(summary.traits, top_n))
    else:
        lines.extend(trait_summary_lines(summary))
        lines.append("")
        lines.append("Reported categories")
        lines.extend(text_bar_chart(summary.categories, top_n))

    return "\n".join(lines)
