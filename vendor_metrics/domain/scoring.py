"""Vendor scoring engine - percentile normalization and composite score"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Tuple

from vendor_metrics.domain.models import (
    BrandScoreSummary,
    RetentionBucket,
    ScoreInputRow,
    VendorScoreSummary,
)


# Metric name -> accessor; order matches the weight table
SCORED_METRICS: Dict[str, Callable[[ScoreInputRow], float]] = {
    "revenue": lambda row: float(row.metrics.revenue),
    "conversion_rate": lambda row: row.metrics.conversion_rate,
    "ftd_cost": lambda row: float(row.metrics.ftd_cost),
    "nfd": lambda row: row.retention_value(RetentionBucket.NFD),
    "d1": lambda row: row.retention_value(RetentionBucket.D1),
    "d3": lambda row: row.retention_value(RetentionBucket.D3),
    "d7": lambda row: row.retention_value(RetentionBucket.D7),
    "d15": lambda row: row.retention_value(RetentionBucket.D15),
    "d30": lambda row: row.retention_value(RetentionBucket.D30),
}

# Lower is better
INVERTED_METRICS = frozenset({"ftd_cost"})

# Sum to 1.0
DEFAULT_WEIGHTS: Dict[str, float] = {
    "revenue": 0.25,
    "conversion_rate": 0.15,
    "ftd_cost": 0.20,
    "nfd": 0.10,
    "d1": 0.05,
    "d3": 0.07,
    "d7": 0.08,
    "d15": 0.05,
    "d30": 0.05,
}


@dataclass(frozen=True)
class ScoringParameters:
    """Business constants of the composite score"""

    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    percentile_low: float = 0.05
    percentile_high: float = 0.95
    registration_saturation: int = 50


@dataclass(frozen=True)
class PercentileBand:
    p05: float
    p95: float


def percentile(values: Sequence[float], p: float) -> float:
    """
    Percentile by linear interpolation between order statistics.

    index = (n - 1) * p; an integral index returns that element, otherwise
    the floor and ceil elements are blended by the fractional part.

    Example:
        [10, 20, 30, 40, 50], p=0.05 -> index 0.2 -> 10 + 0.2 * (20 - 10) = 12
    """
    if not values:
        return 0.0

    ordered = sorted(values)
    index = (len(ordered) - 1) * p
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return ordered[lower]

    weight = index - lower
    # Exact when both neighbours are equal, so a flat cohort keeps zero spread
    return ordered[lower] + (ordered[upper] - ordered[lower]) * weight


def normalize(value: float, band: PercentileBand, invert: bool = False) -> float:
    """
    Map a raw value into [0, 1] relative to its cohort's p05..p95 band.

    A flat band (p95 == p05) yields 0.5. Inversion is applied after the clamp.
    """
    spread = band.p95 - band.p05
    if spread == 0:
        return 0.5

    normalized = max(0.0, min(1.0, (value - band.p05) / spread))
    return 1.0 - normalized if invert else normalized


def registration_factor(registration_count: float, saturation: int = 50) -> float:
    """Penalty for low registration volume: min(1, sqrt(n / saturation))"""
    if registration_count <= 0:
        return 0.0
    return min(1.0, math.sqrt(registration_count / saturation))


def compute_percentile_bands(
    rows: Sequence[ScoreInputRow],
    parameters: ScoringParameters,
) -> Dict[str, PercentileBand]:
    """p05/p95 of every scored metric across the whole candidate set"""
    bands = {}
    for name, accessor in SCORED_METRICS.items():
        values = [accessor(row) for row in rows]
        bands[name] = PercentileBand(
            p05=percentile(values, parameters.percentile_low),
            p95=percentile(values, parameters.percentile_high),
        )
    return bands


def weighted_sum(
    row: ScoreInputRow,
    bands: Dict[str, PercentileBand],
    weights: Dict[str, float],
) -> float:
    return sum(
        weights[name] * normalize(accessor(row), bands[name], invert=name in INVERTED_METRICS)
        for name, accessor in SCORED_METRICS.items()
    )


def score_rows(
    rows: List[ScoreInputRow],
    parameters: ScoringParameters | None = None,
) -> List[ScoreInputRow]:
    """
    Main entry point: assign a 0-100 composite score to every row.

    All rows must be materialized first; percentiles are taken over the full
    set. Score = 100 * weighted_sum * registration_factor.
    """
    if not rows:
        return []

    parameters = parameters or ScoringParameters()
    bands = compute_percentile_bands(rows, parameters)

    for row in rows:
        factor = registration_factor(row.metrics.registration_count, parameters.registration_saturation)
        row.score = 100 * weighted_sum(row, bands, parameters.weights) * factor

    return rows


def summarize_scores(
    rows: Sequence[ScoreInputRow],
) -> Tuple[List[VendorScoreSummary], List[BrandScoreSummary]]:
    """
    Period-level aggregates: arithmetic mean of the per-row scores.

    Scores are never recomputed on aggregated inputs.
    """
    by_vendor: Dict[int, List[ScoreInputRow]] = defaultdict(list)
    by_brand: Dict[str, List[float]] = defaultdict(list)

    for row in rows:
        by_vendor[row.metrics.vendor_id].append(row)
        if row.metrics.vendor is not None:
            by_brand[row.metrics.vendor.brand_name].append(row.score)

    vendor_summaries = []
    for vendor_id in sorted(by_vendor):
        vendor_rows = by_vendor[vendor_id]
        vendor = vendor_rows[0].metrics.vendor
        vendor_summaries.append(
            VendorScoreSummary(
                vendor_id=vendor_id,
                vendor_name=vendor.vendor_name if vendor else None,
                brand_name=vendor.brand_name if vendor else None,
                days=len(vendor_rows),
                average_score=sum(r.score for r in vendor_rows) / len(vendor_rows),
            )
        )

    brand_summaries = [
        BrandScoreSummary(brand_name=name, days=len(scores), average_score=sum(scores) / len(scores))
        for name, scores in sorted(by_brand.items())
    ]

    return vendor_summaries, brand_summaries
