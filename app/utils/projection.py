"""
Next-month spending forecasts from a monthly expense series.

Two methods are supported:

* ``linear_regression`` fits an ordinary least-squares line through the
  monthly totals and extrapolates one month ahead. Confidence is the R² of
  the fit.
* ``weighted_average`` blends the last two or three months, giving the most
  recent month the largest weight. Confidence drops as the months vary more.
"""
from __future__ import annotations

import logging
import statistics
from datetime import date
from typing import Dict, List, Sequence, Tuple

from app.models.analytics import MonthlyPoint, ProjectionMethod, ProjectionResult, Trend
from app.utils.aggregation import month_key

logger = logging.getLogger(__name__)

# Currency units per month
SLOPE_TREND_THRESHOLD = 10.0
# Percent change between the oldest and the newest month
PERCENT_TREND_THRESHOLD = 5.0

# Oldest -> newest
WEIGHTS: Dict[int, Tuple[float, ...]] = {
    2: (0.4, 0.6),
    3: (0.2, 0.3, 0.5),
}
MAX_WEIGHTED_POINTS = max(WEIGHTS)


def linear_regression(totals: Sequence[float]) -> Tuple[float, Trend, float]:
    """Return ``(prediction, trend, r_squared)`` for the next index."""
    n = len(totals)
    xs = range(n)
    avg_x = (n - 1) / 2
    avg_y = sum(totals) / n

    numerator = sum((x - avg_x) * (y - avg_y) for x, y in zip(xs, totals))
    denominator = sum((x - avg_x) ** 2 for x in xs)
    slope = numerator / denominator if denominator else 0.0
    intercept = avg_y - slope * avg_x

    prediction = slope * n + intercept

    ss_res = sum((y - (slope * x + intercept)) ** 2 for x, y in zip(xs, totals))
    ss_tot = sum((y - avg_y) ** 2 for y in totals)
    r_squared = 1 - ss_res / ss_tot if ss_tot else 0.0

    if slope > SLOPE_TREND_THRESHOLD:
        trend = Trend.INCREASING
    elif slope < -SLOPE_TREND_THRESHOLD:
        trend = Trend.DECREASING
    else:
        trend = Trend.STABLE

    return max(0.0, prediction), trend, max(0.0, min(1.0, r_squared))


def weighted_average(totals: Sequence[float]) -> Tuple[float, Trend, float]:
    """Return ``(prediction, trend, confidence)`` from the last 2-3 totals."""
    recent = list(totals[-MAX_WEIGHTED_POINTS:])
    weights = WEIGHTS[len(recent)]

    prediction = sum(total * weight for total, weight in zip(recent, weights)) / sum(weights)

    oldest, newest = recent[0], recent[-1]
    percent_change = (newest - oldest) / oldest * 100 if oldest else 0.0
    if percent_change > PERCENT_TREND_THRESHOLD:
        trend = Trend.INCREASING
    elif percent_change < -PERCENT_TREND_THRESHOLD:
        trend = Trend.DECREASING
    else:
        trend = Trend.STABLE

    mean = statistics.fmean(recent)
    cv = statistics.pstdev(recent) / mean if mean else 1.0
    confidence = max(0.0, min(1.0, 1 - cv))

    return prediction, trend, confidence


def project(
    monthly_points: List[MonthlyPoint],
    method: ProjectionMethod,
    today: date,
) -> ProjectionResult:
    method = ProjectionMethod(method)
    current_month = month_key(today)

    if len(monthly_points) < 2:
        fallback = monthly_points[0].total if monthly_points else 0.0
        return ProjectionResult(
            current_month=current_month,
            projection=round(fallback, 2),
            trend=Trend.STABLE,
            confidence=0.0,
            monthly_data=list(monthly_points),
            method=method,
        )

    totals = [point.total for point in monthly_points]
    if method is ProjectionMethod.LINEAR_REGRESSION:
        prediction, trend, confidence = linear_regression(totals)
    else:
        prediction, trend, confidence = weighted_average(totals)

    logger.debug(
        f"Projected {prediction:.2f} ({method.value}, trend={trend.value}, "
        f"confidence={confidence:.2f}) from {len(totals)} months"
    )
    return ProjectionResult(
        current_month=current_month,
        projection=round(prediction, 2),
        trend=trend,
        confidence=round(confidence, 2),
        monthly_data=list(monthly_points),
        method=method,
    )
