"""
Turns projections, anomalies and category snapshots into short, ranked
messages for the dashboard. Every rule runs, then the list is sorted by
priority (lower first) and cut to ``MAX_INSIGHTS``.
"""
from __future__ import annotations

from datetime import date
from typing import List

from app.models.analytics import (
    AnomalyAlert,
    CategorySnapshot,
    Insight,
    InsightType,
    MonthlyPoint,
    ProjectionResult,
    Severity,
    Trend,
)
from app.utils.aggregation import days_in_month

MAX_INSIGHTS = 5
MAX_ANOMALY_INSIGHTS = 2

TREND_MIN_CONFIDENCE = 0.5
MONTH_CHANGE_PCT = 10.0
CATEGORY_INCREASE_PCT = 30.0
CATEGORY_DECREASE_PCT = -20.0
PACE_MARGIN = 1.2


def _percent_change(new: float, old: float) -> float:
    return (new - old) / old * 100 if old else 0.0


def _trend_insight(projection: ProjectionResult) -> List[Insight]:
    if projection.trend is not Trend.INCREASING or projection.confidence <= TREND_MIN_CONFIDENCE:
        return []
    data = projection.monthly_data
    newest = data[-1].total if data else 0.0
    oldest = (data[0].total if data else 0.0) or 1.0
    increase = newest / oldest * 100 - 100
    return [
        Insight(
            id="spending-trend",
            type=InsightType.WARNING,
            title="Spending is trending up",
            message=f"At the current pace your spending could be {increase:.0f}% higher than in your oldest tracked month.",
            priority=2,
        )
    ]


def _month_over_month_insight(monthly_trend: List[MonthlyPoint]) -> List[Insight]:
    if len(monthly_trend) < 2:
        return []
    change = _percent_change(monthly_trend[-1].total, monthly_trend[-2].total)
    if change < -MONTH_CHANGE_PCT:
        return [
            Insight(
                id="month-decrease",
                type=InsightType.POSITIVE,
                title="Good progress on savings",
                message=f"You spent {abs(change):.0f}% less than last month. Keep it up!",
                priority=1,
            )
        ]
    if change > MONTH_CHANGE_PCT:
        return [
            Insight(
                id="month-increase",
                type=InsightType.WARNING,
                title="Spending went up",
                message=f"You spent {change:.0f}% more than last month.",
                priority=2,
            )
        ]
    return []


def _anomaly_insights(anomalies: List[AnomalyAlert]) -> List[Insight]:
    high = [alert for alert in anomalies if alert.severity is Severity.HIGH]
    return [
        Insight(
            id=f"alert-{alert.category}",
            type=InsightType.WARNING,
            title=f"Unusual spending in {alert.category}",
            message=alert.message,
            category=alert.category,
            priority=1,
        )
        for alert in high[:MAX_ANOMALY_INSIGHTS]
    ]


def _category_insights(
    current: List[CategorySnapshot],
    historical: List[CategorySnapshot],
) -> List[Insight]:
    baseline = {snap.category: snap for snap in historical}
    insights = []
    for snap in current:
        past = baseline.get(snap.category)
        if past is None:
            continue
        change = _percent_change(snap.total, past.total)
        if change > CATEGORY_INCREASE_PCT:
            insights.append(
                Insight(
                    id=f"category-increase-{snap.category}",
                    type=InsightType.WARNING,
                    title=f"{snap.category} is up",
                    message=f"Your {snap.category} spending rose {change:.0f}% compared to its historical level.",
                    category=snap.category,
                    priority=3,
                )
            )
        elif change < CATEGORY_DECREASE_PCT:
            insights.append(
                Insight(
                    id=f"category-saving-{snap.category}",
                    type=InsightType.POSITIVE,
                    title=f"Saving on {snap.category}",
                    message=f"You spent {abs(change):.0f}% less on {snap.category} this month.",
                    category=snap.category,
                    priority=4,
                )
            )
    return insights


def _pace_insight(
    projection: ProjectionResult,
    current: List[CategorySnapshot],
    today: date,
) -> List[Insight]:
    if projection.projection <= 0 or not current:
        return []
    spent = sum(snap.total for snap in current)
    daily_average = spent / today.day
    days_left = days_in_month(today) - today.day
    remaining_estimate = daily_average * days_left
    if remaining_estimate <= projection.projection * PACE_MARGIN:
        return []
    return [
        Insight(
            id="pace-warning",
            type=InsightType.WARNING,
            title="High spending pace",
            message=(
                f"At this pace the remaining {days_left} days will cost about {remaining_estimate:.2f}, "
                f"above the projected {projection.projection:.2f} for the month."
            ),
            priority=2,
        )
    ]


def synthesize(
    projection: ProjectionResult,
    anomalies: List[AnomalyAlert],
    monthly_trend: List[MonthlyPoint],
    current: List[CategorySnapshot],
    historical: List[CategorySnapshot],
    today: date,
) -> List[Insight]:
    insights: List[Insight] = []
    insights.extend(_trend_insight(projection))
    insights.extend(_month_over_month_insight(monthly_trend))
    insights.extend(_anomaly_insights(anomalies))
    insights.extend(_category_insights(current, historical))
    insights.extend(_pace_insight(projection, current, today))

    insights.sort(key=lambda insight: insight.priority)
    return insights[:MAX_INSIGHTS]
