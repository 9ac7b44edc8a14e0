from __future__ import annotations

import logging
from datetime import date
from typing import List

from app.db.store import TransactionStore
from app.models.analytics import (
    AnomalyReport,
    BudgetComparison,
    CategorySnapshot,
    Insight,
    MonthlyPoint,
    MonthlyTrendPoint,
    ProjectionMethod,
    ProjectionResult,
)
from app.models.transaction import TransactionType
from app.utils import anomalies, budgets, insights, projection
from app.utils.aggregation import (
    category_totals,
    current_month_window,
    month_key,
    monthly_totals,
    trailing_window,
)

logger = logging.getLogger(__name__)


class FinanceAnalyzer:
    """
    Analytics facade used by the API routes. Fetches a user's expenses from
    the store and runs the aggregation, projection, anomaly, budget and
    insight steps over them. ``today`` is always passed in by the caller.
    """

    def __init__(
        self,
        store: TransactionStore,
        projection_months: int = 3,
        history_months: int = 3,
    ) -> None:
        self._store = store
        self._projection_months = projection_months
        self._history_months = history_months

    def monthly_expenses(self, user_id: str, months: int, today: date) -> List[MonthlyPoint]:
        window = trailing_window(today, months)
        expenses = self._store.list_transactions(user_id, TransactionType.EXPENSE, window)
        return monthly_totals(expenses, window)

    def current_month_categories(self, user_id: str, today: date) -> List[CategorySnapshot]:
        window = current_month_window(today)
        expenses = self._store.list_transactions(user_id, TransactionType.EXPENSE, window)
        return category_totals(expenses, window)

    def historical_categories(self, user_id: str, today: date) -> List[CategorySnapshot]:
        window = trailing_window(today, self._history_months)
        expenses = self._store.list_transactions(user_id, TransactionType.EXPENSE, window)
        return category_totals(expenses, window)

    def get_projection(
        self,
        user_id: str,
        today: date,
        method: ProjectionMethod = ProjectionMethod.WEIGHTED_AVERAGE,
    ) -> ProjectionResult:
        points = self.monthly_expenses(user_id, self._projection_months, today)
        result = projection.project(points, method, today)
        logger.info(
            f"Projection for {user_id}: {result.projection} ({result.method.value}, "
            f"trend={result.trend.value}, confidence={result.confidence})"
        )
        return result

    def get_anomalies(self, user_id: str, today: date) -> AnomalyReport:
        current = self.current_month_categories(user_id, today)
        historical = self.historical_categories(user_id, today)
        alerts = anomalies.detect(current, historical)
        logger.info(f"Anomaly check for {user_id}: {len(alerts)} alerts over {len(current)} categories")
        return AnomalyReport(
            alerts=alerts,
            analyzed_transactions=sum(snap.count for snap in current),
            analysis_period=f"Last {self._history_months} months",
        )

    def get_insights(self, user_id: str, today: date) -> List[Insight]:
        projected = self.get_projection(user_id, today, ProjectionMethod.WEIGHTED_AVERAGE)
        current = self.current_month_categories(user_id, today)
        historical = self.historical_categories(user_id, today)
        alerts = anomalies.detect(current, historical)

        result = insights.synthesize(
            projection=projected,
            anomalies=alerts,
            monthly_trend=projected.monthly_data,
            current=current,
            historical=historical,
            today=today,
        )
        logger.info(f"Generated {len(result)} insights for {user_id}")
        return result

    def get_monthly_trend(self, user_id: str, months: int, today: date) -> List[MonthlyTrendPoint]:
        points = self.monthly_expenses(user_id, months, today)

        trend = []
        for index, point in enumerate(points):
            previous = points[index - 1].total if index > 0 else point.total
            diff = point.total - previous
            change = diff / previous * 100 if previous else 0.0
            trend.append(
                MonthlyTrendPoint(
                    month=point.month,
                    total=point.total,
                    count=point.count,
                    average=round(point.total / point.count, 2) if point.count else 0.0,
                    previous_month_diff=round(diff, 2),
                    percentage_change=round(change, 2),
                )
            )
        return trend

    def get_budget_comparison(self, user_id: str, today: date) -> List[BudgetComparison]:
        month = month_key(today)
        current = self.current_month_categories(user_id, today)
        historical = self.historical_categories(user_id, today)
        custom = budgets.resolve_budgets(self._store.list_budgets(user_id, month), month)

        comparisons = budgets.compare(current, historical, custom, month)
        logger.info(
            f"Budget comparison for {user_id} ({month}): {len(comparisons)} categories, "
            f"{sum(1 for c in comparisons if c.is_custom_budget)} with custom budgets"
        )
        return comparisons
