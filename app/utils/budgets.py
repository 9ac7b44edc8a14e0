from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from app.models.analytics import BudgetComparison, BudgetStatus, CategorySnapshot
from app.models.transaction import Budget

# Inferred budgets leave 10% headroom over the reference spend
FALLBACK_BUFFER = 1.1
OVER_BUDGET_PCT = 100.0
ON_TRACK_PCT = 80.0


def resolve_budgets(budgets: Iterable[Budget], month: str) -> Dict[str, Budget]:
    """
    Pick the effective budget per category for ``month``: a budget pinned to
    the month beats a general one, budgets for other months are ignored.
    """
    resolved: Dict[str, Budget] = {}
    for budget in budgets:
        if budget.month is not None and budget.month != month:
            continue
        existing = resolved.get(budget.category)
        if existing is None or (existing.month is None and budget.month == month):
            resolved[budget.category] = budget
    return resolved


def budget_status(percentage_used: float) -> BudgetStatus:
    if percentage_used > OVER_BUDGET_PCT:
        return BudgetStatus.OVER_BUDGET
    if percentage_used > ON_TRACK_PCT:
        return BudgetStatus.ON_TRACK
    return BudgetStatus.UNDER_BUDGET


def _budget_for(
    snap: CategorySnapshot,
    past: Optional[CategorySnapshot],
    custom: Optional[Budget],
    month: str,
):
    if custom is not None and custom.month in (month, None):
        return custom.amount, True
    if past is not None:
        return past.total * FALLBACK_BUFFER, False
    # No reference at all: the category is measured against itself.
    return snap.total * FALLBACK_BUFFER, False


def compare(
    current: List[CategorySnapshot],
    historical: List[CategorySnapshot],
    custom_budgets: Dict[str, Budget],
    month: str,
) -> List[BudgetComparison]:
    baseline = {snap.category: snap for snap in historical}

    comparisons = []
    for snap in current:
        budgeted, is_custom = _budget_for(
            snap, baseline.get(snap.category), custom_budgets.get(snap.category), month
        )
        actual = snap.total
        percentage_used = actual / budgeted * 100 if budgeted > 0 else 0.0

        comparisons.append(
            BudgetComparison(
                category=snap.category,
                budgeted=round(budgeted, 2),
                actual=round(actual, 2),
                difference=round(budgeted - actual, 2),
                percentage_used=round(percentage_used, 2),
                status=budget_status(percentage_used),
                is_custom_budget=is_custom,
            )
        )
    return comparisons
