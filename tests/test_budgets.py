from app.models.analytics import BudgetStatus, CategorySnapshot
from app.models.transaction import Budget
from app.utils.budgets import compare, resolve_budgets

MONTH = "2025-03"


def snap(category, total, count=1):
    return CategorySnapshot(category=category, total=total, count=count, average=total / count)


def test_month_specific_budget_overrides_general_in_any_order():
    general = Budget(category="Food", amount=300.0)
    pinned = Budget(category="Food", amount=250.0, month=MONTH)
    assert resolve_budgets([general, pinned], MONTH)["Food"] is pinned
    assert resolve_budgets([pinned, general], MONTH)["Food"] is pinned


def test_budgets_for_other_months_are_ignored():
    resolved = resolve_budgets([Budget(category="Food", amount=300.0, month="2025-02")], MONTH)
    assert resolved == {}


def test_custom_budget_status_boundaries():
    custom = {"Food": Budget(category="Food", amount=100.0)}
    assert compare([snap("Food", 80.0)], [], custom, MONTH)[0].status is BudgetStatus.UNDER_BUDGET
    assert compare([snap("Food", 80.5)], [], custom, MONTH)[0].status is BudgetStatus.ON_TRACK
    assert compare([snap("Food", 100.0)], [], custom, MONTH)[0].status is BudgetStatus.ON_TRACK
    assert compare([snap("Food", 100.5)], [], custom, MONTH)[0].status is BudgetStatus.OVER_BUDGET


def test_custom_budget_comparison_fields():
    custom = resolve_budgets([Budget(category="Food", amount=400.0, month=MONTH)], MONTH)
    result = compare([snap("Food", 300.0, count=3)], [snap("Food", 900.0)], custom, MONTH)[0]
    assert result.budgeted == 400.0
    assert result.actual == 300.0
    assert result.difference == 100.0
    assert result.percentage_used == 75.0
    assert result.is_custom_budget is True


def test_historical_fallback_adds_ten_percent():
    result = compare([snap("Food", 660.0)], [snap("Food", 500.0)], {}, MONTH)[0]
    assert result.budgeted == 550.0
    assert result.percentage_used == 120.0
    assert result.status is BudgetStatus.OVER_BUDGET
    assert result.is_custom_budget is False


def test_pinned_budget_for_another_month_falls_back_to_history():
    custom = {"Food": Budget(category="Food", amount=50.0, month="2025-01")}
    result = compare([snap("Food", 100.0)], [snap("Food", 200.0)], custom, MONTH)[0]
    assert result.budgeted == 220.0
    assert result.is_custom_budget is False


def test_category_without_history_is_measured_against_itself():
    # Known oddity: a new category always lands at ~90.9% of its own inferred budget.
    for total in (1.0, 75.0, 12000.0):
        result = compare([snap("Pets", total)], [], {}, MONTH)[0]
        assert result.percentage_used == 90.91
        assert result.status is BudgetStatus.ON_TRACK
        assert result.is_custom_budget is False


def test_zero_budget_does_not_divide_by_zero():
    result = compare([snap("Food", 50.0)], [snap("Food", 0.0, count=1)], {}, MONTH)[0]
    assert result.budgeted == 0.0
    assert result.percentage_used == 0.0
    assert result.status is BudgetStatus.UNDER_BUDGET


def test_output_follows_current_snapshot_order():
    current = [snap("Rent", 900.0), snap("Food", 300.0), snap("Transport", 50.0)]
    assert [c.category for c in compare(current, [], {}, MONTH)] == ["Rent", "Food", "Transport"]
