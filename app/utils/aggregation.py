"""
Grouping of raw transactions into monthly and per-category snapshots.
"""
from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

from app.models.analytics import CategorySnapshot, MonthlyPoint
from app.models.transaction import Transaction, TransactionType


@dataclass(frozen=True)
class DateWindow:
    """Inclusive date range; a ``None`` bound is open."""

    start: Optional[date] = None
    end: Optional[date] = None

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def subtract_months(day: date, months: int) -> date:
    """Go back ``months`` calendar months, clamping the day to the target month."""
    index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def current_month_window(today: date) -> DateWindow:
    return DateWindow(start=today.replace(day=1), end=today.replace(day=days_in_month(today)))


def trailing_window(today: date, months: int) -> DateWindow:
    return DateWindow(start=subtract_months(today, months))


def filter_transactions(
    transactions: Iterable[Transaction],
    type_: Optional[TransactionType] = TransactionType.EXPENSE,
    window: Optional[DateWindow] = None,
    category: Optional[str] = None,
) -> List[Transaction]:
    selected = []
    for txn in transactions:
        if type_ is not None and txn.type != type_:
            continue
        if window is not None and not window.contains(txn.date):
            continue
        if category is not None and txn.category != category:
            continue
        selected.append(txn)
    return selected


def _partition(
    transactions: Iterable[Transaction],
    key: Callable[[Transaction], Optional[str]],
) -> Dict[str, List[float]]:
    groups: Dict[str, List[float]] = defaultdict(list)
    for txn in transactions:
        label = key(txn)
        if label is None:
            continue
        groups[label].append(float(txn.amount))
    return groups


def monthly_totals(
    transactions: Iterable[Transaction],
    window: Optional[DateWindow] = None,
    category: Optional[str] = None,
    type_: TransactionType = TransactionType.EXPENSE,
) -> List[MonthlyPoint]:
    """Per-calendar-month totals, ascending by month."""
    selected = filter_transactions(transactions, type_, window, category)
    groups = _partition(selected, lambda txn: month_key(txn.date))
    return [
        MonthlyPoint(month=month, total=round(sum(amounts), 2), count=len(amounts))
        for month, amounts in sorted(groups.items())
    ]


def category_totals(
    transactions: Iterable[Transaction],
    window: Optional[DateWindow] = None,
    type_: TransactionType = TransactionType.EXPENSE,
) -> List[CategorySnapshot]:
    """Per-category totals, descending by total. Uncategorised rows are dropped."""
    selected = filter_transactions(transactions, type_, window)
    groups = _partition(selected, lambda txn: txn.category)

    snapshots = []
    for category, amounts in groups.items():
        total = sum(amounts)
        count = len(amounts)
        snapshots.append(
            CategorySnapshot(
                category=category,
                total=round(total, 2),
                count=count,
                average=total / count if count else 0.0,
            )
        )
    snapshots.sort(key=lambda snap: snap.total, reverse=True)
    return snapshots
