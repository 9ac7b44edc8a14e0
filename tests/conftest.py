from datetime import date

import pytest

from tests.factories import InMemoryStore, make_txn

TODAY = date(2025, 3, 20)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def quarter_transactions():
    """Jan 500, Feb 550, Mar 600 of Food, plus an income row that must be ignored."""
    return [
        make_txn(date(2025, 1, 15), 500.0),
        make_txn(date(2025, 2, 15), 550.0),
        make_txn(date(2025, 3, 15), 600.0),
        make_txn(date(2025, 3, 1), 3000.0, category="Ingresos", type_="income"),
    ]


@pytest.fixture
def store(quarter_transactions):
    return InMemoryStore(quarter_transactions)
