from datetime import date
from decimal import Decimal

import pytest
from botocore.exceptions import ClientError

from app.db.dynamo import DynamoStore
from app.models.transaction import TransactionType
from app.utils.aggregation import DateWindow


class FakeTable:
    def __init__(self, name, pages=None, error=None):
        self.name = name
        self.pages = list(pages or [])
        self.error = error
        self.queries = []

    def query(self, **kwargs):
        self.queries.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.pages.pop(0)


class FakeResource:
    def __init__(self, **tables):
        self.tables = tables

    def Table(self, name):
        return self.tables[name]


def make_store(transactions=None, budgets=None):
    resource = FakeResource(
        txns=transactions or FakeTable("txns"),
        budgets=budgets or FakeTable("budgets"),
    )
    return DynamoStore(transactions_table="txns", budgets_table="budgets", resource=resource)


def test_list_transactions_follows_pagination_and_converts_decimals():
    table = FakeTable("txns", pages=[
        {
            "Items": [{"user_id": "u1", "transaction_id": "t1", "amount": Decimal("12.50"),
                       "type": "expense", "category": "Food", "date": "2025-03-01"}],
            "LastEvaluatedKey": {"user_id": "u1", "transaction_id": "t1"},
        },
        {
            "Items": [{"user_id": "u1", "transaction_id": "t2", "amount": Decimal("40"),
                       "type": "expense", "category": None, "date": "2025-03-02"}],
        },
    ])
    store = make_store(transactions=table)

    txns = store.list_transactions(
        "u1", TransactionType.EXPENSE, DateWindow(start=date(2025, 3, 1), end=date(2025, 3, 31))
    )

    assert [(t.id, t.amount, t.category) for t in txns] == [("t1", 12.5, "Food"), ("t2", 40.0, None)]
    assert txns[0].date == date(2025, 3, 1)
    assert len(table.queries) == 2
    assert "FilterExpression" in table.queries[0]
    assert table.queries[1]["ExclusiveStartKey"] == {"user_id": "u1", "transaction_id": "t1"}


def test_list_transactions_without_filters():
    table = FakeTable("txns", pages=[{"Items": []}])
    assert make_store(transactions=table).list_transactions("u1") == []
    assert "FilterExpression" not in table.queries[0]


def test_list_budgets():
    table = FakeTable("budgets", pages=[{"Items": [
        {"user_id": "u1", "budget_id": "b1", "category": "Food", "amount": Decimal("300")},
        {"user_id": "u1", "budget_id": "b2", "category": "Food", "amount": Decimal("250.5"), "month": "2025-03"},
    ]}])
    budgets = make_store(budgets=table).list_budgets("u1", "2025-03")
    assert [(b.category, b.amount, b.month) for b in budgets] == [("Food", 300.0, None), ("Food", 250.5, "2025-03")]
    assert "FilterExpression" in table.queries[0]


def test_client_errors_are_reraised():
    error = ClientError({"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "Slow down"}}, "Query")
    store = make_store(transactions=FakeTable("txns", error=error), budgets=FakeTable("budgets", error=error))
    with pytest.raises(ClientError):
        store.list_transactions("u1")
    with pytest.raises(ClientError):
        store.list_budgets("u1")
