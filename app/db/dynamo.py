import logging
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from app.core.config import settings
from app.models.transaction import Budget, Transaction, TransactionType
from app.utils.aggregation import DateWindow

logger = logging.getLogger(__name__)


class DynamoStore:
    """
    Transactions and budgets kept in DynamoDB, both tables partitioned by
    ``user_id``. Errors from DynamoDB are logged and re-raised to the caller.
    """

    def __init__(
        self,
        region: str = settings.DYNAMO_REGION,
        transactions_table: str = settings.DYNAMO_TRANSACTIONS_TABLE,
        budgets_table: str = settings.DYNAMO_BUDGETS_TABLE,
        resource=None,
    ) -> None:
        dynamodb = resource or boto3.resource("dynamodb", region_name=region)
        self.transactions_table = dynamodb.Table(transactions_table)
        self.budgets_table = dynamodb.Table(budgets_table)

    def list_transactions(
        self,
        user_id: str,
        type_: Optional[TransactionType] = None,
        window: Optional[DateWindow] = None,
    ) -> List[Transaction]:
        """Query a user's transactions, optionally by type and inclusive date range."""
        filters = []
        if type_ is not None:
            filters.append(Attr("type").eq(TransactionType(type_).value))
        if window is not None and window.start is not None:
            filters.append(Attr("date").gte(window.start.isoformat()))
        if window is not None and window.end is not None:
            filters.append(Attr("date").lte(window.end.isoformat()))

        query: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(user_id)}
        if filters:
            condition = filters[0]
            for extra in filters[1:]:
                condition = condition & extra
            query["FilterExpression"] = condition

        try:
            items = _query_all(self.transactions_table, query)
        except ClientError as e:
            logger.error(f"list_transactions failed for {user_id}: {e.response['Error']['Message']}")
            raise

        return [_to_transaction(item) for item in items]

    def list_budgets(self, user_id: str, month: Optional[str] = None) -> List[Budget]:
        """Query a user's budgets; ``month`` keeps that month's budgets plus the general ones."""
        query: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(user_id)}
        if month is not None:
            query["FilterExpression"] = Attr("month").eq(month) | Attr("month").not_exists() | Attr("month").eq(None)

        try:
            items = _query_all(self.budgets_table, query)
        except ClientError as e:
            logger.error(f"list_budgets failed for {user_id}: {e.response['Error']['Message']}")
            raise

        return [
            Budget(category=item["category"], amount=item["amount"], month=item.get("month"))
            for item in items
        ]


def _query_all(table, query: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Run a query and follow ``LastEvaluatedKey`` until every page is read."""
    items: List[Dict[str, Any]] = []
    kwargs = dict(query)
    while True:
        response = table.query(**kwargs)
        items.extend(_from_dynamo(item) for item in response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return items
        kwargs["ExclusiveStartKey"] = last_key


def _to_transaction(item: Dict[str, Any]) -> Transaction:
    return Transaction(
        id=item.get("transaction_id") or item["id"],
        amount=item["amount"],
        type=item["type"],
        category=item.get("category"),
        date=item["date"],
        created_at=item.get("created_at"),
    )


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj


@lru_cache
def get_store() -> DynamoStore:
    return DynamoStore()
