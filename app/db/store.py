from typing import List, Optional, Protocol

from app.models.transaction import Budget, Transaction, TransactionType
from app.utils.aggregation import DateWindow


class TransactionStore(Protocol):
    """Read access to a user's transactions and budgets."""

    def list_transactions(
        self,
        user_id: str,
        type_: Optional[TransactionType] = None,
        window: Optional[DateWindow] = None,
    ) -> List[Transaction]:
        ...

    def list_budgets(self, user_id: str, month: Optional[str] = None) -> List[Budget]:
        ...
