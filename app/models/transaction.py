import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Transaction(BaseModel):
    id: str
    amount: float = Field(gt=0)
    type: TransactionType
    category: Optional[str] = None
    date: dt.date
    created_at: Optional[dt.datetime] = None


class Budget(BaseModel):
    category: str
    amount: float = Field(gt=0)
    month: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}$")  # None = any month
