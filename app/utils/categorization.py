"""
Default category labels and the rule for choosing between two
categorization candidates (keyword matching vs. the AI classifier).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.models.transaction import TransactionType


class DefaultCategory(str, Enum):
    OTHER = "Otros"
    INCOME = "Ingresos"


# Earlier wins on equal confidence
SOURCE_PREFERENCE = ("ai", "keywords")
# Keyword matches above this are trusted without asking the AI classifier
KEYWORD_CONFIDENCE_SHORTCUT = 0.8


@dataclass(frozen=True)
class CategorizationResult:
    category: str
    confidence: float
    source: str
    explanation: Optional[str] = None


def _preference(source: str) -> int:
    try:
        return SOURCE_PREFERENCE.index(source)
    except ValueError:
        return len(SOURCE_PREFERENCE)


def pick_categorization(*candidates: Optional[CategorizationResult]) -> CategorizationResult:
    """Highest confidence wins; ties fall back to ``SOURCE_PREFERENCE``."""
    present = [candidate for candidate in candidates if candidate is not None]
    if not present:
        return CategorizationResult(category=DefaultCategory.OTHER.value, confidence=0.0, source="default")
    return min(present, key=lambda c: (-c.confidence, _preference(c.source)))


def is_confident(result: CategorizationResult) -> bool:
    return result.source == "keywords" and result.confidence > KEYWORD_CONFIDENCE_SHORTCUT


def fallback_category(transaction_type: TransactionType) -> str:
    if TransactionType(transaction_type) is TransactionType.INCOME:
        return DefaultCategory.INCOME.value
    return DefaultCategory.OTHER.value
