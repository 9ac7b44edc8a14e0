from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class ProjectionMethod(str, Enum):
    LINEAR_REGRESSION = "linear_regression"
    WEIGHTED_AVERAGE = "weighted_average"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BudgetStatus(str, Enum):
    UNDER_BUDGET = "under_budget"
    ON_TRACK = "on_track"
    OVER_BUDGET = "over_budget"


class InsightType(str, Enum):
    WARNING = "warning"
    POSITIVE = "positive"
    INFO = "info"


class MonthlyPoint(BaseModel):
    month: str  # YYYY-MM
    total: float
    count: int


class CategorySnapshot(BaseModel):
    category: str
    total: float
    count: int
    average: float


class MonthlyTrendPoint(MonthlyPoint):
    average: float
    previous_month_diff: float
    percentage_change: float


class ProjectionResult(BaseModel):
    current_month: str
    projection: float
    trend: Trend
    confidence: float
    monthly_data: List[MonthlyPoint]
    method: ProjectionMethod


class AnomalyAlert(BaseModel):
    category: str
    current_amount: float
    average_amount: float
    percentage_over: float
    severity: Severity
    message: str


class AnomalyReport(BaseModel):
    alerts: List[AnomalyAlert]
    analyzed_transactions: int
    analysis_period: str


class BudgetComparison(BaseModel):
    category: str
    budgeted: float
    actual: float
    difference: float
    percentage_used: float
    status: BudgetStatus
    is_custom_budget: bool = False


class Insight(BaseModel):
    id: str
    type: InsightType
    title: str
    message: str
    category: Optional[str] = None
    priority: int
