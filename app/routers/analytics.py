"""
Analytics Router
Spending projections, anomaly alerts, insights, monthly trend and budget comparison
"""
import logging
from datetime import date
from typing import Callable, List, Optional, TypeVar

from botocore.exceptions import ClientError
from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from app.core.config import settings
from app.core.security import decode_access_token
from app.db.dynamo import get_store
from app.models.analytics import (
    AnomalyReport,
    BudgetComparison,
    Insight,
    MonthlyTrendPoint,
    ProjectionMethod,
    ProjectionResult,
)
from app.utils.analyzer import FinanceAnalyzer

router = APIRouter()
logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """Extract user_id from JWT token"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token required")

    token = authorization.replace("Bearer ", "")
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user_id


def get_analyzer() -> FinanceAnalyzer:
    return FinanceAnalyzer(
        get_store(),
        projection_months=settings.PROJECTION_MONTHS,
        history_months=settings.HISTORY_MONTHS,
    )


def get_today() -> date:
    return date.today()


def _run(action: str, user_id: str, compute: Callable[[], T]) -> T:
    try:
        return compute()
    except HTTPException:
        raise
    except ClientError as e:
        logger.error(f"Store unavailable while computing {action} for {user_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Transaction store unavailable")
    except Exception as e:
        logger.error(f"Unexpected error computing {action} for {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.get("/projection", response_model=ProjectionResult)
def get_projection(
    method: ProjectionMethod = Query(default=ProjectionMethod(settings.DEFAULT_PROJECTION_METHOD)),
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_analyzer),
    today: date = Depends(get_today),
):
    """Next month's spending forecast."""
    return _run("projection", user_id, lambda: analyzer.get_projection(user_id, today, method))


@router.get("/anomalies", response_model=AnomalyReport)
def get_anomalies(
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_analyzer),
    today: date = Depends(get_today),
):
    """Categories whose average spend this month is well above their history."""
    return _run("anomalies", user_id, lambda: analyzer.get_anomalies(user_id, today))


@router.get("/insights", response_model=List[Insight])
def get_insights(
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_analyzer),
    today: date = Depends(get_today),
):
    return _run("insights", user_id, lambda: analyzer.get_insights(user_id, today))


@router.get("/trend", response_model=List[MonthlyTrendPoint])
def get_monthly_trend(
    months: int = Query(default=settings.TREND_MONTHS, ge=1, le=24),
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_analyzer),
    today: date = Depends(get_today),
):
    return _run("monthly trend", user_id, lambda: analyzer.get_monthly_trend(user_id, months, today))


@router.get("/budget-comparison", response_model=List[BudgetComparison])
def get_budget_comparison(
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_analyzer),
    today: date = Depends(get_today),
):
    """Budget vs. actual for every category spent in this month."""
    return _run("budget comparison", user_id, lambda: analyzer.get_budget_comparison(user_id, today))
