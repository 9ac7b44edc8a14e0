"""
Health Check Router
Service liveness and store connectivity
"""
from fastapi import APIRouter, Depends
from datetime import datetime, timezone
import logging

from app.core.config import settings
from app.db.dynamo import DynamoStore, get_store

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def _check_table(table) -> dict:
    try:
        table.scan(Limit=1)
        return {"name": table.name, "status": "accessible"}
    except Exception as e:
        logger.error(f"DynamoDB check failed for {table.name}: {str(e)}")
        return {"name": table.name, "status": "error", "error": str(e)}


@router.get("/status")
def store_status(store: DynamoStore = Depends(get_store)):
    """
    Check that the transactions and budgets tables can be read.
    """
    tables = {
        "transactions": _check_table(store.transactions_table),
        "budgets": _check_table(store.budgets_table),
    }
    connected = all(table["status"] == "accessible" for table in tables.values())

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "region": settings.DYNAMO_REGION,
        "tables": tables,
        "overall_status": "healthy" if connected else "degraded",
    }
