"""
Health check endpoints.
"""

import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, status
from sqlalchemy import func, text
from sqlalchemy.orm import Session
from datetime import datetime, timezone

from app.core.config import settings
from app.core.database import get_db
from app.models.account_token import AccountToken

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """Liveness probe; does not touch the database."""
    return {"status": "healthy", "timestamp": _timestamp()}


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Readiness check.

    - database: SELECT 1
    - tokens: outstanding code records per purpose
    - email: whether an SES sender address is configured
    """
    checks: Dict[str, Any] = {}
    healthy = True

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}

        rows = db.query(AccountToken.purpose, func.count(AccountToken.id)).group_by(AccountToken.purpose).all()
        checks["tokens"] = {
            "status": "healthy",
            "outstanding": {purpose.value: count for purpose, count in rows},
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        healthy = False
        checks["database"] = {"status": "unhealthy", "message": "Database error"}

    checks["email"] = {
        "status": "healthy" if settings.AWS_SES_FROM_EMAIL else "unhealthy",
        "sender": settings.AWS_SES_FROM_EMAIL,
    }
    healthy = healthy and bool(settings.AWS_SES_FROM_EMAIL)

    return {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": _timestamp(),
        "checks": checks,
    }
