# jrdriving/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + configured webhook destinations.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from jrdriving.database import get_db
from jrdriving.dependencies import get_notifier
from jrdriving.services.notifier import EventKind, Notifier

router = APIRouter(tags=["health"])


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db), notifier: Notifier = Depends(get_notifier)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Number of webhook destinations per event kind
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "database": "unknown",
        "webhooks": {kind.value: len(notifier.destinations(kind)) for kind in EventKind},
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
