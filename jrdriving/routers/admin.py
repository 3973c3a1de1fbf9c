# jrdriving/routers/admin.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jrdriving.config import Settings
from jrdriving.database import get_db
from jrdriving.dependencies import get_settings, require
from jrdriving.schemas.dashboard import DashboardOut
from jrdriving.services.dashboard_service import build_dashboard
from jrdriving.services.permissions import Caller, Capability

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/dashboard", response_model=DashboardOut, summary="Admin dashboard rollups")
def get_dashboard(
    days: Optional[int] = Query(None, ge=1, description="Only count missions created in the last N days"),
    caller: Caller = Depends(require(Capability.DASHBOARD_READ)),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    return build_dashboard(db, settings, days)
