# jrdriving/services/dashboard_service.py
"""
Admin dashboard rollups over missions, quotes, profiles and applications.
Read-only. Punctuality and insight rules are plain functions so they can be
checked without a database.
"""

import math
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from jrdriving.config import Settings
from jrdriving.models.driver_application import DriverApplication, DriverApplicationAttachment
from jrdriving.models.mission import Mission, MissionStatus
from jrdriving.models.quote import Quote, QuoteAttachment, QuoteStatus
from jrdriving.models.user import Profile, Role
from jrdriving.schemas.dashboard import DashboardOut, DashboardStats
from jrdriving.schemas.driver_application import DriverApplicationOut
from jrdriving.schemas.mission import MissionOut
from jrdriving.schemas.quote import QuoteOut
from jrdriving.services.mission_service import ACTIVE_STATUSES
from jrdriving.utils.attachments import group_by
from jrdriving.utils.logger import get_logger

logger = get_logger(__name__)

RECENT_LIMIT = 5


def punctuality_rate(completed_missions: Iterable) -> int:
    """
    Share of completed missions carrying both actual start and end stamps, as a
    whole percentage (half rounds up), capped at 100. 100 when nothing is completed.
    """
    completed = list(completed_missions)
    if not completed:
        return 100
    with_timing = sum(1 for m in completed if m.actual_start_time and m.actual_end_time)
    return min(100, math.floor(with_timing * 100 / len(completed) + 0.5))


def build_insights(pending_quotes: int, active_missions: int, drivers: int,
                   punctuality: int, settings: Settings) -> list[str]:
    insights = []
    if pending_quotes > settings.PENDING_QUOTES_ALERT_THRESHOLD:
        insights.append(f"Many pending quotes: {pending_quotes} requests await an answer, "
                        f"consider an automated follow-up campaign.")
    if active_missions > max(drivers, 1) * settings.DRIVER_LOAD_RATIO:
        insights.append(f"High driver load: {active_missions} active missions for {drivers} driver(s), "
                        f"find available profiles or schedule reinforcements.")
    if punctuality < settings.PUNCTUALITY_TARGET:
        insights.append(f"Punctuality is slipping: {punctuality}% of completed missions were tracked end to end, "
                        f"review express missions to adjust logistics buffers.")
    if not insights:
        insights.append("Activity is stable: keep the service level and automate follow-ups for loyal clients.")
    return insights


def build_dashboard(db: Session, settings: Settings, days: Optional[int] = None) -> DashboardOut:
    missions = db.query(Mission)
    if days:
        missions = missions.filter(Mission.created_at >= datetime.utcnow() - timedelta(days=days))

    total_missions = missions.count()
    active_missions = missions.filter(
        Mission.status.in_(list(ACTIVE_STATUSES))).count()
    completed = missions.filter(Mission.status == MissionStatus.COMPLETED).all()
    revenue = sum(m.price for m in completed if m.price)
    punctuality = punctuality_rate(completed)

    total_drivers = db.query(func.count(Profile.id)).filter(Profile.role == Role.DRIVER).scalar() or 0
    total_clients = db.query(func.count(Profile.id)).filter(Profile.role == Role.CLIENT).scalar() or 0

    pending_quotes = (
        db.query(Quote)
        .filter(Quote.status == QuoteStatus.NEW)
        .order_by(Quote.created_at.desc())
        .all()
    )
    quote_files = {}
    if pending_quotes:
        quote_files = group_by(
            db.query(QuoteAttachment)
            .filter(QuoteAttachment.quote_id.in_([q.id for q in pending_quotes]))
            .order_by(QuoteAttachment.id)
            .all(),
            "quote_id",
        )

    recent_missions = missions.order_by(Mission.created_at.desc()).limit(RECENT_LIMIT).all()

    applications = (
        db.query(DriverApplication)
        .order_by(DriverApplication.created_at.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    application_files = {}
    if applications:
        application_files = group_by(
            db.query(DriverApplicationAttachment)
            .filter(DriverApplicationAttachment.application_id.in_([a.id for a in applications]))
            .order_by(DriverApplicationAttachment.id)
            .all(),
            "application_id",
        )

    insights = build_insights(len(pending_quotes), active_missions, total_drivers, punctuality, settings)
    logger.debug(f"[DASHBOARD] missions={total_missions} active={active_missions} "
                 f"pending_quotes={len(pending_quotes)} punctuality={punctuality}%")

    return DashboardOut(
        stats=DashboardStats(
            total_missions=total_missions,
            active_missions=active_missions,
            total_drivers=total_drivers,
            total_clients=total_clients,
            pending_quotes=len(pending_quotes),
            revenue=round(revenue, 2),
            punctuality_rate=punctuality,
        ),
        recent_missions=[MissionOut.model_validate(m) for m in recent_missions],
        pending_quotes=[QuoteOut.from_record(q, quote_files.get(q.id, [])) for q in pending_quotes],
        driver_applications=[DriverApplicationOut.from_record(a, application_files.get(a.id, []))
                             for a in applications],
        ai_insights=insights,
    )
