# jrdriving/services/mission_service.py
"""
Mission lifecycle: the status state machine, driver assignment and public tracking.

    pending → assigned → in_progress → completed
         └──────────┴───────────┴──→ cancelled

Forward moves may skip states; backward moves and moves out of a terminal
state are rejected. Repeating the current status is accepted as a no-op
transition. actual_start_time / actual_end_time are stamped the first time
the mission enters in_progress / completed and are never overwritten.

Status writes are compare-and-set on (id, previous status): a concurrent
change between read and write surfaces as Conflict instead of a lost update.
Every persisted transition emits a mission_status webhook event; delivery
is fire-and-forget and never rolls the transition back.
"""

import secrets
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jrdriving.errors import Conflict, Forbidden, InvalidTransition, NotFound, ValidationError
from jrdriving.models.mission import Mission, MissionStatus
from jrdriving.models.user import Profile, Role
from jrdriving.schemas.mission import MissionCreate, MissionStatusEvent, MissionTrackingOut
from jrdriving.services.notifier import EventKind, Notifier
from jrdriving.services.permissions import Caller
from jrdriving.utils.logger import get_logger

logger = get_logger(__name__)

_RANK = {
    MissionStatus.PENDING: 0,
    MissionStatus.ASSIGNED: 1,
    MissionStatus.IN_PROGRESS: 2,
    MissionStatus.COMPLETED: 3,
}
TERMINAL_STATUSES = frozenset({MissionStatus.COMPLETED, MissionStatus.CANCELLED})
ACTIVE_STATUSES = frozenset({MissionStatus.ASSIGNED, MissionStatus.IN_PROGRESS})


def check_transition(current: MissionStatus, target: MissionStatus):
    """Raise InvalidTransition unless current → target is allowed."""
    current, target = MissionStatus(current), MissionStatus(target)
    if current == target:
        return
    if current in TERMINAL_STATUSES:
        raise InvalidTransition(f"Mission is already {current.value}")
    if target == MissionStatus.CANCELLED:
        return
    if _RANK[target] < _RANK[current]:
        raise InvalidTransition(f"Cannot move mission from {current.value} back to {target.value}")


def generate_mission_number(now: Optional[datetime] = None) -> str:
    now = now or datetime.utcnow()
    return f"JR-{now:%Y%m%d}-{secrets.token_hex(3).upper()}"


class MissionService:
    def __init__(self, db: Session, notifier: Notifier):
        self.db = db
        self.notifier = notifier

    def _get(self, mission_id: int) -> Mission:
        mission = self.db.query(Mission).filter(Mission.id == mission_id).first()
        if not mission:
            raise NotFound("Mission not found")
        return mission

    def _emit(self, mission: Mission, previous: Optional[MissionStatus]):
        event = MissionStatusEvent(
            mission_number=mission.mission_number,
            status=mission.status,
            previous_status=previous,
            priority=mission.priority,
            driver_id=mission.driver_id,
            client_id=mission.client_id,
            scheduled_date=mission.scheduled_date,
            updated_at=mission.updated_at,
        )
        self.notifier.notify(EventKind.MISSION_STATUS, event.model_dump(mode="json", by_alias=True))

    async def change_status(self, mission_id: int, new_status: MissionStatus, caller: Caller):
        mission = self._get(mission_id)

        if not caller.is_admin and mission.driver_id != caller.profile_id:
            raise Forbidden("Only the assigned driver or an admin can update this mission")

        previous = MissionStatus(mission.status)
        new_status = MissionStatus(new_status)
        check_transition(previous, new_status)

        now = datetime.utcnow()
        updates = {Mission.status: new_status, Mission.updated_at: now}
        if new_status == MissionStatus.IN_PROGRESS and mission.actual_start_time is None:
            updates[Mission.actual_start_time] = now
        if new_status == MissionStatus.COMPLETED and mission.actual_end_time is None:
            updates[Mission.actual_end_time] = now

        updated = (
            self.db.query(Mission)
            .filter(Mission.id == mission_id, Mission.status == previous)
            .update(updates, synchronize_session=False)
        )
        if updated == 0:
            self.db.rollback()
            raise Conflict("Mission was modified by another request, reload and retry")
        self.db.commit()

        mission = self._get(mission_id)
        logger.info(f"[MISSION] {mission.mission_number}: {previous.value} → {new_status.value} "
                    f"by {caller.role.value} {caller.profile_id}")
        self._emit(mission, previous)

    def track_by_number(self, mission_number: str) -> MissionTrackingOut:
        mission_number = (mission_number or "").strip()
        if not mission_number:
            raise ValidationError("Mission number is required")

        mission = self.db.query(Mission).filter(Mission.mission_number == mission_number).first()
        if not mission:
            raise NotFound("Mission not found")

        driver_name = None
        if mission.driver_id:
            driver = self.db.query(Profile).filter(Profile.id == mission.driver_id).first()
            driver_name = driver.full_name if driver else None

        return MissionTrackingOut(
            mission_number=mission.mission_number,
            status=mission.status,
            priority=mission.priority,
            departure_city=mission.departure_city,
            arrival_city=mission.arrival_city,
            scheduled_date=mission.scheduled_date,
            updated_at=mission.updated_at,
            driver_name=driver_name,
        )

    def _require_profile(self, profile_id: int, role: Role, field: str) -> Profile:
        profile = self.db.query(Profile).filter(Profile.id == profile_id).first()
        if not profile or profile.role != role:
            raise ValidationError("Invalid data", fields={field: [f"No {role.value} profile with id {profile_id}"]})
        return profile

    async def create_mission(self, data: MissionCreate) -> Mission:
        self._require_profile(data.client_id, Role.CLIENT, "clientId")
        if data.driver_id is not None:
            self._require_profile(data.driver_id, Role.DRIVER, "driverId")

        now = datetime.utcnow()
        mission = Mission(
            **data.model_dump(),
            mission_number=generate_mission_number(now),
            status=MissionStatus.ASSIGNED if data.driver_id is not None else MissionStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.db.add(mission)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Mission number collision, retry")
        self.db.refresh(mission)

        logger.info(f"[MISSION] Created {mission.mission_number} for client {mission.client_id}")
        self._emit(mission, None)
        return mission

    async def assign_driver(self, mission_id: int, driver_id: int) -> Mission:
        mission = self._get(mission_id)
        self._require_profile(driver_id, Role.DRIVER, "driverId")

        previous = MissionStatus(mission.status)
        if previous in TERMINAL_STATUSES:
            raise InvalidTransition(f"Mission is already {previous.value}")

        updates = {Mission.driver_id: driver_id, Mission.updated_at: datetime.utcnow()}
        if previous == MissionStatus.PENDING:
            updates[Mission.status] = MissionStatus.ASSIGNED

        updated = (
            self.db.query(Mission)
            .filter(Mission.id == mission_id, Mission.status == previous)
            .update(updates, synchronize_session=False)
        )
        if updated == 0:
            self.db.rollback()
            raise Conflict("Mission was modified by another request, reload and retry")
        self.db.commit()

        mission = self._get(mission_id)
        logger.info(f"[MISSION] {mission.mission_number} assigned to driver {driver_id}")
        if mission.status != previous:
            self._emit(mission, previous)
        return mission

    def list_missions(self, caller: Caller, status: Optional[MissionStatus] = None, limit: int = 50):
        q = self.db.query(Mission)
        if caller.role == Role.DRIVER:
            q = q.filter(Mission.driver_id == caller.profile_id)
        elif caller.role == Role.CLIENT:
            q = q.filter(Mission.client_id == caller.profile_id)
        if status:
            q = q.filter(Mission.status == status)
        return q.order_by(Mission.created_at.desc()).limit(limit).all()
