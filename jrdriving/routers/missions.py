# jrdriving/routers/missions.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from jrdriving.dependencies import get_mission_service, require
from jrdriving.models.mission import MissionStatus
from jrdriving.schemas.mission import (
    MissionAssign, MissionCreate, MissionOut, MissionStatusUpdate, MissionTrackingOut,
)
from jrdriving.services.mission_service import MissionService
from jrdriving.services.permissions import Caller, Capability

router = APIRouter(prefix="/missions", tags=["missions"])


@router.get("/track/{mission_number}", response_model=MissionTrackingOut,
            summary="Public tracking by mission number")
def track_mission(mission_number: str, service: MissionService = Depends(get_mission_service)):
    return service.track_by_number(mission_number)


@router.get("", response_model=list[MissionOut], summary="Missions visible to the caller")
def list_missions(
    mission_status: Optional[MissionStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    caller: Caller = Depends(require(Capability.MISSION_LIST)),
    service: MissionService = Depends(get_mission_service),
):
    """Admins see every mission, drivers their assignments, clients their own bookings."""
    return service.list_missions(caller, mission_status, limit)


@router.post("", response_model=MissionOut, status_code=status.HTTP_201_CREATED, summary="Create a mission")
async def create_mission(
    body: MissionCreate,
    caller: Caller = Depends(require(Capability.MISSION_CREATE)),
    service: MissionService = Depends(get_mission_service),
):
    return await service.create_mission(body)


@router.patch("/{mission_id}/status", status_code=status.HTTP_204_NO_CONTENT,
              summary="Move a mission through its lifecycle")
async def change_mission_status(
    mission_id: int,
    body: MissionStatusUpdate,
    caller: Caller = Depends(require(Capability.MISSION_CHANGE_STATUS)),
    service: MissionService = Depends(get_mission_service),
):
    await service.change_status(mission_id, body.status, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{mission_id}/assign", response_model=MissionOut, summary="Assign a driver")
async def assign_driver(
    mission_id: int,
    body: MissionAssign,
    caller: Caller = Depends(require(Capability.MISSION_ASSIGN)),
    service: MissionService = Depends(get_mission_service),
):
    return await service.assign_driver(mission_id, body.driver_id)
