# jrdriving/schemas/mission.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from jrdriving.models.mission import MissionPriority, MissionStatus
from jrdriving.schemas.base import CamelModel


class MissionStatusUpdate(CamelModel):
    status: MissionStatus


class MissionAssign(CamelModel):
    driver_id: int


class MissionCreate(CamelModel):
    client_id: int
    driver_id: Optional[int] = None
    departure_address: str = Field(..., min_length=1, max_length=255)
    departure_city: str = Field(..., min_length=1, max_length=255)
    departure_postal_code: str = Field(..., min_length=1, max_length=50)
    arrival_address: str = Field(..., min_length=1, max_length=255)
    arrival_city: str = Field(..., min_length=1, max_length=255)
    arrival_postal_code: str = Field(..., min_length=1, max_length=50)
    scheduled_date: datetime
    scheduled_time: Optional[str] = Field(None, max_length=50)
    distance_km: Optional[float] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
    priority: MissionPriority = MissionPriority.NORMAL
    notes: Optional[str] = None


class MissionOut(CamelModel):
    id: int
    client_id: int
    driver_id: Optional[int]
    mission_number: str
    departure_address: str
    departure_city: str
    departure_postal_code: str
    arrival_address: str
    arrival_city: str
    arrival_postal_code: str
    scheduled_date: datetime
    scheduled_time: Optional[str]
    actual_start_time: Optional[datetime]
    actual_end_time: Optional[datetime]
    distance_km: Optional[float]
    price: Optional[float]
    status: MissionStatus
    priority: MissionPriority
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


class MissionTrackingOut(CamelModel):
    """Public projection: no addresses, price, contact details or internal ids."""
    mission_number: str
    status: MissionStatus
    priority: MissionPriority
    departure_city: str
    arrival_city: str
    scheduled_date: datetime
    updated_at: datetime
    driver_name: Optional[str] = None


class MissionStatusEvent(CamelModel):
    mission_number: str
    status: MissionStatus
    previous_status: Optional[MissionStatus] = None
    priority: MissionPriority
    driver_id: Optional[int]
    client_id: int
    scheduled_date: datetime
    updated_at: datetime
