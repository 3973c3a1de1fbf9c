# jrdriving/models/mission.py
"""
Missions table: one vehicle convoy from a departure to an arrival address.
mission_number is the public tracking key and never changes once issued.
actual_start_time / actual_end_time are stamped by the lifecycle service.
"""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text

from jrdriving.database import Base


class MissionStatus(str, enum.Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MissionPriority(str, enum.Enum):
    NORMAL = "normal"
    URGENT = "urgent"
    EXPRESS = "express"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class Mission(Base):
    __tablename__ = "missions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("profiles.id"), index=True)
    mission_number = Column(String(100), unique=True, nullable=False, index=True)
    departure_address = Column(String(255), nullable=False)
    departure_city = Column(String(255), nullable=False)
    departure_postal_code = Column(String(50), nullable=False)
    arrival_address = Column(String(255), nullable=False)
    arrival_city = Column(String(255), nullable=False)
    arrival_postal_code = Column(String(50), nullable=False)
    scheduled_date = Column(DateTime, nullable=False)
    scheduled_time = Column(String(50))
    actual_start_time = Column(DateTime)
    actual_end_time = Column(DateTime)
    distance_km = Column(Float)
    price = Column(Float)
    status = Column(Enum(MissionStatus, values_callable=_values, name="mission_status"),
                    default=MissionStatus.PENDING, nullable=False, index=True)
    priority = Column(Enum(MissionPriority, values_callable=_values, name="mission_priority"),
                      default=MissionPriority.NORMAL, nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Mission {self.mission_number} status={self.status}>"
