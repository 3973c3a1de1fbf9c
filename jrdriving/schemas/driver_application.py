# jrdriving/schemas/driver_application.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from jrdriving.models.driver_application import ApplicationStatus
from jrdriving.schemas.base import AttachmentIn, AttachmentOut, CamelModel


class DriverApplicationCreate(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=4, max_length=100)
    years_experience: int = Field(..., ge=0, le=50)
    license_types: list[str] = Field(..., min_length=1)
    regions: list[str] = Field(..., min_length=1)
    availability: str = Field(..., min_length=1, max_length=255)
    has_own_vehicle: bool
    has_company: bool
    message: Optional[str] = None
    attachments: list[AttachmentIn] = []


class DriverApplicationUpdate(CamelModel):
    status: ApplicationStatus


class DriverApplicationCreated(CamelModel):
    id: int
    message: str


class DriverApplicationOut(CamelModel):
    id: int
    full_name: str
    email: str
    phone: str
    years_experience: int
    license_types: list[str]
    regions: list[str]
    availability: str
    has_own_vehicle: bool
    has_company: bool
    message: Optional[str]
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime
    attachments: list[AttachmentOut] = []

    @classmethod
    def from_record(cls, application, attachments=()) -> "DriverApplicationOut":
        out = cls.model_validate(application)
        return out.model_copy(update={"attachments": [AttachmentOut.model_validate(a) for a in attachments]})
