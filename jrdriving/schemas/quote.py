# jrdriving/schemas/quote.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from jrdriving.models.quote import QuoteStatus
from jrdriving.schemas.base import AttachmentIn, AttachmentOut, CamelModel


class QuoteCreate(CamelModel):
    full_name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=6, max_length=30)
    company_name: Optional[str] = Field(None, max_length=120)
    vehicle_type: str = Field(..., min_length=1, max_length=100)
    departure_location: str = Field(..., min_length=2, max_length=255)
    arrival_location: str = Field(..., min_length=2, max_length=255)
    preferred_date: Optional[datetime] = None
    message: Optional[str] = Field(None, max_length=500)
    attachments: list[AttachmentIn] = []


class QuoteUpdate(CamelModel):
    status: Optional[QuoteStatus] = None
    estimated_price: Optional[float] = Field(None, ge=0)


class QuoteOut(CamelModel):
    id: int
    full_name: str
    email: str
    phone: str
    company_name: Optional[str]
    vehicle_type: str
    departure_location: str
    arrival_location: str
    preferred_date: Optional[datetime]
    message: Optional[str]
    status: QuoteStatus
    estimated_price: Optional[float]
    created_at: datetime
    updated_at: datetime
    attachments: list[AttachmentOut] = []

    @classmethod
    def from_record(cls, quote, attachments=()) -> "QuoteOut":
        out = cls.model_validate(quote)
        return out.model_copy(update={"attachments": [AttachmentOut.model_validate(a) for a in attachments]})
