# jrdriving/models/quote.py
"""
Quote requests from prospective clients plus their uploaded files.
Attachment content is stored as base64 text in its own table so quote scans stay small.
"""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text

from jrdriving.database import Base


class QuoteStatus(str, enum.Enum):
    NEW = "new"
    QUOTED = "quoted"
    CONVERTED = "converted"
    DECLINED = "declined"


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(100), nullable=False)
    company_name = Column(String(255))
    vehicle_type = Column(String(100), nullable=False)
    departure_location = Column(String(255), nullable=False)
    arrival_location = Column(String(255), nullable=False)
    preferred_date = Column(DateTime)
    message = Column(Text)
    status = Column(Enum(QuoteStatus, values_callable=lambda e: [s.value for s in e], name="quote_status"),
                    default=QuoteStatus.NEW, nullable=False, index=True)
    estimated_price = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Quote {self.id} status={self.status}>"


class QuoteAttachment(Base):
    __tablename__ = "quote_attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    mime_type = Column(String(150))
    file_size = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)   # base64
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<QuoteAttachment {self.id} quote={self.quote_id} file={self.file_name}>"
