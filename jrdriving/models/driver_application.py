# jrdriving/models/driver_application.py
"""
Driver recruitment submissions and their uploaded documents (licence scans, CVs).
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text

from jrdriving.database import Base


class ApplicationStatus(str, enum.Enum):
    NEW = "new"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class DriverApplication(Base):
    __tablename__ = "driver_applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(100), nullable=False)
    years_experience = Column(Integer, nullable=False)
    license_types = Column(JSON, nullable=False)     # list[str]
    regions = Column(JSON, nullable=False)           # list[str]
    availability = Column(String(255), nullable=False)
    has_own_vehicle = Column(Boolean, default=False, nullable=False)
    has_company = Column(Boolean, default=False, nullable=False)
    message = Column(Text)
    status = Column(Enum(ApplicationStatus, values_callable=lambda e: [s.value for s in e],
                         name="application_status"),
                    default=ApplicationStatus.NEW, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<DriverApplication {self.id} status={self.status}>"


class DriverApplicationAttachment(Base):
    __tablename__ = "driver_application_attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("driver_applications.id", ondelete="CASCADE"),
                            nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    mime_type = Column(String(150))
    file_size = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)   # base64
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<DriverApplicationAttachment {self.id} application={self.application_id}>"
