# jrdriving/models/user.py
"""
Credential store tables.
users holds the login identity; profiles is its one-to-one, role-bearing extension.
A profile's role is fixed when the account is created.
"""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from jrdriving.database import Base


class Role(str, enum.Enum):
    ADMIN = "admin"
    DRIVER = "driver"
    CLIENT = "client"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    profile = relationship("Profile", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<User {self.id} email={self.email}>"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(100))
    role = Column(Enum(Role, values_callable=lambda e: [r.value for r in e], name="profile_role"),
                  default=Role.CLIENT, nullable=False, index=True)
    plan = Column(String(100))
    avatar_url = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="profile")

    def __repr__(self):
        return f"<Profile {self.id} user={self.user_id} role={self.role}>"
