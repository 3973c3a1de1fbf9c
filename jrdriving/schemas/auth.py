# jrdriving/schemas/auth.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from jrdriving.models.user import Role
from jrdriving.schemas.base import CamelModel


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=4, max_length=100)
    role: Literal["client", "driver"]     # admin accounts are provisioned by script only


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=16)
    password: str = Field(..., min_length=8)


class AuthUserOut(CamelModel):
    id: int
    email: str
    created_at: datetime


class ProfileOut(CamelModel):
    id: int
    user_id: int
    full_name: str
    phone: Optional[str]
    role: Role
    plan: Optional[str]
    avatar_url: Optional[str]
    created_at: datetime
    updated_at: datetime


class SessionOut(CamelModel):
    user: AuthUserOut
    profile: ProfileOut
