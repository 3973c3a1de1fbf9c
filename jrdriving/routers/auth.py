# jrdriving/routers/auth.py
"""Signup, login, session, logout and password reset."""

from fastapi import APIRouter, Depends, Response, status

from jrdriving.config import Settings
from jrdriving.dependencies import get_auth_service, get_current_caller, get_settings
from jrdriving.errors import Unauthenticated
from jrdriving.schemas.auth import (
    ForgotPasswordRequest, LoginRequest, ResetPasswordRequest, SessionOut, SignupRequest,
)
from jrdriving.schemas.base import MessageOut
from jrdriving.services.auth_service import AuthService
from jrdriving.services.permissions import Caller

router = APIRouter(prefix="/auth", tags=["auth"])

RESET_REQUESTED_MESSAGE = "If an account exists, a reset email will be sent."


def _set_session_cookie(response: Response, token: str, settings: Settings):
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.AUTH_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
    )


@router.post("/signup", response_model=SessionOut, status_code=status.HTTP_201_CREATED,
             summary="Create an account and open a session")
async def signup(
    body: SignupRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    result = await service.register(body)
    _set_session_cookie(response, result.token, settings)
    return result.session


@router.post("/login", response_model=SessionOut, summary="Open a session")
async def login(
    body: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    result = await service.authenticate(body.email, body.password)
    _set_session_cookie(response, result.token, settings)
    return result.session


@router.get("/session", response_model=SessionOut, summary="Current session")
def current_session(
    caller: Caller = Depends(get_current_caller),
    service: AuthService = Depends(get_auth_service),
):
    session = service.get_session(caller.user_id)
    if session is None:
        raise Unauthenticated()
    return session


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Close the session")
def logout(settings: Settings = Depends(get_settings)):
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
    return response


@router.post("/forgot-password", response_model=MessageOut, status_code=status.HTTP_202_ACCEPTED,
             summary="Request a password reset link")
async def forgot_password(body: ForgotPasswordRequest, service: AuthService = Depends(get_auth_service)):
    """Same answer whether or not the email is registered."""
    await service.request_password_reset(body.email)
    return MessageOut(message=RESET_REQUESTED_MESSAGE)


@router.post("/reset-password", response_model=MessageOut, summary="Set a new password with a reset token")
async def reset_password(body: ResetPasswordRequest, service: AuthService = Depends(get_auth_service)):
    await service.reset_password(body.token, body.password)
    return MessageOut(message="Password updated.")
