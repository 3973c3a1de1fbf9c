# jrdriving/dependencies.py
"""
Shared FastAPI dependencies: settings and collaborators from app.state,
the authorization gate, and per-request service construction.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from jrdriving.config import Settings
from jrdriving.database import get_db
from jrdriving.errors import Forbidden, Unauthenticated
from jrdriving.models.user import Profile, User
from jrdriving.services.auth_service import AuthService
from jrdriving.services.mission_service import MissionService
from jrdriving.services.notifier import Notifier
from jrdriving.services.permissions import Caller, Capability, is_allowed
from jrdriving.services.quote_service import QuoteService
from jrdriving.services.recruitment_service import RecruitmentService
from jrdriving.services.security import TokenIssuer
from jrdriving.utils.logger import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.tokens


def get_current_caller(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    tokens: TokenIssuer = Depends(get_token_issuer),
    db: Session = Depends(get_db),
) -> Caller:
    """
    Resolve the caller from the session cookie, falling back to a Bearer header.
    The token only proves identity; user and role are re-read from the store.
    """
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token and credentials:
        token = credentials.credentials
    if not token:
        raise Unauthenticated()

    claims = tokens.verify(token)
    row = (
        db.query(User, Profile)
        .join(Profile, Profile.user_id == User.id)
        .filter(User.id == claims.user_id)
        .first()
    )
    if not row:
        logger.info(f"[AUTH] Token for missing account {claims.user_id}")
        raise Unauthenticated()

    user, profile = row
    return Caller(user_id=user.id, profile_id=profile.id, role=profile.role, email=user.email)


def require(capability: Capability):
    """Dependency factory: the caller's role must hold the capability."""
    def _dep(caller: Caller = Depends(get_current_caller)) -> Caller:
        if not is_allowed(caller.role, capability):
            raise Forbidden()
        return caller

    return _dep


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    tokens: TokenIssuer = Depends(get_token_issuer),
    notifier: Notifier = Depends(get_notifier),
) -> AuthService:
    return AuthService(db, settings, tokens, notifier)


def get_mission_service(
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
) -> MissionService:
    return MissionService(db, notifier)


def get_quote_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    notifier: Notifier = Depends(get_notifier),
) -> QuoteService:
    return QuoteService(db, settings, notifier)


def get_recruitment_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    notifier: Notifier = Depends(get_notifier),
) -> RecruitmentService:
    return RecruitmentService(db, settings, notifier)
