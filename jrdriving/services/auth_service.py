# jrdriving/services/auth_service.py
"""
Credential store operations: signup, login, session lookup and password reset.

Login and password-reset paths never reveal whether an email is registered:
unknown email and wrong password raise the same InvalidCredentials, and
forgot-password behaves identically for both.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from jrdriving.config import Settings
from jrdriving.errors import Conflict, InvalidCredentials, ValidationError
from jrdriving.models.password_reset_token import PasswordResetToken
from jrdriving.models.user import Profile, Role, User
from jrdriving.schemas.auth import AuthUserOut, ProfileOut, SessionOut, SignupRequest
from jrdriving.services.notifier import EventKind, Notifier
from jrdriving.services.permissions import SIGNUP_ROLES
from jrdriving.services.security import (
    TokenIssuer, hash_password, hash_reset_secret, new_reset_secret, verify_password,
)
from jrdriving.utils.logger import get_logger

logger = get_logger(__name__)

# Compared against when the email is unknown so both login failures cost one hash check
_DUMMY_HASH = hash_password("not-a-real-password")


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass
class AuthResult:
    session: SessionOut
    token: str


class AuthService:
    def __init__(self, db: Session, settings: Settings, tokens: TokenIssuer, notifier: Notifier):
        self.db = db
        self.settings = settings
        self.tokens = tokens
        self.notifier = notifier

    def get_session(self, user_id: int) -> Optional[SessionOut]:
        """Rebuild the session from the store. None if the user or profile is gone."""
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            return None
        profile = self.db.query(Profile).filter(Profile.user_id == user.id).first()
        if not profile:
            return None
        return SessionOut(user=AuthUserOut.model_validate(user), profile=ProfileOut.model_validate(profile))

    def _open_session(self, user_id: int) -> AuthResult:
        session = self.get_session(user_id)
        if session is None:
            raise InvalidCredentials()
        token = self.tokens.issue(session.user.id, session.profile.role)
        return AuthResult(session=session, token=token)

    async def register(self, data: SignupRequest) -> AuthResult:
        email = normalize_email(data.email)
        role = Role(data.role)
        if role not in SIGNUP_ROLES:
            raise ValidationError("Invalid data", fields={"role": ["Role not allowed at signup"]})

        if self.db.query(User.id).filter(User.email == email).first():
            raise Conflict("An account already exists for this email")

        password_hash = await run_in_threadpool(hash_password, data.password)

        user = User(email=email, password_hash=password_hash, created_at=datetime.utcnow())
        self.db.add(user)
        try:
            self.db.flush()
            self.db.add(Profile(
                user_id=user.id,
                full_name=data.full_name.strip(),
                phone=data.phone.strip(),
                role=role,
                plan="free",
            ))
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            self.db.rollback()
            raise Conflict("An account already exists for this email")

        logger.info(f"[AUTH] New {role.value} account {user.id}")
        return self._open_session(user.id)

    async def authenticate(self, email: str, password: str) -> AuthResult:
        user = self.db.query(User).filter(User.email == normalize_email(email)).first()
        if not user:
            await run_in_threadpool(verify_password, password, _DUMMY_HASH)
            logger.info("[AUTH] Login failed: unknown account")
            raise InvalidCredentials()

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.info(f"[AUTH] Login failed for user {user.id}: bad password")
            raise InvalidCredentials()

        return self._open_session(user.id)

    async def request_password_reset(self, email: str) -> Optional[str]:
        """
        Issue a reset secret and hand it to the password-reset webhooks.
        Returns the secret, or None when no account matches. Callers must
        answer the same way in both cases.

        Both paths generate a secret, clear prior tokens and commit, so the
        response time does not depend on whether the account exists.
        """
        email = normalize_email(email)
        user = self.db.query(User).filter(User.email == email).first()
        user_id = user.id if user else 0     # 0 never matches a row

        self.db.query(PasswordResetToken).filter(PasswordResetToken.user_id == user_id).delete(
            synchronize_session=False
        )
        secret = new_reset_secret()
        token_hash = hash_reset_secret(secret)
        expires_at = datetime.utcnow() + timedelta(minutes=self.settings.PASSWORD_RESET_TTL_MINUTES)
        if user:
            self.db.add(PasswordResetToken(
                user_id=user_id,
                token_hash=token_hash,
                expires_at=expires_at,
                created_at=datetime.utcnow(),
            ))
        self.db.commit()

        if not user:
            return None

        self.notifier.notify(EventKind.PASSWORD_RESET, {
            "email": email,
            "resetToken": secret,
            "expiresAt": expires_at.isoformat() + "Z",
        })
        logger.info(f"[AUTH] Password reset issued for user {user_id}")
        return secret

    async def reset_password(self, secret: str, new_password: str):
        record = (
            self.db.query(PasswordResetToken)
            .filter(PasswordResetToken.token_hash == hash_reset_secret(secret))
            .first()
        )
        if not record or record.expires_at <= datetime.utcnow():
            raise ValidationError("Invalid or expired reset link")

        user_id = record.user_id
        password_hash = await run_in_threadpool(hash_password, new_password)
        self.db.query(User).filter(User.id == user_id).update(
            {User.password_hash: password_hash}, synchronize_session=False
        )
        self.db.query(PasswordResetToken).filter(PasswordResetToken.user_id == user_id).delete(
            synchronize_session=False
        )
        self.db.commit()
        logger.info(f"[AUTH] Password updated for user {user_id}")


def provision_account(db: Session, email: str, password: str, full_name: str,
                      role: Role, phone: Optional[str] = None) -> Profile:
    """
    Create a user and profile with any role, bypassing signup restrictions.
    Used by operator scripts; this is the only way to obtain an admin account.
    """
    email = normalize_email(email)
    if db.query(User.id).filter(User.email == email).first():
        raise Conflict("An account already exists for this email")

    user = User(email=email, password_hash=hash_password(password), created_at=datetime.utcnow())
    db.add(user)
    db.flush()
    profile = Profile(user_id=user.id, full_name=full_name.strip(), phone=phone, role=Role(role))
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info(f"[AUTH] Provisioned {profile.role.value} account {user.id}")
    return profile
