# jrdriving/services/security.py
"""
Password hashing and session tokens.

Passwords are hashed with pbkdf2_sha256 (salted, slow). Session tokens are
HS256 JWTs carrying the user id and role with a fixed lifetime.
Password reset secrets are random hex strings; only their sha256 is stored.
"""

import hashlib
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from jrdriving.config import Settings
from jrdriving.errors import InvalidToken
from jrdriving.models.user import Role

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        # Unknown or corrupt hash format
        return False


def new_reset_secret() -> str:
    return secrets.token_hex(32)


def hash_reset_secret(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Role


class TokenIssuer:
    """Issues and verifies signed session tokens with the server-held secret."""

    def __init__(self, settings: Settings):
        self._secret = settings.JWT_SECRET
        self._algorithm = settings.JWT_ALGORITHM
        self._ttl = settings.JWT_TTL_SECONDS

    def issue(self, user_id: int, role: Role) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "sub": str(user_id),
            "role": Role(role).value,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self._ttl)).timestamp()),
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Session expired")
        except jwt.InvalidTokenError:
            raise InvalidToken()

        try:
            return TokenClaims(user_id=int(payload["sub"]), role=Role(payload["role"]))
        except (KeyError, ValueError):
            raise InvalidToken()
