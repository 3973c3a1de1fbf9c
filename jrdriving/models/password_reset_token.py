# jrdriving/models/password_reset_token.py
"""
Password reset tokens. Only the sha256 of the secret is stored.
A user has at most one live row: issuing a new token deletes the previous ones,
and a successful reset deletes the row that was used.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from jrdriving.database import Base


class PasswordResetToken(Base):
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(128), unique=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<PasswordResetToken {self.id} user={self.user_id} expires={self.expires_at}>"
