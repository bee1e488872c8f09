"""Session token issuing and verification.

Tokens are HS256 JWTs naming a row in the ``sessions`` table, so a token can
be revoked before it expires.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from sqlalchemy.orm import Session

from prodfind.core.config import settings
from prodfind.models.session import UserSession
from prodfind.models.user import User
from prodfind.repositories.session_repository import SessionRepository
from prodfind.repositories.user_repository import UserRepository

TOKEN_TYPE = "session"


class SessionService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.session_repo = SessionRepository(db)
        self.user_repo = UserRepository(db)

    def issue(
        self,
        user_id: UUID,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[UserSession, str]:
        """Create a session for ``user_id`` and return it with its signed token."""
        expires_at = datetime.now(UTC) + timedelta(hours=settings.SESSION_TTL_HOURS)
        session = self.session_repo.create(
            user_id=user_id,
            expires_at=expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        payload = {
            "sub": str(user_id),
            "sid": str(session.id),
            "type": TOKEN_TYPE,
            "exp": expires_at,
        }
        token = jwt.encode(payload, settings.SESSION_JWT_SECRET, algorithm="HS256")
        return session, token

    def verify(self, token: str) -> tuple[UserSession, User]:
        """Resolve a token to its live session and user.

        Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError on failure.
        """
        payload = jwt.decode(token, settings.SESSION_JWT_SECRET, algorithms=["HS256"])
        if payload.get("type") != TOKEN_TYPE:
            raise jwt.InvalidTokenError("Invalid token type")

        session = self.session_repo.get_by_id(UUID(payload["sid"]))
        if session is None or session.revoked_at is not None:
            raise jwt.InvalidTokenError("Session has been revoked")
        if str(session.user_id) != payload["sub"]:
            raise jwt.InvalidTokenError("Session does not match token subject")

        user = self.user_repo.get_by_id(UUID(payload["sub"]))
        if user is None:
            raise jwt.InvalidTokenError("Unknown user")
        return session, user

    def revoke(self, session_id: UUID) -> None:
        session = self.session_repo.get_by_id(session_id)
        if session is not None and session.revoked_at is None:
            self.session_repo.revoke(session)
