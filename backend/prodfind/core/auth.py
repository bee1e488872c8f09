from dataclasses import dataclass
from uuid import UUID

import jwt
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from prodfind.core.config import settings
from prodfind.core.database import get_db
from prodfind.core.errors import ForbiddenError, UnauthorizedError
from prodfind.models.user import User
from prodfind.services.session_service import SessionService


@dataclass(frozen=True)
class SessionContext:
    """Identity of the caller for a single request."""

    user: User | None = None
    session_id: UUID | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> UUID | None:
        return self.user.id if self.user is not None else None  # type: ignore[return-value]

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin


def _extract_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header:
        if not auth_header.startswith("Bearer "):
            raise UnauthorizedError("Invalid authorization header format")
        token = auth_header[7:]
        if not token:
            raise UnauthorizedError("Session token is required")
        return token
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def get_session_context(
    request: Request,
    db: Session = Depends(get_db),
) -> SessionContext:
    """Resolve the session token from the Authorization header or session cookie.

    Requests without a token are anonymous. A token that is present but does
    not resolve to a live session is rejected rather than downgraded.
    """
    token = _extract_token(request)
    if token is None:
        return SessionContext()

    try:
        session, user = SessionService(db).verify(token)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Session has expired") from None
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError("Invalid session token") from None

    return SessionContext(user=user, session_id=session.id)  # type: ignore[arg-type]


def require_user(
    context: SessionContext = Depends(get_session_context),
) -> User:
    if context.user is None:
        raise UnauthorizedError("Authentication required")
    return context.user


def require_admin(user: User = Depends(require_user)) -> User:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user
