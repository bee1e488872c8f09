from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from prodfind.models.session import UserSession
from prodfind.models.shared import utc_now


class SessionRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        user_id: UUID,
        expires_at: datetime,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> UserSession:
        session = UserSession(
            user_id=user_id,
            expires_at=expires_at,
            ip_address=ip_address,
            user_agent=user_agent[:512] if user_agent else None,
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_by_id(self, session_id: UUID) -> UserSession | None:
        return self.db.query(UserSession).filter(UserSession.id == session_id).first()

    def revoke(self, session: UserSession) -> UserSession:
        session.revoked_at = utc_now()  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(session)
        return session
