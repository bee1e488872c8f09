from uuid import UUID

from sqlalchemy.orm import Session

from prodfind.models.user import User
from prodfind.schemas.user import UserCreate


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: UUID) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def create(self, data: UserCreate) -> User:
        user = User(
            name=data.name,
            email=str(data.email).lower(),
            image=data.image,
            role=data.role.value,
            email_verified=data.email_verified,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
