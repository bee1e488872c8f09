"""Public user profile endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from prodfind.core.database import get_db
from prodfind.core.errors import NotFoundError
from prodfind.models.user import User
from prodfind.repositories.user_repository import UserRepository
from prodfind.schemas.user import SafeUserResponse

router = APIRouter()


@router.get(
    "/{user_id}",
    response_model=SafeUserResponse,
    summary="Get public user profile",
    responses={404: {"description": "User not found"}},
)
async def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
) -> User:
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
