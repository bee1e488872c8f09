"""Current session endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from prodfind.core.auth import SessionContext, get_session_context
from prodfind.core.database import get_db
from prodfind.repositories.session_repository import SessionRepository
from prodfind.schemas.common import SuccessResponse
from prodfind.schemas.user import CurrentUserResponse, SessionResponse
from prodfind.services.session_service import SessionService

router = APIRouter()


@router.get(
    "",
    response_model=SessionResponse,
    summary="Get current session",
    responses={401: {"description": "Invalid or expired session token"}},
)
async def get_session(
    db: Session = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
) -> SessionResponse:
    """Return the signed-in user, or an empty session when anonymous."""
    if context.user is None or context.session_id is None:
        return SessionResponse()
    session = SessionRepository(db).get_by_id(context.session_id)
    return SessionResponse(
        session_id=context.session_id,
        expires_at=session.expires_at if session else None,  # type: ignore[arg-type]
        user=CurrentUserResponse.model_validate(context.user),
    )


@router.delete(
    "",
    response_model=SuccessResponse,
    summary="Sign out",
    responses={401: {"description": "Invalid or expired session token"}},
)
async def delete_session(
    db: Session = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
) -> SuccessResponse:
    """Revoke the current session token."""
    if context.session_id is not None:
        SessionService(db).revoke(context.session_id)
    return SuccessResponse()
