"""Application error taxonomy.

Services raise these; ``prodfind.main`` renders them as ``{"detail": ...}``
responses with the matching status code.
"""

from fastapi import Request
from fastapi.responses import JSONResponse


class ProdfindError(Exception):
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class UnauthorizedError(ProdfindError):
    status_code = 401
    default_detail = "Unauthorized"


class ForbiddenError(ProdfindError):
    status_code = 403
    default_detail = "Forbidden"


class NotFoundError(ProdfindError):
    """Missing resource, or one the caller may not know exists."""

    status_code = 404
    default_detail = "Not found"


class ConflictError(ProdfindError):
    status_code = 409
    default_detail = "Conflict"


class InvalidRequestError(ProdfindError):
    status_code = 422
    default_detail = "Invalid request"


async def prodfind_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ProdfindError)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )
