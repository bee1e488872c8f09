from pydantic import BaseModel


class SuccessResponse(BaseModel):
    success: bool = True
    message: str | None = None


class BookmarkStatusResponse(BaseModel):
    is_bookmarked: bool


class RecommendationStatusResponse(BaseModel):
    is_recommended: bool
