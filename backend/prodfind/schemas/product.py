from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, HttpUrl, field_validator

from prodfind.models.product import ProductVisibility
from prodfind.schemas.user import SafeUserResponse


class ProductImage(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    url: HttpUrl


class ProductLink(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    url: HttpUrl
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    image: str | None = None


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    short_description: str | None = Field(default=None, max_length=500)
    price: str = Field(..., min_length=1, max_length=50)
    images: list[ProductImage] = Field(default_factory=list)
    icon: str | None = Field(default=None, max_length=2048)
    links: list[ProductLink] = Field(default_factory=list)
    category: list[str] = Field(default_factory=list)
    license: str | None = Field(default=None, max_length=100)
    visibility: ProductVisibility = ProductVisibility.PUBLIC

    def to_row(self) -> dict[str, Any]:
        """Column values with nested lists rendered as JSON-safe dicts."""
        data = self.model_dump(mode="json")
        data["category"] = sorted(set(self.category))
        return data


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    short_description: str | None = Field(default=None, max_length=500)
    price: str | None = Field(default=None, min_length=1, max_length=50)
    images: list[ProductImage] | None = None
    icon: str | None = Field(default=None, max_length=2048)
    links: list[ProductLink] | None = None
    category: list[str] | None = None
    license: str | None = Field(default=None, max_length=100)
    visibility: ProductVisibility | None = None

    @field_validator("name", "price", "images", "links", "category", "visibility")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

    def to_row(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude_unset=True)
        if self.category is not None:
            data["category"] = sorted(set(self.category))
        return data


class ProductResponse(BaseModel):
    id: UUID
    author_id: UUID
    name: str
    description: str | None
    short_description: str | None
    price: str
    images: list[ProductImage]
    icon: str | None
    links: list[ProductLink]
    category: list[str]
    license: str | None
    visibility: ProductVisibility
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
    deletion_reason: str | None = None
    recommendation_count: int = 0

    model_config = {"from_attributes": True}


class ProductDetailResponse(ProductResponse):
    author: SafeUserResponse | None


class ProductSummary(BaseModel):
    """Product fields embedded in notification payloads."""

    id: UUID
    name: str
    icon: str | None
    visibility: ProductVisibility
    deleted_at: datetime | None = None

    model_config = {"from_attributes": True}
