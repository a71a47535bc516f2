from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthorStamp(BaseModel):
    """Snapshot of the creating user's identity, recorded once at creation."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    display_name: str


class CampgroundForm(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)

    @field_validator("name", "location")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class CampgroundPatch(BaseModel):
    """Editable, non-identity campground fields. Missing fields stay untouched."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=1)

    @field_validator("name", "description")
    @classmethod
    def reject_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class CommentForm(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)

    @field_validator("text")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class Comment(BaseModel):
    id: str
    text: str
    author: AuthorStamp
    created_at: Optional[datetime] = None

    @classmethod
    def from_db(cls, row):
        return cls(
            id=row.id,
            text=row.text,
            author=AuthorStamp(user_id=row.author_id, display_name=row.author_username),
            created_at=row.created_at,
        )


class Campground(BaseModel):
    id: str
    name: str
    price: float
    description: str
    image_url: str
    location: str
    lat: float
    lng: float
    author: AuthorStamp
    comment_ids: List[str] = []
    created_at: Optional[datetime] = None

    @classmethod
    def from_db(cls, row):
        return cls(
            id=row.id,
            name=row.name,
            price=row.price,
            description=row.description,
            image_url=row.image,
            location=row.location,
            lat=row.lat,
            lng=row.lng,
            author=AuthorStamp(user_id=row.author_id, display_name=row.author_username),
            comment_ids=row.comment_ids,
            created_at=row.created_at,
        )


class CampgroundDetail(Campground):
    comments: List[Comment] = []

    @classmethod
    def from_db(cls, row):
        base = Campground.from_db(row)
        return cls(**base.model_dump(), comments=[Comment.from_db(c) for c in row.comments])
