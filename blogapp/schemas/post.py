"""Pydantic schemas for Post."""

from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator

from .base import CamelModel


class PostCreate(CamelModel):
    """Schema for creating a new post."""
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    author_name: str = Field(..., min_length=1)
    author_id: str = Field(..., min_length=1)
    author_avatar: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> Any:
        # A non-list tags value is dropped rather than rejected
        return v if isinstance(v, list) else []

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "title": "Hello Firestore",
            "content": "First post on the new blog.",
            "authorName": "Ada",
            "authorId": "u1",
            "tags": ["intro"],
        }
    })


class PostUpdate(CamelModel):
    """Schema for updating a post. Unknown keys are ignored."""
    post_id: str = Field(..., min_length=1)
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    tags: Optional[List[str]] = None
    author_name: Optional[str] = Field(None, min_length=1)
    author_avatar: Optional[str] = None

    def changes(self) -> dict:
        """Fields the caller actually sent, keyed by their stored (camelCase) names."""
        return self.model_dump(
            by_alias=True, exclude_unset=True, exclude_none=True, exclude={"post_id"}
        )


class PostDelete(CamelModel):
    post_id: str = Field(..., min_length=1)


class PostResponse(CamelModel):
    """Schema for Post response."""
    id: str
    title: str = ""
    content: str = ""
    author_id: str = ""
    author_name: str = ""
    author_avatar: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    likes: int = 0
    liked_by: List[str] = Field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""


class PostListResponse(CamelModel):
    """Response for listing posts."""
    posts: List[PostResponse]
