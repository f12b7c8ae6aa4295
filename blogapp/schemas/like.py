"""Pydantic schemas for like toggling."""

from typing import List

from pydantic import Field

from .base import CamelModel


class LikeToggleRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    post_id: str = Field(..., min_length=1)


class LikeToggleResponse(CamelModel):
    """Response for like action."""
    success: bool = True
    is_liked: bool
    likes: int


class LikedPostsResponse(CamelModel):
    post_ids: List[str]
