"""Pydantic schemas for Comment."""

from typing import List

from pydantic import Field

from .base import CamelModel


class CommentCreate(CamelModel):
    """Schema for creating a comment."""
    post_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    author_id: str = Field(..., min_length=1)
    author_name: str = Field(..., min_length=1)


class CommentUpdate(CamelModel):
    content: str = Field(..., min_length=1)


class CommentResponse(CamelModel):
    id: str
    post_id: str
    content: str = ""
    author_id: str = ""
    author_name: str = ""
    created_at: str = ""
    updated_at: str = ""


class CommentListResponse(CamelModel):
    comments: List[CommentResponse]
