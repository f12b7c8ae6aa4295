"""Schemas package."""

from .auth import (
    ConnectionResponse,
    RegisterRequest,
    RegisterResponse,
    SessionRequest,
    SignInRequest,
    SignOutResponse,
    UserSummary,
)
from .comment import CommentCreate, CommentListResponse, CommentResponse, CommentUpdate
from .like import LikedPostsResponse, LikeToggleRequest, LikeToggleResponse
from .post import PostCreate, PostDelete, PostListResponse, PostResponse, PostUpdate

__all__ = [
    # Auth
    "ConnectionResponse",
    "RegisterRequest",
    "RegisterResponse",
    "SessionRequest",
    "SignInRequest",
    "SignOutResponse",
    "UserSummary",
    # Comment
    "CommentCreate",
    "CommentListResponse",
    "CommentResponse",
    "CommentUpdate",
    # Like
    "LikedPostsResponse",
    "LikeToggleRequest",
    "LikeToggleResponse",
    # Post
    "PostCreate",
    "PostDelete",
    "PostListResponse",
    "PostResponse",
    "PostUpdate",
]
