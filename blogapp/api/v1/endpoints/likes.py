"""Like endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status

from blogapp.api.deps import get_db
from blogapp.core.exceptions import BACKEND_ERRORS, BackendException, PostNotFoundException
from blogapp.crud import crud_like
from blogapp.schemas.like import LikedPostsResponse, LikeToggleRequest, LikeToggleResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/likes",
    tags=["Likes"],
)


@router.get(
    "",
    response_model=LikedPostsResponse,
    status_code=status.HTTP_200_OK,
    summary="Ids of posts liked by a user",
)
def list_liked_posts(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Any = Depends(get_db),
) -> LikedPostsResponse:
    if not user_id:
        return LikedPostsResponse(post_ids=[])

    try:
        post_ids = crud_like.get_liked_post_ids(db, user_id=user_id)
    except BACKEND_ERRORS as e:
        logger.error(f"[LIKES] Error fetching liked posts for user={user_id}: {e}")
        raise BackendException("Failed to fetch liked posts")

    return LikedPostsResponse(post_ids=post_ids)


@router.post(
    "",
    response_model=LikeToggleResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle like on post",
    description="""
    Like or unlike a post. If already liked, it will unlike. If not liked, it will like.

    The like record and the post's `likes` counter change in one transaction.
    """,
)
def toggle_like(
    like_in: LikeToggleRequest,
    db: Any = Depends(get_db),
) -> LikeToggleResponse:
    """Toggle like on a post."""
    try:
        is_liked, likes = crud_like.toggle_like(db, user_id=like_in.user_id, post_id=like_in.post_id)
    except ValueError:
        raise PostNotFoundException()
    except BACKEND_ERRORS as e:
        logger.error(f"[LIKES] Error toggling like user={like_in.user_id} post={like_in.post_id}: {e}")
        raise BackendException("Failed to toggle like")

    logger.info(f"[LIKES] user={like_in.user_id} post={like_in.post_id} liked={is_liked} likes={likes}")
    return LikeToggleResponse(is_liked=is_liked, likes=likes)
