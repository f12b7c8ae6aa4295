"""Comment endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from blogapp.api.deps import get_db
from blogapp.core.exceptions import BACKEND_ERRORS, BackendException, CommentNotFoundException
from blogapp.crud import crud_comment
from blogapp.schemas.comment import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    CommentUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/comments",
    tags=["Comments"],
)


@router.get(
    "",
    response_model=CommentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List comments of a post",
)
def list_comments(
    post_id: Optional[str] = Query(None, alias="postId"),
    db: Any = Depends(get_db),
) -> CommentListResponse:
    """List comments for a post, newest first. No ``postId`` means no comments."""
    if not post_id:
        return CommentListResponse(comments=[])

    try:
        comments = crud_comment.get_by_post(db, post_id=post_id)
    except BACKEND_ERRORS as e:
        logger.error(f"Error fetching comments for post={post_id}: {e}")
        raise BackendException("Failed to fetch comments")

    return CommentListResponse(comments=[CommentResponse(**comment) for comment in comments])


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_200_OK,
    summary="Create comment",
)
def create_comment(
    comment_in: CommentCreate,
    db: Any = Depends(get_db),
) -> CommentResponse:
    try:
        comment = crud_comment.create_comment(
            db,
            post_id=comment_in.post_id,
            content=comment_in.content,
            author_id=comment_in.author_id,
            author_name=comment_in.author_name,
        )
    except BACKEND_ERRORS as e:
        logger.error(f"Error creating comment on post={comment_in.post_id}: {e}")
        raise BackendException("Failed to create comment")

    logger.info(f"Created comment={comment['id']} on post={comment_in.post_id}")
    return CommentResponse(**comment)


@router.put(
    "/{comment_id}",
    response_model=CommentResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit comment",
)
def update_comment(
    comment_id: str,
    comment_update: CommentUpdate,
    db: Any = Depends(get_db),
) -> CommentResponse:
    try:
        comment = crud_comment.update_content(db, comment_id=comment_id, content=comment_update.content)
    except BACKEND_ERRORS as e:
        logger.error(f"Error updating comment={comment_id}: {e}")
        raise BackendException("Failed to update comment")

    if comment is None:
        raise CommentNotFoundException()
    return CommentResponse(**comment)


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete comment",
)
def delete_comment(
    comment_id: str,
    db: Any = Depends(get_db),
) -> Response:
    try:
        deleted = crud_comment.delete(db, id=comment_id)
    except BACKEND_ERRORS as e:
        logger.error(f"Error deleting comment={comment_id}: {e}")
        raise BackendException("Failed to delete comment")

    if not deleted:
        raise CommentNotFoundException()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
