"""Post endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from blogapp.api.deps import get_db
from blogapp.core.exceptions import BACKEND_ERRORS, BackendException, PostNotFoundException
from blogapp.crud import crud_post
from blogapp.schemas.post import (
    PostCreate,
    PostDelete,
    PostListResponse,
    PostResponse,
    PostUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
)


@router.get(
    "",
    response_model=PostListResponse,
    status_code=status.HTTP_200_OK,
    summary="List all posts",
    description="""
    Get every post, newest first.

    Missing fields are defaulted (`tags` → `[]`, `likes` → `0`) and `likedBy`
    is filled from the like records.

    **Filters:**
    - `author`: case-insensitive substring of the author name
    - `tag`: case-insensitive exact tag
    """,
)
def list_posts(
    author: Optional[str] = Query(None, description="Filter by author name"),
    tag: Optional[str] = Query(None, description="Filter by tag"),
    db: Any = Depends(get_db),
) -> PostListResponse:
    """List all posts."""
    try:
        posts = crud_post.get_all(db, author=author, tag=tag)
    except BACKEND_ERRORS as e:
        logger.error(f"Error fetching posts: {e}")
        raise BackendException("Failed to fetch posts")

    return PostListResponse(posts=[PostResponse(**post) for post in posts])


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Create new post",
)
def create_post(
    post_in: PostCreate,
    db: Any = Depends(get_db),
) -> PostResponse:
    """Create a new post with zero likes."""
    try:
        post = crud_post.create_post(
            db,
            title=post_in.title,
            content=post_in.content,
            author_name=post_in.author_name,
            author_id=post_in.author_id,
            tags=post_in.tags,
            author_avatar=post_in.author_avatar,
        )
    except BACKEND_ERRORS as e:
        logger.error(f"Error creating post: {e}")
        raise BackendException("Failed to create post")

    return PostResponse(**post)


@router.put(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Update post",
    description="""
    Merge the supplied fields onto a post and refresh `updatedAt`.

    Editable fields: `title`, `content`, `tags`, `authorName`, `authorAvatar`.
    """,
)
def update_post(
    post_update: PostUpdate,
    db: Any = Depends(get_db),
) -> PostResponse:
    """Update a post."""
    try:
        post = crud_post.update_post(db, post_id=post_update.post_id, changes=post_update.changes())
    except BACKEND_ERRORS as e:
        logger.error(f"Error updating post={post_update.post_id}: {e}")
        raise BackendException("Failed to update post")

    if post is None:
        raise PostNotFoundException()
    return PostResponse(**post)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete post",
    description="""
    Delete a post together with its comments and like records.
    """,
)
def delete_post(
    post_delete: PostDelete,
    db: Any = Depends(get_db),
) -> Response:
    """Delete a post (cascades to comments and likes)."""
    try:
        deleted = crud_post.delete_with_cascade(db, post_id=post_delete.post_id)
    except BACKEND_ERRORS as e:
        logger.error(f"Error deleting post={post_delete.post_id}: {e}")
        raise BackendException("Failed to delete post")

    if deleted is None:
        raise PostNotFoundException()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Get post detail",
)
def get_post(
    post_id: str,
    db: Any = Depends(get_db),
) -> PostResponse:
    """Get a single post."""
    try:
        post = crud_post.get_by_id(db, post_id=post_id)
    except BACKEND_ERRORS as e:
        logger.error(f"Error fetching post={post_id}: {e}")
        raise BackendException("Failed to fetch post")

    if post is None:
        raise PostNotFoundException()
    return PostResponse(**post)
