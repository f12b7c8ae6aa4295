"""Comment form."""

import logging
from typing import Any, Dict, Optional

import httpx

from blogapp.client.api_client import ApiError
from blogapp.client.comments import CommentsHook
from blogapp.forms.base import FormResult
from blogapp.forms.schemas import CommentSchema, validate_form

logger = logging.getLogger(__name__)

SIGN_IN_REQUIRED = "You must be signed in to comment"
COMMENT_FAILED = "Failed to add comment. Please try again."


class CommentForm:
    """Adds a comment as ``user`` (a summary with ``uid`` and ``displayName``)."""

    def __init__(self, comments: CommentsHook, user: Optional[Dict[str, Any]]):
        self.comments = comments
        self.user = user

    async def submit(self, *, content: str) -> FormResult:
        if not self.user:
            return FormResult.failed(SIGN_IN_REQUIRED)

        values, errors = validate_form(CommentSchema, {"content": content})
        if values is None:
            return FormResult.invalid(errors)

        try:
            comment = await self.comments.create_comment(
                content=values.content,
                author_id=self.user["uid"],
                author_name=self.user.get("displayName") or self.user.get("email") or "Anonymous",
            )
        except ApiError as e:
            return FormResult.failed(e.detail)
        except httpx.HTTPError as e:
            logger.error(f"Adding comment to post={self.comments.post_id} failed: {e}")
            return FormResult.failed(COMMENT_FAILED)
        return FormResult.ok(comment)
