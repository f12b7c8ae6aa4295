"""Post editor form and tag input."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from blogapp.client.api_client import ApiError
from blogapp.client.posts import PostsHook
from blogapp.forms.base import FormResult
from blogapp.forms.schemas import MAX_TAGS, PostSchema, validate_form

logger = logging.getLogger(__name__)

SAVE_FAILED = "Failed to save post. Please try again."


class TagManager:
    """Tag list behind the tag input: trimmed, unique (case-insensitive) and capped."""

    def __init__(self, tags: Optional[List[str]] = None, max_tags: int = MAX_TAGS):
        self.max_tags = max_tags
        self._tags: List[str] = []
        for tag in tags or []:
            self.add(tag)

    @property
    def tags(self) -> List[str]:
        return list(self._tags)

    def add(self, tag: str) -> Optional[str]:
        """Add a tag; returns an error message if it was rejected."""
        tag = (tag or "").strip()
        if not tag:
            return "Tags cannot be empty"
        if tag.lower() in {existing.lower() for existing in self._tags}:
            return "Tag already added"
        if len(self._tags) >= self.max_tags:
            return f"Maximum {self.max_tags} tags"
        self._tags.append(tag)
        return None

    def remove(self, tag: str) -> None:
        self._tags = [existing for existing in self._tags if existing.lower() != tag.strip().lower()]


class PostForm:
    """
    Create a post, or edit ``post`` when one is given.

    Args:
        posts: Posts list hook the write goes through
        author_id: Signed-in user's uid
        author_name: Signed-in user's display name
        post: Existing post (wire format) to edit
    """

    def __init__(
        self,
        posts: PostsHook,
        *,
        author_id: str,
        author_name: str,
        post: Optional[Dict[str, Any]] = None,
    ):
        self.posts = posts
        self.author_id = author_id
        self.author_name = author_name
        self.post = post
        self.tag_manager = TagManager(post.get("tags") if post else None)

    @property
    def is_edit(self) -> bool:
        return self.post is not None

    async def submit(self, *, title: str, content: str, tags: Optional[List[str]] = None) -> FormResult:
        values, errors = validate_form(PostSchema, {
            "title": title,
            "content": content,
            "tags": self.tag_manager.tags if tags is None else tags,
        })
        if values is None:
            return FormResult.invalid(errors)

        try:
            if self.is_edit:
                saved = await self.posts.update_post(self.post["id"], {
                    "title": values.title,
                    "content": values.content,
                    "tags": values.tags,
                })
            else:
                saved = await self.posts.create_post({
                    "title": values.title,
                    "content": values.content,
                    "tags": values.tags,
                    "authorId": self.author_id,
                    "authorName": self.author_name,
                })
        except ApiError as e:
            return FormResult.failed(e.detail)
        except httpx.HTTPError as e:
            logger.error(f"Saving post failed: {e}")
            return FormResult.failed(SAVE_FAILED)
        return FormResult.ok(saved)
