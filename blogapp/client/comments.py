"""Comments hook for one post."""

import time
from typing import Any, Dict, Hashable, List, Optional, Tuple

from blogapp.client.api_client import ApiError, BlogApiClient
from blogapp.client.cache import RetryPolicy, SWRCache
from blogapp.timeutils import now_iso

COMMENTS_KEY = "comments"
COMMENT_FETCH_MAX_RETRIES = 3
COMMENT_FETCH_RETRY_DELAY = 5.0


def comments_key(post_id: str) -> Tuple[str, str]:
    return (COMMENTS_KEY, post_id)


def comment_retry_policy(
    max_retries: int = COMMENT_FETCH_MAX_RETRIES,
    delay: float = COMMENT_FETCH_RETRY_DELAY,
) -> RetryPolicy:
    """Retry a failed fetch after a fixed ``delay``, at most ``max_retries`` times, never on 404."""
    def policy(error: Exception, key: Hashable, retry_count: int) -> Optional[float]:
        if isinstance(error, ApiError) and error.status_code == 404:
            return None
        if retry_count >= max_retries:
            return None
        return delay

    return policy


class CommentsHook:
    """Cached comments of one post, newest first."""

    def __init__(
        self,
        api: BlogApiClient,
        cache: SWRCache,
        post_id: str,
        *,
        retry_delay: float = COMMENT_FETCH_RETRY_DELAY,
    ):
        self.api = api
        self.cache = cache
        self.post_id = post_id
        self.key = comments_key(post_id)
        cache.register(self.key, self._fetch, on_error_retry=comment_retry_policy(delay=retry_delay))

    async def _fetch(self) -> List[Dict[str, Any]]:
        return await self.api.list_comments(self.post_id)

    @property
    def comments(self) -> List[Dict[str, Any]]:
        return self.cache.get(self.key, [])

    @property
    def error(self) -> Optional[Exception]:
        return self.cache.entry(self.key).error

    @property
    def is_loading(self) -> bool:
        entry = self.cache.entry(self.key)
        return entry.is_validating and entry.data is None

    async def load(self) -> List[Dict[str, Any]]:
        return await self.cache.revalidate(self.key)

    async def create_comment(self, *, content: str, author_id: str, author_name: str) -> Dict[str, Any]:
        timestamp = now_iso()
        placeholder = {
            "id": f"temp-{int(time.time() * 1000)}",
            "postId": self.post_id,
            "content": content,
            "authorId": author_id,
            "authorName": author_name,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }
        created: Dict[str, Any] = {}

        async def mutation(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            created.update(await self.api.create_comment(
                post_id=self.post_id,
                content=content,
                author_id=author_id,
                author_name=author_name,
            ))
            return [created] + list(current or [])

        await self.cache.mutate(
            self.key,
            mutation,
            optimistic_data=lambda current: [placeholder] + list(current or []),
        )
        return created

    async def update_comment(self, comment_id: str, content: str) -> Dict[str, Any]:
        updated: Dict[str, Any] = {}

        def apply(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            return [
                {**comment, "content": content, "updatedAt": now_iso()} if comment["id"] == comment_id else comment
                for comment in current or []
            ]

        async def mutation(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            updated.update(await self.api.update_comment(comment_id, content))
            return [updated if comment["id"] == comment_id else comment for comment in current or []]

        await self.cache.mutate(self.key, mutation, optimistic_data=apply)
        return updated

    async def remove_comment(self, comment_id: str) -> None:
        def apply(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            return [comment for comment in current or [] if comment["id"] != comment_id]

        async def mutation(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            await self.api.delete_comment(comment_id)
            return apply(current)

        await self.cache.mutate(self.key, mutation, optimistic_data=apply)
