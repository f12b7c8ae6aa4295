"""Posts list hook: cached post list with optimistic create, update and delete."""

import time
from typing import Any, Dict, List, Optional, Tuple

from blogapp.client.api_client import BlogApiClient
from blogapp.client.cache import SWRCache
from blogapp.timeutils import now_iso, timestamp_sort_key

POSTS_KEY = "posts"


def posts_key(author: Optional[str] = None, tag: Optional[str] = None) -> Tuple[str, Optional[str], Optional[str]]:
    return (POSTS_KEY, author or None, tag or None)


def sort_newest_first(posts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(posts, key=lambda post: timestamp_sort_key(post.get("createdAt")), reverse=True)


class PostsHook:
    """
    View of one posts list (optionally filtered by author or tag).

    Every write is applied to the cache before the request is sent and
    rolled back if the request fails.
    """

    def __init__(
        self,
        api: BlogApiClient,
        cache: SWRCache,
        *,
        author: Optional[str] = None,
        tag: Optional[str] = None,
    ):
        self.api = api
        self.cache = cache
        self.author = author
        self.tag = tag
        self.key = posts_key(author, tag)
        cache.register(self.key, self._fetch)

    async def _fetch(self) -> List[Dict[str, Any]]:
        return await self.api.list_posts(author=self.author, tag=self.tag)

    @property
    def posts(self) -> List[Dict[str, Any]]:
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

    async def create_post(self, post_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a post; a placeholder with a ``temp-`` id is listed first
        until the server returns the real post.
        """
        timestamp = now_iso()
        temp_id = f"temp-{int(time.time() * 1000)}"
        placeholder = {
            "tags": [],
            "authorAvatar": None,
            **post_data,
            "id": temp_id,
            "likes": 0,
            "likedBy": [],
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }
        created: Dict[str, Any] = {}

        async def mutation(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            created.update(await self.api.create_post(post_data))
            others = [post for post in current or [] if post["id"] != temp_id]
            return sort_newest_first([created] + others)

        await self.cache.mutate(
            self.key,
            mutation,
            optimistic_data=lambda current: [placeholder] + list(current or []),
        )
        return created

    async def update_post(self, post_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        updated: Dict[str, Any] = {}

        def apply_updates(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            timestamp = now_iso()
            return [
                {**post, **updates, "updatedAt": timestamp} if post["id"] == post_id else post
                for post in current or []
            ]

        async def mutation(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            updated.update(await self.api.update_post(post_id, updates))
            return [updated if post["id"] == post_id else post for post in current or []]

        await self.cache.mutate(self.key, mutation, optimistic_data=apply_updates)
        return updated

    async def delete_post(self, post_id: str) -> None:
        async def mutation(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            await self.api.delete_post(post_id)
            return [post for post in current or [] if post["id"] != post_id]

        await self.cache.mutate(
            self.key,
            mutation,
            optimistic_data=lambda current: [post for post in current or [] if post["id"] != post_id],
        )

    async def apply_like(self, post_id: str, *, user_id: str, is_liked: bool, likes: int) -> None:
        """Write a like toggle result into this list; no request is made."""
        def apply(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            posts = []
            for post in current or []:
                if post["id"] == post_id:
                    liked_by = [uid for uid in post.get("likedBy", []) if uid != user_id]
                    if is_liked:
                        liked_by.append(user_id)
                    post = {**post, "likes": likes, "likedBy": liked_by}
                posts.append(post)
            return posts

        async def mutation(current: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
            return apply(current)

        await self.cache.mutate(self.key, mutation, optimistic_data=apply)
