"""Liked-posts hook: ids of the posts a user has liked, with optimistic toggling."""

from typing import Any, Dict, List, Optional, Tuple

from blogapp.client.api_client import BlogApiClient
from blogapp.client.cache import SWRCache
from blogapp.client.posts import PostsHook

LIKES_KEY = "likes"


def likes_key(user_id: str) -> Tuple[str, str]:
    return (LIKES_KEY, user_id)


class LikedPostsHook:
    """Cached liked post ids of one user. Without a user there is nothing to load."""

    def __init__(self, api: BlogApiClient, cache: SWRCache, user_id: Optional[str]):
        self.api = api
        self.cache = cache
        self.user_id = user_id
        self.key = likes_key(user_id) if user_id else None
        if self.key is not None:
            cache.register(self.key, self._fetch)

    async def _fetch(self) -> List[str]:
        return await self.api.liked_post_ids(self.user_id)

    @property
    def liked_post_ids(self) -> List[str]:
        if self.key is None:
            return []
        return self.cache.get(self.key, [])

    @property
    def error(self) -> Optional[Exception]:
        if self.key is None:
            return None
        return self.cache.entry(self.key).error

    @property
    def is_loading(self) -> bool:
        if self.key is None:
            return False
        entry = self.cache.entry(self.key)
        return entry.is_validating and entry.data is None

    def is_liked(self, post_id: str) -> bool:
        return post_id in self.liked_post_ids

    async def load(self) -> List[str]:
        if self.key is None:
            return []
        return await self.cache.revalidate(self.key)

    async def toggle_like(self, post_id: str, posts: Optional[PostsHook] = None) -> Optional[Dict[str, Any]]:
        """
        Toggle the like on ``post_id``.

        The liked-ids list flips immediately; ``posts`` (if given) receives the
        server's like count once the toggle succeeds. The two caches are
        updated one after the other, so a failure in between leaves them out
        of step until their next revalidation.

        Returns:
            The server response (``isLiked``, ``likes``), or None without a user.
        """
        if self.key is None:
            return None

        def flip(current: Optional[List[str]]) -> List[str]:
            ids = list(current or [])
            return [pid for pid in ids if pid != post_id] if post_id in ids else ids + [post_id]

        result: Dict[str, Any] = {}

        async def mutation(current: Optional[List[str]]) -> List[str]:
            result.update(await self.api.toggle_like(self.user_id, post_id))
            ids = [pid for pid in current or [] if pid != post_id]
            if result["isLiked"]:
                ids.append(post_id)
            return ids

        await self.cache.mutate(self.key, mutation, optimistic_data=flip)

        if posts is not None:
            await posts.apply_like(
                post_id,
                user_id=self.user_id,
                is_liked=result["isLiked"],
                likes=result["likes"],
            )
        return result
