"""Async client and cached data hooks for the blog API."""

from .api_client import ApiError, BlogApiClient
from .cache import CacheEntry, SWRCache
from .comments import CommentsHook, comment_retry_policy
from .likes import LikedPostsHook
from .posts import PostsHook

__all__ = [
    "ApiError",
    "BlogApiClient",
    "CacheEntry",
    "SWRCache",
    "CommentsHook",
    "comment_retry_policy",
    "LikedPostsHook",
    "PostsHook",
]
