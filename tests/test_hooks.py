"""Tests for the posts, comments and likes hooks."""

from __future__ import annotations

import asyncio
from typing import Callable, List

import httpx
import pytest

from blogapp.client import (
    ApiError,
    BlogApiClient,
    CommentsHook,
    LikedPostsHook,
    PostsHook,
    SWRCache,
)
from blogapp.database import COLLECTION_COMMENTS, COLLECTION_POSTS

from .fakes import FakeFirestore

NEW_POST = {
    "title": "Optimistic post",
    "content": "Shows up before the server answers.",
    "authorId": "u1",
    "authorName": "Ada",
    "tags": ["sync"],
}


def _mock_api(handler: Callable[[httpx.Request], httpx.Response]) -> BlogApiClient:
    transport = httpx.MockTransport(handler)
    return BlogApiClient(http_client=httpx.AsyncClient(transport=transport, base_url="http://testserver"))


def _record(cache: SWRCache, key) -> List:
    seen: List = []
    cache.subscribe(key, lambda _, data: seen.append(data))
    return seen


@pytest.mark.asyncio
async def test_create_post_shows_placeholder_first(api: BlogApiClient, cache: SWRCache, db: FakeFirestore):
    posts = PostsHook(api, cache)
    await posts.load()
    seen = _record(cache, posts.key)

    created = await posts.create_post(NEW_POST)

    placeholder = seen[0][0]
    assert placeholder["id"].startswith("temp-")
    assert placeholder["title"] == NEW_POST["title"]
    assert placeholder["likes"] == 0
    assert created["id"] in db.docs(COLLECTION_POSTS)
    assert [post["id"] for post in posts.posts] == [created["id"]]


@pytest.mark.asyncio
async def test_failed_create_rolls_back(cache: SWRCache):
    existing = [{"id": "p1", "title": "Existing", "createdAt": "2024-01-01T00:00:00.000Z"}]

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"posts": existing})
        return httpx.Response(500, json={"detail": "Failed to create post"})

    posts = PostsHook(_mock_api(handler), cache)
    await posts.load()
    seen = _record(cache, posts.key)

    with pytest.raises(ApiError) as exc_info:
        await posts.create_post(NEW_POST)

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Failed to create post"
    assert len(seen[0]) == 2
    assert posts.posts == existing


@pytest.mark.asyncio
async def test_update_and_delete_post(api: BlogApiClient, cache: SWRCache, db: FakeFirestore):
    posts = PostsHook(api, cache)
    created = await posts.create_post(NEW_POST)

    updated = await posts.update_post(created["id"], {"title": "Renamed post"})
    assert updated["title"] == "Renamed post"
    assert posts.posts[0]["title"] == "Renamed post"

    await posts.delete_post(created["id"])
    assert posts.posts == []
    assert db.docs(COLLECTION_POSTS) == {}


@pytest.mark.asyncio
async def test_failed_delete_restores_post(cache: SWRCache):
    existing = [{"id": "p1", "title": "Existing", "createdAt": "2024-01-01T00:00:00.000Z"}]

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"posts": existing})
        return httpx.Response(404, json={"detail": "Post not found"})

    posts = PostsHook(_mock_api(handler), cache)
    await posts.load()
    seen = _record(cache, posts.key)

    with pytest.raises(ApiError):
        await posts.delete_post("p1")

    assert seen[0] == []
    assert posts.posts == existing


@pytest.mark.asyncio
async def test_failed_update_restores_cached_list(cache: SWRCache):
    existing = [{"id": "p1", "title": "Existing", "createdAt": "2024-01-01T00:00:00.000Z"}]
    list_calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            list_calls.append(request)
            if len(list_calls) == 1:
                return httpx.Response(200, json={"posts": existing})
            return httpx.Response(503, json={"detail": "Failed to fetch posts"})
        return httpx.Response(500, json={"detail": "Failed to update post"})

    posts = PostsHook(_mock_api(handler), cache)
    await posts.load()
    before = posts.posts
    seen = _record(cache, posts.key)

    with pytest.raises(ApiError) as exc_info:
        await posts.update_post("p1", {"title": "Renamed"})

    assert exc_info.value.status_code == 500
    assert seen[0][0]["title"] == "Renamed"
    assert posts.posts is before
    assert posts.posts == [{"id": "p1", "title": "Existing", "createdAt": "2024-01-01T00:00:00.000Z"}]

@pytest.mark.asyncio
async def test_toggle_like_updates_both_caches(api: BlogApiClient, cache: SWRCache, db: FakeFirestore):
    db.seed(COLLECTION_POSTS, "p1", {"title": "Post", "likes": 0, "createdAt": "2024-01-01T00:00:00.000Z"})
    posts = PostsHook(api, cache)
    likes = LikedPostsHook(api, cache, "u1")
    await posts.load()
    await likes.load()

    result = await likes.toggle_like("p1", posts=posts)

    assert result["isLiked"] is True
    assert likes.liked_post_ids == ["p1"]
    assert posts.posts[0]["likes"] == 1
    assert posts.posts[0]["likedBy"] == ["u1"]

    await likes.toggle_like("p1", posts=posts)

    assert likes.liked_post_ids == []
    assert posts.posts[0]["likes"] == 0


@pytest.mark.asyncio
async def test_toggle_like_without_user(api: BlogApiClient, cache: SWRCache):
    likes = LikedPostsHook(api, cache, None)

    assert await likes.load() == []
    assert await likes.toggle_like("p1") is None


@pytest.mark.asyncio
async def test_failed_toggle_restores_liked_ids(cache: SWRCache):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"postIds": ["p2"]})
        return httpx.Response(404, json={"detail": "Post not found"})

    likes = LikedPostsHook(_mock_api(handler), cache, "u1")
    await likes.load()
    seen = _record(cache, likes.key)

    with pytest.raises(ApiError):
        await likes.toggle_like("p1")

    assert seen[0] == ["p2", "p1"]
    assert likes.liked_post_ids == ["p2"]


@pytest.mark.asyncio
async def test_comments_create_and_remove(api: BlogApiClient, cache: SWRCache, db: FakeFirestore):
    comments = CommentsHook(api, cache, "p1")
    await comments.load()

    created = await comments.create_comment(content="Great read", author_id="u1", author_name="Ada")
    assert [comment["id"] for comment in comments.comments] == [created["id"]]

    edited = await comments.update_comment(created["id"], "Great read, thanks")
    assert edited["content"] == "Great read, thanks"
    assert comments.comments[0]["content"] == "Great read, thanks"

    await comments.remove_comment(created["id"])
    assert comments.comments == []
    assert db.docs(COLLECTION_COMMENTS) == {}


@pytest.mark.asyncio
async def test_comment_fetch_retries_then_succeeds(cache: SWRCache):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(500, json={"detail": "Failed to fetch comments"})
        return httpx.Response(200, json={"comments": [{"id": "c1", "postId": "p1", "content": "hi"}]})

    comments = CommentsHook(_mock_api(handler), cache, "p1", retry_delay=0)

    assert [comment["id"] for comment in await comments.load()] == ["c1"]
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_comment_fetch_gives_up_after_three_retries(cache: SWRCache):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={"detail": "Failed to fetch comments"})

    comments = CommentsHook(_mock_api(handler), cache, "p1", retry_delay=0)

    with pytest.raises(ApiError):
        await comments.load()
    assert len(calls) == 4
    assert isinstance(comments.error, ApiError)


@pytest.mark.asyncio
async def test_comment_fetch_does_not_retry_not_found(cache: SWRCache):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404, json={"detail": "Post not found"})

    comments = CommentsHook(_mock_api(handler), cache, "p1", retry_delay=0)

    with pytest.raises(ApiError):
        await comments.load()
    assert len(calls) == 1


def _held_api(release: asyncio.Event, response: httpx.Response) -> BlogApiClient:
    async def handler(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return response

    return _mock_api(handler)


@pytest.mark.asyncio
async def test_comments_read_state(cache: SWRCache):
    release = asyncio.Event()
    api = _held_api(release, httpx.Response(404, json={"detail": "Post not found"}))
    comments = CommentsHook(api, cache, "p1", retry_delay=0)

    loading = asyncio.create_task(comments.load())
    await asyncio.sleep(0)

    assert comments.is_loading is True
    assert comments.error is None

    release.set()
    with pytest.raises(ApiError):
        await loading

    assert comments.is_loading is False
    assert isinstance(comments.error, ApiError)
    assert comments.error.status_code == 404
    assert comments.comments == []


@pytest.mark.asyncio
async def test_liked_posts_read_state(cache: SWRCache):
    release = asyncio.Event()
    api = _held_api(release, httpx.Response(500, json={"detail": "Failed to fetch liked posts"}))
    likes = LikedPostsHook(api, cache, "u1")

    loading = asyncio.create_task(likes.load())
    await asyncio.sleep(0)

    assert likes.is_loading is True
    assert likes.error is None

    release.set()
    with pytest.raises(ApiError):
        await loading

    assert likes.is_loading is False
    assert isinstance(likes.error, ApiError)
    assert likes.liked_post_ids == []


@pytest.mark.asyncio
async def test_liked_posts_read_state_without_user(api: BlogApiClient, cache: SWRCache):
    likes = LikedPostsHook(api, cache, None)

    assert likes.is_loading is False
    assert likes.error is None
