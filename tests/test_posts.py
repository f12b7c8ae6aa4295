"""Tests for post endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from blogapp.database import COLLECTION_COMMENTS, COLLECTION_LIKES, COLLECTION_POSTS

from .fakes import FakeFirestore


def _create_post(client: TestClient, **overrides) -> dict:
    payload = {
        "title": "Hello world",
        "content": "First post on the blog.",
        "authorName": "Ada",
        "authorId": "u1",
        **overrides,
    }
    response = client.post("/api/posts", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def test_create_post_defaults(client: TestClient):
    """A new post starts with no likes, no likers and no tags."""
    post = _create_post(client)

    assert post["id"]
    assert post["likes"] == 0
    assert post["likedBy"] == []
    assert post["tags"] == []
    assert post["createdAt"] == post["updatedAt"]
    assert post["createdAt"].endswith("Z")


def test_create_post_drops_non_list_tags(client: TestClient):
    post = _create_post(client, tags="not-a-list")
    assert post["tags"] == []


def test_create_post_missing_fields(client: TestClient):
    response = client.post("/api/posts", json={"title": "No body"})

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Missing required fields"
    fields = {error["field"] for error in body["errors"]}
    assert {"content", "authorName", "authorId"} <= fields


def test_list_posts_newest_first(client: TestClient, db: FakeFirestore):
    db.seed(COLLECTION_POSTS, "old", {"title": "Old", "createdAt": "2024-01-01T00:00:00.000Z"})
    db.seed(COLLECTION_POSTS, "new", {"title": "New", "createdAt": "2024-06-01T00:00:00.000Z"})

    response = client.get("/api/posts")

    assert response.status_code == 200
    assert [post["id"] for post in response.json()["posts"]] == ["new", "old"]


def test_list_posts_fills_missing_fields(client: TestClient, db: FakeFirestore):
    db.seed(COLLECTION_POSTS, "legacy", {"title": "Legacy", "author": "Grace", "likes": -3})
    db.seed(COLLECTION_LIKES, "u2_legacy", {"userId": "u2", "postId": "legacy"})

    post = client.get("/api/posts").json()["posts"][0]

    assert post["authorName"] == "Grace"
    assert post["tags"] == []
    assert post["likes"] == 0
    assert post["likedBy"] == ["u2"]


def test_list_posts_filters(client: TestClient):
    _create_post(client, authorName="Ada Lovelace", tags=["Python"])
    _create_post(client, authorName="Grace Hopper", tags=["cobol"])

    by_author = client.get("/api/posts", params={"author": "grace"}).json()["posts"]
    by_tag = client.get("/api/posts", params={"tag": "python"}).json()["posts"]

    assert [post["authorName"] for post in by_author] == ["Grace Hopper"]
    assert [post["authorName"] for post in by_tag] == ["Ada Lovelace"]


def test_get_post(client: TestClient):
    created = _create_post(client)

    response = client.get(f"/api/posts/{created['id']}")

    assert response.status_code == 200
    assert response.json()["title"] == "Hello world"


def test_get_missing_post(client: TestClient):
    response = client.get("/api/posts/nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Post not found"


def test_update_post_merges_editable_fields(client: TestClient, db: FakeFirestore):
    created = _create_post(client)
    db.docs(COLLECTION_POSTS)[created["id"]]["updatedAt"] = "2000-01-01T00:00:00.000Z"

    response = client.put("/api/posts", json={
        "postId": created["id"],
        "title": "Edited title",
        "tags": ["news"],
    })

    assert response.status_code == 200
    post = response.json()
    assert post["title"] == "Edited title"
    assert post["tags"] == ["news"]
    assert post["content"] == created["content"]
    assert post["likes"] == 0
    assert post["updatedAt"] != "2000-01-01T00:00:00.000Z"
    assert post["createdAt"] == created["createdAt"]


def test_update_post_ignores_like_counter(client: TestClient, db: FakeFirestore):
    created = _create_post(client)

    client.put("/api/posts", json={"postId": created["id"], "likes": 99})

    assert db.docs(COLLECTION_POSTS)[created["id"]]["likes"] == 0


def test_update_missing_post(client: TestClient):
    response = client.put("/api/posts", json={"postId": "nope", "title": "x"})
    assert response.status_code == 404


def test_update_requires_post_id(client: TestClient):
    response = client.put("/api/posts", json={"title": "x"})
    assert response.status_code == 400


def test_delete_post_cascades(client: TestClient, db: FakeFirestore):
    """Deleting a post removes its comments and like records too."""
    post = _create_post(client)
    other = _create_post(client, title="Other post")
    for i in range(3):
        db.seed(COLLECTION_COMMENTS, f"c{i}", {"postId": post["id"], "content": f"comment {i}"})
    db.seed(COLLECTION_COMMENTS, "keep", {"postId": other["id"], "content": "stays"})
    db.seed(COLLECTION_LIKES, f"u2_{post['id']}", {"userId": "u2", "postId": post["id"]})

    response = client.request("DELETE", "/api/posts", json={"postId": post["id"]})

    assert response.status_code == 204
    assert post["id"] not in db.docs(COLLECTION_POSTS)
    assert list(db.docs(COLLECTION_COMMENTS)) == ["keep"]
    assert db.docs(COLLECTION_LIKES) == {}
    assert other["id"] in db.docs(COLLECTION_POSTS)


def test_delete_post_batches_large_cascades(client: TestClient, db: FakeFirestore):
    post = _create_post(client)
    for i in range(700):
        db.seed(COLLECTION_COMMENTS, f"c{i}", {"postId": post["id"], "content": "x"})

    response = client.request("DELETE", "/api/posts", json={"postId": post["id"]})

    assert response.status_code == 204
    assert db.batch_sizes == [500, 201]
    assert db.docs(COLLECTION_COMMENTS) == {}


def test_delete_missing_post(client: TestClient):
    response = client.request("DELETE", "/api/posts", json={"postId": "nope"})
    assert response.status_code == 404


def test_delete_requires_post_id(client: TestClient):
    response = client.request("DELETE", "/api/posts", json={})
    assert response.status_code == 400


def test_backend_failure_is_generic_500(client: TestClient, db: FakeFirestore):
    db.fail_reads = True

    response = client.get("/api/posts")

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to fetch posts"}
