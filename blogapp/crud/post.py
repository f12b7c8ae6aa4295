"""CRUD operations for Post."""

import logging
from typing import Any, Dict, List, Optional

from blogapp.crud.base import CRUDBase, now_iso, timestamp_sort_key, to_iso
from blogapp.crud.comment import crud_comment
from blogapp.crud.like import crud_like
from blogapp.database import COLLECTION_POSTS, MAX_BATCH_WRITES

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"title", "content", "tags", "authorName", "authorAvatar"}


def normalize_post(doc: Dict[str, Any], liked_by: Optional[List[str]] = None) -> Dict[str, Any]:
    """Fill defaults for a stored post so every response has the same shape."""
    tags = doc.get("tags")
    likes = doc.get("likes")
    return {
        "id": doc["id"],
        "title": doc.get("title") or "",
        "content": doc.get("content") or "",
        "author_id": doc.get("authorId") or "",
        # Older documents stored the display name under "author"
        "author_name": doc.get("authorName") or doc.get("author") or "",
        "author_avatar": doc.get("authorAvatar"),
        "tags": tags if isinstance(tags, list) else [],
        "likes": likes if isinstance(likes, int) and not isinstance(likes, bool) and likes >= 0 else 0,
        "liked_by": list(liked_by or []),
        "created_at": to_iso(doc.get("createdAt")),
        "updated_at": to_iso(doc.get("updatedAt")),
    }


def _matches(post: Dict[str, Any], author: Optional[str], tag: Optional[str]) -> bool:
    if author and author.strip().lower() not in post["author_name"].lower():
        return False
    if tag and tag.strip().lower() not in {t.lower() for t in post["tags"] if isinstance(t, str)}:
        return False
    return True


class CRUDPost(CRUDBase):
    """CRUD operations for Post."""

    def _with_liked_by(self, db: Any, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        liked_by = crud_like.get_liked_by(db, post_ids=[doc["id"] for doc in docs]) if docs else {}
        return [normalize_post(doc, liked_by.get(doc["id"])) for doc in docs]

    def get_all(
        self,
        db: Any,
        *,
        author: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """All posts, newest first, optionally filtered by author name or tag."""
        posts = self._with_liked_by(db, self.get_multi(db))
        posts = [post for post in posts if _matches(post, author, tag)]
        posts.sort(key=lambda post: timestamp_sort_key(post["created_at"]), reverse=True)
        return posts

    def get_by_id(self, db: Any, *, post_id: str) -> Optional[Dict[str, Any]]:
        """Get post by ID."""
        doc = self.get(db, post_id)
        if doc is None:
            return None
        return self._with_liked_by(db, [doc])[0]

    def create_post(
        self,
        db: Any,
        *,
        title: str,
        content: str,
        author_name: str,
        author_id: str,
        tags: List[str],
        author_avatar: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a new post with zero likes."""
        timestamp = now_iso()
        post_data: Dict[str, Any] = {
            "title": title,
            "content": content,
            "authorName": author_name,
            "authorId": author_id,
            "tags": list(tags),
            "likes": 0,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }
        if author_avatar:
            post_data["authorAvatar"] = author_avatar
        return normalize_post(self.create(db, obj_in=post_data), [])

    def update_post(self, db: Any, *, post_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge editable fields onto a post and refresh ``updatedAt``.

        Returns None if the post does not exist.
        """
        update_data = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}
        update_data["updatedAt"] = now_iso()
        updated = self.update(db, id=post_id, obj_in=update_data)
        if updated is None:
            return None
        return self._with_liked_by(db, [updated])[0]

    def delete_with_cascade(self, db: Any, *, post_id: str) -> Optional[int]:
        """
        Delete a post together with its comments and like records.

        Deletes are committed in write batches of at most ``MAX_BATCH_WRITES``.
        The post document goes in the last batch, so if a batch fails the post
        is still there and the delete can simply be retried.

        Returns:
            Number of comments removed, or None if the post does not exist.
        """
        post_ref = self.document(db, post_id)
        if not post_ref.get().exists:
            return None

        comment_refs = crud_comment.refs_by_post(db, post_id=post_id)
        like_refs = crud_like.refs_by_post(db, post_id=post_id)
        refs = comment_refs + like_refs + [post_ref]

        for start in range(0, len(refs), MAX_BATCH_WRITES):
            batch = db.batch()
            for ref in refs[start:start + MAX_BATCH_WRITES]:
                batch.delete(ref)
            batch.commit()

        logger.info(
            f"Deleted post={post_id} with {len(comment_refs)} comments and {len(like_refs)} likes"
        )
        return len(comment_refs)


# Singleton instance
crud_post = CRUDPost(COLLECTION_POSTS)
