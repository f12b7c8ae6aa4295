"""CRUD operations for like records."""

from typing import Any, Dict, List, Tuple

from google.cloud.firestore_v1.base_query import FieldFilter

from blogapp import database
from blogapp.crud.base import CRUDBase, now_iso

# Firestore caps the number of values in an "in" filter
IN_QUERY_LIMIT = 30


def like_id(user_id: str, post_id: str) -> str:
    """Composite document id of the like record for (user, post)."""
    return f"{user_id}_{post_id}"


def _current_likes(post_data: Dict[str, Any]) -> int:
    likes = post_data.get("likes")
    if isinstance(likes, int) and not isinstance(likes, bool):
        return likes
    return 0


def _toggle_like_in_transaction(
    transaction: Any,
    like_ref: Any,
    post_ref: Any,
    user_id: str,
    post_id: str,
) -> Tuple[bool, int]:
    # All reads happen before any write, as Firestore transactions require
    like_snapshot = like_ref.get(transaction=transaction)
    post_snapshot = post_ref.get(transaction=transaction)

    if not post_snapshot.exists:
        raise ValueError("Post not found")

    current_likes = _current_likes(post_snapshot.to_dict() or {})

    if like_snapshot.exists:
        transaction.delete(like_ref)
        new_likes = max(current_likes - 1, 0)
        is_liked = False
    else:
        transaction.set(like_ref, {
            "userId": user_id,
            "postId": post_id,
            "createdAt": now_iso(),
        })
        new_likes = current_likes + 1
        is_liked = True

    transaction.set(post_ref, {"likes": new_likes}, merge=True)
    return is_liked, new_likes


class CRUDLike(CRUDBase):
    """CRUD operations for like records."""

    def get_liked_post_ids(self, db: Any, *, user_id: str) -> List[str]:
        """Ids of every post the user has liked."""
        query = self.collection(db).where(filter=FieldFilter("userId", "==", user_id))
        post_ids = []
        for snapshot in query.stream():
            post_id = (snapshot.to_dict() or {}).get("postId")
            if post_id:
                post_ids.append(post_id)
        return post_ids

    def get_liked_by(self, db: Any, *, post_ids: List[str]) -> Dict[str, List[str]]:
        """
        Map each post id to the ids of users who liked it.

        The like collection is the only record of who liked what, so this is
        how ``likedBy`` is produced for responses.
        """
        liked_by: Dict[str, List[str]] = {post_id: [] for post_id in post_ids}
        unique_ids = list(liked_by)
        for start in range(0, len(unique_ids), IN_QUERY_LIMIT):
            chunk = unique_ids[start:start + IN_QUERY_LIMIT]
            query = self.collection(db).where(filter=FieldFilter("postId", "in", chunk))
            for snapshot in query.stream():
                data = snapshot.to_dict() or {}
                post_id, user_id = data.get("postId"), data.get("userId")
                if post_id in liked_by and user_id:
                    liked_by[post_id].append(user_id)
        return liked_by

    def refs_by_post(self, db: Any, *, post_id: str) -> List[Any]:
        """Document references of every like on a post."""
        query = self.collection(db).where(filter=FieldFilter("postId", "==", post_id))
        return [snapshot.reference for snapshot in query.stream()]

    def toggle_like(self, db: Any, *, user_id: str, post_id: str) -> Tuple[bool, int]:
        """
        Toggle like on a post.

        Reads the like record and the post, then either deletes the record and
        decrements the counter (never below zero) or creates it and increments,
        all in one transaction.

        Returns:
            (is_liked: bool, new_like_count: int)

        Raises:
            ValueError: If the post does not exist.
        """
        like_ref = self.document(db, like_id(user_id, post_id))
        post_ref = db.collection(database.COLLECTION_POSTS).document(post_id)
        return database.run_in_transaction(
            db, _toggle_like_in_transaction, like_ref, post_ref, user_id, post_id
        )


# Singleton instance
crud_like = CRUDLike(database.COLLECTION_LIKES)
