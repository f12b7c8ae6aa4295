"""CRUD operations for Comment."""

import logging
from typing import Any, Dict, List, Optional

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from blogapp.crud.base import CRUDBase, now_iso, snapshot_to_dict, to_iso
from blogapp.database import COLLECTION_COMMENTS

logger = logging.getLogger(__name__)


def normalize_comment(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": doc["id"],
        "post_id": doc.get("postId") or "",
        "content": doc.get("content") or "",
        "author_id": doc.get("authorId") or "",
        "author_name": doc.get("authorName") or "",
        "created_at": to_iso(doc.get("createdAt")),
        "updated_at": to_iso(doc.get("updatedAt")),
    }


class CRUDComment(CRUDBase):
    """CRUD operations for Comment."""

    def _by_post(self, db: Any, post_id: str) -> Any:
        return self.collection(db).where(filter=FieldFilter("postId", "==", post_id))

    def get_by_post(self, db: Any, *, post_id: str) -> List[Dict[str, Any]]:
        """Comments of a post, newest first.

        The ordered query needs a composite index; when the backend rejects
        it the comments are read unordered instead.
        """
        query = self._by_post(db, post_id)
        try:
            snapshots = list(
                query.order_by("createdAt", direction=firestore.Query.DESCENDING).stream()
            )
        except google_exceptions.GoogleAPICallError as e:
            logger.warning(f"Ordered comment query failed for post={post_id}, reading unordered: {e}")
            snapshots = list(query.stream())
        return [normalize_comment(snapshot_to_dict(snapshot)) for snapshot in snapshots]

    def refs_by_post(self, db: Any, *, post_id: str) -> List[Any]:
        """Document references of every comment on a post."""
        return [snapshot.reference for snapshot in self._by_post(db, post_id).stream()]

    def create_comment(
        self,
        db: Any,
        *,
        post_id: str,
        content: str,
        author_id: str,
        author_name: str,
    ) -> Dict[str, Any]:
        """Create a new comment."""
        timestamp = now_iso()
        created = self.create(db, obj_in={
            "postId": post_id,
            "content": content,
            "authorId": author_id,
            "authorName": author_name,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        })
        return normalize_comment(created)

    def update_content(self, db: Any, *, comment_id: str, content: str) -> Optional[Dict[str, Any]]:
        updated = self.update(db, id=comment_id, obj_in={"content": content, "updatedAt": now_iso()})
        return normalize_comment(updated) if updated else None


# Singleton instance
crud_comment = CRUDComment(COLLECTION_COMMENTS)
