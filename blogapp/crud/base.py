"""Generic CRUD base class for Firestore collections."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from blogapp.timeutils import now_iso, timestamp_sort_key, to_iso

__all__ = ["CRUDBase", "now_iso", "snapshot_to_dict", "timestamp_sort_key", "to_iso"]


def snapshot_to_dict(snapshot: Any) -> Dict[str, Any]:
	"""Flatten a document snapshot into its data plus an ``id`` key."""
	data = snapshot.to_dict() or {}
	return {**data, "id": snapshot.id}


class CRUDBase:
	"""Reusable CRUD helper for one Firestore collection.

	All methods take the Firestore client as ``db`` and return plain dicts
	carrying the document id under ``id``, not snapshots.
	"""

	def __init__(self, collection_name: str):
		self.collection_name = collection_name

	def collection(self, db: Any) -> Any:
		return db.collection(self.collection_name)

	def document(self, db: Any, id: str) -> Any:
		return self.collection(db).document(id)

	# ----- Read -----
	def get(self, db: Any, id: str) -> Optional[Dict[str, Any]]:
		"""Get one document by id."""
		snapshot = self.document(db, id).get()
		if not snapshot.exists:
			return None
		return snapshot_to_dict(snapshot)

	def get_multi(self, db: Any) -> List[Dict[str, Any]]:
		"""Get every document in the collection."""
		return [snapshot_to_dict(snapshot) for snapshot in self.collection(db).stream()]

	# ----- Create -----
	def create(self, db: Any, *, obj_in: Dict[str, Any]) -> Dict[str, Any]:
		"""Add a document with a generated id."""
		_, doc_ref = self.collection(db).add(dict(obj_in))
		return {**obj_in, "id": doc_ref.id}

	# ----- Update -----
	def update(self, db: Any, *, id: str, obj_in: Dict[str, Any]) -> Optional[Dict[str, Any]]:
		"""Merge fields onto an existing document.

		Returns the merged document, or None if it does not exist.
		"""
		doc_ref = self.document(db, id)
		snapshot = doc_ref.get()
		if not snapshot.exists:
			return None

		update_data = dict(obj_in)
		if update_data:
			doc_ref.update(update_data)
		return {**(snapshot.to_dict() or {}), **update_data, "id": snapshot.id}

	# ----- Delete -----
	def delete(self, db: Any, *, id: str) -> bool:
		"""Delete a document. Returns False if it did not exist."""
		doc_ref = self.document(db, id)
		if not doc_ref.get().exists:
			return False
		doc_ref.delete()
		return True
