from typing import Any, Callable, TypeVar

from firebase_admin import firestore

from .services.firebase_service import firebase_service

# Collection names. Firestore creates collections on first write, so these
# constants are the whole schema.
COLLECTION_POSTS = "posts"
COLLECTION_COMMENTS = "comments"
COLLECTION_LIKES = "likes"

# Sentinel document read by the liveness probe
CONNECTION_CHECK_COLLECTION = "_check_connection"
CONNECTION_CHECK_DOCUMENT = "ping"

# Firestore rejects write batches above this size
MAX_BATCH_WRITES = 500

T = TypeVar("T")


# Dependency for routes
def get_db() -> Any:
    """Firestore client dependency for FastAPI routes"""
    return firebase_service.get_firestore()


def run_in_transaction(db: Any, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run ``func(transaction, *args, **kwargs)`` inside a Firestore transaction.

    The SDK re-runs ``func`` when the commit aborts on contention, so ``func``
    must only read through the transaction and must not have side effects
    outside it.
    """
    transaction = db.transaction()
    return firestore.transactional(func)(transaction, *args, **kwargs)
