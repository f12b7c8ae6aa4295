"""Backend connectivity probe."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from blogapp.api.deps import get_db, get_identity_service
from blogapp.core.exceptions import IdentityError
from blogapp.database import CONNECTION_CHECK_COLLECTION, CONNECTION_CHECK_DOCUMENT
from blogapp.schemas.auth import ConnectionResponse
from blogapp.services.identity_service import IdentityService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/connection",
    tags=["System"],
)


@router.get(
    "",
    response_model=ConnectionResponse,
    status_code=status.HTTP_200_OK,
    summary="Check Firestore and Auth reachability",
    responses={500: {"description": "Backend unreachable", "content": {"application/json": {"example": {"isOnline": False}}}}},
)
def check_connection(
    db: Any = Depends(get_db),
    identity: IdentityService = Depends(get_identity_service),
) -> Any:
    """
    Read a sentinel document, then ask the token verifier to check a dummy token.

    The dummy token is expected to be rejected; getting an answer at all is
    what proves the Auth backend is reachable.
    """
    try:
        db.collection(CONNECTION_CHECK_COLLECTION).document(CONNECTION_CHECK_DOCUMENT).get()
        try:
            identity.verify_id_token("dummy-token")
        except IdentityError:
            pass
    except Exception as e:
        logger.error(f"Connection check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"isOnline": False},
        )

    return ConnectionResponse(is_online=True)
