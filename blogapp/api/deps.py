"""FastAPI dependency injection functions for authentication and database access."""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request

from blogapp.config import settings
from blogapp.core.exceptions import IdentityError, NotAuthenticatedException
from blogapp.database import get_db
from blogapp.services.identity_service import IdentityService, identity_service

logger = logging.getLogger(__name__)


def get_identity_service() -> IdentityService:
    """Dependency returning the identity service facade."""
    return identity_service


def get_session_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_optional_current_user(
    session_cookie: Optional[str] = Depends(get_session_cookie),
    identity: IdentityService = Depends(get_identity_service),
) -> Optional[Dict[str, Any]]:
    """
    Dependency to optionally get the claims of the signed-in user.
    Returns None if there is no valid session cookie.

    Args:
        session_cookie: Raw ``session`` cookie value, if any
        identity: Identity service used to verify the cookie

    Returns:
        Optional[dict]: Decoded session claims or None
    """
    if not session_cookie:
        return None

    try:
        return identity.verify_session_cookie(session_cookie)
    except IdentityError as e:
        logger.info(f"[AUTH] Session cookie rejected: {e.code}")
        return None


def get_current_user(
    claims: Optional[Dict[str, Any]] = Depends(get_optional_current_user),
) -> Dict[str, Any]:
    """
    Dependency to get the claims of the signed-in user.

    Raises:
        HTTPException: 401 if the session cookie is missing or invalid
    """
    if claims is None:
        raise NotAuthenticatedException()
    return claims


__all__ = [
    "get_db",
    "get_identity_service",
    "get_session_cookie",
    "get_optional_current_user",
    "get_current_user",
]
