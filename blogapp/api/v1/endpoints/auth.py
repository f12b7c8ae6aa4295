"""Authentication endpoints."""

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Response, status

from blogapp.api.deps import get_current_user, get_identity_service, get_session_cookie
from blogapp.core.exceptions import (
    BACKEND_ERRORS,
    CREDENTIAL_ERROR_CODES,
    BackendException,
    IdentityError,
    InvalidCredentialsException,
    registration_error_message,
)
from blogapp.core.security import clear_session_cookie, set_session_cookie
from blogapp.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    SessionRequest,
    SignInRequest,
    SignOutResponse,
    UserSummary,
)
from blogapp.services.identity_service import IdentityService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


def _start_session(response: Response, identity: IdentityService, id_token: str) -> str:
    """Turn an ID token into a session cookie on ``response``."""
    session_cookie = identity.create_session_cookie(id_token)
    set_session_cookie(response, session_cookie)
    return session_cookie


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_200_OK,
    summary="Register new user",
)
def register(
    user_in: RegisterRequest,
    identity: IdentityService = Depends(get_identity_service),
) -> RegisterResponse:
    """
    Register a new user.

    Creates the identity user and returns a one-time custom token; the
    client exchanges it at ``/auth/session`` to get a session cookie.

    Raises:
        HTTPException: 400 with a user-facing message on any failure
    """
    try:
        user = identity.create_user(
            email=user_in.email,
            password=user_in.password,
            display_name=user_in.display_name,
        )
        custom_token = identity.create_custom_token(user.uid)
    except IdentityError as e:
        logger.warning(f"[AUTH] Registration failed for {user_in.email}: {e.code}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=registration_error_message(e.code),
        )

    logger.info(f"[AUTH] Registered uid={user.uid}")
    return RegisterResponse(
        uid=user.uid,
        email=user.email,
        display_name=user.display_name,
        custom_token=custom_token,
    )


@router.post(
    "/signin",
    response_model=UserSummary,
    status_code=status.HTTP_200_OK,
    summary="Sign in with email and password",
)
def sign_in(
    credentials: SignInRequest,
    response: Response,
    identity: IdentityService = Depends(get_identity_service),
) -> UserSummary:
    """
    Verify email and password with the identity service and set the session cookie.

    Raises:
        HTTPException: 401 for wrong credentials, 500 for anything else
    """
    try:
        result = identity.sign_in_with_password(credentials.email, credentials.password)
        _start_session(response, identity, result["idToken"])
    except IdentityError as e:
        if e.code in CREDENTIAL_ERROR_CODES:
            logger.info(f"[AUTH] Sign in rejected for {credentials.email}: {e.code}")
            raise InvalidCredentialsException()
        logger.error(f"[AUTH] Sign in error for {credentials.email}: {e.code} {e}")
        raise BackendException("Authentication failed")
    except (httpx.HTTPError, KeyError) as e:
        logger.error(f"[AUTH] Sign in error for {credentials.email}: {e}")
        raise BackendException("Authentication failed")

    return UserSummary(
        uid=result["localId"],
        email=result.get("email"),
        display_name=result.get("displayName") or None,
    )


@router.post(
    "/session",
    response_model=UserSummary,
    status_code=status.HTTP_200_OK,
    summary="Exchange a token for a session cookie",
    description="""
    Accepts an `idToken`, or a one-time `customToken` as returned by
    `/auth/register`, and sets the `session` cookie.
    """,
)
def create_session(
    session_in: SessionRequest,
    response: Response,
    identity: IdentityService = Depends(get_identity_service),
) -> UserSummary:
    try:
        id_token = session_in.id_token or identity.exchange_custom_token(session_in.custom_token)
        session_cookie = _start_session(response, identity, id_token)
        claims = identity.verify_session_cookie(session_cookie)
    except IdentityError as e:
        if e.code in CREDENTIAL_ERROR_CODES or e.code == "invalid-session":
            logger.info(f"[AUTH] Session request rejected: {e.code}")
            raise InvalidCredentialsException("Invalid authentication")
        logger.error(f"[AUTH] Session creation error: {e.code} {e}")
        raise BackendException("Authentication failed")
    except httpx.HTTPError as e:
        logger.error(f"[AUTH] Session creation error: {e}")
        raise BackendException("Authentication failed")

    return UserSummary(uid=claims["uid"], email=claims.get("email"), display_name=claims.get("name"))


@router.post(
    "/signout",
    response_model=SignOutResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign out",
)
def sign_out(
    response: Response,
    session_cookie: Optional[str] = Depends(get_session_cookie),
    identity: IdentityService = Depends(get_identity_service),
) -> SignOutResponse:
    """
    Revoke the session owner's refresh tokens and clear the cookie.

    A missing or already invalid cookie has nothing to revoke; the cookie is
    cleared anyway.
    """
    if session_cookie:
        try:
            claims = identity.verify_session_cookie(session_cookie)
        except IdentityError:
            claims = None

        if claims is not None:
            try:
                identity.revoke_refresh_tokens(claims.get("sub") or claims["uid"])
            except (IdentityError, *BACKEND_ERRORS) as e:
                logger.error(f"[AUTH] Error during token revocation: {e}")
                raise BackendException("Failed to revoke session")
            logger.info(f"[AUTH] Revoked refresh tokens for uid={claims.get('uid')}")

    clear_session_cookie(response)
    return SignOutResponse()


@router.get(
    "/me",
    response_model=UserSummary,
    status_code=status.HTTP_200_OK,
    summary="Current user",
)
def read_current_user(
    claims: Dict[str, Any] = Depends(get_current_user),
    identity: IdentityService = Depends(get_identity_service),
) -> UserSummary:
    """Summary of the user owning the session cookie."""
    try:
        user = identity.get_user(claims["uid"])
    except IdentityError as e:
        logger.warning(f"[AUTH] Could not load user uid={claims.get('uid')}: {e.code}")
        return UserSummary(uid=claims["uid"], email=claims.get("email"), display_name=claims.get("name"))

    return UserSummary(uid=user.uid, email=user.email, display_name=user.display_name)
