"""Firebase Authentication wrapper: user records, tokens and session cookies."""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

import httpx
from firebase_admin import auth, exceptions as firebase_exceptions

from blogapp.config import settings
from blogapp.core.exceptions import IdentityError
from blogapp.services.firebase_service import firebase_service

logger = logging.getLogger(__name__)

# Identity Toolkit REST error messages -> normalized codes
REST_ERROR_CODES = {
    "EMAIL_NOT_FOUND": "user-not-found",
    "INVALID_PASSWORD": "wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "invalid-credentials",
    "USER_DISABLED": "user-disabled",
    "INVALID_EMAIL": "invalid-email",
    "INVALID_CUSTOM_TOKEN": "invalid-custom-token",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "too-many-requests",
}


def _rest_error_code(response: httpx.Response) -> str:
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"http-{response.status_code}"
    # Messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
    key = message.split(":", 1)[0].strip()
    return REST_ERROR_CODES.get(key, key.lower().replace("_", "-"))


class IdentityService:
    """
    Thin facade over ``firebase_admin.auth`` and the Identity Toolkit REST API.

    The Admin SDK cannot check a password, so sign-in goes through the REST
    ``signInWithPassword`` call and the returned ID token is turned into a
    session cookie by the Admin SDK. Every failure leaves this class as an
    ``IdentityError`` carrying a short code, except transport errors of the
    REST client, which propagate as ``httpx.HTTPError``.
    """

    def __init__(self, http_client: Optional[httpx.Client] = None):
        self._http_client = http_client

    @property
    def session_expires_in(self) -> timedelta:
        return timedelta(days=settings.SESSION_EXPIRES_DAYS)

    # ----- Admin SDK -----
    def create_user(self, *, email: str, password: str, display_name: str) -> auth.UserRecord:
        """Create an identity user; raises ``IdentityError`` with a registration code."""
        try:
            return auth.create_user(
                email=email,
                password=password,
                display_name=display_name,
                app=firebase_service.app,
            )
        except auth.EmailAlreadyExistsError as e:
            raise IdentityError("email-already-exists", str(e)) from e
        except ValueError as e:
            # The SDK validates arguments locally before calling the backend
            text = str(e).lower()
            if "email" in text:
                code = "invalid-email"
            elif "password" in text:
                code = "weak-password"
            else:
                code = "invalid-argument"
            raise IdentityError(code, str(e)) from e
        except firebase_exceptions.FirebaseError as e:
            raise IdentityError(str(e.code).lower().replace("_", "-"), str(e)) from e

    def create_custom_token(self, uid: str) -> str:
        try:
            token = auth.create_custom_token(uid, app=firebase_service.app)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise IdentityError("custom-token-failed", str(e)) from e
        return token.decode("utf-8") if isinstance(token, bytes) else token

    def get_user(self, uid: str) -> auth.UserRecord:
        try:
            return auth.get_user(uid, app=firebase_service.app)
        except auth.UserNotFoundError as e:
            raise IdentityError("user-not-found", str(e)) from e
        except firebase_exceptions.FirebaseError as e:
            raise IdentityError("get-user-failed", str(e)) from e

    def create_session_cookie(self, id_token: str) -> str:
        """Mint a session cookie valid for ``SESSION_EXPIRES_DAYS`` from an ID token."""
        try:
            return auth.create_session_cookie(
                id_token, expires_in=self.session_expires_in, app=firebase_service.app
            )
        except (auth.InvalidIdTokenError, ValueError) as e:
            raise IdentityError("invalid-id-token", str(e)) from e
        except firebase_exceptions.FirebaseError as e:
            raise IdentityError("session-cookie-failed", str(e)) from e

    def verify_session_cookie(self, session_cookie: str) -> Dict[str, Any]:
        """
        Verify a session cookie, including a revocation check.

        Returns:
            Decoded claims; ``uid`` and ``email`` are the ones callers use.

        Raises:
            IdentityError: ``invalid-session`` for bad, expired or revoked cookies.
        """
        try:
            return auth.verify_session_cookie(
                session_cookie, check_revoked=True, app=firebase_service.app
            )
        except (
            auth.InvalidSessionCookieError,
            auth.RevokedSessionCookieError,
            auth.UserDisabledError,
            auth.UserNotFoundError,
            ValueError,
        ) as e:
            raise IdentityError("invalid-session", str(e)) from e

    def verify_id_token(self, id_token: str) -> Dict[str, Any]:
        try:
            return auth.verify_id_token(id_token, app=firebase_service.app)
        except (auth.InvalidIdTokenError, ValueError) as e:
            raise IdentityError("invalid-id-token", str(e)) from e

    def revoke_refresh_tokens(self, uid: str) -> None:
        try:
            auth.revoke_refresh_tokens(uid, app=firebase_service.app)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise IdentityError("revoke-failed", str(e)) from e

    # ----- Identity Toolkit REST -----
    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not settings.FIREBASE_API_KEY:
            raise IdentityError("missing-api-key", "FIREBASE_API_KEY is not configured")

        url = f"{settings.IDENTITY_TOOLKIT_URL}/{endpoint}"
        params = {"key": settings.FIREBASE_API_KEY}
        if self._http_client is not None:
            response = self._http_client.post(url, params=params, json=payload)
        else:
            with httpx.Client(timeout=10.0) as client:
                response = client.post(url, params=params, json=payload)

        if response.status_code != 200:
            code = _rest_error_code(response)
            logger.info(f"[AUTH] Identity Toolkit {endpoint} rejected: {code}")
            raise IdentityError(code)
        return response.json()

    def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        """Check a password with the identity service; returns the REST response body."""
        return self._post(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )

    def exchange_custom_token(self, custom_token: str) -> str:
        """Trade a one-time custom token for an ID token."""
        body = self._post(
            "accounts:signInWithCustomToken",
            {"token": custom_token, "returnSecureToken": True},
        )
        return body["idToken"]


identity_service = IdentityService()
