"""Custom exceptions for the blog API."""

from typing import Optional

from fastapi import HTTPException, status
from firebase_admin import exceptions as firebase_exceptions
from google.api_core import exceptions as google_exceptions


class MissingFieldsException(HTTPException):
    """Exception when a request body lacks required fields."""

    def __init__(self, detail: str = "Missing required fields"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class PostNotFoundException(HTTPException):
    """Exception when a post id does not resolve to a document."""

    def __init__(self, detail: str = "Post not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class CommentNotFoundException(HTTPException):
    """Exception when a comment id does not resolve to a document."""

    def __init__(self, detail: str = "Comment not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class NotAuthenticatedException(HTTPException):
    """Exception when the session cookie is missing, expired or revoked."""

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
        )


class InvalidCredentialsException(HTTPException):
    """Exception when email or password is wrong."""

    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
        )


class BackendException(HTTPException):
    """
    Exception for unclassified failures of Firestore or Firebase Auth.

    The detail is always a generic message; the underlying error is logged
    server-side by the handler that raises this.

    Status Code: 500 Internal Server Error
    """

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )


class IdentityError(Exception):
    """Failure reported by the identity service, normalized to a short code.

    Codes follow the Firebase Auth naming without the ``auth/`` prefix,
    e.g. ``email-already-exists`` or ``invalid-credentials``.
    """

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or code)
        self.code = code


# Failures of the hosted backends that handlers translate into a generic 500
BACKEND_ERRORS = (google_exceptions.GoogleAPICallError, firebase_exceptions.FirebaseError)

REGISTRATION_ERROR_MESSAGES = {
    "email-already-exists": "User with this email already exists.",
    "invalid-email": "Invalid email address.",
    "weak-password": "Password too weak. Use a stronger password.",
    "invalid-password": "Invalid password format.",
}

GENERIC_REGISTRATION_ERROR = "Registration error. Please try again."

# Codes meaning "the caller supplied bad credentials" as opposed to a backend fault
CREDENTIAL_ERROR_CODES = {
    "invalid-credentials",
    "user-not-found",
    "wrong-password",
    "user-disabled",
    "invalid-id-token",
    "invalid-custom-token",
}


def registration_error_message(code: str) -> str:
    """Map an identity error code to the message shown on the registration form."""
    return REGISTRATION_ERROR_MESSAGES.get(code, GENERIC_REGISTRATION_ERROR)


__all__ = [
    "MissingFieldsException",
    "PostNotFoundException",
    "CommentNotFoundException",
    "NotAuthenticatedException",
    "InvalidCredentialsException",
    "BackendException",
    "IdentityError",
    "BACKEND_ERRORS",
    "REGISTRATION_ERROR_MESSAGES",
    "GENERIC_REGISTRATION_ERROR",
    "CREDENTIAL_ERROR_CODES",
    "registration_error_message",
]
