"""Session cookie helpers."""

from fastapi import Response

from blogapp.config import settings

SECONDS_PER_DAY = 60 * 60 * 24


def session_max_age() -> int:
    """Cookie lifetime in seconds, matching the session cookie's own expiry."""
    return settings.SESSION_EXPIRES_DAYS * SECONDS_PER_DAY


def set_session_cookie(response: Response, session_cookie: str) -> None:
    """Attach the session cookie: HTTP-only, same-site lax, secure in production."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_cookie,
        max_age=session_max_age(),
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
