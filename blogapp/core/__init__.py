"""Core module exports."""

from .security import (
    clear_session_cookie,
    session_max_age,
    set_session_cookie,
)

__all__ = [
    "clear_session_cookie",
    "session_max_age",
    "set_session_cookie",
]
