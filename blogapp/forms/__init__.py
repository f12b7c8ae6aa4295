"""Validated forms on top of the blog API client."""

from .auth import LoginForm, RegistrationForm
from .base import FormResult
from .comment import CommentForm
from .post import PostForm, TagManager
from .schemas import (
    CommentSchema,
    LoginSchema,
    PostSchema,
    RegistrationSchema,
    validate_form,
)

__all__ = [
    "LoginForm",
    "RegistrationForm",
    "FormResult",
    "CommentForm",
    "PostForm",
    "TagManager",
    "CommentSchema",
    "LoginSchema",
    "PostSchema",
    "RegistrationSchema",
    "validate_form",
]
