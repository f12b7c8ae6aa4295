"""Validation schemas for the user-facing forms.

Every rule raises ``ValueError`` with the message shown next to the field,
and ``validate_form`` flattens a failed validation into ``{field: message}``
using the camelCase field names of the wire format.
"""

from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

FormModel = TypeVar("FormModel", bound=BaseModel)

MAX_TAGS = 10


def _length_rule(
    value: Optional[str],
    *,
    required: str,
    min_length: int,
    too_short: str,
    max_length: Optional[int] = None,
    too_long: Optional[str] = None,
) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(required)
    if len(value) < min_length:
        raise ValueError(too_short)
    if max_length is not None and len(value) > max_length:
        raise ValueError(too_long)
    return value


def _email_rule(value: Optional[str], *, invalid: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Email is required")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(invalid)
    return value


class FormSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
    )


class LoginSchema(FormSchema):
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> str:
        return _email_rule(v, invalid="Please enter a valid email")

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> str:
        if not v:
            raise ValueError("Password is required")
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class RegistrationSchema(FormSchema):
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None
    display_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> str:
        return _email_rule(v, invalid="Input valid email")

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> str:
        if not v:
            raise ValueError("Password is required")
        if len(v) < 6:
            raise ValueError("Password must contain at least 6 characters")
        if len(v) > 100:
            raise ValueError("Password must not exceed 100 characters")
        return v

    @field_validator("confirm_password")
    @classmethod
    def check_confirm_password(cls, v: Optional[str], info: ValidationInfo) -> str:
        if not v:
            raise ValueError("Confirm password is required")
        # Only compared once the password itself passed
        password = info.data.get("password")
        if password is not None and v != password:
            raise ValueError("Passwords do not match")
        return v

    @field_validator("display_name")
    @classmethod
    def check_display_name(cls, v: Optional[str]) -> str:
        return _length_rule(
            v,
            required="Display name is required",
            min_length=2,
            too_short="Display name must contain at least 2 characters",
            max_length=50,
            too_long="Display name must not exceed 50 characters",
        )


class PostSchema(FormSchema):
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: Optional[str]) -> str:
        return _length_rule(
            v,
            required="Title is required",
            min_length=5,
            too_short="Title must contain at least 5 characters",
            max_length=100,
            too_long="Title cannot exceed 100 characters",
        )

    @field_validator("content")
    @classmethod
    def check_content(cls, v: Optional[str]) -> str:
        return _length_rule(
            v,
            required="Content is required",
            min_length=10,
            too_short="Content must contain at least 10 characters",
            max_length=5000,
            too_long="Main text cannot exceed 5000 characters",
        )

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v: Optional[List[str]]) -> List[str]:
        tags = list(v or [])
        if not tags:
            raise ValueError("Add at least one tag")
        if len(tags) > MAX_TAGS:
            raise ValueError(f"Maximum {MAX_TAGS} tags")
        if any(not tag.strip() for tag in tags):
            raise ValueError("Tags cannot be empty")
        return [tag.strip() for tag in tags]


class CommentSchema(FormSchema):
    content: Optional[str] = None

    @field_validator("content")
    @classmethod
    def check_content(cls, v: Optional[str]) -> str:
        return _length_rule(
            v,
            required="Comment cannot be empty",
            min_length=5,
            too_short="Comment must contain at least 5 characters",
            max_length=1000,
            too_long="Comment cannot exceed 1000 characters",
        )


def field_errors(error: ValidationError) -> Dict[str, str]:
    """First message per field, keyed by the camelCase field name."""
    errors: Dict[str, str] = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else "form"
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


def validate_form(schema: Type[FormModel], data: Dict[str, Any]) -> Tuple[Optional[FormModel], Dict[str, str]]:
    """
    Validate raw form input.

    Returns:
        (model, {}) on success, (None, field_errors) on failure.
    """
    try:
        return schema.model_validate(data), {}
    except ValidationError as e:
        return None, field_errors(e)
