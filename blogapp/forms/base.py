"""Result type shared by the forms."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class FormResult(BaseModel):
    """Outcome of a form submission.

    ``field_errors`` holds validation messages per field; ``error`` holds a
    form-level message when the request itself failed.
    """

    success: bool
    data: Optional[Any] = None
    field_errors: Dict[str, str] = Field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def invalid(cls, field_errors: Dict[str, str]) -> "FormResult":
        return cls(success=False, field_errors=field_errors)

    @classmethod
    def failed(cls, error: str) -> "FormResult":
        return cls(success=False, error=error)

    @classmethod
    def ok(cls, data: Any = None) -> "FormResult":
        return cls(success=True, data=data)
