"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel

from omnimall.errors import OmnimallError, ValidationError


class ErrorDetail(BaseModel):
    """Structured error detail."""

    code: str
    message: str
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": { "code": str, "message": str, "detail": object } }
    """

    error: ErrorDetail


class ActionResult(BaseModel):
    """Uniform outcome of a mutating workflow.

    Callers branch on `success`; workflows never raise past this shape.
    """

    success: bool
    error: str | None = None
    code: str | None = None
    field_errors: dict[str, str] | None = None

    @classmethod
    def ok(cls) -> "ActionResult":
        return cls(success=True)

    @classmethod
    def fail(cls, error: str, code: str = "DEPENDENCY_ERROR") -> "ActionResult":
        return cls(success=False, error=error, code=code)

    @classmethod
    def from_error(cls, exc: OmnimallError) -> "ActionResult":
        field_errors = exc.field_errors if isinstance(exc, ValidationError) else None
        return cls(success=False, error=exc.message, code=exc.code, field_errors=field_errors)
