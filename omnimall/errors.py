"""Error taxonomy shared by stores and services.

Workflows catch these and turn them into an ActionResult; routes map
them onto the structured HTTP error envelope.
"""

from typing import Any


class OmnimallError(RuntimeError):
    """Base class for expected application failures."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, detail: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(OmnimallError):
    """Bad input shape. Raised before any side effect runs."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, field_errors: dict[str, str] | None = None):
        super().__init__(message, detail={"fields": field_errors or {}})
        self.field_errors = field_errors or {}


class NotConfiguredError(OmnimallError):
    """A required credential or client is missing."""

    code = "NOT_CONFIGURED"
    status_code = 503


class DependencyError(OmnimallError):
    """The database, storage or SMS call itself failed."""

    code = "DEPENDENCY_ERROR"
    status_code = 502


class NotFoundError(OmnimallError):
    """Referenced entity is absent."""

    code = "NOT_FOUND"
    status_code = 404
