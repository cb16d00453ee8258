"""
Error taxonomy shared by the service layer and the HTTP handlers.
"""

from typing import Optional


class TodoError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self, include_details: bool = False) -> dict:
        """Error response body: {error, details?}."""
        body = {"error": self.message}
        if include_details and self.details:
            body["details"] = self.details
        return body


class ValidationError(TodoError):
    """A required field is missing or malformed. Raised before any store access."""

    status_code = 400


class NotFoundError(TodoError):
    """The update/delete target does not exist."""

    status_code = 404


class StoreError(TodoError):
    """Any fault raised by the data-access layer."""

    status_code = 500

    @classmethod
    def wrap(cls, message: str, exc: BaseException) -> "StoreError":
        return cls(message, details=str(exc) or type(exc).__name__)
