"""Exception types raised by kumorfm."""

from __future__ import annotations

from typing import Any, Dict, Optional


class RFMError(Exception):
    """Base error carrying a machine-checkable code."""

    code = "RFM_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "detail": self.details}


class ValidationError(RFMError):
    """A table, column or link reference supplied by the caller is invalid."""

    code = "VALIDATION_ERROR"


class DuplicateLinkError(ValidationError):
    """The exact (source table, foreign key, destination table) link already exists."""


class DataError(RFMError):
    """A structural precondition on table data is violated."""

    code = "DATA_ERROR"


class APIError(RFMError):
    """The remote prediction service returned an error or was unreachable."""

    code = "API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
