"""
Validation-specific exceptions for model output parsing.

These exceptions never leave the validation package: the response parser
catches them and turns them into an Unparseable outcome.
"""

from typing import Any


class ValidationError(Exception):
    """
    Base exception for all validation errors.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize validation error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class JSONParseError(ValidationError):
    """
    Model output holds no usable JSON.

    Raised when neither the whole content nor any substring of it decodes
    to a JSON array or object.
    """

    def __init__(self, message: str, raw_content: str | None = None, parse_error: str | None = None):
        """
        Initialize JSON parse error.

        Args:
            message: Error description
            raw_content: Malformed content (first 500 chars kept for debugging)
            parse_error: Original json.JSONDecodeError message
        """
        details = {}
        if raw_content:
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error

        super().__init__(message, details)


class ResultShapeError(ValidationError):
    """
    Parsed JSON does not look like a list of {text, category} items.
    """

    def __init__(self, message: str, found_type: str | None = None):
        details = {}
        if found_type:
            details["found_type"] = found_type
        super().__init__(message, details)
