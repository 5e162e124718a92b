"""
Validation-related domain exceptions.
"""

from typing import Dict, Optional


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        self.message = message
        self.field_errors = dict(field_errors or {})
        super().__init__(message)


class RequiredFieldError(ValidationError):
    """Raised when required field is missing."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(
            f"Required field '{field_name}' is missing",
            {field_name: f"{field_name} is required"},
        )


class InvalidFormatError(ValidationError):
    """Raised when field format is invalid."""

    def __init__(self, field_name: str, expected_format: str):
        self.field_name = field_name
        self.expected_format = expected_format
        super().__init__(
            f"Field '{field_name}' has invalid format, expected: {expected_format}",
            {field_name: f"Expected {expected_format}"},
        )


class CompletionValidationError(ValidationError):
    """Raised when a completion submission fails one or more field checks."""

    def __init__(self, field_errors: Dict[str, str]):
        super().__init__("Job completion form has errors", field_errors)
