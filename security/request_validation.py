"""
Validation of parse requests before any datastore access.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

MAX_STORAGE_PATH_LENGTH = 500


class RequestValidationError(Exception):
    """Raised when a parse request fails validation.

    Attributes:
        errors: Every problem found, not just the first
    """

    def __init__(self, errors: List[str]):
        super().__init__("Input validation failed: " + "; ".join(errors))
        self.errors = errors


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def check_parse_request(document_id: Any, storage_path: Optional[Any] = None) -> ValidationResult:
    """Collect validation errors for a parse request.

    ``storage_path`` is optional; when given it must be a relative locator
    without traversal segments.
    """
    errors: List[str] = []

    if not isinstance(document_id, str) or not document_id.strip():
        errors.append("Invalid resume ID")

    if storage_path is not None:
        if not isinstance(storage_path, str) or not storage_path.strip():
            errors.append("Invalid file path")
        else:
            if ".." in storage_path or "//" in storage_path:
                errors.append("Invalid file path format")
            if len(storage_path) > MAX_STORAGE_PATH_LENGTH:
                errors.append("File path too long")

    return ValidationResult(valid=not errors, errors=errors)


def validate_parse_request(document_id: Any, storage_path: Optional[Any] = None) -> None:
    """
    Raises:
        RequestValidationError: If the request is invalid
    """
    result = check_parse_request(document_id, storage_path)
    if not result.valid:
        raise RequestValidationError(result.errors)
