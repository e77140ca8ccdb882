"""Service layer exports."""

from .reference_validator import (
    ReferenceViolation,
    ensure_valid,
    format_violation,
    is_valid,
    validate_references,
)

__all__ = [
    "ReferenceViolation",
    "ensure_valid",
    "format_violation",
    "is_valid",
    "validate_references",
]
