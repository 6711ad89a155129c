"""Shared types for Stencil.

Import from here rather than submodules:
    from stencil_core.types import LogLevel, ValidationResult
"""

from .enums import FieldKind, LogFormat, LogLevel
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "FieldKind",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
