"""Shared enumerations for Stencil."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class FieldKind(str, Enum):
    """Shape of a resolved context field, as named in type diagnostics."""

    BOOLEAN = "boolean"
    STRING = "string"
    LIST = "list"
