"""Stencil Logging - Hierarchical colored logging for template rendering."""

from .colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from .logger import (
    LogConfig,
    RenderLogger,
    StencilLogger,
    StoreLogger,
)

__all__ = [
    # Logger classes
    "StencilLogger",
    "RenderLogger",
    "StoreLogger",
    "LogConfig",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "ORANGE",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
