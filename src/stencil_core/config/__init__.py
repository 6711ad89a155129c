"""Stencil Configuration - Config loading and management."""

from .loader import (
    ConfigLoader,
    deep_merge,
    get_config_loader,
    load_config,
    resolve_env_vars,
)
from .models import (
    LoggingComponentsConfig,
    LoggingConfig,
    LoggingOptionsConfig,
    RenderConfig,
    StencilConfig,
    TemplatesConfig,
)

__all__ = [
    # Config models
    "StencilConfig",
    "TemplatesConfig",
    "RenderConfig",
    "LoggingConfig",
    "LoggingComponentsConfig",
    "LoggingOptionsConfig",
    # Loader
    "ConfigLoader",
    "get_config_loader",
    "load_config",
    "resolve_env_vars",
    "deep_merge",
]
