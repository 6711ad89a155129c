"""Stencil configuration loader."""

import os
import re
import typing
from collections.abc import Callable
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from stencil_core.errors import create_error
from stencil_core.types import LogLevel, ValidationIssue, ValidationResult

from .models import StencilConfig

if typing.TYPE_CHECKING:
    from stencil_core.logging import StencilLogger


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Args:
        value: String with potential env var references

    Returns:
        String with env vars resolved

    Raises:
        StencilError: If required var not set
    """
    pattern = r"\$\{([^}:]+)(?::([?-])([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        operator = match.group(2)  # '-' or '?' or None
        operand = match.group(3)  # default value or error message

        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value

        if operator == "-":
            return operand or ""
        elif operator == "?":
            error_msg = operand or f"Required environment variable {var_name} not set"
            raise create_error("CONFIG_INVALID", detail=error_msg)
        else:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Required environment variable {var_name} not set",
            )

    return re.sub(pattern, replacer, value)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    else:
        return data


class ConfigLoader:
    """Load and validate Stencil configuration."""

    def __init__(self, logger: "StencilLogger | None" = None):
        """Initialize config loader.

        Args:
            logger: Optional StencilLogger instance
        """
        self._config: StencilConfig | None = None
        self._config_path: Path | None = None
        self._logger = logger
        self._change_callbacks: list[Callable[[StencilConfig], None]] = []

    def load(
        self,
        path: str | Path | None = None,
        use_defaults: bool = True,
        overrides: dict[str, Any] | None = None,
    ) -> StencilConfig:
        """Load configuration from file.

        Resolution order if path not specified:
        1. STENCIL_CONFIG_PATH environment variable
        2. ./stencil.yaml
        3. ~/.stencil/config.yaml
        4. If use_defaults=True and no file found, use default configuration

        Args:
            path: Optional path to config file
            use_defaults: If True, use default config when no file found
            overrides: Values merged over the file contents (e.g. from command line flags)

        Returns:
            Loaded StencilConfig instance

        Raises:
            StencilError: If file not found (when use_defaults=False) or invalid
        """
        if path is None:
            path = self._resolve_config_path()

        config_path = Path(path)

        if not config_path.exists():
            if use_defaults:
                if self._logger:
                    self._logger._log(
                        LogLevel.INFO,
                        "config",
                        "No config file found, using default configuration",
                        {"path": str(config_path)},
                    )
                return self.load_from_dict(overrides or {})
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration file not found: {config_path}",
            )

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Invalid YAML in config file: {e}",
            ) from e

        if not isinstance(data, dict):
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration root must be a mapping: {config_path}",
            )

        data = _resolve_env_vars_recursive(data)
        if overrides:
            data = deep_merge(data, overrides)

        return self.load_from_dict(data, config_path)

    def load_defaults(self) -> StencilConfig:
        """Load default configuration without a file."""
        return self.load_from_dict({})

    def load_from_dict(
        self, data: dict[str, Any], config_path: Path | None = None
    ) -> StencilConfig:
        """Load configuration from dictionary.

        Args:
            data: Configuration dictionary
            config_path: Optional path to config file (for tracking)

        Returns:
            Loaded StencilConfig instance

        Raises:
            StencilError: If configuration is invalid
        """
        validation = self.validate(data)
        if not validation.valid:
            error_messages = [f"- {issue.path}: {issue.message}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(error_messages),
            )

        try:
            config = self._dict_to_config(data)
        except (TypeError, ValueError) as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Failed to parse configuration: {e}",
            ) from e

        self._config = config
        self._config_path = config_path

        if self._logger:
            for issue in validation.warnings:
                self._logger._log(LogLevel.WARN, "config", issue.message, {"path": issue.path})
            self._logger._log(LogLevel.INFO, "config", "Configuration loaded successfully")

        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading.

        Args:
            data: Configuration dictionary

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        valid_keys = {"templates", "render", "logging"}

        for key in data:
            if key not in valid_keys:
                warnings.append(
                    ValidationIssue(
                        path=key,
                        message=f"Unknown configuration key: {key}",
                        severity="warning",
                    )
                )

        for section in valid_keys:
            if section in data and not isinstance(data[section], dict):
                errors.append(
                    ValidationIssue(
                        path=section,
                        message=f"{section} must be a dictionary",
                    )
                )

        templates = data.get("templates")
        if isinstance(templates, dict):
            if "directory" in templates and not isinstance(templates["directory"], str):
                errors.append(
                    ValidationIssue(
                        path="templates.directory",
                        message="directory must be a string",
                    )
                )
            extensions = templates.get("extensions")
            if extensions is not None and (
                not isinstance(extensions, list)
                or not all(isinstance(ext, str) for ext in extensions)
            ):
                errors.append(
                    ValidationIssue(
                        path="templates.extensions",
                        message="extensions must be a list of strings",
                    )
                )

        render = data.get("render")
        if isinstance(render, dict) and "max_include_depth" in render:
            depth = render["max_include_depth"]
            if depth is not None and (
                isinstance(depth, bool) or not isinstance(depth, int) or depth <= 0
            ):
                errors.append(
                    ValidationIssue(
                        path="render.max_include_depth",
                        message="max_include_depth must be a positive integer or null",
                    )
                )

        logging_section = data.get("logging")
        if isinstance(logging_section, dict) and "level" in logging_section:
            level = logging_section["level"]
            if level not in {lvl.value for lvl in LogLevel}:
                errors.append(
                    ValidationIssue(
                        path="logging.level",
                        message=f"Unknown log level: {level}",
                    )
                )

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def get(self) -> StencilConfig:
        """Get current configuration.

        Raises:
            StencilError: If configuration not loaded
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="Configuration not loaded")
        return self._config

    def reload(self) -> StencilConfig:
        """Reload configuration from file and notify registered callbacks.

        Returns:
            Reloaded StencilConfig instance

        Raises:
            StencilError: If no config path set or reload fails
        """
        if self._config_path is None:
            raise create_error("CONFIG_INVALID", detail="No config path set, cannot reload")

        new_config = self.load(self._config_path)

        for callback in self._change_callbacks:
            callback(new_config)

        return new_config

    def on_change(self, callback: Callable[[StencilConfig], None]) -> None:
        """Register callback for config changes.

        Args:
            callback: Function to call when config changes
        """
        self._change_callbacks.append(callback)

    def _resolve_config_path(self) -> Path:
        env_path = os.environ.get("STENCIL_CONFIG_PATH")
        if env_path:
            return Path(env_path)

        local_path = Path("stencil.yaml")
        if local_path.exists():
            return local_path

        home_path = Path.home() / ".stencil" / "config.yaml"
        if home_path.exists():
            return home_path

        # Not found - use local path as default
        return local_path

    def _dict_to_config(self, data: dict[str, Any]) -> StencilConfig:
        kwargs: dict[str, Any] = {}

        for f in fields(StencilConfig):
            if f.name in data:
                kwargs[f.name] = self._convert_field(f.type, data[f.name])

        return StencilConfig(**kwargs)

    def _convert_field(self, field_type: Any, value: Any) -> Any:
        """Convert field value to appropriate type.

        Args:
            field_type: Expected field type
            value: Value to convert

        Returns:
            Converted value
        """
        if value is None:
            return None

        origin = typing.get_origin(field_type)

        if origin is list:
            if not isinstance(value, list):
                return value
            args = typing.get_args(field_type)
            if args:
                return [self._convert_field(args[0], item) for item in value]
            return value

        if hasattr(field_type, "__dataclass_fields__"):
            if isinstance(value, dict):
                kwargs = {}
                for f in fields(field_type):
                    if f.name in value:
                        kwargs[f.name] = self._convert_field(f.type, value[f.name])
                return field_type(**kwargs)
            return value

        # Enums
        if hasattr(field_type, "__mro__") and any(
            base.__name__ == "Enum" for base in field_type.__mro__
        ):
            if isinstance(value, str):
                return field_type(value)
            return value

        return value


# Convenience singleton
_default_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get default config loader singleton."""
    global _default_loader  # noqa: PLW0603
    if _default_loader is None:
        _default_loader = ConfigLoader()
    return _default_loader


def load_config(path: str | Path | None = None) -> StencilConfig:
    """Convenience function to load config.

    Args:
        path: Optional path to config file

    Returns:
        Loaded StencilConfig instance
    """
    return get_config_loader().load(path)
