"""Stencil Logger - Hierarchical colored logging for template rendering."""

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TextIO

from stencil_core.logging.colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from stencil_core.types import LogFormat, LogLevel


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    show_params: bool = True
    truncate_at: int = 200
    components: dict[str, bool] = field(default_factory=dict)
    output: TextIO = field(default=sys.stderr)

    def __post_init__(self) -> None:
        """Initialize default components if not provided."""
        if not self.components:
            self.components = {
                "render": True,
                "store": True,
                "config": True,
            }


class StencilLogger:
    """Main logger facade. Creates component-specific loggers."""

    def __init__(self, config: LogConfig | None = None):
        """Initialize logger with configuration.

        Args:
            config: Logger configuration (defaults to LogConfig())
        """
        self.config = config or LogConfig()
        self._level_order = {
            LogLevel.DEBUG: 0,
            LogLevel.INFO: 1,
            LogLevel.WARN: 2,
            LogLevel.ERROR: 3,
        }

    def render(self, template_origin: str, item_identifier: str) -> "RenderLogger":
        """Get a logger scoped to one template application.

        Args:
            template_origin: Origin label of the template
            item_identifier: Identifier of the item being rendered

        Returns:
            RenderLogger instance
        """
        return RenderLogger(self, template_origin, item_identifier)

    def store(self) -> "StoreLogger":
        """Get a logger for template store events."""
        return StoreLogger(self)

    def configure(self, config: LogConfig) -> None:
        """Update configuration (for hot-reload).

        Args:
            config: New logger configuration
        """
        self.config = config

    def _should_log(self, level: LogLevel) -> bool:
        return self._level_order.get(level, 0) >= self._level_order.get(self.config.level, 1)

    def _log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Internal logging method.

        Args:
            level: Log level
            component: Component name (render, store, config)
            message: Log message
            context: Additional context data
        """
        if not self._should_log(level):
            return

        if not self.config.components.get(component, True):
            return

        if self.config.format == LogFormat.JSON:
            self._log_json(level, component, message, context)
        else:
            self._log_colored(level, component, message, context)

    def _log_json(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level.value,
            "component": component,
            "message": message,
        }
        if context:
            log_entry.update(context)

        print(json.dumps(log_entry, default=str), file=self.config.output)

    def _log_colored(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        level_colors = {
            LogLevel.DEBUG: LIGHT_BLUE,
            LogLevel.INFO: CYAN,
            LogLevel.WARN: YELLOW,
            LogLevel.ERROR: RED,
        }

        color = level_colors.get(level, RESET)
        component_color = {
            "render": MAGENTA,
            "store": ORANGE,
            "config": GREEN,
        }.get(component, RESET)

        # Format: [COMPONENT] message
        output = f"{component_color}[{component.upper()}]{RESET} {color}{message}{RESET}"

        if context and self.config.show_params:
            context_str = str(context)
            if len(context_str) > self.config.truncate_at:
                context_str = context_str[: self.config.truncate_at] + "..."
            output += f" {LIGHT_BLUE}{context_str}{RESET}"

        print(output, file=self.config.output)


class RenderLogger:
    """Logger for one (template, item) application."""

    def __init__(self, parent: StencilLogger, template_origin: str, item_identifier: str):
        """Initialize render logger.

        Args:
            parent: Parent StencilLogger instance
            template_origin: Origin label of the template
            item_identifier: Identifier of the item being rendered
        """
        self.parent = parent
        self.template_origin = template_origin
        self.item_identifier = item_identifier

    def _context(self, event: str, **extra: Any) -> dict[str, Any]:
        context = {
            "template": self.template_origin,
            "item": self.item_identifier,
            "event": event,
        }
        context.update(extra)
        return context

    def started(self) -> None:
        """Log render start."""
        message = f"Applying template '{self.template_origin}' to '{self.item_identifier}'"
        self.parent._log(LogLevel.DEBUG, "render", message, self._context("render_started"))

    def completed(self, duration_ms: int, length: int) -> None:
        """Log render completion.

        Args:
            duration_ms: Render duration in milliseconds
            length: Length of the rendered output
        """
        context = self._context("render_completed", duration_ms=duration_ms, length=length)
        duration_s = duration_ms / 1000
        message = (
            f"Template '{self.template_origin}' applied to '{self.item_identifier}' "
            f"({length} chars, {duration_s:.3f}s) ✓"
        )
        self.parent._log(LogLevel.INFO, "render", message, context)

    def failed(self, error: Exception) -> None:
        """Log render failure.

        Args:
            error: Error raised for the failed render
        """
        context = self._context(
            "render_failed",
            error=str(error),
            error_type=type(error).__name__,
        )
        message = f"Template '{self.template_origin}' failed on '{self.item_identifier}': {error}"
        self.parent._log(LogLevel.ERROR, "render", message, context)

    def condition_error(self, expression: str, messages: list[str]) -> None:
        """Log a failed $if$ condition that fell back to its else branch.

        Args:
            expression: Source text of the condition
            messages: Failure trail of the condition lookup
        """
        context = self._context("condition_error", expression=expression, trail=messages)
        message = "[ERROR] in 'if' condition on expr '" + expression + "':"
        if messages:
            message += "\n" + "\n".join("  " + m for m in messages)
        self.parent._log(LogLevel.DEBUG, "render", message, context)

    def including(self, name: str, depth: int) -> None:
        """Log a partial inclusion.

        Args:
            name: Identifier of the included template
            depth: Nesting depth of the inclusion
        """
        context = self._context("partial_included", partial=name, depth=depth)
        self.parent._log(LogLevel.DEBUG, "render", f"Including partial '{name}'", context)


class StoreLogger:
    """Logger for template store events."""

    def __init__(self, parent: StencilLogger):
        """Initialize store logger.

        Args:
            parent: Parent StencilLogger instance
        """
        self.parent = parent

    def loaded(self, identifier: str, source: str) -> None:
        """Log a template parsed from its source.

        Args:
            identifier: Template identifier
            source: Where the template was read from
        """
        context = {"event": "template_loaded", "identifier": identifier, "source": source}
        self.parent._log(LogLevel.DEBUG, "store", f"Loaded template '{identifier}'", context)

    def cache_hit(self, identifier: str) -> None:
        """Log a template served from the cache."""
        context = {"event": "template_cache_hit", "identifier": identifier}
        self.parent._log(LogLevel.DEBUG, "store", f"Template '{identifier}' cached", context)

    def missing(self, identifier: str) -> None:
        """Log a template that could not be found."""
        context = {"event": "template_missing", "identifier": identifier}
        self.parent._log(LogLevel.WARN, "store", f"Template '{identifier}' not found", context)
