"""Stencil configuration data models."""

from dataclasses import dataclass, field

from stencil_core.types import LogFormat, LogLevel


@dataclass
class TemplatesConfig:
    """Template store configuration."""

    directory: str = "./templates"
    encoding: str = "utf-8"
    extensions: list[str] = field(default_factory=lambda: [".html", ".xml", ".txt"])
    cache: bool = True


@dataclass
class RenderConfig:
    """Evaluator configuration."""

    max_include_depth: int | None = 32  # None = unbounded
    literal_origin: str = "{literal}"


@dataclass
class LoggingComponentsConfig:
    """Logging components configuration."""

    render: bool = True
    store: bool = True
    config: bool = True


@dataclass
class LoggingOptionsConfig:
    """Logging options configuration."""

    show_params: bool = True
    truncate_at: int = 200


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    components: LoggingComponentsConfig = field(default_factory=LoggingComponentsConfig)
    options: LoggingOptionsConfig = field(default_factory=LoggingOptionsConfig)


@dataclass
class StencilConfig:
    """Root Stencil configuration."""

    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
