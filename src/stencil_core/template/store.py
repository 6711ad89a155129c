"""Template stores: where $partial$ and render_named() get templates from."""

import threading
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from stencil_core.errors import create_error

from .compiler import compile_template
from .elements import Template

if TYPE_CHECKING:
    from stencil_core.config import TemplatesConfig
    from stencil_core.logging import StencilLogger


class TemplateStore(Protocol):
    """Protocol for template loading.

    Used by:
    - TemplateEvaluator ($partial$ inclusion)
    - TemplateEngine (render_named)
    """

    def load_template(self, identifier: str) -> Template:
        """Load a template by identifier.

        Args:
            identifier: Template identifier (a relative path)

        Returns:
            Normalized template

        Raises:
            StencilError(TEMPLATE_NOT_FOUND) if unknown,
            StencilError(TEMPLATE_PARSE_ERROR) if malformed
        """
        ...


class InMemoryTemplateStore:
    """Templates registered in memory, from source text or prebuilt."""

    def __init__(self, templates: dict[str, str | Template] | None = None):
        """Initialize store.

        Args:
            templates: Initial identifier -> source (or Template) mapping
        """
        self._templates: dict[str, Template] = {}
        self._lock = threading.Lock()
        for identifier, template in (templates or {}).items():
            self.register(identifier, template)

    def register(self, identifier: str, template: str | Template) -> Template:
        """Register a template, compiling source text with the identifier as origin.

        Returns:
            The stored template
        """
        if isinstance(template, str):
            template = compile_template(template, identifier)
        with self._lock:
            self._templates[identifier] = template
        return template

    def load_template(self, identifier: str) -> Template:
        with self._lock:
            template = self._templates.get(identifier)
        if template is None:
            raise create_error("TEMPLATE_NOT_FOUND", identifier=identifier)
        return template

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._templates


class DirectoryTemplateStore:
    """Templates read from files under a directory.

    Identifiers are paths relative to the directory, with forward slashes.
    Parsed templates are memoized per identifier until invalidate().
    """

    def __init__(
        self,
        directory: str | Path,
        encoding: str = "utf-8",
        extensions: list[str] | None = None,
        cache: bool = True,
        logger: "StencilLogger | None" = None,
    ):
        """Initialize store.

        Args:
            directory: Root directory of the templates
            encoding: Source file encoding
            extensions: File extensions listed by discover()
            cache: Whether to memoize parsed templates
            logger: Optional logger
        """
        self._directory = Path(directory)
        self._encoding = encoding
        self._extensions = extensions or [".html"]
        self._cache_enabled = cache
        self._cache: dict[str, Template] = {}
        self._lock = threading.Lock()
        self._log = logger.store() if logger else None

    @classmethod
    def from_config(
        cls, config: "TemplatesConfig", logger: "StencilLogger | None" = None
    ) -> "DirectoryTemplateStore":
        """Create a store from the templates section of the configuration."""
        return cls(
            directory=config.directory,
            encoding=config.encoding,
            extensions=list(config.extensions),
            cache=config.cache,
            logger=logger,
        )

    @property
    def directory(self) -> Path:
        return self._directory

    def load_template(self, identifier: str) -> Template:
        if self._cache_enabled:
            with self._lock:
                cached = self._cache.get(identifier)
            if cached is not None:
                if self._log:
                    self._log.cache_hit(identifier)
                return cached

        path, source = self._read(identifier)
        template = compile_template(source, identifier)
        if self._log:
            self._log.loaded(identifier, str(path))

        if self._cache_enabled:
            with self._lock:
                template = self._cache.setdefault(identifier, template)
        return template

    def discover(self) -> list[str]:
        """List identifiers of all template files with a configured extension."""
        if not self._directory.is_dir():
            return []
        return sorted(
            path.relative_to(self._directory).as_posix()
            for path in self._directory.rglob("*")
            if path.is_file() and path.suffix in self._extensions
        )

    def invalidate(self, identifier: str | None = None) -> None:
        """Drop one cached template, or the whole cache."""
        with self._lock:
            if identifier is None:
                self._cache.clear()
            else:
                self._cache.pop(identifier, None)

    def _read(self, identifier: str) -> tuple[Path, str]:
        """Resolve an identifier and read its source.

        Raises:
            StencilError(TEMPLATE_NOT_FOUND) if the file is missing, outside the
            directory, unreadable or not valid in the configured encoding
        """
        try:
            path = self._resolve(identifier)
            is_file = path.is_file()
            source = path.read_text(encoding=self._encoding) if is_file else None
        except (OSError, UnicodeDecodeError, ValueError) as e:
            if self._log:
                self._log.missing(identifier)
            raise create_error(
                "TEMPLATE_NOT_FOUND",
                identifier=identifier,
                detail=f"Cannot read template '{identifier}': {e}",
            ) from e

        if source is None:
            if self._log:
                self._log.missing(identifier)
            raise create_error(
                "TEMPLATE_NOT_FOUND",
                identifier=identifier,
                detail=f"No file at {path}",
            )
        return path, source

    def _resolve(self, identifier: str) -> Path:
        root = self._directory.resolve()
        path = (root / identifier).resolve()
        if root != path and root not in path.parents:
            raise create_error(
                "TEMPLATE_NOT_FOUND",
                identifier=identifier,
                detail=f"Identifier escapes the templates directory: {identifier}",
            )
        return path
