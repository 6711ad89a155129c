"""Template Engine: public render surface."""

import time
from typing import TYPE_CHECKING, Any

from stencil_core.config import StencilConfig
from stencil_core.errors import StencilError, get_error_factory
from stencil_core.logging import LogConfig, StencilLogger

from .compiler import compile_item, compile_template
from .context import Context
from .diagnostics import failure_framing
from .elements import Template
from .evaluator import TemplateEvaluator
from .item import Item
from .outcome import Failed
from .store import DirectoryTemplateStore

if TYPE_CHECKING:
    from .store import TemplateStore


class TemplateEngine:
    """Apply templates to items.

    Supports:
    - Interpolation: $title$, $date("%Y")$, $$
    - Conditionals on field presence: $if(tags)$..$else$..$endif$
    - Loops with separators: $for(posts)$..$sep$..$endfor$
    - Inclusion of other templates: $partial("templates/footer.html")$

    Failures raise StencilError carrying the full breadcrumb trail; no
    partial output is ever returned.
    """

    def __init__(
        self,
        store: "TemplateStore | None" = None,
        config: StencilConfig | None = None,
        logger: StencilLogger | None = None,
    ):
        """Initialize template engine.

        Args:
            store: Template store for render_named() and $partial$
            config: Engine configuration (defaults to StencilConfig())
            logger: Optional logger (defaults to a logger built from config)
        """
        self._config = config or StencilConfig()
        self._logger = logger or StencilLogger(_log_config(self._config))
        self._store = store
        self._evaluator = TemplateEvaluator(
            store=store,
            max_include_depth=self._config.render.max_include_depth,
        )
        self._errors = get_error_factory()

    @classmethod
    def from_config(
        cls, config: StencilConfig, logger: StencilLogger | None = None
    ) -> "TemplateEngine":
        """Create an engine reading templates from the configured directory.

        Args:
            config: Loaded configuration
            logger: Optional logger (defaults to one built from config)

        Returns:
            TemplateEngine instance
        """
        logger = logger or StencilLogger(_log_config(config))
        store = DirectoryTemplateStore.from_config(config.templates, logger=logger)
        return cls(store=store, config=config, logger=logger)

    @property
    def store(self) -> "TemplateStore | None":
        return self._store

    def compile(self, source: str, origin: str | None = None) -> Template:
        """Compile template source.

        Args:
            source: Template source text
            origin: Origin label (defaults to render.literal_origin)

        Raises:
            StencilError(TEMPLATE_PARSE_ERROR) on malformed input
        """
        return compile_template(source, origin or self._config.render.literal_origin)

    def render(self, template: Template, context: Context, item: Item[Any]) -> str:
        """Render a template against a context and item.

        Args:
            template: Template built by make_template() or compile()
            context: Field lookup
            item: Item being rendered

        Returns:
            Rendered output

        Raises:
            StencilError with the innermost failure code, the framing as
            message and the breadcrumb trail in `trail`
        """
        log = self._logger.render(template.origin, item.identifier)
        log.started()
        started = time.perf_counter()

        try:
            outcome = self._evaluator.evaluate(template, context, item, log)
        except StencilError as e:
            log.failed(e)
            raise e.with_context(
                template_origin=template.origin, item_identifier=item.identifier
            ) from e

        if isinstance(outcome, Failed):
            error = self._errors.from_failure(
                code=outcome.code,
                trail=outcome.messages,
                message=failure_framing(template.origin, item.identifier),
                template_origin=template.origin,
                item_identifier=item.identifier,
            )
            log.failed(error)
            raise error

        duration_ms = int((time.perf_counter() - started) * 1000)
        log.completed(duration_ms, len(outcome.value))
        return outcome.value

    def render_named(self, identifier: str, context: Context, item: Item[Any]) -> str:
        """Load a template from the store and render it.

        Raises:
            StencilError(TEMPLATE_NOT_FOUND) if the store has no such template
        """
        return self.render(self._load(identifier), context, item)

    def render_self(self, context: Context, item: Item[Any]) -> str:
        """Interpret the item's own body as a template and render it against the item.

        Raises:
            StencilError(TEMPLATE_PARSE_ERROR) if the body is not a valid template
        """
        return self.render(compile_item(item), context, item)

    def apply_template(self, template: Template, context: Context, item: Item[Any]) -> Item[str]:
        """Render and return the item with the output as its body."""
        return item.with_body(self.render(template, context, item))

    def load_and_apply_template(
        self, identifier: str, context: Context, item: Item[Any]
    ) -> Item[str]:
        """Load a template by identifier, render it, and replace the item body."""
        return item.with_body(self.render_named(identifier, context, item))

    def apply_as_template(self, context: Context, item: Item[Any]) -> Item[str]:
        """Substitute fields within the item's own body."""
        return item.with_body(self.render_self(context, item))

    def _load(self, identifier: str) -> Template:
        if self._store is None:
            raise self._errors.create(
                "TEMPLATE_NOT_FOUND",
                identifier=identifier,
                detail="No template store configured",
            )
        return self._store.load_template(identifier)


def _log_config(config: StencilConfig) -> LogConfig:
    """Translate the logging section of the configuration."""
    logging_config = config.logging
    return LogConfig(
        level=logging_config.level,
        format=logging_config.format,
        show_params=logging_config.options.show_params,
        truncate_at=logging_config.options.truncate_at,
        components={
            "render": logging_config.components.render,
            "store": logging_config.components.store,
            "config": logging_config.components.config,
        },
    )
