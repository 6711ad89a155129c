"""Error factory for creating StencilErrors."""

from collections.abc import Sequence
from string import Formatter
from typing import Any

from .errors import StencilError
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates StencilErrors from codes and render failures."""

    def __init__(self, registry: ErrorRegistry | None = None):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
        """
        self.registry = registry or ErrorRegistry()

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> StencilError:
        """Create StencilError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            **kwargs: Additional context variables

        Returns:
            StencilError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context)

    def message(self, code: str, **context: Any) -> str:
        """Render only the message line of an error template.

        Used to build breadcrumb entries without raising.
        """
        return self.create(code, context).message

    def from_failure(
        self,
        code: str,
        trail: Sequence[str],
        message: str,
        template_origin: str | None = None,
        item_identifier: str | None = None,
    ) -> StencilError:
        """Turn a failed render outcome into a raisable error.

        The error keeps the innermost failure code so callers can tell a
        type mismatch from a missing partial, while the message carries the
        caller-facing framing and the detail carries the full trail.

        Args:
            code: Code of the innermost failure
            trail: Breadcrumb messages, outermost first
            message: Framing line for the failure
            template_origin: Template that was being applied
            item_identifier: Item that was being rendered

        Returns:
            StencilError instance
        """
        if self.registry.get_template(code) is None:
            code = "RENDER_FAILED"

        error = self.registry.create(
            code=code,
            context={
                "template_origin": template_origin,
                "item_identifier": item_identifier,
                "trail": list(trail),
                "detail": ",\n".join(trail),
            },
        )
        error.message = message
        error.args = (message,)
        # Failure contexts carry no field values to fill suggestion placeholders
        if error.suggestion and _has_placeholders(error.suggestion):
            error.suggestion = None
        return error


def _has_placeholders(text: str) -> bool:
    return any(field is not None for _, field, _, _ in Formatter().parse(text))


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton.

    Returns:
        Default ErrorFactory instance
    """
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> StencilError:
    """Convenience function to create error.

    Args:
        code: Error code
        **context: Context variables for template interpolation

    Returns:
        StencilError instance
    """
    return get_error_factory().create(code, context)
