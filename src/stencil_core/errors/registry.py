"""Error registry for creating errors from templates."""

from typing import Any

from .errors import ErrorCategory, ErrorTemplate, StencilError


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        """Initialize error registry with built-in templates."""
        self._templates: dict[str, ErrorTemplate] = {}
        self._load_builtin_templates()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Get template by error code.

        Args:
            code: Error code to look up

        Returns:
            ErrorTemplate if found, None otherwise
        """
        return self._templates.get(code)

    def list_codes(self) -> list[str]:
        """List all registered error codes."""
        return list(self._templates.keys())

    def register(self, template: ErrorTemplate) -> None:
        """Register (or replace) an error template.

        Args:
            template: Template to register under its code
        """
        self._templates[template.code] = template

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: StencilError | None = None,
    ) -> StencilError:
        """Create error instance from template + context.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional cause error

        Returns:
            StencilError instance

        Raises:
            ValueError: If error code not found
        """
        template = self.get_template(code)
        if not template:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        context = context or {}

        message = self._interpolate(template.message_template, context)
        detail = self._interpolate(template.detail_template, context)
        suggestion = self._interpolate(template.suggestion_template, context)

        if message is None:
            message = f"Error {code}"

        return StencilError(
            code=template.code,
            category=template.category,
            message=message,
            detail=context.get("detail", detail),
            suggestion=suggestion,
            template_origin=context.get("template_origin"),
            item_identifier=context.get("item_identifier"),
            trail=list(context.get("trail", [])),
            cause=cause,
        )

    def _interpolate(
        self,
        template: str | None,
        context: dict[str, Any],
    ) -> str | None:
        """Safe string interpolation.

        Args:
            template: Template string with {var} placeholders
            context: Context variables

        Returns:
            Interpolated string or None if template is None
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except KeyError:
            # Missing context variable - return template as-is
            return template

    def _load_builtin_templates(self) -> None:
        """Load hardcoded built-in templates."""
        # TEMPLATE Errors
        self._templates["TEMPLATE_PARSE_ERROR"] = ErrorTemplate(
            code="TEMPLATE_PARSE_ERROR",
            category=ErrorCategory.TEMPLATE,
            message_template="Failed to parse template '{origin}'",
            detail_template="The template source is malformed",
            suggestion_template="Check that every '$' tag is closed and blocks are balanced",
        )

        self._templates["TYPE_MISMATCH"] = ErrorTemplate(
            code="TYPE_MISMATCH",
            category=ErrorCategory.TEMPLATE,
            message_template="expected {expected} but got {actual} for {subject}",
            suggestion_template="Use $for$ for list fields and $key$ for string fields",
        )

        self._templates["INCLUDE_DEPTH_EXCEEDED"] = ErrorTemplate(
            code="INCLUDE_DEPTH_EXCEEDED",
            category=ErrorCategory.TEMPLATE,
            message_template="Partial inclusion nested deeper than {max_depth} levels",
            detail_template="A template probably includes itself, directly or transitively",
            suggestion_template="Break the include cycle or raise render.max_include_depth",
        )

        self._templates["RENDER_FAILED"] = ErrorTemplate(
            code="RENDER_FAILED",
            category=ErrorCategory.TEMPLATE,
            message_template="{message}",
        )

        # CONTEXT Errors
        self._templates["FIELD_NOT_FOUND"] = ErrorTemplate(
            code="FIELD_NOT_FOUND",
            category=ErrorCategory.CONTEXT,
            message_template="Missing field '{key}' in context",
            suggestion_template="Add a provider for '{key}' to the context or guard it with $if$",
        )

        self._templates["CONTEXT_FAILURE"] = ErrorTemplate(
            code="CONTEXT_FAILURE",
            category=ErrorCategory.CONTEXT,
            message_template="{message}",
            detail_template="A context provider failed while computing a field",
        )

        # STORE Errors
        self._templates["TEMPLATE_NOT_FOUND"] = ErrorTemplate(
            code="TEMPLATE_NOT_FOUND",
            category=ErrorCategory.STORE,
            message_template="Template '{identifier}' not found",
            suggestion_template="Check the template identifier and the templates directory",
        )

        self._templates["PARTIAL_LOAD_FAILED"] = ErrorTemplate(
            code="PARTIAL_LOAD_FAILED",
            category=ErrorCategory.STORE,
            message_template="Failed to load template '{identifier}': {reason}",
            suggestion_template="Check that the partial exists and parses",
        )

        # CONFIG Errors
        self._templates["CONFIG_INVALID"] = ErrorTemplate(
            code="CONFIG_INVALID",
            category=ErrorCategory.CONFIG,
            message_template="Invalid configuration",
            detail_template="The Stencil configuration is invalid",
            suggestion_template="Check the configuration file and fix errors",
        )

        # SYSTEM Errors
        self._templates["TRIM_INVARIANT_VIOLATION"] = ErrorTemplate(
            code="TRIM_INVARIANT_VIOLATION",
            category=ErrorCategory.SYSTEM,
            message_template="Template '{origin}' not fully trimmed",
            detail_template="A template reached the evaluator with unresolved trim markers",
            suggestion_template="Construct templates with make_template",
        )

        self._templates["INTERNAL_ERROR"] = ErrorTemplate(
            code="INTERNAL_ERROR",
            category=ErrorCategory.SYSTEM,
            message_template="Internal Stencil error",
            detail_template="An unexpected error occurred in the template engine",
            suggestion_template="Check the logs and report this issue",
        )
