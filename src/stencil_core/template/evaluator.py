"""Template evaluator: renders a normalized template against a context and item."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from stencil_core.errors import StencilError, create_error
from stencil_core.types import FieldKind

from . import diagnostics
from .context import Context, chain, missing_field
from .elements import (
    Call,
    Chunk,
    Escaped,
    Expr,
    For,
    Ident,
    If,
    Partial,
    StringLiteral,
    Template,
    TemplateElement,
    TemplateExpr,
    TrimL,
    TrimR,
)
from .fields import ContextField, LexicalListField, ListField, StringField
from .item import Item
from .outcome import FIELD_NOT_FOUND, Failed, Found, NotFound, Outcome

if TYPE_CHECKING:
    from stencil_core.logging import RenderLogger

    from .store import TemplateStore


@dataclass(frozen=True)
class _Frame:
    """What one element list is rendered against."""

    context: Context  # caller's context
    lookup: Context  # caller's context terminated by missing_field()
    item: Item[Any]
    origin: str
    depth: int
    log: "RenderLogger | None"


class TemplateEvaluator:
    """Recursive tree-walking interpreter for templates.

    Rendering is all-or-nothing: evaluate() returns either the complete
    output or a Failed carrying the breadcrumb trail.
    """

    def __init__(
        self,
        store: "TemplateStore | None" = None,
        max_include_depth: int | None = 32,
    ):
        """Initialize evaluator.

        Args:
            store: Template store used by $partial$ (None disables partials)
            max_include_depth: Nesting limit for partials; None for unbounded
        """
        self._store = store
        self._max_include_depth = max_include_depth
        self._missing = missing_field()

    def evaluate(
        self,
        template: Template,
        context: Context,
        item: Item[Any],
        log: "RenderLogger | None" = None,
    ) -> Outcome[str]:
        """Render a template.

        Args:
            template: Normalized template
            context: Field lookup for the template's expressions
            item: Item being rendered
            log: Optional logger receiving non-fatal diagnostics

        Returns:
            Found(output) or Failed(trail)

        Raises:
            StencilError(TRIM_INVARIANT_VIOLATION) if the template still
            contains trim markers
        """
        return self._apply_elements(
            template.elements, self._frame(context, item, template.origin, 0, log)
        )

    def _frame(
        self,
        context: Context,
        item: Item[Any],
        origin: str,
        depth: int,
        log: "RenderLogger | None",
    ) -> _Frame:
        return _Frame(context, chain(context, self._missing), item, origin, depth, log)

    # -------------------------------------------------------------------------
    # Elements
    # -------------------------------------------------------------------------

    def _apply_elements(
        self, elements: tuple[TemplateElement, ...], frame: _Frame
    ) -> Outcome[str]:
        parts: list[str] = []
        for element in elements:
            outcome = self._apply_element(element, frame)
            if isinstance(outcome, Failed):
                return outcome
            parts.append(outcome.value)
        return Found("".join(parts))

    def _apply_element(self, element: TemplateElement, frame: _Frame) -> Outcome[str]:
        if isinstance(element, Chunk):
            return Found(element.text)
        if isinstance(element, Escaped):
            return Found("$")
        if isinstance(element, Expr):
            return self._apply_string_expr(
                element.expr, frame, f"expr '${element.expr}$'", diagnostics.in_expr(element.expr)
            )
        if isinstance(element, If):
            return self._apply_if(element, frame)
        if isinstance(element, For):
            return self._apply_for(element, frame)
        if isinstance(element, Partial):
            return self._apply_partial(element, frame)
        if isinstance(element, (TrimL, TrimR)):
            # Never produced by make_template()
            raise create_error("TRIM_INVARIANT_VIOLATION", origin=frame.origin)
        raise create_error(
            "INTERNAL_ERROR",
            detail=f"Unknown template element: {type(element).__name__}",
        )

    def _apply_if(self, element: If, frame: _Frame) -> Outcome[str]:
        outcome = self._apply_expr(element.cond, frame)

        # Presence decides, not content: an empty string is still true.
        if isinstance(outcome, Found):
            return self._apply_elements(element.then, frame)

        if isinstance(outcome, Failed) and not outcome.is_soft and frame.log:
            frame.log.condition_error(str(element.cond), list(outcome.messages))

        if element.else_ is None:
            return Found("")
        return self._apply_elements(element.else_, frame)

    def _apply_for(self, element: For, frame: _Frame) -> Outcome[str]:
        source = element.source
        outcome = self._require_found(self._apply_expr(source, frame))
        if isinstance(outcome, Failed):
            return outcome.with_breadcrumb(diagnostics.in_loop_head(source))

        value = outcome.value
        if not isinstance(value, (ListField, LexicalListField)):
            mismatch = diagnostics.type_mismatch(
                FieldKind.LIST, value.kind, f"loop expr '{source}'"
            )
            return mismatch.with_breadcrumb(diagnostics.in_loop_head(source))

        rendered = self._apply_loop(element, value, frame)
        if isinstance(rendered, Failed):
            return rendered.with_breadcrumb(diagnostics.in_loop_context(source))
        return rendered

    def _apply_loop(
        self,
        element: For,
        value: ListField | LexicalListField,
        frame: _Frame,
    ) -> Outcome[str]:
        # The separator is rendered once, against the enclosing frame.
        sep: Outcome[str] = Found("")
        if element.sep is not None:
            sep = self._apply_elements(element.sep, frame)
            if isinstance(sep, Failed):
                return sep

        if isinstance(value, ListField):
            frames = [
                self._frame(value.context, item, frame.origin, frame.depth, frame.log)
                for item in value.items
            ]
        else:
            # Lexical lists keep the enclosing item and extend its context.
            frames = [
                self._frame(
                    chain(value.build(raw), frame.context),
                    frame.item,
                    frame.origin,
                    frame.depth,
                    frame.log,
                )
                for raw in value.values
            ]

        outputs: list[str] = []
        for item_frame in frames:
            outcome = self._apply_elements(element.body, item_frame)
            if isinstance(outcome, Failed):
                return outcome
            outputs.append(outcome.value)
        return Found(sep.value.join(outputs))

    def _apply_partial(self, element: Partial, frame: _Frame) -> Outcome[str]:
        name = element.name
        outcome = self._apply_string_expr(
            name, frame, f"partial expr '{name}'", diagnostics.in_partial_name(name)
        )
        if isinstance(outcome, Failed):
            return outcome

        identifier = outcome.value
        inclusion = diagnostics.in_inclusion(name)

        if self._max_include_depth is not None and frame.depth >= self._max_include_depth:
            failure = diagnostics.include_depth_exceeded(self._max_include_depth)
            return failure.with_breadcrumb(inclusion)

        if self._store is None:
            failure = diagnostics.partial_load_failed(identifier, "no template store configured")
            return failure.with_breadcrumb(inclusion)

        try:
            template = self._store.load_template(identifier)
        except StencilError as e:
            reason = f"{e.message}: {e.detail}" if e.detail else e.message
            return diagnostics.partial_load_failed(identifier, reason).with_breadcrumb(inclusion)

        if frame.log:
            frame.log.including(identifier, frame.depth + 1)

        nested = self._apply_elements(
            template.elements,
            self._frame(frame.context, frame.item, template.origin, frame.depth + 1, frame.log),
        )
        if isinstance(nested, Failed):
            framing = diagnostics.failure_framing(template.origin, frame.item.identifier)
            return nested.with_breadcrumb(framing).with_breadcrumb(inclusion)
        return nested

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def _apply_expr(self, expr: TemplateExpr, frame: _Frame) -> Outcome[ContextField]:
        if isinstance(expr, Ident):
            return frame.lookup.lookup(expr.key, [], frame.item)

        if isinstance(expr, Call):
            args: list[str] = []
            for arg in expr.args:
                outcome = self._apply_string_expr(arg, frame, f"argument '{arg}'")
                if isinstance(outcome, Failed):
                    return outcome
                args.append(outcome.value)
            return frame.lookup.lookup(expr.key, args, frame.item)

        if isinstance(expr, StringLiteral):
            return Found(StringField(expr.text))

        raise create_error(
            "INTERNAL_ERROR",
            detail=f"Unknown template expression: {type(expr).__name__}",
        )

    def _apply_string_expr(
        self,
        expr: TemplateExpr,
        frame: _Frame,
        subject: str,
        breadcrumb: str | None = None,
    ) -> Outcome[str]:
        """Evaluate an expression that must produce a string field."""
        outcome = self._require_found(self._apply_expr(expr, frame))
        if isinstance(outcome, Found):
            value = outcome.value
            if isinstance(value, StringField):
                return Found(value.text)
            outcome = diagnostics.type_mismatch(FieldKind.STRING, value.kind, subject)

        if breadcrumb:
            return outcome.with_breadcrumb(breadcrumb)
        return outcome

    @staticmethod
    def _require_found(outcome: Outcome[ContextField]) -> Found[ContextField] | Failed:
        """Escalate a soft miss where a value is required."""
        if isinstance(outcome, NotFound):
            return Failed(outcome.messages, FIELD_NOT_FOUND)
        return outcome
