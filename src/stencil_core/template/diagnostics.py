"""Breadcrumbs and failure framing for render diagnostics.

Every nested construct prepends one breadcrumb to a Failed trail on its way
out, so the final trail reads outermost-first:

    Failed to apply template templates/post.html to item posts/a.md:
    In inclusion of '$partial("templates/footer.html")$',
    Failed to apply template templates/footer.html to item posts/a.md,
    In expr '$author$',
    Missing field 'author' in context
"""

from stencil_core.errors import get_error_factory
from stencil_core.types import FieldKind

from .elements import TemplateExpr
from .outcome import Failed

TYPE_MISMATCH = "TYPE_MISMATCH"
PARTIAL_LOAD_FAILED = "PARTIAL_LOAD_FAILED"
INCLUDE_DEPTH_EXCEEDED = "INCLUDE_DEPTH_EXCEEDED"


def in_expr(expr: TemplateExpr) -> str:
    return f"In expr '${expr}$'"


def in_loop_head(expr: TemplateExpr) -> str:
    return f"In expr '$for({expr})$'"


def in_loop_context(expr: TemplateExpr) -> str:
    return f"In loop context of '$for({expr})$'"


def in_partial_name(expr: TemplateExpr) -> str:
    return f"In expr '$partial({expr})$'"


def in_inclusion(expr: TemplateExpr) -> str:
    return f"In inclusion of '$partial({expr})$'"


def type_mismatch(expected: FieldKind, actual: FieldKind, subject: str) -> Failed:
    """Failure for a field of the wrong shape.

    Args:
        expected: Kind the construct needs
        actual: Kind the field resolved to
        subject: What was being evaluated, e.g. "loop expr 'posts'"
    """
    message = get_error_factory().message(
        TYPE_MISMATCH,
        expected=expected.value,
        actual=actual.value,
        subject=subject,
    )
    return Failed((message,), TYPE_MISMATCH)


def partial_load_failed(identifier: str, reason: str) -> Failed:
    message = get_error_factory().message(PARTIAL_LOAD_FAILED, identifier=identifier, reason=reason)
    return Failed((message,), PARTIAL_LOAD_FAILED)


def include_depth_exceeded(max_depth: int) -> Failed:
    message = get_error_factory().message(INCLUDE_DEPTH_EXCEEDED, max_depth=max_depth)
    return Failed((message,), INCLUDE_DEPTH_EXCEEDED)


def failure_framing(template_origin: str, item_identifier: str) -> str:
    """Headline for a failed template application.

    A template whose origin is the item itself was compiled from the item's
    own body, so the failure is reported as an interpolation.
    """
    if template_origin == item_identifier:
        return f"Failed to interpolate template in item {item_identifier}"
    return f"Failed to apply template {template_origin} to item {item_identifier}"
