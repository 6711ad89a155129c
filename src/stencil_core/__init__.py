"""Stencil Core - evaluation engine for $-delimited templates.

Renders a parsed template against a context (an ordered chain of field
providers) and a content item.
"""

from stencil_core.template import (
    Context,
    Item,
    TemplateEngine,
    default_context,
    make_template,
    read_template,
)

__version__ = "1.0.0"
__all__ = [
    "__version__",
    "TemplateEngine",
    "Context",
    "Item",
    "default_context",
    "make_template",
    "read_template",
]
