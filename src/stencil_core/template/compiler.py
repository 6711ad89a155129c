"""Source-to-Template compilation helpers."""

from typing import Any

from .elements import Template, make_template
from .item import Item
from .parser import parse_template_elements

LITERAL_ORIGIN = "{literal}"


def compile_template(source: str, origin: str) -> Template:
    """Parse and normalize template source.

    Args:
        source: Template source text
        origin: Origin label for diagnostics

    Raises:
        StencilError(TEMPLATE_PARSE_ERROR) on malformed input
    """
    return make_template(origin, parse_template_elements(origin, source))


def read_template(source: str) -> Template:
    """Compile an inline template string."""
    return compile_template(source, LITERAL_ORIGIN)


def compile_item(item: Item[Any]) -> Template:
    """Compile an item's own body, using its identifier as origin."""
    return compile_template(str(item.body), item.identifier)
