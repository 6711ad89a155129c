"""Template element and expression model.

A template is an immutable sequence of elements. Expressions appear inside
interpolations, conditions, loop sources and partial names:

    $title$                 Expr(Ident("title"))
    $date("%Y")$            Expr(Call("date", (StringLiteral("%Y"),)))
    $if(tags)$..$endif$     If(Ident("tags"), (...), None)
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Union

# =============================================================================
# Expressions
# =============================================================================


@dataclass(frozen=True)
class Ident:
    """Field lookup without arguments."""

    key: str

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class Call:
    """Field lookup with arguments, each reduced to a string first."""

    key: str
    args: tuple["TemplateExpr", ...] = ()

    def __str__(self) -> str:
        return f"{self.key}({', '.join(_show_argument(arg) for arg in self.args)})"


@dataclass(frozen=True)
class StringLiteral:
    """Constant string; never consults the context."""

    text: str

    def __str__(self) -> str:
        escaped = self.text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'


TemplateExpr = Union[Ident, Call, StringLiteral]


def _show_argument(arg: TemplateExpr) -> str:
    if isinstance(arg, StringLiteral):
        return str(arg)
    return f"${arg}$"


# =============================================================================
# Elements
# =============================================================================


@dataclass(frozen=True)
class Chunk:
    """Literal output text."""

    text: str


@dataclass(frozen=True)
class Escaped:
    """A literal dollar sign, written `$$`."""


@dataclass(frozen=True)
class Expr:
    """Single interpolation, written `$expr$`."""

    expr: TemplateExpr


@dataclass(frozen=True)
class If:
    """Conditional on field presence."""

    cond: TemplateExpr
    then: tuple["TemplateElement", ...]
    else_: tuple["TemplateElement", ...] | None = None


@dataclass(frozen=True)
class For:
    """Loop over a list field, with an optional separator body."""

    source: TemplateExpr
    body: tuple["TemplateElement", ...]
    sep: tuple["TemplateElement", ...] | None = None


@dataclass(frozen=True)
class Partial:
    """Inclusion of another template by name."""

    name: TemplateExpr


@dataclass(frozen=True)
class TrimL:
    """Strip whitespace to the left. Only valid before normalization."""


@dataclass(frozen=True)
class TrimR:
    """Strip whitespace to the right. Only valid before normalization."""


TemplateElement = Union[Chunk, Escaped, Expr, If, For, Partial, TrimL, TrimR]


# =============================================================================
# Template
# =============================================================================


@dataclass(frozen=True)
class Template:
    """Normalized template plus the origin label used in diagnostics.

    Build instances with make_template(); the evaluator rejects element
    sequences that still contain trim markers.
    """

    elements: tuple[TemplateElement, ...]
    origin: str

    def __iter__(self) -> Iterator[TemplateElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)


def make_template(origin: str, elements: Iterable[TemplateElement]) -> Template:
    """Normalize elements and wrap them into a Template.

    Args:
        origin: Label for diagnostics (usually the template identifier)
        elements: Parsed elements, possibly containing trim markers

    Returns:
        Template free of trim markers
    """
    # Imported here: trim depends on the element classes above.
    from .trim import normalize

    return Template(elements=tuple(normalize(elements)), origin=origin)
