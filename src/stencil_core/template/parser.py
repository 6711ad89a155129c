"""Template source parser.

Syntax:
    $key$                       interpolation
    $key(arg, "lit", $expr$)$   call; bare words and quoted strings are literals
    $$                          literal dollar
    $if(expr)$ .. $else$ .. $endif$
    $for(expr)$ .. $sep$ .. $endfor$
    $partial(expr)$
    $-tag-$                     trim whitespace before / after a tag
"""

import re
from dataclasses import dataclass
from typing import NoReturn

from stencil_core.errors import create_error

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
    TemplateElement,
    TemplateExpr,
    TrimL,
    TrimR,
)

# A '-' directly before the closing '$' is a trim marker, not part of the key
KEY_PATTERN = re.compile(r"[A-Za-z_](?:[A-Za-z0-9_.]|-(?!\$))*")
OPEN_KEYWORD_PATTERN = re.compile(r"(if|for|partial)\(")
CLOSE_KEYWORD_PATTERN = re.compile(r"(else|endif|sep|endfor)(?=-?\$)")
BARE_ARGUMENT_PATTERN = re.compile(r'[^,()$"]+')


@dataclass
class _Tag:
    """A parsed `$...$` tag."""

    start: int
    keyword: str | None
    expr: TemplateExpr | None
    trim_left: bool
    trim_right: bool


class TemplateParser:
    """Recursive-descent parser for one template source."""

    def __init__(self, source: str, origin: str):
        """Initialize parser.

        Args:
            source: Template source text
            origin: Label used in error locations
        """
        self._source = source
        self._origin = origin
        self._pos = 0

    def parse(self) -> list[TemplateElement]:
        """Parse the whole source.

        Returns:
            Element list, trim markers still in place

        Raises:
            StencilError(TEMPLATE_PARSE_ERROR) on malformed input
        """
        elements, _ = self._parse_block(())
        return elements

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def _parse_block(self, closers: tuple[str, ...]) -> tuple[list[TemplateElement], _Tag | None]:
        """Parse elements until one of `closers` or the end of input."""
        elements: list[TemplateElement] = []
        source = self._source

        while True:
            index = source.find("$", self._pos)
            if index == -1:
                if self._pos < len(source):
                    elements.append(Chunk(source[self._pos :]))
                    self._pos = len(source)
                if closers:
                    expected = " or ".join(f"${kw}$" for kw in closers)
                    self._fail(f"expected {expected} before end of template", len(source))
                return elements, None

            if index > self._pos:
                elements.append(Chunk(source[self._pos : index]))
                self._pos = index

            if source.startswith("$$", self._pos):
                elements.append(Escaped())
                self._pos += 2
                continue

            tag = self._parse_tag()

            if tag.keyword in ("else", "endif", "sep", "endfor"):
                if tag.keyword not in closers:
                    self._fail(f"unexpected ${tag.keyword}$", tag.start)
                if tag.trim_left:
                    elements.append(TrimL())
                return elements, tag

            if tag.trim_left:
                elements.append(TrimL())

            if tag.keyword == "if":
                element, closing = self._parse_if(tag)
            elif tag.keyword == "for":
                element, closing = self._parse_for(tag)
            elif tag.keyword == "partial":
                element, closing = Partial(tag.expr), tag
            else:
                element, closing = Expr(tag.expr), tag

            elements.append(element)
            if closing.trim_right:
                elements.append(TrimR())

    def _parse_if(self, opening: _Tag) -> tuple[If, _Tag]:
        then, closing = self._parse_block(("else", "endif"))
        then = _leading_trim(opening) + then

        else_ = None
        if closing.keyword == "else":
            else_tag = closing
            body, closing = self._parse_block(("endif",))
            else_ = tuple(_leading_trim(else_tag) + body)

        return If(opening.expr, tuple(then), else_), closing

    def _parse_for(self, opening: _Tag) -> tuple[For, _Tag]:
        body, closing = self._parse_block(("sep", "endfor"))
        body = _leading_trim(opening) + body

        sep = None
        if closing.keyword == "sep":
            sep_tag = closing
            sep_body, closing = self._parse_block(("endfor",))
            sep = tuple(_leading_trim(sep_tag) + sep_body)

        return For(opening.expr, tuple(body), sep), closing

    # -------------------------------------------------------------------------
    # Tags and expressions
    # -------------------------------------------------------------------------

    def _parse_tag(self) -> _Tag:
        start = self._pos
        self._pos += 1  # opening '$'

        trim_left = self._accept("-")
        keyword = None
        expr = None

        opening = OPEN_KEYWORD_PATTERN.match(self._source, self._pos)
        closing = CLOSE_KEYWORD_PATTERN.match(self._source, self._pos)
        if opening:
            keyword = opening.group(1)
            self._pos = opening.end()
            self._skip_spaces()
            expr = self._parse_expr()
            self._skip_spaces()
            self._expect(")")
        elif closing:
            keyword = closing.group(1)
            self._pos = closing.end()
        else:
            expr = self._parse_expr()

        trim_right = self._source.startswith("-$", self._pos)
        if trim_right:
            self._pos += 1
        self._expect("$", f"unterminated tag starting at column {self._column(start)}")

        return _Tag(start, keyword, expr, trim_left, trim_right)

    def _parse_expr(self) -> TemplateExpr:
        if self._peek() == '"':
            return self._parse_string()

        match = KEY_PATTERN.match(self._source, self._pos)
        if not match:
            self._fail("expected a field name or string literal", self._pos)
        key = match.group()
        self._pos = match.end()

        if self._accept("("):
            return Call(key, tuple(self._parse_arguments()))
        return Ident(key)

    def _parse_arguments(self) -> list[TemplateExpr]:
        args: list[TemplateExpr] = []
        self._skip_spaces()
        if self._accept(")"):
            return args

        while True:
            self._skip_spaces()
            args.append(self._parse_argument())
            self._skip_spaces()
            if self._accept(","):
                continue
            self._expect(")", "expected ',' or ')' in argument list")
            return args

    def _parse_argument(self) -> TemplateExpr:
        char = self._peek()
        if char == '"':
            return self._parse_string()
        if char == "$":
            self._pos += 1
            expr = self._parse_expr()
            self._expect("$")
            return expr

        match = BARE_ARGUMENT_PATTERN.match(self._source, self._pos)
        if not match or not match.group().strip():
            self._fail("expected an argument", self._pos)
        self._pos = match.end()
        return StringLiteral(match.group().strip())

    def _parse_string(self) -> StringLiteral:
        start = self._pos
        self._pos += 1  # opening quote
        chars: list[str] = []

        while self._pos < len(self._source):
            char = self._source[self._pos]
            if char == "\\" and self._pos + 1 < len(self._source):
                chars.append(self._source[self._pos + 1])
                self._pos += 2
                continue
            self._pos += 1
            if char == '"':
                return StringLiteral("".join(chars))
            chars.append(char)

        self._fail("unterminated string literal", start)

    # -------------------------------------------------------------------------
    # Scanning helpers
    # -------------------------------------------------------------------------

    def _peek(self) -> str:
        return self._source[self._pos : self._pos + 1]

    def _accept(self, text: str) -> bool:
        if self._source.startswith(text, self._pos):
            self._pos += len(text)
            return True
        return False

    def _expect(self, text: str, message: str | None = None) -> None:
        if not self._accept(text):
            self._fail(message or f"expected '{text}'", self._pos)

    def _skip_spaces(self) -> None:
        while self._peek() in (" ", "\t", "\n", "\r"):
            self._pos += 1

    def _column(self, position: int) -> int:
        return position - self._source.rfind("\n", 0, position)

    def _fail(self, message: str, position: int) -> NoReturn:
        line = self._source.count("\n", 0, position) + 1
        raise create_error(
            "TEMPLATE_PARSE_ERROR",
            origin=self._origin,
            detail=f"{self._origin}:{line}:{self._column(position)}: {message}",
        )


def _leading_trim(tag: _Tag) -> list[TemplateElement]:
    return [TrimR()] if tag.trim_right else []


def parse_template_elements(origin: str, source: str) -> list[TemplateElement]:
    """Parse template source into elements.

    Args:
        origin: Label used in error locations
        source: Template source text

    Returns:
        Element list, trim markers still in place

    Raises:
        StencilError(TEMPLATE_PARSE_ERROR) on malformed input
    """
    return TemplateParser(source, origin).parse()
