"""Whitespace trimming pass.

`$-` strips whitespace before a tag and `-$` strips whitespace after it. The
parser leaves TrimL/TrimR markers next to the chunks they affect; normalize()
applies them and removes every marker, recursing into conditional and loop
bodies.

A marker next to a block reaches into it: `-$` before `$if$`/`$for$` trims
the start of the then/else branches or the loop body, and `$-` after a block
trims their ends.
"""

from collections.abc import Iterable

from .elements import Chunk, For, If, TemplateElement, TrimL, TrimR

Body = tuple[TemplateElement, ...]


def normalize(elements: Iterable[TemplateElement]) -> list[TemplateElement]:
    """Apply and remove all trim markers.

    Args:
        elements: Element sequence as produced by the parser

    Returns:
        Equivalent element list without TrimL/TrimR
    """
    result: list[TemplateElement] = []
    strip_next = False

    for element in elements:
        if isinstance(element, TrimL):
            if result and isinstance(result[-1], (If, For)):
                result[-1] = _trim_block_end(result[-1])
            else:
                _strip_last(result)
            continue
        if isinstance(element, TrimR):
            strip_next = True
            continue

        trim_start = strip_next
        strip_next = False

        if isinstance(element, Chunk):
            text = element.text.lstrip() if trim_start else element.text
            if text:
                result.append(Chunk(text))
        elif isinstance(element, If):
            result.append(
                If(
                    element.cond,
                    _normalize_body(element.then, trim_start),
                    _normalize_body(element.else_, trim_start),
                )
            )
        elif isinstance(element, For):
            result.append(
                For(
                    element.source,
                    _normalize_body(element.body, trim_start),
                    _normalize_body(element.sep),
                )
            )
        else:
            result.append(element)

    return result


def _normalize_body(body: Body | None, trim_start: bool = False) -> Body | None:
    if body is None:
        return None
    if trim_start:
        return tuple(normalize([TrimR(), *body]))
    return tuple(normalize(body))


def _trim_block_end(block: If | For) -> If | For:
    # Bodies are already normalized, so a second pass only applies the new marker.
    if isinstance(block, If):
        return If(block.cond, _trim_body_end(block.then), _trim_body_end(block.else_))
    return For(block.source, _trim_body_end(block.body), block.sep)


def _trim_body_end(body: Body | None) -> Body | None:
    if body is None:
        return None
    return tuple(normalize([*body, TrimL()]))


def _strip_last(result: list[TemplateElement]) -> None:
    if result and isinstance(result[-1], Chunk):
        text = result[-1].text.rstrip()
        if text:
            result[-1] = Chunk(text)
        else:
            result.pop()
