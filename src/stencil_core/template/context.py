"""Context: ordered chain of field providers.

A provider is a callable `(key, args, item) -> Outcome[ContextField]`. A
Context tries its providers left to right: the first Found or Failed wins,
NotFound falls through to the next one. Failed therefore cannot be shadowed
by later providers; only a NotFound can.

    ctx = chain(const_field("site", "Example"), metadata_field(), body_field())
    ctx.lookup("site", [], item)   # Found(StringField("Example"))
"""

import posixpath
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from stencil_core.errors import StencilError, get_error_factory

from .fields import ContextField, EmptyField, LexicalListField, ListField, StringField
from .item import Item
from .outcome import FIELD_NOT_FOUND, NOT_FOUND, Failed, Found, NotFound, Outcome

Lookup = Callable[[str, Sequence[str], Item[Any]], Outcome[ContextField]]


class Context:
    """Ordered, composable field lookup."""

    def __init__(self, *providers: Lookup):
        """Initialize context.

        Args:
            *providers: Lookup callables, highest precedence first
        """
        self._providers: tuple[Lookup, ...] = providers

    @property
    def providers(self) -> tuple[Lookup, ...]:
        """Providers in lookup order."""
        return self._providers

    def lookup(
        self, key: str, args: Sequence[str], item: Item[Any]
    ) -> Outcome[ContextField]:
        """Resolve a key against the item.

        Args:
            key: Field name
            args: Already-evaluated call arguments (empty for plain keys)
            item: Item being rendered

        Returns:
            Outcome of the first provider that did not answer NotFound,
            NOT_FOUND when every provider declined
        """
        for provider in self._providers:
            outcome = provider(key, args, item)
            if not isinstance(outcome, NotFound):
                return outcome
        return NOT_FOUND

    def __add__(self, other: "Context") -> "Context":
        if not isinstance(other, Context):
            return NotImplemented
        return Context(*self._providers, *other.providers)

    def __repr__(self) -> str:
        return f"Context({len(self._providers)} providers)"


def chain(*contexts: Context) -> Context:
    """Compose contexts; earlier contexts take precedence."""
    providers: list[Lookup] = []
    for context in contexts:
        providers.extend(context.providers)
    return Context(*providers)


def _compute(compute: Callable[[], Any]) -> Outcome[Any]:
    """Run a provider callback.

    None means the callback has no value (NotFound); a StencilError becomes a
    Failed carrying the error's message.
    """
    try:
        value = compute()
    except StencilError as e:
        message = f"{e.message}: {e.detail}" if e.detail else e.message
        code = FIELD_NOT_FOUND if e.code == FIELD_NOT_FOUND else "CONTEXT_FAILURE"
        return Failed((message, *e.trail), code)
    if value is None:
        return NOT_FOUND
    return Found(value)


def _as_string(outcome: Outcome[Any]) -> Outcome[ContextField]:
    if isinstance(outcome, Found):
        return Found(StringField(str(outcome.value)))
    return outcome


# =============================================================================
# Field constructors
# =============================================================================


def field(key: str, compute: Callable[[Item[Any]], str | None]) -> Context:
    """String field computed from the item.

    Args:
        key: Field name
        compute: Returns the value, None when absent, or raises StencilError
    """

    def lookup(k: str, args: Sequence[str], item: Item[Any]) -> Outcome[ContextField]:
        if k != key:
            return NOT_FOUND
        return _as_string(_compute(lambda: compute(item)))

    return Context(lookup)


def const_field(key: str, value: str) -> Context:
    """String field with a constant value."""
    return field(key, lambda _: value)


def bool_field(key: str, predicate: Callable[[Item[Any]], bool]) -> Context:
    """Valueless field, present when predicate(item) holds.

    Only useful in $if$ conditions.
    """

    def lookup(k: str, args: Sequence[str], item: Item[Any]) -> Outcome[ContextField]:
        if k == key and predicate(item):
            return Found(EmptyField())
        return NOT_FOUND

    return Context(lookup)


def function_field(
    key: str, compute: Callable[[Sequence[str], Item[Any]], str | None]
) -> Context:
    """String field receiving call arguments, as in `$key(a, b)$`."""

    def lookup(k: str, args: Sequence[str], item: Item[Any]) -> Outcome[ContextField]:
        if k != key:
            return NOT_FOUND
        return _as_string(_compute(lambda: compute(list(args), item)))

    return Context(lookup)


def list_field(key: str, context: Context, items: Iterable[Item[Any]]) -> Context:
    """List of items rendered with their own context in $for$ loops."""
    frozen = tuple(items)
    return list_field_with(key, context, lambda _: frozen)


def list_field_with(
    key: str,
    context: Context,
    compute: Callable[[Item[Any]], Iterable[Item[Any]] | None],
) -> Context:
    """List field whose items depend on the enclosing item."""

    def lookup(k: str, args: Sequence[str], item: Item[Any]) -> Outcome[ContextField]:
        if k != key:
            return NOT_FOUND
        outcome = _compute(lambda: compute(item))
        if isinstance(outcome, Found):
            return Found(ListField(context, tuple(outcome.value)))
        return outcome

    return Context(lookup)


def lexical_list_field(
    key: str, build: Callable[[Any], Context], values: Iterable[Any]
) -> Context:
    """List of raw values; each iteration sees build(value) before the outer context."""
    frozen = tuple(values)
    return lexical_list_field_with(key, build, lambda _: frozen)


def lexical_list_field_with(
    key: str,
    build: Callable[[Any], Context],
    compute: Callable[[Item[Any]], Iterable[Any] | None],
) -> Context:
    """Lexical list field whose values depend on the enclosing item."""

    def lookup(k: str, args: Sequence[str], item: Item[Any]) -> Outcome[ContextField]:
        if k != key:
            return NOT_FOUND
        outcome = _compute(lambda: compute(item))
        if isinstance(outcome, Found):
            return Found(LexicalListField(build, tuple(outcome.value)))
        return outcome

    return Context(lookup)


def map_context(fn: Callable[[str], str], context: Context) -> Context:
    """Transform every string field produced by `context`.

    Empty fields pass through; list fields cannot be mapped and fail.
    """

    def lookup(k: str, args: Sequence[str], item: Item[Any]) -> Outcome[ContextField]:
        outcome = context.lookup(k, args, item)
        if not isinstance(outcome, Found):
            return outcome
        value = outcome.value
        if isinstance(value, StringField):
            return Found(StringField(fn(value.text)))
        if isinstance(value, EmptyField):
            return outcome
        return Failed((f"map_context: can't map over list field '{k}'",))

    return Context(lookup)


def _value_field(value: Any) -> Outcome[ContextField]:
    """Convert a plain data value (e.g. parsed YAML) into a field."""
    if value is None or value is False:
        return NOT_FOUND
    if value is True or isinstance(value, Mapping):
        return Found(EmptyField())
    if isinstance(value, (list, tuple)):
        return Found(LexicalListField(_value_context, tuple(value)))
    return Found(StringField(str(value)))


def _value_context(value: Any) -> Context:
    """Context for one element of a data list.

    Mappings expose their keys; scalars are available as `$item$`.
    """
    if isinstance(value, Mapping):
        return mapping_context(value)
    return const_field("item", str(value))


def mapping_context(data: Mapping[str, Any]) -> Context:
    """Fields taken from a plain mapping.

    Strings and numbers become string fields, True and nested mappings become
    empty fields, lists become lexical lists; None and False are absent.
    """

    def lookup(k: str, args: Sequence[str], item: Item[Any]) -> Outcome[ContextField]:
        if k not in data:
            return NOT_FOUND
        return _value_field(data[k])

    return Context(lookup)


def metadata_field() -> Context:
    """Every key of the item's metadata, converted like mapping_context()."""

    def lookup(k: str, args: Sequence[str], item: Item[Any]) -> Outcome[ContextField]:
        if k not in item.metadata:
            return NOT_FOUND
        return _value_field(item.metadata[k])

    return Context(lookup)


def body_field(key: str = "body") -> Context:
    """The item body as a string."""
    return field(key, lambda item: str(item.body))


def path_field(key: str = "path") -> Context:
    """The item identifier."""
    return field(key, lambda item: item.identifier)


def title_field(key: str = "title") -> Context:
    """The base name of the item identifier, without extension."""
    return field(key, lambda item: posixpath.splitext(posixpath.basename(item.identifier))[0])


def missing_field() -> Context:
    """Terminal provider: every key fails as missing.

    The evaluator appends it to each context it consults, so an unresolved
    key reaches the caller as a FIELD_NOT_FOUND failure.
    """
    factory = get_error_factory()

    def lookup(k: str, args: Sequence[str], item: Item[Any]) -> Outcome[ContextField]:
        return Failed((factory.message("FIELD_NOT_FOUND", key=k),), FIELD_NOT_FOUND)

    return Context(lookup)


def default_context() -> Context:
    """Body, metadata, path and title fields, in that order."""
    return chain(body_field("body"), metadata_field(), path_field("path"), title_field("title"))
