"""Resolved shapes of context fields."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from stencil_core.types import FieldKind

from .item import Item

if TYPE_CHECKING:
    from .context import Context


@dataclass(frozen=True)
class EmptyField:
    """Present but valueless; only meaningful as an $if$ condition."""

    kind = FieldKind.BOOLEAN


@dataclass(frozen=True)
class StringField:
    """A string value, usable by $key$ and as call argument."""

    text: str
    kind = FieldKind.STRING


@dataclass(frozen=True)
class ListField:
    """Items sharing one sub-context; loop bodies see only that context."""

    context: "Context"
    items: tuple[Item[Any], ...]
    kind = FieldKind.LIST


@dataclass(frozen=True)
class LexicalListField:
    """Raw values turned into contexts on demand.

    Each loop iteration sees build(value) in front of the enclosing context,
    applied to the enclosing item.
    """

    build: Callable[[Any], "Context"]
    values: tuple[Any, ...]
    kind = FieldKind.LIST


ContextField = Union[EmptyField, StringField, ListField, LexicalListField]
