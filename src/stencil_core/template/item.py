"""Content item passed through the evaluator."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Item(Generic[T]):
    """Identifier plus an opaque body.

    Metadata is the document's header fields (e.g. parsed front matter);
    metadata_field() and friends read it, the evaluator never does.
    """

    identifier: str
    body: T
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def with_body(self, body: U) -> "Item[U]":
        """Return a copy of this item carrying a new body."""
        return replace(self, body=body)
