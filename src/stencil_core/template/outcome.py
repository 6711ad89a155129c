"""Three-state result of context lookups and expression evaluation."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")

FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
CONTEXT_FAILURE = "CONTEXT_FAILURE"


@dataclass(frozen=True)
class Found(Generic[T]):
    """The lookup or evaluation produced a value."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """Soft miss: this provider has no opinion about the key."""

    messages: tuple[str, ...] = ()


@dataclass(frozen=True)
class Failed:
    """Hard failure carrying its breadcrumb trail, outermost first.

    `code` names the innermost failure (an error registry code) and survives
    breadcrumb wrapping.
    """

    messages: tuple[str, ...]
    code: str = CONTEXT_FAILURE

    @property
    def is_soft(self) -> bool:
        """True when the failure only reports a missing field."""
        return self.code == FIELD_NOT_FOUND

    def with_breadcrumb(self, message: str) -> "Failed":
        """Return a copy with `message` prepended to the trail."""
        return Failed((message, *self.messages), self.code)


Outcome = Union[Found[T], NotFound, Failed]

NOT_FOUND = NotFound()


def failed(*messages: str, code: str = CONTEXT_FAILURE) -> Failed:
    """Shorthand for building a Failed outcome."""
    return Failed(tuple(messages), code)
