"""Stencil error types."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    TEMPLATE = "TEMPLATE"
    CONTEXT = "CONTEXT"
    STORE = "STORE"
    CONFIG = "CONFIG"
    SYSTEM = "SYSTEM"


@dataclass
class StencilError(Exception):
    """Structured error with context. Base exception for all Stencil errors."""

    # Identity
    code: str  # e.g., "TYPE_MISMATCH"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    template_origin: str | None = None  # Template being applied
    item_identifier: str | None = None  # Item being rendered
    trail: list[str] = field(default_factory=list)  # Breadcrumbs, outermost first

    cause: "StencilError | None" = None

    # Metadata
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.trail:
            return self.message
        return self.message + ":\n" + ",\n".join(self.trail)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for reporting.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "template_origin": self.template_origin,
            "item_identifier": self.item_identifier,
            "trail": list(self.trail),
            "timestamp": self.timestamp.isoformat(),
            "cause": self.cause.to_dict() if self.cause else None,
        }

    def with_context(
        self,
        template_origin: str | None = None,
        item_identifier: str | None = None,
    ) -> "StencilError":
        """Return copy with additional context.

        Args:
            template_origin: Optional template origin label
            item_identifier: Optional item identifier

        Returns:
            New StencilError instance with updated context
        """
        return StencilError(
            code=self.code,
            category=self.category,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
            template_origin=template_origin or self.template_origin,
            item_identifier=item_identifier or self.item_identifier,
            trail=list(self.trail),
            cause=self.cause,
            timestamp=self.timestamp,
        )


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Template '{identifier}' not found"
    detail_template: str | None = None
    suggestion_template: str | None = None
