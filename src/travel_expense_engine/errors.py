"""Error kinds and the result envelope returned by public operations.

Expected business failures are returned inside an ``OperationResult`` rather
than raised. The error classes are still ``Exception`` subclasses so a caller
can opt into exceptions with ``OperationResult.unwrap()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from uuid import UUID

T = TypeVar("T")


class EngineError(Exception):
    """Base class for engine failures."""

    kind = "engine_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(EngineError):
    """Input rejected before any store call."""

    kind = "validation_error"

    def __init__(self, message: str, fields: dict[str, str] | None = None):
        self.fields = fields or {}
        super().__init__(message)


class TransitionError(EngineError):
    """Illegal state transition or wrong actor for a transition."""

    kind = "transition_error"

    def __init__(self, from_status: str, action: str, reason: str | None = None):
        self.from_status = from_status
        self.action = action
        self.reason = reason
        msg = f"Cannot {action} application in status '{from_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class StoreError(EngineError):
    """Persistence call failed; surfaced without retry."""

    kind = "store_error"

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")


class NotFoundError(StoreError):
    """Requested record does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id: UUID | str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__("get", f"{entity} {entity_id} not found")


class PartialCreationError(EngineError):
    """Application row exists but its items could not be written."""

    kind = "partial_creation_error"

    def __init__(self, application_id: UUID, cause: EngineError):
        self.application_id = application_id
        self.cause = cause
        super().__init__(
            f"Expense application {application_id} was created but its items were not: "
            f"{cause.message}"
        )


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Explicit success/failure outcome of an engine operation."""

    success: bool
    data: T | None = None
    error: EngineError | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> OperationResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: EngineError) -> OperationResult[T]:
        return cls(success=False, error=error)

    @property
    def error_kind(self) -> str | None:
        """Kind of the carried error, if any."""
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the data or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.data  # type: ignore[return-value]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{success, data, error}`` shape callers expect."""
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = self.error.message
            out["error_kind"] = self.error.kind
        return out
