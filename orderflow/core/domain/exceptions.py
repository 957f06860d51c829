"""
Domain Exceptions for Domain-Driven Design

These exceptions represent business rule violations and domain-specific errors.
Use cases catch them at the application boundary and translate them into
typed responses carrying the error kind.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Caller-facing classification of expected, recoverable failures."""

    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    INSUFFICIENT_STOCK = "insufficient_stock"
    VALIDATION_FAILURE = "validation_failure"
    CONCURRENCY_CONFLICT = "concurrency_conflict"

    @property
    def is_retryable(self) -> bool:
        """Only concurrency conflicts are worth retrying unchanged."""
        return self is ErrorKind.CONCURRENCY_CONFLICT


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    Provides a standardized way to communicate business rule violations.
    """

    kind: ErrorKind = ErrorKind.INVALID_STATE

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "INSUFFICIENT_STOCK")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Use for invalid entity states, value object creation failures, etc.
    """

    kind = ErrorKind.VALIDATION_FAILURE

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class EntityNotFoundException(DomainException):
    """
    Raised when an entity is not found.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        message: str | None = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        msg = message or f"{entity_type} with ID {entity_id} not found"
        super().__init__(
            msg,
            "ENTITY_NOT_FOUND",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class BusinessRuleViolationException(DomainException):
    """
    Raised when a business rule is violated.

    Use for invariant violations, precondition failures, etc.
    """

    kind = ErrorKind.INVALID_STATE

    def __init__(self, rule: str, message: str | None = None, details: dict[str, Any] | None = None):
        self.rule = rule
        msg = message or f"Business rule violated: {rule}"
        details = details or {}
        details["rule"] = rule
        super().__init__(msg, "BUSINESS_RULE_VIOLATION", details)


class InsufficientStockException(DomainException):
    """Raised when there's not enough stock for an operation."""

    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, product_id: int, requested: int, available: int, product_name: str | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        label = product_name or f"product {product_id}"
        super().__init__(
            f"Insufficient stock for {label}. Requested: {requested}, Available: {available}",
            "INSUFFICIENT_STOCK",
            {
                "product_id": product_id,
                "requested": requested,
                "available": available,
            },
        )


class InvalidOperationException(DomainException):
    """Raised when an operation is not valid in the current state."""

    kind = ErrorKind.INVALID_STATE

    def __init__(
        self,
        operation: str,
        current_state: str,
        message: str | None = None,
        code: str = "INVALID_OPERATION",
    ):
        self.operation = operation
        self.current_state = current_state
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(
            msg,
            code,
            {"operation": operation, "current_state": current_state},
        )


class ConcurrencyException(DomainException):
    """Raised when there's a concurrency conflict (optimistic locking)."""

    kind = ErrorKind.CONCURRENCY_CONFLICT

    def __init__(self, entity_type: str, entity_id: Any, expected_version: int, actual_version: int | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrency conflict for {entity_type} {entity_id}. "
            f"Expected version {expected_version}, but found {actual_version}",
            "CONCURRENCY_CONFLICT",
            {
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )


class TransactionConflictException(ConcurrencyException):
    """Raised when the database aborts a transaction because of a concurrent writer."""

    def __init__(self, reason: str, sqlstate: str | None = None):
        self.entity_type = None
        self.entity_id = None
        self.expected_version = None
        self.actual_version = None
        self.sqlstate = sqlstate
        DomainException.__init__(
            self,
            f"Transaction aborted by a concurrent update, retry the operation: {reason}",
            "CONCURRENCY_CONFLICT",
            {"sqlstate": sqlstate},
        )
