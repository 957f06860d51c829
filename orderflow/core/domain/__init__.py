"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Events: Domain events for communication
- Exceptions: Domain-specific error handling
"""

from orderflow.core.domain.entities import AggregateRoot, Entity, as_utc, utc_now
from orderflow.core.domain.events import DomainEvent, DomainEventPublisher
from orderflow.core.domain.exceptions import (
    BusinessRuleViolationException,
    ConcurrencyException,
    DomainException,
    EntityNotFoundException,
    ErrorKind,
    InsufficientStockException,
    InvalidOperationException,
    TransactionConflictException,
    ValidationException,
)
from orderflow.core.domain.value_objects import (
    Money,
    Quantity,
    StatusEnum,
    ValueObject,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "utc_now",
    "as_utc",
    # Value Objects
    "ValueObject",
    "Money",
    "Quantity",
    "StatusEnum",
    # Events
    "DomainEvent",
    "DomainEventPublisher",
    # Exceptions
    "ErrorKind",
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "InsufficientStockException",
    "InvalidOperationException",
    "ConcurrencyException",
    "TransactionConflictException",
]
