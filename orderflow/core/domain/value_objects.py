"""
Base Value Object Classes for Domain-Driven Design

Value Objects are immutable domain primitives that have no identity.
They are compared by their values, not by reference.
"""

from abc import ABC
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Self

CENT = Decimal("0.01")


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Have no identity
    """

    def __post_init__(self):
        """Override to add validation logic."""
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object for financial calculations.

    Amounts are non-negative and kept at two decimal places.

    Example:
        ```python
        price = Money(amount=Decimal("99.99"))
        total = price.multiply(3).add(Money(Decimal("10.00")))
        ```
    """

    amount: Decimal
    currency: str = "USD"

    def _validate(self) -> None:
        """Validate money constraints."""
        if not isinstance(self.amount, Decimal):
            # Convert to Decimal if float/int
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")
        if not self.currency or len(self.currency) != 3:
            raise ValueError("Currency must be a 3-letter ISO code")
        object.__setattr__(self, "amount", self.amount.quantize(CENT, ROUND_HALF_UP))

    def add(self, other: "Money") -> Self:
        """Add two Money values (must be same currency)."""
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency} to {other.currency}")
        return type(self)(amount=self.amount + other.amount, currency=self.currency)

    def multiply(self, factor: int | Decimal) -> Self:
        """Multiply by a factor."""
        new_amount = self.amount * Decimal(str(factor))
        return type(self)(amount=new_amount, currency=self.currency)

    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.amount == Decimal("0")

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:,.2f}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(amount={self.amount}, currency='{self.currency}')"

    @classmethod
    def zero(cls, currency: str = "USD") -> Self:
        """Create a zero Money value."""
        return cls(amount=Decimal("0"), currency=currency)

    @classmethod
    def of(cls, amount: Decimal | int | float | str, currency: str = "USD") -> Self:
        """Create Money from any numeric value (floats go through str to avoid binary noise)."""
        return cls(amount=Decimal(str(amount)), currency=currency)


@dataclass(frozen=True)
class Quantity(ValueObject):
    """
    Quantity value object for stock/inventory.

    Represents a non-negative integer quantity.
    """

    value: int

    def _validate(self) -> None:
        if self.value < 0:
            raise ValueError("Quantity cannot be negative")

    def add(self, amount: int) -> "Quantity":
        """Add to quantity (negative amounts subtract)."""
        return Quantity(value=self.value + amount)

    def subtract(self, amount: int) -> "Quantity":
        """Subtract from quantity."""
        if amount > self.value:
            raise ValueError("Cannot subtract more than current quantity")
        return Quantity(value=self.value - amount)

    def is_zero(self) -> bool:
        """Check if quantity is zero."""
        return self.value == 0

    def is_available(self, required: int = 1) -> bool:
        """Check if required quantity is available."""
        return self.value >= required

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    @classmethod
    def zero(cls) -> "Quantity":
        """Create zero quantity."""
        return cls(value=0)


class StatusEnum(str, Enum):
    """
    Base class for status enums.

    Provides common functionality for all status value objects.
    """

    @classmethod
    def values(cls) -> list[str]:
        """Get all possible values."""
        return [e.value for e in cls]

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create from string value (case-insensitive)."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}")
