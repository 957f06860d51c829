"""
Order Status Value Object

Closed set of order lifecycle states with the transition table.
"""

from typing import Any

from orderflow.core.domain import StatusEnum

from ..exceptions import InvalidStatusException


class OrderStatus(StatusEnum):
    """
    Order lifecycle states.

    Valid transitions (forward only, steps may be skipped):
    - PENDING -> PROCESSING, SHIPPED, DELIVERED, CANCELLED
    - PROCESSING -> SHIPPED, DELIVERED, CANCELLED
    - SHIPPED -> DELIVERED, CANCELLED
    - DELIVERED, CANCELLED -> (terminal states)
    """

    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value: Any) -> "OrderStatus":
        """
        Parse a status from caller input.

        Raises:
            InvalidStatusException: If the value is not a recognized status
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidStatusException(value, cls.values())
        try:
            return cls.from_string(value)
        except ValueError:
            raise InvalidStatusException(value, cls.values()) from None

    def can_transition_to(self, new_status: "OrderStatus") -> bool:
        """Check if transition to new status is valid."""
        return new_status in _TRANSITIONS[self]

    def get_valid_transitions(self) -> list["OrderStatus"]:
        return list(_TRANSITIONS[self])

    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) state."""
        return not _TRANSITIONS[self]

    def can_be_cancelled(self) -> bool:
        return OrderStatus.CANCELLED in _TRANSITIONS[self]


_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    ),
    OrderStatus.PROCESSING: (OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}
