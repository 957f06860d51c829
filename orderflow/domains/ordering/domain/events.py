"""
Ordering Domain Events
"""

from dataclasses import dataclass

from orderflow.core.domain.events import DomainEvent


@dataclass(frozen=True)
class LowStockDetected(DomainEvent):
    """An active product is at or below the low-stock threshold."""

    product_id: int = 0
    product_name: str = ""
    current_stock: int = 0


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """An order entered a new status (including creation as Pending)."""

    order_id: int = 0
    user_id: int = 0
    status: str = ""
    previous_status: str | None = None
