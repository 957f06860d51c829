"""
Ordering Application Ports

Interface definitions (ports) for the ordering domain.
Uses Protocol for structural typing.
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol, Self, runtime_checkable

from orderflow.domains.ordering.domain.entities import Order, Product
from orderflow.domains.ordering.domain.value_objects import OrderStatus


@runtime_checkable
class IProductRepository(Protocol):
    """
    Interface for product repository.

    Defines the contract for product data access.
    """

    async def get_by_id(self, product_id: int) -> Product | None:
        """Get product by ID, always reflecting the stored row"""
        ...

    async def add(self, product: Product) -> Product:
        """Insert a product and assign its ID"""
        ...

    async def save(self, product: Product) -> Product:
        """Persist name, description, price and active flag"""
        ...

    async def delete(self, product_id: int) -> bool:
        """Hard-delete a product"""
        ...

    async def adjust_stock(self, product_id: int, delta: int, now: datetime) -> int | None:
        """
        Atomically apply `stock += delta` when the result stays non-negative.

        Returns the new stock, or None when no row was changed.
        """
        ...

    async def is_referenced(self, product_id: int) -> bool:
        """Whether any order item references the product"""
        ...

    async def find_low_stock(self, threshold: int) -> list[Product]:
        """Active products with stock at or below threshold, lowest first"""
        ...

    async def find_in_stock(self, limit: int = 100, offset: int = 0) -> list[Product]:
        """Active products with stock above zero"""
        ...

    async def count_active(self) -> int:
        """Number of active products"""
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """
    Interface for order repository.

    Defines the contract for order data access.
    """

    async def add(self, order: Order) -> Order:
        """Insert an order with its items and assign IDs"""
        ...

    async def get_by_id(self, order_id: int, with_items: bool = True) -> Order | None:
        """Get order by ID"""
        ...

    async def update_status(self, order: Order, expected_version: int) -> None:
        """
        Persist status, completion timestamp and version.

        Raises ConcurrencyException when the stored version moved on.
        """
        ...

    async def find_by_user(self, user_id: int, offset: int = 0, limit: int | None = None) -> list[Order]:
        """Orders of a user, newest first"""
        ...

    async def find_by_status(self, status: OrderStatus, offset: int = 0, limit: int | None = None) -> list[Order]:
        """Orders in a status, newest first"""
        ...

    async def find_recent(self, limit: int) -> list[Order]:
        """Latest orders"""
        ...

    async def find_page(self, offset: int, limit: int) -> list[Order]:
        """Orders newest first, sliced"""
        ...

    async def count(self, user_id: int | None = None, status: OrderStatus | None = None) -> int:
        """Number of orders, optionally restricted to a user and/or status"""
        ...

    async def find_stale_pending_ids(self, cutoff: datetime) -> list[int]:
        """IDs of Pending orders placed strictly before cutoff, oldest first"""
        ...

    async def count_by_status(self) -> dict[OrderStatus, int]:
        """Order count per status; statuses without orders may be missing"""
        ...

    async def total_revenue(self, start: datetime | None = None, end: datetime | None = None) -> Decimal:
        """Sum of Delivered totals with order date inside the inclusive range"""
        ...

    async def summary_between(self, start: datetime, end: datetime) -> tuple[int, Decimal]:
        """Count and summed total of orders placed in [start, end)"""
        ...


@runtime_checkable
class IUnitOfWork(Protocol):
    """
    Transactional boundary around product and order mutations.

    Nothing is persisted until `commit()`; leaving the scope without a commit,
    or through an exception, rolls everything back.
    """

    products: IProductRepository
    orders: IOrderRepository

    async def __aenter__(self) -> Self: ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def commit(self) -> None:
        """Commit every change made in this unit of work"""
        ...

    async def rollback(self) -> None:
        """Discard every change made in this unit of work"""
        ...


@runtime_checkable
class INotificationService(Protocol):
    """
    Outbound notifications.

    Fire-and-forget: implementations must not raise into the caller.
    """

    async def notify_low_stock(self, product_id: int, name: str, current_stock: int) -> None:
        """Report a product at or below the low-stock threshold"""
        ...

    async def notify_order_status_changed(self, user_id: int, order_id: int, status: str) -> None:
        """Report an order entering a status"""
        ...


__all__ = [
    "IProductRepository",
    "IOrderRepository",
    "IUnitOfWork",
    "INotificationService",
]
