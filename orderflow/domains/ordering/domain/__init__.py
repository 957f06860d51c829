"""
Ordering Domain Layer

Entities, value objects, events and exceptions for products, orders and
their line items.
"""

from .entities import Order, OrderItem, Product
from .events import LowStockDetected, OrderStatusChanged
from .exceptions import (
    EmptyOrderException,
    InvalidStatusException,
    InvalidTransitionException,
    ProductInactiveException,
    ProductInUseException,
)
from .value_objects import OrderStatus

__all__ = [
    "Order",
    "OrderItem",
    "Product",
    "OrderStatus",
    "LowStockDetected",
    "OrderStatusChanged",
    "EmptyOrderException",
    "InvalidStatusException",
    "InvalidTransitionException",
    "ProductInactiveException",
    "ProductInUseException",
]
