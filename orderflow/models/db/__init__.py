"""
Database models
"""

from .base import Base, TimestampMixin
from .catalog import ProductModel
from .orders import OrderItemModel, OrderModel

__all__ = [
    "Base",
    "TimestampMixin",
    "ProductModel",
    "OrderModel",
    "OrderItemModel",
]
