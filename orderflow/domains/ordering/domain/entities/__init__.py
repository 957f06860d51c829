"""
Ordering Entities
"""

from .order import Order, OrderItem
from .product import Product

__all__ = ["Order", "OrderItem", "Product"]
