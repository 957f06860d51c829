"""
Order management models
"""

from typing import List

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, relationship

from .base import Base, TimestampMixin


class OrderModel(Base, TimestampMixin):
    """Customer orders"""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    order_date = Column(DateTime(timezone=True), nullable=False)

    # Pending, Processing, Shipped, Delivered, Cancelled
    status = Column(String(20), nullable=False, default="Pending")
    shipping_address = Column(String(500))
    total_amount = Column(Numeric(18, 2), nullable=False)
    completed_at = Column(DateTime(timezone=True))

    # Optimistic concurrency token
    version = Column(Integer, nullable=False, default=0)

    items: Mapped[List["OrderItemModel"]] = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItemModel.id",
    )

    __table_args__ = (
        Index("idx_orders_user", user_id),
        Index("idx_orders_status", status),
        Index("idx_orders_date", order_date),
        Index("idx_orders_status_date", status, order_date),
    )

    def __repr__(self):
        return f"<OrderModel(id={self.id}, status='{self.status}', total={self.total_amount})>"


class OrderItemModel(Base, TimestampMixin):
    """Order line items; price and name are captured at purchase time"""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(18, 2), nullable=False)
    product_name = Column(String(200), nullable=False)

    order: Mapped["OrderModel"] = relationship("OrderModel", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
        Index("idx_order_items_order", order_id),
        Index("idx_order_items_product", product_id),
    )

    def __repr__(self):
        return f"<OrderItemModel(product='{self.product_name}', quantity={self.quantity}, price={self.unit_price})>"
