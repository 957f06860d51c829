"""
Catalog models
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, Numeric, String, Text

from .base import Base, TimestampMixin


class ProductModel(Base, TimestampMixin):
    """Sellable products and their on-hand stock"""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    price = Column(Numeric(18, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        Index("idx_products_active_stock", is_active, stock_quantity),
        Index("idx_products_name", name),
    )

    def __repr__(self):
        return f"<ProductModel(id={self.id}, name='{self.name}', stock={self.stock_quantity})>"
