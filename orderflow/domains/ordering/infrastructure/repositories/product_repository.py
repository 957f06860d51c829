"""
SQLAlchemy Product Repository

Maps ProductModel rows to Product entities. Stock is written only through
`adjust_stock`, a single conditional UPDATE evaluated by the database.
"""

import logging
from datetime import datetime

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.domain import Money, Quantity, as_utc, utc_now
from orderflow.domains.ordering.domain.entities import Product
from orderflow.models.db import OrderItemModel, ProductModel

logger = logging.getLogger(__name__)


class SQLAlchemyProductRepository:
    """
    Product repository over an AsyncSession owned by a unit of work.

    Never commits; the unit of work decides.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, product_id: int) -> Product | None:
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def add(self, product: Product) -> Product:
        model = ProductModel(
            name=product.name,
            description=product.description,
            price=product.price.amount,
            stock_quantity=product.stock_quantity,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
        self.session.add(model)
        await self.session.flush()
        product.id = model.id
        logger.debug(f"Product {model.id} added")
        return product

    async def save(self, product: Product) -> Product:
        """Persist everything but stock."""
        await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product.id)
            .values(
                name=product.name,
                description=product.description,
                price=product.price.amount,
                is_active=product.is_active,
                updated_at=product.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        return product

    async def delete(self, product_id: int) -> bool:
        result = await self.session.execute(
            delete(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def adjust_stock(self, product_id: int, delta: int, now: datetime) -> int | None:
        """
        Apply `stock += delta` only when the result stays non-negative.

        The check and the write are one statement, so concurrent adjustments
        of the same row are serialized by the database.

        Returns:
            New stock level, or None if the product is missing or the
            adjustment would go below zero
        """
        result = await self.session.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock_quantity + delta >= 0,
            )
            .values(
                stock_quantity=ProductModel.stock_quantity + delta,
                updated_at=now,
            )
            .returning(ProductModel.stock_quantity)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()

    async def is_referenced(self, product_id: int) -> bool:
        result = await self.session.execute(
            select(exists().where(OrderItemModel.product_id == product_id))
        )
        return bool(result.scalar())

    async def find_low_stock(self, threshold: int) -> list[Product]:
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.is_active.is_(True), ProductModel.stock_quantity <= threshold)
            .order_by(ProductModel.stock_quantity, ProductModel.id)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def find_in_stock(self, limit: int = 100, offset: int = 0) -> list[Product]:
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.is_active.is_(True), ProductModel.stock_quantity > 0)
            .order_by(ProductModel.name, ProductModel.id)
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def count_active(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(ProductModel).where(ProductModel.is_active.is_(True))
        )
        return result.scalar_one()

    def _to_entity(self, model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            description=model.description,
            price=Money.of(model.price),
            stock=Quantity(model.stock_quantity),
            is_active=bool(model.is_active),
            created_at=as_utc(model.created_at) or utc_now(),
            updated_at=as_utc(model.updated_at) or utc_now(),
        )
