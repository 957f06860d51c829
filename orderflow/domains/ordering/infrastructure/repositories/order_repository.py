"""
SQLAlchemy Order Repository

Maps OrderModel/OrderItemModel rows to the Order aggregate and serves the
read-side aggregates (status counts, revenue).
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from orderflow.core.domain import ConcurrencyException, Money, as_utc, utc_now
from orderflow.core.domain.value_objects import CENT
from orderflow.domains.ordering.domain.entities import Order, OrderItem
from orderflow.domains.ordering.domain.value_objects import OrderStatus
from orderflow.models.db import OrderItemModel, OrderModel

logger = logging.getLogger(__name__)


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT)


class SQLAlchemyOrderRepository:
    """
    Order repository over an AsyncSession owned by a unit of work.

    Never commits; the unit of work decides.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, order: Order) -> Order:
        model = OrderModel(
            user_id=order.user_id,
            order_date=as_utc(order.order_date),
            status=order.status.value,
            shipping_address=order.shipping_address,
            total_amount=order.total_amount.amount,
            completed_at=as_utc(order.completed_at),
            version=order.version,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemModel(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price.amount,
                    product_name=item.product_name,
                )
                for item in order.items
            ],
        )
        self.session.add(model)
        await self.session.flush()

        order.id = model.id
        for item, item_model in zip(order.items, model.items):
            item.id = item_model.id
            item.order_id = model.id
        logger.debug(f"Order {model.id} added with {len(order.items)} items")
        return order

    async def get_by_id(self, order_id: int, with_items: bool = True) -> Order | None:
        stmt = select(OrderModel).where(OrderModel.id == order_id)
        if with_items:
            stmt = stmt.options(selectinload(OrderModel.items))
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        model = result.scalar_one_or_none()
        return self._to_entity(model, with_items) if model else None

    async def update_status(self, order: Order, expected_version: int) -> None:
        """
        Write status, completion time and the next version.

        Raises:
            ConcurrencyException: If another writer changed the order since it
                was read
        """
        new_version = expected_version + 1
        result = await self.session.execute(
            update(OrderModel)
            .where(OrderModel.id == order.id, OrderModel.version == expected_version)
            .values(
                status=order.status.value,
                completed_at=as_utc(order.completed_at),
                updated_at=order.updated_at,
                version=new_version,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            current = await self.session.execute(select(OrderModel.version).where(OrderModel.id == order.id))
            raise ConcurrencyException("Order", order.id, expected_version, current.scalar_one_or_none())
        order.version = new_version

    async def find_by_user(self, user_id: int, offset: int = 0, limit: int | None = None) -> list[Order]:
        return await self._find(OrderModel.user_id == user_id, offset=offset, limit=limit)

    async def find_by_status(self, status: OrderStatus, offset: int = 0, limit: int | None = None) -> list[Order]:
        return await self._find(OrderModel.status == status.value, offset=offset, limit=limit)

    async def find_recent(self, limit: int) -> list[Order]:
        return await self._find(limit=limit)

    async def find_page(self, offset: int, limit: int) -> list[Order]:
        return await self._find(offset=offset, limit=limit)

    async def count(self, user_id: int | None = None, status: OrderStatus | None = None) -> int:
        stmt = select(func.count()).select_from(OrderModel)
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(OrderModel.status == status.value)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def find_stale_pending_ids(self, cutoff: datetime) -> list[int]:
        result = await self.session.execute(
            select(OrderModel.id)
            .where(
                OrderModel.status == OrderStatus.PENDING.value,
                OrderModel.order_date < as_utc(cutoff),
            )
            .order_by(OrderModel.order_date, OrderModel.id)
        )
        return list(result.scalars().all())

    async def count_by_status(self) -> dict[OrderStatus, int]:
        result = await self.session.execute(
            select(OrderModel.status, func.count()).group_by(OrderModel.status)
        )
        return {OrderStatus(status): count for status, count in result.all()}

    async def total_revenue(self, start: datetime | None = None, end: datetime | None = None) -> Decimal:
        stmt = select(func.sum(OrderModel.total_amount)).where(
            OrderModel.status == OrderStatus.DELIVERED.value
        )
        if start is not None:
            stmt = stmt.where(OrderModel.order_date >= as_utc(start))
        if end is not None:
            stmt = stmt.where(OrderModel.order_date <= as_utc(end))
        result = await self.session.execute(stmt)
        return _to_decimal(result.scalar())

    async def summary_between(self, start: datetime, end: datetime) -> tuple[int, Decimal]:
        result = await self.session.execute(
            select(func.count(OrderModel.id), func.sum(OrderModel.total_amount)).where(
                OrderModel.order_date >= as_utc(start),
                OrderModel.order_date < as_utc(end),
            )
        )
        count, total = result.one()
        return count, _to_decimal(total)

    async def _find(self, *criteria, offset: int = 0, limit: int | None = None) -> list[Order]:
        stmt = (
            select(OrderModel)
            .where(*criteria)
            .options(selectinload(OrderModel.items))
            .order_by(OrderModel.order_date.desc(), OrderModel.id.desc())
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    def _to_entity(self, model: OrderModel, with_items: bool = True) -> Order:
        items = []
        if with_items:
            items = [
                OrderItem(
                    id=item.id,
                    order_id=item.order_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=Money.of(item.unit_price),
                    product_name=item.product_name,
                )
                for item in model.items
            ]

        return Order(
            id=model.id,
            user_id=model.user_id,
            order_date=as_utc(model.order_date),
            status=OrderStatus(model.status),
            shipping_address=model.shipping_address,
            items=items,
            total_amount=Money.of(model.total_amount),
            completed_at=as_utc(model.completed_at),
            version=model.version,
            created_at=as_utc(model.created_at) or utc_now(),
            updated_at=as_utc(model.updated_at) or utc_now(),
        )
