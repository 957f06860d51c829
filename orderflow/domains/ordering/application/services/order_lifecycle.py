"""
Order Lifecycle

Status transitions with their side effects: stock restoration on cancel and
the completion timestamp on delivery.
"""

import logging
from datetime import datetime
from typing import Any

from orderflow.core.domain import EntityNotFoundException, utc_now
from orderflow.domains.ordering.application.ports import IUnitOfWork
from orderflow.domains.ordering.domain.entities import Order
from orderflow.domains.ordering.domain.value_objects import OrderStatus

from .stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class OrderLifecycle:
    """
    Runs a transition inside a caller-owned unit of work.

    Nothing is committed here: a failing restock leaves the whole
    cancellation uncommitted, so the order keeps its previous status.
    """

    def __init__(self, ledger: StockLedger | None = None):
        self.ledger = ledger or StockLedger()

    async def transition(
        self,
        uow: IUnitOfWork,
        order_id: int,
        target: OrderStatus | Any,
        now: datetime | None = None,
        require_status: OrderStatus | None = None,
    ) -> Order | None:
        """
        Move an order to `target`.

        Args:
            uow: Active unit of work
            order_id: Order to transition
            target: Target status, either an OrderStatus or caller input
            now: Transition time
            require_status: Only transition when the order is currently in
                this status; otherwise return None without changes

        Returns:
            The transitioned order, or None when `require_status` did not match

        Raises:
            InvalidStatusException: Unrecognized target
            EntityNotFoundException: Unknown order
            InvalidTransitionException: Terminal or disallowed move
            ConcurrencyException: The order changed concurrently
        """
        target = OrderStatus.parse(target)
        now = now or utc_now()

        order = await uow.orders.get_by_id(order_id, with_items=True)
        if order is None:
            raise EntityNotFoundException("Order", order_id)

        if require_status is not None and order.status != require_status:
            logger.info(f"Order {order_id} is {order.status.value}, not {require_status.value}; skipped")
            return None

        expected_version = order.version
        previous = order.transition_to(target, now)

        if target == OrderStatus.CANCELLED:
            for item in order.items:
                await self.ledger.adjust(uow, item.product_id, item.quantity, now)

        await uow.orders.update_status(order, expected_version)
        logger.info(f"Order {order_id} transitioned {previous.value} -> {target.value}")
        return order
