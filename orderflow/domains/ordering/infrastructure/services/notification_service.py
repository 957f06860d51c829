"""
Event Notification Service

Turns notification calls into domain events delivered on background tasks.
Callers never wait on, or fail because of, delivery.
"""

import asyncio
import logging
from typing import Any

from orderflow.core.domain.events import DomainEvent, DomainEventPublisher
from orderflow.core.shared.logger import get_service_logger
from orderflow.domains.ordering.domain.events import LowStockDetected, OrderStatusChanged

logger = logging.getLogger(__name__)


class EventNotificationService:
    """
    INotificationService implementation backed by DomainEventPublisher.

    Example:
        ```python
        notifier = EventNotificationService()
        await notifier.notify_low_stock(3, "Widget", 2)
        await notifier.flush()
        ```
    """

    def __init__(self, publisher: type[DomainEventPublisher] = DomainEventPublisher):
        self._publisher = publisher
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def notify_low_stock(self, product_id: int, name: str, current_stock: int) -> None:
        self._dispatch(LowStockDetected(product_id=product_id, product_name=name, current_stock=current_stock))

    async def notify_order_status_changed(self, user_id: int, order_id: int, status: str) -> None:
        self._dispatch(OrderStatusChanged(order_id=order_id, user_id=user_id, status=status))

    def _dispatch(self, event: DomainEvent) -> None:
        task = asyncio.create_task(self._deliver(event), name=f"notify_{event.event_type}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, event: DomainEvent) -> None:
        try:
            delivered = await self._publisher.publish(event)
            logger.debug(f"{event.event_type} delivered to {delivered} handler(s)")
        except Exception as e:
            logger.error(f"Notification delivery failed for {event.event_type}: {e}")

    async def flush(self) -> None:
        """Wait for every notification dispatched so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def register_logging_handlers(publisher: type[DomainEventPublisher] = DomainEventPublisher) -> None:
    """Subscribe handlers that record notifications in the service log."""
    notification_logger = get_service_logger("notifications")

    async def log_low_stock(event: LowStockDetected) -> None:
        notification_logger.warning(
            f"Low stock: {event.product_name} (ID: {event.product_id}) has {event.current_stock} units",
            product_id=event.product_id,
            current_stock=event.current_stock,
        )

    async def log_status_change(event: OrderStatusChanged) -> None:
        notification_logger.info(
            f"Order {event.order_id} is now {event.status}",
            order_id=event.order_id,
            user_id=event.user_id,
            status=event.status,
        )

    publisher.subscribe(LowStockDetected, log_low_stock)
    publisher.subscribe(OrderStatusChanged, log_status_change)
