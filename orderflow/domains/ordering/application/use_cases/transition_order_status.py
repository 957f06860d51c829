"""
Transition Order Status Use Case
"""

import logging
from dataclasses import dataclass
from typing import Any

from orderflow.core.domain import DomainException
from orderflow.domains.ordering.application.services import OrderLifecycle
from orderflow.domains.ordering.domain.entities import Order
from orderflow.domains.ordering.domain.value_objects import OrderStatus

from .base import OrderingUseCase, UseCaseResponse

logger = logging.getLogger(__name__)


@dataclass
class TransitionOrderStatusRequest:
    order_id: int
    status: OrderStatus | str


@dataclass
class TransitionOrderStatusResponse(UseCaseResponse):
    order: Order | None = None
    previous_status: str | None = None
    status: str | None = None


class TransitionOrderStatusUseCase(OrderingUseCase):
    """
    Use Case: Transition Order Status

    Accepts any caller-provided status value; unknown values fail with
    InvalidState, as do transitions out of Delivered or Cancelled.
    Authorization (ownership, admin role) is the caller's job.
    """

    def __init__(self, *args, lifecycle: OrderLifecycle | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.lifecycle = lifecycle or OrderLifecycle()

    async def execute(self, request: TransitionOrderStatusRequest) -> TransitionOrderStatusResponse:
        return await self._transition(request.order_id, request.status)

    async def _transition(self, order_id: int, status: Any) -> TransitionOrderStatusResponse:
        response = TransitionOrderStatusResponse()
        try:
            async with self.uow_factory() as uow:
                order = await self.lifecycle.transition(uow, order_id, status, self.clock())
                await uow.commit()
        except DomainException as e:
            logger.info(f"Transition of order {order_id} to {status} rejected: {e.message}")
            return response.fail_with(e)
        except Exception as e:
            logger.error(f"Error transitioning order {order_id}: {e}", exc_info=True)
            raise

        await self._invalidate_reports()
        await self._notify_status(order.user_id, order.id, order.status.value)

        status_event = next(iter(order.get_domain_events()), None)
        order.clear_domain_events()

        response.success = True
        response.order = order
        response.status = order.status.value
        response.previous_status = status_event.previous_status if status_event else None
        return response


@dataclass
class CancelOrderRequest:
    order_id: int


class CancelOrderUseCase(TransitionOrderStatusUseCase):
    """
    Use Case: Cancel Order

    Transition to Cancelled; every item's quantity goes back to stock in the
    same unit of work.
    """

    async def execute(self, request: CancelOrderRequest) -> TransitionOrderStatusResponse:
        return await self._transition(request.order_id, OrderStatus.CANCELLED)
