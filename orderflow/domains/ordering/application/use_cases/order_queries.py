"""
Order Query Use Cases

Read-only access to orders: by id, by user, by status, latest, paged.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from orderflow.core.domain import DomainException, EntityNotFoundException
from orderflow.domains.ordering.application.ports import IUnitOfWork
from orderflow.domains.ordering.domain.entities import Order
from orderflow.domains.ordering.domain.value_objects import OrderStatus

from .base import UseCaseResponse

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass
class GetOrderResponse(UseCaseResponse):
    order: Order | None = None


@dataclass
class ListOrdersRequest:
    """
    Orders are returned newest first, one page at a time. Filters are
    exclusive: user_id wins over status.
    """

    user_id: int | None = None
    status: OrderStatus | str | None = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class ListOrdersResponse(UseCaseResponse):
    orders: list[Order] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total_count + self.page_size - 1) // self.page_size


class GetOrderUseCase:
    """Use Case: Get Order (optionally without its items)."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]):
        self.uow_factory = uow_factory

    async def execute(self, order_id: int, with_items: bool = True) -> GetOrderResponse:
        response = GetOrderResponse()
        try:
            async with self.uow_factory() as uow:
                order = await uow.orders.get_by_id(order_id, with_items=with_items)
            if order is None:
                raise EntityNotFoundException("Order", order_id)
        except DomainException as e:
            return response.fail_with(e)

        response.success = True
        response.order = order
        return response


class ListOrdersUseCase:
    """Use Case: List Orders"""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]):
        self.uow_factory = uow_factory

    async def execute(self, request: ListOrdersRequest) -> ListOrdersResponse:
        page = max(1, request.page)
        page_size = min(max(1, request.page_size), MAX_PAGE_SIZE)
        response = ListOrdersResponse(page=page, page_size=page_size)
        offset = (page - 1) * page_size

        try:
            status = OrderStatus.parse(request.status) if request.status is not None else None
            async with self.uow_factory() as uow:
                if request.user_id is not None:
                    orders = await uow.orders.find_by_user(request.user_id, offset=offset, limit=page_size)
                    total = await uow.orders.count(user_id=request.user_id)
                elif status is not None:
                    orders = await uow.orders.find_by_status(status, offset=offset, limit=page_size)
                    total = await uow.orders.count(status=status)
                else:
                    orders = await uow.orders.find_page(offset, page_size)
                    total = await uow.orders.count()
        except DomainException as e:
            return response.fail_with(e)

        response.success = True
        response.orders = orders
        response.total_count = total
        return response

    async def recent(self, limit: int = 10) -> list[Order]:
        """Latest orders, at most MAX_PAGE_SIZE."""
        limit = min(max(1, limit), MAX_PAGE_SIZE)
        async with self.uow_factory() as uow:
            return await uow.orders.find_recent(limit)

