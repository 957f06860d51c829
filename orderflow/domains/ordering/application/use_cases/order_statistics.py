"""
Order Statistics Use Case

Counts per status and Delivered revenue, recomputed from the orders table.
Results may be served from the report cache, which is bounded by its TTL
and cleared after every mutation.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable

from orderflow.core.cache.report_cache import ReportCache
from orderflow.core.domain import DomainException, ValidationException, as_utc
from orderflow.domains.ordering.application.ports import IUnitOfWork
from orderflow.domains.ordering.domain.value_objects import OrderStatus

from .base import UseCaseResponse

logger = logging.getLogger(__name__)


@dataclass
class OrderStatisticsRequest:
    """Inclusive, optional order-date range for the revenue figure."""

    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass
class OrderStatisticsResponse(UseCaseResponse):
    status_counts: dict[str, int] = field(default_factory=dict)
    total_orders: int = 0
    total_revenue: Decimal = Decimal("0.00")


class GetOrderStatisticsUseCase:
    """
    Use Case: Order Statistics

    Example:
        ```python
        stats = GetOrderStatisticsUseCase(uow_factory, report_cache=cache)
        revenue = await stats.total_revenue(start, end)
        ```
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork], report_cache: ReportCache | None = None):
        self.uow_factory = uow_factory
        self.report_cache = report_cache

    async def execute(self, request: OrderStatisticsRequest | None = None) -> OrderStatisticsResponse:
        request = request or OrderStatisticsRequest()
        response = OrderStatisticsResponse()
        try:
            counts = await self.status_counts()
            revenue = await self.total_revenue(request.start_date, request.end_date)
        except DomainException as e:
            return response.fail_with(e)

        response.success = True
        response.status_counts = counts
        response.total_orders = sum(counts.values())
        response.total_revenue = revenue
        return response

    async def status_counts(self) -> dict[str, int]:
        """Count per status; statuses without orders report 0."""
        return await self._cached("status_counts", self._load_status_counts)

    async def total_revenue(self, start: datetime | None = None, end: datetime | None = None) -> Decimal:
        """
        Sum of Delivered order totals whose order date is within [start, end].

        Either bound may be omitted.

        Raises:
            ValidationException: If start is after end
        """
        start, end = as_utc(start), as_utc(end)
        if start is not None and end is not None and start > end:
            raise ValidationException("start_date must not be after end_date", field="start_date")

        key = f"revenue:{start.isoformat() if start else '-'}:{end.isoformat() if end else '-'}"

        async def load() -> str:
            async with self.uow_factory() as uow:
                return str(await uow.orders.total_revenue(start, end))

        return Decimal(await self._cached(key, load))

    async def _load_status_counts(self) -> dict[str, int]:
        async with self.uow_factory() as uow:
            counts = await uow.orders.count_by_status()
        return {status.value: counts.get(status, 0) for status in OrderStatus}

    async def _cached(self, key: str, loader):
        if self.report_cache is None:
            return await loader()
        return await self.report_cache.get_or_load(key, loader)
