"""
Expiry Sweep

Periodic maintenance pass:
1. Cancel Pending orders older than the staleness threshold (stock is
   restored by the lifecycle), one unit of work per order.
2. Report active products at or below the low-stock threshold.
3. Log a summary of today's orders.

A failure on one order is logged and never stops the rest of the pass.
The stop event is checked between orders and between phases.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from orderflow.config.settings import Settings, get_settings
from orderflow.core.cache.report_cache import ReportCache
from orderflow.core.domain import ConcurrencyException, utc_now
from orderflow.core.shared.logger import get_service_logger
from orderflow.domains.ordering.application.ports import INotificationService, IUnitOfWork
from orderflow.domains.ordering.domain.entities import Order
from orderflow.domains.ordering.domain.value_objects import OrderStatus

from .order_lifecycle import OrderLifecycle

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass
class DailySummary:
    """Orders placed during one UTC day."""

    day: str
    order_count: int
    revenue: Decimal
    active_products: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "order_count": self.order_count,
            "revenue": str(self.revenue),
            "active_products": self.active_products,
        }


@dataclass
class SweepReport:
    """Outcome of one sweep pass."""

    started_at: datetime
    cutoff: datetime
    cancelled: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)
    low_stock_notified: int = 0
    summary: DailySummary | None = None
    interrupted: bool = False
    phase_errors: dict[str, str] = field(default_factory=dict)

    @property
    def cancelled_count(self) -> int:
        return len(self.cancelled)

    def to_dict(self) -> dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "cutoff": self.cutoff.isoformat(),
            "cancelled": list(self.cancelled),
            "skipped": list(self.skipped),
            "failed": dict(self.failed),
            "low_stock_notified": self.low_stock_notified,
            "summary": self.summary.to_dict() if self.summary else None,
            "interrupted": self.interrupted,
            "phase_errors": dict(self.phase_errors),
        }


class ExpirySweepService:
    """
    Example:
        ```python
        sweep = ExpirySweepService(uow_factory, notifier=notifier)
        report = await sweep.run_once(stop_event)
        ```
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        lifecycle: OrderLifecycle | None = None,
        notifier: INotificationService | None = None,
        report_cache: ReportCache | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
        retry_delay: float = 0.05,
    ):
        self.uow_factory = uow_factory
        self.lifecycle = lifecycle or OrderLifecycle()
        self.notifier = notifier
        self.report_cache = report_cache
        self.settings = settings or get_settings()
        self.clock = clock
        self.retry_delay = retry_delay
        self._log = get_service_logger("expiry_sweep")

    @property
    def staleness_threshold(self) -> timedelta:
        return timedelta(minutes=self.settings.PENDING_ORDER_TTL_MINUTES)

    async def run_once(self, stop_event: asyncio.Event | None = None) -> SweepReport:
        """Run one full pass and return what it did."""
        now = self.clock()
        report = SweepReport(started_at=now, cutoff=now - self.staleness_threshold)

        await self._guarded(report, "stale_orders", self._cancel_stale_orders(report, now, stop_event))

        if self._stopping(stop_event):
            report.interrupted = True
        else:
            notified = await self._guarded(report, "low_stock", self._report_low_stock())
            report.low_stock_notified = notified or 0

        if self._stopping(stop_event):
            report.interrupted = True
        else:
            report.summary = await self._guarded(report, "daily_summary", self._daily_summary(now))

        self._log.info(
            f"Sweep finished: {report.cancelled_count} cancelled, {len(report.failed)} failed, "
            f"{report.low_stock_notified} low-stock notifications",
            cancelled=report.cancelled_count,
            failed=len(report.failed),
            interrupted=report.interrupted,
            phase_errors=list(report.phase_errors),
        )
        return report

    async def _guarded(self, report: SweepReport, phase: str, work: Awaitable[T]) -> T | None:
        """A failing phase is recorded and the pass moves on to the next one."""
        try:
            return await work
        except Exception as e:
            report.phase_errors[phase] = str(e)
            logger.error(f"Sweep phase {phase} failed: {e}", exc_info=True)
            return None

    @staticmethod
    def _stopping(stop_event: asyncio.Event | None) -> bool:
        return stop_event is not None and stop_event.is_set()

    async def _cancel_stale_orders(
        self,
        report: SweepReport,
        now: datetime,
        stop_event: asyncio.Event | None,
    ) -> None:
        async with self.uow_factory() as uow:
            order_ids = await uow.orders.find_stale_pending_ids(report.cutoff)

        if not order_ids:
            logger.debug("No stale pending orders")
            return

        logger.info(f"Found {len(order_ids)} pending orders older than {report.cutoff.isoformat()}")
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(ConcurrencyException),
            stop=stop_after_attempt(self.settings.SWEEP_MAX_RETRIES),
            wait=wait_exponential_jitter(initial=self.retry_delay, max=2.0, jitter=self.retry_delay),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        cancelled_orders: list[Order] = []

        for order_id in order_ids:
            if self._stopping(stop_event):
                report.interrupted = True
                logger.info("Stop requested, leaving remaining stale orders for the next pass")
                break

            try:
                order = await retrying(self._cancel_one, order_id, now)
            except ConcurrencyException as e:
                report.failed[order_id] = str(e)
                logger.warning(f"Giving up on stale order {order_id} for this pass: {e}")
                continue
            except Exception as e:
                report.failed[order_id] = str(e)
                logger.warning(f"Failed to cancel stale order {order_id}: {e}", exc_info=True)
                continue

            if order is None:
                report.skipped.append(order_id)
            else:
                report.cancelled.append(order_id)
                cancelled_orders.append(order)

        if cancelled_orders:
            logger.info(f"Cancelled {len(cancelled_orders)} expired pending orders")
            if self.report_cache is not None:
                await self.report_cache.invalidate()
            for order in cancelled_orders:
                await self._notify_status(order)

    async def _cancel_one(self, order_id: int, now: datetime) -> Order | None:
        async with self.uow_factory() as uow:
            order = await self.lifecycle.transition(
                uow,
                order_id,
                OrderStatus.CANCELLED,
                now,
                require_status=OrderStatus.PENDING,
            )
            if order is not None:
                await uow.commit()
            return order

    async def _notify_status(self, order: Order) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.notify_order_status_changed(order.user_id, order.id, order.status.value)
        except Exception as e:
            logger.error(f"Status notification for order {order.id} failed: {e}")

    async def _report_low_stock(self) -> int:
        threshold = self.settings.LOW_STOCK_THRESHOLD
        async with self.uow_factory() as uow:
            products = await uow.products.find_low_stock(threshold)

        if not products:
            return 0

        logger.warning(f"{len(products)} products at or below stock threshold {threshold}")
        if self.notifier is None:
            return 0

        sent = 0
        for product in products:
            try:
                await self.notifier.notify_low_stock(product.id, product.name, product.stock_quantity)
                sent += 1
            except Exception as e:
                logger.error(f"Low-stock notification for product {product.id} failed: {e}")
        return sent

    async def _daily_summary(self, now: datetime) -> DailySummary:
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        async with self.uow_factory() as uow:
            count, revenue = await uow.orders.summary_between(day_start, day_start + timedelta(days=1))
            active_products = await uow.products.count_active()

        summary = DailySummary(
            day=day_start.date().isoformat(),
            order_count=count,
            revenue=revenue,
            active_products=active_products,
        )
        self._log.info(
            f"Daily summary {summary.day}: {count} orders, ${revenue:,.2f} revenue, "
            f"{active_products} active products",
            **summary.to_dict(),
        )
        return summary
