"""
Shared pieces of the ordering use cases.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from orderflow.config.settings import Settings, get_settings
from orderflow.core.cache.report_cache import ReportCache
from orderflow.core.domain import DomainException, utc_now
from orderflow.domains.ordering.application.ports import INotificationService, IUnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class UseCaseResponse:
    """
    Outcome of a use case.

    Expected failures arrive here as data (`error_kind` is an ErrorKind
    value); they are never raised to the caller.
    """

    success: bool = False
    error: str | None = None
    error_code: str | None = None
    error_kind: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_retryable(self) -> bool:
        return self.error_kind == "concurrency_conflict"

    def fail_with(self, exc: DomainException):
        """Fill the error fields from a domain exception and return self."""
        self.success = False
        self.error = exc.message
        self.error_code = exc.code
        self.error_kind = exc.kind.value
        self.details = dict(exc.details)
        return self


class OrderingUseCase:
    """Dependencies shared by the use cases that mutate or report."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notifier: INotificationService | None = None,
        report_cache: ReportCache | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            uow_factory: Returns a fresh unit of work per call
            notifier: Outbound notifications (optional)
            report_cache: Cache to invalidate after mutations (optional)
            settings: Limits and thresholds
            clock: Current time source
        """
        self.uow_factory = uow_factory
        self.notifier = notifier
        self.report_cache = report_cache
        self.settings = settings or get_settings()
        self.clock = clock

    async def _invalidate_reports(self) -> None:
        if self.report_cache is not None:
            await self.report_cache.invalidate()

    async def _notify_status(self, user_id: int, order_id: int, status: str) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.notify_order_status_changed(user_id, order_id, status)
        except Exception as e:
            logger.error(f"Status notification for order {order_id} failed: {e}")
