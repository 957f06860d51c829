"""
Ordering Container.

Single Responsibility: wire repositories, services and use cases around one
session factory.
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orderflow.config.settings import Settings, get_settings
from orderflow.core.cache.report_cache import ReportCache
from orderflow.core.domain import utc_now
from orderflow.domains.ordering.application.ports import INotificationService
from orderflow.domains.ordering.application.services import ExpirySweepService, OrderLifecycle, StockLedger
from orderflow.domains.ordering.application.use_cases import (
    AdjustStockUseCase,
    CancelOrderUseCase,
    CreateOrderUseCase,
    CreateProductUseCase,
    DeleteProductUseCase,
    GetOrderStatisticsUseCase,
    GetOrderUseCase,
    ListOrdersUseCase,
    ProductQueriesUseCase,
    SetProductActiveUseCase,
    TransitionOrderStatusUseCase,
    UpdateProductUseCase,
)
from orderflow.domains.ordering.infrastructure import EventNotificationService, SQLAlchemyUnitOfWork

logger = logging.getLogger(__name__)


class OrderingContainer:
    """
    Example:
        ```python
        container = OrderingContainer(get_session_factory(), report_cache=await create_report_cache())
        response = await container.create_order_use_case().execute(request)
        ```
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings | None = None,
        report_cache: ReportCache | None = None,
        notifier: INotificationService | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session_factory = session_factory
        self.settings = settings or get_settings()
        self.report_cache = report_cache or ReportCache(ttl_seconds=self.settings.REPORT_CACHE_TTL_SECONDS)
        self.notifier = notifier or EventNotificationService()
        self.clock = clock

        self.ledger = StockLedger()
        self.lifecycle = OrderLifecycle(self.ledger)

    def uow_factory(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(self.session_factory)

    def _mutation_deps(self) -> dict:
        return {
            "notifier": self.notifier,
            "report_cache": self.report_cache,
            "settings": self.settings,
            "clock": self.clock,
        }

    # ==================== ORDERS ====================

    def create_order_use_case(self) -> CreateOrderUseCase:
        return CreateOrderUseCase(self.uow_factory, ledger=self.ledger, **self._mutation_deps())

    def transition_order_status_use_case(self) -> TransitionOrderStatusUseCase:
        return TransitionOrderStatusUseCase(self.uow_factory, lifecycle=self.lifecycle, **self._mutation_deps())

    def cancel_order_use_case(self) -> CancelOrderUseCase:
        return CancelOrderUseCase(self.uow_factory, lifecycle=self.lifecycle, **self._mutation_deps())

    def get_order_use_case(self) -> GetOrderUseCase:
        return GetOrderUseCase(self.uow_factory)

    def list_orders_use_case(self) -> ListOrdersUseCase:
        return ListOrdersUseCase(self.uow_factory)

    def order_statistics_use_case(self) -> GetOrderStatisticsUseCase:
        return GetOrderStatisticsUseCase(self.uow_factory, report_cache=self.report_cache)

    # ==================== PRODUCTS ====================

    def adjust_stock_use_case(self) -> AdjustStockUseCase:
        return AdjustStockUseCase(self.uow_factory, ledger=self.ledger, **self._mutation_deps())

    def create_product_use_case(self) -> CreateProductUseCase:
        return CreateProductUseCase(self.uow_factory, **self._mutation_deps())

    def update_product_use_case(self) -> UpdateProductUseCase:
        return UpdateProductUseCase(self.uow_factory, **self._mutation_deps())

    def set_product_active_use_case(self) -> SetProductActiveUseCase:
        return SetProductActiveUseCase(self.uow_factory, **self._mutation_deps())

    def delete_product_use_case(self) -> DeleteProductUseCase:
        return DeleteProductUseCase(self.uow_factory, **self._mutation_deps())

    def product_queries_use_case(self) -> ProductQueriesUseCase:
        return ProductQueriesUseCase(self.uow_factory, settings=self.settings)

    # ==================== BACKGROUND ====================

    def expiry_sweep_service(self) -> ExpirySweepService:
        return ExpirySweepService(
            self.uow_factory,
            lifecycle=self.lifecycle,
            notifier=self.notifier,
            report_cache=self.report_cache,
            settings=self.settings,
            clock=self.clock,
        )
