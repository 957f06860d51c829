"""
Shared pytest fixtures for all tests.

Provides settings, a SQLite-backed database per test, a controllable clock,
the wired ordering container and product seeding helpers.
"""

import os
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from orderflow.config.settings import Settings
from orderflow.core.cache.report_cache import ReportCache
from orderflow.core.container import OrderingContainer
from orderflow.database.async_db import create_async_database_engine, create_session_factory, init_db
from orderflow.domains.ordering.application.use_cases import CreateOrderRequest, CreateProductRequest, OrderItemInput

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"


# ============================================================================
# CLOCK
# ============================================================================


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 14, 12, 0, tzinfo=UTC))


# ============================================================================
# SETTINGS
# ============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        _env_file=None,
        DB_URL=f"sqlite+aiosqlite:///{tmp_path / 'orderflow_test.db'}",
        ENVIRONMENT="test",
        REDIS_ENABLED=False,
        REPORT_CACHE_TTL_SECONDS=30,
        LOW_STOCK_THRESHOLD=10,
        PENDING_ORDER_TTL_MINUTES=30,
        SWEEP_INTERVAL_SECONDS=60,
        SWEEP_MAX_RETRIES=3,
        MAX_ITEM_QUANTITY=1000,
    )


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def async_engine(settings: Settings):
    """Async engine with the schema created."""
    engine = create_async_database_engine(settings.async_database_url, settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(async_engine):
    return create_session_factory(async_engine)


# ============================================================================
# SERVICES
# ============================================================================


@pytest.fixture
def mock_notifier() -> AsyncMock:
    """Notification collaborator double."""
    notifier = AsyncMock()
    notifier.notify_low_stock.return_value = None
    notifier.notify_order_status_changed.return_value = None
    return notifier


@pytest.fixture
def report_cache() -> ReportCache:
    return ReportCache(ttl_seconds=30)


@pytest_asyncio.fixture
async def container(session_factory, settings, report_cache, mock_notifier, clock) -> OrderingContainer:
    return OrderingContainer(
        session_factory,
        settings=settings,
        report_cache=report_cache,
        notifier=mock_notifier,
        clock=clock,
    )


# ============================================================================
# SEED HELPERS
# ============================================================================


@pytest.fixture
def make_product(container: OrderingContainer):
    """Create a product through the use case and return the entity."""

    async def _make(name: str = "Widget", price: str = "10.00", stock: int = 10, is_active: bool = True):
        response = await container.create_product_use_case().execute(
            CreateProductRequest(name=name, price=Decimal(price), stock=stock, is_active=is_active)
        )
        assert response.success, response.error
        return response.product

    return _make


@pytest.fixture
def place_order(container: OrderingContainer):
    """Place an order of (product_id, quantity) pairs and return the response."""

    async def _place(*lines: tuple[int, int], user_id: int = 1, shipping_address: str | None = "1 Main St"):
        return await container.create_order_use_case().execute(
            CreateOrderRequest(
                user_id=user_id,
                items=[OrderItemInput(product_id=pid, quantity=qty) for pid, qty in lines],
                shipping_address=shipping_address,
            )
        )

    return _place


@pytest.fixture
def stock_of(container: OrderingContainer):
    """Read the stored stock of a product."""

    async def _stock(product_id: int) -> int:
        response = await container.product_queries_use_case().get(product_id)
        assert response.success, response.error
        return response.product.stock_quantity

    return _stock
