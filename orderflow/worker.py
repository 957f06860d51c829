"""
Worker entry point.

Runs the expiry sweep until SIGINT or SIGTERM.
"""

import asyncio
import logging
import signal
import sys

from pydantic import ValidationError

from orderflow.config.settings import Settings, get_settings
from orderflow.core.background_services import BackgroundServiceManager
from orderflow.core.cache import close_async_redis_client, create_report_cache
from orderflow.core.container import OrderingContainer
from orderflow.core.shared.logger import configure_logging
from orderflow.database import close_db_connections, get_session_factory, init_db
from orderflow.domains.ordering.infrastructure import EventNotificationService, register_logging_handlers

logger = logging.getLogger(__name__)


async def run_worker(settings: Settings) -> None:
    """Start the sweep, wait for a shutdown signal, then clean up."""
    if settings.is_development:
        await init_db()

    report_cache = await create_report_cache(settings)
    notifier = EventNotificationService()
    register_logging_handlers()

    container = OrderingContainer(
        get_session_factory(),
        settings=settings,
        report_cache=report_cache,
        notifier=notifier,
    )
    manager = BackgroundServiceManager(
        container.expiry_sweep_service(),
        interval_seconds=settings.SWEEP_INTERVAL_SECONDS,
        enabled=settings.SWEEP_ENABLED,
    )

    shutdown = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown.set)

    logger.info(f"{settings.PROJECT_NAME} worker {settings.VERSION} starting ({settings.ENVIRONMENT})")
    await manager.start()
    try:
        await shutdown.wait()
    finally:
        await manager.stop()
        await notifier.flush()
        await close_async_redis_client()
        await close_db_connections()
        logger.info("Worker stopped")


def main() -> int:
    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, sql_echo=settings.DB_ECHO)
    asyncio.run(run_worker(settings))
    return 0


if __name__ == "__main__":
    sys.exit(main())
