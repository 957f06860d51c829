"""
Background services management.

Runs the expiry sweep on a fixed interval until asked to stop.
"""

import asyncio
import logging
from typing import Any

from orderflow.domains.ordering.application.services import ExpirySweepService, SweepReport

logger = logging.getLogger(__name__)


class BackgroundServiceManager:
    """
    Manages background services lifecycle.

    Each sweep pass runs to completion or until the stop event is set; the
    pause between passes ends early on stop.
    """

    def __init__(self, sweep_service: ExpirySweepService, interval_seconds: float, enabled: bool = True):
        self.sweep_service = sweep_service
        self.interval_seconds = interval_seconds
        self.enabled = enabled
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[Any] | None = None
        self._passes = 0
        self._last_report: SweepReport | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start all background services."""
        if self.is_running:
            logger.warning("Background services already running")
            return
        if not self.enabled:
            logger.info("Expiry sweep disabled")
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self._sweep_loop(), name="expiry_sweep")
        logger.info(f"Expiry sweep started (every {self.interval_seconds}s)")

    async def stop(self, timeout: float = 30.0) -> None:
        """Stop all background services gracefully."""
        if self._task is None:
            return

        logger.info("Stopping background services...")
        self._stop_event.set()
        try:
            await asyncio.wait_for(self._task, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Expiry sweep did not stop in time, cancelling")
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Background services stopped")

    async def wait(self) -> None:
        """Block until the sweep loop ends."""
        if self._task is not None:
            await self._task

    async def _sweep_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._last_report = await self.sweep_service.run_once(self._stop_event)
                self._passes += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Expiry sweep pass failed: {e}", exc_info=True)

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass

    def get_status(self) -> dict[str, Any]:
        """
        Get status of background services.

        Returns:
            Dictionary with service status information.
        """
        return {
            "running": self.is_running,
            "enabled": self.enabled,
            "interval_seconds": self.interval_seconds,
            "passes": self._passes,
            "last_report": self._last_report.to_dict() if self._last_report else None,
        }
