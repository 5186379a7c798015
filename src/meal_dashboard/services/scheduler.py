"""Periodic refresh and highlight timers."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from meal_dashboard.services.dashboard import DashboardService

logger = logging.getLogger(__name__)


@dataclass
class RefreshScheduler:
    """Runs dashboard refreshes and highlight updates on fixed intervals.

    Refresh ticks do not wait for the previous refresh to finish, so slow
    backend calls may lead to overlapping cycles; the last one to finish
    wins. The highlight timer is independent of the refresh timer.
    """

    service: DashboardService
    refresh_interval_seconds: float = 10.0
    highlight_interval_seconds: float = 60.0
    _timers: list[asyncio.Task[None]] = field(default_factory=list)
    _refreshes: set[asyncio.Task[None]] = field(default_factory=set)

    @property
    def running(self) -> bool:
        return bool(self._timers)

    async def start(self) -> None:
        """Schedule an immediate refresh, then start both timers."""
        if self.running:
            return
        self._timers = [
            asyncio.create_task(
                self._every(self.refresh_interval_seconds, self._spawn_refresh)
            ),
            asyncio.create_task(
                self._every(
                    self.highlight_interval_seconds, self._highlight, immediate=False
                )
            ),
        ]
        logger.info(
            "Dashboard scheduler started",
            extra={"refresh_interval": self.refresh_interval_seconds},
        )

    async def stop(self) -> None:
        """Cancel timers and any refresh still in flight."""
        if not self.running:
            return
        tasks = [*self._timers, *self._refreshes]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._timers = []
        self._refreshes.clear()
        logger.info("Dashboard scheduler stopped")

    async def _every(
        self,
        interval: float,
        callback: Callable[[], Awaitable[None]],
        immediate: bool = True,
    ) -> None:
        if not immediate:
            await asyncio.sleep(interval)
        while True:
            await callback()
            await asyncio.sleep(interval)

    async def _spawn_refresh(self) -> None:
        task = asyncio.create_task(self._run_refresh())
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)

    async def _run_refresh(self) -> None:
        try:
            await self.service.refresh()
        except Exception:
            logger.exception("Dashboard refresh failed")

    async def _highlight(self) -> None:
        try:
            self.service.apply_highlight()
        except Exception:
            logger.exception("Failed to update meal highlight")
