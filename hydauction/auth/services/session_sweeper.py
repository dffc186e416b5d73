"""
Background expiry of sessions.

Runs inside the application's event loop for the lifetime of the app.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from hydauction.auth.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class SessionSweeper:
    """
    Periodically removes expired sessions from a SessionStore.

    A failing pass is logged and the loop carries on; request handling
    never sees sweep errors.
    """

    def __init__(
        self,
        store: SessionStore,
        interval: timedelta,
        max_age: timedelta,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize SessionSweeper.

        Args:
            store: Store to sweep
            interval: Time between passes
            max_age: Sessions older than this are removed
            clock: Returns the current time (timezone-aware UTC by default)
        """
        self._store = store
        self._interval = interval
        self._max_age = max_age
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(
            f"Session sweeper started (every {self._interval}, max age {self._max_age})"
        )

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Session sweeper stopped")

    def run_once(self, now: Optional[datetime] = None) -> int:
        """
        Run a single sweep pass.

        Returns:
            Number of sessions removed, 0 if the pass failed
        """
        try:
            return self._store.sweep(now or self._clock(), self._max_age)
        except Exception as e:
            logger.exception(f"Session sweep failed: {e}")
            return 0

    async def _run(self) -> None:
        interval = self._interval.total_seconds()
        while True:
            await asyncio.sleep(interval)
            self.run_once()
