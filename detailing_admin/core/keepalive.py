"""Periodic admin session refresh.

While an admin view is active the session is refreshed once right away and
then on a fixed interval. A refresh that reports the session as gone fires the
``on_expired`` callback (normally a redirect to the login page) and ends the
loop. A refresh that fails in transport is logged and retried on the next tick.
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from detailing_admin.core.config import settings
from detailing_admin.core.metrics import session_refreshes

logger = logging.getLogger(__name__)

RefreshFn = Callable[[], Awaitable[bool]]
ExpiredFn = Callable[[], Any]
SleepFn = Callable[[float], Awaitable[Any]]


class SessionKeepAlive:
    def __init__(
        self,
        refresh: RefreshFn,
        on_expired: ExpiredFn,
        interval: Optional[float] = None,
        sleep: SleepFn = asyncio.sleep,
    ):
        self._refresh = refresh
        self._on_expired = on_expired
        self.interval = settings.SESSION_REFRESH_INTERVAL if interval is None else interval
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> "SessionKeepAlive":
        if self._active:
            return self
        self._active = True
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug(f"Session keep-alive started, interval {self.interval}s")
        return self

    def stop(self) -> None:
        if not self._active and self._task is None:
            return
        self._active = False
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        logger.debug("Session keep-alive stopped")

    async def wait(self) -> None:
        """Wait for the loop to finish after an expiry or a stop."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "SessionKeepAlive":
        return self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.stop()

    async def _run(self) -> None:
        while self._active:
            if not await self._tick():
                return
            await self._sleep(self.interval)

    async def _tick(self) -> bool:
        try:
            alive = await self._refresh()
        except Exception as e:
            session_refreshes.labels(outcome="error").inc()
            logger.error(f"Failed to refresh session: {e}")
            return self._active

        # stopped while the refresh was in flight
        if not self._active:
            return False

        if alive:
            session_refreshes.labels(outcome="ok").inc()
            return True

        session_refreshes.labels(outcome="expired").inc()
        logger.info("Session expired, redirecting to login...")
        self._active = False
        try:
            result = self._on_expired()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Session expiry handler failed: {e}")
        return False
