# horde/ticker.py
"""
Asynchronous ticker that drives the host side of the server.
Subscribers are coroutine functions awaited once per tick with the real
time elapsed since the previous tick.
"""
import asyncio
import inspect
import logging
import time
from typing import Any, Callable, Coroutine, List, Optional

log = logging.getLogger(__name__)

# Callbacks receive the delta time (dt) since the last tick as a float.
TickCallback = Callable[[float], Coroutine[Any, Any, None]]


class Ticker:
    def __init__(self, interval_seconds: float = 1.0):
        self.interval_seconds = interval_seconds
        self._callbacks: List[TickCallback] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, callback: TickCallback):
        """Subscribe an async function to be called on each tick, in subscription order."""
        if not inspect.iscoroutinefunction(callback):
            log.error("Ticker subscription failed: %r is not an async function.", callback)
            return
        if callback not in self._callbacks:
            self._callbacks.append(callback)
            log.debug("Callback %r subscribed to ticker.", callback)

    def unsubscribe(self, callback: TickCallback):
        if callback in self._callbacks:
            self._callbacks.remove(callback)
            log.debug("Callback %r unsubscribed from ticker.", callback)

    def start(self) -> bool:
        if self.running:
            log.warning("Ticker task is already running.")
            return False
        if self.interval_seconds <= 0:
            log.error("Ticker interval must be positive. Ticker not started.")
            return False
        log.info("Starting ticker with interval: %.2f seconds.", self.interval_seconds)
        self._task = asyncio.create_task(self._run(), name="HordeTicker")
        return True

    async def stop(self):
        """Stops the ticker and waits for the loop to finish."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        log.info("Stopping ticker...")
        task.cancel()
        try:
            await asyncio.wait_for(task, timeout=5.0)
        except asyncio.CancelledError:
            pass
        except asyncio.TimeoutError:
            log.warning("Ticker task did not finish cancelling within timeout.")

    async def tick(self, dt: float):
        """Awaits every callback in order. A failing callback is logged and skipped."""
        for callback in list(self._callbacks):
            try:
                await callback(dt)
            except Exception:
                log.exception("Ticker: exception in callback %r.", callback)

    async def _run(self):
        last_tick_time = time.monotonic()
        while True:
            try:
                await asyncio.sleep(self.interval_seconds)
                current_time = time.monotonic()
                delta_time, last_tick_time = current_time - last_tick_time, current_time
                await self.tick(delta_time)
            except asyncio.CancelledError:
                log.info("Ticker loop cancelled.")
                break
            except Exception:
                log.exception("Ticker loop encountered unexpected error.")
                await asyncio.sleep(max(5.0, self.interval_seconds))
