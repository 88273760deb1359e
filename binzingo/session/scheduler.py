"""
Binzingo Cardy - Turn Scheduling

Runs delayed bot turns and the one-second turn clock on an asyncio event
loop in a daemon thread, so synchronous callers can schedule work without
owning a loop themselves.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Callable

logger = logging.getLogger(__name__)


class TurnScheduler:
    """Keyed scheduler for delayed callbacks and repeating ticks.

    Scheduling a key that is already pending cancels the earlier task.
    Callbacks run on the background loop thread; callers must make the
    work they schedule thread-safe.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Future] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        """Start the background event loop if not running."""
        with self._lock:
            if self._thread is None or not self._thread.is_alive():
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._run_loop, daemon=True, name="binzingo-turns"
                )
                self._thread.start()
            return self._loop

    def _run_loop(self) -> None:
        """Run the asyncio event loop in the background thread."""
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        """Run `callback` once after `delay` seconds.

        Args:
            key: Task name; replaces any pending task with the same key.
            delay: Seconds to wait.
            callback: Work to run on the loop thread.
        """
        self._submit(key, self._delayed(key, delay, callback))

    def start_clock(
        self, key: str, interval: float, on_tick: Callable[[], bool]
    ) -> None:
        """Call `on_tick` every `interval` seconds until it returns False.

        Args:
            key: Task name; replaces any running clock with the same key.
            interval: Seconds between ticks.
            on_tick: Tick handler; returning False stops the clock.
        """
        self._submit(key, self._clock(key, interval, on_tick))

    def cancel(self, key: str) -> None:
        """Cancel a pending task, if any."""
        with self._lock:
            future = self._tasks.pop(key, None)
        if future is not None:
            future.cancel()

    def cancel_all(self) -> None:
        with self._lock:
            futures = list(self._tasks.values())
            self._tasks.clear()
        for future in futures:
            future.cancel()

    def is_pending(self, key: str) -> bool:
        with self._lock:
            future = self._tasks.get(key)
        return future is not None and not future.done()

    @property
    def pending_keys(self) -> list[str]:
        """Keys of tasks that have not finished yet."""
        with self._lock:
            return [key for key, future in self._tasks.items() if not future.done()]

    def shutdown(self) -> None:
        """Cancel everything, stop the background loop and clean up."""
        self.cancel_all()
        if self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._loop.stop)
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5)
        self._loop = None
        self._thread = None

    # -- Internals -------------------------------------------------------

    def _submit(self, key: str, coro) -> None:
        self.cancel(key)
        loop = self._ensure_loop()
        future = asyncio.run_coroutine_threadsafe(coro, loop)
        with self._lock:
            self._tasks[key] = future
        future.add_done_callback(lambda f, k=key: self._forget(k, f))

    def _forget(self, key: str, future: Future) -> None:
        with self._lock:
            if self._tasks.get(key) is future:
                del self._tasks[key]

    async def _delayed(
        self, key: str, delay: float, callback: Callable[[], None]
    ) -> None:
        await asyncio.sleep(delay)
        try:
            callback()
        except Exception:
            logger.exception("Scheduled task %s failed", key)

    async def _clock(
        self, key: str, interval: float, on_tick: Callable[[], bool]
    ) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                keep_going = on_tick()
            except Exception:
                logger.exception("Clock %s tick failed", key)
                keep_going = True
            if not keep_going:
                logger.debug("Clock %s stopped", key)
                return
