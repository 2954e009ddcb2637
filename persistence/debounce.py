from __future__ import annotations

import asyncio
from typing import Awaitable, Callable


class Debouncer:
    """
    Coalesces bursts of triggers into one call of ``action`` after a quiet period.

    Each trigger cancels the pending timer and starts a new one. Once a timer
    has fired its action runs to completion; later triggers only schedule the
    next one. Must be used from inside a running event loop.
    """

    def __init__(self, delay: float, action: Callable[[], Awaitable[None]]):
        self._delay = delay
        self._action = action
        self._timer: asyncio.Task[None] | None = None
        self._running: set[asyncio.Task[None]] = set()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def trigger(self) -> None:
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_run())

    def cancel(self) -> bool:
        """Drop the pending timer, if any. Returns True if one was dropped."""
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return False
        timer.cancel()
        return True

    async def flush(self) -> None:
        """Run the pending action now (if any) and wait for running ones."""
        had_pending = self.cancel()
        if self._running:
            await asyncio.gather(*self._running, return_exceptions=True)
        if had_pending:
            await self._action()

    async def _wait_then_run(self) -> None:
        await asyncio.sleep(self._delay)
        task = asyncio.current_task()
        if self._timer is task:
            self._timer = None
        if task is not None:
            self._running.add(task)
        try:
            await self._action()
        finally:
            if task is not None:
                self._running.discard(task)
