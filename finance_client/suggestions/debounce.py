# finance_client/suggestions/debounce.py
from __future__ import annotations

import asyncio
from typing import Callable, Optional


class Debouncer:
    """Runs a callback once input has been quiet for ``delay`` seconds.

    Re-arming cancels the pending timer, so only the latest call fires.
    Must be used from a running event loop.
    """

    def __init__(self, delay: float = 0.5) -> None:
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def call(self, callback: Callable[[], None]) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, callback)

    def _fire(self, callback: Callable[[], None]) -> None:
        self._handle = None
        callback()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
