"""
Asyncio Platform - runs the engine on a real event loop.

Timers map onto ``loop.call_later``; the host feeds input through
``emit`` from its own event sources (a GUI toolkit bridge, a websocket
relay of browser events, ...). All callbacks run on the loop thread.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Optional

from a11y.platform.platform_adapter import ListenerRegistry, RESIZE


class AsyncioPlatform(ListenerRegistry):
    """PlatformAdapter backed by an asyncio event loop."""

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        route: str = "/",
        device_pixel_ratio: float = 1.0,
    ):
        super().__init__()
        self._loop = loop
        self._route = route
        self._pixel_ratio = device_pixel_ratio

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        # Epoch seconds, comparable with rejection times saved by earlier runs.
        return time.time()

    def schedule_after(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay, 0.0), callback)

    def current_route(self) -> str:
        return self._route

    def set_route(self, route: str) -> None:
        self._route = route

    def device_pixel_ratio(self) -> float:
        return self._pixel_ratio

    def emit(self, event_type: str, event: Any = None) -> None:
        """Deliver a host event on the loop thread."""
        if event_type == RESIZE and hasattr(event, "device_pixel_ratio"):
            self._pixel_ratio = event.device_pixel_ratio
        self.loop.call_soon_threadsafe(self.dispatch, event_type, event)
