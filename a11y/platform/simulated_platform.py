"""
Simulated Platform - deterministic virtual clock for tests and replays.

Timers live in a heap ordered by due time; ``advance`` moves the clock
forward and fires every timer that comes due, in order, including timers
scheduled by callbacks during the advance.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Any, Callable, List, Optional, Tuple

from a11y.platform.platform_adapter import (
    ListenerRegistry,
    PointerEvent,
    InputEvent,
    ResizeEvent,
    VisibilityEvent,
    POINTER_MOVE,
    POINTER_OVER,
    POINTER_OUT,
    CLICK,
    KEY_DOWN,
    TOUCH_START,
    RESIZE,
    VISIBILITY,
)


class SimulatedTimer:
    """Cancel token for a simulated timer."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class SimulatedPlatform(ListenerRegistry):
    """
    In-process platform with a manual clock.

    Usage:
        platform = SimulatedPlatform()
        engine = AdaptiveEngine(platform=platform, ...)
        engine.start()
        platform.hover(element)        # pointer enters element
        platform.advance(1.5)          # dwell timer fires
    """

    def __init__(self, start_time: float = 0.0, route: str = "/"):
        super().__init__()
        self._now = start_time
        self._route = route
        self._pixel_ratio = 1.0
        self._seq = itertools.count()
        self._timers: List[Tuple[float, int, SimulatedTimer]] = []

    # -------------------------------------------------------------------------
    # CLOCK & TIMERS
    # -------------------------------------------------------------------------

    def now(self) -> float:
        return self._now

    def schedule_after(self, delay: float, callback: Callable[[], None]) -> SimulatedTimer:
        timer = SimulatedTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._timers, (timer.due, next(self._seq), timer))
        return timer

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due timers in chronological order."""
        target = self._now + seconds
        while self._timers and self._timers[0][0] <= target:
            due, _, timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = max(self._now, due)
            timer.fired = True
            timer.callback()
        self._now = target

    def pending_timers(self) -> int:
        return sum(1 for _, _, t in self._timers if t.active)

    # -------------------------------------------------------------------------
    # HOST STATE
    # -------------------------------------------------------------------------

    def current_route(self) -> str:
        return self._route

    def set_route(self, route: str) -> None:
        self._route = route

    def device_pixel_ratio(self) -> float:
        return self._pixel_ratio

    # -------------------------------------------------------------------------
    # INPUT HELPERS
    # -------------------------------------------------------------------------

    def move(self, x: float = 0.0, y: float = 0.0) -> None:
        self.dispatch(POINTER_MOVE, PointerEvent(x, y))

    def hover(self, target: Any, x: float = 0.0, y: float = 0.0) -> None:
        self.dispatch(POINTER_OVER, PointerEvent(x, y, target))

    def leave(self, target: Any = None) -> None:
        self.dispatch(POINTER_OUT, PointerEvent(target=target))

    def click(self, x: float, y: float, target: Any = None) -> None:
        self.dispatch(CLICK, PointerEvent(x, y, target))

    def key(self, target: Any = None) -> None:
        self.dispatch(KEY_DOWN, InputEvent(target))

    def touch(self, target: Any = None) -> None:
        self.dispatch(TOUCH_START, InputEvent(target))

    def zoom(self, device_pixel_ratio: float) -> None:
        self._pixel_ratio = device_pixel_ratio
        self.dispatch(RESIZE, ResizeEvent(device_pixel_ratio))

    def set_hidden(self, hidden: bool) -> None:
        self.dispatch(VISIBILITY, VisibilityEvent(hidden))
