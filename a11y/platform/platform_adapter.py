"""
Platform Adapter.

Thin seam between the engine and the UI surface it observes. The engine
never touches timers or input sources directly; it schedules callbacks and
registers listeners through a ``PlatformAdapter``.

Event types:
    pointermove   PointerEvent
    pointerover   PointerEvent (target = element entered)
    pointerout    PointerEvent
    click         PointerEvent (primary button only)
    keydown       InputEvent
    touchstart    InputEvent
    resize        ResizeEvent
    visibility    VisibilityEvent
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

# =============================================================================
# EVENT TYPES
# =============================================================================

POINTER_MOVE = "pointermove"
POINTER_OVER = "pointerover"
POINTER_OUT = "pointerout"
CLICK = "click"
KEY_DOWN = "keydown"
TOUCH_START = "touchstart"
RESIZE = "resize"
VISIBILITY = "visibility"

ALL_EVENT_TYPES = (
    POINTER_MOVE,
    POINTER_OVER,
    POINTER_OUT,
    CLICK,
    KEY_DOWN,
    TOUCH_START,
    RESIZE,
    VISIBILITY,
)


@dataclass(frozen=True)
class PointerEvent:
    x: float = 0.0
    y: float = 0.0
    target: Any = None


@dataclass(frozen=True)
class InputEvent:
    target: Any = None


@dataclass(frozen=True)
class ResizeEvent:
    device_pixel_ratio: float = 1.0


@dataclass(frozen=True)
class VisibilityEvent:
    hidden: bool


Handler = Callable[[Any], None]


# =============================================================================
# PROTOCOLS
# =============================================================================

class TimerHandle(Protocol):
    """Cancel token returned by ``schedule_after``."""
    def cancel(self) -> None: ...


class PlatformAdapter(Protocol):
    """What the engine needs from its host surface."""
    def now(self) -> float: ...         # epoch seconds; rejection times are persisted
    def schedule_after(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...
    def listen(self, event_type: str, handler: Handler) -> Callable[[], None]: ...
    def current_route(self) -> str: ...
    def device_pixel_ratio(self) -> float: ...


# =============================================================================
# SHARED LISTENER BOOKKEEPING
# =============================================================================

class ListenerRegistry:
    """
    Listener table shared by the concrete platforms.

    ``listen`` returns a detach callable; detaching twice is harmless.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Handler]] = {}

    def listen(self, event_type: str, handler: Handler) -> Callable[[], None]:
        self._listeners.setdefault(event_type, []).append(handler)

        def _detach() -> None:
            handlers = self._listeners.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return _detach

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(h) for h in self._listeners.values())

    def dispatch(self, event_type: str, event: Any = None) -> None:
        """Deliver ``event`` to every handler registered for ``event_type``."""
        for handler in list(self._listeners.get(event_type, [])):
            handler(event)
