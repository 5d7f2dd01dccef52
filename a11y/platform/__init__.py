"""
Platform Module.

Timer and input seam the engine runs on, with a deterministic simulated
platform and an asyncio-backed one.
"""

from a11y.platform.platform_adapter import (
    PlatformAdapter,
    TimerHandle,
    ListenerRegistry,
    PointerEvent,
    InputEvent,
    ResizeEvent,
    VisibilityEvent,
    ALL_EVENT_TYPES,
)
from a11y.platform.simulated_platform import SimulatedPlatform
from a11y.platform.asyncio_platform import AsyncioPlatform

__all__ = [
    "PlatformAdapter",
    "TimerHandle",
    "ListenerRegistry",
    "PointerEvent",
    "InputEvent",
    "ResizeEvent",
    "VisibilityEvent",
    "ALL_EVENT_TYPES",
    "SimulatedPlatform",
    "AsyncioPlatform",
]
