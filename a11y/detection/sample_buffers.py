"""
Sample Buffers.

Bounded, time-windowed logs of raw interaction events. Hover samples sit in
a ring buffer; click samples are kept for twice the failed-click window.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, List

from config import thresholds


@dataclass(frozen=True)
class HoverSample:
    """A completed dwell over an element."""
    target_ref: Any
    timestamp: float
    has_qualifying_text: bool = True


@dataclass(frozen=True)
class ClickSample:
    """A primary click and whether it landed on something interactive."""
    x: float
    y: float
    timestamp: float
    is_interactive_target: bool


class SampleBuffers:
    """Hover and click history owned by a single engine instance."""

    def __init__(
        self,
        hover_limit: int = thresholds.HOVER_HISTORY_LIMIT,
        click_retention: float = thresholds.FAILED_CLICK_WINDOW * 2,
    ):
        self._hovers: Deque[HoverSample] = deque(maxlen=hover_limit)
        self._clicks: List[ClickSample] = []
        self.click_retention = click_retention

    # -------------------------------------------------------------------------
    # HOVERS
    # -------------------------------------------------------------------------

    def record_hover(self, sample: HoverSample) -> None:
        self._hovers.append(sample)

    def recent_hovers(self, now: float, window: float = thresholds.HOVER_WINDOW) -> List[HoverSample]:
        return [h for h in self._hovers if now - h.timestamp < window]

    @property
    def hovers(self) -> List[HoverSample]:
        return list(self._hovers)

    # -------------------------------------------------------------------------
    # CLICKS
    # -------------------------------------------------------------------------

    def record_click(self, sample: ClickSample) -> None:
        self._clicks.append(sample)

    def prune_clicks(self, now: float) -> None:
        self._clicks = [c for c in self._clicks if now - c.timestamp < self.click_retention]

    def recent_failed_clicks(self, now: float, window: float = thresholds.FAILED_CLICK_WINDOW) -> List[ClickSample]:
        """Non-interactive clicks inside the trailing window, oldest first."""
        return [
            c for c in self._clicks
            if not c.is_interactive_target and now - c.timestamp < window
        ]

    @property
    def clicks(self) -> List[ClickSample]:
        return list(self._clicks)

    # -------------------------------------------------------------------------

    def clear(self) -> None:
        self._hovers.clear()
        self._clicks = []

    def is_empty(self) -> bool:
        return not self._hovers and not self._clicks
