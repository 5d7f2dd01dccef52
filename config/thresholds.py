# Central place for detection thresholds (immutable, process-wide).
# All durations are in seconds.

from __future__ import annotations

from dataclasses import dataclass

# Rule 1: visual acuity ladder
HOVER_DURATION = 1.5              # dwell before a hover counts as prolonged
HOVER_HISTORY_LIMIT = 10          # ring buffer size for hover samples
HOVER_WINDOW = 30.0               # trailing window for counting hovers
HOVER_COUNT_FOR_SCALING = 3
HOVER_COUNT_FOR_MAGNIFIER = 5
ZOOM_DETECT_THRESHOLD = 1.1       # device pixel ratio (browser zoom > 110%)
ZOOM_MAGNIFIER_DELAY = 1.0

# Rule 2: contrast / photophobia
FAILED_CLICK_RADIUS = 50.0        # px around the centroid
FAILED_CLICK_COUNT = 4
FAILED_CLICK_WINDOW = 5.0
NIGHT_MODE_REJECTION_WINDOW = 60.0
NIGHT_MODE_MONITOR_GRACE = 1.0

# Rule 3: cognitive assistance
INACTIVITY_TIMEOUT = 10.0

# Confirmation protocol
COOLDOWN_PERIOD = 300.0           # 5 minutes before a rejected kind is retried
CONFIRMATION_TIMEOUT = 15.0       # auto-accept unanswered proposals


@dataclass(frozen=True)
class Thresholds:
    """Bundle of detection constants handed to one engine instance."""
    hover_duration: float = HOVER_DURATION
    hover_history_limit: int = HOVER_HISTORY_LIMIT
    hover_window: float = HOVER_WINDOW
    hover_count_for_scaling: int = HOVER_COUNT_FOR_SCALING
    hover_count_for_magnifier: int = HOVER_COUNT_FOR_MAGNIFIER
    zoom_detect_threshold: float = ZOOM_DETECT_THRESHOLD
    zoom_magnifier_delay: float = ZOOM_MAGNIFIER_DELAY
    failed_click_radius: float = FAILED_CLICK_RADIUS
    failed_click_count: int = FAILED_CLICK_COUNT
    failed_click_window: float = FAILED_CLICK_WINDOW
    night_mode_rejection_window: float = NIGHT_MODE_REJECTION_WINDOW
    night_mode_monitor_grace: float = NIGHT_MODE_MONITOR_GRACE
    inactivity_timeout: float = INACTIVITY_TIMEOUT
    cooldown_period: float = COOLDOWN_PERIOD
    confirmation_timeout: float = CONFIRMATION_TIMEOUT

    @property
    def click_retention(self) -> float:
        """Click samples are kept for twice the failed-click window."""
        return self.failed_click_window * 2


DEFAULT_THRESHOLDS = Thresholds()
