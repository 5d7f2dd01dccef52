"""
Rule 2 - Contrast / photophobia cascade.

Several clicks on nothing, tightly clustered, suggest the user cannot make
out the target: propose night mode. If the user switches night mode off
again shortly after confirming it, treat that as photophobia and propose
inverse contrast straight away.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

import numpy as np

from a11y.confirmation.confirmation_workflow import ConfirmationWorkflow, ProposalOutcome
from a11y.detection.sample_buffers import ClickSample, SampleBuffers
from a11y.memory.memory_models import AdaptationKind
from a11y.settings_store.configuration import ConfigurationSnapshot
from config.thresholds import DEFAULT_THRESHOLDS, Thresholds

logger = logging.getLogger(__name__)


def clicks_clustered(clicks: Sequence[ClickSample], radius: float) -> bool:
    """True when every click lies within ``radius`` px of the centroid."""
    if len(clicks) < 2:
        return False
    points = np.array([[c.x, c.y] for c in clicks], dtype=float)
    centroid = points.mean(axis=0)
    distances = np.linalg.norm(points - centroid, axis=1)
    return bool(np.all(distances <= radius))


class ContrastRule:
    def __init__(
        self,
        buffers: SampleBuffers,
        workflow: ConfirmationWorkflow,
        platform: Any,
        limits: Thresholds = DEFAULT_THRESHOLDS,
    ):
        self.buffers = buffers
        self.workflow = workflow
        self.memory = workflow.memory
        self.store = workflow.store
        self.platform = platform
        self.limits = limits

        self._unsubscribe: Optional[Callable[[], None]] = None
        self._monitor_timer = None
        workflow.add_listener(self._on_outcome)

    # -------------------------------------------------------------------------
    # FAILED CLICK CLUSTERS
    # -------------------------------------------------------------------------

    def on_click(self, sample: ClickSample) -> Optional[AdaptationKind]:
        self.buffers.record_click(sample)
        self.buffers.prune_clicks(sample.timestamp)
        if sample.is_interactive_target:
            return None
        return self._check_failed_click_pattern(sample.timestamp)

    def _check_failed_click_pattern(self, now: float) -> Optional[AdaptationKind]:
        recent = self.buffers.recent_failed_clicks(now, self.limits.failed_click_window)
        if len(recent) < self.limits.failed_click_count:
            return None

        candidates = recent[-self.limits.failed_click_count:]
        if not clicks_clustered(candidates, self.limits.failed_click_radius):
            return None

        config = self.store.read()
        if config.night_mode or not self.memory.is_eligible(AdaptationKind.NIGHT_MODE, now):
            return None

        logger.info("[ContrastRule] %d clustered failed clicks, proposing night mode", len(candidates))
        if self.workflow.propose(AdaptationKind.NIGHT_MODE):
            return AdaptationKind.NIGHT_MODE
        return None

    # -------------------------------------------------------------------------
    # PHOTOPHOBIA CASCADE
    # -------------------------------------------------------------------------

    def _on_outcome(self, kind: AdaptationKind, outcome: ProposalOutcome) -> None:
        if kind == AdaptationKind.NIGHT_MODE and outcome.kept:
            self.watch_night_mode()

    def watch_night_mode(self) -> None:
        """Watch the store for a quick toggle-off of confirmed night mode."""
        self.stop_watching()
        confirmed_at = self.platform.now()

        def _on_change(config: ConfigurationSnapshot) -> None:
            if config.night_mode:
                return
            elapsed = self.platform.now() - confirmed_at
            self.stop_watching()
            if elapsed < self.limits.night_mode_rejection_window:
                self._on_photophobia(elapsed)

        self._unsubscribe = self.store.subscribe(_on_change)
        self._monitor_timer = self.platform.schedule_after(
            self.limits.night_mode_rejection_window + self.limits.night_mode_monitor_grace,
            self.stop_watching,
        )

    @property
    def watching(self) -> bool:
        return self._unsubscribe is not None

    def stop_watching(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._monitor_timer is not None:
            self._monitor_timer.cancel()
            self._monitor_timer = None

    def _on_photophobia(self, elapsed: float) -> Optional[AdaptationKind]:
        logger.info("[ContrastRule] Night mode switched off %.0fs after confirmation, photophobia suspected", elapsed)
        self.workflow.record_revocation(AdaptationKind.NIGHT_MODE)

        config = self.store.read()
        if config.inverse_mode or not self.memory.is_eligible(AdaptationKind.INVERSE_MODE, self.platform.now()):
            return None
        if self.workflow.propose(AdaptationKind.INVERSE_MODE):
            return AdaptationKind.INVERSE_MODE
        return None
