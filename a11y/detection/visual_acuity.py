"""
Rule 1 - Visual acuity escalation ladder.

Repeated prolonged hovers over text suggest the user is struggling to read.

    Level 1  scaling     hovers >= HOVER_COUNT_FOR_SCALING, multipliers neutral
    Level 2  magnifier   hovers >= HOVER_COUNT_FOR_MAGNIFIER, scaling confirmed

The ladder is strictly sequential: the magnifier is only proposed once
scaling has been confirmed. Browser zoom is a second entry point that skips
the hover counters.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from a11y.confirmation.confirmation_workflow import ConfirmationWorkflow, ProposalOutcome
from a11y.detection.sample_buffers import HoverSample, SampleBuffers
from a11y.memory.memory_models import AdaptationKind
from a11y.settings_store.configuration import ConfigurationSnapshot, NEUTRAL_MULTIPLIER
from config.thresholds import DEFAULT_THRESHOLDS, Thresholds

logger = logging.getLogger(__name__)


class VisualAcuityRule:
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

        self._zoom_followup_wanted = False
        self._zoom_timer = None
        workflow.add_listener(self._on_outcome)

    # -------------------------------------------------------------------------
    # HOVER ENTRY POINT
    # -------------------------------------------------------------------------

    def on_prolonged_hover(self, target: Any) -> Optional[AdaptationKind]:
        """Record a qualifying dwell and climb the ladder if warranted."""
        now = self.platform.now()
        self.buffers.record_hover(HoverSample(target_ref=target, timestamp=now, has_qualifying_text=True))
        recent = len(self.buffers.recent_hovers(now, self.limits.hover_window))
        config = self.store.read()

        if self._scaling_wanted(recent, config, now):
            logger.info("[VisualAcuityRule] Level 1: %d recent hovers, proposing scaling", recent)
            if self.workflow.propose(AdaptationKind.SCALING):
                return AdaptationKind.SCALING

        elif self._magnifier_wanted(recent, config, now):
            logger.info("[VisualAcuityRule] Level 2: %d recent hovers after scaling, proposing magnifier", recent)
            if self.workflow.propose(AdaptationKind.MAGNIFIER):
                return AdaptationKind.MAGNIFIER

        return None

    def _scaling_wanted(self, recent: int, config: ConfigurationSnapshot, now: float) -> bool:
        return (
            recent >= self.limits.hover_count_for_scaling
            and _multipliers_neutral(config)
            and self.memory.is_eligible(AdaptationKind.SCALING, now)
        )

    def _magnifier_wanted(self, recent: int, config: ConfigurationSnapshot, now: float) -> bool:
        return (
            self.memory.is_applied(AdaptationKind.SCALING)
            and recent >= self.limits.hover_count_for_magnifier
            and not config.magnifier_enabled
            and self.memory.is_eligible(AdaptationKind.MAGNIFIER, now)
        )

    # -------------------------------------------------------------------------
    # BROWSER ZOOM ENTRY POINT
    # -------------------------------------------------------------------------

    def on_browser_zoom(self, device_pixel_ratio: float) -> Optional[AdaptationKind]:
        """
        The user already zoomed the page by hand: propose scaling directly.

        The magnifier follows ``zoom_magnifier_delay`` after scaling is
        confirmed.
        """
        if device_pixel_ratio < self.limits.zoom_detect_threshold:
            return None

        config = self.store.read()
        if not _multipliers_neutral(config):
            return None
        if not self.memory.is_eligible(AdaptationKind.SCALING, self.platform.now()):
            return None

        logger.info("[VisualAcuityRule] Browser zoom %.2f detected, proposing scaling", device_pixel_ratio)
        if not self.workflow.propose(AdaptationKind.SCALING):
            return None

        self._zoom_followup_wanted = (
            not self.memory.is_applied(AdaptationKind.MAGNIFIER)
            and not config.magnifier_enabled
        )
        return AdaptationKind.SCALING

    def _on_outcome(self, kind: AdaptationKind, outcome: ProposalOutcome) -> None:
        if kind != AdaptationKind.SCALING or not self._zoom_followup_wanted:
            return
        self._zoom_followup_wanted = False
        if outcome.kept:
            self._zoom_timer = self.platform.schedule_after(
                self.limits.zoom_magnifier_delay, self._zoom_followup
            )

    def _zoom_followup(self) -> None:
        self._zoom_timer = None
        config = self.store.read()
        if (
            self.memory.is_applied(AdaptationKind.SCALING)
            and not config.magnifier_enabled
            and self.memory.is_eligible(AdaptationKind.MAGNIFIER, self.platform.now())
        ):
            self.workflow.propose(AdaptationKind.MAGNIFIER)

    def cancel(self) -> None:
        """Drop any scheduled zoom follow-up."""
        self._zoom_followup_wanted = False
        if self._zoom_timer is not None:
            self._zoom_timer.cancel()
            self._zoom_timer = None


def _multipliers_neutral(config: ConfigurationSnapshot) -> bool:
    # Anything else means the user customized the size by hand.
    return config.font_scale == NEUTRAL_MULTIPLIER and config.spacing == NEUTRAL_MULTIPLIER
