"""
Adaptive Accessibility Engine.

Composition root: wires platform events into the sample buffers and the
three detection rules, owns the hover-dwell and inactivity timers, and
tracks route changes.

Architecture:
    ┌──────────────────────────────────────────────────────────────────┐
    │                    ADAPTIVE ENGINE (router)                      │
    ├──────────────────────────────────────────────────────────────────┤
    │   pointer / click / key / touch / resize / visibility events     │
    │                              │                                   │
    │          ┌───────────────────┼────────────────────┐              │
    │          ▼                   ▼                    ▼              │
    │   ┌─────────────┐     ┌─────────────┐      ┌─────────────┐       │
    │   │  RULE 1     │     │  RULE 2     │      │  RULE 3     │       │
    │   │  visual     │     │  contrast   │      │  inactivity │       │
    │   │  acuity     │     │  cascade    │      │             │       │
    │   └──────┬──────┘     └──────┬──────┘      └──────┬──────┘       │
    │          └───────────────────┼────────────────────┘              │
    │                              ▼                                   │
    │                ┌───────────────────────────┐                     │
    │                │  CONFIRMATION WORKFLOW    │──► dialog, narrator │
    │                │  snapshot / apply / undo  │──► config store     │
    │                └─────────────┬─────────────┘                     │
    │                              ▼                                   │
    │                ┌───────────────────────────┐                     │
    │                │  ADAPTATION MEMORY        │──► session store    │
    │                └───────────────────────────┘                     │
    └──────────────────────────────────────────────────────────────────┘

Route changes clear the detection state (buffers, timers) but keep the
adaptation memory, so learned preferences survive navigation.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from a11y.confirmation.confirmation_workflow import ConfirmationWorkflow
from a11y.detection.contrast_cascade import ContrastRule
from a11y.detection.element_classifier import DefaultElementClassifier, is_excluded_surface
from a11y.detection.inactivity import InactivityRule
from a11y.detection.sample_buffers import ClickSample, SampleBuffers
from a11y.detection.visual_acuity import VisualAcuityRule
from a11y.memory.adaptation_memory import load_memory, save_memory
from a11y.platform import platform_adapter as events
from config.thresholds import DEFAULT_THRESHOLDS, Thresholds

logger = logging.getLogger(__name__)


class AdaptiveEngine:
    """
    One engine per session, owned by the host shell.

    Collaborators:
        platform     timers, input listeners, route, pixel ratio
        store        host accessibility configuration
        dialog       keep / undo prompt
        narrator     optional speech output
        persistence  optional session key-value store for the memory
        classifier   element predicates (defaults to DefaultElementClassifier)
    """

    def __init__(
        self,
        platform: Any,
        store: Any,
        dialog: Any,
        narrator: Any = None,
        persistence: Any = None,
        classifier: Any = None,
        limits: Thresholds = DEFAULT_THRESHOLDS,
        speak_prompts: bool = True,
        speak_outcomes: bool = True,
    ):
        self.platform = platform
        self.store = store
        self.persistence = persistence
        self.classifier = classifier or DefaultElementClassifier()
        self.limits = limits

        self.memory = load_memory(persistence, limits.cooldown_period, clock=platform.now)
        self.buffers = SampleBuffers(limits.hover_history_limit, limits.click_retention)
        self.workflow = ConfirmationWorkflow(
            store=store,
            dialog=dialog,
            memory=self.memory,
            platform=platform,
            narrator=narrator,
            persistence=persistence,
            confirmation_timeout=limits.confirmation_timeout,
            speak_prompts=speak_prompts,
            speak_outcomes=speak_outcomes,
        )
        self.visual_rule = VisualAcuityRule(self.buffers, self.workflow, platform, limits)
        self.contrast_rule = ContrastRule(self.buffers, self.workflow, platform, limits)
        self.inactivity_rule = InactivityRule(self.workflow, platform)

        self.is_active = False
        self.destroyed = False
        self.current_route = platform.current_route()

        self._detachers: List[Callable[[], None]] = []
        self._hover_target: Any = None
        self._hover_timer = None
        self._inactivity_timer = None
        self._last_activity = platform.now()
        self._hidden = False

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> None:
        if self.destroyed:
            logger.warning("[AdaptiveEngine] Engine was destroyed, create a new one")
            return
        if self.is_active:
            logger.warning("[AdaptiveEngine] Engine already active")
            return

        self.is_active = True
        self._attach_listeners()
        self._reset_inactivity_timer()
        logger.info("[AdaptiveEngine] Adaptive engine started on %s", self.current_route)

    def stop(self) -> None:
        if not self.is_active:
            logger.warning("[AdaptiveEngine] Engine is not active")
            return

        self.is_active = False
        self._detach_listeners()
        self._hidden = False                # visibility events are not seen while stopped
        self._stop_inactivity_timer()
        self._clear_hover_timer()
        logger.info("[AdaptiveEngine] Adaptive engine stopped")

    def destroy(self) -> None:
        """Stop, withdraw open proposals, persist memory and release the engine."""
        if self.destroyed:
            return
        if self.is_active:
            self.stop()

        self.workflow.cancel_all()
        self.contrast_rule.stop_watching()
        self.visual_rule.cancel()
        save_memory(self.memory, self.persistence)
        self.destroyed = True
        logger.info("[AdaptiveEngine] Adaptive engine destroyed")

    def _attach_listeners(self) -> None:
        handlers = {
            events.POINTER_MOVE: self._handle_pointer_move,
            events.POINTER_OVER: self._handle_pointer_over,
            events.POINTER_OUT: self._handle_pointer_out,
            events.CLICK: self._handle_click,
            events.KEY_DOWN: self._handle_input,
            events.TOUCH_START: self._handle_input,
            events.RESIZE: self._handle_resize,
            events.VISIBILITY: self._handle_visibility,
        }
        for event_type, handler in handlers.items():
            self._detachers.append(self.platform.listen(event_type, handler))

    def _detach_listeners(self) -> None:
        for detach in self._detachers:
            detach()
        self._detachers = []

    # =========================================================================
    # EVENT HANDLERS
    # =========================================================================

    def _handle_pointer_move(self, event: Any) -> None:
        self._check_route_change()
        self._reset_inactivity_timer()

    def _handle_pointer_over(self, event: Any) -> None:
        target = getattr(event, "target", None)

        if not self._has_qualifying_text(target):
            # Moving from a valid element onto an invalid one ends the dwell
            self._clear_hover_timer()
            self._hover_target = None
            return

        if target is self._hover_target:
            return

        self._hover_target = target
        self._clear_hover_timer()
        self._hover_timer = self.platform.schedule_after(
            self.limits.hover_duration, lambda: self._on_dwell(target)
        )

    def _handle_pointer_out(self, event: Any) -> None:
        self._clear_hover_timer()
        self._hover_target = None

    def _handle_click(self, event: Any) -> None:
        self._reset_inactivity_timer()
        sample = ClickSample(
            x=float(getattr(event, "x", 0.0)),
            y=float(getattr(event, "y", 0.0)),
            timestamp=self.platform.now(),
            is_interactive_target=self._is_interactive(getattr(event, "target", None)),
        )
        self.contrast_rule.on_click(sample)

    def _handle_input(self, event: Any) -> None:
        self._reset_inactivity_timer()

    def _handle_resize(self, event: Any) -> None:
        ratio = getattr(event, "device_pixel_ratio", None)
        if ratio is None:
            ratio = self.platform.device_pixel_ratio()
        self.visual_rule.on_browser_zoom(ratio)

    def _handle_visibility(self, event: Any) -> None:
        if getattr(event, "hidden", False):
            # Backgrounded tabs must not count as inactivity
            self._hidden = True
            self._stop_inactivity_timer()
        else:
            self._hidden = False
            self._reset_inactivity_timer()

    def _on_dwell(self, target: Any) -> None:
        self._hover_timer = None
        self.visual_rule.on_prolonged_hover(target)

    # =========================================================================
    # ELEMENT CLASSIFICATION
    # =========================================================================

    def _has_qualifying_text(self, target: Any) -> bool:
        if target is None or is_excluded_surface(target):
            return False
        try:
            return bool(self.classifier.has_qualifying_text(target))
        except Exception as e:
            logger.warning("[AdaptiveEngine] Classifier failed on hover target: %s", e)
            return False

    def _is_interactive(self, target: Any) -> bool:
        if target is None:
            return False
        try:
            return bool(self.classifier.is_interactive(target))
        except Exception as e:
            # Treated as interactive so the click is never counted as failed
            logger.warning("[AdaptiveEngine] Classifier failed on click target: %s", e)
            return True

    # =========================================================================
    # TIMERS
    # =========================================================================

    def _clear_hover_timer(self) -> None:
        if self._hover_timer is not None:
            self._hover_timer.cancel()
            self._hover_timer = None

    def _stop_inactivity_timer(self) -> None:
        if self._inactivity_timer is not None:
            self._inactivity_timer.cancel()
            self._inactivity_timer = None

    def _reset_inactivity_timer(self) -> None:
        self._last_activity = self.platform.now()
        self._stop_inactivity_timer()
        if not self.is_active or self._hidden:
            return
        self._inactivity_timer = self.platform.schedule_after(
            self.limits.inactivity_timeout, self._on_inactivity
        )

    def _on_inactivity(self) -> None:
        self._inactivity_timer = None
        idle_for = self.platform.now() - self._last_activity
        self.inactivity_rule.on_inactivity(idle_for)

    # =========================================================================
    # ROUTE CHANGES
    # =========================================================================

    def _check_route_change(self) -> None:
        route = self.platform.current_route()
        if route != self.current_route:
            logger.info("[AdaptiveEngine] Route change detected: %s -> %s", self.current_route, route)
            self.current_route = route
            self.reset_detection_state()

    def on_route_change(self, route: Optional[str] = None) -> None:
        """Explicit hook for host routers."""
        route = route or self.platform.current_route()
        if route != self.current_route:
            logger.info("[AdaptiveEngine] Route change: %s -> %s", self.current_route, route)
            self.current_route = route
            self.reset_detection_state()

    def reset_detection_state(self) -> None:
        """Clear buffers and timers; the adaptation memory is left alone."""
        self.buffers.clear()
        self._clear_hover_timer()
        self._hover_target = None
        self._reset_inactivity_timer()
        logger.debug("[AdaptiveEngine] Detection state reset, preferences kept")

    # =========================================================================
    # MEMORY & DIAGNOSTICS
    # =========================================================================

    def reset_memory(self) -> None:
        """Forget every confirmation and rejection (e.g. a new profile)."""
        self.memory.reset()
        save_memory(self.memory, self.persistence)
        self.reset_detection_state()
        logger.info("[AdaptiveEngine] Memory and detection state reset")

    def status(self) -> Dict[str, Any]:
        return {
            "active": self.is_active,
            "destroyed": self.destroyed,
            "route": self.current_route,
            "hidden": self._hidden,
            "hovers": len(self.buffers.hovers),
            "clicks": len(self.buffers.clicks),
            "pending": sorted(k.value for k in self.workflow.pending),
            "watching_night_mode": self.contrast_rule.watching,
            "memory": self.memory.snapshot(),
        }


# =============================================================================
# FACTORY
# =============================================================================

def create_adaptive_engine(
    platform: Any,
    store: Any,
    dialog: Any,
    narrator: Any = None,
    persistence: Any = None,
    classifier: Any = None,
    app_settings: Any = None,
    use_voice: bool = False,
) -> AdaptiveEngine:
    """
    Build an engine from settings.

    Persistence defaults to the store named by ``sqlite_path`` (in-memory
    when unset); ``use_voice`` attaches a pyttsx3 narrator when none is given.
    """
    if app_settings is None:
        from config.settings import settings as app_settings

    if persistence is None:
        from a11y.memory.memory_store import create_persistence
        persistence = create_persistence(app_settings.sqlite_path, key=app_settings.memory_session_key)

    if narrator is None and use_voice:
        from a11y.collaborators.voice_narrator import VoiceNarrator
        narrator = VoiceNarrator()

    limits = replace(DEFAULT_THRESHOLDS, confirmation_timeout=app_settings.confirmation_timeout)

    return AdaptiveEngine(
        platform=platform,
        store=store,
        dialog=dialog,
        narrator=narrator,
        persistence=persistence,
        classifier=classifier,
        limits=limits,
        speak_prompts=app_settings.speak_prompts,
        speak_outcomes=app_settings.speak_outcomes,
    )
