"""Rule 3 - cognitive assistance: offer narration after a period of inactivity."""

from __future__ import annotations

import logging
from typing import Any, Optional

from a11y.confirmation.confirmation_workflow import ConfirmationWorkflow
from a11y.memory.memory_models import AdaptationKind

logger = logging.getLogger(__name__)


class InactivityRule:
    def __init__(self, workflow: ConfirmationWorkflow, platform: Any):
        self.workflow = workflow
        self.memory = workflow.memory
        self.store = workflow.store
        self.platform = platform

    def on_inactivity(self, idle_for: float) -> Optional[AdaptationKind]:
        config = self.store.read()
        if config.narration_enabled:
            return None
        if not self.memory.is_eligible(AdaptationKind.NARRATOR, self.platform.now()):
            return None

        logger.info("[InactivityRule] No activity for %.1fs, proposing narration", idle_for)
        if self.workflow.propose(AdaptationKind.NARRATOR):
            return AdaptationKind.NARRATOR
        return None
