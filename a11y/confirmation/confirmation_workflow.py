"""
Confirmation Workflow.

Every proposal is applied tentatively, then the user is asked to keep or
undo it. Unanswered prompts are kept after a timeout.

    PROPOSED ──apply──► AWAITING_USER ──accept / timeout──► RESOLVED (CONFIRMED | TIMED_OUT)
                              │
                              ├──reject──► RESOLVED (REJECTED)   config rolled back
                              └──cancel──► RESOLVED (CANCELLED)  config rolled back,
                                                                  memory untouched

At most one proposal per kind is pending; different kinds may be pending
side by side, each with its own snapshot and timer.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional

from a11y.collaborators.contracts import safe_dismiss, safe_speak
from a11y.confirmation.adaptations import AdaptationPlan, get_plan
from a11y.memory.adaptation_memory import AdaptationMemory, save_memory
from a11y.memory.memory_models import AdaptationKind
from a11y.settings_store.configuration import (
    ConfigurationSnapshot,
    ConfigurationStore,
    restore_fields,
)
from config import thresholds

logger = logging.getLogger(__name__)


class ProposalState(str, Enum):
    PROPOSED = "proposed"
    AWAITING_USER = "awaiting_user"
    RESOLVED = "resolved"


class ProposalOutcome(str, Enum):
    CONFIRMED = "confirmed"
    TIMED_OUT = "timed_out"        # counts as confirmed
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def kept(self) -> bool:
        return self in (ProposalOutcome.CONFIRMED, ProposalOutcome.TIMED_OUT)


@dataclass
class PendingProposal:
    kind: AdaptationKind
    snapshot: ConfigurationSnapshot
    proposed_at: float
    state: ProposalState = ProposalState.PROPOSED
    outcome: Optional[ProposalOutcome] = None
    timer: Any = None

    @property
    def is_open(self) -> bool:
        return self.state != ProposalState.RESOLVED


OutcomeListener = Callable[[AdaptationKind, ProposalOutcome], None]


class ConfirmationWorkflow:
    """Tentative apply / confirm / roll back for adaptation proposals."""

    def __init__(
        self,
        store: ConfigurationStore,
        dialog: Any,
        memory: AdaptationMemory,
        platform: Any,
        narrator: Any = None,
        persistence: Any = None,
        confirmation_timeout: float = thresholds.CONFIRMATION_TIMEOUT,
        speak_prompts: bool = True,
        speak_outcomes: bool = True,
        history_limit: int = 50,
    ):
        self.store = store
        self.dialog = dialog
        self.memory = memory
        self.platform = platform
        self.narrator = narrator
        self.persistence = persistence
        self.confirmation_timeout = confirmation_timeout
        self.speak_prompts = speak_prompts
        self.speak_outcomes = speak_outcomes
        self.pending: Dict[AdaptationKind, PendingProposal] = {}
        self.history: Deque[PendingProposal] = deque(maxlen=history_limit)
        self._listeners: List[OutcomeListener] = []

    # -------------------------------------------------------------------------
    # QUERIES
    # -------------------------------------------------------------------------

    def is_pending(self, kind: AdaptationKind) -> bool:
        proposal = self.pending.get(AdaptationKind(kind))
        return bool(proposal and proposal.is_open)

    def add_listener(self, listener: OutcomeListener) -> Callable[[], None]:
        """Register ``listener(kind, outcome)``; returns a remover."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # -------------------------------------------------------------------------
    # PROPOSE
    # -------------------------------------------------------------------------

    def propose(self, kind: AdaptationKind) -> bool:
        """
        Tentatively apply ``kind`` and ask the user about it.

        Returns False when a proposal for the same kind is already open or
        the dialog could not be shown.
        """
        kind = AdaptationKind(kind)
        if self.is_pending(kind):
            logger.debug("[ConfirmationWorkflow] %s already awaiting the user, ignoring", kind.value)
            return False

        plan = get_plan(kind)
        proposal = PendingProposal(
            kind=kind,
            snapshot=self.store.read(),
            proposed_at=self.platform.now(),
        )
        self.pending[kind] = proposal

        plan.apply(self.store)
        logger.info("[ConfirmationWorkflow] %s applied, waiting for confirmation", kind.value)

        if self.speak_prompts:
            safe_speak(self.narrator, plan.prompt)

        proposal.state = ProposalState.AWAITING_USER
        try:
            self.dialog.show(
                kind.value,
                plan.prompt,
                lambda: self._accept(proposal, ProposalOutcome.CONFIRMED),
                lambda: self._reject(proposal),
            )
        except Exception as e:
            logger.error("[ConfirmationWorkflow] Dialog unavailable for %s: %s", kind.value, e)
            self._rollback(proposal, plan)
            self._close(proposal, ProposalOutcome.CANCELLED)
            return False

        if proposal.is_open:
            proposal.timer = self.platform.schedule_after(
                self.confirmation_timeout,
                lambda: self._on_timeout(proposal),
            )
        return True

    # -------------------------------------------------------------------------
    # RESOLUTION
    # -------------------------------------------------------------------------

    def _on_timeout(self, proposal: PendingProposal) -> None:
        if not proposal.is_open:
            return
        logger.info("[ConfirmationWorkflow] %s auto-accepted after %.0fs without answer",
                    proposal.kind.value, self.confirmation_timeout)
        safe_dismiss(self.dialog, proposal.kind.value)
        self._accept(proposal, ProposalOutcome.TIMED_OUT)

    def _accept(self, proposal: PendingProposal, outcome: ProposalOutcome) -> None:
        if not proposal.is_open:
            return
        plan = get_plan(proposal.kind)

        self.memory.mark_applied(proposal.kind)
        save_memory(self.memory, self.persistence)
        self._close(proposal, outcome)

        if self.speak_outcomes:
            safe_speak(self.narrator, plan.confirmed_notice)
        logger.info("[ConfirmationWorkflow] %s confirmed (%s)", proposal.kind.value, outcome.value)
        self._notify(proposal.kind, outcome)

    def _reject(self, proposal: PendingProposal) -> None:
        if not proposal.is_open:
            return
        plan = get_plan(proposal.kind)

        self._rollback(proposal, plan)
        self.memory.mark_rejected(proposal.kind, self.platform.now())
        save_memory(self.memory, self.persistence)
        self._close(proposal, ProposalOutcome.REJECTED)

        if self.speak_outcomes:
            safe_speak(self.narrator, plan.rejected_notice)
        logger.info("[ConfirmationWorkflow] %s rejected, cooldown of %.0fs started",
                    proposal.kind.value, self.memory.cooldown_period)
        self._notify(proposal.kind, ProposalOutcome.REJECTED)

    def record_revocation(self, kind: AdaptationKind) -> None:
        """The user undid a confirmed adaptation outside the prompt."""
        kind = AdaptationKind(kind)
        self.memory.mark_revoked(kind, self.platform.now())
        save_memory(self.memory, self.persistence)
        logger.info("[ConfirmationWorkflow] %s revoked after confirmation, cooldown started", kind.value)

    def cancel(self, kind: AdaptationKind) -> bool:
        """Withdraw an open proposal: roll back, record nothing, call no callback."""
        proposal = self.pending.get(AdaptationKind(kind))
        if proposal is None or not proposal.is_open:
            return False

        safe_dismiss(self.dialog, proposal.kind.value)
        self._rollback(proposal, get_plan(proposal.kind))
        self._close(proposal, ProposalOutcome.CANCELLED)
        logger.info("[ConfirmationWorkflow] %s proposal cancelled", proposal.kind.value)
        self._notify(proposal.kind, ProposalOutcome.CANCELLED)
        return True

    def cancel_all(self) -> int:
        return sum(1 for kind in list(self.pending) if self.cancel(kind))

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    def _rollback(self, proposal: PendingProposal, plan: AdaptationPlan) -> None:
        restore_fields(self.store, proposal.snapshot, plan.fields)

    def _close(self, proposal: PendingProposal, outcome: ProposalOutcome) -> None:
        if proposal.timer is not None:
            proposal.timer.cancel()
            proposal.timer = None
        proposal.state = ProposalState.RESOLVED
        proposal.outcome = outcome
        if self.pending.get(proposal.kind) is proposal:
            del self.pending[proposal.kind]
        self.history.append(proposal)

    def _notify(self, kind: AdaptationKind, outcome: ProposalOutcome) -> None:
        for listener in list(self._listeners):
            try:
                listener(kind, outcome)
            except Exception as e:
                logger.error("[ConfirmationWorkflow] Outcome listener failed: %s", e)
