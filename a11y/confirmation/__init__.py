"""
Confirmation Module.

Tentative application of adaptations with keep / undo / auto-keep
resolution and exact rollback.
"""

from a11y.confirmation.adaptations import AdaptationPlan, PLANS, get_plan
from a11y.confirmation.confirmation_workflow import (
    ConfirmationWorkflow,
    PendingProposal,
    ProposalOutcome,
    ProposalState,
)

__all__ = [
    "AdaptationPlan",
    "PLANS",
    "get_plan",
    "ConfirmationWorkflow",
    "PendingProposal",
    "ProposalOutcome",
    "ProposalState",
]
