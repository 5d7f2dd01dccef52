"""Narration and confirmation collaborator contracts."""

from a11y.collaborators.contracts import (
    Narrator,
    ConfirmationDialog,
    safe_speak,
    safe_dismiss,
)

__all__ = ["Narrator", "ConfirmationDialog", "safe_speak", "safe_dismiss"]
