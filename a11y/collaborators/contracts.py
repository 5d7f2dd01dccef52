"""
Collaborator contracts for narration and confirmation.

The engine drives these but never implements them; hosts inject concrete
objects. Narration is best-effort: a missing or failing narrator is logged
and ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Narrator(Protocol):
    def speak(self, message: str) -> None: ...


class ConfirmationDialog(Protocol):
    """
    Shows a keep/undo prompt for one adaptation kind.

    Implementations must eventually invoke exactly one of ``on_accept`` /
    ``on_reject``, or neither when the engine dismisses the prompt. An
    optional ``dismiss(kind)`` lets the engine take the prompt down.
    """
    def show(
        self,
        kind: str,
        message: str,
        on_accept: Callable[[], None],
        on_reject: Callable[[], None],
    ) -> None: ...


def safe_speak(narrator: Optional[Narrator], message: str) -> None:
    """Fire-and-forget narration that never raises."""
    if narrator is None or not message:
        return
    try:
        narrator.speak(message)
    except Exception as e:
        logger.warning("[Narrator] Could not speak %r: %s", message, e)


def safe_dismiss(dialog: Any, kind: str) -> None:
    dismiss = getattr(dialog, "dismiss", None)
    if dismiss is None:
        return
    try:
        dismiss(kind)
    except Exception as e:
        logger.warning("[ConfirmationDialog] Could not dismiss %s prompt: %s", kind, e)
