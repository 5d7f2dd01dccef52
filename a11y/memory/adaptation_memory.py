"""
Adaptation Memory.

Session-scoped record of which adaptations the user confirmed and which are
cooling down after a rejection. The eligibility rule:

    eligible(kind)  <=>  not applied_confirmed
                         and (rejected_at is None or now - rejected_at >= cooldown)

Persistence goes through a ``MemoryPersistence`` collaborator; loading is
fail-open (a broken document yields an empty memory). Timestamps are epoch
seconds, so a restored cooldown keeps counting from the original rejection.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from a11y.errors import MemoryCorruptionError
from a11y.memory.memory_models import AdaptationKind, AdaptationRecord, MemoryPayload
from config import thresholds

logger = logging.getLogger(__name__)


class AdaptationMemory:
    """Applied / rejected state per adaptation kind."""

    def __init__(
        self,
        cooldown_period: float = thresholds.COOLDOWN_PERIOD,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.cooldown_period = cooldown_period
        self._clock = clock or time.time
        self._records: Dict[AdaptationKind, AdaptationRecord] = {}

    # -------------------------------------------------------------------------
    # QUERIES
    # -------------------------------------------------------------------------

    def get(self, kind: AdaptationKind) -> Optional[AdaptationRecord]:
        record = self._records.get(AdaptationKind(kind))
        return record.model_copy() if record else None

    def is_applied(self, kind: AdaptationKind) -> bool:
        record = self._records.get(AdaptationKind(kind))
        return bool(record and record.applied_confirmed)

    def cooldown_remaining(self, kind: AdaptationKind, now: Optional[float] = None) -> float:
        """Seconds left in the rejection cooldown (0 when none)."""
        record = self._records.get(AdaptationKind(kind))
        if record is None or record.rejected_at is None:
            return 0.0
        now = self._clock() if now is None else now
        return max(0.0, self.cooldown_period - (now - record.rejected_at))

    def is_eligible(self, kind: AdaptationKind, now: Optional[float] = None) -> bool:
        kind = AdaptationKind(kind)
        if self.is_applied(kind):
            return False

        remaining = self.cooldown_remaining(kind, now)
        if remaining > 0:
            logger.debug(
                "[AdaptationMemory] %s still cooling down (%.0fs of %.0fs left)",
                kind.value, remaining, self.cooldown_period,
            )
            return False
        return True

    # -------------------------------------------------------------------------
    # MUTATIONS
    # -------------------------------------------------------------------------

    def mark_applied(self, kind: AdaptationKind) -> None:
        self._records[AdaptationKind(kind)] = AdaptationRecord(applied_confirmed=True)

    def mark_rejected(self, kind: AdaptationKind, now: Optional[float] = None) -> None:
        now = self._clock() if now is None else now
        self._records[AdaptationKind(kind)] = AdaptationRecord(
            applied_confirmed=False,
            rejected_at=now,
        )

    def mark_revoked(self, kind: AdaptationKind, now: Optional[float] = None) -> None:
        """
        Rejection signalled by the user undoing a confirmed adaptation.

        Same eligibility effect as ``mark_rejected``; the record keeps the
        ``revoked_after_confirm`` flag so the two cases stay apart.
        """
        self.mark_rejected(kind, now)
        self._records[AdaptationKind(kind)].revoked_after_confirm = True

    def reset(self) -> None:
        self._records.clear()

    # -------------------------------------------------------------------------
    # SERIALIZATION
    # -------------------------------------------------------------------------

    def to_payload(self) -> MemoryPayload:
        return MemoryPayload(records={k: r.model_copy() for k, r in self._records.items()})

    def to_json(self) -> str:
        return self.to_payload().model_dump_json()

    def load_payload(self, payload: MemoryPayload) -> None:
        self._records = dict(payload.records)

    @staticmethod
    def parse(document: str) -> MemoryPayload:
        try:
            return MemoryPayload.model_validate_json(document)
        except ValidationError as e:
            raise MemoryCorruptionError(str(e)) from e

    def snapshot(self) -> Dict[str, Any]:
        """Plain dict view, for diagnostics and equality checks in tests."""
        return {k.value: r.model_dump() for k, r in self._records.items()}

    def __len__(self) -> int:
        return len(self._records)


# =============================================================================
# LOAD / SAVE AGAINST A PERSISTENCE COLLABORATOR
# =============================================================================

def load_memory(
    persistence: Any,
    cooldown_period: float = thresholds.COOLDOWN_PERIOD,
    clock: Optional[Callable[[], float]] = None,
) -> AdaptationMemory:
    """
    Build an AdaptationMemory from persisted state.

    Any failure (missing collaborator, unreadable store, malformed document)
    yields an empty memory so adaptations stay proposable.
    """
    memory = AdaptationMemory(cooldown_period=cooldown_period, clock=clock)
    if persistence is None:
        return memory

    try:
        document = persistence.load()
    except Exception as e:
        logger.error("[AdaptationMemory] Error loading memory: %s", e)
        return memory

    if not document:
        return memory

    try:
        memory.load_payload(AdaptationMemory.parse(document))
    except MemoryCorruptionError as e:
        logger.error("[AdaptationMemory] Discarding malformed memory: %s", e)

    return memory


def save_memory(memory: AdaptationMemory, persistence: Any) -> bool:
    """Persist memory; returns False (and logs) on failure."""
    if persistence is None:
        return False
    try:
        persistence.save(memory.to_json())
        return True
    except Exception as e:
        logger.error("[AdaptationMemory] Error saving memory: %s", e)
        return False
