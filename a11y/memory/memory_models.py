from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel


class AdaptationKind(str, Enum):
    """Adaptations the engine can propose. Values are the persisted keys."""
    SCALING = "scaling"
    MAGNIFIER = "magnifier"
    NIGHT_MODE = "nightMode"
    INVERSE_MODE = "inverseMode"
    NARRATOR = "narrator"


class AdaptationRecord(BaseModel):
    applied_confirmed: bool = False
    rejected_at: Optional[float] = None
    revoked_after_confirm: bool = False


class MemoryPayload(BaseModel):
    """Serialized form of AdaptationMemory."""
    version: int = 1
    records: Dict[AdaptationKind, AdaptationRecord] = {}
