"""
Memory Module.

Adaptation memory (confirmed / cooling-down adaptations) and its session
persistence.
"""

from a11y.memory.memory_models import AdaptationKind, AdaptationRecord, MemoryPayload
from a11y.memory.adaptation_memory import AdaptationMemory, load_memory, save_memory
from a11y.memory.memory_store import (
    MemoryPersistence,
    InMemoryPersistence,
    SqlitePersistence,
    create_persistence,
)

__all__ = [
    "AdaptationKind",
    "AdaptationRecord",
    "MemoryPayload",
    "AdaptationMemory",
    "load_memory",
    "save_memory",
    "MemoryPersistence",
    "InMemoryPersistence",
    "SqlitePersistence",
    "create_persistence",
]
