"""Exception types raised inside the adaptive engine.

None of these escape into the host application; they mark failures at
the collaborator seams where the engine degrades to "no adaptation".
"""


class AdaptiveEngineError(Exception):
    """Base class for adaptive engine failures."""


class MemoryCorruptionError(AdaptiveEngineError):
    """Persisted adaptation memory could not be parsed."""
