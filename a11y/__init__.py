"""
Adaptive Accessibility Engine.

Watches how a user interacts with a UI surface and proposes reversible
accessibility adaptations (text scaling, magnifier, night / inverse
contrast, narration) that the user can keep or undo.
"""

from a11y.engine import AdaptiveEngine, create_adaptive_engine
from a11y.memory import AdaptationKind, AdaptationMemory
from a11y.settings_store import ConfigurationSnapshot, InMemoryConfigurationStore
from a11y.confirmation import ProposalOutcome, ProposalState
from a11y.detection import ElementRef

__all__ = [
    "AdaptiveEngine",
    "create_adaptive_engine",
    "AdaptationKind",
    "AdaptationMemory",
    "ConfigurationSnapshot",
    "InMemoryConfigurationStore",
    "ProposalOutcome",
    "ProposalState",
    "ElementRef",
]
