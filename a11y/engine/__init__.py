"""
Engine Module.

Lifecycle and event routing for the adaptive accessibility engine.
"""

from a11y.engine.adaptive_engine import AdaptiveEngine, create_adaptive_engine

__all__ = ["AdaptiveEngine", "create_adaptive_engine"]
