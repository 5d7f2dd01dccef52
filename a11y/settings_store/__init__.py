"""
Settings Store Module.

Snapshot of the host's accessibility configuration, the store contract the
engine drives, and an in-memory reference store.
"""

from a11y.settings_store.configuration import (
    ConfigurationSnapshot,
    ConfigurationStore,
    InMemoryConfigurationStore,
    NEUTRAL_MULTIPLIER,
    restore_fields,
)

__all__ = [
    "ConfigurationSnapshot",
    "ConfigurationStore",
    "InMemoryConfigurationStore",
    "NEUTRAL_MULTIPLIER",
    "restore_fields",
]
