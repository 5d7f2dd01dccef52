"""
Accessibility configuration: snapshot value and store contract.

The configuration itself is owned by the host. The engine reads it, mutates
it through individual setters, and subscribes to change notifications.
``InMemoryConfigurationStore`` is the reference store used by tests and by
hosts without their own settings layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Callable, Dict, List, Protocol

logger = logging.getLogger(__name__)

NEUTRAL_MULTIPLIER = 1.0


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """Full copy of the adaptive-relevant configuration."""
    font_scale: float = NEUTRAL_MULTIPLIER
    spacing: float = NEUTRAL_MULTIPLIER
    magnifier_enabled: bool = False
    magnifier_zoom: float = 2.0
    night_mode: bool = False
    inverse_mode: bool = False
    narration_enabled: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


Listener = Callable[[ConfigurationSnapshot], None]


class ConfigurationStore(Protocol):
    def read(self) -> ConfigurationSnapshot: ...
    def set_font_scale(self, value: float) -> None: ...
    def set_spacing(self, value: float) -> None: ...
    def set_magnifier_enabled(self, enabled: bool) -> None: ...
    def set_magnifier_zoom(self, zoom: float) -> None: ...
    def set_night_mode(self, enabled: bool) -> None: ...
    def set_inverse_mode(self, enabled: bool) -> None: ...
    def set_narration_enabled(self, enabled: bool) -> None: ...
    def subscribe(self, listener: Listener) -> Callable[[], None]: ...


# Setter used to write each snapshot field back into a store.
FIELD_SETTERS: Dict[str, str] = {
    "font_scale": "set_font_scale",
    "spacing": "set_spacing",
    "magnifier_enabled": "set_magnifier_enabled",
    "magnifier_zoom": "set_magnifier_zoom",
    "night_mode": "set_night_mode",
    "inverse_mode": "set_inverse_mode",
    "narration_enabled": "set_narration_enabled",
}

# night_mode before inverse_mode: host stores may reset inverse mode when night mode changes.
RESTORE_ORDER = (
    "font_scale",
    "spacing",
    "magnifier_enabled",
    "magnifier_zoom",
    "night_mode",
    "inverse_mode",
    "narration_enabled",
)


def restore_fields(store: ConfigurationStore, snapshot: ConfigurationSnapshot, names) -> None:
    """Write the named fields of ``snapshot`` back into ``store``."""
    wanted = set(names)
    for name in RESTORE_ORDER:
        if name in wanted:
            getattr(store, FIELD_SETTERS[name])(getattr(snapshot, name))


class InMemoryConfigurationStore:
    """
    Observable configuration held in process.

    Listeners are notified after each effective change, not on subscribe.
    A listener that raises is logged and skipped.
    """

    def __init__(self, initial: ConfigurationSnapshot = None):
        self._state = initial or ConfigurationSnapshot()
        self._listeners: List[Listener] = []

    def read(self) -> ConfigurationSnapshot:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def _update(self, **changes) -> None:
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                logger.error("[ConfigurationStore] Listener failed: %s", e)

    # -------------------------------------------------------------------------
    # SETTERS
    # -------------------------------------------------------------------------

    def set_font_scale(self, value: float) -> None:
        self._update(font_scale=value)

    def set_spacing(self, value: float) -> None:
        self._update(spacing=value)

    def set_magnifier_enabled(self, enabled: bool) -> None:
        self._update(magnifier_enabled=enabled)

    def set_magnifier_zoom(self, zoom: float) -> None:
        self._update(magnifier_zoom=zoom)

    def set_night_mode(self, enabled: bool) -> None:
        self._update(night_mode=enabled)

    def set_inverse_mode(self, enabled: bool) -> None:
        self._update(inverse_mode=enabled)

    def set_narration_enabled(self, enabled: bool) -> None:
        self._update(narration_enabled=enabled)

    def toggle_night_mode(self) -> None:
        # Switching night mode on starts from the plain night palette.
        if self._state.night_mode:
            self._update(night_mode=False)
        else:
            self._update(night_mode=True, inverse_mode=False)
