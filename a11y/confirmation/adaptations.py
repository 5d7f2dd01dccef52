"""
What each adaptation changes, and what the user is told about it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from a11y.memory.memory_models import AdaptationKind
from a11y.settings_store.configuration import ConfigurationStore

SCALED_FONT = 1.5
SCALED_SPACING = 1.2
MAGNIFIER_ZOOM = 2.0


@dataclass(frozen=True)
class AdaptationPlan:
    kind: AdaptationKind
    fields: Tuple[str, ...]                 # snapshot fields the change touches
    apply: Callable[[ConfigurationStore], None]
    prompt: str
    confirmed_notice: str
    rejected_notice: str


def _apply_scaling(store: ConfigurationStore) -> None:
    store.set_font_scale(SCALED_FONT)
    store.set_spacing(SCALED_SPACING)


def _apply_magnifier(store: ConfigurationStore) -> None:
    store.set_magnifier_enabled(True)
    store.set_magnifier_zoom(MAGNIFIER_ZOOM)


PLANS: Dict[AdaptationKind, AdaptationPlan] = {
    AdaptationKind.SCALING: AdaptationPlan(
        kind=AdaptationKind.SCALING,
        fields=("font_scale", "spacing"),
        apply=_apply_scaling,
        prompt="I made the text larger to make reading easier. Do you want to keep this change?",
        confirmed_notice="Text scaling kept",
        rejected_notice="Text scaling undone",
    ),
    AdaptationKind.MAGNIFIER: AdaptationPlan(
        kind=AdaptationKind.MAGNIFIER,
        fields=("magnifier_enabled", "magnifier_zoom"),
        apply=_apply_magnifier,
        prompt="I turned on the magnifier to help you. Do you want to keep this change?",
        confirmed_notice="Magnifier kept",
        rejected_notice="Magnifier turned off",
    ),
    AdaptationKind.NIGHT_MODE: AdaptationPlan(
        kind=AdaptationKind.NIGHT_MODE,
        fields=("night_mode", "inverse_mode"),   # host stores may couple the two
        apply=lambda store: store.set_night_mode(True),
        prompt="I turned on high contrast mode to improve visibility. Do you want to keep this change?",
        confirmed_notice="Night mode kept",
        rejected_notice="Night mode turned off",
    ),
    AdaptationKind.INVERSE_MODE: AdaptationPlan(
        kind=AdaptationKind.INVERSE_MODE,
        fields=("inverse_mode",),
        apply=lambda store: store.set_inverse_mode(True),
        prompt="I switched to inverse contrast for more visual comfort. Do you want to keep this change?",
        confirmed_notice="Inverse mode kept",
        rejected_notice="Inverse mode turned off",
    ),
    AdaptationKind.NARRATOR: AdaptationPlan(
        kind=AdaptationKind.NARRATOR,
        fields=("narration_enabled",),
        apply=lambda store: store.set_narration_enabled(True),
        prompt="I turned on text narration to help you find your way. Do you want to keep this change?",
        confirmed_notice="Narration kept",
        rejected_notice="Narration turned off",
    ),
}


def get_plan(kind: AdaptationKind) -> AdaptationPlan:
    return PLANS[AdaptationKind(kind)]
