"""
Shared fixtures for the adaptive engine tests.

Everything runs on the SimulatedPlatform clock; the dialog and narrator are
recording fakes so tests can answer prompts and inspect speech.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

import pytest

from a11y.confirmation.confirmation_workflow import ConfirmationWorkflow
from a11y.detection.element_classifier import ElementRef
from a11y.engine.adaptive_engine import AdaptiveEngine
from a11y.memory.adaptation_memory import AdaptationMemory
from a11y.memory.memory_store import InMemoryPersistence
from a11y.platform.simulated_platform import SimulatedPlatform
from a11y.settings_store.configuration import InMemoryConfigurationStore


@dataclass
class Prompt:
    kind: str
    message: str
    on_accept: Callable[[], None]
    on_reject: Callable[[], None]


class RecordingDialog:
    def __init__(self):
        self.prompts: List[Prompt] = []
        self.dismissed: List[str] = []

    def show(self, kind, message, on_accept, on_reject):
        self.prompts.append(Prompt(kind, message, on_accept, on_reject))

    def dismiss(self, kind):
        self.dismissed.append(kind)

    def kinds(self) -> List[str]:
        return [p.kind for p in self.prompts]

    def latest(self, kind: str) -> Optional[Prompt]:
        for prompt in reversed(self.prompts):
            if prompt.kind == kind:
                return prompt
        return None

    def accept(self, kind: str) -> None:
        self.latest(kind).on_accept()

    def reject(self, kind: str) -> None:
        self.latest(kind).on_reject()


class RecordingNarrator:
    def __init__(self):
        self.spoken: List[str] = []

    def speak(self, message):
        self.spoken.append(message)


# Sample elements
TEXT = ElementRef("P", text="A paragraph long enough to read", own_text="A paragraph long enough to read")
OTHER_TEXT = ElementRef("LI", own_text="Another list entry with text")
BUTTON = ElementRef("BUTTON", text="Save")
CANVAS = ElementRef("CANVAS")
EMPTY_DIV = ElementRef("DIV")


@pytest.fixture
def platform():
    return SimulatedPlatform(start_time=1000.0)


@pytest.fixture
def store():
    return InMemoryConfigurationStore()


@pytest.fixture
def dialog():
    return RecordingDialog()


@pytest.fixture
def narrator():
    return RecordingNarrator()


@pytest.fixture
def persistence():
    return InMemoryPersistence(key="test_memory")


@pytest.fixture
def memory(platform):
    return AdaptationMemory(clock=platform.now)


@pytest.fixture
def workflow(store, dialog, memory, platform, narrator, persistence):
    return ConfirmationWorkflow(
        store=store,
        dialog=dialog,
        memory=memory,
        platform=platform,
        narrator=narrator,
        persistence=persistence,
    )


@pytest.fixture
def make_engine(platform, store, dialog, narrator, persistence):
    def _make(**overrides):
        kwargs = dict(
            platform=platform,
            store=store,
            dialog=dialog,
            narrator=narrator,
            persistence=persistence,
        )
        kwargs.update(overrides)
        return AdaptiveEngine(**kwargs)
    return _make


def dwell(platform, element, seconds=1.5):
    """Rest the pointer on ``element`` long enough to count, then leave."""
    platform.hover(element)
    platform.advance(seconds)
    platform.leave(element)
