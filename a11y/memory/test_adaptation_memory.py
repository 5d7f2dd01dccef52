import logging
import time

import pytest

from a11y.errors import MemoryCorruptionError
from a11y.memory.adaptation_memory import AdaptationMemory, load_memory, save_memory
from a11y.memory.memory_models import AdaptationKind
from a11y.memory.memory_store import InMemoryPersistence


class BrokenPersistence:
    def load(self):
        raise OSError("storage quota exceeded")

    def save(self, document):
        raise OSError("storage quota exceeded")


def test_fresh_memory_is_eligible_for_everything():
    memory = AdaptationMemory()
    assert all(memory.is_eligible(kind, now=0.0) for kind in AdaptationKind)


@pytest.mark.parametrize("elapsed, eligible", [
    (0.0, False),
    (150.0, False),
    (299.9, False),
    (300.0, True),
    (900.0, True),
])
def test_rejection_cooldown(elapsed, eligible):
    memory = AdaptationMemory(cooldown_period=300)
    memory.mark_rejected(AdaptationKind.SCALING, now=100.0)

    assert memory.is_eligible(AdaptationKind.SCALING, now=100.0 + elapsed) is eligible
    assert memory.is_eligible(AdaptationKind.MAGNIFIER, now=100.0)


def test_confirmed_kind_is_never_eligible_again():
    memory = AdaptationMemory()
    memory.mark_rejected(AdaptationKind.NARRATOR, now=0.0)
    memory.mark_applied(AdaptationKind.NARRATOR)

    record = memory.get(AdaptationKind.NARRATOR)
    assert record.applied_confirmed is True
    assert record.rejected_at is None
    assert not memory.is_eligible(AdaptationKind.NARRATOR, now=10_000.0)


def test_revocation_starts_cooldown_and_is_flagged():
    memory = AdaptationMemory()
    memory.mark_applied(AdaptationKind.NIGHT_MODE)
    memory.mark_revoked(AdaptationKind.NIGHT_MODE, now=50.0)

    record = memory.get(AdaptationKind.NIGHT_MODE)
    assert record.revoked_after_confirm is True
    assert record.rejected_at == 50.0
    assert not memory.is_applied(AdaptationKind.NIGHT_MODE)
    assert memory.cooldown_remaining(AdaptationKind.NIGHT_MODE, now=100.0) == 250.0


def test_default_clock_is_used_when_now_omitted():
    now = [1000.0]
    memory = AdaptationMemory(clock=lambda: now[0])
    memory.mark_rejected(AdaptationKind.SCALING)
    assert memory.get(AdaptationKind.SCALING).rejected_at == 1000.0

    now[0] += 300.0
    assert memory.is_eligible(AdaptationKind.SCALING)


def test_reset_forgets_everything():
    memory = AdaptationMemory()
    memory.mark_applied(AdaptationKind.SCALING)
    memory.mark_rejected(AdaptationKind.NARRATOR, now=0.0)

    memory.reset()
    assert len(memory) == 0
    assert memory.is_eligible(AdaptationKind.SCALING, now=0.0)


def test_saved_memory_loads_back_identically():
    persistence = InMemoryPersistence(key="k")
    memory = AdaptationMemory()
    memory.mark_applied(AdaptationKind.SCALING)
    memory.mark_revoked(AdaptationKind.NIGHT_MODE, now=12.5)

    assert save_memory(memory, persistence)
    restored = load_memory(persistence)

    assert restored.snapshot() == memory.snapshot()


def test_persisted_document_uses_kind_values():
    memory = AdaptationMemory()
    memory.mark_applied(AdaptationKind.NIGHT_MODE)
    assert '"nightMode"' in memory.to_json()


def test_parse_rejects_garbage():
    with pytest.raises(MemoryCorruptionError):
        AdaptationMemory.parse("{not json")


@pytest.mark.parametrize("document", [
    "{not json",
    '{"records": {"teleport": {"applied_confirmed": true}}}',
    '{"records": []}',
])
def test_malformed_document_loads_empty(document, caplog):
    persistence = InMemoryPersistence(key="k", backing={"k": document})

    with caplog.at_level(logging.ERROR):
        memory = load_memory(persistence)

    assert len(memory) == 0
    assert "malformed" in caplog.text


def test_missing_document_loads_empty():
    assert len(load_memory(InMemoryPersistence(key="k"))) == 0
    assert len(load_memory(None)) == 0


def test_unreadable_storage_fails_open(caplog):
    with caplog.at_level(logging.ERROR):
        memory = load_memory(BrokenPersistence())
    assert len(memory) == 0
    assert "Error loading memory" in caplog.text


def test_save_failure_is_reported_not_raised(caplog):
    memory = AdaptationMemory()
    with caplog.at_level(logging.ERROR):
        assert save_memory(memory, BrokenPersistence()) is False
    assert "Error saving memory" in caplog.text


def test_restored_cooldown_counts_from_original_rejection():
    persistence = InMemoryPersistence(key="k")
    memory = AdaptationMemory()
    memory.mark_rejected(AdaptationKind.SCALING, now=time.time() - 200.0)
    save_memory(memory, persistence)

    restored = load_memory(persistence)
    assert 0.0 < restored.cooldown_remaining(AdaptationKind.SCALING) <= 100.0

    expired = AdaptationMemory()
    expired.mark_rejected(AdaptationKind.SCALING, now=time.time() - 301.0)
    save_memory(expired, persistence)
    assert load_memory(persistence).is_eligible(AdaptationKind.SCALING)
