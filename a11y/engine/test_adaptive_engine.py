import logging

import pytest

from a11y.engine.adaptive_engine import create_adaptive_engine
from a11y.memory.memory_models import AdaptationKind
from a11y.memory.memory_store import InMemoryPersistence, SqlitePersistence
from a11y.platform.platform_adapter import ALL_EVENT_TYPES
from a11y.settings_store.configuration import ConfigurationSnapshot, InMemoryConfigurationStore
from config.settings import Settings

from conftest import BUTTON, CANVAS, EMPTY_DIV, OTHER_TEXT, TEXT, dwell

CLUSTER = [(200, 200), (210, 195), (195, 210), (205, 203), (199, 198)]


@pytest.fixture
def engine(make_engine):
    engine = make_engine()
    engine.start()
    return engine


def click_cluster(platform, points, target=EMPTY_DIV, gap=0.5):
    for x, y in points:
        platform.click(x, y, target)
        platform.advance(gap)


# =============================================================================
# LIFECYCLE
# =============================================================================

def test_start_twice_attaches_listeners_once(make_engine, platform, caplog):
    engine = make_engine()
    engine.start()
    with caplog.at_level(logging.WARNING):
        engine.start()

    assert engine.is_active
    assert platform.listener_count() == len(ALL_EVENT_TYPES)
    assert "already active" in caplog.text


def test_stop_detaches_everything(engine, platform, caplog):
    platform.hover(TEXT)
    engine.stop()

    assert not engine.is_active
    assert platform.listener_count() == 0
    assert platform.pending_timers() == 0

    with caplog.at_level(logging.WARNING):
        engine.stop()
    assert "not active" in caplog.text


def test_stopped_engine_ignores_input(engine, platform, dialog):
    engine.stop()
    for _ in range(4):
        dwell(platform, TEXT)
    click_cluster(platform, CLUSTER)
    platform.advance(30.0)

    assert dialog.prompts == []


def test_destroy_withdraws_open_proposals(engine, platform, store, persistence, caplog):
    for element in (TEXT, OTHER_TEXT, TEXT):
        dwell(platform, element)
    assert store.read().font_scale == 1.5

    engine.destroy()

    assert store.read() == ConfigurationSnapshot()
    assert len(engine.memory) == 0
    assert platform.listener_count() == 0
    assert platform.pending_timers() == 0
    assert persistence.load() is not None

    with caplog.at_level(logging.WARNING):
        engine.start()
    assert not engine.is_active
    assert "destroyed" in caplog.text


# =============================================================================
# RULE 1: VISUAL ACUITY
# =============================================================================

def test_repeated_reading_dwells_propose_scaling(engine, platform, store, dialog):
    for element in (TEXT, OTHER_TEXT, TEXT):
        dwell(platform, element)

    assert dialog.kinds() == ["scaling"]
    assert store.read().font_scale == 1.5

    dialog.reject("scaling")
    assert store.read().font_scale == 1.0
    assert not engine.memory.is_eligible(AdaptationKind.SCALING)

    for element in (TEXT, OTHER_TEXT, TEXT):
        dwell(platform, element)
    assert dialog.kinds().count("scaling") == 1


def test_dwell_on_non_text_surfaces_is_ignored(engine, platform, dialog):
    for element in (CANVAS, EMPTY_DIV, CANVAS, EMPTY_DIV):
        dwell(platform, element)

    assert engine.buffers.hovers == []
    assert dialog.prompts == []


def test_leaving_early_cancels_the_dwell(engine, platform):
    platform.hover(TEXT)
    platform.advance(1.0)
    platform.leave(TEXT)
    platform.advance(1.0)

    assert engine.buffers.hovers == []


def test_moving_onto_non_text_cancels_the_dwell(engine, platform):
    platform.hover(TEXT)
    platform.advance(1.0)
    platform.hover(EMPTY_DIV)
    platform.advance(1.0)

    assert engine.buffers.hovers == []


def test_reentering_same_target_keeps_the_dwell_running(engine, platform):
    platform.hover(TEXT)
    platform.advance(1.0)
    platform.hover(TEXT)
    platform.advance(0.5)

    assert [h.target_ref for h in engine.buffers.hovers] == [TEXT]


def test_browser_zoom_leads_to_magnifier(engine, platform, store, dialog):
    platform.zoom(1.25)
    assert dialog.kinds() == ["scaling"]

    dialog.accept("scaling")
    platform.advance(1.0)

    assert dialog.kinds() == ["scaling", "magnifier"]
    assert store.read().magnifier_enabled is True


# =============================================================================
# RULE 2: CONTRAST CASCADE
# =============================================================================

def test_clustered_failed_clicks_propose_night_mode(engine, platform, store, dialog):
    click_cluster(platform, CLUSTER)

    assert dialog.kinds() == ["nightMode"]
    assert store.read().night_mode is True


def test_clicks_on_buttons_are_not_failures(engine, platform, dialog):
    click_cluster(platform, CLUSTER, target=BUTTON)
    assert dialog.prompts == []


def test_quick_night_mode_revocation_offers_inverse_mode(engine, platform, store, dialog):
    click_cluster(platform, CLUSTER[:4])
    dialog.accept("nightMode")

    platform.advance(10.0)
    store.set_night_mode(False)

    assert "inverseMode" in dialog.kinds()
    assert store.read().inverse_mode is True
    assert engine.memory.get(AdaptationKind.NIGHT_MODE).revoked_after_confirm


# =============================================================================
# RULE 3: INACTIVITY
# =============================================================================

def test_inactivity_proposes_narration(engine, platform, store, dialog):
    platform.advance(9.0)
    assert dialog.prompts == []

    platform.advance(1.0)
    assert dialog.kinds() == ["narrator"]
    assert store.read().narration_enabled is True


def test_any_input_restarts_inactivity(engine, platform, dialog):
    platform.advance(9.0)
    platform.key()
    platform.advance(9.0)
    platform.touch()
    platform.advance(9.0)
    platform.move(5, 5)
    platform.advance(9.0)
    assert dialog.prompts == []

    platform.advance(1.0)
    assert dialog.kinds() == ["narrator"]


def test_hidden_page_does_not_count_as_inactive(engine, platform, dialog):
    platform.advance(9.0)
    platform.set_hidden(True)
    platform.advance(120.0)
    assert dialog.prompts == []

    platform.set_hidden(False)
    platform.advance(9.0)
    assert dialog.prompts == []

    platform.advance(1.0)
    assert dialog.kinds() == ["narrator"]


def test_restart_after_stopping_while_hidden_watches_inactivity(engine, platform, dialog):
    platform.set_hidden(True)
    engine.stop()
    platform.set_hidden(False)
    engine.start()

    platform.advance(10.0)
    assert dialog.kinds() == ["narrator"]


def test_inactivity_timer_fires_once_per_idle_period(make_engine, platform, dialog):
    store = InMemoryConfigurationStore(ConfigurationSnapshot(narration_enabled=True))
    engine = make_engine(store=store)
    engine.start()

    platform.advance(10.0)
    assert dialog.prompts == []
    assert platform.pending_timers() == 0


# =============================================================================
# ROUTES & MEMORY
# =============================================================================

def test_route_change_resets_detection_but_keeps_memory(engine, platform, dialog):
    engine.memory.mark_applied(AdaptationKind.NIGHT_MODE)
    dwell(platform, TEXT)
    dwell(platform, OTHER_TEXT)
    click_cluster(platform, CLUSTER[:2])

    platform.set_route("/settings")
    platform.move()

    assert engine.current_route == "/settings"
    assert engine.buffers.is_empty()
    assert engine.memory.is_applied(AdaptationKind.NIGHT_MODE)

    dwell(platform, TEXT)
    assert dialog.prompts == []


def test_explicit_route_hook(engine, platform):
    dwell(platform, TEXT)
    engine.on_route_change("/help")

    assert engine.current_route == "/help"
    assert engine.buffers.is_empty()


def test_preferences_survive_engine_rebuild(make_engine, platform, dialog):
    first = make_engine()
    first.start()
    for element in (TEXT, OTHER_TEXT, TEXT):
        dwell(platform, element)
    dialog.reject("scaling")
    first.destroy()

    second = make_engine()
    second.start()
    for element in (TEXT, OTHER_TEXT, TEXT):
        dwell(platform, element)

    assert dialog.kinds() == ["scaling"]
    assert not second.memory.is_eligible(AdaptationKind.SCALING)


def test_reset_memory(engine):
    engine.memory.mark_rejected(AdaptationKind.SCALING)
    engine.reset_memory()

    assert len(engine.memory) == 0
    assert engine.memory.is_eligible(AdaptationKind.SCALING)


class BrokenClassifier:
    def has_qualifying_text(self, element):
        raise ValueError("detached node")

    def is_interactive(self, element):
        raise ValueError("detached node")


def test_classifier_errors_are_contained(make_engine, platform, dialog):
    engine = make_engine(classifier=BrokenClassifier())
    engine.start()

    for element in (TEXT, OTHER_TEXT, TEXT):
        dwell(platform, element)
    click_cluster(platform, CLUSTER)

    assert dialog.prompts == []


def test_status(engine, platform):
    dwell(platform, TEXT)
    status = engine.status()

    assert status["active"] is True
    assert status["route"] == "/"
    assert status["hovers"] == 1
    assert status["pending"] == []
    assert status["memory"] == {}


# =============================================================================
# FACTORY
# =============================================================================

def test_factory_applies_settings(platform, store, dialog, narrator):
    app_settings = Settings(confirmation_timeout=5.0, speak_prompts=False)
    engine = create_adaptive_engine(platform, store, dialog, narrator=narrator, app_settings=app_settings)
    engine.start()

    assert isinstance(engine.persistence, InMemoryPersistence)
    platform.advance(10.0)
    platform.advance(5.0)

    assert engine.memory.is_applied(AdaptationKind.NARRATOR)
    assert narrator.spoken == ["Narration kept"]


def test_factory_uses_sqlite_when_configured(platform, store, dialog, tmp_path):
    app_settings = Settings(sqlite_path=str(tmp_path / "a11y.db"), memory_session_key="kiosk_profile")
    engine = create_adaptive_engine(platform, store, dialog, app_settings=app_settings)

    assert isinstance(engine.persistence, SqlitePersistence)
    assert engine.persistence.key == "kiosk_profile"


def test_factory_uses_session_key_from_given_settings(platform, store, dialog):
    app_settings = Settings(memory_session_key="kiosk_profile")
    engine = create_adaptive_engine(platform, store, dialog, app_settings=app_settings)

    assert isinstance(engine.persistence, InMemoryPersistence)
    assert engine.persistence.key == "kiosk_profile"
