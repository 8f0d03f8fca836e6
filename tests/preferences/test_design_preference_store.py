import logging

import pytest

from dental_chart.models import UiPreference
from dental_chart.schemas.preference import DesignPreference, PreferenceState
from dental_chart.services.preferences import (
    DesignPreferenceStore,
    InMemoryStorage,
    SqlPreferenceStorage,
    StorageChannel,
    StorageUnavailableError,
    coerce_design,
)

KEY = "odontogram-design-preference"


def test_store_starts_initializing_and_defaults_to_traditional(preference_store):
    assert preference_store.state == PreferenceState.initializing
    assert preference_store.read() == DesignPreference.traditional
    assert preference_store.state == PreferenceState.ready


@pytest.mark.parametrize("design", list(DesignPreference))
def test_write_then_read_round_trips(preference_store, design: DesignPreference):
    preference_store.write(design.value)
    assert preference_store.read() == design


def test_initial_read_uses_stored_value():
    storage = InMemoryStorage(initial={KEY: "minimalist"})
    assert DesignPreferenceStore(storage, key=KEY).read() == DesignPreference.minimalist


@pytest.mark.parametrize("raw", ["neon", "", "TRADITIONAL GRID"])
def test_unrecognised_stored_value_resolves_to_traditional(raw: str, caplog):
    storage = InMemoryStorage(initial={KEY: raw})
    with caplog.at_level(logging.WARNING, logger="dental_chart.preferences"):
        assert DesignPreferenceStore(storage, key=KEY).read() == DesignPreference.traditional


def test_coerce_design_is_case_insensitive():
    assert coerce_design(" Anatomical ") == DesignPreference.anatomical
    assert coerce_design(None) == DesignPreference.traditional


def test_unknown_write_is_stored_as_traditional(preference_storage, preference_store):
    assert preference_store.write("holographic") == DesignPreference.traditional
    assert preference_storage.get(KEY) == "traditional"


def test_other_views_are_notified_but_writer_is_not(preference_storage, preference_store):
    other = DesignPreferenceStore(preference_storage, key=KEY, view_id="view-b")
    seen_a: list[DesignPreference] = []
    seen_b: list[DesignPreference] = []
    preference_store.subscribe(seen_a.append)
    other.subscribe(seen_b.append)

    preference_store.write("anatomical")

    assert seen_a == []
    assert seen_b == [DesignPreference.anatomical]
    assert other.read() == DesignPreference.anatomical


def test_unsubscribe_stops_notifications(preference_storage, preference_store):
    other = DesignPreferenceStore(preference_storage, key=KEY, view_id="view-b")
    seen: list[DesignPreference] = []
    unsubscribe = other.subscribe(seen.append)
    unsubscribe()
    preference_store.write("clinical")
    assert seen == []


def test_events_for_other_keys_are_ignored(preference_storage, preference_store):
    other = DesignPreferenceStore(preference_storage, key=KEY, view_id="view-b")
    seen: list[DesignPreference] = []
    other.subscribe(seen.append)
    preference_storage.set("sidebar-collapsed", "true", origin="view-c")
    assert seen == []


def test_storage_failure_keeps_value_in_memory(preference_storage, preference_store, caplog):
    preference_storage.available = False
    with caplog.at_level(logging.WARNING, logger="dental_chart.preferences"):
        assert preference_store.write("clinical") == DesignPreference.clinical
    assert preference_store.read() == DesignPreference.clinical
    assert "unavailable" in caplog.text


def test_storage_failure_on_first_read_uses_default(caplog):
    storage = InMemoryStorage(initial={KEY: "clinical"})
    storage.available = False
    store = DesignPreferenceStore(storage, key=KEY)
    with caplog.at_level(logging.WARNING, logger="dental_chart.preferences"):
        assert store.read() == DesignPreference.traditional
    assert store.state == PreferenceState.ready


def test_delayed_delivery_resolves_to_last_write():
    channel = StorageChannel(deferred=True)
    storage = InMemoryStorage(channel=channel)
    view_a = DesignPreferenceStore(storage, key=KEY, view_id="view-a")
    view_b = DesignPreferenceStore(storage, key=KEY, view_id="view-b")
    view_c = DesignPreferenceStore(storage, key=KEY, view_id="view-c")
    seen_c: list[DesignPreference] = []
    view_c.subscribe(seen_c.append)

    view_a.write("anatomical")
    view_b.write("clinical")
    assert channel.pending == 2
    assert channel.drain() == 2

    assert view_a.read() == DesignPreference.clinical
    assert view_b.read() == DesignPreference.clinical
    assert view_c.read() == DesignPreference.clinical
    assert seen_c == [DesignPreference.anatomical, DesignPreference.clinical]
    assert storage.get(KEY) == "clinical"


def test_sql_storage_persists_across_stores(session_factory):
    storage = SqlPreferenceStorage(session_factory)
    DesignPreferenceStore(storage, key=KEY, view_id="view-a").write("interactive")
    DesignPreferenceStore(storage, key=KEY, view_id="view-a").write("minimalist")

    assert DesignPreferenceStore(storage, key=KEY, view_id="view-b").read() == DesignPreference.minimalist
    with session_factory() as db:
        row = db.query(UiPreference).filter(UiPreference.key == KEY).one()
        assert row.value == "minimalist"
        assert row.revision == 2


def test_sql_storage_errors_surface_as_storage_unavailable(db_engine, session_factory):
    storage = SqlPreferenceStorage(session_factory)
    UiPreference.__table__.drop(db_engine)
    with pytest.raises(StorageUnavailableError):
        storage.get(KEY)
    with pytest.raises(StorageUnavailableError):
        storage.put(KEY, "clinical")


def test_sql_storage_failure_is_absorbed_by_store(db_engine, session_factory):
    UiPreference.__table__.drop(db_engine)
    store = DesignPreferenceStore(SqlPreferenceStorage(session_factory), key=KEY)
    assert store.read() == DesignPreference.traditional
    assert store.write("anatomical") == DesignPreference.anatomical
    assert store.read() == DesignPreference.anatomical
