import datetime
import logging

import pytest
from pydantic import ValidationError

from dental_chart.schemas.chart import Condition, SurfaceCode, ToothRecord, TreatmentEntry, TreatmentStatus
from dental_chart.services.tooth_store import ToothRecordStore


def _treatment(code: str = "D2150", status: TreatmentStatus = TreatmentStatus.planned) -> TreatmentEntry:
    return TreatmentEntry(
        code=code,
        description="Resin composite - two surfaces",
        surface="MO",
        date=datetime.date(2024, 2, 10),
        performed_by="Dr. Johnson",
        status=status,
    )


def test_get_missing_tooth_returns_default_healthy_record():
    store = ToothRecordStore()
    record = store.get(12)
    assert record.number == 12
    assert record.condition == Condition.healthy
    assert record.is_default()
    assert not store.has_record(12)


def test_set_out_of_range_is_logged_no_op(caplog):
    store = ToothRecordStore()
    with caplog.at_level(logging.WARNING, logger="dental_chart.store"):
        assert store.set(33, ToothRecord.model_construct(number=33)) is False
    assert len(store) == 0
    assert "out-of-range" in caplog.text


def test_set_rejects_record_stored_under_another_number():
    store = ToothRecordStore()
    assert store.set(3, ToothRecord(number=4)) is False
    assert 3 not in store


def test_load_skips_invalid_entries_and_keeps_the_rest(caplog):
    snapshot = {
        "14": {"condition": "cavity", "surfaces": ["M", "O"]},
        "40": {"condition": "cavity"},
        "abc": {"condition": "filled"},
        "0": {"condition": "filled"},
        "5": {"condition": "filled", "surfaces": ["X"]},
        3: ToothRecord(number=3, condition=Condition.crown),
    }
    store = ToothRecordStore()
    with caplog.at_level(logging.WARNING, logger="dental_chart.store"):
        loaded = store.load(snapshot)
    assert loaded == 2
    assert [record.number for record in store.records()] == [3, 14]
    assert store.get(14).surfaces == [SurfaceCode.M, SurfaceCode.O]


@pytest.mark.parametrize("bad_value", [{"condition": "cavity", "surfaces": 5}, {"surfaces": True}, ["cavity"], 7])
def test_load_skips_badly_shaped_records_and_keeps_the_rest(bad_value, caplog):
    store = ToothRecordStore()
    with caplog.at_level(logging.WARNING, logger="dental_chart.store"):
        loaded = store.load({"14": bad_value, "3": {"condition": "filled"}})
    assert loaded == 1
    assert not store.has_record(14)
    assert store.get(3).condition == Condition.filled
    assert "malformed record for tooth 14" in caplog.text


@pytest.mark.parametrize("surfaces", [5, True, {"M": 1}])
def test_non_sequence_surfaces_fail_validation(surfaces):
    with pytest.raises(ValidationError):
        ToothRecord(number=14, surfaces=surfaces)


def test_unknown_condition_renders_as_healthy_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="dental_chart.schemas"):
        store = ToothRecordStore({"5": {"condition": "chipped"}})
    assert store.get(5).condition == Condition.healthy
    assert "chipped" in caplog.text


def test_surfaces_are_an_ordered_set():
    record = ToothRecord(number=14, condition="cavity", surfaces=["O", "M", "O", "m"])
    assert record.surfaces == [SurfaceCode.O, SurfaceCode.M]
    assert record.surface_tag == "OM"


def test_treatment_status_update_happens_in_place():
    store = ToothRecordStore({14: {"condition": "cavity", "surfaces": ["M", "O"]}})
    store.add_treatment(14, _treatment())

    assert store.update_treatment_status(14, "D2150", TreatmentStatus.completed) is True

    treatments = store.get(14).treatments
    assert len(treatments) == 1
    assert treatments[0].status == TreatmentStatus.completed


def test_treatment_status_update_targets_most_recent_entry():
    store = ToothRecordStore()
    store.add_treatment(8, _treatment("D2161", TreatmentStatus.completed))
    store.add_treatment(8, _treatment("D2161", TreatmentStatus.planned))

    store.update_treatment_status(8, "D2161", TreatmentStatus.in_progress)

    statuses = [entry.status for entry in store.get(8).treatments]
    assert statuses == [TreatmentStatus.completed, TreatmentStatus.in_progress]


def test_treatment_status_update_for_unknown_code_is_no_op():
    store = ToothRecordStore()
    store.add_treatment(8, _treatment("D2161"))
    assert store.update_treatment_status(8, "D9999", TreatmentStatus.completed) is False
    assert store.update_treatment_status(9, "D2161", TreatmentStatus.completed) is False


def test_add_note_appends_trimmed_text():
    store = ToothRecordStore()
    assert store.add_note(8, "  Sensitive to cold ") is True
    assert store.add_note(8, "   ") is False
    assert store.add_note(0, "nope") is False
    assert store.get(8).notes == ["Sensitive to cold"]


def test_snapshot_is_detached_from_the_store():
    store = ToothRecordStore({8: {"condition": "filled", "surfaces": ["O"]}})
    snapshot = store.snapshot()
    snapshot[8].notes.append("changed")
    assert store.get(8).notes == []
