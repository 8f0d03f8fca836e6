from __future__ import annotations

import logging
from collections.abc import Mapping

from pydantic import ValidationError

from dental_chart.schemas.chart import (
    ToothRecord,
    TreatmentEntry,
    TreatmentStatus,
    is_valid_tooth_number,
)

logger = logging.getLogger("dental_chart.store")


def _coerce_tooth_key(key) -> int | None:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    try:
        return int(str(key).strip())
    except (TypeError, ValueError):
        return None


class ToothRecordStore:
    """In-memory chart snapshot keyed by universal tooth number.

    Absence of a record means the tooth is healthy. Out-of-range numbers and
    malformed records are logged and skipped; they never abort a load.
    """

    def __init__(self, records: Mapping | None = None):
        self._records: dict[int, ToothRecord] = {}
        if records:
            self.load(records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, number) -> bool:
        return number in self._records

    def get(self, number: int) -> ToothRecord:
        record = self._records.get(number)
        if record is not None:
            return record
        if not is_valid_tooth_number(number):
            logger.warning("Tooth %r is out of range; returning a healthy placeholder", number)
            return ToothRecord.model_construct(number=number)
        return ToothRecord(number=number)

    def has_record(self, number: int) -> bool:
        return number in self._records

    def set(self, number: int, record: ToothRecord) -> bool:
        if not is_valid_tooth_number(number):
            logger.warning("Ignoring record for out-of-range tooth %r", number)
            return False
        if record.number != number:
            logger.warning(
                "Ignoring record for tooth %s stored under key %s", record.number, number
            )
            return False
        self._records[number] = record
        return True

    def load(self, snapshot: Mapping) -> int:
        loaded = 0
        for key, value in snapshot.items():
            number = _coerce_tooth_key(key)
            if number is None or not is_valid_tooth_number(number):
                logger.warning("Ignoring record for out-of-range tooth %r", key)
                continue
            if isinstance(value, ToothRecord):
                record = value.model_copy(deep=True)
            elif value is not None and not isinstance(value, Mapping):
                logger.warning("Ignoring malformed record for tooth %s: %r", number, value)
                continue
            else:
                payload = dict(value or {})
                payload.setdefault("number", number)
                try:
                    record = ToothRecord.model_validate(payload)
                except ValidationError as exc:
                    logger.warning(
                        "Ignoring malformed record for tooth %s: %s", number, exc.errors()
                    )
                    continue
            if self.set(number, record):
                loaded += 1
        return loaded

    def records(self) -> list[ToothRecord]:
        return [self._records[number] for number in sorted(self._records)]

    def snapshot(self) -> dict[int, ToothRecord]:
        return {number: record.model_copy(deep=True) for number, record in sorted(self._records.items())}

    def add_treatment(self, number: int, entry: TreatmentEntry) -> bool:
        if not is_valid_tooth_number(number):
            logger.warning("Ignoring treatment for out-of-range tooth %r", number)
            return False
        record = self.get(number)
        self._records[number] = record.model_copy(update={"treatments": [*record.treatments, entry]})
        return True

    def update_treatment_status(self, number: int, code: str, status: TreatmentStatus) -> bool:
        record = self._records.get(number)
        if record is None:
            return False
        treatments = list(record.treatments)
        for index in range(len(treatments) - 1, -1, -1):
            if treatments[index].code == code:
                treatments[index] = treatments[index].model_copy(update={"status": status})
                self._records[number] = record.model_copy(update={"treatments": treatments})
                return True
        logger.info("No treatment %s recorded on tooth %s; status unchanged", code, number)
        return False

    def add_note(self, number: int, note: str) -> bool:
        text = note.strip()
        if not text or not is_valid_tooth_number(number):
            return False
        record = self.get(number)
        self._records[number] = record.model_copy(update={"notes": [*record.notes, text]})
        return True
