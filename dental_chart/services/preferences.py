from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from dental_chart.core.settings import settings
from dental_chart.db.session import SessionLocal
from dental_chart.models.ui_preference import UiPreference
from dental_chart.schemas.preference import DEFAULT_DESIGN, DesignPreference, PreferenceState

logger = logging.getLogger("dental_chart.preferences")

PreferenceListener = Callable[[DesignPreference], None]


class StorageUnavailableError(RuntimeError):
    pass


@dataclass(frozen=True)
class StorageEvent:
    key: str
    old_value: str | None
    new_value: str | None
    origin: str
    sequence: int


class StorageChannel:
    """Broadcasts preference writes to every open view except the writer.

    Events are stamped with an increasing sequence number and delivered in
    write order. In deferred mode they queue until ``drain()`` is called.
    """

    def __init__(self, deferred: bool = False):
        self.deferred = deferred
        self._sequence = 0
        self._subscribers: dict[str, list[Callable[[StorageEvent], None]]] = {}
        self._backlog: deque[StorageEvent] = deque()

    def subscribe(self, view_id: str, callback: Callable[[StorageEvent], None]) -> Callable[[], None]:
        self._subscribers.setdefault(view_id, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(view_id, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._subscribers.pop(view_id, None)

        return unsubscribe

    def publish(self, key: str, old_value: str | None, new_value: str | None, origin: str) -> StorageEvent:
        self._sequence += 1
        event = StorageEvent(
            key=key, old_value=old_value, new_value=new_value, origin=origin, sequence=self._sequence
        )
        if self.deferred:
            self._backlog.append(event)
        else:
            self._deliver(event)
        return event

    def drain(self) -> int:
        delivered = 0
        while self._backlog:
            self._deliver(self._backlog.popleft())
            delivered += 1
        return delivered

    @property
    def pending(self) -> int:
        return len(self._backlog)

    def _deliver(self, event: StorageEvent) -> None:
        for view_id, callbacks in list(self._subscribers.items()):
            if view_id == event.origin:
                continue
            for callback in list(callbacks):
                callback(event)


class PreferenceStorage(ABC):
    def __init__(self, channel: StorageChannel | None = None):
        self.channel = channel or StorageChannel()

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value or None; raise StorageUnavailableError on failure."""

    @abstractmethod
    def put(self, key: str, value: str) -> str | None:
        """Persist a value and return the previous one."""

    def set(self, key: str, value: str, origin: str) -> StorageEvent:
        previous = self.put(key, value)
        return self.channel.publish(key, previous, value, origin)


class InMemoryStorage(PreferenceStorage):
    """Process-local key/value area shared by every view using the same instance."""

    def __init__(self, channel: StorageChannel | None = None, initial: dict[str, str] | None = None):
        super().__init__(channel)
        self._values: dict[str, str] = dict(initial or {})
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise StorageUnavailableError("In-memory preference storage is unavailable")

    def get(self, key: str) -> str | None:
        self._check()
        return self._values.get(key)

    def put(self, key: str, value: str) -> str | None:
        self._check()
        previous = self._values.get(key)
        self._values[key] = value
        return previous


class SqlPreferenceStorage(PreferenceStorage):
    def __init__(self, session_factory: sessionmaker, channel: StorageChannel | None = None):
        super().__init__(channel)
        self.session_factory = session_factory

    def get(self, key: str) -> str | None:
        try:
            with self.session_factory() as db:
                row = db.scalar(select(UiPreference).where(UiPreference.key == key))
                return row.value if row else None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Could not read preference {key!r}") from exc

    def put(self, key: str, value: str) -> str | None:
        db: Session = self.session_factory()
        try:
            row = db.scalar(select(UiPreference).where(UiPreference.key == key))
            previous = row.value if row else None
            if row is None:
                row = UiPreference(key=key, value=value, revision=1)
            else:
                row.value = value
                row.revision = (row.revision or 0) + 1
            db.add(row)
            db.commit()
            return previous
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageUnavailableError(f"Could not write preference {key!r}") from exc
        finally:
            db.close()


def coerce_design(value, default: DesignPreference = DEFAULT_DESIGN) -> DesignPreference:
    if isinstance(value, DesignPreference):
        return value
    if value is None:
        return default
    try:
        return DesignPreference(str(value).strip().lower())
    except ValueError:
        logger.warning("Unknown design preference %r; using %s", value, default.value)
        return default


class DesignPreferenceStore:
    """The persisted layout choice for one view.

    Starts ``initializing`` and becomes ``ready`` on the first read or write.
    Storage failures are logged and the in-memory value is kept.
    """

    def __init__(
        self,
        storage: PreferenceStorage,
        *,
        key: str | None = None,
        default: DesignPreference | str = DEFAULT_DESIGN,
        view_id: str | None = None,
    ):
        self.storage = storage
        self.key = key or settings.design_preference_key
        self.default = coerce_design(default)
        self.view_id = view_id or uuid.uuid4().hex
        self._state = PreferenceState.initializing
        self._value = self.default
        self._last_sequence = 0
        self._listeners: list[PreferenceListener] = []
        self._detach = storage.channel.subscribe(self.view_id, self._on_storage_event)

    @property
    def state(self) -> PreferenceState:
        return self._state

    def read(self) -> DesignPreference:
        if self._state == PreferenceState.initializing:
            self._initialize()
        return self._value

    def write(self, value) -> DesignPreference:
        design = coerce_design(value, self.default)
        self._value = design
        self._state = PreferenceState.ready
        try:
            event = self.storage.set(self.key, design.value, origin=self.view_id)
        except StorageUnavailableError as exc:
            logger.warning("Preference storage unavailable; keeping %s in memory: %s", design.value, exc)
            return design
        self._last_sequence = max(self._last_sequence, event.sequence)
        return design

    def subscribe(self, listener: PreferenceListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._detach()
        self._listeners.clear()

    def _initialize(self) -> None:
        try:
            raw = self.storage.get(self.key)
        except StorageUnavailableError as exc:
            logger.warning("Preference storage unavailable; using %s: %s", self.default.value, exc)
            raw = None
        self._value = coerce_design(raw, self.default)
        self._state = PreferenceState.ready
        logger.info("Design preference ready: %s", self._value.value)

    def _on_storage_event(self, event: StorageEvent) -> None:
        if event.key != self.key or event.new_value is None:
            return
        if event.sequence <= self._last_sequence:
            logger.debug("Dropping stale preference event #%s", event.sequence)
            return
        self._last_sequence = event.sequence
        self._value = coerce_design(event.new_value, self.default)
        self._state = PreferenceState.ready
        for listener in list(self._listeners):
            listener(self._value)


_shared_channel = StorageChannel()


@lru_cache
def get_preference_storage() -> PreferenceStorage:
    return SqlPreferenceStorage(SessionLocal, channel=_shared_channel)


@lru_cache
def get_design_preference_store() -> DesignPreferenceStore:
    return DesignPreferenceStore(
        get_preference_storage(),
        key=settings.design_preference_key,
        default=settings.default_design,
    )
