import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dental_chart.deps import get_preference_store
from dental_chart.main import app
from dental_chart.models import Base
from dental_chart.services.preferences import DesignPreferenceStore, InMemoryStorage, StorageChannel
from dental_chart.services.sample_chart import sample_snapshot
from dental_chart.services.tooth_store import ToothRecordStore

PREFERENCE_KEY = "odontogram-design-preference"


@pytest.fixture
def sample_store():
    return ToothRecordStore(sample_snapshot())


@pytest.fixture
def channel():
    return StorageChannel()


@pytest.fixture
def preference_storage(channel):
    return InMemoryStorage(channel=channel)


@pytest.fixture
def preference_store(preference_storage):
    store = DesignPreferenceStore(preference_storage, key=PREFERENCE_KEY, view_id="view-a")
    yield store
    store.close()


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def api_client(preference_store):
    app.dependency_overrides[get_preference_store] = lambda: preference_store
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
