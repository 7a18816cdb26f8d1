import pytest
from fastapi.testclient import TestClient

from apikeys.ApiKeyService import ApiKeyService
from database.DatabaseProvider import DatabaseProvider
from database.models import NewCellTower
from database.RecordStore import RecordStore
from towers.seed import seed_if_empty
from towers.TowerSearchEngine import TowerSearchEngine


def make_tower(**overrides) -> NewCellTower:
    values = dict(
        mcc=510, mnc=10, lac=4000, cell_id=1,
        lat=-6.2, lon=106.8,
        radio="LTE",
        province="DKI Jakarta",
        district="Jakarta Selatan",
        subdistrict="Setiabudi",
        village="Kuningan",
    )
    values.update(overrides)
    return NewCellTower(**values)


@pytest.fixture()
def provider(tmp_path):
    db = DatabaseProvider(str(tmp_path / "towers.db"))
    yield db
    db.close()


@pytest.fixture()
def store(provider):
    return RecordStore(provider.get_connection())


@pytest.fixture()
def engine(store):
    return TowerSearchEngine(store)


@pytest.fixture()
def seeded_store(store, engine):
    seed_if_empty(engine, store)
    return store


@pytest.fixture()
def key_service(store):
    service = ApiKeyService(store)
    yield service
    service.close()


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("DB_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("SEED_ON_STARTUP", "true")
    from api.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def api_key(client):
    r = client.post("/api/v1/keys/generate")
    assert r.status_code == 201
    return r.json()["key"]
