import pytest

from common.exceptions import DuplicateRecordError
from database.DatabaseProvider import DatabaseProvider
from database.RecordStore import RecordStore

from conftest import make_tower


def test_create_tower_assigns_id_and_timestamp(store):
    tower = store.create_tower(make_tower(address="Jl. Sudirman"))

    assert tower.id == 1
    assert tower.updated_at is not None
    assert tower.address == "Jl. Sudirman"
    assert store.get_tower(tower.id) == tower


def test_range_defaults_to_1000_meters(store):
    tower = store.create_tower(make_tower())
    assert tower.range == 1000


def test_get_tower_missing_returns_none(store):
    assert store.get_tower(999999) is None


def test_duplicate_network_tuple_is_allowed(store):
    first = store.create_tower(make_tower(cell_id=42))
    second = store.create_tower(make_tower(cell_id=42))

    assert first.id != second.id
    assert len(store.scan_towers({"cell_id": 42})) == 2


def test_empty_administrative_level_is_rejected():
    with pytest.raises(ValueError, match="village"):
        make_tower(village="  ")


def test_scan_orders_by_id_and_applies_limit(store):
    for i in range(5):
        store.create_tower(make_tower(cell_id=100 - i))

    towers = store.scan_towers(limit=3)
    assert [t.id for t in towers] == [1, 2, 3]


def test_scan_range_is_inclusive(store):
    store.create_tower(make_tower(lat=-6.0))
    store.create_tower(make_tower(lat=-7.0))

    towers = store.scan_towers(ranges={"lat": (-6.5, -6.0)})
    assert [t.lat for t in towers] == [-6.0]


def test_scan_unknown_attribute_raises(store):
    with pytest.raises(ValueError, match="Unknown tower attribute"):
        store.scan_towers({"mcc; DROP TABLE cell_towers": 1})


def test_duplicate_api_key_raises(store):
    store.insert_api_key("cellid_abc")
    with pytest.raises(DuplicateRecordError):
        store.insert_api_key("cellid_abc")


def test_set_api_key_active(store):
    store.insert_api_key("cellid_abc")

    assert store.set_api_key_active("cellid_abc", False) is True
    assert store.find_api_key("cellid_abc").is_active is False
    assert store.set_api_key_active("cellid_missing", False) is False


def test_touch_api_key_sets_last_used(store):
    api_key = store.insert_api_key("cellid_abc")
    assert api_key.last_used_at is None

    store.touch_api_key(api_key.id)
    assert store.find_api_key("cellid_abc").last_used_at is not None


def test_reopening_database_keeps_data(tmp_path):
    path = str(tmp_path / "nested" / "towers.db")
    first = DatabaseProvider(path)
    RecordStore(first.get_connection()).create_tower(make_tower())
    first.close()

    second = DatabaseProvider(path)
    try:
        assert RecordStore(second.get_connection()).count_towers() == 1
    finally:
        second.close()


def test_in_memory_database():
    provider = DatabaseProvider(":memory:")
    try:
        store = RecordStore(provider.get_connection())
        store.create_tower(make_tower())
        assert store.count_towers() == 1
    finally:
        provider.close()


def test_explicit_none_range_defaults_to_1000_meters(store):
    tower = store.create_tower(make_tower(range=None))
    assert tower.range == 1000


def test_get_tower_beyond_integer_range_returns_none(store):
    store.create_tower(make_tower())
    assert store.get_tower(2**63) is None
    assert store.get_tower(-(2**63) - 1) is None
