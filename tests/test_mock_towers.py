from database.DatabaseProvider import DatabaseProvider
from database.RecordStore import RecordStore

import generate_mock_towers


def test_generates_requested_number_of_towers(tmp_path, capsys):
    output = tmp_path / "mock.db"

    assert generate_mock_towers.main(["--output", str(output), "--count", "25", "--seed", "7"]) == 0
    assert "Towers: 25" in capsys.readouterr().out

    provider = DatabaseProvider(str(output))
    try:
        towers = RecordStore(provider.get_connection()).scan_towers(limit=100)
    finally:
        provider.close()

    assert len(towers) == 25
    assert all(t.mcc == 510 for t in towers)
    assert all(t.mnc in generate_mock_towers.OPERATORS for t in towers)


def test_same_seed_is_reproducible(tmp_path):
    a, b = tmp_path / "a.db", tmp_path / "b.db"
    generate_mock_towers.main(["--output", str(a), "--count", "10", "--seed", "3"])
    generate_mock_towers.main(["--output", str(b), "--count", "10", "--seed", "3"])

    def cells(path):
        provider = DatabaseProvider(str(path))
        try:
            return [(t.mnc, t.cell_id, t.lat, t.lon) for t in RecordStore(provider.get_connection()).scan_towers()]
        finally:
            provider.close()

    assert cells(a) == cells(b)
