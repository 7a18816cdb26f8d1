import json
import re

from cli.main import main
from database.DatabaseProvider import DatabaseProvider
from database.RecordStore import RecordStore


def _db(tmp_path):
    return str(tmp_path / "cli.db")


def test_seed_is_idempotent(tmp_path, capsys):
    assert main(["--db", _db(tmp_path), "seed"]) == 0
    assert "Inserted 5 towers" in capsys.readouterr().out

    assert main(["--db", _db(tmp_path), "seed"]) == 0
    assert "nothing to do" in capsys.readouterr().out


def test_search_prints_json_lines(tmp_path, capsys):
    main(["--db", _db(tmp_path), "seed"])
    capsys.readouterr()

    assert main(["--db", _db(tmp_path), "search", "--mcc", "510", "--mnc", "10"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    towers = [json.loads(line) for line in lines]

    assert [t["district"] for t in towers] == ["Jakarta Selatan", "Surabaya"]
    assert all(t["mnc"] == 10 for t in towers)


def test_generate_and_revoke_key(tmp_path, capsys):
    assert main(["--db", _db(tmp_path), "generate-key"]) == 0
    key = capsys.readouterr().out.strip()
    assert re.match(r"^cellid_[0-9a-f]{32}$", key)

    assert main(["--db", _db(tmp_path), "revoke-key", key]) == 0

    provider = DatabaseProvider(_db(tmp_path))
    try:
        assert RecordStore(provider.get_connection()).find_api_key(key).is_active is False
    finally:
        provider.close()


def test_revoke_unknown_key_fails(tmp_path, capsys):
    assert main(["--db", _db(tmp_path), "revoke-key", "cellid_missing"]) == 1
    assert "no such API key" in capsys.readouterr().err
