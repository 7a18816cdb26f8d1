import re

from fastapi.testclient import TestClient

from apikeys.ApiKeyService import ApiKeyService

KEY_PATTERN = re.compile(r"^cellid_[0-9a-f]{32}$")


def test_generate_key(client):
    r = client.post("/api/v1/keys/generate")

    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "active"
    assert KEY_PATTERN.match(body["key"])
    assert body["createdAt"]
    assert "X-API-Key" in body["message"]


def test_search_by_network(client, api_key):
    r = client.get("/api/v1/towers", params={"mcc": 510, "mnc": 10}, headers={"X-API-Key": api_key})

    assert r.status_code == 200
    towers = r.json()
    assert len(towers) == 2
    assert all(t["mcc"] == 510 and t["mnc"] == 10 for t in towers)
    assert [t["district"] for t in towers] == ["Jakarta Selatan", "Surabaya"]


def test_tower_json_uses_camel_case(client, api_key):
    r = client.get("/api/v1/towers/1", headers={"X-API-Key": api_key})

    assert r.status_code == 200
    tower = r.json()
    assert tower["id"] == 1
    assert tower["cellId"] == 21451
    assert tower["range"] == 1000
    assert "updatedAt" in tower
    assert "cell_id" not in tower
    assert "distance" not in tower


def test_search_without_filters_lists_seed(client, api_key):
    r = client.get("/api/v1/towers", headers={"X-API-Key": api_key})
    assert r.status_code == 200
    assert len(r.json()) == 5


def test_api_key_query_param_is_accepted(client, api_key):
    r = client.get("/api/v1/towers", params={"api_key": api_key, "mnc": 89})

    assert r.status_code == 200
    assert [t["province"] for t in r.json()] == ["Bali"]


def test_missing_key(client):
    r = client.get("/api/v1/towers", params={"mcc": 510})

    assert r.status_code == 401
    assert r.json() == {"message": "Missing X-API-Key header"}


def test_invalid_key(client):
    r = client.get("/api/v1/towers", headers={"X-API-Key": "cellid_nope"})

    assert r.status_code == 401
    assert r.json() == {"message": "Invalid or inactive API Key"}


def test_deactivated_key_is_rejected(client, api_key):
    client.app.state.key_service.deactivate(api_key)

    r = client.get("/api/v1/towers/1", headers={"X-API-Key": api_key})
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid or inactive API Key"}


def test_tower_not_found(client, api_key):
    r = client.get("/api/v1/towers/999999", headers={"X-API-Key": api_key})

    assert r.status_code == 404
    assert r.json() == {"message": "Cell tower not found"}


def test_tower_lookup_requires_key(client):
    r = client.get("/api/v1/towers/1")
    assert r.status_code == 401


def test_non_integer_tower_id(client, api_key):
    r = client.get("/api/v1/towers/abc", headers={"X-API-Key": api_key})

    assert r.status_code == 400
    assert r.json()["field"] == "id"


def test_invalid_query_param_reports_first_field(client, api_key):
    r = client.get(
        "/api/v1/towers",
        params={"mcc": "abc", "lat": "north"},
        headers={"X-API-Key": api_key},
    )

    assert r.status_code == 400
    body = r.json()
    assert body["field"] == "mcc"
    assert body["message"]


def test_invalid_cell_id_reports_camel_case_field(client, api_key):
    r = client.get("/api/v1/towers", params={"cellId": "x1"}, headers={"X-API-Key": api_key})

    assert r.status_code == 400
    assert r.json()["field"] == "cellId"


def test_out_of_range_latitude(client, api_key):
    r = client.get("/api/v1/towers", params={"lat": 95, "lon": 106}, headers={"X-API-Key": api_key})

    assert r.status_code == 400
    assert r.json()["field"] == "lat"


def test_empty_param_counts_as_absent(client, api_key):
    r = client.get("/api/v1/towers", params={"mcc": "", "mnc": 11}, headers={"X-API-Key": api_key})

    assert r.status_code == 200
    assert [t["district"] for t in r.json()] == ["Jakarta Pusat"]


def test_proximity_uses_default_radius(client, api_key):
    r = client.get(
        "/api/v1/towers",
        params={"lat": -6.2088, "lon": 106.8456},
        headers={"X-API-Key": api_key},
    )

    assert r.status_code == 200
    assert [t["district"] for t in r.json()] == ["Jakarta Selatan"]


def test_proximity_with_wider_radius(client, api_key):
    r = client.get(
        "/api/v1/towers",
        params={"lat": -6.2088, "lon": 106.8456, "radius": 5000},
        headers={"X-API-Key": api_key},
    )

    assert r.status_code == 200
    assert [t["district"] for t in r.json()] == ["Jakarta Selatan", "Jakarta Pusat"]


def test_key_collision_returns_503(client, monkeypatch):
    monkeypatch.setattr(ApiKeyService, "new_token", staticmethod(lambda: "cellid_" + "f" * 32))

    assert client.post("/api/v1/keys/generate").status_code == 201
    r = client.post("/api/v1/keys/generate")
    assert r.status_code == 503
    assert r.json()["message"]


def test_health(client):
    r = client.get("/api/v1/health")

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "towers": 5}


def test_request_id_is_echoed(client):
    r = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert r.headers["x-request-id"] == "req-123"


def test_seeding_can_be_disabled(tmp_path, monkeypatch):
    monkeypatch.setenv("DB_PATH", str(tmp_path / "empty.db"))
    monkeypatch.setenv("SEED_ON_STARTUP", "false")
    from api.main import app

    with TestClient(app) as client:
        key = client.post("/api/v1/keys/generate").json()["key"]
        r = client.get("/api/v1/towers", headers={"X-API-Key": key})

    assert r.status_code == 200
    assert r.json() == []


def test_oversized_tower_id_is_not_found(client, api_key):
    r = client.get("/api/v1/towers/99999999999999999999", headers={"X-API-Key": api_key})

    assert r.status_code == 404
    assert r.json() == {"message": "Cell tower not found"}


def test_oversized_network_id_is_rejected(client, api_key):
    r = client.get(
        "/api/v1/towers",
        params={"mcc": "99999999999999999999"},
        headers={"X-API-Key": api_key},
    )

    assert r.status_code == 400
    assert r.json()["field"] == "mcc"


def test_key_with_surrounding_whitespace_is_rejected(client, api_key):
    r = client.get("/api/v1/towers", params={"api_key": f" {api_key} "})

    assert r.status_code == 401
    assert r.json() == {"message": "Invalid or inactive API Key"}
