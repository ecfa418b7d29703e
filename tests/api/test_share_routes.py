# tests/api/test_share_routes.py
# HTTP contract of the share endpoints, with the repository swapped for an in-memory one

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from loverituals.dependencies import get_share_service
from loverituals.main import create_app
from loverituals.services.share_service import ShareService

USER = {"X-User-Id": "user-42"}


@pytest.fixture
def share_service(config_repo, id_generator_factory):
    return ShareService(config_repo, id_generator_factory(), max_attempts=3)


@pytest.fixture
def client(settings, share_service):
    app = create_app(settings)
    app.dependency_overrides[get_share_service] = lambda: share_service
    return TestClient(app)


def test_save_then_fetch(client):
    resp = client.post(
        "/api/tools/save",
        json={"toolKey": "warm-text-card", "config": {"theme": "warm", "maxCards": 12}},
        headers=USER,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert set(body) == {"shareId", "recordId"}
    assert body["recordId"].startswith("cfg_")

    resp = client.get(f"/api/tools/share/{body['shareId']}")
    assert resp.status_code == 200
    shared = resp.json()
    assert shared["id"] == body["recordId"]
    assert shared["toolKey"] == "warm-text-card"
    assert shared["config"] == {"theme": "warm", "maxCards": 12}
    assert shared["shareId"] == body["shareId"]
    assert shared["expiresAt"] is None
    # the public view does not leak who saved it
    assert "ownerId" not in shared
    assert "fingerprint" not in shared


def test_save_requires_user(client, config_repo):
    resp = client.post("/api/tools/save", json={"toolKey": "calendar", "config": {}})

    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"
    assert config_repo.insert_calls == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"toolKey": "", "config": {}},
        {"config": {}},
        {"toolKey": "calendar"},
        {"toolKey": "calendar", "config": [1, 2]},
    ],
)
def test_save_rejects_bad_input(client, payload):
    resp = client.post("/api/tools/save", json=payload, headers=USER)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_ARGUMENT"


def test_exhausted_retries_is_503(settings, config_repo, id_generator_factory, record_factory):
    config_repo.records.append(record_factory("taken"))
    service = ShareService(config_repo, id_generator_factory(["taken"] * 3), max_attempts=3)
    app = create_app(settings)
    app.dependency_overrides[get_share_service] = lambda: service
    client = TestClient(app)

    resp = client.post("/api/tools/save", json={"toolKey": "calendar", "config": {}}, headers=USER)

    assert resp.status_code == 503
    error = resp.json()["error"]
    assert error["code"] == "SHARE_ID_EXHAUSTED"
    assert error["details"] == {"attempts": 3}


def test_missing_expired_and_deleted_share_ids_give_same_404(client, config_repo, record_factory):
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    config_repo.records += [
        record_factory("expired", expires_at=past),
        record_factory("deleted", is_deleted=True),
    ]

    bodies = [client.get(f"/api/tools/share/{sid}") for sid in ("missing", "expired", "deleted")]

    assert {r.status_code for r in bodies} == {404}
    assert len({r.text for r in bodies}) == 1
    assert bodies[0].json()["error"]["code"] == "NOT_FOUND"


def test_request_id_is_echoed_on_errors(client):
    resp = client.get("/api/tools/share/missing", headers={"X-Request-ID": "req-7"})

    assert resp.json()["error"]["request_id"] == "req-7"


def test_owner_deletes_share(client):
    share_id = client.post(
        "/api/tools/save", json={"toolKey": "calendar", "config": {}}, headers=USER
    ).json()["shareId"]

    other = client.delete(f"/api/tools/share/{share_id}", headers={"X-User-Id": "someone-else"})
    assert other.status_code == 404

    resp = client.delete(f"/api/tools/share/{share_id}", headers=USER)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "deleted"}
    assert client.get(f"/api/tools/share/{share_id}").status_code == 404


def test_expiry_round_trips_in_camel_case(client):
    resp = client.post(
        "/api/tools/save",
        json={"toolKey": "calendar", "config": {"n": 1}, "expiresAt": "2999-05-01T12:00:00Z"},
        headers=USER,
    )
    share_id = resp.json()["shareId"]

    shared = client.get(f"/api/tools/share/{share_id}").json()

    assert datetime.fromisoformat(shared["expiresAt"].replace("Z", "+00:00")) == datetime(
        2999, 5, 1, 12, tzinfo=timezone.utc
    )


def test_past_expiry_is_saved_but_not_shared(client):
    resp = client.post(
        "/api/tools/save",
        json={"toolKey": "calendar", "config": {"n": 1}, "expiresAt": "2000-01-01T00:00:00Z"},
        headers=USER,
    )
    assert resp.status_code == 201

    shared = client.get(f"/api/tools/share/{resp.json()['shareId']}")

    assert shared.status_code == 404
    assert shared.json()["error"]["code"] == "NOT_FOUND"


def test_metrics_count_saves(client):
    for i in range(3):
        client.post("/api/tools/save", json={"toolKey": f"metrics-check-{i}", "config": {}}, headers=USER)

    resp = client.get("/metrics")

    assert resp.status_code == 200
    save_lines = [l for l in resp.text.splitlines() if l.startswith("share_config_saves_total")]
    assert len(save_lines) == 1
    assert "tool_key" not in resp.text
    assert "request_count_total" in resp.text


def test_http_metrics_use_route_templates(client):
    for share_id in ("aaa111", "bbb222", "ccc333"):
        client.get(f"/api/tools/share/{share_id}")
    client.get("/no/such/route/xyz")

    text = client.get("/metrics").text

    in_progress = [l for l in text.splitlines() if l.startswith("request_in_progress{")]
    assert in_progress
    assert all("path=" not in l for l in in_progress)
    assert 'path="/api/tools/share/{share_id}"' in text
    assert 'path="<unmatched>"' in text
    for raw in ("aaa111", "bbb222", "ccc333", "xyz"):
        assert raw not in text
