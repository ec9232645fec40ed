from __future__ import annotations

import uuid

from fastapi.testclient import TestClient


def test_work_lifecycle(client: TestClient):
    resp = client.put("/work", json={"Start": "2024-03-04T08:00:00Z", "Stop": "2024-03-04T16:30:00Z"})
    assert resp.status_code == 200, resp.text
    work = resp.json()
    assert work["Start"] == "2024-03-04T08:00:00+00:00"
    assert work["Stop"] == "2024-03-04T16:30:00+00:00"

    resp = client.put(
        "/work",
        json={"ID": work["ID"], "Start": "2024-03-04T08:00:00Z", "Stop": "2024-03-04T17:00:00Z"},
    )
    assert resp.status_code == 200
    assert resp.json()["Stop"] == "2024-03-04T17:00:00+00:00"

    resp = client.get(f"/work/{work['ID']}")
    assert resp.status_code == 200
    assert resp.json()["ID"] == work["ID"]

    assert client.delete(f"/work/{work['ID']}").status_code == 204
    resp = client.get(f"/work/{work['ID']}")
    assert resp.status_code == 404
    assert resp.json()["External"] == "work was not found"


def test_work_requires_stop_after_start(client: TestClient):
    resp = client.put("/work", json={"Start": "2024-03-04T16:00:00Z", "Stop": "2024-03-04T08:00:00Z"})
    assert resp.status_code == 400
    assert resp.json()["Code"] == "VALIDATION"

    resp = client.put("/work", json={"Start": "2024-03-04T16:00:00Z"})
    assert resp.status_code == 400


def test_work_with_invalid_id(client: TestClient):
    assert client.get("/work/123").status_code == 400
    assert client.get(f"/work/{uuid.uuid4()}").status_code == 404
