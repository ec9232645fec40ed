from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

WORK_MORNING = {
    "Start": "2024-03-04T08:00:00+01:00",
    "Stop": "2024-03-04T12:00:00+01:00",
    "Reason": "work",
    "Location": "home",
}


def _put(client: TestClient, **changes) -> dict:
    resp = client.put("/timelogs", json={**WORK_MORNING, **changes})
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_timelog_lifecycle(client: TestClient):
    created = _put(client)
    timelog_id = created["ID"]
    assert str(uuid.UUID(timelog_id)) == timelog_id
    assert created["Start"] == "2024-03-04T07:00:00+00:00"
    assert created["Stop"] == "2024-03-04T11:00:00+00:00"
    assert created["Reason"] == "work"
    assert created["Location"] == "home"
    assert created["CreatedAt"]
    assert created["ModifiedAt"]

    updated = _put(client, ID=timelog_id, Location="office")
    assert updated["ID"] == timelog_id
    assert updated["Location"] == "office"

    read_resp = client.get(f"/timelogs/{timelog_id}")
    assert read_resp.status_code == 200
    assert read_resp.json()["Location"] == "office"

    delete_resp = client.delete(f"/timelogs/{timelog_id}")
    assert delete_resp.status_code == 204

    missing_resp = client.get(f"/timelogs/{timelog_id}")
    assert missing_resp.status_code == 404
    assert missing_resp.json()["Code"] == "NOT-FOUND"


def test_open_timelog_has_no_stop(client: TestClient):
    payload = {key: value for key, value in WORK_MORNING.items() if key != "Stop"}
    resp = client.put("/timelogs", json=payload)
    assert resp.status_code == 200
    assert resp.json()["Stop"] is None


def test_nil_id_creates_a_new_timelog(client: TestClient):
    created = _put(client, ID="00000000-0000-0000-0000-000000000000")
    assert created["ID"] != "00000000-0000-0000-0000-000000000000"


def test_timelog_validation(client: TestClient):
    resp = client.put("/timelogs", json={**WORK_MORNING, "Reason": "party"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["Code"] == "VALIDATION"
    assert "Reason" in body["External"]

    resp = client.put("/timelogs", json={**WORK_MORNING, "Location": "beach"})
    assert resp.status_code == 400

    payload = {key: value for key, value in WORK_MORNING.items() if key != "Start"}
    resp = client.put("/timelogs", json=payload)
    assert resp.status_code == 400
    assert "Start" in resp.json()["External"]


def test_sick_leave_reason_is_accepted(client: TestClient):
    created = _put(client, Reason="sick leave", Location="absence")
    assert created["Reason"] == "sick leave"
    assert created["Location"] == "absence"


def test_update_of_unknown_timelog(client: TestClient):
    resp = client.put("/timelogs", json={**WORK_MORNING, "ID": str(uuid.uuid4())})
    assert resp.status_code == 404
    body = resp.json()
    assert body["Code"] == "SAVE"
    assert body["External"] == "timelog was not found"


def test_delete_with_invalid_or_unknown_id(client: TestClient):
    resp = client.delete("/timelogs/not-a-uuid")
    assert resp.status_code == 400
    assert resp.json()["Code"] == "INVALID-ID"

    resp = client.delete(f"/timelogs/{uuid.uuid4()}")
    assert resp.status_code == 204


def test_timelogs_by_range(client: TestClient):
    before = _put(client, Start="2024-02-28T08:00:00Z", Stop="2024-02-28T16:00:00Z")
    first = _put(client, Start="2024-03-01T08:00:00Z", Stop="2024-03-01T16:00:00Z")
    open_one = _put(client, Start="2024-03-05T08:00:00Z", Stop=None)
    last_day = _put(client, Start="2024-03-31T08:00:00Z", Stop="2024-03-31T16:00:00Z")
    after = _put(client, Start="2024-04-02T08:00:00Z", Stop="2024-04-02T16:00:00Z")

    resp = client.get("/timelogs/2024-03-01/2024-03-31")
    assert resp.status_code == 200
    ids = [item["ID"] for item in resp.json()]
    assert ids == [first["ID"], open_one["ID"], last_day["ID"]]
    assert before["ID"] not in ids
    assert after["ID"] not in ids


def test_timelogs_by_range_rejects_invalid_dates(client: TestClient):
    resp = client.get("/timelogs/yesterday/2024-03-31")
    assert resp.status_code == 400
    assert resp.json()["Code"] == "VALIDATION"
