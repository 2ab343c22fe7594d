from datetime import datetime

import pytest
from bson import ObjectId

from conftest import run


@pytest.fixture
def refs(client, admin_headers):
    acme = client.post("/api/v1/clients", json={"name": "Acme", "hourlyRate": 100}, headers=admin_headers).json()
    group = client.post("/api/v1/client-groups", json={"name": "G", "clientIds": [acme["id"]]}, headers=admin_headers).json()
    activity = client.post("/api/v1/activity-types", json={"name": "Dev"}, headers=admin_headers).json()
    return {"client": acme, "group": group, "activity": activity}


def _payload(refs, **overrides):
    payload = {
        "date": "2024-03-15",
        "hours": 1.5,
        "description": "Feature work",
        "activityTypeId": refs["activity"]["id"],
        "target": {"type": "client", "id": refs["client"]["id"]},
    }
    payload.update(overrides)
    return payload


def test_create_time_entry(client, admin_headers, refs):
    response = client.post("/api/v1/time-entries", json=_payload(refs), headers=admin_headers)
    assert response.status_code == 201
    entry = response.json()
    assert entry["date"] == "2024-03-15"
    assert entry["hours"] == 1.5
    assert entry["activityType"] == "Dev"
    assert entry["target"] == {"type": "client", "id": refs["client"]["id"]}


def test_group_target(client, admin_headers, refs):
    response = client.post(
        "/api/v1/time-entries",
        json=_payload(refs, target={"type": "group", "id": refs["group"]["id"]}),
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["target"]["type"] == "group"


@pytest.mark.parametrize("overrides", [
    {"hours": 0.05},
    {"hours": 0},
    {"description": ""},
    {"target": {"type": "project", "id": str(ObjectId())}},
    {"date": "15/03/2024"},
])
def test_invalid_payloads(client, admin_headers, refs, overrides):
    response = client.post("/api/v1/time-entries", json=_payload(refs, **overrides), headers=admin_headers)
    assert response.status_code == 422


def test_minimum_hours_accepted(client, admin_headers, refs):
    response = client.post("/api/v1/time-entries", json=_payload(refs, hours=0.1), headers=admin_headers)
    assert response.status_code == 201


def test_unknown_references_rejected(client, admin_headers, refs):
    response = client.post(
        "/api/v1/time-entries",
        json=_payload(refs, target={"type": "group", "id": refs["client"]["id"]}),
        headers=admin_headers,
    )
    assert response.status_code == 400

    response = client.post(
        "/api/v1/time-entries",
        json=_payload(refs, activityTypeId=str(ObjectId())),
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_list_filters_and_orders_by_date(client, admin_headers, refs):
    for day in ("2024-03-01", "2024-03-20", "2024-03-10"):
        client.post("/api/v1/time-entries", json=_payload(refs, date=day), headers=admin_headers)

    entries = client.get("/api/v1/time-entries", headers=admin_headers).json()
    assert [e["date"] for e in entries] == ["2024-03-20", "2024-03-10", "2024-03-01"]

    entries = client.get("/api/v1/time-entries?startDate=2024-03-10&endDate=2024-03-20", headers=admin_headers).json()
    assert [e["date"] for e in entries] == ["2024-03-20", "2024-03-10"]


def test_update_and_delete_entry(client, admin_headers, refs):
    entry = client.post("/api/v1/time-entries", json=_payload(refs), headers=admin_headers).json()

    response = client.put(
        f"/api/v1/time-entries/{entry['id']}",
        json=_payload(refs, hours=3, description="Reworked", date="2024-03-16"),
        headers=admin_headers,
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["hours"] == 3
    assert updated["description"] == "Reworked"
    assert updated["date"] == "2024-03-16"

    assert client.delete(f"/api/v1/time-entries/{entry['id']}", headers=admin_headers).status_code == 200
    assert client.get("/api/v1/time-entries", headers=admin_headers).json() == []


def test_viewer_cannot_list_entries(client, viewer_headers):
    assert client.get("/api/v1/time-entries", headers=viewer_headers).status_code == 403


def test_listing_skips_entries_with_unknown_target_type(client, db, admin, admin_headers, refs):
    good = client.post("/api/v1/time-entries", json=_payload(refs), headers=admin_headers).json()
    run(db["time_entries"].insert_one({
        "date": datetime(2024, 3, 18),
        "hours": 2.0,
        "description": "Legacy import",
        "activity_type_id": ObjectId(refs["activity"]["id"]),
        "target": {"type": "project", "id": ObjectId()},
        "owner_id": admin["_id"],
    }))

    response = client.get("/api/v1/time-entries", headers=admin_headers)
    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [good["id"]]
