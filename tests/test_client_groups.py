from bson import ObjectId


def _client(client, headers, name, rate):
    return client.post("/api/v1/clients", json={"name": name, "hourlyRate": rate}, headers=headers).json()


def test_create_group_resolves_members(client, admin_headers):
    a = _client(client, admin_headers, "A", 100)
    b = _client(client, admin_headers, "B", 200)

    response = client.post(
        "/api/v1/client-groups",
        json={"name": "Pair", "clientIds": [a["id"], b["id"], a["id"]]},
        headers=admin_headers,
    )
    assert response.status_code == 201
    group = response.json()
    assert group["name"] == "Pair"
    # Duplicate members collapse
    assert group["clientIds"] == [a["id"], b["id"]]
    assert group["clients"] == [
        {"id": a["id"], "name": "A", "hourlyRate": 100},
        {"id": b["id"], "name": "B", "hourlyRate": 200},
    ]

    listed = client.get("/api/v1/client-groups", headers=admin_headers).json()
    assert [g["id"] for g in listed] == [group["id"]]


def test_group_requires_members(client, admin_headers):
    response = client.post("/api/v1/client-groups", json={"name": "Empty", "clientIds": []}, headers=admin_headers)
    assert response.status_code == 422


def test_group_members_must_exist(client, admin_headers):
    response = client.post(
        "/api/v1/client-groups",
        json={"name": "Ghosts", "clientIds": [str(ObjectId())]},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_update_and_delete_group(client, admin_headers):
    a = _client(client, admin_headers, "A", 100)
    b = _client(client, admin_headers, "B", 200)
    group = client.post("/api/v1/client-groups", json={"name": "G", "clientIds": [a["id"]]}, headers=admin_headers).json()

    response = client.put(
        f"/api/v1/client-groups/{group['id']}",
        json={"name": "G2", "clientIds": [b["id"]]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "G2"
    assert [c["name"] for c in response.json()["clients"]] == ["B"]

    assert client.delete(f"/api/v1/client-groups/{group['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/v1/client-groups/{group['id']}", headers=admin_headers).status_code == 404


def test_deleted_member_drops_from_listing(client, admin_headers):
    a = _client(client, admin_headers, "A", 100)
    b = _client(client, admin_headers, "B", 200)
    client.post("/api/v1/client-groups", json={"name": "G", "clientIds": [a["id"], b["id"]]}, headers=admin_headers)
    client.delete(f"/api/v1/clients/{a['id']}", headers=admin_headers)

    group = client.get("/api/v1/client-groups", headers=admin_headers).json()[0]
    assert group["clientIds"] == [a["id"], b["id"]]
    assert [c["name"] for c in group["clients"]] == ["B"]


def test_member_ids_differing_only_in_case_collapse(client, admin_headers):
    a = _client(client, admin_headers, "A", 100)

    response = client.post(
        "/api/v1/client-groups",
        json={"name": "Solo", "clientIds": [a["id"], a["id"].upper()]},
        headers=admin_headers,
    )
    assert response.status_code == 201
    group = response.json()
    assert group["clientIds"] == [a["id"]]
    assert [m["id"] for m in group["clients"]] == [a["id"]]
