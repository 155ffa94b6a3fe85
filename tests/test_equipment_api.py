def create_truck(client, headers, **overrides):
    payload = {"name": "Box Truck 1", "type": "TRUCK", "licensePlate": "7ABC123", "serialNumber": "TRK-0001"}
    payload.update(overrides)
    response = client.post("/api/equipments", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_list(client, supervisor_headers, technician_headers, warehouse) -> None:
    truck = create_truck(client, supervisor_headers, locationId=warehouse.id)
    create_truck(client, supervisor_headers, name="Generator", type="GENERATOR", serialNumber="GEN-1")

    assert truck["status"] == "AVAILABLE"
    assert truck["currentLocation"]["name"] == "Main Warehouse"

    trucks = client.get("/api/equipments?type=TRUCK", headers=technician_headers).json()
    assert [e["name"] for e in trucks] == ["Box Truck 1"]
    assert trucks[0]["workOrderIds"] == []


def test_mutations_require_manage_equipment(client, technician_headers, supervisor_headers) -> None:
    response = client.post(
        "/api/equipments", json={"name": "Trailer", "type": "TRAILER"}, headers=technician_headers
    )
    assert response.status_code == 403

    truck = create_truck(client, supervisor_headers)
    assert client.put(
        f"/api/equipments/{truck['id']}", json={"status": "IN_USE"}, headers=technician_headers
    ).status_code == 403
    assert client.delete(f"/api/equipments/{truck['id']}", headers=technician_headers).status_code == 403


def test_duplicate_serial_number(client, supervisor_headers) -> None:
    create_truck(client, supervisor_headers)
    response = client.post(
        "/api/equipments",
        json={"name": "Other", "type": "TRUCK", "serialNumber": "TRK-0001"},
        headers=supervisor_headers,
    )
    assert response.status_code == 409


def test_update_and_clear_fields(client, supervisor_headers) -> None:
    truck = create_truck(client, supervisor_headers, description="Lift gate")

    response = client.put(
        f"/api/equipments/{truck['id']}",
        json={"status": "MAINTENANCE", "description": None},
        headers=supervisor_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "MAINTENANCE"
    assert data["description"] is None
    assert data["licensePlate"] == "7ABC123"


def test_notes_and_documents(client, supervisor_headers, technician_headers) -> None:
    truck = create_truck(client, supervisor_headers)
    url = f"/api/equipments/{truck['id']}"

    note = client.post(f"{url}/notes", json={"content": "Brakes squeal"}, headers=technician_headers)
    assert note.status_code == 201
    assert note.json()["authorName"] == "Tech Nician"

    blocked = client.post(
        f"{url}/documents",
        json={"name": "Registration", "url": "https://files.example.com/reg.pdf"},
        headers=technician_headers,
    )
    assert blocked.status_code == 403

    document = client.post(
        f"{url}/documents",
        json={"name": "Registration", "url": "https://files.example.com/reg.pdf"},
        headers=supervisor_headers,
    )
    assert document.status_code == 201

    detail = client.get(url, headers=technician_headers).json()
    assert [n["content"] for n in detail["notes"]] == ["Brakes squeal"]
    assert [d["name"] for d in detail["documents"]] == ["Registration"]


def test_delete_and_missing(client, supervisor_headers) -> None:
    truck = create_truck(client, supervisor_headers)
    url = f"/api/equipments/{truck['id']}"

    response = client.delete(url, headers=supervisor_headers)
    assert response.json() == {"message": "Equipment deleted successfully"}

    missing = client.get(url, headers=supervisor_headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Equipment not found"
