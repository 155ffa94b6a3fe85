from conftest import make_user

from docket.models import Equipment, UserRole


def create(client, headers, payload):
    response = client.post("/api/workorders", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_reconciles_schedule(client, admin, admin_headers, work_order_payload, warehouse) -> None:
    payload = work_order_payload(pickupLocationId=warehouse.id, createdById="spoofed")
    data = create(client, admin_headers, payload)

    assert data["startDate"] == "2024-03-10T14:00:00Z"
    assert data["endDate"] == "2024-03-10T22:00:00Z"
    assert data["startHour"] == "09:00"
    assert data["endHour"] == "17:00"
    assert data["status"] == "PENDING"
    assert data["createdById"] == admin.id
    assert data["assignedTo"]["firstName"] == "Tech"
    assert data["supervisor"]["lastName"] == "Visor"
    assert data["pickupLocation"]["name"] == "Main Warehouse"
    assert data["deliveryLocation"] is None


def test_create_requires_permission(client, supervisor_headers, technician_headers, work_order_payload) -> None:
    for headers in (supervisor_headers, technician_headers):
        response = client.post("/api/workorders", json=work_order_payload(), headers=headers)
        assert response.status_code == 403


def test_create_rejects_duplicate_fame_number(client, admin_headers, work_order_payload) -> None:
    create(client, admin_headers, work_order_payload())
    response = client.post("/api/workorders", json=work_order_payload(), headers=admin_headers)
    assert response.status_code == 409


def test_create_rejects_missing_references(client, admin_headers, work_order_payload) -> None:
    response = client.post(
        "/api/workorders",
        json=work_order_payload(assignedToId="nobody"),
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "One or more referenced items (location or user) do not exist"

    response = client.post(
        "/api/workorders",
        json=work_order_payload(deliveryLocationId="nowhere"),
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_create_rejects_bad_schedule(client, admin_headers, work_order_payload) -> None:
    bad_hour = client.post(
        "/api/workorders", json=work_order_payload(startHour="25:99"), headers=admin_headers
    )
    assert bad_hour.status_code == 400

    backwards = client.post(
        "/api/workorders",
        json=work_order_payload(
            startHour="", endHour="", startDate="2024-03-10T12:00:00Z", endDate="2024-03-09T12:00:00Z"
        ),
        headers=admin_headers,
    )
    assert backwards.status_code == 400
    assert backwards.json()["detail"] == "End time must be after start time"


def test_list_is_ordered_and_filtered(client, admin_headers, technician_headers, work_order_payload) -> None:
    create(client, admin_headers, work_order_payload(fameNumber="WO-B", startDate="2024-03-12T00:00:00"))
    create(client, admin_headers, work_order_payload(fameNumber="WO-A", startDate="2024-03-10T00:00:00"))
    create(
        client,
        admin_headers,
        work_order_payload(fameNumber="WO-C", startDate="2024-03-11T00:00:00", status="COMPLETED"),
    )

    everything = client.get("/api/workorders", headers=technician_headers).json()
    assert [wo["fameNumber"] for wo in everything] == ["WO-A", "WO-C", "WO-B"]

    completed = client.get("/api/workorders?status=COMPLETED", headers=technician_headers).json()
    assert [wo["fameNumber"] for wo in completed] == ["WO-C"]

    window = client.get(
        "/api/workorders",
        params={"start": "2024-03-11T00:00:00Z", "end": "2024-03-12T00:00:00Z"},
        headers=technician_headers,
    ).json()
    assert [wo["fameNumber"] for wo in window] == ["WO-C"]


def test_get_detail_and_missing(client, admin_headers, work_order_payload, db) -> None:
    truck = Equipment(name="Box Truck 1", type="TRUCK", status="AVAILABLE")
    db.add(truck)
    db.commit()

    created = create(client, admin_headers, work_order_payload(equipmentIds=[truck.id]))
    detail = client.get(f"/api/workorders/{created['id']}", headers=admin_headers).json()
    assert [e["name"] for e in detail["equipment"]] == ["Box Truck 1"]

    missing = client.get("/api/workorders/nope", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Work order not found"


def test_partial_update_only_touches_supplied_fields(client, admin_headers, supervisor_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload())

    response = client.put(
        f"/api/workorders/{created['id']}",
        json={"status": "IN_PROGRESS", "fameNumber": "", "assignedToId": ""},
        headers=supervisor_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["status"] == "IN_PROGRESS"
    assert body["data"]["fameNumber"] == created["fameNumber"]
    assert body["data"]["assignedToId"] == created["assignedToId"]
    assert body["data"]["startDate"] == created["startDate"]
    assert body["data"]["clientEmail"] == "john@example.com"


def test_drag_and_drop_moves_dates(client, admin_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload())

    response = client.put(
        f"/api/workorders/{created['id']}",
        json={"startDate": "2024-03-11T15:00:00Z", "endDate": "2024-03-11T19:00:00Z", "tzOffset": 300},
        headers=admin_headers,
    )

    data = response.json()["data"]
    assert data["startDate"] == "2024-03-11T15:00:00Z"
    assert data["endDate"] == "2024-03-11T19:00:00Z"
    assert data["startHour"] == "10:00"
    assert data["endHour"] == "14:00"


def test_changing_start_hour_keeps_the_day(client, admin_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload())

    response = client.put(
        f"/api/workorders/{created['id']}",
        json={"startHour": "8:00 AM", "tzOffset": 300},
        headers=admin_headers,
    )

    data = response.json()["data"]
    assert data["startDate"] == "2024-03-10T13:00:00Z"
    assert data["endDate"] == "2024-03-10T22:00:00Z"
    assert data["startHour"] == "08:00"


def test_overnight_end_hour_moves_back_to_start_day(client, admin_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload(startHour="22:00", endHour="02:00"))
    assert created["startDate"] == "2024-03-11T03:00:00Z"
    assert created["endDate"] == "2024-03-11T07:00:00Z"

    response = client.put(
        f"/api/workorders/{created['id']}",
        json={"endHour": "23:30", "tzOffset": 300},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["startDate"] == "2024-03-11T03:00:00Z"
    assert data["endDate"] == "2024-03-11T04:30:00Z"
    assert data["endHour"] == "23:30"


def test_end_hour_edit_can_make_day_job_overnight(client, admin_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload())

    response = client.put(
        f"/api/workorders/{created['id']}",
        json={"endHour": "02:00", "tzOffset": 300},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["startDate"] == "2024-03-10T14:00:00Z"
    assert data["endDate"] == "2024-03-11T07:00:00Z"
    assert data["startHour"] == "09:00"
    assert data["endHour"] == "02:00"


def test_clearing_end_date(client, admin_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload())

    response = client.put(
        f"/api/workorders/{created['id']}", json={"endDate": None}, headers=admin_headers
    )

    data = response.json()["data"]
    assert data["endDate"] is None
    assert data["endHour"] is None


def test_update_rejects_taken_fame_number(client, admin_headers, work_order_payload) -> None:
    create(client, admin_headers, work_order_payload(fameNumber="WO-1"))
    second = create(client, admin_headers, work_order_payload(fameNumber="WO-2"))

    response = client.put(
        f"/api/workorders/{second['id']}", json={"fameNumber": "WO-1"}, headers=admin_headers
    )
    assert response.status_code == 409


def test_technician_cannot_edit(client, admin_headers, technician_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload())
    response = client.put(
        f"/api/workorders/{created['id']}", json={"status": "COMPLETED"}, headers=technician_headers
    )
    assert response.status_code == 403


def test_assignment_checks_roles(client, db, admin, admin_headers, supervisor_headers, technician_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload())
    other_tech = make_user(db, "tech2@example.com", UserRole.TECHNICIAN, "Sarah", "Johnson")
    url = f"/api/workorders/{created['id']}/assignment"

    assert client.put(url, json={"assignedToId": other_tech.id}, headers=technician_headers).status_code == 403

    response = client.put(
        url, json={"assignedToId": other_tech.id, "supervisorId": admin.id}, headers=supervisor_headers
    )
    assert response.status_code == 200
    assert response.json()["assignedTo"]["firstName"] == "Sarah"
    assert response.json()["supervisorId"] == admin.id

    not_a_technician = client.put(url, json={"assignedToId": admin.id}, headers=supervisor_headers)
    assert not_a_technician.status_code == 400

    not_a_supervisor = client.put(url, json={"supervisorId": other_tech.id}, headers=supervisor_headers)
    assert not_a_supervisor.status_code == 400


def test_delete(client, admin_headers, supervisor_headers, technician_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload())
    url = f"/api/workorders/{created['id']}"

    assert client.delete(url, headers=technician_headers).status_code == 403

    response = client.delete(url, headers=supervisor_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Work order deleted successfully"}

    assert client.delete(url, headers=supervisor_headers).status_code == 404


def test_calendar_events_feed(client, admin_headers, technician_headers, work_order_payload) -> None:
    create(client, admin_headers, work_order_payload(type="SETUP"))

    response = client.get(
        "/api/workorders/events",
        params={"start": "2024-03-10T00:00:00", "end": "2024-03-11T00:00:00", "tzOffset": 300},
        headers=technician_headers,
    )

    assert response.status_code == 200
    [event] = response.json()
    assert event["title"] == "WO-2024-001 - John Smith"
    assert event["backgroundColor"] == "#f59e0b"
    assert event["start"] == "2024-03-10T14:00:00Z"
    assert event["extendedProps"]["assignedTo"] == "Tech Nician"
    assert event["extendedProps"]["supervisor"] == "Super Visor"


def test_form_data_in_local_time(client, admin_headers, work_order_payload) -> None:
    created = create(client, admin_headers, work_order_payload(clientPhone=None, noteText="  "))

    response = client.get(
        f"/api/workorders/{created['id']}/form", params={"tzOffset": 300}, headers=admin_headers
    )

    data = response.json()
    assert data["startDate"] == "2024-03-10T09:00"
    assert data["endDate"] == "2024-03-10T17:00"
    assert data["clientPhone"] == ""
    assert data["noteText"] == ""
    assert data["pickupLocationId"] == ""
