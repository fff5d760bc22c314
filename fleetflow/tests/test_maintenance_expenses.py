"""
Tests for the maintenance workflow and expense logging.
"""

import pytest


async def _schedule(client, headers, vehicle_id, **overrides):
    payload = {
        "vehicle": vehicle_id,
        "type": "Scheduled",
        "description": "Oil change",
        "cost": 150,
    }
    payload.update(overrides)
    return await client.post("/api/maintenance", json=payload, headers=headers)


@pytest.mark.asyncio
async def test_schedule_puts_vehicle_in_shop(client, safety_headers, manager_headers, create_vehicle):
    vehicle = await create_vehicle()

    response = await _schedule(client, safety_headers, vehicle["id"])
    assert response.status_code == 201
    record = response.json()["data"]
    assert record["status"] == "Pending"
    assert record["vehicle"]["status"] == "In Shop"
    assert record["completedDate"] is None
    assert record["scheduledDate"] is not None

    response = await client.get(f"/api/vehicles/{vehicle['id']}", headers=manager_headers)
    assert response.json()["data"]["status"] == "In Shop"


@pytest.mark.asyncio
async def test_cannot_schedule_on_trip_vehicle(client, manager_headers, create_vehicle, create_driver, create_trip):
    vehicle = await create_vehicle()
    driver = await create_driver()
    trip = await create_trip(vehicle["id"], driver["id"])
    await client.patch(f"/api/trips/{trip['id']}/status", json={"status": "In Progress"}, headers=manager_headers)

    response = await _schedule(client, manager_headers, vehicle["id"])
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot schedule maintenance while the vehicle is on a trip"


@pytest.mark.asyncio
async def test_retired_vehicle_stays_retired(client, manager_headers, create_vehicle):
    vehicle = await create_vehicle(status="Retired")

    response = await _schedule(client, manager_headers, vehicle["id"], type="Urgent")
    assert response.status_code == 201
    assert response.json()["data"]["vehicle"]["status"] == "Retired"


@pytest.mark.asyncio
async def test_complete_releases_vehicle_and_books_expense(client, manager_headers, create_vehicle):
    vehicle = await create_vehicle()
    record = (await _schedule(client, manager_headers, vehicle["id"])).json()["data"]

    response = await client.patch(
        f"/api/maintenance/{record['id']}/complete", json={"cost": 180.5}, headers=manager_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "Completed"
    assert data["cost"] == 180.5
    assert data["completedDate"] is not None
    assert data["vehicle"]["status"] == "Available"

    response = await client.get("/api/expenses", params={"type": "Maintenance"}, headers=manager_headers)
    expenses = response.json()["data"]
    assert len(expenses) == 1
    assert expenses[0]["amount"] == 180.5
    assert expenses[0]["vehicle"]["id"] == vehicle["id"]

    response = await client.patch(f"/api/maintenance/{record['id']}/complete", headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Maintenance record is already completed"


@pytest.mark.asyncio
async def test_complete_keeps_vehicle_in_shop_while_other_jobs_open(client, manager_headers, create_vehicle):
    vehicle = await create_vehicle()
    first = (await _schedule(client, manager_headers, vehicle["id"])).json()["data"]
    await _schedule(client, manager_headers, vehicle["id"], type="Urgent", description="Brakes")

    response = await client.patch(f"/api/maintenance/{first['id']}/complete", headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["data"]["vehicle"]["status"] == "In Shop"


@pytest.mark.asyncio
async def test_zero_cost_completion_books_nothing(client, manager_headers, create_vehicle):
    vehicle = await create_vehicle()
    record = (await _schedule(client, manager_headers, vehicle["id"], cost=0)).json()["data"]

    response = await client.patch(f"/api/maintenance/{record['id']}/complete", json={}, headers=manager_headers)
    assert response.status_code == 200

    response = await client.get("/api/expenses", headers=manager_headers)
    assert response.json()["count"] == 0


@pytest.mark.asyncio
async def test_recording_finished_job_books_expense(client, manager_headers, create_vehicle):
    vehicle = await create_vehicle()

    response = await _schedule(
        client, manager_headers, vehicle["id"], type="Completed", status="Completed", cost=220,
        description="Tyre swap",
    )
    assert response.status_code == 201
    record = response.json()["data"]
    assert record["status"] == "Completed"
    assert record["completedDate"] is not None
    assert record["vehicle"]["status"] == "Available"

    response = await client.get("/api/expenses", params={"type": "Maintenance"}, headers=manager_headers)
    expenses = response.json()["data"]
    assert [e["amount"] for e in expenses] == [220]
    assert expenses[0]["description"] == "Maintenance: Tyre swap"

    response = await client.patch(f"/api/maintenance/{record['id']}/complete", headers=manager_headers)
    assert response.status_code == 400

    response = await client.get("/api/expenses", headers=manager_headers)
    assert response.json()["count"] == 1

@pytest.mark.asyncio
async def test_list_maintenance_filters(client, safety_headers, create_vehicle):
    truck = await create_vehicle()
    van = await create_vehicle(name="Van", licensePlate="VN-001", type="Van", maxCapacity=500)
    await _schedule(client, safety_headers, truck["id"])
    await _schedule(client, safety_headers, van["id"], type="Urgent", description="Engine light")

    response = await client.get("/api/maintenance", headers=safety_headers)
    assert response.json()["count"] == 2

    response = await client.get("/api/maintenance", params={"type": "Urgent"}, headers=safety_headers)
    assert [r["description"] for r in response.json()["data"]] == ["Engine light"]

    response = await client.get("/api/maintenance", params={"vehicle": truck["id"]}, headers=safety_headers)
    assert [r["vehicle"]["licensePlate"] for r in response.json()["data"]] == ["TK-001"]

    response = await client.get("/api/maintenance/999", headers=safety_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Maintenance record not found"


@pytest.mark.asyncio
async def test_maintenance_notifies_safety(client, signup, manager_headers, create_vehicle):
    safety = await signup("safety_officer")
    headers = {"Authorization": f"Bearer {safety['token']}"}
    vehicle = await create_vehicle()

    await _schedule(client, manager_headers, vehicle["id"])

    response = await client.get("/api/notifications", headers=headers)
    notes = response.json()["data"]
    assert len(notes) == 1
    assert notes[0]["type"] == "MAINTENANCE_UPDATE"
    assert "TK-001" in notes[0]["message"]


@pytest.mark.asyncio
async def test_create_and_list_expenses(client, finance_headers, create_vehicle, create_driver, create_trip):
    vehicle = await create_vehicle()
    driver = await create_driver()
    trip = await create_trip(vehicle["id"], driver["id"])

    response = await client.post("/api/expenses", headers=finance_headers, json={
        "vehicle": vehicle["id"], "trip": trip["id"], "type": "Fuel",
        "amount": 90.5, "quantity": 60, "date": "2026-01-10T08:00:00Z", "receiptNumber": "R-1",
    })
    assert response.status_code == 201
    fuel = response.json()["data"]
    assert fuel["trip"] == trip["id"]
    assert fuel["quantity"] == 60
    assert fuel["receiptNumber"] == "R-1"

    response = await client.post("/api/expenses", headers=finance_headers, json={
        "vehicle": vehicle["id"], "type": "Toll", "amount": 12, "date": "2026-02-01T08:00:00Z",
    })
    assert response.status_code == 201
    assert response.json()["data"]["trip"] is None

    response = await client.get("/api/expenses", headers=finance_headers)
    body = response.json()
    assert body["count"] == 2
    # Most recent date first
    assert [e["type"] for e in body["data"]] == ["Toll", "Fuel"]

    response = await client.get(f"/api/expenses/{fuel['id']}", headers=finance_headers)
    assert response.status_code == 200
    assert response.json()["data"]["amount"] == 90.5


@pytest.mark.asyncio
async def test_expense_validation(client, finance_headers, create_vehicle):
    vehicle = await create_vehicle()

    response = await client.post("/api/expenses", headers=finance_headers, json={
        "vehicle": vehicle["id"], "type": "Fuel", "amount": 0,
    })
    assert response.status_code == 400

    response = await client.post("/api/expenses", headers=finance_headers, json={
        "vehicle": 999, "type": "Fuel", "amount": 10,
    })
    assert response.status_code == 404
    assert response.json()["message"] == "Vehicle not found"

    response = await client.post("/api/expenses", headers=finance_headers, json={
        "vehicle": vehicle["id"], "trip": 999, "type": "Fuel", "amount": 10,
    })
    assert response.status_code == 404
    assert response.json()["message"] == "Trip not found"
