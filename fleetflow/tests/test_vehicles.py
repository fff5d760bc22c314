"""
Tests for the vehicle registry.
"""

import pytest
from sqlalchemy import select, func

from fleetflow.app.models.audit_log import AuditLog
from fleetflow.app.models.vehicle import Vehicle


@pytest.mark.asyncio
async def test_create_vehicle_defaults(create_vehicle):
    vehicle = await create_vehicle()
    assert vehicle["licensePlate"] == "TK-001"
    assert vehicle["status"] == "Available"
    assert vehicle["healthScore"] == 100
    assert vehicle["odometer"] == 0
    assert vehicle["maxCapacity"] == 2000


@pytest.mark.asyncio
async def test_duplicate_license_plate(client, manager_headers, create_vehicle, db_session):
    await create_vehicle()

    response = await client.post("/api/vehicles", headers=manager_headers, json={
        "name": "Other", "licensePlate": "TK-001", "type": "Van", "maxCapacity": 500,
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Vehicle with this license plate already exists"

    count = await db_session.execute(select(func.count(Vehicle.id)))
    assert count.scalar() == 1


@pytest.mark.asyncio
async def test_create_vehicle_validation(client, manager_headers):
    response = await client.post("/api/vehicles", headers=manager_headers, json={
        "name": "Bad", "licensePlate": "  ", "type": "Spaceship", "maxCapacity": 0,
    })
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"licensePlate", "type", "maxCapacity"} <= fields


@pytest.mark.asyncio
async def test_list_vehicles_filters(client, manager_headers, create_vehicle):
    await create_vehicle(name="Truck-01", licensePlate="TK-001", type="Truck")
    await create_vehicle(name="Van-01", licensePlate="VN-001", type="Van", maxCapacity=500)
    await create_vehicle(name="Van-02", licensePlate="VN-002", type="Van", maxCapacity=500, status="In Shop")

    response = await client.get("/api/vehicles", headers=manager_headers)
    body = response.json()
    assert body["count"] == 3
    # Newest first
    assert [v["licensePlate"] for v in body["data"]] == ["VN-002", "VN-001", "TK-001"]

    response = await client.get("/api/vehicles", params={"type": "Van"}, headers=manager_headers)
    assert response.json()["count"] == 2

    response = await client.get("/api/vehicles", params={"status": "In Shop"}, headers=manager_headers)
    assert [v["licensePlate"] for v in response.json()["data"]] == ["VN-002"]

    response = await client.get("/api/vehicles", params={"search": "tk-"}, headers=manager_headers)
    assert [v["licensePlate"] for v in response.json()["data"]] == ["TK-001"]


@pytest.mark.asyncio
async def test_get_update_vehicle(client, manager_headers, create_vehicle):
    vehicle = await create_vehicle()
    other = await create_vehicle(name="Van-01", licensePlate="VN-001", type="Van", maxCapacity=500)

    response = await client.get(f"/api/vehicles/{vehicle['id']}", headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Truck-01"

    response = await client.put(f"/api/vehicles/{vehicle['id']}", headers=manager_headers, json={
        "odometer": 1234, "healthScore": 80,
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["odometer"] == 1234
    assert data["healthScore"] == 80
    assert data["licensePlate"] == "TK-001"

    # Keeping the same plate is fine, taking another vehicle's is not
    response = await client.put(f"/api/vehicles/{vehicle['id']}", headers=manager_headers, json={
        "licensePlate": "TK-001",
    })
    assert response.status_code == 200
    response = await client.put(f"/api/vehicles/{vehicle['id']}", headers=manager_headers, json={
        "licensePlate": other["licensePlate"],
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_vehicle_not_found(client, manager_headers):
    response = await client.get("/api/vehicles/999", headers=manager_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Vehicle not found"}


@pytest.mark.asyncio
async def test_patch_vehicle_status(client, safety_headers, create_vehicle):
    vehicle = await create_vehicle()

    response = await client.patch(
        f"/api/vehicles/{vehicle['id']}/status", json={"status": "Retired"}, headers=safety_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "Retired"

    response = await client.patch(
        f"/api/vehicles/{vehicle['id']}/status", json={"status": "Flying"}, headers=safety_headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid status"

    response = await client.patch(f"/api/vehicles/{vehicle['id']}/status", json={}, headers=safety_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid status"


@pytest.mark.asyncio
async def test_delete_vehicle(client, manager_headers, create_vehicle, db_session):
    vehicle = await create_vehicle()

    response = await client.delete(f"/api/vehicles/{vehicle['id']}", headers=manager_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Vehicle deleted successfully"}

    response = await client.get(f"/api/vehicles/{vehicle['id']}", headers=manager_headers)
    assert response.status_code == 404

    result = await db_session.execute(select(AuditLog).where(AuditLog.action == "VEHICLE_DELETED"))
    audit = result.scalar_one()
    assert audit.meta_data["license_plate"] == "TK-001"


@pytest.mark.asyncio
async def test_delete_vehicle_with_trips_is_blocked(client, manager_headers, create_vehicle, create_driver, create_trip):
    vehicle = await create_vehicle()
    driver = await create_driver()
    await create_trip(vehicle["id"], driver["id"])

    response = await client.delete(f"/api/vehicles/{vehicle['id']}", headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete vehicle with existing trips"
