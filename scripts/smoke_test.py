"""
End-to-end smoke test against a live server.

Starts uvicorn on a throwaway SQLite database, then drives the main
dispatch flow over HTTP: signup, fleet setup, a trip from Draft to
Completed, and the manager dashboard.

    python scripts/smoke_test.py
"""

import os
import signal
import subprocess
import sys
import tempfile
import time
import uuid

import httpx

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/api"


def wait_for_server(retries=15, delay=1):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for _ in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def check(resp, expected, label):
    if resp.status_code != expected:
        print(f"❌ {label}: {resp.status_code} {resp.text}")
        raise SystemExit(1)
    print(f"✅ {label}")
    return resp.json()


def run_smoke_test(client: httpx.Client):
    suffix = uuid.uuid4().hex[:6].upper()

    print("\n--- [Step 1] Signing up a manager ---")
    body = check(client.post(f"{API_PREFIX}/auth/signup", json={
        "name": "Smoke Manager",
        "email": f"smoke-{suffix.lower()}@fleetflow.io",
        "password": "smoke123",
        "role": "manager",
    }), 201, "Signup")
    client.headers["Authorization"] = f"Bearer {body['token']}"

    print("\n--- [Step 2] Creating a vehicle and a driver ---")
    vehicle = check(client.post(f"{API_PREFIX}/vehicles", json={
        "name": "Smoke Truck", "licensePlate": f"SM-{suffix}", "type": "Truck", "maxCapacity": 2000,
    }), 201, "Vehicle created")["data"]
    driver = check(client.post(f"{API_PREFIX}/drivers", json={
        "name": "Smoke Driver", "email": f"driver-{suffix.lower()}@fleetflow.io", "phone": "555-0000",
        "licenseNumber": f"DL-{suffix}", "licenseExpiry": "2099-01-01T00:00:00Z",
        "licenseCategory": "Truck", "status": "On Duty",
    }), 201, "Driver created")["data"]

    print("\n--- [Step 3] Capacity check ---")
    check(client.post(f"{API_PREFIX}/trips", json={
        "vehicle": vehicle["id"], "driver": driver["id"],
        "origin": "Depot", "destination": "Client", "cargoWeight": 2500,
    }), 400, "Overweight trip rejected")
    trip = check(client.post(f"{API_PREFIX}/trips", json={
        "vehicle": vehicle["id"], "driver": driver["id"],
        "origin": "Depot", "destination": "Client", "cargoWeight": 1800,
    }), 201, "Trip created")["data"]
    print(f"   Trip code: {trip['tripId']}")

    print("\n--- [Step 4] Running the trip ---")
    started = check(client.patch(f"{API_PREFIX}/trips/{trip['id']}/status", json={"status": "In Progress"}),
                    200, "Trip started")["data"]
    assert started["vehicle"]["status"] == "On Trip", started
    done = check(client.patch(f"{API_PREFIX}/trips/{trip['id']}/progress", json={"progress": 100}),
                 200, "Trip completed via progress")["data"]
    assert done["status"] == "Completed", done
    assert done["vehicle"]["status"] == "Available", done

    print("\n--- [Step 5] Dashboards and notifications ---")
    dashboard = check(client.get(f"{API_PREFIX}/dashboard/manager"), 200, "Manager dashboard")["data"]
    print(f"   KPIs: {dashboard['kpis']}")
    notes = check(client.get(f"{API_PREFIX}/notifications"), 200, "Notifications")
    print(f"   {notes['count']} notifications")


def main():
    db_dir = tempfile.mkdtemp(prefix="fleetflow-smoke-")
    env = {
        **os.environ,
        "DATABASE_URL": f"sqlite+aiosqlite:///{os.path.join(db_dir, 'smoke.db')}",
        "DEBUG": "True",
    }

    print("\n--- [Step 0] Starting Server ---")
    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "fleetflow.app.main:app", "--host", "127.0.0.1", "--port", "8000"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=env,
    )
    try:
        if not wait_for_server():
            proc.terminate()
            out, err = proc.communicate(timeout=5)
            print("Server Stdout:", out.decode())
            print("Server Stderr:", err.decode())
            raise SystemExit(1)

        with httpx.Client(base_url=BASE_URL, timeout=10) as client:
            run_smoke_test(client)
        print("\n🎉 Smoke test passed")
    finally:
        print("\n--- Stopping Server ---")
        proc.send_signal(signal.SIGTERM)
        proc.wait()


if __name__ == "__main__":
    main()
