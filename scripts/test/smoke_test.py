# scripts/test/smoke_test.py
"""
Drive a running backend through the main flows: health, quote, recruitment,
admin login + dashboard, mission creation and public tracking.
Usage: python scripts/test/smoke_test.py --url http://localhost:4000/api \
           --admin-email admin@jrdriving.fr --admin-password secret123
"""

import argparse
import base64
import sys
import uuid
from datetime import datetime, timedelta

import requests


def check(resp, expected, label):
    ok = resp.status_code == expected
    print(f"{'✅' if ok else '❌'} {label} → HTTP {resp.status_code}")
    if not ok:
        print(f"   {resp.text[:300]}")
        sys.exit(1)
    return resp.json() if resp.content else None


def run(base_url, admin_email, admin_password):
    s = requests.Session()
    suffix = uuid.uuid4().hex[:8]

    health = check(s.get(f"{base_url}/health", timeout=10), 200, "Health")
    print(f"   database={health['database']} webhooks={health['webhooks']}")

    quote = check(s.post(f"{base_url}/quotes", json={
        "fullName": "Smoke Test",
        "email": f"smoke-{suffix}@example.com",
        "phone": "+33600000000",
        "vehicleType": "Sedan",
        "departureLocation": "Paris",
        "arrivalLocation": "Lyon",
        "attachments": [{
            "name": "note.txt", "type": "text/plain", "size": 5,
            "data": base64.b64encode(b"hello").decode(),
        }],
    }, timeout=10), 201, "Quote submitted")

    check(s.post(f"{base_url}/recruitment", json={
        "fullName": "Smoke Driver",
        "email": f"driver-{suffix}@example.com",
        "phone": "0600000000",
        "yearsExperience": 4,
        "licenseTypes": ["B"],
        "regions": ["Île-de-France"],
        "availability": "Weekends",
        "hasOwnVehicle": False,
        "hasCompany": True,
    }, timeout=10), 201, "Driver application submitted")

    client = requests.Session()
    client_session = check(client.post(f"{base_url}/auth/signup", json={
        "email": f"client-{suffix}@example.com",
        "password": "password1",
        "fullName": "Smoke Client",
        "phone": "0611111111",
        "role": "client",
    }, timeout=10), 201, "Client signup")

    check(s.post(f"{base_url}/auth/login", json={"email": admin_email, "password": admin_password},
                 timeout=10), 200, "Admin login")

    dashboard = check(s.get(f"{base_url}/admin/dashboard", timeout=10), 200, "Dashboard")
    print(f"   stats={dashboard['stats']}")
    for insight in dashboard["aiInsights"]:
        print(f"   💡 {insight}")

    resp = s.get(f"{base_url}/quotes/{quote['id']}/attachments/{quote['attachments'][0]['id']}", timeout=10)
    print(f"{'✅' if resp.content == b'hello' else '❌'} Quote attachment download → HTTP {resp.status_code}")

    mission = check(s.post(f"{base_url}/missions", json={
        "clientId": client_session["profile"]["id"],
        "departureAddress": "1 rue de Rivoli",
        "departureCity": "Paris",
        "departurePostalCode": "75001",
        "arrivalAddress": "1 place Bellecour",
        "arrivalCity": "Lyon",
        "arrivalPostalCode": "69002",
        "scheduledDate": (datetime.utcnow() + timedelta(days=2)).isoformat(),
        "price": 450,
    }, timeout=10), 201, "Mission created")

    check(s.patch(f"{base_url}/missions/{mission['id']}/status", json={"status": "cancelled"},
                  timeout=10), 204, "Mission cancelled")

    tracking = check(requests.get(f"{base_url}/missions/track/{mission['missionNumber']}", timeout=10),
                     200, "Public tracking")
    print(f"   {tracking['missionNumber']}: {tracking['status']} "
          f"{tracking['departureCity']} → {tracking['arrivalCity']}")

    print("\n🎉 Smoke test passed")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Smoke-test a running JR Driving backend")
    parser.add_argument("--url", default="http://localhost:4000/api")
    parser.add_argument("--admin-email", required=True)
    parser.add_argument("--admin-password", required=True)
    args = parser.parse_args()
    run(args.url.rstrip("/"), args.admin_email, args.admin_password)
