# tests/test_missions_api.py
"""End-to-end tests for the mission lifecycle, tracking and assignment."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import re
from datetime import datetime
from unittest.mock import patch
from jrdriving.models.mission import Mission, MissionStatus
from jrdriving.models.user import Role
from tests.conftest import auth_headers, create_account, create_mission

TRACKING_KEYS = {
    "missionNumber", "status", "priority", "departureCity", "arrivalCity",
    "scheduledDate", "updatedAt", "driverName",
}


def stored(db, mission_id) -> Mission:
    db.expire_all()
    return db.query(Mission).filter(Mission.id == mission_id).first()


class TestStatusChange:
    def test_assigned_driver_starts_mission(self, client, db, driver, customer):
        mission = create_mission(db, customer.id, driver.id, number="JR-1")
        headers = auth_headers(client, "driver@example.com")

        resp = client.patch(f"/api/missions/{mission.id}/status", json={"status": "in_progress"}, headers=headers)
        assert resp.status_code == 204
        assert resp.content == b""

        tracked = client.get("/api/missions/track/JR-1").json()
        assert tracked["status"] == "in_progress"
        assert tracked["departureCity"] == "Paris"
        assert tracked["arrivalCity"] == "Lyon"
        assert tracked["driverName"] == "Jean Dupont"

        row = stored(db, mission.id)
        assert row.created_at <= row.actual_start_time <= datetime.utcnow()
        assert row.actual_end_time is None

    def test_completion_after_start(self, client, db, admin, driver, customer):
        mission = create_mission(db, customer.id, driver.id)
        headers = auth_headers(client, "admin@example.com")

        client.patch(f"/api/missions/{mission.id}/status", json={"status": "in_progress"}, headers=headers)
        resp = client.patch(f"/api/missions/{mission.id}/status", json={"status": "completed"}, headers=headers)
        assert resp.status_code == 204

        row = stored(db, mission.id)
        assert row.status == MissionStatus.COMPLETED
        assert row.actual_end_time >= row.actual_start_time

    def test_other_driver_forbidden_and_status_unchanged(self, client, db, driver, customer):
        create_account(db, "other@example.com", Role.DRIVER, "Paul Martin")
        mission = create_mission(db, customer.id, driver.id)
        headers = auth_headers(client, "other@example.com")

        resp = client.patch(f"/api/missions/{mission.id}/status", json={"status": "completed"}, headers=headers)
        assert resp.status_code == 403
        assert stored(db, mission.id).status == MissionStatus.ASSIGNED

    def test_client_cannot_change_status(self, client, db, driver, customer):
        mission = create_mission(db, customer.id, driver.id)
        headers = auth_headers(client, "client@example.com")
        resp = client.patch(f"/api/missions/{mission.id}/status", json={"status": "cancelled"}, headers=headers)
        assert resp.status_code == 403

    def test_anonymous_rejected(self, client, db, driver, customer):
        mission = create_mission(db, customer.id, driver.id)
        resp = client.patch(f"/api/missions/{mission.id}/status", json={"status": "cancelled"})
        assert resp.status_code == 401

    def test_backward_transition_rejected(self, client, db, admin, customer):
        mission = create_mission(db, customer.id, status=MissionStatus.COMPLETED)
        headers = auth_headers(client, "admin@example.com")
        resp = client.patch(f"/api/missions/{mission.id}/status", json={"status": "pending"}, headers=headers)
        assert resp.status_code == 400
        assert stored(db, mission.id).status == MissionStatus.COMPLETED

    def test_unknown_status_value(self, client, db, admin, customer):
        mission = create_mission(db, customer.id)
        headers = auth_headers(client, "admin@example.com")
        resp = client.patch(f"/api/missions/{mission.id}/status", json={"status": "teleported"}, headers=headers)
        assert resp.status_code == 400
        assert "status" in resp.json()["fields"]

    def test_missing_mission(self, client, admin):
        headers = auth_headers(client, "admin@example.com")
        resp = client.patch("/api/missions/999/status", json={"status": "cancelled"}, headers=headers)
        assert resp.status_code == 404

    def test_transition_emits_event(self, app, client, db, admin, driver, customer):
        mission = create_mission(db, customer.id, driver.id, number="JR-42")
        headers = auth_headers(client, "admin@example.com")

        with patch.object(app.state.notifier, "notify") as notify:
            client.patch(f"/api/missions/{mission.id}/status", json={"status": "cancelled"}, headers=headers)

        payload = notify.call_args[0][1]
        assert payload["missionNumber"] == "JR-42"
        assert payload["status"] == "cancelled"
        assert payload["previousStatus"] == "assigned"
        assert payload["driverId"] == driver.id
        assert payload["clientId"] == customer.id


class TestTracking:
    def test_projection_never_leaks_private_fields(self, client, db, customer):
        for i, status in enumerate(MissionStatus):
            create_mission(db, customer.id, number=f"JR-T{i}", status=status)
            body = client.get(f"/api/missions/track/JR-T{i}").json()
            assert set(body) == TRACKING_KEYS
            assert body["driverName"] is None

    def test_number_is_trimmed(self, client, db, customer):
        create_mission(db, customer.id, number="JR-7")
        assert client.get("/api/missions/track/%20JR-7%20").status_code == 200

    def test_unknown_number(self, client):
        resp = client.get("/api/missions/track/JR-NOPE")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Mission not found"}


class TestAdminMissions:
    def mission_body(self, client_id, **overrides):
        body = {
            "clientId": client_id,
            "departureAddress": "1 rue de Rivoli",
            "departureCity": "Paris",
            "departurePostalCode": "75001",
            "arrivalAddress": "1 place Bellecour",
            "arrivalCity": "Lyon",
            "arrivalPostalCode": "69002",
            "scheduledDate": "2030-05-01T09:00:00",
            "price": 420.5,
            "priority": "express",
        }
        body.update(overrides)
        return body

    def test_create_pending_mission(self, client, admin, customer):
        headers = auth_headers(client, "admin@example.com")
        resp = client.post("/api/missions", json=self.mission_body(customer.id), headers=headers)
        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "pending"
        assert re.fullmatch(r"JR-\d{8}-[0-9A-F]{6}", body["missionNumber"])

    def test_create_with_driver_is_assigned(self, client, admin, driver, customer):
        headers = auth_headers(client, "admin@example.com")
        resp = client.post("/api/missions", json=self.mission_body(customer.id, driverId=driver.id),
                           headers=headers)
        assert resp.json()["status"] == "assigned"

    def test_client_id_must_be_a_client(self, client, admin, driver):
        headers = auth_headers(client, "admin@example.com")
        resp = client.post("/api/missions", json=self.mission_body(driver.id), headers=headers)
        assert resp.status_code == 400
        assert "clientId" in resp.json()["fields"]

    def test_driver_cannot_create(self, client, driver, customer):
        headers = auth_headers(client, "driver@example.com")
        resp = client.post("/api/missions", json=self.mission_body(customer.id), headers=headers)
        assert resp.status_code == 403

    def test_assign_driver(self, client, db, admin, driver, customer):
        mission = create_mission(db, customer.id, status=MissionStatus.PENDING)
        headers = auth_headers(client, "admin@example.com")

        resp = client.patch(f"/api/missions/{mission.id}/assign", json={"driverId": driver.id}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == "assigned"
        assert resp.json()["driverId"] == driver.id

    def test_assign_requires_driver_profile(self, client, db, admin, customer):
        mission = create_mission(db, customer.id, status=MissionStatus.PENDING)
        headers = auth_headers(client, "admin@example.com")
        resp = client.patch(f"/api/missions/{mission.id}/assign", json={"driverId": customer.id}, headers=headers)
        assert resp.status_code == 400

    def test_list_scoped_by_role(self, client, db, admin, driver, customer):
        other = create_account(db, "other-client@example.com", Role.CLIENT)
        create_mission(db, customer.id, driver.id, number="JR-A")
        create_mission(db, other.id, number="JR-B", status=MissionStatus.PENDING)

        def numbers(email, **params):
            resp = client.get("/api/missions", params=params, headers=auth_headers(client, email))
            return sorted(m["missionNumber"] for m in resp.json())

        assert numbers("admin@example.com") == ["JR-A", "JR-B"]
        assert numbers("admin@example.com", status="pending") == ["JR-B"]
        assert numbers("driver@example.com") == ["JR-A"]
        assert numbers("client@example.com") == ["JR-A"]
        assert numbers("other-client@example.com") == ["JR-B"]
