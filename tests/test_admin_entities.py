import unittest
from unittest.mock import patch

from support import ApiTestCase
from models.branch import Branch
from models.notice import Notice
from models.role import Role
from models.service_type import ServiceType
from models.sos import Sos
from models.staff import Staff


class TestServiceTypesAndRoles(ApiTestCase):
    def test_service_types_are_public(self):
        self.add(ServiceType(name="Armoured escort"))
        names = [s["name"] for s in self.client.get("/api/service-types").json()]
        self.assertEqual(names, ["Armoured escort", "Cash in transit"])
        self.assertEqual(self.client.get(f"/api/service-types/{self.service_type.id}").json()["name"], "Cash in transit")
        self.assertEqual(self.client.get("/api/service-types/999").status_code, 404)

    def test_roles(self):
        self.add(Role(name="driver"))
        res = self.client.get("/api/roles", headers=self.branch_headers)
        self.assertEqual([r["name"] for r in res.json()], ["driver"])


class TestStaff(ApiTestCase):
    body = {"name": "Mutua", "empl_no": "E20", "id_no": "2020", "role": "driver"}

    def test_create_and_update(self):
        res = self.client.post("/api/staff", json=self.body, headers=self.admin_headers)
        self.assertEqual(res.status_code, 201, res.text)
        member = res.json()
        self.assertEqual(member["status"], 1)

        res = self.client.put(
            f"/api/staff/{member['id']}", json={**self.body, "role": "guard"}, headers=self.admin_headers
        )
        self.assertEqual(res.json()["role"], "guard")

    def test_missing_fields(self):
        res = self.client.post("/api/staff", json={"name": "Mutua"}, headers=self.admin_headers)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["error"]["missing"], ["empl_no", "id_no", "role"])

    def test_status_must_be_binary(self):
        member = self.add(Staff(**self.body))
        self.assertEqual(
            self.client.put(f"/api/staff/{member.id}/status", json={"status": 5}, headers=self.admin_headers).status_code,
            400,
        )
        res = self.client.put(f"/api/staff/{member.id}/status", json={"status": 0}, headers=self.admin_headers)
        self.assertEqual(res.json()["status"], 0)

    def test_delete(self):
        member = self.add(Staff(**self.body))
        self.assertEqual(self.client.delete(f"/api/staff/{member.id}", headers=self.admin_headers).json(), {"deleted": True})
        self.assertEqual(self.client.get(f"/api/staff/{member.id}", headers=self.admin_headers).status_code, 404)


class TestClientsAndBranches(ApiTestCase):
    def test_admin_creates_client_and_branch(self):
        client = self.client.post("/api/clients", json={"name": "Initech"}, headers=self.admin_headers).json()
        res = self.client.post(
            f"/api/clients/{client['id']}/branches",
            json={"name": "Gigiri", "password": "pw"},
            headers=self.admin_headers,
        )
        self.assertEqual(res.status_code, 201, res.text)
        self.assertNotIn("password", res.json())
        self.assertNotEqual(self.fetch(Branch, res.json()["id"]).password, "pw")

        branches = self.client.get("/api/branches", headers=self.branch_headers).json()
        gigiri = next(b for b in branches if b["name"] == "Gigiri")
        self.assertEqual(gigiri["client_name"], "Initech")

    def test_duplicate_branch_name(self):
        res = self.client.post(
            f"/api/clients/{self.acme.id}/branches",
            json={"name": "Westlands", "password": "pw"},
            headers=self.admin_headers,
        )
        self.assertEqual(res.status_code, 409)

    def test_branch_role_cannot_manage_clients(self):
        res = self.client.post("/api/clients", json={"name": "Initech"}, headers=self.branch_headers)
        self.assertEqual(res.status_code, 403)

    def test_unknown_client(self):
        self.assertEqual(self.client.get("/api/clients/999", headers=self.admin_headers).status_code, 404)
        res = self.client.post("/api/clients/999/branches", json={"name": "X", "password": "pw"}, headers=self.admin_headers)
        self.assertEqual(res.status_code, 404)

    def test_service_charges(self):
        res = self.client.post(
            f"/api/clients/{self.acme.id}/service-charges",
            json={"service_type_id": self.service_type.id, "price": 1500},
            headers=self.admin_headers,
        )
        self.assertEqual(res.status_code, 201, res.text)
        charge = res.json()
        self.assertEqual(charge["service_type_name"], "Cash in transit")

        res = self.client.put(
            f"/api/clients/{self.acme.id}/service-charges/{charge['id']}",
            json={"price": 1750},
            headers=self.admin_headers,
        )
        self.assertEqual(res.json()["price"], 1750)

        charges = self.client.get(f"/api/clients/{self.acme.id}/service-charges", headers=self.branch_headers).json()
        self.assertEqual(len(charges), 1)

        res = self.client.post(
            f"/api/clients/{self.acme.id}/service-charges",
            json={"service_type_id": 999, "price": 10},
            headers=self.admin_headers,
        )
        self.assertEqual(res.status_code, 400)


class TestNotices(ApiTestCase):
    def test_lifecycle(self):
        author = self.add(Staff(name="Njeri", empl_no="E30", id_no="3030", role="guard"))
        res = self.client.post(
            "/api/notices",
            json={"title": "Road closure", "content": "Avoid Mombasa Rd", "created_by": author.id},
            headers=self.admin_headers,
        )
        self.assertEqual(res.status_code, 201, res.text)
        notice = res.json()
        self.assertEqual(notice["created_by_name"], "Njeri")

        res = self.client.patch(f"/api/notices/{notice['id']}/status", json={"status": 0}, headers=self.admin_headers)
        self.assertEqual(res.json()["status"], 0)

        res = self.client.patch(
            f"/api/notices/{notice['id']}", json={"title": "Road open", "content": "All clear"}, headers=self.admin_headers
        )
        self.assertEqual(res.json()["title"], "Road open")

        self.assertEqual(self.client.delete(f"/api/notices/{notice['id']}", headers=self.admin_headers).status_code, 204)
        self.assertEqual(self.count(Notice), 0)
        self.assertEqual(self.client.delete(f"/api/notices/{notice['id']}", headers=self.admin_headers).status_code, 404)


class TestSos(ApiTestCase):
    def test_status_update(self):
        guard = self.add(Staff(name="Kiptoo", empl_no="E40", id_no="4040", role="guard"))
        alert = self.add(Sos(staff_id=guard.id))

        listed = self.client.get("/api/sos", headers=self.admin_headers).json()
        self.assertEqual(listed[0]["guard_name"], "Kiptoo")

        res = self.client.patch(
            f"/api/sos/{alert.id}/status", json={"status": "resolved", "comment": "False alarm"}, headers=self.admin_headers
        )
        self.assertEqual(res.status_code, 200, res.text)
        self.assertEqual(res.json()["status"], "resolved")
        self.assertEqual(res.json()["comment"], "False alarm")

    def test_invalid_status(self):
        alert = self.add(Sos(staff_id=None))
        res = self.client.patch(f"/api/sos/{alert.id}/status", json={"status": "closed"}, headers=self.admin_headers)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.client.patch("/api/sos/999/status", json={"status": "resolved"}, headers=self.admin_headers).status_code, 404)


class TestOperational(ApiTestCase):
    def test_health(self):
        self.assertEqual(self.client.get("/api/health").json()["status"], "OK")
        self.assertEqual(self.client.get("/").json()["message"], "BM Branch API Server")
        self.assertEqual(self.client.get("/api/test-db").json()["solution"], 2)

    @patch("routers.logs.frontend_logger")
    def test_log_relay(self, mock_logger):
        res = self.client.post(
            "/api/logs",
            json={"timestamp": "2024-05-01T09:00:00Z", "level": "error", "component": "RequestForm", "message": "boom"},
        )
        self.assertEqual(res.json(), {"success": True})
        level, line = mock_logger.log.call_args[0]
        self.assertEqual(level, 40)
        self.assertIn("RequestForm: boom", line)


if __name__ == "__main__":
    unittest.main()
