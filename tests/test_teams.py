import unittest

from support import ApiTestCase
from models.staff import Staff
from models.team import Team, TeamMember


class TestTeams(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.commander = self.add(Staff(name="Wanjiru", empl_no="E10", id_no="1010", role="crew_commander"))
        self.driver = self.add(Staff(name="Kamau", empl_no="E11", id_no="1011", role="driver"))
        self.guard = self.add(Staff(name="Achieng", empl_no="E12", id_no="1012", role="guard"))

    def test_create_team_with_members(self):
        res = self.client.post(
            "/api/teams",
            json={
                "name": "Bravo",
                "crew_commander_id": self.commander.id,
                "members": [self.driver.id, self.guard.id, self.driver.id],
            },
            headers=self.admin_headers,
        )
        self.assertEqual(res.status_code, 201, res.text)
        team = res.json()
        self.assertEqual(team["crew_commander_name"], "Wanjiru")
        self.assertEqual(
            sorted(m["id"] for m in team["members"]),
            sorted([self.commander.id, self.driver.id, self.guard.id]),
        )
        self.assertEqual(self.count(TeamMember), 3)

    def test_unknown_member_persists_nothing(self):
        res = self.client.post(
            "/api/teams",
            json={"name": "Charlie", "crew_commander_id": self.commander.id, "members": [self.driver.id, 404]},
            headers=self.admin_headers,
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["error"], {"missing": [404]})
        self.assertEqual(self.count(Team), 0)
        self.assertEqual(self.count(TeamMember), 0)

    def test_list_teams(self):
        self.client.post(
            "/api/teams",
            json={"name": "Delta", "crew_commander_id": self.commander.id, "members": [self.guard.id]},
            headers=self.admin_headers,
        )
        teams = self.client.get("/api/teams", headers=self.branch_headers).json()
        self.assertEqual([t["name"] for t in teams], ["Delta"])
        self.assertEqual(len(teams[0]["members"]), 2)

    def test_new_team_can_be_assigned(self):
        team = self.client.post(
            "/api/teams",
            json={"name": "Echo", "crew_commander_id": self.commander.id},
            headers=self.admin_headers,
        ).json()
        req = self.add_request()
        record = self.client.patch(
            f"/api/requests/{req.id}", json={"team_id": team["id"]}, headers=self.admin_headers
        ).json()
        self.assertEqual(record["staffId"], self.commander.id)


if __name__ == "__main__":
    unittest.main()
