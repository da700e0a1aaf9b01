import shutil
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from planeats.domain.Notification import Notification
from planeats.tests.helpers import make_client, register, recipe_payload


class TestUsersAPI(unittest.TestCase):
    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.client = make_client(self.tmp)

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_register_normalizes_and_rejects_duplicates(self):
        resp = self.client.post("/api/users/register", json={
            "username": "alice", "email": " Alice@Example.COM ", "allergies": ["peanuts", " "],
        })
        self.assertEqual(resp.status_code, 201, resp.text)
        user = resp.json()["user"]
        self.assertEqual(user["email"], "alice@example.com")
        self.assertEqual(user["allergies"], ["peanuts"])
        self.assertEqual(user["nutritionGoals"]["proteinPercentage"], 20)

        dup = self.client.post("/api/users/register", json={"username": "ALICE", "email": "other@example.com"})
        self.assertEqual(dup.status_code, 400)
        self.assertEqual(dup.json()["error"], "Duplicate Error")

    def test_register_validation(self):
        for body in ({"username": "al", "email": "al@example.com"},
                     {"username": "bad name", "email": "bad@example.com"},
                     {"username": "carol", "email": "not-an-email"}):
            resp = self.client.post("/api/users/register", json=body)
            self.assertEqual(resp.status_code, 400, body)

    def test_profile_update_merges(self):
        headers = register(self.client, "alice", profile={"firstName": "Alice"})
        resp = self.client.put("/api/users/profile", json={
            "profile": {"lastName": "Smith"},
            "dietaryPreferences": ["vegetarian"],
            "nutritionGoals": {"dailyCalories": 1800},
            "username": "mallory",
        }, headers=headers)
        self.assertEqual(resp.status_code, 200, resp.text)
        user = resp.json()["user"]
        self.assertEqual(user["profile"], {"firstName": "Alice", "lastName": "Smith"})
        self.assertEqual(user["dietaryPreferences"], ["vegetarian"])
        self.assertEqual(user["nutritionGoals"]["dailyCalories"], 1800)
        self.assertEqual(user["nutritionGoals"]["fatPercentage"], 30)
        self.assertEqual(user["username"], "alice")

        self.assertEqual(self.client.get("/api/users/profile", headers=headers).json()["user"]["profile"]["lastName"],
                         "Smith")

    def test_dashboard(self):
        headers = register(self.client, "alice")
        recipe = self.client.post("/api/recipes", json=recipe_payload(), headers=headers).json()["recipe"]
        self.client.post(f"/api/recipes/{recipe['_id']}/favorite", headers=headers)
        self.client.post("/api/mealplans", json={
            "title": "Active", "startDate": "2024-01-01", "endDate": "2024-01-03", "status": "active",
        }, headers=headers)
        self.client.post("/api/mealplans/generate", json={"ingredients": ["eggs"], "duration": 2}, headers=headers)

        resp = self.client.get("/api/users/dashboard", headers=headers)
        self.assertEqual(resp.status_code, 200)
        stats = resp.json()["stats"]
        self.assertEqual(stats, {
            "recipesCreated": 1,
            "savedRecipes": 1,
            "totalMealPlans": 2,
            "activeMealPlans": 2,
            "completedMealPlans": 0,
            "unreadNotifications": 1,
        })
        self.assertEqual(len(resp.json()["recentMealPlans"]), 2)


class TestNotificationsAPI(unittest.TestCase):
    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.client = make_client(self.tmp)
        self.alice = register(self.client, "alice")
        self.bob = register(self.client, "bob")
        self.repo = self.client.app.state.notifications

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def _notify(self, headers, title="Hello", read=False):
        return self.repo.insert(Notification(user=headers["X-User-Id"], title=title, message="Body", read=read))

    def test_list_and_mark_read(self):
        first = self._notify(self.alice, "First")
        self._notify(self.alice, "Second")
        self._notify(self.bob, "Not yours")

        data = self.client.get("/api/notifications", headers=self.alice).json()
        self.assertEqual(data["unreadCount"], 2)
        self.assertEqual(data["pagination"]["totalNotifications"], 2)

        resp = self.client.put("/api/notifications/read", json={"notificationIds": [first.id]}, headers=self.alice)
        self.assertEqual(resp.json()["modifiedCount"], 1)
        unread = self.client.get("/api/notifications?read=false", headers=self.alice).json()["notifications"]
        self.assertEqual([n["title"] for n in unread], ["Second"])

        resp = self.client.put("/api/notifications/read", headers=self.alice)
        self.assertEqual(resp.json()["modifiedCount"], 1)
        self.assertEqual(self.client.get("/api/notifications", headers=self.bob).json()["unreadCount"], 1)

    def test_delete_is_scoped_to_owner(self):
        note = self._notify(self.alice)
        self.assertEqual(self.client.delete(f"/api/notifications/{note.id}", headers=self.bob).status_code, 404)
        self.assertEqual(self.client.delete(f"/api/notifications/{note.id}", headers=self.alice).status_code, 200)
        self.assertEqual(self.client.delete(f"/api/notifications/{note.id}", headers=self.alice).status_code, 404)

    def test_delete_old_read_notifications(self):
        self._notify(self.alice, "Old unread")
        self._notify(self.alice, "Old read", read=True)
        later = datetime.now(timezone.utc) + timedelta(days=31)
        self.assertEqual(self.repo.delete_old(self.alice["X-User-Id"], days=30, now=later), 1)

        resp = self.client.delete("/api/notifications?days=0", headers=self.alice)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["deletedCount"], 0)


if __name__ == '__main__':
    unittest.main()
