import json
import shutil
import tempfile
import unittest
from pathlib import Path

from planeats.tests.helpers import FakeProvider, ai_plan_text, make_client, register


class TestGenerateMealPlanAPI(unittest.TestCase):
    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_generated_plan_is_stored_and_scheduled(self):
        client = make_client(self.tmp)
        headers = register(client, "alice", allergies=["peanuts"], dislikedIngredients=["okra"])

        resp = client.post("/api/mealplans/generate", json={
            "ingredients": ["chicken", " rice ", ""],
            "duration": 2,
            "startDate": "2024-03-01",
            "allergies": ["shellfish"],
        }, headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        body = resp.json()
        plan = body["mealPlan"]

        self.assertTrue(plan["aiGenerated"])
        self.assertEqual(plan["status"], "active")
        self.assertEqual(plan["title"], "Chicken week")
        self.assertEqual(plan["startDate"], "2024-03-01")
        self.assertEqual(plan["endDate"], "2024-03-03")
        self.assertEqual(plan["duration"], 2)
        self.assertEqual([d["date"] for d in plan["meals"]], ["2024-03-01", "2024-03-02"])
        self.assertEqual(plan["meals"][0]["dayName"], "Friday")
        self.assertEqual(plan["meals"][0]["totalNutrition"]["calories"], 1500)
        self.assertEqual(plan["aiModel"], "gemini-test")
        self.assertEqual(plan["allergies"], ["shellfish", "peanuts"])
        self.assertEqual(plan["avoidedIngredients"], ["okra"])
        self.assertEqual(plan["generationMetadata"]["additionalIngredients"], ["soy sauce"])

        prompt = json.loads(plan["aiPrompt"])
        self.assertEqual(prompt["ingredients"], ["chicken", "rice"])
        self.assertEqual(body["aiMetadata"]["provider"], "gemini")
        self.assertEqual(body["aiMetadata"]["prompt"]["duration"], 2)

        stored = client.get(f"/api/mealplans/{plan['_id']}", headers=headers)
        self.assertEqual(stored.status_code, 200)

        notes = client.get("/api/notifications", headers=headers).json()
        self.assertEqual(notes["unreadCount"], 1)
        self.assertEqual(notes["notifications"][0]["title"], "Meal plan ready")
        self.assertEqual(notes["notifications"][0]["relatedEntity"],
                         {"entityType": "mealplan", "entityId": plan["_id"]})

    def test_extra_days_from_the_model_are_dropped(self):
        providers = {"gemini": FakeProvider("gemini", content=ai_plan_text(days=5)), "openai": None}
        client = make_client(self.tmp, providers=providers)
        headers = register(client)
        resp = client.post("/api/mealplans/generate", json={"ingredients": ["eggs"], "duration": 3},
                           headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(len(resp.json()["mealPlan"]["meals"]), 3)

    def test_short_answer_is_padded_to_duration(self):
        providers = {"gemini": FakeProvider("gemini", content=ai_plan_text(days=2)), "openai": None}
        client = make_client(self.tmp, providers=providers)
        headers = register(client)
        resp = client.post("/api/mealplans/generate", json={
            "ingredients": ["eggs"], "duration": 7, "startDate": "2024-03-01",
        }, headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        plan = resp.json()["mealPlan"]
        self.assertEqual(plan["duration"], 7)
        self.assertEqual(len(plan["meals"]), 7)
        self.assertEqual(plan["meals"][6]["date"], "2024-03-07")
        self.assertEqual(plan["progress"]["totalMeals"], 21)
        self.assertEqual(plan["meals"][1]["breakfast"]["customMeal"]["name"], "Oatmeal")
        self.assertIsNone(plan["meals"][2]["breakfast"]["customMeal"])

    def test_fallback_provider_answers(self):
        providers = {
            "gemini": FakeProvider("gemini", fail=True),
            "openai": FakeProvider("openai", content=ai_plan_text()),
        }
        client = make_client(self.tmp, providers=providers)
        headers = register(client)
        resp = client.post("/api/mealplans/generate", json={"ingredients": ["eggs"], "duration": 2},
                           headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json()["aiMetadata"]["provider"], "openai")
        self.assertEqual(providers["gemini"].calls, 1)

    def test_provider_failure_is_reported(self):
        providers = {"gemini": FakeProvider("gemini", fail=True), "openai": None}
        client = make_client(self.tmp, providers=providers)
        headers = register(client)
        resp = client.post("/api/mealplans/generate", json={"ingredients": ["eggs"]}, headers=headers)
        self.assertEqual(resp.status_code, 500)
        body = resp.json()
        self.assertEqual(body["error"], "AI generation failed")
        self.assertIn("quota exceeded", body["message"])
        self.assertEqual(client.get("/api/mealplans", headers=headers).json()["mealPlans"], [])

    def test_unparseable_answer_is_reported(self):
        providers = {"gemini": FakeProvider("gemini", content="Sorry, I cannot help."), "openai": None}
        client = make_client(self.tmp, providers=providers)
        headers = register(client)
        resp = client.post("/api/mealplans/generate", json={"ingredients": ["eggs"]}, headers=headers)
        self.assertEqual(resp.status_code, 500)
        self.assertTrue(resp.json()["message"].startswith("Failed to parse AI response"))

    def test_request_validation(self):
        client = make_client(self.tmp)
        headers = register(client)
        resp = client.post("/api/mealplans/generate", json={"ingredients": ["  "]}, headers=headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Validation Error")

        resp = client.post("/api/mealplans/generate", json={"ingredients": ["eggs"], "duration": 31},
                           headers=headers)
        self.assertEqual(resp.status_code, 400)

        self.assertEqual(client.post("/api/mealplans/generate", json={"ingredients": ["eggs"]}).status_code, 401)


if __name__ == '__main__':
    unittest.main()
