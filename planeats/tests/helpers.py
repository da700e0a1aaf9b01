"""Shared builders for API tests: an app on a temporary data dir with fake LLM providers."""
import json

from fastapi.testclient import TestClient

from planeats.api.api_run import create_app
from planeats.domain.errors import ProviderError
from planeats.infra.Document_Store import DocumentStore
from planeats.logic.ai.service import AIService


class FakeProvider:
    def __init__(self, name, content=None, fail=False, model=None):
        self.name = name
        self.model = model or f"{name}-test"
        self.content = content
        self.fail = fail
        self.calls = 0

    def complete(self, system_prompt, user_prompt):
        self.calls += 1
        if self.fail:
            raise ProviderError(self.name, "quota exceeded")
        return self.content


def ai_plan_text(days=2):
    meals = []
    for i in range(days):
        meals.append({
            "day": i + 1,
            "breakfast": {
                "customMeal": {
                    "name": "Oatmeal",
                    "ingredients": ["oats", "milk"],
                    "nutrition": {"calories": 300, "protein": 10, "carbs": 50, "fat": 5},
                },
                "servings": 1,
            },
            "dinner": {
                "customMeal": {
                    "name": "Chicken rice",
                    "nutrition": {"calories": 600, "protein": 40, "carbs": 60, "fat": 15},
                },
                "servings": 2,
            },
        })
    payload = {"title": "Chicken week", "meals": meals, "additionalIngredients": ["soy sauce"]}
    return "Here is your plan:\n```json\n" + json.dumps(payload) + "\n```"


def make_client(tmp_path, providers=None, preferred="gemini", rate_limit="1000/minute"):
    if providers is None:
        providers = {"gemini": FakeProvider("gemini", content=ai_plan_text()), "openai": None}
    app = create_app(
        store=DocumentStore(tmp_path),
        ai_service=AIService(providers, preferred=preferred),
        rate_limit=rate_limit,
    )
    return TestClient(app)


def register(client, username="alice", **extra):
    resp = client.post("/api/users/register", json={"username": username, "email": f"{username}@example.com", **extra})
    assert resp.status_code == 201, resp.text
    user_id = resp.json()["user"]["_id"]
    return {"X-User-Id": user_id}


def recipe_payload(**overrides):
    data = {
        "title": "Onion soup",
        "description": "Slow cooked onions",
        "ingredients": [
            {"name": "Onion", "amount": 2, "unit": "piece"},
            {"name": "Butter", "amount": 1, "unit": "tbsp"},
        ],
        "instructions": [{"step": 1, "description": "Cook the onions"}],
        "nutrition": {"calories": 250, "protein": 4, "carbohydrates": 30, "fat": 12, "fiber": 3, "sodium": 400},
        "servings": 2,
        "prepTime": 10,
        "cookTime": 40,
        "mealType": ["dinner"],
        "cuisine": "french",
    }
    data.update(overrides)
    return data
