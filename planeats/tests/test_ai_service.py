from planeats.logic.ai.prompts import build_user_prompt
from planeats.logic.ai.service import AIService
from planeats.tests.helpers import FakeProvider, ai_plan_text

PARAMS = {"ingredients": ["chicken", "rice"], "duration": 2}


def test_preferred_provider_is_used_first():
    gemini = FakeProvider("gemini", content=ai_plan_text())
    openai = FakeProvider("openai", content=ai_plan_text())
    result = AIService({"gemini": gemini, "openai": openai}, preferred="gemini").generate_meal_plan(PARAMS)

    assert result["success"] is True
    assert result["model"] == "gemini-test"
    assert result["provider"] == "gemini"
    assert len(result["meals"]) == 2
    assert gemini.calls == 1 and openai.calls == 0


def test_falls_back_to_alternate_provider_on_failure():
    gemini = FakeProvider("gemini", fail=True)
    openai = FakeProvider("openai", content=ai_plan_text(1))
    result = AIService({"gemini": gemini, "openai": openai}, preferred="gemini").generate_meal_plan(PARAMS)

    assert result["success"] is True
    assert result["provider"] == "openai"
    assert gemini.calls == 1 and openai.calls == 1


def test_preferred_without_key_uses_configured_alternate():
    openai = FakeProvider("openai", content=ai_plan_text(1))
    result = AIService({"gemini": None, "openai": openai}, preferred="gemini").generate_meal_plan(PARAMS)
    assert result["success"] is True
    assert result["provider"] == "openai"


def test_no_keys_configured():
    service = AIService({"gemini": None, "openai": None})
    assert service.configured is False
    assert service.generate_meal_plan(PARAMS) == {"success": False, "error": "No AI API keys configured"}


def test_both_providers_failing_reports_last_error():
    service = AIService({"gemini": FakeProvider("gemini", fail=True), "openai": FakeProvider("openai", fail=True)},
                        preferred="openai")
    result = service.generate_meal_plan(PARAMS)
    assert result["success"] is False
    assert result["error"] == "gemini API error: quota exceeded"


def test_parse_failure_is_returned():
    service = AIService({"gemini": FakeProvider("gemini", content="no plan today")})
    result = service.generate_meal_plan(PARAMS)
    assert result["success"] is False
    assert result["error"].startswith("Failed to parse AI response")


def test_input_is_checked_before_calling_providers():
    gemini = FakeProvider("gemini", content=ai_plan_text())
    service = AIService({"gemini": gemini})
    assert service.generate_meal_plan({"ingredients": [], "duration": 3})["error"] == "Ingredients are required"
    assert service.generate_meal_plan({"ingredients": ["egg"], "duration": 0})["error"] == \
        "Duration must be at least 1 day"
    assert gemini.calls == 0


def test_user_prompt_mentions_only_given_preferences():
    prompt = build_user_prompt({
        "ingredients": ["chicken", "rice"], "duration": 3, "servings": 2,
        "allergies": ["peanuts"], "dietaryPreferences": [],
        "nutritionGoals": {"dailyCalories": 1800},
    })
    assert prompt.startswith("Create a 3-day meal plan using these available ingredients: chicken, rice.")
    assert "- Servings per meal: 2" in prompt
    assert "- Allergies to avoid: peanuts" in prompt
    assert "Dietary preferences" not in prompt
    assert "- Target daily calories: 1800" in prompt
    assert '"meals": [' in prompt
