from datetime import date

from planeats.logic.ai.response_parser import extract_json_object, parse_ai_response

OATMEAL = ('{"meals":[{"breakfast":{"customMeal":{"name":"Oatmeal","nutrition":'
           '{"calories":300,"protein":10,"carbs":50,"fat":5}},"servings":2}}]}')


def test_happy_path_sums_custom_meal_nutrition():
    result = parse_ai_response("Sure! " + OATMEAL + " Enjoy.")

    assert result["success"] is True
    day = result["meals"][0]
    assert day["totalNutrition"] == {"calories": 600, "protein": 20, "carbs": 100, "fat": 10}
    assert result["title"] == "AI Generated Meal Plan"
    assert result["description"] == "Personalized meal plan created by AI"
    assert result["totalNutrition"] == {}
    assert result["additionalIngredients"] == []


def test_no_json_is_a_failure_result():
    result = parse_ai_response("I cannot help with that.")
    assert result == {"success": False, "error": "Failed to parse AI response: no JSON found"}


def test_invalid_json_is_a_failure_result():
    result = parse_ai_response('{"meals": [1, 2}')
    assert result["success"] is False
    assert "invalid JSON" in result["error"]


def test_meals_must_be_a_list():
    result = parse_ai_response('{"title": "x", "meals": {"day": 1}}')
    assert result == {"success": False, "error": "Failed to parse AI response: invalid meals format"}


def test_missing_day_fields_are_backfilled():
    today = date(2024, 1, 4)
    result = parse_ai_response('{"meals": [{}, {"day": 7, "date": "2024-02-01", "dayName": "Thursday"}]}', today=today)

    first, second = result["meals"]
    assert first["day"] == 1
    assert first["date"] == "2024-01-04"
    assert first["dayName"] == "Thursday"
    assert first["breakfast"] == {} and first["lunch"] == {} and first["dinner"] == {}
    assert first["snacks"] == []
    assert first["totalNutrition"] == {"calories": 0, "protein": 0, "carbs": 0, "fat": 0}
    assert second["day"] == 7
    assert second["date"] == "2024-02-01"


def test_recipe_backed_slots_are_not_summed():
    text = ('{"meals": [{"lunch": {"recipe": "abc", "servings": 3}, '
            '"snacks": [{"customMeal": {"name": "Nuts", "nutrition": {"calories": 150, "fat": 12}}}]}]}')
    day = parse_ai_response(text)["meals"][0]
    assert day["totalNutrition"] == {"calories": 150, "protein": 0, "carbs": 0, "fat": 12}


def test_passthrough_fields():
    text = ('{"title": "Veggie week", "description": "Plants", "meals": [], '
            '"totalNutrition": {"dailyAverage": {"calories": 1800}}, "additionalIngredients": ["salt"]}')
    result = parse_ai_response(text)
    assert result["title"] == "Veggie week"
    assert result["description"] == "Plants"
    assert result["meals"] == []
    assert result["totalNutrition"] == {"dailyAverage": {"calories": 1800}}
    assert result["additionalIngredients"] == ["salt"]


def test_code_fences_and_trailing_commas():
    text = '```json\n{"meals": [{"day": 1, "snacks": [],},],}\n```'
    result = parse_ai_response(text)
    assert result["success"] is True
    assert result["meals"][0]["day"] == 1


def test_extract_ignores_braces_inside_strings():
    text = 'noise {"a": "}{ \\" }", "b": {"c": 1}} trailing {"second": true}'
    assert extract_json_object(text) == '{"a": "}{ \\" }", "b": {"c": 1}}'


def test_extract_stops_at_first_object():
    assert extract_json_object('{"a": 1} and {"b": 2}') == '{"a": 1}'
    assert extract_json_object('{"unbalanced": ') is None
    assert extract_json_object("") is None


def test_quoted_and_malformed_numbers_are_coerced():
    text = ('{"meals": [{"breakfast": {"customMeal": {"name": "Oats", "nutrition": '
            '{"calories": "300", "protein": "lots", "carbs": null, "fat": true}}, "servings": "2"}}]}')
    result = parse_ai_response(text)

    assert result["success"] is True
    day = result["meals"][0]
    assert day["totalNutrition"] == {"calories": 600, "protein": 0, "carbs": 0, "fat": 0}
    assert day["breakfast"]["servings"] == 2
    assert day["breakfast"]["customMeal"]["nutrition"]["protein"] == 0


def test_unusable_servings_default_to_one():
    text = ('{"meals": [{"dinner": {"customMeal": {"name": "Soup", "nutrition": {"calories": 200}}, '
            '"servings": "a few"}, "lunch": {"customMeal": {"name": "Salad", "nutrition": {"calories": 100}}, '
            '"servings": -3}}]}')
    day = parse_ai_response(text)["meals"][0]
    assert day["dinner"]["servings"] == 1
    assert day["lunch"]["servings"] == 1
    assert day["totalNutrition"]["calories"] == 300


def test_wrongly_typed_containers_are_dropped():
    text = ('{"title": 42, "description": ["a"], "totalNutrition": "high", "additionalIngredients": "salt", '
            '"meals": [{"snacks": 2, "breakfast": "toast", "lunch": {"customMeal": "salad"}}, 5]}')
    result = parse_ai_response(text)

    assert result["success"] is True
    assert result["title"] == "42"
    assert isinstance(result["description"], str)
    assert result["totalNutrition"] == {}
    assert result["additionalIngredients"] == []
    first, second = result["meals"]
    assert first["snacks"] == []
    assert first["breakfast"] == {}
    assert "customMeal" not in first["lunch"]
    assert second["day"] == 2
