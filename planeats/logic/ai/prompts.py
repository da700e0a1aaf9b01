"""Prompt construction for meal-plan generation."""
from typing import Any, Dict, List

from planeats.utilities.constants import SYSTEM_PROMPT, MEAL_PLAN_JSON_FORMAT


def build_system_prompt() -> str:
    return SYSTEM_PROMPT


def _joined(values: List[str]) -> str:
    return ", ".join(str(v) for v in values)


def build_user_prompt(params: Dict[str, Any]) -> str:
    """Render the generation parameters into the user prompt.

    Optional lists are only mentioned when non-empty; the expected JSON
    structure is appended at the end.
    """
    lines = [
        f"Create a {params['duration']}-day meal plan using these available ingredients: "
        f"{_joined(params['ingredients'])}.",
        "",
        "Requirements:",
        f"- Servings per meal: {params.get('servings', 1)}",
        f"- Meal types to include: {_joined(params.get('mealTypes') or ['breakfast', 'lunch', 'dinner'])}",
        f"- Cooking time preference: {params.get('cookingTime', 'moderate')}",
    ]

    optional = (
        ('dietaryPreferences', 'Dietary preferences'),
        ('allergies', 'Allergies to avoid'),
        ('excludeIngredients', 'Ingredients to avoid'),
        ('favoriteIngredients', 'Favorite ingredients to prioritize'),
        ('cuisinePreferences', 'Cuisine preferences'),
        ('goals', 'Health goals'),
    )
    for key, label in optional:
        if params.get(key):
            lines.append(f"- {label}: {_joined(params[key])}")

    nutrition_goals = params.get('nutritionGoals') or {}
    if nutrition_goals.get('dailyCalories'):
        lines.append(f"- Target daily calories: {nutrition_goals['dailyCalories']}")

    lines.append("")
    lines.append("Please provide a JSON response with the following structure:")
    return "\n".join(lines) + MEAL_PLAN_JSON_FORMAT


__all__ = ['build_system_prompt', 'build_user_prompt']
