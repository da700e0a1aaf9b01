"""Nutrition aggregation for a single day of a meal plan."""
from typing import Dict, Any

from planeats.domain.MealPlan import DayPlan
from planeats.domain.Recipe import Recipe

NUTRIENTS = ('calories', 'protein', 'carbs', 'fat', 'fiber', 'sodium')


def _normalize_nutrition(nutrition: Dict[str, Any]) -> Dict[str, float]:
    if not isinstance(nutrition, dict):
        return {k: 0 for k in NUTRIENTS}
    return {
        'calories': nutrition.get('calories', 0) or 0,
        'protein': nutrition.get('protein', 0) or 0,
        'carbs': nutrition.get('carbs', nutrition.get('carbohydrates', 0) or 0) or 0,
        'fat': nutrition.get('fat', nutrition.get('fats', 0) or 0) or 0,
        'fiber': nutrition.get('fiber', 0) or 0,
        'sodium': nutrition.get('sodium', 0) or 0,
    }


def calculate_day_nutrition(day: DayPlan, recipes: Dict[str, Recipe]) -> Dict[str, Any]:
    """Sum the nutrition of every slot of ``day``.

    A slot with a resolved recipe contributes the recipe's nutrition
    (``carbohydrates`` reported as ``carbs``); otherwise its customMeal
    nutrition is used. Each contribution is multiplied by the slot servings.

    Returns:
        {'day': int, 'date': 'YYYY-MM-DD' | None, 'dayName': str,
         'totals': {calories, protein, carbs, fat, fiber, sodium},
         'meals': {'breakfast': {...}, 'lunch': {...}, 'dinner': {...}, 'snacks': [...]}}
    """
    totals = {k: 0 for k in NUTRIENTS}

    def _meal_values(meal):
        source = None
        name = None
        recipe = recipes.get(meal.recipe) if meal.recipe else None
        if recipe is not None:
            source, name = recipe.nutrition, recipe.title
        elif meal.custom_meal:
            source, name = meal.custom_meal.get('nutrition'), meal.custom_meal.get('name')
        if source is None:
            return None
        servings = meal.servings or 1
        values = {k: v * servings for k, v in _normalize_nutrition(source).items()}
        for k, v in values.items():
            totals[k] += v
        return {'name': name, 'servings': servings, **values}

    meals = {slot: _meal_values(getattr(day, slot)) for slot in ('breakfast', 'lunch', 'dinner')}
    meals['snacks'] = [m for m in (_meal_values(s) for s in day.snacks) if m]

    return {
        'day': day.day,
        'date': day.date.isoformat() if day.date else None,
        'dayName': day.day_name,
        'totals': totals,
        'meals': meals,
    }


__all__ = ['calculate_day_nutrition']
