"""Shopping list builder.

Merges the ingredients of every scheduled meal of a meal plan into one
deduplicated, categorized list. Provides build_shopping_list(plan, recipes)
and generate_shopping_list(plan, recipes, repository).
"""
import logging
from typing import Dict, List, Any

from planeats.domain.MealPlan import MealPlan, ShoppingListItem
from planeats.domain.Recipe import Recipe
from planeats.logic.shopping.categorizer import categorize_for_meal_plan

logger = logging.getLogger(__name__)


def _key(name: str) -> str:
    return (name or '').strip().lower()


def build_shopping_list(plan: MealPlan, recipes: Dict[str, Recipe]) -> List[ShoppingListItem]:
    """Aggregate ingredient amounts over all days and slots of a plan.

    Args:
        plan: MealPlan whose schedule is walked (breakfast, lunch, dinner, snacks).
        recipes: Resolved recipes by id; slot references missing here are skipped.

    Returns:
        ShoppingListItem list sorted by ingredient name. Amounts are
        ``ingredient.amount * slot.servings`` summed per case/whitespace-insensitive
        name; units are not converted, the first unit seen is kept.
    """
    required: Dict[str, Dict[str, Any]] = {}

    for day in plan.meals:
        for meal in day.slots():
            if not meal.recipe:
                continue
            recipe = recipes.get(meal.recipe)
            if recipe is None or not recipe.ingredients:
                continue
            servings = meal.servings or 1
            for ing in recipe.ingredients:
                k = _key(ing.name)
                if not k:
                    continue
                amount = (ing.amount or 0) * servings
                if k in required:
                    required[k]['amount'] += amount
                else:
                    required[k] = {
                        'ingredient': ing.name.strip(),
                        'amount': amount,
                        'unit': ing.unit,
                        'category': categorize_for_meal_plan(ing.name),
                    }

    items = [
        ShoppingListItem(
            ingredient=data['ingredient'],
            amount=data['amount'],
            unit=data['unit'],
            category=data['category'],
            purchased=False,
        )
        for data in required.values()
    ]
    items.sort(key=lambda i: i.ingredient.lower())
    return items


def generate_shopping_list(plan: MealPlan, recipes: Dict[str, Recipe], repository) -> MealPlan:
    """Replace the plan's shopping list wholesale and persist the plan."""
    plan.shopping_list = build_shopping_list(plan, recipes)
    logger.info("Generated %d shopping list item(s) for meal plan %s", len(plan.shopping_list), plan.id)
    return repository.save(plan)


__all__ = ['build_shopping_list', 'generate_shopping_list']
