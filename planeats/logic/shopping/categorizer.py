"""Ingredient categorization by keyword substring matching.

Two call sites with different fallbacks:
  - categorize_for_meal_plan: shopping lists generated from a meal plan,
    unmatched names fall through to 'pantry'.
  - categorize_for_standalone_list: items added to a standalone shopping list,
    unmatched names fall through to 'other' (this enum also has 'beverages').
"""
from typing import Tuple

# Ordered: the first group with a matching keyword wins
KEYWORD_GROUPS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('meat', ('chicken', 'beef', 'pork', 'fish', 'turkey', 'lamb', 'salmon', 'tuna')),
    ('dairy', ('milk', 'cheese', 'yogurt', 'butter', 'cream', 'eggs')),
    ('produce', ('apple', 'banana', 'orange', 'tomato', 'onion', 'carrot', 'lettuce', 'spinach')),
    ('bakery', ('bread', 'bagel', 'muffin', 'cake', 'cookies')),
    ('frozen', ('frozen', 'ice cream', 'frozen vegetables')),
)

BEVERAGE_KEYWORDS: Tuple[str, ...] = ('coffee', 'tea', 'juice', 'soda', 'water', 'wine', 'beer')


def _match_group(name: str):
    lowered = (name or '').lower()
    for category, keywords in KEYWORD_GROUPS:
        if any(k in lowered for k in keywords):
            return category
    return None


def categorize_for_meal_plan(name: str) -> str:
    """Category for a meal-plan shopping list item; 'pantry' when nothing matches."""
    return _match_group(name) or 'pantry'


def categorize_for_standalone_list(name: str) -> str:
    """Category for a standalone shopping list item; 'other' when nothing matches."""
    category = _match_group(name)
    if category:
        return category
    lowered = (name or '').lower()
    if any(k in lowered for k in BEVERAGE_KEYWORDS):
        return 'beverages'
    return 'other'


__all__ = ['categorize_for_meal_plan', 'categorize_for_standalone_list', 'KEYWORD_GROUPS']
