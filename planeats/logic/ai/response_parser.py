"""Turns a raw LLM completion into a meal-plan payload.

parse_ai_response never raises: every failure is returned as
``{"success": False, "error": "Failed to parse AI response: ..."}``.
"""
import json
import logging
import math
import re
from datetime import date
from json import JSONDecodeError
from typing import Any, Dict, Optional

from planeats.domain.MealPlan import day_name_for
from planeats.domain.errors import ParseError
from planeats.utilities.constants import DEFAULT_AI_TITLE, DEFAULT_AI_DESCRIPTION, ISO_DATE_FORMAT

logger = logging.getLogger(__name__)

MACROS = ('calories', 'protein', 'carbs', 'fat')


def _remove_trailing_commas(text: str) -> str:
    """Remove trailing commas before a closing brace/bracket."""
    return re.sub(r",\s*(\}|\])", r"\1", text)


def extract_json_object(text: str) -> Optional[str]:
    """Return the first top-level ``{...}`` substring of ``text``.

    Braces inside JSON strings (including escaped quotes) are ignored.
    Returns None when no balanced object exists.
    """
    if not text:
        return None
    start = None
    depth = 0
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if start is None:
            if ch == '{':
                start = i
                depth = 1
            continue
        if in_string:
            if escape:
                escape = False
            elif ch == '\\':
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def _loads(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except JSONDecodeError:
        try:
            return json.loads(_remove_trailing_commas(candidate))
        except JSONDecodeError as e:
            raise ParseError(f"invalid JSON ({e.msg})") from e


def _number(value: Any, default: float = 0) -> float:
    """Numeric value of an LLM-supplied field; numeric strings are accepted."""
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    return default


def _servings(value: Any) -> float:
    servings = _number(value, default=1)
    return servings if servings > 0 else 1


def _text(value: Any, default: str) -> str:
    if value is None or value == '':
        return default
    return value if isinstance(value, str) else str(value)


def _normalize_slot(meal: Any) -> Dict[str, Any]:
    """Slot with numeric servings and a well-formed customMeal; {} when unusable."""
    if not isinstance(meal, dict) or not meal:
        return {}
    slot = {**meal, 'servings': _servings(meal.get('servings'))}
    if not isinstance(slot.get('recipe'), str):
        slot.pop('recipe', None)
    custom = meal.get('customMeal')
    if isinstance(custom, dict):
        nutrition = custom.get('nutrition')
        slot['customMeal'] = {
            **custom,
            'name': _text(custom.get('name'), 'Meal'),
            'nutrition': {k: _number(v) for k, v in nutrition.items()} if isinstance(nutrition, dict) else {},
        }
    else:
        slot.pop('customMeal', None)
    return slot


def _day_nutrition(slots) -> Dict[str, float]:
    # Only inline customMeal nutrition is counted; recipe-backed slots are not
    totals = {k: 0 for k in MACROS}
    for meal in slots:
        custom = meal.get('customMeal')
        if not custom:
            continue
        for k in MACROS:
            totals[k] += custom['nutrition'].get(k, 0) * meal['servings']
    return totals


def _normalize_day(day: Any, index: int, today: date) -> Dict[str, Any]:
    d = day if isinstance(day, dict) else {}
    snacks = d.get('snacks') if isinstance(d.get('snacks'), list) else []
    normalized = {
        **d,
        'day': d.get('day') if isinstance(d.get('day'), int) and d.get('day') > 0 else index + 1,
        'date': d.get('date') or today.strftime(ISO_DATE_FORMAT),
        'dayName': d.get('dayName') or day_name_for(today),
        'breakfast': _normalize_slot(d.get('breakfast')),
        'lunch': _normalize_slot(d.get('lunch')),
        'dinner': _normalize_slot(d.get('dinner')),
        'snacks': [s for s in (_normalize_slot(s) for s in snacks) if s],
    }
    slots = [normalized['breakfast'], normalized['lunch'], normalized['dinner'], *normalized['snacks']]
    normalized['totalNutrition'] = _day_nutrition(slots)
    return normalized


def parse_ai_response(content: str, today: Optional[date] = None) -> Dict[str, Any]:
    """Parse ``content`` into ``{success, title, description, meals, totalNutrition, additionalIngredients}``."""
    today = today or date.today()
    try:
        candidate = extract_json_object(content or '')
        if candidate is None:
            raise ParseError("no JSON found")
        parsed = _loads(candidate)
        if not isinstance(parsed, dict) or not isinstance(parsed.get('meals'), list):
            raise ParseError("invalid meals format")

        total_nutrition = parsed.get('totalNutrition')
        additional = parsed.get('additionalIngredients')
        return {
            'success': True,
            'title': _text(parsed.get('title'), DEFAULT_AI_TITLE),
            'description': _text(parsed.get('description'), DEFAULT_AI_DESCRIPTION),
            'meals': [_normalize_day(day, i, today) for i, day in enumerate(parsed['meals'])],
            'totalNutrition': total_nutrition if isinstance(total_nutrition, dict) else {},
            'additionalIngredients': [str(i) for i in additional if i] if isinstance(additional, list) else [],
        }
    except ParseError as e:
        logger.warning("Failed to parse AI response: %s", e)
        return {'success': False, 'error': f"Failed to parse AI response: {e}"}


__all__ = ['extract_json_object', 'parse_ai_response']
