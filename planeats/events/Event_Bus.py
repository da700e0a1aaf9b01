"""Simple Event Bus / Observer implementation for meal-plan lifecycle events.

Event names:
  mealplan.generated -> payload {"plan": MealPlan, "model": str}
  mealplan.shopping_list_generated -> payload {"plan": MealPlan, "item_count": int}
  mealplan.completed -> payload {"plan": MealPlan}

Subscribers are callables taking (event_name, payload). Each application
builds its own bus (see create_app), so tests never share subscribers.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
MEALPLAN_GENERATED = "mealplan.generated"
MEALPLAN_SHOPPING_LIST_GENERATED = "mealplan.shopping_list_generated"
MEALPLAN_COMPLETED = "mealplan.completed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		# Subscriber errors are logged, never propagated to the publisher
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


__all__ = [
	'EventBus', 'MEALPLAN_GENERATED', 'MEALPLAN_SHOPPING_LIST_GENERATED', 'MEALPLAN_COMPLETED',
]
