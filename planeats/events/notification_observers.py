"""Observers that persist meal-plan events as user notifications.

NotificationObserver subscribes to:
  - mealplan.generated
  - mealplan.shopping_list_generated
  - mealplan.completed

and writes one Notification document per event for the plan's owner.
"""
from __future__ import annotations
import logging
from typing import Any, Dict

from planeats.domain.Notification import Notification
from .Event_Bus import (
    EventBus, MEALPLAN_GENERATED, MEALPLAN_SHOPPING_LIST_GENERATED, MEALPLAN_COMPLETED,
)

logger = logging.getLogger(__name__)


def _related(plan) -> Dict[str, Any]:
    return {'entityType': 'mealplan', 'entityId': plan.id}


class NotificationObserver:
    def __init__(self, repository):
        self.repository = repository

    def start(self, bus: EventBus):
        bus.subscribe(MEALPLAN_GENERATED, self.handle_event)
        bus.subscribe(MEALPLAN_SHOPPING_LIST_GENERATED, self.handle_event)
        bus.subscribe(MEALPLAN_COMPLETED, self.handle_event)

    def _build(self, event_name: str, payload: Dict[str, Any]):
        plan = payload['plan']
        if event_name == MEALPLAN_GENERATED:
            return Notification(
                user=plan.user,
                title="Meal plan ready",
                message=f'Your AI meal plan "{plan.title}" with {len(plan.meals)} day(s) has been created.',
                type="success",
                related_entity=_related(plan),
            )
        if event_name == MEALPLAN_SHOPPING_LIST_GENERATED:
            return Notification(
                user=plan.user,
                title="Shopping list updated",
                message=f'{payload.get("item_count", 0)} item(s) on the shopping list for "{plan.title}".',
                type="plan-update",
                related_entity=_related(plan),
                priority="low",
            )
        if event_name == MEALPLAN_COMPLETED:
            return Notification(
                user=plan.user,
                title="Meal plan completed",
                message=f'You completed every meal of "{plan.title}". Well done!',
                type="success",
                related_entity=_related(plan),
                priority="high",
            )
        return None

    def handle_event(self, event_name: str, payload: Any):
        if not isinstance(payload, dict) or payload.get('plan') is None:
            return
        notification = self._build(event_name, payload)
        if notification is not None:
            self.repository.insert(notification)
            logger.debug("Stored %s notification for user %s", event_name, notification.user)


__all__ = ['NotificationObserver']
