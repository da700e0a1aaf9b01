"""Event helper utilities.

Publishing helpers for meal-plan events; each takes the bus explicitly.

Quick import:
    from planeats.events.event_helpers import (
        publish_plan_generated, publish_shopping_list_generated, publish_plan_progress
    )
"""
from __future__ import annotations
from typing import Any, Optional
from .Event_Bus import (
    EventBus, MEALPLAN_GENERATED, MEALPLAN_SHOPPING_LIST_GENERATED, MEALPLAN_COMPLETED,
)

__all__ = [
    'publish_plan_generated', 'publish_shopping_list_generated', 'publish_plan_progress',
]


def publish_plan_generated(bus: EventBus, plan: Any, model: Optional[str] = None):
    """Publish a mealplan.generated event."""
    bus.publish(MEALPLAN_GENERATED, {'plan': plan, 'model': model})


def publish_shopping_list_generated(bus: EventBus, plan: Any):
    bus.publish(MEALPLAN_SHOPPING_LIST_GENERATED, {
        'plan': plan,
        'item_count': len(plan.shopping_list),
    })


def publish_plan_progress(bus: EventBus, plan: Any, previous_adherence: int):
    """Publish mealplan.completed when adherence has just reached 100."""
    current = plan.progress.get('adherencePercentage', 0)
    if current >= 100 and previous_adherence < 100:
        bus.publish(MEALPLAN_COMPLETED, {'plan': plan})
