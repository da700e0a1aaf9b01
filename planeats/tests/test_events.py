import shutil
import tempfile
import unittest
from datetime import date
from pathlib import Path

from planeats.domain.MealPlan import MealPlan
from planeats.events.Event_Bus import EventBus, MEALPLAN_COMPLETED, MEALPLAN_GENERATED
from planeats.events.event_helpers import publish_plan_generated, publish_plan_progress
from planeats.events.notification_observers import NotificationObserver
from planeats.infra.Document_Store import DocumentStore
from planeats.infra.Notification_Repository import NotificationRepository


class TestEventBus(unittest.TestCase):
    def test_subscribe_is_idempotent_and_unsubscribe_tolerates_unknown(self):
        bus = EventBus()
        seen = []

        def listener(name, payload):
            seen.append((name, payload))

        bus.subscribe(MEALPLAN_GENERATED, listener)
        bus.subscribe(MEALPLAN_GENERATED, listener)
        bus.publish(MEALPLAN_GENERATED, {"x": 1})
        self.assertEqual(seen, [(MEALPLAN_GENERATED, {"x": 1})])

        bus.unsubscribe(MEALPLAN_GENERATED, listener)
        bus.unsubscribe("nothing.here", listener)
        bus.publish(MEALPLAN_GENERATED, {"x": 2})
        self.assertEqual(len(seen), 1)

    def test_failing_subscriber_does_not_stop_delivery(self):
        bus = EventBus()
        seen = []

        def broken(name, payload):
            raise RuntimeError("boom")

        bus.subscribe(MEALPLAN_COMPLETED, broken)
        bus.subscribe(MEALPLAN_COMPLETED, lambda name, payload: seen.append(payload))
        with self.assertLogs("planeats.events.Event_Bus", level="ERROR"):
            bus.publish(MEALPLAN_COMPLETED, "done")
        self.assertEqual(seen, ["done"])


class TestNotificationObserver(unittest.TestCase):
    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.repo = NotificationRepository(DocumentStore(self.tmp))
        self.bus = EventBus()
        NotificationObserver(self.repo).start(self.bus)
        self.plan = MealPlan(title="Week", user="u1", start_date=date(2024, 1, 1), end_date=date(2024, 1, 3),
                             id="plan-1")

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_generated_plan_creates_notification(self):
        publish_plan_generated(self.bus, self.plan, "gemini-test")
        notes, total, _ = self.repo.list_for_user("u1")
        self.assertEqual(total, 1)
        self.assertEqual(notes[0].title, "Meal plan ready")
        self.assertEqual(notes[0].type, "success")
        self.assertEqual(notes[0].related_entity, {"entityType": "mealplan", "entityId": "plan-1"})

    def test_completion_only_fires_when_crossing_full_adherence(self):
        self.plan.progress["adherencePercentage"] = 100
        publish_plan_progress(self.bus, self.plan, previous_adherence=100)
        self.assertEqual(self.repo.count_unread("u1"), 0)

        publish_plan_progress(self.bus, self.plan, previous_adherence=67)
        notes, _, _ = self.repo.list_for_user("u1")
        self.assertEqual([n.title for n in notes], ["Meal plan completed"])
        self.assertEqual(notes[0].priority, "high")

    def test_payload_without_plan_is_ignored(self):
        self.bus.publish(MEALPLAN_GENERATED, {"model": "x"})
        self.assertEqual(self.repo.count_unread("u1"), 0)


if __name__ == '__main__':
    unittest.main()
