import logging
from typing import Dict, List, Optional, Tuple

from planeats.domain.MealPlan import MealPlan
from planeats.domain.Recipe import Recipe
from planeats.infra.Document_Store import DocumentRepository, paginate
from planeats.infra.Recipe_Repository import RecipeRepository
from planeats.infra.paths import MEAL_PLANS

logger = logging.getLogger(__name__)


class MealPlanRepository(DocumentRepository):
    collection = MEAL_PLANS
    model = MealPlan

    def insert(self, plan: MealPlan) -> MealPlan:
        plan.refresh_progress()
        return super().insert(plan)

    def save(self, plan: MealPlan) -> MealPlan:
        """Persist with progress recomputed; stale revisions raise ConflictError."""
        plan.refresh_progress()
        return super().save(plan)

    def list_for_user(self, user_id: str, status: Optional[str] = None,
                      page: int = 1, limit: int = 10) -> Tuple[List[MealPlan], int, int]:
        def _match(doc):
            return doc.get('user') == user_id and (not status or doc.get('status') == status)

        docs = sorted(self.store.find(self.collection, _match),
                      key=lambda d: d.get('createdAt') or '', reverse=True)
        page_docs, total, total_pages = paginate(docs, page, limit)
        return [MealPlan.from_dict(d) for d in page_docs], total, total_pages

    def count_for_user(self, user_id: str, status: Optional[str] = None) -> int:
        return self.store.count(
            self.collection,
            lambda d: d.get('user') == user_id and (not status or d.get('status') == status),
        )

    def populate_recipes(self, plan: MealPlan, recipes: RecipeRepository) -> Dict[str, Recipe]:
        """Resolve every recipe id referenced by the plan's slots.

        Ids that no longer resolve are simply absent from the result.
        """
        ids = {meal.recipe for day in plan.meals for meal in day.slots() if meal.recipe}
        resolved = recipes.get_many(ids)
        missing = ids - set(resolved)
        if missing:
            logger.info("Meal plan %s references %d unresolved recipe(s)", plan.id, len(missing))
        return resolved
