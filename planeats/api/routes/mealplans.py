import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from planeats.api.routes.deps import (
    get_current_user, get_meal_plans, get_recipes, get_event_bus,
)
from planeats.domain.MealPlan import MealPlan, DayPlan, MealEntry
from planeats.domain.User import User
from planeats.domain.errors import NotFoundError, ForbiddenError
from planeats.events.event_helpers import publish_shopping_list_generated, publish_plan_progress
from planeats.infra.pdf_utils import generate_shopping_list_pdf
from planeats.logic.reporting.nutrition import calculate_day_nutrition
from planeats.logic.shopping.list_builder import generate_shopping_list
from planeats.utilities.validators import (
    MealPlanCreate, MealPlanUpdate, MealSlotInput, MealCompletionInput, ShoppingListItemPatch,
)

router = APIRouter(prefix="/api/mealplans", tags=["mealplans"])
logger = logging.getLogger(__name__)

# Optional plan attributes copied from a create body
PLAN_EXTRAS = (
    "goals", "target_nutrition", "dietary_restrictions", "allergies", "preferred_ingredients",
    "avoided_ingredients", "budget", "is_public", "tags",
)
# Attributes a PUT may overwrite; dates, meals and settings are handled separately
UPDATABLE = ("title", "description", "type", "status") + PLAN_EXTRAS


def load_plan(meal_plans, plan_id: str) -> MealPlan:
    plan = meal_plans.get(plan_id)
    if plan is None:
        raise NotFoundError("The requested meal plan does not exist", title="Meal plan not found")
    return plan


def load_own_plan(meal_plans, plan_id: str, user: User) -> MealPlan:
    plan = load_plan(meal_plans, plan_id)
    if plan.user != user.id:
        raise ForbiddenError("You can only access your own meal plans")
    return plan


def load_visible_plan(meal_plans, plan_id: str, user: User) -> MealPlan:
    plan = load_plan(meal_plans, plan_id)
    if plan.user != user.id and not plan.is_public:
        raise ForbiddenError("You can only view your own meal plans")
    return plan


@router.get("")
def list_meal_plans(
    status: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    meal_plans=Depends(get_meal_plans),
):
    plans, total, total_pages = meal_plans.list_for_user(user.id, status=status, page=page, limit=limit)
    return {
        "mealPlans": [p.to_public_dict() for p in plans],
        "pagination": {
            "currentPage": page,
            "totalPages": total_pages,
            "totalMealPlans": total,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        },
    }


@router.post("", status_code=201)
def create_meal_plan(body: MealPlanCreate, user: User = Depends(get_current_user),
                     meal_plans=Depends(get_meal_plans)):
    plan = MealPlan(
        title=body.title,
        description=body.description,
        user=user.id,
        start_date=body.start_date,
        end_date=body.end_date,
        type=body.type,
        status=body.status,
        settings=body.settings,
    )
    plan.validate_dates()
    for attr in PLAN_EXTRAS:
        value = getattr(body, attr)
        if value is not None:
            setattr(plan, attr, value)
    plan.meals = [DayPlan(day=i + 1) for i in range(plan.duration)]
    plan.align_schedule()
    meal_plans.insert(plan)
    logger.info("Meal plan %s created by %s (%d days)", plan.id, user.id, plan.duration)
    return {"message": "Meal plan created successfully", "mealPlan": plan.to_public_dict()}


@router.get("/{plan_id}")
def get_meal_plan(plan_id: str, user: User = Depends(get_current_user), meal_plans=Depends(get_meal_plans)):
    return {"mealPlan": load_visible_plan(meal_plans, plan_id, user).to_public_dict()}


@router.put("/{plan_id}")
def update_meal_plan(plan_id: str, body: MealPlanUpdate, user: User = Depends(get_current_user),
                     meal_plans=Depends(get_meal_plans), bus=Depends(get_event_bus)):
    plan = load_own_plan(meal_plans, plan_id, user)
    previous_adherence = plan.progress.get("adherencePercentage", 0)
    changes = body.model_dump(exclude_unset=True)

    if changes.get("revision") is not None:
        plan.revision = changes["revision"]
    for attr in UPDATABLE:
        if attr in changes and changes[attr] is not None:
            setattr(plan, attr, changes[attr])
    if changes.get("settings"):
        plan.settings = {**plan.settings, **changes["settings"]}
    if body.meals is not None:
        plan.meals = [DayPlan.from_dict(day.model_dump(by_alias=True), i) for i, day in enumerate(body.meals)]
    # The schedule always spans exactly the plan's dates
    if body.meals is not None or changes.get("start_date") or changes.get("end_date"):
        plan.reschedule(changes.get("start_date") or plan.start_date, changes.get("end_date") or plan.end_date)

    meal_plans.save(plan)
    publish_plan_progress(bus, plan, previous_adherence)
    return {"message": "Meal plan updated successfully", "mealPlan": plan.to_public_dict()}


@router.delete("/{plan_id}")
def delete_meal_plan(plan_id: str, user: User = Depends(get_current_user), meal_plans=Depends(get_meal_plans)):
    load_own_plan(meal_plans, plan_id, user)
    meal_plans.delete(plan_id)
    return {"message": "Meal plan deleted successfully"}


@router.put("/{plan_id}/days/{day_index}/{meal_type}")
def set_meal(plan_id: str, day_index: int, meal_type: str, body: MealSlotInput,
             user: User = Depends(get_current_user), meal_plans=Depends(get_meal_plans),
             recipes=Depends(get_recipes)):
    plan = load_own_plan(meal_plans, plan_id, user)
    if body.recipe and recipes.get(body.recipe) is None:
        raise NotFoundError("The requested recipe does not exist", title="Recipe not found")
    entry = MealEntry(
        recipe=body.recipe,
        custom_meal=body.custom_meal.model_dump(by_alias=True) if body.custom_meal else None,
        servings=body.servings,
        notes=body.notes,
        time=body.time,
    )
    plan.set_meal(day_index, meal_type, entry)
    meal_plans.save(plan)
    return {"message": "Meal updated successfully", "mealPlan": plan.to_public_dict()}


@router.put("/{plan_id}/complete")
def complete_meal(plan_id: str, body: MealCompletionInput, user: User = Depends(get_current_user),
                  meal_plans=Depends(get_meal_plans), bus=Depends(get_event_bus)):
    plan = load_own_plan(meal_plans, plan_id, user)
    previous_adherence = plan.progress.get("adherencePercentage", 0)
    plan.update_meal_completion(body.day_index, body.meal_type, body.completed,
                                rating=body.rating, snack_index=body.snack_index)
    meal_plans.save(plan)
    publish_plan_progress(bus, plan, previous_adherence)
    return {"message": "Meal completion updated", "progress": plan.progress, "mealPlan": plan.to_public_dict()}


@router.post("/{plan_id}/shopping-list")
def build_plan_shopping_list(plan_id: str, user: User = Depends(get_current_user),
                             meal_plans=Depends(get_meal_plans), recipes=Depends(get_recipes),
                             bus=Depends(get_event_bus)):
    plan = load_own_plan(meal_plans, plan_id, user)
    resolved = meal_plans.populate_recipes(plan, recipes)
    generate_shopping_list(plan, resolved, meal_plans)
    publish_shopping_list_generated(bus, plan)
    return {
        "message": "Shopping list generated successfully",
        "shoppingList": [item.to_dict() for item in plan.shopping_list],
    }


@router.put("/{plan_id}/shopping-list/{item_index}")
def update_shopping_list_item(plan_id: str, item_index: int, body: ShoppingListItemPatch,
                              user: User = Depends(get_current_user), meal_plans=Depends(get_meal_plans)):
    plan = load_own_plan(meal_plans, plan_id, user)
    if item_index < 0 or item_index >= len(plan.shopping_list):
        raise NotFoundError(f"No shopping list item at index {item_index}", title="Item not found")
    item = plan.shopping_list[item_index]
    if body.purchased is not None:
        item.purchased = body.purchased
    if body.estimated_cost is not None:
        item.estimated_cost = body.estimated_cost
    meal_plans.save(plan)
    return {"message": "Shopping list item updated", "item": item.to_dict()}


@router.get("/{plan_id}/shopping-list.pdf")
def shopping_list_pdf(plan_id: str, user: User = Depends(get_current_user), meal_plans=Depends(get_meal_plans)):
    plan = load_visible_plan(meal_plans, plan_id, user)
    pdf_bytes = generate_shopping_list_pdf(plan)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="shopping-list-{plan.id}.pdf"'},
    )


@router.get("/{plan_id}/days/{day_index}/nutrition")
def day_nutrition(plan_id: str, day_index: int, user: User = Depends(get_current_user),
                  meal_plans=Depends(get_meal_plans), recipes=Depends(get_recipes)):
    plan = load_visible_plan(meal_plans, plan_id, user)
    day = plan.get_day(day_index)
    resolved = recipes.get_many(m.recipe for m in day.slots() if m.recipe)
    return calculate_day_nutrition(day, resolved)
