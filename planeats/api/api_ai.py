import json
import logging
from datetime import date, datetime, timedelta, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from planeats.api.routes.deps import get_current_user, get_meal_plans, get_ai_service, get_event_bus
from planeats.domain.MealPlan import MealPlan, DayPlan
from planeats.domain.User import User
from planeats.events.event_helpers import publish_plan_generated
from planeats.utilities.validators import AIMealPlanRequest

logger = logging.getLogger(__name__)


def _merge(*lists):
    """Order-preserving union of string lists."""
    seen = []
    for values in lists:
        for v in values or []:
            if v not in seen:
                seen.append(v)
    return seen


def build_generation_params(body: AIMealPlanRequest, user: User) -> dict:
    """Request parameters merged with the caller's stored preferences."""
    return {
        "ingredients": body.ingredients,
        "duration": body.duration,
        "dietaryPreferences": _merge(body.dietary_preferences, user.dietary_preferences),
        "allergies": _merge(body.allergies, user.allergies),
        "goals": body.goals,
        "excludeIngredients": _merge(body.exclude_ingredients, user.disliked_ingredients),
        "favoriteIngredients": user.favorite_ingredients,
        "cuisinePreferences": body.cuisine_preferences,
        "cookingTime": body.cooking_time,
        "mealTypes": body.meal_types,
        "servings": body.servings,
        "nutritionGoals": user.nutrition_goals,
    }


# === FastAPI Endpoint ===
router = APIRouter(prefix="/api/mealplans", tags=["ai"])


@router.post("/generate", status_code=201)
def generate_meal_plan(body: AIMealPlanRequest, user: User = Depends(get_current_user),
                       meal_plans=Depends(get_meal_plans), ai_service=Depends(get_ai_service),
                       bus=Depends(get_event_bus)):
    params = build_generation_params(body, user)
    result = ai_service.generate_meal_plan(params)
    if not result.get("success"):
        logger.error("AI meal plan generation failed for user %s: %s", user.id, result.get("error"))
        return JSONResponse(status_code=500, content={
            "error": "AI generation failed",
            "message": result.get("error") or "Failed to generate meal plan with AI",
        })

    start = body.start_date or date.today()
    end = start + timedelta(days=body.duration)
    plan = MealPlan(
        title=result["title"][:100],
        description=result["description"][:500],
        user=user.id,
        start_date=start,
        end_date=end,
        status="active",
        meals=[DayPlan.from_dict(day, i) for i, day in enumerate(result["meals"])],
        ai_generated=True,
    )
    # Missing days are padded with empty ones, extra days dropped
    plan.reschedule(start, end)
    plan.goals = body.goals
    plan.dietary_restrictions = params["dietaryPreferences"]
    plan.allergies = params["allergies"]
    plan.preferred_ingredients = body.ingredients
    plan.avoided_ingredients = params["excludeIngredients"]
    plan.ai_prompt = json.dumps(params)
    plan.ai_model = result.get("model") or "unknown"
    plan.generation_metadata = {
        "ingredientsUsed": body.ingredients,
        "cuisinePreferences": body.cuisine_preferences,
        "excludedIngredients": params["excludeIngredients"],
        "nutritionalFocus": ", ".join(body.goals),
        "additionalIngredients": result.get("additionalIngredients", []),
        "totalNutrition": result.get("totalNutrition", {}),
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
    meal_plans.insert(plan)
    publish_plan_generated(bus, plan, plan.ai_model)
    logger.info("AI meal plan %s generated for user %s with %s", plan.id, user.id, plan.ai_model)

    return {
        "message": "AI meal plan generated successfully",
        "mealPlan": plan.to_public_dict(),
        "aiMetadata": {
            "model": plan.ai_model,
            "provider": result.get("provider"),
            "generatedAt": plan.generation_metadata["timestamp"],
            "prompt": params,
        },
    }
