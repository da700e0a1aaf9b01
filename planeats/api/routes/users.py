import logging

from fastapi import APIRouter, Depends

from planeats.api.routes.deps import (
    get_current_user, get_users, get_recipes, get_meal_plans, get_notifications,
)
from planeats.domain.User import User
from planeats.domain.errors import ValidationFailed
from planeats.utilities.validators import UserRegistration, UserProfileUpdate

router = APIRouter(prefix="/api/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.post("/register", status_code=201)
def register(body: UserRegistration, users=Depends(get_users)):
    if users.find_by_username_or_email(body.username, body.email):
        raise ValidationFailed("A user with this email or username already exists", title="Duplicate Error")
    user = User.from_dict(body.model_dump(by_alias=True, exclude_none=True))
    users.insert(user)
    logger.info("Registered user %s (%s)", user.username, user.id)
    return {"message": "User registered successfully", "user": user.to_dict()}


@router.get("/profile")
def get_profile(user: User = Depends(get_current_user)):
    return {"user": user.to_dict()}


@router.put("/profile")
def update_profile(body: UserProfileUpdate, user: User = Depends(get_current_user), users=Depends(get_users)):
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "profile" in changes:
        user.profile = {**user.profile, **changes["profile"]}
    for attr in ("dietary_preferences", "allergies", "favorite_ingredients", "disliked_ingredients"):
        if attr in changes:
            setattr(user, attr, changes[attr])
    if "nutrition_goals" in changes:
        goals = body.nutrition_goals.model_dump(by_alias=True, exclude_unset=True)
        user.nutrition_goals = {**user.nutrition_goals, **goals}
    users.save(user)
    return {"message": "Profile updated successfully", "user": user.to_dict()}


@router.get("/dashboard")
def dashboard(
    user: User = Depends(get_current_user),
    recipes=Depends(get_recipes),
    meal_plans=Depends(get_meal_plans),
    notifications=Depends(get_notifications),
):
    recent, total, _ = meal_plans.list_for_user(user.id, page=1, limit=5)
    stats = {
        "recipesCreated": len(recipes.by_author(user.id)),
        "savedRecipes": len(user.saved_recipes),
        "totalMealPlans": total,
        "activeMealPlans": meal_plans.count_for_user(user.id, status="active"),
        "completedMealPlans": meal_plans.count_for_user(user.id, status="completed"),
        "unreadNotifications": notifications.count_unread(user.id),
    }
    return {
        "user": {
            "_id": user.id,
            "username": user.username,
            "email": user.email,
            "profile": user.profile,
            "dietaryPreferences": user.dietary_preferences,
        },
        "stats": stats,
        "recentMealPlans": [
            {
                "_id": p.id,
                "title": p.title,
                "startDate": p.start_date.isoformat() if p.start_date else None,
                "endDate": p.end_date.isoformat() if p.end_date else None,
                "status": p.status,
                "progress": p.progress,
            }
            for p in recent
        ],
    }
