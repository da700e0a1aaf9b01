"""Shared FastAPI dependencies: caller identity and per-app collaborators.

Identity comes from the ``X-User-Id`` header. Token issuance and password
checks happen in front of this service.
"""
from typing import Optional

from fastapi import Depends, Header, Request

from planeats.domain.User import User
from planeats.domain.errors import UnauthorizedError
from planeats.infra.MealPlan_Repository import MealPlanRepository
from planeats.infra.Notification_Repository import NotificationRepository
from planeats.infra.Recipe_Repository import RecipeRepository
from planeats.infra.ShoppingList_Repository import ShoppingListRepository
from planeats.infra.User_Repository import UserRepository


def get_users(request: Request) -> UserRepository:
    return request.app.state.users


def get_recipes(request: Request) -> RecipeRepository:
    return request.app.state.recipes


def get_meal_plans(request: Request) -> MealPlanRepository:
    return request.app.state.meal_plans


def get_shopping_lists(request: Request) -> ShoppingListRepository:
    return request.app.state.shopping_lists


def get_notifications(request: Request) -> NotificationRepository:
    return request.app.state.notifications


def get_event_bus(request: Request):
    return request.app.state.event_bus


def get_ai_service(request: Request):
    return request.app.state.ai_service


def _resolve(request: Request, user_id: str, users: UserRepository) -> User:
    user = users.get(user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("Token is not valid", title="Invalid token")
    request.state.user_id = user.id
    return user


def get_current_user(
    request: Request,
    x_user_id: Optional[str] = Header(None),
    users: UserRepository = Depends(get_users),
) -> User:
    if not x_user_id:
        raise UnauthorizedError("No token provided, authorization denied")
    return _resolve(request, x_user_id, users)


def get_optional_user(
    request: Request,
    x_user_id: Optional[str] = Header(None),
    users: UserRepository = Depends(get_users),
) -> Optional[User]:
    if not x_user_id:
        return None
    return _resolve(request, x_user_id, users)
