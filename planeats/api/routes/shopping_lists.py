import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from planeats.api.routes.deps import get_current_user, get_shopping_lists, get_meal_plans
from planeats.api.routes.mealplans import load_own_plan
from planeats.domain.ShoppingList import ShoppingList, ShoppingListEntry
from planeats.domain.User import User
from planeats.domain.errors import NotFoundError
from planeats.logic.shopping.categorizer import categorize_for_standalone_list
from planeats.utilities.validators import (
    ShoppingListCreate, ShoppingListUpdate, ShoppingListItemInput, PurchaseInput,
)

router = APIRouter(prefix="/api/shopping-lists", tags=["shopping-lists"])
logger = logging.getLogger(__name__)


def _load_own(shopping_lists, list_id: str, user: User) -> ShoppingList:
    shopping_list = shopping_lists.get_for_user(list_id, user.id)
    if shopping_list is None:
        raise NotFoundError("Shopping list not found", title="Shopping list not found")
    return shopping_list


def _entry(item: ShoppingListItemInput) -> ShoppingListEntry:
    return ShoppingListEntry(
        ingredient=item.ingredient,
        amount=item.amount,
        unit=item.unit,
        category=item.category or categorize_for_standalone_list(item.ingredient),
        estimated_cost=item.estimated_cost,
        notes=item.notes,
        recipe=item.recipe,
        meal_plan=item.meal_plan,
    )


@router.post("", status_code=201)
def create_shopping_list(body: ShoppingListCreate, user: User = Depends(get_current_user),
                         shopping_lists=Depends(get_shopping_lists)):
    shopping_list = ShoppingList(
        user=user.id,
        name=body.name,
        items=[_entry(i) for i in body.items],
        budget=body.budget,
        stores=body.stores,
    )
    shopping_lists.insert(shopping_list)
    return shopping_list.to_public_dict()


@router.get("")
def list_shopping_lists(
    status: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    shopping_lists=Depends(get_shopping_lists),
):
    lists, total, total_pages = shopping_lists.list_for_user(user.id, status=status, page=page, limit=limit)
    return {
        "shoppingLists": [sl.to_public_dict() for sl in lists],
        "pagination": {
            "currentPage": page,
            "totalPages": total_pages,
            "totalShoppingLists": total,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        },
    }


@router.post("/from-mealplan/{meal_plan_id}", status_code=201)
def create_from_meal_plan(meal_plan_id: str, user: User = Depends(get_current_user),
                          shopping_lists=Depends(get_shopping_lists), meal_plans=Depends(get_meal_plans)):
    plan = load_own_plan(meal_plans, meal_plan_id, user)
    shopping_list = ShoppingList(
        user=user.id,
        name=f"Shopping list - {plan.title}"[:100],
        items=[
            ShoppingListEntry(
                ingredient=item.ingredient,
                amount=item.amount,
                unit=item.unit,
                category=item.category,
                purchased=item.purchased,
                estimated_cost=item.estimated_cost,
                notes=item.notes,
                meal_plan=plan.id,
            )
            for item in plan.shopping_list
        ],
    )
    shopping_lists.insert(shopping_list)
    logger.info("Shopping list %s created from meal plan %s", shopping_list.id, plan.id)
    return shopping_list.to_public_dict()


@router.get("/{list_id}")
def get_shopping_list(list_id: str, user: User = Depends(get_current_user),
                      shopping_lists=Depends(get_shopping_lists)):
    return _load_own(shopping_lists, list_id, user).to_public_dict()


@router.put("/{list_id}")
def update_shopping_list(list_id: str, body: ShoppingListUpdate, user: User = Depends(get_current_user),
                         shopping_lists=Depends(get_shopping_lists)):
    shopping_list = _load_own(shopping_lists, list_id, user)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "revision" in changes:
        shopping_list.revision = changes["revision"]
    for attr in ("name", "status", "stores"):
        if attr in changes:
            setattr(shopping_list, attr, changes[attr])
    if "budget" in changes:
        shopping_list.budget = {**shopping_list.budget, **changes["budget"]}
    shopping_lists.save(shopping_list)
    return shopping_list.to_public_dict()


@router.delete("/{list_id}")
def delete_shopping_list(list_id: str, user: User = Depends(get_current_user),
                         shopping_lists=Depends(get_shopping_lists)):
    _load_own(shopping_lists, list_id, user)
    shopping_lists.delete(list_id)
    return {"message": "Shopping list deleted successfully"}


@router.post("/{list_id}/items", status_code=201)
def add_item(list_id: str, body: ShoppingListItemInput, user: User = Depends(get_current_user),
             shopping_lists=Depends(get_shopping_lists)):
    shopping_list = _load_own(shopping_lists, list_id, user)
    shopping_list.add_item(_entry(body))
    shopping_lists.save(shopping_list)
    return shopping_list.to_public_dict()


@router.put("/{list_id}/items/{item_id}")
def mark_item(list_id: str, item_id: str, body: PurchaseInput, user: User = Depends(get_current_user),
              shopping_lists=Depends(get_shopping_lists)):
    shopping_list = _load_own(shopping_lists, list_id, user)
    shopping_list.mark_as_purchased(item_id, body.purchased)
    shopping_lists.save(shopping_list)
    return shopping_list.to_public_dict()
