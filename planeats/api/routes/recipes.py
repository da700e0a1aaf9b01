import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from planeats.api.routes.deps import get_current_user, get_optional_user, get_recipes, get_users
from planeats.domain.Recipe import Recipe, RecipeIngredient
from planeats.domain.User import User
from planeats.domain.errors import NotFoundError, ForbiddenError, ValidationFailed
from planeats.utilities.constants import (
    RECIPE_CUISINES, RECIPE_DIFFICULTIES, RECIPE_MEAL_TYPES, DIETARY_TAGS, RECIPE_UNITS,
)
from planeats.utilities.validators import RecipeInput, RecipeUpdate, ReviewInput

router = APIRouter(prefix="/api/recipes", tags=["recipes"])
logger = logging.getLogger(__name__)


def _pagination(page: int, total: int, total_pages: int, label: str = "totalRecipes"):
    return {
        "currentPage": page,
        "totalPages": total_pages,
        label: total,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def _load(recipes, recipe_id: str) -> Recipe:
    recipe = recipes.get(recipe_id)
    if recipe is None:
        raise NotFoundError("The requested recipe does not exist", title="Recipe not found")
    return recipe


def _load_own(recipes, recipe_id: str, user: User) -> Recipe:
    recipe = _load(recipes, recipe_id)
    if recipe.author != user.id:
        raise ForbiddenError("You can only modify your own recipes")
    return recipe


@router.get("")
def list_recipes(
    search: Optional[str] = None,
    cuisine: Optional[str] = None,
    difficulty: Optional[str] = None,
    mealType: Optional[str] = None,
    dietaryTags: Optional[str] = None,
    maxTime: Optional[int] = Query(None, ge=0),
    sort: str = Query("newest", pattern=r"^(newest|rating|popular|quickest)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    user: Optional[User] = Depends(get_optional_user),
    recipes=Depends(get_recipes),
):
    tags = [t.strip() for t in dietaryTags.split(",") if t.strip()] if dietaryTags else []
    items, total, total_pages = recipes.search(
        search=search or "", cuisine=cuisine, difficulty=difficulty, meal_type=mealType,
        dietary_tags=tags, max_time=maxTime, sort=sort, viewer=user.id if user else None,
        page=page, limit=limit,
    )
    return {"recipes": [r.to_dict() for r in items], "pagination": _pagination(page, total, total_pages)}


# Static paths must be declared before /{recipe_id}
@router.get("/meta/categories")
def categories():
    return {
        "cuisines": list(RECIPE_CUISINES),
        "difficulties": list(RECIPE_DIFFICULTIES),
        "mealTypes": list(RECIPE_MEAL_TYPES),
        "dietaryTags": list(DIETARY_TAGS),
        "units": list(RECIPE_UNITS),
    }


@router.get("/my/created")
def my_recipes(user: User = Depends(get_current_user), recipes=Depends(get_recipes)):
    return {"recipes": [r.to_dict() for r in recipes.by_author(user.id)]}


@router.get("/my/favorites")
def my_favorites(user: User = Depends(get_current_user), recipes=Depends(get_recipes)):
    found = recipes.get_many(user.saved_recipes)
    return {"recipes": [found[rid].to_dict() for rid in user.saved_recipes if rid in found]}


@router.get("/{recipe_id}")
def get_recipe(recipe_id: str, user: Optional[User] = Depends(get_optional_user), recipes=Depends(get_recipes)):
    recipe = _load(recipes, recipe_id)
    if not recipe.is_public and (user is None or recipe.author != user.id):
        raise ForbiddenError("This recipe is private")
    return {"recipe": recipe.to_dict()}


@router.post("", status_code=201)
def create_recipe(body: RecipeInput, user: User = Depends(get_current_user), recipes=Depends(get_recipes)):
    data = body.model_dump(by_alias=True)
    data["author"] = user.id
    recipe = recipes.insert(Recipe.from_dict(data))
    logger.info("Recipe %s created by %s", recipe.id, user.id)
    return {"message": "Recipe created successfully", "recipe": recipe.to_dict()}


@router.put("/{recipe_id}")
def update_recipe(recipe_id: str, body: RecipeUpdate, user: User = Depends(get_current_user),
                  recipes=Depends(get_recipes)):
    recipe = _load_own(recipes, recipe_id, user)
    changes = body.model_dump(exclude_unset=True)
    if changes.get("revision") is not None:
        recipe.revision = changes["revision"]
    if "ingredients" in changes:
        recipe.ingredients = [RecipeIngredient.from_dict(i) for i in changes["ingredients"]]
    for attr in ("title", "description", "instructions", "nutrition", "servings", "prep_time",
                 "cook_time", "difficulty", "cuisine", "meal_type", "dietary_tags", "allergens",
                 "images", "source", "is_public"):
        if attr in changes and changes[attr] is not None:
            setattr(recipe, attr, changes[attr])
    recipes.save(recipe)
    return {"message": "Recipe updated successfully", "recipe": recipe.to_dict()}


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: str, user: User = Depends(get_current_user), recipes=Depends(get_recipes)):
    _load_own(recipes, recipe_id, user)
    recipes.delete(recipe_id)
    return {"message": "Recipe deleted successfully"}


@router.post("/{recipe_id}/reviews", status_code=201)
def add_review(recipe_id: str, body: ReviewInput, user: User = Depends(get_current_user),
               recipes=Depends(get_recipes)):
    recipe = _load(recipes, recipe_id)
    if recipe.has_review_from(user.id):
        raise ValidationFailed("You have already reviewed this recipe", title="Review already exists")
    recipe.add_review(user.id, body.rating, body.comment)
    recipes.save(recipe)
    return {"message": "Review added successfully", "rating": recipe.rating}


@router.post("/{recipe_id}/favorite")
def toggle_favorite(recipe_id: str, user: User = Depends(get_current_user),
                    recipes=Depends(get_recipes), users=Depends(get_users)):
    recipe = _load(recipes, recipe_id)
    # Two independent writes, no cross-document atomicity
    is_favorited = user.toggle_saved_recipe(recipe.id)
    users.save(user)
    recipe.favorites = max(0, recipe.favorites + (1 if is_favorited else -1))
    recipes.save(recipe)
    return {
        "message": "Recipe added to favorites" if is_favorited else "Recipe removed from favorites",
        "isFavorited": is_favorited,
        "favoriteCount": recipe.favorites,
    }
