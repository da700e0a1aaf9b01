"""
Input validation schemas using Pydantic for better data integrity.

Every schema accepts camelCase keys on the wire (and snake_case when built in
code). Routes turn a validated body back into wire form with
``model_dump(by_alias=True, exclude_unset=True)``.
"""
import re
from datetime import date
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from planeats.utilities.constants import (
    RECIPE_UNITS, RECIPE_DIFFICULTIES, RECIPE_CUISINES, RECIPE_MEAL_TYPES,
    MEAL_PLAN_TYPES, MEAL_PLAN_STATUSES, STANDALONE_LIST_CATEGORIES,
    SHOPPING_LIST_STATUSES, MAIN_MEAL_TYPES,
)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _clean_strings(values):
    return [v.strip() for v in values if v and v.strip()]


def _check_choice(value, choices, label):
    if value is not None and value not in choices:
        raise ValueError(f"{label} must be one of: {', '.join(choices)}")
    return value


# --- Users -------------------------------------------------------------------
class NutritionGoalsInput(CamelModel):
    """Schema for user nutrition goals."""
    daily_calories: Optional[int] = Field(None, ge=0, le=10000)
    protein_percentage: Optional[int] = Field(None, ge=0, le=100)
    carb_percentage: Optional[int] = Field(None, ge=0, le=100)
    fat_percentage: Optional[int] = Field(None, ge=0, le=100)


class UserPreferencesFields(CamelModel):
    profile: Optional[Dict[str, Any]] = None
    dietary_preferences: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    favorite_ingredients: Optional[List[str]] = None
    disliked_ingredients: Optional[List[str]] = None
    nutrition_goals: Optional[NutritionGoalsInput] = None

    @field_validator('dietary_preferences', 'allergies', 'favorite_ingredients', 'disliked_ingredients')
    @classmethod
    def strip_lists(cls, v):
        return _clean_strings(v) if v is not None else v


class UserRegistration(UserPreferencesFields):
    """Schema for user registration."""
    username: str = Field(..., min_length=3, max_length=30, pattern=r'^[a-zA-Z0-9_]+$')
    email: str = Field(..., max_length=254)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip().lower()
        if not EMAIL_RE.match(v):
            raise ValueError('Please provide a valid email')
        return v


class UserProfileUpdate(UserPreferencesFields):
    """Profile/preferences update. Identity fields are not accepted here."""


# --- Recipes -----------------------------------------------------------------
class RecipeIngredientInput(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0)
    unit: str
    notes: str = ""

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip()

    @field_validator('unit')
    @classmethod
    def validate_unit(cls, v):
        return _check_choice(v, RECIPE_UNITS, 'Unit')


class RecipeInstructionInput(CamelModel):
    step: int = Field(..., ge=1)
    description: str = Field(..., min_length=1)
    duration: Optional[int] = Field(None, ge=0)
    temperature: Optional[Dict[str, Any]] = None


class RecipeInput(CamelModel):
    """Schema for recipe creation."""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    ingredients: List[RecipeIngredientInput] = Field(..., min_length=1)
    instructions: List[RecipeInstructionInput] = Field(..., min_length=1)
    nutrition: Dict[str, Any] = Field(default_factory=dict)
    servings: int = Field(..., ge=1, le=50)
    prep_time: int = Field(..., ge=0)
    cook_time: int = Field(..., ge=0)
    difficulty: str = "medium"
    cuisine: str = "other"
    meal_type: List[str] = Field(..., min_length=1)
    dietary_tags: List[str] = Field(default_factory=list)
    allergens: List[str] = Field(default_factory=list)
    images: List[Dict[str, Any]] = Field(default_factory=list)
    source: str = "user-created"
    is_public: bool = True

    @field_validator('title', 'description')
    @classmethod
    def validate_text(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip()

    @field_validator('difficulty')
    @classmethod
    def validate_difficulty(cls, v):
        return _check_choice(v, RECIPE_DIFFICULTIES, 'Difficulty')

    @field_validator('cuisine')
    @classmethod
    def validate_cuisine(cls, v):
        return _check_choice(v, RECIPE_CUISINES, 'Cuisine')

    @field_validator('meal_type')
    @classmethod
    def validate_meal_type(cls, v):
        for item in v or []:
            _check_choice(item, RECIPE_MEAL_TYPES, 'Meal type')
        return v


class RecipeUpdate(RecipeInput):
    """Partial recipe update; only provided fields are applied."""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    ingredients: Optional[List[RecipeIngredientInput]] = Field(None, min_length=1)
    instructions: Optional[List[RecipeInstructionInput]] = Field(None, min_length=1)
    servings: Optional[int] = Field(None, ge=1, le=50)
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    meal_type: Optional[List[str]] = Field(None, min_length=1)
    revision: Optional[int] = None


class ReviewInput(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=1000)


# --- Meal plans --------------------------------------------------------------
class CustomMealInput(CamelModel):
    name: str = Field(..., min_length=1)
    ingredients: List[str] = Field(default_factory=list)
    instructions: str = ""
    nutrition: Dict[str, float] = Field(default_factory=dict)


class MealEntryInput(CamelModel):
    """One slot of a day as sent back in a full schedule; empty slots are allowed."""
    recipe: Optional[str] = None
    custom_meal: Optional[CustomMealInput] = None
    servings: float = Field(1, gt=0)
    notes: str = ""
    completed: bool = False
    rating: Optional[int] = Field(None, ge=1, le=5)
    time: Optional[str] = None

    @field_validator('recipe', mode='before')
    @classmethod
    def collapse_populated_recipe(cls, v):
        if isinstance(v, dict):
            return v.get('_id')
        return v


class DayPlanInput(CamelModel):
    """One day of a replacement schedule. Day number, date and weekday are re-derived."""
    breakfast: Optional[MealEntryInput] = None
    lunch: Optional[MealEntryInput] = None
    dinner: Optional[MealEntryInput] = None
    snacks: List[MealEntryInput] = Field(default_factory=list)
    water_intake: float = Field(0, ge=0)
    notes: str = ""
    mood: Optional[str] = None
    energy_level: Optional[str] = None


class MealSlotInput(MealEntryInput):
    """Schema for setting one meal slot (or appending a snack)."""

    @model_validator(mode='after')
    def require_meal(self):
        if not self.recipe and self.custom_meal is None:
            raise ValueError('Either recipe or customMeal is required')
        return self


class MealPlanCreate(CamelModel):
    """Schema for manual meal plan creation."""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    start_date: date
    end_date: date
    type: str = "weekly"
    goals: List[str] = Field(default_factory=lambda: ["maintenance"])
    target_nutrition: Dict[str, Any] = Field(default_factory=dict)
    dietary_restrictions: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    preferred_ingredients: List[str] = Field(default_factory=list)
    avoided_ingredients: List[str] = Field(default_factory=list)
    budget: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    status: str = "draft"
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        return _check_choice(v, MEAL_PLAN_TYPES, 'Type')

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return _check_choice(v, MEAL_PLAN_STATUSES, 'Status')


class MealPlanUpdate(MealPlanCreate):
    """Partial meal plan update. Ownership and AI provenance fields are ignored."""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: Optional[str] = None
    status: Optional[str] = None
    goals: Optional[List[str]] = None
    is_public: Optional[bool] = None
    meals: Optional[List[DayPlanInput]] = None
    revision: Optional[int] = None


class MealCompletionInput(CamelModel):
    day_index: int
    meal_type: str
    completed: bool = True
    rating: Optional[int] = Field(None, ge=1, le=5)
    snack_index: Optional[int] = None

    @field_validator('meal_type')
    @classmethod
    def validate_meal_type(cls, v):
        return _check_choice(v, MAIN_MEAL_TYPES + ('snack', 'snacks'), 'Meal type')


class ShoppingListItemPatch(CamelModel):
    purchased: Optional[bool] = None
    estimated_cost: Optional[float] = Field(None, ge=0)


class AIMealPlanRequest(CamelModel):
    """Schema for AI meal plan generation."""
    ingredients: List[str] = Field(..., min_length=1)
    duration: int = Field(7, ge=1, le=30)
    start_date: Optional[date] = None
    dietary_preferences: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=lambda: ["maintenance"])
    exclude_ingredients: List[str] = Field(default_factory=list)
    cuisine_preferences: List[str] = Field(default_factory=list)
    cooking_time: str = "moderate"
    meal_types: List[str] = Field(default_factory=lambda: list(MAIN_MEAL_TYPES))
    servings: int = Field(1, ge=1, le=20)

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v):
        cleaned = _clean_strings(v)
        if not cleaned:
            raise ValueError('At least one ingredient is required')
        return cleaned


# --- Standalone shopping lists -----------------------------------------------
class ShoppingListItemInput(CamelModel):
    """Schema for shopping list item validation."""
    ingredient: str = Field(..., min_length=1, max_length=100)
    amount: Optional[float] = Field(None, ge=0)
    unit: str = ""
    category: Optional[str] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    notes: str = ""
    recipe: Optional[str] = None
    meal_plan: Optional[str] = None

    @field_validator('ingredient', 'unit')
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip()

    @field_validator('category')
    @classmethod
    def validate_category(cls, v):
        return _check_choice(v, STANDALONE_LIST_CATEGORIES, 'Category')


class ShoppingListCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    items: List[ShoppingListItemInput] = Field(default_factory=list)
    budget: Optional[Dict[str, Any]] = None
    stores: List[Dict[str, Any]] = Field(default_factory=list)


class ShoppingListUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[str] = None
    budget: Optional[Dict[str, Any]] = None
    stores: Optional[List[Dict[str, Any]]] = None
    revision: Optional[int] = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return _check_choice(v, SHOPPING_LIST_STATUSES, 'Status')


class PurchaseInput(CamelModel):
    purchased: bool = True


# --- Notifications -----------------------------------------------------------
class MarkReadInput(CamelModel):
    notification_ids: Optional[List[str]] = None
