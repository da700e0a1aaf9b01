"""MealPlan domain entity: a date-bounded, per-day meal schedule owned by one user.

The schedule is a list of DayPlan entries (one per calendar day starting at
start_date); each day has breakfast/lunch/dinner slots and a list of snacks.
Progress counters are derived from the schedule and refreshed before every
persist (see MealPlanRepository.save), never written directly.
"""
import math
from datetime import date, datetime, timedelta
from typing import List, Dict, Optional, Any, Iterator

from planeats.domain.errors import ValidationFailed
from planeats.utilities.constants import DAY_NAMES, MAIN_MEAL_TYPES, SNACKS, ISO_DATE_FORMAT


def parse_date(value) -> Optional[date]:
    """Accept date, datetime or ISO strings (date part only); None otherwise."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], ISO_DATE_FORMAT).date()
    except ValueError:
        return None


def day_name_for(d: date) -> str:
    # date.weekday() is Monday=0; DAY_NAMES is Sunday-indexed
    return DAY_NAMES[(d.weekday() + 1) % 7]


def compute_duration(start, end) -> int:
    """Whole days between start and end, rounded up."""
    if isinstance(start, datetime) or isinstance(end, datetime):
        start_dt = start if isinstance(start, datetime) else datetime.combine(start, datetime.min.time())
        end_dt = end if isinstance(end, datetime) else datetime.combine(end, datetime.min.time())
        return math.ceil((end_dt - start_dt).total_seconds() / 86400)
    return (end - start).days


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class MealEntry:
    """One meal slot: a recipe reference and/or an inline custom meal."""

    def __init__(self, recipe: Optional[str] = None, custom_meal: Optional[Dict[str, Any]] = None,
                 servings: float = 1, notes: str = "", completed: bool = False,
                 rating: Optional[int] = None, time: Optional[str] = None):
        self.recipe = recipe
        self.custom_meal = custom_meal
        self.servings = servings
        self.notes = notes
        self.completed = completed
        self.rating = rating
        self.time = time

    def __str__(self) -> str:
        if self.custom_meal:
            label = self.custom_meal.get("name", "custom meal")
        else:
            label = self.recipe or "-"
        return f"{label} x{self.servings}{' (done)' if self.completed else ''}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        recipe = d.get("recipe")
        # A populated recipe document collapses back to its id
        if isinstance(recipe, dict):
            recipe = recipe.get("_id")
        return MealEntry(
            recipe=recipe or None,
            custom_meal=d.get("customMeal") or None,
            servings=d.get("servings") or 1,
            notes=d.get("notes") or "",
            completed=bool(d.get("completed", False)),
            rating=d.get("rating"),
            time=d.get("time"),
        )

    def to_dict(self):
        out = {
            "recipe": self.recipe,
            "customMeal": self.custom_meal,
            "servings": self.servings,
            "notes": self.notes,
            "completed": self.completed,
            "rating": self.rating,
        }
        if self.time is not None:
            out["time"] = self.time
        return out


class DayPlan:
    def __init__(self, day: int, date_: Optional[date] = None, day_name: str = "",
                 breakfast: Optional[MealEntry] = None, lunch: Optional[MealEntry] = None,
                 dinner: Optional[MealEntry] = None, snacks: Optional[List[MealEntry]] = None,
                 total_nutrition: Optional[Dict[str, float]] = None, water_intake: float = 0,
                 notes: str = "", mood: Optional[str] = None, energy_level: Optional[str] = None):
        self.day = day
        self.date = date_
        self.day_name = day_name
        self.breakfast = breakfast or MealEntry()
        self.lunch = lunch or MealEntry()
        self.dinner = dinner or MealEntry()
        self.snacks = snacks[:] if snacks else []
        self.total_nutrition = dict(total_nutrition) if total_nutrition else {
            "calories": 0, "protein": 0, "carbs": 0, "fat": 0, "fiber": 0, "sodium": 0,
        }
        self.water_intake = water_intake
        self.notes = notes
        self.mood = mood
        self.energy_level = energy_level

    def main_meals(self) -> List[MealEntry]:
        return [self.breakfast, self.lunch, self.dinner]

    def slots(self) -> Iterator[MealEntry]:
        '''Yields breakfast, lunch, dinner and then every snack.'''
        yield from self.main_meals()
        yield from self.snacks

    def __str__(self) -> str:
        return f"Day {self.day} ({self.day_name} {self.date}): " + ", ".join(str(m) for m in self.main_meals())

    __repr__ = __str__

    @staticmethod
    def from_dict(data, position: int = 0):
        d = dict(data) if isinstance(data, dict) else {}
        return DayPlan(
            day=d.get("day") or position + 1,
            date_=parse_date(d.get("date")),
            day_name=d.get("dayName") or "",
            breakfast=MealEntry.from_dict(d.get("breakfast")),
            lunch=MealEntry.from_dict(d.get("lunch")),
            dinner=MealEntry.from_dict(d.get("dinner")),
            snacks=[MealEntry.from_dict(s) for s in d.get("snacks") or []],
            total_nutrition=d.get("totalNutrition"),
            water_intake=d.get("waterIntake", 0),
            notes=d.get("notes") or "",
            mood=d.get("mood"),
            energy_level=d.get("energyLevel"),
        )

    def to_dict(self):
        return {
            "day": self.day,
            "date": self.date.strftime(ISO_DATE_FORMAT) if self.date else None,
            "dayName": self.day_name,
            "breakfast": self.breakfast.to_dict(),
            "lunch": self.lunch.to_dict(),
            "dinner": self.dinner.to_dict(),
            "snacks": [s.to_dict() for s in self.snacks],
            "totalNutrition": self.total_nutrition,
            "waterIntake": self.water_intake,
            "notes": self.notes,
            "mood": self.mood,
            "energyLevel": self.energy_level,
        }


class ShoppingListItem:
    def __init__(self, ingredient: str, amount: float = 0, unit: str = "", category: str = "other",
                 purchased: bool = False, estimated_cost: Optional[float] = None, notes: str = ""):
        self.ingredient = ingredient
        self.amount = amount
        self.unit = unit
        self.category = category
        self.purchased = purchased
        self.estimated_cost = estimated_cost
        self.notes = notes

    def __str__(self) -> str:
        return f"{self.ingredient} - {self.amount} {self.unit} [{self.category}]"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return ShoppingListItem(
            ingredient=d.get("ingredient", ""),
            amount=d.get("amount") or 0,
            unit=d.get("unit") or "",
            category=d.get("category") or "other",
            purchased=bool(d.get("purchased", False)),
            estimated_cost=d.get("estimatedCost"),
            notes=d.get("notes") or "",
        )

    def to_dict(self):
        return {
            "ingredient": self.ingredient,
            "amount": self.amount,
            "unit": self.unit,
            "category": self.category,
            "purchased": self.purchased,
            "estimatedCost": self.estimated_cost,
            "notes": self.notes,
        }


DEFAULT_SETTINGS = {
    "mealsPerDay": 3,
    "snacksPerDay": 2,
    "cookingTime": "moderate",
    "difficulty": "mixed",
    "varietyLevel": "medium",
    "mealPrepFriendly": False,
    "autoGenerateShoppingList": True,
}

# Fields copied verbatim between the document and the object
_PASSTHROUGH = {
    "goals": "goals",
    "targetNutrition": "target_nutrition",
    "dietaryRestrictions": "dietary_restrictions",
    "allergies": "allergies",
    "preferredIngredients": "preferred_ingredients",
    "avoidedIngredients": "avoided_ingredients",
    "budget": "budget",
    "aiPrompt": "ai_prompt",
    "aiModel": "ai_model",
    "generationMetadata": "generation_metadata",
    "isPublic": "is_public",
    "tags": "tags",
}


class MealPlan:
    def __init__(self, title: str, user: str, start_date: date, end_date: date,
                 description: str = "", type: str = "weekly", status: str = "draft",
                 meals: Optional[List[DayPlan]] = None,
                 shopping_list: Optional[List[ShoppingListItem]] = None,
                 settings: Optional[Dict[str, Any]] = None, ai_generated: bool = False,
                 id: Optional[str] = None, revision: int = 0,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id
        self.title = title
        self.description = description
        self.user = user
        self.start_date = start_date
        self.end_date = end_date
        self.duration = compute_duration(start_date, end_date) if start_date and end_date else 0
        self.type = type
        self.status = status
        self.meals = meals[:] if meals else []
        self.shopping_list = shopping_list[:] if shopping_list else []
        self.settings = {**DEFAULT_SETTINGS, **(settings or {})}
        self.ai_generated = ai_generated
        self.goals: List[str] = ["maintenance"]
        self.target_nutrition: Dict[str, Any] = {}
        self.dietary_restrictions: List[str] = []
        self.allergies: List[str] = []
        self.preferred_ingredients: List[str] = []
        self.avoided_ingredients: List[str] = []
        self.budget: Dict[str, Any] = {"total": None, "spent": 0, "currency": "USD"}
        self.ai_prompt: Optional[str] = None
        self.ai_model: Optional[str] = None
        self.generation_metadata: Dict[str, Any] = {}
        self.is_public = False
        self.tags: List[str] = []
        self.progress = {"completedDays": 0, "completedMeals": 0, "totalMeals": 0, "adherencePercentage": 0}
        self.revision = revision
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"MealPlan {self.title} ({self.start_date} - {self.end_date}, {len(self.meals)} days)"

    __repr__ = __str__

    # --- Schedule ---------------------------------------------------------
    def validate_dates(self):
        if not self.start_date or not self.end_date or self.start_date >= self.end_date:
            raise ValidationFailed("End date must be after start date", title="Invalid dates")

    def align_schedule(self):
        '''Re-derives day number, date and weekday name of every day from start_date.'''
        for index, day in enumerate(self.meals):
            d = self.start_date + timedelta(days=index)
            day.day = index + 1
            day.date = d
            day.day_name = day_name_for(d)
        return self

    def reschedule(self, start_date: date, end_date: date):
        '''Sets new bounds; keeps existing days that still fit and adds empty ones.'''
        self.start_date = start_date
        self.end_date = end_date
        self.validate_dates()
        self.duration = compute_duration(start_date, end_date)
        self.meals = self.meals[:self.duration]
        while len(self.meals) < self.duration:
            self.meals.append(DayPlan(day=len(self.meals) + 1))
        return self.align_schedule()

    def get_day(self, day_index: int) -> DayPlan:
        if not isinstance(day_index, int) or day_index < 0 or day_index >= len(self.meals):
            raise ValidationFailed(f"Day index {day_index} is out of range", title="Invalid day")
        return self.meals[day_index]

    def set_meal(self, day_index: int, meal_type: str, entry: MealEntry) -> MealEntry:
        day = self.get_day(day_index)
        if meal_type == SNACKS:
            day.snacks.append(entry)
        elif meal_type in MAIN_MEAL_TYPES:
            setattr(day, meal_type, entry)
        else:
            raise ValidationFailed(f"Unknown meal type: {meal_type}", title="Invalid meal type")
        return entry

    def update_meal_completion(self, day_index: int, meal_type: str, completed: bool,
                               rating: Optional[int] = None, snack_index: Optional[int] = None) -> MealEntry:
        day = self.get_day(day_index)
        if meal_type in MAIN_MEAL_TYPES:
            entry = getattr(day, meal_type)
        elif meal_type in ("snack", "snacks"):
            if snack_index is None or snack_index < 0 or snack_index >= len(day.snacks):
                raise ValidationFailed(f"Snack index {snack_index} is out of range", title="Invalid snack")
            entry = day.snacks[snack_index]
        else:
            raise ValidationFailed(f"Unknown meal type: {meal_type}", title="Invalid meal type")
        entry.completed = completed
        if rating:
            entry.rating = rating
        return entry

    # --- Derived values ---------------------------------------------------
    def refresh_progress(self):
        '''Recomputes the progress counters from the current schedule.'''
        total = len(self.meals) * int(self.settings.get("mealsPerDay") or 0)
        completed = sum(1 for day in self.meals for meal in day.slots() if meal.completed)
        completed_days = sum(
            1 for day in self.meals
            if len([m for m in day.main_meals() if m.completed]) >= 2
        )
        self.progress = {
            "completedDays": completed_days,
            "completedMeals": completed,
            "totalMeals": total,
            "adherencePercentage": round_half_up(completed / total * 100) if total > 0 else 0,
        }
        return self.progress

    @property
    def completion_percentage(self) -> int:
        total = self.progress.get("totalMeals", 0)
        if not total:
            return 0
        return round_half_up(self.progress.get("completedMeals", 0) / total * 100)

    def remaining_days(self, today: Optional[date] = None) -> int:
        today = today or date.today()
        if not self.end_date:
            return 0
        return max(0, (self.end_date - today).days)

    @property
    def total_estimated_cost(self) -> float:
        return sum(item.estimated_cost or 0 for item in self.shopping_list)

    # --- Persistence ------------------------------------------------------
    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        plan = MealPlan(
            id=d.get("_id"),
            title=d.get("title", ""),
            description=d.get("description") or "",
            user=d.get("user", ""),
            start_date=parse_date(d.get("startDate")),
            end_date=parse_date(d.get("endDate")),
            type=d.get("type", "weekly"),
            status=d.get("status", "draft"),
            meals=[DayPlan.from_dict(day, i) for i, day in enumerate(d.get("meals") or [])],
            shopping_list=[ShoppingListItem.from_dict(i) for i in d.get("shoppingList") or []],
            settings=d.get("settings"),
            ai_generated=bool(d.get("aiGenerated", False)),
            revision=d.get("revision", 0),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )
        if d.get("duration"):
            plan.duration = d["duration"]
        for key, attr in _PASSTHROUGH.items():
            if key in d and d[key] is not None:
                setattr(plan, attr, d[key])
        if isinstance(d.get("progress"), dict):
            plan.progress = {**plan.progress, **d["progress"]}
        return plan

    def to_dict(self):
        out = {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "user": self.user,
            "startDate": self.start_date.strftime(ISO_DATE_FORMAT) if self.start_date else None,
            "endDate": self.end_date.strftime(ISO_DATE_FORMAT) if self.end_date else None,
            "duration": self.duration,
            "type": self.type,
            "status": self.status,
            "meals": [day.to_dict() for day in self.meals],
            "shoppingList": [item.to_dict() for item in self.shopping_list],
            "settings": self.settings,
            "aiGenerated": self.ai_generated,
            "progress": self.progress,
            "revision": self.revision,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        for key, attr in _PASSTHROUGH.items():
            out[key] = getattr(self, attr)
        return out

    def to_public_dict(self, today: Optional[date] = None):
        '''Document plus response-only derived values.'''
        out = self.to_dict()
        out["completionPercentage"] = self.completion_percentage
        out["remainingDays"] = self.remaining_days(today)
        out["totalEstimatedCost"] = self.total_estimated_cost
        return out
