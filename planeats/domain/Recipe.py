"""Recipe domain entity: title, ingredients with amounts, instructions, nutrition, reviews."""
from datetime import datetime, timezone
from typing import List, Dict, Optional, Any


class RecipeIngredient:
    def __init__(self, name: str = "", amount: float = 0, unit: str = "", notes: str = ""):
        self.name = name
        self.amount = amount
        self.unit = unit
        self.notes = notes

    def __str__(self) -> str:
        return f"{self.name} - {self.amount} {self.unit}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a RecipeIngredient from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return RecipeIngredient(
            name=d.get("name") or "",
            amount=d.get("amount") or 0,
            unit=d.get("unit") or "",
            notes=d.get("notes") or "",
        )

    def to_dict(self):
        return {"name": self.name, "amount": self.amount, "unit": self.unit, "notes": self.notes}


class Recipe:
    def __init__(self, title: str = "", description: str = "", author: str = "",
                 ingredients: Optional[List[RecipeIngredient]] = None,
                 instructions: Optional[List[Dict[str, Any]]] = None,
                 nutrition: Optional[Dict[str, Any]] = None, servings: int = 1,
                 prep_time: int = 0, cook_time: int = 0, difficulty: str = "medium",
                 cuisine: str = "other", meal_type: Optional[List[str]] = None,
                 dietary_tags: Optional[List[str]] = None, allergens: Optional[List[str]] = None,
                 images: Optional[List[Dict[str, Any]]] = None, source: str = "user-created",
                 rating: Optional[Dict[str, Any]] = None, reviews: Optional[List[Dict[str, Any]]] = None,
                 favorites: int = 0, is_public: bool = True, id: Optional[str] = None,
                 revision: int = 0, created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id
        self.title = title
        self.description = description
        self.author = author
        self.ingredients = ingredients[:] if ingredients else []
        self.instructions = instructions[:] if instructions else []
        self.nutrition = dict(nutrition) if nutrition else {}
        self.servings = servings
        self.prep_time = prep_time
        self.cook_time = cook_time
        self.difficulty = difficulty
        self.cuisine = cuisine
        self.meal_type = meal_type[:] if meal_type else []
        self.dietary_tags = dietary_tags[:] if dietary_tags else []
        self.allergens = allergens[:] if allergens else []
        self.images = images[:] if images else []
        self.source = source
        self.rating = dict(rating) if rating else {"average": 0, "count": 0}
        self.reviews = reviews[:] if reviews else []
        self.favorites = favorites
        self.is_public = is_public
        self.revision = revision
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"{self.title} - {self.servings} servings - {len(self.ingredients)} ingredients"

    __repr__ = __str__

    @property
    def total_time(self) -> int:
        return (self.prep_time or 0) + (self.cook_time or 0)

    def matches_search(self, term: str) -> bool:
        """Case-insensitive match on title, description or any ingredient name."""
        t = term.strip().lower()
        if not t:
            return True
        if t in self.title.lower() or t in (self.description or "").lower():
            return True
        return any(t in ing.name.lower() for ing in self.ingredients)

    def add_review(self, user_id: str, rating: int, comment: str = ""):
        '''Appends a review and recomputes the average rating.'''
        self.reviews.append({
            "user": user_id,
            "rating": rating,
            "comment": comment,
            "createdAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        })
        total = sum(r.get("rating", 0) for r in self.reviews)
        self.rating = {
            "average": round(total / len(self.reviews), 1),
            "count": len(self.reviews),
        }

    def has_review_from(self, user_id: str) -> bool:
        return any(r.get("user") == user_id for r in self.reviews)

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Recipe(
            id=d.get("_id"),
            title=d.get("title", ""),
            description=d.get("description", ""),
            author=d.get("author", ""),
            ingredients=[RecipeIngredient.from_dict(i) for i in d.get("ingredients") or []],
            instructions=d.get("instructions") or [],
            nutrition=d.get("nutrition") or {},
            servings=d.get("servings", 1),
            prep_time=d.get("prepTime", 0),
            cook_time=d.get("cookTime", 0),
            difficulty=d.get("difficulty", "medium"),
            cuisine=d.get("cuisine", "other"),
            meal_type=d.get("mealType") or [],
            dietary_tags=d.get("dietaryTags") or [],
            allergens=d.get("allergens") or [],
            images=d.get("images") or [],
            source=d.get("source", "user-created"),
            rating=d.get("rating"),
            reviews=d.get("reviews") or [],
            favorites=d.get("favorites", 0),
            is_public=d.get("isPublic", True),
            revision=d.get("revision", 0),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self):
        return {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "author": self.author,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "instructions": self.instructions,
            "nutrition": self.nutrition,
            "servings": self.servings,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "difficulty": self.difficulty,
            "cuisine": self.cuisine,
            "mealType": self.meal_type,
            "dietaryTags": self.dietary_tags,
            "allergens": self.allergens,
            "images": self.images,
            "source": self.source,
            "rating": self.rating,
            "reviews": self.reviews,
            "favorites": self.favorites,
            "isPublic": self.is_public,
            "revision": self.revision,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
