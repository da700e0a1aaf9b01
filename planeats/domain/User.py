"""User domain entity: identity, profile and the dietary preferences fed to meal-plan generation."""
from typing import List, Dict, Optional, Any


class User:
    def __init__(self, username: str, email: str, profile: Optional[Dict[str, Any]] = None,
                 dietary_preferences: Optional[List[str]] = None, allergies: Optional[List[str]] = None,
                 favorite_ingredients: Optional[List[str]] = None,
                 disliked_ingredients: Optional[List[str]] = None,
                 saved_recipes: Optional[List[str]] = None,
                 nutrition_goals: Optional[Dict[str, Any]] = None, is_active: bool = True,
                 id: Optional[str] = None, revision: int = 0,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id
        self.username = username.strip()
        self.email = email.strip().lower()
        self.profile = dict(profile) if profile else {}
        self.dietary_preferences = dietary_preferences[:] if dietary_preferences else []
        self.allergies = allergies[:] if allergies else []
        self.favorite_ingredients = favorite_ingredients[:] if favorite_ingredients else []
        self.disliked_ingredients = disliked_ingredients[:] if disliked_ingredients else []
        self.saved_recipes = saved_recipes[:] if saved_recipes else []
        self.nutrition_goals = {
            "dailyCalories": None, "proteinPercentage": 20, "carbPercentage": 50, "fatPercentage": 30,
            **(nutrition_goals or {}),
        }
        self.is_active = is_active
        self.revision = revision
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"{self.username} <{self.email}>"

    __repr__ = __str__

    def toggle_saved_recipe(self, recipe_id: str) -> bool:
        '''Adds or removes a recipe from savedRecipes; returns True when it is now saved.'''
        if recipe_id in self.saved_recipes:
            self.saved_recipes.remove(recipe_id)
            return False
        self.saved_recipes.append(recipe_id)
        return True

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return User(
            id=d.get("_id"),
            username=d.get("username", ""),
            email=d.get("email", ""),
            profile=d.get("profile"),
            dietary_preferences=d.get("dietaryPreferences"),
            allergies=d.get("allergies"),
            favorite_ingredients=d.get("favoriteIngredients"),
            disliked_ingredients=d.get("dislikedIngredients"),
            saved_recipes=d.get("savedRecipes"),
            nutrition_goals=d.get("nutritionGoals"),
            is_active=d.get("isActive", True),
            revision=d.get("revision", 0),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self):
        return {
            "_id": self.id,
            "username": self.username,
            "email": self.email,
            "profile": self.profile,
            "dietaryPreferences": self.dietary_preferences,
            "allergies": self.allergies,
            "favoriteIngredients": self.favorite_ingredients,
            "dislikedIngredients": self.disliked_ingredients,
            "savedRecipes": self.saved_recipes,
            "nutritionGoals": self.nutrition_goals,
            "isActive": self.is_active,
            "revision": self.revision,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
