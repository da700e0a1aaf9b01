from typing import Final

ISO_DATE_FORMAT: Final[str] = "%Y-%m-%d"

# English weekday names, Sunday-indexed
DAY_NAMES: Final[tuple] = (
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
)

MAIN_MEAL_TYPES: Final[tuple] = ("breakfast", "lunch", "dinner")
SNACKS: Final[str] = "snacks"

# Shopping list categories
MEAL_PLAN_CATEGORIES: Final[tuple] = (
    "produce", "meat", "dairy", "pantry", "frozen", "bakery", "other",
)
STANDALONE_LIST_CATEGORIES: Final[tuple] = MEAL_PLAN_CATEGORIES + ("beverages",)

MEAL_PLAN_STATUSES: Final[tuple] = ("draft", "active", "completed", "paused", "archived")
MEAL_PLAN_TYPES: Final[tuple] = ("weekly", "daily", "custom")
SHOPPING_LIST_STATUSES: Final[tuple] = ("active", "completed", "archived")

RECIPE_UNITS: Final[tuple] = (
    "cup", "tbsp", "tsp", "oz", "lb", "g", "kg", "ml", "l",
    "piece", "slice", "clove", "pinch", "dash",
)
RECIPE_DIFFICULTIES: Final[tuple] = ("easy", "medium", "hard")
RECIPE_CUISINES: Final[tuple] = (
    "american", "italian", "mexican", "chinese", "indian", "mediterranean", "french",
    "japanese", "thai", "greek", "korean", "middle-eastern", "spanish", "british",
    "german", "other",
)
RECIPE_MEAL_TYPES: Final[tuple] = (
    "breakfast", "lunch", "dinner", "snack", "dessert", "appetizer", "side-dish",
)
DIETARY_TAGS: Final[tuple] = (
    "vegan", "vegetarian", "keto", "paleo", "gluten-free", "dairy-free", "nut-free",
    "low-carb", "low-fat", "high-protein", "low-sodium",
)

DEFAULT_AI_TITLE: Final[str] = "AI Generated Meal Plan"
DEFAULT_AI_DESCRIPTION: Final[str] = "Personalized meal plan created by AI"

SYSTEM_PROMPT: Final[str] = (
    """You are PlanEats AI, a specialized meal planning assistant that creates personalized meal plans based on available ingredients and dietary preferences.

Role: Generate structured, practical meal plans that maximize ingredient usage while meeting dietary requirements and nutritional goals.

Task: Create detailed meal plans with specific recipes, cooking instructions, and nutritional information.

Format: Respond with a single JSON object containing:
- title: Meal plan title
- description: Brief description
- meals: Array of daily meal objects with breakfast, lunch, dinner, and snacks
- totalNutrition: Estimated nutrition totals
- additionalIngredients: Additional ingredients needed

Constraints:
- Use provided ingredients as much as possible
- Respect all dietary restrictions and allergies
- Ensure nutritional balance
- Provide realistic cooking times and difficulty levels
- Include variety across days
- Suggest reasonable portion sizes"""
)

MEAL_PLAN_JSON_FORMAT: Final[str] = (
    """
{
  "title": "Meal Plan Title",
  "description": "Brief description",
  "meals": [
    {
      "day": 1,
      "date": "2024-01-01",
      "dayName": "Monday",
      "breakfast": {
        "customMeal": {
          "name": "Recipe Name",
          "ingredients": ["ingredient 1", "ingredient 2"],
          "instructions": "Step-by-step cooking instructions",
          "nutrition": { "calories": 300, "protein": 15, "carbs": 40, "fat": 10 }
        },
        "servings": 1
      },
      "lunch": { /* similar structure */ },
      "dinner": { /* similar structure */ },
      "snacks": [{ /* similar structure */ }]
    }
  ],
  "totalNutrition": {
    "dailyAverage": { "calories": 2000, "protein": 100, "carbs": 250, "fat": 65 }
  },
  "additionalIngredients": ["ingredient 1", "ingredient 2"]
}
    """
)
