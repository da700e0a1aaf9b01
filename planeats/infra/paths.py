from pathlib import Path
from planeats.utilities.config import DATA_DIR

# One JSON file per document collection under DATA_DIR
USERS = 'users'
RECIPES = 'recipes'
MEAL_PLANS = 'mealplans'
SHOPPING_LISTS = 'shopping_lists'
NOTIFICATIONS = 'notifications'

COLLECTIONS = (USERS, RECIPES, MEAL_PLANS, SHOPPING_LISTS, NOTIFICATIONS)


def collection_file(data_dir: Path, collection: str) -> Path:
    return Path(data_dir) / f'{collection}.json'


__all__ = ['DATA_DIR', 'USERS', 'RECIPES', 'MEAL_PLANS', 'SHOPPING_LISTS', 'NOTIFICATIONS',
           'COLLECTIONS', 'collection_file']
