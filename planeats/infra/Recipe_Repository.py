import logging
from typing import Dict, Iterable, List, Optional, Tuple

from planeats.domain.Recipe import Recipe
from planeats.infra.Document_Store import DocumentRepository, paginate
from planeats.infra.paths import RECIPES

logger = logging.getLogger(__name__)

SORT_KEYS = {
    'newest': (lambda r: r.created_at or '', True),
    'rating': (lambda r: (r.rating.get('average', 0), r.favorites), True),
    'popular': (lambda r: (r.favorites, r.rating.get('count', 0)), True),
    'quickest': (lambda r: r.total_time, False),
}


class RecipeRepository(DocumentRepository):
    collection = RECIPES
    model = Recipe

    def get_many(self, ids: Iterable[str]) -> Dict[str, Recipe]:
        wanted = set(ids)
        if not wanted:
            return {}
        docs = self.store.find(self.collection, lambda d: d.get('_id') in wanted)
        return {d['_id']: Recipe.from_dict(d) for d in docs}

    def search(self, search: str = '', cuisine: Optional[str] = None, difficulty: Optional[str] = None,
               meal_type: Optional[str] = None, dietary_tags: Optional[List[str]] = None,
               max_time: Optional[int] = None, sort: str = 'newest', viewer: Optional[str] = None,
               page: int = 1, limit: int = 12) -> Tuple[List[Recipe], int, int]:
        """Filter public recipes (plus the viewer's own) and paginate."""
        recipes = [r for r in self.find() if r.is_public or (viewer and r.author == viewer)]
        if search:
            recipes = [r for r in recipes if r.matches_search(search)]
        if cuisine:
            recipes = [r for r in recipes if r.cuisine == cuisine]
        if difficulty:
            recipes = [r for r in recipes if r.difficulty == difficulty]
        if meal_type:
            recipes = [r for r in recipes if meal_type in r.meal_type]
        if dietary_tags:
            recipes = [r for r in recipes if all(t in r.dietary_tags for t in dietary_tags)]
        if max_time is not None:
            recipes = [r for r in recipes if r.total_time <= max_time]

        key, reverse = SORT_KEYS.get(sort, SORT_KEYS['newest'])
        recipes.sort(key=key, reverse=reverse)
        return paginate(recipes, page, limit)

    def by_author(self, author_id: str) -> List[Recipe]:
        recipes = self.find(lambda d: d.get('author') == author_id)
        recipes.sort(key=lambda r: r.created_at or '', reverse=True)
        return recipes
