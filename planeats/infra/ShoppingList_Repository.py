from typing import List, Optional, Tuple

from planeats.domain.ShoppingList import ShoppingList
from planeats.infra.Document_Store import DocumentRepository, paginate
from planeats.infra.paths import SHOPPING_LISTS


class ShoppingListRepository(DocumentRepository):
    collection = SHOPPING_LISTS
    model = ShoppingList

    def get_for_user(self, list_id: str, user_id: str) -> Optional[ShoppingList]:
        shopping_list = self.get(list_id)
        if shopping_list is None or shopping_list.user != user_id:
            return None
        return shopping_list

    def list_for_user(self, user_id: str, status: Optional[str] = None,
                      page: int = 1, limit: int = 10) -> Tuple[List[ShoppingList], int, int]:
        docs = self.store.find(
            self.collection,
            lambda d: d.get('user') == user_id and (not status or d.get('status') == status),
        )
        docs.sort(key=lambda d: d.get('createdAt') or '', reverse=True)
        page_docs, total, total_pages = paginate(docs, page, limit)
        return [ShoppingList.from_dict(d) for d in page_docs], total, total_pages
