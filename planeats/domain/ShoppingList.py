"""Standalone ShoppingList aggregate: a named, user-owned list of items to purchase."""
from uuid import uuid4
from typing import List, Dict, Optional, Any

from planeats.domain.errors import NotFoundError
from planeats.domain.MealPlan import round_half_up


class ShoppingListEntry:
    def __init__(self, ingredient: str, amount: Optional[float] = None, unit: str = "",
                 category: str = "other", purchased: bool = False,
                 estimated_cost: Optional[float] = None, notes: str = "",
                 recipe: Optional[str] = None, meal_plan: Optional[str] = None,
                 id: Optional[str] = None):
        self.id = id or uuid4().hex
        self.ingredient = ingredient.strip()
        self.amount = amount
        self.unit = unit.strip() if unit else ""
        self.category = category
        self.purchased = purchased
        self.estimated_cost = estimated_cost
        self.notes = notes
        self.recipe = recipe
        self.meal_plan = meal_plan

    def __str__(self) -> str:
        return f"{self.ingredient} - {self.amount or ''} {self.unit} [{self.category}]".strip()

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return ShoppingListEntry(
            id=d.get("_id"),
            ingredient=d.get("ingredient", ""),
            amount=d.get("amount"),
            unit=d.get("unit") or "",
            category=d.get("category") or "other",
            purchased=bool(d.get("purchased", False)),
            estimated_cost=d.get("estimatedCost"),
            notes=d.get("notes") or "",
            recipe=d.get("recipe"),
            meal_plan=d.get("mealPlan"),
        )

    def to_dict(self):
        return {
            "_id": self.id,
            "ingredient": self.ingredient,
            "amount": self.amount,
            "unit": self.unit,
            "category": self.category,
            "purchased": self.purchased,
            "estimatedCost": self.estimated_cost,
            "notes": self.notes,
            "recipe": self.recipe,
            "mealPlan": self.meal_plan,
        }


class ShoppingList:
    def __init__(self, user: str, name: str, items: Optional[List[ShoppingListEntry]] = None,
                 status: str = "active", budget: Optional[Dict[str, Any]] = None,
                 stores: Optional[List[Dict[str, Any]]] = None, id: Optional[str] = None,
                 revision: int = 0, created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id
        self.user = user
        self.name = name
        self.items = items[:] if items else []
        self.status = status
        self.budget = {"total": None, "spent": 0, "currency": "USD", **(budget or {})}
        self.stores = stores[:] if stores else []
        self.revision = revision
        self.created_at = created_at
        self.updated_at = updated_at

    def add_item(self, item: ShoppingListEntry) -> ShoppingListEntry:
        '''
        Adds an item to the shopping list.
        '''
        self.items.append(item)
        return item

    def get_item(self, item_id: str) -> ShoppingListEntry:
        for item in self.items:
            if item.id == item_id:
                return item
        raise NotFoundError("Item not found", title="Item not found")

    def mark_as_purchased(self, item_id: str, purchased: bool = True) -> ShoppingListEntry:
        item = self.get_item(item_id)
        item.purchased = purchased
        return item

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def purchased_items(self) -> int:
        return len([i for i in self.items if i.purchased])

    @property
    def completion_percentage(self) -> int:
        if not self.items:
            return 0
        return round_half_up(self.purchased_items / self.total_items * 100)

    @property
    def remaining_budget(self) -> Optional[float]:
        if self.budget.get("total"):
            return self.budget["total"] - (self.budget.get("spent") or 0)
        return None

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Shopping List {self.name}:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return ShoppingList(
            id=d.get("_id"),
            user=d.get("user", ""),
            name=d.get("name", ""),
            items=[ShoppingListEntry.from_dict(i) for i in d.get("items") or []],
            status=d.get("status", "active"),
            budget=d.get("budget"),
            stores=d.get("stores") or [],
            revision=d.get("revision", 0),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self):
        return {
            "_id": self.id,
            "user": self.user,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "status": self.status,
            "budget": self.budget,
            "stores": self.stores,
            "revision": self.revision,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def to_public_dict(self):
        out = self.to_dict()
        out["totalItems"] = self.total_items
        out["purchasedItems"] = self.purchased_items
        out["completionPercentage"] = self.completion_percentage
        out["remainingBudget"] = self.remaining_budget
        return out
