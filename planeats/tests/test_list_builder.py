from datetime import date

from planeats.domain.MealPlan import MealPlan, DayPlan, MealEntry
from planeats.domain.Recipe import Recipe, RecipeIngredient
from planeats.infra.Document_Store import DocumentStore
from planeats.infra.MealPlan_Repository import MealPlanRepository
from planeats.logic.shopping.list_builder import build_shopping_list, generate_shopping_list


def _recipe(rid, *ingredients):
    return Recipe(title=rid, id=rid, ingredients=[RecipeIngredient(n, a, u) for n, a, u in ingredients])


def _plan(*days):
    plan = MealPlan(title="Week", user="u1", start_date=date(2024, 1, 1), end_date=date(2024, 1, 1 + len(days)))
    plan.meals = list(days)
    return plan.align_schedule()


def test_merges_case_insensitive_names_with_servings():
    recipes = {
        "soup": _recipe("soup", ("Onion", 1, "cup")),
        "salad": _recipe("salad", ("onion", 0.5, "cup")),
    }
    plan = _plan(
        DayPlan(1, breakfast=MealEntry(recipe="soup", servings=2)),
        DayPlan(2, lunch=MealEntry(recipe="salad", servings=1)),
    )

    items = build_shopping_list(plan, recipes)

    assert len(items) == 1
    assert items[0].ingredient == "Onion"
    assert items[0].amount == 2.5
    assert items[0].unit == "cup"
    assert items[0].category == "produce"
    assert items[0].purchased is False


def test_whitespace_is_ignored_in_key():
    recipes = {"a": _recipe("a", ("  Rice ", 100, "g")), "b": _recipe("b", ("rice", 50, "g"))}
    plan = _plan(DayPlan(1, lunch=MealEntry(recipe="a"), dinner=MealEntry(recipe="b")))

    items = build_shopping_list(plan, recipes)

    assert [(i.ingredient, i.amount, i.category) for i in items] == [("Rice", 150, "pantry")]


def test_units_are_summed_raw_without_conversion():
    recipes = {"a": _recipe("a", ("Butter", 2, "tbsp")), "b": _recipe("b", ("butter", 1, "cup"))}
    plan = _plan(DayPlan(1, breakfast=MealEntry(recipe="a"), dinner=MealEntry(recipe="b")))

    items = build_shopping_list(plan, recipes)

    assert len(items) == 1
    assert items[0].amount == 3
    assert items[0].unit == "tbsp"


def test_plan_without_resolved_recipes_yields_empty_list():
    plan = _plan(
        DayPlan(1, breakfast=MealEntry(custom_meal={"name": "Toast", "ingredients": ["bread"]})),
        DayPlan(2, dinner=MealEntry(recipe="missing")),
        DayPlan(3),
    )
    assert build_shopping_list(plan, {}) == []


def test_snacks_count_and_output_is_sorted():
    recipes = {
        "main": _recipe("main", ("Tomato", 2, "piece"), ("Beef", 500, "g")),
        "snack": _recipe("snack", ("Apple", 1, "piece")),
    }
    plan = _plan(DayPlan(1, dinner=MealEntry(recipe="main"), snacks=[MealEntry(recipe="snack", servings=3)]))

    items = build_shopping_list(plan, recipes)

    assert [i.ingredient for i in items] == ["Apple", "Beef", "Tomato"]
    assert items[0].amount == 3
    assert items[1].category == "meat"


def test_generate_replaces_list_and_persists(tmp_path):
    repo = MealPlanRepository(DocumentStore(tmp_path))
    recipes = {"soup": _recipe("soup", ("Carrot", 1, "piece"))}
    plan = _plan(DayPlan(1, lunch=MealEntry(recipe="soup")))
    repo.insert(plan)

    generate_shopping_list(plan, recipes, repo)
    generate_shopping_list(plan, recipes, repo)

    stored = repo.get(plan.id)
    assert [(i.ingredient, i.amount) for i in stored.shopping_list] == [("Carrot", 1)]
    assert stored.revision == 2
