"""
Test Suite for meal plan generation and shopping list aggregation

Covers:
- Day rotation (weekdays, dinners, breakfast/lunch cadence)
- Shopping list aggregation and serving labels
- Markdown rendering
- Ingredient overlap analysis
"""

import pytest

from meal_planner import (
    WEEKDAYS,
    MealPlan,
    ShoppingListBuilder,
    UnknownCuisineError,
    analyze_ingredient_overlap,
    count_shared_ingredients,
    render_meal_plan_markdown,
)
from recipes import Recipe, get_recipe_database

TOAST = Recipe(name="Toast", category="Breakfast",
               ingredients=("Bread", "Butter"), instructions=("Toast bread",))
TINY_CATALOG = {"Test": (TOAST,)}


def test_italian_week_end_to_end():
    """A default week of Italian dinners has 7 days, a shopping list and 5 tips"""
    plan = MealPlan.generate("Italian", 7, 4)

    assert plan.cuisine == "Italian"
    assert len(plan.days) == 7
    assert plan.shopping_list.total_items > 0
    assert len(plan.preparation_tips) == 5
    assert plan.preparation_tips[0] == "Prep ingredients for Italian cuisine in advance"


@pytest.mark.parametrize("days", [1, 3, 7, 10, 16])
def test_day_count_and_rotation(days):
    plan = MealPlan.generate("Thai", days, 2)
    recipes = get_recipe_database()["Thai"]

    assert len(plan.days) == days
    for i, day_plan in enumerate(plan.days):
        assert day_plan.day == WEEKDAYS[i % 7]
        assert day_plan.dinner == recipes[i % len(recipes)].name
        assert (day_plan.breakfast is not None) == (i % 3 == 0)
        assert (day_plan.lunch is not None) == (i % 2 == 0)


def test_weekdays_cycle_after_one_week():
    plan = MealPlan.generate("French", 9, 4)
    assert [d.day for d in plan.days[6:]] == ["Sunday", "Monday", "Tuesday"]


def test_placeholder_meals():
    plan = MealPlan.generate("Chinese", 2, 4)
    assert plan.days[0].breakfast == "Fresh fruit and yogurt"
    assert plan.days[0].lunch == "Light salad or soup"
    assert plan.days[1].breakfast is None
    assert plan.days[1].lunch is None


def test_shopping_list_totals():
    plan = MealPlan.generate("Vietnamese", 7, 4)
    shopping = plan.shopping_list

    assert shopping.total_items == len(shopping.ingredients)
    for item in shopping.ingredients:
        assert item.used_in
        assert item.quantity == "As needed"


def test_serving_label_applied_when_more_than_one():
    plan = MealPlan.generate("Mexican", 3, 6)
    for item in plan.shopping_list.ingredients:
        assert item.name.endswith(" (serves 6)")


def test_single_serving_keeps_raw_text():
    plan = MealPlan.generate("Mexican", 3, 1)
    raw = {ing for recipe in get_recipe_database()["Mexican"] for ing in recipe.ingredients}

    assert {item.name for item in plan.shopping_list.ingredients} == raw


def test_items_follow_first_seen_order():
    plan = MealPlan.generate("Italian", 1, 1)
    carbonara = get_recipe_database()["Italian"][0]

    assert [item.name for item in plan.shopping_list.ingredients] == list(carbonara.ingredients)


def test_used_in_keeps_repeat_dinners():
    """Coq au Vin rotates back on day 4, so its name is recorded twice"""
    plan = MealPlan.generate("French", 4, 1)
    by_name = {item.name: item for item in plan.shopping_list.ingredients}

    assert by_name["750ml red wine"].used_in == ["Coq au Vin", "Coq au Vin"]
    assert by_name["2 bay leaves"].used_in == ["Coq au Vin", "French Onion Soup", "Coq au Vin"]


def test_shared_ingredient_is_listed_once():
    plan = MealPlan.generate("French", 3, 4)
    names = [item.name for item in plan.shopping_list.ingredients]

    assert names.count("Fresh thyme (serves 4)") == 1


def test_fewer_recipes_than_days_repeat():
    plan = MealPlan.generate("Test", 5, 1, catalog=TINY_CATALOG)

    assert [d.dinner for d in plan.days] == ["Toast"] * 5
    assert plan.shopping_list.total_items == 2
    assert plan.shopping_list.ingredients[0].used_in == ["Toast"] * 5


def test_unknown_cuisine_fails_fast():
    with pytest.raises(UnknownCuisineError) as exc_info:
        MealPlan.generate("Klingon", 7, 4)

    assert isinstance(exc_info.value, KeyError)
    assert exc_info.value.cuisine == "Klingon"
    assert str(exc_info.value) == "Cuisine not found: Klingon"


def test_empty_cuisine_is_rejected():
    with pytest.raises(UnknownCuisineError):
        MealPlan.generate("Empty", 3, 4, catalog={"Empty": ()})


@pytest.mark.parametrize("days,servings", [(0, 4), (7, 0), (-1, 4)])
def test_non_positive_counts_rejected(days, servings):
    with pytest.raises(ValueError):
        MealPlan.generate("Italian", days, servings)


# ============================================================================
# ShoppingListBuilder
# ============================================================================

def test_builder_last_display_text_wins():
    builder = ShoppingListBuilder()
    builder.add("Rice", "Rice (serves 2)", "Fried Rice")
    builder.add("Salt", "Salt", "Fried Rice")
    builder.add("Rice", "Rice (serves 8)", "Congee")

    shopping = builder.to_shopping_list()

    assert len(builder) == 2
    assert shopping.total_items == 2
    assert [item.name for item in shopping.ingredients] == ["Rice (serves 8)", "Salt"]
    assert shopping.ingredients[0].used_in == ["Fried Rice", "Congee"]


def test_builder_keys_are_case_sensitive():
    builder = ShoppingListBuilder()
    builder.add("2 tbsp butter", "2 tbsp butter", "A")
    builder.add("2 tbsp Butter", "2 tbsp Butter", "B")

    assert builder.to_shopping_list().total_items == 2


def test_empty_builder():
    shopping = ShoppingListBuilder().to_shopping_list()
    assert shopping.ingredients == []
    assert shopping.total_items == 0


# ============================================================================
# Markdown
# ============================================================================

def test_plan_markdown_layout():
    plan = MealPlan.generate("Test", 2, 1, catalog=TINY_CATALOG)

    expected = (
        "# Weekly Meal Plan - Test Cuisine\n\n"
        "## Daily Meal Schedule\n\n"
        "### Monday\n"
        "- **Breakfast:** Fresh fruit and yogurt\n"
        "- **Lunch:** Light salad or soup\n"
        "- **Dinner:** Toast\n\n"
        "### Tuesday\n"
        "- **Dinner:** Toast\n\n"
        "## Shopping List\n\n"
        "**Total Items:** 2\n\n"
        "- **Bread** (used in: Toast, Toast)\n"
        "- **Butter** (used in: Toast, Toast)\n"
        "\n## Preparation Tips\n\n"
        "1. Prep ingredients for Test cuisine in advance\n"
        "2. Marinate proteins the night before for better flavor\n"
        "3. Chop vegetables in batches to save time\n"
        "4. Cook grains and legumes in larger quantities for multiple meals\n"
        "5. Store fresh herbs in water to keep them fresh longer\n"
    )
    assert plan.to_markdown() == expected


def test_plan_markdown_sections():
    markdown = render_meal_plan_markdown(MealPlan.generate("Mexican", 3, 2))

    assert "# Weekly Meal Plan - Mexican Cuisine" in markdown
    assert "## Daily Meal Schedule" in markdown
    assert "## Shopping List" in markdown
    assert "## Preparation Tips" in markdown
    assert "(serves 2)" in markdown


def test_plan_markdown_is_repeatable():
    plan = MealPlan.generate("Chinese", 5, 3)
    assert plan.to_markdown() == plan.to_markdown()
    assert render_meal_plan_markdown(plan) == plan.to_markdown()


# ============================================================================
# Ingredient Overlap
# ============================================================================

def test_overlap_none_found():
    assert analyze_ingredient_overlap("Mexican") == \
        "No overlapping ingredients found in Mexican cuisine recipes."


def test_overlap_found():
    result = analyze_ingredient_overlap("French")

    assert result.startswith("Common ingredients in French cuisine:\n\n")
    assert "- 2 bay leaves (used in 2 recipes)\n" in result
    assert "- Salt and pepper (used in 2 recipes)\n" in result


def test_overlap_sorted_by_count():
    a = Recipe(name="A", category="Main", ingredients=("Salt", "Oil"), instructions=("Cook",))
    b = Recipe(name="B", category="Main", ingredients=("Salt", "Oil", "Rice"), instructions=("Cook",))
    c = Recipe(name="C", category="Main", ingredients=("Salt",), instructions=("Cook",))

    shared = count_shared_ingredients([a, b, c])
    assert shared == [("Salt", 3), ("Oil", 2)]

    counts = [count for _, count in count_shared_ingredients(get_recipe_database()["Chinese"])]
    assert counts == sorted(counts, reverse=True)
    assert all(count >= 2 for count in counts)


def test_overlap_unknown_cuisine():
    with pytest.raises(UnknownCuisineError):
        analyze_ingredient_overlap("Klingon")
