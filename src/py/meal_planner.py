"""
Meal plan generation, shopping list aggregation and ingredient overlap.

Plans are a round-robin rotation over a cuisine's recipes: day ``i`` gets
dinner ``recipes[i % len(recipes)]`` and weekday ``WEEKDAYS[i % 7]``.
Every function here is pure with respect to the catalog; each call builds
a fresh MealPlan.
"""

from collections import Counter
from typing import Sequence

from pydantic import BaseModel

from recipes import Recipe, RecipeCatalog, get_cuisine_recipes

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

BREAKFAST_PLACEHOLDER = "Fresh fruit and yogurt"
LUNCH_PLACEHOLDER = "Light salad or soup"
DEFAULT_QUANTITY = "As needed"


class UnknownCuisineError(KeyError):
    """Raised when a plan is requested for a cuisine missing from the catalog."""

    def __init__(self, cuisine: str):
        super().__init__(cuisine)
        self.cuisine = cuisine

    def __str__(self) -> str:
        return f"Cuisine not found: {self.cuisine}"


# ============================================================================
# Models
# ============================================================================


class DayPlan(BaseModel):
    day: str
    breakfast: str | None = None
    lunch: str | None = None
    dinner: str


class ShoppingItem(BaseModel):
    name: str
    quantity: str = DEFAULT_QUANTITY
    used_in: list[str] = []


class ShoppingList(BaseModel):
    ingredients: list[ShoppingItem]
    total_items: int


def preparation_tips(cuisine: str) -> list[str]:
    return [
        f"Prep ingredients for {cuisine} cuisine in advance",
        "Marinate proteins the night before for better flavor",
        "Chop vegetables in batches to save time",
        "Cook grains and legumes in larger quantities for multiple meals",
        "Store fresh herbs in water to keep them fresh longer",
    ]


def scale_ingredient(ingredient: str, servings: int) -> str:
    if servings > 1:
        return f"{ingredient} (serves {servings})"
    return ingredient


# ============================================================================
# Shopping List Aggregation
# ============================================================================


class ShoppingListBuilder:
    """Accumulate dinner ingredients into a deduplicated shopping list.

    Ingredients are keyed by their raw text with exact string equality, so
    "2 tbsp butter" and "2 tbsp Butter" stay separate. Each ``add`` overwrites
    the display text for its key (last write wins) and appends the recipe
    name to that key's usage list, duplicates included. Items come out in
    the order their key was first seen.
    """

    def __init__(self):
        self._display: dict[str, str] = {}
        self._usage: dict[str, list[str]] = {}

    def __len__(self) -> int:
        return len(self._display)

    def add(self, ingredient: str, display_name: str, recipe_name: str) -> None:
        self._display[ingredient] = display_name
        self._usage.setdefault(ingredient, []).append(recipe_name)

    def add_recipe(self, recipe: Recipe, servings: int) -> None:
        for ingredient in recipe.ingredients:
            self.add(ingredient, scale_ingredient(ingredient, servings), recipe.name)

    def to_shopping_list(self) -> ShoppingList:
        items = [
            ShoppingItem(name=display, used_in=list(self._usage.get(key, [])))
            for key, display in self._display.items()
        ]
        return ShoppingList(ingredients=items, total_items=len(items))


# ============================================================================
# Meal Plan
# ============================================================================


class MealPlan(BaseModel):
    cuisine: str
    days: list[DayPlan]
    shopping_list: ShoppingList
    preparation_tips: list[str]

    @classmethod
    def generate(
        cls,
        cuisine: str,
        days: int = 7,
        servings: int = 4,
        catalog: RecipeCatalog | None = None,
    ) -> "MealPlan":
        """Build a plan by rotating through the cuisine's recipes.

        Raises UnknownCuisineError when the cuisine is not in the catalog
        and ValueError when ``days`` or ``servings`` is not positive.
        """
        recipes = get_cuisine_recipes(cuisine, catalog)
        if not recipes:
            raise UnknownCuisineError(cuisine)
        if days < 1:
            raise ValueError(f"days must be positive, got {days}")
        if servings < 1:
            raise ValueError(f"servings must be positive, got {servings}")

        builder = ShoppingListBuilder()
        day_plans: list[DayPlan] = []

        for i in range(days):
            dinner = recipes[i % len(recipes)]
            builder.add_recipe(dinner, servings)
            day_plans.append(DayPlan(
                day=WEEKDAYS[i % len(WEEKDAYS)],
                breakfast=BREAKFAST_PLACEHOLDER if i % 3 == 0 else None,
                lunch=LUNCH_PLACEHOLDER if i % 2 == 0 else None,
                dinner=dinner.name,
            ))

        return cls(
            cuisine=cuisine,
            days=day_plans,
            shopping_list=builder.to_shopping_list(),
            preparation_tips=preparation_tips(cuisine),
        )

    def to_markdown(self) -> str:
        lines: list[str] = [f"# Weekly Meal Plan - {self.cuisine} Cuisine", ""]

        lines.append("## Daily Meal Schedule")
        lines.append("")
        for day_plan in self.days:
            lines.append(f"### {day_plan.day}")
            if day_plan.breakfast:
                lines.append(f"- **Breakfast:** {day_plan.breakfast}")
            if day_plan.lunch:
                lines.append(f"- **Lunch:** {day_plan.lunch}")
            lines.append(f"- **Dinner:** {day_plan.dinner}")
            lines.append("")

        lines.append("## Shopping List")
        lines.append("")
        lines.append(f"**Total Items:** {self.shopping_list.total_items}")
        lines.append("")
        for item in self.shopping_list.ingredients:
            line = f"- **{item.name}**"
            if item.used_in:
                line += f" (used in: {', '.join(item.used_in)})"
            lines.append(line)

        lines.append("")
        lines.append("## Preparation Tips")
        lines.append("")
        for idx, tip in enumerate(self.preparation_tips, start=1):
            lines.append(f"{idx}. {tip}")

        return "\n".join(lines) + "\n"


def render_meal_plan_markdown(plan: MealPlan) -> str:
    return plan.to_markdown()


# ============================================================================
# Ingredient Overlap
# ============================================================================


def count_shared_ingredients(recipes: Sequence[Recipe]) -> list[tuple[str, int]]:
    """Ingredients used by more than one recipe, most used first.

    Ties keep the order in which the ingredient was first seen.
    """
    counts = Counter(ing for recipe in recipes for ing in recipe.ingredients)
    shared = [(ing, count) for ing, count in counts.items() if count > 1]
    shared.sort(key=lambda pair: pair[1], reverse=True)
    return shared


def analyze_ingredient_overlap(cuisine: str, catalog: RecipeCatalog | None = None) -> str:
    recipes = get_cuisine_recipes(cuisine, catalog)
    if recipes is None:
        raise UnknownCuisineError(cuisine)

    shared = count_shared_ingredients(recipes)
    if not shared:
        return f"No overlapping ingredients found in {cuisine} cuisine recipes."

    result = f"Common ingredients in {cuisine} cuisine:\n\n"
    for ingredient, count in shared:
        result += f"- {ingredient} (used in {count} recipes)\n"
    return result
