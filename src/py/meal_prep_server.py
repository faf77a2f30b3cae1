"""
Meal Prep MCP Server - Recipes and Weekly Meal Planning

Features:
- 🍳 TOOLS: cuisines, recipes, meal plans, ingredient overlap
- 📚 RESOURCES: file://recipes/{cuisine} Markdown recipe books
- 🎯 PROMPTS: weekly meal planning workflow
"""

import logging
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from config import Settings, configure_logging
from meal_planner import MealPlan, analyze_ingredient_overlap
from pymcp import McpError, Server, serve
from recipes import RecipeCatalog, format_recipes_as_markdown, get_available_cuisines, get_recipe_database

logger = logging.getLogger(__name__)

# Day and serving counts fit in a byte
Count = Annotated[int, Field(ge=1, le=255)]

RESOURCE_URI_TEMPLATE = "file://recipes/{cuisine}"


# ============================================================================
# Meal Prep MCP Server
# ============================================================================

class MealPrepService(Server):
    resource_scheme = "file"
    resource_mime_types = {"recipes": "text/markdown"}
    resource_titles = {"recipes": "Cuisine Recipes"}
    server_name = "mcp-server-meal-prep"
    server_version = "0.1.0"
    instructions = (
        "This server provides meal preparation tools and recipes. "
        "Tools: get_cuisines, get_recipes, generate_meal_plan, analyze_ingredient_overlap, weekly_meal_planner. "
        "Resources: file://recipes/{cuisine} for cuisine-specific recipes."
    )

    def __init__(self, settings: Settings | None = None, catalog: RecipeCatalog | None = None):
        self._settings = settings or Settings()
        super().__init__(protocol_version=self._settings.protocol_version)
        self._catalog = get_recipe_database() if catalog is None else catalog

    def _cuisines(self) -> List[str]:
        return get_available_cuisines(self._catalog)

    def _require_cuisine(self, cuisine: str) -> None:
        available = self._cuisines()
        if cuisine not in available:
            logger.warning("Rejected unknown cuisine %r", cuisine)
            raise McpError.invalid_params("invalid_cuisine", {
                "message": f"Unknown cuisine: {cuisine}. Available cuisines: {', '.join(available)}"
            })

    def _resources_list(self) -> List[Dict[str, Any]]:
        concrete = [{
            "uri": RESOURCE_URI_TEMPLATE.format(cuisine=cuisine),
            "name": f"{cuisine} Cuisine Recipes",
            "mimeType": "text/markdown"
        } for cuisine in self._cuisines()]
        return concrete + super()._resources_list()

    def _unknown_resource(self, uri: str) -> McpError:
        return McpError.resource_not_found("resource_not_found", {
            "message": f"Resource URI must be in format '{RESOURCE_URI_TEMPLATE}'",
            "uri": uri
        })

    # ===== TOOLS =====

    def get_cuisines(self) -> str:
        """Get all available cuisines"""
        return f"Available cuisines: {', '.join(self._cuisines())}"

    def get_recipes(self, cuisine: str) -> str:
        """Get recipes for a specific cuisine"""
        self._require_cuisine(cuisine)
        return format_recipes_as_markdown(cuisine, self._catalog)

    def generate_meal_plan(
        self,
        cuisine: str,
        days: Optional[Count] = None,
        servings: Optional[Count] = None
    ) -> str:
        """Generate a meal plan for a specific cuisine

        Args:
            cuisine: The cuisine for meal planning
            days: Number of days to plan (default: 7)
            servings: Number of servings per meal (default: 4)
        """
        self._require_cuisine(cuisine)
        days = self._settings.default_days if days is None else days
        servings = self._settings.default_servings if servings is None else servings

        plan = MealPlan.generate(cuisine, days, servings, catalog=self._catalog)
        logger.info("Generated %d-day %s plan with %d shopping items",
                    days, cuisine, plan.shopping_list.total_items)
        return plan.to_markdown()

    def analyze_ingredient_overlap(self, cuisine: str) -> str:
        """Get ingredient overlap analysis for meal planning"""
        self._require_cuisine(cuisine)
        return analyze_ingredient_overlap(cuisine, self._catalog)

    def weekly_meal_planner(self, cuisine: str) -> str:
        """Generate a comprehensive weekly meal plan with shopping list and preparation tips"""
        self._require_cuisine(cuisine)
        return MealPlan.generate(cuisine, 7, 4, catalog=self._catalog).to_markdown()

    # ===== RESOURCES =====

    def resource_recipes(self, cuisine: str) -> str:
        """Traditional recipes organized by cuisine"""
        available = self._cuisines()
        if cuisine not in available:
            uri = RESOURCE_URI_TEMPLATE.format(cuisine=cuisine)
            raise McpError.resource_not_found("resource_not_found", {
                "message": f"Cuisine '{cuisine}' not found. Available cuisines: {', '.join(available)}",
                "uri": uri
            })
        return format_recipes_as_markdown(cuisine, self._catalog)

    # ===== PROMPTS =====

    def prompt_weekly_meal_planner(self, cuisine: str) -> dict:
        """Plan a week of dinners for one cuisine"""
        self._require_cuisine(cuisine)
        return {
            "description": f"Weekly {cuisine} meal planning assistant",
            "messages": [{
                "role": "user",
                "content": {
                    "type": "text",
                    "text": f"""Plan a week of {cuisine} meals for me.

1. **Recipes**: Read file://recipes/{cuisine} or call get_recipes
2. **Plan**: Call generate_meal_plan with cuisine "{cuisine}"
3. **Shopping**: Call analyze_ingredient_overlap to spot shared ingredients
4. **Prep**: Summarize the preparation tips for the week

Present the schedule first, then the shopping list."""
                }
            }]
        }


def main() -> None:
    """Run the Meal Prep server on stdin/stdout."""
    settings = Settings()
    configure_logging(settings.log_level)
    logger.info("Starting MCP Meal Prep Server")
    serve(MealPrepService(settings))


if __name__ == "__main__":
    main()
