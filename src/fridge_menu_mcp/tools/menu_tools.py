"""
Menu generation tools.

Provides tools for:
- Generating a menu plus shopping list from a dish catalog and fridge snapshot
- Regenerating a menu while keeping its locked items
- Previewing dish pools, fridge rankings and shopping lists
- Reading and changing generation preferences

The server keeps no catalog of its own: every tool receives the dishes and
fridge contents it works on as arguments.
"""

from typing import Any, Dict, List, Optional

from fastmcp import Context
from pydantic import Field

from ..engine import config as generation_config
from ..engine import menus

DISHES_DESCRIPTION = (
    "Dish catalog. Each dish has: id, name, meal_type "
    "('breakfast', 'lunch', 'dinner', 'snack' or 'dessert'), is_active, "
    "tags, and ingredients [{ingredient_id, quantity_per_serving, unit, name}]"
)
FRIDGE_DESCRIPTION = (
    "Fridge contents. Each entry has: ingredient_id, quantity, "
    "and optionally unit ('pcs', 'g', 'ml') and name"
)


def register_tools(mcp):
    """Register menu generation tools with the FastMCP server."""

    # ========== Generation Tools ==========

    @mcp.tool()
    async def generate_menu(
        name: str = Field(description="Menu name (e.g., 'Week of Jan 27')"),
        total_slots: Dict[str, int] = Field(
            description="Slot count per meal type, e.g. {'lunch': 2, 'dinner': 2}"
        ),
        dishes: List[Dict[str, Any]] = Field(description=DISHES_DESCRIPTION),
        fridge: Optional[List[Dict[str, Any]]] = Field(
            default=None,
            description=FRIDGE_DESCRIPTION
        ),
        include_tags: Optional[List[str]] = Field(
            default=None,
            description="Only use dishes with at least one of these tags"
        ),
        required_dishes: Optional[List[str]] = Field(
            default=None,
            description="Dish ids that must be in the menu"
        ),
        required_ingredients: Optional[List[str]] = Field(
            default=None,
            description="Ingredient ids that some chosen dish must use"
        ),
        ctx: Context = None
    ) -> Dict[str, Any]:
        """
        Generate a menu for the requested slots and a shopping list.

        Required dishes are placed first; dishes are picked to cover
        required ingredients; remaining slots go to the dishes that use up
        the most of what is already in the fridge. The shopping list only
        contains what the fridge does not cover.

        Fails with INSUFFICIENT_DISHES when required dishes or ingredients
        cannot be fitted into the requested slots.
        """
        request = {
            "name": name,
            "total_slots": total_slots,
            "filters": {"include_tags": include_tags or []},
            "required_dishes": required_dishes or [],
            "required_ingredients": required_ingredients or [],
        }
        result = menus.as_result(menus.generate_menu, request, dishes, fridge or [])

        if ctx and result.get('success'):
            await ctx.info(
                f"Generated '{name}' with {len(result['items'])} dishes"
            )

        return result

    @mcp.tool()
    async def regenerate_menu(
        menu: Dict[str, Any] = Field(
            description="Existing menu: id, name, status, shopping_list_id and "
            "items [{id, meal_type, dish_id, locked, cooked}]"
        ),
        name: str = Field(description="Menu name"),
        total_slots: Dict[str, int] = Field(
            description="Slot count per meal type, locked items included"
        ),
        dishes: List[Dict[str, Any]] = Field(description=DISHES_DESCRIPTION),
        fridge: Optional[List[Dict[str, Any]]] = Field(
            default=None,
            description=FRIDGE_DESCRIPTION
        ),
        include_tags: Optional[List[str]] = Field(
            default=None,
            description="Only use dishes with at least one of these tags"
        ),
        required_dishes: Optional[List[str]] = Field(
            default=None,
            description="Dish ids that must be in the menu"
        ),
        required_ingredients: Optional[List[str]] = Field(
            default=None,
            description="Ingredient ids that some chosen dish must use"
        ),
        ctx: Context = None
    ) -> Dict[str, Any]:
        """
        Regenerate a menu, replacing only its unlocked items.

        Locked items are kept as they are and use up one slot of their meal
        type each. The shopping list is recomputed for the whole menu and
        keeps its id.
        """
        request = {
            "name": name,
            "total_slots": total_slots,
            "filters": {"include_tags": include_tags or []},
            "required_dishes": required_dishes or [],
            "required_ingredients": required_ingredients or [],
        }
        result = menus.as_result(
            menus.regenerate_menu, menu, request, dishes, fridge or []
        )

        if ctx and result.get('success'):
            await ctx.info(
                f"Replaced {len(result['removed_item_ids'])} unlocked items"
            )

        return result

    # ========== Preview Tools ==========

    @mcp.tool()
    async def calculate_shopping_list(
        dish_ids: List[str] = Field(
            description="Chosen dish ids (repeat an id to count it twice)"
        ),
        dishes: List[Dict[str, Any]] = Field(description=DISHES_DESCRIPTION),
        fridge: Optional[List[Dict[str, Any]]] = Field(
            default=None,
            description=FRIDGE_DESCRIPTION
        ),
        subtract_fridge: Optional[bool] = Field(
            default=None,
            description="Net against fridge stock (defaults to the saved preference)"
        ),
        ctx: Context = None
    ) -> Dict[str, Any]:
        """
        Calculate what to buy for a set of dishes.

        Quantities are summed per ingredient across dishes and reduced by
        what the fridge holds. Ingredients fully covered are left out.
        """
        return menus.as_result(
            menus.shopping_list_for_dishes,
            dish_ids,
            dishes,
            fridge or [],
            subtract_fridge=subtract_fridge
        )

    @mcp.tool()
    async def build_dish_pool(
        dishes: List[Dict[str, Any]] = Field(description=DISHES_DESCRIPTION),
        meal_type: str = Field(
            description="Meal type: 'breakfast', 'lunch', 'dinner', 'snack' or 'dessert'"
        ),
        tags: Optional[List[str]] = Field(
            default=None,
            description="Keep dishes with at least one of these tags"
        ),
        active_only: bool = Field(
            default=True,
            description="Leave out inactive dishes"
        ),
        ctx: Context = None
    ) -> Dict[str, Any]:
        """
        List the dishes that can fill slots of a meal type.
        """
        return menus.as_result(
            menus.preview_dish_pool,
            dishes,
            meal_type,
            tags=tags,
            active_only=active_only
        )

    @mcp.tool()
    async def rank_dishes_by_fridge(
        dishes: List[Dict[str, Any]] = Field(description=DISHES_DESCRIPTION),
        fridge: List[Dict[str, Any]] = Field(description=FRIDGE_DESCRIPTION),
        meal_type: Optional[str] = Field(
            default=None,
            description="Only rank dishes of this meal type"
        ),
        limit: int = Field(
            default=10,
            ge=1,
            le=100,
            description="Maximum number of dishes to return"
        ),
        ctx: Context = None
    ) -> Dict[str, Any]:
        """
        Rank active dishes by how much fridge stock they would use up.

        The score of a dish is the sum over its ingredients of
        min(fridge quantity, quantity per serving).
        """
        return menus.as_result(
            menus.rank_dishes_for_fridge,
            dishes,
            fridge,
            meal_type=meal_type,
            limit=limit
        )

    # ========== Preference Tools ==========

    @mcp.tool()
    async def get_generation_config(ctx: Context = None) -> Dict[str, Any]:
        """
        Show the current menu generation preferences.
        """
        return {'success': True, 'config': generation_config.get_config_summary()}

    @mcp.tool()
    async def update_generation_config(
        use_fridge_ranking: Optional[bool] = Field(
            default=None,
            description="Rank dishes by fridge overlap (False = random order)"
        ),
        subtract_fridge: Optional[bool] = Field(
            default=None,
            description="Subtract fridge stock from the shopping list"
        ),
        shopping_list_suffix: Optional[str] = Field(
            default=None,
            description="Text appended to the menu name to name its shopping list"
        ),
        random_seed: Optional[int] = Field(
            default=None,
            description="Seed for the random order used without fridge ranking"
        ),
        ctx: Context = None
    ) -> Dict[str, Any]:
        """
        Change menu generation preferences. Only provided values are updated.
        """
        result = generation_config.update_config(
            use_fridge_ranking=use_fridge_ranking,
            subtract_fridge=subtract_fridge,
            shopping_list_suffix=shopping_list_suffix,
            random_seed=random_seed
        )

        if ctx and result.get('updated_fields'):
            await ctx.info(f"Updated {', '.join(result['updated_fields'])}")

        return result

    @mcp.tool()
    async def reset_generation_config(ctx: Context = None) -> Dict[str, Any]:
        """
        Restore the default menu generation preferences.
        """
        return generation_config.reset_config()
