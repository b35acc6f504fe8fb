"""
MCP prompts for the fridge menu server
"""

from typing import Optional
from fastmcp import Context


def register_prompts(mcp):
    """Register prompts with the FastMCP server"""

    @mcp.prompt()
    async def plan_menu_from_fridge(
        lunches: int = 2,
        dinners: int = 2,
        tags: Optional[str] = None,
        ctx: Context = None
    ) -> str:
        """
        Generate a prompt asking for a menu that uses up what is in the fridge.

        Args:
            lunches: Number of lunch slots
            dinners: Number of dinner slots
            tags: Optional comma-separated dish tags to restrict the menu to

        Returns:
            A prompt asking for a fridge-aware menu and shopping list
        """
        tag_phrase = f" Only use dishes tagged {tags}." if tags else ""

        return f"""I'd like a menu with {lunches} lunches and {dinners} dinners.{tag_phrase}

Please:
1. Use rank_dishes_by_fridge to see which of my dishes use up the most of my fridge
2. Call generate_menu with total_slots {{"lunch": {lunches}, "dinner": {dinners}}}
3. Show me the chosen dishes grouped by meal type
4. Show the shopping list of missing ingredients with quantities and units

If generation fails with INSUFFICIENT_DISHES, explain which requirement could not be met.
"""

    @mcp.prompt()
    async def use_up_ingredients(ingredients: str, ctx: Context = None) -> str:
        """
        Generate a prompt for a menu that must use specific ingredients.

        Args:
            ingredients: Comma-separated ingredient ids that must be used

        Returns:
            A prompt asking for a menu covering the given ingredients
        """
        return f"""These ingredients need to be used soon: {ingredients}

Please generate a menu with generate_menu passing them as required_ingredients,
so at least one chosen dish uses each of them. Then:
1. Tell me which dish covers which ingredient
2. Show the shopping list for everything else I still need

Before generating, ask me how many slots of each meal type I want.
"""
