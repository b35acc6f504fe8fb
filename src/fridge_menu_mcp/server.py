"""
FastMCP server for fridge-aware menu generation.
"""

import logging
import os

from fastmcp import FastMCP

from .prompts import register_prompts
from .tools import menu_tools

SERVER_NAME = "Fridge Menu Planner"

INSTRUCTIONS = """
This server generates menus from a dish catalog and the current fridge contents.

Pass the dish catalog and fridge snapshot with every call. Use generate_menu
to pick dishes for meal slots (e.g. 2 lunches, 2 dinners) and get a shopping
list of missing ingredients; use regenerate_menu to replace the unlocked
items of an existing menu. Dishes that use up fridge stock are preferred.
"""


def create_server() -> FastMCP:
    """Build the FastMCP server with all tools and prompts registered."""
    mcp = FastMCP(name=SERVER_NAME, instructions=INSTRUCTIONS)
    menu_tools.register_tools(mcp)
    register_prompts(mcp)
    return mcp


def main():
    """Run the server over stdio."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    server = create_server()
    server.run()


if __name__ == "__main__":
    main()
