import asyncio
import json

from fastmcp import Client, FastMCP

from fridge_menu_mcp.server import SERVER_NAME, create_server


def test_create_server():
    server = create_server()
    assert isinstance(server, FastMCP)
    assert server.name == SERVER_NAME


def test_tools_and_prompts_are_registered():
    async def list_names():
        async with Client(create_server()) as client:
            tools = await client.list_tools()
            prompts = await client.list_prompts()
        return {t.name for t in tools}, {p.name for p in prompts}

    tool_names, prompt_names = asyncio.run(list_names())

    assert {
        "generate_menu",
        "regenerate_menu",
        "calculate_shopping_list",
        "build_dish_pool",
        "rank_dishes_by_fridge",
        "get_generation_config",
        "update_generation_config",
        "reset_generation_config",
    } <= tool_names
    assert {"plan_menu_from_fridge", "use_up_ingredients"} <= prompt_names


def _call(tool, arguments):
    async def run():
        async with Client(create_server()) as client:
            return await client.call_tool(tool, arguments)

    result = asyncio.run(run())
    return json.loads(result.content[0].text)


def _dump(models):
    return [model.model_dump(mode="json") for model in models]


class TestMenuTools:
    def test_generate_menu(self, catalog, fridge):
        result = _call("generate_menu", {
            "name": "Week 1",
            "total_slots": {"lunch": 1, "dinner": 1},
            "dishes": _dump(catalog),
            "fridge": _dump(fridge),
            "required_ingredients": ["chicken"],
        })

        assert result["success"] is True
        assert [(i["meal_type"], i["dish_id"]) for i in result["items"]] == [
            ("lunch", "d3"), ("dinner", "d7"),
        ]
        assert result["shopping_list"]["name"] == "Week 1 shopping list"

    def test_generate_menu_insufficient_dishes(self, catalog, fridge):
        result = _call("generate_menu", {
            "name": "Week 1",
            "total_slots": {"lunch": 1},
            "dishes": _dump(catalog),
            "fridge": _dump(fridge),
            "required_dishes": ["d1", "d3"],
        })

        assert result == {
            "success": False,
            "code": "INSUFFICIENT_DISHES",
            "error": "Not enough slots for required dishes",
        }

    def _menu(self):
        return {
            "id": "menu1",
            "name": "Week 1",
            "shopping_list_id": "list1",
            "items": [
                {"id": "i1", "meal_type": "lunch", "dish_id": "d1", "locked": True},
                {"id": "i2", "meal_type": "dinner", "dish_id": "d5"},
            ],
        }

    def test_regenerate_menu(self, catalog, fridge):
        result = _call("regenerate_menu", {
            "menu": self._menu(),
            "name": "Week 1",
            "total_slots": {"lunch": 1, "dinner": 1},
            "dishes": _dump(catalog),
            "fridge": _dump(fridge),
            "include_tags": ["spicy"],
        })

        assert result["success"] is True
        assert result["menu"]["id"] == "menu1"
        assert result["shopping_list"]["id"] == "list1"
        assert result["removed_item_ids"] == ["i2"]
        assert [i["dish_id"] for i in result["items"]] == ["d1", "d7"]

    def test_regenerate_menu_locked_items_exceed_request(self, catalog, fridge):
        result = _call("regenerate_menu", {
            "menu": self._menu(),
            "name": "Week 1",
            "total_slots": {"dinner": 1},
            "dishes": _dump(catalog),
            "fridge": _dump(fridge),
        })

        assert result == {
            "success": False,
            "code": "INSUFFICIENT_DISHES",
            "error": "Locked items exceed requested slots",
        }
