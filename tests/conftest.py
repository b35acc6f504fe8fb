import random

import pytest

from fridge_menu_mcp.engine import config as generation_config
from fridge_menu_mcp.engine.config import GenerationConfig
from fridge_menu_mcp.engine.models import (
    Dish,
    DishIngredient,
    FridgeItem,
    MealType,
    Unit,
)

INGREDIENT_NAMES = {
    "tomato": "Tomato",
    "rice": "Rice",
    "chicken": "Chicken",
    "lettuce": "Lettuce",
    "fish": "Fish",
    "beef": "Beef",
    "egg": "Egg",
    "milk": "Milk",
    "apple": "Apple",
}


def create_test_dish(
    dish_id,
    name,
    meal_type="lunch",
    ingredients=(),
    tags=(),
    is_active=True
):
    return Dish(
        id=dish_id,
        name=name,
        meal_type=MealType(meal_type),
        is_active=is_active,
        tags=list(tags),
        ingredients=[
            DishIngredient(
                ingredient_id=ingredient_id,
                qty_per_serving=quantity,
                unit=Unit(unit) if unit else None,
                name=INGREDIENT_NAMES.get(ingredient_id),
            )
            for ingredient_id, quantity, unit in ingredients
        ],
    )


def create_fridge_item(ingredient_id, quantity, unit="g"):
    return FridgeItem(
        ingredient_id=ingredient_id,
        quantity=quantity,
        unit=Unit(unit) if unit else None,
        name=INGREDIENT_NAMES.get(ingredient_id),
    )


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setattr(
        generation_config, "CONFIG_FILE", str(tmp_path / "preferences.json")
    )
    generation_config.clear_cached_config()
    yield
    generation_config.clear_cached_config()


@pytest.fixture
def catalog():
    return [
        create_test_dish("d1", "Tomato soup", "lunch",
                         [("tomato", 100, "g")], tags=["soup"]),
        create_test_dish("d2", "Plain rice", "lunch"),
        create_test_dish("d3", "Chicken salad", "lunch",
                         [("chicken", 150, "g"), ("lettuce", 1, "pcs")],
                         tags=["Salad", "chicken"]),
        create_test_dish("d4", "Old stew", "lunch",
                         [("beef", 300, "g")], is_active=False),
        create_test_dish("d5", "Fish tacos", "dinner",
                         [("fish", 200, "g"), ("tomato", 50, "g")], tags=["fish"]),
        create_test_dish("d6", "Beef steak", "dinner",
                         [("beef", 250, "g")], tags=["meat"]),
        create_test_dish("d7", "Veg curry", "dinner",
                         [("tomato", 80, "g"), ("rice", 100, "g")], tags=["spicy"]),
        create_test_dish("d8", "Omelette", "breakfast",
                         [("egg", 3, "pcs"), ("milk", 50, "ml")], tags=["dairy"]),
        create_test_dish("d9", "Fruit salad", "dessert",
                         [("apple", 2, "pcs")], tags=["sweet"]),
    ]


@pytest.fixture
def fridge():
    return [
        create_fridge_item("tomato", 50, "g"),
        create_fridge_item("egg", 2, "pcs"),
        create_fridge_item("rice", 500, "g"),
        create_fridge_item("milk", 1000, "ml"),
    ]


@pytest.fixture
def dishes_by_id(catalog):
    return {dish.id: dish for dish in catalog}


@pytest.fixture
def default_config():
    return GenerationConfig()


@pytest.fixture
def seeded_rng():
    return random.Random(1234)
