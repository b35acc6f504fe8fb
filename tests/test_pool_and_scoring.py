from fridge_menu_mcp.engine.models import MealType
from fridge_menu_mcp.engine.pool import build_dish_pool
from fridge_menu_mcp.engine.scoring import (
    build_fridge_index,
    rank_dishes,
    score_by_fridge_overlap,
)

from tests.conftest import create_fridge_item, create_test_dish


class TestBuildDishPool:
    def test_keeps_only_requested_meal_type(self, catalog):
        pool = build_dish_pool(catalog, MealType.DINNER)
        assert [d.id for d in pool] == ["d5", "d6", "d7"]

    def test_drops_inactive_by_default(self, catalog):
        pool = build_dish_pool(catalog, MealType.LUNCH)
        assert [d.id for d in pool] == ["d1", "d2", "d3"]

    def test_keeps_inactive_when_not_active_only(self, catalog):
        pool = build_dish_pool(catalog, MealType.LUNCH, active_only=False)
        assert [d.id for d in pool] == ["d1", "d2", "d3", "d4"]

    def test_tag_filter_is_case_insensitive(self, catalog):
        pool = build_dish_pool(catalog, MealType.LUNCH, tags=["salad"])
        assert [d.id for d in pool] == ["d3"]

        pool = build_dish_pool(catalog, MealType.LUNCH, tags=["SOUP", "chicken"])
        assert [d.id for d in pool] == ["d1", "d3"]

    def test_empty_tag_filter_means_no_restriction(self, catalog):
        assert build_dish_pool(catalog, MealType.LUNCH, tags=[]) == \
            build_dish_pool(catalog, MealType.LUNCH)

    def test_no_match_returns_empty(self, catalog):
        assert build_dish_pool(catalog, MealType.SNACK) == []
        assert build_dish_pool(catalog, MealType.LUNCH, tags=["vegan"]) == []


class TestFridgeScoring:
    def test_build_fridge_index(self, fridge):
        index = build_fridge_index(fridge)
        assert index == {"tomato": 50, "egg": 2, "rice": 500, "milk": 1000}

    def test_score_takes_min_of_available_and_required(self, dishes_by_id, fridge):
        index = build_fridge_index(fridge)
        assert score_by_fridge_overlap(dishes_by_id["d1"], index) == 50
        assert score_by_fridge_overlap(dishes_by_id["d7"], index) == 150
        assert score_by_fridge_overlap(dishes_by_id["d8"], index) == 52

    def test_absent_and_zero_stock_contribute_nothing(self, dishes_by_id):
        index = build_fridge_index([create_fridge_item("chicken", 0)])
        assert score_by_fridge_overlap(dishes_by_id["d3"], index) == 0
        assert score_by_fridge_overlap(dishes_by_id["d2"], index) == 0

    def test_rank_by_score_then_name(self, dishes_by_id, fridge):
        index = build_fridge_index(fridge)
        lunches = [dishes_by_id["d2"], dishes_by_id["d3"], dishes_by_id["d1"]]

        ranked = rank_dishes(lunches, index)

        # d1 scores 50; d2 and d3 tie at 0 and sort by name
        assert [d.id for d in ranked] == ["d1", "d3", "d2"]

    def test_rank_is_independent_of_input_order(self, fridge):
        index = build_fridge_index(fridge)
        a = create_test_dish("a", "Alpha", ingredients=[("tomato", 10, "g")])
        b = create_test_dish("b", "Beta", ingredients=[("tomato", 10, "g")])

        assert [d.id for d in rank_dishes([b, a], index)] == ["a", "b"]
        assert [d.id for d in rank_dishes([a, b], index)] == ["a", "b"]
