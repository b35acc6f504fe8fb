"""
Dish pool building.

Filters the dish catalog down to the candidates for one meal type.
"""

from typing import Iterable, List, Optional

from .models import Dish, MealType


def _normalize_tags(tags: Optional[Iterable[str]]) -> set:
    return {tag.strip().lower() for tag in (tags or []) if tag and tag.strip()}


def build_dish_pool(
    dishes: Iterable[Dish],
    meal_type: MealType,
    tags: Optional[Iterable[str]] = None,
    active_only: bool = True
) -> List[Dish]:
    """
    Select the dishes that may fill slots of a meal type.

    Args:
        dishes: Dish catalog snapshot
        meal_type: Meal type the pool is built for
        tags: Keep only dishes sharing at least one of these tags
            (case-insensitive). Empty or None means no tag restriction.
        active_only: Drop inactive dishes

    Returns:
        Matching dishes in catalog order
    """
    tag_filter = _normalize_tags(tags)

    pool = []
    for dish in dishes:
        if dish.meal_type != meal_type:
            continue
        if active_only and not dish.is_active:
            continue
        if tag_filter and not (_normalize_tags(dish.tags) & tag_filter):
            continue
        pool.append(dish)
    return pool
