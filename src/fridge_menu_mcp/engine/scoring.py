"""
Fridge overlap scoring.

A dish scores higher the more of its per-serving ingredient needs are
already covered by fridge stock.

Example:
- Dish needs 100g tomato and 2 pcs egg, fridge has 50g tomato
  -> score = min(50, 100) = 50
"""

from typing import Dict, Iterable, List, Mapping

from .models import Dish, FridgeItem

# ingredient_id -> available quantity
FridgeIndex = Mapping[str, float]


def build_fridge_index(items: Iterable[FridgeItem]) -> Dict[str, float]:
    """Map each fridge ingredient to its available quantity."""
    index: Dict[str, float] = {}
    for item in items:
        index[item.ingredient_id] = item.quantity
    return index


def score_by_fridge_overlap(dish: Dish, fridge_index: FridgeIndex) -> float:
    """
    Sum, over the dish's ingredients, of min(available, required per serving).

    Ingredients absent from the fridge (or stocked at 0) contribute nothing.
    """
    score = 0.0
    for ingredient in dish.ingredients:
        available = fridge_index.get(ingredient.ingredient_id, 0)
        if available <= 0:
            continue
        score += min(available, ingredient.qty_per_serving)
    return score


def rank_dishes(dishes: Iterable[Dish], fridge_index: FridgeIndex) -> List[Dish]:
    """
    Order dishes by fridge overlap score, highest first.

    Ties are broken by dish name ascending so the order is deterministic.
    """
    scored = [(score_by_fridge_overlap(dish, fridge_index), dish) for dish in dishes]
    scored.sort(key=lambda entry: (-entry[0], entry[1].name))
    return [dish for _, dish in scored]
