"""
Shopping list aggregation.

Sums the per-serving ingredient needs of the chosen dishes, nets them
against fridge stock, and keeps only what is still missing.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .models import DishIngredient, FridgeItem, ShoppingListLine, Unit

log = logging.getLogger("fridge_menu_mcp.shopping")

# dish_id -> ingredient requirements of that dish
DishIngredientLookup = Mapping[str, Sequence[DishIngredient]]


def _aggregate_totals(
    chosen_dish_ids: Iterable[str],
    dish_ingredients: DishIngredientLookup
) -> Dict[str, Dict[str, object]]:
    totals: Dict[str, Dict[str, object]] = {}
    for dish_id in chosen_dish_ids:
        for ingredient in dish_ingredients.get(dish_id) or []:
            entry = totals.setdefault(
                ingredient.ingredient_id, {"quantity": 0.0, "unit": None}
            )
            entry["quantity"] += ingredient.qty_per_serving
            if ingredient.unit is not None:
                entry["unit"] = ingredient.unit
    return totals


def find_unit_conflicts(
    chosen_dish_ids: Iterable[str],
    dish_ingredients: DishIngredientLookup,
    fridge: Iterable[FridgeItem]
) -> List[str]:
    """
    List ingredients whose dish unit differs from the fridge entry's unit.

    No conversion is attempted; the dish unit wins in the shopping list.
    """
    fridge_units = {
        item.ingredient_id: item.unit for item in fridge if item.unit is not None
    }
    conflicts: List[str] = []
    for dish_id in chosen_dish_ids:
        for ingredient in dish_ingredients.get(dish_id) or []:
            fridge_unit = fridge_units.get(ingredient.ingredient_id)
            if (
                ingredient.unit is not None
                and fridge_unit is not None
                and ingredient.unit != fridge_unit
                and ingredient.ingredient_id not in conflicts
            ):
                conflicts.append(ingredient.ingredient_id)
    return conflicts


def calculate_shopping_list(
    chosen_dish_ids: Iterable[str],
    dish_ingredients: DishIngredientLookup,
    fridge: Iterable[FridgeItem],
    subtract_fridge: bool = True
) -> List[ShoppingListLine]:
    """
    Compute the missing quantity of every ingredient the chosen dishes need.

    Args:
        chosen_dish_ids: Dish ids of the filled slots (repeats count twice)
        dish_ingredients: Ingredient requirements per dish id
        fridge: Fridge snapshot
        subtract_fridge: Net totals against fridge stock; when False the
            raw totals are returned

    Returns:
        One line per ingredient with a positive remainder, in order of first
        appearance. Inputs are never modified.
    """
    chosen = list(chosen_dish_ids)
    totals = _aggregate_totals(chosen, dish_ingredients)

    fridge_items = list(fridge)
    fridge_index: Dict[str, Dict[str, Optional[object]]] = {
        item.ingredient_id: {"quantity": item.quantity, "unit": item.unit}
        for item in fridge_items
    }

    for ingredient_id in find_unit_conflicts(chosen, dish_ingredients, fridge_items):
        log.warning(
            "Unit mismatch for ingredient %s between dish and fridge; "
            "using the dish unit without conversion", ingredient_id
        )

    lines: List[ShoppingListLine] = []
    for ingredient_id, total in totals.items():
        fridge_entry = fridge_index.get(ingredient_id, {})
        unit: Optional[Unit] = total["unit"] or fridge_entry.get("unit")

        if subtract_fridge:
            available = fridge_entry.get("quantity") or 0
            needed = total["quantity"] - available
        else:
            needed = total["quantity"]

        if needed > 0:
            lines.append(
                ShoppingListLine(ingredient_id=ingredient_id, quantity=needed, unit=unit)
            )

    return lines
