"""
Menu generation business logic.

Provides functions for:
- Generating a menu for a slot request from a dish catalog and fridge snapshot
- Regenerating a menu while keeping its locked items
- Building the shopping list of missing ingredients for a menu
- Wrapping any of the above into a success/error result dictionary

Nothing here is persisted: the caller stores the returned menu, items and
shopping list and passes them back in for regeneration.
"""

import logging
import random
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import GenerationConfig, load_config
from .errors import invalid_data, to_error_result
from .models import (
    Dish,
    ExistingMenu,
    FridgeItem,
    GenerateRequest,
    MealType,
    MenuItem,
    ShoppingListLine,
    Unit,
)
from .pool import build_dish_pool
from .scoring import build_fridge_index, rank_dishes, score_by_fridge_overlap
from .selection import (
    SelectionContext,
    adjust_slots_for_locked,
    build_dish_map,
    normalize_total_slots,
    partition_locked,
    satisfied_ingredients,
    select_dishes,
)
from .shopping import calculate_shopping_list, find_unit_conflicts

log = logging.getLogger("fridge_menu_mcp.menus")

UNKNOWN_DISH = "Unknown dish"
UNKNOWN_INGREDIENT = "Unknown ingredient"


def _new_id() -> str:
    return uuid.uuid4().hex[:8]


def _parse_request(request: Union[GenerateRequest, Dict[str, Any]]) -> GenerateRequest:
    if isinstance(request, GenerateRequest):
        return request
    return GenerateRequest.model_validate(request)


def _parse_dishes(dishes: Iterable[Union[Dish, Dict[str, Any]]]) -> List[Dish]:
    return [d if isinstance(d, Dish) else Dish.model_validate(d) for d in dishes]


def _parse_fridge(items: Iterable[Union[FridgeItem, Dict[str, Any]]]) -> List[FridgeItem]:
    return [i if isinstance(i, FridgeItem) else FridgeItem.model_validate(i) for i in items]


def _parse_menu(menu: Union[ExistingMenu, Dict[str, Any]]) -> ExistingMenu:
    if isinstance(menu, ExistingMenu):
        return menu
    return ExistingMenu.model_validate(menu)


def _parse_meal_type(value: str) -> MealType:
    try:
        return MealType(value)
    except ValueError:
        raise invalid_data(f"Unknown meal type: {value}")


def derive_shopping_list_name(menu_name: str, suffix: str = "shopping list") -> str:
    """
    Name a menu's shopping list after the menu.

    Example:
    - "Week 12" -> "Week 12 shopping list"
    - "Party shopping list" -> unchanged
    - "" -> "shopping list"
    """
    suffix = suffix.strip() or "shopping list"
    trimmed = (menu_name or "").strip()
    if not trimmed:
        return suffix
    if suffix.lower() in trimmed.lower():
        return trimmed
    return f"{trimmed} {suffix}"


def build_ingredient_summary_index(
    dishes: Iterable[Dish],
    fridge_items: Iterable[FridgeItem]
) -> Dict[str, Tuple[Optional[str], Optional[Unit]]]:
    """
    Map ingredient_id -> (name, unit) for display.

    Dish ingredient entries take precedence over fridge entries.
    """
    index: Dict[str, Tuple[Optional[str], Optional[Unit]]] = {}
    for dish in dishes:
        for ingredient in dish.ingredients:
            if ingredient.ingredient_id not in index:
                index[ingredient.ingredient_id] = (ingredient.name, ingredient.unit)
    for item in fridge_items:
        if item.ingredient_id not in index:
            index[item.ingredient_id] = (item.name, item.unit)
    return index


def _unit_value(unit: Optional[Unit]) -> Optional[str]:
    return unit.value if unit is not None else None


def _menu_item_dict(item: MenuItem, dish_map: Dict[str, Dish]) -> Dict[str, Any]:
    dish = dish_map.get(item.dish_id)
    return {
        "id": item.id,
        "meal_type": item.meal_type.value,
        "dish_id": item.dish_id,
        "dish_name": dish.name if dish else UNKNOWN_DISH,
        "locked": item.locked,
        "cooked": item.cooked,
    }


def _shopping_item_dicts(
    lines: Sequence[ShoppingListLine],
    ingredient_index: Dict[str, Tuple[Optional[str], Optional[Unit]]]
) -> List[Dict[str, Any]]:
    items = []
    for line in lines:
        name, unit = ingredient_index.get(line.ingredient_id, (None, None))
        items.append({
            "id": _new_id(),
            "ingredient_id": line.ingredient_id,
            "name": name or UNKNOWN_INGREDIENT,
            "quantity": line.quantity,
            "unit": _unit_value(unit or line.unit),
            "bought": False,
        })
    return items


def build_shopping_list(
    menu_items: Sequence[MenuItem],
    dishes: Sequence[Dish],
    fridge_items: Sequence[FridgeItem],
    subtract_fridge: bool = True
) -> List[ShoppingListLine]:
    """Shopping list lines for the dishes placed in a menu."""
    dish_ingredients = {dish.id: dish.ingredients for dish in dishes}
    return calculate_shopping_list(
        (item.dish_id for item in menu_items),
        dish_ingredients,
        fridge_items,
        subtract_fridge=subtract_fridge,
    )


def _slot_summary(requested: Dict[Any, int], items: Sequence[MenuItem]) -> Dict[str, Any]:
    by_meal_type: Dict[str, Dict[str, int]] = {}
    for meal_type, count in requested.items():
        by_meal_type[meal_type.value] = {"requested": count, "filled": 0}
    for item in items:
        entry = by_meal_type.setdefault(item.meal_type.value, {"requested": 0, "filled": 0})
        entry["filled"] += 1
    return {
        "slots_requested": sum(requested.values()),
        "slots_filled": len(items),
        "by_meal_type": by_meal_type,
    }


def _build_response(
    menu_id: str,
    menu_name: str,
    status: str,
    shopping_list_id: str,
    requested: Dict[Any, int],
    items: List[MenuItem],
    dishes: List[Dish],
    fridge_items: List[FridgeItem],
    config: GenerationConfig
) -> Dict[str, Any]:
    dish_map = build_dish_map(dishes)
    lines = build_shopping_list(items, dishes, fridge_items, config.subtract_fridge)
    ingredient_index = build_ingredient_summary_index(dishes, fridge_items)

    dish_ingredients = {dish.id: dish.ingredients for dish in dishes}
    unit_conflicts = find_unit_conflicts(
        (item.dish_id for item in items), dish_ingredients, fridge_items
    )

    return {
        "menu": {
            "id": menu_id,
            "name": menu_name,
            "status": status,
        },
        "items": [_menu_item_dict(item, dish_map) for item in items],
        "shopping_list": {
            "id": shopping_list_id,
            "name": derive_shopping_list_name(menu_name, config.shopping_list_suffix),
            "status": status,
            "items": _shopping_item_dicts(lines, ingredient_index),
        },
        "unit_conflicts": unit_conflicts,
        "summary": dict(
            _slot_summary(requested, items),
            shopping_items=len(lines),
        ),
    }


def generate_menu(
    request: Union[GenerateRequest, Dict[str, Any]],
    dishes: Iterable[Union[Dish, Dict[str, Any]]],
    fridge_items: Iterable[Union[FridgeItem, Dict[str, Any]]],
    config: Optional[GenerationConfig] = None,
    rng: Optional[random.Random] = None
) -> Dict[str, Any]:
    """
    Generate a new menu and its shopping list.

    Args:
        request: Generation request (name, total_slots, filters,
            required_dishes, required_ingredients)
        dishes: Full dish catalog snapshot, active and inactive
        fridge_items: Fridge snapshot
        config: Generation preferences (defaults to the saved config)
        rng: Random source for the shuffle path (defaults to the config seed)

    Returns:
        Menu, items with dish names, shopping list with ingredient names

    Raises:
        MenuGenerationError: the request cannot be satisfied
        pydantic.ValidationError: the request or snapshots are malformed
    """
    request = _parse_request(request)
    dishes = _parse_dishes(dishes)
    fridge_items = _parse_fridge(fridge_items)
    config = config or load_config()

    total_slots = normalize_total_slots(request.total_slots)

    slots = select_dishes(SelectionContext(
        total_slots=total_slots,
        dishes=dishes,
        fridge_items=fridge_items,
        required_dishes=request.required_dishes,
        required_ingredients=request.required_ingredients,
        include_tags=request.include_tags,
        use_fridge_ranking=config.use_fridge_ranking,
        rng=rng or config.make_rng(),
    ))

    items = [
        MenuItem(id=_new_id(), meal_type=slot.meal_type, dish_id=slot.dish_id)
        for slot in slots
    ]

    response = _build_response(
        menu_id=_new_id(),
        menu_name=request.name,
        status="draft",
        shopping_list_id=_new_id(),
        requested=total_slots,
        items=items,
        dishes=dishes,
        fridge_items=fridge_items,
        config=config,
    )
    response["message"] = (
        f"Generated menu '{request.name}' with {len(items)} dishes "
        f"and {response['summary']['shopping_items']} items to buy"
    )
    log.info(
        "Generated menu %s: %d/%d slots, %d shopping items",
        response["menu"]["id"], len(items), sum(total_slots.values()),
        response["summary"]["shopping_items"],
    )
    return response


def regenerate_menu(
    menu: Union[ExistingMenu, Dict[str, Any]],
    request: Union[GenerateRequest, Dict[str, Any]],
    dishes: Iterable[Union[Dish, Dict[str, Any]]],
    fridge_items: Iterable[Union[FridgeItem, Dict[str, Any]]],
    config: Optional[GenerationConfig] = None,
    rng: Optional[random.Random] = None
) -> Dict[str, Any]:
    """
    Replace the unlocked items of a menu, keeping locked items verbatim.

    Locked dishes cannot be picked again, use up one slot of their meal
    type each, and count as supplying their ingredients. The shopping list
    is recomputed from locked plus new items and keeps its id.

    Args:
        menu: Existing menu with its items and shopping_list_id
        request: New generation request
        dishes: Full dish catalog snapshot
        fridge_items: Fridge snapshot
        config: Generation preferences (defaults to the saved config)
        rng: Random source for the shuffle path

    Returns:
        Same shape as generate_menu, plus the ids of removed items

    Raises:
        MenuGenerationError: locked items exceed the request, or the
            request cannot be satisfied
    """
    menu = _parse_menu(menu)
    request = _parse_request(request)
    dishes = _parse_dishes(dishes)
    fridge_items = _parse_fridge(fridge_items)
    config = config or load_config()

    total_slots = normalize_total_slots(request.total_slots)
    dish_map = build_dish_map(dishes)

    locked_items, unlocked_items = partition_locked(menu.items)
    locked_dish_ids = frozenset(item.dish_id for item in locked_items)

    adjusted_slots = adjust_slots_for_locked(total_slots, locked_items)

    covered = satisfied_ingredients(locked_items, dish_map)
    pending_ingredients = [
        ingredient_id for ingredient_id in request.required_ingredients
        if ingredient_id not in covered
    ]

    slots = select_dishes(SelectionContext(
        total_slots=adjusted_slots,
        dishes=dishes,
        fridge_items=fridge_items,
        required_dishes=[d for d in request.required_dishes if d not in locked_dish_ids],
        required_ingredients=pending_ingredients,
        include_tags=request.include_tags,
        excluded_dish_ids=locked_dish_ids,
        use_fridge_ranking=config.use_fridge_ranking,
        rng=rng or config.make_rng(),
    ))

    new_items = [
        MenuItem(id=_new_id(), meal_type=slot.meal_type, dish_id=slot.dish_id)
        for slot in slots
    ]
    combined = locked_items + new_items

    response = _build_response(
        menu_id=menu.id,
        menu_name=request.name,
        status=menu.status,
        shopping_list_id=menu.shopping_list_id,
        requested=total_slots,
        items=combined,
        dishes=dishes,
        fridge_items=fridge_items,
        config=config,
    )
    response["removed_item_ids"] = [item.id for item in unlocked_items]
    response["message"] = (
        f"Regenerated menu '{request.name}': kept {len(locked_items)} locked, "
        f"replaced {len(unlocked_items)} with {len(new_items)} new dishes"
    )
    log.info(
        "Regenerated menu %s: %d locked, %d new",
        menu.id, len(locked_items), len(new_items),
    )
    return response


# ============== Previews ==============


def shopping_list_for_dishes(
    dish_ids: Sequence[str],
    dishes: Iterable[Union[Dish, Dict[str, Any]]],
    fridge_items: Iterable[Union[FridgeItem, Dict[str, Any]]],
    subtract_fridge: Optional[bool] = None
) -> Dict[str, Any]:
    """
    Shopping list for an explicit set of dishes.

    Args:
        dish_ids: Chosen dish ids (a repeated id counts twice)
        dishes: Dish catalog snapshot
        fridge_items: Fridge snapshot
        subtract_fridge: Override the configured fridge netting

    Returns:
        Shopping list lines with ingredient names and units
    """
    dishes = _parse_dishes(dishes)
    fridge_items = _parse_fridge(fridge_items)
    if subtract_fridge is None:
        subtract_fridge = load_config().subtract_fridge

    dish_ingredients = {dish.id: dish.ingredients for dish in dishes}
    lines = calculate_shopping_list(
        dish_ids, dish_ingredients, fridge_items, subtract_fridge=subtract_fridge
    )
    ingredient_index = build_ingredient_summary_index(dishes, fridge_items)
    unknown = [dish_id for dish_id in dish_ids if dish_id not in dish_ingredients]

    return {
        "items": _shopping_item_dicts(lines, ingredient_index),
        "unknown_dish_ids": unknown,
        "unit_conflicts": find_unit_conflicts(dish_ids, dish_ingredients, fridge_items),
        "count": len(lines),
    }


def preview_dish_pool(
    dishes: Iterable[Union[Dish, Dict[str, Any]]],
    meal_type: str,
    tags: Optional[Sequence[str]] = None,
    active_only: bool = True
) -> Dict[str, Any]:
    """List the dishes eligible for one meal type."""
    dishes = _parse_dishes(dishes)
    meal = _parse_meal_type(meal_type)
    pool = build_dish_pool(dishes, meal, tags=tags, active_only=active_only)
    return {
        "meal_type": meal.value,
        "dishes": [{"id": dish.id, "name": dish.name, "tags": list(dish.tags)} for dish in pool],
        "count": len(pool),
    }


def rank_dishes_for_fridge(
    dishes: Iterable[Union[Dish, Dict[str, Any]]],
    fridge_items: Iterable[Union[FridgeItem, Dict[str, Any]]],
    meal_type: Optional[str] = None,
    limit: int = 10
) -> Dict[str, Any]:
    """
    Rank active dishes by how much of the fridge they use up.

    Args:
        dishes: Dish catalog snapshot
        fridge_items: Fridge snapshot
        meal_type: Only rank dishes of this meal type
        limit: Maximum number of dishes to return

    Returns:
        Ranked dishes with their fridge overlap scores
    """
    dishes = [dish for dish in _parse_dishes(dishes) if dish.is_active]
    if meal_type is not None:
        meal = _parse_meal_type(meal_type)
        dishes = [dish for dish in dishes if dish.meal_type == meal]
    fridge_index = build_fridge_index(_parse_fridge(fridge_items))

    ranked = rank_dishes(dishes, fridge_index)[:max(0, limit)]
    return {
        "dishes": [
            {
                "id": dish.id,
                "name": dish.name,
                "meal_type": dish.meal_type.value,
                "score": score_by_fridge_overlap(dish, fridge_index),
            }
            for dish in ranked
        ],
        "count": len(ranked),
    }


def as_result(func: Callable[..., Dict[str, Any]], *args, **kwargs) -> Dict[str, Any]:
    """
    Call an engine function and wrap its outcome in a result dictionary.

    Returns:
        {"success": True, ...payload} or {"success": False, "code", "error"}
    """
    try:
        payload = func(*args, **kwargs)
    except Exception as exc:
        return to_error_result(exc)
    return dict(payload, success=True)
