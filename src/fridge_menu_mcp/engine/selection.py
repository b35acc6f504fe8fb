"""
Dish selection for a generation request.

Wraps the pure pool/score/fill steps with the checks that make a request
feasible or not:

- required dishes must exist, be active, and fit their meal type's budget
- every required ingredient must be supplied by some selected dish
- every required dish must actually appear in the filled slots

All failures raise ``MenuGenerationError`` with code INSUFFICIENT_DISHES.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .errors import insufficient_dishes
from .models import Dish, FilledSlot, FridgeItem, MealType, MenuItem, SlotCounts
from .pool import build_dish_pool
from .scoring import FridgeIndex, build_fridge_index, rank_dishes
from .slots import fill_slots_with_state

log = logging.getLogger("fridge_menu_mcp.selection")

REQUIRED_DISH_UNAVAILABLE = "Required dish is not available"
NOT_ENOUGH_SLOTS = "Not enough slots for required dishes"
INGREDIENTS_UNSATISFIED = "Unable to satisfy required ingredients"
REQUIRED_NOT_PLACED = "Failed to place required dishes"
LOCKED_EXCEED_MESSAGE = "Locked items exceed requested slots"


@dataclass(frozen=True)
class SelectionContext:
    """Everything needed to pick dishes for one generation pass."""

    total_slots: SlotCounts
    dishes: Sequence[Dish]
    fridge_items: Sequence[FridgeItem]
    required_dishes: Sequence[str] = ()
    required_ingredients: Sequence[str] = ()
    include_tags: Sequence[str] = ()
    excluded_dish_ids: AbstractSet[str] = frozenset()
    use_fridge_ranking: bool = True
    rng: Optional[random.Random] = field(default=None, compare=False)


def normalize_total_slots(total_slots: Mapping[MealType, int]) -> SlotCounts:
    """Drop zero, negative and missing slot counts."""
    normalized: SlotCounts = {}
    for meal_type, count in total_slots.items():
        if isinstance(count, int) and count > 0:
            normalized[MealType(meal_type)] = count
    return normalized


def build_dish_map(dishes: Iterable[Dish]) -> Dict[str, Dish]:
    return {dish.id: dish for dish in dishes}


def available_dishes(dishes: Iterable[Dish], excluded_dish_ids: AbstractSet[str]) -> List[Dish]:
    """Active dishes that are not excluded (e.g. locked in the menu already)."""
    return [
        dish for dish in dishes
        if dish.is_active and dish.id not in excluded_dish_ids
    ]


def sanitize_required_dishes(
    required: Iterable[str],
    dish_map: Mapping[str, Dish],
    excluded_dish_ids: AbstractSet[str]
) -> List[str]:
    """
    Validate required dish ids against the available dishes.

    Excluded ids are dropped silently (they are already placed); duplicates
    are collapsed keeping first-seen order.

    Raises:
        MenuGenerationError: a required dish is missing or inactive
    """
    sanitized: List[str] = []
    for dish_id in required:
        if dish_id in excluded_dish_ids or dish_id in sanitized:
            continue
        dish = dish_map.get(dish_id)
        if dish is None or not dish.is_active:
            log.warning("Required dish %s is missing or inactive", dish_id)
            raise insufficient_dishes(REQUIRED_DISH_UNAVAILABLE)
        sanitized.append(dish_id)
    return sanitized


def _required_counts(required: Iterable[str], dish_map: Mapping[str, Dish]) -> Dict[MealType, int]:
    counts: Dict[MealType, int] = {}
    for dish_id in required:
        dish = dish_map.get(dish_id)
        if dish is None:
            raise insufficient_dishes(REQUIRED_DISH_UNAVAILABLE)
        counts[dish.meal_type] = counts.get(dish.meal_type, 0) + 1
    return counts


def select_dishes_for_ingredients(
    ingredient_ids: Iterable[str],
    dishes: Sequence[Dish],
    fridge_index: FridgeIndex,
    required: Sequence[str],
    excluded_dish_ids: AbstractSet[str] = frozenset()
) -> List[str]:
    """
    Extend the required dish list so every requested ingredient is covered.

    For each ingredient not already supplied by a required dish, the
    best-ranked dish containing it (fridge score desc, name asc) is added.
    Only active, non-excluded dishes that are not already required are
    considered. Slot budgets are not checked here: a pick that overflows
    its meal type fails in ``ensure_required_dish_counts``.

    Returns:
        New required dish list (the input is not modified)

    Raises:
        MenuGenerationError: no eligible dish supplies an ingredient
    """
    dish_map = build_dish_map(dishes)
    selected = list(required)

    for ingredient_id in ingredient_ids:
        already_covered = any(
            dish_id in dish_map and dish_map[dish_id].uses_ingredient(ingredient_id)
            for dish_id in selected
        )
        if already_covered:
            continue

        candidates = rank_dishes(
            (
                dish for dish in dishes
                if dish.is_active
                and dish.id not in excluded_dish_ids
                and dish.id not in selected
                and dish.uses_ingredient(ingredient_id)
            ),
            fridge_index,
        )
        if not candidates:
            log.warning("No eligible dish supplies required ingredient %s", ingredient_id)
            raise insufficient_dishes(INGREDIENTS_UNSATISFIED)

        chosen = candidates[0]
        log.debug("Ingredient %s covered by dish %s", ingredient_id, chosen.id)
        selected.append(chosen.id)

    return selected


def ensure_required_dish_counts(
    required: Iterable[str],
    dish_map: Mapping[str, Dish],
    total_slots: SlotCounts
) -> None:
    """
    Check that each meal type has room for its required dishes.

    A required dish whose meal type was not requested has a budget of 0,
    so a meal type mismatch fails here too.
    """
    for meal_type, count in _required_counts(required, dish_map).items():
        available = total_slots.get(meal_type, 0)
        if count > available:
            log.warning(
                "%d required %s dishes but only %d slots", count, meal_type.value, available
            )
            raise insufficient_dishes(NOT_ENOUGH_SLOTS)


def build_pool(
    dishes: Sequence[Dish],
    total_slots: SlotCounts,
    include_tags: Sequence[str] = ()
) -> Dict[MealType, List[Dish]]:
    """Candidate pool per requested meal type, with the tag filter applied."""
    pool: Dict[MealType, List[Dish]] = {}
    for meal_type, count in total_slots.items():
        if count <= 0:
            continue
        pool[meal_type] = build_dish_pool(
            dishes, meal_type, tags=include_tags, active_only=False
        )
    return pool


def inject_required_dishes(
    pool: Mapping[MealType, Sequence[Dish]],
    required: Iterable[str],
    dish_map: Mapping[str, Dish]
) -> Dict[MealType, List[Dish]]:
    """Return a copy of the pool in which every required dish is present."""
    injected = {meal_type: list(dishes) for meal_type, dishes in pool.items()}
    for dish_id in required:
        dish = dish_map.get(dish_id)
        if dish is None:
            continue
        current = injected.setdefault(dish.meal_type, [])
        if not any(item.id == dish_id for item in current):
            current.append(dish)
    return injected


def ensure_required_coverage(required: Iterable[str], slots: Iterable[FilledSlot]) -> None:
    """Fail if any required dish is missing from the filled slots."""
    placed = {slot.dish_id for slot in slots}
    missing = [dish_id for dish_id in required if dish_id not in placed]
    if missing:
        log.warning("Required dishes not placed: %s", ", ".join(missing))
        raise insufficient_dishes(REQUIRED_NOT_PLACED)


def select_dishes(context: SelectionContext) -> List[FilledSlot]:
    """
    Pick a dish for every requested slot.

    Returns:
        Filled slots; meal types without enough candidates stay under-filled

    Raises:
        MenuGenerationError: required dishes or ingredients cannot be placed
    """
    excluded = frozenset(context.excluded_dish_ids)
    dishes = available_dishes(context.dishes, excluded)
    dish_map = build_dish_map(dishes)
    fridge_index = build_fridge_index(context.fridge_items)

    required = sanitize_required_dishes(context.required_dishes, dish_map, excluded)

    if context.required_ingredients:
        required = select_dishes_for_ingredients(
            context.required_ingredients,
            dishes,
            fridge_index,
            required,
            excluded,
        )

    ensure_required_dish_counts(required, dish_map, context.total_slots)

    pool = build_pool(dishes, context.total_slots, context.include_tags)
    pool = inject_required_dishes(pool, required, dish_map)

    result = fill_slots_with_state(
        context.total_slots,
        required,
        pool,
        fridge_index,
        use_fridge_ranking=context.use_fridge_ranking,
        rng=context.rng,
        used_dish_ids=excluded,
    )

    ensure_required_coverage(required, result.slots)

    if result.unfilled:
        log.info(
            "Under-filled meal types: %s",
            ", ".join(f"{mt.value}={n}" for mt, n in result.unfilled.items()),
        )

    return result.slots


# ============== Regeneration ==============


def partition_locked(items: Iterable[MenuItem]) -> Tuple[List[MenuItem], List[MenuItem]]:
    """Split menu items into (locked, unlocked), keeping their order."""
    locked: List[MenuItem] = []
    unlocked: List[MenuItem] = []
    for item in items:
        (locked if item.locked else unlocked).append(item)
    return locked, unlocked


def adjust_slots_for_locked(total_slots: SlotCounts, locked_items: Iterable[MenuItem]) -> SlotCounts:
    """
    Take one slot of the item's meal type for each locked item.

    Raises:
        MenuGenerationError: a locked item has no slot left in the request
    """
    adjusted: SlotCounts = dict(total_slots)
    for item in locked_items:
        slots_for_type = adjusted.get(item.meal_type, 0)
        if slots_for_type <= 0:
            log.warning("Locked %s item %s has no slot in the request", item.meal_type.value, item.id)
            raise insufficient_dishes(LOCKED_EXCEED_MESSAGE)
        adjusted[item.meal_type] = slots_for_type - 1
    return adjusted


def satisfied_ingredients(locked_items: Iterable[MenuItem], dish_map: Mapping[str, Dish]) -> Set[str]:
    """Ingredients already supplied by locked dishes."""
    satisfied: Set[str] = set()
    for item in locked_items:
        dish = dish_map.get(item.dish_id)
        if dish is None:
            continue
        satisfied.update(entry.ingredient_id for entry in dish.ingredients)
    return satisfied
