"""
Slot filling.

Assigns dishes to the requested meal slots:

1. Required dishes are placed first, in the order given, as long as their
   meal type still has a free slot.
2. Each meal type's candidates are ranked by fridge overlap (or shuffled
   when fridge ranking is off).
3. Remaining slots are filled from the ranked candidates, never using a
   dish twice.

The filler never raises. A required dish that does not fit is skipped and
meal types without enough candidates are left under-filled; callers check
coverage afterwards.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from .models import Dish, FilledSlot, MealType
from .scoring import FridgeIndex, rank_dishes

log = logging.getLogger("fridge_menu_mcp.slots")

# Candidate dishes per meal type; meal types without candidates may be absent.
DishPool = Mapping[MealType, Sequence[Dish]]


@dataclass(frozen=True)
class FillResult:
    """Outcome of a fill pass."""

    slots: List[FilledSlot]
    used_dish_ids: FrozenSet[str]
    # Meal types that could not be fully filled -> missing slot count
    unfilled: Dict[MealType, int] = field(default_factory=dict)


def _remaining_slots(total_slots: Mapping[MealType, int]) -> Dict[MealType, int]:
    return {
        meal_type: count
        for meal_type, count in total_slots.items()
        if isinstance(count, int) and count > 0
    }


def _prepare_candidates(
    pool: DishPool,
    fridge_index: FridgeIndex,
    use_fridge_ranking: bool,
    rng: random.Random
) -> Dict[MealType, List[Dish]]:
    prepared: Dict[MealType, List[Dish]] = {}
    for meal_type, dishes in pool.items():
        if not dishes:
            continue
        if use_fridge_ranking:
            prepared[meal_type] = rank_dishes(dishes, fridge_index)
        else:
            shuffled = list(dishes)
            rng.shuffle(shuffled)
            prepared[meal_type] = shuffled
    return prepared


def fill_slots_with_state(
    total_slots: Mapping[MealType, int],
    required_dish_ids: Iterable[str],
    pool: DishPool,
    fridge_index: FridgeIndex,
    use_fridge_ranking: bool = True,
    rng: Optional[random.Random] = None,
    used_dish_ids: Iterable[str] = ()
) -> FillResult:
    """
    Fill meal slots and report which dishes were consumed.

    Args:
        total_slots: Requested slot count per meal type
        required_dish_ids: Dishes to place before ranking, in order
        pool: Candidate dishes per meal type
        fridge_index: ingredient_id -> available quantity
        use_fridge_ranking: Rank by fridge overlap; shuffle when False
        rng: Random source for the shuffle path
        used_dish_ids: Dishes that must not be picked again

    Returns:
        FillResult with the filled slots, the full set of used dish ids and
        the meal types left under-filled
    """
    remaining = _remaining_slots(total_slots)
    used = set(used_dish_ids)
    if not remaining:
        return FillResult(slots=[], used_dish_ids=frozenset(used))

    dish_index: Dict[str, Dish] = {}
    for dishes in pool.values():
        for dish in dishes or []:
            dish_index[dish.id] = dish

    results: List[FilledSlot] = []

    for dish_id in required_dish_ids:
        dish = dish_index.get(dish_id)
        if dish is None or dish_id in used:
            continue
        if remaining.get(dish.meal_type, 0) <= 0:
            log.debug("No %s slot left for required dish %s", dish.meal_type.value, dish_id)
            continue
        results.append(FilledSlot(meal_type=dish.meal_type, dish_id=dish_id))
        used.add(dish_id)
        remaining[dish.meal_type] -= 1

    candidates = _prepare_candidates(
        pool, fridge_index, use_fridge_ranking, rng or random.Random()
    )

    unfilled: Dict[MealType, int] = {}
    for meal_type, slots_needed in remaining.items():
        if slots_needed <= 0:
            continue

        filled = 0
        for dish in candidates.get(meal_type, []):
            if filled >= slots_needed:
                break
            if dish.id in used:
                continue
            results.append(FilledSlot(meal_type=meal_type, dish_id=dish.id))
            used.add(dish.id)
            filled += 1

        if filled < slots_needed:
            unfilled[meal_type] = slots_needed - filled
            log.debug(
                "Only %d of %d %s slots filled", filled, slots_needed, meal_type.value
            )

    return FillResult(slots=results, used_dish_ids=frozenset(used), unfilled=unfilled)


def fill_slots(
    total_slots: Mapping[MealType, int],
    required_dish_ids: Iterable[str],
    pool: DishPool,
    fridge_index: FridgeIndex,
    use_fridge_ranking: bool = True,
    rng: Optional[random.Random] = None
) -> List[FilledSlot]:
    """Fill meal slots; see ``fill_slots_with_state``."""
    return fill_slots_with_state(
        total_slots,
        required_dish_ids,
        pool,
        fridge_index,
        use_fridge_ranking=use_fridge_ranking,
        rng=rng,
    ).slots
