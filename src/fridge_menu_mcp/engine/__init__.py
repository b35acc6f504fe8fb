"""
Menu generation engine.

This package provides:
- Dish pool building per meal type with tag filters
- Fridge overlap scoring and ranking of dishes
- Slot filling with required dishes placed first
- Shopping list aggregation netted against fridge stock
- Menu generation and regeneration with locked items
"""

from .config import (
    GenerationConfig,
    load_config,
    save_config,
    update_config,
    reset_config,
    get_config_summary,
)
from .errors import (
    ErrorCode,
    MenuGenerationError,
    insufficient_dishes,
    to_error_result,
)
from .models import (
    MealType,
    Unit,
    DishIngredient,
    Dish,
    FridgeItem,
    MenuItem,
    ExistingMenu,
    GenerateFilters,
    GenerateRequest,
    FilledSlot,
    ShoppingListLine,
)
from .pool import build_dish_pool
from .scoring import (
    build_fridge_index,
    score_by_fridge_overlap,
    rank_dishes,
)
from .slots import (
    FillResult,
    fill_slots,
    fill_slots_with_state,
)
from .shopping import (
    calculate_shopping_list,
    find_unit_conflicts,
)
from .selection import (
    SelectionContext,
    select_dishes,
    normalize_total_slots,
)
from .menus import (
    generate_menu,
    regenerate_menu,
    shopping_list_for_dishes,
    preview_dish_pool,
    rank_dishes_for_fridge,
    derive_shopping_list_name,
    as_result,
)

__all__ = [
    # Config
    'GenerationConfig',
    'load_config',
    'save_config',
    'update_config',
    'reset_config',
    'get_config_summary',
    # Errors
    'ErrorCode',
    'MenuGenerationError',
    'insufficient_dishes',
    'to_error_result',
    # Models
    'MealType',
    'Unit',
    'DishIngredient',
    'Dish',
    'FridgeItem',
    'MenuItem',
    'ExistingMenu',
    'GenerateFilters',
    'GenerateRequest',
    'FilledSlot',
    'ShoppingListLine',
    # Pool & scoring
    'build_dish_pool',
    'build_fridge_index',
    'score_by_fridge_overlap',
    'rank_dishes',
    # Slot filling
    'FillResult',
    'fill_slots',
    'fill_slots_with_state',
    # Shopping list
    'calculate_shopping_list',
    'find_unit_conflicts',
    # Selection
    'SelectionContext',
    'select_dishes',
    'normalize_total_slots',
    # Menus
    'generate_menu',
    'regenerate_menu',
    'shopping_list_for_dishes',
    'preview_dish_pool',
    'rank_dishes_for_fridge',
    'derive_shopping_list_name',
    'as_result',
]
