"""
Value types for menu generation.

Dishes, fridge entries and existing menus arrive as read-only snapshots
from the caller. Filled slots and shopping list lines are produced fresh
on every generation call.

All models accept both snake_case field names and the camelCase keys used
by the catalog API (``mealType``, ``qtyPerServing``, ``totalSlots``...).
Ingredient quantities also accept ``quantityPerServing``.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class MealType(str, Enum):
    """Closed set of meal types; every dish belongs to exactly one."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    DESSERT = "dessert"


class Unit(str, Enum):
    """Units of measure an ingredient can be tracked in."""

    PIECE = "pcs"
    GRAM = "g"
    MILLILITER = "ml"


# Slot budget per meal type. Absent keys mean "no slots of that type".
SlotCounts = Dict[MealType, int]


class _Snapshot(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class DishIngredient(_Snapshot):
    """One ingredient requirement of a dish, per serving."""

    ingredient_id: str
    qty_per_serving: float = Field(
        ge=0,
        validation_alias=AliasChoices("qty_per_serving", "qtyPerServing", "quantityPerServing"),
    )
    unit: Optional[Unit] = None
    name: Optional[str] = None


class Dish(_Snapshot):
    """A catalog dish with its embedded ingredient requirements."""

    id: str
    name: str
    meal_type: MealType
    is_active: bool = True
    tags: List[str] = Field(default_factory=list)
    ingredients: List[DishIngredient] = Field(default_factory=list)

    def uses_ingredient(self, ingredient_id: str) -> bool:
        return any(entry.ingredient_id == ingredient_id for entry in self.ingredients)


class FridgeItem(_Snapshot):
    """Available stock of one ingredient. Quantity 0 is the same as absent."""

    ingredient_id: str
    quantity: float = Field(ge=0)
    unit: Optional[Unit] = None
    name: Optional[str] = None


class MenuItem(_Snapshot):
    """A dish placed in a menu slot, as stored by the caller."""

    id: str
    meal_type: MealType
    dish_id: str
    locked: bool = False
    cooked: bool = False


class ExistingMenu(_Snapshot):
    """Current state of a menu that is about to be regenerated."""

    id: str
    name: str = ""
    status: str = "draft"
    items: List[MenuItem] = Field(default_factory=list)
    shopping_list_id: str


class GenerateFilters(_Snapshot):
    include_tags: List[str] = Field(default_factory=list)


class GenerateRequest(_Snapshot):
    """
    A menu generation request.

    Slot counts must be non-negative and at least one must be positive.
    Zero counts are accepted here and dropped during normalization.
    """

    name: str
    total_slots: Dict[MealType, int]
    filters: Optional[GenerateFilters] = None
    required_dishes: List[str] = Field(default_factory=list)
    required_ingredients: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value

    @field_validator("total_slots")
    @classmethod
    def _counts_not_negative(cls, value: Dict[MealType, int]) -> Dict[MealType, int]:
        for meal_type, count in value.items():
            if count < 0:
                raise ValueError(f"slot count for {meal_type.value} must be >= 0")
        return value

    @model_validator(mode="after")
    def _has_slots(self) -> "GenerateRequest":
        if sum(self.total_slots.values()) <= 0:
            raise ValueError("Add at least one meal slot")
        return self

    @property
    def include_tags(self) -> List[str]:
        return list(self.filters.include_tags) if self.filters else []


class FilledSlot(_Snapshot):
    """One unit of engine output: a dish assigned to a slot of a meal type."""

    meal_type: MealType
    dish_id: str


class ShoppingListLine(_Snapshot):
    """Quantity of an ingredient still needed after netting against the fridge."""

    ingredient_id: str
    quantity: float
    unit: Optional[Unit] = None
