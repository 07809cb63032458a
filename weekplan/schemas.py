"""Plain data shapes exchanged between the engine, the store and the API."""
from datetime import date
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

class Ingredient(BaseModel):
    id: str
    name: str
    unit: str = ""

class RecipeIngredient(BaseModel):
    ingredient_id: str
    quantity: float = Field(0.0, ge=0)
    unit: str = ""

class Recipe(BaseModel):
    id: str
    name: str
    ingredients: List[RecipeIngredient] = []
    steps: List[str] = []

class MealBlock(BaseModel):
    id: str
    recipe_id: str
    start_day_index: int = Field(ge=0, le=6)  # Monday = 0
    duration_days: int = Field(1, ge=1, le=7)

    @property
    def end_day_index(self) -> int:
        return self.start_day_index + self.duration_days - 1

class Pattern(BaseModel):
    id: str
    name: str
    meal_blocks: List[MealBlock] = []

class WeekOverride(BaseModel):
    week_start_date: date
    meal_blocks: List[MealBlock] = []

class Settings(BaseModel):
    pattern_start_date: Optional[date] = None
    pattern_order: List[str] = []

class DayMealEntry(BaseModel):
    block_id: str
    recipe_id: str
    is_leftover_day: bool
    day_offset: int  # 0 = cook day

class ShoppingItem(BaseModel):
    ingredient_id: str
    name: str
    unit: str
    quantity: float

class OutcomeStatus(str, Enum):
    READY = "ready"
    NEEDS_CONFIRMATION = "needs_confirmation"
    REJECTED = "rejected"
    UNCHANGED = "unchanged"

class BlockSetOutcome(BaseModel):
    """Result of a placement, relocation or duration change.

    ``blocks`` is the complete replacement set to persist. For
    ``needs_confirmation`` it already has ``conflicts`` removed, so confirming
    means committing it as-is. For ``rejected`` it is the untouched input.
    """
    status: OutcomeStatus
    blocks: List[MealBlock] = []
    conflicts: List[MealBlock] = []
    reason: Optional[str] = None

    @property
    def committable(self) -> bool:
        return self.status in (OutcomeStatus.READY, OutcomeStatus.NEEDS_CONFIRMATION)

    @classmethod
    def ready(cls, blocks: List[MealBlock]) -> "BlockSetOutcome":
        return cls(status=OutcomeStatus.READY, blocks=blocks)

    @classmethod
    def unchanged(cls, blocks: List[MealBlock]) -> "BlockSetOutcome":
        return cls(status=OutcomeStatus.UNCHANGED, blocks=blocks)

    @classmethod
    def rejected(cls, blocks: List[MealBlock], reason: str) -> "BlockSetOutcome":
        return cls(status=OutcomeStatus.REJECTED, blocks=blocks, reason=reason)

    @classmethod
    def needs_confirmation(cls, blocks: List[MealBlock], conflicts: List[MealBlock]) -> "BlockSetOutcome":
        return cls(status=OutcomeStatus.NEEDS_CONFIRMATION, blocks=blocks, conflicts=conflicts)

class DataDump(BaseModel):
    """Everything the store holds, as written by export and read by import."""
    ingredients: List[Ingredient] = []
    recipes: List[Recipe] = []
    patterns: List[Pattern] = []
    settings: Settings = Field(default_factory=Settings)
    week_overrides: List[WeekOverride] = []
