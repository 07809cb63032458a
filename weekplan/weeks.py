from datetime import date
from typing import List, Optional
from pydantic import BaseModel
from sqlalchemy.orm import Session
from . import store
from .dates import add_days, day_name, format_week_range, to_iso_date, week_start
from .placement import expand
from .schedule import pattern_by_id, resolve_pattern_id
from .schemas import MealBlock, Pattern, ShoppingItem, WeekOverride
from .shopping import aggregate

UNKNOWN_RECIPE = "Unknown recipe"

class ActiveWeek(BaseModel):
    week_start: date
    pattern: Optional[Pattern]
    override: Optional[WeekOverride]

    @property
    def blocks(self) -> List[MealBlock]:
        if self.override is not None:
            return self.override.meal_blocks
        if self.pattern is not None:
            return self.pattern.meal_blocks
        return []

    @property
    def customized(self) -> bool:
        return self.override is not None

def active_week(db: Session, day: date) -> ActiveWeek:
    start = week_start(day)
    settings = store.get_settings(db)
    pattern = pattern_by_id(store.list_patterns(db), resolve_pattern_id(start, settings))
    return ActiveWeek(week_start=start, pattern=pattern, override=store.get_override(db, start))

def commit_blocks(db: Session, week: ActiveWeek, blocks: List[MealBlock]) -> None:
    """Write a new block set to whatever owns the week: its override, else its pattern."""
    if week.override is not None:
        store.save_override(db, WeekOverride(week_start_date=week.week_start, meal_blocks=blocks))
    elif week.pattern is not None:
        store.replace_pattern_blocks(db, week.pattern.id, blocks)
    else:
        raise ValueError("No pattern is configured for this week.")

def customize_week(db: Session, day: date) -> WeekOverride:
    """Copy the resolved pattern's blocks into a one-off override for the week."""
    week = active_week(db, day)
    if week.override is not None:
        return week.override
    if week.pattern is None:
        raise ValueError("No pattern is configured for this week.")
    override = WeekOverride(week_start_date=week.week_start,
                            meal_blocks=[b.model_copy() for b in week.pattern.meal_blocks])
    store.save_override(db, override)
    return override

def reset_week(db: Session, day: date) -> bool:
    return store.delete_override(db, day)

def shopping_list(db: Session, day: date) -> List[ShoppingItem]:
    week = active_week(db, day)
    return aggregate(week.blocks, store.list_recipes(db), store.list_ingredients(db))

def week_view(db: Session, day: date) -> dict:
    week = active_week(db, day)
    recipe_names = {r.id: r.name for r in store.list_recipes(db)}
    durations = {b.id: b.duration_days for b in week.blocks}
    day_map = expand(week.blocks)
    days = []
    for idx in range(7):
        entry = day_map.get(idx)
        meal = None
        if entry:
            total = durations[entry.block_id]
            meal = {
                **entry.model_dump(),
                "recipe_name": recipe_names.get(entry.recipe_id, UNKNOWN_RECIPE),
                "duration_days": total,
                "label": f"Leftovers (day {entry.day_offset + 1} of {total})" if entry.is_leftover_day else "Cook day",
            }
        days.append({
            "day_index": idx,
            "day_name": day_name(idx),
            "date": to_iso_date(add_days(week.week_start, idx)),
            "meal": meal,
        })
    return {
        "week_start": to_iso_date(week.week_start),
        "label": format_week_range(week.week_start),
        "configured": week.pattern is not None,
        "pattern": {"id": week.pattern.id, "name": week.pattern.name} if week.pattern else None,
        "customized": week.customized,
        "blocks": [b.model_dump() for b in week.blocks],
        "days": days,
    }
