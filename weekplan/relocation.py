"""Drag-style relocation of a meal block within a week.

The source must be a cook day. Dropping on another block swaps the two (they
must be the same length); dropping on an empty day moves the block there.
Anything that would remove a third block comes back as
``needs_confirmation`` rather than being applied.
"""
import logging
from typing import List
from .placement import DAYS_IN_WEEK, expand, find_block, find_conflicts, fits_in_week, without
from .schemas import BlockSetOutcome, MealBlock

logger = logging.getLogger(__name__)

def _overlaps(a: MealBlock, b: MealBlock) -> bool:
    return a.start_day_index <= b.end_day_index and a.end_day_index >= b.start_day_index

def _replace(blocks: List[MealBlock], *updated: MealBlock) -> List[MealBlock]:
    by_id = {b.id: b for b in updated}
    return [by_id.get(b.id, b) for b in blocks]

def _with_conflicts(blocks: List[MealBlock], moved: MealBlock, others: List[MealBlock]) -> BlockSetOutcome:
    conflicts = find_conflicts(others, moved.start_day_index, moved.duration_days)
    if conflicts:
        logger.debug("moving %s conflicts with %s", moved.id, [b.id for b in conflicts])
        return BlockSetOutcome.needs_confirmation(without(blocks, conflicts), conflicts)
    return BlockSetOutcome.ready(blocks)

def relocate(blocks: List[MealBlock], source_day: int, target_day: int) -> BlockSetOutcome:
    """Move the block cooked on ``source_day`` so it lands on ``target_day``."""
    for day in (source_day, target_day):
        if day < 0 or day >= DAYS_IN_WEEK:
            return BlockSetOutcome.rejected(blocks, f"Day {day} is outside the week.")

    day_map = expand(blocks)
    source_entry = day_map.get(source_day)
    if source_entry is None:
        return BlockSetOutcome.rejected(blocks, "There is no meal on that day to move.")
    if source_entry.is_leftover_day:
        return BlockSetOutcome.rejected(blocks, "Only a cook day can be moved.")
    source = find_block(blocks, source_entry.block_id)

    target_entry = day_map.get(target_day)
    if source_day == target_day or (target_entry is not None and target_entry.block_id == source.id):
        return BlockSetOutcome.unchanged(blocks)

    if target_entry is None:
        if not fits_in_week(target_day, source.duration_days):
            return BlockSetOutcome.rejected(blocks, "Meal would run past the end of the week.")
        moved = source.model_copy(update={"start_day_index": target_day})
        others = [b for b in blocks if b.id != source.id]
        return _with_conflicts(_replace(blocks, moved), moved, others)

    owner = find_block(blocks, target_entry.block_id)
    if owner.duration_days != source.duration_days:
        return BlockSetOutcome.rejected(blocks, "Meal durations must match to swap.")

    # A cook-day drop takes the owner's start; a leftover-day drop takes that exact day
    moved_owner = owner.model_copy(update={"start_day_index": source.start_day_index})
    moved = source.model_copy(update={"start_day_index": target_day if target_entry.is_leftover_day else owner.start_day_index})
    if _overlaps(moved, moved_owner):
        moved = moved.model_copy(
            update={"start_day_index": moved_owner.start_day_index + moved_owner.duration_days})
    if not fits_in_week(moved.start_day_index, moved.duration_days):
        return BlockSetOutcome.rejected(blocks, "Meal would run past the end of the week.")

    others = [b for b in blocks if b.id not in (source.id, owner.id)]
    return _with_conflicts(_replace(blocks, moved, moved_owner), moved, others)
