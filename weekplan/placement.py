"""Day-grid placement of meal blocks.

A week is seven day slots, Monday = 0. A block covers its cook day plus
``duration_days - 1`` leftover days, and no two blocks of one set may share a
day. Nothing here mutates its inputs; callers get back new lists or a
:class:`BlockSetOutcome` and decide whether to persist it.
"""
import logging
from typing import Dict, List, Optional
from .schemas import BlockSetOutcome, DayMealEntry, MealBlock

logger = logging.getLogger(__name__)

DAYS_IN_WEEK = 7

def expand(blocks: List[MealBlock]) -> Dict[int, DayMealEntry]:
    """Map each occupied day index to the block entry covering it.

    Later blocks win on overlapping days; days outside the week are skipped.
    """
    day_map: Dict[int, DayMealEntry] = {}
    for block in blocks:
        for offset in range(block.duration_days):
            day = block.start_day_index + offset
            if day < 0 or day >= DAYS_IN_WEEK:
                continue
            day_map[day] = DayMealEntry(
                block_id=block.id,
                recipe_id=block.recipe_id,
                is_leftover_day=offset > 0,
                day_offset=offset,
            )
    return day_map

def find_conflicts(blocks: List[MealBlock], start_day_index: int, duration_days: int) -> List[MealBlock]:
    new_start = start_day_index
    new_end = start_day_index + duration_days - 1
    return [
        b for b in blocks
        if new_start <= b.end_day_index and new_end >= b.start_day_index
    ]

def fits_in_week(start_day_index: int, duration_days: int) -> bool:
    return 0 <= start_day_index and start_day_index + duration_days <= DAYS_IN_WEEK

def without(blocks: List[MealBlock], removed: List[MealBlock]) -> List[MealBlock]:
    ids = {b.id for b in removed}
    return [b for b in blocks if b.id not in ids]

def place_block(blocks: List[MealBlock], new_block: MealBlock) -> BlockSetOutcome:
    """Add ``new_block``; overlapping blocks are only dropped after confirmation."""
    if not fits_in_week(new_block.start_day_index, new_block.duration_days):
        return BlockSetOutcome.rejected(blocks, "Meal runs past the end of the week.")
    if any(b.id == new_block.id for b in blocks):
        return BlockSetOutcome.rejected(blocks, f"Meal block {new_block.id} already exists.")
    conflicts = find_conflicts(blocks, new_block.start_day_index, new_block.duration_days)
    proposed = without(blocks, conflicts) + [new_block]
    if conflicts:
        logger.debug("placing %s conflicts with %s", new_block.id, [b.id for b in conflicts])
        return BlockSetOutcome.needs_confirmation(proposed, conflicts)
    return BlockSetOutcome.ready(proposed)

def remove_block(blocks: List[MealBlock], block_id: str) -> List[MealBlock]:
    return [b for b in blocks if b.id != block_id]

def find_block(blocks: List[MealBlock], block_id: str) -> Optional[MealBlock]:
    return next((b for b in blocks if b.id == block_id), None)

def max_duration(blocks: List[MealBlock], block_id: str) -> int:
    """Longest duration the block can take without reaching the next block or Sunday."""
    block = find_block(blocks, block_id)
    if block is None:
        raise KeyError(block_id)
    start = block.start_day_index
    later = [b.start_day_index for b in blocks if b.id != block_id and b.start_day_index > start]
    next_start = min(later, default=DAYS_IN_WEEK)
    return min(DAYS_IN_WEEK - start, next_start - start)

def change_duration(blocks: List[MealBlock], block_id: str, requested: int) -> BlockSetOutcome:
    block = find_block(blocks, block_id)
    if block is None:
        return BlockSetOutcome.rejected(blocks, f"Meal block {block_id} not found.")
    duration = max(1, min(requested, max_duration(blocks, block_id)))
    if duration == block.duration_days:
        return BlockSetOutcome.unchanged(blocks)
    updated = block.model_copy(update={"duration_days": duration})
    return BlockSetOutcome.ready([updated if b.id == block_id else b for b in blocks])

def validate_block_set(blocks: List[MealBlock]) -> Optional[str]:
    """Reason the set breaks the week invariants, or None if it is sound."""
    seen = set()
    for i, block in enumerate(blocks):
        if block.id in seen:
            return f"Duplicate meal block id {block.id}."
        seen.add(block.id)
        if not fits_in_week(block.start_day_index, block.duration_days):
            return f"Meal block {block.id} runs past the end of the week."
        overlapping = find_conflicts(blocks[i + 1:], block.start_day_index, block.duration_days)
        if overlapping:
            return f"Meal blocks {block.id} and {overlapping[0].id} overlap."
    return None
