import itertools
import pytest
from weekplan.placement import (change_duration, expand, find_conflicts, max_duration, place_block,
                                remove_block, validate_block_set)
from weekplan.schemas import MealBlock, OutcomeStatus

def block(bid, start, duration, recipe=None):
    return MealBlock(id=bid, recipe_id=recipe or f"r-{bid}", start_day_index=start, duration_days=duration)

def test_expand_cook_and_leftover_days():
    day_map = expand([block("m1", 1, 3, "r1")])
    assert set(day_map) == {1, 2, 3}
    assert day_map[1].model_dump() == {"block_id": "m1", "recipe_id": "r1", "is_leftover_day": False, "day_offset": 0}
    assert day_map[2].is_leftover_day and day_map[2].day_offset == 1
    assert day_map[3].is_leftover_day and day_map[3].day_offset == 2

def test_expand_covers_every_block_day():
    blocks = [block("a", 0, 2), block("b", 2, 1), block("c", 3, 4)]
    day_map = expand(blocks)
    for b in blocks:
        offsets = [day_map[b.start_day_index + i].day_offset for i in range(b.duration_days)]
        assert offsets == list(range(b.duration_days))
        assert all(day_map[b.start_day_index + i].block_id == b.id for i in range(b.duration_days))
        assert [day_map[b.start_day_index + i].is_leftover_day for i in range(b.duration_days)] == \
            [False] + [True] * (b.duration_days - 1)

def test_expand_truncates_at_week_end():
    assert set(expand([block("x", 5, 4)])) == {5, 6}

def test_expand_later_block_wins_on_overlap():
    day_map = expand([block("a", 0, 3), block("b", 2, 1)])
    assert day_map[2].block_id == "b"
    assert day_map[1].block_id == "a"

def test_find_conflicts_returns_overlaps_in_input_order():
    blocks = [block("m1", 0, 2), block("m2", 3, 2), block("m3", 5, 1)]
    assert [b.id for b in find_conflicts(blocks, 1, 3)] == ["m1", "m2"]
    assert find_conflicts(blocks, 2, 1) == []

def test_find_conflicts_regardless_of_insertion_order():
    blocks = [block("a", 0, 2), block("b", 3, 2), block("c", 6, 1)]
    for perm in itertools.permutations(blocks):
        found = {b.id for b in find_conflicts(list(perm), 1, 3)}
        assert found == {"a", "b"}

def test_place_block_into_free_days():
    out = place_block([block("a", 0, 2)], block("n", 2, 3))
    assert out.status == OutcomeStatus.READY
    assert [b.id for b in out.blocks] == ["a", "n"]

def test_place_block_conflict_needs_confirmation():
    existing = [block("a", 0, 2), block("b", 3, 2), block("c", 6, 1)]
    out = place_block(existing, block("n", 1, 3))
    assert out.status == OutcomeStatus.NEEDS_CONFIRMATION
    assert [b.id for b in out.conflicts] == ["a", "b"]
    assert [b.id for b in out.blocks] == ["c", "n"]
    # the input is untouched
    assert [b.id for b in existing] == ["a", "b", "c"]

def test_place_block_past_sunday_is_rejected():
    out = place_block([], block("n", 5, 3))
    assert out.status == OutcomeStatus.REJECTED
    assert "end of the week" in out.reason
    assert out.blocks == []

def test_place_block_rejects_duplicate_id():
    out = place_block([block("a", 0, 1)], block("a", 3, 1))
    assert out.status == OutcomeStatus.REJECTED

def test_remove_block():
    assert [b.id for b in remove_block([block("a", 0, 1), block("b", 1, 1)], "a")] == ["b"]

def test_max_duration_stops_at_next_block():
    blocks = [block("a", 2, 1), block("b", 4, 1)]
    assert max_duration(blocks, "a") == 2
    assert max_duration(blocks, "b") == 3

def test_max_duration_ignores_earlier_blocks():
    assert max_duration([block("a", 0, 1), block("b", 3, 1)], "b") == 4

def test_max_duration_unknown_block():
    with pytest.raises(KeyError):
        max_duration([], "nope")

def test_change_duration_clamps():
    blocks = [block("a", 2, 1), block("b", 4, 1)]
    out = change_duration(blocks, "a", 5)
    assert out.status == OutcomeStatus.READY
    assert out.blocks[0].duration_days == 2
    assert blocks[0].duration_days == 1

def test_change_duration_same_value_is_unchanged():
    out = change_duration([block("a", 6, 1)], "a", 3)
    assert out.status == OutcomeStatus.UNCHANGED

def test_change_duration_shrinks():
    out = change_duration([block("a", 0, 4)], "a", 2)
    assert out.blocks[0].duration_days == 2

def test_change_duration_unknown_block_rejected():
    assert change_duration([], "x", 2).status == OutcomeStatus.REJECTED

def test_validate_block_set():
    assert validate_block_set([block("a", 0, 2), block("b", 2, 5)]) is None
    assert "overlap" in validate_block_set([block("a", 0, 3), block("b", 2, 1)])
    assert "end of the week" in validate_block_set([block("a", 5, 3)])
    assert "Duplicate" in validate_block_set([block("a", 0, 1), block("a", 3, 1)])

def test_meal_block_rejects_bad_values():
    with pytest.raises(ValueError):
        block("a", 0, 0)
    with pytest.raises(ValueError):
        block("a", 7, 1)

def test_only_ready_and_conflicting_outcomes_are_committable():
    blocks = [block("m1", 0, 2)]
    assert place_block(blocks, block("m2", 3, 1)).committable
    assert place_block(blocks, block("m2", 1, 1)).committable
    assert not place_block(blocks, block("m2", 5, 3)).committable
    assert not change_duration(blocks, "m1", 2).committable
