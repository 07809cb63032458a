from datetime import date, timedelta
import pytest
from weekplan.schedule import (move_in_order, next_pattern_name, non_negative_mod, pattern_by_id,
                               reconcile_order, resolve_pattern_id, week_index)
from weekplan.schemas import Pattern, Settings

START = date(2026, 2, 9)  # Monday

def test_non_negative_mod():
    assert non_negative_mod(5, 3) == 2
    assert non_negative_mod(-1, 3) == 2
    assert non_negative_mod(10, 0) == 0

def test_week_index_relative_to_start():
    assert week_index(date(2026, 2, 16), START) == 1
    assert week_index(date(2026, 2, 8), START) == -1
    # a start date mid-week still counts from its Monday
    assert week_index(date(2026, 2, 16), date(2026, 2, 13)) == 1

def test_resolve_cycles_through_order():
    settings = Settings(pattern_start_date=START, pattern_order=["p1", "p2", "p3"])
    assert resolve_pattern_id(START, settings) == "p1"
    assert resolve_pattern_id(START + timedelta(days=7), settings) == "p2"
    assert resolve_pattern_id(START + timedelta(days=14), settings) == "p3"
    assert resolve_pattern_id(START + timedelta(days=21), settings) == "p1"
    assert resolve_pattern_id(START - timedelta(days=7), settings) == "p3"

@pytest.mark.parametrize("k", range(-10, 11))
def test_resolve_any_week_offset(k):
    order = ["a", "b", "c", "d"]
    settings = Settings(pattern_start_date=START, pattern_order=order)
    # any day inside the week resolves the same
    assert resolve_pattern_id(START + timedelta(weeks=k, days=3), settings) == order[((k % 4) + 4) % 4]

def test_resolve_unconfigured_returns_none():
    assert resolve_pattern_id(START, Settings(pattern_start_date=START, pattern_order=[])) is None
    assert resolve_pattern_id(START, Settings(pattern_start_date=None, pattern_order=["p1"])) is None

def test_pattern_by_id():
    patterns = [Pattern(id="p1", name="Week A"), Pattern(id="p2", name="Week B")]
    assert pattern_by_id(patterns, "p2").name == "Week B"
    assert pattern_by_id(patterns, "nope") is None
    assert pattern_by_id(patterns, None) is None

def test_reconcile_order_drops_missing_and_appends_new():
    patterns = [Pattern(id="a", name="A"), Pattern(id="b", name="B"), Pattern(id="c", name="C")]
    settings = Settings(pattern_start_date=START, pattern_order=["c", "gone", "a"])
    out = reconcile_order(settings, patterns)
    assert out.pattern_order == ["c", "a", "b"]
    assert settings.pattern_order == ["c", "gone", "a"]

def test_move_in_order():
    settings = Settings(pattern_order=["a", "b", "c"])
    assert move_in_order(settings, "b", -1).pattern_order == ["b", "a", "c"]
    assert move_in_order(settings, "b", 1).pattern_order == ["a", "c", "b"]
    assert move_in_order(settings, "a", -1).pattern_order == ["a", "b", "c"]
    assert move_in_order(settings, "c", 1).pattern_order == ["a", "b", "c"]

def test_next_pattern_name():
    assert next_pattern_name([]) == "Week A"
    assert next_pattern_name([Pattern(id="1", name="Week A"), Pattern(id="2", name="Week C")]) == "Week B"
