from datetime import date
from string import ascii_uppercase
from typing import List, Optional
from .dates import week_start
from .schemas import Pattern, Settings

def non_negative_mod(value: int, modulo: int) -> int:
    if modulo == 0:
        return 0
    return ((value % modulo) + modulo) % modulo

def week_index(day: date, pattern_start_date: date) -> int:
    """Whole weeks between the pattern start week and the week containing ``day``.

    Negative for weeks before the start week.
    """
    delta = week_start(day) - week_start(pattern_start_date)
    return delta.days // 7

def resolve_pattern_id(day: date, settings: Settings) -> Optional[str]:
    """Pattern that applies to the week containing ``day``.

    None when no start date or no cycle order is configured.
    """
    if not settings.pattern_order or not settings.pattern_start_date:
        return None
    idx = non_negative_mod(week_index(day, settings.pattern_start_date), len(settings.pattern_order))
    return settings.pattern_order[idx]

def pattern_by_id(patterns: List[Pattern], pattern_id: Optional[str]) -> Optional[Pattern]:
    if not pattern_id:
        return None
    return next((p for p in patterns if p.id == pattern_id), None)

def reconcile_order(settings: Settings, patterns: List[Pattern]) -> Settings:
    # Drop ids of deleted patterns, then append patterns the order does not list yet
    existing = {p.id for p in patterns}
    order: List[str] = []
    for pid in settings.pattern_order:
        if pid in existing and pid not in order:
            order.append(pid)
    order.extend(p.id for p in patterns if p.id not in order)
    return settings.model_copy(update={"pattern_order": order})

def move_in_order(settings: Settings, pattern_id: str, direction: int) -> Settings:
    order = list(settings.pattern_order)
    if pattern_id not in order:
        return settings
    idx = order.index(pattern_id)
    nxt = idx + direction
    if nxt < 0 or nxt >= len(order):
        return settings
    order[idx], order[nxt] = order[nxt], order[idx]
    return settings.model_copy(update={"pattern_order": order})

def next_pattern_name(patterns: List[Pattern]) -> str:
    used = {p.name.strip() for p in patterns}
    for letter in ascii_uppercase:
        candidate = f"Week {letter}"
        if candidate not in used:
            return candidate
    return f"Week {len(patterns) + 1}"
