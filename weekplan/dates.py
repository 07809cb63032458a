from datetime import date, datetime, timedelta

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

def _as_date(value: date | datetime) -> date:
    # datetime is a date subclass; drop the time of day
    if isinstance(value, datetime):
        return value.date()
    return value

def to_iso_date(value: date | datetime) -> str:
    return _as_date(value).isoformat()

def from_iso_date(value: str) -> date:
    return date.fromisoformat(value.strip())

def add_days(value: date | datetime, days: int) -> date:
    return _as_date(value) + timedelta(days=days)

def add_weeks(value: date | datetime, weeks: int) -> date:
    return add_days(value, weeks * 7)

def week_start(value: date | datetime) -> date:
    """Monday at or before ``value``."""
    day = _as_date(value)
    return day - timedelta(days=day.weekday())  # Monday = 0, Sunday = 6

def day_name(day_index: int) -> str:
    return DAY_NAMES[day_index]

def format_week_range(start: date) -> str:
    end = add_days(start, 6)
    return f"{start:%b} {start.day} - {end:%b} {end.day}"
