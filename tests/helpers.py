"""Builders shared by the test modules."""

from datetime import datetime
from types import SimpleNamespace

import pytz


def make_rule(day_of_week, open_time="09:00", close_time="22:00", is_closed=False):
    return SimpleNamespace(
        day_of_week=day_of_week,
        open_time=open_time,
        close_time=close_time,
        is_closed=is_closed,
    )


def make_restaurant(timezone="UTC", accepting_orders=True):
    return SimpleNamespace(timezone=timezone, accepting_orders=accepting_orders)


def local_instant(value: str, timezone: str = "UTC") -> datetime:
    """Aware datetime for a wall-clock "YYYY-MM-DD HH:MM" in ``timezone``."""
    naive = datetime.strptime(value, "%Y-%m-%d %H:%M")
    return pytz.timezone(timezone).localize(naive)


def full_week(open_time="09:00", close_time="22:00"):
    """Wire-format schedule with the same hours every day."""
    return [
        {"dayOfWeek": day, "openTime": open_time, "closeTime": close_time, "isClosed": False}
        for day in range(7)
    ]
