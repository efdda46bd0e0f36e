"""
Availability Evaluator

Decides whether a restaurant is open from its weekly operating hours and
the current instant, and when it next opens if it is closed. This module is
the single implementation used by the JSON API, the server-rendered
storefront and the structured-data generator.

Schedule rules and restaurants are read through attributes only
(``day_of_week``, ``open_time``, ``close_time``, ``is_closed``, ``timezone``,
``accepting_orders``), so ORM rows and pydantic models are both accepted.
Nothing here mutates its inputs or performs I/O.

Usage:
    from app.services.hours import is_open, next_opening_time

    if not is_open(restaurant, restaurant.operating_hours, as_of=now):
        opening = next_opening_time(restaurant, restaurant.operating_hours, as_of=now)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

import pytz

TODAY = "today"
TOMORROW = "tomorrow"

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


@dataclass(frozen=True)
class NextOpening:
    """
    When a closed restaurant opens again.

    Attributes:
        day: ``"today"``, ``"tomorrow"`` or a weekday name
        time: 12-hour display time, e.g. ``"11:00 AM"``
    """
    day: str
    time: str

    def to_dict(self) -> dict:
        return {"day": self.day, "time": self.time}


@dataclass(frozen=True)
class DayHours:
    """One row of the weekly hours table shown to customers."""
    day_of_week: int
    day_name: str
    hours: str
    is_today: bool


@dataclass(frozen=True)
class AvailabilityStatus:
    """
    Everything a storefront needs to render open/closed state.

    Attributes:
        is_open: Whether orders can be placed right now
        next_opening: Next opening when closed, otherwise None
        timezone: Restaurant timezone the evaluation used
        local_time: Wall-clock "HH:MM" in that timezone
        current_day_of_week: 0 = Sunday ... 6 = Saturday
        weekly_hours: Seven display rows, Sunday first
    """
    is_open: bool
    next_opening: Optional[NextOpening]
    timezone: str
    local_time: str
    current_day_of_week: int
    weekly_hours: list[DayHours] = field(default_factory=list)


# =============================================================================
# TIME HELPERS
# =============================================================================

def local_now(timezone: str, as_of: Optional[datetime] = None) -> datetime:
    """
    Convert an instant to wall-clock time in ``timezone``.

    Args:
        timezone: IANA zone name
        as_of: Instant to convert; defaults to now. Naive values are UTC.
    """
    if as_of is None:
        as_of = datetime.now(pytz.utc)
    elif as_of.tzinfo is None:
        as_of = pytz.utc.localize(as_of)
    return as_of.astimezone(pytz.timezone(timezone))


def day_index(moment: datetime) -> int:
    """Day of week with Sunday = 0 (``datetime.weekday`` has Monday = 0)."""
    return (moment.weekday() + 1) % 7


def get_day_name(day_of_week: int) -> str:
    return DAY_NAMES[day_of_week]


def format_time(value: str) -> str:
    """Render "HH:MM" (24h) as "h:mm AM/PM"."""
    hours_part, _, minutes_part = value.partition(":")
    hours = int(hours_part or 0)
    minutes = int(minutes_part or 0)
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {period}"


def is_overnight(rule: Any) -> bool:
    """A shift whose close time falls on the next calendar day."""
    return rule.close_time < rule.open_time


def format_day_hours(rule: Any) -> str:
    """
    Display string for one day of the schedule.

    >>> format_day_hours(rule)   # 13:00 - 01:00
    '1:00 PM - 1:00 AM (next day)'
    """
    if rule.is_closed:
        return "Closed"

    text = f"{format_time(rule.open_time)} - {format_time(rule.close_time)}"
    if is_overnight(rule):
        text += " (next day)"
    return text


def _rule_for(rules: Sequence[Any], day_of_week: int) -> Optional[Any]:
    for rule in rules:
        if rule.day_of_week == day_of_week:
            return rule
    return None


# =============================================================================
# EVALUATION
# =============================================================================

def is_open(
    restaurant: Any,
    schedule: Iterable[Any],
    as_of: Optional[datetime] = None,
) -> bool:
    """
    Check whether the restaurant is open at ``as_of``.

    Both the opening and the closing minute count as open. An overnight
    shift (close earlier than open) is open from ``open_time`` through
    midnight and again from midnight through ``close_time``.

    Args:
        restaurant: Has ``accepting_orders`` and ``timezone``
        schedule: Day rules; a missing day is closed
        as_of: Instant to evaluate (defaults to now)
    """
    if not restaurant.accepting_orders:
        return False

    now = local_now(restaurant.timezone, as_of)
    current_time = now.strftime("%H:%M")
    today = _rule_for(tuple(schedule), day_index(now))

    if today is None or today.is_closed:
        return False

    if is_overnight(today):
        return current_time >= today.open_time or current_time <= today.close_time

    return today.open_time <= current_time <= today.close_time


def next_opening_time(
    restaurant: Any,
    schedule: Iterable[Any],
    as_of: Optional[datetime] = None,
) -> Optional[NextOpening]:
    """
    Find when a closed restaurant next opens, scanning today plus six days.

    Callers check ``is_open`` first; the result is only meaningful while
    closed. Closed or missing days are skipped, so ``"tomorrow"`` is only
    used when tomorrow itself has hours. During the after-midnight part of
    an overnight shift nothing is reported for today.

    Returns:
        NextOpening, or None when ordering is switched off or no day in
        the window has hours.
    """
    if not restaurant.accepting_orders:
        return None

    rules = tuple(schedule)
    now = local_now(restaurant.timezone, as_of)
    current_day = day_index(now)
    current_time = now.strftime("%H:%M")

    for offset in range(7):
        check_day = (current_day + offset) % 7
        rule = _rule_for(rules, check_day)

        if rule is None or rule.is_closed:
            continue

        if offset == 0:
            if is_overnight(rule) and current_time <= rule.close_time:
                continue
            if current_time < rule.open_time:
                return NextOpening(day=TODAY, time=format_time(rule.open_time))
        elif offset == 1:
            return NextOpening(day=TOMORROW, time=format_time(rule.open_time))
        else:
            return NextOpening(day=get_day_name(check_day), time=format_time(rule.open_time))

    return None


def weekly_hours(schedule: Iterable[Any], current_day: Optional[int] = None) -> list[DayHours]:
    """Seven display rows, Sunday first; days without a rule show as Closed."""
    rules = tuple(schedule)
    rows = []
    for day in range(7):
        rule = _rule_for(rules, day)
        rows.append(DayHours(
            day_of_week=day,
            day_name=get_day_name(day),
            hours=format_day_hours(rule) if rule is not None else "Closed",
            is_today=day == current_day,
        ))
    return rows


def availability_status(
    restaurant: Any,
    schedule: Iterable[Any],
    as_of: Optional[datetime] = None,
) -> AvailabilityStatus:
    """Evaluate open state, next opening and display rows for one instant."""
    rules = tuple(schedule)
    if as_of is None:
        as_of = datetime.now(pytz.utc)

    now = local_now(restaurant.timezone, as_of)
    current_day = day_index(now)
    open_now = is_open(restaurant, rules, as_of)

    return AvailabilityStatus(
        is_open=open_now,
        next_opening=None if open_now else next_opening_time(restaurant, rules, as_of),
        timezone=restaurant.timezone,
        local_time=now.strftime("%H:%M"),
        current_day_of_week=current_day,
        weekly_hours=weekly_hours(rules, current_day),
    )
