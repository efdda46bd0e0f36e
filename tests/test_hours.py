"""Availability evaluator: open/closed, next opening and display formatting."""

import copy
from datetime import datetime

import pytest

from app.schemas import OperatingHoursRule
from app.services.hours import (
    TODAY,
    TOMORROW,
    NextOpening,
    availability_status,
    day_index,
    format_day_hours,
    format_time,
    is_open,
    local_now,
    next_opening_time,
)
from tests.helpers import local_instant, make_restaurant, make_rule

# 2024-01-14 is a Sunday, so 2024-01-15 is Monday (day 1), 2024-01-17 Wednesday.
MONDAY = "2024-01-15"
TUESDAY = "2024-01-16"


def every_day(open_time="09:00", close_time="22:00"):
    return [make_rule(day, open_time, close_time) for day in range(7)]


# =============================================================================
# is_open
# =============================================================================

@pytest.mark.parametrize("clock, expected", [
    ("08:59", False),
    ("09:00", True),
    ("15:30", True),
    ("22:00", True),
    ("22:01", False),
])
def test_normal_shift_boundaries_are_inclusive(clock, expected):
    restaurant = make_restaurant()
    assert is_open(restaurant, every_day(), local_instant(f"{MONDAY} {clock}")) is expected


@pytest.mark.parametrize("clock, expected", [
    ("21:59", False),
    ("22:00", True),
    ("23:59", True),
    ("00:00", True),
    ("02:00", True),
    ("02:01", False),
    ("12:00", False),
])
def test_overnight_shift_boundaries(clock, expected):
    restaurant = make_restaurant()
    schedule = every_day("22:00", "02:00")
    assert is_open(restaurant, schedule, local_instant(f"{MONDAY} {clock}")) is expected


def test_not_accepting_orders_is_always_closed():
    restaurant = make_restaurant(accepting_orders=False)
    for clock in ("00:00", "09:00", "12:00", "22:00"):
        as_of = local_instant(f"{MONDAY} {clock}")
        assert is_open(restaurant, every_day("00:00", "23:59"), as_of) is False
        assert next_opening_time(restaurant, every_day(), as_of) is None


def test_all_days_closed_or_empty_schedule():
    restaurant = make_restaurant()
    closed_week = [make_rule(day, is_closed=True) for day in range(7)]
    as_of = local_instant(f"{MONDAY} 12:00")

    assert is_open(restaurant, closed_week, as_of) is False
    assert is_open(restaurant, [], as_of) is False
    assert next_opening_time(restaurant, closed_week, as_of) is None
    assert next_opening_time(restaurant, [], as_of) is None


def test_missing_day_is_closed():
    restaurant = make_restaurant()
    schedule = [make_rule(day) for day in range(7) if day != 1]
    assert is_open(restaurant, schedule, local_instant(f"{MONDAY} 12:00")) is False


def test_closed_flag_ignores_times():
    restaurant = make_restaurant()
    schedule = [make_rule(1, "00:00", "23:59", is_closed=True)]
    assert is_open(restaurant, schedule, local_instant(f"{MONDAY} 12:00")) is False


def test_evaluates_in_restaurant_timezone():
    schedule = every_day()
    # 13:30 UTC is 08:30 in New York (EST, UTC-5)
    as_of = local_instant(f"{MONDAY} 13:30")

    assert is_open(make_restaurant("UTC"), schedule, as_of) is True
    assert is_open(make_restaurant("America/New_York"), schedule, as_of) is False


def test_local_day_of_week_comes_from_timezone():
    # Tuesday 03:00 UTC is still Monday 22:00 in New York
    restaurant = make_restaurant("America/New_York")
    schedule = [make_rule(1, "09:00", "22:00")]
    assert is_open(restaurant, schedule, local_instant(f"{TUESDAY} 03:00")) is True


def test_daylight_saving_offset_is_applied():
    restaurant = make_restaurant("America/New_York")
    schedule = every_day()
    # July: New York is UTC-4
    assert is_open(restaurant, schedule, local_instant("2024-07-15 12:59")) is False
    assert is_open(restaurant, schedule, local_instant("2024-07-15 13:00")) is True


def test_naive_instant_is_treated_as_utc():
    restaurant = make_restaurant("America/New_York")
    schedule = every_day()
    assert is_open(restaurant, schedule, datetime(2024, 1, 15, 14, 0)) is True
    assert is_open(restaurant, schedule, datetime(2024, 1, 15, 13, 59)) is False


def test_is_open_is_idempotent_and_does_not_mutate_schedule():
    restaurant = make_restaurant()
    schedule = every_day("22:00", "02:00")
    snapshot = copy.deepcopy(schedule)
    as_of = local_instant(f"{MONDAY} 23:00")

    first = is_open(restaurant, schedule, as_of)
    second = is_open(restaurant, schedule, as_of)

    assert first == second
    assert [vars(rule) for rule in schedule] == [vars(rule) for rule in snapshot]


def test_accepts_pydantic_rules():
    restaurant = make_restaurant()
    schedule = [
        OperatingHoursRule(day_of_week=day, open_time="09:00", close_time="17:00")
        for day in range(7)
    ]
    assert is_open(restaurant, schedule, local_instant(f"{MONDAY} 16:59")) is True
    assert is_open(restaurant, schedule, local_instant(f"{MONDAY} 17:01")) is False


# =============================================================================
# next_opening_time
# =============================================================================

def test_next_opening_later_today():
    restaurant = make_restaurant()
    schedule = every_day("11:00", "22:00")

    result = next_opening_time(restaurant, schedule, local_instant(f"{MONDAY} 08:00"))

    assert result == NextOpening(day=TODAY, time="11:00 AM")


def test_next_opening_tomorrow_after_todays_close():
    restaurant = make_restaurant()
    schedule = every_day("09:00", "22:00")

    result = next_opening_time(restaurant, schedule, local_instant(f"{MONDAY} 23:00"))

    assert result == NextOpening(day=TOMORROW, time="9:00 AM")


def test_next_opening_skips_closed_days_and_uses_weekday_name():
    restaurant = make_restaurant()
    schedule = [
        make_rule(0, "10:00", "20:00"),
        make_rule(1, is_closed=True),
        make_rule(2, is_closed=True),
        make_rule(3, "10:00", "20:00"),
        make_rule(4, "10:00", "20:00"),
        make_rule(5, "10:00", "20:00"),
        make_rule(6, "10:00", "20:00"),
    ]

    for clock in ("00:00", "08:00", "12:00", "23:59"):
        result = next_opening_time(restaurant, schedule, local_instant(f"{MONDAY} {clock}"))
        assert result == NextOpening(day="Wednesday", time="10:00 AM")


def test_tomorrow_label_only_when_tomorrow_is_open():
    restaurant = make_restaurant()
    # Monday open, Tuesday missing entirely, Thursday next
    schedule = [make_rule(1, "09:00", "17:00"), make_rule(4, "12:00", "20:00")]

    result = next_opening_time(restaurant, schedule, local_instant(f"{MONDAY} 18:00"))

    assert result == NextOpening(day="Thursday", time="12:00 PM")


def test_next_opening_none_when_only_today_and_already_past():
    restaurant = make_restaurant()
    schedule = [make_rule(1, "09:00", "17:00")]

    assert next_opening_time(restaurant, schedule, local_instant(f"{MONDAY} 18:00")) is None


def test_next_opening_finds_same_weekday_only_within_window():
    restaurant = make_restaurant()
    # Sunday only; evaluated Monday, Sunday is offset 6
    schedule = [make_rule(0, "10:00", "14:00")]

    result = next_opening_time(restaurant, schedule, local_instant(f"{MONDAY} 12:00"))

    assert result == NextOpening(day="Sunday", time="10:00 AM")


def test_overnight_before_opening_reports_today():
    restaurant = make_restaurant()
    schedule = every_day("22:00", "02:00")

    result = next_opening_time(restaurant, schedule, local_instant(f"{MONDAY} 21:00"))

    assert result == NextOpening(day=TODAY, time="10:00 PM")


def test_overnight_carry_over_window_does_not_report_today():
    restaurant = make_restaurant()
    schedule = every_day("22:00", "02:00")
    as_of = local_instant(f"{MONDAY} 01:00")

    assert is_open(restaurant, schedule, as_of) is True
    result = next_opening_time(restaurant, schedule, as_of)
    assert result is not None
    assert result.day != TODAY
    assert result == NextOpening(day=TOMORROW, time="10:00 PM")


def test_next_opening_to_dict():
    assert NextOpening(day=TODAY, time="11:00 AM").to_dict() == {"day": "today", "time": "11:00 AM"}


# =============================================================================
# FORMATTING
# =============================================================================

@pytest.mark.parametrize("value, expected", [
    ("00:00", "12:00 AM"),
    ("00:05", "12:05 AM"),
    ("09:30", "9:30 AM"),
    ("12:00", "12:00 PM"),
    ("13:00", "1:00 PM"),
    ("23:59", "11:59 PM"),
])
def test_format_time(value, expected):
    assert format_time(value) == expected


def test_format_day_hours():
    assert format_day_hours(make_rule(1, is_closed=True)) == "Closed"
    assert format_day_hours(make_rule(1, "09:00", "22:00")) == "9:00 AM - 10:00 PM"
    assert format_day_hours(make_rule(1, "13:00", "01:00")) == "1:00 PM - 1:00 AM (next day)"


# =============================================================================
# HELPERS AND STATUS
# =============================================================================

def test_day_index_starts_on_sunday():
    assert day_index(local_instant("2024-01-14 12:00")) == 0
    assert day_index(local_instant(f"{MONDAY} 12:00")) == 1
    assert day_index(local_instant("2024-01-20 12:00")) == 6


def test_local_now_converts_to_zone():
    local = local_now("America/Chicago", local_instant(f"{MONDAY} 18:00"))
    assert local.strftime("%Y-%m-%d %H:%M") == f"{MONDAY} 12:00"


def test_availability_status_when_open():
    restaurant = make_restaurant("America/New_York")
    schedule = [make_rule(day) for day in range(6)]  # Saturday missing

    status = availability_status(restaurant, schedule, local_instant(f"{MONDAY} 17:00"))

    assert status.is_open is True
    assert status.next_opening is None
    assert status.local_time == "12:00"
    assert status.current_day_of_week == 1
    assert len(status.weekly_hours) == 7
    assert [row.day_name for row in status.weekly_hours][:2] == ["Sunday", "Monday"]
    assert [row.is_today for row in status.weekly_hours].count(True) == 1
    assert status.weekly_hours[1].is_today is True
    assert status.weekly_hours[6].hours == "Closed"


def test_availability_status_when_closed():
    restaurant = make_restaurant()
    status = availability_status(restaurant, every_day("11:00", "22:00"), local_instant(f"{MONDAY} 08:00"))

    assert status.is_open is False
    assert status.next_opening == NextOpening(day=TODAY, time="11:00 AM")
