"""Locate a date inside a logged period ("3rd day of 5")."""

from __future__ import annotations

from datetime import date

from src.cycle.config_loader import get_cycle_config
from src.cycle.dates import add_days, days_between
from src.cycle.models import PeriodPosition, PeriodRecord


def effective_end(period: PeriodRecord, assumed_length: int) -> date:
    """Last bleeding day of a period.

    An ongoing period (no end date) is taken to last ``assumed_length`` days.
    """
    if period.end_date is not None:
        return period.end_date
    return add_days(period.start_date, max(assumed_length, 1) - 1)


def find_period_for_day(
    day: date, periods: list[PeriodRecord], assumed_length: int
) -> PeriodRecord | None:
    """Return the logged period containing ``day``, or None.

    A record whose end precedes its start contains no days.
    """
    for period in periods:
        if period.start_date <= day <= effective_end(period, assumed_length):
            return period
    return None


def ordinal(n: int) -> str:
    """English ordinal: 1st, 2nd, 3rd, 4th, 11th, 12th, 13th, 21st, 112th."""
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def period_position_info(
    day: date,
    periods: list[PeriodRecord],
    assumed_length: int | None = None,
) -> PeriodPosition | None:
    """Describe where ``day`` falls within its logged period.

    Args:
        day:            Date to locate.
        periods:        Logged periods.
        assumed_length: Length of an ongoing period; defaults to the
                        configured default period length.

    Returns:
        PeriodPosition, or None when ``day`` is in no period.
    """
    if assumed_length is None:
        assumed_length = get_cycle_config().default_period_length

    period = find_period_for_day(day, periods, assumed_length)
    if period is None:
        return None

    end = effective_end(period, assumed_length)
    day_number = days_between(period.start_date, day) + 1
    return PeriodPosition(
        day_number=day_number,
        day_label=f"{ordinal(day_number)} day",
        period_length=days_between(period.start_date, end) + 1,
    )
