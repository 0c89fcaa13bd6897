"""Calendar, day-strip, and dashboard views built on the classifier.

These are the read models behind the calendar screen (dots per date), the
circular "next 30 days" widget, and the home dashboard card.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from src.cycle.classifier import classify_day
from src.cycle.dates import add_days, days_between
from src.cycle.models import (
    ConfidenceLevel,
    CyclePhase,
    CyclePredictions,
    DayInfo,
    PeriodPosition,
    PeriodRecord,
)
from src.cycle.position import period_position_info

logger = logging.getLogger("lunara.cycle.calendar")

PHASE_NOTES: dict[CyclePhase, str] = {
    CyclePhase.period: "Rest and be gentle with yourself. Your body is working hard.",
    CyclePhase.fertile: "You're in your fertile window! Energy may be higher.",
    CyclePhase.pms: "Premenstrual phase: mood changes are normal and valid.",
    CyclePhase.predicted_period: "Predicted period day. Listen to what your body needs.",
    CyclePhase.normal: "You're doing great! Keep tracking to know your cycle better.",
}

# (phase name, display name) shown on the dashboard for each phase
_DASHBOARD_PHASES: dict[CyclePhase, tuple[str, str]] = {
    CyclePhase.period: ("Period Phase", "Periods"),
    CyclePhase.fertile: ("Ovulation Phase", "Ovulation"),
    CyclePhase.pms: ("Luteal Phase", "Luteal"),
}
_FOLLICULAR = ("Follicular Phase", "Follicular")


def phase_note(phase: CyclePhase) -> str:
    return PHASE_NOTES.get(phase, PHASE_NOTES[CyclePhase.normal])


@dataclass
class CalendarMark:
    """Marks for one calendar date.

    Attributes:
        date:  The marked date.
        marks: Ordered mark keys: 'period', 'fertile', 'pms', 'predicted'.
        muted: True when a 'predicted' mark comes from a low-confidence
               prediction (rendered grey).
    """

    date: date
    marks: list[str] = field(default_factory=list)
    muted: bool = False


@dataclass
class CycleStatus:
    """Dashboard summary for a single day."""

    date: date
    cycle_day: int
    phase_name: str
    phase_display_name: str
    note: str
    day_info: DayInfo
    days_until_next_period: int | None = None
    period_position: PeriodPosition | None = None


def calendar_marks(
    start: date,
    days: int,
    periods: list[PeriodRecord],
    predictions: CyclePredictions,
) -> list[CalendarMark]:
    """Compute calendar marks for ``days`` dates starting at ``start``.

    Logged period days are always marked, and keep any fertile/PMS window
    mark that also covers them.  Predicted marks appear only on dates the
    classifier labels as a predicted period.

    Returns:
        Marks for every date in range that has at least one, in date order.
    """
    result: list[CalendarMark] = []
    for offset in range(max(days, 0)):
        day = add_days(start, offset)
        info = classify_day(day, periods, predictions)
        mark = CalendarMark(date=day)

        if info.is_period:
            mark.marks.append("period")
            if _within(day, predictions.fertile_window_start, predictions.fertile_window_end):
                mark.marks.append("fertile")
            if _within(day, predictions.pms_start, predictions.pms_end):
                mark.marks.append("pms")
        elif info.is_fertile:
            mark.marks.append("fertile")
        elif info.is_pms:
            mark.marks.append("pms")
        elif info.phase is CyclePhase.predicted_period:
            mark.marks.append("predicted")
            mark.muted = info.confidence is ConfidenceLevel.low

        if mark.marks:
            result.append(mark)

    logger.debug("Marked %d of %d days from %s", len(result), days, start)
    return result


def day_strip(
    today: date,
    days: int,
    periods: list[PeriodRecord],
    predictions: CyclePredictions,
) -> list[DayInfo]:
    """Classify ``days`` consecutive dates starting with ``today``."""
    return [classify_day(add_days(today, i), periods, predictions) for i in range(max(days, 0))]


def cycle_status(
    today: date,
    periods: list[PeriodRecord],
    predictions: CyclePredictions,
) -> CycleStatus:
    """Build the home dashboard summary for ``today``.

    Cycle day counts from the most recent period start (day 1); with no
    history it is 1.  Any day outside a logged period, the fertile window,
    and the PMS window reads as follicular.

    The countdown to the next period is None while a logged period is under
    way and once the predicted start is no longer in the future.
    """
    info = classify_day(today, periods, predictions)

    cycle_day = 1
    if periods:
        last_start = max(p.start_date for p in periods)
        cycle_day = days_between(last_start, today) + 1

    phase_name, display_name = _DASHBOARD_PHASES.get(info.phase, _FOLLICULAR)

    days_until = None
    if info.phase is not CyclePhase.period and predictions.next_period_date is not None:
        remaining = days_between(today, predictions.next_period_date)
        days_until = remaining if remaining > 0 else None

    return CycleStatus(
        date=today,
        cycle_day=cycle_day,
        phase_name=phase_name,
        phase_display_name=display_name,
        note=phase_note(info.phase),
        day_info=info,
        days_until_next_period=days_until,
        period_position=period_position_info(today, periods, predictions.period_length),
    )


def _within(day: date, start: date | None, end: date | None) -> bool:
    return start is not None and end is not None and start <= day <= end
