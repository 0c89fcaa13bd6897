"""Per-day cycle phase classifier.

Phases are assigned by an ordered chain of guards; the first guard whose
predicate matches decides the phase:

1. logged period         (always high confidence, beats every prediction)
2. predicted period
3. fertile window
4. PMS window
5. normal                (high confidence)

The predicted period is checked before the fertile and PMS windows because
the windows can overlap it when cycles are very short.
"""

from __future__ import annotations

from datetime import date
from typing import Callable

from src.cycle.dates import add_days
from src.cycle.models import (
    ConfidenceLevel,
    CyclePhase,
    CyclePredictions,
    DayInfo,
    PeriodRecord,
)
from src.cycle.position import find_period_for_day

# (phase, predicate(day, periods, predictions), uses prediction confidence)
Guard = tuple[CyclePhase, Callable[[date, list[PeriodRecord], CyclePredictions], bool], bool]


def _within(day: date, start: date | None, end: date | None) -> bool:
    return start is not None and end is not None and start <= day <= end


def _in_logged_period(day: date, periods: list[PeriodRecord], p: CyclePredictions) -> bool:
    return find_period_for_day(day, periods, p.period_length) is not None


def _in_predicted_period(day: date, periods: list[PeriodRecord], p: CyclePredictions) -> bool:
    if p.next_period_date is None:
        return False
    last_day = add_days(p.next_period_date, p.period_length - 1)
    return _within(day, p.next_period_date, last_day)


def _in_fertile_window(day: date, periods: list[PeriodRecord], p: CyclePredictions) -> bool:
    return _within(day, p.fertile_window_start, p.fertile_window_end)


def _in_pms_window(day: date, periods: list[PeriodRecord], p: CyclePredictions) -> bool:
    return _within(day, p.pms_start, p.pms_end)


GUARDS: tuple[Guard, ...] = (
    (CyclePhase.period, _in_logged_period, False),
    (CyclePhase.predicted_period, _in_predicted_period, True),
    (CyclePhase.fertile, _in_fertile_window, True),
    (CyclePhase.pms, _in_pms_window, True),
)


def classify_day(
    day: date,
    periods: list[PeriodRecord],
    predictions: CyclePredictions,
) -> DayInfo:
    """Label a calendar date with exactly one cycle phase.

    Args:
        day:         Date to classify.
        periods:     Logged periods (ground truth).
        predictions: Output of ``predict_cycle`` for the same periods.

    Returns:
        DayInfo whose flags mirror the matched phase.
    """
    for phase, matches, predicted in GUARDS:
        if matches(day, periods, predictions):
            confidence = predictions.confidence if predicted else ConfidenceLevel.high
            return DayInfo(date=day, phase=phase, confidence=confidence)
    return DayInfo(date=day, phase=CyclePhase.normal, confidence=ConfidenceLevel.high)
