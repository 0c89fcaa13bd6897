"""Core data types for the cycle prediction engine.

Plain dataclasses: the engine reads them and builds fresh outputs on every
call.  Wire-format (camelCase JSON) models live in ``src.models.cycle``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class FlowLevel(str, Enum):
    light = "light"
    medium = "medium"
    heavy = "heavy"


class CyclePhase(str, Enum):
    period = "period"
    fertile = "fertile"
    pms = "pms"
    predicted_period = "predicted_period"
    normal = "normal"


class ConfidenceLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


@dataclass(frozen=True)
class PeriodRecord:
    """One logged menstrual period.

    Attributes:
        id:         Opaque identifier owned by the records service.
        start_date: First day of bleeding.
        end_date:   Last day of bleeding, or None while the period is ongoing.
        flow_level: User-entered flow; carried through, never used in math.
    """

    id: str
    start_date: date
    end_date: date | None = None
    flow_level: FlowLevel | None = None


@dataclass(frozen=True)
class UserCycleSettings:
    """User-level fallbacks used when history is too short to average."""

    average_cycle_length: int | None = None
    average_period_length: int | None = None


@dataclass(frozen=True)
class CyclePredictions:
    """Forward-looking predictions derived from period history.

    Window end dates are inclusive: a day equal to ``fertile_window_end`` or
    ``pms_end`` is inside the window.

    Attributes:
        next_period_date:     Predicted start of the next period.
        ovulation_date:       next_period_date minus the luteal phase.
        fertile_window_start: First fertile day.
        fertile_window_end:   Last fertile day (the ovulation date).
        pms_start:            First PMS day.
        pms_end:              Last PMS day (the day before the next period).
        cycle_length:         Average or fallback cycle length in days.
        period_length:        Average or fallback period length in days.
        confidence:           low / medium / high by number of observed cycles.
        cycles_used:          Number of start-to-start intervals averaged.
    """

    next_period_date: date | None
    ovulation_date: date | None
    fertile_window_start: date | None
    fertile_window_end: date | None
    pms_start: date | None
    pms_end: date | None
    cycle_length: int
    period_length: int
    confidence: ConfidenceLevel
    cycles_used: int = 0


@dataclass(frozen=True)
class DayInfo:
    date: date
    phase: CyclePhase
    confidence: ConfidenceLevel

    @property
    def is_period(self) -> bool:
        return self.phase is CyclePhase.period

    @property
    def is_fertile(self) -> bool:
        return self.phase is CyclePhase.fertile

    @property
    def is_pms(self) -> bool:
        return self.phase is CyclePhase.pms

    @property
    def is_predicted(self) -> bool:
        return self.phase in (
            CyclePhase.predicted_period,
            CyclePhase.fertile,
            CyclePhase.pms,
        )


@dataclass(frozen=True)
class PeriodPosition:
    """Where a date sits inside a logged period."""

    day_number: int
    day_label: str
    period_length: int

    @property
    def is_start(self) -> bool:
        return self.day_number == 1

    @property
    def is_end(self) -> bool:
        return self.day_number == self.period_length

    @property
    def is_middle(self) -> bool:
        return 1 < self.day_number < self.period_length
