"""Rules for logging and moving periods from the calendar.

Builds the drafts the service sends to the records API; nothing here talks
to the network.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.dates import add_days, inclusive_length
from src.cycle.models import FlowLevel, PeriodRecord, UserCycleSettings
from src.cycle.position import find_period_for_day
from src.cycle.predictor import CyclePredictor


class PeriodOverlapError(ValueError):
    """Raised when a new period would start inside an already logged one."""

    def __init__(self, day: date, existing: PeriodRecord) -> None:
        self.day = day
        self.existing = existing
        super().__init__(f"{day.isoformat()} is already part of logged period {existing.id}")


@dataclass(frozen=True)
class PeriodDraft:
    """A period not yet stored by the records service."""

    start_date: date
    end_date: date | None
    flow_level: FlowLevel | None = None


def new_period_for_day(
    day: date,
    periods: list[PeriodRecord],
    settings: UserCycleSettings | None,
    flow: FlowLevel = FlowLevel.medium,
    config: CycleConfig | None = None,
) -> PeriodDraft:
    """Draft a period starting on ``day`` with the user's usual length.

    An ongoing period is taken to last the averaged period length, the
    same span the classifier gives it.

    Args:
        day:      First day of the new period.
        periods:  Already logged periods.
        settings: User settings; the average period length sets the end.
        flow:     Initial flow level.
        config:   Engine config for the default period length.

    Returns:
        PeriodDraft spanning ``average_period_length`` days.

    Raises:
        PeriodOverlapError: If ``day`` already falls inside a logged period.
    """
    cfg = config or get_cycle_config()
    length = settings.average_period_length if settings else None
    if not length or length <= 0:
        length = cfg.default_period_length

    assumed_length = CyclePredictor(cfg).average_period_length(periods, settings)
    existing = find_period_for_day(day, periods, assumed_length)
    if existing is not None:
        raise PeriodOverlapError(day, existing)

    return PeriodDraft(start_date=day, end_date=add_days(day, length - 1), flow_level=flow)


def moved_period(period: PeriodRecord, new_start: date) -> PeriodDraft:
    """Move a period to ``new_start`` keeping its inclusive length.

    An ongoing period is treated as a single day, so it becomes a closed
    one-day period at the new start.
    """
    end = period.end_date or period.start_date
    length = inclusive_length(period.start_date, end)
    return PeriodDraft(
        start_date=new_start,
        end_date=add_days(new_start, length - 1),
        flow_level=period.flow_level,
    )
