"""Cycle prediction engine.

Averages start-to-start intervals from the user's period history, projects
the next period forward from the end of the most recent one, and derives
the ovulation, fertile, and PMS windows from it.

The reference date is an explicit argument; nothing here reads the clock.
Callers holding a result across midnight must recompute.
"""

from __future__ import annotations

import logging
from datetime import date

from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.dates import add_days, days_between, inclusive_length, round_half_up
from src.cycle.models import (
    ConfidenceLevel,
    CyclePredictions,
    PeriodRecord,
    UserCycleSettings,
)

logger = logging.getLogger("lunara.cycle.predictor")


class CyclePredictor:
    """Predict the next period and its surrounding windows.

    Usage::

        predictor = CyclePredictor()
        predictions = predictor.predict(periods, settings, today=date(2024, 1, 10))
        print(predictions.next_period_date, predictions.confidence)
    """

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()

    def predict(
        self,
        periods: list[PeriodRecord],
        settings: UserCycleSettings | None,
        today: date,
    ) -> CyclePredictions:
        """Generate predictions from period history.

        Args:
            periods:  Logged periods in any order.  Never mutated.
            settings: User fallbacks, or None.
            today:    Reference date; the next period is never before it.

        Returns:
            CyclePredictions.  With no history every date is None and
            confidence is low.
        """
        if not periods:
            return CyclePredictions(
                next_period_date=None,
                ovulation_date=None,
                fertile_window_start=None,
                fertile_window_end=None,
                pms_start=None,
                pms_end=None,
                cycle_length=self.fallback_cycle_length(settings),
                period_length=self.fallback_period_length(settings),
                confidence=ConfidenceLevel.low,
            )

        ordered = sorted(periods, key=lambda p: p.start_date, reverse=True)
        last = ordered[0]

        intervals = [
            abs(days_between(newer.start_date, older.start_date))
            for newer, older in zip(ordered, ordered[1:])
        ]
        cycle_length = self.average_cycle_length(intervals, settings)
        period_length = self.average_period_length(ordered, settings)

        if last.end_date is not None:
            anchor = last.end_date
        else:
            anchor = add_days(last.start_date, period_length)

        next_period = add_days(anchor, cycle_length)
        if next_period < today:
            elapsed = days_between(anchor, today) // cycle_length
            next_period = add_days(anchor, (elapsed + 1) * cycle_length)

        cfg = self._config
        ovulation = add_days(next_period, -cfg.luteal_phase_days)
        confidence = self.confidence_for(len(intervals))

        logger.debug(
            "Predicted next period %s (cycle=%d, period=%d, samples=%d, %s)",
            next_period, cycle_length, period_length, len(intervals), confidence.value,
        )

        return CyclePredictions(
            next_period_date=next_period,
            ovulation_date=ovulation,
            fertile_window_start=add_days(ovulation, -cfg.fertile_days_before_ovulation),
            fertile_window_end=ovulation,
            pms_start=add_days(next_period, -cfg.pms_days),
            pms_end=add_days(next_period, -1),
            cycle_length=cycle_length,
            period_length=period_length,
            confidence=confidence,
            cycles_used=len(intervals),
        )

    # ------------------------------------------------------------------
    # Averages and fallbacks
    # ------------------------------------------------------------------

    def fallback_cycle_length(self, settings: UserCycleSettings | None) -> int:
        value = settings.average_cycle_length if settings else None
        return value if value and value > 0 else self._config.default_cycle_length

    def fallback_period_length(self, settings: UserCycleSettings | None) -> int:
        value = settings.average_period_length if settings else None
        return value if value and value > 0 else self._config.default_period_length

    def average_cycle_length(
        self, intervals: list[int], settings: UserCycleSettings | None
    ) -> int:
        """Rounded mean of start-to-start intervals.

        A single period gives no interval, so the user's setting (or the
        default) is used.  A zero mean, e.g. two records sharing a start
        date, also falls back to the default.
        """
        if not intervals:
            return self.fallback_cycle_length(settings)
        average = round_half_up(sum(intervals) / len(intervals))
        return average if average > 0 else self._config.default_cycle_length

    def average_period_length(
        self, periods: list[PeriodRecord], settings: UserCycleSettings | None
    ) -> int:
        """Rounded mean inclusive period length; open periods count as the fallback."""
        fallback = self.fallback_period_length(settings)
        lengths = [
            inclusive_length(p.start_date, p.end_date) if p.end_date is not None else fallback
            for p in periods
        ]
        if not lengths:
            return fallback
        average = round_half_up(sum(lengths) / len(lengths))
        return average if average > 0 else fallback

    def confidence_for(self, samples: int) -> ConfidenceLevel:
        if samples >= self._config.high_min_cycles:
            return ConfidenceLevel.high
        if samples >= self._config.medium_min_cycles and samples > 0:
            return ConfidenceLevel.medium
        return ConfidenceLevel.low


def predict_cycle(
    periods: list[PeriodRecord],
    settings: UserCycleSettings | None,
    today: date,
    config: CycleConfig | None = None,
) -> CyclePredictions:
    """Functional shortcut for ``CyclePredictor(config).predict(...)``."""
    return CyclePredictor(config).predict(periods, settings, today)
