"""Tests for logging and moving periods."""

from __future__ import annotations

from datetime import date

import pytest

from src.cycle.classifier import classify_day
from src.cycle.config_loader import CycleConfig
from src.cycle.models import CyclePhase, FlowLevel, PeriodRecord, UserCycleSettings
from src.cycle.period_log import PeriodOverlapError, moved_period, new_period_for_day
from src.cycle.predictor import predict_cycle


class TestNewPeriod:
    def test_uses_settings_length(
        self, single_period: list[PeriodRecord], cycle_config: CycleConfig
    ) -> None:
        settings = UserCycleSettings(average_cycle_length=28, average_period_length=6)
        draft = new_period_for_day(date(2024, 2, 10), single_period, settings, config=cycle_config)
        assert draft.start_date == date(2024, 2, 10)
        assert draft.end_date == date(2024, 2, 15)
        assert draft.flow_level is FlowLevel.medium

    def test_defaults_to_five_days(
        self, single_period: list[PeriodRecord], cycle_config: CycleConfig
    ) -> None:
        draft = new_period_for_day(
            date(2024, 2, 10), single_period, None, FlowLevel.heavy, cycle_config
        )
        assert draft.end_date == date(2024, 2, 14)
        assert draft.flow_level is FlowLevel.heavy

    def test_rejects_day_inside_logged_period(
        self, single_period: list[PeriodRecord], cycle_config: CycleConfig
    ) -> None:
        with pytest.raises(PeriodOverlapError) as exc_info:
            new_period_for_day(date(2024, 1, 3), single_period, None, config=cycle_config)
        assert exc_info.value.existing.id == "p1"
        assert "2024-01-03" in str(exc_info.value)

    def test_ongoing_period_spans_history_average(self, cycle_config: CycleConfig) -> None:
        """An open period covers as many days as the classifier says it does."""
        periods = [
            PeriodRecord(id="nov", start_date=date(2023, 11, 1), end_date=date(2023, 11, 9)),
            PeriodRecord(id="dec", start_date=date(2023, 12, 1), end_date=date(2023, 12, 9)),
            PeriodRecord(id="jan", start_date=date(2024, 1, 1)),
        ]
        settings = UserCycleSettings(average_cycle_length=30, average_period_length=3)
        predictions = predict_cycle(periods, settings, date(2024, 1, 5), cycle_config)
        assert predictions.period_length == 7
        assert classify_day(date(2024, 1, 5), periods, predictions).phase is CyclePhase.period

        with pytest.raises(PeriodOverlapError) as exc_info:
            new_period_for_day(date(2024, 1, 5), periods, settings, config=cycle_config)
        assert exc_info.value.existing.id == "jan"

        draft = new_period_for_day(date(2024, 1, 8), periods, settings, config=cycle_config)
        assert draft.end_date == date(2024, 1, 10)


class TestMovePeriod:
    def test_keeps_length(self) -> None:
        period = PeriodRecord(
            id="p1",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 5),
            flow_level=FlowLevel.light,
        )
        draft = moved_period(period, date(2024, 1, 10))
        assert draft.start_date == date(2024, 1, 10)
        assert draft.end_date == date(2024, 1, 14)
        assert draft.flow_level is FlowLevel.light

    def test_ongoing_period_becomes_single_day(self) -> None:
        period = PeriodRecord(id="p1", start_date=date(2024, 1, 1))
        draft = moved_period(period, date(2024, 1, 3))
        assert draft.start_date == draft.end_date == date(2024, 1, 3)
