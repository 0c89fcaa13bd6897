"""Tests for calendar marks, the day strip, and the dashboard status."""

from __future__ import annotations

from datetime import date, timedelta

from src.cycle.calendar import (
    PHASE_NOTES,
    calendar_marks,
    cycle_status,
    day_strip,
    phase_note,
)
from src.cycle.config_loader import CycleConfig
from src.cycle.models import (
    ConfidenceLevel,
    CyclePhase,
    CyclePredictions,
    PeriodRecord,
)
from src.cycle.predictor import predict_cycle
from src.cycle.tests.conftest import TEST_TODAY, make_period


def marks_by_date(marks) -> dict:
    return {m.date: m for m in marks}


class TestCalendarMarks:
    def test_logged_and_predicted_days_marked(
        self, single_period: list[PeriodRecord], single_period_predictions: CyclePredictions
    ) -> None:
        marks = marks_by_date(
            calendar_marks(date(2024, 1, 1), 40, single_period, single_period_predictions)
        )
        for day in range(1, 6):
            assert marks[date(2024, 1, day)].marks == ["period"]
        assert marks[date(2024, 1, 16)].marks == ["fertile"]
        assert marks[date(2024, 1, 30)].marks == ["pms"]
        assert marks[date(2024, 2, 4)].marks == ["predicted"]
        assert date(2024, 1, 10) not in marks

    def test_low_confidence_prediction_is_muted(
        self, single_period: list[PeriodRecord], single_period_predictions: CyclePredictions
    ) -> None:
        marks = marks_by_date(
            calendar_marks(date(2024, 2, 1), 10, single_period, single_period_predictions)
        )
        assert marks[date(2024, 2, 4)].muted is True
        assert marks[date(2024, 2, 2)].muted is False  # pms day

    def test_medium_confidence_prediction_not_muted(
        self, three_periods: list[PeriodRecord], cycle_config: CycleConfig
    ) -> None:
        predictions = predict_cycle(three_periods, None, TEST_TODAY, cycle_config)
        assert predictions.confidence is ConfidenceLevel.medium
        marks = marks_by_date(calendar_marks(date(2024, 2, 4), 1, three_periods, predictions))
        assert marks[date(2024, 2, 4)].marks == ["predicted"]
        assert marks[date(2024, 2, 4)].muted is False

    def test_logged_day_keeps_window_mark(
        self, single_period_predictions: CyclePredictions
    ) -> None:
        periods = [make_period(date(2024, 1, 20), date(2024, 1, 22))]
        marks = marks_by_date(
            calendar_marks(date(2024, 1, 20), 3, periods, single_period_predictions)
        )
        assert marks[date(2024, 1, 21)].marks == ["period", "fertile"]
        assert marks[date(2024, 1, 22)].marks == ["period"]

    def test_empty_range(
        self, single_period: list[PeriodRecord], single_period_predictions: CyclePredictions
    ) -> None:
        assert calendar_marks(date(2024, 1, 1), 0, single_period, single_period_predictions) == []

    def test_no_history_has_no_marks(self, empty_predictions: CyclePredictions) -> None:
        assert calendar_marks(date(2024, 1, 1), 90, [], empty_predictions) == []


class TestDayStrip:
    def test_strip_starts_today(
        self, single_period: list[PeriodRecord], single_period_predictions: CyclePredictions
    ) -> None:
        strip = day_strip(TEST_TODAY, 30, single_period, single_period_predictions)
        assert len(strip) == 30
        assert strip[0].date == TEST_TODAY
        assert strip[-1].date == TEST_TODAY + timedelta(days=29)
        assert strip[6].phase is CyclePhase.fertile  # 2024-01-16


class TestCycleStatus:
    def test_on_period(
        self, single_period: list[PeriodRecord], single_period_predictions: CyclePredictions
    ) -> None:
        status = cycle_status(date(2024, 1, 3), single_period, single_period_predictions)
        assert status.cycle_day == 3
        assert status.phase_name == "Period Phase"
        assert status.phase_display_name == "Periods"
        assert status.period_position is not None
        assert status.period_position.day_label == "3rd day"
        assert status.days_until_next_period is None
        assert status.note == PHASE_NOTES[CyclePhase.period]

    def test_fertile_reads_as_ovulation(
        self, single_period: list[PeriodRecord], single_period_predictions: CyclePredictions
    ) -> None:
        status = cycle_status(date(2024, 1, 18), single_period, single_period_predictions)
        assert status.phase_display_name == "Ovulation"
        assert status.period_position is None

    def test_pms_reads_as_luteal(
        self, single_period: list[PeriodRecord], single_period_predictions: CyclePredictions
    ) -> None:
        status = cycle_status(date(2024, 1, 31), single_period, single_period_predictions)
        assert status.phase_name == "Luteal Phase"

    def test_other_days_read_as_follicular(
        self, single_period: list[PeriodRecord], single_period_predictions: CyclePredictions
    ) -> None:
        status = cycle_status(TEST_TODAY, single_period, single_period_predictions)
        assert status.phase_name == "Follicular Phase"
        assert status.cycle_day == 10
        assert status.days_until_next_period == 25

        predicted = cycle_status(date(2024, 2, 5), single_period, single_period_predictions)
        assert predicted.phase_display_name == "Follicular"
        assert predicted.day_info.phase is CyclePhase.predicted_period
        assert predicted.note == phase_note(CyclePhase.predicted_period)

    def test_countdown_cleared_once_predicted_start_arrives(
        self, single_period: list[PeriodRecord], single_period_predictions: CyclePredictions
    ) -> None:
        eve = cycle_status(date(2024, 2, 3), single_period, single_period_predictions)
        assert eve.days_until_next_period == 1

        due = cycle_status(date(2024, 2, 4), single_period, single_period_predictions)
        assert due.days_until_next_period is None

    def test_no_history(self, empty_predictions: CyclePredictions) -> None:
        status = cycle_status(TEST_TODAY, [], empty_predictions)
        assert status.cycle_day == 1
        assert status.days_until_next_period is None
        assert status.phase_display_name == "Follicular"


class TestPhaseNotes:
    def test_every_phase_has_a_note(self) -> None:
        for phase in CyclePhase:
            assert phase_note(phase)
