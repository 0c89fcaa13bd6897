"""Shared fixtures and builders for cycle engine tests."""

from __future__ import annotations

from datetime import date

import pytest

from src.cycle.config_loader import CycleConfig, load_cycle_config
from src.cycle.models import CyclePredictions, PeriodRecord, UserCycleSettings
from src.cycle.predictor import predict_cycle

# Reference "today" used by most scenarios
TEST_TODAY = date(2024, 1, 10)


def make_period(
    start: date, end: date | None = None, period_id: str | None = None
) -> PeriodRecord:
    return PeriodRecord(id=period_id or f"p-{start.isoformat()}", start_date=start, end_date=end)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Load the bundled cycle config for tests."""
    return load_cycle_config()


# ---------------------------------------------------------------------------
# History fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def single_period() -> list[PeriodRecord]:
    """One closed five-day period starting 2024-01-01."""
    return [make_period(date(2024, 1, 1), date(2024, 1, 5), "p1")]


@pytest.fixture
def three_periods() -> list[PeriodRecord]:
    """Three periods, 31 and 29 days apart (average 30)."""
    return [
        make_period(date(2024, 1, 1), date(2024, 1, 5), "p3"),
        make_period(date(2023, 12, 1), date(2023, 12, 5), "p2"),
        make_period(date(2023, 11, 2), date(2023, 11, 6), "p1"),
    ]


@pytest.fixture
def thirty_day_settings() -> UserCycleSettings:
    return UserCycleSettings(average_cycle_length=30, average_period_length=5)


@pytest.fixture
def single_period_predictions(
    single_period: list[PeriodRecord],
    thirty_day_settings: UserCycleSettings,
    cycle_config: CycleConfig,
) -> CyclePredictions:
    """Next period 2024-02-04, ovulation 2024-01-21, low confidence."""
    return predict_cycle(single_period, thirty_day_settings, TEST_TODAY, cycle_config)


@pytest.fixture
def empty_predictions(cycle_config: CycleConfig) -> CyclePredictions:
    return predict_cycle([], None, TEST_TODAY, cycle_config)
