"""Pydantic models for period records, settings, and prediction responses.

Inbound models validate payloads from the records service; outbound models
shape what the API returns to the mobile client.
"""

from __future__ import annotations

from datetime import date, tzinfo

from pydantic import Field, field_validator

from src.cycle.calendar import CalendarMark, CycleStatus
from src.cycle.dates import parse_calendar_date
from src.cycle.models import (
    ConfidenceLevel,
    CyclePhase,
    CyclePredictions,
    DayInfo,
    FlowLevel,
    PeriodPosition,
    PeriodRecord,
    UserCycleSettings,
)
from src.models.base import LunaraBase


# ---------- Records service payloads ----------

class PeriodPayload(LunaraBase):
    """A period as returned by the records service (ISO-8601 date strings)."""

    id: str
    start_date: str
    end_date: str | None = None
    flow_level: FlowLevel | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _must_be_iso(cls, value: str | None) -> str | None:
        if value is not None:
            parse_calendar_date(value)
        return value

    def to_record(self, tz: tzinfo | None = None) -> PeriodRecord:
        return PeriodRecord(
            id=self.id,
            start_date=parse_calendar_date(self.start_date, tz),
            end_date=parse_calendar_date(self.end_date, tz) if self.end_date else None,
            flow_level=self.flow_level,
        )


class SettingsPayload(LunaraBase):
    average_cycle_length: int | None = None
    average_period_length: int | None = None

    def to_settings(self) -> UserCycleSettings:
        return UserCycleSettings(
            average_cycle_length=self.average_cycle_length,
            average_period_length=self.average_period_length,
        )


class PeriodWrite(LunaraBase):
    """Body sent to the records service when creating or updating a period."""

    start_date: str
    end_date: str | None = None
    flow_level: FlowLevel | None = None


# ---------- API requests ----------

class LogPeriodRequest(LunaraBase):
    day: date
    flow_level: FlowLevel = FlowLevel.medium


class MovePeriodRequest(LunaraBase):
    start_date: date


# ---------- API responses ----------

class PredictionsRead(LunaraBase):
    next_period_date: date | None
    ovulation_date: date | None
    fertile_window_start: date | None
    fertile_window_end: date | None
    pms_start: date | None
    pms_end: date | None
    cycle_length: int
    period_length: int
    confidence: ConfidenceLevel
    cycles_used: int

    @classmethod
    def from_predictions(cls, p: CyclePredictions) -> PredictionsRead:
        return cls.model_validate(p)


class DayInfoRead(LunaraBase):
    date: date
    phase: CyclePhase
    confidence: ConfidenceLevel
    is_period: bool
    is_fertile: bool
    is_pms: bool
    is_predicted: bool


class PeriodPositionRead(LunaraBase):
    day_number: int
    day_label: str
    period_length: int
    is_start: bool
    is_middle: bool
    is_end: bool


class DayDetailRead(LunaraBase):
    day: DayInfoRead
    note: str
    period_position: PeriodPositionRead | None = None
    period_id: str | None = None


class CalendarMarkRead(LunaraBase):
    date: date
    marks: list[str]
    muted: bool = False


class CalendarRead(LunaraBase):
    start: date
    days: int
    predictions: PredictionsRead
    marks: list[CalendarMarkRead] = Field(default_factory=list)


class CycleStatusRead(LunaraBase):
    date: date
    cycle_day: int
    phase_name: str
    phase_display_name: str
    note: str
    day_info: DayInfoRead
    days_until_next_period: int | None = None
    period_position: PeriodPositionRead | None = None


class PeriodRead(LunaraBase):
    id: str
    start_date: date
    end_date: date | None = None
    flow_level: FlowLevel | None = None


def day_info_read(info: DayInfo) -> DayInfoRead:
    return DayInfoRead.model_validate(info)


def position_read(position: PeriodPosition | None) -> PeriodPositionRead | None:
    return PeriodPositionRead.model_validate(position) if position else None


def calendar_mark_read(mark: CalendarMark) -> CalendarMarkRead:
    return CalendarMarkRead.model_validate(mark)


def cycle_status_read(status: CycleStatus) -> CycleStatusRead:
    return CycleStatusRead.model_validate(status)
