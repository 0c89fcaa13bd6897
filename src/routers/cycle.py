"""Cycle prediction endpoints: predictions, day details, calendar, dashboard,
and period logging."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncGenerator

from fastapi import APIRouter, HTTPException, Query

from src.cycle.calendar import calendar_marks, cycle_status, day_strip, phase_note
from src.cycle.classifier import classify_day
from src.cycle.config_loader import CycleConfig
from src.cycle.models import CyclePredictions, PeriodRecord, UserCycleSettings
from src.cycle.period_log import PeriodOverlapError, moved_period, new_period_for_day
from src.cycle.position import find_period_for_day, period_position_info
from src.cycle.predictor import CyclePredictor
from src.dependencies import EngineConfig, Records, Today
from src.models.cycle import (
    CalendarRead,
    CycleStatusRead,
    DayDetailRead,
    DayInfoRead,
    LogPeriodRequest,
    MovePeriodRequest,
    PeriodRead,
    PredictionsRead,
    calendar_mark_read,
    cycle_status_read,
    day_info_read,
    position_read,
)
from src.services.records_api import (
    RecordsAPIError,
    RecordsAuthError,
    RecordsClient,
    RecordsUnavailableError,
)

router = APIRouter(prefix="/cycle", tags=["cycle"])
logger = logging.getLogger("lunara.cycle.api")

MAX_CALENDAR_DAYS = 366


@asynccontextmanager
async def _records_errors() -> AsyncGenerator[None, None]:
    """Translate records-service failures into HTTP errors."""
    try:
        yield
    except RecordsAuthError as exc:
        raise HTTPException(status_code=401, detail=exc.detail) from exc
    except RecordsUnavailableError as exc:
        raise HTTPException(status_code=503, detail=exc.detail) from exc
    except RecordsAPIError as exc:
        if exc.status_code == 404:
            raise HTTPException(status_code=404, detail="Record not found") from exc
        raise HTTPException(status_code=502, detail=exc.detail) from exc


async def _load(
    records: RecordsClient,
) -> tuple[list[PeriodRecord], UserCycleSettings | None]:
    async with _records_errors():
        periods, settings = await asyncio.gather(
            records.get_periods(), records.get_settings()
        )
    return periods, settings


async def _predict(
    records: RecordsClient, config: CycleConfig, today: date
) -> tuple[list[PeriodRecord], UserCycleSettings | None, CyclePredictions]:
    periods, settings = await _load(records)
    predictions = CyclePredictor(config).predict(periods, settings, today)
    return periods, settings, predictions


@router.get("/predictions", response_model=PredictionsRead)
async def get_predictions(
    records: Records,
    config: EngineConfig,
    clock: Today,
    today: date | None = Query(default=None),
) -> Any:
    _, _, predictions = await _predict(records, config, today or clock)
    return PredictionsRead.from_predictions(predictions)


@router.get("/days/{day}", response_model=DayDetailRead)
async def get_day(
    day: date,
    records: Records,
    config: EngineConfig,
    clock: Today,
    today: date | None = Query(default=None),
) -> Any:
    periods, _, predictions = await _predict(records, config, today or clock)
    info = classify_day(day, periods, predictions)
    period = find_period_for_day(day, periods, predictions.period_length)
    return DayDetailRead(
        day=day_info_read(info),
        note=phase_note(info.phase),
        period_position=position_read(
            period_position_info(day, periods, predictions.period_length)
        ),
        period_id=period.id if period else None,
    )


@router.get("/calendar", response_model=CalendarRead)
async def get_calendar(
    records: Records,
    config: EngineConfig,
    clock: Today,
    start: date | None = Query(default=None),
    days: int | None = Query(default=None, ge=1, le=MAX_CALENDAR_DAYS),
    today: date | None = Query(default=None),
) -> Any:
    reference = today or clock
    periods, _, predictions = await _predict(records, config, reference)
    first = start or reference
    span = days or config.calendar_horizon_days
    marks = calendar_marks(first, span, periods, predictions)
    return CalendarRead(
        start=first,
        days=span,
        predictions=PredictionsRead.from_predictions(predictions),
        marks=[calendar_mark_read(m) for m in marks],
    )


@router.get("/strip", response_model=list[DayInfoRead])
async def get_strip(
    records: Records,
    config: EngineConfig,
    clock: Today,
    days: int | None = Query(default=None, ge=1, le=MAX_CALENDAR_DAYS),
    today: date | None = Query(default=None),
) -> Any:
    reference = today or clock
    periods, _, predictions = await _predict(records, config, reference)
    strip = day_strip(reference, days or config.strip_days, periods, predictions)
    return [day_info_read(info) for info in strip]


@router.get("/today", response_model=CycleStatusRead)
async def get_today_status(
    records: Records,
    config: EngineConfig,
    clock: Today,
    today: date | None = Query(default=None),
) -> Any:
    reference = today or clock
    periods, _, predictions = await _predict(records, config, reference)
    return cycle_status_read(cycle_status(reference, periods, predictions))


@router.post("/periods", response_model=PeriodRead, status_code=201)
async def log_period(body: LogPeriodRequest, records: Records, config: EngineConfig) -> Any:
    periods, settings = await _load(records)
    try:
        draft = new_period_for_day(body.day, periods, settings, body.flow_level, config)
    except PeriodOverlapError as exc:
        logger.info("Rejected period starting %s: overlaps %s", body.day, exc.existing.id)
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    async with _records_errors():
        created = await records.create_period(draft)
    return PeriodRead.model_validate(created)


@router.patch("/periods/{period_id}", response_model=PeriodRead)
async def move_period(period_id: str, body: MovePeriodRequest, records: Records) -> Any:
    periods, _ = await _load(records)
    period = next((p for p in periods if p.id == period_id), None)
    if period is None:
        raise HTTPException(status_code=404, detail="Period not found")

    async with _records_errors():
        updated = await records.update_period(period_id, moved_period(period, body.start_date))
    return PeriodRead.model_validate(updated)


@router.delete("/periods/{period_id}", status_code=204)
async def delete_period(period_id: str, records: Records) -> None:
    async with _records_errors():
        await records.delete_period(period_id)
