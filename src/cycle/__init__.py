"""Cycle prediction engine for Lunara.

Pure, synchronous functions over in-memory period history.  Nothing in this
package performs I/O besides loading the bundled YAML config.

Modules:
    models        — Period records, settings, predictions, day info
    dates         — Calendar-date parsing and arithmetic
    config_loader — Load/validate/hot-reload cycle_config.yaml
    predictor     — Next period, ovulation, fertile and PMS windows
    classifier    — Priority-ordered per-day phase classification
    position      — Day-of-period positions and ordinal labels
    calendar      — Calendar marks, day strip, dashboard status
    period_log    — Drafts for logging and moving periods
"""

from src.cycle.classifier import classify_day
from src.cycle.config_loader import CycleConfig, get_cycle_config
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
from src.cycle.position import period_position_info
from src.cycle.predictor import CyclePredictor, predict_cycle

__all__ = [
    "ConfidenceLevel",
    "CycleConfig",
    "CyclePhase",
    "CyclePredictions",
    "CyclePredictor",
    "DayInfo",
    "FlowLevel",
    "PeriodPosition",
    "PeriodRecord",
    "UserCycleSettings",
    "classify_day",
    "get_cycle_config",
    "period_position_info",
    "predict_cycle",
]
