"""
Season Spillover - lets planted crops outlive their season.

At each day boundary the engine decides which out-of-season crops may keep
growing for a configurable grace period and which must die.

Provides:
- Season, CalendarDate: 4 x 28-day calendar arithmetic
- GraceConfig and Settings: grace windows loaded from YAML
- GracePolicy: is a finished season still in grace?
- CropInspector: harvestable / suspicious / should-kill checks
- DayTransitionController: the day-start, day-end and save handlers
"""

from .config import (
    ConfigError,
    DurationGraceConfig,
    GraceConfig,
    SeasonToggleGraceConfig,
    Settings,
    SuspiciousRule,
)
from .farm.inspector import CropInspector
from .gamedate import CalendarDate, Season, add_days, date_from_day_count, season_end_date
from .lifecycle import DayEndReport, DayTransitionController, LifecycleEvents
from .policy import GracePolicy

__version__ = "0.1.0"

__all__ = [
    # Calendar
    "CalendarDate",
    "Season",
    "add_days",
    "date_from_day_count",
    "season_end_date",
    # Configuration
    "ConfigError",
    "DurationGraceConfig",
    "GraceConfig",
    "SeasonToggleGraceConfig",
    "Settings",
    "SuspiciousRule",
    # Policy and classification
    "GracePolicy",
    "CropInspector",
    # Lifecycle
    "DayEndReport",
    "DayTransitionController",
    "LifecycleEvents",
]
