"""
Configuration for the grace policy.

Two shapes of grace setting exist in the wild:

- "days": an independent grace length in days for each season.
- "seasons": a per-season switch ("crops may spill over INTO this season")
  plus one shared grace length counted in whole seasons.

Both are exposed through GraceConfig.grace_days(season), the number of days
after a season instance ends during which that season's crops are still
protected. A value of PERMANENT_GRACE_DAYS or more never expires.

Settings are read from YAML and validated with pydantic; anything malformed
is rejected here so the policy code can assume sane, non-negative values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import (
    DEFAULT_BRIDGE_TIMEOUT,
    DEFAULT_BRIDGE_URL,
    DEFAULT_GRACE_DAYS,
    DEFAULT_SEASON_TOGGLES,
    MAX_LOOKBACK_SEASONS,
    PERMANENT_GRACE_DAYS,
    SEASON_DAYS,
)
from .gamedate import Season

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./config/settings.yaml"


class ConfigError(ValueError):
    """Raised when a settings file cannot be turned into a valid config."""


class SuspiciousRule(Enum):
    """Which crops the day-start scan watches for the bonus-harvest rule."""
    HARVESTABLE = "harvestable"          # ready to pick right now
    NOT_FULLY_GROWN = "not_fully_grown"  # anything not yet marked fully grown


# =============================================================================
# Grace configs
# =============================================================================

class GraceConfig:
    """Per-season grace duration, in days."""

    def grace_days(self, season: Season) -> int:
        raise NotImplementedError

    def is_permanent(self, season: Season) -> bool:
        return self.grace_days(season) >= PERMANENT_GRACE_DAYS

    def max_grace_days(self) -> int:
        return max(self.grace_days(s) for s in Season)

    def describe(self) -> Dict[str, str]:
        """Human-readable grace per season, for logs and the CLI."""
        out = {}
        for season in Season:
            if self.is_permanent(season):
                out[season.value] = "permanent"
            else:
                out[season.value] = f"{self.grace_days(season)} days"
        return out


@dataclass(frozen=True)
class DurationGraceConfig(GraceConfig):
    """Independent grace length in days for each season."""
    days: Dict[Season, int] = field(default_factory=dict)

    def __post_init__(self):
        for season, value in self.days.items():
            if value < 0:
                raise ConfigError(f"Grace for {season} must be >= 0, got {value}")

    def grace_days(self, season: Season) -> int:
        return self.days.get(season, 0)


@dataclass(frozen=True)
class SeasonToggleGraceConfig(GraceConfig):
    """
    Per-season switch plus a shared grace length in seasons.

    enabled[S] means crops from earlier seasons may keep growing during S.
    A season's crops are protected for as many whole seasons as directly
    follow it with the switch on, capped at grace_period. Three or more
    seasons is permanent.
    """
    enabled: Dict[Season, bool] = field(default_factory=dict)
    grace_period: int = 0

    def __post_init__(self):
        if self.grace_period < 0:
            raise ConfigError(f"grace_period must be >= 0, got {self.grace_period}")

    def grace_days(self, season: Season) -> int:
        limit = min(self.grace_period, MAX_LOOKBACK_SEASONS)
        covered = 0
        following = season.next()
        while covered < limit and self.enabled.get(following, False):
            covered += 1
            following = following.next()
        return covered * SEASON_DAYS


# =============================================================================
# File models
# =============================================================================

def _season_keys(values: Dict[str, object]) -> Dict[str, object]:
    # Season.parse raises ValueError, which pydantic reports as a field error
    return {Season.parse(key).value: value for key, value in values.items()}


class GraceSection(BaseModel):
    mode: Literal["days", "seasons"] = "days"
    days: Dict[str, int] = Field(default_factory=dict)
    seasons: Dict[str, bool] = Field(default_factory=dict)
    grace_period: int = Field(default=1, ge=0)

    @field_validator("days")
    @classmethod
    def _check_days(cls, value: Dict[str, int]) -> Dict[str, int]:
        value = _season_keys(value)
        for season, days in value.items():
            if days < 0:
                raise ValueError(f"grace days for {season} must be >= 0, got {days}")
        return value

    @field_validator("seasons")
    @classmethod
    def _check_seasons(cls, value: Dict[str, bool]) -> Dict[str, bool]:
        return _season_keys(value)

    def to_grace_config(self) -> GraceConfig:
        if self.mode == "seasons":
            toggles = dict(DEFAULT_SEASON_TOGGLES)
            toggles.update(self.seasons)
            return SeasonToggleGraceConfig(
                enabled={Season(k): v for k, v in toggles.items()},
                grace_period=self.grace_period,
            )
        days = dict(DEFAULT_GRACE_DAYS)
        days.update(self.days)
        return DurationGraceConfig(days={Season(k): v for k, v in days.items()})


class WatchSection(BaseModel):
    rule: SuspiciousRule = SuspiciousRule.HARVESTABLE


class BridgeSection(BaseModel):
    url: str = DEFAULT_BRIDGE_URL
    timeout: float = Field(default=DEFAULT_BRIDGE_TIMEOUT, gt=0)


class LoggingSection(BaseModel):
    level: str = "INFO"


class SettingsFile(BaseModel):
    grace: GraceSection = Field(default_factory=GraceSection)
    watch: WatchSection = Field(default_factory=WatchSection)
    bridge: BridgeSection = Field(default_factory=BridgeSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)


# =============================================================================
# Settings
# =============================================================================

@dataclass
class Settings:
    """Configuration loaded from settings.yaml."""

    grace: GraceConfig = field(
        default_factory=lambda: GraceSection().to_grace_config()
    )
    watch_rule: SuspiciousRule = SuspiciousRule.HARVESTABLE

    # Bridge
    bridge_url: str = DEFAULT_BRIDGE_URL
    bridge_timeout: float = DEFAULT_BRIDGE_TIMEOUT

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Settings":
        """Validate a parsed settings document."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Settings must be a mapping, got {type(data).__name__}")
        try:
            parsed = SettingsFile.model_validate(data)
            grace = parsed.grace.to_grace_config()
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e

        return cls(
            grace=grace,
            watch_rule=parsed.watch.rule,
            bridge_url=parsed.bridge.url,
            bridge_timeout=parsed.bridge.timeout,
            log_level=parsed.logging.level.upper(),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> "Settings":
        """Load settings from a YAML file. A missing file gives the defaults."""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            logger.warning(f"Config file not found: {path}, using defaults")
            return cls()
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {path}: {e}") from e

        settings = cls.from_dict(data)
        logger.info(f"Loaded grace config from {path}: {settings.grace.describe()}")
        return settings
