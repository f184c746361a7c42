"""
Offline simulation - replays day cycles against the in-memory host.

Each simulated day runs the same sequence as the game:

    day_started -> (player harvests) -> day_ending -> host overnight
    -> saving -> next morning

"Host overnight" stands in for the game's own season handling: unless the
farm is marked exempt, every crop not native to the new day's season dies.
Crops then grow one day and dead crops are cleared from their soil.

Scenario files are YAML:

    start: {season: spring, day: 26, year: 1}
    days: 5
    auto_harvest: true
    crops:
      - {name: Green Bean, tile: [3, 4], phase: 5}
      - {name: Parsnip, tile: [3, 5]}
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .config import Settings
from .farm.inspector import is_harvestable
from .farm.memory import MemoryClock, MemoryCrop, MemoryFarm, MemoryWorld, Tile
from .gamedate import CalendarDate
from .lifecycle.controller import DayEndReport, DayTransitionController
from .lifecycle.events import LifecycleEvents

logger = logging.getLogger(__name__)


class ScenarioError(ValueError):
    """A scenario file is missing data or has bad values."""


@dataclass
class Scenario:
    start: CalendarDate
    crops: List[Tuple[Tile, MemoryCrop]] = field(default_factory=list)
    days: int = 1
    auto_harvest: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Scenario":
        if not isinstance(data, dict):
            raise ScenarioError("Scenario must be a mapping")
        try:
            start_data = data.get("start") or {}
            start = CalendarDate.of(
                start_data.get("season", "spring"),
                int(start_data.get("day", 1)),
                int(start_data.get("year", 1)),
            )
            crops = []
            for entry in data.get("crops") or []:
                tile = tuple(entry.get("tile", (0, len(crops))))
                crops.append(((int(tile[0]), int(tile[1])), MemoryCrop.from_dict(entry)))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ScenarioError(f"Bad scenario: {e}") from e

        return cls(
            start=start,
            crops=crops,
            days=int(data.get("days", 1)),
            auto_harvest=bool(data.get("auto_harvest", False)),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Scenario":
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ScenarioError(f"Could not read scenario {path}: {e}") from e
        return cls.from_dict(data)


@dataclass
class DayLog:
    """What happened on one simulated day."""
    date: CalendarDate
    watched: List[str] = field(default_factory=list)
    harvested: List[str] = field(default_factory=list)
    report: Optional[DayEndReport] = None
    host_killed: List[str] = field(default_factory=list)
    exempt_at_save: bool = False


class Simulation:
    """Runs a scenario through the controller, one day at a time."""

    def __init__(self, scenario: Scenario, settings: Optional[Settings] = None):
        self.scenario = scenario
        self.settings = settings or Settings()
        self.farm = MemoryFarm()
        for tile, crop in scenario.crops:
            self.farm.plant(tile, crop)
        self.world = MemoryWorld(farm=self.farm)
        self.clock = MemoryClock(date=scenario.start)
        self.events = LifecycleEvents()
        self.controller = DayTransitionController.from_settings(self.settings, self.world, self.clock)
        self.controller.attach(self.events)
        self.exempt_at_save: Optional[bool] = None
        # Runs after the controller's own saving handler
        self.events.subscribe("saving", self._record_exemption)

    def _record_exemption(self) -> None:
        self.exempt_at_save = self.farm.exempt_from_seasonal_decay

    def run(self, days: Optional[int] = None) -> List[DayLog]:
        days = self.scenario.days if days is None else days
        logger.info(f"Simulating {days} day(s) from {self.clock.current_date()}")
        return [self.step() for _ in range(days)]

    def step(self) -> DayLog:
        log = DayLog(date=self.clock.current_date())

        self.events.fire_day_started()
        log.watched = [c.name for c in self.controller.watched_crops()]

        if self.scenario.auto_harvest:
            for crop in self.farm.crops().values():
                if not crop.dead and is_harvestable(crop) and crop.harvest():
                    log.harvested.append(crop.name)

        self.events.fire_day_ending()
        log.report = self.controller.last_report

        upcoming = self.clock.advance(1)
        log.host_killed = self._host_overnight(upcoming)

        self.events.fire_saving()
        log.exempt_at_save = bool(self.exempt_at_save)

        self.farm.remove_dead()
        return log

    def _host_overnight(self, today: CalendarDate) -> List[str]:
        killed = []
        for crop in self.farm.crops().values():
            if crop.dead:
                continue
            if not self.farm.exempt_from_seasonal_decay and today.season not in crop.native_seasons:
                crop.kill()
                killed.append(crop.name)
                continue
            crop.grow_day()
        return killed


def format_day(log: DayLog) -> str:
    """One-paragraph summary of a simulated day."""
    lines = [f"{log.date}:"]
    if log.watched:
        lines.append(f"  watching: {', '.join(log.watched)}")
    if log.harvested:
        lines.append(f"  harvested: {', '.join(log.harvested)}")
    report = log.report
    if report is not None and report.grace_active:
        killed = [getattr(c, "name", "?") for c in report.killed]
        bonus = [getattr(c, "name", "?") for c in report.bonus_killed]
        lines.append(f"  grace active for {report.date}")
        if killed:
            lines.append(f"  killed (out of grace): {', '.join(killed)}")
        if bonus:
            lines.append(f"  killed (after last harvest): {', '.join(bonus)}")
    if log.host_killed:
        lines.append(f"  killed by season change: {', '.join(log.host_killed)}")
    return "\n".join(lines)
