"""
Day Transition Controller - runs the grace policy at each day boundary.

Per day cycle:
1. day_started: scan every soil tile and watch suspicious crops (regrowing,
   out of season, still able to give a harvest).
2. day_ending: look at TOMORROW. If any recent season is still in grace,
   make the farm exempt from the host's season wipe and do the wipe here
   instead: kill each crop the policy no longer protects, then kill each
   watched crop that was picked today (one bonus harvest, then death).
   With no grace active, the exemption flag is kept off and the host's own
   logic runs. The watch set is dropped once the pass is over.
3. saving: clear the exemption flag so it never reaches the save file.

Handlers never raise. If the day-end pass fails halfway, the crops it has
not reached yet simply survive the night.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..gamedate import CalendarDate, add_days
from ..farm.inspector import CropInspector
from ..farm.models import Clock, Crop, World, crop_at, iter_planted_tiles
from ..policy.grace import GracePolicy
from .events import LifecycleEvents

logger = logging.getLogger(__name__)


Tile = Any


@dataclass
class WatchedCrop:
    """A crop seen at day start, with the state it was in then."""
    tile: Tile
    crop: Crop
    was_fully_grown: bool
    day_of_current_phase: int

    @classmethod
    def snapshot(cls, tile: Tile, crop: Crop) -> "WatchedCrop":
        return cls(tile, crop, crop.fully_grown, crop.day_of_current_phase)

    def picked_since(self, current: Crop) -> bool:
        """True if current (the crop now on this tile) was harvested since the snapshot."""
        if not current.fully_grown:
            return False
        # First picking marks it fully grown; later ones restart the regrow countdown
        return not self.was_fully_grown or current.day_of_current_phase > self.day_of_current_phase


@dataclass
class DayEndReport:
    """Outcome of one day-end pass."""
    date: Optional[CalendarDate]      # the day being entered
    grace_active: bool = False
    killed: List[Crop] = field(default_factory=list)
    bonus_killed: List[Crop] = field(default_factory=list)
    failed: bool = False
    error: Optional[str] = None

    @property
    def total_killed(self) -> int:
        return len(self.killed) + len(self.bonus_killed)


class DayTransitionController:
    """Owns the watch set and the day-end kill pass."""

    def __init__(self, world: World, clock: Clock, inspector: CropInspector):
        self.world = world
        self.clock = clock
        self.inspector = inspector
        self.policy: GracePolicy = inspector.policy
        # tile -> crop watched since day start
        self.watch_set: Dict[Tile, WatchedCrop] = {}
        self.last_report: Optional[DayEndReport] = None

    @classmethod
    def from_settings(cls, settings: Settings, world: World, clock: Clock) -> "DayTransitionController":
        policy = GracePolicy(settings.grace)
        return cls(world, clock, CropInspector(policy, settings.watch_rule))

    # -------------------------------------------------------------------------
    # Event wiring
    # -------------------------------------------------------------------------

    def attach(self, events: LifecycleEvents) -> None:
        events.subscribe("day_started", self.on_day_started)
        events.subscribe("day_ending", self.on_day_ending)
        events.subscribe("saving", self.on_saving)

    def detach(self, events: LifecycleEvents) -> None:
        events.unsubscribe("day_started", self.on_day_started)
        events.unsubscribe("day_ending", self.on_day_ending)
        events.unsubscribe("saving", self.on_saving)

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def watched_crops(self) -> List[Crop]:
        return [entry.crop for entry in self.watch_set.values()]

    def on_day_started(self) -> List[Crop]:
        """Rebuild the watch set from a full scan of the farm."""
        self.watch_set = {}
        try:
            season = self.clock.current_season()
            farm = self.world.get_farm()
            self.watch_set = {
                tile: WatchedCrop.snapshot(tile, crop)
                for tile, crop in iter_planted_tiles(farm)
                if self.inspector.is_suspicious(crop, season)
            }
        except Exception as e:
            logger.error(f"Day-start scan failed, watching nothing today: {e}")
            self.watch_set = {}
            return []

        if self.watch_set:
            logger.info(f"Watching {len(self.watch_set)} out-of-season crop(s) for a last harvest")
        return self.watched_crops()

    def on_day_ending(self) -> DayEndReport:
        """Kill the crops that should not live into tomorrow."""
        try:
            self.last_report = self._day_end_pass()
        finally:
            self.watch_set = {}
        return self.last_report

    def _day_end_pass(self) -> DayEndReport:
        try:
            upcoming = add_days(self.clock.current_date(), 1)
        except Exception as e:
            logger.error(f"Could not read the game date, skipping day-end pass: {e}")
            return DayEndReport(date=None, failed=True, error=str(e))

        report = DayEndReport(date=upcoming)
        try:
            farm = self.world.get_farm()
            if not self.policy.any_grace_active(upcoming):
                logger.debug(f"No grace window covers {upcoming}; leaving crops to the host")
                if farm.exempt_from_seasonal_decay:
                    farm.exempt_from_seasonal_decay = False
                return report

            report.grace_active = True
            farm.exempt_from_seasonal_decay = True

            # The host wipe is off tonight, so do it here for unprotected crops
            killed_tiles = set()
            for tile, crop in iter_planted_tiles(farm):
                if self.inspector.should_kill(crop, upcoming):
                    crop.kill()
                    report.killed.append(crop)
                    killed_tiles.add(tile)

            # Watched crops that were picked today get no further harvests.
            # Look each one up again: the host may hand out fresh objects.
            for tile, entry in self.watch_set.items():
                if tile in killed_tiles:
                    continue
                current = crop_at(farm, tile)
                if current is None or not entry.picked_since(current):
                    continue
                current.kill()
                report.bonus_killed.append(current)
        except Exception as e:
            logger.error(f"Day-end pass for {upcoming} failed, remaining crops survive: {e}")
            report.failed = True
            report.error = str(e)
            return report

        logger.info(
            f"Entering {upcoming} under grace: killed {len(report.killed)} unprotected, "
            f"{len(report.bonus_killed)} after a last harvest"
        )
        return report

    def on_saving(self) -> None:
        """Clear the exemption flag before the world is written."""
        try:
            self.world.get_farm().exempt_from_seasonal_decay = False
        except Exception as e:
            logger.error(f"Could not clear the farm exemption flag before saving: {e}")
