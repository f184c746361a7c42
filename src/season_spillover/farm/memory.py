"""
In-memory host: a farm, its soil and its crops held in plain dataclasses.

Used by tests and by the `simulate` command. Growth follows the game's
rules closely enough to drive multi-day scenarios:

- Each growth phase lasts phase_days[i] days; the last phase is "ready".
- Picking a regrowing crop marks it fully grown and starts a countdown of
  regrow_after_harvest days until it is ready again.
- Picking a single-harvest crop removes it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from ..constants import SINGLE_HARVEST
from ..gamedate import CalendarDate, Season, add_days
from . import catalog
from .inspector import is_harvestable

logger = logging.getLogger(__name__)

Tile = Tuple[int, int]


@dataclass(eq=False)
class MemoryCrop:
    """A crop planted in the in-memory farm."""
    name: str
    native_seasons: FrozenSet[Season]
    phase_days: List[int] = field(default_factory=lambda: [1, 1, 1, 1])
    regrow_after_harvest: int = SINGLE_HARVEST
    current_phase: int = 0
    day_of_current_phase: int = 0
    fully_grown: bool = False
    dead: bool = False
    harvests: int = 0

    @property
    def total_phases(self) -> int:
        # Growth phases plus the final "ready" phase
        return len(self.phase_days) + 1

    def kill(self) -> None:
        if not self.dead:
            logger.debug(f"{self.name} killed")
        self.dead = True

    def grow_day(self) -> None:
        """Advance one night of growth."""
        if self.dead:
            return
        final = self.total_phases - 1
        if self.current_phase >= final:
            if self.fully_grown and self.day_of_current_phase > 0:
                self.day_of_current_phase -= 1
            return
        self.day_of_current_phase += 1
        if self.day_of_current_phase >= self.phase_days[self.current_phase]:
            self.current_phase += 1
            self.day_of_current_phase = 0

    def harvest(self) -> bool:
        """Pick the crop if it is ready. Returns True if something was picked."""
        if self.dead or not is_harvestable(self):
            return False
        self.harvests += 1
        if self.regrow_after_harvest > SINGLE_HARVEST:
            self.fully_grown = True
            self.day_of_current_phase = self.regrow_after_harvest
        else:
            # Single-harvest crops leave the soil when picked
            self.dead = True
        return True

    @classmethod
    def from_catalog(cls, name: str, **overrides: Any) -> "MemoryCrop":
        data = catalog.lookup(name)
        if data is None:
            raise KeyError(f"Unknown crop: {name}")
        seasons, phase_days, regrow = data
        fields = {
            "name": name,
            "native_seasons": frozenset(seasons),
            "phase_days": list(phase_days),
            "regrow_after_harvest": regrow,
        }
        fields.update(overrides)
        return cls(**fields)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MemoryCrop":
        """Build a crop from a scenario entry; catalog data fills the gaps."""
        name = data.get("name", "Crop")
        overrides: Dict[str, Any] = {}
        if "seasons" in data:
            overrides["native_seasons"] = frozenset(Season.parse(s) for s in data["seasons"])
        if "phase_days" in data:
            overrides["phase_days"] = [int(d) for d in data["phase_days"]]
        if "regrow" in data:
            overrides["regrow_after_harvest"] = int(data["regrow"])
        if "phase" in data:
            overrides["current_phase"] = int(data["phase"])
        if "day_of_phase" in data:
            overrides["day_of_current_phase"] = int(data["day_of_phase"])
        if "fully_grown" in data:
            overrides["fully_grown"] = bool(data["fully_grown"])

        if catalog.lookup(name) is not None:
            return cls.from_catalog(name, **overrides)
        if "native_seasons" not in overrides:
            raise ValueError(f"Crop {name!r} is not in the catalog and has no seasons")
        return cls(name=name, **overrides)


@dataclass
class SoilTile:
    """Tilled soil, possibly holding a crop."""
    crop: Optional[MemoryCrop] = None


@dataclass
class MemoryFarm:
    terrain_features: Dict[Tile, Any] = field(default_factory=dict)
    exempt_from_seasonal_decay: bool = False

    def plant(self, tile: Tile, crop: MemoryCrop) -> MemoryCrop:
        self.terrain_features[tile] = SoilTile(crop=crop)
        return crop

    def crops(self) -> Dict[Tile, MemoryCrop]:
        return {
            tile: feature.crop
            for tile, feature in self.terrain_features.items()
            if getattr(feature, "crop", None) is not None
        }

    def remove_dead(self) -> List[Tuple[Tile, MemoryCrop]]:
        """Clear dead crops out of their soil, as the host does overnight."""
        removed = []
        for tile, feature in self.terrain_features.items():
            crop = getattr(feature, "crop", None)
            if crop is not None and crop.dead:
                feature.crop = None
                removed.append((tile, crop))
        return removed


@dataclass
class MemoryWorld:
    farm: MemoryFarm = field(default_factory=MemoryFarm)

    def get_farm(self) -> MemoryFarm:
        return self.farm


@dataclass
class MemoryClock:
    date: CalendarDate

    def current_date(self) -> CalendarDate:
        return self.date

    def current_season(self) -> Season:
        return self.date.season

    def advance(self, days: int = 1) -> CalendarDate:
        self.date = add_days(self.date, days)
        return self.date
