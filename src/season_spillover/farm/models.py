"""
Host-side interfaces the engine reads and acts on.

The host game owns the farm, its soil tiles and its crops. The engine only
needs a few read accessors and one action (Crop.kill), so each collaborator
is described as a narrow Protocol. Anything with the right attributes works:
the in-memory host in farm.memory, the SMAPI bridge adapter, or a test fake.
"""

from typing import Any, Collection, Iterator, Mapping, Optional, Protocol, Tuple

from ..gamedate import CalendarDate, Season


class Crop(Protocol):
    regrow_after_harvest: int         # -1 = single harvest
    native_seasons: Collection[Season]
    current_phase: int
    total_phases: int
    fully_grown: bool
    day_of_current_phase: int

    def kill(self) -> None: ...


class SoilFeature(Protocol):
    """Tilled soil; the only terrain feature the engine cares about."""
    crop: Optional[Crop]


class Farm(Protocol):
    terrain_features: Mapping[Any, Any]   # tile -> terrain feature
    exempt_from_seasonal_decay: bool


class World(Protocol):
    def get_farm(self) -> Farm: ...


class Clock(Protocol):
    def current_date(self) -> CalendarDate: ...

    def current_season(self) -> Season: ...


def iter_planted_crops(farm: Farm) -> Iterator[Crop]:
    """Yield every crop planted in the farm's soil. Empty soil is skipped."""
    for feature in farm.terrain_features.values():
        crop = getattr(feature, "crop", None)
        if crop is not None:
            yield crop


def iter_planted_tiles(farm: Farm) -> Iterator[Tuple[Any, Crop]]:
    """Yield (tile, crop) for every planted soil tile."""
    for tile, feature in farm.terrain_features.items():
        crop = getattr(feature, "crop", None)
        if crop is not None:
            yield tile, crop


def crop_at(farm: Farm, tile: Any) -> Optional[Crop]:
    """The crop currently planted at tile, if any."""
    return getattr(farm.terrain_features.get(tile), "crop", None)
