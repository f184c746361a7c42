"""
SMAPI bridge adapter - reaches the live game through the ModBridge HTTP mod.

Implements the World, Farm, Crop and Clock interfaces on top of three
endpoints:

    GET  /state        -> game time (season, day, year)
    GET  /farm/soil    -> every tilled tile on the farm and its crop
    POST /action       -> kill_crop, set_greenhouse

Every response uses the bridge envelope:
    {"success": true, "data": {...}}  or  {"success": false, "error": "..."}

Usage:
    client = SMAPIBridgeClient()      # http://localhost:8790
    farm = client.get_farm()
    today = client.current_date()
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

import httpx

from ..constants import DEFAULT_BRIDGE_TIMEOUT, DEFAULT_BRIDGE_URL, FARM_LOCATION, SINGLE_HARVEST
from ..gamedate import CalendarDate, Season

logger = logging.getLogger(__name__)


class BridgeError(RuntimeError):
    """The bridge mod could not be reached or refused a request."""


# ============================================
# DATA CLASSES - Mirror bridge models
# ============================================

@dataclass(eq=False)
class BridgeCrop:
    x: int
    y: int
    name: str
    regrow_after_harvest: int
    native_seasons: FrozenSet[Season]
    current_phase: int
    total_phases: int
    fully_grown: bool
    day_of_current_phase: int
    dead: bool = False
    client: Optional["SMAPIBridgeClient"] = field(default=None, repr=False)

    def kill(self) -> None:
        if self.dead:
            return
        if self.client is not None:
            self.client.kill_crop(self.x, self.y)
        self.dead = True


@dataclass
class BridgeSoil:
    x: int
    y: int
    crop: Optional[BridgeCrop] = None


class BridgeFarm:
    """Farm snapshot; setting the exemption flag is pushed to the game."""

    def __init__(
        self,
        client: "SMAPIBridgeClient",
        terrain_features: Dict[Tuple[int, int], BridgeSoil],
        greenhouse: bool = False,
    ):
        self._client = client
        self.terrain_features = terrain_features
        self._greenhouse = greenhouse

    @property
    def exempt_from_seasonal_decay(self) -> bool:
        return self._greenhouse

    @exempt_from_seasonal_decay.setter
    def exempt_from_seasonal_decay(self, value: bool) -> None:
        self._client.set_greenhouse(bool(value))
        self._greenhouse = bool(value)


# ============================================
# CLIENT
# ============================================

class SMAPIBridgeClient:
    """World and Clock backed by the bridge mod."""

    def __init__(
        self,
        base_url: str = DEFAULT_BRIDGE_URL,
        timeout: float = DEFAULT_BRIDGE_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self.client.close()

    def _unwrap(self, endpoint: str, resp: httpx.Response) -> Any:
        if resp.status_code != 200:
            logger.warning(f"Bridge {endpoint} HTTP {resp.status_code}")
            raise BridgeError(f"{endpoint} returned HTTP {resp.status_code}")
        result = resp.json()
        if not result.get("success"):
            logger.warning(f"Bridge {endpoint} failed: {result.get('error')}")
            raise BridgeError(f"{endpoint} failed: {result.get('error', 'unknown error')}")
        return result.get("data") or {}

    def _get(self, endpoint: str) -> Any:
        try:
            resp = self.client.get(f"{self.base_url}{endpoint}")
        except httpx.HTTPError as e:
            raise BridgeError(f"Cannot reach bridge at {self.base_url}: {e}") from e
        return self._unwrap(endpoint, resp)

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Any:
        try:
            resp = self.client.post(f"{self.base_url}{endpoint}", json=payload)
        except httpx.HTTPError as e:
            raise BridgeError(f"Cannot reach bridge at {self.base_url}: {e}") from e
        return self._unwrap(endpoint, resp)

    # ============================================
    # ACTIONS
    # ============================================

    def kill_crop(self, x: int, y: int, location: str = FARM_LOCATION) -> None:
        self._post("/action", {"action": "kill_crop", "location": location, "x": x, "y": y})
        logger.debug(f"Killed crop at ({x}, {y}) in {location}")

    def set_greenhouse(self, value: bool, location: str = FARM_LOCATION) -> None:
        self._post("/action", {"action": "set_greenhouse", "location": location, "value": value})

    # ============================================
    # WORLD / CLOCK
    # ============================================

    def get_farm(self) -> BridgeFarm:
        data = self._get("/farm/soil")
        features: Dict[Tuple[int, int], BridgeSoil] = {}
        for tile in data.get("tiles", []):
            x, y = tile.get("x", 0), tile.get("y", 0)
            crop_data = tile.get("crop")
            crop = self._parse_crop(x, y, crop_data) if crop_data else None
            features[(x, y)] = BridgeSoil(x=x, y=y, crop=crop)
        return BridgeFarm(self, features, greenhouse=bool(data.get("isGreenhouse", False)))

    def current_date(self) -> CalendarDate:
        data = self._get("/state")
        time = data.get("time", {})
        try:
            return CalendarDate.of(time["season"], int(time["day"]), int(time.get("year", 1)))
        except (KeyError, TypeError, ValueError) as e:
            raise BridgeError(f"Bad time data from bridge: {time!r}") from e

    def current_season(self) -> Season:
        return self.current_date().season

    def _parse_crop(self, x: int, y: int, data: Dict[str, Any]) -> BridgeCrop:
        seasons: List[Season] = []
        for name in data.get("seasonsToGrowIn", []):
            try:
                seasons.append(Season.parse(name))
            except ValueError:
                logger.warning(f"Ignoring unknown season {name!r} on crop at ({x}, {y})")
        return BridgeCrop(
            x=x,
            y=y,
            name=data.get("name", ""),
            regrow_after_harvest=int(data.get("regrowAfterHarvest", SINGLE_HARVEST)),
            native_seasons=frozenset(seasons),
            current_phase=int(data.get("currentPhase", 0)),
            total_phases=int(data.get("phaseCount", 1)),
            fully_grown=bool(data.get("fullyGrown", False)),
            day_of_current_phase=int(data.get("dayOfCurrentPhase", 0)),
            dead=bool(data.get("dead", False)),
            client=self,
        )
