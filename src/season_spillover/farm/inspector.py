"""
Crop Inspector - classifies crops against the season and the grace policy.

Answers three questions per crop:
- Can it be harvested right now?
- Is it "suspicious": a regrowing crop, out of its season, that could still
  give a harvest? Those are watched so they die after one bonus harvest.
- Should it be killed on a given date?
"""

import logging
from typing import Optional

from ..config import SuspiciousRule
from ..constants import SINGLE_HARVEST
from ..gamedate import CalendarDate, Season
from ..policy.grace import GracePolicy
from .models import Crop

logger = logging.getLogger(__name__)


def is_harvestable(crop: Crop) -> bool:
    """
    True if the crop is in its final phase and ready to pick.

    A first harvest is ready once the last phase is reached (fully_grown is
    still False). A regrowing crop that was already picked is ready again
    when its regrow countdown hits zero.
    """
    if crop.current_phase < crop.total_phases - 1:
        return False
    return not crop.fully_grown or crop.day_of_current_phase <= 0


def is_regrowing(crop: Crop) -> bool:
    return crop.regrow_after_harvest > SINGLE_HARVEST


class CropInspector:
    """Crop classification bound to a grace policy and a watch rule."""

    def __init__(self, policy: GracePolicy, rule: SuspiciousRule = SuspiciousRule.HARVESTABLE):
        self.policy = policy
        self.rule = rule

    def is_harvestable(self, crop: Crop) -> bool:
        return is_harvestable(crop)

    def is_suspicious(self, crop: Optional[Crop], current_season: Season) -> bool:
        """Regrowing, out of season, and still able to give a harvest."""
        if crop is None:
            return False
        if not is_regrowing(crop):
            return False
        if current_season in crop.native_seasons:
            return False
        if self.rule is SuspiciousRule.NOT_FULLY_GROWN:
            return not crop.fully_grown
        return is_harvestable(crop)

    def should_kill(self, crop: Optional[Crop], as_of: CalendarDate) -> bool:
        # Empty soil
        if crop is None:
            return False
        # In season: always safe, whatever the grace settings
        if as_of.season in crop.native_seasons:
            return False
        for season in crop.native_seasons:
            if self.policy.is_season_protected(as_of, season):
                logger.debug(f"Crop protected on {as_of}: {season} grace still active")
                return False
        return True
