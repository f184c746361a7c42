"""
Grace Policy - decides whether a finished season still protects its crops.

A season instance (e.g. "the Spring of Year 2") protects crops native to it
until grace_days(season) days after its last day. The day-end pass asks two
questions about the upcoming date:

- Is ANY recent season still in grace? If so, the farm is made exempt from
  the host's own season wipe and this engine decides crop by crop.
- Is a specific crop's native season still in grace?

Only the last MAX_LOOKBACK_SEASONS instances are examined. Windows of
PERMANENT_GRACE_DAYS or longer are treated as never expiring, so nothing
configurable can reach further back than that.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from ..config import GraceConfig
from ..constants import MAX_LOOKBACK_SEASONS, SEASON_DAYS
from ..gamedate import (
    CalendarDate,
    Season,
    add_days,
    date_from_day_count,
    season_start_date,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeasonInstance:
    """One concrete, already finished season."""
    season: Season
    end: CalendarDate


class GracePolicy:
    """Applies a GraceConfig to calendar dates."""

    def __init__(self, config: GraceConfig, max_lookback: int = MAX_LOOKBACK_SEASONS):
        self.config = config
        self.max_lookback = max_lookback

    def is_season_grace_active(
        self,
        as_of: CalendarDate,
        season_end: CalendarDate,
        season: Season,
    ) -> bool:
        """True if the instance of season ending on season_end still covers as_of."""
        if self.config.is_permanent(season):
            return True
        deadline = add_days(season_end, self.config.grace_days(season))
        return as_of <= deadline

    def previous_instances(
        self,
        as_of: CalendarDate,
        max_lookback: Optional[int] = None,
    ) -> Iterator[SeasonInstance]:
        """
        Yield the season instances that ended before as_of, newest first.

        Stops early at the epoch: in the first season of a save there is
        nothing to look back on.
        """
        if max_lookback is None:
            max_lookback = self.max_lookback
        end_total = season_start_date(as_of).total_days - 1
        for _ in range(max_lookback):
            if end_total < 1:
                return
            end = date_from_day_count(end_total)
            yield SeasonInstance(season=end.season, end=end)
            end_total -= SEASON_DAYS

    def any_grace_active(
        self,
        as_of: CalendarDate,
        max_lookback: Optional[int] = None,
    ) -> bool:
        """True if any recent season instance is still in grace on as_of."""
        for instance in self.previous_instances(as_of, max_lookback):
            if self.is_season_grace_active(as_of, instance.end, instance.season):
                logger.debug(f"{instance.season} (ended {instance.end}) still in grace on {as_of}")
                return True
        return False

    def is_season_protected(self, as_of: CalendarDate, candidate: Season) -> bool:
        """True if a finished instance of candidate is still in grace on as_of."""
        for instance in self.previous_instances(as_of):
            if instance.season != candidate:
                continue
            if self.is_season_grace_active(as_of, instance.end, instance.season):
                return True
        return False
