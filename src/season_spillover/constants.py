"""
Centralized constants for Season Spillover.

Calendar values mirror the host game: four 28-day seasons per year.
"""

# =============================================================================
# CALENDAR
# =============================================================================
SEASON_DAYS = 28
SEASONS_PER_YEAR = 4
YEAR_DAYS = SEASON_DAYS * SEASONS_PER_YEAR

# =============================================================================
# GRACE WINDOWS
# =============================================================================
# How many finished season instances the day-end pass looks back over.
MAX_LOOKBACK_SEASONS = 3

# A grace window this long (or longer) never expires. Tied to the lookback:
# any shorter window ends inside the last instance the lookback can see.
PERMANENT_GRACE_DAYS = MAX_LOOKBACK_SEASONS * SEASON_DAYS

# Shared grace length (season-units) at which the toggle config goes permanent
PERMANENT_GRACE_SEASONS = MAX_LOOKBACK_SEASONS

# Defaults when no config file is present
DEFAULT_GRACE_DAYS = {
    "spring": 28,
    "summer": 28,
    "fall": 28,
    "winter": 0,
}

DEFAULT_SEASON_TOGGLES = {
    "spring": True,
    "summer": True,
    "fall": True,
    "winter": False,
}

# =============================================================================
# HOST BRIDGE
# =============================================================================
DEFAULT_BRIDGE_URL = "http://localhost:8790"
DEFAULT_BRIDGE_TIMEOUT = 5.0
FARM_LOCATION = "Farm"

# Crops with this regrow value are single-harvest
SINGLE_HARVEST = -1
