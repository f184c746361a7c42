"""
Crop catalog - growth data for common crops.

Mirrors the game's crop data closely enough for offline simulation.
Format: name -> (seasons, phase_days, regrow_after_harvest)
phase_days excludes the final "ready" phase; regrow -1 = single harvest.
"""

from typing import Dict, List, Optional, Tuple

from ..gamedate import Season

SPRING, SUMMER, FALL = Season.SPRING, Season.SUMMER, Season.FALL

CROP_DATA: Dict[str, Tuple[Tuple[Season, ...], List[int], int]] = {
    # Spring
    "Parsnip": ((SPRING,), [1, 1, 1, 1], -1),
    "Potato": ((SPRING,), [1, 1, 1, 2, 1], -1),
    "Cauliflower": ((SPRING,), [1, 2, 4, 4, 1], -1),
    "Green Bean": ((SPRING,), [1, 1, 1, 3, 4], 3),
    "Strawberry": ((SPRING,), [1, 1, 2, 2, 2], 4),
    "Coffee Bean": ((SPRING, SUMMER), [1, 2, 2, 3, 2], 2),

    # Summer
    "Melon": ((SUMMER,), [1, 2, 3, 3, 3], -1),
    "Blueberry": ((SUMMER,), [1, 3, 3, 4, 2], 4),
    "Tomato": ((SUMMER,), [2, 2, 2, 2, 3], 4),
    "Hot Pepper": ((SUMMER,), [1, 1, 1, 1, 1], 3),
    "Corn": ((SUMMER, FALL), [2, 3, 3, 3, 3], 4),
    "Wheat": ((SUMMER, FALL), [1, 1, 1, 1], -1),

    # Fall
    "Pumpkin": ((FALL,), [1, 2, 3, 4, 3], -1),
    "Cranberries": ((FALL,), [1, 2, 1, 1, 2], 5),
    "Grape": ((FALL,), [1, 1, 2, 3, 3], 3),
    "Eggplant": ((FALL,), [1, 1, 1, 1, 1], 5),

    # Multi-season
    "Ancient Fruit": ((SPRING, SUMMER, FALL), [2, 7, 7, 7, 5], 7),
}


def lookup(name: str) -> Optional[Tuple[Tuple[Season, ...], List[int], int]]:
    """Case-insensitive catalog lookup."""
    wanted = name.strip().lower()
    for crop_name, data in CROP_DATA.items():
        if crop_name.lower() == wanted:
            return data
    return None
