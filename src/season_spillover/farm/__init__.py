"""
Farm access and crop classification.

Provides:
- Crop / SoilFeature / Farm / World / Clock: host capability interfaces
- CropInspector: harvestable, suspicious and should-kill checks
- Memory*: an in-memory host for tests and offline simulation
"""

from .inspector import CropInspector, is_harvestable, is_regrowing
from .memory import MemoryClock, MemoryCrop, MemoryFarm, MemoryWorld, SoilTile
from .models import Clock, Crop, Farm, SoilFeature, World, crop_at, iter_planted_crops, iter_planted_tiles

__all__ = [
    # Host interfaces
    "Clock",
    "Crop",
    "Farm",
    "SoilFeature",
    "World",
    "crop_at",
    "iter_planted_crops",
    "iter_planted_tiles",
    # Classification
    "CropInspector",
    "is_harvestable",
    "is_regrowing",
    # In-memory host
    "MemoryClock",
    "MemoryCrop",
    "MemoryFarm",
    "MemoryWorld",
    "SoilTile",
]
