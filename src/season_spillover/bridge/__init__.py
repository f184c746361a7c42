"""HTTP adapter for driving the engine against the running game."""

from .smapi import BridgeCrop, BridgeError, BridgeFarm, BridgeSoil, SMAPIBridgeClient

__all__ = [
    "BridgeCrop",
    "BridgeError",
    "BridgeFarm",
    "BridgeSoil",
    "SMAPIBridgeClient",
]
