"""Day/save lifecycle: the event source and the controller that reacts to it."""

from .controller import DayEndReport, DayTransitionController
from .events import EVENT_NAMES, LifecycleEvents

__all__ = [
    "DayEndReport",
    "DayTransitionController",
    "EVENT_NAMES",
    "LifecycleEvents",
]
