"""Grace-window policy: which finished seasons still protect their crops."""

from .grace import GracePolicy, SeasonInstance

__all__ = [
    "GracePolicy",
    "SeasonInstance",
]
