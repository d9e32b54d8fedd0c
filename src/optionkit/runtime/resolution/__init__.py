"""Resolution & cache engine: per-signature state, single-flight loads."""

from .resolver import OptionResolver
from .state import DEFAULT_SIGNATURE, ResolutionPhase, ResolutionState, make_signature

__all__ = [
    "OptionResolver",
    "ResolutionState",
    "ResolutionPhase",
    "DEFAULT_SIGNATURE",
    "make_signature",
]
