"""Demand-driven exploration of a registry's dependency graph."""

from .demand import Demand, LookupFeatures
from .dispatch import FetchDispatcher, FetchOutcome
from .engine import Exploration, ExplorationResult

__all__ = [
    "Demand",
    "LookupFeatures",
    "FetchDispatcher",
    "FetchOutcome",
    "Exploration",
    "ExplorationResult",
]
