"""GVLSim: a deterministic simulator of thread contention on a global lock."""

from .scheduler import ContentionScheduler, InvalidInputShape, SimulationResult, simulate
from .workload import DEFAULT_CATALOG, UnknownProfile

__version__ = "0.1.0"

__all__ = [
    "ContentionScheduler",
    "InvalidInputShape",
    "SimulationResult",
    "UnknownProfile",
    "DEFAULT_CATALOG",
    "simulate",
]
