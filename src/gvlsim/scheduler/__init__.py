"""Lock contention scheduler module."""

from ..metrics.models import SegmentState, TimelineSegment
from .contention_scheduler import (
    ContentionScheduler,
    InvalidInputShape,
    SimulationResult,
    simulate,
)
from .models import ThreadState

__all__ = [
    "ContentionScheduler",
    "InvalidInputShape",
    "SimulationResult",
    "SegmentState",
    "TimelineSegment",
    "ThreadState",
    "simulate",
]
