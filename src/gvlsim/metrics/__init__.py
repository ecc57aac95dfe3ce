"""Timeline metrics derivation and reporting module."""

from .collector import MetricsCollector
from .models import (
    AggregateMetrics,
    SegmentState,
    SimulationMetrics,
    ThreadMetrics,
    TimelineSegment,
)

__all__ = [
    "MetricsCollector",
    "SegmentState",
    "TimelineSegment",
    "ThreadMetrics",
    "AggregateMetrics",
    "SimulationMetrics",
]
