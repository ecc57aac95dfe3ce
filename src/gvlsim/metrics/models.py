"""Data models for timelines and contention metrics."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List


class SegmentState(Enum):
    """Classification of a thread during one tick."""

    EXECUTING = "cpu"       # Holds the lock and runs a CPU phase
    WAITING_IO = "io"       # Runs an IO phase with the lock released
    BLOCKED = "blocked"     # Wants the lock but another thread holds it


@dataclass(frozen=True)
class TimelineSegment:
    """A maximal run of ticks during which a thread's state did not change."""

    state: SegmentState
    start_time: int
    duration: int

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration

    def extended(self) -> "TimelineSegment":
        """Copy of this segment covering one more tick."""
        return TimelineSegment(self.state, self.start_time, self.duration + 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "start_time": self.start_time,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class ThreadMetrics:
    """Time accounting for a single simulated thread, in ticks."""

    thread_id: int
    profile_key: str
    blocked: int
    executing: int
    io: int
    active: int  # executing + io
    total: int   # blocked + active

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AggregateMetrics:
    """Totals across all threads of a run."""

    total_blocked: int = 0
    total_active: int = 0
    total_time: int = 0
    percent_blocked: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SimulationMetrics:
    per_thread: List[ThreadMetrics] = field(default_factory=list)
    aggregate: AggregateMetrics = field(default_factory=AggregateMetrics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "per_thread": [m.to_dict() for m in self.per_thread],
            "aggregate": self.aggregate.to_dict(),
        }
