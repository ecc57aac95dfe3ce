"""Data models for workload profiles."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class PhaseKind(Enum):
    """Kind of work a phase performs."""

    CPU = "cpu"  # Needs the lock to make progress
    IO = "io"    # Runs with the lock released


@dataclass(frozen=True)
class Phase:
    """A contiguous unit of work with a fixed duration in ticks."""

    kind: PhaseKind
    duration: int

    def __post_init__(self) -> None:
        if not isinstance(self.kind, PhaseKind):
            raise ValueError(f"Invalid phase kind: {self.kind!r}")
        if isinstance(self.duration, bool) or not isinstance(self.duration, int):
            raise ValueError(f"Phase duration must be an integer, got {self.duration!r}")
        if self.duration <= 0:
            raise ValueError(f"Phase duration must be positive, got {self.duration}")

    @property
    def needs_lock(self) -> bool:
        return self.kind is PhaseKind.CPU


@dataclass(frozen=True)
class RequestProfile:
    """A named, ordered sequence of phases describing one class of request."""

    key: str
    name: str
    phases: Tuple[Phase, ...]

    def __post_init__(self) -> None:
        # Accept any iterable of phases but store an immutable tuple
        object.__setattr__(self, "phases", tuple(self.phases))
        if not self.phases:
            raise ValueError(f"Profile {self.key} must have at least one phase")

    @property
    def total_duration(self) -> int:
        """Ticks needed to run the profile with no lock contention."""
        return sum(phase.duration for phase in self.phases)

    @property
    def cpu_duration(self) -> int:
        return sum(p.duration for p in self.phases if p.kind is PhaseKind.CPU)

    @property
    def io_duration(self) -> int:
        return sum(p.duration for p in self.phases if p.kind is PhaseKind.IO)
