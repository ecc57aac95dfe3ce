"""Data models for the contention scheduler."""

from dataclasses import dataclass
from typing import Optional

from ..workload.models import Phase, PhaseKind, RequestProfile


@dataclass
class ThreadState:
    """Mutable progress record for one simulated thread.

    A thread is running while ``phase_index`` points into its profile's phase
    list, and finished once the index moves past the end. While running,
    ``executed_in_phase`` is strictly less than the current phase's duration.
    """

    thread_id: int
    profile: RequestProfile
    phase_index: int = 0
    executed_in_phase: int = 0
    waiting_since: Optional[int] = None  # Tick the thread started wanting the lock

    @property
    def finished(self) -> bool:
        return self.phase_index >= len(self.profile.phases)

    @property
    def current_phase(self) -> Optional[Phase]:
        if self.finished:
            return None
        return self.profile.phases[self.phase_index]

    @property
    def wants_lock(self) -> bool:
        phase = self.current_phase
        return phase is not None and phase.kind is PhaseKind.CPU

    def advance(self) -> None:
        """Record one tick of progress on the current phase."""
        phase = self.current_phase
        if phase is None:
            raise RuntimeError(f"Thread {self.thread_id} has already finished")

        self.executed_in_phase += 1
        if self.executed_in_phase >= phase.duration:
            self.phase_index += 1
            self.executed_in_phase = 0
