"""Contention scheduler: threads sharing one global execution lock."""

import logging
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional, Sequence

from ..core import SimulationEnvironment
from ..metrics.collector import MetricsCollector
from ..metrics.models import SegmentState, SimulationMetrics, TimelineSegment
from ..workload.catalog import DEFAULT_CATALOG, WorkloadCatalog
from ..workload.models import PhaseKind
from .models import ThreadState

logger = logging.getLogger(__name__)


class InvalidInputShape(TypeError):
    """Raised when the input is not a sequence of profile key strings."""
    pass


@dataclass
class SimulationResult:
    """Timelines and metrics of one simulation run."""

    profile_keys: List[str] = field(default_factory=list)
    timelines: List[List[TimelineSegment]] = field(default_factory=list)
    metrics: SimulationMetrics = field(default_factory=SimulationMetrics)
    elapsed_ticks: int = 0  # Tick at which the last thread finished

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile_keys": list(self.profile_keys),
            "elapsed_ticks": self.elapsed_ticks,
            "timelines": [[seg.to_dict() for seg in timeline] for timeline in self.timelines],
            "metrics": self.metrics.to_dict(),
        }


class ContentionScheduler:
    """Simulates threads contending for a single lock with FIFO hand-off.

    Each tick runs five steps: release the lock if its holder went to IO or
    finished, grant a free lock to the longest-waiting CPU-bound thread,
    classify and record every live thread, advance the threads that were
    allowed to run, and move the clock forward. Blocked threads make no
    progress, which is how contention shows up as lost time.
    """

    def __init__(self, catalog: WorkloadCatalog = DEFAULT_CATALOG):
        """Initialize the scheduler.

        Args:
            catalog: Profile catalog used to resolve profile keys
        """
        self.catalog = catalog
        self.metrics_collector = MetricsCollector()

    def simulate(self, profile_keys: Sequence[str]) -> SimulationResult:
        """Run one simulation to completion.

        Args:
            profile_keys: One catalog key per simulated thread; the position
                in the sequence is the thread index.

        Returns:
            SimulationResult with one timeline per thread and derived metrics

        Raises:
            InvalidInputShape: If profile_keys is not a sequence of strings
            UnknownProfile: If any key is missing from the catalog
        """
        keys = self._validate_input(profile_keys)
        if not keys:
            logger.info("No threads requested, returning empty result")
            return SimulationResult()

        threads = [
            ThreadState(thread_id=i, profile=self.catalog.lookup(key))
            for i, key in enumerate(keys)
        ]
        timelines: List[List[TimelineSegment]] = [[] for _ in threads]

        logger.info(f"Simulating {len(threads)} threads: {', '.join(keys)}")

        sim_env = SimulationEnvironment()
        sim_env.schedule_process(self._tick_process, sim_env, threads, timelines)
        sim_env.run()

        elapsed_ticks = sim_env.now()
        metrics = self.metrics_collector.derive_metrics(timelines, keys)

        logger.info(
            f"Simulation finished after {elapsed_ticks} ticks "
            f"({metrics.aggregate.percent_blocked:.1f}% blocked)"
        )

        return SimulationResult(
            profile_keys=keys,
            timelines=timelines,
            metrics=metrics,
            elapsed_ticks=elapsed_ticks,
        )

    def _validate_input(self, profile_keys: Any) -> List[str]:
        """Check input shape and keys before any simulation state exists."""
        if isinstance(profile_keys, (str, bytes)) or not isinstance(profile_keys, SequenceABC):
            raise InvalidInputShape(
                f"profile_keys must be a sequence of strings, got {type(profile_keys).__name__}"
            )

        bad_positions = [i for i, key in enumerate(profile_keys) if not isinstance(key, str)]
        if bad_positions:
            raise InvalidInputShape(
                f"profile_keys must contain only strings; non-string values at positions {bad_positions}"
            )

        keys = list(profile_keys)
        self.catalog.validate_keys(keys)
        return keys

    def _tick_process(
        self,
        sim_env: SimulationEnvironment,
        threads: List[ThreadState],
        timelines: List[List[TimelineSegment]],
    ) -> Generator:
        """SimPy process running the per-tick loop until every thread finishes."""
        holder: Optional[int] = None

        while not all(t.finished for t in threads):
            now = sim_env.now()

            holder = self._release(threads, holder)
            self._mark_waiters(threads, holder, now)
            if holder is None:
                holder = self._acquire(threads, now)

            for thread in threads:
                if thread.finished:
                    continue

                state = self._classify(thread, holder)
                self._record(timelines[thread.thread_id], state, now)

                if state is not SegmentState.BLOCKED:
                    thread.advance()

            yield sim_env.step()

    @staticmethod
    def _release(threads: List[ThreadState], holder: Optional[int]) -> Optional[int]:
        """Free the lock if its holder finished or moved on to an IO phase."""
        if holder is None:
            return None
        if not threads[holder].wants_lock:
            return None
        return holder

    @staticmethod
    def _mark_waiters(threads: List[ThreadState], holder: Optional[int], now: int) -> None:
        """Stamp when each thread started wanting the lock; clear it for IO."""
        for thread in threads:
            if thread.finished:
                continue
            if not thread.wants_lock:
                thread.waiting_since = None
            elif thread.thread_id != holder and thread.waiting_since is None:
                thread.waiting_since = now

    @staticmethod
    def _acquire(threads: List[ThreadState], now: int) -> Optional[int]:
        """Grant the free lock to the longest waiter.

        Equal waiting-since stamps go to the lowest thread index.
        """
        oldest: Optional[ThreadState] = None
        for thread in threads:
            if thread.finished or not thread.wants_lock:
                continue
            if oldest is None or thread.waiting_since < oldest.waiting_since:
                oldest = thread

        if oldest is None:
            return None

        logger.debug(
            f"t={now}: lock granted to thread {oldest.thread_id} "
            f"(waiting since {oldest.waiting_since})"
        )
        oldest.waiting_since = None
        return oldest.thread_id

    @staticmethod
    def _classify(thread: ThreadState, holder: Optional[int]) -> SegmentState:
        if thread.current_phase.kind is PhaseKind.IO:
            return SegmentState.WAITING_IO
        if thread.thread_id == holder:
            return SegmentState.EXECUTING
        return SegmentState.BLOCKED

    @staticmethod
    def _record(timeline: List[TimelineSegment], state: SegmentState, now: int) -> None:
        """Append one tick, extending the last segment when the state repeats."""
        if timeline and timeline[-1].state is state:
            timeline[-1] = timeline[-1].extended()
        else:
            timeline.append(TimelineSegment(state=state, start_time=now, duration=1))


def simulate(profile_keys: Sequence[str]) -> SimulationResult:
    """Simulate the given threads against the default catalog."""
    return ContentionScheduler().simulate(profile_keys)
