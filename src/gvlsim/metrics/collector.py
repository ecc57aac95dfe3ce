"""Metrics derivation and reporting implementation."""

import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .models import (
    AggregateMetrics,
    SegmentState,
    SimulationMetrics,
    ThreadMetrics,
    TimelineSegment,
)

logger = logging.getLogger(__name__)

DEFAULT_PERCENTILES = [0.5, 0.9, 0.99]


class MetricsCollector:
    """Turns completed thread timelines into contention metrics and reports."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the metrics collector.

        Args:
            config: Metrics configuration containing:
                - percentiles_to_calculate: List of percentiles (e.g., [0.5, 0.9, 0.99])
        """
        self.config = config or {}

    def derive_metrics(
        self,
        timelines: Sequence[Sequence[TimelineSegment]],
        profile_keys: Sequence[str],
    ) -> SimulationMetrics:
        """Compute per-thread and aggregate metrics from timelines.

        This is a pure function of the timelines: segment durations are summed
        per state, so every tick a thread was alive is counted exactly once.
        """
        per_thread = []
        for thread_id, timeline in enumerate(timelines):
            by_state = {state: 0 for state in SegmentState}
            for segment in timeline:
                by_state[segment.state] += segment.duration

            blocked = by_state[SegmentState.BLOCKED]
            executing = by_state[SegmentState.EXECUTING]
            io = by_state[SegmentState.WAITING_IO]
            active = executing + io
            per_thread.append(ThreadMetrics(
                thread_id=thread_id,
                profile_key=profile_keys[thread_id],
                blocked=blocked,
                executing=executing,
                io=io,
                active=active,
                total=blocked + active,
            ))

        total_blocked = sum(m.blocked for m in per_thread)
        total_active = sum(m.active for m in per_thread)
        total_time = total_blocked + total_active
        percent_blocked = total_blocked / total_time * 100 if total_time > 0 else 0.0

        return SimulationMetrics(
            per_thread=per_thread,
            aggregate=AggregateMetrics(
                total_blocked=total_blocked,
                total_active=total_active,
                total_time=total_time,
                percent_blocked=percent_blocked,
            ),
        )

    def generate_summary_report(self, result: Any) -> Dict[str, Any]:
        """Generate summary statistics for a simulation result.

        Args:
            result: SimulationResult produced by the contention scheduler

        Returns:
            Dictionary containing all summary metrics
        """
        percentiles = self.config.get("percentiles_to_calculate", DEFAULT_PERCENTILES)
        metrics: SimulationMetrics = result.metrics
        aggregate = metrics.aggregate

        summary = {
            "simulation": {
                "threads": len(result.profile_keys),
                "profile_keys": list(result.profile_keys),
                "elapsed_ticks": result.elapsed_ticks,
            },
            "aggregate": aggregate.to_dict(),
            "per_thread": [m.to_dict() for m in metrics.per_thread],
            "blocked_time": self._calculate_stats(
                [m.blocked for m in metrics.per_thread], percentiles
            ),
            "total_time": self._calculate_stats(
                [m.total for m in metrics.per_thread], percentiles
            ),
        }

        logger.info("=" * 60)
        logger.info("SIMULATION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Threads: {len(result.profile_keys)}, elapsed: {result.elapsed_ticks} ticks")
        logger.info(f"Active: {aggregate.total_active}, blocked: {aggregate.total_blocked} "
                    f"({aggregate.percent_blocked:.1f}% of thread time lost to lock contention)")
        logger.info("=" * 60)

        return summary

    def _calculate_stats(self, values: List[int], percentiles: List[float]) -> Dict[str, float]:
        """Calculate statistics for a list of values."""
        if not values:
            return {"count": 0}

        stats = {
            "count": len(values),
            "mean": float(np.mean(values)),
            "std": float(np.std(values)),
            "min": float(np.min(values)),
            "max": float(np.max(values)),
        }

        for p in percentiles:
            stats[f"p{p * 100:g}"] = float(np.percentile(values, p * 100))

        return stats

    def get_segments_df(self, result: Any) -> pd.DataFrame:
        """Get every timeline segment of a result as a pandas DataFrame."""
        rows = []
        for thread_id, timeline in enumerate(result.timelines):
            for segment in timeline:
                rows.append({
                    "thread_id": thread_id,
                    "profile_key": result.profile_keys[thread_id],
                    "state": segment.state.value,
                    "start_time": segment.start_time,
                    "end_time": segment.end_time,
                    "duration": segment.duration,
                })

        return pd.DataFrame(
            rows,
            columns=["thread_id", "profile_key", "state", "start_time", "end_time", "duration"],
        )

    def get_per_thread_metrics_df(self, result: Any) -> pd.DataFrame:
        """Get per-thread metrics of a result as a pandas DataFrame."""
        return pd.DataFrame(
            [m.to_dict() for m in result.metrics.per_thread],
            columns=["thread_id", "profile_key", "blocked", "executing", "io", "active", "total"],
        )
