"""Timeline layout and rendering for simulation results.

Rendering is strictly downstream of the scheduler: it reads segments and
metrics and never influences the simulated schedule.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Union

from matplotlib.figure import Figure
from matplotlib.patches import Patch

from ..metrics.models import AggregateMetrics, SegmentState

logger = logging.getLogger(__name__)

# Fixed three-colour legend
STATE_COLORS = {
    SegmentState.EXECUTING: "#4caf50",
    SegmentState.WAITING_IO: "#2196f3",
    SegmentState.BLOCKED: "#f44336",
}

STATE_LABELS = {
    SegmentState.EXECUTING: "Using CPU",
    SegmentState.WAITING_IO: "Waiting on IO",
    SegmentState.BLOCKED: "Blocked (waiting for GVL)",
}


@dataclass
class SegmentLayout:
    state: SegmentState
    offset_fraction: float  # Position within this thread's bar
    width_fraction: float   # Share of this thread's bar
    tooltip: str


@dataclass
class ThreadBarLayout:
    """Geometry of one thread's bar on a scale shared by all threads."""

    thread_id: int
    label: str
    total: int
    blocked: int
    active: int
    width_fraction: float  # Bar length relative to the longest thread
    segments: List[SegmentLayout] = field(default_factory=list)


def compute_timeline_layout(result: Any) -> List[ThreadBarLayout]:
    """Lay out every thread's bar against the longest timeline in the run."""
    if not result.timelines:
        return []

    per_thread = result.metrics.per_thread
    max_time = max(m.total for m in per_thread)

    bars = []
    for thread_id, timeline in enumerate(result.timelines):
        metrics = per_thread[thread_id]
        segments = []
        for segment in timeline:
            segments.append(SegmentLayout(
                state=segment.state,
                offset_fraction=(segment.start_time / metrics.total),
                width_fraction=(segment.duration / metrics.total),
                tooltip=f"{STATE_LABELS[segment.state]}: {segment.start_time}-{segment.end_time}ms",
            ))

        bars.append(ThreadBarLayout(
            thread_id=thread_id,
            label=f"Thread {thread_id + 1}",
            total=metrics.total,
            blocked=metrics.blocked,
            active=metrics.active,
            width_fraction=metrics.total / max_time,
            segments=segments,
        ))

    return bars


def format_metrics_summary(aggregate: AggregateMetrics) -> List[str]:
    """Human-readable lines for the aggregate metrics panel."""
    return [
        f"Total Active Time (CPU + IO): {aggregate.total_active}ms",
        f"Total Blocked Time: {aggregate.total_blocked}ms",
        f"System Time Wasted on GVL Contention: {aggregate.percent_blocked:.1f}%",
    ]


def plot_timelines(result: Any, output_path: Union[str, Path]) -> Path:
    """Render thread timelines as horizontal bars and save the image.

    Args:
        result: SimulationResult to draw
        output_path: Destination image path; parent directories are created

    Returns:
        Path of the written image
    """
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    bars = compute_timeline_layout(result)
    fig = Figure(figsize=(12, 1 + 0.6 * max(len(bars), 1)))
    ax = fig.subplots()

    if not bars:
        ax.text(0.5, 0.5, "No threads simulated", ha="center", va="center")
        ax.set_axis_off()
    else:
        for row, bar in enumerate(bars):
            timeline = result.timelines[bar.thread_id]
            ax.broken_barh(
                [(seg.start_time, seg.duration) for seg in timeline],
                (row - 0.4, 0.8),
                facecolors=[STATE_COLORS[seg.state] for seg in timeline],
            )

        ax.set_yticks(range(len(bars)))
        ax.set_yticklabels([
            f"{bar.label} (total {bar.total}, blocked {bar.blocked})" for bar in bars
        ])
        ax.invert_yaxis()
        ax.set_xlim(0, max(bar.total for bar in bars))
        ax.set_xlabel("Time (ms)")
        ax.set_title(format_metrics_summary(result.metrics.aggregate)[-1])
        ax.legend(
            handles=[Patch(color=STATE_COLORS[s], label=STATE_LABELS[s]) for s in SegmentState],
            loc="upper center",
            bbox_to_anchor=(0.5, -0.25),
            ncol=len(SegmentState),
        )

    fig.tight_layout()
    fig.savefig(output_file)

    logger.info(f"Saved timeline plot to {output_file}")
    return output_file
