"""Timeline visualization module."""

from .timeline_plot import (
    STATE_COLORS,
    STATE_LABELS,
    SegmentLayout,
    ThreadBarLayout,
    compute_timeline_layout,
    format_metrics_summary,
    plot_timelines,
)

__all__ = [
    "STATE_COLORS",
    "STATE_LABELS",
    "SegmentLayout",
    "ThreadBarLayout",
    "compute_timeline_layout",
    "format_metrics_summary",
    "plot_timelines",
]
