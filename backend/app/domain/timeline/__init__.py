"""Timeline aggregation: streak calculation and per-view session state."""

from .session import TimelineSession
from .streak import calculate_streak, local_day

__all__ = ["TimelineSession", "calculate_streak", "local_day"]
