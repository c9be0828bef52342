"""
Timeline Layer

Owns the turns and dated event streams of a log and turns them into a
day-tagged interval sequence.
"""

from .intervals import (
    DetailedTurnInterval, FreeRunaways, SimpleTurnInterval, TurnInterval, build_intervals
)
from .store import TimelineStore, TurnIterationMode
from .reconciler import (
    CarryOverEmission, DayBoundaryReconciler, DayChangeEmission, Emission,
    IntervalEmission, defer_day_change, reconcile
)
from .interleaver import (
    EventInterleaver, SideEvent, SideEventKind, StreamCursor, TraversalState,
    TurnEvent, TurnEventKind, merge_by_key
)

__all__ = [
    "DetailedTurnInterval", "FreeRunaways", "SimpleTurnInterval", "TurnInterval",
    "build_intervals",
    "TimelineStore", "TurnIterationMode",
    "CarryOverEmission", "DayBoundaryReconciler", "DayChangeEmission", "Emission",
    "IntervalEmission", "defer_day_change", "reconcile",
    "EventInterleaver", "SideEvent", "SideEventKind", "StreamCursor", "TraversalState",
    "TurnEvent", "TurnEventKind", "merge_by_key",
]
