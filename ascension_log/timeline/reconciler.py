"""
Day-Boundary Reconciler
=======================

Walks the interval sequence together with the day-change stream and
produces a flat list of emissions in which every interval belongs to
exactly one day:

- IntervalEmission: an interval (or a part of one) tagged with its day
- DayChangeEmission: the start of a new day
- CarryOverEmission: marks the point after a day change where consumables
  and pulls recorded on the closing interval but belonging to the new day
  are shown

Boundary rules, with `next` the next pending day change:
- ti.end < next.turn: emit ti tagged with the current day.
- ti.end == next.turn: emit ti, then the day change(s) unless the
  look-ahead defers them to the next interval.
- ti.start < next.turn < ti.end: split before the first turn past the
  boundary; the tail goes back through the same rules, so several
  boundaries inside one interval are handled.
- ti.start >= next.turn: split before the first turn carrying a later day.

Intervals without turns (non-detailed logs) cannot be split; they are
emitted whole, tagged with the current day, followed by the day change.

GUARANTEES:
===========
- No turn is dropped or duplicated across a split
- Every day change is emitted once, in order
- Emission turn numbers never decrease
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, List, Optional, Sequence, Union
import logging

from ..contracts.actions import DayChange, NO_DAY_CHANGE
from .intervals import DetailedTurnInterval, TurnInterval

logger = logging.getLogger(__name__)


# =============================================================================
# EMISSIONS
# =============================================================================

@dataclass(frozen=True)
class IntervalEmission:
    interval: TurnInterval
    day_number: int

    @property
    def turn_number(self) -> int:
        return self.interval.start_turn


@dataclass(frozen=True)
class DayChangeEmission:
    day_change: DayChange
    previous_day_number: int

    @property
    def turn_number(self) -> int:
        return self.day_change.turn_number


@dataclass(frozen=True)
class CarryOverEmission:
    """Consumables and pulls of `interval` that belong to `day_number`."""
    interval: TurnInterval
    day_number: int
    turn_number: int


Emission = Union[IntervalEmission, DayChangeEmission, CarryOverEmission]


def defer_day_change(next_interval: Optional[TurnInterval], current_day: int) -> bool:
    """
    Whether a day change due after the current interval must wait for the
    next one: true when the next interval still holds a turn of the
    closing day.
    """
    return next_interval is not None and next_interval.contains_day(current_day)


# =============================================================================
# RECONCILER
# =============================================================================

class DayBoundaryReconciler:
    """
    Single-use state machine over one interval sequence.
    Use reconcile() unless the cursor state is of interest.
    """

    def __init__(self, day_changes: Iterable[DayChange]):
        self._days: List[DayChange] = sorted(
            day_changes, key=lambda d: (d.day_number, d.turn_number)
        )
        if not self._days:
            self._days = [DayChange(1, 0)]
        self.current_day: DayChange = self._days[0]
        self._next_index = 1
        self.emissions: List[Emission] = []

    @property
    def next_day(self) -> DayChange:
        if self._next_index < len(self._days):
            return self._days[self._next_index]
        return NO_DAY_CHANGE

    def _emit(self, interval: TurnInterval) -> None:
        self.emissions.append(IntervalEmission(interval, self.current_day.day_number))

    def _advance(self, reached: Callable[[DayChange], bool]) -> bool:
        """Emit pending day changes while `reached` holds. True if any was emitted."""
        advanced = False
        while self.next_day is not NO_DAY_CHANGE and reached(self.next_day):
            previous = self.current_day
            self.current_day = self.next_day
            self._next_index += 1
            self.emissions.append(DayChangeEmission(self.current_day, previous.day_number))
            advanced = True
        return advanced

    def _carry_over(self, interval: TurnInterval) -> None:
        self.emissions.append(CarryOverEmission(
            interval, self.current_day.day_number, self.current_day.turn_number
        ))

    def _close_interval(self, interval: TurnInterval, following: Optional[TurnInterval]) -> None:
        """Emit `interval`, then the day changes it reaches unless deferred."""
        self._emit(interval)
        if defer_day_change(following, self.current_day.day_number):
            return
        end = interval.end_turn
        if self._advance(lambda d: d.turn_number <= end):
            self._carry_over(interval)

    def run(self, intervals: Sequence[TurnInterval]) -> List[Emission]:
        queue: Deque[TurnInterval] = deque(intervals)
        while queue:
            ti = queue.popleft()
            following = queue[0] if queue else None
            boundary = self.next_day

            if boundary is NO_DAY_CHANGE or ti.end_turn < boundary.turn_number:
                self._emit(ti)

            elif ti.end_turn == boundary.turn_number:
                self._close_interval(ti, following)

            elif ti.start_turn < boundary.turn_number:
                split_turn = next(
                    (t for t in ti.turns if t.turn_number > boundary.turn_number), None
                )
                if split_turn is None:
                    self._close_interval(ti, following)
                    continue
                before, after = ti.split_at(split_turn)
                self._emit(before)
                self._advance(lambda d: d.turn_number < split_turn.turn_number)
                self._carry_over(before)
                queue.appendleft(after)

            else:
                self._handle_late_interval(ti, following, queue)

        logger.debug(
            "Reconciled %d intervals into %d emissions",
            len(intervals), len(self.emissions)
        )
        return self.emissions

    def _handle_late_interval(
        self,
        ti: TurnInterval,
        following: Optional[TurnInterval],
        queue: Deque[TurnInterval]
    ) -> None:
        """The interval starts on or after the pending day change."""
        if not isinstance(ti, DetailedTurnInterval):
            start = ti.start_turn
            self._advance(lambda d: d.turn_number <= start)
            queue.appendleft(ti)
            return

        current = self.current_day.day_number
        split_turn = next((t for t in ti.turns if t.day_number > current), None)
        if split_turn is None:
            self._close_interval(ti, following)
            return

        before, after = ti.split_at(split_turn)
        if before is not None:
            self._emit(before)
        advanced = self._advance(lambda d: d.day_number <= split_turn.day_number)
        if before is not None and advanced:
            self._carry_over(before)
        if advanced:
            queue.appendleft(after)
        else:
            self._emit(after)


def reconcile(intervals: Sequence[TurnInterval], day_changes: Iterable[DayChange]) -> List[Emission]:
    """Reconcile intervals against day changes into a flat emission list."""
    return DayBoundaryReconciler(day_changes).run(intervals)
