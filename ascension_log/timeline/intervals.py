"""
Turn Intervals and the Interval Builder
=======================================

A turn interval is a maximal run of consecutive turns spent in one area.
Bounds follow the turn-counter convention: the start turn is exclusive and
the end turn inclusive, so an interval holding turns 1..5 spans [0, 5] and
a single-turn interval spans [n-1, n].

Two origins exist:
- DetailedTurnInterval: built from SingleTurns. Holds references to them
  and derives every aggregate from them on access.
- SimpleTurnInterval: supplied pre-aggregated by non-detailed sources. Has
  no turns.

Everything downstream works on the TurnInterval interface and does not
care which origin it sees.

GUARANTEES:
===========
- build_intervals() never drops or duplicates a turn
- Area-name equality is exact string equality
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from ..contracts.base import ErrorCode, InvalidArgumentError, require_turn_number
from ..contracts.countables import (
    CombatItem, Consumable, Item, Skill, merge_all
)
from ..contracts.gains import MeatGain, MPGain, Statgain, NO_MEAT, NO_MP, NO_STATS
from ..contracts.turns import SingleTurn, TurnVersion


@dataclass(frozen=True)
class FreeRunaways:
    """Free runaway attempts; renders as 'S / A free retreats'."""
    attempted: int = 0
    successful: int = 0

    def __str__(self) -> str:
        return f"{self.successful} / {self.attempted} free retreats"


class TurnInterval(ABC):
    """
    Common interface of both interval origins.

    Subclasses provide the bounds, the turns and the aggregates. Notes are
    the only mutable part; they are attached by upstream tooling.
    """

    def __init__(self, area_name: str):
        self.area_name = area_name
        self.pre_interval_comment = ""
        self.post_interval_comment = ""

    @property
    @abstractmethod
    def start_turn(self) -> int:
        pass

    @property
    @abstractmethod
    def end_turn(self) -> int:
        pass

    @property
    def total_turns(self) -> int:
        return self.end_turn - self.start_turn

    @property
    def turns(self) -> Tuple[SingleTurn, ...]:
        return ()

    @property
    @abstractmethod
    def stat_gain(self) -> Statgain:
        pass

    @property
    @abstractmethod
    def mp_gain(self) -> MPGain:
        pass

    @property
    @abstractmethod
    def meat(self) -> MeatGain:
        pass

    @property
    @abstractmethod
    def dropped_items(self) -> List[Item]:
        pass

    @property
    @abstractmethod
    def skills_cast(self) -> List[Skill]:
        pass

    @property
    @abstractmethod
    def consumables_used(self) -> List[Consumable]:
        pass

    @property
    @abstractmethod
    def combat_items_used(self) -> List[CombatItem]:
        pass

    @property
    @abstractmethod
    def runaway_attempts(self) -> FreeRunaways:
        pass

    def contains_day(self, day_number: int) -> bool:
        return any(t.day_number == day_number for t in self.turns)

    @property
    def bounds_text(self) -> str:
        """`[s+1-e]`, or `[e]` for intervals of at most one turn."""
        if self.total_turns > 1:
            return f"[{self.start_turn + 1}-{self.end_turn}]"
        return f"[{self.end_turn}]"

    def __str__(self) -> str:
        return f"{self.bounds_text} {self.area_name} {self.stat_gain}"

    def __repr__(self) -> str:
        return (f"{type(self).__name__}({self.area_name!r}, "
                f"{self.start_turn}, {self.end_turn})")


class DetailedTurnInterval(TurnInterval):
    """
    An interval over SingleTurns.

    The turns are kept in turn-number order. The interval does not own
    them: a later fold into one of its turns shows up in its aggregates.
    """

    def __init__(self, turns: Sequence[SingleTurn], area_name: Optional[str] = None):
        if not turns:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_VALUE, "A detailed turn interval needs at least one turn."
            )
        ordered = sorted(turns, key=lambda t: t.turn_number)
        super().__init__(area_name if area_name is not None else ordered[0].area_name)
        self._turns: List[SingleTurn] = ordered

    def add_turn(self, turn: SingleTurn) -> None:
        self._turns.append(turn)
        self._turns.sort(key=lambda t: t.turn_number)

    @property
    def start_turn(self) -> int:
        return max(self._turns[0].turn_number - 1, 0)

    @property
    def end_turn(self) -> int:
        return self._turns[-1].turn_number

    @property
    def turns(self) -> Tuple[SingleTurn, ...]:
        return tuple(self._turns)

    @property
    def stat_gain(self) -> Statgain:
        total = NO_STATS
        for turn in self._turns:
            total = total.add(turn.stat_gain)
        return total

    @property
    def mp_gain(self) -> MPGain:
        total = NO_MP
        for turn in self._turns:
            total = total.add(turn.mp_gain)
        return total

    @property
    def meat(self) -> MeatGain:
        total = NO_MEAT
        for turn in self._turns:
            total = total.add(turn.meat)
        return total

    @property
    def dropped_items(self) -> List[Item]:
        return merge_all(i for t in self._turns for i in t.dropped_items)

    @property
    def skills_cast(self) -> List[Skill]:
        return merge_all(s for t in self._turns for s in t.skills_cast)

    @property
    def consumables_used(self) -> List[Consumable]:
        return merge_all(c for t in self._turns for c in t.consumables_used)

    @property
    def combat_items_used(self) -> List[CombatItem]:
        return merge_all(c for t in self._turns for c in t.combat_items_used)

    @property
    def runaway_attempts(self) -> FreeRunaways:
        successful = sum(t.free_runaways for t in self._turns)
        unsuccessful = sum(
            1 for t in self._turns
            if t.turn_version == TurnVersion.COMBAT
            and t.is_ran_away_on_this_turn()
            and t.is_runaways_equipment_equipped()
        )
        return FreeRunaways(attempted=successful + unsuccessful, successful=successful)

    def split_at(self, turn: SingleTurn) -> Tuple[Optional[DetailedTurnInterval], DetailedTurnInterval]:
        """
        Split into the turns before `turn` and the turns from `turn` on.
        The first part is None when `turn` is the first turn.
        """
        index = next(i for i, t in enumerate(self._turns) if t is turn)
        before = self._turns[:index]
        after = self._turns[index:]
        head = DetailedTurnInterval(before, turn.area_name) if before else None
        tail = DetailedTurnInterval(after, turn.area_name)
        if head is not None:
            head.pre_interval_comment = self.pre_interval_comment
        else:
            tail.pre_interval_comment = self.pre_interval_comment
        tail.post_interval_comment = self.post_interval_comment
        return head, tail


class SimpleTurnInterval(TurnInterval):
    """A pre-aggregated interval from a non-detailed source."""

    def __init__(
        self,
        area_name: str,
        start_turn: int,
        end_turn: int,
        stat_gain: Statgain = NO_STATS,
        mp_gain: MPGain = NO_MP,
        meat: MeatGain = NO_MEAT,
        dropped_items: Iterable[Item] = (),
        skills_cast: Iterable[Skill] = (),
        consumables_used: Iterable[Consumable] = (),
        combat_items_used: Iterable[CombatItem] = (),
        free_runaways: FreeRunaways = FreeRunaways()
    ):
        super().__init__(area_name)
        require_turn_number(start_turn, "Start turn")
        require_turn_number(end_turn, "End turn")
        self._start_turn = start_turn
        self._end_turn = max(end_turn, start_turn)
        self._stat_gain = stat_gain
        self._mp_gain = mp_gain
        self._meat = meat
        self._dropped_items = merge_all(dropped_items)
        self._skills_cast = merge_all(skills_cast)
        self._consumables_used = merge_all(consumables_used)
        self._combat_items_used = merge_all(combat_items_used)
        self._free_runaways = free_runaways

    @property
    def start_turn(self) -> int:
        return self._start_turn

    @property
    def end_turn(self) -> int:
        return self._end_turn

    @property
    def stat_gain(self) -> Statgain:
        return self._stat_gain

    @property
    def mp_gain(self) -> MPGain:
        return self._mp_gain

    @property
    def meat(self) -> MeatGain:
        return self._meat

    @property
    def dropped_items(self) -> List[Item]:
        return list(self._dropped_items)

    @property
    def skills_cast(self) -> List[Skill]:
        return list(self._skills_cast)

    @property
    def consumables_used(self) -> List[Consumable]:
        return list(self._consumables_used)

    @property
    def combat_items_used(self) -> List[CombatItem]:
        return list(self._combat_items_used)

    @property
    def runaway_attempts(self) -> FreeRunaways:
        return self._free_runaways


# =============================================================================
# INTERVAL BUILDER
# =============================================================================

def build_intervals(turns: Iterable[SingleTurn]) -> List[DetailedTurnInterval]:
    """
    Group consecutive turns sharing an area name into intervals.

    Scans in arrival order; a change of area name closes the current
    interval. An empty input yields an empty list.
    """
    intervals: List[DetailedTurnInterval] = []
    run: List[SingleTurn] = []
    for turn in turns:
        if run and turn.area_name != run[0].area_name:
            intervals.append(DetailedTurnInterval(run))
            run = []
        run.append(turn)
    if run:
        intervals.append(DetailedTurnInterval(run))
    return intervals
