"""
Event Interleaver
=================

Collects, for one interval, everything that is printed next to it:

- per-turn events found by scanning the interval's turns (semirares,
  bad-moon adventures, chateau rests, free crafting, notable item drops)
- consumables of the current day and pulls up to the interval end
- the dated side-event streams (hybridization, hunted, banished,
  disintegrated, familiar changes, free runaways, learned skills and
  level-ups), merged in turn order

Each stream is read through a StreamCursor that only moves forward, so a
side event is handed out at most once per traversal. Ties between streams
on one turn follow SideEventKind's declaration order.

The set of one-time items not yet seen and the per-day Ka totals live in a
TraversalState owned by a single traversal.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from heapq import merge
from operator import attrgetter
from typing import (
    Callable, Dict, Generic, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, TypeVar
)

from ..contracts.actions import Pull
from ..contracts.countables import Consumable, Item
from ..contracts.gains import Statgain
from ..data_tables import DataTables, normalize_name
from .intervals import TurnInterval

T = TypeVar("T")

CHATEAU_REST_AREA = "Rest in your bed in the Chateau"
FREE_CRAFTING_PREFIXES = ("mix ", "smith ", "cook ")
KA_COIN_VALUES = {"Ka coin": 1, "Ka coin (2)": 2, "Ka coin (3)": 3}
ITEM_STACK_THRESHOLD = 3


# =============================================================================
# STREAM MERGING
# =============================================================================

def merge_by_key(streams: Sequence[Iterable[T]], key: Callable[[T], int]) -> Iterator[T]:
    """
    Merge already sorted streams by key.
    Equal keys keep stream order first, then position within the stream.
    """
    def decorate(priority: int, stream: Iterable[T]):
        for position, element in enumerate(stream):
            yield (key(element), priority, position), element

    for _, element in merge(*(decorate(p, s) for p, s in enumerate(streams))):
        yield element


class StreamCursor(Generic[T]):
    """Forward-only cursor over a turn-sorted stream."""

    def __init__(self, elements: Iterable[T], key: Callable[[T], int] = attrgetter("turn_number")):
        self._elements: List[T] = list(elements)
        self._key = key
        self._position = 0

    def peek(self) -> Optional[T]:
        if self._position < len(self._elements):
            return self._elements[self._position]
        return None

    def take_while(self, predicate: Callable[[T], bool]) -> List[T]:
        taken: List[T] = []
        while self.peek() is not None and predicate(self.peek()):
            taken.append(self._elements[self._position])
            self._position += 1
        return taken

    def take_until(self, turn_number: int) -> List[T]:
        """Consume every element keyed at or before `turn_number`."""
        return self.take_while(lambda e: self._key(e) <= turn_number)

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._elements)


# =============================================================================
# TRAVERSAL STATE
# =============================================================================

@dataclass
class TraversalState:
    """State of one rendering pass over a log."""
    unseen_onetime_items: Set[str] = field(default_factory=set)
    daily_ka: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def for_tables(cls, data_tables: DataTables) -> TraversalState:
        return cls(unseen_onetime_items=set(data_tables.onetime_items))

    def claim_onetime_item(self, item_name: str) -> bool:
        """True the first time a one-time item is seen in this traversal."""
        name = normalize_name(item_name)
        if name in self.unseen_onetime_items:
            self.unseen_onetime_items.discard(name)
            return True
        return False

    def add_ka(self, day_number: int, amount: int) -> None:
        self.daily_ka[day_number] = self.daily_ka.get(day_number, 0) + amount

    def ka_on_day(self, day_number: int) -> int:
        return self.daily_ka.get(day_number, 0)


# =============================================================================
# EVENTS
# =============================================================================

class TurnEventKind(Enum):
    SEMIRARE = auto()
    BAD_MOON = auto()
    CHATEAU_REST = auto()
    FREE_CRAFTING = auto()
    ITEMS = auto()


@dataclass(frozen=True)
class TurnEvent:
    kind: TurnEventKind
    turn_number: int
    text: str = ""
    stat_gain: Optional[Statgain] = None
    items: Tuple[str, ...] = ()


class SideEventKind(Enum):
    """Side event streams, in tie-break order."""
    HYBRID = auto()
    HUNTED = auto()
    BANISHED = auto()
    DISINTEGRATED = auto()
    FAMILIAR = auto()
    FREE_RUNAWAYS = auto()
    LEARNED_SKILL = auto()
    LEVEL = auto()


@dataclass(frozen=True)
class SideEvent:
    kind: SideEventKind
    turn_number: int
    payload: object


def item_entries(items: Iterable[Item]) -> Tuple[str, ...]:
    """Display entries of acquired items: stacks as 'name x N', else repeated names."""
    entries: List[str] = []
    for item in items:
        if item.amount >= ITEM_STACK_THRESHOLD:
            entries.append(f"{item.name} x {item.amount}")
        else:
            entries.extend([item.name] * item.amount)
    return tuple(entries)


def ka_gain(interval: TurnInterval) -> int:
    return sum(
        KA_COIN_VALUES.get(item.name, 0) * item.amount
        for item in interval.dropped_items
    )


# =============================================================================
# INTERLEAVER
# =============================================================================

class EventInterleaver:
    """
    Hands out the events of each interval of one traversal.

    `banished` and `disintegrated` are the summary's lists, which combine
    the explicit streams with the flags set on turns.
    """

    def __init__(
        self,
        store,
        state: TraversalState,
        banished: Sequence = (),
        disintegrated: Sequence = ()
    ):
        self._tables: DataTables = store.data_tables
        self.state = state
        self._pulls = StreamCursor(store.pulls)
        by_number = attrgetter("number")
        self._hybrid = StreamCursor(store.hybrid_content, by_number)
        self._hunted = StreamCursor(store.hunted_combats, by_number)
        self._banished = StreamCursor(banished, by_number)
        self._disintegrated = StreamCursor(disintegrated, by_number)
        self._familiars = StreamCursor(store.familiar_changes)
        self._learned = StreamCursor(store.learned_skills, by_number)
        # Level 1 is never printed.
        self._levels = StreamCursor(store.levels[1:], attrgetter("level_reached_on_turn"))

    def turn_events(self, interval: TurnInterval) -> List[TurnEvent]:
        events: List[TurnEvent] = []
        for turn in interval.turns:
            if self._tables.is_semirare(turn.encounter_name):
                events.append(TurnEvent(TurnEventKind.SEMIRARE, turn.turn_number,
                                        turn.encounter_name))
            if self._tables.is_bad_moon(turn.encounter_name):
                events.append(TurnEvent(TurnEventKind.BAD_MOON, turn.turn_number,
                                        turn.encounter_name))

            for encounter in turn.encounters:
                if encounter.area_name in turn.area_name:
                    continue
                if CHATEAU_REST_AREA in encounter.area_name:
                    events.append(TurnEvent(TurnEventKind.CHATEAU_REST, turn.turn_number,
                                            encounter.area_name, encounter.stat_gain))
                if encounter.area_name.lower().startswith(FREE_CRAFTING_PREFIXES):
                    events.append(TurnEvent(TurnEventKind.FREE_CRAFTING, turn.turn_number,
                                            encounter.area_name))

            notable = [
                item for item in turn.dropped_items
                if self._tables.is_important_item(item.name)
                or self.state.claim_onetime_item(item.name)
            ]
            if notable:
                events.append(TurnEvent(TurnEventKind.ITEMS, turn.turn_number,
                                        items=item_entries(notable)))
        return events

    def current_consumables(self, interval: TurnInterval, day_number: int) -> List[Consumable]:
        """Consumables of the interval used on `day_number` worth a line."""
        return [
            c for c in interval.consumables_used
            if c.day_number_of_usage == day_number
            and (c.adventure_gain > 0
                 or not c.stat_gain.is_zero()
                 or self._tables.is_special_consumable(c.name))
        ]

    def current_pulls(self, day_number: int, end_turn: int) -> List[Pull]:
        """Pulls up to `end_turn`, stopping at the first pull of a later day."""
        return self._pulls.take_while(
            lambda p: p.turn_number <= end_turn and p.day_number <= day_number
        )

    def side_events(self, interval: TurnInterval) -> List[SideEvent]:
        end = interval.end_turn
        runaways = interval.runaway_attempts
        streams = [
            [SideEvent(SideEventKind.HYBRID, e.number, e.data)
             for e in self._hybrid.take_until(end)],
            [SideEvent(SideEventKind.HUNTED, e.number, e.data)
             for e in self._hunted.take_until(end)],
            [SideEvent(SideEventKind.BANISHED, e.number, e.data)
             for e in self._banished.take_until(end)],
            [SideEvent(SideEventKind.DISINTEGRATED, e.number, e.data)
             for e in self._disintegrated.take_until(end)],
            [SideEvent(SideEventKind.FAMILIAR, f.turn_number, f.familiar_name)
             for f in self._familiars.take_until(end)],
            [SideEvent(SideEventKind.FREE_RUNAWAYS, end, runaways)]
            if runaways.attempted > 0 else [],
            [SideEvent(SideEventKind.LEARNED_SKILL, e.number, e.data)
             for e in self._learned.take_until(end)],
            [SideEvent(SideEventKind.LEVEL, l.level_reached_on_turn, l)
             for l in self._levels.take_until(end)
             if interval.start_turn <= l.level_reached_on_turn],
        ]
        return list(merge_by_key(streams, key=attrgetter("turn_number")))
