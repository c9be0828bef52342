"""
Shared Test Fixtures

Factories for turns and stores plus the fixed day-boundary scenarios the
reconciler and renderer tests share. All fixtures are explicit - no
random generation.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from ascension_log.contracts import (
    Consumable, ConsumableVersion, DayChange, Item, MeatGain, Pull, SingleTurn,
    Statgain, TurnVersion
)
from ascension_log.timeline.store import TimelineStore, TurnIterationMode


# =============================================================================
# FACTORIES
# =============================================================================

def make_turn(
    turn_number: int,
    area: str = "The Spooky Forest",
    day: int = 1,
    encounter: Optional[str] = None,
    version: TurnVersion = TurnVersion.COMBAT,
    stats: Tuple[int, int, int] = (0, 0, 0),
    meat: int = 0,
    items: Iterable[str] = (),
    consumables: Iterable[Consumable] = (),
    familiar: str = "none"
) -> SingleTurn:
    """A turn with sensible defaults; items are single drops."""
    turn = SingleTurn(
        area, encounter or f"monster {turn_number}", turn_number, day,
        turn_version=version,
        familiar_name=familiar,
        stat_gain=Statgain(*stats),
        meat=MeatGain(encounter=meat)
    )
    for name in items:
        turn.add_dropped_item(Item(name, 1, turn_number))
    for consumable in consumables:
        turn.add_consumable_used(consumable)
    return turn


def make_food(name: str = "pizza", adventures: int = 5, amount: int = 1) -> Consumable:
    return Consumable(name, ConsumableVersion.FOOD, adventure_gain=adventures, amount=amount)


def make_store(
    turns: Sequence[SingleTurn] = (),
    day_changes: Sequence[Tuple[int, int]] = (),
    pulls: Sequence[Pull] = (),
    mode: TurnIterationMode = TurnIterationMode.MAFIA
) -> TimelineStore:
    """A detailed store fed with turns, (day, turn) day changes and pulls."""
    store = TimelineStore(True, mode)
    for day_number, turn_number in day_changes:
        store.add_day_change(DayChange(day_number, turn_number))
    for turn in turns:
        store.add_turn(turn)
    for pull in pulls:
        store.add_pull(pull)
    return store


def summarized(store: TimelineStore) -> TimelineStore:
    store.create_summary()
    return store


def area_run(area: str, first: int, last: int, day: int = 1) -> List[SingleTurn]:
    """Turns first..last spent in one area on one day."""
    return [make_turn(n, area, day) for n in range(first, last + 1)]


# =============================================================================
# DAY-BOUNDARY SCENARIOS
# =============================================================================

KNOB = "Cobb's Knob Kitchens"
PANTRY = "The Haunted Pantry"
SKY = "The Hole in the Sky"
CASTLE = "The Castle in the Clouds in the Sky (Basement)"


def single_day_store() -> TimelineStore:
    """Five turns in one area on day 1."""
    return make_store(area_run(KNOB, 1, 5))


def day_change_at_interval_end_store() -> TimelineStore:
    """Nine turns on day 1, day 2 starts at turn 9 in a new area."""
    turns = area_run(KNOB, 1, 9) + [make_turn(10, PANTRY, day=2)]
    return make_store(turns, day_changes=[(2, 9)])


def skipped_days_store() -> TimelineStore:
    """Days 15 and 16 both start at turn 15."""
    turns = area_run(KNOB, 1, 15) + [make_turn(16, PANTRY, day=16)]
    return make_store(turns, day_changes=[(15, 15), (16, 15)])


def pull_after_day_change_store() -> TimelineStore:
    """A pull stamped with day 3 on the last turn of day 1."""
    turns = area_run(SKY, 1, 12) + [make_turn(13, CASTLE, day=3)]
    return make_store(
        turns,
        day_changes=[(3, 12)],
        pulls=[Pull("star chart", 1, 12, 3)]
    )


# =============================================================================
# RECORD DOCUMENTS
# =============================================================================

def turn_record(turn_number: int, area: str = KNOB, day: int = 1, **fields) -> dict:
    record = {"type": "turn", "area": area, "encounter": f"monster {turn_number}",
              "turn": turn_number, "day": day, "version": "combat"}
    record.update(fields)
    return record


def day_change_at_interval_end_records() -> List[dict]:
    """The day_change_at_interval_end_store() scenario as JSON records."""
    return (
        [{"type": "character", "character_class": "Sauceror"},
         {"type": "day_change", "day": 2, "turn": 9}]
        + [turn_record(n) for n in range(1, 10)]
        + [turn_record(10, PANTRY, day=2)]
    )
