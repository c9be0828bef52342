"""
Event Timeline Store
====================

Owns every primitive record of one ascension: the single turns (or the
pre-aggregated intervals of a non-detailed source) and the dated side-event
streams. Everything else in the core reads from here.

INVARIANTS:
===========
- Every side-event stream is sorted by turn number (stable for equal turns)
- Day changes increase strictly in day number and never decrease in turn
- Redundant familiar and equipment changes are dropped at insertion
- The summary is created exactly once; interval-derived reads require it

LIFECYCLE:
==========
1. Construct (seeded with day 1, level 1, no equipment, no familiar and an
   "Ascension Start" turn, all at turn 0)
2. Ingest records through the add_* methods
3. create_summary()
4. Read intervals, summary and sub-interval copies
"""

from __future__ import annotations
from bisect import bisect_right, insort_right
from dataclasses import replace
from enum import Enum, auto
from operator import attrgetter
from typing import Dict, List, Optional, Tuple
import logging

from ..contracts.actions import (
    DataNumberPair, DayChange, EquipmentChange, FamiliarChange,
    HeaderFooterComment, LevelData, PlayerSnapshot, Pull, NO_EQUIPMENT
)
from ..contracts.base import (
    ErrorCode, InvalidArgumentError, InvalidStateError, require_turn_number
)
from ..contracts.character import AscensionPath, CharacterClass, GameMode
from ..contracts.turns import SingleTurn, TurnVersion, NO_FAMILIAR
from ..data_tables import DataTables, DEFAULT_DATA_TABLES
from .intervals import SimpleTurnInterval, TurnInterval, build_intervals

logger = logging.getLogger(__name__)

ASCENSION_START_AREA = "Ascension Start"

COPIED_TURN_AREAS = frozenset({
    "spooky putty monster", "shaking 4-d camera", "photocopied monster",
    "rain-doh box full of monster", "ice sculpture", "rain man",
    "chateau painting",
})

_LEARNED_SKILL_SEPARATOR = "; "
_MAX_LEARNED_SKILL_SEPARATORS = 4

_by_turn = attrgetter("turn_number")
_by_number = attrgetter("number")


class TurnIterationMode(Enum):
    """
    How records sharing a turn number are folded.

    MAFIA: a repeated turn number folds the previous record into the one
    before it when both were spent in the same area.
    NON_MAFIA: a repeated turn number is merged into the last turn.
    """
    MAFIA = auto()
    NON_MAFIA = auto()

    @classmethod
    def parse(cls, name: str) -> TurnIterationMode:
        try:
            return cls[str(name).upper()]
        except KeyError:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_VALUE,
                f"Unknown turn iteration mode '{name}'.",
                allowed=", ".join(m.name for m in cls)
            ) from None


def _entry_at(stream: list, turn_number: int, key=_by_turn):
    """Last entry of a turn-sorted stream at or before `turn_number`."""
    index = bisect_right(stream, turn_number, key=key)
    return stream[index - 1] if index else None


class TimelineStore:
    """
    Holds the turns and side-event streams of one ascension.

    A store is either detailed (fed SingleTurns, intervals built on
    create_summary()) or not (fed TurnIntervals directly). Mixing both
    ingestion calls is an invalid-state error.
    """

    def __init__(
        self,
        is_detailed: bool = True,
        turn_iteration_mode: TurnIterationMode = TurnIterationMode.MAFIA,
        data_tables: Optional[DataTables] = None,
        _seeded: bool = True
    ):
        self.is_detailed = is_detailed
        self.turn_iteration_mode = turn_iteration_mode
        self.data_tables = data_tables or DEFAULT_DATA_TABLES

        self.character_class = CharacterClass.NOT_DEFINED
        self.game_mode = GameMode.NOT_DEFINED
        self.ascension_path = AscensionPath.NOT_DEFINED

        self._turns: List[SingleTurn] = []
        self._intervals: List[TurnInterval] = []
        self._day_changes: List[DayChange] = []
        self._familiar_changes: List[FamiliarChange] = []
        self._equipment_changes: List[EquipmentChange] = []
        self._pulls: List[Pull] = []
        self._player_snapshots: List[PlayerSnapshot] = []
        self._levels: List[LevelData] = []
        self._learned_skills: List[DataNumberPair] = []
        self._hybrid_content: List[DataNumberPair] = []
        self._hunted_combats: List[DataNumberPair] = []
        self._banished_combats: List[DataNumberPair] = []
        self._disintegrated_combats: List[DataNumberPair] = []
        self._lost_combats: List[DataNumberPair] = []
        self._tracked_combat_items: List[DataNumberPair] = []
        self._header_footer_comments: Dict[int, HeaderFooterComment] = {}

        self._summary = None
        self._is_sub_interval = False

        if _seeded:
            self._day_changes.append(DayChange(1, 0))
            self._levels.append(LevelData(1, 0))
            self._equipment_changes.append(NO_EQUIPMENT)
            self._familiar_changes.append(FamiliarChange(NO_FAMILIAR, 0))
            if is_detailed:
                self._turns.append(SingleTurn(
                    ASCENSION_START_AREA, ASCENSION_START_AREA, 0, 1,
                    turn_version=TurnVersion.NOT_DEFINED
                ))
            else:
                self._intervals.append(SimpleTurnInterval(ASCENSION_START_AREA, 0, 0))

    # =========================================================================
    # INGESTION
    # =========================================================================

    def add_turn(self, turn: SingleTurn) -> None:
        """
        Append a turn, folding records that share a turn number according
        to the turn iteration mode.
        """
        if not self.is_detailed:
            raise InvalidStateError.of(
                ErrorCode.WRONG_INGESTION_MODE,
                "Turns can only be added to a detailed log."
            )
        if self._summary is not None:
            raise InvalidStateError.of(
                ErrorCode.SUMMARY_ALREADY_CREATED,
                "Turns cannot be added after the summary was created.",
                turn_number=turn.turn_number
            )

        if self.turn_iteration_mode == TurnIterationMode.MAFIA:
            if len(self._turns) >= 2:
                last, penultimate = self._turns[-1], self._turns[-2]
                if (last.turn_number == turn.turn_number
                        and last.area_name == penultimate.area_name):
                    self._fold(penultimate, last, penultimate.turn_number)
                    self._turns.pop()
            self._turns.append(turn)
        else:
            if self._turns and self._turns[-1].turn_number == turn.turn_number:
                self._fold(self._turns[-1], turn)
            else:
                self._turns.append(turn)

    @staticmethod
    def _fold(target: SingleTurn, source: SingleTurn, turn_number: Optional[int] = None) -> None:
        target.add_encounter(source.to_encounter(turn_number))
        target.add_turn_data(source)
        if source.is_ran_away_on_this_turn() and source.is_runaways_equipment_equipped():
            target.free_runaways += 1

    def add_interval(self, interval: TurnInterval) -> None:
        if self.is_detailed:
            raise InvalidStateError.of(
                ErrorCode.WRONG_INGESTION_MODE,
                "Intervals can only be added to a non-detailed log."
            )
        if self._summary is not None:
            raise InvalidStateError.of(
                ErrorCode.SUMMARY_ALREADY_CREATED,
                "Intervals cannot be added after the summary was created."
            )
        self._intervals.append(interval)

    def add_day_change(self, day_change: DayChange) -> None:
        """Insert a day change. Re-adding a day number replaces its entry."""
        changes = [d for d in self._day_changes if d.day_number != day_change.day_number]
        index = bisect_right(changes, day_change.day_number, key=attrgetter("day_number"))
        before = changes[index - 1] if index else None
        after = changes[index] if index < len(changes) else None
        if ((before is not None and before.turn_number > day_change.turn_number)
                or (after is not None and after.turn_number < day_change.turn_number)):
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_DAY_NUMBER,
                "Day changes must not go back in turns.",
                day_number=day_change.day_number,
                turn_number=day_change.turn_number
            )
        changes.insert(index, day_change)
        self._day_changes = changes

    def add_familiar_change(self, familiar_change: FamiliarChange) -> None:
        turn_number = familiar_change.turn_number
        self._familiar_changes = [
            f for f in self._familiar_changes if f.turn_number != turn_number
        ]
        current = _entry_at(self._familiar_changes, turn_number)
        if current is not None and current.familiar_name == familiar_change.familiar_name:
            return
        insort_right(self._familiar_changes, familiar_change, key=_by_turn)

    def add_equipment_change(self, equipment_change: EquipmentChange) -> None:
        turn_number = equipment_change.turn_number
        self._equipment_changes = [
            e for e in self._equipment_changes if e.turn_number != turn_number
        ]
        current = _entry_at(self._equipment_changes, turn_number)
        if current is not None and current.equals_ignore_turn(equipment_change):
            return
        insort_right(self._equipment_changes, equipment_change, key=_by_turn)

    def add_pull(self, pull: Pull) -> None:
        insort_right(self._pulls, pull, key=_by_turn)

    def add_player_snapshot(self, snapshot: PlayerSnapshot) -> None:
        insort_right(self._player_snapshots, snapshot, key=_by_turn)

    def add_level(self, level: LevelData) -> None:
        """Insert a level. Re-adding a level number replaces its entry."""
        self._levels = [l for l in self._levels if l.level_number != level.level_number]
        insort_right(self._levels, level, key=attrgetter("level_number"))

    def add_learned_skill(self, skill_name: str, turn_number: int) -> None:
        """Record a learned skill; skills learned on one turn share an entry."""
        require_turn_number(turn_number)
        for index, entry in enumerate(self._learned_skills):
            if (entry.number == turn_number
                    and entry.data.count(_LEARNED_SKILL_SEPARATOR) < _MAX_LEARNED_SKILL_SEPARATORS):
                self._learned_skills[index] = DataNumberPair(
                    entry.data + _LEARNED_SKILL_SEPARATOR + skill_name, turn_number
                )
                return
        insort_right(self._learned_skills, DataNumberPair(skill_name, turn_number), key=_by_number)

    def add_hybrid_content(self, data: str, turn_number: int) -> None:
        """Record hybridization; repeats on one turn get a '(n)' counter."""
        require_turn_number(turn_number)
        repeats = sum(
            1 for e in self._hybrid_content
            if e.number == turn_number and e.data.startswith(data)
        )
        text = f"{data} ({repeats + 1})" if repeats else data
        insort_right(self._hybrid_content, DataNumberPair(text, turn_number), key=_by_number)

    def _add_dated(self, stream: List[DataNumberPair], data: str, turn_number: int) -> None:
        require_turn_number(turn_number)
        insort_right(stream, DataNumberPair(data, turn_number), key=_by_number)

    def add_hunted_combat(self, encounter_name: str, turn_number: int) -> None:
        self._add_dated(self._hunted_combats, encounter_name, turn_number)

    def add_banished_combat(self, banish_info: str, turn_number: int) -> None:
        self._add_dated(self._banished_combats, banish_info, turn_number)

    def add_disintegrated_combat(self, encounter_name: str, turn_number: int) -> None:
        self._add_dated(self._disintegrated_combats, encounter_name, turn_number)

    def add_lost_combat(self, encounter_name: str, turn_number: int) -> None:
        self._add_dated(self._lost_combats, encounter_name, turn_number)

    def add_tracked_combat_item(self, item_name: str, turn_number: int) -> None:
        self._add_dated(self._tracked_combat_items, item_name, turn_number)

    def add_header_footer_comment(self, comment: HeaderFooterComment) -> None:
        self._header_footer_comments[comment.day_number] = comment

    # =========================================================================
    # STREAM ACCESS (read-only tuples)
    # =========================================================================

    @property
    def turns(self) -> Tuple[SingleTurn, ...]:
        return tuple(self._turns)

    @property
    def day_changes(self) -> Tuple[DayChange, ...]:
        return tuple(self._day_changes)

    @property
    def familiar_changes(self) -> Tuple[FamiliarChange, ...]:
        return tuple(self._familiar_changes)

    @property
    def equipment_changes(self) -> Tuple[EquipmentChange, ...]:
        return tuple(self._equipment_changes)

    @property
    def pulls(self) -> Tuple[Pull, ...]:
        return tuple(self._pulls)

    @property
    def player_snapshots(self) -> Tuple[PlayerSnapshot, ...]:
        return tuple(self._player_snapshots)

    @property
    def levels(self) -> Tuple[LevelData, ...]:
        return tuple(self._levels)

    @property
    def learned_skills(self) -> Tuple[DataNumberPair, ...]:
        return tuple(self._learned_skills)

    @property
    def hybrid_content(self) -> Tuple[DataNumberPair, ...]:
        return tuple(self._hybrid_content)

    @property
    def hunted_combats(self) -> Tuple[DataNumberPair, ...]:
        return tuple(self._hunted_combats)

    @property
    def banished_combats(self) -> Tuple[DataNumberPair, ...]:
        return tuple(self._banished_combats)

    @property
    def disintegrated_combats(self) -> Tuple[DataNumberPair, ...]:
        return tuple(self._disintegrated_combats)

    @property
    def lost_combats(self) -> Tuple[DataNumberPair, ...]:
        return tuple(self._lost_combats)

    @property
    def tracked_combat_items(self) -> Tuple[DataNumberPair, ...]:
        return tuple(self._tracked_combat_items)

    @property
    def is_sub_interval_log(self) -> bool:
        return self._is_sub_interval

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_current_day(self, turn_number: int) -> DayChange:
        require_turn_number(turn_number)
        return _entry_at(self._day_changes, turn_number) or self._day_changes[0]

    def get_current_level(self, turn_number: int) -> LevelData:
        require_turn_number(turn_number)
        return (_entry_at(self._levels, turn_number, key=attrgetter("level_reached_on_turn"))
                or self._levels[0])

    def get_current_familiar(self, turn_number: int) -> Optional[FamiliarChange]:
        require_turn_number(turn_number)
        return _entry_at(self._familiar_changes, turn_number)

    def get_current_equipment(self, turn_number: int) -> Optional[EquipmentChange]:
        require_turn_number(turn_number)
        return _entry_at(self._equipment_changes, turn_number)

    def get_first_player_snapshot_after_turn(self, turn_number: int) -> Optional[PlayerSnapshot]:
        """First snapshot taken on or after `turn_number`, if any."""
        require_turn_number(turn_number)
        for snapshot in self._player_snapshots:
            if snapshot.turn_number >= turn_number:
                return snapshot
        return None

    def get_header_footer_comment(self, day_number: int) -> HeaderFooterComment:
        return self._header_footer_comments.get(day_number, HeaderFooterComment(day_number))

    def get_last_turn_spent(self) -> SingleTurn:
        if not self.is_detailed:
            raise InvalidStateError.of(
                ErrorCode.WRONG_INGESTION_MODE,
                "Only detailed logs hold single turns."
            )
        if not self._turns:
            raise InvalidStateError.of(ErrorCode.EMPTY_TIMELINE, "No turns were spent.")
        return self._turns[-1]

    @property
    def last_turn_number(self) -> int:
        """Turn number of the last turn spent, 0 for an empty timeline."""
        if self.is_detailed:
            return max((t.turn_number for t in self._turns), default=0)
        return max((i.end_turn for i in self._intervals), default=0)

    @property
    def turn_intervals(self) -> Tuple[TurnInterval, ...]:
        self._require_summary()
        return tuple(self._intervals)

    def get_copied_turns(self) -> List[TurnInterval]:
        """Intervals spent fighting copies of earlier monsters."""
        return [i for i in self.turn_intervals if i.area_name.lower() in COPIED_TURN_AREAS]

    # =========================================================================
    # SUMMARY
    # =========================================================================

    @property
    def is_summary_created(self) -> bool:
        return self._summary is not None

    def create_summary(self):
        """
        Build the intervals (detailed logs) and the log summary.

        May be called exactly once per store.
        """
        if self._summary is not None:
            raise InvalidStateError.of(
                ErrorCode.SUMMARY_ALREADY_CREATED,
                "The log summary was already created."
            )
        from ..summary.aggregator import SummaryAggregator

        if self.is_detailed:
            self._intervals = list(build_intervals(self._turns))
        summary = SummaryAggregator(self.data_tables).build(self, self._intervals)
        if self.character_class == CharacterClass.NOT_DEFINED:
            self.character_class = summary.character_class
        if self.is_detailed and not self._is_sub_interval:
            self._levels = list(summary.levels)
        self._summary = summary
        logger.debug(
            "Created summary over %d intervals (%d turns, %d days)",
            len(self._intervals), self.last_turn_number, len(self._day_changes)
        )
        return summary

    def get_log_summary(self):
        self._require_summary()
        return self._summary

    def _require_summary(self) -> None:
        if self._summary is None:
            raise InvalidStateError.of(
                ErrorCode.SUMMARY_NOT_CREATED,
                "The log summary has not been created yet."
            )

    # =========================================================================
    # SUB-INTERVALS
    # =========================================================================

    def get_sub_interval_log_data(self, start_turn: int, end_turn: int) -> TimelineStore:
        """
        Copy of this log restricted to turns [start_turn, end_turn].

        State in effect at start_turn (the day that turn belongs to,
        familiar, equipment, level, player snapshot) is carried in
        restamped to start_turn, so every
        dated entry of the copy lies inside the range. The copy has its
        summary created and keeps the copied levels.
        """
        require_turn_number(start_turn, "Start turn")
        if end_turn <= start_turn or end_turn <= 0:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_RANGE,
                "The end of a sub-interval must lie after its start.",
                start_turn=start_turn,
                end_turn=end_turn
            )

        def inside(turn_number: int) -> bool:
            return start_turn <= turn_number <= end_turn

        sub = TimelineStore(self.is_detailed, self.turn_iteration_mode, self.data_tables,
                            _seeded=False)
        sub._is_sub_interval = True
        sub.character_class = self.character_class
        sub.game_mode = self.game_mode
        sub.ascension_path = self.ascension_path

        if self.is_detailed:
            sub._turns = [t for t in self._turns if inside(t.turn_number)]
        else:
            sub._intervals = [
                i for i in self._intervals
                if i.start_turn >= start_turn and i.end_turn <= end_turn
            ]

        # A day change at start_turn opens the day after it, so the
        # start turn itself still belongs to the day before.
        closing_day = ((_entry_at(self._day_changes, start_turn - 1) if start_turn > 0 else None)
                       or self._day_changes[0])
        sub._day_changes = [replace(closing_day, turn_number=start_turn)] + [
            d for d in self._day_changes
            if start_turn <= d.turn_number < end_turn and d is not closing_day
        ]
        included_days = {d.day_number for d in sub._day_changes}

        sub._familiar_changes = self._carry_in(self._familiar_changes, start_turn, end_turn)
        sub._equipment_changes = self._carry_in(self._equipment_changes, start_turn, end_turn)
        sub._player_snapshots = self._carry_in(self._player_snapshots, start_turn, end_turn)
        current_level = self.get_current_level(start_turn)
        sub._levels = [replace(current_level, level_reached_on_turn=start_turn)] + [
            l for l in self._levels
            if start_turn < l.level_reached_on_turn <= end_turn
        ]

        sub._pulls = [
            p for p in self._pulls
            if inside(p.turn_number) and p.day_number in included_days
        ]
        for name in ("_learned_skills", "_hybrid_content", "_hunted_combats",
                     "_banished_combats", "_disintegrated_combats", "_lost_combats",
                     "_tracked_combat_items"):
            setattr(sub, name, [e for e in getattr(self, name) if inside(e.number)])
        sub._header_footer_comments = {
            day: comment for day, comment in self._header_footer_comments.items()
            if day in included_days
        }

        sub.create_summary()
        return sub

    @staticmethod
    def _carry_in(stream: list, start_turn: int, end_turn: int) -> list:
        """Entry in effect at start_turn (restamped) plus entries in range."""
        carried = []
        current = _entry_at(stream, start_turn)
        if current is not None:
            carried.append(replace(current, turn_number=start_turn))
        carried.extend(e for e in stream if start_turn < e.turn_number <= end_turn)
        return carried
