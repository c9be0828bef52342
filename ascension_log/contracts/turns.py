"""
Single Turns and Encounters

A SingleTurn is one adventure spent in an area. Upstream parsing creates it
once and appends it to the timeline; afterwards it is only changed when a
later record with the same turn number is folded into it.

An Encounter is the immutable snapshot of a turn. A turn that absorbed
other records keeps them as its encounter list; by convention the first
encounter is the turn itself as it was when the first record was folded in.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import List, Optional, Tuple

from .base import ErrorCode, InvalidArgumentError, require_turn_number
from .actions import EquipmentChange, NO_EQUIPMENT
from .countables import CombatItem, Consumable, Item, Skill, merge_into
from .gains import MeatGain, MPGain, Statgain, NO_MEAT, NO_MP, NO_STATS


RUNAWAY_SKILL = "return"
RUNAWAY_EQUIPMENT = ("navel ring of navel gazing", "greatest american pants")
NO_FAMILIAR = "none"


class TurnVersion(Enum):
    COMBAT = auto()
    NONCOMBAT = auto()
    OTHER = auto()
    NOT_DEFINED = auto()

    @classmethod
    def from_string(cls, name: str) -> TurnVersion:
        try:
            return cls[name.upper()]
        except KeyError:
            return cls.NOT_DEFINED


@dataclass(frozen=True)
class Encounter:
    """Immutable view of everything that happened in one encounter."""
    area_name: str
    encounter_name: str
    turn_number: int
    day_number: int
    turn_version: TurnVersion = TurnVersion.NOT_DEFINED
    familiar_name: str = NO_FAMILIAR
    stat_gain: Statgain = NO_STATS
    mp_gain: MPGain = NO_MP
    meat: MeatGain = NO_MEAT
    free_runaways: int = 0
    is_disintegrated: bool = False
    dropped_items: Tuple[Item, ...] = ()
    skills_cast: Tuple[Skill, ...] = ()
    consumables_used: Tuple[Consumable, ...] = ()
    combat_items_used: Tuple[CombatItem, ...] = ()

    def is_skill_cast(self, skill_name: str) -> bool:
        wanted = skill_name.lower()
        return any(s.name.lower() == wanted for s in self.skills_cast)


@dataclass
class SingleTurn:
    """
    One discrete game turn.

    INVARIANTS:
    - turn_number >= 0
    - day_number >= 1
    """
    area_name: str
    encounter_name: str
    turn_number: int
    day_number: int = 1
    turn_version: TurnVersion = TurnVersion.NOT_DEFINED
    familiar_name: str = NO_FAMILIAR
    used_equipment: EquipmentChange = NO_EQUIPMENT
    stat_gain: Statgain = NO_STATS
    mp_gain: MPGain = NO_MP
    meat: MeatGain = NO_MEAT
    dropped_items: List[Item] = field(default_factory=list)
    skills_cast: List[Skill] = field(default_factory=list)
    consumables_used: List[Consumable] = field(default_factory=list)
    combat_items_used: List[CombatItem] = field(default_factory=list)
    free_runaways: int = 0
    is_disintegrated: bool = False
    is_banished: bool = False
    banished_info: str = ""
    is_free_turn: bool = False
    notes: str = ""
    _encounters: Optional[List[Encounter]] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        require_turn_number(self.turn_number)
        if self.day_number < 1:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_DAY_NUMBER,
                "Day number must be at least 1.",
                day_number=self.day_number
            )
        if self.is_disintegrated and self.turn_version != TurnVersion.COMBAT:
            self.is_disintegrated = False
        stamped = []
        for consumable in self.consumables_used:
            stamped.append(self._stamp(consumable))
        self.consumables_used = stamped

    # -------------------------------------------------------------------------
    # Turn data
    # -------------------------------------------------------------------------

    def _stamp(self, consumable: Consumable) -> Consumable:
        changes = {}
        if consumable.turn_number_of_usage < 0:
            changes["turn_number_of_usage"] = self.turn_number
        if consumable.day_number_of_usage < 0:
            changes["day_number_of_usage"] = self.day_number
        return replace(consumable, **changes) if changes else consumable

    def add_dropped_item(self, item: Item) -> None:
        merge_into(self.dropped_items, item)

    def add_skill_cast(self, skill: Skill) -> None:
        merge_into(self.skills_cast, skill)

    def add_consumable_used(self, consumable: Consumable) -> None:
        merge_into(self.consumables_used, self._stamp(consumable))

    def add_combat_item_used(self, combat_item: CombatItem) -> None:
        merge_into(self.combat_items_used, combat_item)

    def add_notes(self, notes: str) -> None:
        if notes:
            self.notes = f"{self.notes}\n{notes}" if self.notes else notes

    def add_turn_data(self, other: SingleTurn) -> None:
        """Fold the data of another turn into this one."""
        self.stat_gain = self.stat_gain.add(other.stat_gain)
        self.mp_gain = self.mp_gain.add(other.mp_gain)
        self.meat = self.meat.add(other.meat)
        self.free_runaways += other.free_runaways
        self.add_notes(other.notes)
        for item in other.dropped_items:
            self.add_dropped_item(item)
        for skill in other.skills_cast:
            self.add_skill_cast(skill)
        for consumable in other.consumables_used:
            self.add_consumable_used(consumable)
        for combat_item in other.combat_items_used:
            self.add_combat_item_used(combat_item)

    # -------------------------------------------------------------------------
    # Encounters
    # -------------------------------------------------------------------------

    def add_encounter(self, encounter: Encounter) -> None:
        """
        Add an encounter that happened during this turn. The first call
        snapshots this turn as the leading encounter, so call it before
        add_turn_data() to avoid counting the folded data twice.
        """
        if self._encounters is None:
            self._encounters = [self.to_encounter()]
        self._encounters.append(encounter)

    @property
    def encounters(self) -> Tuple[Encounter, ...]:
        if self._encounters is None:
            return (self.to_encounter(),)
        return tuple(self._encounters)

    def to_encounter(self, turn_number: Optional[int] = None) -> Encounter:
        return Encounter(
            area_name=self.area_name,
            encounter_name=self.encounter_name,
            turn_number=self.turn_number if turn_number is None else turn_number,
            day_number=self.day_number,
            turn_version=self.turn_version,
            familiar_name=self.familiar_name,
            stat_gain=self.stat_gain,
            mp_gain=self.mp_gain,
            meat=self.meat,
            free_runaways=self.free_runaways,
            is_disintegrated=self.is_disintegrated,
            dropped_items=tuple(self.dropped_items),
            skills_cast=tuple(self.skills_cast),
            consumables_used=tuple(self.consumables_used),
            combat_items_used=tuple(self.combat_items_used)
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_skill_cast(self, skill_name: str) -> bool:
        wanted = skill_name.lower()
        return any(s.name.lower() == wanted for s in self.skills_cast)

    def is_runaways_equipment_equipped(self) -> bool:
        return any(self.used_equipment.is_equipped(e) for e in RUNAWAY_EQUIPMENT)

    def is_ran_away_on_this_turn(self) -> bool:
        return self.turn_version == TurnVersion.COMBAT and self.is_skill_cast(RUNAWAY_SKILL)

    def total_stat_gain(self) -> Statgain:
        """Stat gain of the turn including its consumables."""
        total = self.stat_gain
        for consumable in self.consumables_used:
            total = total.add(consumable.stat_gain)
        return total

    def __str__(self) -> str:
        return f"[{self.turn_number}] {self.area_name} -- {self.encounter_name}"
