"""
Log Summary
===========

The aggregate view of one ascension. Built once by the SummaryAggregator
and never changed afterwards; it holds copies and derived values only, so
it stays valid whatever happens to the turns it was computed from.

All collections are tuples and every record is frozen, so two summaries
computed from equal input compare equal.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from ..contracts.actions import DataNumberPair, LevelData
from ..contracts.character import CharacterClass
from ..contracts.countables import CombatItem, Consumable, Item, Skill
from ..contracts.gains import MeatGain, MPGain, Statgain, NO_MP, NO_STATS
from ..contracts.turns import Encounter
from ..timeline.intervals import FreeRunaways


@dataclass(frozen=True)
class AreaStatgains:
    area_name: str
    stat_gain: Statgain

    def __str__(self) -> str:
        s = self.stat_gain
        return f"{self.area_name}\t{s.mus}\t{s.myst}\t{s.mox}"


@dataclass(frozen=True)
class Goatlet:
    turns_spent: int = 0
    dairy_goats_found: int = 0
    cheese_found: int = 0
    milk_found: int = 0


@dataclass(frozen=True)
class NesRealm:
    """The 8-Bit Realm."""
    turns_spent: int = 0
    bloopers_found: int = 0
    bullets_found: int = 0


@dataclass(frozen=True)
class ConsumptionSummary:
    """Consumables merged across days, split by kind."""
    food: Tuple[Consumable, ...] = ()
    booze: Tuple[Consumable, ...] = ()
    spleen: Tuple[Consumable, ...] = ()
    other: Tuple[Consumable, ...] = ()
    turns_from_food: int = 0
    turns_from_booze: int = 0
    turns_from_other: int = 0
    food_stat_gains: Statgain = NO_STATS
    booze_stat_gains: Statgain = NO_STATS
    used_stat_gains: Statgain = NO_STATS


@dataclass(frozen=True)
class LogSummary:
    """Aggregates of one ascension."""
    last_turn_number: int
    character_class: CharacterClass
    turns_per_area: Tuple[DataNumberPair, ...]
    quest_turncounts: Tuple[DataNumberPair, ...]
    levels: Tuple[LevelData, ...]

    consumables_used: Tuple[Consumable, ...]
    dropped_items: Tuple[Item, ...]
    skills_cast: Tuple[Skill, ...]
    combat_items_used: Tuple[CombatItem, ...]
    consumption: ConsumptionSummary

    familiar_usage: Tuple[DataNumberPair, ...]
    semirares: Tuple[DataNumberPair, ...]
    bad_moon_adventures: Tuple[DataNumberPair, ...]
    wandering_adventures: Tuple[DataNumberPair, ...]
    romantic_arrow_usages: Tuple[DataNumberPair, ...]
    disintegrated_combats: Tuple[DataNumberPair, ...]
    banished_combats: Tuple[DataNumberPair, ...]
    tracked_combat_items: Tuple[DataNumberPair, ...]
    free_runaway_combats: Tuple[Encounter, ...]
    free_runaways: FreeRunaways

    goatlet: Goatlet
    nes_realm: NesRealm

    total_stat_gains: Statgain
    combat_stat_gains: Statgain
    noncombat_stat_gains: Statgain
    other_stat_gains: Statgain
    area_stat_gains: Tuple[AreaStatgains, ...]

    total_mp_gains: MPGain = NO_MP
    mp_gains_per_level: Tuple[Tuple[int, MPGain], ...] = ()
    meat_per_level: Tuple[Tuple[int, MeatGain], ...] = ()
    total_amount_skill_casts: int = 0
    total_mp_used: int = 0
    total_meat_gain: int = 0
    total_meat_spent: int = 0
    total_turns_from_rollover: int = 0
    total_turns_combat: int = 0
    total_turns_noncombat: int = 0
    total_turns_other: int = 0

    @property
    def total_turns_from_food(self) -> int:
        return self.consumption.turns_from_food

    @property
    def total_turns_from_booze(self) -> int:
        return self.consumption.turns_from_booze

    @property
    def total_turns_from_other(self) -> int:
        return self.consumption.turns_from_other
