"""
Dated Turn Actions

Every record in the auxiliary event streams carries the turn number it
happened on (and, for pulls, the day). All records are frozen; streams are
kept sorted by turn number by the Event Timeline Store.

INVARIANTS:
===========
- Turn numbers are non-negative (NO_DAY_CHANGE is the only exception to
  the day-number bound and uses the maximum value for both fields)
- Day numbers start at 1
- Level numbers start at 1
"""

from __future__ import annotations
from dataclasses import dataclass, fields
import sys

from .base import (
    ErrorCode, InvalidArgumentError, require_amount, require_turn_number
)
from .gains import Statgain, NO_STATS


@dataclass(frozen=True)
class DayChange:
    """The start of an in-game day."""
    day_number: int
    turn_number: int

    def __post_init__(self):
        if self.day_number < 1:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_DAY_NUMBER,
                "Day number must be at least 1.",
                day_number=self.day_number
            )
        require_turn_number(self.turn_number)

    def __str__(self) -> str:
        return f"===Day {self.day_number}==="


# Sentinel: no further day changes remain.
NO_DAY_CHANGE = DayChange(sys.maxsize, sys.maxsize)


@dataclass(frozen=True)
class FamiliarChange:
    familiar_name: str
    turn_number: int

    def __post_init__(self):
        require_turn_number(self.turn_number)


NO_EQUIPMENT_NAME = "none"


@dataclass(frozen=True)
class EquipmentChange:
    """The full equipment loadout from `turn_number` onwards."""
    turn_number: int
    hat: str = NO_EQUIPMENT_NAME
    weapon: str = NO_EQUIPMENT_NAME
    offhand: str = NO_EQUIPMENT_NAME
    shirt: str = NO_EQUIPMENT_NAME
    pants: str = NO_EQUIPMENT_NAME
    acc1: str = NO_EQUIPMENT_NAME
    acc2: str = NO_EQUIPMENT_NAME
    acc3: str = NO_EQUIPMENT_NAME
    fam_equip: str = NO_EQUIPMENT_NAME

    def __post_init__(self):
        require_turn_number(self.turn_number)

    @property
    def slots(self) -> tuple:
        return tuple(getattr(self, f.name) for f in fields(self) if f.name != "turn_number")

    def is_equipped(self, equipment: str) -> bool:
        return equipment in self.slots

    def equals_ignore_turn(self, other: EquipmentChange) -> bool:
        return self.slots == other.slots


NO_EQUIPMENT = EquipmentChange(0)


@dataclass(frozen=True)
class Pull:
    """An item withdrawal, stamped with both turn and day."""
    item_name: str
    amount: int
    turn_number: int
    day_number: int

    def __post_init__(self):
        require_amount(self.amount, "Pull amount")
        require_turn_number(self.turn_number)
        if self.day_number < 1:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_DAY_NUMBER,
                "Day number must be at least 1.",
                day_number=self.day_number
            )


@dataclass(frozen=True)
class PlayerSnapshot:
    """Character status (substats, adventures, meat) seen at a turn."""
    mus_stats: int
    myst_stats: int
    mox_stats: int
    adventures_left: int
    current_meat: int
    turn_number: int

    def __post_init__(self):
        for name in ("mus_stats", "myst_stats", "mox_stats", "adventures_left", "current_meat"):
            if getattr(self, name) < 0:
                raise InvalidArgumentError.of(
                    ErrorCode.INVALID_VALUE,
                    f"Player snapshot value '{name}' must not be negative.",
                    value=getattr(self, name)
                )
        require_turn_number(self.turn_number)

    @property
    def stats(self) -> Statgain:
        return Statgain(self.mus_stats, self.myst_stats, self.mox_stats)


@dataclass(frozen=True)
class LevelData:
    """
    A level reached on a turn, with the turn breakdown spent on it.
    The breakdown and the per-turn gain are filled in once the next level
    is reached.
    """
    level_number: int
    level_reached_on_turn: int
    combat_turns: int = 0
    noncombat_turns: int = 0
    other_turns: int = 0
    stats_at_level_reached: Statgain = NO_STATS
    stat_gain_per_turn: float = 0.0

    def __post_init__(self):
        if self.level_number < 1:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_VALUE,
                "Level cannot be below 1.",
                level_number=self.level_number
            )
        require_turn_number(self.level_reached_on_turn)
        if min(self.combat_turns, self.noncombat_turns, self.other_turns) < 0:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_VALUE, "Cannot spend less than 0 turns."
            )

    @property
    def total_turns(self) -> int:
        return self.combat_turns + self.noncombat_turns + self.other_turns

    def __str__(self) -> str:
        return f"Hit Level {self.level_number} on turn {self.level_reached_on_turn}"


@dataclass(frozen=True)
class DataNumberPair:
    """A text entry stamped with a turn number."""
    data: str
    number: int

    def __str__(self) -> str:
        return f"{self.data}: {self.number}"


@dataclass(frozen=True)
class HeaderFooterComment:
    """User notes printed at the start and end of a day."""
    day_number: int
    header_comments: str = ""
    footer_comments: str = ""
