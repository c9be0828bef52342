"""
Countable Game Entities

Items, skills, combat items and consumables. Each is a frozen value with a
name and an amount; entities sharing a merge key are combined by summing
their amounts. Collections of countables are kept as plain lists merged
through merge_into().
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Hashable, Iterable, List, TypeVar

from .base import ErrorCode, InvalidArgumentError, require_amount
from .gains import Statgain, NO_STATS


class ConsumableVersion(Enum):
    FOOD = "food"
    BOOZE = "booze"
    SPLEEN = "spleen"
    OTHER = "other"


@dataclass(frozen=True)
class Item:
    """A dropped item. Merged items keep the earliest found-on turn."""
    name: str
    amount: int = 1
    found_on_turn: int = -1

    def __post_init__(self):
        require_amount(self.amount, "Item amount")

    @property
    def key(self) -> Hashable:
        return self.name

    def merged(self, other: Item) -> Item:
        turns = [t for t in (self.found_on_turn, other.found_on_turn) if t >= 0]
        return replace(
            self,
            amount=self.amount + other.amount,
            found_on_turn=min(turns) if turns else -1
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.amount})"


@dataclass(frozen=True)
class CombatItem:
    """An item used inside a combat."""
    name: str
    amount: int = 1
    turn_used: int = -1

    def __post_init__(self):
        require_amount(self.amount, "Combat item amount")

    @property
    def key(self) -> Hashable:
        return self.name

    def merged(self, other: CombatItem) -> CombatItem:
        turns = [t for t in (self.turn_used, other.turn_used) if t >= 0]
        return replace(
            self,
            amount=self.amount + other.amount,
            turn_used=min(turns) if turns else -1
        )


@dataclass(frozen=True)
class Skill:
    """A skill cast `amount` times for a total of `mp_cost` MP."""
    name: str
    amount: int = 1
    mp_cost: int = 0

    def __post_init__(self):
        require_amount(self.amount, "Skill cast amount")

    @property
    def key(self) -> Hashable:
        return self.name.lower()

    def merged(self, other: Skill) -> Skill:
        return replace(self, amount=self.amount + other.amount,
                       mp_cost=self.mp_cost + other.mp_cost)

    def __str__(self) -> str:
        return f"Cast {self.amount} {self.name}"


_CONSUME_VERBS = {
    ConsumableVersion.FOOD: "Ate",
    ConsumableVersion.BOOZE: "Drank",
    ConsumableVersion.SPLEEN: "Chewed",
    ConsumableVersion.OTHER: "Used",
}


@dataclass(frozen=True)
class Consumable:
    """
    A consumable use. Consumables of the same name and kind used on the same
    day merge; the summary merges across days by clearing the day.
    """
    name: str
    version: ConsumableVersion
    adventure_gain: int = 0
    amount: int = 1
    turn_number_of_usage: int = -1
    day_number_of_usage: int = -1
    stat_gain: Statgain = NO_STATS

    def __post_init__(self):
        require_amount(self.amount, "Consumable amount")
        if self.adventure_gain < 0:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_VALUE,
                "Adventure gain must not be negative.",
                adventure_gain=self.adventure_gain
            )

    @property
    def key(self) -> Hashable:
        return (self.name, self.version, self.day_number_of_usage)

    @property
    def verb(self) -> str:
        return _CONSUME_VERBS[self.version]

    def merged(self, other: Consumable) -> Consumable:
        return replace(
            self,
            amount=self.amount + other.amount,
            adventure_gain=self.adventure_gain + other.adventure_gain,
            stat_gain=self.stat_gain.add(other.stat_gain)
        )

    def __str__(self) -> str:
        text = f"{self.verb} {self.amount} {self.name} "
        if self.adventure_gain > 0:
            text += f"({self.adventure_gain} adventures gained) "
        return text + str(self.stat_gain)


T = TypeVar("T", Item, CombatItem, Skill, Consumable)


def merge_into(collection: List[T], element: T) -> None:
    """Merge `element` into `collection` in place, by merge key."""
    for index, existing in enumerate(collection):
        if existing.key == element.key:
            collection[index] = existing.merged(element)
            return
    collection.append(element)


def merge_all(elements: Iterable[T]) -> List[T]:
    merged: List[T] = []
    for element in elements:
        merge_into(merged, element)
    return merged
