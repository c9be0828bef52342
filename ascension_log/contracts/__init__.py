"""
Contracts Layer

Immutable value types, enums and the error taxonomy shared by every layer.
Other layers import from here; this package imports from no other layer.
"""

from .base import (
    AscensionLogError, Error, ErrorCode, InvalidArgumentError,
    InvalidStateError, Result
)
from .gains import MeatGain, MPGain, Statgain, NO_MEAT, NO_MP, NO_STATS
from .countables import (
    CombatItem, Consumable, ConsumableVersion, Item, Skill, merge_all, merge_into
)
from .actions import (
    DataNumberPair, DayChange, EquipmentChange, FamiliarChange,
    HeaderFooterComment, LevelData, PlayerSnapshot, Pull,
    NO_DAY_CHANGE, NO_EQUIPMENT
)
from .turns import Encounter, SingleTurn, TurnVersion
from .character import AscensionPath, CharacterClass, GameMode, StatClass

__all__ = [
    "AscensionLogError", "Error", "ErrorCode", "InvalidArgumentError",
    "InvalidStateError", "Result",
    "MeatGain", "MPGain", "Statgain", "NO_MEAT", "NO_MP", "NO_STATS",
    "CombatItem", "Consumable", "ConsumableVersion", "Item", "Skill",
    "merge_all", "merge_into",
    "DataNumberPair", "DayChange", "EquipmentChange", "FamiliarChange",
    "HeaderFooterComment", "LevelData", "PlayerSnapshot", "Pull",
    "NO_DAY_CHANGE", "NO_EQUIPMENT",
    "Encounter", "SingleTurn", "TurnVersion",
    "AscensionPath", "CharacterClass", "GameMode", "StatClass",
]
