"""
Character Metadata

Class, game mode and path of an ascension. Each enum renders as its
in-game display name and parses back from it, falling back to NOT_DEFINED.
"""

from __future__ import annotations
from enum import Enum, auto


class StatClass(Enum):
    MUSCLE = auto()
    MYSTICALITY = auto()
    MOXIE = auto()


class _DisplayEnum(Enum):
    """Enum whose value tuple starts with the display name."""

    @property
    def display_name(self) -> str:
        return self.value[0] if isinstance(self.value, tuple) else self.value

    def __str__(self) -> str:
        return self.display_name

    @classmethod
    def from_string(cls, name: str):
        for member in cls:
            if member.display_name == name:
                return member
        return cls["NOT_DEFINED"]


class CharacterClass(_DisplayEnum):
    SEAL_CLUBBER = ("Seal Clubber", StatClass.MUSCLE)
    TURTLE_TAMER = ("Turtle Tamer", StatClass.MUSCLE)
    PASTAMANCER = ("Pastamancer", StatClass.MYSTICALITY)
    SAUCEROR = ("Sauceror", StatClass.MYSTICALITY)
    DISCO_BANDIT = ("Disco Bandit", StatClass.MOXIE)
    ACCORDION_THIEF = ("Accordion Thief", StatClass.MOXIE)
    AVATAR_OF_BORIS = ("Avatar of Boris", StatClass.MUSCLE)
    AVATAR_OF_JARLSBERG = ("Avatar of Jarlsberg", StatClass.MYSTICALITY)
    AVATAR_OF_SNEAKY_PETE = ("Avatar of Sneaky Pete", StatClass.MOXIE)
    ED = ("Ed", StatClass.MYSTICALITY)
    NOT_DEFINED = ("not defined", StatClass.MUSCLE)

    @property
    def stat_class(self) -> StatClass:
        return self.value[1]


class GameMode(_DisplayEnum):
    CASUAL = "Casual"
    SOFTCORE = "Softcore"
    HARDCORE = "Hardcore"
    NOT_DEFINED = "not defined"


class AscensionPath(_DisplayEnum):
    NO_PATH = "No-Path"
    TEETOTALER = "Teetotaler"
    BOOZETAFARIAN = "Boozetafarian"
    OXYGENARIAN = "Oxygenarian"
    BEES_HATE_YOU = "Bees Hate You"
    WAY_OF_THE_SURPRISING_FIST = "Way of the Surprising Fist"
    TRENDY = "Trendy"
    AVATAR_OF_BORIS = "Avatar of Boris"
    BUGBEAR_INVASION = "Bugbear Invasion"
    ZOMBIE_SLAYER = "Zombie Slayer"
    AVATAR_OF_JARLSBERG = "Avatar of Jarlsberg"
    BIG = "BIG!"
    KOLHS = "KOLHS"
    CLASS_ACT_II = "Class Act II: A Class For Pigs"
    CLASS_ACT = "Class Act"
    AVATAR_OF_SNEAKY_PETE = "Avatar of Sneaky Pete"
    SLOW_AND_STEADY = "Slow and Steady"
    HEAVY_RAINS = "Heavy Rains"
    PICKY = "Picky"
    STANDARD = "Standard"
    ED = "Actually Ed the Undying"
    NOT_DEFINED = "not defined"
