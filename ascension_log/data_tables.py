"""
Game Data Tables

Static game knowledge the summary and renderer consult: which encounters
are semirares, bad-moon adventures or wanderers, which item drops are
worth printing, which consumables are always shown, and which areas count
towards which quest.

The defaults below cover the common cases. A JSON file with the same keys
(lists of strings; `quest_areas` as an object of label -> list of areas)
replaces individual tables through DataTables.from_json().
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Dict, FrozenSet, Mapping, Tuple
import json
import logging
import re

logger = logging.getLogger(__name__)

_NON_ASCII = re.compile(r"[^\x00-\x7F]")

BAD_MOON_PREFIX = "flowers for "


def normalize_name(name: str) -> str:
    """Lower-case and strip non-ASCII characters, as the tables are keyed."""
    return _NON_ASCII.sub("", name.lower())


_DEFAULT_SEMIRARES = frozenset({
    "lunchboxing", "a tight squeeze", "bad medicine is what you need",
    "how far down do you want to go?", "le chauffeur", "play misty for me",
    "in the still of the alley", "yo ho ho and a bottle of whatever this is",
    "a menacing phantom", "all the rave", "knob goblin elite guard captain",
    "knob goblin embezzler", "the time the snake got your tongue",
    "baa'baa'bu'ran", "it's a gas gas gas", "hands off the merchandise!",
    "filth, filth, and more filth", "lucky chang",
})

_DEFAULT_BAD_MOON = frozenset({
    "heart of darkness", "tiny fingers", "the mouth of madness",
    "the lady in red", "ye olde hoteller", "it takes some getting used to",
})

_DEFAULT_WANDERERS = frozenset({
    "wandering eye", "lucky stranger", "black crayon beast",
    "bugbear in a mask", "bugbear robo-surgeon", "tegu rainbow",
    "sausage goblin", "drunk pygmy", "vote monster",
})

_DEFAULT_IMPORTANT_ITEMS = frozenset({
    "star", "line", "star chart", "sonar-in-a-biscuit", "digital key",
    "wand of nagamar", "enchanted bean", "pool cue", "can of rock",
    "disassembled clover", "ten-leaf clover", "ka coin",
})

_DEFAULT_ONETIME_ITEMS = frozenset({
    "dodecagram", "box of birthday candles", "eldritch butterknife",
    "s.o.c.k.", "mosquito larva", "boss bat bandana", "knob goblin encryption key",
    "unstable fulminate", "ancient bronze token", "richard's star key",
    "skeleton key", "sneaky pete's key", "boris's key", "jarlsberg's key",
})

_DEFAULT_SPECIAL_CONSUMABLES = frozenset({
    "milk of magnesium", "munchies pill", "astral energy drink",
    "ode to booze", "chocolate sculpture",
})

_DEFAULT_QUEST_AREAS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Spooky Forest", ("The Spooky Forest",)),
    ("Tavern quest", ("Tavern Cellar", "The Typical Tavern Cellar")),
    ("Bat quest", ("The Bat Hole Entryway", "The Guano Junction", "The Beanbat Chamber",
                   "The Batrat and Ratbat Burrow", "The Boss Bat's Lair")),
    ("Cobb's Knob quest", ("The Outskirts of Cobb's Knob", "Cobb's Knob Harem",
                           "Cobb's Knob Barracks", "Cobb's Knob Kitchens", "Throne Room")),
    ("Friars' quest", ("The Dark Neck of the Woods", "The Dark Heart of the Woods",
                       "The Dark Elbow of the Woods")),
    ("Defiled Cyrpt quest", ("The Defiled Cranny", "The Defiled Nook", "The Defiled Alcove",
                             "The Defiled Niche", "Haert of the Cyrpt")),
    ("Trapzor quest", ("Itznotyerzitz Mine", "The Goatlet", "Lair of the Ninja Snowmen",
                       "The eXtreme Slope", "Mist-Shrouded Peak")),
    ("Orc Chasm quest", ("Smut Orc Logging Camp", "A-Boo Peak", "Oil Peak", "Twin Peak")),
    ("Airship", ("The Penultimate Fantasy Airship",)),
    ("Giant's Castle", ("The Castle in the Clouds in the Sky (Basement)",
                        "The Castle in the Clouds in the Sky (Ground Floor)",
                        "The Castle in the Clouds in the Sky (Top Floor)")),
    ("Pirate quest", ("The Obligatory Pirate's Cove", "Barrrney's Barrr", "The F'c'le",
                      "The Poop Deck", "Belowdecks")),
    ("Spookyraven First Floor", ("The Haunted Kitchen", "The Haunted Billiards Room",
                                 "The Haunted Library")),
    ("Spookyraven Second Floor", ("The Haunted Bathroom", "The Haunted Bedroom",
                                  "The Haunted Gallery", "The Haunted Ballroom")),
    ("Black Forest quest", ("The Black Forest",)),
    ("Desert Oasis quest", ("The Arid, Extra-Dry Desert", "The Oasis")),
    ("Hidden City quest", ("The Hidden Park", "The Hidden Apartment Building",
                           "The Hidden Hospital", "The Hidden Office Building",
                           "The Hidden Bowling Alley")),
    ("Palindome quest", ("Inside the Palindome",)),
    ("Pyramid quest", ("The Upper Chamber", "The Middle Chamber", "The Lower Chambers")),
    ("War Island quest", ("The Battlefield (Frat Uniform)", "The Battlefield (Hippy Uniform)")),
    ("Daily Dungeon", ("The Daily Dungeon",)),
)


@dataclass(frozen=True)
class DataTables:
    """
    Lookup tables for special encounters and items.

    All name sets hold normalized names (see normalize_name()).
    """
    semirares: FrozenSet[str] = _DEFAULT_SEMIRARES
    bad_moon_adventures: FrozenSet[str] = _DEFAULT_BAD_MOON
    wandering_adventures: FrozenSet[str] = _DEFAULT_WANDERERS
    important_items: FrozenSet[str] = _DEFAULT_IMPORTANT_ITEMS
    onetime_items: FrozenSet[str] = _DEFAULT_ONETIME_ITEMS
    special_consumables: FrozenSet[str] = _DEFAULT_SPECIAL_CONSUMABLES
    quest_areas: Tuple[Tuple[str, Tuple[str, ...]], ...] = field(default=_DEFAULT_QUEST_AREAS)

    def is_semirare(self, encounter_name: str) -> bool:
        return normalize_name(encounter_name) in self.semirares

    def is_bad_moon(self, encounter_name: str) -> bool:
        name = normalize_name(encounter_name)
        return name in self.bad_moon_adventures or name.startswith(BAD_MOON_PREFIX)

    def is_wandering(self, encounter_name: str) -> bool:
        return normalize_name(encounter_name) in self.wandering_adventures

    def is_important_item(self, item_name: str) -> bool:
        return normalize_name(item_name) in self.important_items

    def is_onetime_item(self, item_name: str) -> bool:
        return normalize_name(item_name) in self.onetime_items

    def is_special_consumable(self, consumable_name: str) -> bool:
        return normalize_name(consumable_name) in self.special_consumables

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> DataTables:
        """Build tables from a mapping, keeping defaults for missing keys."""
        known = {f.name for f in fields(cls)}
        overrides: Dict[str, object] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown data table %r", key)
                continue
            if key == "quest_areas":
                overrides[key] = tuple(
                    (label, tuple(areas)) for label, areas in dict(value).items()
                )
            else:
                overrides[key] = frozenset(normalize_name(v) for v in value)
        return cls(**overrides)

    @classmethod
    def from_json(cls, path: str) -> DataTables:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("Loaded data tables from %s", path)
        return cls.from_mapping(data)


DEFAULT_DATA_TABLES = DataTables()
