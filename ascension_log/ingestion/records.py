"""
Log Records
===========

The JSON shape of an ascension log, one pydantic model per record type.
A log document is a list of records (or an object holding one under
"records"); every record names its type in a "type" field.

Models only check shape and bounds. Each one knows how to apply itself to
a TimelineStore, where the store's own contract checks run.

RECORD TYPES:
=============
- character, turn, interval, day_change, familiar_change,
  equipment_change, pull, player_snapshot, level, learned_skill, hybrid,
  hunted, banished, disintegrated, lost_combat, tracked_combat_item,
  header_footer_comment
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import ClassVar, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, Field, NonNegativeInt, PositiveInt

from ..contracts.actions import (
    DayChange, EquipmentChange, FamiliarChange, HeaderFooterComment, LevelData,
    PlayerSnapshot, Pull, NO_EQUIPMENT, NO_EQUIPMENT_NAME
)
from ..contracts.character import AscensionPath, CharacterClass, GameMode
from ..contracts.countables import CombatItem, Consumable, ConsumableVersion, Item, Skill
from ..contracts.gains import MeatGain, MPGain, Statgain
from ..contracts.turns import NO_FAMILIAR, SingleTurn, TurnVersion
from ..timeline.intervals import FreeRunaways, SimpleTurnInterval
from ..timeline.store import TimelineStore


# =============================================================================
# NESTED VALUES
# =============================================================================

class StatgainRecord(BaseModel):
    mus: int = 0
    myst: int = 0
    mox: int = 0

    def to_contract(self) -> Statgain:
        return Statgain(self.mus, self.myst, self.mox)


class MPGainRecord(BaseModel):
    encounter: int = 0
    starfish: int = 0
    resting: int = 0
    out_of_encounter: int = 0
    consumable: int = 0

    def to_contract(self) -> MPGain:
        return MPGain(self.encounter, self.starfish, self.resting,
                      self.out_of_encounter, self.consumable)


class MeatGainRecord(BaseModel):
    encounter: NonNegativeInt = 0
    other: NonNegativeInt = 0
    spent: NonNegativeInt = 0

    def to_contract(self) -> MeatGain:
        return MeatGain(self.encounter, self.other, self.spent)


class ItemRecord(BaseModel):
    name: str
    amount: PositiveInt = 1


class SkillRecord(BaseModel):
    name: str
    amount: PositiveInt = 1
    mp_cost: NonNegativeInt = 0


class ConsumableRecord(BaseModel):
    name: str
    kind: ConsumableVersion = ConsumableVersion.OTHER
    adventure_gain: NonNegativeInt = 0
    amount: PositiveInt = 1
    stat_gain: StatgainRecord = Field(default_factory=StatgainRecord)
    day: Optional[PositiveInt] = None

    def to_contract(self, turn_number: int, day_number: int) -> Consumable:
        return Consumable(
            name=self.name,
            version=self.kind,
            adventure_gain=self.adventure_gain,
            amount=self.amount,
            turn_number_of_usage=turn_number,
            day_number_of_usage=self.day or day_number,
            stat_gain=self.stat_gain.to_contract()
        )


class _Counted(BaseModel):
    """Shared body of the turn and interval records."""
    area: str
    stat_gain: StatgainRecord = Field(default_factory=StatgainRecord)
    mp_gain: MPGainRecord = Field(default_factory=MPGainRecord)
    meat: MeatGainRecord = Field(default_factory=MeatGainRecord)
    items: List[ItemRecord] = Field(default_factory=list)
    skills: List[SkillRecord] = Field(default_factory=list)
    consumables: List[ConsumableRecord] = Field(default_factory=list)
    combat_items: List[ItemRecord] = Field(default_factory=list)


# =============================================================================
# RECORDS
# =============================================================================

class LogRecord(BaseModel, ABC):
    type: str

    @abstractmethod
    def apply(self, store: TimelineStore) -> None:
        """Feed this record into the store."""
        pass


class CharacterRecord(LogRecord):
    type: Literal["character"] = "character"
    character_class: Optional[str] = None
    game_mode: Optional[str] = None
    ascension_path: Optional[str] = None

    def apply(self, store: TimelineStore) -> None:
        if self.character_class is not None:
            store.character_class = CharacterClass.from_string(self.character_class)
        if self.game_mode is not None:
            store.game_mode = GameMode.from_string(self.game_mode)
        if self.ascension_path is not None:
            store.ascension_path = AscensionPath.from_string(self.ascension_path)


class TurnRecord(_Counted, LogRecord):
    """
    One spent turn. Familiar and equipment default to the ones in effect
    at the turn, so change records should precede the turns they affect.
    """
    type: Literal["turn"] = "turn"
    encounter: str
    turn: NonNegativeInt
    day: PositiveInt = 1
    version: str = "NOT_DEFINED"
    familiar: Optional[str] = None
    free_runaways: NonNegativeInt = 0
    disintegrated: bool = False
    banished: bool = False
    banished_info: str = ""
    free_turn: bool = False
    notes: str = ""

    def apply(self, store: TimelineStore) -> None:
        familiar = self.familiar
        if familiar is None:
            current = store.get_current_familiar(self.turn)
            familiar = current.familiar_name if current is not None else NO_FAMILIAR
        equipment = store.get_current_equipment(self.turn) or NO_EQUIPMENT

        turn = SingleTurn(
            self.area, self.encounter, self.turn, self.day,
            turn_version=TurnVersion.from_string(self.version),
            familiar_name=familiar,
            used_equipment=equipment,
            stat_gain=self.stat_gain.to_contract(),
            mp_gain=self.mp_gain.to_contract(),
            meat=self.meat.to_contract(),
            free_runaways=self.free_runaways,
            is_disintegrated=self.disintegrated,
            is_banished=self.banished,
            banished_info=self.banished_info,
            is_free_turn=self.free_turn,
            notes=self.notes
        )
        for item in self.items:
            turn.add_dropped_item(Item(item.name, item.amount, self.turn))
        for skill in self.skills:
            turn.add_skill_cast(Skill(skill.name, skill.amount, skill.mp_cost))
        for consumable in self.consumables:
            turn.add_consumable_used(consumable.to_contract(self.turn, self.day))
        for combat_item in self.combat_items:
            turn.add_combat_item_used(CombatItem(combat_item.name, combat_item.amount, self.turn))
        store.add_turn(turn)


class IntervalRecord(_Counted, LogRecord):
    """A pre-aggregated interval of a non-detailed log."""
    type: Literal["interval"] = "interval"
    start: NonNegativeInt
    end: NonNegativeInt
    day: PositiveInt = 1
    runaways_attempted: NonNegativeInt = 0
    runaways_successful: NonNegativeInt = 0
    pre_notes: str = ""
    post_notes: str = ""

    def apply(self, store: TimelineStore) -> None:
        interval = SimpleTurnInterval(
            self.area, self.start, self.end,
            stat_gain=self.stat_gain.to_contract(),
            mp_gain=self.mp_gain.to_contract(),
            meat=self.meat.to_contract(),
            dropped_items=[Item(i.name, i.amount, self.end) for i in self.items],
            skills_cast=[Skill(s.name, s.amount, s.mp_cost) for s in self.skills],
            consumables_used=[c.to_contract(self.end, self.day) for c in self.consumables],
            combat_items_used=[CombatItem(c.name, c.amount, self.end) for c in self.combat_items],
            free_runaways=FreeRunaways(self.runaways_attempted, self.runaways_successful)
        )
        interval.pre_interval_comment = self.pre_notes
        interval.post_interval_comment = self.post_notes
        store.add_interval(interval)


class DayChangeRecord(LogRecord):
    type: Literal["day_change"] = "day_change"
    day: PositiveInt
    turn: NonNegativeInt

    def apply(self, store: TimelineStore) -> None:
        store.add_day_change(DayChange(self.day, self.turn))


class FamiliarChangeRecord(LogRecord):
    type: Literal["familiar_change"] = "familiar_change"
    familiar: str
    turn: NonNegativeInt

    def apply(self, store: TimelineStore) -> None:
        store.add_familiar_change(FamiliarChange(self.familiar, self.turn))


class EquipmentChangeRecord(LogRecord):
    type: Literal["equipment_change"] = "equipment_change"
    turn: NonNegativeInt
    hat: str = NO_EQUIPMENT_NAME
    weapon: str = NO_EQUIPMENT_NAME
    offhand: str = NO_EQUIPMENT_NAME
    shirt: str = NO_EQUIPMENT_NAME
    pants: str = NO_EQUIPMENT_NAME
    acc1: str = NO_EQUIPMENT_NAME
    acc2: str = NO_EQUIPMENT_NAME
    acc3: str = NO_EQUIPMENT_NAME
    fam_equip: str = NO_EQUIPMENT_NAME

    def apply(self, store: TimelineStore) -> None:
        store.add_equipment_change(EquipmentChange(
            self.turn, self.hat, self.weapon, self.offhand, self.shirt, self.pants,
            self.acc1, self.acc2, self.acc3, self.fam_equip
        ))


class PullRecord(LogRecord):
    type: Literal["pull"] = "pull"
    item: str
    amount: PositiveInt = 1
    turn: NonNegativeInt
    day: PositiveInt

    def apply(self, store: TimelineStore) -> None:
        store.add_pull(Pull(self.item, self.amount, self.turn, self.day))


class PlayerSnapshotRecord(LogRecord):
    type: Literal["player_snapshot"] = "player_snapshot"
    mus: NonNegativeInt
    myst: NonNegativeInt
    mox: NonNegativeInt
    adventures_left: NonNegativeInt
    meat: NonNegativeInt
    turn: NonNegativeInt

    def apply(self, store: TimelineStore) -> None:
        store.add_player_snapshot(PlayerSnapshot(
            self.mus, self.myst, self.mox, self.adventures_left, self.meat, self.turn
        ))


class LevelRecord(LogRecord):
    type: Literal["level"] = "level"
    level: PositiveInt
    turn: NonNegativeInt
    combat_turns: NonNegativeInt = 0
    noncombat_turns: NonNegativeInt = 0
    other_turns: NonNegativeInt = 0
    stats: StatgainRecord = Field(default_factory=StatgainRecord)
    stat_gain_per_turn: float = 0.0

    def apply(self, store: TimelineStore) -> None:
        store.add_level(LevelData(
            self.level, self.turn, self.combat_turns, self.noncombat_turns,
            self.other_turns, self.stats.to_contract(), self.stat_gain_per_turn
        ))


class _DatedRecord(LogRecord):
    """A (text, turn) entry of one of the dated side streams."""
    data: str
    turn: NonNegativeInt

    # Name of the TimelineStore method receiving (data, turn).
    store_method: ClassVar[str] = ""

    def apply(self, store: TimelineStore) -> None:
        getattr(store, self.store_method)(self.data, self.turn)


class LearnedSkillRecord(_DatedRecord):
    type: Literal["learned_skill"] = "learned_skill"
    store_method: ClassVar[str] = "add_learned_skill"


class HybridRecord(_DatedRecord):
    type: Literal["hybrid"] = "hybrid"
    store_method: ClassVar[str] = "add_hybrid_content"


class HuntedRecord(_DatedRecord):
    type: Literal["hunted"] = "hunted"
    store_method: ClassVar[str] = "add_hunted_combat"


class BanishedRecord(_DatedRecord):
    type: Literal["banished"] = "banished"
    store_method: ClassVar[str] = "add_banished_combat"


class DisintegratedRecord(_DatedRecord):
    type: Literal["disintegrated"] = "disintegrated"
    store_method: ClassVar[str] = "add_disintegrated_combat"


class LostCombatRecord(_DatedRecord):
    type: Literal["lost_combat"] = "lost_combat"
    store_method: ClassVar[str] = "add_lost_combat"


class TrackedCombatItemRecord(_DatedRecord):
    type: Literal["tracked_combat_item"] = "tracked_combat_item"
    store_method: ClassVar[str] = "add_tracked_combat_item"


class HeaderFooterCommentRecord(LogRecord):
    type: Literal["header_footer_comment"] = "header_footer_comment"
    day: PositiveInt
    header: str = ""
    footer: str = ""

    def apply(self, store: TimelineStore) -> None:
        store.add_header_footer_comment(HeaderFooterComment(self.day, self.header, self.footer))


RECORD_TYPES: Dict[str, Type[LogRecord]] = {
    "character": CharacterRecord,
    "turn": TurnRecord,
    "interval": IntervalRecord,
    "day_change": DayChangeRecord,
    "familiar_change": FamiliarChangeRecord,
    "equipment_change": EquipmentChangeRecord,
    "pull": PullRecord,
    "player_snapshot": PlayerSnapshotRecord,
    "level": LevelRecord,
    "learned_skill": LearnedSkillRecord,
    "hybrid": HybridRecord,
    "hunted": HuntedRecord,
    "banished": BanishedRecord,
    "disintegrated": DisintegratedRecord,
    "lost_combat": LostCombatRecord,
    "tracked_combat_item": TrackedCombatItemRecord,
    "header_footer_comment": HeaderFooterCommentRecord,
}
