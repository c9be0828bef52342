"""
Summary Aggregator
==================

One forward pass over the interval sequence of a store, accumulating the
values of a LogSummary. The aggregator reads the store and never writes to
it; the store decides what to do with the computed levels.

Level computation:
- the stat border of level 1 is 0, of level i >= 2 it is (i-1)^2 + 4
- a level is reached while the next border <= sqrt(mainstat substats)
- substats start at the class' starting values and are raised to any
  player snapshot taken on or before the current turn
- an undefined class is guessed from the dominant stat gain
"""

from __future__ import annotations
from collections import Counter
from dataclasses import replace
from math import sqrt
from typing import TYPE_CHECKING, Dict, Iterable, List, Sequence, Tuple
import logging

from ..contracts.actions import DataNumberPair, LevelData
from ..contracts.character import CharacterClass, StatClass
from ..contracts.countables import Consumable, ConsumableVersion, merge_all
from ..contracts.gains import MeatGain, MPGain, Statgain, NO_MEAT, NO_MP, NO_STATS
from ..contracts.turns import Encounter, TurnVersion
from ..data_tables import DataTables
from ..timeline.intervals import FreeRunaways, TurnInterval
from .log_summary import AreaStatgains, ConsumptionSummary, Goatlet, LogSummary, NesRealm

if TYPE_CHECKING:
    from ..timeline.store import TimelineStore

logger = logging.getLogger(__name__)

GOATLET_AREA = "Goatlet"
NES_REALM_AREA = "8-Bit Realm"
NUNS_AREA = "Themthar Hills"
GUILD_CHALLENGE_AREA = "Guild Challenge"
ENCHANTED_BARBELL = "enchanted barbell"
CONCENTRATED_MAGICALNESS_PILL = "concentrated magicalness pill"
GIANT_MOXIE_WEED = "giant moxie weed"
ROMANTIC_ARROW_SKILLS = ("fire a badly romantic arrow", "wink at")
CONSUMABLES_AREA = "From consumables"

STARTING_SUBSTATS = {
    CharacterClass.SEAL_CLUBBER: Statgain(9, 1, 4),
    CharacterClass.TURTLE_TAMER: Statgain(9, 4, 1),
    CharacterClass.PASTAMANCER: Statgain(4, 9, 1),
    CharacterClass.SAUCEROR: Statgain(1, 9, 4),
    CharacterClass.DISCO_BANDIT: Statgain(4, 1, 9),
    CharacterClass.ACCORDION_THIEF: Statgain(1, 4, 9),
}


def stat_border(level_number: int) -> int:
    """Square root of the mainstat substats needed for a level."""
    if level_number <= 1:
        return 0
    return (level_number - 1) ** 2 + 4


def mainstat(stats: Statgain, stat_class: StatClass) -> int:
    if stat_class == StatClass.MUSCLE:
        return stats.mus
    if stat_class == StatClass.MYSTICALITY:
        return stats.myst
    return stats.mox


def counted(counter: Counter) -> Tuple[DataNumberPair, ...]:
    """Counter entries, highest count first, ties alphabetical."""
    ordered = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
    return tuple(DataNumberPair(name, count) for name, count in ordered)


def level_at(levels: Sequence[LevelData], turn_number: int) -> LevelData:
    current = levels[0]
    for level in levels:
        if level.level_reached_on_turn <= turn_number:
            current = level
        else:
            break
    return current


class SummaryAggregator:
    """Computes the LogSummary of a store."""

    def __init__(self, data_tables: DataTables):
        self.data_tables = data_tables

    def build(self, store: TimelineStore, intervals: Sequence[TurnInterval]) -> LogSummary:
        tables = self.data_tables
        intervals = tuple(intervals)

        consumables: List[Consumable] = []
        dropped_items = []
        skills = []
        combat_items = []
        turns_per_area: Counter = Counter()
        familiar_usage: Counter = Counter()
        semirares: List[DataNumberPair] = []
        bad_moon: List[DataNumberPair] = []
        wanderers: List[DataNumberPair] = []
        arrows: List[DataNumberPair] = []
        disintegrated: List[DataNumberPair] = list(store.disintegrated_combats)
        banished: List[DataNumberPair] = list(store.banished_combats)
        runaway_combats: List[Encounter] = []
        area_stats: Dict[str, Statgain] = {}

        total_stats = combat_stats = noncombat_stats = other_stats = NO_STATS
        consumable_stats = NO_STATS
        total_mp = NO_MP
        turns_combat = turns_noncombat = turns_other = 0
        runaways_attempted = runaways_successful = 0
        meat_gain = meat_spent = 0
        goatlet = Goatlet()
        nes_realm = NesRealm()

        for ti in intervals:
            for c in ti.consumables_used:
                total_stats = total_stats.add(c.stat_gain)
                consumable_stats = consumable_stats.add(c.stat_gain)
            consumables.extend(ti.consumables_used)
            dropped_items.extend(ti.dropped_items)
            skills.extend(ti.skills_cast)
            combat_items.extend(ti.combat_items_used)
            total_mp = total_mp.add(ti.mp_gain)
            if ti.total_turns > 0:
                turns_per_area[ti.area_name] += ti.total_turns
            area_stats[ti.area_name] = area_stats.get(ti.area_name, NO_STATS).add(ti.stat_gain)

            if not ti.turns:
                # Pre-aggregated intervals carry their stats on the interval.
                total_stats = total_stats.add(ti.stat_gain)

            for st in ti.turns:
                total_stats = total_stats.add(st.stat_gain)
                if st.turn_version == TurnVersion.COMBAT:
                    turns_combat += 1
                    combat_stats = combat_stats.add(st.stat_gain)
                    familiar_usage[st.familiar_name] += 1
                elif st.turn_version == TurnVersion.NONCOMBAT:
                    turns_noncombat += 1
                    noncombat_stats = noncombat_stats.add(st.stat_gain)
                elif st.turn_version == TurnVersion.OTHER:
                    turns_other += 1
                    other_stats = other_stats.add(st.stat_gain)

                if st.is_disintegrated:
                    disintegrated.append(DataNumberPair(st.encounter_name, st.turn_number))
                if st.is_banished:
                    banished.append(DataNumberPair(st.banished_info or st.encounter_name,
                                                   st.turn_number))
                if tables.is_semirare(st.encounter_name):
                    semirares.append(DataNumberPair(st.encounter_name, st.turn_number))
                if tables.is_bad_moon(st.encounter_name):
                    bad_moon.append(DataNumberPair(st.encounter_name, st.turn_number))

                for e in st.encounters:
                    if tables.is_wandering(e.encounter_name):
                        wanderers.append(DataNumberPair(e.encounter_name, e.turn_number))
                    if e.turn_version == TurnVersion.COMBAT:
                        if any(e.is_skill_cast(s) for s in ROMANTIC_ARROW_SKILLS):
                            arrows.append(DataNumberPair(e.encounter_name, e.turn_number))
                        if e.free_runaways > 0:
                            runaway_combats.append(e)

            runaways = ti.runaway_attempts
            runaways_attempted += runaways.attempted
            runaways_successful += runaways.successful

            if ti.area_name == GOATLET_AREA:
                goatlet = self._count_goatlet(goatlet, ti)
            if ti.area_name == NES_REALM_AREA:
                nes_realm = self._count_nes_realm(nes_realm, ti)

            if ti.area_name != NUNS_AREA:
                meat_gain += ti.meat.encounter
            meat_gain += ti.meat.other
            meat_spent += ti.meat.spent

        merged_items = merge_all(dropped_items)
        merged_skills = merge_all(skills)
        consumption = self._consumption(consumables)
        rollover = max(0, store.last_turn_number - consumption.turns_from_food
                       - consumption.turns_from_booze - consumption.turns_from_other)

        character_class = store.character_class
        if character_class == CharacterClass.NOT_DEFINED:
            character_class = self._guess_class(intervals, total_stats)

        if store.is_detailed and not store.is_sub_interval_log:
            levels = self._compute_levels(store, intervals, character_class)
        else:
            levels = tuple(store.levels)

        meat_per_level, mp_per_level = self._per_level(intervals, levels)

        area_list = [AreaStatgains(name, stats) for name, stats in area_stats.items()]
        area_list.append(AreaStatgains(CONSUMABLES_AREA, consumable_stats))

        logger.debug("Aggregated %d intervals, %d levels", len(intervals), len(levels))
        return LogSummary(
            last_turn_number=store.last_turn_number,
            character_class=character_class,
            turns_per_area=counted(turns_per_area),
            quest_turncounts=self._quest_turncounts(intervals),
            levels=levels,
            consumables_used=tuple(merge_all(
                replace(c, day_number_of_usage=-1) for c in consumables
            )),
            dropped_items=tuple(merged_items),
            skills_cast=tuple(merged_skills),
            combat_items_used=tuple(merge_all(combat_items)),
            consumption=consumption,
            familiar_usage=counted(familiar_usage),
            semirares=tuple(semirares),
            bad_moon_adventures=tuple(bad_moon),
            wandering_adventures=tuple(wanderers),
            romantic_arrow_usages=tuple(arrows),
            disintegrated_combats=_sorted_unique(disintegrated),
            banished_combats=_sorted_unique(banished),
            tracked_combat_items=tuple(store.tracked_combat_items),
            free_runaway_combats=tuple(runaway_combats),
            free_runaways=FreeRunaways(runaways_attempted, runaways_successful),
            goatlet=goatlet,
            nes_realm=nes_realm,
            total_stat_gains=total_stats,
            combat_stat_gains=combat_stats,
            noncombat_stat_gains=noncombat_stats,
            other_stat_gains=other_stats,
            area_stat_gains=tuple(area_list),
            total_mp_gains=total_mp,
            mp_gains_per_level=mp_per_level,
            meat_per_level=meat_per_level,
            total_amount_skill_casts=sum(s.amount for s in merged_skills),
            total_mp_used=sum(s.mp_cost for s in merged_skills),
            total_meat_gain=meat_gain,
            total_meat_spent=meat_spent,
            total_turns_from_rollover=rollover,
            total_turns_combat=turns_combat,
            total_turns_noncombat=turns_noncombat,
            total_turns_other=turns_other,
        )

    # -------------------------------------------------------------------------
    # Bottleneck areas
    # -------------------------------------------------------------------------

    @staticmethod
    def _count_goatlet(goatlet: Goatlet, ti: TurnInterval) -> Goatlet:
        items = {i.name: i.amount for i in ti.dropped_items}
        return Goatlet(
            turns_spent=goatlet.turns_spent + ti.total_turns,
            dairy_goats_found=goatlet.dairy_goats_found
            + sum(1 for t in ti.turns if t.encounter_name == "dairy goat"),
            cheese_found=goatlet.cheese_found + items.get("goat cheese", 0),
            milk_found=goatlet.milk_found + items.get("glass of goat's milk", 0),
        )

    @staticmethod
    def _count_nes_realm(realm: NesRealm, ti: TurnInterval) -> NesRealm:
        return NesRealm(
            turns_spent=realm.turns_spent + ti.total_turns,
            bloopers_found=realm.bloopers_found
            + sum(1 for t in ti.turns if t.encounter_name == "Blooper"),
            bullets_found=realm.bullets_found
            + sum(1 for t in ti.turns if t.encounter_name == "Bullet Bill"),
        )

    # -------------------------------------------------------------------------
    # Consumption, quests, class
    # -------------------------------------------------------------------------

    @staticmethod
    def _consumption(consumables: Iterable[Consumable]) -> ConsumptionSummary:
        by_version: Dict[ConsumableVersion, List[Consumable]] = {v: [] for v in ConsumableVersion}
        for c in consumables:
            by_version[c.version].append(replace(c, day_number_of_usage=-1))

        def gains(*versions: ConsumableVersion) -> int:
            return sum(c.adventure_gain for v in versions for c in by_version[v])

        def stats(*versions: ConsumableVersion) -> Statgain:
            total = NO_STATS
            for v in versions:
                for c in by_version[v]:
                    total = total.add(c.stat_gain)
            return total

        return ConsumptionSummary(
            food=tuple(merge_all(by_version[ConsumableVersion.FOOD])),
            booze=tuple(merge_all(by_version[ConsumableVersion.BOOZE])),
            spleen=tuple(merge_all(by_version[ConsumableVersion.SPLEEN])),
            other=tuple(merge_all(by_version[ConsumableVersion.OTHER])),
            turns_from_food=gains(ConsumableVersion.FOOD),
            turns_from_booze=gains(ConsumableVersion.BOOZE),
            turns_from_other=gains(ConsumableVersion.SPLEEN, ConsumableVersion.OTHER),
            food_stat_gains=stats(ConsumableVersion.FOOD),
            booze_stat_gains=stats(ConsumableVersion.BOOZE),
            used_stat_gains=stats(ConsumableVersion.SPLEEN, ConsumableVersion.OTHER),
        )

    def _quest_turncounts(self, intervals: Sequence[TurnInterval]) -> Tuple[DataNumberPair, ...]:
        counts = []
        for label, areas in self.data_tables.quest_areas:
            area_set = set(areas)
            counts.append(DataNumberPair(
                label, sum(ti.total_turns for ti in intervals if ti.area_name in area_set)
            ))
        return tuple(counts)

    @staticmethod
    def _guess_class(intervals: Sequence[TurnInterval], total: Statgain) -> CharacterClass:
        guild_items = {
            i.name for ti in intervals if ti.area_name == GUILD_CHALLENGE_AREA
            for i in ti.dropped_items
            if i.name in (ENCHANTED_BARBELL, CONCENTRATED_MAGICALNESS_PILL, GIANT_MOXIE_WEED)
        }
        if total.mus > total.myst and total.mus > total.mox:
            if GIANT_MOXIE_WEED in guild_items:
                return CharacterClass.SEAL_CLUBBER
            return CharacterClass.TURTLE_TAMER
        if total.myst > total.mus and total.myst > total.mox:
            if GIANT_MOXIE_WEED in guild_items:
                return CharacterClass.SAUCEROR
            return CharacterClass.PASTAMANCER
        if CONCENTRATED_MAGICALNESS_PILL in guild_items:
            return CharacterClass.ACCORDION_THIEF
        return CharacterClass.DISCO_BANDIT

    # -------------------------------------------------------------------------
    # Levels
    # -------------------------------------------------------------------------

    @staticmethod
    def _compute_levels(
        store: TimelineStore,
        intervals: Sequence[TurnInterval],
        character_class: CharacterClass
    ) -> Tuple[LevelData, ...]:
        stat_class = character_class.stat_class
        stats = STARTING_SUBSTATS.get(character_class, NO_STATS)
        snapshots = list(store.player_snapshots)
        levels: List[LevelData] = [LevelData(1, 0, stats_at_level_reached=stats)]
        counts = {TurnVersion.COMBAT: 0, TurnVersion.NONCOMBAT: 0, TurnVersion.OTHER: 0}

        for ti in intervals:
            for st in ti.turns:
                stats = stats.add(st.total_stat_gain())
                if snapshots and snapshots[0].turn_number <= st.turn_number:
                    snapshot = snapshots.pop(0)
                    stats = Statgain(
                        max(stats.mus, snapshot.mus_stats),
                        max(stats.myst, snapshot.myst_stats),
                        max(stats.mox, snapshot.mox_stats),
                    )
                if st.turn_version in counts:
                    counts[st.turn_version] += 1

                while stat_border(levels[-1].level_number + 1) <= sqrt(mainstat(stats, stat_class)):
                    levels[-1] = _close_level(levels[-1], st.turn_number, counts)
                    levels.append(LevelData(
                        levels[-1].level_number + 1, st.turn_number,
                        stats_at_level_reached=stats
                    ))
                    counts = dict.fromkeys(counts, 0)

        return tuple(levels)

    @staticmethod
    def _per_level(
        intervals: Sequence[TurnInterval],
        levels: Sequence[LevelData]
    ) -> Tuple[Tuple[Tuple[int, MeatGain], ...], Tuple[Tuple[int, MPGain], ...]]:
        meat: Dict[int, MeatGain] = {}
        mp: Dict[int, MPGain] = {}
        for ti in intervals:
            for st in ti.turns:
                level_number = level_at(levels, st.turn_number).level_number
                if not st.meat.is_zero():
                    meat[level_number] = meat.get(level_number, NO_MEAT).add(st.meat)
                if not st.mp_gain.is_zero():
                    mp[level_number] = mp.get(level_number, NO_MP).add(st.mp_gain)
        return tuple(sorted(meat.items())), tuple(sorted(mp.items()))


def _close_level(level: LevelData, turn_number: int, counts: Dict[TurnVersion, int]) -> LevelData:
    """Fill in the turn breakdown and gain rate of a level once the next is reached."""
    turn_difference = turn_number - level.level_reached_on_turn
    substats_needed = (stat_border(level.level_number + 1) ** 2
                       - stat_border(level.level_number) ** 2)
    per_turn = substats_needed / turn_difference if turn_difference > 0 else float(substats_needed)
    return replace(
        level,
        combat_turns=counts[TurnVersion.COMBAT],
        noncombat_turns=counts[TurnVersion.NONCOMBAT],
        other_turns=counts[TurnVersion.OTHER],
        stat_gain_per_turn=per_turn,
    )


def _sorted_unique(entries: Iterable[DataNumberPair]) -> Tuple[DataNumberPair, ...]:
    unique = list(dict.fromkeys(entries))
    unique.sort(key=lambda e: e.number)
    return tuple(unique)
