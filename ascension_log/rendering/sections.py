"""
Summary Sections
================

The fixed sequence of summary sections printed after the turn rundown.
Every section is a (title, anchor, renderer) entry in SECTIONS; the HTML
table of contents is built from the same list, so the two cannot drift.

Sections marked optional are only printed, and only listed in the table
of contents, when they have content.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from math import floor
from typing import Callable, List, Tuple

from ..contracts.countables import Consumable
from ..summary.aggregator import counted, mainstat
from ..summary.log_summary import LogSummary
from ..timeline.store import TimelineStore
from .formats import LogWriter

GARNISHES = (
    ("Coconuts", "coconut shell"),
    ("Umbrellas", "little paper umbrella"),
    ("Ice Cubes", "magical ice cubes"),
)
TOP_AREAS = 10
_BOX_RULE = "-" * 18


def percent(part: int, whole: int) -> float:
    """Share in percent with one decimal, rounded half up."""
    if whole <= 0:
        return 0.0
    return floor(part * 1000.0 / whole + 0.5) / 10.0


def _numbered(w: LogWriter, entries) -> None:
    for entry in entries:
        w.writeln_with_break(f"{entry.number} : {entry.data}")


def _worth_listing(tables, c: Consumable) -> bool:
    return (c.adventure_gain > 0 or not c.stat_gain.is_zero()
            or tables.is_special_consumable(c.name))


# =============================================================================
# SECTION RENDERERS
# =============================================================================

def adventures(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    for dn in summary.turns_per_area:
        w.writeln_with_break(f"{dn.data}: {dn.number}")


def quest_turns(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    for dn in summary.quest_turncounts:
        w.writeln_with_break(f"{dn.data}: {dn.number}")


def pulls(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    totals: Counter = Counter()
    for pull in store.pulls:
        totals[pull.item_name] += pull.amount
    for dn in counted(totals):
        w.writeln_with_break(f"Pulled {dn.number} {dn.data}")


def levels(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    s = w.strategy
    last = None
    for level in summary.levels:
        turn_difference = level.level_reached_on_turn - last.level_reached_on_turn if last else 0
        w.write(s.paragraph_start)
        w.write(f"{level}, {turn_difference} from last level. ")
        w.writeln_with_break(f"({last.stat_gain_per_turn if last else 0.0:.1f} substats / turn)")
        w.write("   Combats: ")
        w.writeln_with_break(str(last.combat_turns if last else 0))
        w.write("   Noncombats: ")
        w.writeln_with_break(str(last.noncombat_turns if last else 0))
        w.write("   Other: ")
        w.writeln_with_break(str(last.other_turns if last else 0))
        w.write(s.paragraph_end)
        last = level

    w.writeln_with_break()
    w.writeln_with_break()
    total = summary.last_turn_number
    for label, turns in (("COMBATS", summary.total_turns_combat),
                         ("NONCOMBATS", summary.total_turns_noncombat),
                         ("OTHER", summary.total_turns_other)):
        w.writeln_with_break(f"Total {label}: {turns} ({percent(turns, total)}%)")


def stats(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    s = w.strategy
    consumption = summary.consumption
    rows = (
        ("Totals:   ", summary.total_stat_gains),
        ("Combats:", summary.combat_stat_gains),
        ("Noncombats:", summary.noncombat_stat_gains),
        ("Others:   ", summary.other_stat_gains),
        ("Eating:   ", consumption.food_stat_gains),
        ("Drinking:", consumption.booze_stat_gains),
        ("Using:   ", consumption.used_stat_gains),
    )
    w.write(s.table_start)
    w.write(s.table_row(("           ", "\tMuscle", "\tMyst", "\tMoxie")))
    for label, gain in rows:
        w.write(s.table_row((label, f"\t{gain.mus}", f"\t{gain.myst}", f"\t{gain.mox}")))
    w.write(s.table_end)
    w.writeln_with_break()
    w.writeln_with_break()

    stat_class = summary.character_class.stat_class
    areas = sorted(summary.area_stat_gains,
                   key=lambda a: mainstat(a.stat_gain, stat_class), reverse=True)
    w.writeln_with_break(f"Top {TOP_AREAS} mainstat gaining areas:")
    w.writeln_with_break()
    w.write(s.table_start)
    for area in areas[:TOP_AREAS]:
        name, *values = str(area).split("\t")
        w.write(s.table_row([name] + [f"\t{v}" for v in values]))
    w.write(s.table_end)


def skills_learned(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    _numbered(w, store.learned_skills)


def familiars(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    for dn in summary.familiar_usage:
        share = percent(dn.number, summary.total_turns_combat)
        w.writeln_with_break(f"{dn.data} : {dn.number} combat turns ({share}%)")


def semirares(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    _numbered(w, summary.semirares)


def tracked_combat_items(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    _numbered(w, summary.tracked_combat_items)


def dna_lab(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    _numbered(w, store.hybrid_content)


def hunted_combats(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    _numbered(w, store.hunted_combats)


def banishment(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    _numbered(w, summary.banished_combats)


def yellow_destruction(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    _numbered(w, summary.disintegrated_combats)


def copied_combats(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    for interval in store.get_copied_turns():
        for turn in interval.turns:
            w.writeln_with_break(f"{turn.turn_number} : {turn.encounter_name}")
    if summary.romantic_arrow_usages:
        w.writeln_with_break()
        w.writeln_with_break()
        w.writeln_with_break("Familiar copy usage:")
        _numbered(w, summary.romantic_arrow_usages)


def free_runaways(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    w.writeln_with_break(f"{summary.free_runaways} overall")
    if summary.free_runaway_combats:
        w.writeln_with_break()
        w.writeln_with_break()
    for e in summary.free_runaway_combats:
        w.writeln_with_break(f"{e.turn_number} : {e.area_name} -- {e.encounter_name}")


def wandering_encounters(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    _numbered(w, summary.wandering_adventures)


def combat_items(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    for item in summary.combat_items_used:
        w.writeln_with_break(f"Used {item.amount} {item.name}")


def casts(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    for skill in summary.skills_cast:
        w.writeln_with_break(str(skill))
    w.writeln_with_break()
    if not w.strategy.boxed_totals:
        w.writeln_with_break(f"Total Casts: {summary.total_amount_skill_casts}")
        w.writeln_with_break(f"Total MP Spent: {summary.total_mp_used}")
        return
    w.writeln_with_break(_BOX_RULE)
    w.writeln_with_break(f"| Total Casts    |  {summary.total_amount_skill_casts}")
    w.writeln_with_break(_BOX_RULE)
    w.writeln_with_break()
    w.writeln_with_break(_BOX_RULE)
    w.writeln_with_break(f"| Total MP Spent    |  {summary.total_mp_used}")
    w.writeln_with_break(_BOX_RULE)


def _mp_lines(mp, indent: str = "") -> List[str]:
    return [
        f"{indent}Inside Encounters: {mp.encounter}",
        f"{indent}Starfish Familiars: {mp.starfish}",
        f"{indent}Resting: {mp.resting}",
        f"{indent}Outside Encounters: {mp.out_of_encounter}",
        f"{indent}Consumables: {mp.consumable}",
    ]


def mp_gains(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    s = w.strategy
    total = summary.total_mp_gains
    w.writeln_with_break(f"Total mp gained: {total.total}")
    w.writeln_with_break()
    for line in _mp_lines(total):
        w.writeln_with_break(line)
    w.writeln_with_break()
    for level_number, mp in summary.mp_gains_per_level:
        w.write(s.paragraph_start)
        w.writeln_with_break(f"Level {level_number}:")
        *lines, last = _mp_lines(mp, "   ")
        for line in lines:
            w.writeln_with_break(line)
        w.writeln(last)
        w.write(s.paragraph_end)


def consumption(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    c = summary.consumption
    w.writeln_with_break(f"Adventures gained eating: {summary.total_turns_from_food}")
    w.writeln_with_break(f"Adventures gained drinking: {summary.total_turns_from_booze}")
    w.writeln_with_break(f"Adventures gained using: {summary.total_turns_from_other}")
    w.writeln_with_break(f"Adventures gained rollover: {summary.total_turns_from_rollover}")
    w.writeln_with_break()
    for group in (c.food, c.booze, c.spleen):
        for consumable in group:
            w.writeln_with_break(str(consumable))
        w.writeln_with_break()
    for consumable in c.other:
        if _worth_listing(store.data_tables, consumable):
            w.writeln_with_break(str(consumable))


def meat(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    s = w.strategy
    w.writeln_with_break(f"Total meat gained: {summary.total_meat_gain}")
    w.writeln_with_break(f"Total meat spent: {summary.total_meat_spent}")
    w.writeln_with_break()
    for level_number, gain in summary.meat_per_level:
        w.write(s.paragraph_start)
        w.writeln_with_break(f"Level {level_number}:")
        w.writeln_with_break(f"   Meat gain inside Encounters: {gain.encounter}")
        w.writeln_with_break(f"   Meat gain outside Encounters: {gain.other}")
        w.writeln(f"   Meat spent: {gain.spent}")
        w.write(s.paragraph_end)


def bottlenecks(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    s = w.strategy
    realm, goatlet = summary.nes_realm, summary.goatlet
    w.writeln_with_break(f"Spent {realm.turns_spent} turns in the 8-Bit Realm")
    w.writeln_with_break(f"Fought {realm.bloopers_found} bloopers")
    w.writeln_with_break(f"Fought {realm.bullets_found} bullet bills")
    w.writeln_with_break(f"Spent {goatlet.turns_spent} turns in the Goatlet")
    w.writeln_with_break(
        f"Fought {goatlet.dairy_goats_found} dairy goats for {goatlet.cheese_found} "
        f"cheeses and {goatlet.milk_found} glasses of milk"
    )

    dropped = {i.name: i.amount for i in summary.dropped_items}
    garnishes = [(label, dropped.get(name, 0)) for label, name in GARNISHES]
    w.write(s.paragraph_start)
    w.writeln_with_break(f"Garnishes received: {sum(n for _, n in garnishes)}")
    for label, amount in garnishes:
        w.writeln_with_break(f"     {label}: {amount}")
    w.write(s.paragraph_end)

    w.writeln_with_break(f"Number of lost combats: {len(store.lost_combats)}")
    for dn in store.lost_combats:
        w.writeln_with_break(f"     {dn}")


# =============================================================================
# SECTION TABLE
# =============================================================================

SectionRenderer = Callable[[LogWriter, TimelineStore, LogSummary], None]


def _always(store: TimelineStore, summary: LogSummary) -> bool:
    return True


@dataclass(frozen=True)
class Section:
    title: str
    anchor: str
    toc_title: str
    render: SectionRenderer
    present: Callable[[TimelineStore, LogSummary], bool] = _always


SECTIONS: Tuple[Section, ...] = (
    Section("ADVENTURES", "adventures", "Adventures", adventures),
    Section("QUEST TURNS", "questturns", "Quest Turns", quest_turns),
    Section("PULLS", "pulls", "Pulls", pulls),
    Section("LEVELS", "levels", "Levels", levels),
    Section("STATS", "stats", "Stats", stats),
    Section("SKILLS LEARNED", "skills", "Skills Learned", skills_learned,
            lambda store, summary: bool(store.learned_skills)),
    Section("FAMILIARS", "familiars", "Familiars", familiars),
    Section("SEMI-RARES", "semirares", "Semi-rares", semirares),
    Section("TRACKED COMBAT ITEMS", "trackedcombatitems", "Tracked Combat Items",
            tracked_combat_items, lambda store, summary: bool(summary.tracked_combat_items)),
    Section("DNA Lab", "hybrid", "DNA Lab", dna_lab,
            lambda store, summary: bool(store.hybrid_content)),
    Section("HUNTED COMBATS", "onthetrail", "Hunted Combats", hunted_combats),
    Section("BANISHMENT", "banishment", "Banishment", banishment),
    Section("YELLOW DESTRUCTION", "yellowray", "Yellow Destruction", yellow_destruction),
    Section("COPIED COMBATS", "copies", "Copied Combats", copied_combats),
    Section("FREE RUNAWAYS", "runaways", "Free Runaways", free_runaways),
    Section("WANDERING ENCOUNTERS", "wanderers", "Wandering Encounters", wandering_encounters),
    Section("COMBAT ITEMS", "combatitems", "Combat Items", combat_items),
    Section("CASTS", "casts", "Casts", casts),
    Section("MP GAINS", "mpgains", "MP Gains", mp_gains),
    Section("EATING AND DRINKING AND USING", "consuming", "Eating and Drinking and Using",
            consumption),
    Section("MEAT", "meat", "Meat", meat),
    Section("BOTTLENECKS", "bottlenecks", "Bottlenecks", bottlenecks),
)


def present_sections(store: TimelineStore, summary: LogSummary) -> List[Section]:
    return [section for section in SECTIONS if section.present(store, summary)]


def write_sections(w: LogWriter, store: TimelineStore, summary: LogSummary) -> None:
    """Write every present section. All but the last end with three blank lines."""
    sections = present_sections(store, summary)
    for section in sections:
        w.write(w.strategy.section_header(section.title, section.anchor))
        section.render(w, store, summary)
        if section is not sections[-1]:
            w.section_end()
        else:
            w.writeln_with_break()
