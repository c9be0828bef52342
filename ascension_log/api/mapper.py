"""
API Mapper
==========

Transforms the internal LogSummary into plain JSON-ready dicts for the
HTTP layer and the CLI. Values are exposed as computed, without rounding
or reordering.
"""
from typing import Any, Dict, Iterable, List

from ..contracts.actions import DataNumberPair, LevelData
from ..contracts.gains import MeatGain, MPGain, Statgain
from ..summary.log_summary import LogSummary


def _stats(stat_gain: Statgain) -> Dict[str, int]:
    return {"mus": stat_gain.mus, "myst": stat_gain.myst, "mox": stat_gain.mox}


def _mp(mp_gain: MPGain) -> Dict[str, int]:
    return {
        "encounter": mp_gain.encounter,
        "starfish": mp_gain.starfish,
        "resting": mp_gain.resting,
        "out_of_encounter": mp_gain.out_of_encounter,
        "consumable": mp_gain.consumable,
        "total": mp_gain.total,
    }


def _meat(meat: MeatGain) -> Dict[str, int]:
    return {"encounter": meat.encounter, "other": meat.other, "spent": meat.spent}


def _pairs(pairs: Iterable[DataNumberPair]) -> List[Dict[str, Any]]:
    return [{"data": p.data, "number": p.number} for p in pairs]


def _level(level: LevelData) -> Dict[str, Any]:
    return {
        "level": level.level_number,
        "reached_on_turn": level.level_reached_on_turn,
        "combat_turns": level.combat_turns,
        "noncombat_turns": level.noncombat_turns,
        "other_turns": level.other_turns,
        "stats": _stats(level.stats_at_level_reached),
        "stat_gain_per_turn": level.stat_gain_per_turn,
    }


def map_summary_to_dto(summary: LogSummary) -> Dict[str, Any]:
    """Map a LogSummary to the LogSummaryDTO served by the API."""
    consumption = summary.consumption
    return {
        "last_turn": summary.last_turn_number,
        "character_class": str(summary.character_class),
        "turns": {
            "combat": summary.total_turns_combat,
            "noncombat": summary.total_turns_noncombat,
            "other": summary.total_turns_other,
            "from_food": summary.total_turns_from_food,
            "from_booze": summary.total_turns_from_booze,
            "from_other": summary.total_turns_from_other,
            "from_rollover": summary.total_turns_from_rollover,
        },
        "turns_per_area": _pairs(summary.turns_per_area),
        "quest_turns": _pairs(summary.quest_turncounts),
        "levels": [_level(l) for l in summary.levels],
        "stat_gains": {
            "total": _stats(summary.total_stat_gains),
            "combat": _stats(summary.combat_stat_gains),
            "noncombat": _stats(summary.noncombat_stat_gains),
            "other": _stats(summary.other_stat_gains),
            "food": _stats(consumption.food_stat_gains),
            "booze": _stats(consumption.booze_stat_gains),
            "used": _stats(consumption.used_stat_gains),
        },
        "familiars": _pairs(summary.familiar_usage),
        "semirares": _pairs(summary.semirares),
        "bad_moon_adventures": _pairs(summary.bad_moon_adventures),
        "wandering_encounters": _pairs(summary.wandering_adventures),
        "banished_combats": _pairs(summary.banished_combats),
        "disintegrated_combats": _pairs(summary.disintegrated_combats),
        "free_runaways": {
            "attempted": summary.free_runaways.attempted,
            "successful": summary.free_runaways.successful,
        },
        "consumables": [
            {
                "name": c.name,
                "kind": c.version.value,
                "amount": c.amount,
                "adventure_gain": c.adventure_gain,
            }
            for c in summary.consumables_used
        ],
        "skills_cast": [
            {"name": s.name, "amount": s.amount, "mp_cost": s.mp_cost}
            for s in summary.skills_cast
        ],
        "combat_items_used": [
            {"name": c.name, "amount": c.amount} for c in summary.combat_items_used
        ],
        "mp_gains": _mp(summary.total_mp_gains),
        "meat": {
            "total_gained": summary.total_meat_gain,
            "total_spent": summary.total_meat_spent,
            "per_level": [
                {"level": level, **_meat(meat)} for level, meat in summary.meat_per_level
            ],
        },
        "skill_casts": summary.total_amount_skill_casts,
        "mp_used": summary.total_mp_used,
    }
