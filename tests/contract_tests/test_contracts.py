"""
Contract Tests for the Value Types

Verifies that every contract value is immutable, validates its bounds at
construction and renders the way the log prints it.

TEST CATEGORIES:
================
1. Immutability - frozen values cannot be mutated
2. Validation - out-of-contract values raise with an explicit code
3. Merging - countables combine by merge key
4. Display - string forms used by the log
"""

import pytest
from dataclasses import FrozenInstanceError

from ascension_log.contracts import (
    AscensionPath, CharacterClass, Consumable, ConsumableVersion, DataNumberPair,
    DayChange, Error, ErrorCode, EquipmentChange, GameMode, InvalidArgumentError,
    Item, LevelData, MeatGain, Pull, Result, SingleTurn, Skill, Statgain,
    TurnVersion, merge_all
)
from ascension_log.contracts.turns import Encounter


# =============================================================================
# IMMUTABILITY TESTS
# =============================================================================

class TestImmutability:
    """Contract values are frozen."""

    def test_statgain_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            Statgain(1, 2, 3).mus = 5

    def test_error_is_frozen(self):
        error = Error.create(ErrorCode.INVALID_VALUE, "bad")
        with pytest.raises(FrozenInstanceError):
            error.message = "worse"

    def test_with_context_returns_new_error(self):
        error = Error.create(ErrorCode.MALFORMED_RECORD, "bad", record_type="turn")
        extended = error.with_context("record_index", "4")

        assert error.context == (("record_type", "turn"),)
        assert extended.context == (("record_type", "turn"), ("record_index", "4"))
        assert extended.timestamp == error.timestamp


# =============================================================================
# VALIDATION TESTS
# =============================================================================

class TestValidation:
    """Bounds are checked when a value is built."""

    def test_negative_turn_number_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            SingleTurn("The Spooky Forest", "bar", -1)
        assert exc_info.value.code == ErrorCode.INVALID_TURN_NUMBER

    def test_day_zero_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            DayChange(0, 5)
        assert exc_info.value.code == ErrorCode.INVALID_DAY_NUMBER

    def test_item_amount_below_one_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Item("star", 0)
        assert exc_info.value.code == ErrorCode.INVALID_AMOUNT

    def test_negative_meat_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            MeatGain(encounter=-5)
        assert exc_info.value.code == ErrorCode.INVALID_VALUE

    def test_level_zero_rejected(self):
        with pytest.raises(InvalidArgumentError):
            LevelData(0, 3)

    def test_pull_needs_a_day(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Pull("star chart", 1, 12, 0)
        assert exc_info.value.code == ErrorCode.INVALID_DAY_NUMBER

    def test_invalid_argument_is_a_value_error(self):
        """Callers catching ValueError still see contract violations."""
        with pytest.raises(ValueError):
            Item("line", -2)

    def test_disintegration_only_sticks_to_combats(self):
        turn = SingleTurn("The Goatlet", "dairy goat", 3,
                          turn_version=TurnVersion.NONCOMBAT, is_disintegrated=True)
        assert turn.is_disintegrated is False


# =============================================================================
# MERGING TESTS
# =============================================================================

class TestMerging:
    """Countables sharing a merge key are summed."""

    def test_items_merge_and_keep_earliest_turn(self):
        merged = merge_all([Item("star", 1, 40), Item("line", 1, 41), Item("star", 2, 12)])

        assert merged == [Item("star", 3, 12), Item("line", 1, 41)]

    def test_skills_merge_case_insensitively(self):
        merged = merge_all([Skill("Saucestorm", 2, 20), Skill("saucestorm", 1, 10)])

        assert len(merged) == 1
        assert merged[0].amount == 3
        assert merged[0].mp_cost == 30

    def test_consumables_of_different_days_stay_apart(self):
        merged = merge_all([
            Consumable("pizza", ConsumableVersion.FOOD, 5, day_number_of_usage=1),
            Consumable("pizza", ConsumableVersion.FOOD, 5, day_number_of_usage=2),
        ])
        assert len(merged) == 2

    def test_turn_stamps_consumables(self):
        turn = SingleTurn("The Spooky Forest", "bar", 7, 2,
                          consumables_used=[Consumable("pizza", ConsumableVersion.FOOD, 5)])

        consumable = turn.consumables_used[0]
        assert consumable.turn_number_of_usage == 7
        assert consumable.day_number_of_usage == 2

    def test_fold_keeps_first_encounter_snapshot(self):
        target = SingleTurn("The Spooky Forest", "bar", 4, stat_gain=Statgain(1, 0, 0))
        source = SingleTurn("The Spooky Forest", "wolf", 5, stat_gain=Statgain(0, 2, 0))

        target.add_encounter(source.to_encounter(4))
        target.add_turn_data(source)

        assert [e.encounter_name for e in target.encounters] == ["bar", "wolf"]
        assert target.encounters[0].stat_gain == Statgain(1, 0, 0)
        assert target.stat_gain == Statgain(1, 2, 0)


# =============================================================================
# DISPLAY TESTS
# =============================================================================

class TestDisplay:
    """String forms printed in the log."""

    def test_statgain(self):
        assert str(Statgain(12, -3, 7)) == "[12,-3,7]"

    def test_consumable_with_adventures(self):
        pizza = Consumable("pizza", ConsumableVersion.FOOD, 10, amount=2)
        assert str(pizza) == "Ate 2 pizza (10 adventures gained) [0,0,0]"

    def test_consumable_without_adventures(self):
        potion = Consumable("milk of magnesium", ConsumableVersion.OTHER,
                            stat_gain=Statgain(0, 5, 0))
        assert str(potion) == "Used 1 milk of magnesium [0,5,0]"

    def test_day_change(self):
        assert str(DayChange(3, 120)) == "===Day 3==="

    def test_level(self):
        assert str(LevelData(4, 88)) == "Hit Level 4 on turn 88"

    def test_data_number_pair(self):
        assert str(DataNumberPair("Lucky Chang", 51)) == "Lucky Chang: 51"

    def test_skill(self):
        assert str(Skill("Saucestorm", 3)) == "Cast 3 Saucestorm"

    def test_single_turn(self):
        assert str(SingleTurn("The Spooky Forest", "bar", 9)) == "[9] The Spooky Forest -- bar"


# =============================================================================
# ENUMS AND RESULT
# =============================================================================

class TestCharacterEnums:
    """Display names parse back; unknown names fall back to NOT_DEFINED."""

    def test_class_round_trip(self):
        assert CharacterClass.from_string("Seal Clubber") == CharacterClass.SEAL_CLUBBER
        assert str(CharacterClass.SAUCEROR) == "Sauceror"

    def test_unknown_names_are_not_defined(self):
        assert CharacterClass.from_string("Cow Puncher") == CharacterClass.NOT_DEFINED
        assert GameMode.from_string("") == GameMode.NOT_DEFINED
        assert AscensionPath.from_string("Unknown") == AscensionPath.NOT_DEFINED

    def test_ed_path_display_name(self):
        assert AscensionPath.from_string("Actually Ed the Undying") == AscensionPath.ED

    def test_turn_version_from_string(self):
        assert TurnVersion.from_string("combat") == TurnVersion.COMBAT
        assert TurnVersion.from_string("boss fight") == TurnVersion.NOT_DEFINED


class TestResult:
    """Either a value or an error, never both."""

    def test_success(self):
        result = Result.success(5)
        assert result.is_success and not result.is_failure
        assert result.value == 5

    def test_failure(self):
        result = Result.failure(Error.create(ErrorCode.EMPTY_TIMELINE, "empty"))
        assert result.is_failure
        assert result.value is None
        assert result.error.code == ErrorCode.EMPTY_TIMELINE


class TestEquipment:

    def test_equals_ignore_turn(self):
        a = EquipmentChange(3, hat="helmet turtle")
        b = EquipmentChange(9, hat="helmet turtle")
        assert a != b
        assert a.equals_ignore_turn(b)

    def test_runaway_equipment_counts_free_runaways(self):
        turn = SingleTurn(
            "The Spooky Forest", "bar", 5, turn_version=TurnVersion.COMBAT,
            used_equipment=EquipmentChange(0, pants="greatest american pants"),
            skills_cast=[Skill("return")]
        )
        assert turn.is_ran_away_on_this_turn()
        assert turn.is_runaways_equipment_equipped()

    def test_encounter_skill_lookup_ignores_case(self):
        encounter = Encounter("a", "b", 1, 1, skills_cast=(Skill("Wink At"),))
        assert encounter.is_skill_cast("wink at")
