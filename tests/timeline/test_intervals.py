"""
Interval Builder Tests

Verifies grouping of consecutive turns into intervals, the
turn-counter bounds convention and interval splitting.

INVARIANTS TESTED:
==================
- Consecutive turns sharing an area form one interval
- Bounds are (first - 1, last], clamped at 0
- A split neither drops nor duplicates a turn
"""

import pytest

from ascension_log.contracts import (
    Consumable, ConsumableVersion, EquipmentChange, InvalidArgumentError, Item, Skill,
    Statgain
)
from ascension_log.timeline.intervals import (
    DetailedTurnInterval, FreeRunaways, SimpleTurnInterval, TurnInterval, build_intervals
)

from ..fixtures import area_run, make_turn


class TestBuildIntervals:
    """Grouping by area name, in arrival order."""

    def test_empty_input(self):
        assert build_intervals([]) == []

    def test_single_area(self):
        intervals = build_intervals(area_run("The Spooky Forest", 1, 5))

        assert len(intervals) == 1
        assert (intervals[0].start_turn, intervals[0].end_turn) == (0, 5)
        assert intervals[0].total_turns == 5

    def test_area_change_closes_interval(self):
        turns = (area_run("The Spooky Forest", 1, 3)
                 + area_run("The Haunted Pantry", 4, 4)
                 + area_run("The Spooky Forest", 5, 6))
        intervals = build_intervals(turns)

        assert [i.area_name for i in intervals] == [
            "The Spooky Forest", "The Haunted Pantry", "The Spooky Forest"
        ]
        assert [(i.start_turn, i.end_turn) for i in intervals] == [(0, 3), (3, 4), (4, 6)]

    def test_area_equality_is_exact(self):
        turns = [make_turn(1, "The Spooky Forest"), make_turn(2, "the spooky forest")]
        assert len(build_intervals(turns)) == 2

    def test_turns_are_kept_by_reference(self):
        """A later change to a turn shows in the interval aggregates."""
        turns = area_run("The Spooky Forest", 1, 2)
        interval = build_intervals(turns)[0]

        turns[1].stat_gain = Statgain(3, 0, 0)

        assert interval.stat_gain == Statgain(3, 0, 0)


class TestDetailedInterval:
    """Aggregates derived from the turns."""

    def test_needs_a_turn(self):
        with pytest.raises(InvalidArgumentError):
            DetailedTurnInterval([])

    def test_start_clamped_at_zero(self):
        interval = DetailedTurnInterval([make_turn(0, "Ascension Start")])
        assert (interval.start_turn, interval.end_turn) == (0, 0)

    def test_bounds_text(self):
        assert DetailedTurnInterval(area_run("a", 4, 9)).bounds_text == "[4-9]"
        assert DetailedTurnInterval(area_run("a", 7, 7)).bounds_text == "[7]"

    def test_string_form(self):
        turns = [make_turn(1, "a", stats=(1, 2, 3)), make_turn(2, "a", stats=(1, 0, 0))]
        assert str(DetailedTurnInterval(turns)) == "[1-2] a [2,2,3]"

    def test_countables_merged_across_turns(self):
        turns = [
            make_turn(1, "a", items=["star"],
                      consumables=[Consumable("pizza", ConsumableVersion.FOOD, 5)]),
            make_turn(2, "a", items=["star", "line"],
                      consumables=[Consumable("pizza", ConsumableVersion.FOOD, 6)]),
        ]
        interval = DetailedTurnInterval(turns)

        assert interval.dropped_items == [Item("star", 2, 1), Item("line", 1, 2)]
        assert len(interval.consumables_used) == 1
        assert interval.consumables_used[0].adventure_gain == 11

    def test_runaway_attempts(self):
        runaway = make_turn(2, "a")
        runaway.skills_cast.append(Skill("return"))
        runaway.used_equipment = EquipmentChange(0, acc1="navel ring of navel gazing")
        lucky = make_turn(3, "a")
        lucky.free_runaways = 1

        interval = DetailedTurnInterval([make_turn(1, "a"), runaway, lucky])

        assert interval.runaway_attempts == FreeRunaways(attempted=2, successful=1)
        assert str(interval.runaway_attempts) == "1 / 2 free retreats"

    def test_contains_day(self):
        interval = DetailedTurnInterval([make_turn(1, "a", day=1), make_turn(2, "a", day=2)])
        assert interval.contains_day(2)
        assert not interval.contains_day(3)


class TestSplit:
    """split_at() partitions the turns."""

    def test_split_in_the_middle(self):
        interval = DetailedTurnInterval(area_run("a", 1, 6))
        interval.pre_interval_comment = "before"
        interval.post_interval_comment = "after"

        head, tail = interval.split_at(interval.turns[3])

        assert [t.turn_number for t in head.turns] == [1, 2, 3]
        assert [t.turn_number for t in tail.turns] == [4, 5, 6]
        assert (head.start_turn, head.end_turn) == (0, 3)
        assert (tail.start_turn, tail.end_turn) == (3, 6)
        assert head.pre_interval_comment == "before"
        assert tail.pre_interval_comment == ""
        assert tail.post_interval_comment == "after"

    def test_split_at_first_turn(self):
        interval = DetailedTurnInterval(area_run("a", 1, 3))
        head, tail = interval.split_at(interval.turns[0])

        assert head is None
        assert tail.turns == interval.turns


class TestSimpleInterval:
    """Pre-aggregated intervals of non-detailed logs."""

    def test_holds_given_aggregates(self):
        interval = SimpleTurnInterval(
            "The Haunted Pantry", 10, 25,
            stat_gain=Statgain(5, 5, 5),
            dropped_items=[Item("star"), Item("star")],
            free_runaways=FreeRunaways(3, 2)
        )

        assert interval.total_turns == 15
        assert interval.turns == ()
        assert interval.dropped_items == [Item("star", 2)]
        assert interval.runaway_attempts == FreeRunaways(3, 2)
        assert not interval.contains_day(1)

    def test_end_never_before_start(self):
        assert SimpleTurnInterval("a", 10, 5).end_turn == 10

    def test_negative_bounds_rejected(self):
        with pytest.raises(InvalidArgumentError):
            SimpleTurnInterval("a", -1, 5)


class TestIntervalInterface:

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            TurnInterval("The Haunted Pantry")

    def test_origin_without_aggregates_cannot_be_built(self):
        class BoundsOnly(TurnInterval):
            start_turn = 0
            end_turn = 3

        with pytest.raises(TypeError):
            BoundsOnly("The Haunted Pantry")
