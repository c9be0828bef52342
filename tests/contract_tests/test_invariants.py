"""
Property Tests for the Timeline Invariants

Generates ascensions of up to forty turns spread over random areas and
days, and checks what must hold for every one of them.

INVARIANTS TESTED:
==================
- Partition: every turn appears in exactly one emitted interval
- Day tagging: every emitted turn carries the day it is emitted under
- Order: emission turn numbers never decrease
- Determinism: equal records give equal summaries and identical text
- Containment: a sub-interval copy only holds entries inside its range
  and tags its turns with the days they belong to
"""

import pytest
from hypothesis import given, settings, strategies as st
from hypothesis.strategies import composite

from ascension_log.contracts import DayChange, ErrorCode, InvalidStateError
from ascension_log.rendering.formats import HTML, PLAIN_TEXT
from ascension_log.rendering.renderer import Renderer
from ascension_log.timeline.intervals import build_intervals
from ascension_log.timeline.reconciler import (
    CarryOverEmission, DayChangeEmission, IntervalEmission, reconcile
)

from ..fixtures import make_store, make_turn, summarized

AREAS = ("The Spooky Forest", "The Haunted Pantry", "The Sleazy Back Alley")


# =============================================================================
# STRATEGIES (Generators)
# =============================================================================

@composite
def ascensions(draw):
    """
    (turn specs, day changes) with consistent day tags: a day change at
    turn b means turns after b belong to the new day.
    """
    turn_count = draw(st.integers(min_value=1, max_value=40))
    areas = draw(st.lists(st.sampled_from(AREAS), min_size=turn_count, max_size=turn_count))
    boundaries = sorted(draw(st.sets(st.integers(min_value=1, max_value=turn_count),
                                     max_size=4)))

    specs = []
    for turn_number, area in enumerate(areas, start=1):
        day = 1 + sum(1 for b in boundaries if b < turn_number)
        stats = draw(st.tuples(*(st.integers(min_value=0, max_value=30),) * 3))
        specs.append((turn_number, area, day, stats))

    day_changes = [DayChange(index + 2, b) for index, b in enumerate(boundaries)]
    return specs, day_changes


def turns_from(specs):
    return [make_turn(n, area, day, stats=stats) for n, area, day, stats in specs]


def store_from(ascension):
    specs, day_changes = ascension
    return make_store(
        turns_from(specs),
        day_changes=[(d.day_number, d.turn_number) for d in day_changes]
    )


def emitted_turns(emissions):
    return [
        (t.turn_number, t.day_number, e.day_number)
        for e in emissions if isinstance(e, IntervalEmission)
        for t in e.interval.turns
    ]


# =============================================================================
# PROPERTY TESTS
# =============================================================================

class TestReconcilerProperties:
    """Properties of the emission sequence."""

    @given(ascensions())
    def test_partition_completeness(self, ascension):
        specs, day_changes = ascension
        emissions = reconcile(build_intervals(turns_from(specs)), [DayChange(1, 0)] + day_changes)

        turn_numbers = [n for n, _, _ in emitted_turns(emissions)]
        assert turn_numbers == list(range(1, len(specs) + 1))

    @given(ascensions())
    def test_day_tagging(self, ascension):
        specs, day_changes = ascension
        emissions = reconcile(build_intervals(turns_from(specs)), [DayChange(1, 0)] + day_changes)

        for turn_number, turn_day, emitted_day in emitted_turns(emissions):
            assert turn_day == emitted_day, f"turn {turn_number}"

    @given(ascensions())
    def test_every_day_change_emitted_once_in_order(self, ascension):
        specs, day_changes = ascension
        emissions = reconcile(build_intervals(turns_from(specs)), [DayChange(1, 0)] + day_changes)

        emitted = [e.day_change for e in emissions if isinstance(e, DayChangeEmission)]
        assert emitted == day_changes

    @given(ascensions())
    def test_emission_turns_never_decrease(self, ascension):
        specs, day_changes = ascension
        emissions = reconcile(build_intervals(turns_from(specs)), [DayChange(1, 0)] + day_changes)

        turn_numbers = [e.turn_number for e in emissions]
        assert turn_numbers == sorted(turn_numbers)

    @given(ascensions())
    def test_carry_over_follows_day_change(self, ascension):
        specs, day_changes = ascension
        emissions = reconcile(build_intervals(turns_from(specs)), [DayChange(1, 0)] + day_changes)

        for index, emission in enumerate(emissions):
            if isinstance(emission, CarryOverEmission):
                assert isinstance(emissions[index - 1], DayChangeEmission)


class TestDeterminism:
    """Same records, same products."""

    @settings(max_examples=30, deadline=None)
    @given(ascensions())
    def test_equal_records_give_equal_summaries(self, ascension):
        first = summarized(store_from(ascension)).get_log_summary()
        second = summarized(store_from(ascension)).get_log_summary()

        assert first == second

    @settings(max_examples=30, deadline=None)
    @given(ascensions())
    def test_rendering_twice_gives_identical_text(self, ascension):
        store = summarized(store_from(ascension))
        renderer = Renderer(PLAIN_TEXT)

        assert renderer.full_log(store) == renderer.full_log(store)
        assert renderer.turn_rundown(store) == renderer.turn_rundown(store)

    @settings(max_examples=30, deadline=None)
    @given(ascensions())
    def test_formats_agree_on_interval_count(self, ascension):
        store = summarized(store_from(ascension))

        plain = Renderer(PLAIN_TEXT).turn_rundown(store)
        html = Renderer(HTML).turn_rundown(store)
        assert len(plain) == len(html)

    def test_summary_is_created_once(self):
        store = summarized(make_store([make_turn(1)]))

        with pytest.raises(InvalidStateError) as exc_info:
            store.create_summary()
        assert exc_info.value.code == ErrorCode.SUMMARY_ALREADY_CREATED


class TestSubIntervalContainment:
    """Every dated entry of a copy lies inside its range."""

    @settings(max_examples=50, deadline=None)
    @given(ascensions(), st.data())
    def test_entries_inside_range(self, ascension, data):
        store = summarized(store_from(ascension))
        last = store.last_turn_number
        start = data.draw(st.integers(min_value=0, max_value=last - 1)) if last > 0 else 0
        end = data.draw(st.integers(min_value=start + 1, max_value=max(last, start + 1)))

        sub = store.get_sub_interval_log_data(start, end)

        assert all(start <= t.turn_number <= end for t in sub.turns)
        assert all(start <= d.turn_number <= end for d in sub.day_changes)
        assert all(start <= f.turn_number <= end for f in sub.familiar_changes)
        assert all(start <= l.level_reached_on_turn <= end for l in sub.levels)
        assert all(start <= p.turn_number <= end for p in sub.pulls)
        for stream in (sub.learned_skills, sub.hunted_combats, sub.banished_combats):
            assert all(start <= e.number <= end for e in stream)
        assert sub.day_changes[0].turn_number == start

    @settings(max_examples=50, deadline=None)
    @given(ascensions(), st.data())
    def test_copy_keeps_day_tagging(self, ascension, data):
        _, day_changes = ascension
        store = summarized(store_from(ascension))
        last = store.last_turn_number
        # Starting on a day-change turn is the interesting boundary.
        starts = [d.turn_number for d in day_changes if d.turn_number < last] or [0]
        start = data.draw(st.one_of(st.sampled_from(starts),
                                    st.integers(min_value=0, max_value=max(last - 1, 0))))
        end = data.draw(st.integers(min_value=start + 1, max_value=max(last, start + 1)))

        sub = store.get_sub_interval_log_data(start, end)
        emissions = reconcile(sub.turn_intervals, sub.day_changes)

        for turn_number, turn_day, emitted_day in emitted_turns(emissions):
            assert turn_day == emitted_day, f"turn {turn_number}"
