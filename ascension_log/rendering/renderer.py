"""
Renderer
========

Turns a summarized TimelineStore into text. One Renderer serves every
format: the reconciler decides WHAT is written and in which order, the
interleaver hands out the events of each interval, and the injected
FormatStrategy only decorates.

Two products:
- turn_rundown(): one string per emitted interval, notes hidden, day
  changes left out; carry-over lines are appended to the interval they
  came from.
- full_log(): title, header, table of contents, day-by-day rundown with
  day changes and notes, then the summary sections.

LIFECYCLE:
==========
Every call walks the log with fresh traversal state (one-time items not
yet seen, daily Ka), so rendering the same store twice gives the same
text.
"""

from __future__ import annotations
from math import isqrt
from typing import List, Optional
import logging

from .. import __version__
from ..contracts.actions import DayChange, LevelData
from ..contracts.character import AscensionPath
from ..contracts.countables import Consumable, ConsumableVersion
from ..contracts.base import ErrorCode, InvalidStateError
from ..timeline.intervals import TurnInterval
from ..timeline.interleaver import (
    EventInterleaver, SideEvent, SideEventKind, TraversalState, TurnEvent, TurnEventKind,
    ka_gain
)
from ..timeline.reconciler import (
    CarryOverEmission, DayChangeEmission, IntervalEmission, reconcile
)
from ..timeline.store import TimelineStore
from .formats import FormatStrategy, LogWriter, PLAIN_TEXT
from .sections import present_sections, write_sections

logger = logging.getLogger(__name__)

ITEMS_PER_LINE = 4
ADVENTURES_LEFT = "Adventure count at day start: "
CURRENT_MEAT = "Current meat: "
KA_EARNED_TODAY = "Ka earned today: "

_LINE_VERBS = {ConsumableVersion.FOOD: "Ate", ConsumableVersion.BOOZE: "Drank"}


class _LogPass:
    """One traversal of a store: writer, interleaver and traversal state."""

    def __init__(self, store: TimelineStore, strategy: FormatStrategy, show_notes: bool):
        if not store.is_summary_created:
            raise InvalidStateError.of(
                ErrorCode.SUMMARY_NOT_CREATED,
                "A log can only be rendered after its summary was created."
            )
        self.store = store
        self.strategy = strategy
        self.show_notes = show_notes
        self.summary = store.get_log_summary()
        self.writer = LogWriter(strategy)
        self.state = TraversalState.for_tables(store.data_tables)
        self.interleaver = EventInterleaver(
            store, self.state,
            banished=self.summary.banished_combats,
            disintegrated=self.summary.disintegrated_combats
        )
        self.emissions = reconcile(store.turn_intervals, store.day_changes)

    # -------------------------------------------------------------------------
    # Emissions
    # -------------------------------------------------------------------------

    def interval(self, emission: IntervalEmission) -> None:
        ti, day = emission.interval, emission.day_number
        s, w = self.strategy, self.writer

        w.write(s.paragraph_start)
        self.notes(ti.pre_interval_comment)

        header = (f"{s.wrap('turn', ti.bounds_text)} {ti.area_name} "
                  f"{s.wrap('stat_gain', str(ti.stat_gain))}")
        ka = ka_gain(ti)
        if ka > 0:
            header += f" (Ka: {ka})"
            self.state.add_ka(day, ka)
        w.writeln(header)

        for event in self.interleaver.turn_events(ti):
            for line in self.turn_event_lines(event):
                w.break_line(line)
        self.consumables_and_pulls(ti, day)
        for event in self.interleaver.side_events(ti):
            w.break_line(self.side_event_line(event))

        self.notes(ti.post_interval_comment)
        w.write(s.paragraph_end)

    def carry_over(self, emission: CarryOverEmission) -> None:
        self.consumables_and_pulls(emission.interval, emission.day_number)

    def day_change(self, emission: DayChangeEmission) -> None:
        w = self.writer
        previous = emission.previous_day_number
        day_change = emission.day_change

        self.daily_ka(previous)
        self.notes(self.store.get_header_footer_comment(previous).footer_comments)
        w.writeln()
        self.day_change_line(day_change)
        snapshot = self.store.get_first_player_snapshot_after_turn(day_change.turn_number)
        if snapshot is not None:
            w.writeln(f"{ADVENTURES_LEFT}{snapshot.adventures_left}")
            w.writeln(f"{CURRENT_MEAT}{snapshot.current_meat}")
        w.writeln()
        self.notes(self.store.get_header_footer_comment(day_change.day_number).header_comments)

    # -------------------------------------------------------------------------
    # Pieces
    # -------------------------------------------------------------------------

    def consumables_and_pulls(self, ti: TurnInterval, day_number: int) -> None:
        s, w = self.strategy, self.writer
        for c in self.interleaver.current_consumables(ti, day_number):
            w.break_line(self.consumable_line(c))
        for pull in self.interleaver.current_pulls(day_number, ti.end_turn):
            w.break_line(
                f"     #> Turn [{pull.turn_number}] pulled "
                f"{s.wrap('pull', f'{pull.amount} {pull.item_name}')}"
            )

    def consumable_line(self, c: Consumable) -> str:
        s = self.strategy
        line = (f"     o> {_LINE_VERBS.get(c.version, 'Used')} "
                f"{s.wrap('consumable', f'{c.amount} {c.name}')}")
        if c.adventure_gain > 0 or c.version in _LINE_VERBS:
            line += f" ({c.adventure_gain} adventures gained)"
        return f"{line} {s.wrap('stat_gain', str(c.stat_gain))}"

    def turn_event_lines(self, event: TurnEvent) -> List[str]:
        s, n = self.strategy, event.turn_number
        if event.kind == TurnEventKind.SEMIRARE:
            return [f"     #> [{n}] Semirare: {s.wrap('special_encounter', event.text)}"]
        if event.kind == TurnEventKind.BAD_MOON:
            return [f"     %> [{n}] Badmoon: {s.wrap('special_encounter', event.text)}"]
        if event.kind == TurnEventKind.CHATEAU_REST:
            return [f"     &> [{n}] {event.text} {s.wrap('stat_gain', str(event.stat_gain))}"]
        if event.kind == TurnEventKind.FREE_CRAFTING:
            return [f"     &> [{n}] {event.text}"]
        entries = [s.wrap("item", entry) for entry in event.items]
        return [
            f"     +> [{n}] Got " + ", ".join(entries[i:i + ITEMS_PER_LINE])
            for i in range(0, len(entries), ITEMS_PER_LINE)
        ]

    def side_event_line(self, event: SideEvent) -> str:
        s, n, payload = self.strategy, event.turn_number, event.payload
        kind = event.kind
        if kind == SideEventKind.HYBRID:
            return f"     h> [{n}] {payload}"
        if kind == SideEventKind.HUNTED:
            return f"     *> [{n}] Started hunting {s.wrap('hunted', payload)}"
        if kind == SideEventKind.BANISHED:
            return f"     b> [{n}] Banished {payload}"
        if kind == SideEventKind.DISINTEGRATED:
            return f"     }}> [{n}] Disintegrated {s.wrap('yellow_ray', payload)}"
        if kind == SideEventKind.FAMILIAR:
            return f"     -> Turn [{n}] {s.wrap('familiar', payload)}"
        if kind == SideEventKind.FREE_RUNAWAYS:
            return f"     &> {s.wrap('runaway', str(payload))}"
        if kind == SideEventKind.LEARNED_SKILL:
            return f"     @> Learned: {payload} (Turn {n})"
        return s.wrap("level", self.level_text(payload))

    @staticmethod
    def level_text(level: LevelData) -> str:
        stats = level.stats_at_level_reached
        return (f"     => Level {level.level_number} (Turn {level.level_reached_on_turn})! "
                f"({isqrt(stats.mus)}/{isqrt(stats.myst)}/{isqrt(stats.mox)})")

    def notes(self, notes: str) -> None:
        if self.show_notes and notes:
            text = notes.replace("\r\n", "\n").replace("\r", "\n")
            self.writer.writeln(self.strategy.wrap("notes", text))

    def day_change_line(self, day_change: DayChange) -> None:
        s = self.strategy
        self.writer.writeln(
            s.wrap("day_change_line", s.day_change_template.format(text=str(day_change)))
        )

    def daily_ka(self, day_number: int) -> None:
        if self.store.ascension_path == AscensionPath.ED:
            self.writer.writeln()
            self.writer.writeln(f"{KA_EARNED_TODAY}{self.state.ka_on_day(day_number)}")


class Renderer:
    """Renders a summarized store with one format strategy."""

    def __init__(self, strategy: FormatStrategy = PLAIN_TEXT, show_notes: bool = True):
        self.strategy = strategy
        self.show_notes = show_notes

    def turn_rundown(self, store: TimelineStore) -> List[str]:
        log_pass = _LogPass(store, self.strategy, show_notes=False)
        writer = log_pass.writer
        rundown: List[str] = []
        for emission in log_pass.emissions:
            if isinstance(emission, IntervalEmission):
                log_pass.interval(emission)
                rundown.append(writer.take())
            elif isinstance(emission, CarryOverEmission):
                log_pass.carry_over(emission)
                text = writer.take()
                if text and rundown:
                    rundown[-1] += text
                elif text:
                    rundown.append(text)
        return rundown

    def render(self, store: TimelineStore, ascension_start_date: Optional[str] = None) -> List[str]:
        """The full log as an ordered list of text fragments."""
        log_pass = _LogPass(store, self.strategy, self.show_notes)
        s, w = self.strategy, log_pass.writer
        summary = log_pass.summary

        w.write(s.log_begin)
        w.write(s.title(
            f"NEW {store.character_class} {store.game_mode} {store.ascension_path} "
            f"ASCENSION STARTED {ascension_start_date or ''}".rstrip()
        ))
        w.write(s.augment("log_header_start"))
        w.writeln(f"This log was created by the Ascension Log Visualizer {__version__}.")
        w.writeln("The basic idea and the format of this log have been borrowed from the "
                  "AFH MafiaLog Parser by VladimirPootin and QuantumNightmare.")
        w.end_line()
        w.write(s.augment("log_header_end"))
        w.write(s.table_of_contents(
            [(section.toc_title, section.anchor)
             for section in present_sections(store, summary)]
        ))

        first_day = store.day_changes[0]
        log_pass.day_change_line(first_day)
        w.writeln()
        log_pass.notes(store.get_header_footer_comment(first_day.day_number).header_comments)

        current_day = first_day.day_number
        for emission in log_pass.emissions:
            if isinstance(emission, IntervalEmission):
                log_pass.interval(emission)
            elif isinstance(emission, DayChangeEmission):
                log_pass.day_change(emission)
                current_day = emission.day_change.day_number
            else:
                log_pass.carry_over(emission)

        log_pass.daily_ka(current_day)
        log_pass.notes(store.get_header_footer_comment(current_day).footer_comments)
        w.end_line()
        w.write("Turn rundown finished!")
        w.write(s.augment("turn_rundown_end"))
        w.end_line()
        w.end_line()

        write_sections(w, store, summary)
        w.write(s.log_end)

        logger.debug("Rendered %d emissions as %s", len(log_pass.emissions), s.name)
        return w.fragments

    def full_log(self, store: TimelineStore, ascension_start_date: Optional[str] = None) -> str:
        return "".join(self.render(store, ascension_start_date))
