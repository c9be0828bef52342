"""
Renderer Tests

Verifies the turn rundown and the full log for the fixed day-boundary
scenarios, in all three formats.

INVARIANTS TESTED:
==================
- One rundown entry per emitted interval; carry-over lines join the
  interval they came from
- Day changes and notes only appear in the full log
- Formats decorate; content and order stay the same
- Optional summary sections are left out when empty
"""

import pytest

from ascension_log import __version__
from ascension_log.contracts import (
    AscensionPath, CharacterClass, ErrorCode, HeaderFooterComment, InvalidArgumentError,
    InvalidStateError, PlayerSnapshot
)
from ascension_log.rendering.formats import (
    BBCODE, HTML, PLAIN_TEXT, LogOutputFormat, LogWriter
)
from ascension_log.rendering.renderer import Renderer
from ascension_log.rendering.sections import SECTIONS, percent

from ..fixtures import (
    day_change_at_interval_end_store, make_food, make_store, make_turn,
    pull_after_day_change_store, summarized
)

TITLE = "NEW Disco Bandit not defined not defined ASCENSION STARTED"


# =============================================================================
# FORMATS
# =============================================================================

class TestFormats:
    """Strategies are data."""

    def test_parse(self):
        assert LogOutputFormat.parse("HTML") == LogOutputFormat.HTML
        assert LogOutputFormat.parse("bbcode").strategy is BBCODE

    def test_parse_unknown(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            LogOutputFormat.parse("pdf")
        assert exc_info.value.code == ErrorCode.INVALID_VALUE

    def test_wrap(self):
        assert PLAIN_TEXT.wrap("turn", "[4]") == "[4]"
        assert HTML.wrap("turn", "[4]") == "<b>[4]</b>"
        assert BBCODE.wrap("pull", "1 star") == "[color=purple]1 star[/color]"

    def test_missing_augmentation_is_empty(self):
        assert HTML.augment("turn_rundown_end") == ""

    def test_writer_break_line(self):
        writer = LogWriter(HTML)
        writer.break_line("     -> Turn [3] Mosquito")
        assert writer.take() == "<br>     -> Turn [3] Mosquito\n"
        assert writer.text() == ""

    def test_percent_rounds_half_up(self):
        assert percent(1, 3) == 33.3
        assert percent(1, 8) == 12.5
        assert percent(5, 0) == 0.0


# =============================================================================
# TURN RUNDOWN
# =============================================================================

class TestTurnRundown:
    """One entry per interval, notes and day changes left out."""

    def test_day_change_at_interval_end(self):
        store = summarized(day_change_at_interval_end_store())

        assert Renderer(PLAIN_TEXT).turn_rundown(store) == [
            "[0] Ascension Start [0,0,0]\n     -> Turn [0] none\n",
            "[1-9] Cobb's Knob Kitchens [0,0,0]\n",
            "[10] The Haunted Pantry [0,0,0]\n",
        ]

    def test_pull_joins_the_interval_it_was_carried_over_from(self):
        store = summarized(pull_after_day_change_store())
        rundown = Renderer(PLAIN_TEXT).turn_rundown(store)

        assert rundown[1] == (
            "[1-12] The Hole in the Sky [0,0,0]\n"
            "     #> Turn [12] pulled 1 star chart\n"
        )
        assert len(rundown) == 3

    def test_bbcode_decoration(self):
        store = summarized(day_change_at_interval_end_store())
        rundown = Renderer(BBCODE).turn_rundown(store)

        assert rundown[1] == "[b][1-9][/b] Cobb's Knob Kitchens [color=gray][0,0,0][/color]\n"

    def test_notes_hidden(self):
        store = summarized(make_store([make_turn(1, "a")]))
        store.turn_intervals[1].pre_interval_comment = "go fast"

        assert "go fast" not in "".join(Renderer(PLAIN_TEXT).turn_rundown(store))

    def test_requires_summary(self):
        with pytest.raises(InvalidStateError) as exc_info:
            Renderer().turn_rundown(make_store([make_turn(1, "a")]))
        assert exc_info.value.code == ErrorCode.SUMMARY_NOT_CREATED


class TestIntervalLines:
    """Event lines printed under an interval header."""

    def test_consumable_line(self):
        store = summarized(make_store([make_turn(1, "a", consumables=[make_food("pizza", 5)])]))
        rundown = Renderer(PLAIN_TEXT).turn_rundown(store)

        assert "     o> Ate 1 pizza (5 adventures gained) [0,0,0]\n" in rundown[1]

    def test_level_line(self):
        store = make_store([make_turn(1, "a", stats=(16, 0, 0))])
        store.character_class = CharacterClass.SEAL_CLUBBER
        rundown = Renderer(PLAIN_TEXT).turn_rundown(summarized(store))

        assert rundown[1] == "[1] a [16,0,0]\n     => Level 2 (Turn 1)! (5/1/2)\n"

    def test_item_line_stacks(self):
        store = summarized(make_store([
            make_turn(1, "a", items=["star", "star", "star", "line"]),
        ]))
        rundown = Renderer(PLAIN_TEXT).turn_rundown(store)

        assert "     +> [1] Got star x 3, line\n" in rundown[1]

    def test_items_wrap_after_four(self):
        items = ["box of birthday candles", "dodecagram", "eldritch butterknife",
                 "s.o.c.k.", "mosquito larva"]
        store = summarized(make_store([make_turn(1, "a", items=items)]))
        lines = Renderer(PLAIN_TEXT).turn_rundown(store)[1].splitlines()

        assert lines[1].startswith("     +> [1] Got box of birthday candles, ")
        assert lines[2] == "     +> [1] Got mosquito larva"

    def test_side_event_lines(self):
        store = make_store([make_turn(1, "a"), make_turn(2, "a")])
        store.add_hunted_combat("dairy goat", 1)
        store.add_learned_skill("Saucestorm", 2)
        rundown = Renderer(PLAIN_TEXT).turn_rundown(summarized(store))

        assert rundown[1] == (
            "[1-2] a [0,0,0]\n"
            "     *> [1] Started hunting dairy goat\n"
            "     @> Learned: Saucestorm (Turn 2)\n"
        )


# =============================================================================
# FULL LOG
# =============================================================================

class TestFullLog:
    """Header, day-by-day rundown and summary sections."""

    @pytest.fixture
    def store(self):
        return summarized(day_change_at_interval_end_store())

    def test_title_and_header(self, store):
        text = Renderer(PLAIN_TEXT).full_log(store)

        assert text.startswith(TITLE + "\n------------------------------\n\n")
        assert f"Ascension Log Visualizer {__version__}." in text

    def test_title_with_date(self, store):
        text = Renderer(PLAIN_TEXT).full_log(store, "2026-01-01")
        assert text.startswith(TITLE + " 2026-01-01\n")

    def test_days_in_order(self, store):
        text = Renderer(PLAIN_TEXT).full_log(store)

        assert "===Day 1===\n\n[0] Ascension Start [0,0,0]\n" in text
        assert ("[1-9] Cobb's Knob Kitchens [0,0,0]\n\n===Day 2===\n\n"
                "[10] The Haunted Pantry [0,0,0]\n") in text
        assert text.index("Turn rundown finished!") < text.index("ADVENTURES\n----------\n")

    def test_pull_printed_after_its_day_change(self):
        text = Renderer(PLAIN_TEXT).full_log(summarized(pull_after_day_change_store()))

        assert ("===Day 3===\n\n     #> Turn [12] pulled 1 star chart\n"
                "[13] The Castle in the Clouds in the Sky (Basement)") in text

    def test_snapshot_at_day_start(self):
        store = day_change_at_interval_end_store()
        store.add_player_snapshot(PlayerSnapshot(50, 50, 50, 40, 300, 9))
        text = Renderer(PLAIN_TEXT).full_log(summarized(store))

        assert "===Day 2===\nAdventure count at day start: 40\nCurrent meat: 300\n\n" in text

    def test_notes_shown_unless_hidden(self, store):
        store.turn_intervals[1].post_interval_comment = "skipped the key"
        store.add_header_footer_comment(HeaderFooterComment(2, "day two plan", "done"))

        shown = Renderer(PLAIN_TEXT).full_log(store)
        hidden = Renderer(PLAIN_TEXT, show_notes=False).full_log(store)

        assert "skipped the key\n" in shown
        assert "===Day 2===\n\nday two plan\n" in shown
        assert "\ndone\n" in shown
        assert "skipped the key" not in hidden
        assert "day two plan" not in hidden

    def test_ka_on_ed_path(self):
        store = make_store([make_turn(1, "a", items=["Ka coin", "Ka coin"])])
        store.ascension_path = AscensionPath.ED
        text = Renderer(PLAIN_TEXT).full_log(summarized(store))

        assert "[1] a [0,0,0] (Ka: 2)\n" in text
        assert "Ka earned today: 2\n" in text

    def test_sections_in_fixed_order(self, store):
        text = Renderer(PLAIN_TEXT).full_log(store)
        positions = [text.index(f"\n{s.title}\n----------\n") for s in SECTIONS
                     if f"\n{s.title}\n----------\n" in text]

        assert positions == sorted(positions)
        assert len(positions) == len(SECTIONS) - 3

    def test_optional_sections_left_out(self, store):
        text = Renderer(PLAIN_TEXT).full_log(store)

        assert "SKILLS LEARNED" not in text
        assert "TRACKED COMBAT ITEMS" not in text
        assert "DNA Lab" not in text

    def test_tracked_items_and_lost_combats(self):
        store = day_change_at_interval_end_store()
        store.add_tracked_combat_item("rock band flyers", 3)
        store.add_lost_combat("ninja snowman assassin", 4)
        text = Renderer(PLAIN_TEXT).full_log(summarized(store))

        assert "TRACKED COMBAT ITEMS\n----------\n3 : rock band flyers\n" in text
        assert "Number of lost combats: 1\n     ninja snowman assassin: 4\n" in text

    def test_rendering_is_repeatable(self, store):
        renderer = Renderer(HTML)
        assert renderer.render(store) == renderer.render(store)


class TestHtmlLog:
    """HTML adds a document frame and a table of contents."""

    @pytest.fixture
    def text(self):
        store = day_change_at_interval_end_store()
        store.add_learned_skill("Saucestorm", 3)
        return Renderer(HTML).full_log(summarized(store))

    def test_document_frame(self, text):
        assert text.startswith("<html>\n")
        assert text.endswith("</body></html>\n")
        assert f"<h1>{TITLE}</h1>" in text

    def test_table_of_contents_lists_present_sections(self, text):
        assert '<a href="#skills">Skills Learned</a>' in text
        assert '<a href="#hybrid">DNA Lab</a>' not in text
        assert '<a name="skills"/><h2>SKILLS LEARNED</h2>' in text

    def test_decorated_interval(self, text):
        assert ('<p><b>[1-9]</b> Cobb\'s Knob Kitchens <span class="stats">[0,0,0]</span>\n'
                in text)
        assert "<h2>===Day 2===</h2>" in text

    def test_html_casts_are_not_boxed(self, text):
        assert "Total Casts: 0\n<br>" in text
        assert "| Total Casts" not in text
