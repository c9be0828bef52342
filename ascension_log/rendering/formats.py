"""
Output Format Strategies
========================

Plain text, HTML and BBCode differ only in decoration: the markup around
titles, section headers, tables and paragraphs, the line-break sequence,
and a table of "augmentation" snippets wrapped around semantic slots such
as the turn bounds or a pull. Each format is one FormatStrategy value; the
Renderer never branches on which one it was given.

Augmentation slots:
    log_header, turn, day_change_line, stat_gain, pull, consumable, item,
    familiar, hunted, yellow_ray, special_encounter, level, runaway, notes
Each slot has a `_start` and an `_end` key. `turn_rundown_end` closes the
rundown. Missing keys render as the empty string.

A format may not change WHAT is written or in which order, only how it
is decorated.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Sequence

from ..contracts.base import ErrorCode, InvalidArgumentError

AUGMENTATION_SLOTS = (
    "log_header", "turn", "day_change_line", "stat_gain", "pull", "consumable",
    "item", "familiar", "hunted", "yellow_ray", "special_encounter", "level",
    "runaway", "notes",
)


def _augmentations(**slots: tuple) -> Mapping[str, str]:
    table = {}
    for slot, (start, end) in slots.items():
        table[f"{slot}_start"] = start
        table[f"{slot}_end"] = end
    return MappingProxyType(table)


@dataclass(frozen=True)
class FormatStrategy:
    """Decoration hooks of one output format."""
    name: str
    augmentations: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    line_break: str = ""
    end_line: str = "\n"
    paragraph_start: str = ""
    paragraph_end: str = ""

    log_begin: str = ""
    log_end: str = ""
    title_template: str = "{title}\n------------------------------\n\n"
    section_header_template: str = "{title}\n----------\n"
    day_change_template: str = "{text}"

    table_start: str = ""
    table_end: str = ""
    row_start: str = ""
    row_end: str = "\n"
    cell_start: str = ""
    cell_end: str = ""

    has_table_of_contents: bool = False
    toc_start: str = ""
    toc_line_template: str = ""
    toc_end: str = ""

    # Casts section: boxed totals (plain) or one line each (HTML).
    boxed_totals: bool = True

    def augment(self, key: str) -> str:
        return self.augmentations.get(key, "")

    def wrap(self, slot: str, text: str) -> str:
        return f"{self.augment(slot + '_start')}{text}{self.augment(slot + '_end')}"

    def title(self, text: str) -> str:
        return self.title_template.format(title=text)

    def section_header(self, title: str, anchor: str) -> str:
        return self.section_header_template.format(title=title, anchor=anchor)

    def table_row(self, cells: Sequence[str]) -> str:
        body = "".join(f"{self.cell_start}{c}{self.cell_end}" for c in cells)
        return f"{self.row_start}{body}{self.row_end}"

    def table_of_contents(self, entries: Sequence[tuple]) -> str:
        if not self.has_table_of_contents:
            return ""
        lines = [self.toc_line_template.format(title=t, anchor=a) for t, a in entries]
        return self.toc_start + "".join(lines) + self.toc_end


# =============================================================================
# BUILT-IN FORMATS
# =============================================================================

PLAIN_TEXT = FormatStrategy(name="text")

_HTML_STYLE = (
    "<html>\n"
    "<head><style>\n"
    "HTML { font-size: 11px; }\n"
    "P { text-indent: -2em; margin-left: 2em; margin-top: 0; margin-bottom: 0; }\n"
    "TD { font-size: 11px; padding-left: 1em; padding-right: 1em; text-align: right; }\n"
    "TD.toc { font-size: 11px; padding-left: 1em; padding-right: 1em; "
    "text-align: left; background-color: #cccccc }\n"
    ".stats { color: #808080; } .pull { color: #800080; } .item { color: #008000; }\n"
    ".consumable { color: #b22222; } .familiar { color: #0000cd; }\n"
    ".special { color: #ff8c00; font-weight: bold; } .notes { font-style: italic; }\n"
    "</style></head>\n"
    "<body>\n"
)

HTML = FormatStrategy(
    name="html",
    augmentations=_augmentations(
        log_header=("<p>", "</p>"),
        turn=("<b>", "</b>"),
        day_change_line=("", ""),
        stat_gain=('<span class="stats">', "</span>"),
        pull=('<span class="pull">', "</span>"),
        consumable=('<span class="consumable">', "</span>"),
        item=('<span class="item">', "</span>"),
        familiar=('<span class="familiar">', "</span>"),
        hunted=("<i>", "</i>"),
        yellow_ray=('<span class="special">', "</span>"),
        special_encounter=('<span class="special">', "</span>"),
        level=("<b>", "</b>"),
        runaway=("<i>", "</i>"),
        notes=('<span class="notes">', "</span>"),
    ),
    line_break="<br>",
    end_line="<br>\n",
    paragraph_start="<p>",
    paragraph_end="</p>",
    log_begin=_HTML_STYLE,
    log_end="</body></html>\n",
    title_template="<h1>{title}</h1>\n",
    section_header_template='<a name="{anchor}"/><h2>{title}</h2>\n',
    day_change_template="<h2>{text}</h2>",
    table_start="<table>\n",
    table_end="</table>\n",
    row_start="<tr>",
    row_end="</tr>\n",
    cell_start="<td>",
    cell_end="</td>\n",
    has_table_of_contents=True,
    toc_start='<table><tr><td class="toc"><b>TABLE OF CONTENTS</b>\n',
    toc_line_template='<br><a href="#{anchor}">{title}</a>\n',
    toc_end="</td></tr></table>\n",
    boxed_totals=False,
)

BBCODE = FormatStrategy(
    name="bbcode",
    augmentations=_augmentations(
        log_header=("[size=1]", "[/size]"),
        turn=("[b]", "[/b]"),
        day_change_line=("[b][size=4]", "[/size][/b]"),
        stat_gain=("[color=gray]", "[/color]"),
        pull=("[color=purple]", "[/color]"),
        consumable=("[color=firebrick]", "[/color]"),
        item=("[color=green]", "[/color]"),
        familiar=("[color=blue]", "[/color]"),
        hunted=("[i]", "[/i]"),
        yellow_ray=("[color=olive]", "[/color]"),
        special_encounter=("[color=darkorange][b]", "[/b][/color]"),
        level=("[b]", "[/b]"),
        runaway=("[i]", "[/i]"),
        notes=("[i]", "[/i]"),
    ),
)


class LogOutputFormat(Enum):
    TEXT = "text"
    HTML = "html"
    BBCODE = "bbcode"

    @property
    def strategy(self) -> FormatStrategy:
        return _STRATEGIES[self]

    @classmethod
    def parse(cls, name: str) -> LogOutputFormat:
        try:
            return cls(name.lower())
        except ValueError:
            raise InvalidArgumentError.of(
                ErrorCode.INVALID_VALUE,
                f"Unknown output format '{name}'.",
                allowed=", ".join(f.value for f in cls)
            ) from None


_STRATEGIES = {
    LogOutputFormat.TEXT: PLAIN_TEXT,
    LogOutputFormat.HTML: HTML,
    LogOutputFormat.BBCODE: BBCODE,
}


# =============================================================================
# WRITER
# =============================================================================

class LogWriter:
    """
    Accumulates text fragments decorated by one strategy.

    writeln() ends a line; writeln_with_break() ends it and then writes the
    format's line break; break_line() writes the break before the text, as
    every event line inside an interval does.
    """

    def __init__(self, strategy: FormatStrategy):
        self.strategy = strategy
        self._fragments: List[str] = []

    def write(self, text: str) -> None:
        if text:
            self._fragments.append(text)

    def writeln(self, text: str = "") -> None:
        self._fragments.append(text + "\n")

    def writeln_with_break(self, text: str = "") -> None:
        self.writeln(text)
        self.write(self.strategy.line_break)

    def break_line(self, text: str) -> None:
        self.write(self.strategy.line_break)
        self.writeln(text)

    def end_line(self) -> None:
        self._fragments.append(self.strategy.end_line)

    def section_end(self) -> None:
        self._fragments.append("\n\n\n")

    @property
    def fragments(self) -> List[str]:
        return list(self._fragments)

    def take(self) -> str:
        """Return everything written so far and start over."""
        text = "".join(self._fragments)
        self._fragments.clear()
        return text

    def text(self) -> str:
        return "".join(self._fragments)
