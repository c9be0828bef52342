"""
Ascension Log CLI
=================

Command-line reporter over a JSON log document.

COMMANDS:
- rundown: Turn rundown, one block per interval
- log:     Full log (header, rundown, summary sections)
- summary: Summary aggregates as JSON
- slice:   Full log of a turn range

USAGE:
    python -m ascension_log.cli [COMMAND] LOG_FILE [ARGS]

Data-quality errors found while loading are printed to stderr. With
--strict they also make the command exit with status 1.
"""
import argparse
import json
import sys
from typing import List, Optional

from .contracts.base import AscensionLogError
from .data_tables import DataTables
from .engine import AscensionLog, AscensionLogConfig
from .observability import configure_logging
from .rendering.formats import LogOutputFormat
from .timeline.store import TurnIterationMode
from .api.mapper import map_summary_to_dto

EXIT_OK = 0
EXIT_DATA_QUALITY = 1
EXIT_USAGE = 2


def load_log(args) -> AscensionLog:
    config = AscensionLogConfig(
        detailed=not args.non_detailed,
        turn_iteration_mode=TurnIterationMode.parse(args.turn_iteration_mode),
        data_tables=DataTables.from_json(args.data_tables) if args.data_tables else None,
        show_notes=not args.hide_notes
    )
    log = AscensionLog.from_file(args.log_file, config)
    for error in log.errors:
        context = ", ".join(f"{k}={v}" for k, v in error.context)
        print(f"[!] {error.code.name}: {error.message} ({context})", file=sys.stderr)
    return log


def cmd_rundown(log: AscensionLog, args) -> None:
    """Print the turn rundown."""
    for block in log.rundown(args.format):
        sys.stdout.write(block)


def cmd_log(log: AscensionLog, args) -> None:
    """Print the full log."""
    sys.stdout.write(log.full_log(args.format, args.date))


def cmd_summary(log: AscensionLog, args) -> None:
    """Print the summary aggregates as JSON."""
    print(json.dumps(map_summary_to_dto(log.summary), indent=2))


def cmd_slice(log: AscensionLog, args) -> None:
    """Print the full log of turns [start, end]."""
    sys.stdout.write(log.slice(args.start, args.end).full_log(args.format, args.date))


COMMANDS = {
    "rundown": cmd_rundown,
    "log": cmd_log,
    "summary": cmd_summary,
    "slice": cmd_slice,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ascension-log",
        description="Ascension log reconstruction reporter"
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("log_file", help="JSON log document")
    common.add_argument(
        "--format", default=LogOutputFormat.TEXT.value,
        choices=[f.value for f in LogOutputFormat],
        help="Output format"
    )
    common.add_argument("--strict", action="store_true",
                        help="Exit with status 1 when records were skipped")
    common.add_argument("--non-detailed", action="store_true",
                        help="The document holds intervals instead of turns")
    common.add_argument("--turn-iteration-mode", default=TurnIterationMode.MAFIA.name,
                        choices=[m.name for m in TurnIterationMode])
    common.add_argument("--data-tables", default=None, help="JSON data table overrides")
    common.add_argument("--hide-notes", action="store_true", help="Leave out notes")
    common.add_argument("--date", default=None, help="Ascension start date for the title")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("rundown", parents=[common], help="Turn rundown")
    subparsers.add_parser("log", parents=[common], help="Full log")
    subparsers.add_parser("summary", parents=[common], help="Summary as JSON")
    slice_parser = subparsers.add_parser("slice", parents=[common], help="Log of a turn range")
    slice_parser.add_argument("start", type=int, help="First turn")
    slice_parser.add_argument("end", type=int, help="Last turn")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command not in COMMANDS:
        parser.print_help()
        return EXIT_USAGE

    configure_logging(args.log_level)
    try:
        log = load_log(args)
        COMMANDS[args.command](log, args)
    except OSError as e:
        print(f"[!] Cannot read {e.filename}: {e.strerror}", file=sys.stderr)
        return EXIT_USAGE
    except json.JSONDecodeError as e:
        print(f"[!] Invalid JSON: {e}", file=sys.stderr)
        return EXIT_USAGE
    except AscensionLogError as e:
        print(f"[!] {e.code.name}: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.strict and log.errors:
        return EXIT_DATA_QUALITY
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
