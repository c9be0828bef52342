"""
CLI Tests

Runs ascension_log.cli.main() on documents written to a temporary
directory and checks output and exit status.

EXIT STATUS:
============
0  the command ran
1  --strict and records were skipped
2  usage, unreadable or invalid input
"""

import json

import pytest

from ascension_log import cli

from ..fixtures import day_change_at_interval_end_records


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    # basicConfig(force=True) would outlive capsys' stderr capture
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "log.json"
    path.write_text(json.dumps(day_change_at_interval_end_records()), encoding="utf-8")
    return str(path)


@pytest.fixture
def bad_log_file(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(
        json.dumps(day_change_at_interval_end_records() + [{"type": "weather"}]),
        encoding="utf-8"
    )
    return str(path)


class TestCommands:

    def test_rundown(self, log_file, capsys):
        assert cli.main(["rundown", log_file]) == cli.EXIT_OK

        out = capsys.readouterr().out
        assert out.startswith("[0] Ascension Start [0,0,0]\n")
        assert "[1-9] Cobb's Knob Kitchens [0,0,0]\n[10] The Haunted Pantry [0,0,0]\n" in out

    def test_log_with_format_and_date(self, log_file, capsys):
        assert cli.main(["log", log_file, "--format", "html", "--date", "2026-01-01"]) == 0

        out = capsys.readouterr().out
        assert "<h1>NEW Sauceror not defined not defined ASCENSION STARTED 2026-01-01</h1>" in out

    def test_summary_is_json(self, log_file, capsys):
        assert cli.main(["summary", log_file]) == 0

        summary = json.loads(capsys.readouterr().out)
        assert summary["last_turn"] == 10
        assert summary["character_class"] == "Sauceror"
        assert summary["turns"]["combat"] == 10

    def test_slice(self, log_file, capsys):
        assert cli.main(["slice", log_file, "5", "10"]) == 0
        assert "[5-9] Cobb's Knob Kitchens" in capsys.readouterr().out

    def test_data_tables_override(self, log_file, tmp_path, capsys):
        tables = tmp_path / "tables.json"
        tables.write_text(json.dumps({"quest_areas": {"Kitchen quest": ["Cobb's Knob Kitchens"]}}),
                          encoding="utf-8")

        assert cli.main(["summary", log_file, "--data-tables", str(tables)]) == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["quest_turns"] == [{"data": "Kitchen quest", "number": 9}]


class TestDataQuality:

    def test_errors_reported_on_stderr(self, bad_log_file, capsys):
        assert cli.main(["rundown", bad_log_file]) == cli.EXIT_OK

        err = capsys.readouterr().err
        assert "[!] UNKNOWN_RECORD_TYPE: Unknown record type 'weather'." in err
        assert "record_index=12" in err

    def test_strict_fails_on_errors(self, bad_log_file):
        assert cli.main(["rundown", bad_log_file, "--strict"]) == cli.EXIT_DATA_QUALITY

    def test_strict_passes_clean_log(self, log_file):
        assert cli.main(["rundown", log_file, "--strict"]) == cli.EXIT_OK


class TestUsageErrors:

    def test_no_command(self, capsys):
        assert cli.main([]) == cli.EXIT_USAGE

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main(["rundown", str(tmp_path / "missing.json")]) == cli.EXIT_USAGE
        assert "[!] Cannot read" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")

        assert cli.main(["log", str(path)]) == cli.EXIT_USAGE
        assert "[!] Invalid JSON" in capsys.readouterr().err

    def test_bad_range(self, log_file, capsys):
        assert cli.main(["slice", log_file, "6", "6"]) == cli.EXIT_USAGE
        assert "[!] INVALID_RANGE" in capsys.readouterr().err

    def test_unknown_format_rejected_by_parser(self, log_file):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["log", log_file, "--format", "pdf"])
        assert exc_info.value.code == 2
