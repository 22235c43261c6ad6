"""Tests for CLI commands."""

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from weeks.app import WeeksApp
from weeks.cli import create_parser, run_cli
from weeks.config import WeeksConfig
from weeks.logging import JSONLLogger

NOW = datetime(2025, 4, 12, 12, 0)


@pytest.fixture
def make_app(tmp_path: Path):
    """Patch the CLI to build apps on a temporary data directory."""
    config = WeeksConfig(data_dir=tmp_path)

    def factory() -> WeeksApp:
        return WeeksApp(
            config, clock=lambda: NOW, logger=JSONLLogger(log_dir=config.log_dir)
        )

    with patch("weeks.cli._get_app", side_effect=factory):
        yield factory


class TestParser:
    def test_no_command_prints_help(self, capsys):
        assert run_cli([]) == 0
        assert "usage: weeks" in capsys.readouterr().out

    def test_reflect_joins_words(self):
        args = create_parser().parse_args(["reflect", "wasted", "too", "much", "tv"])
        assert args.type == "wasted"
        assert args.explanation == ["too", "much", "tv"]


class TestBirthday:
    def test_show_unset(self, make_app, capsys):
        assert run_cli(["birthday"]) == 0
        assert "No birthday set" in capsys.readouterr().out

    def test_set_and_show(self, make_app, capsys):
        assert run_cli(["birthday", "1975-04-25"]) == 0
        out = capsys.readouterr().out
        assert "Birthday set to 1975-04-25" in out
        assert "1,553" in out

        assert run_cli(["birthday"]) == 0
        assert "Birthday: 1975-04-25" in capsys.readouterr().out

    def test_invalid_date(self, make_app, capsys):
        assert run_cli(["birthday", "25/04/1975"]) == 1
        assert "Invalid date" in capsys.readouterr().out

    def test_future_date(self, make_app, capsys):
        assert run_cli(["birthday", "2030-01-01"]) == 1
        assert "future" in capsys.readouterr().out

    def test_clear(self, make_app, capsys):
        run_cli(["birthday", "1975-04-25"])
        assert run_cli(["birthday", "--clear"]) == 0
        assert make_app().birthday_string == ""


class TestStats:
    def test_stats(self, make_app, capsys):
        run_cli(["birthday", "1975-04-25"])
        capsys.readouterr()

        assert run_cli(["stats"]) == 0
        out = capsys.readouterr().out
        assert "Your age:           49" in out
        assert "Weeks lived:        2,607" in out
        assert "Weeks remaining:    1,553" in out
        assert "Percentage of life: 62.7%" in out

    def test_stats_without_birthday(self, make_app, capsys):
        assert run_cli(["stats"]) == 0
        out = capsys.readouterr().out
        assert "No birthday set" in out
        assert "Weeks remaining:    4,160" in out


class TestReflections:
    def test_reflect_and_list(self, make_app, capsys):
        assert run_cli(["reflect", "wasted", "Spent", "too", "much", "time", "scrolling."]) == 0
        assert run_cli(["reflect", "spent-well", "Finished the project report."]) == 0
        capsys.readouterr()

        assert run_cli(["reflections"]) == 0
        out = capsys.readouterr().out
        assert "Spent too much time scrolling." in out
        assert "Finished the project report." in out
        assert "Total: 2 reflection(s)" in out

    def test_reflect_unknown_type(self, make_app, capsys):
        assert run_cli(["reflect", "meh", "whatever"]) == 1
        assert "Unknown reflection type" in capsys.readouterr().out

    def test_list_empty(self, make_app, capsys):
        assert run_cli(["reflections"]) == 0
        assert "No reflections yet" in capsys.readouterr().out

    def test_delete_twice(self, make_app, capsys):
        run_cli(["reflect", "wasted", "x"])
        reflection_id = make_app().list_reflections()[0].id
        capsys.readouterr()

        assert run_cli(["delete", str(reflection_id)]) == 0
        assert "Deleted reflection" in capsys.readouterr().out

        assert run_cli(["delete", str(reflection_id)]) == 0
        assert "not found" in capsys.readouterr().out


class TestNotifications:
    def test_without_birthday(self, make_app, capsys):
        assert run_cli(["notifications"]) == 0
        out = capsys.readouterr().out
        assert "not scheduled" in out
        assert "Daily Reflection: Every day at 20:00" in out

    def test_with_birthday(self, make_app, capsys):
        run_cli(["birthday", "1975-04-25"])
        capsys.readouterr()

        assert run_cli(["notifications"]) == 0
        out = capsys.readouterr().out
        assert "Life in Weeks: Every Sunday at 09:00" in out
        assert "1,553 weeks left" in out


class TestShow:
    def test_shows_full_explanation(self, make_app, capsys):
        explanation = "Walked along the river and finally finished the long report draft."
        run_cli(["reflect", "spent-well", explanation])
        reflection_id = make_app().list_reflections()[0].id
        capsys.readouterr()

        assert run_cli(["show", str(reflection_id)]) == 0
        out = capsys.readouterr().out
        assert "Spent Well" in out
        assert "Saturday, April 12, 2025" in out
        assert explanation in out

    def test_list_shortens_long_explanations(self, make_app, capsys):
        run_cli(["reflect", "wasted", "x" * 80])
        capsys.readouterr()

        run_cli(["reflections"])
        assert "x" * 80 not in capsys.readouterr().out

    def test_missing(self, make_app, capsys):
        assert run_cli(["show", "99"]) == 1
        assert "Reflection 99 not found" in capsys.readouterr().out


class TestEnvironment:
    def test_out_of_range_hour_falls_back(self, monkeypatch, tmp_path: Path, capsys):
        monkeypatch.setenv("WEEKS_HOME", str(tmp_path))
        monkeypatch.setenv("WEEKS_DAILY_HOUR", "24")

        assert run_cli(["notifications"]) == 0
        assert "Daily Reflection: Every day at 20:00" in capsys.readouterr().out
