"""Tests for CLI interface.

Test Coverage:
    - Argument parsing
    - Command routing
    - Check command output formats
    - Watch command loop
    - Error handling
"""

import json
import threading
from unittest.mock import patch

import pytest

from diagmon import cli
from diagmon.cli import cmd_version, create_parser, main


SNAPSHOT_DOC = {
    "topic_stats": {
        "checked_time": 15.0,
        "ok_list": [{"module": "localization", "name": "gnss_pose"}],
        "timeout_list": [
            [{"module": "perception", "name": "lidar_points", "timeout": 1.0}, 12.34],
        ],
    },
    "tf_stats": {
        "checked_time": 2.6,
        "timeout_list": [
            [{"module": "localization", "from": "map", "to": "base_link", "timeout": 0.5}, 2.0],
        ],
    },
}


@pytest.fixture
def snapshot_file(tmp_path):
    """Snapshot JSON written to a temporary file."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT_DOC), encoding="utf-8")
    return path


class TestParserCreation:
    """Test CLI parser creation."""

    def test_parser_help_exits(self):
        """Parser prints help and exits."""
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["--help"])

    def test_parser_prog_name(self):
        """Parser has correct program name."""
        assert create_parser().prog == "diagmon"


class TestCheckParsing:
    """Test check command parsing."""

    def test_check_requires_snapshot(self):
        """Check command requires a snapshot argument."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["check"])

    def test_check_defaults(self):
        """Defaults: text format, modules from settings."""
        args = create_parser().parse_args(["check", "snap.json"])
        assert args.command == "check"
        assert str(args.snapshot) == "snap.json"
        assert args.format == "text"
        assert args.modules is None

    def test_repeated_module(self):
        """--module can be given more than once."""
        args = create_parser().parse_args(
            ["check", "snap.json", "--module", "sensing", "--module", "perception"]
        )
        assert args.modules == ["sensing", "perception"]

    def test_invalid_format_rejected(self):
        """Check command rejects unknown formats."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["check", "snap.json", "--format", "xml"])


class TestCheckCommand:
    """Test check command execution."""

    def test_text_output(self, snapshot_file, capsys):
        """Text output lists every rule with its level."""
        exit_code = main(["check", str(snapshot_file), "--module", "localization", "--module", "perception"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "localization_topic_status: OK" in out
        assert "perception_topic_status: Error" in out
        assert "lidar_points last_received_time: 12.34 [s]" in out
        assert "localization_tf_status: Error" in out

    def test_json_output(self, snapshot_file, capsys):
        """JSON output is parseable and ordered."""
        exit_code = main(["check", str(snapshot_file), "--module", "perception", "--format", "json"])

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["hardware_id"] == "autoware_state_monitor"
        assert [s["level_name"] for s in data["status"]] == ["ERROR", "ERROR"]
        assert data["status"][0]["values"][1] == {"key": "lidar_points timeout", "value": "1.00 [s]"}

    def test_table_output(self, snapshot_file, capsys):
        """Table output has one row per fact."""
        exit_code = main(["check", str(snapshot_file), "--module", "localization", "--format", "table"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "gnss_pose status" in out
        assert "map2base_link status" in out

    def test_modules_from_settings(self, snapshot_file, capsys, monkeypatch):
        """Without --module, module names come from settings."""
        monkeypatch.setattr(cli.settings, "module_names", ["perception"])

        exit_code = main(["check", str(snapshot_file)])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "perception_topic_status" in out
        assert "localization_topic_status" not in out

    def test_missing_snapshot(self, tmp_path, capsys):
        """Missing snapshot file returns 1."""
        exit_code = main(["check", str(tmp_path / "missing.json"), "--module", "sensing"])

        assert exit_code == 1
        assert "Error" in capsys.readouterr().err

    def test_malformed_snapshot(self, tmp_path, capsys):
        """Malformed snapshot returns 1."""
        path = tmp_path / "bad.json"
        path.write_text('{"topic_stats": {"ok_list": [{"name": "no_module"}]}}', encoding="utf-8")

        assert main(["check", str(path)]) == 1

    def test_keyboard_interrupt(self, snapshot_file):
        """Ctrl-C returns 130."""
        with patch("diagmon.cli.load_snapshot", side_effect=KeyboardInterrupt):
            assert main(["check", str(snapshot_file), "--module", "sensing"]) == 130


class TestWatchCommand:
    """Test watch command parsing and execution."""

    @pytest.fixture(autouse=True)
    def fast_rate(self, monkeypatch):
        monkeypatch.setattr(cli.settings, "update_rate", 1000.0)

    def test_watch_defaults(self):
        """Defaults: text format, unlimited ticks."""
        args = create_parser().parse_args(["watch", "snap.json"])
        assert args.command == "watch"
        assert args.format == "text"
        assert args.count is None
        assert args.modules is None

    def test_watch_rejects_table(self):
        """Table format is not offered for watch."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["watch", "snap.json", "--format", "table"])

    def test_prints_one_bundle_per_tick(self, snapshot_file, capsys):
        """--count bounds the loop; every tick prints a bundle."""
        exit_code = main(["watch", str(snapshot_file), "--module", "perception", "--count", "2"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert out.count("=== Diagnostics: autoware_state_monitor") == 2
        assert out.count("Overall: [ERROR]") == 2
        assert out.count("lidar_points status: Timeout") == 2

    def test_json_lines(self, snapshot_file, capsys):
        """JSON format prints one parseable line per tick."""
        exit_code = main(["watch", str(snapshot_file), "--module", "perception", "--format", "json", "--count", "3"])

        assert exit_code == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3
        bundle = json.loads(lines[0])
        assert bundle["level"] == 2
        assert [s["name"] for s in bundle["status"]] == [
            "autoware_state_monitor: perception_topic_status",
            "autoware_state_monitor: localization_tf_status",
        ]

    def test_reloads_snapshot_each_tick(self, snapshot_file, capsys):
        """The snapshot file is read again on every tick."""
        with patch("diagmon.cli.load_snapshot", wraps=cli.load_snapshot) as loader:
            assert main(["watch", str(snapshot_file), "--module", "sensing", "--count", "3"]) == 0

        assert loader.call_count == 3
        loader.assert_called_with(snapshot_file)

    def test_period_from_settings(self, snapshot_file):
        """Tick period is derived from the configured update rate."""
        with patch.object(cli.DiagnosticUpdater, "run", return_value=0) as run:
            assert main(["watch", str(snapshot_file), "--count", "1"]) == 0

        assert run.call_args.kwargs["period"] == pytest.approx(0.001)
        assert run.call_args.kwargs["max_ticks"] == 1

    def test_stop_event(self, snapshot_file, capsys):
        """A set stop event ends the loop before the first tick."""
        args = create_parser().parse_args(["watch", str(snapshot_file)])
        stop_event = threading.Event()
        stop_event.set()

        assert cli.cmd_watch(args, stop_event=stop_event) == 0
        assert capsys.readouterr().out == ""

    def test_invalid_count(self, snapshot_file, capsys):
        """A non-positive --count returns 1."""
        assert main(["watch", str(snapshot_file), "--count", "0"]) == 1
        assert "--count" in capsys.readouterr().err

    def test_missing_snapshot(self, tmp_path, capsys):
        """A missing snapshot file fails the first tick and returns 1."""
        assert main(["watch", str(tmp_path / "missing.json"), "--count", "1"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_keyboard_interrupt(self, snapshot_file):
        """Ctrl-C returns 130."""
        with patch("diagmon.cli.load_snapshot", side_effect=KeyboardInterrupt):
            assert main(["watch", str(snapshot_file), "--module", "sensing"]) == 130


class TestOtherCommands:
    """Test rules, version and no-command routing."""

    def test_rules(self, capsys):
        """Rules command lists rules in order."""
        exit_code = main(["rules", "--module", "map", "--module", "sensing"])

        assert exit_code == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Hardware ID: autoware_state_monitor"
        assert lines[1:] == [
            "  map_topic_status (module: map)",
            "  sensing_topic_status (module: sensing)",
            "  localization_tf_status (module: localization)",
        ]

    def test_rules_invalid_module(self, capsys):
        """Empty module name returns 1."""
        assert main(["rules", "--module", ""]) == 1

    def test_version(self, capsys):
        """Version command prints version."""
        assert cmd_version(None) == 0
        assert "diagmon v" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        """No command prints help and returns 0."""
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()
