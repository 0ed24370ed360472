"""Tests for CLI commands."""

import importlib
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli_select.cli import app
from cli_select.models import KeyCode, KeyEvent

runner = CliRunner()


class TestCliImport:
    """Tests that verify cli module can be imported correctly."""

    def test_cli_module_imports_without_error(self):
        import importlib

        import cli_select.cli

        importlib.reload(cli_select.cli)

    def test_help_command_works(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0, f"--help failed: {result.output}"
        assert "arrow keys" in result.stdout


@pytest.fixture
def keys(monkeypatch: pytest.MonkeyPatch):
    """Replace the keyboard with a scripted sequence of keys."""

    def feed(*codes):
        events = iter([KeyEvent.of(c) for c in codes])
        select_module = importlib.import_module("cli_select.ui.select")
        monkeypatch.setattr(select_module, "read_key_event", lambda: next(events))

    return feed


class TestCliPick:
    def test_pick_prints_choice(self, config_env, keys):
        keys(KeyCode.DOWN, KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "red", "green", "blue"])

        assert result.exit_code == 0, result.output
        assert result.stdout == "green\n"
        assert "> red" in result.stderr

    def test_pick_keeps_escape_sequences_off_stdout(self, config_env, keys):
        keys(KeyCode.DOWN, KeyCode.UP, KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "a", "b", "--underline"])

        assert result.exit_code == 0, result.output
        assert result.stdout == "a\n"
        assert "\x1b[" in result.stderr

    def test_pick_long_item_not_wrapped(self, config_env, keys):
        item = "x" * 200
        keys(KeyCode.DOWN, KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "short", item])

        assert result.exit_code == 0, result.output
        assert result.stdout == item + "\n"

    def test_pick_bad_env_setting(self, config_env, keys, monkeypatch):
        monkeypatch.setenv("CLI_SELECT_FORWARD_SPACING", "wide")
        keys(KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "a", "b"])

        assert result.exit_code == 1
        assert "CLI_SELECT_FORWARD_SPACING" in result.stdout
        assert result.stderr == ""

    def test_pick_same_key_up_and_down(self, config_env, keys):
        keys(KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "a", "b", "--up-key", "j", "--down-key", "j"])

        assert result.exit_code == 1
        assert "both an up and a down key" in result.stdout

    def test_pick_with_extra_keys(self, config_env, keys):
        keys("j", "j", "k", KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "a", "b", "c", "--up-key", "k", "--down-key", "j"])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines()[-1] == "b"

    def test_pick_options(self, config_env, keys):
        keys(KeyCode.ENTER)

        result = runner.invoke(
            app, ["pick", "a", "b", "--pointer", "*", "--unselected-pointer", "-", "--forward"]
        )

        assert result.exit_code == 0, result.output
        assert "*  a" in result.stderr
        assert "- b" in result.stderr

    def test_pick_uses_config(self, config_env, keys, monkeypatch):
        monkeypatch.setenv("CLI_SELECT_POINTER", "→")
        keys(KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "a", "b"])

        assert result.exit_code == 0, result.output
        assert "→ a" in result.stderr

    def test_pick_from_file(self, config_env, keys, tmp_path: Path):
        items_file = tmp_path / "items.txt"
        items_file.write_text("one\n\ntwo\n")
        keys(KeyCode.DOWN, KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "--file", str(items_file)])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines()[-1] == "two"

    def test_pick_missing_file(self, config_env, tmp_path: Path):
        result = runner.invoke(app, ["pick", "--file", str(tmp_path / "missing.txt")])

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_pick_without_items_fails(self, config_env, keys):
        keys(KeyCode.ENTER)

        result = runner.invoke(app, ["pick"])

        assert result.exit_code == 1
        assert "without items" in result.stdout

    def test_pick_rejects_enter_as_up_key(self, config_env, keys):
        keys(KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "a", "b", "--up-key", KeyCode.ENTER])

        assert result.exit_code == 1
        assert "Confirm key" in result.stdout
        assert result.stderr == ""

    def test_pick_event_source_failure(self, config_env, keys):
        keys(KeyCode.DOWN)

        result = runner.invoke(app, ["pick", "a", "b"])

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_pick_writes_log_file(self, config_env, keys, tmp_path: Path):
        log_file = tmp_path / "select.log"
        keys(KeyCode.UP, KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "a", "b", "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        assert log_file.exists()


class TestCliDemo:
    def test_demo_reports_changes(self, config_env, keys):
        keys(KeyCode.DOWN, KeyCode.DOWN, KeyCode.UP, KeyCode.ENTER)

        result = runner.invoke(app, ["demo", "-n", "3"])

        assert result.exit_code == 0, result.output
        assert "down → Item 2" in result.stdout
        assert "up → Item 2" in result.stdout
        assert "Selected: Item 2" in result.stdout

    def test_demo_without_moves(self, config_env, keys):
        keys(KeyCode.ENTER)

        result = runner.invoke(app, ["demo", "-n", "1"])

        assert result.exit_code == 0, result.output
        assert "→" not in result.stdout
        assert "Selected: Item 1" in result.stdout


class TestCliConfig:
    def test_config_lists_settings(self, config_env):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0, result.output
        assert "underline_selected_item" in result.stdout
        assert "pointer" in result.stdout


class TestCliKeyNames:
    def test_unknown_key_name(self, config_env, keys):
        keys(KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "a", "b", "--down-key", "dwon"])

        assert result.exit_code == 1
        assert "Unknown key name" in result.stdout

    def test_named_extra_key(self, config_env, keys):
        keys(KeyCode.TAB, KeyCode.ENTER)

        result = runner.invoke(app, ["pick", "a", "b", "--down-key", KeyCode.TAB])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines()[-1] == "b"

    def test_config_set_persists(self, config_env):
        result = runner.invoke(app, ["config", "--set", "pointer=*", "--set", "forward_spacing=3"])

        assert result.exit_code == 0, result.output
        saved = json.loads((config_env / "config.json").read_text())
        assert saved == {"pointer": "*", "forward_spacing": 3}

    def test_config_set_unknown_key(self, config_env):
        result = runner.invoke(app, ["config", "--set", "colour=red"])

        assert result.exit_code == 1
        assert "Unknown setting" in result.stdout

    def test_config_set_bad_value(self, config_env):
        result = runner.invoke(app, ["config", "--set", "forward_spacing=many"])

        assert result.exit_code == 1
        assert "Invalid value" in result.stdout
        assert not (config_env / "config.json").exists()
