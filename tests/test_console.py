"""
Tests for the developer console commands.
"""

import pytest

from scale_idle.console import COMMAND_HANDLERS, run_command
from scale_idle.engine import Game
from scale_idle.persistence import SaveStore


@pytest.fixture
def game(tmp_path):
    return Game(store=SaveStore(str(tmp_path / "save.dat")), wall_clock=lambda: 0)


class TestDispatch:

    def test_empty_input(self, game):
        assert run_command(game, "") == ""
        assert run_command(game, "   ") == ""

    def test_unknown_command(self, game):
        assert run_command(game, "fly away") == "Unknown cmd: 'fly'. Type 'help'."

    def test_help_lists_every_command(self, game):
        text = run_command(game, "help")
        for name in COMMAND_HANDLERS:
            assert name in text

    def test_handler_error_is_reported(self, game, monkeypatch):
        def explode(game, args): raise RuntimeError("boom")
        monkeypatch.setitem(COMMAND_HANDLERS, 'save', {'func': explode, 'help': ''})
        assert run_command(game, "save") == "Exec Error 'save': boom"


class TestFields:

    def test_get_snapshot_value(self, game):
        assert run_command(game, "get velocity_level") == "velocity_level (int) = 0"
        assert run_command(game, "get can_prestige") == "can_prestige (bool) = False"

    def test_get_unknown(self, game):
        assert run_command(game, "get nothing").startswith("Error")

    def test_list_filter(self, game):
        text = run_command(game, "list mass_velocity")
        assert "mass_velocity_level" in text
        assert "distance_per_second" not in text
        assert run_command(game, "list zzz") == "No fields found matching filter."

    def test_set_then_prestige(self, game):
        assert run_command(game, "set distance 1e9") == "Set distance to 1E+9."
        assert run_command(game, "buy unit_collapse") == "Attempted 'unit_collapse' x1. Succeeded 1 time(s)."
        assert game.state.scale_points == 1
        assert game.state.distance == 0

    def test_set_level_refreshes_gates(self, game):
        run_command(game, "set velocity_level 5")
        assert game.state.accel_unlocked

    @pytest.mark.parametrize("command", ["set bogus 1", "set distance -3", "set velocity_level many"])
    def test_set_rejects_bad_input(self, game, command):
        assert run_command(game, command).startswith("Error")

    def test_set_bool(self, game):
        run_command(game, "set mass_unlocked yes")
        assert game.state.mass_unlocked is True


class TestActionsAndSettings:

    def test_buy_stops_when_unaffordable(self, game):
        run_command(game, "set distance 40")
        result = run_command(game, "buy buy_velocity 5")
        assert result == ("Attempted 'buy_velocity' x5. Succeeded 2 time(s)."
                          " Stopped: requirements not met.")
        assert game.state.velocity_level == 2

    def test_buy_unknown_action(self, game):
        assert run_command(game, "buy rocket").startswith("Error: Unknown action 'rocket'")

    def test_tickrate(self, game):
        assert run_command(game, "tickrate 30") == "Tick rate set to 30/s."
        assert run_command(game, "tickrate 500") == "Tick rate set to 60/s."

    def test_autosave(self, game):
        assert run_command(game, "autosave 12") == "Autosave interval set to 12s."

    def test_offline(self, game):
        result = run_command(game, "offline 10")
        assert result.startswith("Simulated 10s offline.")
        assert game.state.distance == 10

    def test_offline_rejects_negative(self, game):
        assert run_command(game, "offline -1").startswith("Offline Err")

    def test_save_and_hardreset(self, game):
        assert run_command(game, "save") == "Saved."
        assert game.store.exists()
        assert run_command(game, "hardreset") == "Save deleted and game reset."
        assert not game.store.exists()

    def test_export_then_import(self, game):
        run_command(game, "set scale_points 4")
        blob = run_command(game, "export")
        run_command(game, "set scale_points 0")
        assert run_command(game, f"import {blob}") == "Import successful."
        assert game.state.scale_points == 4
