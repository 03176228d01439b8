"""
Tests for the RAM viewer and manual play session.

The pygame window is not opened here; only the dump formatting, key
mapping and per-frame stepping are exercised.
"""

import numpy as np
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from demonbot.game.actions import GameAction
from demonbot.visualizer.ram_view import ManualSession, format_ram, action_from_keys
from tests.conftest import FakeEnvironment


class TestFormatRam:
    """Test the hex dump."""

    def test_layout(self):
        """Header, separator, 8 rows of 16 bytes, separator."""
        lines = format_ram(np.arange(128, dtype=np.uint8)).splitlines()
        assert len(lines) == 11
        assert lines[0].startswith("ADDR || 00 01 02")
        assert lines[0].endswith("0F")
        assert set(lines[1]) == {"-"}
        assert lines[-1] == lines[1]

    def test_rows_show_address_and_bytes(self):
        """Each row starts with its base address in hex."""
        lines = format_ram(np.arange(128, dtype=np.uint8)).splitlines()
        assert lines[2].startswith(" 00  || 00 01 02")
        assert lines[3].startswith(" 10  || 10 11 12")
        assert lines[9].endswith("7D 7E 7F")

    def test_bytes_are_two_digit_uppercase(self):
        """Values are zero-padded uppercase hex."""
        ram = np.zeros(128, dtype=np.uint8)
        ram[0] = 0xAB
        ram[1] = 0x05
        assert "AB 05 00" in format_ram(ram)


class TestActionFromKeys:
    """Test keyboard to joystick mapping."""

    def test_single_keys(self):
        """Single keys map to their action."""
        assert action_from_keys(True, False, False) == GameAction.LEFT
        assert action_from_keys(False, True, False) == GameAction.RIGHT
        assert action_from_keys(False, False, True) == GameAction.FIRE

    def test_combinations(self):
        """Direction plus fire gives the combined action."""
        assert action_from_keys(True, False, True) == GameAction.LEFTFIRE
        assert action_from_keys(False, True, True) == GameAction.RIGHTFIRE

    def test_nothing_pressed(self):
        """No keys is NOOP."""
        assert action_from_keys(False, False, False) == GameAction.NOOP


class TestManualSession:
    """Test stepping without a window."""

    def test_step_sends_action(self):
        """A step forwards the mapped action to the emulator."""
        env = FakeEnvironment(episode_length=10)
        session = ManualSession(env, console=False)
        assert session.step(False, True, True) == GameAction.RIGHTFIRE
        assert env.actions == [11]

    def test_no_recording_by_default(self):
        """Frames are only kept when recording."""
        env = FakeEnvironment(episode_length=10)
        session = ManualSession(env, console=False)
        session.step(True, False, False)
        assert session.frames == []

    def test_recording_keeps_ram_before_action(self):
        """Recorded frames hold the RAM the player saw and the key action."""
        env = FakeEnvironment(episode_length=10)
        session = ManualSession(env, record=True, console=False)
        ram_before = env.get_ram()

        session.step(True, False, False)

        assert len(session.frames) == 1
        assert np.array_equal(session.frames[0].ram_state, ram_before)
        assert session.frames[0].action == int(GameAction.LEFT)

    def test_game_over_restarts(self):
        """The game is reset when it ends."""
        env = FakeEnvironment(episode_length=2)
        session = ManualSession(env, console=False)
        session.step(False, False, True)
        session.step(False, False, True)
        assert env.resets == 1
