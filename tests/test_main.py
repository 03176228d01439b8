"""
Tests for the command line interface.

Emulator modes need a ROM, so only argument handling and the
imitation mode are exercised.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config
from demonbot.game.recording import GameplayFrame, save_recording
from demonbot.utils.logger import reset_logging
from main import parse_args, apply_overrides, main
from tests.conftest import make_ram


class TestParseArgs:
    """Test argument parsing."""

    def test_default_mode_is_training(self):
        """No mode flag means Q-learning."""
        args = parse_args(['rom.bin'])
        assert args.rom == 'rom.bin'
        assert not any([args.eval, args.manual, args.genetic,
                        args.genetic_eval, args.record, args.imitate])

    def test_modes(self):
        """Each mode flag parses."""
        assert parse_args(['rom.bin', '--eval']).eval
        assert parse_args(['rom.bin', '--manual']).manual
        assert parse_args(['rom.bin', '--genetic']).genetic
        assert parse_args(['rom.bin', '--genetic-eval']).genetic_eval
        assert parse_args(['rom.bin', '--record']).record
        assert parse_args(['--imitate']).imitate

    def test_modes_are_exclusive(self):
        """Two modes at once is an error."""
        with pytest.raises(SystemExit):
            parse_args(['rom.bin', '--eval', '--genetic'])

    def test_rom_required_outside_imitation(self):
        """Every emulator mode needs a ROM."""
        with pytest.raises(SystemExit):
            parse_args(['--eval'])

    def test_numeric_options(self):
        """Counts and seed are parsed as integers."""
        args = parse_args(['rom.bin', '--episodes', '5', '--generations', '3',
                           '--epochs', '2', '--seed', '42'])
        assert (args.episodes, args.generations, args.epochs, args.seed) == (5, 3, 2, 42)

    def test_invalid_log_level(self):
        """Unknown log levels are rejected."""
        with pytest.raises(SystemExit):
            parse_args(['rom.bin', '--log-level', 'LOUD'])


class TestApplyOverrides:
    """Test CLI overrides on the config."""

    def test_overrides(self):
        """lr, seed and log level are copied onto the config."""
        args = parse_args(['rom.bin', '--lr', '0.01', '--seed', '3', '--log-level', 'DEBUG'])
        cfg = apply_overrides(Config(), args)
        assert cfg.LEARNING_RATE == 0.01
        assert cfg.SEED == 3
        assert cfg.LOG_LEVEL == 'DEBUG'

    def test_invalid_override_rejected(self):
        """Overrides are validated."""
        args = parse_args(['rom.bin', '--lr', '-1'])
        with pytest.raises(AssertionError):
            apply_overrides(Config(), args)


class TestImitationMode:
    """The imitation mode runs end to end without an emulator."""

    @pytest.fixture(autouse=True)
    def restore_logging(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        reset_logging()
        yield
        reset_logging()

    def test_imitation_writes_weights(self, tmp_path):
        """--imitate trains on the recording and saves weights."""
        recording = tmp_path / 'demo.npz'
        save_recording(recording, [GameplayFrame(make_ram(player_x=x), 1) for x in range(20, 40)])
        weights = tmp_path / 'imitation.txt'

        main(['--imitate', '--recording', str(recording), '--weights', str(weights),
              '--epochs', '1', '--seed', '0'])

        assert weights.exists()
        assert len(weights.read_text().split()) > 0

    def test_missing_recording_exits(self, tmp_path):
        """A missing recording is reported and exits with status 1."""
        with pytest.raises(SystemExit) as excinfo:
            main(['--imitate', '--recording', str(tmp_path / 'none.npz')])
        assert excinfo.value.code == 1
