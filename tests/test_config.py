"""Tests for run configuration, logging and the command line."""

import io

import pytest
from cupax.config import RunConfig
from cupax.cli import main, parse_args
from cupax.logging import ConsoleLogger, MachineLogger
from cupax import create_state, execute


class TestRunConfig:
    def test_defaults(self):
        config = RunConfig()
        assert config.scale == 10
        assert config.cpu_hz == 500
        assert config.cycles_per_frame == 8

    @pytest.mark.parametrize("field", ["scale", "cpu_hz", "fps", "tone_hz"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValueError, match=field):
            RunConfig(**{field: 0})

    @pytest.mark.parametrize("volume", [-0.1, 1.5])
    def test_volume_range(self, volume):
        with pytest.raises(ValueError, match="volume"):
            RunConfig(volume=volume)

    def test_cpu_slower_than_frame_rate_rejected(self):
        with pytest.raises(ValueError, match="at least fps"):
            RunConfig(cpu_hz=10, fps=60)

    def test_one_cycle_per_frame(self):
        assert RunConfig(cpu_hz=60, fps=60).cycles_per_frame == 1


class TestLogging:
    def test_level_filtering(self):
        stream = io.StringIO()
        logger = ConsoleLogger(log_level="WARNING", show_timestamps=False, stream=stream)

        logger.info("hidden")
        logger.warning("shown")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "[ WARNING][cupax] shown" in output

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            ConsoleLogger(log_level="LOUD")

    def test_machine_logger_reports_changes(self):
        stream = io.StringIO()
        logger = MachineLogger(show_timestamps=False, stream=stream)
        state = create_state()

        logger.observe(state)
        assert stream.getvalue() == ""

        state = execute(state, 0x00FF)
        state = execute(state, 0x00EE)
        logger.observe(state)

        output = stream.getvalue()
        assert "extended 128x64" in output
        assert "1 stack overflow/underflow ignored" in output

        logger.observe(state)
        assert stream.getvalue() == output


class TestCommandLine:
    def test_parse_args_ignores_extra_flags(self):
        args = parse_args(["game.ch8", "--scale", "4", "--fullscreen"])
        assert args.rom == "game.ch8"
        assert args.scale == 4
        assert args.cpu_hz == 500

    def test_no_rom_given(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_headless_run(self, tmp_path, capsys):
        rom = tmp_path / "add.ch8"
        rom.write_bytes(bytes([0x60, 0x05, 0x70, 0x03, 0x12, 0x04]))

        assert main([str(rom), "--headless", "20", "--log-level", "ERROR"]) == 0

        out = capsys.readouterr().out
        assert "V0=08" in out
        assert "PC=204" in out

    def test_headless_exit_opcode(self, tmp_path, capsys):
        rom = tmp_path / "exit.ch8"
        rom.write_bytes(bytes([0x00, 0xFD]))

        assert main([str(rom), "--headless", "100", "--log-level", "ERROR"]) == 0
        assert "PC=202" in capsys.readouterr().out

    @pytest.mark.parametrize("cycles,delay", [(15, 19), (16, 18), (20, 18), (24, 17)])
    def test_headless_ticks_on_every_frame_boundary(self, tmp_path, capsys, cycles, delay):
        """Default pacing is 8 cycles per tick; a short last chunk ends before its boundary."""
        rom = tmp_path / "timer.ch8"
        rom.write_bytes(bytes([0x60, 0x14, 0xF0, 0x15, 0x12, 0x04]))  # DT = 20, spin

        assert main([str(rom), "--headless", str(cycles), "--log-level", "ERROR"]) == 0
        assert f"DT={delay} " in capsys.readouterr().out

    def test_missing_rom(self, tmp_path):
        assert main([str(tmp_path / "nope.ch8"), "--headless", "1"]) == 1

    def test_bad_config(self, tmp_path):
        assert main([str(tmp_path / "nope.ch8"), "--cpu-hz", "0"]) == 2
        assert main([str(tmp_path / "nope.ch8"), "--cpu-hz", "30"]) == 2

    def test_negative_cycle_count(self, tmp_path):
        assert main([str(tmp_path / "nope.ch8"), "--headless", "-5"]) == 2
