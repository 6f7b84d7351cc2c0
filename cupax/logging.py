"""Console logging utilities for the cupax host tools.

Nothing in here runs under ``jax.jit``: hosts read the state between cycles
and report what changed.
"""

import time
import sys
from typing import TextIO

from cupax.state import EmulatorState


class ConsoleLogger:
    """Levelled console logger with optional colors and timestamps."""

    def __init__(
        self,
        name: str = "cupax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: TextIO = None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream or sys.stderr
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

        if self.log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class MachineLogger(ConsoleLogger):
    """Logger that reports VM events observed between cycles."""

    def __init__(self, name: str = "cupax", **kwargs):
        super().__init__(name, **kwargs)
        self.last_epoch = 0
        self.last_faults = 0

    def log_rom_loaded(self, path: str, size: int):
        self.info(f"Loaded {path} ({size} bytes)")

    def observe(self, state: EmulatorState):
        """Log mode switches and stack faults that happened since the last call."""
        epoch = int(state.mode_epoch)
        if epoch != self.last_epoch:
            mode = "extended 128x64" if bool(state.extended) else "normal 64x32"
            self.info(f"Display mode switched to {mode}")
            self.last_epoch = epoch

        faults = int(state.faults)
        if faults != self.last_faults:
            self.warning(
                f"{faults - self.last_faults} stack overflow/underflow ignored "
                f"(PC=0x{int(state.pc):03X}, SP={int(state.stack.pointer)})"
            )
            self.last_faults = faults
