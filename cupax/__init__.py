"""CHIP-8 / SCHIP virtual machine in JAX."""

from cupax.state import EmulatorState, StackState, create_state, active_size
from cupax.emulator import (
    execute, fetch, step, tick_timers, run_cycles, run_frame, TimerClock,
    load_rom, load_rom_bytes, RomLoadError, set_keys,
    DisplayMode, display_mode, active_display, sound_active,
)
from cupax.decode import DecodedInstruction, decode
from cupax.constants import *
from cupax.rendering import chip8_display_to_rgb, create_color_scheme, render_state

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "active_size",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "run_cycles",
    "run_frame",
    "TimerClock",
    "load_rom",
    "load_rom_bytes",
    "RomLoadError",
    "set_keys",
    "DisplayMode",
    "display_mode",
    "active_display",
    "sound_active",
    "DecodedInstruction",
    "decode",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "EXTENDED_SCREEN_WIDTH",
    "EXTENDED_SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "render_state",
]
