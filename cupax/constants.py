"""CHIP-8 / SCHIP machine constants."""

import jax.numpy as jnp

MEMORY_SIZE = 4096
REGISTER_COUNT = 16
STACK_SIZE = 16
KEY_COUNT = 16

PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START
ADDRESS_MASK = 0xFFF

# Normal (CHIP-8) and extended (SCHIP) display sizes
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
EXTENDED_SCREEN_WIDTH = 128
EXTENDED_SCREEN_HEIGHT = 64
MAX_SCREEN_WIDTH = EXTENDED_SCREEN_WIDTH
MAX_SCREEN_HEIGHT = EXTENDED_SCREEN_HEIGHT

# Timers count down at 60 Hz
TIMER_FREQUENCY = 60

FONT_START = 0x50
FONT_GLYPH_SIZE = 5
FONT_DATA = jnp.array([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
], dtype=jnp.uint8)

# (foreground, background) RGB pairs announced with each display mode
NORMAL_COLORS = ((255, 255, 255), (0, 0, 0))
EXTENDED_COLORS = ((0, 255, 255), (0, 0, 128))

__all__ = [
    "MEMORY_SIZE",
    "REGISTER_COUNT",
    "STACK_SIZE",
    "KEY_COUNT",
    "PROGRAM_START",
    "MAX_ROM_SIZE",
    "ADDRESS_MASK",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "EXTENDED_SCREEN_WIDTH",
    "EXTENDED_SCREEN_HEIGHT",
    "MAX_SCREEN_WIDTH",
    "MAX_SCREEN_HEIGHT",
    "TIMER_FREQUENCY",
    "FONT_START",
    "FONT_GLYPH_SIZE",
    "FONT_DATA",
    "NORMAL_COLORS",
    "EXTENDED_COLORS",
]
