"""CHIP-8 execution engine, cycle driver and host-facing outputs."""

import time
from functools import partial
from typing import NamedTuple, Optional, Sequence, Tuple

import jax
import jax.lax
import jax.numpy as jnp
import numpy as np

from cupax.state import EmulatorState, active_size
from cupax.decode import decode, pack_word
from cupax.constants import (
    PROGRAM_START, MEMORY_SIZE, MAX_ROM_SIZE, TIMER_FREQUENCY, NORMAL_COLORS, EXTENDED_COLORS,
)
from cupax.instructions.system import execute_system_instruction
from cupax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from cupax.instructions.alu import execute_alu_operation
from cupax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from cupax.instructions.display import execute_display
from cupax.instructions.misc import execute_misc_instruction


class RomLoadError(ValueError):
    """ROM could not be read or does not fit in program memory."""


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC past it."""
    instruction = pack_word(
        state.memory[state.pc % MEMORY_SIZE],
        state.memory[(state.pc + 1) % MEMORY_SIZE],
    )
    return state.replace(pc=state.pc + 2), instruction


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count delay and sound timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def _resolve_key_wait(state: EmulatorState) -> EmulatorState:
    """Finish a pending FX0A on a new key press, lowest key first.

    Keys held when FX0A ran only count once they have been released.
    """
    new_keys = state.keypad & ~state.wait_keys
    pressed = jnp.any(new_keys)
    key = jnp.astype(jnp.argmax(new_keys), jnp.uint8)
    new_V = jnp.where(pressed, state.V.at[state.key_register].set(key), state.V)
    return state.replace(
        V=new_V,
        waiting_for_key=state.waiting_for_key & ~pressed,
        wait_keys=state.wait_keys & state.keypad,
    )


def step(state: EmulatorState, timer_tick=False) -> EmulatorState:
    """Run one cycle.

    A running machine fetches, executes and then, if ``timer_tick`` is set,
    counts its timers down. A machine waiting on FX0A only polls the keypad
    and a halted machine does nothing; neither touches PC or the timers.

    Args:
        state: Current emulator state
        timer_tick: Whether a 60 Hz timer boundary falls on this cycle

    Returns:
        State after the cycle
    """
    def run(state):
        state, instruction = fetch(state)
        state = execute(state, instruction)
        return jax.lax.cond(timer_tick, tick_timers, lambda s: s, state)

    branch = jnp.where(state.halted, 2, jnp.where(state.waiting_for_key, 1, 0))
    return jax.lax.switch(branch, [run, _resolve_key_wait, lambda s: s], state)


@partial(jax.jit, static_argnums=(1, 2))
def run_cycles(state: EmulatorState, num_cycles: int, cycles_per_tick: Optional[int] = None) -> EmulatorState:
    """Run ``num_cycles`` cycles, with a timer tick every ``cycles_per_tick`` cycles.

    Without ``cycles_per_tick`` the timers are left alone.
    """
    def cycle(state, index):
        if cycles_per_tick is None:
            timer_tick = False
        else:
            timer_tick = (index + 1) % cycles_per_tick == 0
        return step(state, timer_tick), None

    state, _ = jax.lax.scan(cycle, state, jnp.arange(num_cycles))
    return state


@partial(jax.jit, static_argnums=(1,))
def run_frame(state: EmulatorState, num_cycles: int, ticks) -> EmulatorState:
    """Run one host frame of ``num_cycles`` cycles carrying ``ticks`` timer ticks.

    Ticks are handed out one per cycle from the start of the frame. Ticks
    left over once the cycles are done are applied directly, unless the
    machine is waiting on FX0A or halted, so the timers keep their 60 Hz
    rate however few cycles a frame runs.
    """
    def cycle(state, index):
        return step(state, index < ticks), None

    state, _ = jax.lax.scan(cycle, state, jnp.arange(num_cycles))
    leftover = jnp.maximum(ticks - num_cycles, 0)
    leftover = jnp.where(state.waiting_for_key | state.halted, 0, leftover)
    return jax.lax.fori_loop(0, leftover, lambda _, s: tick_timers(s), state)


class TimerClock:
    """Wall-clock source of 60 Hz timer ticks for interactive hosts."""

    def __init__(self, frequency: int = TIMER_FREQUENCY, clock=time.monotonic):
        self.period = 1.0 / frequency
        self.clock = clock
        self.last = clock()

    def due(self) -> int:
        """Number of tick boundaries crossed since the previous call."""
        now = self.clock()
        ticks = int((now - self.last) // self.period)
        self.last += ticks * self.period
        return ticks


def load_rom_bytes(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Copy ROM data into memory starting at 0x200."""
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomLoadError(
            f"ROM is {len(rom_data)} bytes, only {MAX_ROM_SIZE} fit in program memory"
        )
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise RomLoadError(f"Cannot read ROM '{filename}': {e.strerror or e}") from e
    return load_rom_bytes(state, rom_data)


def set_keys(state: EmulatorState, keys: Sequence[bool]) -> EmulatorState:
    """Replace the keypad with 16 pressed/released flags."""
    return state.replace(keypad=jnp.asarray(keys, dtype=jnp.bool_))


class DisplayMode(NamedTuple):
    """What a renderer needs to know about the current display mode."""
    width: int
    height: int
    on_color: Tuple[int, int, int]
    off_color: Tuple[int, int, int]


def display_mode(state: EmulatorState) -> DisplayMode:
    """Surface size and colors for the active display mode."""
    width, height = active_size(state)
    on_color, off_color = EXTENDED_COLORS if bool(state.extended) else NORMAL_COLORS
    return DisplayMode(int(width), int(height), on_color, off_color)


def active_display(state: EmulatorState) -> np.ndarray:
    """The visible part of the framebuffer as a (width, height) boolean array."""
    mode = display_mode(state)
    return np.asarray(state.display)[:mode.width, :mode.height]


def sound_active(state: EmulatorState) -> bool:
    """Audio gate: the tone plays while the sound timer is running."""
    return bool(state.sound_timer > 0)
