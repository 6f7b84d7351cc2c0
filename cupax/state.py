"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from cupax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, REGISTER_COUNT, KEY_COUNT,
    MAX_SCREEN_WIDTH, MAX_SCREEN_HEIGHT, SCREEN_WIDTH, SCREEN_HEIGHT,
    EXTENDED_SCREEN_WIDTH, EXTENDED_SCREEN_HEIGHT, STACK_SIZE,
)


class StackState(PyTreeNode):
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display always has the extended (SCHIP) resolution and is indexed
    ``display[x, y]``; only the top-left ``64x32`` corner is active while
    ``extended`` is false.

    Attributes:
        rng: Random key consumed by CXNN
        extended: Whether the SCHIP high-resolution mode is active
        mode_epoch: Incremented by every 00FE/00FF, lets hosts notice mode changes
        waiting_for_key: Set by FX0A until a key press is observed
        key_register: Target register of the pending FX0A
        wait_keys: Keys already held when FX0A started, they must be released first
        halted: Set by 00FD, the program asked to stop
        faults: Number of stack overflows/underflows absorbed so far
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((MAX_SCREEN_WIDTH, MAX_SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(KEY_COUNT, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(REGISTER_COUNT, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    extended: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    mode_epoch: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint32))
    waiting_for_key: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    key_register: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    wait_keys: jnp.ndarray = field(default_factory=lambda: jnp.zeros(KEY_COUNT, dtype=jnp.bool_))
    halted: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    faults: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint32))


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0)) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def active_size(state: EmulatorState) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Width and height of the active display rectangle."""
    width = jnp.where(state.extended, EXTENDED_SCREEN_WIDTH, SCREEN_WIDTH)
    height = jnp.where(state.extended, EXTENDED_SCREEN_HEIGHT, SCREEN_HEIGHT)
    return width, height
