"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from cupax.state import EmulatorState
from cupax.decode import DecodedInstruction
from cupax.constants import FONT_START, FONT_GLYPH_SIZE, MEMORY_SIZE, REGISTER_COUNT
from cupax.instructions.system import no_op


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register."""
    return state.replace(I=state.I + jnp.astype(state.V[instruction.x], jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Only records the target register and the keys already down; the cycle
    driver holds execution until a key that was not held here is pressed.
    """
    return state.replace(
        waiting_for_key=jnp.ones((), dtype=jnp.bool_),
        key_register=jnp.astype(instruction.x, jnp.uint8),
        wait_keys=state.keypad,
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def _addresses(state: EmulatorState, count: int) -> jnp.ndarray:
    """Memory addresses I, I+1, ... wrapped to the address space."""
    return (jnp.astype(state.I, jnp.int32) + jnp.arange(count)) % MEMORY_SIZE


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[_addresses(state, 3)].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I, I unchanged."""
    register_mask = jnp.arange(REGISTER_COUNT) <= instruction.x
    indices = _addresses(state, REGISTER_COUNT)
    new_values = jnp.where(register_mask, state.V, state.memory[indices])
    return state.replace(memory=state.memory.at[indices].set(new_values))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I, I unchanged."""
    register_mask = jnp.arange(REGISTER_COUNT) <= instruction.x
    memory_values = state.memory[_addresses(state, REGISTER_COUNT)]
    return state.replace(V=jnp.where(register_mask, memory_values, state.V))


# Low byte -> handler, any other FXKK is a no-op
MISC_INSTRUCTIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    codes = list(MISC_INSTRUCTIONS)
    switch_index = jnp.select(
        [instruction.kk == code for code in codes],
        list(range(len(codes))),
        default=len(codes),
    )

    return jax.lax.switch(
        switch_index,
        [*MISC_INSTRUCTIONS.values(), no_op],
        state, instruction
    )
