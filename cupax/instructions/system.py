"""CHIP-8 system instructions (0x0xxx), SCHIP extensions included."""

import jax
import jax.lax
import jax.numpy as jnp
from cupax.state import EmulatorState
from cupax.decode import DecodedInstruction
from cupax.stack import pop
from cupax.instructions.display import (
    execute_clear_screen, execute_scroll_right, execute_scroll_left, execute_scroll_down,
    execute_low_resolution, execute_high_resolution,
)


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine, ignored when the stack is empty."""
    stack, address, underflow = pop(state.stack)
    return state.replace(
        stack=stack,
        pc=jnp.where(underflow, state.pc, address),
        faults=state.faults + underflow,
    )


def execute_exit(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FD - Exit interpreter."""
    return state.replace(halted=jnp.ones((), dtype=jnp.bool_))


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions, SCHIP patterns take precedence."""
    schip_code = instruction.raw & 0xF0FF
    branch = jnp.select(
        [
            schip_code == 0x00FB,
            schip_code == 0x00FC,
            schip_code == 0x00FD,
            schip_code == 0x00FE,
            schip_code == 0x00FF,
            (instruction.raw & 0x00F0) == 0x00C0,
            instruction.raw == 0x00E0,
            instruction.raw == 0x00EE,
        ],
        list(range(8)),
        default=8,
    )

    return jax.lax.switch(
        branch,
        [
            execute_scroll_right,
            execute_scroll_left,
            execute_exit,
            execute_low_resolution,
            execute_high_resolution,
            execute_scroll_down,
            execute_clear_screen,
            execute_return,
            no_op,
        ],
        state, instruction
    )
