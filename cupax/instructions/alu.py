"""CHIP-8 ALU operations (8xxx).

Every operation maps ``(vx, vy, vf)`` to ``(result, vf)``. The flag is
written before the result, so ``8FYN`` leaves the result in VF.
"""

import jax
import jax.lax
import jax.numpy as jnp
from cupax.state import EmulatorState
from cupax.decode import DecodedInstruction


def alu_set(vx, vy, vf):
    """8XY0 - Set: VX = VY."""
    return vy, vf


def alu_or(vx, vy, vf):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf


def alu_and(vx, vy, vf):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf


def alu_xor(vx, vy, vf):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf


def alu_add(vx, vy, vf):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.int32) + vy
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx, vy, vf):
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    no_borrow = jnp.astype(vx > vy, jnp.uint8)
    return vx - vy, no_borrow


def alu_shift_right(vx, vy, vf):
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy, vf):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    no_borrow = jnp.astype(vy > vx, jnp.uint8)
    return vy - vx, no_borrow


def alu_shift_left(vx, vy, vf):
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    return vx << 1, (vx >> 7) & 1


def alu_undefined(vx, vy, vf):
    """Unassigned 8XYN, nothing changes."""
    return vx, vf


# Low nibble -> operation, unassigned nibbles are no-ops
ALU_OPERATIONS = [
    alu_set, alu_or, alu_and, alu_xor, alu_add, alu_sub_xy, alu_shift_right, alu_sub_yx,
    alu_undefined, alu_undefined, alu_undefined, alu_undefined, alu_undefined, alu_undefined,
    alu_shift_left, alu_undefined,
]


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    vf = state.V[15]

    result, vf = jax.lax.switch(instruction.n, ALU_OPERATIONS, vx, vy, vf)

    new_V = state.V.at[15].set(vf)
    new_V = new_V.at[instruction.x].set(result)
    return state.replace(V=new_V)
