"""Instruction word packing and decoding."""

import jax.numpy as jnp
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """One instruction word split into its addressing fields.

    Every 16-bit value decodes; whether the fields name a real instruction
    is decided by the dispatcher.
    """
    raw: int
    opcode: int  # Instruction class, bits 12-15
    x: int       # Register index, bits 8-11
    y: int       # Register index, bits 4-7
    n: int       # Low nibble
    kk: int      # Low byte
    nnn: int     # Address, low 12 bits


def pack_word(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Join two bytes into a big-endian instruction word."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        kk=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )
