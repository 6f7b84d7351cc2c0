"""Test configuration and fixtures for the cupax tests."""

import jax
import pytest
import jax.numpy as jnp
from cupax import create_state, execute, step, PROGRAM_START


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def extended_state():
    """Provide a fresh state switched to the 128x64 mode."""
    return execute(create_state(), 0x00FF)


@pytest.fixture(scope="session")
def jit_step():
    """Compiled cycle, shared so multi-cycle tests only trace once."""
    return jax.jit(step)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def load_program(state, words, address=PROGRAM_START):
    """Helper to write big-endian instruction words into memory."""
    program = []
    for word in words:
        program += [(word >> 8) & 0xFF, word & 0xFF]
    return setup_sprite_in_memory(state, address, program)
