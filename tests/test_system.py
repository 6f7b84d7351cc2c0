"""Tests for system instructions (0xxx), SCHIP extensions included."""

import pytest
import jax.numpy as jnp
from cupax import execute, active_display, display_mode


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=jnp.ones_like(fresh_state.display))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    state = execute(state, 0x2050)  # Call 0x050
    assert state.pc == 0x050
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0
    assert state.faults == 0


def test_nested_calls_return_in_order(fresh_state):
    state = execute(fresh_state, 0x2300)
    state = execute(state, 0x2400)
    state = execute(state, 0x2500)

    returns = []
    for _ in range(3):
        state = execute(state, 0x00EE)
        returns.append(int(state.pc))

    assert returns == [0x400, 0x300, 0x200]


def test_exit_halts(fresh_state):
    """00FD - Machine stops."""
    state = execute(fresh_state, 0x00FD)
    assert bool(state.halted)
    assert state.pc == fresh_state.pc


@pytest.mark.parametrize("instruction", [0x0000, 0x0123, 0x0ABC, 0x00E1, 0x00EF])
def test_unknown_system_instruction_is_noop(fresh_state, instruction):
    """0NNN other than the recognised ones changes nothing."""
    state = fresh_state.replace(display=fresh_state.display.at[3, 3].set(True))

    after = execute(state, instruction)

    assert after.pc == state.pc
    assert (after.display == state.display).all()
    assert after.stack.pointer == 0
    assert after.faults == 0
    assert not bool(after.halted)
    assert not bool(after.extended)


class TestModeSwitch:
    """Test 00FE/00FF."""

    def test_high_resolution(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[1, 1].set(True))

        state = execute(state, 0x00FF)

        assert bool(state.extended)
        assert state.mode_epoch == 1
        assert jnp.sum(state.display) == 0
        assert display_mode(state)[:2] == (128, 64)

    def test_back_to_low_resolution(self, extended_state):
        state = extended_state.replace(display=extended_state.display.at[100, 50].set(True))

        state = execute(state, 0x00FE)

        assert not bool(state.extended)
        assert state.mode_epoch == 2
        assert jnp.sum(state.display) == 0
        assert display_mode(state)[:2] == (64, 32)
        assert active_display(state).shape == (64, 32)

    def test_mode_switch_counts_even_without_change(self, extended_state):
        """Every 00FF/00FE bumps the epoch so hosts rebuild their surface."""
        state = execute(extended_state, 0x00FF)
        assert bool(state.extended)
        assert state.mode_epoch == 2

    def test_schip_patterns_match_on_masked_bits(self, fresh_state):
        """0xF0FF mask: 0x01FF switches mode just like 0x00FF."""
        state = execute(fresh_state, 0x01FF)
        assert bool(state.extended)


class TestScroll:
    """Test 00FB/00FC/00CN."""

    def test_scroll_right(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[10, 5].set(True))

        state = execute(state, 0x00FB)

        assert state.display[14, 5]
        assert not state.display[10, 5]
        assert jnp.sum(state.display) == 1

    def test_scroll_left(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[10, 5].set(True))

        state = execute(state, 0x00FC)

        assert state.display[6, 5]
        assert jnp.sum(state.display) == 1

    def test_scroll_down(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[10, 5].set(True))

        state = execute(state, 0x00C3)

        assert state.display[10, 8]
        assert jnp.sum(state.display) == 1

    def test_scroll_down_zero_rows(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[10, 5].set(True))

        state = execute(state, 0x00C0)

        assert (state.display == fresh_state.display.at[10, 5].set(True)).all()

    def test_scroll_drops_pixels_at_the_edge(self, fresh_state):
        """Scrolled-out pixels are lost, nothing wraps."""
        state = fresh_state.replace(display=fresh_state.display.at[62, 0].set(True))

        state = execute(state, 0x00FB)

        assert jnp.sum(state.display) == 0

    def test_scroll_down_stays_in_active_area(self, fresh_state):
        """Normal mode rows shifted past 31 leave the hidden part of the buffer untouched."""
        state = fresh_state.replace(display=fresh_state.display.at[0, 30].set(True))

        state = execute(state, 0x00C4)

        assert jnp.sum(state.display) == 0

    def test_scroll_extended(self, extended_state):
        state = extended_state.replace(display=extended_state.display.at[120, 60].set(True))

        state = execute(state, 0x00FB)
        assert state.display[124, 60]

        state = execute(state, 0x00C2)
        assert state.display[124, 62]
        assert jnp.sum(state.display) == 1

    def test_scroll_pattern_is_masked(self, fresh_state):
        """0x01FB scrolls right, SCHIP patterns are checked before anything else."""
        state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))

        state = execute(state, 0x01FB)

        assert state.display[4, 0]
