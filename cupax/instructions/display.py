"""CHIP-8 display operations, including the SCHIP scroll and mode opcodes."""

import jax.numpy as jnp
from cupax.state import EmulatorState, active_size
from cupax.decode import DecodedInstruction
from cupax.constants import MAX_SCREEN_WIDTH, MAX_SCREEN_HEIGHT, MEMORY_SIZE

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(MAX_SCREEN_WIDTH), jnp.arange(MAX_SCREEN_HEIGHT), indexing='ij')

SCROLL_COLUMNS = 4


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, DXY0 draws 16x16 in extended mode."""
    width, height = active_size(state)
    large = state.extended & (instruction.n == 0)
    sprite_width = jnp.where(large, 16, 8)
    sprite_height = jnp.where(large, 16, instruction.n)

    # Offsets are taken modulo the active size so sprites wrap around the edges
    col_offset = (xx - jnp.astype(state.V[instruction.x], jnp.int32)) % width
    row_offset = (yy - jnp.astype(state.V[instruction.y], jnp.int32)) % height
    in_sprite = (
        (xx < width) & (yy < height)
        & (col_offset < sprite_width) & (row_offset < sprite_height)
    )

    # Large sprites are two bytes per row
    byte_offset = jnp.where(large, row_offset * 2 + col_offset // 8, row_offset)
    bit_offset = jnp.where(large, col_offset % 8, jnp.minimum(col_offset, 7))
    address = (jnp.astype(state.I, jnp.int32) + byte_offset) % MEMORY_SIZE
    sprite_bytes = jnp.astype(state.memory[address], jnp.int32)
    sprite = jnp.astype((sprite_bytes >> (7 - bit_offset)) & 1, jnp.bool_) & in_sprite

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[15].set(jnp.any(state.display & sprite))
    )


def clear_display(state: EmulatorState) -> EmulatorState:
    return state.replace(display=jnp.zeros_like(state.display))


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return clear_display(state)


def _scroll(state: EmulatorState, dx, dy) -> EmulatorState:
    """Move the active rectangle by (dx, dy), vacated cells turn off."""
    width, height = active_size(state)
    src_x = xx - dx
    src_y = yy - dy
    active = (xx < width) & (yy < height)
    in_bounds = (src_x >= 0) & (src_x < width) & (src_y >= 0) & (src_y < height)
    moved = state.display[
        jnp.clip(src_x, 0, MAX_SCREEN_WIDTH - 1),
        jnp.clip(src_y, 0, MAX_SCREEN_HEIGHT - 1)
    ] & in_bounds
    return state.replace(display=jnp.where(active, moved, state.display))


def execute_scroll_right(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FB - Scroll display right by 4 pixels."""
    return _scroll(state, SCROLL_COLUMNS, 0)


def execute_scroll_left(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FC - Scroll display left by 4 pixels."""
    return _scroll(state, -SCROLL_COLUMNS, 0)


def execute_scroll_down(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00CN - Scroll display down by N rows."""
    return _scroll(state, 0, jnp.astype(instruction.n, jnp.int32))


def _switch_mode(state: EmulatorState, extended: bool) -> EmulatorState:
    state = clear_display(state)
    return state.replace(
        extended=jnp.asarray(extended, dtype=jnp.bool_),
        mode_epoch=state.mode_epoch + 1,
    )


def execute_low_resolution(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FE - Disable extended mode."""
    return _switch_mode(state, False)


def execute_high_resolution(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FF - Enable extended mode."""
    return _switch_mode(state, True)
