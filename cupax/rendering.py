"""Framebuffer to RGB conversion for renderers."""

from typing import Optional, Tuple

import jax.numpy as jnp
import numpy as np

from cupax.constants import NORMAL_COLORS, EXTENDED_COLORS
from cupax.state import EmulatorState
from cupax.emulator import active_display, display_mode


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (width, height)
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: white)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.array(display, dtype=np.bool_)

    # (width, height) -> image rows are y
    pixels = pixels.T
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Nearest neighbour upscaling
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "normal",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for rendering.

    Args:
        scheme: Color scheme name ("normal" or "extended")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "normal": NORMAL_COLORS,  # White on black
        "extended": EXTENDED_COLORS,  # Cyan on dark blue
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def render_state(state: EmulatorState, scale: int = 8, color_scheme: Optional[str] = None) -> np.ndarray:
    """Render the active display rectangle.

    Colors follow the display mode unless a ``color_scheme`` is given.
    """
    if color_scheme is None:
        mode = display_mode(state)
        on_color, off_color = mode.on_color, mode.off_color
    else:
        on_color, off_color = create_color_scheme(color_scheme)
    return chip8_display_to_rgb(active_display(state), scale, on_color, off_color)
