"""Framebuffer export and RGB rendering of the CHIP-8 display."""

from typing import Dict, Tuple

import jax.numpy as jnp
import numpy as np

from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, PIXEL_ON, PIXEL_OFF

Color = Tuple[int, int, int]

# (on, off) colours
COLOR_SCHEMES: Dict[str, Tuple[Color, Color]] = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def display_rows(display: jnp.ndarray) -> np.ndarray:
    """Host copy of the ``[x, y]`` display as a (32, 64) boolean array of rows."""
    pixels = np.array(display, dtype=np.bool_)
    if pixels.shape != (SCREEN_WIDTH, SCREEN_HEIGHT):
        raise ValueError(f"Expected display shape ({SCREEN_WIDTH}, {SCREEN_HEIGHT}), got {pixels.shape}")
    return pixels.T


def framebuffer_pixels(display: jnp.ndarray) -> np.ndarray:
    """Export the display as 32-bit pixels, one per cell.

    Args:
        display: Boolean array of shape (64, 32) indexed ``[x, y]``

    Returns:
        Read-only uint32 array of length 64*32 in row-major order
        (``y * 64 + x``), ``0xFFFFFFFF`` for lit cells and ``0`` otherwise
    """
    framebuffer = np.where(display_rows(display), np.uint32(PIXEL_ON), np.uint32(PIXEL_OFF)).ravel()
    framebuffer.flags.writeable = False
    return framebuffer


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up an ``(on_color, off_color)`` pair by name."""
    if scheme not in COLOR_SCHEMES:
        raise ValueError(f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}")
    return COLOR_SCHEMES[scheme]


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """Colour and upscale the display.

    Returns:
        uint8 array of shape (32*scale, 64*scale, 3), rows first
    """
    palette = np.array([off_color, on_color], dtype=np.uint8)
    rgb = palette[display_rows(display).astype(np.intp)]
    if scale > 1:
        rgb = rgb.repeat(scale, axis=0).repeat(scale, axis=1)
    return rgb
