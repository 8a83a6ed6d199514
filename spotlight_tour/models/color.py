#!/usr/bin/env python3
"""
Colour parsing helpers.

Colours are carried around as (r, g, b, a) tuples of 0-255 ints. Input may be
"#RRGGBB", "#RRGGBBAA", a 3- or 4-tuple, or a packed 0xAARRGGBB integer.
"""

from typing import Any, Tuple

RGBA = Tuple[int, int, int, int]

WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)


def parse_color(value: Any) -> RGBA:
    """
    Normalise a colour value to an RGBA tuple.

    Args:
        value: Hex string, tuple/list of 3-4 channels, or packed ARGB int

    Returns:
        (r, g, b, a) tuple

    Raises:
        ValueError: If the value cannot be interpreted as a colour
    """
    if isinstance(value, bool):
        raise ValueError(f'Invalid colour: {value!r}')

    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f'Packed colour out of range: {value:#x}')
        return (
            (value >> 16) & 0xFF,
            (value >> 8) & 0xFF,
            value & 0xFF,
            (value >> 24) & 0xFF,
        )

    if isinstance(value, str):
        text = value.strip().lstrip('#')
        if len(text) not in (6, 8):
            raise ValueError(f'Hex colour must be #RRGGBB or #RRGGBBAA: {value!r}')
        try:
            channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
        except ValueError:
            raise ValueError(f'Invalid hex colour: {value!r}')
        if len(channels) == 3:
            channels.append(255)
        return tuple(channels)

    if isinstance(value, (tuple, list)):
        if len(value) not in (3, 4):
            raise ValueError(f'Colour tuple must have 3 or 4 channels: {value!r}')
        channels = [int(c) for c in value]
        if any(c < 0 or c > 255 for c in channels):
            raise ValueError(f'Colour channels must be 0-255: {value!r}')
        if len(channels) == 3:
            channels.append(255)
        return tuple(channels)

    raise ValueError(f'Unsupported colour value: {value!r}')


def to_bgr(color: RGBA) -> Tuple[int, int, int]:
    """Drop alpha and reorder for OpenCV drawing calls."""
    r, g, b, _ = color
    return (b, g, r)


def alpha_of(color: RGBA) -> float:
    """Alpha channel as a 0.0-1.0 float."""
    return color[3] / 255.0
