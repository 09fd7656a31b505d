from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from core.errors import InvalidChannelValueError

# ITU-R BT.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114

OPAQUE = 255
TRANSPARENT = 0

Pixel = int
Channels = Tuple[int, int, int, int]


def _channel(value: float, name: str, strict: bool) -> int:
    if isinstance(value, (int, np.integer)):
        v = int(value)
    else:
        f = float(value)
        if math.isnan(f):
            raise InvalidChannelValueError(f"{name} channel is NaN")
        if math.isinf(f):
            v = 256 if f > 0 else -1
        else:
            v = math.floor(f + 0.5)
    if 0 <= v <= 255:
        return v
    if strict:
        raise InvalidChannelValueError(f"{name} channel {value!r} outside [0, 255]")
    return 0 if v < 0 else 255


def pack(alpha: float, red: float, green: float, blue: float, strict: bool = False) -> Pixel:
    """
    Pack four channels into a 0xAARRGGBB integer.

    Out-of-range channels are clamped into [0, 255] unless strict=True, in
    which case InvalidChannelValueError is raised.
    """
    a = _channel(alpha, "alpha", strict)
    r = _channel(red, "red", strict)
    g = _channel(green, "green", strict)
    b = _channel(blue, "blue", strict)
    return (a << 24) | (r << 16) | (g << 8) | b


def unpack(pixel: Pixel) -> Channels:
    p = int(pixel) & 0xFFFFFFFF
    return (p >> 24) & 0xFF, (p >> 16) & 0xFF, (p >> 8) & 0xFF, p & 0xFF


def luminosity(red: int, green: int, blue: int) -> int:
    y = math.floor(LUMA_R * red + LUMA_G * green + LUMA_B * blue + 0.5)
    return int(max(0, min(255, y)))


def luminosity_array(rgb: np.ndarray) -> np.ndarray:
    """HxWx3 (or HxWx4) uint8 -> HxW int64 luminosity, rounded half up."""
    c = rgb.astype(np.float64)
    y = np.floor(LUMA_R * c[..., 0] + LUMA_G * c[..., 1] + LUMA_B * c[..., 2] + 0.5)
    return np.clip(y, 0, 255).astype(np.int64)


def pixels_to_rgba(packed: np.ndarray) -> np.ndarray:
    p = packed.astype(np.uint32)
    out = np.empty(p.shape + (4,), dtype=np.uint8)
    out[..., 0] = (p >> 16) & 0xFF
    out[..., 1] = (p >> 8) & 0xFF
    out[..., 2] = p & 0xFF
    out[..., 3] = (p >> 24) & 0xFF
    return out


def rgba_to_pixels(rgba: np.ndarray) -> np.ndarray:
    c = rgba.astype(np.uint32)
    return (c[..., 3] << 24) | (c[..., 0] << 16) | (c[..., 1] << 8) | c[..., 2]
