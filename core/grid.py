from __future__ import annotations

from typing import Sequence

import numpy as np

from core.errors import IndexOutOfRangeError, InvalidGridError
from core.pixels import Pixel, pack, pixels_to_rgba, rgba_to_pixels, unpack

# HxWx4 uint8, channels in RGBA order, row 0 at the top.
Grid = np.ndarray


def ensure_grid(grid: Grid) -> Grid:
    if not isinstance(grid, np.ndarray):
        raise InvalidGridError(f"grid must be a numpy array, got {type(grid).__name__}")
    if grid.dtype != np.uint8 or grid.ndim != 3 or grid.shape[2] != 4:
        raise InvalidGridError("grid must be HxWx4 uint8")
    return grid


def height(grid: Grid) -> int:
    return int(ensure_grid(grid).shape[0])


def width(grid: Grid) -> int:
    return int(ensure_grid(grid).shape[1])


def get(grid: Grid, row: int, col: int) -> Pixel:
    g = ensure_grid(grid)
    h, w = g.shape[:2]
    if not (0 <= row < h) or not (0 <= col < w):
        raise IndexOutOfRangeError(f"pixel ({row}, {col}) outside {h}x{w} grid")
    r, gr, b, a = (int(v) for v in g[row, col])
    return pack(a, r, gr, b)


def set_pixel(grid: Grid, row: int, col: int, pixel: Pixel) -> None:
    g = ensure_grid(grid)
    h, w = g.shape[:2]
    if not (0 <= row < h) or not (0 <= col < w):
        raise IndexOutOfRangeError(f"pixel ({row}, {col}) outside {h}x{w} grid")
    a, r, gr, b = unpack(pixel)
    g[row, col] = (r, gr, b, a)


def new_grid(rows: int, cols: int, fill: Pixel = 0xFF000000) -> Grid:
    if rows < 0 or cols < 0:
        raise InvalidGridError(f"grid dimensions must be >= 0, got {rows}x{cols}")
    a, r, g, b = unpack(fill)
    out = np.empty((rows, cols, 4), dtype=np.uint8)
    out[...] = (r, g, b, a)
    return out


def grid_from_rows(rows: Sequence[Sequence[Pixel]]) -> Grid:
    """Build a grid from row-major lists of packed 0xAARRGGBB pixels."""
    if len(rows) == 0:
        return np.zeros((0, 0, 4), dtype=np.uint8)
    w = len(rows[0])
    for idx, row in enumerate(rows):
        if len(row) != w:
            raise InvalidGridError(f"row {idx} has length {len(row)}, expected {w}")
    packed = np.array(
        [[int(p) & 0xFFFFFFFF for p in row] for row in rows],
        dtype=np.uint32,
    ).reshape(len(rows), w)
    return pixels_to_rgba(packed)


def grid_to_rows(grid: Grid) -> list[list[Pixel]]:
    g = ensure_grid(grid)
    return [[int(p) for p in row] for row in rgba_to_pixels(g)]
