from __future__ import annotations

import logging
from typing import Callable, Dict

import numpy as np

from core.errors import UnknownOperationError
from core.grid import Grid, ensure_grid
from core.pixels import OPAQUE, TRANSPARENT, luminosity_array

logger = logging.getLogger(__name__)


def flip_vertical(grid: Grid) -> Grid:
    return ensure_grid(grid)[::-1, :, :].copy()


def flip_horizontal(grid: Grid) -> Grid:
    return ensure_grid(grid)[:, ::-1, :].copy()


def rotate_left(grid: Grid) -> Grid:
    # out[W-1-col, row] = in[row, col]
    g = ensure_grid(grid)
    return g.transpose(1, 0, 2)[::-1, :, :].copy()


def rotate_right(grid: Grid) -> Grid:
    # out[col, H-1-row] = in[row, col]
    g = ensure_grid(grid)
    return g[::-1, :, :].transpose(1, 0, 2).copy()


def luminosity_map(grid: Grid) -> np.ndarray:
    return luminosity_array(ensure_grid(grid))


def luminosity_histogram(grid: Grid) -> np.ndarray:
    lum = luminosity_map(grid)
    return np.bincount(lum.ravel(), minlength=256)[:256]


def grayscale(grid: Grid) -> Grid:
    g = ensure_grid(grid)
    out = np.empty_like(g)
    out[..., :3] = luminosity_array(g)[..., None].astype(np.uint8)
    out[..., 3] = OPAQUE
    return out


def chroma_key(grid: Grid) -> Grid:
    """Make pixels transparent where green is at least twice max(red, blue)."""
    g = ensure_grid(grid)
    rgb = g[..., :3].astype(np.int32)
    m = np.maximum(rgb[..., 0], rgb[..., 2])
    keyed = rgb[..., 1] >= 2 * m
    out = g.copy()
    out[..., 3][keyed] = TRANSPARENT
    return out


def equalize(grid: Grid) -> Grid:
    """
    Histogram equalization on luminosity.

    Each pixel becomes an opaque gray whose level is 255 * cdf(L) // N, where
    cdf is the cumulative luminosity histogram and N the pixel count.
    """
    g = ensure_grid(grid)
    n = g.shape[0] * g.shape[1]
    if n == 0:
        return g.copy()

    lum = luminosity_array(g)
    cum = np.cumsum(np.bincount(lum.ravel(), minlength=256)[:256]).astype(np.int64)
    levels = (255 * cum[lum]) // n

    out = np.empty_like(g)
    out[..., :3] = levels[..., None].astype(np.uint8)
    out[..., 3] = OPAQUE
    return out


OPERATIONS: Dict[str, Callable[[Grid], Grid]] = {
    "flip_vertical": flip_vertical,
    "flip_horizontal": flip_horizontal,
    "rotate_left": rotate_left,
    "rotate_right": rotate_right,
    "grayscale": grayscale,
    "chroma_key": chroma_key,
    "equalize": equalize,
}

OPERATION_LABELS: Dict[str, str] = {
    "flip_vertical": "Flip Vertical",
    "flip_horizontal": "Flip Horizontal",
    "rotate_left": "Rotate Left",
    "rotate_right": "Rotate Right",
    "grayscale": "Grayscale",
    "chroma_key": "Green Screen",
    "equalize": "Equalize",
}

_ALIASES = {
    "green_screen": "chroma_key",
    "greenscreen": "chroma_key",
}


def normalize_operation_name(name: str) -> str:
    key = str(name).strip().lower().replace("-", "_").replace(" ", "_")
    key = _ALIASES.get(key, key)
    if key not in OPERATIONS:
        raise UnknownOperationError(f"unknown operation: {name!r}")
    return key


def apply_transform(name: str, grid: Grid) -> Grid:
    key = normalize_operation_name(name)
    g = ensure_grid(grid)
    logger.debug("Applying %s to %dx%d grid", key, g.shape[1], g.shape[0])
    return OPERATIONS[key](g)
