from __future__ import annotations

import numpy as np

from core.grid import Grid, ensure_grid


def _blend_over(base: np.ndarray, top: np.ndarray) -> np.ndarray:
    base_rgb = base[..., :3].astype(np.float32) / 255.0
    top_rgb = top[..., :3].astype(np.float32) / 255.0
    base_a = base[..., 3:4].astype(np.float32) / 255.0
    top_a = top[..., 3:4].astype(np.float32) / 255.0

    out_a = top_a + base_a * (1.0 - top_a)
    out_premul = top_rgb * top_a + base_rgb * base_a * (1.0 - top_a)
    out_rgb = np.where(out_a > 0, out_premul / np.maximum(out_a, 1e-6), 0.0)

    out = np.empty_like(base)
    out[..., :3] = np.clip(np.rint(out_rgb * 255.0), 0, 255).astype(np.uint8)
    out[..., 3] = np.clip(np.rint(out_a[..., 0] * 255.0), 0, 255).astype(np.uint8)
    return out


def overlay(base: Grid, top: Grid) -> Grid:
    """
    Draw `top` centered over `base` (source-over), clipped to base bounds.
    The result keeps the dimensions of `base`.
    """
    b = ensure_grid(base)
    t = ensure_grid(top)
    out = b.copy()
    bh, bw = b.shape[:2]
    th, tw = t.shape[:2]

    x = (bw - tw) // 2
    y = (bh - th) // 2
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(bw, x + tw)
    y1 = min(bh, y + th)
    if x1 <= x0 or y1 <= y0:
        return out

    sx0 = x0 - x
    sy0 = y0 - y
    sx1 = sx0 + (x1 - x0)
    sy1 = sy0 + (y1 - y0)
    out[y0:y1, x0:x1] = _blend_over(b[y0:y1, x0:x1], t[sy0:sy1, sx0:sx1])
    return out
