from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from core.grid import Grid, ensure_grid

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp", ".tif", ".tiff"}
_NO_ALPHA_EXTENSIONS = {".jpg", ".jpeg", ".bmp"}


def image_to_grid(img: Image.Image) -> Grid:
    arr = np.array(img.convert("RGBA"), dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError("Expected RGBA image")
    return arr


def grid_to_image(grid: Grid) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(ensure_grid(grid)))


def load_grid(path: str) -> Grid:
    with Image.open(path) as img:
        # Convert to RGBA for consistent alpha work
        return image_to_grid(img)


def save_grid(path: str, grid: Grid) -> None:
    img = grid_to_image(grid)
    if Path(path).suffix.lower() in _NO_ALPHA_EXTENSIONS:
        # No alpha channel in the target format, so flatten onto white.
        flat = Image.new("RGB", img.size, (255, 255, 255))
        flat.paste(img, mask=img.split()[3])
        flat.save(path)
    else:
        img.save(path)
