from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from core.io import IMAGE_EXTENSIONS, load_grid, save_grid
from core.transforms import apply_transform, normalize_operation_name

logger = logging.getLogger(__name__)


def iter_images(folder: str) -> Iterable[Path]:
    root = Path(folder)
    for p in sorted(root.iterdir()):
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS:
            yield p


def batch_apply(
    input_dir: str,
    output_dir: str,
    operations: Sequence[str],
    suffix: str = "_edited",
    ext: str = ".png",
) -> int:
    """Apply `operations` in order to every image in input_dir; returns the file count."""
    # Fail on a bad name before touching any file
    ops = [normalize_operation_name(op) for op in operations]

    out_root = Path(output_dir)
    out_root.mkdir(parents=True, exist_ok=True)

    count = 0
    for src_path in iter_images(input_dir):
        grid = load_grid(str(src_path))
        for op in ops:
            grid = apply_transform(op, grid)
        out_name = f"{src_path.stem}{suffix}{ext}"
        save_grid(str(out_root / out_name), grid)
        logger.debug("Wrote %s", out_name)
        count += 1
    logger.info("Batch processed %d image(s) from %s", count, input_dir)
    return count
