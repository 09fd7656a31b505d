from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from core.errors import NoImageError
from core.grid import Grid, ensure_grid
from core.io import load_grid, save_grid
from core.overlay import overlay as overlay_grids
from core.transforms import apply_transform

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


@dataclass(eq=False)
class EditorState:
    """Current image, the file it came from, and whether it has unsaved edits."""

    image: Optional[Grid] = None
    current_file: Optional[str] = None
    dirty: bool = False

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @property
    def title(self) -> str:
        if not self.current_file:
            return UNTITLED
        return Path(self.current_file).name

    def require_image(self) -> Grid:
        if self.image is None:
            raise NoImageError("no image loaded")
        return self.image

    def set_image(self, grid: Grid) -> None:
        self.image = ensure_grid(grid)
        self.dirty = True

    def apply(self, operation: str) -> Grid:
        result = apply_transform(operation, self.require_image())
        self.set_image(result)
        logger.info("Applied %s to %s", operation, self.title)
        return result

    def open(self, path: str) -> None:
        grid = load_grid(path)
        self.image = grid
        self.current_file = path
        self.dirty = False
        logger.info("Opened %s (%dx%d)", path, grid.shape[1], grid.shape[0])

    def overlay(self, path: str) -> None:
        if self.image is None:
            self.open(path)
            return
        top = load_grid(path)
        self.set_image(overlay_grids(self.image, top))
        logger.info("Overlaid %s onto %s", path, self.title)

    def close(self) -> None:
        self.image = None
        self.current_file = None
        self.dirty = False

    def restore(self) -> None:
        if not self.current_file:
            return
        self.image = load_grid(self.current_file)
        self.dirty = False
        logger.info("Restored %s from disk", self.current_file)

    def save(self) -> None:
        grid = self.require_image()
        if not self.current_file:
            raise ValueError("no file name set; use save_as")
        save_grid(self.current_file, grid)
        self.dirty = False
        logger.info("Saved %s", self.current_file)

    def save_as(self, path: str) -> None:
        self.require_image()
        self.current_file = path
        self.save()
