from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory
import unittest

import numpy as np

from core.errors import NoImageError, UnknownOperationError
from core.grid import get, grid_from_rows, new_grid
from core.pixels import pack
from core.transforms import flip_vertical

try:
    from PIL import Image
    from core.io import grid_to_image, image_to_grid, load_grid, save_grid
    from core.state import EditorState
except ImportError as exc:  # pragma: no cover - environment dependency
    raise unittest.SkipTest(f"missing runtime dependency: {exc}")


def _sample_grid() -> np.ndarray:
    return grid_from_rows(
        [
            [pack(255, 255, 0, 0), pack(255, 0, 255, 0)],
            [pack(255, 0, 0, 255), pack(128, 10, 20, 30)],
        ]
    )


class ImageIOTests(unittest.TestCase):
    def test_png_round_trip_keeps_alpha(self) -> None:
        grid = _sample_grid()
        with TemporaryDirectory() as td:
            path = Path(td) / "sample.png"
            save_grid(str(path), grid)
            loaded = load_grid(str(path))
        np.testing.assert_array_equal(loaded, grid)

    def test_pillow_bridge(self) -> None:
        img = Image.new("RGB", (3, 2), (10, 20, 30))
        grid = image_to_grid(img)
        self.assertEqual(grid.shape, (2, 3, 4))
        self.assertEqual(get(grid, 1, 2), pack(255, 10, 20, 30))
        back = grid_to_image(grid)
        self.assertEqual(back.mode, "RGBA")
        self.assertEqual(back.size, (3, 2))

    def test_jpeg_is_flattened_onto_white(self) -> None:
        grid = new_grid(8, 8, fill=pack(0, 0, 0, 0))
        with TemporaryDirectory() as td:
            path = Path(td) / "flat.jpg"
            save_grid(str(path), grid)
            loaded = load_grid(str(path))
        self.assertTrue(np.all(loaded[..., 3] == 255))
        self.assertTrue(np.all(loaded[..., :3] > 245))


class EditorStateTests(unittest.TestCase):
    def test_initial_state(self) -> None:
        state = EditorState()
        self.assertFalse(state.has_image)
        self.assertFalse(state.dirty)
        self.assertEqual(state.title, "Untitled")

    def test_apply_without_image(self) -> None:
        state = EditorState()
        with self.assertRaises(NoImageError):
            state.apply("grayscale")
        with self.assertRaises(NoImageError):
            state.save_as("nowhere.png")

    def test_open_apply_save_restore(self) -> None:
        grid = _sample_grid()
        with TemporaryDirectory() as td:
            path = Path(td) / "photo.png"
            save_grid(str(path), grid)

            state = EditorState()
            state.open(str(path))
            self.assertEqual(state.title, "photo.png")
            self.assertFalse(state.dirty)

            state.apply("Flip Vertical")
            self.assertTrue(state.dirty)
            np.testing.assert_array_equal(state.image, flip_vertical(grid))

            state.restore()
            self.assertFalse(state.dirty)
            np.testing.assert_array_equal(state.image, grid)

            state.apply("rotate_left")
            state.save()
            self.assertFalse(state.dirty)
            self.assertEqual(load_grid(str(path)).shape, (2, 2, 4))
            np.testing.assert_array_equal(load_grid(str(path)), state.image)

    def test_unknown_operation_leaves_state(self) -> None:
        state = EditorState(image=_sample_grid())
        with self.assertRaises(UnknownOperationError):
            state.apply("blur")
        self.assertFalse(state.dirty)

    def test_save_requires_file_name(self) -> None:
        state = EditorState()
        state.set_image(_sample_grid())
        with self.assertRaises(ValueError):
            state.save()

    def test_save_as_sets_title(self) -> None:
        state = EditorState()
        state.set_image(_sample_grid())
        with TemporaryDirectory() as td:
            path = Path(td) / "out.png"
            state.save_as(str(path))
            self.assertTrue(path.exists())
        self.assertEqual(state.title, "out.png")
        self.assertFalse(state.dirty)

    def test_overlay_without_image_opens(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "top.png"
            save_grid(str(path), _sample_grid())
            state = EditorState()
            state.overlay(str(path))
        self.assertEqual(state.title, "top.png")
        self.assertFalse(state.dirty)

    def test_overlay_composites_onto_current(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "dot.png"
            save_grid(str(path), new_grid(1, 1, fill=pack(255, 0, 0, 255)))
            state = EditorState()
            state.set_image(new_grid(3, 3, fill=pack(255, 255, 0, 0)))
            state.dirty = False
            state.overlay(str(path))
        self.assertTrue(state.dirty)
        self.assertEqual(state.image.shape, (3, 3, 4))
        self.assertEqual(get(state.image, 1, 1), pack(255, 0, 0, 255))
        self.assertEqual(get(state.image, 0, 0), pack(255, 255, 0, 0))

    def test_close_and_restore_without_file(self) -> None:
        state = EditorState()
        state.set_image(_sample_grid())
        state.restore()
        self.assertTrue(state.dirty)
        state.close()
        self.assertFalse(state.has_image)
        self.assertFalse(state.dirty)
        self.assertIsNone(state.current_file)


if __name__ == "__main__":
    unittest.main()
