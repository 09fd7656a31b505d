from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import UnidentifiedImageError

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QImage, QKeySequence, QIcon
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QFileDialog, QVBoxLayout, QLabel, QPushButton,
    QMessageBox, QDockWidget, QInputDialog
)

from core.batch import batch_apply
from core.errors import ImageShopError
from core.grid import Grid
from core.settings import EditorSettings, save_settings
from core.state import EditorState
from core.transforms import OPERATION_LABELS
from ui.image_view import ImageView

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp *.tif *.tiff)"
SAVE_FILTER = "PNG (*.png);;JPG (*.jpg *.jpeg);;WEBP (*.webp);;TIFF (*.tif *.tiff)"
TITLE_BAR_HEIGHT = 20


def grid_to_qimage(grid: Grid) -> QImage:
    h, w = grid.shape[:2]
    data = np.ascontiguousarray(grid).tobytes()
    qimg = QImage(data, w, h, 4 * w, QImage.Format_RGBA8888)
    # Important: keep a copy because Python-owned bytes may be freed
    return qimg.copy()


class MainWindow(QMainWindow):
    def __init__(self, settings: Optional[EditorSettings] = None, logo_path: Optional[Path] = None):
        super().__init__()
        if logo_path is not None and logo_path.exists():
            self.setWindowIcon(QIcon(str(logo_path)))
        self.setWindowTitle("ImageShop")

        self.settings = settings or EditorSettings()
        self.state = EditorState()

        # Central: title bar above the image
        self.title_bar = QLabel(self.state.title)
        self.title_bar.setAlignment(Qt.AlignCenter)
        self.title_bar.setFixedHeight(TITLE_BAR_HEIGHT)
        self.view = ImageView()

        central = QWidget()
        lay = QVBoxLayout()
        lay.addWidget(self.title_bar)
        lay.addWidget(self.view)
        central.setLayout(lay)
        self.setCentralWidget(central)

        self._build_menu()
        self._build_operations_dock()

        self.setAcceptDrops(True)
        self.resize(self.settings.window_w, self.settings.window_h)
        self._refresh()

    # ---------------------------
    # Menu / Actions
    # ---------------------------
    def _build_menu(self) -> None:
        open_act = QAction("Open File...", self)
        open_act.setShortcut(QKeySequence.StandardKey.Open)
        open_act.triggered.connect(self.open_file)

        overlay_act = QAction("Overlay...", self)
        overlay_act.setShortcut("Ctrl+Shift+O")
        overlay_act.triggered.connect(self.overlay_file)

        close_act = QAction("Close", self)
        close_act.setShortcut(QKeySequence.StandardKey.Close)
        close_act.triggered.connect(self.close_image)

        restore_act = QAction("Restore", self)
        restore_act.setShortcut("Ctrl+R")
        restore_act.triggered.connect(self.restore_image)

        save_act = QAction("Save", self)
        save_act.setShortcut(QKeySequence.StandardKey.Save)
        save_act.triggered.connect(self.save)

        save_as_act = QAction("Save As...", self)
        save_as_act.setShortcut(QKeySequence.StandardKey.SaveAs)
        save_as_act.triggered.connect(self.save_as)

        batch_act = QAction("Batch Apply...", self)
        batch_act.triggered.connect(self.batch_apply)

        quit_act = QAction("Quit", self)
        quit_act.setShortcut(QKeySequence.StandardKey.Quit)
        quit_act.triggered.connect(self.close)

        reset_view = QAction("Reset View", self)
        reset_view.triggered.connect(self.view.reset_view)

        mfile = self.menuBar().addMenu("File")
        mfile.addAction(open_act)
        mfile.addAction(overlay_act)
        mfile.addAction(close_act)
        mfile.addAction(restore_act)
        mfile.addAction(save_act)
        mfile.addAction(save_as_act)
        mfile.addSeparator()
        mfile.addAction(batch_act)
        mfile.addSeparator()
        mfile.addAction(quit_act)

        mview = self.menuBar().addMenu("View")
        mview.addAction(reset_view)

    def _build_operations_dock(self) -> None:
        dock = QDockWidget("Operations", self)
        dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        dock.setFeatures(QDockWidget.NoDockWidgetFeatures)

        panel = QWidget()
        lay = QVBoxLayout()
        self._op_buttons: list[QPushButton] = []
        for name, label in OPERATION_LABELS.items():
            btn = QPushButton(label)
            btn.clicked.connect(lambda _=False, op=name: self.apply_operation(op))
            lay.addWidget(btn)
            self._op_buttons.append(btn)
        lay.addStretch(1)
        panel.setLayout(lay)

        dock.setWidget(panel)
        self.addDockWidget(Qt.LeftDockWidgetArea, dock)

    # ---------------------------
    # Operations
    # ---------------------------
    def apply_operation(self, name: str) -> None:
        if not self.state.has_image:
            return
        try:
            self.state.apply(name)
        except ImageShopError as e:
            QMessageBox.critical(self, "Operation failed", str(e))
            return
        self._refresh()

    # ---------------------------
    # File IO
    # ---------------------------
    def _start_dir(self) -> str:
        if self.state.current_file:
            return str(Path(self.state.current_file).parent)
        return self.settings.image_dir

    def _remember_dir(self, path: str) -> None:
        self.settings.image_dir = str(Path(path).parent)

    def open_file(self) -> None:
        if self.state.dirty and not self._confirm_save():
            return
        path, _ = QFileDialog.getOpenFileName(self, "Open Image", self._start_dir(), IMAGE_FILTER)
        if not path:
            return
        self.load_path(path)

    def load_path(self, path: str) -> None:
        try:
            self.state.open(path)
        except (OSError, UnidentifiedImageError) as e:
            QMessageBox.critical(self, "Open failed", str(e))
            return
        self._remember_dir(path)
        self.view.reset_view()
        self._refresh()

    def overlay_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Overlay Image", self._start_dir(), IMAGE_FILTER)
        if not path:
            return
        try:
            self.state.overlay(path)
        except (OSError, UnidentifiedImageError) as e:
            QMessageBox.critical(self, "Overlay failed", str(e))
            return
        self._remember_dir(path)
        self._refresh()

    def close_image(self) -> None:
        if self.state.dirty and not self._confirm_save():
            return
        self.state.close()
        self._refresh()

    def restore_image(self) -> None:
        try:
            self.state.restore()
        except (OSError, UnidentifiedImageError) as e:
            QMessageBox.critical(self, "Restore failed", str(e))
            return
        self._refresh()

    def save(self) -> bool:
        if not self.state.has_image:
            return False
        if not self.state.current_file:
            return self.save_as()
        try:
            self.state.save()
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Save failed", str(e))
            return False
        self._refresh()
        return True

    def save_as(self) -> bool:
        if not self.state.has_image:
            QMessageBox.information(self, "Nothing to save", "Load an image first.")
            return False
        start = self.state.current_file or self.settings.image_dir
        path, _ = QFileDialog.getSaveFileName(self, "Save As", start, SAVE_FILTER)
        if not path:
            return False
        if not Path(path).suffix:
            path += self.settings.default_save_ext
        try:
            self.state.save_as(path)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Save failed", str(e))
            return False
        self._remember_dir(path)
        self._refresh()
        return True

    def batch_apply(self) -> None:
        in_dir = QFileDialog.getExistingDirectory(self, "Batch Input Folder", self.settings.image_dir)
        if not in_dir:
            return
        out_dir = QFileDialog.getExistingDirectory(self, "Batch Output Folder", in_dir)
        if not out_dir:
            return
        text, ok = QInputDialog.getText(
            self, "Batch Apply", "Operations (comma-separated):", text="grayscale"
        )
        if not ok:
            return
        ops = [t.strip() for t in text.split(",") if t.strip()]
        if not ops:
            return
        try:
            count = batch_apply(
                in_dir, out_dir, ops,
                suffix=self.settings.batch_suffix,
                ext=self.settings.default_save_ext,
            )
        except (ImageShopError, OSError, UnidentifiedImageError) as e:
            QMessageBox.critical(self, "Batch Apply failed", str(e))
            return
        QMessageBox.information(self, "Batch Apply", f"Processed {count} images.")

    def _confirm_save(self) -> bool:
        """Returns False when the user cancels."""
        msg = "This image has not been saved."
        if self.state.current_file:
            msg = f"{self.state.title} has not been saved."
        box = QMessageBox(self)
        box.setIcon(QMessageBox.Warning)
        box.setWindowTitle("Confirm Save")
        box.setText(msg)
        box.setStandardButtons(QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel)
        box.setDefaultButton(QMessageBox.Save)
        box.exec()
        choice = box.standardButton(box.clickedButton())
        if choice == QMessageBox.Cancel:
            return False
        if choice == QMessageBox.Save:
            return self.save()
        return True

    # ---------------------------
    # Drag & drop support
    # ---------------------------
    def dragEnterEvent(self, e) -> None:
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e) -> None:
        urls = e.mimeData().urls()
        if not urls:
            return
        path = urls[0].toLocalFile()
        if path and (not self.state.dirty or self._confirm_save()):
            self.load_path(path)

    def closeEvent(self, e) -> None:
        if self.state.dirty and not self._confirm_save():
            e.ignore()
            return
        self.settings.window_w = self.width()
        self.settings.window_h = self.height()
        try:
            save_settings(self.settings)
        except OSError as err:
            logger.warning("Could not save settings: %s", err)
        e.accept()

    # ---------------------------
    # Rendering
    # ---------------------------
    def _refresh(self) -> None:
        title = self.state.title
        if self.state.dirty:
            title += " *"
        self.title_bar.setText(title)
        self.setWindowTitle(f"ImageShop - {title}")

        has_image = self.state.has_image
        for btn in self._op_buttons:
            btn.setEnabled(has_image)

        if self.state.image is None:
            self.view.set_image(None)
            self.statusBar().showMessage("No image")
            return
        grid = self.state.image
        self.view.set_image(grid_to_qimage(grid))
        self.statusBar().showMessage(f"{grid.shape[1]} x {grid.shape[0]} px")
