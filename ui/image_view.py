from __future__ import annotations
from typing import Optional

from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QPainter, QImage, QPixmap, QColor, QPen
from PySide6.QtWidgets import QWidget


class ImageView(QWidget):
    """
    Shows the current image centered on a checkerboard.
      - wheel: view zoom
      - middle-drag: pan view
    """
    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)

        self._image: Optional[QImage] = None

        self._view_zoom = 1.0
        self._view_pan_x = 0.0
        self._view_pan_y = 0.0

        self._dragging_mid = False
        self._last_pos = None

    def set_image(self, qimg: Optional[QImage]) -> None:
        self._image = qimg
        self.update()

    def reset_view(self) -> None:
        self._view_zoom = 1.0
        self._view_pan_x = 0.0
        self._view_pan_y = 0.0
        self.update()

    def paintEvent(self, _) -> None:
        p = QPainter(self)
        p.fillRect(self.rect(), QColor(30, 30, 30))

        if self._image is None:
            p.setPen(QPen(QColor(220, 220, 220)))
            p.drawText(self.rect(), Qt.AlignCenter, "Drop an image or File > Open File...")
            return

        img_w = self._image.width()
        img_h = self._image.height()
        cx = self.width() * 0.5 + self._view_pan_x
        cy = self.height() * 0.5 + self._view_pan_y
        draw_w = img_w * self._view_zoom
        draw_h = img_h * self._view_zoom
        x0 = cx - draw_w * 0.5
        y0 = cy - draw_h * 0.5

        # Checkerboard underlay so transparent pixels are visible
        self._draw_checkerboard(p, QRectF(x0, y0, draw_w, draw_h), int(16 * self._view_zoom))

        if img_w > 0 and img_h > 0:
            pm = QPixmap.fromImage(self._image)
            p.drawPixmap(int(x0), int(y0), int(draw_w), int(draw_h), pm)

        p.setPen(QPen(QColor(240, 240, 240), 1))
        p.drawRect(QRectF(x0, y0, draw_w, draw_h))

    def _draw_checkerboard(self, p: QPainter, r: QRectF, cell: int) -> None:
        if cell < 4:
            cell = 4
        c1 = QColor(60, 60, 60)
        c2 = QColor(90, 90, 90)

        x0 = int(r.left())
        y0 = int(r.top())
        x1 = int(r.right())
        y1 = int(r.bottom())

        for y in range(y0, y1, cell):
            for x in range(x0, x1, cell):
                use_c1 = ((x // cell) + (y // cell)) % 2 == 0
                p.fillRect(x, y, cell, cell, c1 if use_c1 else c2)

    def wheelEvent(self, e) -> None:
        factor = 1.15 if e.angleDelta().y() > 0 else 1.0 / 1.15
        self._view_zoom = max(0.05, min(64.0, self._view_zoom * factor))
        self.update()

    def mousePressEvent(self, e) -> None:
        if e.button() == Qt.MiddleButton:
            self._dragging_mid = True
            self._last_pos = e.position().toPoint()
            e.accept()
            return
        super().mousePressEvent(e)

    def mouseMoveEvent(self, e) -> None:
        if self._dragging_mid and self._last_pos is not None:
            pos = e.position().toPoint()
            self._view_pan_x += pos.x() - self._last_pos.x()
            self._view_pan_y += pos.y() - self._last_pos.y()
            self._last_pos = pos
            self.update()
            e.accept()
            return
        super().mouseMoveEvent(e)

    def mouseReleaseEvent(self, e) -> None:
        if e.button() == Qt.MiddleButton:
            self._dragging_mid = False
            self._last_pos = None
            e.accept()
            return
        super().mouseReleaseEvent(e)
