import numpy as np
from PyQt6.QtWidgets import QGraphicsView, QGraphicsScene, QGraphicsPixmapItem, QFrame
from PyQt6.QtCore import Qt, pyqtSignal, QRectF
from PyQt6.QtGui import QImage, QPixmap, QPainter, QWheelEvent

from pixelguard.engine.raster import Image

ZOOM_STEP = 1.15
MIN_ZOOM = 0.1
MAX_ZOOM = 20


def to_pixmap(image: Image) -> QPixmap:
    """Convert an RGBA Image to a QPixmap (float images are read as 0..1)."""
    data = image.pixels
    if data.dtype != np.uint8:
        if np.issubdtype(data.dtype, np.integer):
            data = data.astype(np.float64) / np.iinfo(data.dtype).max * 255.0
        else:
            data = np.clip(data, 0.0, 1.0) * 255.0
        data = data.round().astype(np.uint8)
    data = np.ascontiguousarray(data)
    qimg = QImage(data.tobytes(), image.width, image.height, data.strides[0], QImage.Format.Format_RGBA8888).copy()
    return QPixmap.fromImage(qimg)


class SyncedImageView(QGraphicsView):
    """Zoomable view that mirrors its visible area to a partner view."""

    view_changed = pyqtSignal(QRectF)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRenderHints(QPainter.RenderHint.SmoothPixmapTransform)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)

        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self._item = QGraphicsPixmapItem()
        self._scene.addItem(self._item)
        self._syncing = False

        self.horizontalScrollBar().valueChanged.connect(self._publish_view)
        self.verticalScrollBar().valueChanged.connect(self._publish_view)

    def show_image(self, image: Image):
        pixmap = to_pixmap(image)
        self._item.setPixmap(pixmap)
        self._scene.setSceneRect(QRectF(pixmap.rect()))
        self.setBackgroundBrush(Qt.GlobalColor.black)
        self.fit()

    def clear(self):
        self._item.setPixmap(QPixmap())
        self._scene.setSceneRect(QRectF())
        self.resetTransform()
        self.setBackgroundBrush(Qt.GlobalColor.transparent)

    def has_image(self) -> bool:
        return not self._item.pixmap().isNull()

    def fit(self):
        if self.has_image():
            self.fitInView(self._scene.sceneRect(), Qt.AspectRatioMode.KeepAspectRatio)

    def wheelEvent(self, event: QWheelEvent):
        if not self.has_image():
            return
        factor = ZOOM_STEP if event.angleDelta().y() > 0 else 1 / ZOOM_STEP
        zoom = self.transform().m11()
        if (zoom < MIN_ZOOM and factor < 1) or (zoom > MAX_ZOOM and factor > 1):
            return
        self._syncing = True
        self.scale(factor, factor)
        self._syncing = False
        self._publish_view(force=True)

    def _publish_view(self, *_, force=False):
        if (force or not self._syncing) and self.has_image():
            self.view_changed.emit(self.mapToScene(self.viewport().rect()).boundingRect())

    def follow(self, rect: QRectF):
        if not self.has_image() or self._syncing:
            return
        self._syncing = True
        self.fitInView(rect, Qt.AspectRatioMode.KeepAspectRatio)
        self._syncing = False

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.fit()
