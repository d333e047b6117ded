from PyQt5.QtCore import QObject, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor
from PyQt5.QtWidgets import QGraphicsScene

from core.config import BACKGROUND_COLOR


class BaseStructureView(QObject):
    """
    Base class for structure-specific views, providing:
    - a QGraphicsScene with a fixed logical size
    - binding to a canvas that keeps the scene fitted on resize
    - interaction locking to keep controllers in sync
    """

    interactionLocked = pyqtSignal(bool)

    scene_width = 1000
    scene_height = 560

    def __init__(self):
        super().__init__()
        self.scene = QGraphicsScene()
        self.scene.setSceneRect(QRectF(0, 0, self.scene_width, self.scene_height))
        self.scene.setBackgroundBrush(QBrush(QColor(BACKGROUND_COLOR)))
        self._locked = False
        self._canvas = None  # bound QGraphicsView (optional)

    @property
    def locked(self) -> bool:
        return self._locked

    def bind_canvas(self, view):
        if self._canvas is not None and hasattr(self._canvas, "resized"):
            self._canvas.resized.disconnect(self.fit_view)
        self._canvas = view
        if view:
            view.setScene(self.scene)
            if hasattr(view, "resized"):
                view.resized.connect(self.fit_view)
            self.fit_view()

    def fit_view(self):
        if not self._canvas:
            return
        viewport = self._canvas.viewport().rect()
        if viewport.isNull():
            return
        self._canvas.resetTransform()
        self._canvas.fitInView(self.scene.sceneRect(), Qt.IgnoreAspectRatio)

    def lock_interactions(self):
        if not self._locked:
            self._locked = True
            self.interactionLocked.emit(True)

    def unlock_interactions(self):
        if self._locked:
            self._locked = False
            self.interactionLocked.emit(False)
