from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QPainter, QResizeEvent, QWheelEvent
from PyQt5.QtWidgets import QFrame, QGraphicsView


class HistogramCanvas(QGraphicsView):
    """
    Graphics view for the bar histogram:
    - no scrollbars, the scene is always stretched to the viewport
    - wheel events are swallowed so the bars never drift
    - emits ``resized`` so the bound view can refit its scene
    """

    resized = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRenderHint(QPainter.Antialiasing, True)
        self.setFrameShape(QFrame.NoFrame)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setInteractive(False)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setViewportUpdateMode(QGraphicsView.FullViewportUpdate)

    def resizeEvent(self, event: QResizeEvent):
        super().resizeEvent(event)
        self.resized.emit()

    def wheelEvent(self, event: QWheelEvent):
        event.accept()
