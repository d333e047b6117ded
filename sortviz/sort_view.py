from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from PyQt5.QtCore import QRectF, Qt
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import QGraphicsItem, QGraphicsObject

from core.base_view import BaseStructureView
from core.config import (
    ACTIVE_BAR_COLOR,
    DEFAULT_BAR_COLOR,
    LEGEND_TEXT_COLOR,
    SORTED_BAR_COLOR,
)
from sortviz.sort_model import ArrayFrame, ArrayModel


class BarRole(Enum):
    DEFAULT = "default"
    ACTIVE = "active"
    SORTED = "sorted"


LEGEND: Dict[BarRole, str] = {
    BarRole.DEFAULT: DEFAULT_BAR_COLOR,
    BarRole.ACTIVE: ACTIVE_BAR_COLOR,
    BarRole.SORTED: SORTED_BAR_COLOR,
}

LEGEND_TEXT = "White=default, Red=comparing/swapping, Green=sorted"


@dataclass(frozen=True)
class Bar:
    x: int
    y: int
    w: int
    h: int
    role: BarRole


def role_for(frame: ArrayFrame, index: int) -> BarRole:
    # highlight wins over sorted
    if index in frame.highlight:
        return BarRole.ACTIVE
    if index in frame.sorted_mask:
        return BarRole.SORTED
    return BarRole.DEFAULT


def layout_bars(frame: ArrayFrame, width: int, height: int, gap: int = 1, top_margin: int = 30) -> List[Bar]:
    """
    Pure layout: one bar per value, heights scaled to the largest value,
    bottoms aligned to ``height``. The top margin keeps room for the legend.
    """
    n = len(frame.values)
    if n == 0:
        return []

    peak = max(1, max(frame.values))
    bar_w = max(1, width // n)
    draw_w = max(1, bar_w - gap)
    usable = max(0, height - top_margin)

    bars = []
    for i, value in enumerate(frame.values):
        bar_h = max(0, int(value / peak * usable))
        bars.append(Bar(i * bar_w, height - bar_h, draw_w, bar_h, role_for(frame, i)))
    return bars


class HistogramItem(QGraphicsObject):
    """Paints one ``ArrayFrame`` as bars plus the colour legend."""

    def __init__(self, width, height):
        super().__init__()
        self._rect = QRectF(0, 0, width, height)
        self._frame = ArrayFrame()
        self._colors = {role: QColor(color) for role, color in LEGEND.items()}
        self.setCacheMode(QGraphicsItem.NoCache)

    @property
    def frame(self) -> ArrayFrame:
        return self._frame

    def set_frame(self, frame: ArrayFrame):
        self._frame = frame
        self.update()

    def boundingRect(self):
        return QRectF(self._rect)

    def paint(self, painter, option, widget=None):
        bars = layout_bars(self._frame, int(self._rect.width()), int(self._rect.height()))
        painter.setPen(Qt.NoPen)
        for bar in bars:
            painter.fillRect(QRectF(bar.x, bar.y, bar.w, bar.h), self._colors[bar.role])

        painter.setPen(QColor(LEGEND_TEXT_COLOR))
        painter.drawText(QRectF(12, 4, self._rect.width() - 24, 22), Qt.AlignLeft | Qt.AlignVCenter, LEGEND_TEXT)


class SortView(BaseStructureView):
    """
    Read-only renderer of an ``ArrayModel``. Repaints on every
    ``changed`` signal; signals raised by the sort worker arrive here
    through Qt's queued connections, so painting stays on the GUI thread.
    """

    def __init__(self, model: ArrayModel):
        super().__init__()
        self.model = model
        self.histogram = HistogramItem(self.scene_width, self.scene_height)
        self.scene.addItem(self.histogram)

        self.model.changed.connect(self.refresh)
        self.refresh()

    def refresh(self):
        self.histogram.set_frame(self.model.frame())
