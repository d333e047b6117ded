import logging
import sys

from PyQt5.QtWidgets import QApplication, QMainWindow, QVBoxLayout, QWidget

from core.config import WINDOW_SIZE, WINDOW_TITLE
from core.global_ctrl import GlobalController
from sortviz.sort_ctrl import SortController
from widgets.graphics_view import HistogramCanvas


class MainWindow(QMainWindow):
    """Main application window: histogram canvas on top, controls below."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(*WINDOW_SIZE)

        self.global_ctrl = GlobalController()
        self.controller = SortController(self.global_ctrl)

        self._build_ui()
        self.controller.on_activate(self.canvas)

    def _build_ui(self):
        central = QWidget(self)
        self.setCentralWidget(central)

        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(8, 8, 8, 8)
        root_layout.setSpacing(8)

        self.canvas = HistogramCanvas()
        root_layout.addWidget(self.canvas, 1)
        root_layout.addWidget(self.controller.build_panel(), 0)

    def closeEvent(self, event):
        self.controller.on_deactivate()
        super().closeEvent(event)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
