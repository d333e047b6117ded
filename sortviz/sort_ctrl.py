import logging

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from core.config import (
    DEFAULT_ARRAY_SIZE,
    MAX_DELAY_MS,
    MAX_VALUE,
    MIN_DELAY_MS,
    MIN_VALUE,
)
from core.errors import InvalidRange, InvalidStateTransition
from core.global_ctrl import GlobalController
from sortviz.sort_algos import list_algorithms
from sortviz.sort_model import ArrayModel
from sortviz.sort_session import SessionState, SortSession
from sortviz.sort_view import SortView

logger = logging.getLogger(__name__)


class SortController(QWidget):
    """
    Builds the sorting control panel and wires each control to exactly
    one ``SortSession`` operation.
    """

    def __init__(self, global_ctrl: GlobalController, session: SortSession = None):
        super().__init__()
        self.global_ctrl = global_ctrl
        self.model = session.model if session else ArrayModel()
        self.session = session or SortSession(self.model, global_ctrl)
        self.view = SortView(self.model)
        self.panel_index = -1
        self._panel_locked = False

        self.panel = self._create_panel()

        self.view.interactionLocked.connect(self._on_lock_state)
        self.session.stateChanged.connect(self._on_session_state)
        self.session.runFinished.connect(self._on_run_finished)
        self.global_ctrl.delayChanged.connect(self._on_delay_changed)

        self._update_panel_enabled_state()

    # ---------- Panel UI ----------

    def _create_panel(self):
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        group = QGroupBox("Sorting")
        row = QHBoxLayout(group)
        row.setContentsMargins(12, 8, 12, 12)
        row.setSpacing(12)

        row.addWidget(QLabel("Algorithm:"))
        self.algo_combo = QComboBox()
        for info in list_algorithms():
            self.algo_combo.addItem(info.label, info.key)
        row.addWidget(self.algo_combo)

        self.randomize_btn = QPushButton("Randomize")
        self.randomize_btn.clicked.connect(self._on_randomize)
        self.start_btn = QPushButton("Start")
        self.start_btn.clicked.connect(self._on_start)
        self.stop_btn = QPushButton("Stop")
        self.stop_btn.clicked.connect(self._on_stop)
        self.reset_btn = QPushButton("Reset")
        self.reset_btn.clicked.connect(self._on_reset)
        for btn in (self.randomize_btn, self.start_btn, self.stop_btn, self.reset_btn):
            row.addWidget(btn)

        row.addWidget(QLabel("Delay:"))
        self.speed_slider = QSlider(Qt.Horizontal)
        self.speed_slider.setRange(MIN_DELAY_MS, MAX_DELAY_MS)
        self.speed_slider.setValue(self.global_ctrl.delay_ms)
        self.speed_slider.setTickPosition(QSlider.TicksBelow)
        self.speed_slider.setTickInterval(50)
        self.speed_slider.valueChanged.connect(self.global_ctrl.set_delay)
        row.addWidget(self.speed_slider, 1)
        self.delay_label = QLabel(f"{self.global_ctrl.delay_ms} ms")
        row.addWidget(self.delay_label)

        layout.addWidget(group)

        self.status_label = QLabel()
        self.status_label.setObjectName("sortStatusLabel")
        layout.addWidget(self.status_label)

        return container

    def build_panel(self):
        return self.panel

    # ---------- Controller lifecycle ----------

    def on_activate(self, graphics_view):
        self.view.bind_canvas(graphics_view)
        if self.model.values == ():
            self.session.randomize(DEFAULT_ARRAY_SIZE, MIN_VALUE, MAX_VALUE)

    def on_deactivate(self):
        self.session.stop()

    # ---------- UI handlers ----------

    def _on_randomize(self):
        try:
            self.session.randomize(DEFAULT_ARRAY_SIZE, MIN_VALUE, MAX_VALUE)
        except (InvalidRange, InvalidStateTransition) as exc:
            QMessageBox.warning(self, "Randomize", str(exc))
            return
        self._update_status()

    def _on_start(self):
        key = self.algo_combo.currentData()
        try:
            self.session.start(key, self.speed_slider.value())
        except InvalidStateTransition as exc:
            logger.warning("Start rejected: %s", exc)

    def _on_stop(self):
        self.session.stop()

    def _on_reset(self):
        self.session.reset()
        self._update_status()

    # ---------- State helpers ----------

    def _on_session_state(self, state, generation):
        # queued signals of a superseded run
        if generation != self.session.generation:
            return
        if state == SessionState.RUNNING.value:
            self.view.lock_interactions()
        elif state == SessionState.IDLE.value:
            self.view.unlock_interactions()
        self._update_status(state)

    def _on_run_finished(self, outcome, generation):
        if generation != self.session.generation:
            return
        self._update_status(outcome)

    def _on_delay_changed(self, value):
        self.delay_label.setText(f"{value} ms")
        if self.speed_slider.value() != value:
            self.speed_slider.setValue(value)

    def _on_lock_state(self, locked):
        self._panel_locked = locked
        self._update_panel_enabled_state()

    def _update_panel_enabled_state(self):
        locked = self._panel_locked
        self.randomize_btn.setDisabled(locked)
        self.start_btn.setDisabled(locked)
        self.algo_combo.setDisabled(locked)
        self.stop_btn.setEnabled(locked)
        self.reset_btn.setEnabled(True)

    def _update_status(self, label=None):
        stats = self.session.stats
        label = label or self.session.state.value
        self.status_label.setText(
            f"{label.capitalize()} · compares {stats.compares} · swaps {stats.swaps} · writes {stats.writes}"
        )
