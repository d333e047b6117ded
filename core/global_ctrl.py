from PyQt5.QtCore import QObject, pyqtSignal

from core.config import DEFAULT_DELAY_MS, MAX_DELAY_MS, MIN_DELAY_MS


class GlobalController(QObject):
    """
    Holds the per-step delay and emits changes. The step scheduler reads
    ``delay_ms`` before every pause, so slider moves apply mid-run
    without any explicit "apply" step.
    """

    delayChanged = pyqtSignal(int)

    def __init__(self, delay_ms: int = DEFAULT_DELAY_MS):
        super().__init__()
        self._delay_ms = self.clamp(delay_ms)

    @staticmethod
    def clamp(value) -> int:
        return max(MIN_DELAY_MS, min(MAX_DELAY_MS, int(value)))

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def set_delay(self, value: int):
        """Clamp and broadcast the delay (1 to 200 ms)."""
        value = self.clamp(value)
        if value != self._delay_ms:
            self._delay_ms = value
            self.delayChanged.emit(self._delay_ms)
