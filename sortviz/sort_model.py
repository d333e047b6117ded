import threading
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from core.errors import IndexOutOfRange


@dataclass(frozen=True)
class ArrayFrame:
    """Immutable picture of the model taken under its lock; what the view paints."""

    values: Tuple[int, ...] = ()
    sorted_mask: FrozenSet[int] = frozenset()
    highlight: Tuple[int, ...] = ()

    def __len__(self):
        return len(self.values)


class ArrayModel(QObject):
    """
    Integer array plus per-index sorted marks and up to two highlighted
    indices. The sort worker is the only writer while a run is active;
    the GUI reads through ``frame()``. Every mutator emits ``changed``.
    """

    changed = pyqtSignal()

    def __init__(self, values: Optional[Iterable[int]] = None):
        super().__init__()
        self._lock = threading.RLock()
        self._values: List[int] = [int(v) for v in (values or ())]
        self._sorted: Set[int] = set()
        self._highlight: Tuple[int, ...] = ()

    # ---------- Read access ----------

    def __len__(self):
        with self._lock:
            return len(self._values)

    @property
    def values(self) -> Tuple[int, ...]:
        with self._lock:
            return tuple(self._values)

    @property
    def sorted_mask(self) -> FrozenSet[int]:
        with self._lock:
            return frozenset(self._sorted)

    @property
    def highlight(self) -> Tuple[int, ...]:
        with self._lock:
            return self._highlight

    def value(self, index: int) -> int:
        with self._lock:
            self._check(index)
            return self._values[index]

    def is_sorted(self, index: int) -> bool:
        with self._lock:
            return index in self._sorted

    def frame(self) -> ArrayFrame:
        with self._lock:
            return ArrayFrame(
                values=tuple(self._values),
                sorted_mask=frozenset(self._sorted),
                highlight=self._highlight,
            )

    # ---------- Mutators ----------

    def set_values(self, values: Iterable[int]):
        with self._lock:
            self._values = [int(v) for v in values]
            self._sorted = set()
            self._highlight = ()
        self.changed.emit()

    def swap(self, i: int, j: int):
        with self._lock:
            self._check(i)
            self._check(j)
            self._values[i], self._values[j] = self._values[j], self._values[i]
        self.changed.emit()

    def set_value(self, index: int, value: int):
        with self._lock:
            self._check(index)
            self._values[index] = int(value)
        self.changed.emit()

    def mark_sorted(self, index: int):
        with self._lock:
            self._check(index)
            if index in self._sorted:
                return
            self._sorted.add(index)
        self.changed.emit()

    def mark_all_sorted(self):
        with self._lock:
            self._sorted = set(range(len(self._values)))
            self._highlight = ()
        self.changed.emit()

    def set_highlight(self, i: int, j: Optional[int] = None):
        with self._lock:
            self._check(i)
            if j is None:
                self._highlight = (i,)
            else:
                self._check(j)
                self._highlight = (i, j)
        self.changed.emit()

    def clear_highlight(self):
        with self._lock:
            self._highlight = ()
        self.changed.emit()

    def clear_marks(self):
        """Drop sorted marks and highlight, keep values."""
        with self._lock:
            self._sorted = set()
            self._highlight = ()
        self.changed.emit()

    # ---------- Helpers ----------

    def _check(self, index: int):
        size = len(self._values)
        if not isinstance(index, int) or index < 0 or index >= size:
            raise IndexOutOfRange(index, size)
