import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from sortviz.sort_model import ArrayModel


class StepKind(Enum):
    COMPARE = "compare"
    SWAP = "swap"
    WRITE = "write"
    CONFIRM_SORTED = "confirm_sorted"
    CONFIRM_ALL_SORTED = "confirm_all_sorted"
    CLEAR_HIGHLIGHT = "clear_highlight"


# kinds followed by a pacing delay
PAUSING_KINDS = frozenset({StepKind.COMPARE, StepKind.SWAP, StepKind.WRITE})


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        kind   : What happens.
        i      : First index (compare / swap / confirm) or the write target.
        j      : Second index for compare / swap; for a write, the source
                 index the value was taken from (merge buffer position).
        value  : Value written by a WRITE step.
    """

    kind: StepKind
    i: Optional[int] = None
    j: Optional[int] = None
    value: Optional[int] = None

    @classmethod
    def compare(cls, i: int, j: Optional[int] = None) -> "Step":
        return cls(StepKind.COMPARE, i, j)

    @classmethod
    def swap(cls, i: int, j: int) -> "Step":
        return cls(StepKind.SWAP, i, j)

    @classmethod
    def write(cls, k: int, value: int, source: Optional[int] = None) -> "Step":
        return cls(StepKind.WRITE, k, source, value)

    @classmethod
    def confirm_sorted(cls, i: int) -> "Step":
        return cls(StepKind.CONFIRM_SORTED, i)

    @classmethod
    def confirm_all_sorted(cls) -> "Step":
        return cls(StepKind.CONFIRM_ALL_SORTED)

    @classmethod
    def clear_highlight(cls) -> "Step":
        return cls(StepKind.CLEAR_HIGHLIGHT)

    @property
    def pauses(self) -> bool:
        return self.kind in PAUSING_KINDS


class CancelToken:
    """One-shot cancellation flag shared by the session and a single run."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; wakes early on cancel. Returns ``cancelled``."""
        if seconds <= 0:
            return self._event.is_set()
        return self._event.wait(seconds)


@dataclass
class RunStats:
    compares: int = 0
    swaps: int = 0
    writes: int = 0
    confirms: int = 0

    def record(self, step: Step):
        if step.kind is StepKind.COMPARE:
            self.compares += 1
        elif step.kind is StepKind.SWAP:
            self.swaps += 1
        elif step.kind is StepKind.WRITE:
            self.writes += 1
        elif step.kind is StepKind.CONFIRM_SORTED:
            self.confirms += 1

    @property
    def total(self) -> int:
        return self.compares + self.swaps + self.writes


class StepScheduler:
    """
    The only path from a sorting driver to the model. ``emit``:

      1. refuses the step if the run was cancelled,
      2. applies it to the ``ArrayModel``,
      3. reports it to the observer,
      4. pauses for the live delay after compare, swap and write,
      5. re-checks cancellation.

    It returns ``True`` only while the run should continue; drivers
    unwind by plain ``return`` the first time they see ``False``.

    Attributes:
        model    : The shared ``ArrayModel``.
        token    : Cancellation token of the run this scheduler serves.
        delay    : Callable returning the current per-step delay in ms; read
                   before every pause so speed changes apply mid-run.
        on_step  : Optional callback(Step) fired after each applied step.
        stats    : Counters of applied steps.
    """

    def __init__(
        self,
        model: ArrayModel,
        token: CancelToken,
        delay: Callable[[], int] = lambda: 0,
        on_step: Optional[Callable[[Step], None]] = None,
    ):
        self.model = model
        self.token = token
        self.delay = delay
        self.on_step = on_step
        self.stats = RunStats()

    # ------------------------------------------------------------------
    # Core contract
    # ------------------------------------------------------------------
    def emit(self, step: Step, delay_ms: Optional[int] = None) -> bool:
        if self.token.cancelled:
            return False

        self._apply(step)
        self.stats.record(step)
        if self.on_step is not None:
            self.on_step(step)

        if step.pauses:
            ms = self.delay() if delay_ms is None else delay_ms
            self.token.wait(max(0, ms) / 1000.0)

        return not self.token.cancelled

    def _apply(self, step: Step):
        kind = step.kind
        if kind is StepKind.COMPARE:
            self.model.set_highlight(step.i, step.j)
        elif kind is StepKind.SWAP:
            self.model.swap(step.i, step.j)
        elif kind is StepKind.WRITE:
            self.model.set_value(step.i, step.value)
        elif kind is StepKind.CONFIRM_SORTED:
            self.model.mark_sorted(step.i)
        elif kind is StepKind.CONFIRM_ALL_SORTED:
            self.model.mark_all_sorted()
        elif kind is StepKind.CLEAR_HIGHLIGHT:
            self.model.clear_highlight()

    # ------------------------------------------------------------------
    # Driver conveniences
    # ------------------------------------------------------------------
    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def size(self) -> int:
        return len(self.model)

    def value(self, index: int) -> int:
        return self.model.value(index)

    def compare(self, i: int, j: Optional[int] = None) -> bool:
        return self.emit(Step.compare(i, j))

    def swap(self, i: int, j: int) -> bool:
        return self.emit(Step.swap(i, j))

    def write(self, k: int, value: int, source: Optional[int] = None) -> bool:
        return self.emit(Step.write(k, value, source))

    def confirm_sorted(self, i: int) -> bool:
        return self.emit(Step.confirm_sorted(i))

    def confirm_all_sorted(self) -> bool:
        return self.emit(Step.confirm_all_sorted())

    def clear_highlight(self) -> bool:
        return self.emit(Step.clear_highlight())
