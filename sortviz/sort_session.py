import logging
import random
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from core.config import DEFAULT_ARRAY_SIZE, MAX_VALUE, MIN_VALUE
from core.errors import InvalidRange, InvalidStateTransition
from core.global_ctrl import GlobalController
from sortviz.sort_algos import AlgoInfo, get_algorithm
from sortviz.sort_model import ArrayModel
from sortviz.sort_steps import CancelToken, RunStats, Step, StepScheduler

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RunOutcome(Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED    = "failed"


@dataclass(frozen=True)
class RunDescriptor:
    algorithm: str
    delay_ms:  int                      # delay at start; the live value comes from GlobalController
    run_id:    int = 0                  # session generation the run was started in
    token:     CancelToken = field(default_factory=CancelToken)


class SortSession(QObject):
    """
    Owns the active-run slot: takes the pre-run snapshot, runs one worker
    thread per sort, cancels it and reconciles the model once it unwinds.

        IDLE     ->  start()            ->  RUNNING
        RUNNING  ->  driver returns     ->  COMPLETED  ->  IDLE
        RUNNING  ->  stop() / failure   ->  CANCELLED  ->  IDLE

    ``state`` only ever reads IDLE or RUNNING. COMPLETED and CANCELLED are
    transient: they appear as ``stateChanged`` payloads between RUNNING and
    IDLE, and the run's result stays readable as ``last_outcome``.

    Both signals carry the generation they belong to. ``start()`` and
    ``reset()`` open a new generation, so receivers drop anything whose
    generation differs from ``generation``; a stopped run's queued
    signals can then never overwrite the state of the run after it.

    Attributes:
        model        : The shared ``ArrayModel``.
        global_ctrl  : Source of the live per-step delay.
        on_step      : Optional callback(Step) passed to every run's scheduler.
        last_error   : Exception that ended the most recent failed run.
    """

    stateChanged = pyqtSignal(str, int)
    runFinished = pyqtSignal(str, int)

    def __init__(
        self,
        model: ArrayModel,
        global_ctrl: GlobalController,
        rng: Optional[random.Random] = None,
        on_step: Optional[Callable[[Step], None]] = None,
    ):
        super().__init__()
        self.model = model
        self.global_ctrl = global_ctrl
        self.on_step = on_step
        self.last_error: Optional[BaseException] = None

        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._run: Optional[RunDescriptor] = None
        self._thread: Optional[threading.Thread] = None
        self._snapshot: Optional[Tuple[int, ...]] = None
        self._stats = RunStats()
        self._generation = 0
        self._last_outcome: Optional[RunOutcome] = None

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def last_outcome(self) -> Optional[RunOutcome]:
        with self._lock:
            return self._last_outcome

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def snapshot(self) -> Optional[Tuple[int, ...]]:
        with self._lock:
            return self._snapshot

    @property
    def current_run(self) -> Optional[RunDescriptor]:
        with self._lock:
            return self._run

    @property
    def stats(self) -> RunStats:
        return self._stats

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def randomize(self, n: int = DEFAULT_ARRAY_SIZE, lo: int = MIN_VALUE, hi: int = MAX_VALUE):
        with self._lock:
            if self._state is SessionState.RUNNING:
                raise InvalidStateTransition("Cannot randomize while a sort is running")
            if n <= 0:
                raise InvalidRange(f"Array size must be positive, got {n}")
            if lo > hi:
                raise InvalidRange(f"Minimum {lo} is greater than maximum {hi}")

            values = [self._rng.randint(lo, hi) for _ in range(n)]
            self._snapshot = None
            self.model.set_values(values)
        logger.debug("Randomized %d values in [%d, %d]", n, lo, hi)
        return tuple(values)

    def start(self, algorithm: str, delay_ms: Optional[int] = None) -> RunDescriptor:
        info = get_algorithm(algorithm)
        with self._lock:
            if self._state is SessionState.RUNNING:
                raise InvalidStateTransition("A sort is already running")

            if delay_ms is not None:
                self.global_ctrl.set_delay(delay_ms)
            self._generation += 1
            run = RunDescriptor(info.key, self.global_ctrl.delay_ms, self._generation)

            self._snapshot = self.model.values
            self.model.clear_marks()

            scheduler = StepScheduler(
                self.model,
                run.token,
                delay=lambda: self.global_ctrl.delay_ms,
                on_step=self.on_step,
            )
            self._stats = scheduler.stats
            self.last_error = None
            self._run = run
            self._state = SessionState.RUNNING
            self.stateChanged.emit(SessionState.RUNNING.value, run.run_id)

            self._thread = threading.Thread(
                target=self._execute,
                args=(run, info, scheduler),
                name=f"sort-{info.key}",
                daemon=True,
            )
            self._thread.start()

        logger.info("Started %s on %d values (%d ms/step)", info.label, len(self.model), run.delay_ms)
        return run

    def stop(self) -> bool:
        """Cancel the active run and wait for it to unwind. False if idle."""
        with self._lock:
            if self._state is not SessionState.RUNNING or self._run is None:
                return False
            run, thread = self._run, self._thread
            run.token.cancel()

        logger.info("Stopping %s", run.algorithm)
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        return True

    def reset(self):
        self.stop()
        with self._lock:
            if self._snapshot is not None:
                self.model.set_values(self._snapshot)
            else:
                self.model.clear_marks()
            self._state = SessionState.IDLE
            self._generation += 1
            generation = self._generation
        self.stateChanged.emit(SessionState.IDLE.value, generation)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the current worker, if any. True once no run is active."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------
    def _execute(self, run: RunDescriptor, info: AlgoInfo, scheduler: StepScheduler):
        error = None
        try:
            info.fn(scheduler)
        except Exception as exc:
            logger.exception("%s failed", info.label)
            error = exc
        self._finish(run, scheduler, error)

    def _finish(self, run: RunDescriptor, scheduler: StepScheduler, error: Optional[Exception]):
        # stop() cancels under this lock, so only the worker itself can cancel below
        with self._lock:
            if error is not None:
                outcome = RunOutcome.FAILED
                self.last_error = error
                self.model.clear_highlight()
            elif run.token.cancelled:
                outcome = RunOutcome.CANCELLED
                self.model.clear_highlight()
            else:
                # the driver finished; a stop() from the observer of this last step is too late
                scheduler.confirm_all_sorted()
                outcome = RunOutcome.COMPLETED

            # the finished thread stays referenced so wait() covers the emits below
            if self._run is run:
                self._run = None
            self._state = SessionState.IDLE
            self._last_outcome = outcome

        terminal = SessionState.COMPLETED if outcome is RunOutcome.COMPLETED else SessionState.CANCELLED
        logger.info("%s %s after %d steps", run.algorithm, outcome.value, scheduler.stats.total)
        self.stateChanged.emit(terminal.value, run.run_id)
        self.stateChanged.emit(SessionState.IDLE.value, run.run_id)
        self.runFinished.emit(outcome.value, run.run_id)
