"""
Shared fixtures for the visualizer tests.

Qt runs on the offscreen platform so the suite works without a display.
Engine tests drive the algorithms directly with a zero delay; session
tests use real worker threads with the minimum 1 ms delay.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5.QtWidgets import QApplication

from core.global_ctrl import GlobalController
from sortviz.sort_model import ArrayModel
from sortviz.sort_steps import CancelToken, StepScheduler


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def global_ctrl():
    return GlobalController(delay_ms=1)


@pytest.fixture
def run_driver():
    """Run a sorting driver headless with no delay; returns (model, trace)."""

    def _run(fn, values, on_step=None, token=None):
        model = ArrayModel(values)
        trace = []

        def observe(step):
            trace.append(step)
            if on_step is not None:
                on_step(step, model)

        sched = StepScheduler(model, token or CancelToken(), on_step=observe)
        fn(sched)
        return model, trace

    return _run
