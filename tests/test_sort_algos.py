import random
from collections import Counter

import pytest

from core.errors import UnknownAlgorithm
from sortviz.sort_algos import (
    REGISTRY,
    bubble_sort,
    get_algorithm,
    list_algorithms,
    merge_sort,
    quick_sort,
)
from sortviz.sort_steps import CancelToken, StepKind

ALGORITHMS = [bubble_sort, quick_sort, merge_sort]


def of_kind(trace, kind):
    return [step for step in trace if step.kind is kind]


# ---------------------------------------------------------------------------
# Bubble
# ---------------------------------------------------------------------------
def test_bubble_trace_on_small_input(run_driver):
    model, trace = run_driver(bubble_sort, [5, 3, 8, 1])

    assert model.values == (1, 3, 5, 8)
    assert model.sorted_mask == frozenset({0, 1, 2, 3})
    assert model.highlight == ()
    assert [(s.i, s.j) for s in of_kind(trace, StepKind.SWAP)] == [(0, 1), (2, 3), (1, 2), (0, 1)]
    assert [s.i for s in of_kind(trace, StepKind.CONFIRM_SORTED)] == [3, 2, 1, 0]


def test_bubble_stops_after_clean_pass(run_driver):
    model, trace = run_driver(bubble_sort, [1, 2, 3, 4])

    assert of_kind(trace, StepKind.SWAP) == []
    assert len(of_kind(trace, StepKind.COMPARE)) == 3
    assert model.sorted_mask == frozenset(range(4))


def test_bubble_never_swaps_equal_values(run_driver):
    _, trace = run_driver(bubble_sort, [2, 2, 2])
    assert of_kind(trace, StepKind.SWAP) == []


def test_bubble_confirms_incrementally(run_driver):
    masks = []
    run_driver(bubble_sort, [4, 3, 2, 1], on_step=lambda step, model: masks.append(model.sorted_mask))
    sizes = [len(mask) for mask in masks]
    assert sizes == sorted(sizes)
    assert 0 < sizes[len(sizes) // 2] < 4


# ---------------------------------------------------------------------------
# Quick
# ---------------------------------------------------------------------------
def test_quick_lomuto_trace(run_driver):
    log = []
    model, trace = run_driver(
        quick_sort, [5, 3, 8, 1], on_step=lambda step, m: log.append((step, m.values))
    )

    assert model.values == (1, 3, 5, 8)
    assert [(s.i, s.j) for s in of_kind(trace, StepKind.SWAP)] == [(0, 3), (2, 3)]

    pivots = []
    partition_start = True
    for step, values in log:
        if step.kind is StepKind.COMPARE and partition_start:
            pivots.append(values[step.j])
            partition_start = False
        elif step.kind is StepKind.CLEAR_HIGHLIGHT:
            partition_start = True
    assert pivots == [1, 5]


def test_quick_defers_sorted_marks(run_driver):
    model, trace = run_driver(quick_sort, [3, 1, 2])
    assert model.values == (1, 2, 3)
    assert of_kind(trace, StepKind.CONFIRM_SORTED) == []
    assert model.sorted_mask == frozenset()


def test_quick_skips_self_swaps(run_driver):
    _, trace = run_driver(quick_sort, [1, 2, 3])
    assert all(s.i != s.j for s in of_kind(trace, StepKind.SWAP))


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------
def test_merge_sorts_by_writes_only(run_driver):
    model, trace = run_driver(merge_sort, [5, 3, 8, 1])
    assert model.values == (1, 3, 5, 8)
    assert of_kind(trace, StepKind.SWAP) == []
    assert model.sorted_mask == frozenset()
    assert len(of_kind(trace, StepKind.WRITE)) == 8


def test_merge_takes_left_element_on_ties(run_driver):
    _, trace = run_driver(merge_sort, [1, 1])
    writes = of_kind(trace, StepKind.WRITE)
    assert [(w.i, w.j) for w in writes] == [(0, 0), (1, 1)]


def test_merge_is_stable_for_tagged_records(run_driver):
    # keys with their original positions: equal keys must keep that order
    keys = [2, 1, 2, 1, 1]
    tags = list(range(len(keys)))

    def follow(step, model):
        # replay each write on the tag array, reading from the pre-merge copy
        if step.kind is StepKind.COMPARE and follow.buffer is None:
            follow.buffer = list(tags)
        if step.kind is StepKind.WRITE:
            tags[step.i] = follow.buffer[step.j]
        if step.kind is StepKind.CLEAR_HIGHLIGHT:
            follow.buffer = None

    follow.buffer = None
    model, _ = run_driver(merge_sort, keys, on_step=follow)

    assert model.values == (1, 1, 1, 2, 2)
    assert tags == [1, 3, 4, 0, 2]


# ---------------------------------------------------------------------------
# Shared behaviour
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("fn", ALGORITHMS)
@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_random_inputs_end_sorted(run_driver, fn, seed):
    rng = random.Random(seed)
    values = [rng.randint(5, 30) for _ in range(rng.randint(1, 25))]
    model, _ = run_driver(fn, values)
    assert model.values == tuple(sorted(values))


@pytest.mark.parametrize("fn", ALGORITHMS)
@pytest.mark.parametrize("values", [[], [7]])
def test_trivial_inputs(run_driver, fn, values):
    model, trace = run_driver(fn, values)
    assert model.values == tuple(values)
    assert of_kind(trace, StepKind.SWAP) == []


@pytest.mark.parametrize("fn", ALGORITHMS)
def test_pre_cancelled_run_applies_nothing(run_driver, fn):
    token = CancelToken()
    token.cancel()
    model, trace = run_driver(fn, [5, 3, 8, 1], token=token)
    assert trace == []
    assert model.values == (5, 3, 8, 1)
    assert model.sorted_mask == frozenset()


@pytest.mark.parametrize("fn", ALGORITHMS)
@pytest.mark.parametrize("after", [1, 5, 12, 30])
def test_cancel_mid_run_unwinds_without_new_steps(run_driver, fn, after):
    token = CancelToken()
    original = [9, 4, 7, 1, 8, 2, 6, 3, 5, 1]

    def cancel_later(step, model):
        if len(seen) == after:
            token.cancel()

    seen = []
    model, trace = run_driver(
        fn, original, on_step=lambda step, m: (seen.append(step), cancel_later(step, m)), token=token
    )

    assert len(trace) <= after
    assert set(model.values) <= set(original)
    if fn is not merge_sort:
        assert Counter(model.values) == Counter(original)
    confirmed = {s.i for s in of_kind(trace, StepKind.CONFIRM_SORTED)}
    assert model.sorted_mask == frozenset(confirmed)


def test_registry_lookup():
    assert [info.key for info in list_algorithms()] == ["bubble", "quick", "merge"]
    assert get_algorithm("quick").fn is quick_sort
    assert REGISTRY["bubble"].label == "Bubble Sort"
    with pytest.raises(UnknownAlgorithm):
        get_algorithm("bogo")
