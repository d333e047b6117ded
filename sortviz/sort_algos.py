from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from core.errors import UnknownAlgorithm
from sortviz.sort_steps import StepScheduler


# ---------------------------------------------------------------------------
# Bubble Sort
# Confirms positions as each pass settles them. Quick and Merge get their
# marks only from the session once the whole run completes.
# ---------------------------------------------------------------------------
def bubble_sort(sched: StepScheduler):
    n = sched.size
    for end in range(n - 1, 0, -1):
        if sched.cancelled:
            return

        swapped = False
        for i in range(end):
            if not sched.compare(i, i + 1):
                return
            # strictly greater: equal neighbours stay put
            if sched.value(i) > sched.value(i + 1):
                if not sched.swap(i, i + 1):
                    return
                swapped = True

        if not sched.confirm_sorted(end):
            return

        if not swapped:
            # a clean pass means the prefix is already in order; 0 is confirmed below
            for k in range(end - 1, 0, -1):
                if not sched.confirm_sorted(k):
                    return
            break

    if n and not sched.confirm_sorted(0):
        return
    sched.clear_highlight()


# ---------------------------------------------------------------------------
# Quick Sort (Lomuto, pivot = last element)
# ---------------------------------------------------------------------------
def quick_sort(sched: StepScheduler):
    _quick(sched, 0, sched.size - 1)


def _quick(sched: StepScheduler, low: int, high: int):
    if sched.cancelled or low >= high:
        return

    pivot_index = _partition(sched, low, high)
    if pivot_index is None:
        return

    _quick(sched, low, pivot_index - 1)
    _quick(sched, pivot_index + 1, high)


def _partition(sched: StepScheduler, low: int, high: int) -> Optional[int]:
    """Return the pivot's resting index, or None once cancelled."""
    pivot = sched.value(high)
    i = low - 1

    for j in range(low, high):
        if not sched.compare(j, high):
            return None
        if sched.value(j) <= pivot:
            i += 1
            if i != j:
                if not sched.compare(i, j):
                    return None
                if not sched.swap(i, j):
                    return None

    if i + 1 != high:
        if not sched.compare(i + 1, high):
            return None
        if not sched.swap(i + 1, high):
            return None

    if not sched.clear_highlight():
        return None
    return i + 1


# ---------------------------------------------------------------------------
# Merge Sort (top-down, one shared buffer)
# ---------------------------------------------------------------------------
def merge_sort(sched: StepScheduler):
    buffer = [0] * sched.size
    _merge_sort(sched, 0, sched.size - 1, buffer)


def _merge_sort(sched: StepScheduler, left: int, right: int, buffer: List[int]):
    if sched.cancelled or left >= right:
        return

    mid = left + (right - left) // 2
    _merge_sort(sched, left, mid, buffer)
    _merge_sort(sched, mid + 1, right, buffer)
    _merge(sched, left, mid, right, buffer)


def _merge(sched: StepScheduler, left: int, mid: int, right: int, buffer: List[int]) -> bool:
    if sched.cancelled:
        return False

    for idx in range(left, right + 1):
        buffer[idx] = sched.value(idx)

    i, j, k = left, mid + 1, left

    while i <= mid and j <= right:
        if not sched.compare(i, j):
            return False
        # ties take from the left half, which keeps the sort stable
        if buffer[i] <= buffer[j]:
            value, source = buffer[i], i
            i += 1
        else:
            value, source = buffer[j], j
            j += 1
        if not sched.write(k, value, source):
            return False
        k += 1

    while i <= mid:
        if not sched.compare(i):
            return False
        if not sched.write(k, buffer[i], i):
            return False
        i += 1
        k += 1

    while j <= right:
        if not sched.compare(j):
            return False
        if not sched.write(k, buffer[j], j):
            return False
        j += 1
        k += 1

    return sched.clear_highlight()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AlgoInfo:
    key:   str                                  # registry key, e.g. "bubble"
    label: str                                  # combo box text
    fn:    Callable[[StepScheduler], None]


REGISTRY: Dict[str, AlgoInfo] = {
    "bubble": AlgoInfo("bubble", "Bubble Sort", bubble_sort),
    "quick":  AlgoInfo("quick", "Quick Sort", quick_sort),
    "merge":  AlgoInfo("merge", "Merge Sort", merge_sort),
}


def get_algorithm(key: str) -> AlgoInfo:
    try:
        return REGISTRY[key]
    except KeyError:
        raise UnknownAlgorithm(key) from None


def list_algorithms() -> List[AlgoInfo]:
    """All registered algorithms in insertion order."""
    return list(REGISTRY.values())
